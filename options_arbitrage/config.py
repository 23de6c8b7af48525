"""
Scan configuration defaults.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict


@dataclass
class ScanConfig:
    """Thresholds and market inputs shared by the arbitrage scans"""
    risk_free_rate: float = 0.05          # Annual, continuously compounded
    min_price_difference: float = 0.05    # 5% price mispricing
    min_vol_difference: float = 0.10      # 10% relative implied/historical gap
    historical_volatility: float = 0.25   # Benchmark for volatility scans

    def __post_init__(self):
        """Validate configuration after initialization"""
        if self.min_price_difference < 0:
            raise ValueError("Minimum price difference cannot be negative")
        if self.min_vol_difference < 0:
            raise ValueError("Minimum volatility difference cannot be negative")
        if self.historical_volatility <= 0:
            raise ValueError("Historical volatility must be positive")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'ScanConfig':
        """Build a config from a mapping, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in values.items() if k in known})
