"""
Arbitrage opportunity data structures.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List

from ..data.contracts import ContractType, SkippedContract

# Contract multiplier (shares per contract)
CONTRACT_MULTIPLIER = 100


class ArbitrageType(Enum):
    PRICE = "price"
    VOLATILITY = "volatility"
    PUT_CALL_PARITY = "put-call-parity"


class Confidence(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """A flagged mispricing on a single contract"""
    contract_ticker: str
    underlying_ticker: str
    strike_price: float
    expiration_date: date
    contract_type: ContractType
    market_price: float
    theoretical_price: float
    price_difference: float
    percentage_difference: float
    confidence: Confidence
    recommendation: str
    expected_profit: float
    max_loss: float
    risk_reward_ratio: float
    arbitrage_type: ArbitrageType = ArbitrageType.PRICE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'contract_ticker': self.contract_ticker,
            'underlying_ticker': self.underlying_ticker,
            'strike_price': float(self.strike_price),
            'expiration_date': self.expiration_date.isoformat(),
            'contract_type': self.contract_type.value,
            'market_price': float(self.market_price),
            'theoretical_price': float(self.theoretical_price),
            'price_difference': float(self.price_difference),
            'percentage_difference': float(self.percentage_difference),
            'confidence': self.confidence.value,
            'recommendation': self.recommendation,
            'expected_profit': float(self.expected_profit),
            'max_loss': float(self.max_loss),
            'risk_reward_ratio': float(self.risk_reward_ratio),
            'arbitrage_type': self.arbitrage_type.value
        }


@dataclass
class ScanReport:
    """Result of one scan: ranked opportunities plus dropped contracts"""
    arbitrage_type: ArbitrageType
    opportunities: List[ArbitrageOpportunity] = field(default_factory=list)
    skipped: List[SkippedContract] = field(default_factory=list)
    scanned: int = 0


def rank_opportunities(opportunities: List[ArbitrageOpportunity]) -> List[ArbitrageOpportunity]:
    """Largest percentage mispricing first"""
    return sorted(opportunities, key=lambda o: o.percentage_difference, reverse=True)
