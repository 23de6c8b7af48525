"""
Strategies Layer
================

Arbitrage scans over option chains:
- Price arbitrage: market vs Black-Scholes value
- Volatility arbitrage: implied vs historical volatility
- Put-call parity: matched call/put pairs
"""

from .opportunity import (
    ArbitrageOpportunity,
    ArbitrageType,
    Confidence,
    ScanReport,
    rank_opportunities
)
from .arbitrage_detector import (
    ArbitrageDetector,
    find_price_arbitrage,
    find_volatility_arbitrage,
    find_put_call_parity_arbitrage,
    classify_price_confidence
)

__all__ = [
    'ArbitrageOpportunity',
    'ArbitrageType',
    'Confidence',
    'ScanReport',
    'rank_opportunities',
    'ArbitrageDetector',
    'find_price_arbitrage',
    'find_volatility_arbitrage',
    'find_put_call_parity_arbitrage',
    'classify_price_confidence'
]
