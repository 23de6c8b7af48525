"""
Options Arbitrage Engine
========================

Black-Scholes pricing, implied volatility and arbitrage detection over
option chains supplied by a market-data layer.

Structure:
- pricing/: normal distribution, Black-Scholes price and Greeks, implied volatility
- data/: contract quotes and loaders
- strategies/: price, volatility and put-call parity arbitrage scans
- monitoring/: filtering, summaries and tabular export of opportunities
"""

from .config import ScanConfig
from .pricing import (
    InvalidParameterError,
    PricingResult,
    price_option,
    implied_volatility,
    HistoricalVolatilityCalculator
)
from .data import ContractType, ContractQuote, SkippedContract
from .strategies import (
    ArbitrageOpportunity,
    ArbitrageType,
    Confidence,
    ScanReport,
    ArbitrageDetector,
    find_price_arbitrage,
    find_volatility_arbitrage,
    find_put_call_parity_arbitrage
)

__version__ = "0.1.0"

__all__ = [
    'ScanConfig',
    'InvalidParameterError',
    'PricingResult',
    'price_option',
    'implied_volatility',
    'HistoricalVolatilityCalculator',
    'ContractType',
    'ContractQuote',
    'SkippedContract',
    'ArbitrageOpportunity',
    'ArbitrageType',
    'Confidence',
    'ScanReport',
    'ArbitrageDetector',
    'find_price_arbitrage',
    'find_volatility_arbitrage',
    'find_put_call_parity_arbitrage'
]
