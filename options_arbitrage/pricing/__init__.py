"""
Options Pricing Layer
=====================

Black-Scholes valuation, Greeks and implied volatility.

- normal_distribution: closed-form standard normal CDF/PDF
- black_scholes: price and Greeks for a single call or put
- implied_volatility: Newton-Raphson inversion and historical volatility
"""

from .base_model import ModelParameters, InvalidParameterError, MIN_TIME_TO_EXPIRY
from .black_scholes import BSParameters, PricingResult, price_option, d1_d2
from .implied_volatility import implied_volatility, HistoricalVolatilityCalculator
from . import normal_distribution

__all__ = [
    'ModelParameters',
    'InvalidParameterError',
    'MIN_TIME_TO_EXPIRY',
    'BSParameters',
    'PricingResult',
    'price_option',
    'd1_d2',
    'implied_volatility',
    'HistoricalVolatilityCalculator',
    'normal_distribution'
]
