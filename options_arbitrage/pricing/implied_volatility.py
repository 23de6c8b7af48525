"""
Implied Volatility Calculator

Inverts a market option price to the Black-Scholes volatility that reproduces
it, and estimates historical volatility from an underlying price series.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from .black_scholes import price_option

logger = logging.getLogger(__name__)

INITIAL_VOLATILITY = 0.30
MIN_VOLATILITY = 0.001
MAX_VOLATILITY = 5.0


def implied_volatility(market_price: float,
                       spot_price: float,
                       strike_price: float,
                       time_to_expiry: float,
                       risk_free_rate: float,
                       is_call: bool,
                       tolerance: float = 1e-4,
                       max_iterations: int = 100) -> Optional[float]:
    """
    Calculate implied volatility using Newton-Raphson.

    Starts at 30% volatility and steps by price error over vega. Vega is
    quoted per volatility point, so the step divides by vega * 100.

    Parameters:
    -----------
    market_price : float
        Observed option price
    spot_price, strike_price, time_to_expiry, risk_free_rate : float
        Black-Scholes inputs other than volatility
    is_call : bool
        True for a call, False for a put
    tolerance : float
        Absolute price difference accepted as converged
    max_iterations : int
        Iteration bound

    Returns:
    --------
    float : Implied volatility, or None if it did not converge
    """
    sigma = INITIAL_VOLATILITY

    for _ in range(max_iterations):
        result = price_option(spot_price, strike_price, time_to_expiry,
                              risk_free_rate, sigma, is_call)

        price_diff = result.price - market_price
        if abs(price_diff) < tolerance:
            return sigma

        if result.vega == 0:
            logger.debug(f"Vega vanished at sigma={sigma:.4f}, implied volatility undeterminable")
            return None

        sigma = sigma - price_diff / (result.vega * 100)
        sigma = min(max(sigma, MIN_VOLATILITY), MAX_VOLATILITY)

    logger.debug(f"Implied volatility did not converge after {max_iterations} iterations "
                 f"(market price {market_price:.4f})")
    return None


class HistoricalVolatilityCalculator:
    """
    Calculator for historical volatility from underlying price data.

    Supplies the realised-volatility benchmark that the volatility
    arbitrage scan compares implied volatilities against.
    """

    def __init__(self, periods_per_year: int = 252):
        self.periods_per_year = periods_per_year
        self.min_vol = 0.01  # Minimum volatility (1%)
        self.max_vol = 5.0   # Maximum volatility (500%)

    def historical_volatility(self,
                              price_series: pd.Series,
                              window: int = 252,
                              annualize: bool = True) -> float:
        """
        Calculate historical volatility from price series.

        Parameters:
        -----------
        price_series : pd.Series
            Historical closing prices, oldest first
        window : int
            Number of returns in the estimation window
        annualize : bool
            Whether to annualize the volatility

        Returns:
        --------
        float : Historical volatility, clamped to [1%, 500%]
        """
        prices = pd.Series(price_series, dtype=float).dropna()
        if len(prices) < 3:
            raise ValueError("Need at least 3 price points to calculate volatility")

        returns = prices.pct_change().dropna()

        if len(returns) < window:
            # Use all available data if window is larger than data
            vol = returns.std()
        else:
            vol = returns.rolling(window=window).std().iloc[-1]

        if annualize:
            vol *= np.sqrt(self.periods_per_year)

        return float(max(self.min_vol, min(self.max_vol, vol)))

    def realized_volatility(self, returns: pd.Series, window: int = 30) -> pd.Series:
        """Rolling annualised realized volatility of a return series"""
        return returns.rolling(window=window).std() * np.sqrt(self.periods_per_year)
