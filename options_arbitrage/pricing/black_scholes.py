"""
Black-Scholes Option Pricing Model

Closed-form valuation and Greeks for European calls and puts.

Mathematical Foundation:
- d1 = (ln(S/K) + (r + sigma^2/2) T) / (sigma sqrt(T)),  d2 = d1 - sigma sqrt(T)
- Call = S N(d1) - K e^{-rT} N(d2)
- Put  = K e^{-rT} N(-d2) - S N(-d1)

Greek conventions:
- theta is per calendar day
- vega is per 1 percentage-point change in volatility
- rho is per 1 percentage-point change in the risk-free rate
"""
import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple

from .base_model import ModelParameters, InvalidParameterError
from .normal_distribution import cdf, pdf

DAYS_PER_YEAR = 365.0
PERCENT_POINT = 0.01


@dataclass
class BSParameters(ModelParameters):
    """Black-Scholes model parameters"""
    sigma: float = 0.2  # Volatility

    def __post_init__(self):
        """Validate BS-specific parameters"""
        super().__post_init__()
        if self.sigma <= 0:
            raise InvalidParameterError("Volatility must be positive")


@dataclass(frozen=True)
class PricingResult:
    """Theoretical price and Greeks of a single option"""
    price: float
    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float
    implied_volatility: Optional[float] = None


def d1_d2(params: BSParameters) -> Tuple[float, float]:
    """Calculate d1 and d2 parameters"""
    S0, K, T, r, sigma = params.S0, params.K, params.T, params.r, params.sigma

    sigma_sqrt_T = sigma * np.sqrt(T)
    d1 = (np.log(S0 / K) + (r + 0.5 * sigma**2) * T) / sigma_sqrt_T
    d2 = d1 - sigma_sqrt_T

    return float(d1), float(d2)


def price_option(spot_price: float, strike_price: float, time_to_expiry: float,
                 risk_free_rate: float, volatility: float, is_call: bool) -> PricingResult:
    """
    Price a European option and compute its Greeks.

    Parameters:
    -----------
    spot_price : float
        Current price of the underlying
    strike_price : float
        Strike price of the option
    time_to_expiry : float
        Time to expiration in years, floored at 1e-6
    risk_free_rate : float
        Continuously compounded risk-free rate (0.05 for 5%)
    volatility : float
        Annualised volatility (0.25 for 25%)
    is_call : bool
        True for a call, False for a put

    Returns:
    --------
    PricingResult : price, delta, gamma, theta, vega, rho

    Raises:
    -------
    InvalidParameterError
        If spot, strike, time to expiry or volatility is not positive
    """
    params = BSParameters(S0=spot_price, K=strike_price, T=time_to_expiry,
                          r=risk_free_rate, sigma=volatility)
    S0, K, T, r, sigma = params.S0, params.K, params.T, params.r, params.sigma
    d1, d2 = d1_d2(params)

    sqrt_T = np.sqrt(T)
    discount = np.exp(-r * T)
    pdf_d1 = pdf(d1)

    if is_call:
        price = S0 * cdf(d1) - K * discount * cdf(d2)
        delta = cdf(d1)
    else:
        price = K * discount * cdf(-d2) - S0 * cdf(-d1)
        delta = cdf(d1) - 1.0

    gamma = pdf_d1 / (S0 * sigma * sqrt_T)

    theta1 = -(S0 * sigma * pdf_d1) / (2 * sqrt_T)
    theta2 = r * K * discount
    if is_call:
        theta = (theta1 - theta2 * cdf(d2)) / DAYS_PER_YEAR
    else:
        theta = (theta1 + theta2 * cdf(-d2)) / DAYS_PER_YEAR

    vega = S0 * sqrt_T * pdf_d1 * PERCENT_POINT

    if is_call:
        rho = K * T * discount * cdf(d2) * PERCENT_POINT
    else:
        rho = -K * T * discount * cdf(-d2) * PERCENT_POINT

    return PricingResult(
        price=float(price),
        delta=float(delta),
        gamma=float(gamma),
        theta=float(theta),
        vega=float(vega),
        rho=float(rho)
    )
