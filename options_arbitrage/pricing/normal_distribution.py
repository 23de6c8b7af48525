"""
Standard Normal Distribution

Closed-form approximations of the standard normal CDF and PDF used by the
Black-Scholes formulas. Both are evaluated several times per pricing call,
so they avoid any iterative or series-based evaluation.

Mathematical Foundation:
- Abramowitz-Stegun rational approximation of erf (max abs error 1.5e-7)
- Phi(x) = 0.5 * (1 + erf(x / sqrt(2)))
"""
import numpy as np

# Abramowitz-Stegun coefficients
A1 = 0.254829592
A2 = -0.284496736
A3 = 1.421413741
A4 = -1.453152027
A5 = 1.061405429
P = 0.3275911

SQRT_2 = np.sqrt(2.0)
SQRT_2PI = np.sqrt(2.0 * np.pi)


def _erf(x: float) -> float:
    """Rational approximation of erf(x) for x >= 0"""
    t = 1.0 / (1.0 + P * x)
    poly = ((((A5 * t + A4) * t + A3) * t + A2) * t + A1) * t
    return 1.0 - poly * np.exp(-x * x)


def cdf(x: float) -> float:
    """
    Cumulative distribution function of the standard normal.

    Parameters:
    -----------
    x : float
        Any finite real

    Returns:
    --------
    float : P(Z <= x), in [0, 1]
    """
    # The approximation leaves a 1e-9 residual at the origin
    if x == 0:
        return 0.5

    sign = -1.0 if x < 0 else 1.0
    y = _erf(abs(x) / SQRT_2)

    return float(0.5 * (1.0 + sign * y))


def pdf(x: float) -> float:
    """Probability density function of the standard normal"""
    return float(np.exp(-0.5 * x * x) / SQRT_2PI)
