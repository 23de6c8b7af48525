"""
Base parameter classes for the pricing models.

Every pricing call goes through a parameter object that validates its inputs
on construction, so the formulas themselves never see a non-positive spot,
strike or time to expiry.
"""

from dataclasses import dataclass

# Floor applied to time to expiry (years) to keep d1/d2 defined near expiration
MIN_TIME_TO_EXPIRY = 1e-6


class InvalidParameterError(ValueError):
    """Raised when a pricing input is outside its valid domain"""


@dataclass
class ModelParameters:
    """Base class for all model parameters"""
    S0: float = 100.0  # Current asset price
    K: float = 100.0   # Strike price
    T: float = 1.0     # Time to maturity (years)
    r: float = 0.05    # Risk-free rate

    def __post_init__(self):
        """Validate parameters after initialization"""
        if self.S0 <= 0:
            raise InvalidParameterError("Current asset price must be positive")
        if self.K <= 0:
            raise InvalidParameterError("Strike price must be positive")
        if self.T <= 0:
            raise InvalidParameterError("Time to maturity must be positive")

        if self.T < MIN_TIME_TO_EXPIRY:
            self.T = MIN_TIME_TO_EXPIRY
