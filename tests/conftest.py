"""
Shared fixtures for the pricing and arbitrage tests.
"""

from datetime import date, datetime

import pytest

from options_arbitrage.data.contracts import ContractQuote, ContractType

# Valuation time and an expiry exactly 365 days later (tau = 1.0 year)
AS_OF = datetime(2025, 1, 1)
ONE_YEAR_EXPIRY = date(2026, 1, 1)


@pytest.fixture
def as_of():
    return AS_OF


@pytest.fixture
def make_contract():
    """Factory for a liquid one-year SPY call; override any field"""
    def _make(**overrides):
        values = dict(
            ticker='O:SPY260101C00580000',
            underlying_ticker='SPY',
            strike_price=580.0,
            expiration_date=ONE_YEAR_EXPIRY,
            contract_type=ContractType.CALL,
            bid=70.0,
            ask=72.0,
            last=71.0,
            volume=2000,
            open_interest=8000,
            implied_volatility=0.25,
            underlying_price=580.0,
        )
        values.update(overrides)
        return ContractQuote(**values)

    return _make
