"""
Tests for contract quotes and loaders
"""

from datetime import date, datetime, timezone

import numpy as np
import pandas as pd
import pytest

from options_arbitrage.data import (
    ContractQuote,
    ContractType,
    contract_from_record,
    contracts_from_frame,
    contracts_from_records,
    split_by_contract_type,
    time_to_expiry,
)


def _record(**overrides):
    record = {
        'ticker': 'O:AAPL250620P00185000',
        'underlying_ticker': 'AAPL',
        'strike_price': 185,
        'expiration_date': '2025-06-20',
        'contract_type': 'put',
        'bid': 4.1,
        'ask': 4.3,
        'last': 4.2,
        'volume': 1200,
        'open_interest': 6400,
        'implied_volatility': 0.27,
        'underlying_price': 185.0,
    }
    record.update(overrides)
    return record


def test_quote_invariants(make_contract):
    with pytest.raises(ValueError, match="bid"):
        make_contract(bid=5.0, ask=4.0)
    with pytest.raises(ValueError):
        make_contract(strike_price=0.0)
    with pytest.raises(ValueError):
        make_contract(last=-1.0)
    with pytest.raises(ValueError):
        make_contract(implied_volatility=0.0)


def test_quote_is_immutable(make_contract):
    contract = make_contract()
    with pytest.raises(AttributeError):
        contract.last = 1.0


def test_spread_ratio(make_contract):
    assert make_contract(bid=10.0, ask=10.9).spread_ratio == pytest.approx(0.09)
    assert make_contract(bid=0.0, ask=0.5).spread_ratio == float('inf')
    assert make_contract(bid=2.0, ask=3.0).mid_price == 2.5


def test_time_to_expiry(as_of):
    assert time_to_expiry(date(2026, 1, 1), as_of) == pytest.approx(1.0)
    assert time_to_expiry(date(2025, 1, 31), as_of) == pytest.approx(30 / 365)
    # Expired and same-day contracts are floored at one day
    assert time_to_expiry(date(2024, 6, 1), as_of) == pytest.approx(1 / 365)
    assert time_to_expiry(date(2025, 1, 1), datetime(2025, 1, 1, 15, 30)) == pytest.approx(1 / 365)


def test_contract_from_record():
    contract = contract_from_record(_record(contract_type='PUT'))

    assert contract.contract_type is ContractType.PUT
    assert not contract.is_call
    assert contract.expiration_date == date(2025, 6, 20)
    assert contract.strike_price == 185.0
    assert contract.implied_volatility == 0.27


def test_zero_values_mean_missing():
    contract = contract_from_record(_record(implied_volatility=0, underlying_price=0))

    assert contract.implied_volatility is None
    assert contract.underlying_price is None


def test_contracts_from_records_drops_malformed():
    skipped = []
    records = [
        _record(),
        _record(ticker='BAD1', bid=5.0, ask=4.0),
        {'ticker': 'BAD2', 'strike_price': 100},
        _record(ticker='BAD3', contract_type='straddle'),
    ]

    contracts = contracts_from_records(records, skipped)

    assert [c.ticker for c in contracts] == ['O:AAPL250620P00185000']
    assert [s.contract_ticker for s in skipped] == ['BAD1', 'BAD2', 'BAD3']
    assert all(s.reason.startswith('malformed record') for s in skipped)


def test_contracts_from_frame_treats_nan_as_missing():
    frame = pd.DataFrame([
        _record(),
        _record(ticker='O:AAPL250620C00185000', contract_type='call', implied_volatility=np.nan),
    ])

    contracts = contracts_from_frame(frame)

    assert len(contracts) == 2
    assert contracts[1].implied_volatility is None
    assert contracts[1].is_call


def test_split_by_contract_type(make_contract):
    chain = [
        make_contract(ticker='C1'),
        make_contract(ticker='P1', contract_type=ContractType.PUT),
        make_contract(ticker='C2'),
    ]

    calls, puts = split_by_contract_type(chain)

    assert [c.ticker for c in calls] == ['C1', 'C2']
    assert [p.ticker for p in puts] == ['P1']


def test_non_finite_values_are_rejected(make_contract):
    with pytest.raises(ValueError, match="finite"):
        make_contract(strike_price=float('nan'))
    with pytest.raises(ValueError, match="finite"):
        make_contract(last=float('inf'))
    with pytest.raises(ValueError, match="finite"):
        make_contract(implied_volatility=float('nan'))


def test_nan_strike_row_is_dropped_from_frame():
    skipped = []
    frame = pd.DataFrame([
        _record(ticker='GOOD'),
        _record(ticker='NANSTRIKE', strike_price=np.nan),
    ])

    contracts = contracts_from_frame(frame, skipped)

    assert [c.ticker for c in contracts] == ['GOOD']
    assert [s.contract_ticker for s in skipped] == ['NANSTRIKE']
    assert skipped[0].reason.startswith('malformed record')


def test_time_to_expiry_accepts_aware_as_of():
    aware = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    local = aware.astimezone().replace(tzinfo=None)

    assert time_to_expiry(date(2026, 1, 1), aware) == pytest.approx(time_to_expiry(date(2026, 1, 1), local))
