"""
Option Contract Quotes

Read-only snapshot of one listed option's market state, plus loaders that
build quotes from the snake_case records and DataFrames produced by the
market-data layer.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.0
MIN_DAYS_TO_EXPIRY = 1.0


class ContractType(Enum):
    """Option kind"""
    CALL = "call"
    PUT = "put"


@dataclass(frozen=True)
class ContractQuote:
    """Market state of a single options contract"""
    ticker: str
    underlying_ticker: str
    strike_price: float
    expiration_date: date
    contract_type: ContractType
    bid: float
    ask: float
    last: float
    volume: int = 0
    open_interest: int = 0
    implied_volatility: Optional[float] = None
    underlying_price: Optional[float] = None  # Spot price attached by the caller

    def __post_init__(self):
        optional = [v for v in (self.implied_volatility, self.underlying_price) if v is not None]
        if not np.all(np.isfinite([self.strike_price, self.bid, self.ask, self.last] + optional)):
            raise ValueError(f"{self.ticker}: prices and volatility must be finite")
        if self.strike_price <= 0:
            raise ValueError(f"{self.ticker}: strike price must be positive")
        if min(self.bid, self.ask, self.last) < 0:
            raise ValueError(f"{self.ticker}: prices cannot be negative")
        if self.bid > self.ask:
            raise ValueError(f"{self.ticker}: bid {self.bid} exceeds ask {self.ask}")
        if self.volume < 0 or self.open_interest < 0:
            raise ValueError(f"{self.ticker}: volume and open interest cannot be negative")
        if self.implied_volatility is not None and self.implied_volatility <= 0:
            raise ValueError(f"{self.ticker}: implied volatility must be positive")
        if self.underlying_price is not None and self.underlying_price <= 0:
            raise ValueError(f"{self.ticker}: underlying price must be positive")

    @property
    def is_call(self) -> bool:
        return self.contract_type is ContractType.CALL

    @property
    def mid_price(self) -> float:
        return (self.bid + self.ask) / 2

    @property
    def spread_ratio(self) -> float:
        """Bid/ask spread relative to the bid; infinite without a bid"""
        if self.bid <= 0:
            return float('inf')
        return (self.ask - self.bid) / self.bid

    def time_to_expiry(self, as_of: Optional[datetime] = None) -> float:
        return time_to_expiry(self.expiration_date, as_of)


def time_to_expiry(expiration_date: date, as_of: Optional[datetime] = None) -> float:
    """
    Time from as_of to expiration in years.

    Expiration is taken at midnight (local time) of the expiration date and
    the day count is floored at one day, so expired and same-day contracts
    still price. A timezone-aware as_of is converted to naive local time.
    """
    if as_of is None:
        as_of = datetime.now()
    elif as_of.tzinfo is not None:
        as_of = as_of.astimezone().replace(tzinfo=None)
    expiry = datetime.combine(expiration_date, time.min)
    days = max(MIN_DAYS_TO_EXPIRY, (expiry - as_of).total_seconds() / 86400.0)
    return days / DAYS_PER_YEAR


@dataclass(frozen=True)
class SkippedContract:
    """A contract dropped from a scan and why"""
    contract_ticker: str
    reason: str


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and pd.isna(value))


def _optional_positive(value: Any) -> Optional[float]:
    """Missing, NaN and zero values all mean 'not available'"""
    if _is_missing(value):
        return None
    value = float(value)
    return value if value != 0 else None


def _number(value: Any, cast=float):
    return cast(0) if _is_missing(value) else cast(value)


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def contract_from_record(record: Dict[str, Any]) -> ContractQuote:
    """
    Build a ContractQuote from a market-data record.

    Args:
        record: Mapping with keys ticker, underlying_ticker, strike_price,
            expiration_date, contract_type, bid, ask, last and optionally
            volume, open_interest, implied_volatility, underlying_price

    Returns:
        ContractQuote

    Raises:
        ValueError: On missing keys or values violating quote invariants
    """
    try:
        return ContractQuote(
            ticker=str(record['ticker']),
            underlying_ticker=str(record['underlying_ticker']),
            strike_price=float(record['strike_price']),
            expiration_date=_parse_date(record['expiration_date']),
            contract_type=ContractType(str(record['contract_type']).lower()),
            bid=_number(record.get('bid')),
            ask=_number(record.get('ask')),
            last=_number(record.get('last')),
            volume=_number(record.get('volume'), int),
            open_interest=_number(record.get('open_interest'), int),
            implied_volatility=_optional_positive(record.get('implied_volatility')),
            underlying_price=_optional_positive(record.get('underlying_price'))
        )
    except KeyError as e:
        raise ValueError(f"Contract record missing field {e}") from e


def contracts_from_records(records: Iterable[Dict[str, Any]],
                           skipped: Optional[List[SkippedContract]] = None) -> List[ContractQuote]:
    """
    Convert market-data records to quotes, dropping malformed ones.

    Args:
        records: Iterable of record mappings
        skipped: Optional list receiving a SkippedContract per dropped record

    Returns:
        List of valid ContractQuote
    """
    contracts = []
    for record in records:
        try:
            contracts.append(contract_from_record(record))
        except (ValueError, TypeError) as e:
            ticker = str(record.get('ticker', '<unknown>'))
            logger.warning(f"Dropping malformed contract record {ticker}: {e}")
            if skipped is not None:
                skipped.append(SkippedContract(ticker, f"malformed record: {e}"))

    return contracts


def contracts_from_frame(frame: pd.DataFrame,
                         skipped: Optional[List[SkippedContract]] = None) -> List[ContractQuote]:
    """Convert an options-chain DataFrame (one row per contract) to quotes"""
    return contracts_from_records(frame.to_dict(orient='records'), skipped)


def split_by_contract_type(contracts: Iterable[ContractQuote]) -> Tuple[List[ContractQuote], List[ContractQuote]]:
    """Separate a chain into (calls, puts), preserving order"""
    calls, puts = [], []
    for contract in contracts:
        (calls if contract.is_call else puts).append(contract)
    return calls, puts
