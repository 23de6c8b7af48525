"""
Options Arbitrage Detector
==========================

Scans batches of option quotes for three independent kinds of mispricing:

- Price arbitrage: market price vs Black-Scholes value at the contract's
  own (or solved) implied volatility
- Volatility arbitrage: implied volatility vs historical volatility
- Put-call parity: C + K e^{-rT} vs P + S on matched call/put pairs

A contract that cannot be analysed (no spot price, no implied volatility,
no parity counterpart, invalid pricing inputs) is skipped and recorded; it
never aborts the scan. Results are ranked by percentage mispricing.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from ..config import ScanConfig
from ..data.contracts import ContractQuote, SkippedContract, split_by_contract_type
from ..pricing.base_model import InvalidParameterError
from ..pricing.black_scholes import price_option
from ..pricing.implied_volatility import implied_volatility
from .opportunity import (
    ArbitrageOpportunity,
    ArbitrageType,
    Confidence,
    ScanReport,
    CONTRACT_MULTIPLIER,
    rank_opportunities
)

logger = logging.getLogger(__name__)

DEFAULT_VOLATILITY = 0.30
VOLATILITY_SCAN_RATE = 0.05
PARITY_THRESHOLD = 0.02
PARITY_HIGH_CONFIDENCE = 0.05
VOL_HIGH_CONFIDENCE = 0.10
VOL_MAX_LOSS_MOVE = 0.10

# (min volume, min open interest, max spread ratio) per tier, checked in order
CONFIDENCE_TIERS = [
    (Confidence.HIGH, 1000, 5000, 0.10),
    (Confidence.MEDIUM, 500, 1000, 0.20),
]

# Max loss as a multiple of expected profit
MAX_LOSS_MULTIPLIER = {
    Confidence.HIGH: 0.5,
    Confidence.MEDIUM: 1.0,
    Confidence.LOW: 2.0,
}
PARITY_MAX_LOSS_MULTIPLIER = 0.5


def classify_price_confidence(volume: int, open_interest: int, spread_ratio: float) -> Confidence:
    """Liquidity-based confidence tier for a price mispricing"""
    for tier, min_volume, min_open_interest, max_spread in CONFIDENCE_TIERS:
        if volume > min_volume and open_interest > min_open_interest and spread_ratio < max_spread:
            return tier

    return Confidence.LOW


def _skip(skipped: Optional[List[SkippedContract]], ticker: str, reason: str):
    logger.debug(f"Skipping {ticker}: {reason}")
    if skipped is not None:
        skipped.append(SkippedContract(ticker, reason))


def _opportunity(contract: ContractQuote, market_price: float, theoretical_price: float,
                 price_difference: float, percentage_difference: float, confidence: Confidence,
                 recommendation: str, expected_profit: float, max_loss: float,
                 arbitrage_type: ArbitrageType,
                 underlying_ticker: Optional[str] = None) -> ArbitrageOpportunity:
    return ArbitrageOpportunity(
        contract_ticker=contract.ticker,
        underlying_ticker=underlying_ticker or contract.underlying_ticker,
        strike_price=contract.strike_price,
        expiration_date=contract.expiration_date,
        contract_type=contract.contract_type,
        market_price=market_price,
        theoretical_price=theoretical_price,
        price_difference=price_difference,
        percentage_difference=percentage_difference,
        confidence=confidence,
        recommendation=recommendation,
        expected_profit=expected_profit,
        max_loss=max_loss,
        risk_reward_ratio=expected_profit / max_loss if max_loss > 0 else float('inf'),
        arbitrage_type=arbitrage_type
    )


def _contract_volatility(contract: ContractQuote, time_to_expiry: float, risk_free_rate: float) -> float:
    """Quoted IV, else IV solved from the mid price, else the default"""
    if contract.implied_volatility is not None:
        return contract.implied_volatility

    if contract.bid > 0 and contract.ask > 0:
        solved = implied_volatility(contract.mid_price, contract.underlying_price,
                                    contract.strike_price, time_to_expiry,
                                    risk_free_rate, contract.is_call)
        if solved is not None:
            return solved

    return DEFAULT_VOLATILITY


def find_price_arbitrage(contracts: Iterable[ContractQuote],
                         risk_free_rate: float = 0.05,
                         min_price_difference: float = 0.05,
                         as_of: Optional[datetime] = None,
                         skipped: Optional[List[SkippedContract]] = None) -> List[ArbitrageOpportunity]:
    """
    Find contracts whose market price deviates from their Black-Scholes value.

    Parameters:
    -----------
    contracts : iterable of ContractQuote
        Quotes with underlying_price attached
    risk_free_rate : float
        Risk-free rate used for pricing
    min_price_difference : float
        Minimum |market - theoretical| / theoretical to report
    as_of : datetime, optional
        Valuation time (defaults to now)
    skipped : list, optional
        Receives a SkippedContract for every contract that was dropped

    Returns:
    --------
    List[ArbitrageOpportunity] : ranked by percentage difference, largest first
    """
    if as_of is None:
        as_of = datetime.now()

    opportunities = []
    scanned = 0

    for contract in contracts:
        scanned += 1
        if contract.underlying_price is None:
            _skip(skipped, contract.ticker, "no underlying price")
            continue

        tau = contract.time_to_expiry(as_of)

        try:
            volatility = _contract_volatility(contract, tau, risk_free_rate)
            theoretical_price = price_option(contract.underlying_price, contract.strike_price, tau,
                                             risk_free_rate, volatility, contract.is_call).price
        except InvalidParameterError as e:
            _skip(skipped, contract.ticker, f"pricing failed: {e}")
            continue

        if theoretical_price <= 0:
            _skip(skipped, contract.ticker, "theoretical price is zero")
            continue

        market_price = contract.last
        price_difference = market_price - theoretical_price
        percentage_difference = abs(price_difference) / theoretical_price

        if percentage_difference < min_price_difference:
            continue

        confidence = classify_price_confidence(contract.volume, contract.open_interest,
                                               contract.spread_ratio)

        expected_profit = abs(price_difference) * CONTRACT_MULTIPLIER
        max_loss = expected_profit * MAX_LOSS_MULTIPLIER[confidence]

        kind = 'Call' if contract.is_call else 'Put'
        if price_difference > 0:
            recommendation = f"{kind} appears overpriced. Consider selling {contract.ticker}."
        else:
            recommendation = f"{kind} appears underpriced. Consider buying {contract.ticker}."

        opportunities.append(_opportunity(
            contract, market_price, theoretical_price, price_difference, percentage_difference,
            confidence, recommendation, expected_profit, max_loss, ArbitrageType.PRICE
        ))

    logger.info(f"Price arbitrage: {len(opportunities)} opportunities in {scanned} contracts")
    return rank_opportunities(opportunities)


def find_volatility_arbitrage(contracts: Iterable[ContractQuote],
                              historical_volatility: float,
                              min_vol_difference: float = 0.10,
                              as_of: Optional[datetime] = None,
                              skipped: Optional[List[SkippedContract]] = None) -> List[ArbitrageOpportunity]:
    """
    Find contracts whose implied volatility departs from historical volatility.

    The trigger is the relative volatility gap; the reported price and
    percentage differences are the price impact of repricing the contract at
    historical volatility.

    Parameters:
    -----------
    contracts : iterable of ContractQuote
        Quotes with implied_volatility and underlying_price attached
    historical_volatility : float
        Realised volatility benchmark of the underlying
    min_vol_difference : float
        Minimum |iv - hv| / hv to report
    as_of : datetime, optional
        Valuation time (defaults to now)
    skipped : list, optional
        Receives a SkippedContract for every contract that was dropped

    Returns:
    --------
    List[ArbitrageOpportunity] : ranked by percentage difference, largest first
    """
    if historical_volatility <= 0:
        raise InvalidParameterError("Historical volatility must be positive")
    if as_of is None:
        as_of = datetime.now()

    opportunities = []
    scanned = 0

    for contract in contracts:
        scanned += 1
        iv = contract.implied_volatility
        if iv is None:
            _skip(skipped, contract.ticker, "no implied volatility")
            continue

        vol_difference = iv - historical_volatility
        vol_percentage_difference = abs(vol_difference) / historical_volatility
        if vol_percentage_difference < min_vol_difference:
            continue

        if contract.underlying_price is None:
            _skip(skipped, contract.ticker, "no underlying price")
            continue

        tau = contract.time_to_expiry(as_of)
        try:
            theoretical_price = price_option(contract.underlying_price, contract.strike_price, tau,
                                             VOLATILITY_SCAN_RATE, historical_volatility,
                                             contract.is_call).price
        except InvalidParameterError as e:
            _skip(skipped, contract.ticker, f"pricing failed: {e}")
            continue

        if theoretical_price <= 0:
            _skip(skipped, contract.ticker, "theoretical price is zero")
            continue

        market_price = contract.last
        price_difference = market_price - theoretical_price
        percentage_difference = abs(price_difference) / theoretical_price

        kind = contract.contract_type.value
        comparison = "higher" if vol_difference > 0 else "lower"
        action = "selling" if vol_difference > 0 else "buying"
        recommendation = (
            f"Implied volatility ({iv * 100:.1f}%) is {comparison} than historical volatility "
            f"({historical_volatility * 100:.1f}%). Consider {action} {kind}s and delta-hedging."
        )

        confidence = Confidence.HIGH if vol_percentage_difference > VOL_HIGH_CONFIDENCE else Confidence.MEDIUM

        expected_profit = abs(price_difference) * CONTRACT_MULTIPLIER
        reference_price = contract.underlying_price if contract.is_call else contract.strike_price
        max_loss = reference_price * VOL_MAX_LOSS_MOVE * CONTRACT_MULTIPLIER

        opportunities.append(_opportunity(
            contract, market_price, theoretical_price, price_difference, percentage_difference,
            confidence, recommendation, expected_profit, max_loss, ArbitrageType.VOLATILITY
        ))

    logger.info(f"Volatility arbitrage: {len(opportunities)} opportunities in {scanned} contracts "
                f"(historical vol {historical_volatility:.1%})")
    return rank_opportunities(opportunities)


def _pair_by_series(call_contracts: Iterable[ContractQuote],
                    put_contracts: Iterable[ContractQuote]) -> Dict[Tuple, Dict[str, Optional[ContractQuote]]]:
    """Group calls and puts by (strike, expiration); later quotes replace earlier ones"""
    pairs: Dict[Tuple, Dict[str, Optional[ContractQuote]]] = {}

    for call in call_contracts:
        pairs.setdefault((call.strike_price, call.expiration_date), {'call': None, 'put': None})['call'] = call
    for put in put_contracts:
        pairs.setdefault((put.strike_price, put.expiration_date), {'call': None, 'put': None})['put'] = put

    return pairs


def find_put_call_parity_arbitrage(call_contracts: Iterable[ContractQuote],
                                   put_contracts: Iterable[ContractQuote],
                                   spot_price: float,
                                   risk_free_rate: float = 0.05,
                                   as_of: Optional[datetime] = None,
                                   skipped: Optional[List[SkippedContract]] = None) -> List[ArbitrageOpportunity]:
    """
    Find call/put pairs violating C + K e^{-rT} = P + S by at least 2%.

    Parameters:
    -----------
    call_contracts, put_contracts : iterable of ContractQuote
        Calls and puts on the same underlying
    spot_price : float
        Underlying price
    risk_free_rate : float
        Rate used to discount the strike
    as_of : datetime, optional
        Valuation time (defaults to now)
    skipped : list, optional
        Receives a SkippedContract for every unmatched contract

    Returns:
    --------
    List[ArbitrageOpportunity] : ranked by percentage difference, largest first
    """
    if spot_price <= 0:
        raise InvalidParameterError("Spot price must be positive")
    if as_of is None:
        as_of = datetime.now()

    opportunities = []
    pairs = _pair_by_series(call_contracts, put_contracts)

    for pair in pairs.values():
        call, put = pair['call'], pair['put']
        if call is None or put is None:
            _skip(skipped, (call or put).ticker, "no parity counterpart")
            continue

        strike_price = call.strike_price
        tau = call.time_to_expiry(as_of)
        discounted_strike = strike_price * float(np.exp(-risk_free_rate * tau))

        left_side = call.last + discounted_strike
        right_side = put.last + spot_price

        difference = abs(left_side - right_side)
        percentage_difference = difference / min(left_side, right_side)

        if percentage_difference < PARITY_THRESHOLD:
            continue

        if left_side > right_side:
            contract = call
            recommendation = "Sell call, buy put, buy stock, borrow cash"
            theoretical_price = right_side - discounted_strike
        else:
            contract = put
            recommendation = "Buy call, sell put, short stock, lend cash"
            theoretical_price = left_side - spot_price

        confidence = Confidence.HIGH if percentage_difference > PARITY_HIGH_CONFIDENCE else Confidence.MEDIUM
        expected_profit = difference * CONTRACT_MULTIPLIER
        max_loss = expected_profit * PARITY_MAX_LOSS_MULTIPLIER

        # Series identity always comes from the call leg
        opportunities.append(_opportunity(
            contract, contract.last, theoretical_price, difference, percentage_difference,
            confidence, recommendation, expected_profit, max_loss, ArbitrageType.PUT_CALL_PARITY,
            underlying_ticker=call.underlying_ticker
        ))

    logger.info(f"Put-call parity: {len(opportunities)} opportunities in {len(pairs)} series")
    return rank_opportunities(opportunities)


class ArbitrageDetector:
    """
    Runs one arbitrage scan with a shared configuration.

    Usage:
        detector = ArbitrageDetector(ScanConfig(risk_free_rate=0.045))
        report = detector.scan(ArbitrageType.PRICE, contracts)
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or ScanConfig()

    def scan(self,
             arbitrage_type,
             contracts: Iterable[ContractQuote],
             spot_price: Optional[float] = None,
             as_of: Optional[datetime] = None) -> ScanReport:
        """
        Scan contracts for one kind of arbitrage.

        Args:
            arbitrage_type: ArbitrageType or its string value
            contracts: Quotes to scan
            spot_price: Underlying price for put-call parity; defaults to
                the first available contract underlying price
            as_of: Valuation time (defaults to now)

        Returns:
            ScanReport with ranked opportunities and skipped contracts
        """
        arbitrage_type = ArbitrageType(arbitrage_type)
        contracts = list(contracts)
        report = ScanReport(arbitrage_type=arbitrage_type, scanned=len(contracts))
        config = self.config

        if arbitrage_type is ArbitrageType.PRICE:
            report.opportunities = find_price_arbitrage(
                contracts, config.risk_free_rate, config.min_price_difference,
                as_of=as_of, skipped=report.skipped
            )
        elif arbitrage_type is ArbitrageType.VOLATILITY:
            report.opportunities = find_volatility_arbitrage(
                contracts, config.historical_volatility, config.min_vol_difference,
                as_of=as_of, skipped=report.skipped
            )
        else:
            if spot_price is None:
                spot_price = next((c.underlying_price for c in contracts
                                   if c.underlying_price is not None), None)
            if spot_price is None:
                raise InvalidParameterError("Put-call parity scan needs a spot price")
            calls, puts = split_by_contract_type(contracts)
            report.opportunities = find_put_call_parity_arbitrage(
                calls, puts, spot_price, config.risk_free_rate,
                as_of=as_of, skipped=report.skipped
            )

        if report.skipped:
            logger.info(f"{arbitrage_type.value} scan skipped {len(report.skipped)} of {report.scanned} contracts")

        return report
