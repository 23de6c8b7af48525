"""
Tests for opportunity filtering, summaries and export
"""

import json
from datetime import date

import pandas as pd
import pytest

from options_arbitrage.data import ContractType
from options_arbitrage.monitoring import (
    filter_opportunities,
    opportunities_to_frame,
    opportunities_to_records,
    summarize_opportunities,
)
from options_arbitrage.strategies import ArbitrageOpportunity, ArbitrageType, Confidence


def _opportunity(ticker, underlying='SPY', contract_type=ContractType.CALL,
                 confidence=Confidence.HIGH, price_difference=2.0, expected_profit=200.0,
                 max_loss=100.0):
    return ArbitrageOpportunity(
        contract_ticker=ticker,
        underlying_ticker=underlying,
        strike_price=580.0,
        expiration_date=date(2025, 3, 21),
        contract_type=contract_type,
        market_price=20.0,
        theoretical_price=20.0 - price_difference,
        price_difference=price_difference,
        percentage_difference=abs(price_difference) / (20.0 - price_difference),
        confidence=confidence,
        recommendation="Call appears overpriced.",
        expected_profit=expected_profit,
        max_loss=max_loss,
        risk_reward_ratio=expected_profit / max_loss if max_loss > 0 else float('inf'),
    )


@pytest.fixture
def opportunities():
    return [
        _opportunity('O:SPY250321C00580000'),
        _opportunity('O:SPY250321P00580000', contract_type=ContractType.PUT,
                     confidence=Confidence.LOW, price_difference=-4.0, expected_profit=400.0),
        _opportunity('O:AAPL250321C00190000', underlying='AAPL', confidence=Confidence.MEDIUM,
                     price_difference=1.0, expected_profit=100.0),
    ]


def test_filter_by_search_is_case_insensitive(opportunities):
    assert [o.underlying_ticker for o in filter_opportunities(opportunities, search='aapl')] == ['AAPL']
    assert len(filter_opportunities(opportunities, search='spy250321')) == 2


def test_filter_by_confidence_and_type(opportunities):
    assert len(filter_opportunities(opportunities, confidence='all', contract_type='all')) == 3
    assert [o.confidence for o in filter_opportunities(opportunities, confidence='low')] == [Confidence.LOW]
    assert len(filter_opportunities(opportunities, confidence=Confidence.HIGH)) == 1
    assert len(filter_opportunities(opportunities, contract_type=ContractType.CALL)) == 2
    assert filter_opportunities(opportunities, search='spy', confidence='medium') == []


def test_filter_keeps_order(opportunities):
    assert filter_opportunities(opportunities) == opportunities


def test_summary(opportunities):
    summary = summarize_opportunities(opportunities)

    assert summary['total_opportunities'] == 3
    assert summary['high_confidence'] == 1
    assert summary['avg_price_difference'] == pytest.approx((2.0 + 4.0 + 1.0) / 3)
    assert summary['max_profit'] == 400.0


def test_empty_summary():
    assert summarize_opportunities([]) == {
        'total_opportunities': 0,
        'high_confidence': 0,
        'avg_price_difference': 0.0,
        'max_profit': 0.0,
    }


def test_records_are_json_safe():
    records = opportunities_to_records([_opportunity('FREE', max_loss=0.0)])

    assert records[0]['risk_reward_ratio'] is None
    assert records[0]['expiration_date'] == '2025-03-21'
    assert records[0]['contract_type'] == 'call'
    assert records[0]['arbitrage_type'] == ArbitrageType.PRICE.value
    json.dumps(records)


def test_frame_export(opportunities):
    frame = opportunities_to_frame(opportunities)

    assert isinstance(frame, pd.DataFrame)
    assert len(frame) == 3
    assert list(frame['confidence']) == ['high', 'low', 'medium']


def test_empty_frame_has_columns():
    frame = opportunities_to_frame([])

    assert frame.empty
    assert 'contract_ticker' in frame.columns
    assert 'risk_reward_ratio' in frame.columns
