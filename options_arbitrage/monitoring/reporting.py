"""
Opportunity Reporting

Filtering, headline statistics and JSON/DataFrame export of scan results.
"""

from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from ..strategies.opportunity import ArbitrageOpportunity, Confidence


def _serialize(value: Any):
    if isinstance(value, (float, np.floating)):
        if not np.isfinite(value):
            return None
        return float(value)
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    return value


def filter_opportunities(opportunities: Iterable[ArbitrageOpportunity],
                         search: str = "",
                         confidence: Optional[str] = None,
                         contract_type: Optional[str] = None) -> List[ArbitrageOpportunity]:
    """
    Narrow a ranked opportunity list, keeping its order.

    search matches the contract or underlying ticker case-insensitively;
    confidence and contract_type accept enum values or 'all'/None.
    """
    search = search.lower()
    if confidence in (None, 'all'):
        confidence = None
    elif isinstance(confidence, Confidence):
        confidence = confidence.value
    if contract_type in (None, 'all'):
        contract_type = None
    elif not isinstance(contract_type, str):
        contract_type = contract_type.value

    return [
        o for o in opportunities
        if (search in o.contract_ticker.lower() or search in o.underlying_ticker.lower())
        and (confidence is None or o.confidence.value == confidence)
        and (contract_type is None or o.contract_type.value == contract_type)
    ]


def summarize_opportunities(opportunities: Iterable[ArbitrageOpportunity]) -> Dict[str, Any]:
    """Headline statistics of a scan"""
    opportunities = list(opportunities)
    if not opportunities:
        return {
            'total_opportunities': 0,
            'high_confidence': 0,
            'avg_price_difference': 0.0,
            'max_profit': 0.0
        }

    return {
        'total_opportunities': len(opportunities),
        'high_confidence': sum(1 for o in opportunities if o.confidence is Confidence.HIGH),
        'avg_price_difference': float(np.mean([abs(o.price_difference) for o in opportunities])),
        'max_profit': float(max(o.expected_profit for o in opportunities))
    }


def opportunities_to_records(opportunities: Iterable[ArbitrageOpportunity]) -> List[Dict[str, Any]]:
    """JSON-safe dictionaries; infinite ratios become None"""
    return [_serialize(o.to_dict()) for o in opportunities]


def opportunities_to_frame(opportunities: Iterable[ArbitrageOpportunity]) -> pd.DataFrame:
    """One row per opportunity, columns as in ArbitrageOpportunity.to_dict()"""
    records = [o.to_dict() for o in opportunities]
    if not records:
        return pd.DataFrame(columns=list(ArbitrageOpportunity.__dataclass_fields__))
    return pd.DataFrame.from_records(records)
