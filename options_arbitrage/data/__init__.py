"""
Data Package

Contract quote model and loaders for the records supplied by the
market-data layer.
"""

from .contracts import (
    ContractType,
    ContractQuote,
    SkippedContract,
    time_to_expiry,
    contract_from_record,
    contracts_from_records,
    contracts_from_frame,
    split_by_contract_type
)

__all__ = [
    'ContractType',
    'ContractQuote',
    'SkippedContract',
    'time_to_expiry',
    'contract_from_record',
    'contracts_from_records',
    'contracts_from_frame',
    'split_by_contract_type'
]
