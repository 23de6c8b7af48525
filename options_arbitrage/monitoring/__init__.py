from .reporting import (
    filter_opportunities,
    summarize_opportunities,
    opportunities_to_records,
    opportunities_to_frame
)

__all__ = [
    'filter_opportunities',
    'summarize_opportunities',
    'opportunities_to_records',
    'opportunities_to_frame'
]
