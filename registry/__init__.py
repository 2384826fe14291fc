"""Registry module - indicator labels, frequencies and time windows."""

from .indicators import (
    INDICATOR_DEFINITIONS,
    IndicatorInfo,
    build_request,
    frequency_letter,
    lookup_indicator,
    period_window,
)

__all__ = [
    'INDICATOR_DEFINITIONS',
    'IndicatorInfo',
    'build_request',
    'frequency_letter',
    'lookup_indicator',
    'period_window',
]
