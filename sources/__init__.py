"""Data sources module - Unified interface for the IMF and World Bank APIs."""

from .base import DataSource, FetchResult, SeriesPoint, TransportError
from .sdmx import SDMXSource
from .datamapper import DataMapperSource
from .worldbank import WorldBankSource
from .manager import SourceManager

__all__ = [
    'DataSource',
    'FetchResult',
    'SeriesPoint',
    'TransportError',
    'SDMXSource',
    'DataMapperSource',
    'WorldBankSource',
    'SourceManager',
]
