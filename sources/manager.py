"""
Data Source Manager - Maps dataset families to their upstream source.

The resolver asks the manager for "the" source of a family; it never builds
sources itself, so tests can hand it a manager full of fakes.
"""

import logging
from typing import Dict, Mapping, Optional

import httpx

from .base import DataSource, DatasetFamily
from .country_codes import ISO2_TO_ISO3
from .datamapper import DataMapperSource
from .sdmx import SDMXSource
from .worldbank import WorldBankSource

logger = logging.getLogger(__name__)


class SourceManager:
    """
    Registry of one DataSource per DatasetFamily.
    """

    def __init__(self, sources: Optional[Mapping[DatasetFamily, DataSource]] = None):
        self._sources: Dict[DatasetFamily, DataSource] = dict(sources or {})

    @classmethod
    def default(
        cls,
        iso2_to_iso3: Mapping[str, str] = ISO2_TO_ISO3,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "SourceManager":
        """Production wiring: the three upstream APIs sharing one lookup table."""
        manager = cls({
            DatasetFamily.SDMX: SDMXSource(client=client),
            DatasetFamily.DATAMAPPER: DataMapperSource(iso2_to_iso3=iso2_to_iso3, client=client),
            DatasetFamily.WORLDBANK: WorldBankSource(iso2_to_iso3=iso2_to_iso3, client=client),
        })
        for family, source in manager._sources.items():
            logger.info("[Sources] %s -> %s: %s", family.value, source.name,
                        'available' if source.available else 'not available')
        return manager

    def register(self, family: DatasetFamily, source: DataSource) -> None:
        self._sources[family] = source

    def get_source(self, family: DatasetFamily) -> DataSource:
        """Find the data source that serves a family."""
        try:
            return self._sources[family]
        except KeyError:
            raise LookupError(f"No data source registered for {family.value}")

    def available_sources(self) -> dict:
        """Get status of all registered data sources."""
        return {
            family.value: {'name': source.name, 'available': source.available}
            for family, source in self._sources.items()
        }


# Global instance
source_manager = SourceManager.default()
