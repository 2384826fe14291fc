"""
Abstract interface for all data sources.

Every upstream (IMF SDMX, IMF DataMapper, World Bank) implements the
DataSource contract: build a URL, call it, normalize its native shape into
SeriesPoint lists. "No data" is an empty list, never an exception.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from resolution.models import DataRequest


# SDMX key matching every series of a dataflow
WILDCARD_KEY = 'ALL'


class DatasetFamily(str, Enum):
    """Which upstream API family serves a dataset."""

    SDMX = 'SDMX'
    DATAMAPPER = 'DATAMAPPER'
    WORLDBANK = 'WORLDBANK'

    @classmethod
    def from_flow_ref(cls, flow_ref: str) -> "DatasetFamily":
        """WEO lives on DataMapper, WORLDBANK on the WB API, everything else is an SDMX dataflow."""
        ref = (flow_ref or '').strip().upper()
        if ref == 'WEO':
            return cls.DATAMAPPER
        if ref in ('WORLDBANK', 'WB', 'WDI'):
            return cls.WORLDBANK
        return cls.SDMX


@dataclass(frozen=True)
class SeriesPoint:
    """One observation. `date` stays a string ("2020", "2020-03")."""

    date: str
    value: Optional[float]

    def to_dict(self) -> dict:
        return {'date': self.date, 'value': self.value}


@dataclass
class FetchResult:
    """Result from one adapter call."""

    points: List[SeriesPoint]
    raw: Any = None
    url: str = ''
    key: str = ''
    info: dict = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return len(self.points) == 0


class TransportError(Exception):
    """Network/HTTP failure reaching an upstream API."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}: {self.message}"
        return self.message


def to_number(raw: Any) -> Optional[float]:
    """Coerce an upstream value to float, or None when missing/non-numeric."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        num = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(num) or math.isinf(num):
        return None
    return num


def sort_points(points: List[SeriesPoint]) -> List[SeriesPoint]:
    """Ascending by date string (all upstream formats are zero-padded)."""
    return sorted(points, key=lambda p: p.date)


def period_year(period: Optional[str]) -> Optional[int]:
    """Leading 4-digit year of "2020" / "2020-03" / "2020-Q1", else None."""
    if not period:
        return None
    head = str(period).strip()[:4]
    return int(head) if head.isdigit() else None


class DataSource(ABC):
    """Abstract base class for data sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this data source."""
        pass

    @abstractmethod
    def build_url(self, request: "DataRequest") -> str:
        """Full upstream URL (including query string) for a request."""
        pass

    @abstractmethod
    async def fetch_series(self, request: "DataRequest") -> FetchResult:
        """
        Fetch and normalize one series.

        Args:
            request: The resolved request; SDMX sources read `request.key`

        Returns:
            FetchResult with sorted points (possibly empty) and the raw body

        Raises:
            TransportError: network failure, non-2xx status or undecodable body
        """
        pass

    @property
    def available(self) -> bool:
        return True
