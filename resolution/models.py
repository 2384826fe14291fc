"""
Request/attempt/outcome types for series resolution.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from sources.base import WILDCARD_KEY, DatasetFamily, SeriesPoint


class ResolutionStatus(str, Enum):
    SUCCESS = 'success'
    EXHAUSTED = 'exhausted'


def compose_key(frequency: str, area: str, indicator: str) -> str:
    """FREQ.AREA.INDICATOR, with empty segments left out."""
    return '.'.join(part for part in (frequency, area, indicator) if part)


@dataclass(frozen=True)
class DataRequest:
    """Normalized intent derived from UI state."""

    family: DatasetFamily
    indicator: str
    area: str
    start_period: Optional[str] = None
    end_period: Optional[str] = None
    frequency: str = 'A'
    flow_ref: str = ''
    key: str = ''
    diagnostics: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if not self.flow_ref:
            object.__setattr__(self, 'flow_ref', self.family.value)
        if not self.key:
            object.__setattr__(self, 'key', compose_key(self.frequency, self.area, self.indicator))

    @classmethod
    def from_key(
        cls,
        flow_ref: str,
        key: str,
        start_period: Optional[str] = None,
        end_period: Optional[str] = None,
        diagnostics: Optional[Dict[str, str]] = None,
    ) -> "DataRequest":
        """
        Build a request from the wire form (flowRef + dot-separated key).

        3 segments are FREQ.AREA.INDICATOR, 2 are AREA.INDICATOR, a single
        segment is the indicator for the default area. An empty key is the
        wildcard ALL, with no area or indicator.
        """
        diagnostics = dict(diagnostics or {})
        key = (key or '').strip() or WILDCARD_KEY
        parts = key.split('.')
        frequency = diagnostics.get('freq') or 'A'
        if key == WILDCARD_KEY:
            area, indicator = '', ''
        elif len(parts) >= 3:
            frequency, area, indicator = parts[0], parts[1], '.'.join(parts[2:])
        elif len(parts) == 2:
            area, indicator = parts
        else:
            area, indicator = 'US', parts[0]

        return cls(
            family=DatasetFamily.from_flow_ref(flow_ref),
            indicator=indicator,
            area=area,
            start_period=start_period or None,
            end_period=end_period or None,
            frequency=frequency,
            flow_ref=flow_ref,
            key=key,
            diagnostics=diagnostics,
        )

    def with_key(self, key: str) -> "DataRequest":
        return replace(self, key=key)

    def with_family(self, family: DatasetFamily, flow_ref: Optional[str] = None) -> "DataRequest":
        """Same series, different API family (application-level fallback)."""
        return replace(
            self,
            family=family,
            flow_ref=flow_ref or self.flow_ref,
            key=compose_key(self.frequency, self.area, self.indicator),
        )


@dataclass(frozen=True)
class AttemptLog:
    """One adapter call. Never mutated after creation."""

    url: str
    success: bool
    error: Optional[str] = None
    data_points: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'url': self.url, 'success': self.success}
        if self.error is not None:
            out['error'] = self.error
        if self.data_points is not None:
            out['dataPoints'] = self.data_points
        return out


@dataclass
class ResolutionOutcome:
    """Terminal state of one resolution (SUCCESS or EXHAUSTED)."""

    status: ResolutionStatus
    request: DataRequest
    key: str
    url: Optional[str]
    points: List[SeriesPoint]
    raw: Any
    attempts: List[AttemptLog]
    variants_tried: int

    @property
    def succeeded(self) -> bool:
        return self.status is ResolutionStatus.SUCCESS

    @property
    def all_transport_failures(self) -> bool:
        """True when no attempt ever got a response from upstream."""
        return bool(self.attempts) and not any(a.success for a in self.attempts)
