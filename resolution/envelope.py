"""
Response Envelope Builder.

Every resolution, successful or not, leaves as the same
{meta, data, raw, attempts} shape the dashboard consumes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from sources.base import SeriesPoint
from .models import AttemptLog, DataRequest, ResolutionOutcome


@dataclass
class ResolutionResult:
    """The fixed envelope."""

    meta: Dict[str, Any]
    data: List[SeriesPoint]
    raw: Any = None
    attempts: List[AttemptLog] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'meta': self.meta,
            'data': [p.to_dict() for p in self.data],
            'raw': self.raw,
            'attempts': [a.to_dict() for a in self.attempts],
        }


def request_meta(request: DataRequest, request_type: str = 'data') -> Dict[str, Any]:
    """Request echo, including passthrough diagnostics."""
    meta: Dict[str, Any] = {
        'type': request_type,
        'flowRef': request.flow_ref,
        'family': request.family.value,
        'indicator': request.indicator,
        'area': request.area,
        'startPeriod': request.start_period,
        'endPeriod': request.end_period,
        'requestedKey': request.key,
    }
    for name, value in request.diagnostics.items():
        meta.setdefault(name, value)
    return meta


def build_envelope(request: DataRequest, outcome: ResolutionOutcome) -> ResolutionResult:
    """
    Wrap an outcome. On success `meta` carries the winning key/url; on
    exhaustion it carries the requested key and how many variants were tried.
    """
    meta = request_meta(request)
    meta['status'] = outcome.status.value
    if outcome.succeeded:
        meta['key'] = outcome.key
        meta['url'] = outcome.url
        data = list(outcome.points)
    else:
        meta['key'] = request.key
        meta['url'] = outcome.url
        meta['variantsTried'] = outcome.variants_tried
        data = []

    return ResolutionResult(
        meta=meta,
        data=data,
        raw=outcome.raw,
        attempts=list(outcome.attempts),
    )


def envelope_status(outcome: ResolutionOutcome) -> int:
    """200 on data, 502 when nothing reached upstream, 404 otherwise."""
    if outcome.succeeded:
        return 200
    if outcome.all_transport_failures:
        return 502
    return 404
