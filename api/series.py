"""
Series API Endpoints

/api/imf3   - the resolution endpoint (flowRef + key + period window)
/api/series - dashboard-shaped, cache-fronted lookup (label + country + range)

Both always answer with the {meta, data, raw, attempts} envelope.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from registry import build_request
from resolution import DataRequest, build_envelope, envelope_status
from resolution.envelope import ResolutionResult, request_meta
from resolution.models import AttemptLog
from resolution import service as series_module
from sources.base import DatasetFamily, TransportError

logger = logging.getLogger(__name__)

series_router = APIRouter()

DIAGNOSTIC_FIELDS = ('freq', 'indicatorLabel', 'timeRange', 'clientTs')


async def _availability(request: DataRequest, component_id: str) -> JSONResponse:
    """SDMX availability constraints, returned raw with no points."""
    source = series_module.source_manager.get_source(DatasetFamily.SDMX)
    meta = request_meta(request, request_type='availableconstraint')
    meta['componentID'] = component_id
    try:
        result = await source.fetch_availability(request, component_id)
    except TransportError as e:
        logger.warning("[API] availability %s failed: %s", e.url, e)
        meta.update({'key': request.key, 'url': e.url})
        envelope = ResolutionResult(meta=meta, data=[], raw=None,
                                    attempts=[AttemptLog(url=e.url, success=False, error=str(e))])
        return JSONResponse(envelope.to_dict(), status_code=502)

    meta.update({'key': result.key, 'url': result.url})
    envelope = ResolutionResult(meta=meta, data=[], raw=result.raw,
                                attempts=[AttemptLog(url=result.url, success=True, data_points=0)])
    return JSONResponse(envelope.to_dict(), status_code=200)


@series_router.get("/api/imf3")
async def resolve_series(
    request_type: str = Query('data', alias='type'),
    flowRef: Optional[str] = Query(None),
    resourceID: Optional[str] = Query(None),
    key: str = Query(''),
    startPeriod: Optional[str] = Query(None),
    endPeriod: Optional[str] = Query(None),
    componentID: str = Query('REF_AREA'),
    freq: Optional[str] = Query(None),
    indicatorLabel: Optional[str] = Query(None),
    timeRange: Optional[str] = Query(None),
    clientTs: Optional[str] = Query(None),
):
    """
    Resolve one series.

    200 with data, 404 when every attempt came back empty, 502 when no
    attempt reached upstream. Diagnostic fields are echoed into meta only.
    """
    passthrough = zip(DIAGNOSTIC_FIELDS, (freq, indicatorLabel, timeRange, clientTs))
    diagnostics = {name: value for name, value in passthrough if value}
    flow_ref = flowRef or resourceID or 'IFS'
    request_type = (request_type or 'data').lower()

    request = DataRequest.from_key(flow_ref, key, startPeriod, endPeriod, diagnostics)
    logger.info("[API] %s flowRef=%s key=%s", request_type, flow_ref, key)

    if request_type in ('availableconstraint', 'availability'):
        return await _availability(request, componentID)

    outcome = await series_module.resolver.resolve(request)
    envelope = build_envelope(request, outcome)
    return JSONResponse(envelope.to_dict(), status_code=envelope_status(outcome))


@series_router.get("/api/series")
async def dashboard_series(
    indicatorLabel: str = Query(...),
    country: str = Query('US'),
    timeRange: str = Query('5Y'),
    frequency: str = Query('Yearly'),
    clientTs: Optional[str] = Query(None),
):
    """Dashboard selection -> cached, fallback-aware resolution."""
    request = build_request(country, indicatorLabel, timeRange, frequency, client_ts=clientTs)
    envelope, status = await series_module.series_service.load(request)
    return JSONResponse(envelope.to_dict(), status_code=status)
