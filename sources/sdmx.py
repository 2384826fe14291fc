"""
IMF SDMX 3.0 Data Source.

Path format (data):
  {base}/data/{agency}/{flowRef}/{version}/{key}?startPeriod=..&endPeriod=..
Path format (availability):
  {base}/availability/data/{agency}/{flowRef}/{version}/{key}/{componentID}

The precise dimension order of `key` depends on each dataflow's structure
definition, which is why the resolver drives this source through several
key variants. Responses come back in more than one JSON shape; each known
shape has its own parser and the first one that recognises the body wins.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from config import config
from .base import WILDCARD_KEY, DataSource, FetchResult, SeriesPoint, sort_points, to_number
from .http import build_full_url, get_json

logger = logging.getLogger(__name__)

Parser = Callable[[Any], Optional[List[SeriesPoint]]]


def _as_list(node: Any) -> list:
    if node is None:
        return []
    return node if isinstance(node, list) else [node]


def _as_dict(node: Any) -> dict:
    return node if isinstance(node, dict) else {}


def parse_compact(body: Any) -> Optional[List[SeriesPoint]]:
    """CompactData.DataSet.Series.Obs (SDMX 2.x style, still seen in transition)."""
    if not isinstance(body, dict):
        return None
    compact = body.get('CompactData')
    if not isinstance(compact, dict):
        return None
    dataset = compact.get('DataSet')
    if not isinstance(dataset, dict) or 'Series' not in dataset:
        return None

    series = _as_list(dataset.get('Series'))
    if not series or not isinstance(series[0], dict):
        return []

    points = []
    for obs in _as_list(series[0].get('Obs')):
        if not isinstance(obs, dict):
            continue
        date = obs.get('@TIME_PERIOD') or obs.get('TIME_PERIOD') or obs.get('time') or ''
        raw = obs.get('@OBS_VALUE', obs.get('OBS_VALUE'))
        points.append(SeriesPoint(date=str(date), value=to_number(raw)))
    return sort_points(points)


def parse_sdmx_json(body: Any) -> Optional[List[SeriesPoint]]:
    """SDMX-JSON: data.dataSets[0].series[*].observations indexed into the time dimension."""
    if not isinstance(body, dict):
        return None
    data = body.get('data') if isinstance(body.get('data'), dict) else body
    datasets = data.get('dataSets')
    if not isinstance(datasets, list):
        return None
    if not datasets or not isinstance(datasets[0], dict):
        return []
    series_map = datasets[0].get('series')
    if series_map is None:
        return []
    if not isinstance(series_map, dict):
        return None

    structure = data.get('structure')
    if structure is None:
        structures = data.get('structures')
        structure = structures[0] if isinstance(structures, list) and structures else {}
    time_dims = _as_dict(_as_dict(structure).get('dimensions')).get('observation')
    time_values = []
    if isinstance(time_dims, list) and time_dims and isinstance(time_dims[0], dict):
        time_values = _as_list(time_dims[0].get('values'))

    points = []
    for series in series_map.values():
        if not isinstance(series, dict):
            continue
        for index, obs in _as_dict(series.get('observations')).items():
            try:
                period = time_values[int(index)]
            except (ValueError, IndexError):
                continue
            if not isinstance(period, dict):
                continue
            date = period.get('id') or period.get('value')
            if date is None:
                continue
            raw = obs[0] if isinstance(obs, list) and obs else obs
            points.append(SeriesPoint(date=str(date), value=to_number(raw)))
        # one series per key; further series would be a wildcard query
        break
    return sort_points(points)


def parse_observations(body: Any) -> Optional[List[SeriesPoint]]:
    """Flat `observations` array, top-level or under `data`."""
    if not isinstance(body, dict):
        return None
    obs = body.get('observations')
    if obs is None and isinstance(body.get('data'), dict):
        obs = body['data'].get('observations')
    if not isinstance(obs, list):
        return None

    points = []
    for row in obs:
        if not isinstance(row, dict):
            continue
        date = row.get('date') or row.get('TIME_PERIOD') or row.get('time') or ''
        raw = row.get('value', row.get('OBS_VALUE'))
        points.append(SeriesPoint(date=str(date), value=to_number(raw)))
    return sort_points(points)


# Tried in order; first non-None wins
PARSERS: List[Tuple[str, Parser]] = [
    ('compact', parse_compact),
    ('sdmx_json', parse_sdmx_json),
    ('observations', parse_observations),
]


def normalize(body: Any, parsers: Optional[List[Tuple[str, Parser]]] = None) -> Tuple[Optional[str], List[SeriesPoint]]:
    """Run the parser chain. Unknown shapes normalize to ([], None) rather than raising."""
    for name, parser in (parsers or PARSERS):
        points = parser(body)
        if points is not None:
            return name, points
    return None, []


class SDMXSource(DataSource):
    """Data source for the IMF SDMX 3.0 REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        agency: Optional[str] = None,
        version: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        parsers: Optional[List[Tuple[str, Parser]]] = None,
    ):
        self._base_url = (base_url or config.sdmx_base_url).rstrip('/')
        self._agency = agency or config.sdmx_agency
        self._version = version or config.sdmx_version
        self._api_key = api_key if api_key is not None else config.imf_api_key
        self._client = client
        self._parsers = parsers or PARSERS

    @property
    def name(self) -> str:
        return "IMF SDMX"

    def _headers(self) -> Dict[str, str]:
        headers = {'Accept': 'application/json'}
        if self._api_key:
            headers['X-API-Key'] = self._api_key
            headers['Ocp-Apim-Subscription-Key'] = self._api_key
        return headers

    def _flow_path(self, flow_ref: str) -> str:
        return '/'.join(quote(part, safe='') for part in (self._agency, flow_ref, self._version))

    def build_url(self, request) -> str:
        path = f"{self._base_url}/data/{self._flow_path(request.flow_ref)}/{quote(request.key, safe='.+*')}"
        return build_full_url(path, {
            'startPeriod': request.start_period,
            'endPeriod': request.end_period,
        })

    def build_availability_url(self, request, component_id: str = 'REF_AREA') -> str:
        key = request.key or WILDCARD_KEY
        path = (
            f"{self._base_url}/availability/data/{self._flow_path(request.flow_ref)}"
            f"/{quote(key, safe='.+*')}/{quote(component_id, safe='')}"
        )
        return build_full_url(path, {
            'startPeriod': request.start_period,
            'endPeriod': request.end_period,
        })

    async def fetch_series(self, request) -> FetchResult:
        url = self.build_url(request)
        body = await get_json(url, client=self._client, headers=self._headers())
        shape, points = normalize(body, self._parsers)
        if shape is None:
            logger.info("[SDMX] Unrecognised response shape for %s", request.key)
        return FetchResult(points=points, raw=body, url=url, key=request.key, info={'shape': shape})

    async def fetch_availability(self, request, component_id: str = 'REF_AREA') -> FetchResult:
        """Availability constraints are passed through raw; there are no points."""
        url = self.build_availability_url(request, component_id)
        body = await get_json(url, client=self._client, headers=self._headers())
        return FetchResult(points=[], raw=body, url=url, key=request.key or WILDCARD_KEY)
