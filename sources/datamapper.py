"""
IMF DataMapper Data Source - WEO annual indicators.

  {base}/{indicator}/{ISO3}  ->  {"values": {indicator: {ISO3: {"1980": 1.2, ...}}}}

The payload is a sparse year -> value map, not an array. DataMapper keys
countries by alpha-3, so alpha-2 areas are translated first through an
injected table; codes with no entry are sent as-is.
"""

import logging
from typing import Any, List, Mapping, Optional
from urllib.parse import quote

import httpx

from config import config
from .base import DataSource, FetchResult, SeriesPoint, period_year, sort_points, to_number
from .country_codes import ISO2_TO_ISO3, to_iso3
from .http import get_json

logger = logging.getLogger(__name__)


def parse_year_map(body: Any, indicator: str, area: str,
                   start_year: Optional[int] = None, end_year: Optional[int] = None) -> List[SeriesPoint]:
    """values[indicator][area] -> points inside [start_year, end_year]; missing years are simply absent."""
    if not isinstance(body, dict):
        return []
    series = ((body.get('values') or {}).get(indicator) or {}).get(area)
    if not isinstance(series, dict):
        return []

    points = []
    for year, raw in series.items():
        value = to_number(raw)
        if value is None:
            continue
        y = period_year(year)
        if y is None:
            continue
        if start_year is not None and y < start_year:
            continue
        if end_year is not None and y > end_year:
            continue
        points.append(SeriesPoint(date=str(year), value=value))
    return sort_points(points)


class DataMapperSource(DataSource):
    """Data source for the IMF DataMapper API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        iso2_to_iso3: Optional[Mapping[str, str]] = None,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = (base_url or config.datamapper_base_url).rstrip('/')
        self._iso2_to_iso3 = ISO2_TO_ISO3 if iso2_to_iso3 is None else iso2_to_iso3
        self._api_key = api_key if api_key is not None else config.imf_api_key
        self._client = client

    @property
    def name(self) -> str:
        return "IMF DataMapper"

    def area_code(self, area: str) -> str:
        return to_iso3(area, self._iso2_to_iso3)

    def build_url(self, request) -> str:
        country3 = self.area_code(request.area)
        return f"{self._base_url}/{quote(request.indicator, safe='')}/{quote(country3, safe='')}"

    async def fetch_series(self, request) -> FetchResult:
        country3 = self.area_code(request.area)
        url = self.build_url(request)
        headers = {'Ocp-Apim-Subscription-Key': self._api_key} if self._api_key else None

        body = await get_json(url, client=self._client, headers=headers)
        points = parse_year_map(
            body,
            request.indicator,
            country3,
            start_year=period_year(request.start_period),
            end_year=period_year(request.end_period),
        )
        return FetchResult(points=points, raw=body, url=url, key=f"{country3}.{request.indicator}")
