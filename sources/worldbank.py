"""
World Bank Data Source - WDI indicators.

  {base}/country/{ISO3}/indicator/{indicator}?format=json&date=2015:2020

The API answers with a two-element array [metadata, observations]. Only the
second element is read. Missing years come back as rows with value null;
those rows are dropped rather than kept as null points.
"""

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional
from urllib.parse import quote

import httpx

from config import config
from .base import DataSource, FetchResult, SeriesPoint, period_year, sort_points, to_number
from .country_codes import ISO2_TO_ISO3, to_iso3
from .http import build_full_url, get_json

logger = logging.getLogger(__name__)

PER_PAGE = 20000


def parse_observations(body: Any) -> List[SeriesPoint]:
    """[meta, rows] -> numeric points. Error payloads ([{"message": ...}]) give []."""
    if not isinstance(body, list) or len(body) < 2 or not isinstance(body[1], list):
        return []

    points = []
    for row in body[1]:
        if not isinstance(row, dict):
            continue
        value = to_number(row.get('value'))
        date = row.get('date')
        if value is None or not date:
            continue
        points.append(SeriesPoint(date=str(date), value=value))
    return sort_points(points)


class WorldBankSource(DataSource):
    """Data source for the World Bank v2 indicators API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        iso2_to_iso3: Optional[Mapping[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = (base_url or config.worldbank_base_url).rstrip('/')
        self._iso2_to_iso3 = ISO2_TO_ISO3 if iso2_to_iso3 is None else iso2_to_iso3
        self._client = client

    @property
    def name(self) -> str:
        return "World Bank"

    def area_code(self, area: str) -> str:
        return to_iso3(area, self._iso2_to_iso3)

    def build_url(self, request) -> str:
        country3 = self.area_code(request.area)
        path = f"{self._base_url}/country/{quote(country3, safe='')}/indicator/{quote(request.indicator, safe='.')}"

        start, end = period_year(request.start_period), period_year(request.end_period)
        date_range = None
        if start is not None or end is not None:
            date_range = f"{start if start is not None else 1960}:{end if end is not None else datetime.now().year}"

        return build_full_url(path, {
            'format': 'json',
            'date': date_range,
            'per_page': PER_PAGE,
        })

    async def fetch_series(self, request) -> FetchResult:
        country3 = self.area_code(request.area)
        url = self.build_url(request)
        body = await get_json(url, client=self._client)

        if isinstance(body, list) and body and isinstance(body[0], dict) and 'message' in body[0]:
            logger.info("[WorldBank] %s/%s: %s", country3, request.indicator, body[0].get('message'))

        points = parse_observations(body)
        return FetchResult(points=points, raw=body, url=url, key=f"{country3}.{request.indicator}")
