from __future__ import annotations

import asyncio
from typing import Callable, Dict, List, Optional

import httpx

from sources.base import DataSource, FetchResult, SeriesPoint, TransportError


def run(coro):
    return asyncio.run(coro)


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def points(*pairs) -> List[SeriesPoint]:
    return [SeriesPoint(date=d, value=v) for d, v in pairs]


class ScriptedSource(DataSource):
    """Answers fetch_series by key from a script; records every call.

    Script values: a list of points, or an Exception instance to raise.
    Keys missing from the script answer with no points.
    """

    def __init__(self, script: Optional[Dict[str, object]] = None, name: str = "Scripted"):
        self._script = dict(script or {})
        self._name = name
        self.calls: List[str] = []

    @property
    def name(self) -> str:
        return self._name

    def build_url(self, request) -> str:
        return f"https://upstream.test/{request.flow_ref}/{request.key}"

    async def fetch_series(self, request) -> FetchResult:
        self.calls.append(request.key)
        url = self.build_url(request)
        answer = self._script.get(request.key, [])
        if isinstance(answer, Exception):
            raise answer
        return FetchResult(points=list(answer), raw={"key": request.key}, url=url, key=request.key)


def transport_error(key: str, status: int = 500) -> TransportError:
    return TransportError(f"https://upstream.test/IFS/{key}", "upstream unavailable", status_code=status)
