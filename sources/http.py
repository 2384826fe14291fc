"""
Shared HTTP plumbing for upstream sources.

One pooled httpx.AsyncClient per process; adapters may be handed their own
client instead (tests inject one backed by httpx.MockTransport).
"""

import logging
from typing import Any, Dict, Optional

import httpx

from config import config
from .base import TransportError

logger = logging.getLogger(__name__)


# Module-level connection pool for HTTP connection reuse
_async_client: Optional[httpx.AsyncClient] = None


def get_async_client() -> httpx.AsyncClient:
    """Get or create the shared async HTTP client with connection pooling."""
    global _async_client
    if _async_client is None or _async_client.is_closed:
        _async_client = httpx.AsyncClient(
            timeout=config.http_timeout,
            follow_redirects=True,
            limits=httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
                keepalive_expiry=30.0
            )
        )
    return _async_client


async def close_async_client() -> None:
    """Close the shared client (application shutdown)."""
    global _async_client
    if _async_client is not None and not _async_client.is_closed:
        await _async_client.aclose()
    _async_client = None


def build_full_url(url: str, params: Optional[Dict[str, Any]] = None) -> str:
    """URL exactly as it will be requested, for attempt logs."""
    clean = {k: v for k, v in (params or {}).items() if v not in (None, '')}
    return str(httpx.URL(url, params=clean)) if clean else url


async def get_json(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """
    GET a URL and decode JSON.

    Raises:
        TransportError: on network errors, non-2xx statuses or a body that is not JSON
    """
    client = client or get_async_client()
    try:
        resp = await client.get(url, headers=headers)
    except httpx.TimeoutException:
        raise TransportError(url, "Timeout reaching upstream")
    except httpx.HTTPError as e:
        raise TransportError(url, f"{type(e).__name__}: {e}")

    if resp.status_code >= 400:
        raise TransportError(url, resp.text[:200] or resp.reason_phrase, status_code=resp.status_code)

    try:
        return resp.json()
    except ValueError:
        content_type = resp.headers.get('content-type', 'unknown')
        raise TransportError(url, f"Response is not JSON (content-type: {content_type})", status_code=resp.status_code)
