"""
Series Service - what a chart panel calls.

UI selection -> cache lookup -> (miss) resolver -> envelope -> cache store.

Also owns the application-level fallback between dataset families (a WEO
indicator DataMapper has nothing for gets one SDMX attempt before giving up)
and the "stale selection" rule: a panel that has moved on to another
selection discards results from the previous one.
"""

import logging
from typing import Dict, Mapping, Optional, Tuple

from cache import SeriesCache, series_cache, series_cache_key
from config import config
from sources.base import DatasetFamily
from sources.manager import source_manager
from .envelope import ResolutionResult, build_envelope, envelope_status, request_meta
from .models import DataRequest, ResolutionOutcome
from .resolver import Resolver

logger = logging.getLogger(__name__)

DEFAULT_FALLBACKS: Dict[DatasetFamily, DatasetFamily] = {
    DatasetFamily.DATAMAPPER: DatasetFamily.SDMX,
}


def merge_outcomes(first: ResolutionOutcome, second: ResolutionOutcome) -> ResolutionOutcome:
    """The second outcome, carrying both attempt lists in call order."""
    return ResolutionOutcome(
        status=second.status,
        request=second.request,
        key=second.key,
        url=second.url,
        points=second.points,
        raw=second.raw if second.raw is not None else first.raw,
        attempts=first.attempts + second.attempts,
        variants_tried=first.variants_tried + second.variants_tried,
    )


class SeriesService:
    """Cache-fronted resolution with family fallback."""

    def __init__(
        self,
        resolver: Resolver,
        cache: SeriesCache,
        fallbacks: Optional[Mapping[DatasetFamily, DatasetFamily]] = None,
    ):
        self._resolver = resolver
        self._cache = cache
        if fallbacks is None:
            fallbacks = DEFAULT_FALLBACKS if config.enable_family_fallback else {}
        self._fallbacks = dict(fallbacks)

    @property
    def cache(self) -> SeriesCache:
        return self._cache

    def cached(self, request: DataRequest) -> Optional[ResolutionResult]:
        points = self._cache.get(series_cache_key(request))
        if points is None:
            return None
        meta = request_meta(request)
        meta.update({'status': 'success', 'cached': True, 'key': request.key, 'url': None})
        return ResolutionResult(meta=meta, data=points, raw=None, attempts=[])

    async def resolve(self, request: DataRequest) -> ResolutionOutcome:
        """Resolver, then one fallback family if the first comes back empty."""
        outcome = await self._resolver.resolve(request)
        fallback = self._fallbacks.get(request.family)
        if outcome.succeeded or fallback is None:
            return outcome

        logger.info("[Series] %s %s exhausted on %s, falling back to %s",
                    request.flow_ref, request.key, request.family.value, fallback.value)
        second = await self._resolver.resolve(request.with_family(fallback))
        return merge_outcomes(outcome, second)

    async def load(self, request: DataRequest) -> Tuple[ResolutionResult, int]:
        """Envelope + HTTP-style status for a request, using the cache."""
        hit = self.cached(request)
        if hit is not None:
            return hit, 200

        outcome = await self.resolve(request)
        envelope = build_envelope(request, outcome)
        if outcome.succeeded:
            self._cache.set(series_cache_key(request), outcome.points)
        return envelope, envelope_status(outcome)


class SeriesPanel:
    """
    One chart panel. Each select() supersedes the one before it; a load that
    finishes after being superseded returns None and stores nothing.
    """

    def __init__(self, service: SeriesService):
        self._service = service
        self._generation = 0
        self.current: Optional[ResolutionResult] = None

    async def select(self, request: DataRequest) -> Optional[ResolutionResult]:
        self._generation += 1
        generation = self._generation

        hit = self._service.cached(request)
        if hit is not None:
            self.current = hit
            return hit

        outcome = await self._service.resolve(request)
        if generation != self._generation:
            logger.debug("[Series] discarding superseded result for %s", request.key)
            return None

        envelope = build_envelope(request, outcome)
        if outcome.succeeded:
            self._service.cache.set(series_cache_key(request), outcome.points)
        self.current = envelope
        return envelope


# Global instances
resolver = Resolver(source_manager)
series_service = SeriesService(resolver, series_cache)
