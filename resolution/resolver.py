"""
Resolution Orchestrator.

Given a DataRequest, pick the source for its dataset family and drive it:

- SDMX: walk the key variants in order, one request at a time, and stop at
  the first non-empty result. A transport error on one variant is logged as
  a failed attempt and the next variant is tried.
- DataMapper / World Bank: a single call with translated codes.

Exhaustion is a normal outcome, not an exception. Attempts run strictly
sequentially so each resolution has at most one request in flight.
"""

import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Tuple, TypeVar, TYPE_CHECKING

from sources.base import DatasetFamily, FetchResult, TransportError
from .models import AttemptLog, DataRequest, ResolutionOutcome, ResolutionStatus
from .variants import generate_variants

if TYPE_CHECKING:
    from sources.manager import SourceManager

logger = logging.getLogger(__name__)

T = TypeVar('T')


async def first_non_empty(
    candidates: Iterable[T],
    attempt: Callable[[T], Awaitable[Optional[FetchResult]]],
) -> Tuple[Optional[T], Optional[FetchResult], int]:
    """
    Try candidates in order until one yields a non-empty FetchResult.

    `attempt` returns None for a failed call. Candidates after the winner
    are never touched.

    Returns:
        (winning candidate, its result, number of candidates tried); the
        first two are None when the candidates ran out.
    """
    tried = 0
    for candidate in candidates:
        tried += 1
        result = await attempt(candidate)
        if result is not None and not result.is_empty:
            return candidate, result, tried
    return None, None, tried


class Resolver:
    """Turns a DataRequest into a ResolutionOutcome."""

    def __init__(
        self,
        manager: "SourceManager",
        variant_generator: Callable[[str], List[str]] = generate_variants,
    ):
        self._manager = manager
        self._variants = variant_generator

    async def resolve(self, request: DataRequest) -> ResolutionOutcome:
        if request.family is DatasetFamily.SDMX:
            return await self._resolve_sdmx(request)
        return await self._resolve_direct(request)

    async def _call(self, source, request: DataRequest, attempts: List[AttemptLog],
                    last_raw: List[Any]) -> Optional[FetchResult]:
        """One adapter call; appends exactly one AttemptLog."""
        try:
            result = await source.fetch_series(request)
        except TransportError as e:
            logger.warning("[Resolver] %s %s failed: %s", source.name, e.url, e)
            attempts.append(AttemptLog(url=e.url or source.build_url(request), success=False, error=str(e)))
            return None

        count = len(result.points)
        logger.info("[Resolver] %s %s -> %d points", source.name, result.url, count)
        attempts.append(AttemptLog(url=result.url, success=True, data_points=count))
        last_raw[:] = [result.raw]
        return result

    async def _resolve_sdmx(self, request: DataRequest) -> ResolutionOutcome:
        source = self._manager.get_source(DatasetFamily.SDMX)
        attempts: List[AttemptLog] = []
        last_raw: List[Any] = []

        async def attempt(key: str) -> Optional[FetchResult]:
            return await self._call(source, request.with_key(key), attempts, last_raw)

        key, result, tried = await first_non_empty(self._variants(request.key), attempt)
        return self._outcome(request, key, result, attempts, last_raw, tried)

    async def _resolve_direct(self, request: DataRequest) -> ResolutionOutcome:
        source = self._manager.get_source(request.family)
        attempts: List[AttemptLog] = []
        last_raw: List[Any] = []

        result = await self._call(source, request, attempts, last_raw)
        if result is not None and not result.is_empty:
            return self._outcome(request, result.key, result, attempts, last_raw, 1)
        return self._outcome(request, None, None, attempts, last_raw, 1)

    @staticmethod
    def _outcome(request: DataRequest, key: Optional[str], result: Optional[FetchResult],
                 attempts: List[AttemptLog], last_raw: List[Any], tried: int) -> ResolutionOutcome:
        if result is not None:
            return ResolutionOutcome(
                status=ResolutionStatus.SUCCESS,
                request=request,
                key=result.key or key or request.key,
                url=result.url,
                points=list(result.points),
                raw=result.raw,
                attempts=attempts,
                variants_tried=tried,
            )

        logger.info("[Resolver] %s %s exhausted after %d attempt(s)",
                    request.flow_ref, request.key, len(attempts))
        return ResolutionOutcome(
            status=ResolutionStatus.EXHAUSTED,
            request=request,
            key=request.key,
            url=attempts[-1].url if attempts else None,
            points=[],
            raw=last_raw[0] if last_raw else None,
            attempts=attempts,
            variants_tried=tried,
        )
