"""Cache-fronted read path for the aggregated GitHub stats."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from portfolio_stats.config import Settings
from portfolio_stats.exceptions import ConfigurationError, StatsError
from portfolio_stats.models.schemas import ErrorPayload, StatsPayload
from portfolio_stats.services.aggregator import aggregate
from portfolio_stats.services.cache import SingleSlotCache, utcnow
from portfolio_stats.services.github_client import GitHubClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsLookup:
    """Payload served to one caller and whether it came from the cache."""

    payload: StatsPayload | ErrorPayload
    cached: bool


class StatsService:
    """
    Serve the configured account's stats through a single-slot cache.

    Concurrent misses share one in-flight refresh. Only successful payloads
    are written to the cache; a failed refresh leaves the previous entry,
    stale or not, exactly as it was.
    """

    def __init__(
        self,
        settings: Settings,
        github_client: GitHubClient,
        cache: SingleSlotCache[StatsPayload],
        clock: Callable[[], datetime] = utcnow,
    ):
        self._username = settings.github_username
        self._top_languages = settings.top_languages
        self._latest_limit = settings.latest_limit
        self._github_client = github_client
        self._cache = cache
        self._clock = clock
        self._inflight: asyncio.Task | None = None

    @property
    def cache(self) -> SingleSlotCache[StatsPayload]:
        return self._cache

    async def get_or_refresh(self, now: datetime | None = None) -> StatsPayload | ErrorPayload:
        """Return the cached payload if fresh, otherwise refresh it."""
        lookup = await self.lookup(now)
        return lookup.payload

    async def lookup(self, now: datetime | None = None) -> StatsLookup:
        entry = await self._cache.get(now or self._clock())
        if entry is not None:
            logger.debug("Serving GitHub stats from cache")
            return StatsLookup(payload=entry.payload, cached=True)

        try:
            payload = await self._refresh_shared(now)
        except StatsError as exc:
            logger.warning(f"GitHub stats refresh failed ({exc.error}): {exc}")
            return StatsLookup(
                payload=ErrorPayload(error=exc.error, detail=exc.detail),
                cached=False,
            )
        return StatsLookup(payload=payload, cached=False)

    async def _refresh_shared(self, now: datetime | None = None) -> StatsPayload:
        """Join the running refresh or start one."""
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._refresh(now))
            self._inflight.add_done_callback(self._clear_inflight)
        return await asyncio.shield(self._inflight)

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None
        # Every waiter may have been cancelled; mark the outcome as seen
        if not task.cancelled():
            task.exception()

    async def _refresh(self, now: datetime | None = None) -> StatsPayload:
        """Fetch and aggregate; the entry is stamped with `now` or, if absent, the completion time."""
        if not self._username:
            raise ConfigurationError("Missing GitHub username (set GITHUB_USERNAME)")

        profile, repositories = await self._github_client.fetch_account(self._username)
        payload = aggregate(
            profile,
            repositories,
            top_languages=self._top_languages,
            latest_limit=self._latest_limit,
        )
        await self._cache.set(payload, now or self._clock())
        logger.info(
            f"Refreshed GitHub stats for {self._username}: "
            f"{payload.repo_count} eligible of {len(repositories)} repositories"
        )
        return payload
