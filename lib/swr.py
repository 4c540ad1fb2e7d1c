# =============================================================================
# lib/swr.py - Stale-While-Revalidate Cache
# =============================================================================
# Client-side read cache for API responses.
#
# Behaviour per key:
# - fresh (younger than deduping_interval): served from cache, no request
# - stale: served from cache immediately, refreshed in the background
# - missing: fetched (with retries), stored, returned
# - concurrent requests for the same key share one in-flight fetch
# - if a fetch fails and the cached copy is younger than offline_max_age,
#   the cached copy is served instead of raising
#
# There is no eviction policy and no size bound.
#
# Usage:
#   cache = SWRCache()
#   users = await cache.get("/api/users?q=jo", fetch_users, CACHE_PROFILES["REGULAR"])
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]
ErrorHook = Callable[[BaseException, str], None]

DAY = 24 * 60 * 60


# =============================================================================
# Offline Max Ages (seconds)
# =============================================================================
# How long cached data of each kind may be served when the network fails.

OFFLINE_MAX_AGE: dict[str, float] = {
    "USER_PROFILE": 7 * DAY,
    "SKILLS_CATALOG": 30 * DAY,
    "CONVERSATIONS": 14 * DAY,
    "MATCHES": 7 * DAY,
    "DEFAULT": 1 * DAY,
}


# =============================================================================
# Configuration
# =============================================================================

@dataclass(frozen=True)
class SWRConfig:
    """
    Revalidation and retry policy for one cache key.

    All durations are in seconds.
    """

    revalidate_on_focus: bool = True
    revalidate_on_reconnect: bool = True
    # 0 disables polling
    refresh_interval: float = 0.0
    deduping_interval: float = 300.0
    keep_previous_data: bool = True
    should_retry_on_error: bool = True
    error_retry_count: int = 3
    error_retry_interval: float = 5.0
    offline_max_age: float = OFFLINE_MAX_AGE["DEFAULT"]

    def merge(self, **overrides: Any) -> "SWRConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)

    @property
    def max_attempts(self) -> int:
        """Total fetch attempts, including the first one."""
        if not self.should_retry_on_error:
            return 1
        return 1 + max(0, self.error_retry_count)


SWR_DEFAULT_CONFIG = SWRConfig()

# Named profiles for the different kinds of data the app reads
CACHE_PROFILES: dict[str, SWRConfig] = {
    # Data that rarely changes
    "STATIC": SWR_DEFAULT_CONFIG.merge(
        deduping_interval=3600.0,
        revalidate_on_focus=False,
        revalidate_on_reconnect=False,
        offline_max_age=OFFLINE_MAX_AGE["SKILLS_CATALOG"],
    ),
    # Data that changes occasionally
    "REGULAR": SWR_DEFAULT_CONFIG.merge(
        deduping_interval=60.0,
    ),
    # Data that changes frequently
    "REALTIME": SWR_DEFAULT_CONFIG.merge(
        deduping_interval=5.0,
        refresh_interval=15.0,
        offline_max_age=OFFLINE_MAX_AGE["CONVERSATIONS"],
    ),
    # Data that must be fresh
    "CRITICAL": SWR_DEFAULT_CONFIG.merge(
        deduping_interval=2.0,
        refresh_interval=10.0,
        error_retry_count=5,
    ),
    "USER_PROFILE": SWR_DEFAULT_CONFIG.merge(
        deduping_interval=300.0,
        error_retry_count=3,
        offline_max_age=OFFLINE_MAX_AGE["USER_PROFILE"],
    ),
    # Public data that can be cached aggressively
    "PUBLIC": SWR_DEFAULT_CONFIG.merge(
        deduping_interval=12 * 3600.0,
        revalidate_on_focus=False,
        revalidate_on_reconnect=False,
    ),
    "NOTIFICATIONS": SWR_DEFAULT_CONFIG.merge(
        deduping_interval=10.0,
        refresh_interval=30.0,
        error_retry_count=3,
    ),
}


# =============================================================================
# Cache
# =============================================================================

@dataclass
class CacheEntry:
    """One cached response plus what's needed to refresh it."""

    data: Any
    timestamp: float
    fetcher: Fetcher
    config: SWRConfig


class SWRCache:
    """
    Stale-while-revalidate cache keyed by request key (usually a URL).

    Must be used from inside a running event loop. Call `close()` to
    stop pollers and background refreshes.
    """

    def __init__(
        self,
        config: SWRConfig = SWR_DEFAULT_CONFIG,
        on_error: ErrorHook | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.on_error = on_error
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self._background: set[asyncio.Task] = set()
        self._pollers: dict[str, asyncio.Task] = {}
        # Bumped on invalidate; fetches started under an older generation
        # never write to the cache
        self._generations: dict[str, int] = {}

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get(
        self,
        key: str,
        fetcher: Fetcher,
        config: SWRConfig | None = None,
    ) -> Any:
        """
        Return data for `key`, fetching or revalidating as the config says.

        Raises:
            Whatever the fetcher raised on its last attempt, when there is
            no cached copy young enough to fall back to.
        """
        config = config or self.config
        entry = self._entries.get(key)

        if config.refresh_interval > 0 and key not in self._pollers:
            self._start_poller(key, fetcher, config)

        if entry is not None:
            age = self._clock() - entry.timestamp
            if age < config.deduping_interval:
                logger.debug(f"SWR hit: {key} (age: {age:.1f}s)")
                return entry.data

            if config.keep_previous_data:
                logger.debug(f"SWR stale: {key} (age: {age:.1f}s), revalidating")
                self._schedule_revalidation(key, fetcher, config)
                return entry.data

        logger.debug(f"SWR miss: {key}")
        return await asyncio.shield(self._start_fetch(key, fetcher, config))

    def peek(self, key: str) -> Any | None:
        """Return cached data for `key` without fetching, or None."""
        entry = self._entries.get(key)
        return entry.data if entry is not None else None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def mutate(self, key: str, data: Any) -> None:
        """
        Replace cached data for `key` (optimistic update).

        The entry keeps its fetcher and config so later revalidation
        still works; an unknown key is ignored.
        """
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"SWR mutate ignored for unknown key: {key}")
            return
        self._entries[key] = replace(entry, data=data, timestamp=self._clock())

    def invalidate(self, prefix: str = "") -> int:
        """
        Drop every entry whose key starts with `prefix`.

        In-flight fetches and pollers for matching keys are detached too,
        so the next `get` starts a new fetch and an older fetch that
        finishes later cannot store its result.

        Returns:
            Number of entries removed
        """
        keys = [k for k in self._entries if k.startswith(prefix)]
        for key in keys:
            del self._entries[key]

        for key in [k for k in self._inflight if k.startswith(prefix)]:
            del self._inflight[key]
            self._generations[key] = self._generations.get(key, 0) + 1

        for key in [k for k in self._pollers if k.startswith(prefix)]:
            self._pollers.pop(key).cancel()

        if keys:
            logger.debug(f"SWR invalidated {len(keys)} entries with prefix: {prefix!r}")
        return len(keys)

    def clear(self) -> None:
        """Drop all entries."""
        self.invalidate("")

    # -------------------------------------------------------------------------
    # Revalidation Triggers
    # -------------------------------------------------------------------------

    def revalidate_on_focus(self) -> int:
        """Refresh every entry whose config asks for it when the app regains focus."""
        return self._revalidate_where(lambda cfg: cfg.revalidate_on_focus)

    def revalidate_on_reconnect(self) -> int:
        """Refresh every entry whose config asks for it when the network returns."""
        return self._revalidate_where(lambda cfg: cfg.revalidate_on_reconnect)

    def _revalidate_where(self, predicate: Callable[[SWRConfig], bool]) -> int:
        count = 0
        for key, entry in list(self._entries.items()):
            if predicate(entry.config):
                self._schedule_revalidation(key, entry.fetcher, entry.config)
                count += 1
        return count

    # -------------------------------------------------------------------------
    # Introspection / Shutdown
    # -------------------------------------------------------------------------

    def stats(self) -> dict[str, int]:
        """Cache statistics for debugging."""
        now = self._clock()
        fresh = sum(
            1 for e in self._entries.values()
            if now - e.timestamp < e.config.deduping_interval
        )
        return {
            "total": len(self._entries),
            "fresh": fresh,
            "stale": len(self._entries) - fresh,
            "inflight": len(self._inflight),
        }

    async def close(self) -> None:
        """Cancel pollers and background refreshes."""
        tasks = list(self._pollers.values()) + list(self._background)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._pollers.clear()
        self._background.clear()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _start_fetch(self, key: str, fetcher: Fetcher, config: SWRConfig) -> asyncio.Task:
        task = self._inflight.get(key)
        if task is None:
            generation = self._generations.get(key, 0)
            task = asyncio.ensure_future(self._fetch_and_store(key, fetcher, config, generation))
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._clear_inflight(k, t))
        return task

    def _clear_inflight(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def _fetch_and_store(
        self,
        key: str,
        fetcher: Fetcher,
        config: SWRConfig,
        generation: int = 0,
    ) -> Any:
        last_error: BaseException | None = None

        for attempt in range(1, config.max_attempts + 1):
            try:
                data = await fetcher()
            except Exception as e:
                last_error = e
                if attempt < config.max_attempts:
                    logger.warning(
                        f"SWR fetch failed for {key} (attempt {attempt}/{config.max_attempts}): {e}"
                    )
                    await asyncio.sleep(config.error_retry_interval)
                continue

            if self._generations.get(key, 0) != generation:
                logger.debug(f"SWR dropping result for invalidated key: {key}")
                return data

            self._entries[key] = CacheEntry(
                data=data,
                timestamp=self._clock(),
                fetcher=fetcher,
                config=config,
            )
            return data

        logger.error(f"SWR fetch failed for {key} after {config.max_attempts} attempts: {last_error}")
        if self.on_error is not None:
            self.on_error(last_error, key)

        entry = self._entries.get(key)
        if entry is not None and self._clock() - entry.timestamp <= config.offline_max_age:
            logger.info(f"SWR serving cached data for {key} while offline")
            return entry.data

        raise last_error

    def _schedule_revalidation(self, key: str, fetcher: Fetcher, config: SWRConfig) -> None:
        if key in self._inflight:
            return
        task = asyncio.ensure_future(self._revalidate(key, fetcher, config))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _revalidate(self, key: str, fetcher: Fetcher, config: SWRConfig) -> None:
        try:
            await self._start_fetch(key, fetcher, config)
        except Exception as e:
            logger.warning(f"SWR background revalidation failed for {key}: {e}")

    def _start_poller(self, key: str, fetcher: Fetcher, config: SWRConfig) -> None:
        async def poll() -> None:
            while True:
                await asyncio.sleep(config.refresh_interval)
                await self._revalidate(key, fetcher, config)

        self._pollers[key] = asyncio.ensure_future(poll())
