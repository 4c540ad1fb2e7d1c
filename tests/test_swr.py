# =============================================================================
# tests/test_swr.py - Stale-While-Revalidate Cache Tests
# =============================================================================
# This module contains tests for:
# - Fresh hits, stale-while-revalidate and misses
# - In-flight request sharing
# - Retries and the offline fallback
# - mutate / invalidate / focus + reconnect revalidation
#
# A hand-driven clock keeps the tests independent of wall time.
# =============================================================================

import asyncio

import pytest

from lib.swr import CACHE_PROFILES, OFFLINE_MAX_AGE, SWR_DEFAULT_CONFIG, SWRCache, SWRConfig

FAST = SWRConfig(deduping_interval=10.0, error_retry_interval=0.0)


class Clock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingFetcher:
    """Returns "v1", "v2", ...; can be told to fail a number of times first."""

    def __init__(self, failures: int = 0, delay: float = 0.0):
        self.calls = 0
        self.failures = failures
        self.delay = delay

    async def __call__(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("network down")
        return f"v{self.calls}"


async def settle():
    """Let background tasks run to completion."""
    for _ in range(5):
        await asyncio.sleep(0)


# =============================================================================
# Configuration
# =============================================================================

class TestConfig:
    """Defaults and named profiles."""

    def test_defaults(self):
        assert SWR_DEFAULT_CONFIG.revalidate_on_focus is True
        assert SWR_DEFAULT_CONFIG.revalidate_on_reconnect is True
        assert SWR_DEFAULT_CONFIG.refresh_interval == 0
        assert SWR_DEFAULT_CONFIG.deduping_interval == 300
        assert SWR_DEFAULT_CONFIG.keep_previous_data is True
        assert SWR_DEFAULT_CONFIG.error_retry_count == 3
        assert SWR_DEFAULT_CONFIG.error_retry_interval == 5
        assert SWR_DEFAULT_CONFIG.max_attempts == 4

    def test_profiles(self):
        assert set(CACHE_PROFILES) == {
            "STATIC", "REGULAR", "REALTIME", "CRITICAL", "USER_PROFILE", "PUBLIC", "NOTIFICATIONS",
        }
        assert CACHE_PROFILES["STATIC"].revalidate_on_focus is False
        assert CACHE_PROFILES["REALTIME"].refresh_interval > 0
        assert CACHE_PROFILES["CRITICAL"].error_retry_count == 5

    def test_no_retry_means_one_attempt(self):
        assert FAST.merge(should_retry_on_error=False).max_attempts == 1


# =============================================================================
# Reads
# =============================================================================

class TestGet:
    """Hit, stale and miss behaviour."""

    @pytest.mark.asyncio
    async def test_fresh_entry_does_not_refetch(self):
        clock = Clock()
        cache = SWRCache(FAST, clock=clock)
        fetcher = CountingFetcher()

        assert await cache.get("/a", fetcher) == "v1"
        clock.advance(5)
        assert await cache.get("/a", fetcher) == "v1"

        assert fetcher.calls == 1

    @pytest.mark.asyncio
    async def test_stale_entry_served_then_revalidated(self):
        clock = Clock()
        cache = SWRCache(FAST, clock=clock)
        fetcher = CountingFetcher()

        await cache.get("/a", fetcher)
        clock.advance(11)

        assert await cache.get("/a", fetcher) == "v1"
        await settle()
        assert fetcher.calls == 2
        assert cache.peek("/a") == "v2"

    @pytest.mark.asyncio
    async def test_stale_without_keep_previous_waits_for_fetch(self):
        clock = Clock()
        config = FAST.merge(keep_previous_data=False)
        cache = SWRCache(config, clock=clock)
        fetcher = CountingFetcher()

        await cache.get("/a", fetcher)
        clock.advance(11)

        assert await cache.get("/a", fetcher) == "v2"

    @pytest.mark.asyncio
    async def test_concurrent_requests_share_one_fetch(self):
        cache = SWRCache(FAST, clock=Clock())
        fetcher = CountingFetcher(delay=0.01)

        results = await asyncio.gather(*(cache.get("/a", fetcher) for _ in range(5)))

        assert results == ["v1"] * 5
        assert fetcher.calls == 1

    @pytest.mark.asyncio
    async def test_one_background_revalidation_per_key(self):
        clock = Clock()
        cache = SWRCache(FAST, clock=clock)
        fetcher = CountingFetcher()

        await cache.get("/a", fetcher)
        clock.advance(11)
        slow = CountingFetcher(delay=0.01)
        for _ in range(3):
            await cache.get("/a", slow)
        await asyncio.sleep(0.05)

        assert slow.calls == 1


# =============================================================================
# Errors
# =============================================================================

class TestErrors:
    """Retries, error hook and offline fallback."""

    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        cache = SWRCache(FAST, clock=Clock())
        fetcher = CountingFetcher(failures=2)

        assert await cache.get("/a", fetcher) == "v3"
        assert fetcher.calls == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_retry_count(self):
        errors = []
        cache = SWRCache(FAST, on_error=lambda exc, key: errors.append(key), clock=Clock())
        fetcher = CountingFetcher(failures=10)

        with pytest.raises(ConnectionError):
            await cache.get("/a", fetcher)

        assert fetcher.calls == 4
        assert errors == ["/a"]

    @pytest.mark.asyncio
    async def test_serves_cached_data_while_offline(self):
        clock = Clock()
        config = FAST.merge(keep_previous_data=False, offline_max_age=OFFLINE_MAX_AGE["DEFAULT"])
        cache = SWRCache(config, clock=clock)

        await cache.get("/a", CountingFetcher())
        clock.advance(60)

        assert await cache.get("/a", CountingFetcher(failures=10)) == "v1"

    @pytest.mark.asyncio
    async def test_too_old_for_offline_fallback(self):
        clock = Clock()
        config = FAST.merge(keep_previous_data=False, offline_max_age=30.0)
        cache = SWRCache(config, clock=clock)

        await cache.get("/a", CountingFetcher())
        clock.advance(60)

        with pytest.raises(ConnectionError):
            await cache.get("/a", CountingFetcher(failures=10))


# =============================================================================
# Writes & Triggers
# =============================================================================

class TestWritesAndTriggers:
    """mutate, invalidate, focus/reconnect, stats."""

    @pytest.mark.asyncio
    async def test_mutate_replaces_data(self):
        cache = SWRCache(FAST, clock=Clock())
        await cache.get("/a", CountingFetcher())

        cache.mutate("/a", "optimistic")

        assert cache.peek("/a") == "optimistic"

    @pytest.mark.asyncio
    async def test_mutate_unknown_key_is_ignored(self):
        cache = SWRCache(FAST, clock=Clock())

        cache.mutate("/nope", "x")

        assert cache.peek("/nope") is None

    @pytest.mark.asyncio
    async def test_invalidate_by_prefix(self):
        cache = SWRCache(FAST, clock=Clock())
        for key in ("/api/trades", "/api/trades/1/messages", "/api/users"):
            await cache.get(key, CountingFetcher())

        removed = cache.invalidate("/api/trades")

        assert removed == 2
        assert cache.peek("/api/users") == "v1"
        assert cache.peek("/api/trades") is None

    @pytest.mark.asyncio
    async def test_focus_revalidates_only_opted_in_entries(self):
        cache = SWRCache(FAST, clock=Clock())
        focus = CountingFetcher()
        no_focus = CountingFetcher()
        await cache.get("/focus", focus)
        await cache.get("/static", no_focus, FAST.merge(revalidate_on_focus=False))

        assert cache.revalidate_on_focus() == 1
        await settle()

        assert focus.calls == 2
        assert no_focus.calls == 1

    @pytest.mark.asyncio
    async def test_reconnect_revalidates(self):
        cache = SWRCache(FAST, clock=Clock())
        fetcher = CountingFetcher()
        await cache.get("/a", fetcher)

        assert cache.revalidate_on_reconnect() == 1
        await settle()

        assert cache.peek("/a") == "v2"

    @pytest.mark.asyncio
    async def test_stats(self):
        clock = Clock()
        cache = SWRCache(FAST, clock=clock)
        await cache.get("/old", CountingFetcher())
        clock.advance(11)
        await cache.get("/new", CountingFetcher())

        assert cache.stats() == {"total": 2, "fresh": 1, "stale": 1, "inflight": 0}

    @pytest.mark.asyncio
    async def test_refresh_interval_polls(self):
        cache = SWRCache(FAST.merge(refresh_interval=0.01), clock=Clock())
        fetcher = CountingFetcher()

        await cache.get("/poll", fetcher)
        await asyncio.sleep(0.05)
        await cache.close()

        assert fetcher.calls >= 2

    @pytest.mark.asyncio
    async def test_invalidate_detaches_inflight_fetch(self):
        cache = SWRCache(FAST, clock=Clock())
        server = {"trades": "before-write"}
        gate = asyncio.Event()

        async def slow_fetch():
            snapshot = server["trades"]
            await gate.wait()
            return snapshot

        async def fetch_now():
            return server["trades"]

        first = asyncio.ensure_future(cache.get("/api/trades", slow_fetch))
        await settle()
        server["trades"] = "after-write"
        cache.invalidate("/api/trades")

        assert await cache.get("/api/trades", fetch_now) == "after-write"

        gate.set()
        assert await first == "before-write"
        await settle()
        assert cache.peek("/api/trades") == "after-write"

    @pytest.mark.asyncio
    async def test_invalidate_stops_poller_after_failed_first_fetch(self):
        config = FAST.merge(refresh_interval=0.01, should_retry_on_error=False)
        cache = SWRCache(config, clock=Clock())
        fetcher = CountingFetcher(failures=100)

        with pytest.raises(ConnectionError):
            await cache.get("/poll", fetcher)
        cache.invalidate("/poll")
        calls = fetcher.calls
        await asyncio.sleep(0.05)

        assert fetcher.calls == calls
        await cache.close()
