# =============================================================================
# tests/test_api_client.py - API Client Tests
# =============================================================================
# Runs SkillSwapAPIClient against an httpx.MockTransport so no network
# is needed. Covers error decoding, the GET cache and invalidation
# after writes.
# =============================================================================

import asyncio

import httpx
import pytest

from lib.api_client import FetchError, SkillSwapAPIClient


class Recorder:
    """MockTransport handler that records requests and replies from a table."""

    def __init__(self, routes=None):
        self.requests: list[httpx.Request] = []
        self.routes = routes or {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        status, body = self.routes.get(key, (200, {"ok": True, "n": len(self.requests)}))
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def paths(self, method="GET"):
        return [r.url.path for r in self.requests if r.method == method]


def make_client(recorder: Recorder, **kwargs) -> SkillSwapAPIClient:
    return SkillSwapAPIClient(
        "https://skillswap.test/",
        transport=httpx.MockTransport(recorder),
        **kwargs,
    )


class TestRequests:
    """Headers and error handling."""

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self):
        recorder = Recorder()
        async with make_client(recorder, access_token="jwt-123") as api:
            await api.request_json("GET", "/api/health")

        assert recorder.requests[0].headers["authorization"] == "Bearer jwt-123"
        assert api.base_url == "https://skillswap.test"

    @pytest.mark.asyncio
    async def test_non_2xx_raises_fetch_error_with_body(self):
        recorder = Recorder({
            ("GET", "/api/users"): (400, {"detail": "Search query must be at least 2 characters"}),
        })
        async with make_client(recorder) as api:
            with pytest.raises(FetchError) as exc_info:
                await api.search_users("j")

        assert exc_info.value.status == 400
        assert "at least 2 characters" in exc_info.value.info["detail"]

    @pytest.mark.asyncio
    async def test_non_json_error_body_kept_as_text(self):
        recorder = Recorder({("GET", "/api/health"): (502, "Bad Gateway")})
        async with make_client(recorder) as api:
            with pytest.raises(FetchError) as exc_info:
                await api.health()

        assert exc_info.value.info == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_204_returns_none(self):
        def handler(request):
            return httpx.Response(204)

        async with SkillSwapAPIClient("https://skillswap.test", transport=httpx.MockTransport(handler)) as api:
            assert await api.request_json("DELETE", "/api/skills/1") is None


class TestCaching:
    """GETs go through the SWR cache."""

    @pytest.mark.asyncio
    async def test_repeated_search_served_from_cache(self):
        recorder = Recorder()
        async with make_client(recorder) as api:
            first = await api.search_users("jo")
            second = await api.search_users("jo")

        assert first == second
        assert recorder.paths() == ["/api/users"]

    @pytest.mark.asyncio
    async def test_cache_key_ignores_param_order_and_none(self):
        recorder = Recorder()
        async with make_client(recorder) as api:
            await api.cached_get("/api/skills", {"limit": 5, "category": None, "offset": 0})
            await api.cached_get("/api/skills", {"offset": 0, "limit": 5})

            assert api.cache.peek("/api/skills?limit=5&offset=0") is not None

        assert len(recorder.requests) == 1
        assert "category" not in str(recorder.requests[0].url)

    @pytest.mark.asyncio
    async def test_different_queries_are_separate_entries(self):
        recorder = Recorder()
        async with make_client(recorder) as api:
            await api.search_users("jo")
            await api.search_users("ma")

        assert len(recorder.requests) == 2


class TestWrites:
    """Writes drop the cached reads they affect."""

    @pytest.mark.asyncio
    async def test_create_trade_invalidates_trade_lists(self):
        recorder = Recorder()
        async with make_client(recorder) as api:
            await api.list_trades()
            await api.create_trade("user-2", message="Swap?")
            await api.list_trades()

        assert recorder.paths("GET") == ["/api/trades", "/api/trades"]
        assert recorder.paths("POST") == ["/api/trades"]

    @pytest.mark.asyncio
    async def test_send_message_invalidates_only_that_thread(self):
        recorder = Recorder()
        async with make_client(recorder) as api:
            await api.list_messages("t1")
            await api.list_messages("t2")
            await api.send_message("t1", "hello")
            await api.list_messages("t1")
            await api.list_messages("t2")

        assert recorder.paths("GET") == [
            "/api/trades/t1/messages",
            "/api/trades/t2/messages",
            "/api/trades/t1/messages",
        ]

    @pytest.mark.asyncio
    async def test_failed_write_keeps_cache(self):
        recorder = Recorder({("PATCH", "/api/trades/t1"): (409, {"detail": "Cannot change"})})
        async with make_client(recorder) as api:
            await api.list_trades()
            with pytest.raises(FetchError):
                await api.update_trade_status("t1", "completed")

            assert api.cache.peek("/api/trades") is not None


class TestDebouncedSearch:
    """Type-ahead search only sends the last query."""

    @pytest.mark.asyncio
    async def test_only_last_keystroke_is_sent(self):
        recorder = Recorder()
        async with make_client(recorder) as api:
            search = api.debounced_search(wait=0.01)
            search("j")
            search("jo")
            result = await search("joa")

        assert len(recorder.requests) == 1
        assert recorder.requests[0].url.params["q"] == "joa"
        assert result["ok"] is True

    @pytest.mark.asyncio
    async def test_cancelled_search_never_sent(self):
        recorder = Recorder()
        async with make_client(recorder) as api:
            search = api.debounced_search(wait=0.01)
            search("jo")
            search.cancel()
            await asyncio.sleep(0.03)

        assert recorder.requests == []
