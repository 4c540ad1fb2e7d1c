# =============================================================================
# lib/api_client.py - SkillSwap API Client
# =============================================================================
# Async HTTP client for the SkillSwap API with a stale-while-revalidate
# read cache in front of every GET.
#
# Usage:
#   async with SkillSwapAPIClient("https://skillswap.app", access_token=jwt) as api:
#       page = await api.search_users("jo", limit=10)
#       trade = await api.create_trade(recipient_id, offered_skill_id, requested_skill_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from lib.swr import CACHE_PROFILES, SWRCache, SWRConfig
from lib.utils import Debounced

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """
    Raised when the API answers with a non-2xx status.

    Attributes:
        status: HTTP status code
        info: Parsed JSON error body, or the raw text if it isn't JSON
    """

    def __init__(self, message: str, status: int, info: Any = None):
        super().__init__(message)
        self.status = status
        self.info = info


def _report_fetch_error(exc: BaseException, key: str) -> None:
    """Forward cache fetch failures to Sentry."""
    from lib.monitoring import report_exception

    report_exception(exc, source="swr", key=key)


class SkillSwapAPIClient:
    """Async client for the SkillSwap HTTP API."""

    def __init__(
        self,
        base_url: str,
        access_token: str | None = None,
        timeout: float = 30.0,
        cache: SWRCache | None = None,
        report_errors: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.cache = cache or SWRCache(on_error=_report_fetch_error if report_errors else None)

        headers = {
            "User-Agent": "skillswap-client/1.0.0",
            "Accept": "application/json",
        }
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers=headers,
            transport=transport,
        )

        logger.info(f"SkillSwap API client initialized for {self.base_url}")

    async def __aenter__(self) -> "SkillSwapAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Stop cache background work and close the HTTP client."""
        await self.cache.close()
        await self.client.aclose()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Send a request and decode the JSON body.

        Returns:
            Decoded JSON, or None for 204 responses

        Raises:
            FetchError: On non-2xx responses
            httpx.RequestError: On connection failures
        """
        response = await self.client.request(method, path, **kwargs)

        if response.is_error:
            try:
                info = response.json()
            except ValueError:
                info = response.text
            raise FetchError(
                f"API error: {response.status_code} {response.reason_phrase}",
                response.status_code,
                info,
            )

        if response.status_code == 204:
            return None

        return response.json()

    async def cached_get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        config: SWRConfig | None = None,
    ) -> Any:
        """GET through the SWR cache, keyed by path plus sorted query string."""
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        key = f"{path}?{urlencode(sorted(clean.items()))}" if clean else path

        async def fetcher() -> Any:
            return await self.request_json("GET", path, params=clean)

        return await self.cache.get(key, fetcher, config)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def health(self) -> Any:
        """Fetch the health payload (a 503 raises FetchError with the payload as info)."""
        return await self.request_json("GET", "/api/health")

    async def search_users(self, query: str, limit: int = 10, offset: int = 0) -> dict[str, Any]:
        """Search users by name or email."""
        return await self.cached_get(
            "/api/users",
            {"q": query, "limit": limit, "offset": offset},
            CACHE_PROFILES["REGULAR"],
        )

    def debounced_search(self, wait: float = 0.3) -> Debounced:
        """
        Return a debounced `search_users` for type-ahead inputs.

        Call `.cancel()` on the result when the input goes away.
        """
        return Debounced(self.search_users, wait)

    async def get_user(self, user_id: str) -> dict[str, Any]:
        return await self.cached_get(f"/api/users/{user_id}", config=CACHE_PROFILES["USER_PROFILE"])

    async def list_skills(
        self,
        category: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> dict[str, Any]:
        return await self.cached_get(
            "/api/skills",
            {"category": category, "search": search, "limit": limit, "offset": offset},
            CACHE_PROFILES["STATIC"],
        )

    async def list_user_skills(self, user_id: str | None = None, skill_type: str | None = None) -> dict[str, Any]:
        return await self.cached_get(
            "/api/user-skills",
            {"user_id": user_id, "type": skill_type},
            CACHE_PROFILES["REGULAR"],
        )

    async def get_matches(self, limit: int = 20, sort_by: str = "score") -> dict[str, Any]:
        return await self.cached_get(
            "/api/matches",
            {"limit": limit, "sort_by": sort_by},
            CACHE_PROFILES["REGULAR"].merge(offline_max_age=CACHE_PROFILES["USER_PROFILE"].offline_max_age),
        )

    async def list_trades(self, status: str | None = None) -> dict[str, Any]:
        return await self.cached_get("/api/trades", {"status": status}, CACHE_PROFILES["REALTIME"])

    async def list_messages(self, trade_id: str) -> dict[str, Any]:
        return await self.cached_get(f"/api/trades/{trade_id}/messages", config=CACHE_PROFILES["REALTIME"])

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    # Writes are not retried; affected cache entries are dropped on success.

    async def create_trade(
        self,
        recipient_id: str,
        offered_skill_id: str | None = None,
        requested_skill_id: str | None = None,
        message: str | None = None,
    ) -> dict[str, Any]:
        payload = {
            "recipient_id": recipient_id,
            "offered_skill_id": offered_skill_id,
            "requested_skill_id": requested_skill_id,
            "message": message,
        }
        result = await self.request_json("POST", "/api/trades", json=payload)
        self.cache.invalidate("/api/trades")
        return result

    async def update_trade_status(self, trade_id: str, status: str) -> dict[str, Any]:
        result = await self.request_json("PATCH", f"/api/trades/{trade_id}", json={"status": status})
        self.cache.invalidate("/api/trades")
        return result

    async def send_message(self, trade_id: str, content: str) -> dict[str, Any]:
        result = await self.request_json(
            "POST", f"/api/trades/{trade_id}/messages", json={"content": content}
        )
        self.cache.invalidate(f"/api/trades/{trade_id}/messages")
        return result

    def __repr__(self) -> str:
        return f"SkillSwapAPIClient(base_url='{self.base_url}')"
