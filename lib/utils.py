# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from __future__ import annotations

import asyncio
import functools
import inspect
from typing import Any, Awaitable, Callable
from uuid import UUID

# Characters that split or group PostgREST `or=(...)` filter expressions
_POSTGREST_RESERVED = str.maketrans("", "", ",()")


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Query Helpers
# =============================================================================

def build_ilike_filter(columns: list[str], term: str) -> str:
    """
    Build a PostgREST OR filter matching `term` anywhere in any column.

    Matching is case-insensitive. Characters that would break the
    filter grammar are dropped from the term.

    Example:
        build_ilike_filter(["full_name", "email"], "jo")
        # "full_name.ilike.%jo%,email.ilike.%jo%"
    """
    cleaned = term.translate(_POSTGREST_RESERVED)
    pattern = f"%{cleaned}%"
    return ",".join(f"{column}.ilike.{pattern}" for column in columns)


# =============================================================================
# Debounce
# =============================================================================

class Debounced:
    """
    Wraps a callable so that only the last call in a burst runs.

    Each call cancels the pending one and schedules a new run after
    `wait` seconds. Returns the asyncio task for the scheduled run, so
    callers can await the result of the call that wins.

    Must be called from inside a running event loop.
    """

    def __init__(self, func: Callable[..., Any], wait: float):
        self._func = func
        self._wait = wait
        self._task: asyncio.Task | None = None
        functools.update_wrapper(self, func)

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Task:
        self.cancel()
        self._task = asyncio.ensure_future(self._run(args, kwargs))
        return self._task

    async def _run(self, args: tuple, kwargs: dict) -> Any:
        await asyncio.sleep(self._wait)
        result = self._func(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    @property
    def pending(self) -> bool:
        """True while a scheduled call hasn't run yet."""
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        """Cancel the pending call, if any (e.g. when the caller goes away)."""
        if self.pending:
            self._task.cancel()
        self._task = None


def debounce(wait: float) -> Callable[[Callable[..., Any | Awaitable[Any]]], Debounced]:
    """
    Decorator form of Debounced.

    Example:
        @debounce(0.3)
        async def search(term):
            return await api.search_users(term)

        search("j")
        task = search("jo")   # only this one hits the API
        result = await task
    """
    def decorator(func: Callable[..., Any]) -> Debounced:
        return Debounced(func, wait)
    return decorator
