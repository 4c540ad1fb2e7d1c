# =============================================================================
# tests/test_utils.py - Shared Utility Tests
# =============================================================================

import asyncio
from uuid import UUID

import pytest

from lib.utils import Debounced, build_ilike_filter, debounce, normalize_uuid


class TestNormalizeUuid:

    def test_uuid_object(self):
        value = UUID("11111111-1111-4111-8111-111111111111")
        assert normalize_uuid(value) == "11111111-1111-4111-8111-111111111111"

    def test_string_passes_through(self):
        assert normalize_uuid("abc") == "abc"


class TestBuildIlikeFilter:
    """PostgREST OR filters for substring search."""

    def test_one_clause_per_column(self):
        assert build_ilike_filter(["full_name", "email"], "jo") == (
            "full_name.ilike.%jo%,email.ilike.%jo%"
        )

    def test_strips_filter_grammar_characters(self):
        """Commas and parentheses would split or nest the OR expression."""
        result = build_ilike_filter(["full_name"], "jo,(x)")

        assert result == "full_name.ilike.%jox%"


class TestDebounce:
    """Only the last call in a burst runs."""

    @pytest.mark.asyncio
    async def test_last_call_wins(self):
        calls = []
        debounced = Debounced(calls.append, 0.01)

        debounced("a")
        debounced("b")
        await debounced("c")

        assert calls == ["c"]

    @pytest.mark.asyncio
    async def test_async_function_result_is_returned(self):
        @debounce(0.01)
        async def double(x):
            return x * 2

        double(1)
        assert await double(21) == 42

    @pytest.mark.asyncio
    async def test_earlier_task_is_cancelled(self):
        debounced = Debounced(lambda: None, 0.01)

        first = debounced()
        second = debounced()
        await second

        assert first.cancelled()

    @pytest.mark.asyncio
    async def test_pending_and_cancel(self):
        calls = []
        debounced = Debounced(calls.append, 0.01)

        debounced("x")
        assert debounced.pending
        debounced.cancel()
        await asyncio.sleep(0.03)

        assert not debounced.pending
        assert calls == []

    def test_keeps_wrapped_name(self):
        def search_users():
            pass

        assert Debounced(search_users, 0.1).__name__ == "search_users"
