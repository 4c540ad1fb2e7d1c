# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper around the hosted Supabase client.
# It implements the singleton pattern to reuse client connections and
# provides the few row-level helpers shared by every service:
# - Single-row fetch by primary key (None when missing)
# - Exact row counts for a filtered query
#
# Two clients are kept:
# - service client (service_role key): bypasses RLS, used server-side
# - anon client (anon key): RLS applies, used for public probes
# Password sign-up and sign-in each get a throwaway anon client.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   skill = SupabaseClient.fetch_row("skills", skill_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Callable
from uuid import UUID

from supabase import create_client, Client, ClientOptions

from app.config import settings
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Errors should tell HOW to fix, not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def is_not_found(error: Exception) -> bool:
    """Check whether a PostgREST error means "no rows matched"."""
    return NO_ROWS_CODE in str(error)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    All methods are class methods for easy access without instantiation.

    Example:
        client = SupabaseClient.get_client()
        rows = client.table("skills").select("*").eq("category", "music").execute()

        user = SupabaseClient.fetch_row("users", user_id)
    """

    _instance: Client | None = None
    _anon_instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton service-role Supabase client.

        Uses the service_role key which bypasses Row Level Security (RLS).
        Ownership checks are therefore done in the services.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase service client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def get_anon_client(cls) -> Client:
        """
        Get or create the singleton anon-key Supabase client.

        Used for public probes (health, sitemap),
        where the hosted RLS policies should apply.
        """
        if cls._anon_instance is None:
            try:
                cls._anon_instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_ANON_KEY
                )
                logger.info("Supabase anon client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase anon client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
                )
        return cls._anon_instance

    @classmethod
    def create_auth_client(cls) -> Client:
        """
        Create a fresh anon-key client for one sign-up or sign-in call.

        A signed-in supabase client switches its Authorization header to
        the user's token, so password auth never runs on the shared anon
        client. The session is neither persisted nor refreshed.
        """
        try:
            return create_client(
                settings.SUPABASE_URL,
                settings.SUPABASE_ANON_KEY,
                options=ClientOptions(persist_session=False, auto_refresh_token=False),
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    # -------------------------------------------------------------------------
    # Row Helpers
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_row(
        cls,
        table: str,
        row_id: str | UUID,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch a single row by primary key.

        Args:
            table: Table name
            row_id: The row's id
            columns: PostgREST select expression

        Returns:
            Row dict, or None if not found

        Raises:
            SupabaseClientError: If the query fails for any other reason
        """
        client = cls.get_client()
        row_id_str = normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq("id", row_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_not_found(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} row: {e}",
                code="FETCH_ROW_FAILED",
                suggestion=f"Check that the {table} table is accessible",
                details={"table": table, "id": row_id_str},
            )

    @classmethod
    def count_rows(
        cls,
        table: str,
        apply_filters: Callable[[Any], Any] | None = None,
    ) -> int:
        """
        Count rows in a table, optionally narrowed by a filter callback.

        The callback receives the query builder and returns it with
        filters applied, so the same filter can be shared with the
        page query.

        Raises:
            SupabaseClientError: If the count query fails
        """
        client = cls.get_client()

        try:
            query = client.table(table).select("id", count="exact", head=True)
            if apply_filters is not None:
                query = apply_filters(query)
            response = query.execute()
            return response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count {table} rows: {e}",
                code="COUNT_FAILED",
                details={"table": table},
            )
