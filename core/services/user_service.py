# =============================================================================
# core/services/user_service.py - User Search & Profile Logic
# =============================================================================
# Handles user search, public profile lookups and owner profile edits.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import build_ilike_filter, normalize_uuid
from app.exceptions import InvalidRequestError, ResourceNotFoundError, UpstreamError

logger = logging.getLogger(__name__)

# Columns safe to show to other users (email is searchable, never returned)
PUBLIC_COLUMNS = "id, full_name, display_name, profile_image_url, location, bio, created_at"

# Columns matched against the search term
SEARCH_COLUMNS = ["full_name", "display_name", "email"]

MIN_QUERY_LENGTH = 2


class UserService:
    """
    Service for user search and profile operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def search_users(query: str | None, limit: int = 10, offset: int = 0) -> dict[str, Any]:
        """
        Search users by name, display name or email.

        Args:
            query: Search term (at least 2 characters)
            limit: Page size
            offset: Rows to skip

        Returns:
            {"users": [...], "total": N, "limit": limit, "offset": offset}

        Raises:
            InvalidRequestError: If the query is missing or too short
            UpstreamError: If the page query fails
        """
        if not query or len(query) < MIN_QUERY_LENGTH:
            raise InvalidRequestError(
                f"Search query must be at least {MIN_QUERY_LENGTH} characters"
            )

        search_filter = build_ilike_filter(SEARCH_COLUMNS, query)
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("users")
                .select(PUBLIC_COLUMNS)
                .or_(search_filter)
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"User search failed for query {query!r}: {e}")
            raise UpstreamError("Failed to search users")

        # A failed count doesn't fail the search
        try:
            total = SupabaseClient.count_rows("users", lambda q: q.or_(search_filter))
        except SupabaseClientError as e:
            logger.error(f"User count failed for query {query!r}: {e}")
            total = 0

        return {
            "users": response.data or [],
            "total": total,
            "limit": limit,
            "offset": offset,
        }

    @staticmethod
    def get_profile(user_id: str | UUID) -> dict[str, Any]:
        """
        Get a user's public profile.

        Raises:
            ResourceNotFoundError: If the user doesn't exist
        """
        try:
            user = SupabaseClient.fetch_row("users", user_id, columns=PUBLIC_COLUMNS)
        except SupabaseClientError as e:
            logger.error(f"Failed to fetch user {user_id}: {e}")
            raise UpstreamError("Failed to fetch user")

        if not user:
            raise ResourceNotFoundError("user", normalize_uuid(user_id))
        return user

    @staticmethod
    def update_profile(user_id: str | UUID, updates: dict[str, Any]) -> dict[str, Any]:
        """
        Apply owner edits to a profile.

        Args:
            user_id: The caller's user id
            updates: Only the fields the caller sent

        Returns:
            Updated public profile
        """
        if not updates:
            return UserService.get_profile(user_id)

        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("users")
                .update(updates)
                .eq("id", user_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update user {user_id_str}: {e}")
            raise UpstreamError("Failed to update profile")

        if not response.data:
            raise ResourceNotFoundError("user", user_id_str)

        logger.info(f"Updated profile for user: {user_id_str} ({', '.join(sorted(updates))})")
        return UserService.get_profile(user_id_str)

    @staticmethod
    def set_profile_image(user_id: str | UUID, image_url: str) -> dict[str, Any]:
        """Point the profile at a newly uploaded image."""
        return UserService.update_profile(user_id, {"profile_image_url": image_url})
