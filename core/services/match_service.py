# =============================================================================
# core/services/match_service.py - Match Lookup
# =============================================================================
# Loads the caller and candidate users (with their skills) and runs the
# scorer in matching.py over them.
# =============================================================================

import logging
from dataclasses import replace
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid
from core.models.match import MatchCandidate
from core.services.matching import SortKey, filter_matches_by_preferences, find_matches
from app.exceptions import ResourceNotFoundError, UpstreamError

logger = logging.getLogger(__name__)

# users row plus nested skills, as MatchCandidate.from_db_row expects
MATCH_COLUMNS = (
    "id, full_name, display_name, profile_image_url, latitude, longitude, rating, "
    "remote_only, max_distance_km, experience_level_preference, matching_threshold, "
    "user_skills (is_offering, proficiency_level, skill_id, "
    "skills:skill_id (id, title, category, subcategory))"
)

# Candidates scored per request
MAX_CANDIDATES = 500


class MatchService:
    """Service for finding complementary trading partners."""

    @staticmethod
    def load_candidate(user_id: str | UUID) -> MatchCandidate:
        """
        Load one user with skills and preferences.

        Raises:
            ResourceNotFoundError: If the user has no profile row
        """
        try:
            row = SupabaseClient.fetch_row("users", user_id, columns=MATCH_COLUMNS)
        except SupabaseClientError as e:
            logger.error(f"Failed to load match profile for {user_id}: {e}")
            raise UpstreamError("Failed to load matches")

        if not row:
            raise ResourceNotFoundError("user", normalize_uuid(user_id))
        return MatchCandidate.from_db_row(row)

    @staticmethod
    def load_candidates(exclude_user_id: str | UUID) -> list[MatchCandidate]:
        """Load other users who have listed at least one skill."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("users")
                .select(MATCH_COLUMNS)
                .neq("id", normalize_uuid(exclude_user_id))
                .limit(MAX_CANDIDATES)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to load match candidates: {e}")
            raise UpstreamError("Failed to load matches")

        candidates = [MatchCandidate.from_db_row(row) for row in response.data or []]
        return [c for c in candidates if c.offered_skills or c.wanted_skills]

    @staticmethod
    def get_matches(
        user_id: str | UUID,
        limit: int = 20,
        sort_by: SortKey = "score",
        threshold: int | None = None,
        within_distance: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Score other users against the caller.

        Args:
            user_id: The caller
            limit: Max results
            sort_by: score | skill_complement | location | rating
            threshold: Overrides the caller's saved matching threshold
            within_distance: Also drop candidates outside the caller's max distance

        Returns:
            Match dicts, best first
        """
        you = MatchService.load_candidate(user_id)
        if threshold is not None:
            you = replace(you, preferences=replace(you.preferences, matching_threshold=threshold))

        candidates = MatchService.load_candidates(user_id)
        matches = find_matches(you, candidates, limit=len(candidates) or limit, sort_by=sort_by)
        if within_distance:
            matches = filter_matches_by_preferences(matches, you.preferences)

        logger.info(
            f"Scored {len(candidates)} candidates for {normalize_uuid(user_id)}: "
            f"{len(matches)} above threshold {you.preferences.matching_threshold}"
        )
        return [m.to_dict() for m in matches[:limit]]
