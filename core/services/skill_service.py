# =============================================================================
# core/services/skill_service.py - Skills Catalog Logic
# =============================================================================
# Handles listing, creating, updating and deleting catalog skills.
#
# Only the user who created a skill may change or delete it.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import build_ilike_filter, normalize_uuid
from core.models.skill import SkillCreate, SkillUpdate
from app.exceptions import (
    ConflictError,
    PermissionDeniedError,
    ResourceNotFoundError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


class SkillService:
    """Service for the skills catalog."""

    @staticmethod
    def list_skills(
        category: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """
        List skills ordered by title.

        Args:
            category: Exact category filter
            search: Case-insensitive match on title or description
            limit: Page size
            offset: Rows to skip
        """
        client = SupabaseClient.get_client()

        query = (
            client.table("skills")
            .select("*")
            .range(offset, offset + limit - 1)
            .order("title")
        )
        if category:
            query = query.eq("category", category)
        if search:
            query = query.or_(build_ilike_filter(["title", "description"], search))

        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Failed to fetch skills: {e}")
            raise UpstreamError("Failed to fetch skills")

        return response.data or []

    @staticmethod
    def get_skill(skill_id: str | UUID) -> dict[str, Any]:
        """
        Get a skill by ID.

        Raises:
            ResourceNotFoundError: If the skill doesn't exist
        """
        try:
            skill = SupabaseClient.fetch_row("skills", skill_id)
        except SupabaseClientError as e:
            logger.error(f"Failed to fetch skill {skill_id}: {e}")
            raise UpstreamError("Failed to fetch skill")

        if not skill:
            raise ResourceNotFoundError("skill", normalize_uuid(skill_id))
        return skill

    @staticmethod
    def create_skill(user_id: str | UUID, payload: SkillCreate) -> dict[str, Any]:
        """
        Create a skill owned by `user_id`.

        Raises:
            ConflictError: If the user already has a skill with this title
        """
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            existing = (
                client.table("skills")
                .select("id")
                .eq("title", payload.title)
                .eq("user_id", user_id_str)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Duplicate check failed for skill {payload.title!r}: {e}")
            raise UpstreamError("Failed to create skill")

        if existing.data:
            raise ConflictError(
                "You already have a skill with this title",
                details={"title": payload.title},
            )

        data = {
            "user_id": user_id_str,
            **payload.model_dump(mode="json"),
            "is_active": True,
        }

        try:
            response = client.table("skills").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to create skill: {e}")
            raise UpstreamError("Failed to create skill")

        if not response.data:
            raise UpstreamError("Failed to create skill")

        skill = response.data[0]
        logger.info(f"Created skill: {skill['id']} for user: {user_id_str}")
        return skill

    @staticmethod
    def _get_owned_skill(skill_id: str | UUID, user_id: str | UUID) -> dict[str, Any]:
        skill = SkillService.get_skill(skill_id)
        if str(skill.get("user_id")) != normalize_uuid(user_id):
            raise PermissionDeniedError("skill", normalize_uuid(skill_id))
        return skill

    @staticmethod
    def update_skill(
        skill_id: str | UUID,
        user_id: str | UUID,
        payload: SkillUpdate,
    ) -> dict[str, Any]:
        """
        Replace a skill's editable fields.

        Raises:
            ResourceNotFoundError: If the skill doesn't exist
            PermissionDeniedError: If the caller didn't create it
        """
        SkillService._get_owned_skill(skill_id, user_id)
        client = SupabaseClient.get_client()
        skill_id_str = normalize_uuid(skill_id)

        data = {
            **payload.model_dump(mode="json"),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            response = (
                client.table("skills")
                .update(data)
                .eq("id", skill_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update skill {skill_id_str}: {e}")
            raise UpstreamError("Failed to update skill")

        if not response.data:
            raise ResourceNotFoundError("skill", skill_id_str)

        logger.info(f"Updated skill: {skill_id_str}")
        return response.data[0]

    @staticmethod
    def delete_skill(skill_id: str | UUID, user_id: str | UUID) -> None:
        """
        Delete a skill.

        Raises:
            ResourceNotFoundError: If the skill doesn't exist
            PermissionDeniedError: If the caller didn't create it
        """
        SkillService._get_owned_skill(skill_id, user_id)
        client = SupabaseClient.get_client()
        skill_id_str = normalize_uuid(skill_id)

        try:
            client.table("skills").delete().eq("id", skill_id_str).execute()
        except Exception as e:
            logger.error(f"Failed to delete skill {skill_id_str}: {e}")
            raise UpstreamError("Failed to delete skill")

        logger.info(f"Deleted skill: {skill_id_str}")
