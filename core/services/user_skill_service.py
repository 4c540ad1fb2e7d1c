# =============================================================================
# core/services/user_skill_service.py - Offered & Wanted Skills
# =============================================================================
# Links catalog skills to a user's profile as "offered" or "wanted".
# The direction is stored as the boolean `is_offering` column.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid
from core.models.skill import SkillDirection, UserSkillCreate, UserSkillUpdate
from app.exceptions import (
    ConflictError,
    PermissionDeniedError,
    ResourceNotFoundError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

# user_skills row with its catalog skill joined in
USER_SKILL_COLUMNS = (
    "id, user_id, skill_id, is_offering, proficiency_level, description, created_at, "
    "skills:skill_id (id, title, category, subcategory, description)"
)


class UserSkillService:
    """Service for a user's offered and wanted skills."""

    @staticmethod
    def list_user_skills(
        user_id: str | UUID,
        direction: SkillDirection | None = None,
    ) -> list[dict[str, Any]]:
        """List a user's skills, newest first, optionally one direction only."""
        client = SupabaseClient.get_client()

        query = (
            client.table("user_skills")
            .select(USER_SKILL_COLUMNS)
            .eq("user_id", normalize_uuid(user_id))
            .order("created_at", desc=True)
        )
        if direction is not None:
            query = query.eq("is_offering", direction.is_offering)

        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Failed to fetch user skills for {user_id}: {e}")
            raise UpstreamError("Failed to fetch user skills")

        return response.data or []

    @staticmethod
    def add_user_skill(user_id: str | UUID, payload: UserSkillCreate) -> dict[str, Any]:
        """
        Add a catalog skill to the caller's profile.

        Raises:
            ConflictError: If the same skill is already listed in that direction
            ResourceNotFoundError: If the catalog skill doesn't exist
        """
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)
        skill_id_str = normalize_uuid(payload.skill_id)

        try:
            existing = (
                client.table("user_skills")
                .select("id")
                .eq("user_id", user_id_str)
                .eq("skill_id", skill_id_str)
                .eq("is_offering", payload.skill_type.is_offering)
                .limit(1)
                .execute()
            )
            skill = SupabaseClient.fetch_row("skills", skill_id_str, columns="id")
        except Exception as e:
            logger.error(f"Failed to validate user skill {skill_id_str}: {e}")
            raise UpstreamError("Failed to add skill to your profile")

        if existing.data:
            raise ConflictError(
                f"You already have this skill marked as {payload.skill_type.value}",
                details={"skill_id": skill_id_str},
            )
        if not skill:
            raise ResourceNotFoundError("skill", skill_id_str)

        data = {
            "user_id": user_id_str,
            "skill_id": skill_id_str,
            "is_offering": payload.skill_type.is_offering,
            "proficiency_level": payload.proficiency_level.value,
            "description": payload.description,
        }

        try:
            response = client.table("user_skills").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to add user skill: {e}")
            raise UpstreamError("Failed to add skill to your profile")

        if not response.data:
            raise UpstreamError("Failed to add skill to your profile")

        user_skill = response.data[0]
        logger.info(
            f"Added {payload.skill_type.value} skill {skill_id_str} for user: {user_id_str}"
        )
        return user_skill

    @staticmethod
    def _get_owned(user_skill_id: str | UUID, user_id: str | UUID) -> dict[str, Any]:
        try:
            row = SupabaseClient.fetch_row("user_skills", user_skill_id, columns="id, user_id")
        except SupabaseClientError as e:
            logger.error(f"Failed to fetch user skill {user_skill_id}: {e}")
            raise UpstreamError("Failed to fetch user skill")

        if not row:
            raise ResourceNotFoundError("user_skill", normalize_uuid(user_skill_id))
        if str(row.get("user_id")) != normalize_uuid(user_id):
            raise PermissionDeniedError("user skill", normalize_uuid(user_skill_id))
        return row

    @staticmethod
    def update_user_skill(
        user_skill_id: str | UUID,
        user_id: str | UUID,
        payload: UserSkillUpdate,
    ) -> dict[str, Any]:
        """
        Change proficiency and/or description.

        Raises:
            ResourceNotFoundError: If the row doesn't exist
            PermissionDeniedError: If it belongs to someone else
        """
        UserSkillService._get_owned(user_skill_id, user_id)
        client = SupabaseClient.get_client()
        user_skill_id_str = normalize_uuid(user_skill_id)

        data: dict[str, Any] = {"updated_at": datetime.now(timezone.utc).isoformat()}
        if payload.proficiency_level is not None:
            data["proficiency_level"] = payload.proficiency_level.value
        if "description" in payload.model_fields_set:
            description = (payload.description or "").strip()
            data["description"] = description or None

        try:
            response = (
                client.table("user_skills")
                .update(data)
                .eq("id", user_skill_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update user skill {user_skill_id_str}: {e}")
            raise UpstreamError("Failed to update skill")

        if not response.data:
            raise ResourceNotFoundError("user_skill", user_skill_id_str)

        logger.info(f"Updated user skill: {user_skill_id_str}")
        return response.data[0]

    @staticmethod
    def remove_user_skill(user_skill_id: str | UUID, user_id: str | UUID) -> None:
        """
        Remove a skill from the caller's profile.

        Raises:
            ResourceNotFoundError: If the row doesn't exist
            PermissionDeniedError: If it belongs to someone else
        """
        UserSkillService._get_owned(user_skill_id, user_id)
        client = SupabaseClient.get_client()
        user_skill_id_str = normalize_uuid(user_skill_id)

        try:
            client.table("user_skills").delete().eq("id", user_skill_id_str).execute()
        except Exception as e:
            logger.error(f"Failed to remove user skill {user_skill_id_str}: {e}")
            raise UpstreamError("Failed to remove skill from your profile")

        logger.info(f"Removed user skill: {user_skill_id_str}")
