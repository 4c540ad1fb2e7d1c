# =============================================================================
# app/routers/user_skills.py - Offered & Wanted Skills Endpoints
# =============================================================================
# A user's skills are catalog skills tagged "offered" or "wanted".
# All endpoints require authentication.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import get_current_user, AuthUser
from core.models.skill import SkillDirection, UserSkillCreate, UserSkillUpdate
from core.services.user_skill_service import UserSkillService

router = APIRouter()


@router.get("")
async def list_user_skills(
    user: AuthUser = Depends(get_current_user),
    user_id: Annotated[UUID | None, Query(description="Whose skills (defaults to you)")] = None,
    skill_type: Annotated[SkillDirection | None, Query(alias="type", description="offered or wanted")] = None,
):
    """List a user's skills, newest first."""
    user_skills = UserSkillService.list_user_skills(user_id or user.id, skill_type)
    return {"user_skills": user_skills}


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_user_skill(
    request: UserSkillCreate,
    user: AuthUser = Depends(get_current_user),
):
    """Add a catalog skill to your profile as offered or wanted."""
    return {"user_skill": UserSkillService.add_user_skill(user.id, request)}


@router.put("/{user_skill_id}")
async def update_user_skill(
    user_skill_id: Annotated[UUID, Path(description="User skill UUID")],
    request: UserSkillUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """Change proficiency or description on one of your skills."""
    return {"user_skill": UserSkillService.update_user_skill(user_skill_id, user.id, request)}


@router.delete("/{user_skill_id}")
async def remove_user_skill(
    user_skill_id: Annotated[UUID, Path(description="User skill UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Remove a skill from your profile."""
    UserSkillService.remove_user_skill(user_skill_id, user.id)
    return {"message": "Skill removed from your profile"}
