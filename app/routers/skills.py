# =============================================================================
# app/routers/skills.py - Skills Catalog Endpoints
# =============================================================================
# Browsing the catalog is public; creating, editing and deleting
# require authentication, and only a skill's creator may change it.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import get_current_user, AuthUser
from core.models.skill import SkillCreate, SkillUpdate
from core.services.skill_service import SkillService

router = APIRouter()


@router.get("")
async def list_skills(
    category: Annotated[str | None, Query(description="Exact category")] = None,
    search: Annotated[str | None, Query(description="Matches title or description")] = None,
    limit: Annotated[int, Query(ge=1, le=200, description="Results per page")] = 50,
    offset: Annotated[int, Query(ge=0, description="Results to skip")] = 0,
):
    """List catalog skills ordered by title."""
    skills = SkillService.list_skills(
        category=category,
        search=search,
        limit=limit,
        offset=offset,
    )
    return {"skills": skills}


@router.get("/{skill_id}")
async def get_skill(
    skill_id: Annotated[UUID, Path(description="Skill UUID")],
):
    """Get one skill."""
    return {"skill": SkillService.get_skill(skill_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_skill(
    request: SkillCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Add a skill to the catalog.

    Title and category are required. A user can't have two skills
    with the same title.
    """
    return {"skill": SkillService.create_skill(user.id, request)}


@router.put("/{skill_id}")
async def update_skill(
    skill_id: Annotated[UUID, Path(description="Skill UUID")],
    request: SkillUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """Replace a skill's editable fields. Creator only."""
    return {"skill": SkillService.update_skill(skill_id, user.id, request)}


@router.delete("/{skill_id}")
async def delete_skill(
    skill_id: Annotated[UUID, Path(description="Skill UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Delete a skill. Creator only."""
    SkillService.delete_skill(skill_id, user.id)
    return {"message": "Skill deleted successfully"}
