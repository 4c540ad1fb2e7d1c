# =============================================================================
# app/routers/matches.py - Match Endpoints
# =============================================================================
# Suggests trading partners whose skills complement the caller's.
# =============================================================================

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_user, AuthUser
from core.services.match_service import MatchService

router = APIRouter()


@router.get("")
async def get_matches(
    user: AuthUser = Depends(get_current_user),
    limit: Annotated[int, Query(ge=1, le=100, description="Max matches")] = 20,
    sort_by: Annotated[
        Literal["score", "skill_complement", "location", "rating"],
        Query(description="Sort criterion"),
    ] = "score",
    threshold: Annotated[
        int | None,
        Query(ge=0, le=100, description="Minimum score (defaults to your saved threshold)"),
    ] = None,
    within_distance: Annotated[
        bool,
        Query(description="Drop users outside your max distance"),
    ] = False,
):
    """
    Score other users against you.

    Each match has an overall score (0-100), a per-component
    breakdown, the skills that matched in each direction and
    human-readable reasons.
    """
    matches = MatchService.get_matches(
        user.id,
        limit=limit,
        sort_by=sort_by,
        threshold=threshold,
        within_distance=within_distance,
    )
    return {"matches": matches, "total": len(matches)}
