# =============================================================================
# app/routers/messages.py - Message Endpoints
# =============================================================================
# Per-message actions. Listing and sending live under /trades.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path

from app.auth import get_current_user, AuthUser
from core.services.message_service import MessageService

router = APIRouter()


@router.post("/{message_id}/read")
async def mark_message_read(
    message_id: Annotated[UUID, Path(description="Message UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Mark a message you received as read."""
    return {"message": MessageService.mark_read(message_id, user.id)}
