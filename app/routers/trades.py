# =============================================================================
# app/routers/trades.py - Trade Proposal & Message Endpoints
# =============================================================================
# Proposing trades, responding to them, and the conversation inside each.
# All endpoints require authentication; only participants see a trade.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import get_current_user, AuthUser
from app.websocket import publish_message_created
from core.models.trade import (
    MessageCreate,
    TradeCreate,
    TradeRole,
    TradeStatus,
    TradeStatusUpdate,
)
from core.services.message_service import MessageService
from core.services.trade_service import TradeService

router = APIRouter()


# =============================================================================
# Trades
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_trade(
    request: TradeCreate,
    user: AuthUser = Depends(get_current_user),
):
    """Propose a trade to another user. The trade starts as pending."""
    return {"trade": TradeService.create_trade(user.id, request)}


@router.get("")
async def list_trades(
    user: AuthUser = Depends(get_current_user),
    trade_status: Annotated[TradeStatus | None, Query(alias="status", description="Filter by status")] = None,
    role: Annotated[TradeRole | None, Query(description="Only trades you proposed or received")] = None,
):
    """List your trades, newest first."""
    trades = TradeService.list_trades(user.id, status=trade_status, role=role)
    return {"trades": trades}


@router.get("/{trade_id}")
async def get_trade(
    trade_id: Annotated[UUID, Path(description="Trade UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Get one of your trades."""
    return {"trade": TradeService.get_trade(trade_id, user.id)}


@router.patch("/{trade_id}")
async def update_trade_status(
    trade_id: Annotated[UUID, Path(description="Trade UUID")],
    request: TradeStatusUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Accept, decline, cancel or complete a trade.

    The recipient accepts or declines a pending trade, the proposer
    cancels, and either side completes an accepted trade.
    """
    return {"trade": TradeService.update_status(trade_id, user.id, request.status)}


# =============================================================================
# Messages
# =============================================================================

@router.get("/{trade_id}/messages")
async def list_messages(
    trade_id: Annotated[UUID, Path(description="Trade UUID")],
    user: AuthUser = Depends(get_current_user),
    limit: Annotated[int, Query(ge=1, le=200, description="Messages per page")] = 50,
    offset: Annotated[int, Query(ge=0, description="Messages to skip")] = 0,
):
    """List the trade's messages, oldest first."""
    messages = MessageService.list_messages(trade_id, user.id, limit=limit, offset=offset)
    return {"messages": messages, "limit": limit, "offset": offset}


@router.post("/{trade_id}/messages", status_code=status.HTTP_201_CREATED)
async def send_message(
    trade_id: Annotated[UUID, Path(description="Trade UUID")],
    request: MessageCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Send a message to the other participant.

    Clients watching /ws/trades/{trade_id} receive a `message_created` event.
    """
    message = MessageService.send_message(trade_id, user.id, request.content)
    await publish_message_created(str(trade_id), message)
    return {"message": message}
