# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# WebSocket endpoint for live trade conversations.
#
# Connect: ws://host/ws/trades/{trade_id}?token={jwt}
# Status:  GET /ws/status (authenticated, counts only)
#
# Events:
#   - {"type": "connected", "trade_id": "..."}
#   - {"type": "message_created", "trade_id": "...", "message": {...}}
# =============================================================================

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect

from app.auth import AuthUser, decode_access_token, get_current_user
from app.exceptions import SkillSwapException
from app.websocket.manager import websocket_manager
from core.services.trade_service import TradeService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/trades/{trade_id}")
async def trade_websocket(
    websocket: WebSocket,
    trade_id: str,
    token: str = Query(..., description="JWT token for authentication")
):
    """
    WebSocket endpoint for real-time trade messages.

    Authentication is required via the `token` query parameter, and
    only the trade's two participants may connect.

    Close codes:
        4001: invalid token
        4004: trade not found (or not a participant)
        4000: server error
    """
    # 1. Verify JWT token
    try:
        user = decode_access_token(token)
    except HTTPException as e:
        logger.warning(f"WebSocket auth failed: {e.detail}")
        await websocket.close(code=4001, reason="Invalid token")
        return

    # 2. Verify the user takes part in this trade
    try:
        TradeService.get_trade(trade_id, user.id)
    except SkillSwapException as e:
        if e.status_code == 404:
            logger.warning(f"WebSocket: trade {trade_id} not visible to {user.id}")
            await websocket.close(code=4004, reason="Trade not found")
        else:
            logger.error(f"WebSocket: error fetching trade: {e.message}")
            await websocket.close(code=4000, reason="Server error")
        return

    # 3. Accept connection and add to manager
    await websocket_manager.connect(trade_id, websocket)

    try:
        await websocket.send_json({
            "type": "connected",
            "trade_id": trade_id,
            "message": "Connected to trade messages"
        })

        while True:
            data = await websocket.receive_text()

            # Keepalive
            if data == "ping":
                await websocket.send_text("pong")
            else:
                logger.debug(f"WebSocket received: {data[:100]}")

    except WebSocketDisconnect:
        logger.info(f"WebSocket client disconnected from trade {trade_id}")
    finally:
        websocket_manager.disconnect(trade_id, websocket)


@router.get("/ws/status")
async def websocket_status(user: AuthUser = Depends(get_current_user)):
    """Connection counts for this process. Trade IDs are not exposed."""
    return {
        "total_connections": websocket_manager.get_connection_count(),
        "trade_count": websocket_manager.get_trade_count(),
    }
