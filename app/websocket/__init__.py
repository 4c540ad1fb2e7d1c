# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Provides real-time updates for trade conversations.
#
# Usage:
#   from app.websocket import publish_message_created
#
#   await publish_message_created(trade_id, message_row)
# =============================================================================

from app.websocket.manager import websocket_manager, publish_message_created

__all__ = [
    "websocket_manager",
    "publish_message_created",
]
