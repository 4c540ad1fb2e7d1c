# =============================================================================
# app/websocket/manager.py - WebSocket Connection Manager
# =============================================================================
# Manages WebSocket connections per trade conversation and broadcasts
# events to them. Connections live in this process only.
#
# Usage:
#   from app.websocket import websocket_manager
#
#   await websocket_manager.connect(trade_id, websocket)
#   await websocket_manager.broadcast(trade_id, {"type": "message_created", ...})
#   websocket_manager.disconnect(trade_id, websocket)
# =============================================================================

import logging
from typing import Any

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages WebSocket connections organized by trade ID.

    Both participants (and each of their tabs) can watch the same trade.
    """

    def __init__(self):
        # trade_id -> set of WebSocket connections
        self.connections: dict[str, set[WebSocket]] = {}
        self._total_connections = 0

    async def connect(self, trade_id: str, websocket: WebSocket) -> None:
        """Accept a new WebSocket connection and track it."""
        await websocket.accept()

        self.connections.setdefault(trade_id, set()).add(websocket)
        self._total_connections += 1

        logger.info(
            f"WebSocket connected to trade {trade_id}. "
            f"Total connections: {self._total_connections}"
        )

    def disconnect(self, trade_id: str, websocket: WebSocket) -> None:
        """Stop tracking a connection."""
        watchers = self.connections.get(trade_id)
        if watchers and websocket in watchers:
            watchers.discard(websocket)
            self._total_connections -= 1
            if not watchers:
                del self.connections[trade_id]

        logger.info(
            f"WebSocket disconnected from trade {trade_id}. "
            f"Total connections: {self._total_connections}"
        )

    async def broadcast(self, trade_id: str, message: dict[str, Any]) -> int:
        """
        Send a message to every connection watching a trade.

        Connections that fail to receive are dropped.

        Returns:
            int: Number of clients the message was sent to
        """
        watchers = self.connections.get(trade_id)
        if not watchers:
            logger.debug(f"No connections for trade {trade_id}, skipping broadcast")
            return 0

        payload = jsonable_encoder(message)
        dead_connections: set[WebSocket] = set()
        sent_count = 0

        for websocket in list(watchers):
            try:
                await websocket.send_json(payload)
                sent_count += 1
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                dead_connections.add(websocket)

        for ws in dead_connections:
            self.disconnect(trade_id, ws)

        logger.debug(
            f"Broadcast to trade {trade_id}: "
            f"type={message.get('type')}, sent to {sent_count} clients"
        )
        return sent_count

    def get_connection_count(self, trade_id: str | None = None) -> int:
        """Connections for one trade, or in total."""
        if trade_id:
            return len(self.connections.get(trade_id, set()))
        return self._total_connections

    def get_trade_count(self) -> int:
        """Number of trades with at least one connection."""
        return len(self.connections)


# Global singleton instance
websocket_manager = ConnectionManager()


async def publish_message_created(trade_id: str, message: dict[str, Any]) -> int:
    """Tell everyone watching a trade about a new message."""
    return await websocket_manager.broadcast(
        trade_id,
        {"type": "message_created", "trade_id": trade_id, "message": message},
    )
