# =============================================================================
# core/services/message_service.py - Trade Conversations
# =============================================================================
# Messages belong to a trade; only its two participants can read or send.
# Realtime delivery is done by the caller (see app/websocket/).
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid
from core.services.trade_service import TradeService, other_participant
from app.exceptions import PermissionDeniedError, ResourceNotFoundError, UpstreamError

logger = logging.getLogger(__name__)


class MessageService:
    """Service for messages inside a trade."""

    @staticmethod
    def list_messages(
        trade_id: str | UUID,
        user_id: str | UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """
        List a trade's messages, oldest first.

        Raises:
            ResourceNotFoundError: If the user isn't a participant
        """
        TradeService.get_trade(trade_id, user_id)
        client = SupabaseClient.get_client()
        trade_id_str = normalize_uuid(trade_id)

        try:
            response = (
                client.table("messages")
                .select("*")
                .eq("trade_id", trade_id_str)
                .order("created_at")
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch messages for trade {trade_id_str}: {e}")
            raise UpstreamError("Failed to fetch messages")

        return response.data or []

    @staticmethod
    def send_message(
        trade_id: str | UUID,
        sender_id: str | UUID,
        content: str,
    ) -> dict[str, Any]:
        """
        Send a message to the other participant of a trade.

        Raises:
            ResourceNotFoundError: If the sender isn't a participant
        """
        trade = TradeService.get_trade(trade_id, sender_id)
        sender_id_str = normalize_uuid(sender_id)

        data = {
            "trade_id": normalize_uuid(trade_id),
            "sender_id": sender_id_str,
            "recipient_id": other_participant(trade, sender_id_str),
            "content": content,
            "is_read": False,
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table("messages").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to send message in trade {data['trade_id']}: {e}")
            raise UpstreamError("Failed to send message")

        if not response.data:
            raise UpstreamError("Failed to send message")

        message = response.data[0]
        logger.info(f"Message {message['id']} sent in trade {data['trade_id']}")
        return message

    @staticmethod
    def mark_read(message_id: str | UUID, user_id: str | UUID) -> dict[str, Any]:
        """
        Mark a message as read.

        Raises:
            ResourceNotFoundError: If the message doesn't exist
            PermissionDeniedError: If the caller isn't its recipient
        """
        message_id_str = normalize_uuid(message_id)
        try:
            message = SupabaseClient.fetch_row("messages", message_id_str)
        except SupabaseClientError as e:
            logger.error(f"Failed to fetch message {message_id_str}: {e}")
            raise UpstreamError("Failed to fetch message")

        if not message:
            raise ResourceNotFoundError("message", message_id_str)
        if str(message.get("recipient_id")) != normalize_uuid(user_id):
            raise PermissionDeniedError("message", message_id_str)

        if message.get("is_read"):
            return message

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("messages")
                .update({"is_read": True})
                .eq("id", message_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to mark message {message_id_str} read: {e}")
            raise UpstreamError("Failed to update message")

        return response.data[0] if response.data else {**message, "is_read": True}
