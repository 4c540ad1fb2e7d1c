# =============================================================================
# core/services/trade_service.py - Trade Proposal Logic
# =============================================================================
# Handles proposing trades and moving them through their statuses.
#
# Who may change what:
#   recipient: pending -> accepted | declined
#   proposer:  pending | accepted -> cancelled
#   either:    accepted -> completed
# Non-participants can't see a trade at all (404, not 403).
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid
from core.models.trade import TradeCreate, TradeRole, TradeStatus
from app.exceptions import (
    ConflictError,
    InvalidRequestError,
    PermissionDeniedError,
    ResourceNotFoundError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

# target status -> (role allowed to set it, statuses it may be set from)
# A role of None means either participant.
TRANSITIONS: dict[TradeStatus, tuple[TradeRole | None, set[TradeStatus]]] = {
    TradeStatus.ACCEPTED: (TradeRole.RECIPIENT, {TradeStatus.PENDING}),
    TradeStatus.DECLINED: (TradeRole.RECIPIENT, {TradeStatus.PENDING}),
    TradeStatus.CANCELLED: (TradeRole.PROPOSER, {TradeStatus.PENDING, TradeStatus.ACCEPTED}),
    TradeStatus.COMPLETED: (None, {TradeStatus.ACCEPTED}),
}


def participant_role(trade: dict[str, Any], user_id: str | UUID) -> TradeRole | None:
    """Which side of the trade `user_id` is on, or None."""
    user_id_str = normalize_uuid(user_id)
    if str(trade.get("proposer_id")) == user_id_str:
        return TradeRole.PROPOSER
    if str(trade.get("recipient_id")) == user_id_str:
        return TradeRole.RECIPIENT
    return None


def other_participant(trade: dict[str, Any], user_id: str | UUID) -> str:
    """The id of the participant who isn't `user_id`."""
    if participant_role(trade, user_id) == TradeRole.PROPOSER:
        return str(trade["recipient_id"])
    return str(trade["proposer_id"])


class TradeService:
    """Service for trade proposals."""

    @staticmethod
    def create_trade(proposer_id: str | UUID, payload: TradeCreate) -> dict[str, Any]:
        """
        Propose a trade to another user.

        Raises:
            InvalidRequestError: If proposing to yourself
            ResourceNotFoundError: If the recipient doesn't exist
        """
        proposer_id_str = normalize_uuid(proposer_id)
        recipient_id_str = normalize_uuid(payload.recipient_id)

        if proposer_id_str == recipient_id_str:
            raise InvalidRequestError("You cannot propose a trade to yourself")

        try:
            recipient = SupabaseClient.fetch_row("users", recipient_id_str, columns="id")
        except SupabaseClientError as e:
            logger.error(f"Failed to fetch trade recipient {recipient_id_str}: {e}")
            raise UpstreamError("Failed to create trade")

        if not recipient:
            raise ResourceNotFoundError("user", recipient_id_str)

        data = {
            "proposer_id": proposer_id_str,
            "recipient_id": recipient_id_str,
            "offered_skill_id": normalize_uuid(payload.offered_skill_id) if payload.offered_skill_id else None,
            "requested_skill_id": normalize_uuid(payload.requested_skill_id) if payload.requested_skill_id else None,
            "message": payload.message,
            "status": TradeStatus.PENDING.value,
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table("trade_proposals").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to create trade: {e}")
            raise UpstreamError("Failed to create trade")

        if not response.data:
            raise UpstreamError("Failed to create trade")

        trade = response.data[0]
        logger.info(f"Created trade: {trade['id']} from {proposer_id_str} to {recipient_id_str}")
        return trade

    @staticmethod
    def list_trades(
        user_id: str | UUID,
        status: TradeStatus | None = None,
        role: TradeRole | None = None,
    ) -> list[dict[str, Any]]:
        """List trades the user takes part in, newest first."""
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        query = client.table("trade_proposals").select("*")
        if role == TradeRole.PROPOSER:
            query = query.eq("proposer_id", user_id_str)
        elif role == TradeRole.RECIPIENT:
            query = query.eq("recipient_id", user_id_str)
        else:
            query = query.or_(f"proposer_id.eq.{user_id_str},recipient_id.eq.{user_id_str}")

        if status is not None:
            query = query.eq("status", status.value)

        try:
            response = query.order("created_at", desc=True).execute()
        except Exception as e:
            logger.error(f"Failed to list trades for {user_id_str}: {e}")
            raise UpstreamError("Failed to fetch trades")

        return response.data or []

    @staticmethod
    def get_trade(trade_id: str | UUID, user_id: str | UUID) -> dict[str, Any]:
        """
        Get a trade the user takes part in.

        Raises:
            ResourceNotFoundError: If it doesn't exist or the user isn't a participant
        """
        trade_id_str = normalize_uuid(trade_id)
        try:
            trade = SupabaseClient.fetch_row("trade_proposals", trade_id_str)
        except SupabaseClientError as e:
            logger.error(f"Failed to fetch trade {trade_id_str}: {e}")
            raise UpstreamError("Failed to fetch trade")

        # Don't reveal that the trade exists to non-participants
        if not trade or participant_role(trade, user_id) is None:
            raise ResourceNotFoundError("trade", trade_id_str)
        return trade

    @staticmethod
    def update_status(
        trade_id: str | UUID,
        user_id: str | UUID,
        status: TradeStatus,
    ) -> dict[str, Any]:
        """
        Move a trade to a new status.

        Raises:
            ResourceNotFoundError: If the user can't see the trade
            InvalidRequestError: If the target status can't be set directly
            PermissionDeniedError: If the other participant owns this change
            ConflictError: If the trade's current status doesn't allow it or
                changed while this update was in flight
        """
        trade = TradeService.get_trade(trade_id, user_id)
        trade_id_str = normalize_uuid(trade_id)

        if status not in TRANSITIONS:
            raise InvalidRequestError(f"A trade cannot be moved to '{status.value}'")

        allowed_role, from_statuses = TRANSITIONS[status]
        if allowed_role is not None and participant_role(trade, user_id) != allowed_role:
            raise PermissionDeniedError("trade", trade_id_str)

        try:
            current = TradeStatus(trade["status"])
        except ValueError:
            logger.error(f"Trade {trade_id_str} has unknown status {trade['status']!r}")
            raise ConflictError(
                f"Trade has an unrecognized status '{trade['status']}'",
                details={"current_status": trade["status"], "requested_status": status.value},
            )

        if current not in from_statuses:
            raise ConflictError(
                f"Cannot change a {current.value} trade to {status.value}",
                details={"current_status": current.value, "requested_status": status.value},
            )

        # Only apply the change if nobody moved the trade since it was read
        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("trade_proposals")
                .update({
                    "status": status.value,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })
                .eq("id", trade_id_str)
                .eq("status", current.value)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update trade {trade_id_str}: {e}")
            raise UpstreamError("Failed to update trade")

        if not response.data:
            logger.warning(f"Trade {trade_id_str} left {current.value} before it could become {status.value}")
            raise ConflictError(
                f"Trade is no longer {current.value}",
                details={"expected_status": current.value, "requested_status": status.value},
            )

        logger.info(f"Trade {trade_id_str}: {current.value} -> {status.value}")
        return response.data[0]
