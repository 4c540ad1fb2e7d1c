# =============================================================================
# core/models/trade.py - Trade Proposal & Message Schemas
# =============================================================================
# These models define the API contract for trades and their conversations:
# - TradeStatus: Stored workflow value of a proposal
# - TradeCreate / TradeStatusUpdate: Input for proposing and responding
# - MessageCreate: Input for sending a message within a trade
#
# Status transitions are not a state machine; the API only checks that
# the right participant performs each change:
#   recipient: pending -> accepted | declined
#   proposer:  pending | accepted -> cancelled
#   either:    accepted -> completed
# =============================================================================

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class TradeStatus(str, Enum):
    """Workflow value stored on trade_proposals.status."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class TradeRole(str, Enum):
    """Which side of a trade the caller is on (for list filtering)."""
    PROPOSER = "proposer"
    RECIPIENT = "recipient"


class TradeCreate(BaseModel):
    """
    Schema for proposing a trade.

    Example:
        {
            "recipient_id": "550e8400-...",
            "offered_skill_id": "660e8400-...",
            "requested_skill_id": "770e8400-...",
            "message": "I can teach you Spanish in exchange for guitar lessons"
        }
    """

    recipient_id: UUID
    offered_skill_id: UUID | None = None
    requested_skill_id: UUID | None = None
    message: str | None = Field(default=None, max_length=2000)


class TradeStatusUpdate(BaseModel):
    """Schema for moving a trade to a new status."""

    status: TradeStatus


class MessageCreate(BaseModel):
    """Schema for sending a message inside a trade conversation."""

    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator("content", mode="after")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value
