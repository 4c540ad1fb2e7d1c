# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: str | None = None

    model_config = {"frozen": True}


class UserResponse(BaseModel):
    """
    The caller's own profile.

    Unlike UserPublic, this includes the email address.
    """
    id: UUID
    email: str | None = None
    full_name: str | None = None
    display_name: str | None = None
    profile_image_url: str | None = None
    location: str | None = None
    bio: str | None = None
    created_at: datetime | None = None


class SignupRequest(BaseModel):
    """Password sign-up."""
    email: str = Field(..., min_length=3, max_length=255, examples=["jane@example.com"])
    password: str = Field(..., min_length=6, max_length=128)
    full_name: str | None = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    """Password sign-in."""
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class AuthSessionResponse(BaseModel):
    """
    Tokens issued by Supabase Auth.

    `access_token` is None after sign-up when email confirmation is
    required; the user must confirm before logging in.
    """
    user_id: UUID
    email: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    token_type: str = "bearer"
