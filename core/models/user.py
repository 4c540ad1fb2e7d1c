# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# These models define the API contract for user operations:
# - UserPublic: Profile fields safe to show to other users
# - UserSearchResponse: One page of search results plus the total
# - UserProfileUpdate: Fields an owner may change on their own profile
#
# Users are managed by Supabase Auth; the `users` table holds the profile.
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class ExperiencePreference(str, Enum):
    """What experience level a user wants from trading partners."""
    ANY = "any"
    SIMILAR = "similar"
    HIGHER = "higher"
    LOWER = "lower"


class UserPublic(BaseModel):
    """
    Public profile fields returned by search and profile lookups.

    Email is deliberately absent; it is searchable but never returned.
    """

    id: UUID
    full_name: str | None = None
    display_name: str | None = None
    profile_image_url: str | None = None
    location: str | None = None
    bio: str | None = None
    created_at: datetime | None = None


class UserSearchResponse(BaseModel):
    """
    One page of user search results.

    Example:
        {
            "users": [{"id": "...", "full_name": "John Doe", ...}],
            "total": 2,
            "limit": 10,
            "offset": 0
        }
    """

    users: list[UserPublic] = Field(default_factory=list)
    total: int = Field(default=0, ge=0, description="Rows matching the query across all pages")
    limit: int
    offset: int


class UserProfileUpdate(BaseModel):
    """Fields an owner may change on their own profile."""

    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    bio: str | None = Field(default=None, max_length=2000)
    location: str | None = Field(default=None, max_length=255)
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    remote_only: bool | None = None
    max_distance_km: float | None = Field(default=None, gt=0.0)
    experience_level_preference: ExperiencePreference | None = None
    matching_threshold: int | None = Field(default=None, ge=0, le=100)

    def to_update_dict(self) -> dict:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True, mode="json")
