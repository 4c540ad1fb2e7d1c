# =============================================================================
# core/models/skill.py - Skill Schemas
# =============================================================================
# These models define the API contract for skill operations:
# - SkillCreate / SkillUpdate: Input for the skills catalog
# - UserSkillCreate / UserSkillUpdate: A user's offered or wanted skills
# - ProficiencyLevel / SkillDirection: Enumerations shared by both
#
# Note: the skills table uses `title`, not `name`.
# =============================================================================

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ProficiencyLevel(str, Enum):
    """How well someone knows a skill."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        """Numeric rank (beginner=1 ... expert=4) for comparisons."""
        return list(ProficiencyLevel).index(self) + 1


class SkillDirection(str, Enum):
    """
    Whether a user skill is offered or wanted.

    Stored as the boolean `is_offering` column.
    """
    OFFERED = "offered"
    WANTED = "wanted"

    @property
    def is_offering(self) -> bool:
        return self is SkillDirection.OFFERED


def _strip_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class SkillCreate(BaseModel):
    """
    Schema for adding a skill to the catalog.

    Example:
        {
            "title": "Guitar Lessons",
            "category": "Music",
            "description": "Beginner-friendly acoustic guitar"
        }
    """

    title: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=5000)
    subcategory: str | None = Field(default=None, max_length=100)
    experience_level: ProficiencyLevel = ProficiencyLevel.INTERMEDIATE
    hourly_equivalent_value: float | None = Field(default=None, ge=0.0)
    is_offering: bool = True
    is_remote_friendly: bool = False

    @field_validator("title", "category", mode="after")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("description", "subcategory", mode="after")
    @classmethod
    def strip_optional(cls, value: str | None) -> str | None:
        return _strip_or_none(value)


class SkillUpdate(SkillCreate):
    """Schema for replacing a skill's editable fields (same rules as create)."""


class UserSkillCreate(BaseModel):
    """
    Schema for adding a catalog skill to the caller's profile.

    Example:
        {"skill_id": "550e8400-...", "skill_type": "offered", "proficiency_level": "advanced"}
    """

    skill_id: UUID
    skill_type: SkillDirection
    proficiency_level: ProficiencyLevel = ProficiencyLevel.INTERMEDIATE
    description: str | None = Field(default=None, max_length=2000)

    @field_validator("description", mode="after")
    @classmethod
    def strip_description(cls, value: str | None) -> str | None:
        return _strip_or_none(value)


class UserSkillUpdate(BaseModel):
    """Schema for changing proficiency or description on a user skill."""

    proficiency_level: ProficiencyLevel | None = None
    description: str | None = Field(default=None, max_length=2000)
