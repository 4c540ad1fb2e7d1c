# =============================================================================
# core/models/match.py - Skill Matching Data Classes
# =============================================================================
# Plain dataclasses consumed by core/services/matching.py:
# - MatchSkill: One offered or wanted skill of a candidate
# - MatchPreferences: The caller's matching preferences
# - MatchCandidate: A user with location, rating and skills
# - MatchResult: Score, breakdown and reasons for one candidate
#
# Built from `users` rows joined with `user_skills` and `skills`.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .skill import ProficiencyLevel
from .user import ExperiencePreference


@dataclass
class MatchSkill:
    """A skill as seen by the matcher (title, category, proficiency)."""
    id: str
    title: str
    category: str | None = None
    subcategory: str | None = None
    proficiency_level: ProficiencyLevel = ProficiencyLevel.INTERMEDIATE

    @classmethod
    def from_user_skill_row(cls, row: dict[str, Any]) -> "MatchSkill":
        """Create from a user_skills row with its joined `skills` record."""
        skill = row.get("skills") or {}
        try:
            level = ProficiencyLevel(row.get("proficiency_level") or "intermediate")
        except ValueError:
            level = ProficiencyLevel.INTERMEDIATE

        return cls(
            id=str(skill.get("id") or row.get("skill_id") or ""),
            title=skill.get("title") or "",
            category=skill.get("category"),
            subcategory=skill.get("subcategory"),
            proficiency_level=level,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "subcategory": self.subcategory,
            "proficiency_level": self.proficiency_level.value,
        }


@dataclass
class MatchPreferences:
    """Matching preferences stored on the user's profile."""
    max_distance_km: float = 50.0
    remote_only: bool = False
    experience_level_preference: ExperiencePreference = ExperiencePreference.ANY
    matching_threshold: int = 50

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "MatchPreferences":
        try:
            preference = ExperiencePreference(row.get("experience_level_preference") or "any")
        except ValueError:
            preference = ExperiencePreference.ANY

        threshold = row.get("matching_threshold")
        return cls(
            max_distance_km=row.get("max_distance_km") or 50.0,
            remote_only=bool(row.get("remote_only")),
            experience_level_preference=preference,
            matching_threshold=50 if threshold is None else threshold,
        )


@dataclass
class MatchCandidate:
    """A user together with everything the matcher scores on."""
    id: str
    display_name: str | None = None
    profile_image_url: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    rating: float | None = None
    preferences: MatchPreferences = field(default_factory=MatchPreferences)
    offered_skills: list[MatchSkill] = field(default_factory=list)
    wanted_skills: list[MatchSkill] = field(default_factory=list)

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "MatchCandidate":
        """Create from a users row with a nested `user_skills` list."""
        offered: list[MatchSkill] = []
        wanted: list[MatchSkill] = []
        for user_skill in row.get("user_skills") or []:
            skill = MatchSkill.from_user_skill_row(user_skill)
            (offered if user_skill.get("is_offering") else wanted).append(skill)

        return cls(
            id=str(row.get("id", "")),
            display_name=row.get("display_name") or row.get("full_name"),
            profile_image_url=row.get("profile_image_url"),
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            rating=row.get("rating"),
            preferences=MatchPreferences.from_db_row(row),
            offered_skills=offered,
            wanted_skills=wanted,
        )


@dataclass
class MatchedSkills:
    """Complementary skills between the caller ("you") and a candidate ("they")."""
    you_offer: list[MatchSkill] = field(default_factory=list)
    they_offer: list[MatchSkill] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.you_offer) + len(self.they_offer)

    @property
    def is_bidirectional(self) -> bool:
        return bool(self.you_offer) and bool(self.they_offer)


@dataclass
class ScoreBreakdown:
    """Component scores, each 0-100."""
    skill_complement: int = 0
    location: int = 0
    experience_level: int = 0
    rating: int = 0


@dataclass
class MatchResult:
    """Outcome of scoring one candidate against the caller."""
    candidate: MatchCandidate
    score: int
    breakdown: ScoreBreakdown
    matched_skills: MatchedSkills
    reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """API representation."""
        return {
            "user": {
                "id": self.candidate.id,
                "display_name": self.candidate.display_name,
                "profile_image_url": self.candidate.profile_image_url,
                "rating": self.candidate.rating,
            },
            "score": self.score,
            "breakdown": {
                "skill_complement": self.breakdown.skill_complement,
                "location": self.breakdown.location,
                "experience_level": self.breakdown.experience_level,
                "rating": self.breakdown.rating,
            },
            "matched_skills": {
                "you_offer": [s.to_dict() for s in self.matched_skills.you_offer],
                "they_offer": [s.to_dict() for s in self.matched_skills.they_offer],
            },
            "reasons": self.reasons,
        }
