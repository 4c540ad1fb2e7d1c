# =============================================================================
# core/models/ - Data Models
# =============================================================================
# This package contains schemas for data validation:
# - user.py: Search results and profile edits
# - skill.py: Catalog skills and a user's offered/wanted skills
# - trade.py: Trade proposals and messages
# - match.py: Plain data classes used by the matcher
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# User Models
# -----------------------------------------------------------------------------
from .user import (
    ExperiencePreference,
    UserProfileUpdate,
    UserPublic,
    UserSearchResponse,
)

# -----------------------------------------------------------------------------
# Skill Models
# -----------------------------------------------------------------------------
from .skill import (
    ProficiencyLevel,
    SkillCreate,
    SkillDirection,
    SkillUpdate,
    UserSkillCreate,
    UserSkillUpdate,
)

# -----------------------------------------------------------------------------
# Trade Models
# -----------------------------------------------------------------------------
from .trade import (
    MessageCreate,
    TradeCreate,
    TradeRole,
    TradeStatus,
    TradeStatusUpdate,
)

# -----------------------------------------------------------------------------
# Matching Data Classes
# -----------------------------------------------------------------------------
from .match import (
    MatchCandidate,
    MatchedSkills,
    MatchPreferences,
    MatchResult,
    MatchSkill,
    ScoreBreakdown,
)

__all__ = [
    # User
    "ExperiencePreference",
    "UserProfileUpdate",
    "UserPublic",
    "UserSearchResponse",
    # Skill
    "ProficiencyLevel",
    "SkillCreate",
    "SkillDirection",
    "SkillUpdate",
    "UserSkillCreate",
    "UserSkillUpdate",
    # Trade
    "MessageCreate",
    "TradeCreate",
    "TradeRole",
    "TradeStatus",
    "TradeStatusUpdate",
    # Match
    "MatchCandidate",
    "MatchedSkills",
    "MatchPreferences",
    "MatchResult",
    "MatchSkill",
    "ScoreBreakdown",
]
