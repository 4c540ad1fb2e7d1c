# =============================================================================
# core/services/matching.py - Skill Matching
# =============================================================================
# Scores how well other users complement the caller's skills.
#
# The score (0-100) is a weighted sum of four components:
#   skill complement  50%  skills you offer that they want, and vice versa
#   location          20%  distance relative to your max distance
#   experience level  20%  proficiency of matched skills vs your preference
#   rating            10%  their average rating
#
# Everything here is pure; MatchService (match_service.py) does the I/O.
# =============================================================================

from __future__ import annotations

import math
from typing import Literal

from core.models.match import (
    MatchCandidate,
    MatchedSkills,
    MatchPreferences,
    MatchResult,
    MatchSkill,
    ScoreBreakdown,
)
from core.models.user import ExperiencePreference
from lib.geo import calculate_geo_distance

SortKey = Literal["score", "skill_complement", "location", "rating"]

SCORE_WEIGHTS = {
    "skill_complement": 0.5,
    "location": 0.2,
    "experience_level": 0.2,
    "rating": 0.1,
}

# Matched skills beyond this count don't raise the complement score
MAX_COUNTED_SKILLS = 5
POINTS_PER_SKILL = 15
BIDIRECTIONAL_BONUS = 25


def _round(value: float) -> int:
    """Round half up (scores are never negative)."""
    return int(math.floor(value + 0.5))


# =============================================================================
# Skill Comparison
# =============================================================================

def is_similar_skill(a: MatchSkill, b: MatchSkill) -> bool:
    """
    Two skills match on equal titles (case-insensitive), or on equal
    category plus equal, non-empty subcategory.
    """
    if a.title and a.title.lower() == b.title.lower():
        return True
    if a.category and a.category == b.category:
        if a.subcategory and b.subcategory and a.subcategory == b.subcategory:
            return True
    return False


def find_complementary_skills(you: MatchCandidate, they: MatchCandidate) -> MatchedSkills:
    """Skills each side offers that the other side wants."""
    you_offer = [
        offered for offered in you.offered_skills
        if any(is_similar_skill(offered, wanted) for wanted in they.wanted_skills)
    ]
    they_offer = [
        offered for offered in they.offered_skills
        if any(is_similar_skill(offered, wanted) for wanted in you.wanted_skills)
    ]
    return MatchedSkills(you_offer=you_offer, they_offer=they_offer)


# =============================================================================
# Component Scores
# =============================================================================

def skill_complement_score(matched: MatchedSkills) -> int:
    """15 points per matched skill (up to 5), plus 25 when both sides offer something."""
    if matched.count == 0:
        return 0
    base = min(matched.count, MAX_COUNTED_SKILLS) * POINTS_PER_SKILL
    bonus = BIDIRECTIONAL_BONUS if matched.is_bidirectional else 0
    return min(base + bonus, 100)


def location_score(you: MatchCandidate, they: MatchCandidate) -> int:
    """
    100 when either side is remote-only, 50 when a location is unknown,
    otherwise falls linearly to 0 at your max distance.
    """
    if you.preferences.remote_only or they.preferences.remote_only:
        return 100
    if not you.has_location or not they.has_location:
        return 50

    distance = calculate_geo_distance(you.latitude, you.longitude, they.latitude, they.longitude)
    max_distance = you.preferences.max_distance_km or 50.0
    return max(0, _round(100 - (distance / max_distance) * 100))


def _average_rank(skills: list[MatchSkill]) -> float:
    if not skills:
        return 0.0
    return sum(s.proficiency_level.rank for s in skills) / len(skills)


def experience_level_score(you: MatchCandidate, matched: MatchedSkills) -> int:
    """Compare the proficiency of what each side offers against your preference."""
    if matched.count == 0:
        return 50

    preference = you.preferences.experience_level_preference
    if preference == ExperiencePreference.ANY:
        return 90

    if not matched.is_bidirectional:
        return 60

    your_level = _average_rank(matched.you_offer)
    their_level = _average_rank(matched.they_offer)

    if preference == ExperiencePreference.SIMILAR:
        return _round(100 - abs(your_level - their_level) * 25)
    if preference == ExperiencePreference.HIGHER:
        if their_level > your_level:
            return _round(100 - max(0.0, 4 - (their_level - your_level)) * 20)
        return 50
    if preference == ExperiencePreference.LOWER:
        if their_level < your_level:
            return _round(100 - max(0.0, 4 - (your_level - their_level)) * 20)
        return 50
    return 70


def rating_score(they: MatchCandidate) -> int:
    """Convert a 5-star rating to 0-100; unrated users get 70."""
    if not they.rating:
        return 70
    return _round((they.rating / 5) * 100)


# =============================================================================
# Reasons
# =============================================================================

def generate_match_reasons(
    you: MatchCandidate,
    they: MatchCandidate,
    matched: MatchedSkills,
    breakdown: ScoreBreakdown,
) -> list[str]:
    """Human-readable explanations shown next to a match."""
    reasons: list[str] = []

    if matched.count > 0:
        you_count = len(matched.you_offer)
        they_count = len(matched.they_offer)
        if you_count and they_count:
            reasons.append(
                f"You have {you_count} skills they want and they have {they_count} skills you want"
            )
        elif they_count:
            reasons.append(f"They have {they_count} skills you're looking for")
        else:
            reasons.append(f"You have {you_count} skills they're looking for")

        if matched.count <= 3:
            titles = ", ".join(s.title for s in matched.you_offer + matched.they_offer)
            reasons.append(f"Matching skills include: {titles}")

    if breakdown.location >= 80:
        if you.preferences.remote_only or they.preferences.remote_only:
            reasons.append("Both users are open to remote skill exchanges")
        elif you.has_location and they.has_location:
            distance = calculate_geo_distance(you.latitude, you.longitude, they.latitude, they.longitude)
            reasons.append(f"Located only {_round(distance)}km away from you")

    if breakdown.experience_level >= 80:
        preference = you.preferences.experience_level_preference
        if preference == ExperiencePreference.SIMILAR:
            reasons.append("Has a similar experience level to you")
        elif preference == ExperiencePreference.HIGHER:
            reasons.append("Has more experience in the skills you want to learn")
        elif preference == ExperiencePreference.LOWER:
            reasons.append("Is looking to learn at your expertise level")
        elif breakdown.experience_level > 85:
            reasons.append("Experience levels are highly compatible")

    if they.rating and they.rating >= 4.5:
        reasons.append(f"Highly rated user ({they.rating}/5 stars)")
    elif they.rating and they.rating >= 4.0:
        reasons.append(f"Well-rated user ({they.rating}/5 stars)")

    return reasons


# =============================================================================
# Scoring & Ranking
# =============================================================================

def calculate_match_score(you: MatchCandidate, they: MatchCandidate) -> MatchResult:
    """Score one candidate against the caller."""
    matched = find_complementary_skills(you, they)
    breakdown = ScoreBreakdown(
        skill_complement=skill_complement_score(matched),
        location=location_score(you, they),
        experience_level=experience_level_score(you, matched),
        rating=rating_score(they),
    )

    total = _round(
        breakdown.skill_complement * SCORE_WEIGHTS["skill_complement"]
        + breakdown.location * SCORE_WEIGHTS["location"]
        + breakdown.experience_level * SCORE_WEIGHTS["experience_level"]
        + breakdown.rating * SCORE_WEIGHTS["rating"]
    )

    return MatchResult(
        candidate=they,
        score=total,
        breakdown=breakdown,
        matched_skills=matched,
        reasons=generate_match_reasons(you, they, matched, breakdown),
    )


def sort_matches(matches: list[MatchResult], sort_by: SortKey = "score") -> list[MatchResult]:
    """Sort best-first by the chosen criterion."""
    keys = {
        "score": lambda m: m.score,
        "skill_complement": lambda m: m.breakdown.skill_complement,
        "location": lambda m: m.breakdown.location,
        "rating": lambda m: m.candidate.rating or 0,
    }
    return sorted(matches, key=keys.get(sort_by, keys["score"]), reverse=True)


def filter_matches_by_preferences(
    matches: list[MatchResult],
    preferences: MatchPreferences,
) -> list[MatchResult]:
    """Drop matches under the threshold, and (unless remote-only) those too far away."""
    kept = []
    for match in matches:
        if match.score < preferences.matching_threshold:
            continue
        if not preferences.remote_only and match.breakdown.location < 50:
            continue
        kept.append(match)
    return kept


def find_matches(
    you: MatchCandidate,
    candidates: list[MatchCandidate],
    limit: int = 20,
    sort_by: SortKey = "score",
) -> list[MatchResult]:
    """
    Score every other candidate, keep those at or above your threshold,
    and return the best `limit` of them.
    """
    threshold = you.preferences.matching_threshold
    results = [
        calculate_match_score(you, they)
        for they in candidates
        if they.id != you.id
    ]
    results = [r for r in results if r.score >= threshold]
    return sort_matches(results, sort_by)[:limit]
