"""Component 2: Level Match (30 points).

Counts shared courses where both users recorded the same proficiency level.
"""

from __future__ import annotations

from src.coursematch.config import settings
from src.coursematch.models import MatchingUser


def _level_for(user: MatchingUser, course_id: str) -> str | None:
    for course in user.courses:
        if course.course_id == course_id:
            return course.level
    return None


def level_match_count(
    reference: MatchingUser,
    candidate: MatchingUser,
    common: frozenset[str],
) -> int:
    count = 0
    for course_id in common:
        ref_level = _level_for(reference, course_id)
        cand_level = _level_for(candidate, course_id)
        if ref_level and cand_level and ref_level == cand_level:
            count += 1
    return count


def level_match_ratio(
    reference: MatchingUser,
    candidate: MatchingUser,
    common: frozenset[str],
) -> float:
    """Fraction of common courses with matching levels.  [0.0, 1.0]."""
    if not common:
        return 0.0
    return level_match_count(reference, candidate, common) / len(common)


def score(
    reference: MatchingUser,
    candidate: MatchingUser,
    common: frozenset[str],
) -> float:
    ratio = level_match_ratio(reference, candidate, common)
    return ratio * settings.component_weights.level
