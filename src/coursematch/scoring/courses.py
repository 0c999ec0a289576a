"""Component 1: Course Overlap (50 points).

Shared-course detection is set based: duplicate or empty course ids in
either enrollment list never count twice.
"""

from __future__ import annotations

import logging

from src.coursematch.config import settings
from src.coursematch.models import MatchingUser

logger = logging.getLogger(__name__)


def distinct_course_ids(user: MatchingUser) -> frozenset[str]:
    return frozenset(c.course_id for c in user.courses or [] if c.course_id)


def find_common_courses(
    reference: MatchingUser, candidate: MatchingUser,
) -> frozenset[str]:
    """Course ids enrolled by both users.  Symmetric in its arguments."""
    reference_ids = distinct_course_ids(reference)
    common = frozenset(
        c.course_id for c in candidate.courses or []
        if c.course_id and c.course_id in reference_ids
    )
    if common:
        logger.debug(
            "Common courses %s<->%s: %d (%s)",
            reference.id, candidate.id, len(common), ",".join(sorted(common)),
        )
    return common


def score(
    reference: MatchingUser,
    candidate: MatchingUser,
    common: frozenset[str],
) -> float:
    """Course component in [0, course weight].

    Rewards covering a larger fraction of whichever user is enrolled in
    more courses.
    """
    if not common:
        return 0.0
    weight = settings.component_weights.course
    largest = max(len(reference.courses), len(candidate.courses))
    if largest == 0:
        return 0.0
    return min(len(common) / largest * weight, weight)
