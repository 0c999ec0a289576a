"""Composite scorer — additive sum of the three components.

Priority order this produces:
  1. shared courses + same level + same progress   (highest)
  2. shared courses + same level
  3. shared courses only
  4. no shared courses                              (fixed floor, still listed)
"""

from __future__ import annotations

import logging

from src.coursematch.config import settings
from src.coursematch.models import MatchingUser, MatchScore, ScoreBreakdown
from src.coursematch.scoring import courses, level, progress

logger = logging.getLogger(__name__)


def calculate_match_score(
    reference: MatchingUser, candidate: MatchingUser,
) -> MatchScore:
    """Score ``candidate`` from ``reference``'s perspective.  [0, 100]."""
    common = courses.find_common_courses(reference, candidate)

    if not common:
        course_pts = 0.0
        level_pts = 0.0
        progress_pts = settings.no_overlap_floor
        level_matches = 0
    else:
        course_pts = courses.score(reference, candidate, common)
        level_pts = level.score(reference, candidate, common)
        progress_pts = progress.score(reference, candidate, common)
        level_matches = level.level_match_count(reference, candidate, common)

    digits = settings.score_precision
    total = round(course_pts + level_pts + progress_pts, digits)

    logger.debug(
        "Match %s->%s: common=%d course=%.2f level=%.2f progress=%.2f -> %.2f",
        reference.id, candidate.id, len(common),
        course_pts, level_pts, progress_pts, total,
    )
    return MatchScore(
        candidate=candidate,
        score=total,
        common_course_ids=common,
        level_match_count=level_matches,
        breakdown=ScoreBreakdown(
            course=round(course_pts, digits),
            level=round(level_pts, digits),
            progress=round(progress_pts, digits),
        ),
    )
