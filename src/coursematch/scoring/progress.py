"""Component 3: Progress Match (20 points).

No per-lesson progress is tracked yet, so every pair with a shared course
receives the neutral ratio from settings (0.5 -> 10 points).
"""

from __future__ import annotations

from src.coursematch.config import settings
from src.coursematch.models import MatchingUser


def progress_match_ratio(
    reference: MatchingUser,
    candidate: MatchingUser,
    common: frozenset[str],
) -> float:
    # TODO: compare completion across the common courses once a progress
    # table exists upstream.
    return settings.neutral_progress_ratio


def score(
    reference: MatchingUser,
    candidate: MatchingUser,
    common: frozenset[str],
) -> float:
    ratio = progress_match_ratio(reference, candidate, common)
    return ratio * settings.component_weights.progress
