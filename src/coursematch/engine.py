"""Top-level orchestrator — community matches for one reference user.

Pipeline:
  1. Receive the reference user, the roster and their previous matches
  2. Bucket previous matches (same role, de-duplicated, newest first)
  3. Drop the reference user, previously matched users and other roles
  4. Score every remaining candidate                        (deterministic)
  5. Rank by score and keep the top N
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Iterable

from src.coursematch.config import settings
from src.coursematch.models import (
    CommunityMatches,
    MatchingUser,
    MatchScore,
    PreviousMatch,
)
from src.coursematch.ranking import top_matches
from src.coursematch.roster import EnrollmentRow, build_roster, reference_from_rows
from src.coursematch.scoring.composite import calculate_match_score

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"


def load_roster_from_json(data: list[dict]) -> list[MatchingUser]:
    return [MatchingUser(**u) for u in data]


def load_sample_roster() -> list[MatchingUser]:
    path = DATA_DIR / "sample_roster.json"
    with open(path) as f:
        raw = json.load(f)
    return load_roster_from_json(raw)


def find_user(roster: Iterable[MatchingUser], user_id: str) -> MatchingUser:
    for user in roster:
        if user.id == user_id:
            return user
    raise KeyError(f"No user with id {user_id!r} in roster")


def load_enrollments_from_json(data: list[dict]) -> list[EnrollmentRow]:
    return [EnrollmentRow(**r) for r in data]


def load_sample_enrollments() -> list[EnrollmentRow]:
    path = DATA_DIR / "sample_enrollments.json"
    with open(path) as f:
        raw = json.load(f)
    return load_enrollments_from_json(raw)


def roster_from_enrollments(
    user_id: str,
    rows: Iterable[EnrollmentRow],
    *,
    role: str | None = None,
) -> tuple[MatchingUser, list[MatchingUser]]:
    """Split enrollment rows into the reference user and their roster.

    The reference user's role and display fields come from their own
    profile row when ``role`` is not given.  Only users of that role are
    kept in the roster.
    """
    rows = list(rows)
    own = next(
        (r.profile for r in rows if r.user_id == user_id and r.profile),
        None,
    )
    if role is None:
        role = own.role if own else "user"
    reference = reference_from_rows(
        user_id,
        rows,
        full_name=own.full_name if own else None,
        email=own.email if own else None,
        avatar_url=own.avatar_url if own else None,
        role=role,
    )
    roster = build_roster(rows, role=role, exclude_user_ids=[user_id])
    return reference, roster


def _bucket_previous(
    previous: Iterable[PreviousMatch], role: str, limit: int,
) -> tuple[list[PreviousMatch], int]:
    unique: list[PreviousMatch] = []
    seen: set[str] = set()
    for match in previous:
        if match.user.role != role or match.user.id in seen:
            continue
        seen.add(match.user.id)
        unique.append(match)
    unique.sort(key=lambda m: m.matched_at, reverse=True)
    return unique[:limit], len(unique)


def build_community_matches(
    reference: MatchingUser,
    roster: Iterable[MatchingUser],
    previous_matches: Iterable[PreviousMatch] = (),
    *,
    top_n: int | None = None,
    previous_limit: int | None = None,
    progress_callback: Callable[[str, float], None] | None = None,
) -> CommunityMatches:
    if reference is None:
        raise ValueError("reference user is required")

    n_top = settings.top_n if top_n is None else top_n
    n_previous = (
        settings.previous_matches_limit if previous_limit is None
        else previous_limit
    )

    def _progress(label: str, frac: float) -> None:
        if progress_callback:
            progress_callback(label, frac)

    previous = list(previous_matches)
    shown_previous, total_previous = _bucket_previous(
        previous, reference.role, n_previous,
    )

    if not reference.courses:
        logger.info(
            "User %s has no courses; returning %d previous matches only",
            reference.id, len(shown_previous),
        )
        _progress("Complete", 1.0)
        return CommunityMatches(
            previous_matches=shown_previous,
            total_previous_matches=total_previous,
        )

    matched_ids = {m.user.id for m in previous}
    candidates = [
        u for u in roster
        if u.id != reference.id
        and u.id not in matched_ids
        and u.role == reference.role
    ]

    _progress("Scoring candidates...", 0.0)
    scores: list[MatchScore] = []
    for idx, candidate in enumerate(candidates):
        scores.append(calculate_match_score(reference, candidate))
        _progress("Scoring candidates...", (idx + 1) / len(candidates) * 0.9)

    _progress("Ranking matches...", 0.9)
    ranked = top_matches(scores, n_top)
    _progress("Complete", 1.0)

    logger.info(
        "Community matches for %s: %d candidates scored, %d with shared "
        "courses, %d returned, %d previous (of %d)",
        reference.id, len(scores),
        sum(1 for s in scores if s.common_course_ids),
        len(ranked), len(shown_previous), total_previous,
    )
    return CommunityMatches(
        previous_matches=shown_previous,
        total_previous_matches=total_previous,
        new_matches=ranked,
    )
