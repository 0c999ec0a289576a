"""Ranking helpers over scored candidates."""

from __future__ import annotations

from typing import Iterable

from src.coursematch.models import MatchScore


def sort_matches_by_score(matches: Iterable[MatchScore]) -> list[MatchScore]:
    """Highest score first.  Equal scores keep their input order."""
    return sorted(matches, key=lambda m: m.score, reverse=True)


def top_matches(
    matches: Iterable[MatchScore], limit: int | None = None,
) -> list[MatchScore]:
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    ranked = sort_matches_by_score(matches)
    return ranked if limit is None else ranked[:limit]
