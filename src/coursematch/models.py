"""Pydantic v2 data models — the data contracts flowing through the system."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Roster entities
# ---------------------------------------------------------------------------

class EnrolledCourse(BaseModel):
    course_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("course_id", "courseId"),
    )
    level: str | None = None


class MatchingUser(BaseModel):
    id: str = Field(min_length=1)
    full_name: str | None = Field(
        default=None, validation_alias=AliasChoices("full_name", "fullName"),
    )
    email: str | None = None
    avatar_url: str | None = Field(
        default=None, validation_alias=AliasChoices("avatar_url", "avatarUrl"),
    )
    role: str = "user"
    courses: list[EnrolledCourse] = Field(default_factory=list)

    @field_validator("courses", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or self.id


# ---------------------------------------------------------------------------
# Scoring / output types
# ---------------------------------------------------------------------------

class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    course: float = 0.0
    level: float = 0.0
    progress: float = 0.0


class MatchScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    candidate: MatchingUser
    score: float
    common_course_ids: frozenset[str] = frozenset()
    level_match_count: int = 0
    breakdown: ScoreBreakdown = ScoreBreakdown()


class PreviousMatch(BaseModel):
    """A user already paired with the reference user in a matched chat room."""

    user: MatchingUser
    room_id: str
    course_id: str | None = None
    matched_at: datetime

    @field_validator("matched_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class CommunityMatches(BaseModel):
    previous_matches: list[PreviousMatch] = Field(default_factory=list)
    total_previous_matches: int = 0
    new_matches: list[MatchScore] = Field(default_factory=list)
