"""Roster assembly — enrollment join rows to MatchingUser entities.

Storage returns one row per (user, course) enrollment with the course and
profile relations joined in.  Depending on the join, a relation arrives
either as an object or as a single-element list; rows are normalized here
so the scoring layer only ever sees strict ``MatchingUser`` values.
"""

from __future__ import annotations

import logging
from typing import Iterable

from pydantic import BaseModel, field_validator

from src.coursematch.models import EnrolledCourse, MatchingUser

logger = logging.getLogger(__name__)


class CourseInfo(BaseModel):
    id: str | None = None
    level: str | None = None


class ProfileInfo(BaseModel):
    id: str | None = None
    full_name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    role: str = "user"


class EnrollmentRow(BaseModel):
    user_id: str
    course_id: str | None = None
    course: CourseInfo | None = None
    profile: ProfileInfo | None = None

    @field_validator("course", "profile", mode="before")
    @classmethod
    def _unwrap_relation(cls, value):
        if isinstance(value, list):
            return value[0] if value else None
        return value


def build_roster(
    rows: Iterable[EnrollmentRow],
    *,
    role: str | None = None,
    exclude_user_ids: Iterable[str] = (),
) -> list[MatchingUser]:
    """Group enrollment rows into users, in first-seen order.

    Rows without a profile are skipped, as are users whose role differs
    from ``role`` (when given) and users in ``exclude_user_ids``.  A course
    id repeated for the same user keeps the level from its first row.
    """
    excluded = set(exclude_user_ids)
    users: dict[str, MatchingUser] = {}
    seen_courses: dict[str, set[str]] = {}
    skipped = 0

    for row in rows:
        if row.user_id in excluded:
            continue
        profile = row.profile
        if profile is None or (role is not None and profile.role != role):
            skipped += 1
            continue

        user = users.get(row.user_id)
        if user is None:
            user = MatchingUser(
                id=profile.id or row.user_id,
                full_name=profile.full_name,
                email=profile.email,
                avatar_url=profile.avatar_url,
                role=profile.role,
            )
            users[row.user_id] = user
            seen_courses[row.user_id] = set()

        if not row.course_id or row.course_id in seen_courses[row.user_id]:
            continue
        seen_courses[row.user_id].add(row.course_id)
        user.courses.append(EnrolledCourse(
            course_id=row.course_id,
            level=row.course.level if row.course else None,
        ))

    logger.info(
        "Built roster: %d users from enrollment rows (%d rows skipped)",
        len(users), skipped,
    )
    return list(users.values())


def reference_from_rows(
    user_id: str,
    rows: Iterable[EnrollmentRow],
    *,
    full_name: str | None = None,
    email: str | None = None,
    avatar_url: str | None = None,
    role: str = "user",
) -> MatchingUser:
    """Build the reference user from their own enrollment rows."""
    courses: list[EnrolledCourse] = []
    seen: set[str] = set()
    for row in rows:
        if row.user_id != user_id or not row.course_id or row.course_id in seen:
            continue
        seen.add(row.course_id)
        courses.append(EnrolledCourse(
            course_id=row.course_id,
            level=row.course.level if row.course else None,
        ))
    return MatchingUser(
        id=user_id,
        full_name=full_name,
        email=email,
        avatar_url=avatar_url,
        role=role,
        courses=courses,
    )
