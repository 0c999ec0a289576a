"""Unit tests for roster assembly from enrollment join rows."""

from src.coursematch.roster import EnrollmentRow, build_roster, reference_from_rows


def _row(user_id, course_id, level=None, role="user", profile=True, **extra):
    data = {
        "user_id": user_id,
        "course_id": course_id,
        "course": {"id": course_id, "level": level},
        "profile": (
            {"id": user_id, "full_name": f"User {user_id}", "role": role}
            if profile else None
        ),
    }
    data.update(extra)
    return EnrollmentRow(**data)


class TestEnrollmentRow:
    def test_single_element_list_unwrapped(self):
        row = EnrollmentRow(
            user_id="u1",
            course_id="c1",
            course=[{"id": "c1", "level": "Beginner"}],
            profile=[{"id": "u1", "role": "user"}],
        )
        assert row.course.level == "Beginner"
        assert row.profile.id == "u1"

    def test_empty_list_is_none(self):
        row = EnrollmentRow(user_id="u1", course_id="c1", course=[], profile=[])
        assert row.course is None
        assert row.profile is None

    def test_scalar_relation_kept(self):
        row = EnrollmentRow(
            user_id="u1", course_id="c1", course={"level": "Advanced"},
        )
        assert row.course.level == "Advanced"


class TestBuildRoster:
    def test_groups_by_user_in_first_seen_order(self):
        rows = [
            _row("u2", "c1", "Beginner"),
            _row("u1", "c1", "Advanced"),
            _row("u2", "c2"),
        ]
        roster = build_roster(rows)
        assert [u.id for u in roster] == ["u2", "u1"]
        assert [c.course_id for c in roster[0].courses] == ["c1", "c2"]
        assert roster[0].courses[0].level == "Beginner"
        assert roster[0].full_name == "User u2"

    def test_duplicate_course_keeps_first_level(self):
        rows = [_row("u1", "c1", "Beginner"), _row("u1", "c1", "Advanced")]
        roster = build_roster(rows)
        assert len(roster[0].courses) == 1
        assert roster[0].courses[0].level == "Beginner"

    def test_rows_without_profile_skipped(self):
        rows = [_row("u1", "c1", profile=False), _row("u2", "c1")]
        assert [u.id for u in build_roster(rows)] == ["u2"]

    def test_role_filter(self):
        rows = [_row("u1", "c1", role="admin"), _row("u2", "c1", role="user")]
        roster = build_roster(rows, role="user")
        assert [u.id for u in roster] == ["u2"]
        assert roster[0].role == "user"

    def test_excluded_users(self):
        rows = [_row("me", "c1"), _row("u1", "c1"), _row("u2", "c1")]
        roster = build_roster(rows, exclude_user_ids=["me", "u2"])
        assert [u.id for u in roster] == ["u1"]

    def test_missing_course_relation_gives_no_level(self):
        rows = [_row("u1", "c1", course=None)]
        assert build_roster(rows)[0].courses[0].level is None

    def test_rows_without_course_id_create_user_only(self):
        rows = [_row("u1", None)]
        roster = build_roster(rows)
        assert roster[0].id == "u1"
        assert roster[0].courses == []


class TestReferenceFromRows:
    def test_only_own_rows(self):
        rows = [
            _row("me", "c1", "Beginner"),
            _row("other", "c2"),
            _row("me", "c1", "Advanced"),
            _row("me", "c3"),
        ]
        me = reference_from_rows("me", rows, full_name="Me", role="user")
        assert me.id == "me"
        assert me.full_name == "Me"
        assert [(c.course_id, c.level) for c in me.courses] == [
            ("c1", "Beginner"), ("c3", None),
        ]

    def test_no_rows(self):
        me = reference_from_rows("me", [])
        assert me.courses == []
