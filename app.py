"""Streamlit UI for exploring the Course Community Matching Engine."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

sys.path.insert(0, str(Path(__file__).resolve().parent))

from src.coursematch.config import settings  # noqa: E402
from src.coursematch.engine import (  # noqa: E402
    build_community_matches,
    find_user,
    load_enrollments_from_json,
    load_roster_from_json,
    load_sample_enrollments,
    load_sample_roster,
    roster_from_enrollments,
)
from src.coursematch.models import CommunityMatches, MatchingUser  # noqa: E402
from src.coursematch.roster import EnrollmentRow  # noqa: E402

logging.basicConfig(level=logging.INFO)

st.set_page_config(page_title="Course Matching Engine", layout="wide")
st.title("Course Community — Matching Engine")

_UPLOAD_HELP = """\
Upload a JSON array of users with their enrolled courses:

```json
[
  {
    "id": "u-linh",
    "full_name": "Linh Tran",
    "courses": [
      {"course_id": "python-101", "level": "Beginner"},
      {"course_id": "sql-basics", "level": null}
    ]
  }
]
```

Optional fields: `email`, `avatar_url`, `role` (defaults to `user`).
"""

_ENROLLMENT_HELP = """\
Upload a JSON array of enrollment rows, one per (user, course), with the
course and profile joined in.  A joined relation may be an object or a
single-element list:

```json
[
  {
    "user_id": "u-linh",
    "course_id": "python-101",
    "course": {"id": "python-101", "level": "Beginner"},
    "profile": [{"id": "u-linh", "full_name": "Linh Tran", "role": "user"}]
  }
]
```

Rows without a profile are ignored.
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _roster_frame(roster: list[MatchingUser]) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "id": u.id,
            "name": u.display_name,
            "role": u.role,
            "courses": ", ".join(
                f"{c.course_id} ({c.level or '—'})"
                for c in u.courses if c.course_id
            ),
        }
        for u in roster
    ])


def _render_results(result: CommunityMatches) -> None:
    st.markdown("---")
    st.subheader(
        f"Previous matches ({len(result.previous_matches)} of "
        f"{result.total_previous_matches})"
    )
    if result.previous_matches:
        st.dataframe(pd.DataFrame([
            {
                "name": m.user.display_name,
                "room": m.room_id,
                "course": m.course_id,
                "matched_at": m.matched_at,
            }
            for m in result.previous_matches
        ]), use_container_width=True)
    else:
        st.caption("No previous matches.")

    st.subheader(f"New matches ({len(result.new_matches)})")
    if not result.new_matches:
        st.caption("No candidates — the reference user has no courses.")
        return

    df = pd.DataFrame([
        {
            "rank": rank,
            "name": m.candidate.display_name,
            "score": m.score,
            "common courses": ", ".join(sorted(m.common_course_ids)) or "—",
            "level matches": m.level_match_count,
            "course": m.breakdown.course,
            "level": m.breakdown.level,
            "progress": m.breakdown.progress,
        }
        for rank, m in enumerate(result.new_matches, 1)
    ])
    try:
        styled = df.style.background_gradient(
            subset=["score"], cmap="YlGn", vmin=0, vmax=100,
        ).format({"score": "{:.2f}"})
        st.dataframe(styled, use_container_width=True)
    except ImportError:
        st.dataframe(df, use_container_width=True)


def _run(roster: list[MatchingUser], key: str) -> None:
    if len(roster) < 2:
        st.error("Need at least 2 users to run matching.")
        return

    st.dataframe(_roster_frame(roster), use_container_width=True)
    user_id = st.selectbox(
        "Reference user", [u.id for u in roster], key=f"ref_{key}",
    )
    top_n = st.slider(
        "Top N", min_value=1, max_value=100, value=settings.top_n,
        key=f"top_{key}",
    )

    if st.button("Find matches", key=f"run_{key}", type="primary"):
        progress_bar = st.progress(0.0)
        status_text = st.empty()

        def _cb(label: str, frac: float) -> None:
            progress_bar.progress(min(frac, 1.0))
            status_text.text(label)

        reference = find_user(roster, user_id)
        result = build_community_matches(
            reference, roster, top_n=top_n, progress_callback=_cb,
        )
        _render_results(result)


def _run_enrollments(rows: list[EnrollmentRow], key: str) -> None:
    user_ids = list(dict.fromkeys(r.user_id for r in rows))
    if len(user_ids) < 2:
        st.error("Need enrollments for at least 2 users to run matching.")
        return

    user_id = st.selectbox("Reference user", user_ids, key=f"ref_{key}")
    top_n = st.slider(
        "Top N", min_value=1, max_value=100, value=settings.top_n,
        key=f"top_{key}",
    )

    reference, roster = roster_from_enrollments(user_id, rows)
    st.caption(
        f"{reference.display_name} ({reference.role}): "
        f"{len(reference.courses)} courses, {len(roster)} candidates"
    )
    if roster:
        st.dataframe(_roster_frame(roster), use_container_width=True)

    if st.button("Find matches", key=f"run_{key}", type="primary"):
        result = build_community_matches(reference, roster, top_n=top_n)
        _render_results(result)


# ---------------------------------------------------------------------------
# Main tabs
# ---------------------------------------------------------------------------

tab_sample, tab_upload, tab_rows = st.tabs([
    "Sample Roster", "Upload JSON", "Enrollment Rows",
])

with tab_sample:
    st.subheader("Run with the built-in roster")
    _run(load_sample_roster(), "sample")

with tab_upload:
    st.subheader("Upload a custom roster")
    st.markdown(_UPLOAD_HELP)
    uploaded = st.file_uploader("Upload JSON", type=["json"])
    if uploaded:
        try:
            roster = load_roster_from_json(json.loads(uploaded.read()))
        except Exception as e:
            st.error(f"Error loading JSON: {e}")
        else:
            st.success(f"Loaded {len(roster)} users")
            _run(roster, "upload")

with tab_rows:
    st.subheader("Build the roster from enrollment rows")
    st.markdown(_ENROLLMENT_HELP)
    source = st.radio(
        "Rows", ["Built-in sample", "Upload"], horizontal=True,
    )
    if source == "Built-in sample":
        _run_enrollments(load_sample_enrollments(), "rows_sample")
    else:
        uploaded_rows = st.file_uploader(
            "Upload JSON", type=["json"], key="rows_upload",
        )
        if uploaded_rows:
            try:
                rows = load_enrollments_from_json(
                    json.loads(uploaded_rows.read()),
                )
            except Exception as e:
                st.error(f"Error loading JSON: {e}")
            else:
                st.success(f"Loaded {len(rows)} enrollment rows")
                _run_enrollments(rows, "rows_upload")
