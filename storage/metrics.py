"""Persistence helpers for the per-job-application metrics profile."""
from __future__ import annotations

import datetime as dt
import sqlite3
from typing import Optional

from interview_engine.models import MetricsProfile, ScorePoint

from .codec import dump_json, load_json
from .sqlite import use_conn

_COLUMNS = """job_application_id, total_sessions, completed_sessions, average_score,
    behavioral_avg_score, technical_avg_score, situational_avg_score,
    company_specific_avg_score, role_specific_avg_score, score_history_json,
    strongest_category, weakest_category, updated_at"""


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _row_to_profile(row: sqlite3.Row) -> MetricsProfile:
    data = dict(row)
    history = load_json(data.pop("score_history_json"), [])
    points = []
    for entry in history if isinstance(history, list) else []:
        try:
            points.append(ScorePoint(date=str(entry["date"]), score=float(entry["score"])))
        except (KeyError, TypeError, ValueError):
            continue
    data["score_history"] = points
    return MetricsProfile(**data)


def get_profile(
    job_application_id: int,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> Optional[MetricsProfile]:
    with use_conn(conn, db_path) as conn:
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM mock_interview_metrics WHERE job_application_id = ?",
            (job_application_id,),
        ).fetchone()
    return _row_to_profile(row) if row is not None else None


def register_session(
    job_application_id: int,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> None:
    """Count a newly created session, creating the profile on first use."""

    with use_conn(conn, db_path) as conn:
        conn.execute(
            """INSERT INTO mock_interview_metrics (job_application_id, total_sessions, completed_sessions, updated_at)
               VALUES (?, 1, 0, ?)
               ON CONFLICT(job_application_id) DO UPDATE SET
                 total_sessions = total_sessions + 1,
                 updated_at = excluded.updated_at""",
            (job_application_id, _now()),
        )


def unregister_session(
    job_application_id: int,
    *,
    was_completed: bool,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> None:
    """Undo a session's contribution to the session counters."""

    with use_conn(conn, db_path) as conn:
        conn.execute(
            """UPDATE mock_interview_metrics SET
                 total_sessions = MAX(0, total_sessions - 1),
                 completed_sessions = CASE WHEN ? THEN MAX(0, completed_sessions - 1) ELSE completed_sessions END,
                 updated_at = ?
               WHERE job_application_id = ?""",
            (int(was_completed), _now(), job_application_id),
        )


def save_profile(
    profile: MetricsProfile,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> None:
    """Overwrite the aggregate columns of an existing profile."""

    with use_conn(conn, db_path) as conn:
        conn.execute(
            """UPDATE mock_interview_metrics SET
                 completed_sessions = ?,
                 average_score = ?,
                 behavioral_avg_score = ?,
                 technical_avg_score = ?,
                 situational_avg_score = ?,
                 company_specific_avg_score = ?,
                 role_specific_avg_score = ?,
                 score_history_json = ?,
                 strongest_category = ?,
                 weakest_category = ?,
                 updated_at = ?
               WHERE job_application_id = ?""",
            (
                profile.completed_sessions,
                profile.average_score,
                profile.behavioral_avg_score,
                profile.technical_avg_score,
                profile.situational_avg_score,
                profile.company_specific_avg_score,
                profile.role_specific_avg_score,
                dump_json([point.model_dump() for point in profile.score_history]),
                profile.strongest_category,
                profile.weakest_category,
                _now(),
                profile.job_application_id,
            ),
        )


__all__ = ["get_profile", "register_session", "save_profile", "unregister_session"]
