"""Persistence helpers for mock interview sessions."""
from __future__ import annotations

import datetime as dt
import sqlite3
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from interview_engine.models import DifficultyPreference, FeedbackMode, Session

from .codec import dump_json, load_json
from .sqlite import use_conn

_COLUMNS = """id, job_application_id, resume_analysis_id, feedback_mode, question_count,
    selected_categories_json, difficulty, voice_enabled, status, current_question_index,
    overall_score, summary_feedback, strength_areas_json, improvement_areas_json,
    started_at, completed_at, created_at, updated_at"""

_UPDATABLE = {
    "status",
    "current_question_index",
    "overall_score",
    "summary_feedback",
    "strength_areas",
    "improvement_areas",
    "started_at",
    "completed_at",
}
_JSON_FIELDS = {"strength_areas": "strength_areas_json", "improvement_areas": "improvement_areas_json"}


class SessionPayload(BaseModel):
    job_application_id: int
    resume_analysis_id: Optional[int] = None
    feedback_mode: FeedbackMode = "immediate"
    question_count: int = Field(default=10, ge=1)
    selected_categories: Optional[List[str]] = None
    difficulty: DifficultyPreference = "mixed"
    voice_enabled: bool = False


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _row_to_session(row: sqlite3.Row) -> Session:
    data = dict(row)
    data["selected_categories"] = load_json(data.pop("selected_categories_json"), None)
    data["strength_areas"] = load_json(data.pop("strength_areas_json"), None)
    data["improvement_areas"] = load_json(data.pop("improvement_areas_json"), None)
    data["voice_enabled"] = bool(data["voice_enabled"])
    return Session(**data)


def insert_session(
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
    **data: Any,
) -> Session:
    """Create a session in ``setup`` and return it."""

    payload = SessionPayload(**data)
    timestamp = _now()
    with use_conn(conn, db_path) as conn:
        cur = conn.execute(
            """INSERT INTO mock_interview_sessions
               (job_application_id, resume_analysis_id, feedback_mode, question_count,
                selected_categories_json, difficulty, voice_enabled, status,
                current_question_index, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, 'setup', 0, ?, ?)""",
            (
                payload.job_application_id,
                payload.resume_analysis_id,
                payload.feedback_mode,
                payload.question_count,
                dump_json(payload.selected_categories),
                payload.difficulty,
                int(payload.voice_enabled),
                timestamp,
                timestamp,
            ),
        )
        session_id = int(cur.lastrowid)
        row = conn.execute(f"SELECT {_COLUMNS} FROM mock_interview_sessions WHERE id = ?", (session_id,)).fetchone()
    return _row_to_session(row)


def get_session(
    session_id: int,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> Optional[Session]:
    with use_conn(conn, db_path) as conn:
        row = conn.execute(f"SELECT {_COLUMNS} FROM mock_interview_sessions WHERE id = ?", (session_id,)).fetchone()
    return _row_to_session(row) if row is not None else None


def list_sessions(
    job_application_id: int,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> List[Session]:
    """Sessions for a job application, newest first."""

    with use_conn(conn, db_path) as conn:
        rows = conn.execute(
            f"""SELECT {_COLUMNS} FROM mock_interview_sessions
                WHERE job_application_id = ? ORDER BY created_at DESC, id DESC""",
            (job_application_id,),
        ).fetchall()
    return [_row_to_session(row) for row in rows]


def update_session(
    session_id: int,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
    **fields: Any,
) -> None:
    """Point-update session columns; ``updated_at`` is always refreshed."""

    unknown = set(fields) - _UPDATABLE
    if unknown:
        raise ValueError(f"Cannot update session fields: {sorted(unknown)}")
    assignments: Dict[str, Any] = {}
    for name, value in fields.items():
        if name in _JSON_FIELDS:
            assignments[_JSON_FIELDS[name]] = dump_json(value)
        elif isinstance(value, dt.datetime):
            assignments[name] = value.isoformat()
        else:
            assignments[name] = value
    assignments["updated_at"] = _now()
    columns = ", ".join(f"{name} = ?" for name in assignments)
    with use_conn(conn, db_path) as conn:
        conn.execute(
            f"UPDATE mock_interview_sessions SET {columns} WHERE id = ?",
            (*assignments.values(), session_id),
        )


def delete_session(
    session_id: int,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> bool:
    """Delete a session; its turns go with it."""

    with use_conn(conn, db_path) as conn:
        cur = conn.execute("DELETE FROM mock_interview_sessions WHERE id = ?", (session_id,))
        return cur.rowcount > 0


__all__ = ["delete_session", "get_session", "insert_session", "list_sessions", "update_session"]
