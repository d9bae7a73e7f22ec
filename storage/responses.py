"""Persistence helpers for interview turns (question/answer records)."""
from __future__ import annotations

import datetime as dt
import sqlite3
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from interview_engine.models import Turn

from .codec import dump_json, load_json
from .sqlite import use_conn

_COLUMNS = """id, session_id, question_id, question_text, question_category, question_difficulty,
    is_follow_up, parent_response_id, order_index, user_answer, answered_at, score, feedback,
    suggested_improvement, key_points_covered_json, key_points_missed_json, evaluated_at, created_at"""

_UPDATABLE = {
    "user_answer",
    "answered_at",
    "score",
    "feedback",
    "suggested_improvement",
    "key_points_covered",
    "key_points_missed",
    "evaluated_at",
}
_JSON_FIELDS = {"key_points_covered": "key_points_covered_json", "key_points_missed": "key_points_missed_json"}


class TurnConflictError(RuntimeError):
    """Raised when a new turn would break the one-pending-turn or ordering constraints."""


class TurnPayload(BaseModel):
    session_id: int
    question_id: Optional[int] = None
    question_text: str
    question_category: Optional[str] = None
    question_difficulty: Optional[str] = None
    is_follow_up: bool = False
    parent_response_id: Optional[int] = None
    order_index: int = Field(ge=0)


def _row_to_turn(row: sqlite3.Row) -> Turn:
    data = dict(row)
    data["key_points_covered"] = load_json(data.pop("key_points_covered_json"), [])
    data["key_points_missed"] = load_json(data.pop("key_points_missed_json"), [])
    data["is_follow_up"] = bool(data["is_follow_up"])
    return Turn(**data)


def insert_turn(
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
    **data: Any,
) -> Turn:
    """Create a pending turn.

    Raises:
        TurnConflictError: If the session already has a pending turn or the
            order index is taken.
    """

    payload = TurnPayload(**data)
    timestamp = dt.datetime.now(dt.timezone.utc).isoformat()
    try:
        with use_conn(conn, db_path) as conn:
            cur = conn.execute(
                """INSERT INTO mock_interview_responses
                   (session_id, question_id, question_text, question_category, question_difficulty,
                    is_follow_up, parent_response_id, order_index, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    payload.session_id,
                    payload.question_id,
                    payload.question_text,
                    payload.question_category,
                    payload.question_difficulty,
                    int(payload.is_follow_up),
                    payload.parent_response_id,
                    payload.order_index,
                    timestamp,
                ),
            )
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM mock_interview_responses WHERE id = ?", (int(cur.lastrowid),)
            ).fetchone()
    except sqlite3.IntegrityError as exc:
        raise TurnConflictError(f"Cannot add turn to session {payload.session_id}: {exc}") from exc
    return _row_to_turn(row)


def update_turn(
    turn_id: int,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
    **fields: Any,
) -> None:
    """Point-update a turn by id."""

    unknown = set(fields) - _UPDATABLE
    if unknown:
        raise ValueError(f"Cannot update turn fields: {sorted(unknown)}")
    if not fields:
        return
    assignments: Dict[str, Any] = {}
    for name, value in fields.items():
        if name in _JSON_FIELDS:
            assignments[_JSON_FIELDS[name]] = dump_json(list(value))
        elif isinstance(value, dt.datetime):
            assignments[name] = value.isoformat()
        else:
            assignments[name] = value
    columns = ", ".join(f"{name} = ?" for name in assignments)
    with use_conn(conn, db_path) as conn:
        conn.execute(f"UPDATE mock_interview_responses SET {columns} WHERE id = ?", (*assignments.values(), turn_id))


def list_turns(
    session_id: int,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> List[Turn]:
    """All turns for a session ordered by their index."""

    with use_conn(conn, db_path) as conn:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM mock_interview_responses WHERE session_id = ? ORDER BY order_index",
            (session_id,),
        ).fetchall()
    return [_row_to_turn(row) for row in rows]


__all__ = ["insert_turn", "list_turns", "TurnConflictError", "update_turn"]
