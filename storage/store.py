"""SQLite-backed store handed to the session engine and services."""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from interview_engine.models import InterviewContext, MetricsProfile, Session, Turn

from . import metrics, questions, responses, sessions
from .sqlite import get_conn


class InterviewStore:  # Groups the storage helpers behind one injectable object
    def __init__(self, db_path: Optional[str] = None, *, conn: Optional[sqlite3.Connection] = None) -> None:
        self._db_path = db_path
        self._conn = conn

    @property
    def db_path(self) -> Optional[str]:
        return self._db_path

    @contextmanager
    def transaction(self) -> Iterator["InterviewStore"]:
        """Yield a store whose writes commit together, or not at all if the block raises."""

        if self._conn is not None:
            yield self
            return
        with get_conn(self._db_path) as conn:
            yield InterviewStore(self._db_path, conn=conn)

    # Sessions
    def create_session(self, **data: Any) -> Session:
        return sessions.insert_session(db_path=self._db_path, conn=self._conn, **data)

    def get_session(self, session_id: int) -> Optional[Session]:
        return sessions.get_session(session_id, db_path=self._db_path, conn=self._conn)

    def list_sessions(self, job_application_id: int) -> List[Session]:
        return sessions.list_sessions(job_application_id, db_path=self._db_path, conn=self._conn)

    def update_session(self, session_id: int, **fields: Any) -> None:
        sessions.update_session(session_id, db_path=self._db_path, conn=self._conn, **fields)

    def delete_session(self, session_id: int) -> bool:
        return sessions.delete_session(session_id, db_path=self._db_path, conn=self._conn)

    # Turns
    def create_turn(self, **data: Any) -> Turn:
        return responses.insert_turn(db_path=self._db_path, conn=self._conn, **data)

    def update_turn(self, turn_id: int, **fields: Any) -> None:
        responses.update_turn(turn_id, db_path=self._db_path, conn=self._conn, **fields)

    def list_turns(self, session_id: int) -> List[Turn]:
        return responses.list_turns(session_id, db_path=self._db_path, conn=self._conn)

    # Question pool and job context
    def list_questions(self, resume_analysis_id: int) -> List[questions.QuestionRecord]:
        return questions.list_questions(resume_analysis_id, db_path=self._db_path, conn=self._conn)

    def get_job_context(self, job_application_id: int) -> InterviewContext:
        return questions.get_job_context(job_application_id, db_path=self._db_path, conn=self._conn)

    # Metrics
    def get_metrics(self, job_application_id: int) -> Optional[MetricsProfile]:
        return metrics.get_profile(job_application_id, db_path=self._db_path, conn=self._conn)

    def save_metrics(self, profile: MetricsProfile) -> None:
        metrics.save_profile(profile, db_path=self._db_path, conn=self._conn)

    def register_session(self, job_application_id: int) -> None:
        metrics.register_session(job_application_id, db_path=self._db_path, conn=self._conn)

    def unregister_session(self, job_application_id: int, *, was_completed: bool) -> None:
        metrics.unregister_session(
            job_application_id, was_completed=was_completed, db_path=self._db_path, conn=self._conn
        )


__all__ = ["InterviewStore"]
