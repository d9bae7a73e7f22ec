"""Persistence helpers for job applications and their generated question pools."""
from __future__ import annotations

import datetime as dt
import sqlite3
from typing import Any, List, Optional

from pydantic import BaseModel

from interview_engine.models import InterviewContext

from .sqlite import use_conn


class JobApplicationPayload(BaseModel):
    title: str
    company_name: Optional[str] = None
    job_description: Optional[str] = None
    resume_content: Optional[str] = None


class QuestionPayload(BaseModel):
    resume_analysis_id: int
    question: str
    category: Optional[str] = None
    difficulty: Optional[str] = None
    suggested_answer: Optional[str] = None


class QuestionRecord(QuestionPayload):
    id: int


def insert_job_application(
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
    **data: Any,
) -> int:
    """Insert a job application row and return its primary key."""

    payload = JobApplicationPayload(**data)
    timestamp = dt.datetime.now(dt.timezone.utc).isoformat()
    with use_conn(conn, db_path) as conn:
        cur = conn.execute(
            """INSERT INTO job_applications (title, company_name, job_description, resume_content, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (payload.title, payload.company_name, payload.job_description, payload.resume_content, timestamp),
        )
        return int(cur.lastrowid)


def get_job_context(
    job_application_id: int,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> InterviewContext:
    """Context for the agents; empty when the job application is unknown."""

    with use_conn(conn, db_path) as conn:
        row = conn.execute(
            "SELECT title, company_name, job_description, resume_content FROM job_applications WHERE id = ?",
            (job_application_id,),
        ).fetchone()
    if row is None:
        return InterviewContext()
    return InterviewContext(
        job_title=row["title"],
        company_name=row["company_name"],
        job_description=row["job_description"] or "",
        resume_content=row["resume_content"] or "",
    )


def insert_question(
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
    **data: Any,
) -> int:
    """Insert a generated interview question and return its primary key."""

    payload = QuestionPayload(**data)
    timestamp = dt.datetime.now(dt.timezone.utc).isoformat()
    with use_conn(conn, db_path) as conn:
        cur = conn.execute(
            """INSERT INTO interview_questions
               (resume_analysis_id, question, category, difficulty, suggested_answer, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                payload.resume_analysis_id,
                payload.question,
                payload.category,
                payload.difficulty,
                payload.suggested_answer,
                timestamp,
            ),
        )
        return int(cur.lastrowid)


def list_questions(
    resume_analysis_id: int,
    *,
    db_path: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> List[QuestionRecord]:
    """All questions generated for a resume analysis, in insertion order."""

    with use_conn(conn, db_path) as conn:
        rows = conn.execute(
            """SELECT id, resume_analysis_id, question, category, difficulty, suggested_answer
               FROM interview_questions WHERE resume_analysis_id = ? ORDER BY id""",
            (resume_analysis_id,),
        ).fetchall()
    return [QuestionRecord(**dict(row)) for row in rows]


__all__ = [
    "get_job_context",
    "insert_job_application",
    "insert_question",
    "list_questions",
    "QuestionRecord",
]
