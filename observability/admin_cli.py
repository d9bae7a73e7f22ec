"""Lightweight CLI helpers for inspecting mock interview tables."""
from __future__ import annotations

import argparse
import sqlite3
from typing import Optional

from config.settings import settings


def tail_sessions(limit: int = 20, db_path: Optional[str] = None) -> None:
    conn = sqlite3.connect(db_path or settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT id, job_application_id, status, feedback_mode, question_count, overall_score, created_at
            FROM mock_interview_sessions
            ORDER BY id DESC
            LIMIT ?
            """,
            (limit,),
        )
        for row in cursor.fetchall():
            session_id, job_id, status, mode, count, score, created = row
            print(f"[{created}] session={session_id} job={job_id} {status} mode={mode} questions={count} score={score}")
    finally:
        conn.close()


def show_turns(session_id: int, db_path: Optional[str] = None) -> None:
    conn = sqlite3.connect(db_path or settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT order_index, question_category, is_follow_up, score, user_answer, question_text
            FROM mock_interview_responses
            WHERE session_id = ?
            ORDER BY order_index
            """,
            (session_id,),
        )
        for row in cursor.fetchall():
            order_index, category, follow_up, score, answer, text = row
            marker = "follow-up" if follow_up else category
            state = "pending" if answer is None else f"score={score}"
            print(f"#{order_index} [{marker}] {state} :: {text}")
    finally:
        conn.close()


def show_metrics(job_application_id: int, db_path: Optional[str] = None) -> None:
    conn = sqlite3.connect(db_path or settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT total_sessions, completed_sessions, average_score, strongest_category, weakest_category
            FROM mock_interview_metrics
            WHERE job_application_id = ?
            """,
            (job_application_id,),
        )
        row = cursor.fetchone()
        if row is None:
            print(f"no metrics for job application {job_application_id}")
            return
        total, completed, average, strongest, weakest = row
        print(
            f"job={job_application_id} sessions={total} completed={completed} "
            f"average={average} strongest={strongest} weakest={weakest}"
        )
    finally:
        conn.close()


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--tail-sessions", type=int, help="Show the latest sessions")
    parser.add_argument("--turns", type=int, metavar="SESSION_ID", help="Show the turns of one session")
    parser.add_argument("--metrics", type=int, metavar="JOB_ID", help="Show the metrics profile of a job application")
    parser.add_argument("--db", help="SQLite path (defaults to settings.DB_PATH)")
    args = parser.parse_args()

    if args.tail_sessions:
        tail_sessions(args.tail_sessions, args.db)
    if args.turns is not None:
        show_turns(args.turns, args.db)
    if args.metrics is not None:
        show_metrics(args.metrics, args.db)


if __name__ == "__main__":
    main()
