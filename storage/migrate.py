"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable, Optional

from config.settings import settings

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS job_applications (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  title TEXT NOT NULL,
  company_name TEXT,
  job_description TEXT,
  resume_content TEXT,
  created_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS interview_questions (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  resume_analysis_id INTEGER NOT NULL,
  question TEXT NOT NULL,
  category TEXT,
  difficulty TEXT,
  suggested_answer TEXT,
  created_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS mock_interview_sessions (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  job_application_id INTEGER NOT NULL REFERENCES job_applications(id),
  resume_analysis_id INTEGER,
  feedback_mode TEXT NOT NULL DEFAULT 'immediate',
  question_count INTEGER NOT NULL DEFAULT 10,
  selected_categories_json TEXT,
  difficulty TEXT NOT NULL DEFAULT 'mixed',
  voice_enabled INTEGER NOT NULL DEFAULT 0,
  status TEXT NOT NULL DEFAULT 'setup',
  current_question_index INTEGER NOT NULL DEFAULT 0,
  overall_score REAL,
  summary_feedback TEXT,
  strength_areas_json TEXT,
  improvement_areas_json TEXT,
  started_at TEXT,
  completed_at TEXT,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS mock_interview_responses (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  session_id INTEGER NOT NULL REFERENCES mock_interview_sessions(id) ON DELETE CASCADE,
  question_id INTEGER REFERENCES interview_questions(id),
  question_text TEXT NOT NULL,
  question_category TEXT,
  question_difficulty TEXT,
  is_follow_up INTEGER NOT NULL DEFAULT 0,
  parent_response_id INTEGER,
  order_index INTEGER NOT NULL,
  user_answer TEXT,
  answered_at TEXT,
  score REAL,
  feedback TEXT,
  suggested_improvement TEXT,
  key_points_covered_json TEXT,
  key_points_missed_json TEXT,
  evaluated_at TEXT,
  created_at TEXT NOT NULL,
  UNIQUE(session_id, order_index)
);
""",
    # At most one unanswered turn per session.
    """
CREATE UNIQUE INDEX IF NOT EXISTS ux_responses_one_pending
  ON mock_interview_responses(session_id) WHERE user_answer IS NULL;
""",
    """
CREATE TABLE IF NOT EXISTS mock_interview_metrics (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  job_application_id INTEGER NOT NULL UNIQUE REFERENCES job_applications(id),
  total_sessions INTEGER NOT NULL DEFAULT 0,
  completed_sessions INTEGER NOT NULL DEFAULT 0,
  average_score REAL,
  behavioral_avg_score REAL,
  technical_avg_score REAL,
  situational_avg_score REAL,
  company_specific_avg_score REAL,
  role_specific_avg_score REAL,
  score_history_json TEXT,
  strongest_category TEXT,
  weakest_category TEXT,
  updated_at TEXT NOT NULL
);
""",
]


def migrate(db_path: Optional[str] = None) -> None:
    """Apply schema migrations to the SQLite database."""

    path = db_path or settings.DB_PATH
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    migrate()
