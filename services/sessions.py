"""Session lifecycle helpers outside the action stream: create, abandon, delete."""
from __future__ import annotations

import logging
from typing import List, Optional

from config.settings import settings
from interview_engine.models import (
    SCORED_CATEGORIES,
    STATUS_TRANSITIONS,
    DifficultyPreference,
    FeedbackMode,
    Session,
)
from storage.store import InterviewStore

logger = logging.getLogger(__name__)


class SessionNotFound(LookupError):
    """No session exists with the requested id."""


class SessionStateError(ValueError):
    """The requested lifecycle change is not allowed from the session's status."""


def create_session(
    store: InterviewStore,
    *,
    job_application_id: int,
    resume_analysis_id: Optional[int] = None,
    feedback_mode: FeedbackMode = "immediate",
    question_count: Optional[int] = None,
    selected_categories: Optional[List[str]] = None,
    difficulty: DifficultyPreference = "mixed",
    voice_enabled: bool = False,
) -> Session:
    """Create a session in ``setup`` and count it on the job's metrics profile.

    The target question count is clamped to ``MAX_QUESTION_COUNT`` and, when the
    resume analysis has questions, to the size of that pool.

    Raises:
        ValueError: If a selected category is not one of the scored categories.
    """

    if selected_categories:
        unknown = sorted(set(selected_categories) - set(SCORED_CATEGORIES))
        if unknown:
            raise ValueError(f"Unknown question categories: {unknown}")
    else:
        selected_categories = None

    count = question_count if question_count is not None else settings.DEFAULT_QUESTION_COUNT
    count = max(1, min(count, settings.MAX_QUESTION_COUNT))
    if resume_analysis_id is not None:
        available = len(store.list_questions(resume_analysis_id))
        if available:
            count = min(count, available)

    with store.transaction() as tx:
        session = tx.create_session(
            job_application_id=job_application_id,
            resume_analysis_id=resume_analysis_id,
            feedback_mode=feedback_mode,
            question_count=count,
            selected_categories=selected_categories,
            difficulty=difficulty,
            voice_enabled=voice_enabled,
        )
        tx.register_session(job_application_id)
    logger.info("Created mock interview session %s for job %s (%d questions)", session.id, job_application_id, count)
    return session


def abandon_session(store: InterviewStore, session_id: int) -> Session:
    """Move an in-progress session to ``abandoned``.

    Raises:
        SessionNotFound: If the session does not exist.
        SessionStateError: If the session is not in progress.
    """

    session = _require(store, session_id)
    if "abandoned" not in STATUS_TRANSITIONS[session.status]:
        raise SessionStateError(f"Cannot abandon a session that is {session.status}")
    store.update_session(session_id, status="abandoned")
    return _require(store, session_id)


def delete_session(store: InterviewStore, session_id: int) -> None:
    """Delete a session with its turns and back it out of the metrics counters.

    Raises:
        SessionNotFound: If the session does not exist.
    """

    session = _require(store, session_id)
    with store.transaction() as tx:
        tx.delete_session(session_id)
        tx.unregister_session(session.job_application_id, was_completed=session.status == "completed")
    logger.info("Deleted mock interview session %s", session_id)


def _require(store: InterviewStore, session_id: int) -> Session:
    session = store.get_session(session_id)
    if session is None:
        raise SessionNotFound(f"Session {session_id} not found")
    return session


__all__ = ["abandon_session", "create_session", "delete_session", "SessionNotFound", "SessionStateError"]
