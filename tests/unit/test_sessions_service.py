from __future__ import annotations

import pytest

from config.settings import settings
from services.sessions import (
    SessionNotFound,
    SessionStateError,
    abandon_session,
    create_session,
    delete_session,
)
from storage.questions import insert_question


def _seed(tmp_db, analysis_id: int, count: int) -> None:
    for index in range(count):
        insert_question(
            db_path=tmp_db,
            resume_analysis_id=analysis_id,
            question=f"Question {index}?",
            category="technical",
            difficulty="medium",
        )


def test_create_session_clamps_to_pool_and_registers_metrics(store, tmp_db, job_id):
    _seed(tmp_db, 10, 4)
    session = create_session(store, job_application_id=job_id, resume_analysis_id=10, question_count=8)

    assert session.status == "setup"
    assert session.question_count == 4
    assert store.get_metrics(job_id).total_sessions == 1

    create_session(store, job_application_id=job_id, resume_analysis_id=10)
    assert store.get_metrics(job_id).total_sessions == 2


def test_create_session_defaults_and_upper_bound(store, job_id, monkeypatch):
    session = create_session(store, job_application_id=job_id)
    assert session.question_count == settings.DEFAULT_QUESTION_COUNT

    monkeypatch.setattr(settings, "MAX_QUESTION_COUNT", 12)
    session = create_session(store, job_application_id=job_id, question_count=40)
    assert session.question_count == 12


def test_create_session_rejects_unknown_categories(store, job_id):
    with pytest.raises(ValueError):
        create_session(store, job_application_id=job_id, selected_categories=["trivia"])
    assert store.get_metrics(job_id) is None


def test_empty_category_selection_means_all(store, job_id):
    session = create_session(store, job_application_id=job_id, selected_categories=[])
    assert session.selected_categories is None


def test_abandon_only_from_in_progress(store, job_id):
    session = create_session(store, job_application_id=job_id)
    with pytest.raises(SessionStateError):
        abandon_session(store, session.id)

    store.update_session(session.id, status="in_progress")
    assert abandon_session(store, session.id).status == "abandoned"

    with pytest.raises(SessionNotFound):
        abandon_session(store, 999)


def test_delete_session_backs_out_counters(store, job_id):
    kept = create_session(store, job_application_id=job_id)
    done = create_session(store, job_application_id=job_id)
    store.update_session(done.id, status="completed")
    profile = store.get_metrics(job_id)
    store.save_metrics(profile.model_copy(update={"completed_sessions": 1}))

    delete_session(store, done.id)

    profile = store.get_metrics(job_id)
    assert profile.total_sessions == 1
    assert profile.completed_sessions == 0
    assert store.get_session(done.id) is None
    assert store.get_session(kept.id) is not None

    with pytest.raises(SessionNotFound):
        delete_session(store, done.id)
