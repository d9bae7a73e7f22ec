"""Tests for the SQLite migration, codec and write helpers."""
from __future__ import annotations

import json
import sqlite3

import pytest

from storage.codec import dump_json, load_json
from storage.migrate import migrate
from storage.questions import get_job_context
from storage.responses import TurnConflictError


def test_codec_wraps_values_in_a_versioned_envelope():
    raw = dump_json(["a", "b"])
    assert json.loads(raw) == {"v": 1, "data": ["a", "b"]}
    assert load_json(raw, []) == ["a", "b"]
    assert dump_json(None) is None


def test_codec_falls_back_to_default():
    assert load_json(None, []) == []
    assert load_json("not json", []) == []
    assert load_json(json.dumps({"v": 99, "data": [1]}), []) == []
    assert load_json('"scalar"', []) == []
    assert load_json('["legacy"]', []) == ["legacy"]


def test_migrate_is_idempotent(tmp_db):
    migrate(tmp_db)
    migrate(tmp_db)
    with sqlite3.connect(tmp_db) as conn:
        names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"mock_interview_sessions", "mock_interview_responses", "mock_interview_metrics"} <= names


def test_session_round_trip_and_update(store, make_session):
    session = make_session(selected_categories=["behavioral", "technical"], difficulty="hard")
    loaded = store.get_session(session.id)
    assert loaded.status == "setup"
    assert loaded.selected_categories == ["behavioral", "technical"]
    assert loaded.difficulty == "hard"

    store.update_session(session.id, status="in_progress", strength_areas=["Clarity"])
    loaded = store.get_session(session.id)
    assert loaded.status == "in_progress"
    assert loaded.strength_areas == ["Clarity"]

    with pytest.raises(ValueError):
        store.update_session(session.id, job_application_id=2)


def test_second_pending_turn_is_rejected(store, make_session):
    session = make_session()
    store.create_turn(session_id=session.id, question_text="Q1", order_index=0)
    with pytest.raises(TurnConflictError):
        store.create_turn(session_id=session.id, question_text="Q2", order_index=1)


def test_duplicate_order_index_is_rejected(store, make_session):
    session = make_session()
    turn = store.create_turn(session_id=session.id, question_text="Q1", order_index=0)
    store.update_turn(turn.id, user_answer="answer", score=50)
    with pytest.raises(TurnConflictError):
        store.create_turn(session_id=session.id, question_text="Q2", order_index=0)


def test_turn_updates_decode_key_points(store, make_session):
    session = make_session()
    turn = store.create_turn(session_id=session.id, question_text="Q1", order_index=0)
    store.update_turn(turn.id, user_answer="answer", key_points_covered=["impact"], key_points_missed=[])
    (loaded,) = store.list_turns(session.id)
    assert loaded.user_answer == "answer"
    assert loaded.key_points_covered == ["impact"]
    assert loaded.key_points_missed == []
    assert not loaded.is_pending


def test_delete_session_removes_turns(store, make_session):
    session = make_session()
    store.create_turn(session_id=session.id, question_text="Q1", order_index=0)
    assert store.delete_session(session.id) is True
    assert store.get_session(session.id) is None
    assert store.list_turns(session.id) == []
    assert store.delete_session(session.id) is False


def test_metrics_counters(store, job_id):
    store.register_session(job_id)
    store.register_session(job_id)
    profile = store.get_metrics(job_id)
    assert profile.total_sessions == 2
    assert profile.completed_sessions == 0

    store.save_metrics(profile.model_copy(update={"completed_sessions": 1}))
    store.unregister_session(job_id, was_completed=True)
    profile = store.get_metrics(job_id)
    assert profile.total_sessions == 1
    assert profile.completed_sessions == 0


def test_corrupt_score_history_reads_as_empty(store, job_id, tmp_db):
    store.register_session(job_id)
    with sqlite3.connect(tmp_db) as conn:
        conn.execute("UPDATE mock_interview_metrics SET score_history_json = '{broken'")
    assert store.get_metrics(job_id).score_history == []


def test_unknown_job_context_is_empty(tmp_db):
    context = get_job_context(12345, db_path=tmp_db)
    assert context.job_description == ""
    assert context.company_name is None


def test_transaction_rolls_back_every_write(store, make_session):
    session = make_session()
    with pytest.raises(RuntimeError):
        with store.transaction() as tx:
            tx.update_session(session.id, status="in_progress")
            tx.create_turn(session_id=session.id, question_text="Q1", order_index=0)
            raise RuntimeError("interrupted")

    assert store.get_session(session.id).status == "setup"
    assert store.list_turns(session.id) == []

    with store.transaction() as tx:
        tx.update_session(session.id, status="in_progress")
        tx.create_turn(session_id=session.id, question_text="Q1", order_index=0)
        assert tx.get_session(session.id).status == "in_progress"
    assert len(store.list_turns(session.id)) == 1
