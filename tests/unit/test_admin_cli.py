from __future__ import annotations

from observability.admin_cli import show_metrics, show_turns, tail_sessions


def test_tail_sessions_lists_latest_first(make_session, tmp_db, capsys):
    first = make_session()
    second = make_session(feedback_mode="summary")

    tail_sessions(limit=5, db_path=tmp_db)

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    assert f"session={second.id}" in lines[0]
    assert "mode=summary" in lines[0]
    assert f"session={first.id}" in lines[1]


def test_show_turns_marks_pending_and_follow_ups(store, make_session, tmp_db, capsys):
    session = make_session()
    root = store.create_turn(
        session_id=session.id, question_text="Tell me about a conflict.", question_category="behavioral", order_index=0
    )
    store.update_turn(root.id, user_answer="I listened first.", score=65)
    store.create_turn(
        session_id=session.id,
        question_text="What changed afterwards?",
        is_follow_up=True,
        parent_response_id=root.id,
        order_index=1,
    )

    show_turns(session.id, db_path=tmp_db)

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == "#0 [behavioral] score=65.0 :: Tell me about a conflict."
    assert lines[1] == "#1 [follow-up] pending :: What changed afterwards?"


def test_show_metrics_handles_missing_profile(make_session, job_id, tmp_db, capsys):
    show_metrics(job_id + 100, db_path=tmp_db)
    assert "no metrics" in capsys.readouterr().out

    make_session()
    show_metrics(job_id, db_path=tmp_db)
    out = capsys.readouterr().out
    assert f"job={job_id} sessions=1 completed=0" in out
