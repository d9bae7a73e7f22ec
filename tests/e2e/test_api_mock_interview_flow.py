"""Full interview through the HTTP surface with stub collaborators."""
from __future__ import annotations

import json
import random

from fastapi.testclient import TestClient

import api_server
from interview_engine import InterviewEngine


def _events(response) -> list:
    return [json.loads(frame[len("data: "):]) for frame in response.text.split("\n\n") if frame.strip()]


def _act(client, session_id, action, answer=None) -> list:
    body = {"sessionId": session_id, "action": action}
    if answer is not None:
        body["userAnswer"] = answer
    response = client.post("/api/agents/mock-interviewer", json=body)
    assert response.status_code == 200
    return _events(response)


def test_start_answer_skip_end(store, evaluator, decider, summarizer, tmp_db, job_id, make_session):
    api_server.app.state.store = store
    api_server.app.state.engine = InterviewEngine(store, evaluator, decider, summarizer, rng=random.Random(3))
    client = TestClient(api_server.app)

    assert client.get("/health").json() == {"status": "ok"}

    session = make_session(question_count=2)
    started = _act(client, session.id, "start")
    assert started[1]["type"] == "question"

    decider.follow_up_text = "What was the measurable result?"
    answered = _act(client, session.id, "answer", "We cut latency in half.")
    assert [e["type"] for e in answered] == ["status", "feedback", "follow_up", "complete", "done"]

    decider.follow_up_text = None
    answered = _act(client, session.id, "answer", "p99 dropped from 800ms to 350ms.")
    assert answered[2]["type"] == "interview_complete"
    assert answered[2]["answeredCount"] == 2

    skipped = _act(client, session.id, "skip")
    assert skipped[0]["type"] == "error"

    ended = _act(client, session.id, "end")
    summary = ended[1]
    assert summary["type"] == "summary"
    assert summary["overallScore"] == 77.5
    assert ended[2] == {"type": "complete", "sessionId": session.id, "status": "completed"}
    assert len(summarizer.calls[0][0]) == 2

    detail = client.get(f"/api/mock-interview/sessions/{session.id}").json()
    assert detail["session"]["status"] == "completed"
    assert [turn["isFollowUp"] for turn in detail["responses"]] == [False, True]

    analytics = client.get("/api/mock-interview/analytics", params={"jobApplicationId": job_id}).json()
    assert analytics["metrics"]["completedSessions"] == 1
    assert analytics["scoreHistory"][0]["score"] == 77.5
