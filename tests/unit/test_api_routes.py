from __future__ import annotations

import json

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes import get_engine, get_store, router


def _client(store, engine) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_engine] = lambda: engine
    return TestClient(app)


def _events(response) -> list:
    frames = [chunk for chunk in response.text.split("\n\n") if chunk.strip()]
    assert all(frame.startswith("data: ") for frame in frames)
    return [json.loads(frame[len("data: "):]) for frame in frames]


def test_action_stream_is_server_sent_events(store, engine, make_session):
    session = make_session()
    client = _client(store, engine)

    response = client.post("/api/agents/mock-interviewer", json={"sessionId": session.id, "action": "start"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    events = _events(response)
    assert [event["type"] for event in events] == ["status", "question", "complete", "done"]
    assert events[1]["questionNumber"] == 1
    assert events[1]["totalQuestions"] == 3
    assert events[2] == {"type": "complete", "sessionId": session.id, "status": "in_progress"}


def test_action_stream_reports_errors_inline(store, engine, make_session):
    session = make_session()
    client = _client(store, engine)

    response = client.post("/api/agents/mock-interviewer", json={"sessionId": session.id, "action": "launch"})
    assert response.status_code == 200
    events = _events(response)
    assert events[0]["type"] == "error"
    assert events[-1] == {"type": "done"}

    response = client.post("/api/agents/mock-interviewer", json={"action": "start"})
    assert _events(response)[0] == {"type": "error", "error": "sessionId is required"}


def test_malformed_action_fields_are_streamed_as_errors(store, engine, make_session):
    session = make_session()
    client = _client(store, engine)

    response = client.post("/api/agents/mock-interviewer", json={"sessionId": "abc", "action": "start"})
    assert response.status_code == 200
    events = _events(response)
    assert [event["type"] for event in events] == ["error", "complete", "done"]
    assert events[0]["error"] == "sessionId must be an integer"

    response = client.post("/api/agents/mock-interviewer", json={"sessionId": session.id, "action": 7})
    assert response.status_code == 200
    assert _events(response)[0]["error"] == "action must be 'start', 'answer', 'skip', or 'end'"

    client.post("/api/agents/mock-interviewer", json={"sessionId": str(session.id), "action": "start"})
    response = client.post(
        "/api/agents/mock-interviewer",
        json={"sessionId": session.id, "action": "answer", "userAnswer": 42},
    )
    assert response.status_code == 200
    assert _events(response)[0] == {"type": "error", "error": "userAnswer is required"}


def test_answer_payload_uses_user_answer_field(store, engine, evaluator, make_session):
    session = make_session()
    client = _client(store, engine)
    client.post("/api/agents/mock-interviewer", json={"sessionId": session.id, "action": "start"})

    response = client.post(
        "/api/agents/mock-interviewer",
        json={"sessionId": session.id, "action": "answer", "userAnswer": "I shipped it."},
    )
    events = _events(response)
    assert events[1]["type"] == "feedback"
    assert events[1]["suggestedImprovement"] == "Quantify the outcome."
    assert evaluator.calls[0][1] == "I shipped it."


def test_session_crud(store, engine, tmp_db, job_id):
    client = _client(store, engine)

    created = client.post(
        "/api/mock-interview/sessions",
        json={"jobApplicationId": job_id, "questionCount": 5, "feedbackMode": "summary"},
    )
    assert created.status_code == 201
    session = created.json()["session"]
    assert session["status"] == "setup"
    assert session["feedbackMode"] == "summary"
    assert session["questionCount"] == 5

    listing = client.get("/api/mock-interview/sessions", params={"jobApplicationId": job_id}).json()
    assert [item["id"] for item in listing["sessions"]] == [session["id"]]
    assert listing["metrics"]["totalSessions"] == 1

    detail = client.get(f"/api/mock-interview/sessions/{session['id']}").json()
    assert detail["session"]["id"] == session["id"]
    assert detail["responses"] == []

    conflict = client.patch(f"/api/mock-interview/sessions/{session['id']}", json={"status": "abandoned"})
    assert conflict.status_code == 409

    assert client.delete(f"/api/mock-interview/sessions/{session['id']}").json() == {"success": True}
    assert client.get(f"/api/mock-interview/sessions/{session['id']}").status_code == 404
    assert client.delete(f"/api/mock-interview/sessions/{session['id']}").status_code == 404


def test_session_routes_validate_input(store, engine, job_id):
    client = _client(store, engine)
    assert client.get("/api/mock-interview/sessions").status_code == 422
    bad = client.post(
        "/api/mock-interview/sessions",
        json={"jobApplicationId": job_id, "selectedCategories": ["trivia"]},
    )
    assert bad.status_code == 400
    patch = client.patch("/api/mock-interview/sessions/1", json={"status": "completed"})
    assert patch.status_code == 422


def test_analytics_route(store, engine, job_id):
    client = _client(store, engine)
    response = client.get("/api/mock-interview/analytics", params={"jobApplicationId": job_id})
    assert response.status_code == 200
    body = response.json()
    assert body["metrics"] is None
    assert body["scoreDistribution"] == {"excellent": 0, "good": 0, "average": 0, "needsWork": 0}
    assert body["improvementRate"] == 0.0
