from __future__ import annotations

import json
import logging

import pytest

from observability.logger import LOGGER_NAME, configure, describe, log_event
from observability.tracing import span


@pytest.fixture
def event_log(tmp_path, capsys):
    path = tmp_path / "events.jsonl"
    configure(file_logs=True, log_file=str(path), force=True)
    yield path
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _records(path) -> list:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_describe_renders_engine_kinds():
    assert describe("action.event", {"action": "answer", "event": "feedback"}) == "answer emitted feedback"
    assert describe("action.end", {"action": "end", "status": "completed"}) == "end finished with session completed"
    assert describe("span", {"node": "answer_evaluator", "ms": 12, "turn_id": 3}) == "answer_evaluator took 12ms turn_id=3"
    assert describe("follow_up.capped", {"node": "decide_follow_up", "question_id": 9}) == (
        "follow-up limit reached for turn 9 node=decide_follow_up"
    )
    assert describe("action.rejected", {"action": "skip"}) == "skip rejected: -"
    assert describe("custom", {"a": 1}) == "custom a=1"


def test_log_event_writes_console_line_and_json_record(event_log, capsys):
    log_event("action.rejected", "7", action="answer", error="No pending question to answer")

    out = capsys.readouterr().out
    assert "WARNING session=7 :: answer rejected: No pending question to answer" in out
    (record,) = _records(event_log)
    assert record["kind"] == "action.rejected"
    assert record["level"] == "WARNING"
    assert record["session_id"] == "7"
    assert record["action"] == "answer"
    assert record["error"] == "No pending question to answer"


def test_span_logs_duration(event_log):
    with span(4, "summary_generator", answered=2):
        pass

    (record,) = _records(event_log)
    assert record["kind"] == "span"
    assert record["node"] == "summary_generator"
    assert record["answered"] == 2
    assert record["ms"] >= 0
    assert record["level"] == "INFO"


def test_engine_actions_are_logged_per_event(engine, make_session, event_log):
    session = make_session()
    list(engine.run(session.id, "start"))

    kinds = [(record["kind"], record.get("event")) for record in _records(event_log)]
    assert kinds[0] == ("action.start", None)
    assert ("action.event", "question") in kinds
    assert kinds[-1] == ("action.end", None)
