import itertools
import os
import random
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import settings
from interview_engine import InterviewEngine
from interview_engine.contracts import (
    AnswerEvaluation,
    CategoryScores,
    FollowUpDecision,
    SessionSummary,
)
from storage.migrate import migrate
from storage.questions import insert_job_application, insert_question
from storage.store import InterviewStore


DEFAULT_QUESTIONS = (
    ("behavioral", "easy"),
    ("technical", "medium"),
    ("situational", "hard"),
    ("company-specific", "medium"),
)


class FakeEvaluator:
    def __init__(self) -> None:
        self.scores: List[float] = []
        self.default_score = 70.0
        self.error: Optional[Exception] = None
        self.calls: list = []

    def evaluate(self, question, answer, context) -> AnswerEvaluation:
        self.calls.append((question, answer, context))
        if self.error is not None:
            raise self.error
        score = self.scores.pop(0) if self.scores else self.default_score
        return AnswerEvaluation(
            score=score,
            feedback="Clear structure with a concrete example.",
            suggested_improvement="Quantify the outcome.",
            key_points_covered=["context"],
            key_points_missed=["metrics"],
        )


class FakeDecider:
    def __init__(self) -> None:
        self.follow_up_text: Optional[str] = None
        self.decisions: List[FollowUpDecision] = []
        self.calls: List[int] = []
        self.error: Optional[Exception] = None

    def decide(self, question, answer, evaluation, existing_follow_ups) -> FollowUpDecision:
        self.calls.append(existing_follow_ups)
        if self.error is not None:
            raise self.error
        if self.decisions:
            return self.decisions.pop(0)
        if self.follow_up_text:
            return FollowUpDecision(
                should_follow_up=True,
                follow_up_question=self.follow_up_text,
                reason="Probe for impact",
            )
        return FollowUpDecision(should_follow_up=False, reason="Answer was complete")


class FakeSummarizer:
    def __init__(self) -> None:
        self.calls: list = []
        self.error: Optional[Exception] = None

    def summarize(self, turns, context) -> SessionSummary:
        self.calls.append((list(turns), context))
        if self.error is not None:
            raise self.error
        return SessionSummary(
            overall_score=77.5,
            summary_feedback="Good progress overall.",
            strength_areas=["Storytelling"],
            improvement_areas=["Metrics"],
            category_scores=CategoryScores(behavioral=80, technical=75),
            recommendations=["Practice system design questions."],
        )


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture
def store(tmp_db) -> InterviewStore:
    return InterviewStore(tmp_db)


@pytest.fixture
def job_id(tmp_db) -> int:
    return insert_job_application(
        db_path=tmp_db,
        title="Backend Engineer",
        company_name="Acme",
        job_description="Build and operate Python APIs.",
        resume_content="Five years of Python services.",
    )


@pytest.fixture
def make_session(store, tmp_db, job_id):
    analysis_ids = itertools.count(1)

    def _make(questions=DEFAULT_QUESTIONS, **fields):
        analysis_id = next(analysis_ids)
        for index, (category, difficulty) in enumerate(questions, start=1):
            insert_question(
                db_path=tmp_db,
                resume_analysis_id=analysis_id,
                question=f"{category or 'uncategorized'} question {index}?",
                category=category,
                difficulty=difficulty,
            )
        fields.setdefault("question_count", 3)
        session = store.create_session(job_application_id=job_id, resume_analysis_id=analysis_id, **fields)
        store.register_session(job_id)
        return session

    return _make


@pytest.fixture
def evaluator() -> FakeEvaluator:
    return FakeEvaluator()


@pytest.fixture
def decider() -> FakeDecider:
    return FakeDecider()


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def engine(store, evaluator, decider, summarizer) -> InterviewEngine:
    return InterviewEngine(store, evaluator, decider, summarizer, rng=random.Random(7))
