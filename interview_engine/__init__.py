from __future__ import annotations  # Mock interview session engine, selector and metrics aggregator

from .models import (
    CategoryStat,
    InterviewContext,
    MetricsProfile,
    Question,
    ScorePoint,
    SelectionSettings,
    Session,
    Turn,
)
from .contracts import (
    AnsweredTurn,
    AnswerEvaluation,
    AnswerEvaluator,
    CategoryScores,
    FollowUpDecider,
    FollowUpDecision,
    InterviewRepository,
    SessionSummary,
    StarAnalysis,
    SummaryGenerator,
)
from .errors import ActionRejected
from .events import InterviewEvent, encode_sse, to_wire
from .selector import (
    build_category_performance,
    select_next_question,
)
from .metrics import apply_completed_session, fold_session
from .locks import SessionLocks
from .engine import InterviewEngine

__all__ = [
    "ActionRejected",
    "AnsweredTurn",
    "AnswerEvaluation",
    "AnswerEvaluator",
    "apply_completed_session",
    "build_category_performance",
    "CategoryScores",
    "CategoryStat",
    "encode_sse",
    "FollowUpDecider",
    "FollowUpDecision",
    "fold_session",
    "InterviewContext",
    "InterviewEngine",
    "InterviewEvent",
    "InterviewRepository",
    "MetricsProfile",
    "Question",
    "ScorePoint",
    "select_next_question",
    "SelectionSettings",
    "Session",
    "SessionLocks",
    "SessionSummary",
    "StarAnalysis",
    "SummaryGenerator",
    "to_wire",
    "Turn",
]
