"""Contracts for the scoring collaborators the session engine calls into."""
from __future__ import annotations

from typing import Any, ContextManager, Dict, List, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import InterviewContext, MetricsProfile, Question, Session, Turn


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StarAnalysis(_CamelModel):
    situation: bool = False
    task: bool = False
    action: bool = False
    result: bool = False


class AnswerEvaluation(_CamelModel):
    score: float = Field(ge=0, le=100)
    feedback: str
    suggested_improvement: str
    key_points_covered: List[str] = Field(default_factory=list)
    key_points_missed: List[str] = Field(default_factory=list)
    star_analysis: StarAnalysis = Field(default_factory=StarAnalysis)


class FollowUpDecision(_CamelModel):
    should_follow_up: bool
    follow_up_question: Optional[str] = None
    reason: str = ""


class CategoryScores(_CamelModel):
    behavioral: Optional[float] = None
    technical: Optional[float] = None
    situational: Optional[float] = None
    company_specific: Optional[float] = None
    role_specific: Optional[float] = None

    def by_category(self) -> Dict[str, Optional[float]]:
        """Scores keyed by the question category taxonomy."""

        return {
            "behavioral": self.behavioral,
            "technical": self.technical,
            "situational": self.situational,
            "company-specific": self.company_specific,
            "role-specific": self.role_specific,
        }


class SessionSummary(_CamelModel):
    overall_score: float = Field(ge=0, le=100)
    summary_feedback: str
    strength_areas: List[str] = Field(default_factory=list)
    improvement_areas: List[str] = Field(default_factory=list)
    category_scores: CategoryScores = Field(default_factory=CategoryScores)
    recommendations: List[str] = Field(default_factory=list)


class AnsweredTurn(BaseModel):  # Qualifying turn handed to the summary generator
    question_text: str
    question_category: str
    user_answer: str
    score: float
    feedback: str = ""


class AnswerEvaluator(Protocol):
    def evaluate(self, question: Question, answer: str, context: InterviewContext) -> AnswerEvaluation: ...


class FollowUpDecider(Protocol):
    def decide(
        self,
        question: Question,
        answer: str,
        evaluation: AnswerEvaluation,
        existing_follow_ups: int,
    ) -> FollowUpDecision: ...


class SummaryGenerator(Protocol):
    def summarize(self, turns: Sequence[AnsweredTurn], context: InterviewContext) -> SessionSummary: ...


class InterviewRepository(Protocol):  # Persistence the engine reads and writes through
    def get_session(self, session_id: int) -> Optional[Session]: ...

    def update_session(self, session_id: int, **fields: Any) -> None: ...

    def create_turn(self, **data: Any) -> Turn: ...

    def update_turn(self, turn_id: int, **fields: Any) -> None: ...

    def list_turns(self, session_id: int) -> List[Turn]: ...

    def list_questions(self, resume_analysis_id: int) -> List[Any]: ...

    def get_job_context(self, job_application_id: int) -> InterviewContext: ...

    def get_metrics(self, job_application_id: int) -> Optional[MetricsProfile]: ...

    def save_metrics(self, profile: MetricsProfile) -> None: ...

    def transaction(self) -> ContextManager["InterviewRepository"]: ...


__all__ = [
    "AnsweredTurn",
    "AnswerEvaluation",
    "AnswerEvaluator",
    "CategoryScores",
    "FollowUpDecider",
    "FollowUpDecision",
    "InterviewRepository",
    "SessionSummary",
    "StarAnalysis",
    "SummaryGenerator",
]
