from __future__ import annotations  # Mock interview domain models

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

Category = Literal[
    "behavioral",
    "technical",
    "situational",
    "company-specific",
    "role-specific",
    "follow-up",
]
Difficulty = Literal["easy", "medium", "hard"]
DifficultyPreference = Literal["mixed", "easy", "medium", "hard"]
FeedbackMode = Literal["immediate", "summary"]
SessionStatus = Literal["setup", "in_progress", "completed", "abandoned"]
Action = Literal["start", "answer", "skip", "end"]

SCORED_CATEGORIES: tuple[str, ...] = (
    "behavioral",
    "technical",
    "situational",
    "company-specific",
    "role-specific",
)
FOLLOW_UP_CATEGORY = "follow-up"
SKIPPED_ANSWER = "[SKIPPED]"

# Allowed status moves; anything else is rejected by the stores' callers.
STATUS_TRANSITIONS: Dict[str, tuple[str, ...]] = {
    "setup": ("in_progress",),
    "in_progress": ("completed", "abandoned"),
    "completed": (),
    "abandoned": (),
}


class Question(BaseModel):  # Candidate question from the resume-analysis pool
    id: Optional[int] = None
    question: str
    category: str
    difficulty: str
    suggested_answer: Optional[str] = None


class SelectionSettings(BaseModel):  # Session-level filters applied by the selector
    selected_categories: Optional[List[str]] = None
    difficulty: DifficultyPreference = "mixed"


class CategoryStat(BaseModel):  # Running score total for one category
    total: float = 0.0
    count: int = Field(default=0, ge=0)

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0


class InterviewContext(BaseModel):  # Job and resume context handed to the LLM agents
    job_description: str = ""
    resume_content: str = ""
    company_name: Optional[str] = None
    job_title: Optional[str] = None


class Session(BaseModel):  # One practice run tied to a job application
    id: int
    job_application_id: int
    resume_analysis_id: Optional[int] = None
    feedback_mode: FeedbackMode = "immediate"
    question_count: int = Field(default=10, ge=1)
    selected_categories: Optional[List[str]] = None
    difficulty: DifficultyPreference = "mixed"
    voice_enabled: bool = False
    status: SessionStatus = "setup"
    current_question_index: int = Field(default=0, ge=0)
    overall_score: Optional[float] = None
    summary_feedback: Optional[str] = None
    strength_areas: Optional[List[str]] = None
    improvement_areas: Optional[List[str]] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def selection_settings(self) -> SelectionSettings:
        return SelectionSettings(selected_categories=self.selected_categories, difficulty=self.difficulty)


class Turn(BaseModel):  # One question/answer unit within a session
    id: int
    session_id: int
    question_id: Optional[int] = None
    question_text: str
    question_category: Optional[str] = None
    question_difficulty: Optional[str] = None
    is_follow_up: bool = False
    parent_response_id: Optional[int] = None
    order_index: int = Field(ge=0)
    user_answer: Optional[str] = None
    answered_at: Optional[datetime] = None
    score: Optional[float] = None
    feedback: Optional[str] = None
    suggested_improvement: Optional[str] = None
    key_points_covered: List[str] = Field(default_factory=list)
    key_points_missed: List[str] = Field(default_factory=list)
    evaluated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.user_answer is None

    @property
    def is_skipped(self) -> bool:
        return self.user_answer == SKIPPED_ANSWER

    def as_question(self) -> Question:
        return Question(
            id=self.question_id,
            question=self.question_text,
            category=self.question_category or "behavioral",
            difficulty=self.question_difficulty or "medium",
        )


class ScorePoint(BaseModel):  # Score history entry on the metrics profile
    date: str
    score: float


class MetricsProfile(BaseModel):  # Cross-session performance rollup for one job application
    job_application_id: int
    total_sessions: int = 0
    completed_sessions: int = 0
    average_score: Optional[float] = None
    behavioral_avg_score: Optional[float] = None
    technical_avg_score: Optional[float] = None
    situational_avg_score: Optional[float] = None
    company_specific_avg_score: Optional[float] = None
    role_specific_avg_score: Optional[float] = None
    score_history: List[ScorePoint] = Field(default_factory=list)
    strongest_category: Optional[str] = None
    weakest_category: Optional[str] = None
    updated_at: Optional[datetime] = None


__all__ = [
    "Action",
    "Category",
    "CategoryStat",
    "Difficulty",
    "DifficultyPreference",
    "FeedbackMode",
    "FOLLOW_UP_CATEGORY",
    "InterviewContext",
    "MetricsProfile",
    "Question",
    "SCORED_CATEGORIES",
    "ScorePoint",
    "SelectionSettings",
    "Session",
    "SessionStatus",
    "SKIPPED_ANSWER",
    "STATUS_TRANSITIONS",
    "Turn",
]
