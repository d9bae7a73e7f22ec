"""Pydantic schemas for the mock interview API."""
from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from interview_engine.models import DifficultyPreference, FeedbackMode, MetricsProfile, Session, Turn


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActionRequest(_CamelModel):  # Malformed fields are reported on the event stream
    session_id: Any = None
    action: Any = None
    user_answer: Any = None


class CreateSessionRequest(_CamelModel):
    job_application_id: int = Field(gt=0)
    resume_analysis_id: Optional[int] = Field(default=None, gt=0)
    feedback_mode: FeedbackMode = "immediate"
    question_count: Optional[int] = Field(default=None, gt=0)
    selected_categories: Optional[List[str]] = None
    difficulty: DifficultyPreference = "mixed"
    voice_enabled: bool = False


class PatchSessionRequest(_CamelModel):
    status: Literal["abandoned"]


class SessionView(Session):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TurnView(Turn):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MetricsView(MetricsProfile):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionListResponse(_CamelModel):
    sessions: List[SessionView]
    metrics: Optional[MetricsView] = None


class SessionDetailResponse(_CamelModel):
    session: SessionView
    responses: List[TurnView] = Field(default_factory=list)


class SessionResponse(_CamelModel):
    session: SessionView


class DeleteResponse(_CamelModel):
    success: bool = True


__all__ = [
    "ActionRequest",
    "CreateSessionRequest",
    "DeleteResponse",
    "MetricsView",
    "PatchSessionRequest",
    "SessionDetailResponse",
    "SessionListResponse",
    "SessionResponse",
    "SessionView",
    "TurnView",
]
