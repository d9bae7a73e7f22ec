from __future__ import annotations  # Event protocol streamed back to the driving client

import json
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Event(BaseModel):  # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusEvent(_Event):
    type: Literal["status"] = "status"
    status: str
    message: str


class QuestionEvent(_Event):
    type: Literal["question"] = "question"
    question_number: int
    total_questions: int
    question_text: str
    category: str
    difficulty: str


class FollowUpEvent(_Event):
    type: Literal["follow_up"] = "follow_up"
    question_text: str
    reason: str
    question_number: int
    total_questions: int


class FeedbackEvent(_Event):
    type: Literal["feedback"] = "feedback"
    score: float
    feedback: str
    suggested_improvement: str
    key_points_covered: List[str] = Field(default_factory=list)
    key_points_missed: List[str] = Field(default_factory=list)
    star_analysis: Optional[Dict[str, bool]] = None


class AnswerRecordedEvent(_Event):
    type: Literal["answer_recorded"] = "answer_recorded"
    message: str = "Your answer has been recorded"


class QuestionSkippedEvent(_Event):
    type: Literal["question_skipped"] = "question_skipped"
    message: str = "Question skipped"


class InterviewCompleteEvent(_Event):
    type: Literal["interview_complete"] = "interview_complete"
    message: str
    answered_count: int


class SummaryEvent(_Event):
    type: Literal["summary"] = "summary"
    overall_score: float
    summary_feedback: str
    strength_areas: List[str] = Field(default_factory=list)
    improvement_areas: List[str] = Field(default_factory=list)
    category_scores: Dict[str, Optional[float]] = Field(default_factory=dict)
    recommendations: List[str] = Field(default_factory=list)


class ErrorEvent(_Event):
    type: Literal["error"] = "error"
    error: str


class CompleteEvent(_Event):
    type: Literal["complete"] = "complete"
    session_id: Optional[int] = None
    status: Optional[str] = None


class DoneEvent(_Event):
    type: Literal["done"] = "done"


InterviewEvent = Union[
    StatusEvent,
    QuestionEvent,
    FollowUpEvent,
    FeedbackEvent,
    AnswerRecordedEvent,
    QuestionSkippedEvent,
    InterviewCompleteEvent,
    SummaryEvent,
    ErrorEvent,
    CompleteEvent,
    DoneEvent,
]


def to_wire(event: InterviewEvent) -> Dict[str, Any]:
    """Serialize an event with camelCase keys."""

    return event.model_dump(by_alias=True, mode="json")


def encode_sse(event: InterviewEvent) -> str:
    """Format an event as a single Server-Sent Events frame."""

    return f"data: {json.dumps(to_wire(event), ensure_ascii=False)}\n\n"


__all__ = [
    "AnswerRecordedEvent",
    "CompleteEvent",
    "DoneEvent",
    "encode_sse",
    "ErrorEvent",
    "FeedbackEvent",
    "FollowUpEvent",
    "InterviewCompleteEvent",
    "InterviewEvent",
    "QuestionEvent",
    "QuestionSkippedEvent",
    "StatusEvent",
    "SummaryEvent",
    "to_wire",
]
