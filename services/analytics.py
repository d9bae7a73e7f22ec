"""Per-job-application performance analytics over completed mock interviews."""
from __future__ import annotations

import datetime as dt
import math
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from interview_engine.models import MetricsProfile, ScorePoint
from interview_engine.selector import build_category_performance
from storage.store import InterviewStore


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoreDistribution(_CamelModel):
    excellent: int = 0
    good: int = 0
    average: int = 0
    needs_work: int = 0


class CategoryBreakdown(_CamelModel):
    category: str
    average_score: int
    questions_answered: int


class TrendPoint(_CamelModel):
    date: Optional[dt.datetime] = None
    score: Optional[float] = None


class MetricsSnapshot(_CamelModel):
    total_sessions: int
    completed_sessions: int
    average_score: Optional[float] = None
    strongest_category: Optional[str] = None
    weakest_category: Optional[str] = None
    behavioral_avg_score: Optional[float] = None
    technical_avg_score: Optional[float] = None
    situational_avg_score: Optional[float] = None
    company_specific_avg_score: Optional[float] = None
    role_specific_avg_score: Optional[float] = None


class Analytics(_CamelModel):
    metrics: Optional[MetricsSnapshot] = None
    score_history: List[ScorePoint] = Field(default_factory=list)
    score_distribution: ScoreDistribution = Field(default_factory=ScoreDistribution)
    category_breakdown: List[CategoryBreakdown] = Field(default_factory=list)
    performance_trend: List[TrendPoint] = Field(default_factory=list)
    improvement_rate: float = 0.0


TREND_WINDOW = 10


def build_analytics(store: InterviewStore, job_application_id: int) -> Analytics:
    """Aggregate the stored sessions and metrics profile of one job application."""

    profile = store.get_metrics(job_application_id)
    completed = [s for s in store.list_sessions(job_application_id) if s.status == "completed"]
    completed.sort(key=lambda s: s.completed_at or dt.datetime.min.replace(tzinfo=dt.timezone.utc), reverse=True)

    distribution = ScoreDistribution()
    for session in completed:
        score = session.overall_score
        if score is None:
            continue
        if score >= 80:
            distribution.excellent += 1
        elif score >= 60:
            distribution.good += 1
        elif score >= 40:
            distribution.average += 1
        else:
            distribution.needs_work += 1

    turns = [turn for session in completed for turn in store.list_turns(session.id)]
    breakdown = [
        CategoryBreakdown(category=name, average_score=_round_half_up(stat.mean), questions_answered=stat.count)
        for name, stat in build_category_performance(turns).items()
    ]

    trend = [TrendPoint(date=s.completed_at, score=s.overall_score) for s in reversed(completed[:TREND_WINDOW])]
    history = list(profile.score_history) if profile else []

    return Analytics(
        metrics=_snapshot(profile),
        score_history=history,
        score_distribution=distribution,
        category_breakdown=breakdown,
        performance_trend=trend,
        improvement_rate=improvement_rate(history),
    )


def improvement_rate(history: List[ScorePoint]) -> float:
    """Second-half mean minus first-half mean, to one decimal; 0 with fewer than two points."""

    if len(history) < 2:
        return 0.0
    middle = len(history) // 2
    first = [point.score for point in history[:middle]]
    second = [point.score for point in history[middle:]]
    delta = sum(second) / len(second) - sum(first) / len(first)
    return math.floor(delta * 10 + 0.5) / 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _snapshot(profile: Optional[MetricsProfile]) -> Optional[MetricsSnapshot]:
    if profile is None:
        return None
    return MetricsSnapshot(**profile.model_dump(exclude={"job_application_id", "score_history", "updated_at"}))


__all__ = ["Analytics", "build_analytics", "improvement_rate", "ScoreDistribution"]
