"""Fold completed sessions into the per-job-application metrics profile."""
from __future__ import annotations

import datetime as dt
import logging
from typing import Mapping, Optional

from .contracts import InterviewRepository
from .models import MetricsProfile, ScorePoint

logger = logging.getLogger(__name__)

# Category label -> profile column holding its last observed average.
CATEGORY_FIELDS = {
    "behavioral": "behavioral_avg_score",
    "technical": "technical_avg_score",
    "situational": "situational_avg_score",
    "company-specific": "company_specific_avg_score",
    "role-specific": "role_specific_avg_score",
}


def fold_session(
    profile: MetricsProfile,
    overall_score: float,
    category_scores: Mapping[str, Optional[float]],
    *,
    now: Optional[dt.datetime] = None,
) -> MetricsProfile:
    """Return ``profile`` updated with one more completed session.

    The overall average is an incremental mean over completed sessions. Category
    averages keep the last value a session reported; categories the session did
    not cover keep their stored value. Strongest/weakest come from this
    session's category scores and are left alone when it had none.
    """

    now = now or dt.datetime.now(dt.timezone.utc)
    completed = profile.completed_sessions + 1
    previous = profile.average_score or 0.0
    average = (previous * (completed - 1) + overall_score) / completed

    history = list(profile.score_history)
    history.append(ScorePoint(date=now.isoformat(), score=overall_score))

    update = {
        "completed_sessions": completed,
        "average_score": average,
        "score_history": history,
    }
    for category, field in CATEGORY_FIELDS.items():
        value = category_scores.get(category)
        if value is not None:
            update[field] = value

    valid = [(name, score) for name, score in category_scores.items() if score is not None]
    if valid:
        valid.sort(key=lambda item: item[1], reverse=True)
        update["strongest_category"] = valid[0][0]
        update["weakest_category"] = valid[-1][0]

    return profile.model_copy(update=update)


def apply_completed_session(
    store: InterviewRepository,
    job_application_id: int,
    overall_score: float,
    category_scores: Mapping[str, Optional[float]],
) -> Optional[MetricsProfile]:
    """Persist the fold for ``job_application_id``; no-op without a profile."""

    profile = store.get_metrics(job_application_id)
    if profile is None:
        logger.info("No metrics profile for job application %s; skipping", job_application_id)
        return None
    updated = fold_session(profile, overall_score, category_scores)
    store.save_metrics(updated)
    return updated


__all__ = ["apply_completed_session", "CATEGORY_FIELDS", "fold_session"]
