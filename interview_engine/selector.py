"""Adaptive next-question selection biased toward the weakest category."""
from __future__ import annotations

import random
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .models import CategoryStat, Question, SelectionSettings, Turn


def select_next_question(
    pool: Sequence[Question],
    answered_ids: Set[int],
    category_performance: Mapping[str, CategoryStat],
    settings: SelectionSettings,
    rng: Optional[random.Random] = None,
) -> Optional[Question]:
    """Pick the next question to ask, or ``None`` when nothing qualifies.

    Category filtering is strict; difficulty is a preference that is dropped
    when no candidate matches it. Among the remaining candidates the
    lowest-scoring category with something left to ask wins, and the pick
    inside it is uniform.
    """

    rng = rng or random.Random()

    candidates = [q for q in pool if q.id is not None and q.id not in answered_ids]

    if settings.selected_categories:
        allowed = set(settings.selected_categories)
        candidates = [q for q in candidates if q.category in allowed]

    if settings.difficulty != "mixed":
        matching = [q for q in candidates if q.difficulty == settings.difficulty]
        if matching:
            candidates = matching

    if not candidates:
        return None

    for category in weakest_first(category_performance):
        in_category = [q for q in candidates if q.category == category]
        if in_category:
            return rng.choice(in_category)

    return rng.choice(candidates)


def weakest_first(category_performance: Mapping[str, CategoryStat]) -> List[str]:
    """Categories with at least one scored turn, lowest mean first."""

    scored = [(name, stat) for name, stat in category_performance.items() if stat.count > 0]
    scored.sort(key=lambda item: item[1].mean)
    return [name for name, _ in scored]


def build_category_performance(turns: Iterable[Turn]) -> Dict[str, CategoryStat]:
    """Fold scored turns into per-category totals."""

    performance: Dict[str, CategoryStat] = {}
    for turn in turns:
        if turn.score is None or not turn.question_category:
            continue
        update_category_performance(performance, turn.question_category, turn.score)
    return performance


def update_category_performance(performance: Dict[str, CategoryStat], category: str, score: float) -> None:
    current = performance.get(category, CategoryStat())
    performance[category] = CategoryStat(total=current.total + score, count=current.count + 1)


def asked_question_ids(turns: Iterable[Turn]) -> Set[int]:
    """Source question ids already used in the session."""

    return {turn.question_id for turn in turns if turn.question_id is not None}


__all__ = [
    "asked_question_ids",
    "build_category_performance",
    "select_next_question",
    "update_category_performance",
    "weakest_first",
]
