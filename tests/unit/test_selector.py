from __future__ import annotations

import random

from interview_engine.models import CategoryStat, Question, SelectionSettings, Turn
from interview_engine.selector import (
    asked_question_ids,
    build_category_performance,
    select_next_question,
    weakest_first,
)


def _q(qid, category, difficulty="medium") -> Question:
    return Question(id=qid, question=f"Question {qid}", category=category, difficulty=difficulty)


def _turn(index, category, score, question_id=None) -> Turn:
    return Turn(
        id=index + 1,
        session_id=1,
        question_id=question_id,
        question_text="q",
        question_category=category,
        order_index=index,
        user_answer="a" if score is not None else None,
        score=score,
    )


def test_prefers_weakest_category_with_remaining_candidate():
    pool = [_q(1, "behavioral"), _q(2, "technical"), _q(3, "behavioral")]
    performance = {
        "behavioral": CategoryStat(total=40, count=1),
        "technical": CategoryStat(total=90, count=1),
    }
    picked = select_next_question(pool, {1}, performance, SelectionSettings(), random.Random(0))
    assert picked is not None
    assert picked.id == 3


def test_falls_through_to_next_weakest_when_category_exhausted():
    pool = [_q(1, "behavioral"), _q(2, "technical"), _q(3, "situational")]
    performance = {
        "behavioral": CategoryStat(total=10, count=1),
        "technical": CategoryStat(total=50, count=1),
        "situational": CategoryStat(total=90, count=1),
    }
    picked = select_next_question(pool, {1}, performance, SelectionSettings(), random.Random(0))
    assert picked.id == 2


def test_category_filter_is_strict():
    pool = [_q(1, "behavioral"), _q(2, "behavioral")]
    settings = SelectionSettings(selected_categories=["technical"])
    assert select_next_question(pool, set(), {}, settings, random.Random(0)) is None


def test_difficulty_is_a_soft_preference():
    pool = [_q(1, "technical", "easy"), _q(2, "technical", "medium")]
    hard_only = SelectionSettings(difficulty="hard")
    picked = select_next_question(pool, set(), {}, hard_only, random.Random(0))
    assert picked is not None
    assert picked.id in {1, 2}

    easy = SelectionSettings(difficulty="easy")
    for seed in range(5):
        assert select_next_question(pool, set(), {}, easy, random.Random(seed)).id == 1


def test_returns_none_when_everything_answered():
    pool = [_q(1, "behavioral"), _q(2, "technical")]
    assert select_next_question(pool, {1, 2}, {}, SelectionSettings(), random.Random(0)) is None


def test_questions_without_id_are_never_selected():
    pool = [Question(question="orphan", category="behavioral", difficulty="easy"), _q(5, "behavioral")]
    for seed in range(5):
        assert select_next_question(pool, set(), {}, SelectionSettings(), random.Random(seed)).id == 5


def test_uniform_pick_without_performance_is_seeded():
    pool = [_q(i, "behavioral") for i in range(1, 6)]
    first = select_next_question(pool, set(), {}, SelectionSettings(), random.Random(42))
    second = select_next_question(pool, set(), {}, SelectionSettings(), random.Random(42))
    assert first == second


def test_weakest_first_ignores_unscored_and_keeps_tie_order():
    performance = {
        "technical": CategoryStat(total=60, count=1),
        "behavioral": CategoryStat(total=60, count=1),
        "situational": CategoryStat(),
        "role-specific": CategoryStat(total=30, count=2),
    }
    assert weakest_first(performance) == ["role-specific", "technical", "behavioral"]


def test_build_category_performance_counts_scored_turns_only():
    turns = [
        _turn(0, "behavioral", 80),
        _turn(1, "behavioral", 0),
        _turn(2, "technical", None),
        _turn(3, None, 50),
    ]
    performance = build_category_performance(turns)
    assert set(performance) == {"behavioral"}
    assert performance["behavioral"].count == 2
    assert performance["behavioral"].mean == 40


def test_asked_question_ids_skip_follow_ups():
    turns = [_turn(0, "behavioral", 80, question_id=4), _turn(1, "follow-up", None)]
    assert asked_question_ids(turns) == {4}
