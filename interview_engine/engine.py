"""Mock interview session engine.

One ``run`` call executes one client action (``start``, ``answer``, ``skip`` or
``end``) against a stored session and yields the resulting events in order.
Every stream ends with a ``complete`` event followed by ``done``, also when the
action was rejected or a collaborator failed.

Answer and skip share the same progression, which is expressed as a small
LangGraph: score the turn, optionally decide on a follow-up, then ask a
follow-up, ask the next question or close the question phase. Collaborators
run first and nothing is written until the last node, which records the
answered turn and the next turn in one transaction. Node updates are streamed
so events reach the client as each step finishes.
"""
from __future__ import annotations

import datetime as dt
import logging
import operator
import random
from typing import Annotated, Any, Dict, Iterator, List, Optional, Tuple, TypedDict

from langgraph.graph import END, START, StateGraph

from config.settings import settings
from observability.logger import log_event
from observability.tracing import span

from .contracts import (
    AnsweredTurn,
    AnswerEvaluation,
    AnswerEvaluator,
    FollowUpDecider,
    FollowUpDecision,
    InterviewRepository,
    SummaryGenerator,
)
from .errors import (
    INVALID_ACTION_MESSAGE,
    INVALID_SESSION_ID_MESSAGE,
    NO_QUESTIONS_MESSAGE,
    NO_SUITABLE_QUESTIONS_MESSAGE,
    SESSION_BUSY_MESSAGE,
    SESSION_ID_REQUIRED_MESSAGE,
    ActionRejected,
)
from .events import (
    AnswerRecordedEvent,
    CompleteEvent,
    DoneEvent,
    ErrorEvent,
    FeedbackEvent,
    FollowUpEvent,
    InterviewCompleteEvent,
    InterviewEvent,
    QuestionEvent,
    QuestionSkippedEvent,
    StatusEvent,
    SummaryEvent,
)
from .locks import SessionLocks
from .metrics import apply_completed_session
from .models import FOLLOW_UP_CATEGORY, SKIPPED_ANSWER, Question, Session, Turn
from .selector import asked_question_ids, build_category_performance, select_next_question

logger = logging.getLogger(__name__)

ACTIONS = ("start", "answer", "skip", "end")

ALL_ANSWERED_MESSAGE = "All questions have been answered"
NO_MORE_QUESTIONS_MESSAGE = "No more questions available"
NO_ANSWERS_FEEDBACK = "No questions were answered in this session."
NO_ANSWERS_RECOMMENDATION = "Try completing at least a few questions in your next practice session."
SKIPPED_FEEDBACK = "Question was skipped"


class TurnFlow(TypedDict, total=False):  # State threaded through the answer/skip graph
    session: Session
    pending: Turn
    answer: Optional[str]
    turns: List[Turn]
    outcome: Dict[str, Any]
    projected: List[Turn]
    evaluation: Optional[AnswerEvaluation]
    decision: Optional[FollowUpDecision]
    events: Annotated[List[Any], operator.add]


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _session_key(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _answered_count(turns: List[Turn]) -> int:
    return sum(1 for turn in turns if turn.user_answer is not None)


def _pending_turn(turns: List[Turn]) -> Optional[Turn]:
    for turn in turns:
        if turn.is_pending:
            return turn
    return None


def _root_turn_id(turn: Turn) -> int:  # Follow-ups chain to the question that opened the thread
    if turn.is_follow_up and turn.parent_response_id:
        return turn.parent_response_id
    return turn.id


def _project(turns: List[Turn], pending: Turn, outcome: Dict[str, Any]) -> List[Turn]:
    """The session's turns as they will read once ``outcome`` is written onto ``pending``."""

    recorded = pending.model_copy(update=outcome)
    return [recorded if turn.id == pending.id else turn for turn in turns]


class InterviewEngine:
    """Drives mock interview sessions through their lifecycle."""

    def __init__(
        self,
        store: InterviewRepository,
        evaluator: AnswerEvaluator,
        follow_up: FollowUpDecider,
        summarizer: SummaryGenerator,
        *,
        rng: Optional[random.Random] = None,
        max_follow_ups: Optional[int] = None,
        locks: Optional[SessionLocks] = None,
    ) -> None:
        self._store = store
        self._evaluator = evaluator
        self._follow_up = follow_up
        self._summarizer = summarizer
        self._rng = rng or random.Random()
        self._max_follow_ups = settings.MAX_FOLLOW_UPS if max_follow_ups is None else max(max_follow_ups, 0)
        self._locks = locks or SessionLocks()
        self._turn_graph = self._build_turn_graph()

    # ------------------------------------------------------------------ entry
    def run(
        self,
        session_id: Any,
        action: Any,
        user_answer: Any = None,
    ) -> Iterator[InterviewEvent]:
        """Execute one action and yield its events, ending with ``complete`` and ``done``.

        ``session_id`` may arrive as an int or a numeric string; anything else
        is reported as an ``error`` event like every other rejected request.
        """

        key = _session_key(session_id)
        if key is None:
            blank = session_id is None or (isinstance(session_id, str) and not session_id.strip())
            yield ErrorEvent(error=SESSION_ID_REQUIRED_MESSAGE if blank else INVALID_SESSION_ID_MESSAGE)
            yield CompleteEvent()
            yield DoneEvent()
            return

        log_event("action.start", str(key), action=action)
        final_status: Optional[str] = None
        with self._locks.hold(key) as acquired:
            if not acquired:
                log_event("action.rejected", str(key), action=action, error=SESSION_BUSY_MESSAGE)
                yield ErrorEvent(error=SESSION_BUSY_MESSAGE)
            else:
                try:
                    for event in self._dispatch(key, action, user_answer):
                        log_event("action.event", str(key), action=action, event=event.type)
                        yield event
                except ActionRejected as exc:
                    log_event("action.rejected", str(key), action=action, error=str(exc))
                    yield ErrorEvent(error=str(exc))
                except Exception as exc:
                    logger.exception("Action %s failed for session %s", action, key)
                    yield ErrorEvent(error=str(exc) or exc.__class__.__name__)
                final_status = self._current_status(key)
        log_event("action.end", str(key), action=action, status=final_status)
        yield CompleteEvent(session_id=key, status=final_status)
        yield DoneEvent()

    def _dispatch(self, session_id: int, action: Any, user_answer: Any) -> Iterator[InterviewEvent]:
        if action not in ACTIONS:
            raise ActionRejected(INVALID_ACTION_MESSAGE)
        session = self._store.get_session(session_id)
        if session is None:
            raise ActionRejected("Session not found")
        if action == "start":
            return self._start(session)
        if action == "answer":
            return self._answer(session, user_answer)
        if action == "skip":
            return self._skip(session)
        return self._end(session)

    def _current_status(self, session_id: int) -> Optional[str]:
        try:
            session = self._store.get_session(session_id)
        except Exception:
            logger.exception("Could not reload session %s", session_id)
            return None
        return session.status if session is not None else None

    # ---------------------------------------------------------------- actions
    def _start(self, session: Session) -> Iterator[InterviewEvent]:
        if session.status != "setup":
            raise ActionRejected(f"Cannot start a session that is {session.status}")
        pool = self._question_pool(session)
        if not pool:
            raise ActionRejected(NO_QUESTIONS_MESSAGE)
        question = select_next_question(pool, set(), {}, session.selection_settings(), self._rng)
        if question is None:
            raise ActionRejected(NO_SUITABLE_QUESTIONS_MESSAGE)

        with self._store.transaction() as tx:
            turn = tx.create_turn(
                session_id=session.id,
                question_id=question.id,
                question_text=question.question,
                question_category=question.category,
                question_difficulty=question.difficulty,
                is_follow_up=False,
                order_index=0,
            )
            tx.update_session(
                session.id,
                status="in_progress",
                started_at=_utcnow(),
                current_question_index=turn.order_index,
            )
        yield StatusEvent(status="in_progress", message="Interview started")
        yield QuestionEvent(
            question_number=1,
            total_questions=session.question_count,
            question_text=question.question,
            category=question.category,
            difficulty=question.difficulty,
        )

    def _answer(self, session: Session, user_answer: Any) -> Iterator[InterviewEvent]:
        answer = user_answer.strip() if isinstance(user_answer, str) else ""
        if not answer:
            raise ActionRejected("userAnswer is required")
        pending, turns = self._require_pending(session, "No pending question to answer")
        yield StatusEvent(status="evaluating", message="Evaluating your answer...")
        yield from self._progress(session, pending, turns, answer)

    def _skip(self, session: Session) -> Iterator[InterviewEvent]:
        pending, turns = self._require_pending(session, "No pending question to skip")
        yield from self._progress(session, pending, turns, None)

    def _end(self, session: Session) -> Iterator[InterviewEvent]:
        if session.status != "in_progress":
            raise ActionRejected(f"Cannot end a session that is {session.status}")
        yield StatusEvent(status="generating_summary", message="Generating summary...")

        turns = self._store.list_turns(session.id)
        answered = [
            AnsweredTurn(
                question_text=turn.question_text,
                question_category=turn.question_category or FOLLOW_UP_CATEGORY,
                user_answer=turn.user_answer,
                score=turn.score,
                feedback=turn.feedback or "",
            )
            for turn in turns
            if turn.user_answer and not turn.is_skipped and turn.score is not None
        ]

        if not answered:
            self._store.update_session(
                session.id,
                status="completed",
                completed_at=_utcnow(),
                overall_score=0,
                summary_feedback=NO_ANSWERS_FEEDBACK,
                strength_areas=[],
                improvement_areas=[],
            )
            yield SummaryEvent(
                overall_score=0,
                summary_feedback=NO_ANSWERS_FEEDBACK,
                recommendations=[NO_ANSWERS_RECOMMENDATION],
            )
            return

        context = self._store.get_job_context(session.job_application_id)
        with span(session.id, "summary_generator", answered=len(answered)):
            summary = self._summarizer.summarize(answered, context)

        # Completion and the metrics fold commit together.
        with self._store.transaction() as tx:
            tx.update_session(
                session.id,
                status="completed",
                completed_at=_utcnow(),
                overall_score=summary.overall_score,
                summary_feedback=summary.summary_feedback,
                strength_areas=summary.strength_areas,
                improvement_areas=summary.improvement_areas,
            )
            apply_completed_session(
                tx,
                session.job_application_id,
                summary.overall_score,
                summary.category_scores.by_category(),
            )
        yield SummaryEvent(
            overall_score=summary.overall_score,
            summary_feedback=summary.summary_feedback,
            strength_areas=summary.strength_areas,
            improvement_areas=summary.improvement_areas,
            category_scores=summary.category_scores.model_dump(by_alias=True),
            recommendations=summary.recommendations,
        )

    # ---------------------------------------------------------------- helpers
    def _require_pending(self, session: Session, message: str) -> Tuple[Turn, List[Turn]]:
        if session.status != "in_progress":
            raise ActionRejected(f"Session is {session.status}, not in progress")
        turns = self._store.list_turns(session.id)
        pending = _pending_turn(turns)
        if pending is None:
            raise ActionRejected(message)
        return pending, turns

    def _question_pool(self, session: Session) -> List[Question]:
        if session.resume_analysis_id is None:
            return []
        records = self._store.list_questions(session.resume_analysis_id)
        return [
            Question(
                id=record.id,
                question=record.question,
                category=record.category,
                difficulty=record.difficulty,
                suggested_answer=record.suggested_answer,
            )
            for record in records
            if record.category and record.difficulty
        ]

    def _progress(
        self, session: Session, pending: Turn, turns: List[Turn], answer: Optional[str]
    ) -> Iterator[InterviewEvent]:
        state: TurnFlow = {"session": session, "pending": pending, "answer": answer, "turns": turns, "events": []}
        for update in self._turn_graph.stream(state, stream_mode="updates"):
            for delta in update.values():
                for event in (delta or {}).get("events", []):
                    yield event

    # ----------------------------------------------------------- turn graph
    def _build_turn_graph(self):
        graph = StateGraph(TurnFlow)
        graph.add_node("evaluate", self._evaluate_node)
        graph.add_node("skip", self._skip_node)
        graph.add_node("decide_follow_up", self._decide_node)
        graph.add_node("ask_follow_up", self._ask_follow_up_node)
        graph.add_node("ask_next", self._ask_next_node)
        graph.add_node("finish", self._finish_node)

        graph.add_conditional_edges(
            START,
            lambda state: "skip" if state.get("answer") is None else "answer",
            {"answer": "evaluate", "skip": "skip"},
        )
        graph.add_edge("evaluate", "decide_follow_up")
        routes = {"follow_up": "ask_follow_up", "next": "ask_next", "finish": "finish"}
        graph.add_conditional_edges("decide_follow_up", self._route_progress, routes)
        graph.add_conditional_edges("skip", self._route_progress, routes)
        graph.add_edge("ask_follow_up", END)
        graph.add_edge("ask_next", END)
        graph.add_edge("finish", END)
        return graph.compile()

    def _evaluate_node(self, state: TurnFlow) -> Dict[str, Any]:
        session, pending, answer = state["session"], state["pending"], state["answer"]
        context = self._store.get_job_context(session.job_application_id)
        with span(session.id, "answer_evaluator", turn_id=pending.id):
            evaluation = self._evaluator.evaluate(pending.as_question(), answer, context)

        now = _utcnow()
        outcome = {
            "user_answer": answer,
            "answered_at": now,
            "score": evaluation.score,
            "feedback": evaluation.feedback,
            "suggested_improvement": evaluation.suggested_improvement,
            "key_points_covered": evaluation.key_points_covered,
            "key_points_missed": evaluation.key_points_missed,
            "evaluated_at": now,
        }
        return {
            "evaluation": evaluation,
            "outcome": outcome,
            "projected": _project(state["turns"], pending, outcome),
        }

    def _skip_node(self, state: TurnFlow) -> Dict[str, Any]:
        outcome = {
            "user_answer": SKIPPED_ANSWER,
            "answered_at": _utcnow(),
            "score": 0,
            "feedback": SKIPPED_FEEDBACK,
        }
        return {"outcome": outcome, "projected": _project(state["turns"], state["pending"], outcome)}

    def _decide_node(self, state: TurnFlow) -> Dict[str, Any]:
        session, pending, turns = state["session"], state["pending"], state["turns"]
        root_id = _root_turn_id(pending)
        existing = sum(1 for turn in turns if turn.is_follow_up and turn.parent_response_id == root_id)
        if existing >= self._max_follow_ups:
            log_event("follow_up.capped", str(session.id), node="decide_follow_up", question_id=root_id)
            return {"decision": None}
        with span(session.id, "follow_up_decider", turn_id=pending.id):
            decision = self._follow_up.decide(pending.as_question(), state["answer"], state["evaluation"], existing)
        return {"decision": decision}

    def _route_progress(self, state: TurnFlow) -> str:
        decision = state.get("decision")
        if decision is not None and decision.should_follow_up and (decision.follow_up_question or "").strip():
            return "follow_up"
        if _answered_count(state["projected"]) < state["session"].question_count:
            return "next"
        return "finish"

    def _ask_follow_up_node(self, state: TurnFlow) -> Dict[str, Any]:
        session, pending, decision = state["session"], state["pending"], state["decision"]
        turn = self._record(
            state,
            question_id=None,
            question_text=decision.follow_up_question.strip(),
            question_category=FOLLOW_UP_CATEGORY,
            question_difficulty=pending.question_difficulty,
            is_follow_up=True,
            parent_response_id=_root_turn_id(pending),
        )
        event = FollowUpEvent(
            question_text=turn.question_text,
            reason=decision.reason,
            question_number=_answered_count(state["projected"]) + 1,
            total_questions=session.question_count,
        )
        return {"events": [self._recorded_event(state), event]}

    def _ask_next_node(self, state: TurnFlow) -> Dict[str, Any]:
        session, projected = state["session"], state["projected"]
        answered = _answered_count(projected)
        question = select_next_question(
            self._question_pool(session),
            asked_question_ids(projected),
            build_category_performance(projected),
            session.selection_settings(),
            self._rng,
        )
        if question is None:
            self._record(state)
            event: InterviewEvent = InterviewCompleteEvent(message=NO_MORE_QUESTIONS_MESSAGE, answered_count=answered)
            return {"events": [self._recorded_event(state), event]}

        self._record(
            state,
            question_id=question.id,
            question_text=question.question,
            question_category=question.category,
            question_difficulty=question.difficulty,
            is_follow_up=False,
        )
        event = QuestionEvent(
            question_number=answered + 1,
            total_questions=session.question_count,
            question_text=question.question,
            category=question.category,
            difficulty=question.difficulty,
        )
        return {"events": [self._recorded_event(state), event]}

    def _finish_node(self, state: TurnFlow) -> Dict[str, Any]:
        self._record(state)
        answered = _answered_count(state["projected"])
        event = InterviewCompleteEvent(message=ALL_ANSWERED_MESSAGE, answered_count=answered)
        return {"events": [self._recorded_event(state), event]}

    def _record(self, state: TurnFlow, **next_turn: Any) -> Optional[Turn]:
        """Write the scored turn and, when given, the next turn in one transaction."""

        session, pending = state["session"], state["pending"]
        with self._store.transaction() as tx:
            tx.update_turn(pending.id, **state["outcome"])
            if not next_turn:
                return None
            turn = tx.create_turn(
                session_id=session.id,
                order_index=self._next_order_index(state["turns"]),
                **next_turn,
            )
            tx.update_session(session.id, current_question_index=turn.order_index)
        return turn

    @staticmethod
    def _recorded_event(state: TurnFlow) -> InterviewEvent:
        evaluation = state.get("evaluation")
        if evaluation is None:
            return QuestionSkippedEvent()
        if state["session"].feedback_mode != "immediate":
            return AnswerRecordedEvent()
        return FeedbackEvent(
            score=evaluation.score,
            feedback=evaluation.feedback,
            suggested_improvement=evaluation.suggested_improvement,
            key_points_covered=evaluation.key_points_covered,
            key_points_missed=evaluation.key_points_missed,
            star_analysis=evaluation.star_analysis.model_dump(),
        )

    @staticmethod
    def _next_order_index(turns: List[Turn]) -> int:
        return max((turn.order_index for turn in turns), default=-1) + 1


__all__ = [
    "ACTIONS",
    "ALL_ANSWERED_MESSAGE",
    "InterviewEngine",
    "NO_ANSWERS_FEEDBACK",
    "NO_ANSWERS_RECOMMENDATION",
    "NO_MORE_QUESTIONS_MESSAGE",
    "SKIPPED_FEEDBACK",
    "TurnFlow",
]
