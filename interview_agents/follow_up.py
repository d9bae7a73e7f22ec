from __future__ import annotations  # Follow-up decider agent proposing probing questions

from typing import Optional, Type

from langchain_core.prompts import ChatPromptTemplate

from config import LlmRoute
from config.settings import settings
from interview_engine.contracts import AnswerEvaluation, FollowUpDecision
from interview_engine.models import Question
from llm_gateway import LlmClient

from .prompts import FOLLOW_UP_REQUEST, INTERVIEWER_GUIDANCE
from .toolkit import inline_list

FOLLOW_UP_DECIDER_KEY = "interview_agents.follow_up_decider"  # Registry key for the follow-up decider


class FollowUpDeciderAgent:  # Decides whether an answer deserves a follow-up question
    def __init__(
        self,
        client: LlmClient,
        route: LlmRoute,
        schema: Type[FollowUpDecision] = FollowUpDecision,
        *,
        max_follow_ups: Optional[int] = None,
    ) -> None:
        self._max_follow_ups = settings.MAX_FOLLOW_UPS if max_follow_ups is None else max_follow_ups
        self._prompt = ChatPromptTemplate.from_messages(
            [
                ("system", "{instructions}"),
                ("human", FOLLOW_UP_REQUEST),
            ]
        )
        self._chain = self._prompt | client.runnable(route, schema)

    def decide(
        self,
        question: Question,
        answer: str,
        evaluation: AnswerEvaluation,
        existing_follow_ups: int,
    ) -> FollowUpDecision:
        if existing_follow_ups >= self._max_follow_ups:
            return FollowUpDecision(should_follow_up=False, reason="Maximum follow-up count reached")
        decision = self._chain.invoke(
            {
                "instructions": INTERVIEWER_GUIDANCE,
                "category": question.category,
                "question": question.question.strip(),
                "answer": answer.strip(),
                "score": f"{evaluation.score:g}",
                "feedback": evaluation.feedback.strip(),
                "missed": inline_list(evaluation.key_points_missed),
                "follow_up_count": str(existing_follow_ups),
                "max_follow_ups": str(self._max_follow_ups),
            }
        )
        text = (decision.follow_up_question or "").strip()
        if not decision.should_follow_up or not text:
            return decision.model_copy(update={"should_follow_up": False, "follow_up_question": None})
        return decision.model_copy(update={"follow_up_question": text})


__all__ = ["FOLLOW_UP_DECIDER_KEY", "FollowUpDeciderAgent"]
