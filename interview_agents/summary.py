from __future__ import annotations  # Summary generator agent closing a session

from typing import Sequence, Type

from langchain_core.prompts import ChatPromptTemplate

from config import LlmRoute
from config.settings import settings
from interview_engine.contracts import AnsweredTurn, SessionSummary
from interview_engine.models import InterviewContext
from llm_gateway import LlmClient

from .prompts import INTERVIEWER_GUIDANCE, SUMMARY_REQUEST
from .toolkit import clamp_text, format_responses

SUMMARY_GENERATOR_KEY = "interview_agents.summary_generator"  # Registry key for the summary generator


class SummaryGeneratorAgent:  # Produces the end-of-session assessment
    def __init__(self, client: LlmClient, route: LlmRoute, schema: Type[SessionSummary] = SessionSummary) -> None:
        self._prompt = ChatPromptTemplate.from_messages(
            [
                ("system", "{instructions}"),
                ("human", SUMMARY_REQUEST),
            ]
        )
        self._chain = self._prompt | client.runnable(route, schema)

    def summarize(self, turns: Sequence[AnsweredTurn], context: InterviewContext) -> SessionSummary:
        summary = self._chain.invoke(
            {
                "instructions": INTERVIEWER_GUIDANCE,
                "job_title": context.job_title or "(not provided)",
                "company_name": context.company_name or "(not provided)",
                "job_description": clamp_text(context.job_description, limit=settings.CONTEXT_CHAR_LIMIT)
                or "(no job description)",
                "responses": format_responses(turns),
            }
        )
        strengths = [item.strip() for item in summary.strength_areas if item and item.strip()]
        improvements = [item.strip() for item in summary.improvement_areas if item and item.strip()]
        return summary.model_copy(update={"strength_areas": strengths, "improvement_areas": improvements})


__all__ = ["SUMMARY_GENERATOR_KEY", "SummaryGeneratorAgent"]
