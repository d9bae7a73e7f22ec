from __future__ import annotations  # Answer evaluator agent scoring a single response

from typing import Type

from langchain_core.prompts import ChatPromptTemplate

from config import LlmRoute
from config.settings import settings
from interview_engine.contracts import AnswerEvaluation
from interview_engine.models import InterviewContext, Question
from llm_gateway import LlmClient

from .prompts import EVALUATION_REQUEST, INTERVIEWER_GUIDANCE
from .toolkit import clamp_text

ANSWER_EVALUATOR_KEY = "interview_agents.answer_evaluator"  # Registry key for the answer evaluator


class AnswerEvaluatorAgent:  # Scores an answer on the 0-100 rubric with STAR analysis
    def __init__(self, client: LlmClient, route: LlmRoute, schema: Type[AnswerEvaluation] = AnswerEvaluation) -> None:
        self._prompt = ChatPromptTemplate.from_messages(
            [
                ("system", "{instructions}"),
                ("human", EVALUATION_REQUEST),
            ]
        )
        self._chain = self._prompt | client.runnable(route, schema)

    def evaluate(self, question: Question, answer: str, context: InterviewContext) -> AnswerEvaluation:
        limit = settings.CONTEXT_CHAR_LIMIT
        evaluation = self._chain.invoke(
            {
                "instructions": INTERVIEWER_GUIDANCE,
                "job_title": context.job_title or "(not provided)",
                "company_name": context.company_name or "(not provided)",
                "job_description": clamp_text(context.job_description, limit=limit) or "(not provided)",
                "resume_content": clamp_text(context.resume_content, limit=limit) or "(not provided)",
                "category": question.category,
                "difficulty": question.difficulty,
                "question": question.question.strip(),
                "answer": answer.strip(),
            }
        )
        covered = [item.strip() for item in evaluation.key_points_covered if item and item.strip()]
        missed = [item.strip() for item in evaluation.key_points_missed if item and item.strip()]
        return evaluation.model_copy(update={"key_points_covered": covered, "key_points_missed": missed})


__all__ = ["ANSWER_EVALUATOR_KEY", "AnswerEvaluatorAgent"]
