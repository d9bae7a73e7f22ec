from __future__ import annotations  # LLM-backed collaborators for the mock interview engine

from pathlib import Path
from typing import Dict, NamedTuple, Type

from pydantic import BaseModel

from config import load_config, resolve_registry
from interview_engine.contracts import AnswerEvaluation, FollowUpDecision, SessionSummary
from llm_gateway import LlmClient

from .evaluator import ANSWER_EVALUATOR_KEY, AnswerEvaluatorAgent
from .follow_up import FOLLOW_UP_DECIDER_KEY, FollowUpDeciderAgent
from .summary import SUMMARY_GENERATOR_KEY, SummaryGeneratorAgent

AGENT_SCHEMAS: Dict[str, Type[BaseModel]] = {  # Output schema per registry key
    ANSWER_EVALUATOR_KEY: AnswerEvaluation,
    FOLLOW_UP_DECIDER_KEY: FollowUpDecision,
    SUMMARY_GENERATOR_KEY: SessionSummary,
}


class Collaborators(NamedTuple):  # Agents handed to InterviewEngine
    evaluator: AnswerEvaluatorAgent
    follow_up: FollowUpDeciderAgent
    summarizer: SummaryGeneratorAgent


def build_collaborators(client: LlmClient, config_path: Path) -> Collaborators:
    """Wire the three agents from the routes configured at ``config_path``.

    Raises:
        KeyError: If any agent key is missing from the config registry.
    """

    registry = resolve_registry(load_config(config_path), AGENT_SCHEMAS)
    route, _ = registry[ANSWER_EVALUATOR_KEY]
    evaluator = AnswerEvaluatorAgent(client, route)
    route, _ = registry[FOLLOW_UP_DECIDER_KEY]
    follow_up = FollowUpDeciderAgent(client, route)
    route, _ = registry[SUMMARY_GENERATOR_KEY]
    summarizer = SummaryGeneratorAgent(client, route)
    return Collaborators(evaluator=evaluator, follow_up=follow_up, summarizer=summarizer)


__all__ = [
    "AGENT_SCHEMAS",
    "ANSWER_EVALUATOR_KEY",
    "AnswerEvaluatorAgent",
    "build_collaborators",
    "Collaborators",
    "FOLLOW_UP_DECIDER_KEY",
    "FollowUpDeciderAgent",
    "SUMMARY_GENERATOR_KEY",
    "SummaryGeneratorAgent",
]
