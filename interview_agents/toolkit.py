from __future__ import annotations  # Formatting helpers for mock interviewer prompts

from typing import Iterable, Optional, Sequence

from interview_engine.contracts import AnsweredTurn


def clamp_text(text: Optional[str], limit: int = 600) -> str:  # Compact whitespace and clip length
    compact = " ".join((text or "").split())
    if len(compact) <= limit:
        return compact
    return compact[: limit - 1].rstrip() + "…"


def inline_list(entries: Iterable[str]) -> str:  # Comma-join non-empty entries
    items = [item.strip() for item in entries if item and item.strip()]
    return ", ".join(items) if items else "None noted."


def format_responses(turns: Sequence[AnsweredTurn], limit: int = 1200) -> str:  # Numbered Q/A digest for the summary
    blocks = []
    for index, turn in enumerate(turns, start=1):
        blocks.append(
            f"Question {index} ({turn.question_category}): Score {turn.score:g}/100\n"
            f"Q: {turn.question_text.strip()}\n"
            f"A: {clamp_text(turn.user_answer, limit=limit)}\n"
            f"Feedback: {turn.feedback.strip() or '(none)'}"
        )
    return "\n\n".join(blocks) if blocks else "(no answered questions)"


__all__ = ["clamp_text", "format_responses", "inline_list"]
