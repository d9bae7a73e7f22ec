"""Errors raised inside the session engine."""
from __future__ import annotations


class ActionRejected(Exception):
    """The action cannot run in the session's current state; nothing was written."""


NO_QUESTIONS_MESSAGE = "No interview questions available. Please run resume analysis first."
NO_SUITABLE_QUESTIONS_MESSAGE = "No suitable questions found"
INVALID_ACTION_MESSAGE = "action must be 'start', 'answer', 'skip', or 'end'"
SESSION_BUSY_MESSAGE = "Another action is already in progress for this session"
SESSION_ID_REQUIRED_MESSAGE = "sessionId is required"
INVALID_SESSION_ID_MESSAGE = "sessionId must be an integer"

__all__ = [
    "ActionRejected",
    "INVALID_ACTION_MESSAGE",
    "INVALID_SESSION_ID_MESSAGE",
    "NO_QUESTIONS_MESSAGE",
    "NO_SUITABLE_QUESTIONS_MESSAGE",
    "SESSION_BUSY_MESSAGE",
    "SESSION_ID_REQUIRED_MESSAGE",
]
