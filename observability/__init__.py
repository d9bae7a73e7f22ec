"""Logging and timing helpers for the mock interview engine."""
from .logger import log_event
from .tracing import span

__all__ = ["log_event", "span"]
