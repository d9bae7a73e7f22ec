"""Span helper for timing engine steps and collaborator calls."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator

from .logger import log_event


@contextmanager
def span(session_id: Any, name: str, **fields: Any) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        log_event("span", str(session_id), node=name, ms=elapsed_ms, **fields)


__all__ = ["span"]
