"""Session event logging for the mock interview engine.

``log_event`` records one engine occurrence: an action starting, an event
being streamed, a rejected action, a collaborator timing or a capped
follow-up. Each record is written to stdout as a short sentence tagged with
its session and, when file logs are enabled, to a rotating file as one JSON
object per line.
"""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
from string import Formatter
from typing import Any, Dict, Optional

from config.settings import settings

LOGGER_NAME = "mock_interview"

_TEMPLATES: Dict[str, str] = {
    "action.start": "{action} started",
    "action.event": "{action} emitted {event}",
    "action.rejected": "{action} rejected: {error}",
    "action.end": "{action} finished with session {status}",
    "span": "{node} took {ms}ms",
    "follow_up.capped": "follow-up limit reached for turn {question_id}",
}
_LEVELS: Dict[str, int] = {"action.rejected": logging.WARNING}

_logger = logging.getLogger(LOGGER_NAME)
_logger.propagate = False


def describe(kind: str, fields: Dict[str, Any]) -> str:
    """Render an event as a sentence; fields its template does not name are appended as ``key=value``."""

    template = _TEMPLATES.get(kind, kind)
    named = {name for _, name, _, _ in Formatter().parse(template) if name}
    text = template.format_map({name: fields.get(name, "-") for name in named})
    extras = [f"{key}={value}" for key, value in fields.items() if key not in named]
    return " ".join([text, *extras])


class SessionLineFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(
            "[%(asctime)s] %(levelname)s session=%(session_id)s :: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": record.created,
            "level": record.levelname,
            "kind": getattr(record, "kind", None),
            "session_id": getattr(record, "session_id", None),
        }
        payload.update(getattr(record, "fields", {}))
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure(
    *,
    level: Optional[str] = None,
    file_logs: Optional[bool] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """Attach the console and (optional) JSON file handlers; a no-op once configured unless ``force``."""

    if _logger.handlers and not force:
        return _logger
    for handler in list(_logger.handlers):
        _logger.removeHandler(handler)
        handler.close()

    _logger.setLevel((level or settings.LOG_LEVEL).upper())
    console = logging.StreamHandler(stream=sys.stdout)
    console.setFormatter(SessionLineFormatter())
    _logger.addHandler(console)

    if not (settings.ENABLE_FILE_LOGS if file_logs is None else file_logs):
        return _logger
    path = log_file or settings.LOG_FILE
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    json_file = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    json_file.setFormatter(JsonLineFormatter())
    _logger.addHandler(json_file)
    return _logger


def log_event(kind: str, session_id: str, **fields: Any) -> None:
    configure()
    _logger.log(
        _LEVELS.get(kind, logging.INFO),
        describe(kind, fields),
        extra={"session_id": session_id, "kind": kind, "fields": fields},
    )


__all__ = ["configure", "describe", "log_event", "LOGGER_NAME"]
