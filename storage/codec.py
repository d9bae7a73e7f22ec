"""Versioned JSON encoding for list/object columns."""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

JSON_VERSION = 1


def dump_json(value: Any) -> Optional[str]:
    """Wrap ``value`` in a versioned envelope; ``None`` stays NULL."""

    if value is None:
        return None
    return json.dumps({"v": JSON_VERSION, "data": value}, ensure_ascii=False)


def load_json(raw: Optional[str], default: Any = None) -> Any:
    """Decode a column written by :func:`dump_json`.

    Bare lists/objects from unversioned writers are accepted as-is. Anything
    unreadable yields ``default``; this never raises.
    """

    if raw is None or raw == "":
        return default
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Unreadable JSON column, using default")
        return default
    if isinstance(decoded, dict) and "v" in decoded and "data" in decoded:
        if decoded["v"] != JSON_VERSION:
            logger.warning("Unknown JSON column version %r, using default", decoded["v"])
            return default
        return decoded["data"]
    if isinstance(decoded, (list, dict)):
        return decoded
    return default


__all__ = ["dump_json", "load_json", "JSON_VERSION"]
