"""SQLite helpers for the persistence layer."""
from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from config.settings import settings


@contextmanager
def get_conn(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Yield a SQLite connection, committing on success and rolling back on error."""

    path = db_path or settings.DB_PATH
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def use_conn(
    conn: Optional[sqlite3.Connection], db_path: Optional[str] = None
) -> Iterator[sqlite3.Connection]:
    """Reuse an open transaction when one is given, otherwise open and commit a new one."""

    if conn is not None:
        yield conn
        return
    with get_conn(db_path) as own:
        yield own
