from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, op: str = "query", **context: Any):
    """Open a connection and cursor for one unit of work.

    Commits when the block exits cleanly, rolls back otherwise. Driver errors
    are logged with ``op`` and ``context`` and re-raised as StorageError.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("storage unavailable op=%s %s: %s", op, _describe(context), e)
        raise StorageError(f"Database unavailable during {op}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        _rollback(conn)
        logger.exception("storage failure op=%s %s", op, _describe(context))
        raise StorageError(f"Database error during {op}") from e
    except Exception:
        _rollback(conn)
        raise
    finally:
        conn.close()


def _rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error:
        logger.warning("rollback failed", exc_info=True)


def _describe(context: Dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in sorted(context.items()))


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def as_date(value: Any) -> Optional[date]:
    """DATE columns come back as date; DATE(...) expressions can come back as str."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()


def in_clause(values) -> str:
    """Placeholder list for ``IN (...)``; caller guarantees values is non-empty."""
    return ", ".join(["%s"] * len(values))
