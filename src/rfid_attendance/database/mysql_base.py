from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterator, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateEntryError, ReferenceNotFoundError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def translate_integrity_errors(message: str = "") -> Iterator[None]:
    """Map MySQL integrity errors onto domain exceptions."""

    try:
        yield
    except IntegrityError as e:
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise DuplicateEntryError(message or str(e)) from e
        if e.errno in (errorcode.ER_NO_REFERENCED_ROW_2, errorcode.ER_NO_REFERENCED_ROW):
            raise ReferenceNotFoundError(message or str(e)) from e
        raise


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def as_time(value: Any) -> Optional[time]:
    """Convert a TIME column to `datetime.time`.

    mysql-connector hands TIME back as a timedelta since midnight; attendance
    times never cross midnight so anything past a day is wrapped.
    """

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, seconds % 3600 // 60, seconds % 60)
    raise TypeError(f"Unsupported TIME value: {value!r}")
