from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Callable, Dict, List, Optional, TypeVar

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import parse_time_of_day
from ..core.constants import DEFAULT_STORE_MAX_RETRIES
from ..core.exceptions import StoreConflictError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LOCK_CONFLICT_ERRNOS = {errorcode.ER_LOCK_DEADLOCK, errorcode.ER_LOCK_WAIT_TIMEOUT}


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


def run_with_lock_retry(operation: Callable[[], T], *, max_retries: int = DEFAULT_STORE_MAX_RETRIES) -> T:
    """Run a transactional operation, retrying on deadlock / lock wait timeout.

    The operation must open its own transaction (``db_cursor``) so a retry
    starts from a clean state.
    """

    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except mysql.connector.errors.DatabaseError as e:
            if e.errno not in _LOCK_CONFLICT_ERRNOS:
                raise
            if attempt > max_retries:
                raise StoreConflictError("Bản ghi điểm danh đang được cập nhật, vui lòng thử lại") from e
            logger.warning("lock conflict on attendance write (attempt %s/%s): %s", attempt, max_retries, e)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        return parse_time_of_day(value)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
