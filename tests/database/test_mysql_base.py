from datetime import time, timedelta

import mysql.connector
import pytest
from mysql.connector import errorcode

from club_attendance.core.exceptions import StoreConflictError
from club_attendance.database.bootstrap import iter_sql_statements
from club_attendance.database.mysql_base import normalize_mysql_time, run_with_lock_retry


def _deadlock():
    return mysql.connector.errors.DatabaseError(msg="Deadlock found", errno=errorcode.ER_LOCK_DEADLOCK)


def test_retry_recovers_after_deadlock():
    calls = []

    def op():
        calls.append(1)
        if len(calls) < 3:
            raise _deadlock()
        return "ok"

    assert run_with_lock_retry(op, max_retries=3) == "ok"
    assert len(calls) == 3


def test_retry_gives_up_with_store_conflict():
    calls = []

    def op():
        calls.append(1)
        raise mysql.connector.errors.DatabaseError(msg="Lock wait timeout", errno=errorcode.ER_LOCK_WAIT_TIMEOUT)

    with pytest.raises(StoreConflictError):
        run_with_lock_retry(op, max_retries=2)
    assert len(calls) == 3


def test_other_database_errors_are_not_retried():
    calls = []

    def op():
        calls.append(1)
        raise mysql.connector.errors.DatabaseError(msg="Unknown column", errno=errorcode.ER_BAD_FIELD_ERROR)

    with pytest.raises(mysql.connector.errors.DatabaseError):
        run_with_lock_retry(op, max_retries=3)
    assert len(calls) == 1


@pytest.mark.parametrize(
    "value, expected",
    [
        (time(8, 30), time(8, 30)),
        (timedelta(hours=13, minutes=30), time(13, 30)),
        ("07:45:00", time(7, 45)),
        (None, None),
    ],
)
def test_normalize_mysql_time(value, expected):
    assert normalize_mysql_time(value) == expected


def test_sql_splitter_ignores_semicolons_in_comments_and_quotes():
    sql = """
    -- first table; has a comment
    CREATE TABLE a (x INT);
    INSERT INTO a VALUES (';');
    """

    statements = list(iter_sql_statements(sql))

    assert statements == ["CREATE TABLE a (x INT)", "INSERT INTO a VALUES (';')"]
