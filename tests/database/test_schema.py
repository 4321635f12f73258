import re
from pathlib import Path

import pytest

from club_attendance.database.bootstrap import iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def _tables() -> dict:
    tables = {}
    for stmt in iter_sql_statements(SCHEMA.read_text(encoding="utf-8")):
        m = re.match(r"\s*CREATE TABLE IF NOT EXISTS (\w+)\s*\((.*)\)\s*ENGINE", stmt, re.S)
        if m:
            tables[m.group(1)] = m.group(2)
    return tables


def _column(body: str, name: str) -> str:
    for line in body.splitlines():
        line = line.strip()
        if line.startswith(name + " "):
            return line
    raise AssertionError(f"column {name} not found")


@pytest.mark.parametrize(
    "table, column",
    [
        ("attendance_records", "time_slot"),
        ("activity_time_slots", "slot_name"),
        ("activity_locations", "time_slot"),
        ("activity_participant_slots", "slot_name"),
    ],
)
def test_slot_name_columns_compare_byte_for_byte(table, column):
    # "Buổi Sáng" and "buoi sang" are different slots.
    assert "COLLATE utf8mb4_bin" in _column(_tables()[table], column)


def test_record_identity_key_uses_exact_slot_name():
    body = _tables()["attendance_records"]

    assert "UNIQUE KEY uq_record_identity (document_id, time_slot, check_in_type)" in body


def test_multi_day_tables_exist():
    tables = _tables()

    assert "activity_days" in tables
    assert "day_number" in _column(tables["activity_time_slots"], "day_number")
    assert "day_number" in _column(tables["activity_locations"], "day_number")
