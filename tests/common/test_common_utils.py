from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from club_attendance.common.datetime_utils import (
    now_local,
    parse_check_in_time,
    parse_time_of_day,
    to_local_naive,
    zone_clock,
)
from club_attendance.common.validators import (
    clean_optional_text,
    require_bool,
    require_coordinate,
    require_non_empty,
    require_photo_url,
)
from club_attendance.core.exceptions import PreconditionError

NOW = datetime(2026, 3, 14, 8, 5)


def clock():
    return NOW


@pytest.mark.parametrize("value, expected", [("08:00", time(8, 0)), ("13:30:15", time(13, 30, 15)), (time(9, 1), time(9, 1))])
def test_parse_time_of_day(value, expected):
    assert parse_time_of_day(value) == expected


def test_parse_time_of_day_rejects_garbage():
    with pytest.raises(ValueError):
        parse_time_of_day("8h")


def test_to_local_naive_converts_aware_values():
    aware = datetime(2026, 3, 14, 1, 5, tzinfo=timezone.utc)

    assert to_local_naive(aware, tz_name="Asia/Ho_Chi_Minh") == datetime(2026, 3, 14, 8, 5)


def test_to_local_naive_keeps_naive_values():
    assert to_local_naive(NOW) == NOW


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2026-03-14T08:20:00", datetime(2026, 3, 14, 8, 20)),
        ("2026-03-14T01:20:00Z", datetime(2026, 3, 14, 8, 20)),
        ("2026-03-14T08:20:00+07:00", datetime(2026, 3, 14, 8, 20)),
        (datetime(2026, 3, 14, 9, 0), datetime(2026, 3, 14, 9, 0)),
        (None, NOW),
        ("", NOW),
        ("not a date", NOW),
        (1710400000, NOW),
    ],
)
def test_parse_check_in_time(raw, expected):
    assert parse_check_in_time(raw, clock=clock) == expected


def test_require_non_empty_trims():
    assert require_non_empty("  Morning ", "timeSlot") == "Morning"
    with pytest.raises(PreconditionError, match="timeSlot"):
        require_non_empty("   ", "timeSlot")


def test_require_bool_is_strict():
    assert require_bool(False, "checkedIn") is False
    with pytest.raises(PreconditionError):
        require_bool(0, "checkedIn")


def test_require_coordinate_accepts_ints_and_bounds():
    assert require_coordinate(10, "lat", bound=90) == 10.0
    assert require_coordinate(-180, "lng", bound=180) == -180.0
    with pytest.raises(PreconditionError):
        require_coordinate(180.5, "lng", bound=180)


def test_clean_optional_text():
    assert clean_optional_text("  x ") == "x"
    assert clean_optional_text("   ") is None
    assert clean_optional_text(12) is None
    assert clean_optional_text("abc", max_len=3) == "abc"


def test_clean_optional_text_refuses_overlong_text():
    with pytest.raises(PreconditionError, match="tối đa 500"):
        clean_optional_text("x" * 501)
    with pytest.raises(PreconditionError, match="tối đa 3"):
        clean_optional_text("abcd", max_len=3)
    # Length is measured after trimming.
    assert clean_optional_text("  abc  ", max_len=3) == "abc"


def test_require_photo_url():
    assert require_photo_url(None) is None
    assert require_photo_url(" https://a/b.jpg ") == "https://a/b.jpg"
    with pytest.raises(PreconditionError):
        require_photo_url("data:image/png;base64,AAAA")


def test_now_local_is_club_wall_clock():
    expected = datetime.now(ZoneInfo("Asia/Ho_Chi_Minh")).replace(tzinfo=None)

    got = now_local("Asia/Ho_Chi_Minh")

    assert got.tzinfo is None
    assert abs(got - expected) < timedelta(seconds=60)


def test_zone_clock_differs_from_utc_by_club_offset():
    utc_now = datetime.now(timezone.utc).replace(tzinfo=None)

    got = zone_clock("Asia/Ho_Chi_Minh")()

    assert abs((got - utc_now) - timedelta(hours=7)) < timedelta(seconds=60)


def test_aware_clock_fallback_is_converted_to_club_time():
    utc_clock = lambda: datetime(2026, 3, 14, 1, 5, tzinfo=timezone.utc)

    assert parse_check_in_time(None, clock=utc_clock, tz_name="Asia/Ho_Chi_Minh") == datetime(2026, 3, 14, 8, 5)
