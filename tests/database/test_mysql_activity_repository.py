from datetime import date, timedelta

from club_attendance.activities.mysql_activity_repository import MySQLActivityRepository
from club_attendance.core.enums import ApprovalStatus
from club_attendance.geo.model import SingleZoneRequirement
from fakes import FakeConnFactory


def camp_responder(sql, params):
    if "FROM activities" in sql:
        return [{
            "activity_id": 5, "name": "Hội trại", "activity_date": date(2026, 3, 14),
            "location_lat": 10.7769, "location_lng": 106.7009, "location_radius": 50,
        }], 1, None
    if "FROM activity_time_slots" in sql:
        return [
            {"day_number": 0, "slot_name": "Buổi Sáng", "start_time": timedelta(hours=8),
             "end_time": timedelta(hours=11, minutes=30), "is_active": 1},
            {"day_number": 2, "slot_name": "Lửa trại", "start_time": timedelta(hours=19),
             "end_time": timedelta(hours=21), "is_active": 1},
        ], 2, None
    if "FROM activity_locations" in sql:
        return [
            {"day_number": 2, "time_slot": None, "lat": 10.80, "lng": 106.70, "radius": 200},
            {"day_number": 2, "time_slot": "Buổi Sáng", "lat": 10.87, "lng": 106.80, "radius": 100},
        ], 2, None
    if "FROM activity_days" in sql:
        return [
            {"day_number": 1, "day_date": date(2026, 3, 14)},
            {"day_number": 2, "day_date": date(2026, 3, 15)},
        ], 2, None
    return [], 0, None


def test_get_activity_maps_days_slots_and_zones():
    activity = MySQLActivityRepository(FakeConnFactory(camp_responder)).get_activity(5)

    assert isinstance(activity.location, SingleZoneRequirement)
    assert [s.name for s in activity.time_slots] == ["Buổi Sáng"]
    assert activity.is_multi_day
    day1, day2 = activity.days
    assert day1.zone is None and day1.time_slots == ()
    assert day2.date == date(2026, 3, 15)
    assert [s.name for s in day2.time_slots] == ["Lửa trại"]
    assert day2.zone.radius_meters == 200
    assert day2.zone_for("Buổi Sáng").radius_meters == 100
    assert [s.name for s in activity.slots_for(day2)] == ["Buổi Sáng", "Lửa trại"]


def test_participants_carry_registered_slots():
    def responder(sql, params):
        if "FROM activity_participants" in sql:
            return [
                {"user_id": 7, "name": "A", "email": None, "approval_status": "approved"},
                {"user_id": 8, "name": "B", "email": None, "approval_status": "approved"},
            ], 2, None
        if "FROM activity_participant_slots" in sql:
            return [{"user_id": 7, "day_number": 1, "slot_name": "Buổi Sáng"}], 1, None
        return [], 0, None

    factory = FakeConnFactory(responder)
    a, b = MySQLActivityRepository(factory).list_approved_participants(5)

    assert a.approval_status == ApprovalStatus.APPROVED
    assert a.is_registered_for(1, "Buổi Sáng") is True
    assert a.is_registered_for(2, "Buổi Sáng") is False
    assert b.registered_slots == ()
    slot_query = next(p for s, p in factory.conn.executed if "FROM activity_participant_slots" in s)
    assert slot_query == (5, 7, 8)
