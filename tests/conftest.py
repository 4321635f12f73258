from __future__ import annotations

from datetime import datetime

import pytest

from club_attendance.attendance.service import AttendanceService
from club_attendance.core.enums import ApprovalStatus
from club_attendance.users.model import UserDisplayInfo
from fakes import ACTIVITY_ID, InMemoryActivities, InMemoryAttendance, InMemoryUsers, make_activity


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 14, 8, 5, 0)


@pytest.fixture
def activities() -> InMemoryActivities:
    repo = InMemoryActivities(activities={ACTIVITY_ID: make_activity()})
    repo.add_participant(7, "Nguyễn Văn A")
    repo.add_participant(8, "Trần Thị B")
    repo.add_participant(9, "Lê Văn C", ApprovalStatus.PENDING)
    return repo


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers(
        users={
            7: UserDisplayInfo(user_id=7, name="Nguyễn Văn A", email="user7@club.edu.vn", student_id="SV007"),
            8: UserDisplayInfo(user_id=8, name="Trần Thị B", email="user8@club.edu.vn", student_id="SV008"),
        }
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def service(attendance_repo, activities, users, fixed_now) -> AttendanceService:
    return AttendanceService(attendance_repo, activities, users, clock=lambda: fixed_now)
