from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activities.mysql_activity_repository import MySQLActivityRepository
from .activities.repository import ActivityRepository
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.resolver import AttendanceStatusResolver
from .attendance.service import AttendanceService
from .attendance.time_window import TimeWindowValidator
from .common.datetime_utils import zone_clock
from .core.constants import (
    DEFAULT_STORE_MAX_RETRIES,
    DEFAULT_TIMEZONE,
    LATE_WINDOW_MINUTES,
    ON_TIME_WINDOW_MINUTES,
)
from .database.connection import DBConfig, DatabaseConnection
from .geo.factory import ZoneStrategyFactory
from .geo.validator import GeoValidator
from .users.mysql_user_repository import MySQLUserDirectory
from .users.repository import UserDirectory


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    activities_repo: ActivityRepository
    users_repo: UserDirectory
    attendance_repo: AttendanceRepository

    attendance_service: AttendanceService


def build_container(
    *,
    db_config: dict,
    tz_name: str = DEFAULT_TIMEZONE,
    on_time_minutes: int = ON_TIME_WINDOW_MINUTES,
    late_minutes: int = LATE_WINDOW_MINUTES,
    store_max_retries: int = DEFAULT_STORE_MAX_RETRIES,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    activities_repo = MySQLActivityRepository(conn)
    users_repo = MySQLUserDirectory(conn)
    attendance_repo = MySQLAttendanceRepository(conn, max_retries=store_max_retries)

    attendance_service = AttendanceService(
        attendance_repo,
        activities_repo,
        users_repo,
        geo_validator=GeoValidator(strategy_factory=ZoneStrategyFactory()),
        time_validator=TimeWindowValidator(on_time_minutes=on_time_minutes, late_minutes=late_minutes),
        resolver=AttendanceStatusResolver(strategy_factory=AttendanceStrategyFactory()),
        clock=zone_clock(tz_name),
        tz_name=tz_name,
    )

    return Container(
        conn=conn,
        activities_repo=activities_repo,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
    )
