from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..core.enums import ApprovalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from ..geo.model import GeoZone, LocationRequirement, MultiZoneRequirement, SingleZoneRequirement
from .model import ActivityDay, ActivitySchedule, Participant, RegisteredSlot, TimeSlot
from .repository import ActivityRepository


class MySQLActivityRepository(ActivityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_activity(self, activity_id: int) -> Optional[ActivitySchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT activity_id, name, activity_date, location_lat, location_lng, location_radius
                FROM activities
                WHERE activity_id=%s
                """,
                (int(activity_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                """
                SELECT day_number, slot_name, start_time, end_time, is_active
                FROM activity_time_slots
                WHERE activity_id=%s
                ORDER BY day_number, start_time, slot_id
                """,
                (int(activity_id),),
            )
            slots_by_day: Dict[int, List[TimeSlot]] = {}
            for s in fetchall(cur):
                slots_by_day.setdefault(int(s.get("day_number") or 0), []).append(
                    TimeSlot(
                        name=s["slot_name"],
                        start_time=normalize_mysql_time(s["start_time"]),
                        end_time=normalize_mysql_time(s["end_time"]),
                        is_active=bool(s["is_active"]),
                    )
                )

            cur.execute(
                """
                SELECT day_number, time_slot, lat, lng, radius
                FROM activity_locations
                WHERE activity_id=%s
                ORDER BY location_id
                """,
                (int(activity_id),),
            )
            zones_by_day: Dict[int, List[GeoZone]] = {}
            for z in fetchall(cur):
                zones_by_day.setdefault(int(z.get("day_number") or 0), []).append(
                    GeoZone(
                        lat=float(z["lat"]),
                        lng=float(z["lng"]),
                        radius_meters=float(z["radius"]),
                        time_slot=z.get("time_slot"),
                    )
                )

            cur.execute(
                """
                SELECT day_number, day_date
                FROM activity_days
                WHERE activity_id=%s
                ORDER BY day_number
                """,
                (int(activity_id),),
            )
            days = tuple(
                self._to_day(int(d["day_number"]), d["day_date"], slots_by_day, zones_by_day)
                for d in fetchall(cur)
            )

            return ActivitySchedule(
                activity_id=int(r["activity_id"]),
                name=r["name"],
                date=r["activity_date"],
                time_slots=tuple(slots_by_day.get(0, ())),
                location=self._to_requirement(r, tuple(zones_by_day.get(0, ()))),
                days=days,
            )

    @staticmethod
    def _to_day(day_number: int, day_date, slots_by_day: dict, zones_by_day: dict) -> ActivityDay:
        zones = zones_by_day.get(day_number, ())
        return ActivityDay(
            day_number=day_number,
            date=day_date,
            time_slots=tuple(slots_by_day.get(day_number, ())),
            zone=next((z for z in zones if z.time_slot is None), None),
            slot_zones=tuple(z for z in zones if z.time_slot is not None),
        )

    @staticmethod
    def _to_requirement(row: dict, zones: tuple) -> LocationRequirement:
        # A venue on the activity row wins over per-slot locations.
        if row.get("location_lat") is not None and row.get("location_lng") is not None and row.get("location_radius"):
            return SingleZoneRequirement(
                GeoZone(
                    lat=float(row["location_lat"]),
                    lng=float(row["location_lng"]),
                    radius_meters=float(row["location_radius"]),
                )
            )
        if zones:
            return MultiZoneRequirement(zones)
        return None

    def get_participant(self, activity_id: int, user_id: int) -> Optional[Participant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, email, approval_status
                FROM activity_participants
                WHERE activity_id=%s AND user_id=%s
                """,
                (int(activity_id), int(user_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            registered = self._registered_slots(cur, activity_id, [int(user_id)])
            return self._to_participant(r, registered.get(int(user_id), ()))

    def list_approved_participants(self, activity_id: int) -> Sequence[Participant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, email, approval_status
                FROM activity_participants
                WHERE activity_id=%s AND approval_status=%s
                ORDER BY joined_at, user_id
                """,
                (int(activity_id), ApprovalStatus.APPROVED.value),
            )
            rows = fetchall(cur)
            registered = self._registered_slots(cur, activity_id, [int(r["user_id"]) for r in rows])
            return [self._to_participant(r, registered.get(int(r["user_id"]), ())) for r in rows]

    @staticmethod
    def _registered_slots(cur, activity_id: int, user_ids: List[int]) -> Dict[int, List[RegisteredSlot]]:
        if not user_ids:
            return {}
        placeholders = ",".join(["%s"] * len(user_ids))
        cur.execute(
            f"""
            SELECT user_id, day_number, slot_name
            FROM activity_participant_slots
            WHERE activity_id=%s AND user_id IN ({placeholders})
            ORDER BY user_id, day_number, slot_name
            """,
            (int(activity_id), *user_ids),
        )
        out: Dict[int, List[RegisteredSlot]] = {}
        for s in fetchall(cur):
            day_number = int(s.get("day_number") or 0)
            out.setdefault(int(s["user_id"]), []).append(
                RegisteredSlot(slot_name=s["slot_name"], day_number=day_number or None)
            )
        return out

    @staticmethod
    def _to_participant(r: dict, registered: Sequence[RegisteredSlot] = ()) -> Participant:
        return Participant(
            user_id=int(r["user_id"]),
            name=r["name"],
            email=r.get("email"),
            approval_status=ApprovalStatus(r["approval_status"]),
            registered_slots=tuple(registered),
        )
