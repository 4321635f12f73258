from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence

from ..core.constants import DEFAULT_STORE_MAX_RETRIES
from ..core.enums import AttendanceStatus, CheckInType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, run_with_lock_retry
from ..geo.model import Coordinates
from ..users.model import UserDisplayInfo
from .model import AttendanceDocument, AttendanceRecord, UpsertOutcome
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    r.record_id, r.document_id, r.activity_id, r.user_id, r.time_slot, r.check_in_type, r.check_in_time,
    r.lat, r.lng, r.address, r.photo_url, r.status,
    r.verified_by, r.verified_at, r.verification_note, r.cancel_reason, r.late_reason
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, max_retries: int = DEFAULT_STORE_MAX_RETRIES):
        self._conn_factory = conn_factory
        self._max_retries = int(max_retries)

    # ----- reads -----

    def get_document(self, activity_id: int, user_id: int) -> Optional[AttendanceDocument]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT document_id, activity_id, user_id, student_name, student_email, student_code
                FROM attendance_documents
                WHERE activity_id=%s AND user_id=%s
                """,
                (int(activity_id), int(user_id)),
            )
            doc = fetchone(cur)
            if not doc:
                return None

            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records r
                WHERE r.document_id=%s
                ORDER BY r.record_id
                """,
                (int(doc["document_id"]),),
            )
            records = [self._to_record(r) for r in fetchall(cur)]
            return self._to_document(doc, records)

    def list_documents(self, activity_id: int) -> Sequence[AttendanceDocument]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT document_id, activity_id, user_id, student_name, student_email, student_code
                FROM attendance_documents
                WHERE activity_id=%s
                ORDER BY document_id
                """,
                (int(activity_id),),
            )
            docs = fetchall(cur)

            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records r
                WHERE r.activity_id=%s
                ORDER BY r.record_id
                """,
                (int(activity_id),),
            )
            by_document: Dict[int, List[AttendanceRecord]] = {}
            for r in fetchall(cur):
                by_document.setdefault(int(r["document_id"]), []).append(self._to_record(r))

            return [self._to_document(d, by_document.get(int(d["document_id"]), [])) for d in docs]

    def get_record(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records r
                WHERE r.record_id=%s
                """,
                (int(record_id),),
            )
            r = fetchone(cur)
            return self._to_record(r) if r else None

    # ----- writes (each one transaction, document row locked first) -----

    def upsert_record(self, record: AttendanceRecord, *, student: Optional[UserDisplayInfo] = None) -> UpsertOutcome:
        return run_with_lock_retry(lambda: self._upsert_once(record, student), max_retries=self._max_retries)

    def _upsert_once(self, record: AttendanceRecord, student: Optional[UserDisplayInfo]) -> UpsertOutcome:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_documents(activity_id, user_id, student_name, student_email, student_code)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE document_id=document_id
                """,
                (
                    int(record.activity_id),
                    int(record.user_id),
                    student.name if student else None,
                    student.email if student else None,
                    student.student_id if student else None,
                ),
            )
            document_id = self._lock_document(cur, record.activity_id, record.user_id)

            cur.execute(
                """
                SELECT record_id
                FROM attendance_records
                WHERE document_id=%s AND time_slot=%s AND check_in_type=%s
                """,
                (document_id, record.time_slot, record.check_in_type.value),
            )
            existing = fetchone(cur)

            cur.execute(
                """
                INSERT INTO attendance_records(
                    document_id, activity_id, user_id, time_slot, check_in_type, check_in_time,
                    lat, lng, address, photo_url, status,
                    verified_by, verified_at, verification_note, cancel_reason, late_reason
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    check_in_time=VALUES(check_in_time),
                    lat=VALUES(lat),
                    lng=VALUES(lng),
                    address=VALUES(address),
                    photo_url=VALUES(photo_url),
                    status=VALUES(status),
                    verified_by=VALUES(verified_by),
                    verified_at=VALUES(verified_at),
                    verification_note=VALUES(verification_note),
                    cancel_reason=VALUES(cancel_reason),
                    late_reason=VALUES(late_reason)
                """,
                (
                    document_id,
                    int(record.activity_id),
                    int(record.user_id),
                    record.time_slot,
                    record.check_in_type.value,
                    record.check_in_time,
                    record.location.lat,
                    record.location.lng,
                    record.location.address,
                    record.photo_url,
                    record.status.value,
                    record.verified_by,
                    record.verified_at,
                    record.verification_note,
                    record.cancel_reason,
                    record.late_reason,
                ),
            )

            # On update lastrowid is not the record id; keep the existing one.
            record_id = int(existing["record_id"]) if existing else int(cur.lastrowid)
            return UpsertOutcome(record=replace(record, record_id=record_id), created=existing is None)

    def remove_record(self, *, activity_id: int, user_id: int, time_slot: str, check_in_type: CheckInType) -> bool:
        def _remove() -> bool:
            with db_cursor(self._conn_factory) as (_, cur):
                document_id = self._lock_document(cur, activity_id, user_id)
                if document_id is None:
                    return False

                cur.execute(
                    "DELETE FROM attendance_records WHERE document_id=%s AND time_slot=%s AND check_in_type=%s",
                    (document_id, time_slot, check_in_type.value),
                )
                if cur.rowcount == 0:
                    return False

                cur.execute("SELECT COUNT(*) AS remaining FROM attendance_records WHERE document_id=%s", (document_id,))
                r = fetchone(cur)
                if not r or int(r["remaining"]) == 0:
                    cur.execute("DELETE FROM attendance_documents WHERE document_id=%s", (document_id,))
                return True

        return run_with_lock_retry(_remove, max_retries=self._max_retries)

    def delete_document(self, *, activity_id: int, user_id: int) -> Optional[int]:
        def _delete() -> Optional[int]:
            with db_cursor(self._conn_factory) as (_, cur):
                document_id = self._lock_document(cur, activity_id, user_id)
                if document_id is None:
                    return None
                # Records go with the document (ON DELETE CASCADE).
                cur.execute("DELETE FROM attendance_documents WHERE document_id=%s", (document_id,))
                return document_id

        return run_with_lock_retry(_delete, max_retries=self._max_retries)

    def update_verification(
        self,
        record_id: int,
        apply: Callable[[AttendanceRecord], AttendanceRecord],
    ) -> Optional[AttendanceRecord]:
        def _update() -> Optional[AttendanceRecord]:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT activity_id, user_id FROM attendance_records WHERE record_id=%s",
                    (int(record_id),),
                )
                owner = fetchone(cur)
                if not owner:
                    return None
                if self._lock_document(cur, owner["activity_id"], owner["user_id"]) is None:
                    return None

                # Re-read under the lock: a re-submission may have rewritten the row.
                cur.execute(
                    f"""
                    SELECT {_RECORD_COLUMNS}
                    FROM attendance_records r
                    WHERE r.record_id=%s
                    """,
                    (int(record_id),),
                )
                current = fetchone(cur)
                if not current:
                    return None

                updated = apply(self._to_record(current))
                cur.execute(
                    """
                    UPDATE attendance_records
                    SET status=%s, verified_by=%s, verified_at=%s, verification_note=%s, cancel_reason=%s
                    WHERE record_id=%s
                    """,
                    (
                        updated.status.value,
                        updated.verified_by,
                        updated.verified_at,
                        updated.verification_note,
                        updated.cancel_reason,
                        int(record_id),
                    ),
                )
                return updated

        return run_with_lock_retry(_update, max_retries=self._max_retries)

    # ----- helpers -----

    @staticmethod
    def _lock_document(cur, activity_id: int, user_id: int) -> Optional[int]:
        cur.execute(
            """
            SELECT document_id
            FROM attendance_documents
            WHERE activity_id=%s AND user_id=%s
            FOR UPDATE
            """,
            (int(activity_id), int(user_id)),
        )
        r = fetchone(cur)
        return int(r["document_id"]) if r else None

    @staticmethod
    def _to_record(r: dict) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=int(r["record_id"]),
            activity_id=int(r["activity_id"]),
            user_id=int(r["user_id"]),
            time_slot=r["time_slot"],
            check_in_type=CheckInType(r["check_in_type"]),
            check_in_time=r["check_in_time"],
            location=Coordinates(lat=float(r["lat"]), lng=float(r["lng"]), address=r.get("address")),
            photo_url=r.get("photo_url"),
            status=AttendanceStatus(r["status"]),
            verified_by=r.get("verified_by"),
            verified_at=r.get("verified_at"),
            verification_note=r.get("verification_note"),
            cancel_reason=r.get("cancel_reason"),
            late_reason=r.get("late_reason"),
        )

    @staticmethod
    def _to_document(d: dict, records: Sequence[AttendanceRecord]) -> AttendanceDocument:
        return AttendanceDocument(
            document_id=int(d["document_id"]),
            activity_id=int(d["activity_id"]),
            user_id=int(d["user_id"]),
            student_name=d.get("student_name"),
            student_email=d.get("student_email"),
            student_id=d.get("student_code"),
            records=tuple(records),
        )
