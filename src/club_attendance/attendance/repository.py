from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from ..core.enums import CheckInType
from ..users.model import UserDisplayInfo
from .model import AttendanceDocument, AttendanceRecord, UpsertOutcome


class AttendanceRepository(Protocol):
    """Store of attendance documents and their records.

    Every mutating method runs as one unit under a lock scoped to the owning
    ``(activity_id, user_id)`` document, so concurrent writers on the same
    record key cannot lose updates.
    """

    def get_document(self, activity_id: int, user_id: int) -> Optional[AttendanceDocument]:
        raise NotImplementedError

    def list_documents(self, activity_id: int) -> Sequence[AttendanceDocument]:
        raise NotImplementedError

    def get_record(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert_record(self, record: AttendanceRecord, *, student: Optional[UserDisplayInfo] = None) -> UpsertOutcome:
        """Insert or overwrite the record with the same identity.

        Creates the owning document when absent. An existing record keeps its
        ``record_id``; every other field is replaced.
        """

        raise NotImplementedError

    def remove_record(self, *, activity_id: int, user_id: int, time_slot: str, check_in_type: CheckInType) -> bool:
        """Remove one record; deletes the document when it becomes empty."""

        raise NotImplementedError

    def delete_document(self, *, activity_id: int, user_id: int) -> Optional[int]:
        """Delete the whole document. Returns its id, or None when absent."""

        raise NotImplementedError

    def update_verification(
        self,
        record_id: int,
        apply: Callable[[AttendanceRecord], AttendanceRecord],
    ) -> Optional[AttendanceRecord]:
        """Officer decision on a record, read and written under the document lock.

        ``apply`` receives the record as currently stored and returns it with
        new status/verification fields; only those fields are written. Returns
        the updated record, or None when the record does not exist.
        """

        raise NotImplementedError
