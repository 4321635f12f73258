from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional, Tuple, Union

from ..activities.model import split_day_slot
from ..common.datetime_utils import Clock, parse_check_in_time, parse_iso_date
from ..common.validators import (
    clean_optional_text,
    require_coordinate,
    require_non_empty,
    require_photo_url,
)
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import AttendanceStatus, CheckInType, ReasonCode
from ..core.exceptions import PreconditionError
from ..geo.model import Coordinates


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi điểm danh của một buổi.

    Identity is ``(activity_id, user_id, time_slot, check_in_type)``;
    ``record_id`` is assigned by the store and survives re-submission.
    """

    activity_id: int
    user_id: int
    time_slot: str
    check_in_type: CheckInType
    check_in_time: datetime
    location: Coordinates
    status: AttendanceStatus
    record_id: Optional[int] = None
    photo_url: Optional[str] = None
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    verification_note: Optional[str] = None
    cancel_reason: Optional[str] = None
    late_reason: Optional[str] = None

    @property
    def key(self) -> Tuple[str, CheckInType]:
        return self.time_slot, self.check_in_type


@dataclass(frozen=True)
class AttendanceDocument:
    """One document per (activity, user); owns that user's records."""

    activity_id: int
    user_id: int
    document_id: Optional[int] = None
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    student_id: Optional[str] = None
    records: Tuple[AttendanceRecord, ...] = field(default_factory=tuple)

    def find(self, time_slot: str, check_in_type: CheckInType) -> Optional[AttendanceRecord]:
        for record in self.records:
            if record.key == (time_slot, check_in_type):
                return record
        return None

    @property
    def has_approved(self) -> bool:
        return any(r.status == AttendanceStatus.APPROVED for r in self.records)


@dataclass(frozen=True)
class ManualCheckIn:
    """Officer marking a participant present on their behalf."""

    officer_id: str
    note: Optional[str] = None


def _parse_check_in_type(value: Any) -> CheckInType:
    try:
        return CheckInType(value)
    except ValueError:
        raise PreconditionError("Loại điểm danh phải là start (đầu buổi) hoặc end (cuối buổi)") from None


def parse_day_number(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise PreconditionError("Số ngày không hợp lệ (dayNumber)")
    try:
        number = int(str(value).strip())
    except ValueError:
        raise PreconditionError("Số ngày không hợp lệ (dayNumber)") from None
    if number < 1:
        raise PreconditionError("Số ngày không hợp lệ (dayNumber)")
    return number


def _parse_slot_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    try:
        # Accepts "2026-03-15" and full ISO timestamps; only the day matters.
        return parse_iso_date(str(value).strip()[:10])
    except ValueError:
        raise PreconditionError("Ngày điểm danh không hợp lệ (slotDate)") from None


@dataclass(frozen=True)
class CheckInSubmission:
    """A validated check-in request.

    ``time_slot`` is the bare slot name; ``day_number`` and ``slot_date``
    pick the day of a multi-day activity.
    """

    time_slot: str
    check_in_type: CheckInType
    check_in_time: datetime
    coordinates: Optional[Coordinates]
    photo_url: Optional[str] = None
    late_reason: Optional[str] = None
    manual: Optional[ManualCheckIn] = None
    day_number: Optional[int] = None
    slot_date: Optional[date] = None

    @property
    def has_photo(self) -> bool:
        return bool(self.photo_url)

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        *,
        clock: Clock,
        tz_name: str = DEFAULT_TIMEZONE,
    ) -> "CheckInSubmission":
        """Validate a raw check-in request body (camelCase keys)."""

        if not payload.get("timeSlot") or not payload.get("checkInType"):
            raise PreconditionError("Thiếu thông tin bắt buộc (timeSlot, checkInType)")
        embedded_day, time_slot = split_day_slot(require_non_empty(payload.get("timeSlot"), "timeSlot"))
        day_number = parse_day_number(payload.get("dayNumber"))
        if day_number is None:
            day_number = embedded_day
        check_in_type = _parse_check_in_type(payload.get("checkInType"))

        manual = None
        if payload.get("isManualCheckIn") is True:
            officer_id = payload.get("officerId")
            if officer_id is None or not str(officer_id).strip():
                raise PreconditionError("Thiếu thông tin bắt buộc (officerId)")
            manual = ManualCheckIn(
                officer_id=str(officer_id).strip(),
                note=clean_optional_text(payload.get("verificationNote")),
            )

        location = payload.get("location")
        coordinates = None
        if isinstance(location, Mapping):
            coordinates = Coordinates(
                lat=require_coordinate(location.get("lat"), "lat", bound=90),
                lng=require_coordinate(location.get("lng"), "lng", bound=180),
                address=clean_optional_text(location.get("address")),
            )
        elif manual is None:
            # Officer check-ins may omit it; the activity location is used.
            raise PreconditionError("Thiếu thông tin vị trí")

        return cls(
            time_slot=time_slot,
            check_in_type=check_in_type,
            check_in_time=parse_check_in_time(payload.get("checkInTime"), clock=clock, tz_name=tz_name),
            coordinates=coordinates,
            photo_url=require_photo_url(payload.get("photoUrl")),
            late_reason=clean_optional_text(payload.get("lateReason")),
            manual=manual,
            day_number=day_number,
            slot_date=_parse_slot_date(payload.get("slotDate")),
        )


@dataclass(frozen=True)
class UpsertOutcome:
    record: AttendanceRecord
    created: bool


@dataclass(frozen=True)
class CheckInResult:
    success: bool
    status: AttendanceStatus
    record_id: Optional[int]
    message: str
    reason_code: ReasonCode
    reason: Optional[str] = None


@dataclass(frozen=True)
class CheckOutResult:
    success: bool
    message: str
    document_id: Optional[int] = None


AttendanceOutcome = Union[CheckInResult, CheckOutResult]


@dataclass(frozen=True)
class ParticipantSummary:
    user_id: int
    name: str
    email: Optional[str]
    student_id: Optional[str]
    checked_in: bool
    checked_in_at: Optional[datetime]
    records: Tuple[AttendanceRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AttendanceTotals:
    total: int
    checked_in: int
    not_checked_in: int
    rate: int


@dataclass(frozen=True)
class AttendanceSummary:
    activity_id: int
    participants: Tuple[ParticipantSummary, ...]
    totals: AttendanceTotals


@dataclass(frozen=True)
class SlotProgress:
    start: bool = False
    end: bool = False


@dataclass(frozen=True)
class ParticipantAttendance:
    """Read-model cho màn hình điểm danh của chính sinh viên."""

    activity_id: int
    user_id: int
    records: Tuple[AttendanceRecord, ...]
    slots: Mapping[str, SlotProgress]
