from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional

from ..activities.model import ActivityDay, ActivitySchedule, Participant, day_slot_key
from ..activities.repository import ActivityRepository
from ..common.datetime_utils import Clock, zone_clock
from ..common.validators import clean_optional_text, require_bool
from ..core.constants import DEFAULT_TIMEZONE, OFFICER_APPROVE_NOTE, OFFICER_REJECT_NOTE
from ..core.enums import AttendanceStatus, CheckInType, ReasonCode
from ..core.exceptions import NotFoundError, PreconditionError
from ..geo.model import Coordinates, GeoResult, MultiZoneRequirement, SingleZoneRequirement
from ..geo.validator import GeoValidator
from ..users.model import UserDisplayInfo
from ..users.repository import UserDirectory
from .model import (
    AttendanceOutcome,
    AttendanceRecord,
    AttendanceSummary,
    AttendanceTotals,
    CheckInResult,
    CheckInSubmission,
    CheckOutResult,
    ParticipantAttendance,
    ParticipantSummary,
    SlotProgress,
    parse_day_number,
)
from .repository import AttendanceRepository
from .resolver import AttendanceStatusResolver
from .time_window import TimeResult, TimeWindowValidator

logger = logging.getLogger(__name__)

NO_DAY_ZONE_MESSAGE = "Không tìm thấy vị trí điểm danh cho buổi này. Vui lòng liên hệ quản trị viên."


def _parse_user_id(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise PreconditionError("Thiếu thông tin bắt buộc (userId, checkedIn)")
    try:
        return int(str(value).strip())
    except ValueError:
        raise PreconditionError("ID người dùng không hợp lệ") from None


class AttendanceService:
    """Check-in / check-out / summary use cases for club activities.

    Order of checks for a check-in: request fields, activity, roster, day,
    location, time window, status resolution, then the store write.
    Rejections are stored and returned, they are not raised.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        activities: ActivityRepository,
        users: Optional[UserDirectory] = None,
        *,
        geo_validator: Optional[GeoValidator] = None,
        time_validator: Optional[TimeWindowValidator] = None,
        resolver: Optional[AttendanceStatusResolver] = None,
        clock: Optional[Clock] = None,
        tz_name: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._activities = activities
        self._users = users
        self._geo = geo_validator or GeoValidator()
        self._time = time_validator or TimeWindowValidator()
        self._resolver = resolver or AttendanceStatusResolver()
        self._clock = clock or zone_clock(tz_name)
        self._tz_name = tz_name

    # ----- request entry point -----

    def mark_attendance(self, activity_id: int, payload: Mapping[str, Any]) -> AttendanceOutcome:
        """Route a raw request body to check-in (checkedIn=true) or check-out."""

        user_id = _parse_user_id(payload.get("userId"))
        checked_in = require_bool(payload.get("checkedIn"), "userId, checkedIn")

        if checked_in:
            submission = CheckInSubmission.from_payload(payload, clock=self._clock, tz_name=self._tz_name)
            return self.submit_check_in(activity_id, user_id, submission)

        return self.submit_check_out(
            activity_id,
            user_id,
            time_slot=payload.get("timeSlot") or None,
            check_in_type=payload.get("checkInType") or None,
            day_number=parse_day_number(payload.get("dayNumber")),
        )

    # ----- check-in -----

    def submit_check_in(self, activity_id: int, user_id: int, submission: CheckInSubmission) -> CheckInResult:
        activity = self._require_activity(activity_id)
        self._require_approved_participant(activity_id, user_id)
        day = self._resolve_day(activity, submission)
        time_slot = day_slot_key(day.day_number if day else None, submission.time_slot)

        time_result = None
        if submission.manual is not None:
            # Officers may override the window, never an unknown or inactive slot.
            if not any(s.name == submission.time_slot for s in activity.slots_for(day)):
                raise PreconditionError("Không tìm thấy buổi điểm danh")
            time_result = self._classify(activity, day, submission)
            geo = GeoResult(valid=True)
            location = submission.coordinates or self._activity_location(activity, day, submission.time_slot)
        else:
            if submission.coordinates is None:
                raise PreconditionError("Thiếu thông tin vị trí")
            location = submission.coordinates
            geo = self._check_location(activity, day, submission.time_slot, location)
            # A failed geofence short-circuits: the time window is not evaluated.
            if geo.valid:
                time_result = self._classify(activity, day, submission)

        decision = self._resolver.resolve(
            geo=geo,
            time=time_result,
            has_photo=submission.has_photo,
            manual=submission.manual,
        )

        approved = decision.status == AttendanceStatus.APPROVED
        record = AttendanceRecord(
            activity_id=int(activity_id),
            user_id=int(user_id),
            time_slot=time_slot,
            check_in_type=submission.check_in_type,
            check_in_time=submission.check_in_time,
            location=location,
            status=decision.status,
            photo_url=submission.photo_url,
            verified_by=decision.verified_by if approved else None,
            verified_at=self._clock() if approved else None,
            verification_note=decision.verification_note if approved else None,
            cancel_reason=decision.cancel_reason,
            late_reason=submission.late_reason,
        )

        outcome = self._attendance.upsert_record(record, student=self._student_info(user_id))
        stored = outcome.record

        logger.info(
            "check-in activity=%s user=%s slot=%s type=%s -> %s (%s)",
            activity_id,
            user_id,
            stored.time_slot,
            stored.check_in_type.value,
            stored.status.value,
            decision.reason_code.value,
        )

        if decision.status == AttendanceStatus.REJECTED:
            return CheckInResult(
                success=False,
                status=stored.status,
                record_id=stored.record_id,
                message=decision.reason or "Điểm danh bị từ chối",
                reason_code=decision.reason_code,
                reason=decision.reason,
            )

        if approved:
            if decision.reason_code == ReasonCode.MANUAL_APPROVED:
                message = "Đã điểm danh thủ công thành công"
            elif outcome.created:
                message = "Đã điểm danh và tự động duyệt thành công"
            else:
                message = "Đã cập nhật điểm danh và tự động duyệt thành công"
        else:
            message = "Đã điểm danh. Đang chờ xét duyệt" if outcome.created else "Đã cập nhật điểm danh. Đang chờ xét duyệt"

        return CheckInResult(
            success=True,
            status=stored.status,
            record_id=stored.record_id,
            message=message,
            reason_code=decision.reason_code,
            reason=decision.reason,
        )

    # ----- check-out -----

    def submit_check_out(
        self,
        activity_id: int,
        user_id: int,
        time_slot: Optional[str] = None,
        check_in_type: Optional[Any] = None,
        day_number: Optional[int] = None,
    ) -> CheckOutResult:
        """Remove one record, or the whole document when no record key is given."""

        if (time_slot is None) != (check_in_type is None):
            raise PreconditionError("Cần cung cấp đồng thời timeSlot và checkInType để hủy một buổi")

        activity = self._require_activity(activity_id)

        if time_slot is None:
            document_id = self._attendance.delete_document(activity_id=int(activity_id), user_id=int(user_id))
            if document_id is None:
                raise NotFoundError("Không tìm thấy bản ghi điểm danh để hủy")
            logger.info("check-out activity=%s user=%s removed document %s", activity_id, user_id, document_id)
            return CheckOutResult(success=True, message="Đã hủy toàn bộ điểm danh", document_id=document_id)

        if not isinstance(time_slot, str) or not time_slot.strip():
            raise PreconditionError("Thiếu thông tin bắt buộc (timeSlot)")
        if activity.is_multi_day:
            time_slot = day_slot_key(day_number, time_slot.strip())
        try:
            kind = CheckInType(check_in_type)
        except ValueError:
            raise PreconditionError("Loại điểm danh phải là start (đầu buổi) hoặc end (cuối buổi)") from None

        removed = self._attendance.remove_record(
            activity_id=int(activity_id),
            user_id=int(user_id),
            time_slot=time_slot.strip(),
            check_in_type=kind,
        )
        if not removed:
            raise NotFoundError("Không tìm thấy bản ghi điểm danh để hủy")

        logger.info("check-out activity=%s user=%s slot=%s type=%s", activity_id, user_id, time_slot, kind.value)
        return CheckOutResult(success=True, message="Đã hủy điểm danh thành công")

    # ----- reads -----

    def get_attendance_summary(self, activity_id: int) -> AttendanceSummary:
        """Approved roster joined with stored records.

        ``rate`` counts attended (participant, registered slot) pairs: a slot
        is attended when its start or end record is approved. On multi-day
        activities every day contributes its own slots.
        """

        activity = self._require_activity(activity_id)
        participants = self._activities.list_approved_participants(activity_id)
        documents = {d.user_id: d for d in self._attendance.list_documents(activity_id)}
        slot_keys = list(activity.slot_keys())

        rows = []
        registered_slots = 0
        attended_slots = 0
        for p in participants:
            doc = documents.get(p.user_id)
            records = doc.records if doc else ()
            approved = [r for r in records if r.status == AttendanceStatus.APPROVED]
            approved_keys = {r.time_slot for r in approved}
            for day_number, slot_name, key in slot_keys:
                if not p.is_registered_for(day_number, slot_name):
                    continue
                registered_slots += 1
                if key in approved_keys:
                    attended_slots += 1

            rows.append(
                ParticipantSummary(
                    user_id=p.user_id,
                    name=p.name,
                    email=p.email,
                    student_id=doc.student_id if doc else None,
                    checked_in=bool(approved),
                    checked_in_at=min((r.check_in_time for r in approved), default=None),
                    records=tuple(records),
                )
            )

        checked_in = sum(1 for r in rows if r.checked_in)
        rate = round(100 * attended_slots / registered_slots) if registered_slots else 0

        return AttendanceSummary(
            activity_id=int(activity_id),
            participants=tuple(rows),
            totals=AttendanceTotals(
                total=len(rows),
                checked_in=checked_in,
                not_checked_in=len(rows) - checked_in,
                rate=rate,
            ),
        )

    def get_participant_attendance(self, activity_id: int, user_id: int) -> ParticipantAttendance:
        activity = self._require_activity(activity_id)
        participant = self._activities.get_participant(activity_id, user_id)
        if participant is None:
            raise NotFoundError("Không tìm thấy người tham gia")

        doc = self._attendance.get_document(activity_id, user_id)
        records = doc.records if doc else ()

        slots: Dict[str, SlotProgress] = {}
        for day_number, slot_name, key in activity.slot_keys():
            if not participant.is_registered_for(day_number, slot_name):
                continue
            slots[key] = SlotProgress(
                start=any(r.key == (key, CheckInType.START) for r in records),
                end=any(r.key == (key, CheckInType.END) for r in records),
            )

        return ParticipantAttendance(
            activity_id=int(activity_id),
            user_id=int(user_id),
            records=tuple(records),
            slots=slots,
        )

    # ----- officer verification -----

    def verify_record(
        self,
        record_id: int,
        *,
        status: Any,
        verifier_id: Any,
        verification_note: Optional[str] = None,
        cancel_reason: Optional[str] = None,
    ) -> AttendanceRecord:
        try:
            new_status = AttendanceStatus(status)
        except ValueError:
            new_status = None
        if new_status not in (AttendanceStatus.APPROVED, AttendanceStatus.REJECTED):
            raise PreconditionError("Trạng thái không hợp lệ. Chỉ chấp nhận approved hoặc rejected")

        if verifier_id is None or not str(verifier_id).strip():
            raise PreconditionError("Thiếu thông tin bắt buộc (verifiedBy)")

        note = clean_optional_text(verification_note)
        reason = clean_optional_text(cancel_reason)
        verified_at = self._clock()

        def apply(current: AttendanceRecord) -> AttendanceRecord:
            if new_status == AttendanceStatus.APPROVED:
                return replace(
                    current,
                    status=new_status,
                    verified_by=str(verifier_id).strip(),
                    verified_at=verified_at,
                    verification_note=note or OFFICER_APPROVE_NOTE,
                    cancel_reason=None,
                )
            # Rejected records carry no verifier; the reason lives in cancel_reason.
            return replace(
                current,
                status=new_status,
                verified_by=None,
                verified_at=None,
                verification_note=None,
                cancel_reason=reason or note or OFFICER_REJECT_NOTE,
            )

        updated = self._attendance.update_verification(record_id, apply)
        if updated is None:
            raise NotFoundError("Không tìm thấy bản ghi điểm danh")

        logger.info("record %s verified as %s by %s", record_id, new_status.value, verifier_id)
        return updated

    # ----- helpers -----

    def _require_activity(self, activity_id: int) -> ActivitySchedule:
        activity = self._activities.get_activity(activity_id)
        if activity is None:
            raise NotFoundError("Không tìm thấy hoạt động")
        return activity

    def _require_approved_participant(self, activity_id: int, user_id: int) -> Participant:
        participant = self._activities.get_participant(activity_id, user_id)
        if participant is None:
            raise NotFoundError("Không tìm thấy người tham gia")
        if not participant.is_approved:
            raise PreconditionError("Chỉ có thể điểm danh cho người tham gia đã được duyệt")
        return participant

    @staticmethod
    def _resolve_day(activity: ActivitySchedule, submission: CheckInSubmission) -> Optional[ActivityDay]:
        """Day of a multi-day activity, by dayNumber or else by slotDate."""
        if not activity.is_multi_day:
            return None
        if submission.day_number is None and submission.slot_date is None:
            raise PreconditionError("Thiếu thông tin ngày điểm danh (dayNumber, slotDate)")
        day = activity.find_day(day_number=submission.day_number, on=submission.slot_date)
        if day is None:
            raise PreconditionError("Không tìm thấy ngày điểm danh của hoạt động")
        return day

    def _classify(
        self,
        activity: ActivitySchedule,
        day: Optional[ActivityDay],
        submission: CheckInSubmission,
    ) -> TimeResult:
        if day is None:
            activity_date = activity.date
        else:
            activity_date = submission.slot_date or day.date
        return self._time.classify(
            check_in_time=submission.check_in_time,
            activity_date=activity_date,
            slots=activity.slots_for(day),
            slot_name=submission.time_slot,
            check_in_type=submission.check_in_type,
        )

    def _check_location(
        self,
        activity: ActivitySchedule,
        day: Optional[ActivityDay],
        slot_name: str,
        location: Coordinates,
    ) -> GeoResult:
        if day is None:
            return self._geo.validate(location.lat, location.lng, activity.location)

        # Days never fall back to the activity-wide zones.
        zone = day.zone_for(slot_name)
        if zone is not None:
            return self._geo.validate(location.lat, location.lng, SingleZoneRequirement(zone))
        if activity.location is None:
            return GeoResult(valid=True)
        return GeoResult(valid=False, message=NO_DAY_ZONE_MESSAGE)

    def _student_info(self, user_id: int) -> Optional[UserDisplayInfo]:
        if self._users is None:
            return None
        try:
            return self._users.get_display_info(user_id)
        except Exception:
            logger.warning("could not resolve display info for user %s", user_id, exc_info=True)
            return None

    @staticmethod
    def _activity_location(activity: ActivitySchedule, day: Optional[ActivityDay], time_slot: str) -> Coordinates:
        zone = day.zone_for(time_slot) if day is not None else None
        if zone is not None:
            return Coordinates(lat=zone.lat, lng=zone.lng)
        requirement = activity.location
        if isinstance(requirement, SingleZoneRequirement):
            zone = requirement.zone
            return Coordinates(lat=zone.lat, lng=zone.lng)
        if isinstance(requirement, MultiZoneRequirement) and requirement.zones:
            zone = next((z for z in requirement.zones if z.time_slot == time_slot), requirement.zones[0])
            return Coordinates(lat=zone.lat, lng=zone.lng)
        return Coordinates(lat=0.0, lng=0.0)
