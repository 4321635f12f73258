from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ..activities.model import TimeSlot
from ..core.constants import LATE_WINDOW_MINUTES, ON_TIME_WINDOW_MINUTES
from ..core.enums import CheckInType, ReasonCode


@dataclass(frozen=True)
class TimeResult:
    valid: bool
    on_time: bool = False
    late: bool = False
    early: bool = False
    message: Optional[str] = None
    reason_code: Optional[ReasonCode] = None


class TimeWindowValidator:
    """Classify a check-in instant against its slot boundary.

    Relative to the target ``T`` (slot start for ``start``, slot end for ``end``):

    - ``[T - on_time, T + on_time]``: on time
    - ``(T + on_time, T + late]``: late, still valid but needs review
    - before ``T - on_time``: too early (invalid)
    - after ``T + late``: too late (invalid)
    """

    def __init__(
        self,
        *,
        on_time_minutes: int = ON_TIME_WINDOW_MINUTES,
        late_minutes: int = LATE_WINDOW_MINUTES,
    ):
        if int(late_minutes) < int(on_time_minutes):
            raise ValueError("late window must not end before the on-time window")
        self._on_time = timedelta(minutes=int(on_time_minutes))
        self._late = timedelta(minutes=int(late_minutes))
        self._late_minutes = int(late_minutes)

    def classify(
        self,
        *,
        check_in_time: datetime,
        activity_date: date,
        slots: Iterable[TimeSlot],
        slot_name: str,
        check_in_type: CheckInType,
    ) -> TimeResult:
        if isinstance(activity_date, datetime):
            activity_date = activity_date.date()

        if check_in_time.date() != activity_date:
            return TimeResult(
                valid=False,
                message="Ngày điểm danh không khớp với ngày hoạt động",
                reason_code=ReasonCode.DATE_MISMATCH,
            )

        slot = next((s for s in slots if s.is_active and s.name == slot_name), None)
        if slot is None:
            return TimeResult(
                valid=False,
                message="Không tìm thấy buổi điểm danh",
                reason_code=ReasonCode.SLOT_NOT_FOUND,
            )

        boundary = slot.start_time if check_in_type == CheckInType.START else slot.end_time
        target = datetime.combine(activity_date, boundary)

        if target - self._on_time <= check_in_time <= target + self._on_time:
            return TimeResult(valid=True, on_time=True)

        if target + self._on_time < check_in_time <= target + self._late:
            return TimeResult(
                valid=True,
                late=True,
                message="Điểm danh trong cửa sổ trễ (cần xét duyệt)",
                reason_code=ReasonCode.LATE_NEEDS_REVIEW,
            )

        if check_in_time < target - self._on_time:
            return TimeResult(
                valid=False,
                early=True,
                message="Điểm danh sớm hơn thời gian cho phép",
                reason_code=ReasonCode.TOO_EARLY,
            )

        return TimeResult(
            valid=False,
            late=True,
            message=f"Điểm danh quá trễ (quá {self._late_minutes} phút sau giờ quy định)",
            reason_code=ReasonCode.TOO_LATE,
        )
