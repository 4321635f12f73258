from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus, ReasonCode
from ...geo.model import GeoResult
from ..time_window import TimeResult
from .base import AttendanceStrategy, StatusDecision


class OutsideWindowStrategy(AttendanceStrategy):
    """Right place, wrong time (early, too late, other day or unknown slot)."""

    def decide(self, *, geo: GeoResult, time: Optional[TimeResult], has_photo: bool) -> StatusDecision:
        if time is not None and time.message:
            reason = time.message
        elif time is not None and time.early:
            reason = "Điểm danh sớm hơn thời gian cho phép"
        else:
            reason = "Điểm danh quá trễ"

        return StatusDecision(
            status=AttendanceStatus.REJECTED,
            reason_code=(time.reason_code if time and time.reason_code else ReasonCode.TOO_LATE),
            reason=reason,
        )
