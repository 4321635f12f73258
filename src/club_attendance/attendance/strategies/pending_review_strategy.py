from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus, ReasonCode
from ...geo.model import GeoResult
from ..time_window import TimeResult
from .base import AttendanceStrategy, StatusDecision


class PendingReviewStrategy(AttendanceStrategy):
    """Valid submission that an officer still has to look at."""

    def __init__(self, reason_code: ReasonCode = ReasonCode.LATE_NEEDS_REVIEW):
        self._reason_code = reason_code

    def decide(self, *, geo: GeoResult, time: Optional[TimeResult], has_photo: bool) -> StatusDecision:
        if self._reason_code == ReasonCode.MISSING_PHOTO_REVIEW:
            reason = "Đúng giờ nhưng chưa có ảnh (cần xét duyệt)"
        else:
            reason = (time.message if time else None) or "Điểm danh trễ (cần xét duyệt)"

        return StatusDecision(status=AttendanceStatus.PENDING, reason_code=self._reason_code, reason=reason)
