from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus, ReasonCode
from ...geo.model import GeoResult
from ..time_window import TimeResult
from .base import AttendanceStrategy, StatusDecision


class MissingEvidenceStrategy(AttendanceStrategy):
    """No photo and nothing else that would justify review."""

    def decide(self, *, geo: GeoResult, time: Optional[TimeResult], has_photo: bool) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.REJECTED,
            reason_code=ReasonCode.MISSING_EVIDENCE,
            reason="Thiếu ảnh hoặc thông tin không hợp lệ",
        )
