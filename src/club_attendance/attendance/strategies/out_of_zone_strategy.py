from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus, ReasonCode
from ...geo.model import GeoResult
from ..time_window import TimeResult
from .base import AttendanceStrategy, StatusDecision


class OutOfZoneStrategy(AttendanceStrategy):
    """Wrong place: rejected whatever the time or photo."""

    def decide(self, *, geo: GeoResult, time: Optional[TimeResult], has_photo: bool) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.REJECTED,
            reason_code=ReasonCode.OUT_OF_ZONE,
            reason=geo.message or "Vị trí không đúng",
        )
