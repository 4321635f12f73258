from __future__ import annotations

from typing import Optional

from ...core.constants import AUTO_APPROVE_NOTE, SYSTEM_VERIFIER
from ...core.enums import AttendanceStatus, ReasonCode
from ...geo.model import GeoResult
from ..time_window import TimeResult
from .base import AttendanceStrategy, StatusDecision


class AutoApproveStrategy(AttendanceStrategy):
    """Correct location, on time, photo present."""

    def decide(self, *, geo: GeoResult, time: Optional[TimeResult], has_photo: bool) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.APPROVED,
            reason_code=ReasonCode.AUTO_APPROVED,
            verified_by=SYSTEM_VERIFIER,
            verification_note=AUTO_APPROVE_NOTE,
        )
