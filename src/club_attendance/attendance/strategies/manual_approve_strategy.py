from __future__ import annotations

from typing import Optional

from ...core.constants import MANUAL_CHECKIN_NOTE
from ...core.enums import AttendanceStatus, ReasonCode
from ...geo.model import GeoResult
from ..time_window import TimeResult
from .base import AttendanceStrategy, StatusDecision


class ManualApproveStrategy(AttendanceStrategy):
    """Officer check-in: approved and stamped with the officer."""

    def __init__(self, officer_id: str, note: Optional[str] = None):
        self._officer_id = officer_id
        self._note = note

    def decide(self, *, geo: GeoResult, time: Optional[TimeResult], has_photo: bool) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.APPROVED,
            reason_code=ReasonCode.MANUAL_APPROVED,
            verified_by=self._officer_id,
            verification_note=self._note or MANUAL_CHECKIN_NOTE,
        )
