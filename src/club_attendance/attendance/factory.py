from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import ReasonCode
from ..geo.model import GeoResult
from .model import ManualCheckIn
from .strategies.auto_approve_strategy import AutoApproveStrategy
from .strategies.base import AttendanceStrategy
from .strategies.manual_approve_strategy import ManualApproveStrategy
from .strategies.missing_evidence_strategy import MissingEvidenceStrategy
from .strategies.out_of_zone_strategy import OutOfZoneStrategy
from .strategies.outside_window_strategy import OutsideWindowStrategy
from .strategies.pending_review_strategy import PendingReviewStrategy
from .time_window import TimeResult


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    Rules are checked in order; the first one that applies wins.
    """

    def for_submission(
        self,
        *,
        geo: GeoResult,
        time: Optional[TimeResult],
        has_photo: bool,
        manual: Optional[ManualCheckIn] = None,
    ) -> AttendanceStrategy:
        if manual is not None:
            # Officer override, except for photo evidence taken outside the window.
            if time is not None and not time.valid and has_photo:
                return OutsideWindowStrategy()
            return ManualApproveStrategy(manual.officer_id, manual.note)

        if not geo.valid:
            return OutOfZoneStrategy()

        if time is None:
            raise ValueError("time classification is required once the location is valid")

        if not time.valid and has_photo:
            return OutsideWindowStrategy()

        if time.valid and time.on_time and has_photo:
            return AutoApproveStrategy()

        if time.valid and time.late and has_photo:
            return PendingReviewStrategy(ReasonCode.LATE_NEEDS_REVIEW)

        if time.valid and time.on_time and not has_photo:
            return PendingReviewStrategy(ReasonCode.MISSING_PHOTO_REVIEW)

        return MissingEvidenceStrategy()
