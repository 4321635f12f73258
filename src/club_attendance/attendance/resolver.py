from __future__ import annotations

from typing import Optional

from ..geo.model import GeoResult
from .factory import AttendanceStrategyFactory
from .model import ManualCheckIn
from .strategies.base import StatusDecision
from .time_window import TimeResult


class AttendanceStatusResolver:
    """Combine location, time and photo evidence into a record status.

    ``time`` may be None when the location already failed; the time window
    is not evaluated in that case.
    """

    def __init__(self, *, strategy_factory: Optional[AttendanceStrategyFactory] = None):
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def resolve(
        self,
        *,
        geo: GeoResult,
        time: Optional[TimeResult],
        has_photo: bool,
        manual: Optional[ManualCheckIn] = None,
    ) -> StatusDecision:
        strategy = self._factory.for_submission(geo=geo, time=time, has_photo=has_photo, manual=manual)
        return strategy.decide(geo=geo, time=time, has_photo=has_photo)
