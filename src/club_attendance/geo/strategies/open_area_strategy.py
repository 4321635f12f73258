from __future__ import annotations

from ..model import GeoResult
from .base import ZoneStrategy


class OpenAreaStrategy(ZoneStrategy):
    """Activity without a location requirement: any position is accepted."""

    def check(self, *, lat: float, lng: float) -> GeoResult:
        return GeoResult(valid=True, message="Hoạt động không yêu cầu vị trí cụ thể")
