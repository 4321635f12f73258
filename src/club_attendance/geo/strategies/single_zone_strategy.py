from __future__ import annotations

from ..distance import format_meters, haversine_meters
from ..model import GeoResult, GeoZone
from .base import ZoneStrategy


class SingleZoneStrategy(ZoneStrategy):
    def __init__(self, zone: GeoZone):
        self._zone = zone

    def check(self, *, lat: float, lng: float) -> GeoResult:
        zone = self._zone
        distance = haversine_meters(lat, lng, zone.lat, zone.lng)
        if distance <= zone.radius_meters:
            return GeoResult(valid=True, distance_meters=distance)

        return GeoResult(
            valid=False,
            distance_meters=distance,
            message=(
                f"Bạn đang cách vị trí hoạt động {format_meters(distance)}. "
                f"Vui lòng đến đúng vị trí (trong bán kính {zone.radius_meters:g}m) để điểm danh."
            ),
        )
