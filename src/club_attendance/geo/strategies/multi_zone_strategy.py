from __future__ import annotations

from typing import Sequence

from ..distance import format_meters, haversine_meters
from ..model import GeoResult, GeoZone
from .base import ZoneStrategy


class MultiZoneStrategy(ZoneStrategy):
    """Accept the position if it lies inside any declared zone.

    Zones are not filtered by the submitted time slot.
    """

    def __init__(self, zones: Sequence[GeoZone]):
        self._zones = tuple(zones)

    def check(self, *, lat: float, lng: float) -> GeoResult:
        measured = [(haversine_meters(lat, lng, z.lat, z.lng), z) for z in self._zones]

        for distance, zone in measured:
            if distance <= zone.radius_meters:
                return GeoResult(valid=True, distance_meters=distance)

        distance, nearest = min(measured, key=lambda item: item[0])
        label = nearest.time_slot or "hoạt động"
        return GeoResult(
            valid=False,
            distance_meters=distance,
            message=(
                f"Bạn đang cách vị trí {label} {format_meters(distance)}. "
                f"Vui lòng đến đúng vị trí (trong bán kính {nearest.radius_meters:g}m) để điểm danh."
            ),
        )
