from __future__ import annotations

from typing import Optional

from .factory import ZoneStrategyFactory
from .model import GeoResult, LocationRequirement


class GeoValidator:
    """Decide whether a claimed position is inside the activity's permitted zones.

    Coordinates must already be finite numbers; the service rejects anything
    else before calling in here.
    """

    def __init__(self, *, strategy_factory: Optional[ZoneStrategyFactory] = None):
        self._factory = strategy_factory or ZoneStrategyFactory()

    def validate(self, lat: float, lng: float, requirement: LocationRequirement) -> GeoResult:
        strategy = self._factory.for_requirement(requirement)
        return strategy.check(lat=lat, lng=lng)
