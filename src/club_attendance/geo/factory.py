from __future__ import annotations

from dataclasses import dataclass

from .model import LocationRequirement, MultiZoneRequirement, SingleZoneRequirement
from .strategies.base import ZoneStrategy
from .strategies.multi_zone_strategy import MultiZoneStrategy
from .strategies.open_area_strategy import OpenAreaStrategy
from .strategies.single_zone_strategy import SingleZoneStrategy


@dataclass
class ZoneStrategyFactory:
    """Factory Pattern: choose the zone check matching the activity's requirement."""

    def for_requirement(self, requirement: LocationRequirement) -> ZoneStrategy:
        if isinstance(requirement, SingleZoneRequirement):
            return SingleZoneStrategy(requirement.zone)
        if isinstance(requirement, MultiZoneRequirement) and requirement.zones:
            return MultiZoneStrategy(requirement.zones)
        return OpenAreaStrategy()
