from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float
    address: Optional[str] = None


@dataclass(frozen=True)
class GeoZone:
    """Vùng điểm danh hình tròn (tâm + bán kính)."""

    lat: float
    lng: float
    radius_meters: float
    time_slot: Optional[str] = None


@dataclass(frozen=True)
class SingleZoneRequirement:
    """One zone applying to every slot of the activity."""

    zone: GeoZone


@dataclass(frozen=True)
class MultiZoneRequirement:
    """Several zones, each declared for a time slot."""

    zones: Tuple[GeoZone, ...] = field(default_factory=tuple)


# None means the activity does not require a location.
LocationRequirement = Union[SingleZoneRequirement, MultiZoneRequirement, None]


@dataclass(frozen=True)
class GeoResult:
    valid: bool
    distance_meters: Optional[float] = None
    message: Optional[str] = None
