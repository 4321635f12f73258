from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import GeoResult


class ZoneStrategy(ABC):
    """Strategy Pattern: encapsulate how a location requirement is checked."""

    @abstractmethod
    def check(self, *, lat: float, lng: float) -> GeoResult:
        raise NotImplementedError
