from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus, ReasonCode
from ...geo.model import GeoResult
from ..time_window import TimeResult


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    reason_code: ReasonCode
    reason: Optional[str] = None
    verified_by: Optional[str] = None
    verification_note: Optional[str] = None

    @property
    def clears_verification(self) -> bool:
        return self.status != AttendanceStatus.APPROVED

    @property
    def cancel_reason(self) -> Optional[str]:
        return self.reason if self.status == AttendanceStatus.REJECTED else None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide(self, *, geo: GeoResult, time: Optional[TimeResult], has_photo: bool) -> StatusDecision:
        raise NotImplementedError
