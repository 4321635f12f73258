from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, time
from typing import Iterator, Optional, Tuple

from ..core.enums import ApprovalStatus
from ..geo.model import GeoZone, LocationRequirement

_DAY_SLOT_RE = re.compile(r"^Ngày\s+(\d+)\s+-\s+(.+)$")


def day_slot_key(day_number: Optional[int], slot_name: str) -> str:
    """Record key of a slot: 'Ngày 2 - Buổi Sáng' on multi-day activities."""
    if day_number is None or "Ngày" in slot_name:
        return slot_name
    return f"Ngày {day_number} - {slot_name}"


def split_day_slot(key: str) -> Tuple[Optional[int], str]:
    m = _DAY_SLOT_RE.match(key.strip())
    if not m:
        return None, key.strip()
    return int(m.group(1)), m.group(2).strip()


@dataclass(frozen=True)
class TimeSlot:
    """Buổi của hoạt động (chỉ có giờ, không có ngày)."""

    name: str
    start_time: time
    end_time: time
    is_active: bool = True


@dataclass(frozen=True)
class RegisteredSlot:
    """Buổi mà người tham gia đã đăng ký. ``day_number`` None = mọi ngày."""

    slot_name: str
    day_number: Optional[int] = None


@dataclass(frozen=True)
class Participant:
    user_id: int
    name: str
    email: Optional[str] = None
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    registered_slots: Tuple[RegisteredSlot, ...] = field(default_factory=tuple)

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED

    def is_registered_for(self, day_number: Optional[int], slot_name: str) -> bool:
        # No registration rows means the participant joined every slot.
        if not self.registered_slots:
            return True

        wanted = split_day_slot(slot_name)[1].casefold()
        for reg in self.registered_slots:
            if reg.slot_name.casefold() != wanted:
                continue
            if day_number is None or reg.day_number is None or reg.day_number == day_number:
                return True
        return False


@dataclass(frozen=True)
class ActivityDay:
    """Một ngày của hoạt động nhiều ngày.

    ``slot_zones`` are venues for one slot of this day (labelled by
    ``time_slot``); ``zone`` covers the whole day.
    """

    day_number: int
    date: date
    time_slots: Tuple[TimeSlot, ...] = field(default_factory=tuple)
    zone: Optional[GeoZone] = None
    slot_zones: Tuple[GeoZone, ...] = field(default_factory=tuple)

    def zone_for(self, slot_name: str) -> Optional[GeoZone]:
        for z in self.slot_zones:
            if z.time_slot == slot_name:
                return z
        return self.zone


@dataclass(frozen=True)
class ActivitySchedule:
    """Read-only view of an activity as needed by attendance verification.

    An activity with ``days`` is a multi-day activity: every day has its own
    date, may add its own slots, and may carry its own venues.
    """

    activity_id: int
    name: str
    date: date
    time_slots: Tuple[TimeSlot, ...] = field(default_factory=tuple)
    location: LocationRequirement = None
    days: Tuple[ActivityDay, ...] = field(default_factory=tuple)

    @property
    def is_multi_day(self) -> bool:
        return bool(self.days)

    @property
    def active_slots(self) -> Tuple[TimeSlot, ...]:
        return tuple(s for s in self.time_slots if s.is_active)

    def find_day(self, *, day_number: Optional[int] = None, on: Optional[date] = None) -> Optional[ActivityDay]:
        for day in self.days:
            if day_number is not None:
                if day.day_number == day_number:
                    return day
            elif on is not None and day.date == on:
                return day
        return None

    def slots_for(self, day: Optional[ActivityDay]) -> Tuple[TimeSlot, ...]:
        """Active slots of a day: shared slots first, then the day's own."""
        slots = self.active_slots
        if day is None:
            return slots
        names = {s.name for s in slots}
        return slots + tuple(s for s in day.time_slots if s.is_active and s.name not in names)

    def slot_keys(self) -> Iterator[Tuple[Optional[int], str, str]]:
        """Yield ``(day_number, slot_name, record_key)`` for every active slot."""
        if not self.days:
            for slot in self.active_slots:
                yield None, slot.name, slot.name
            return
        for day in self.days:
            for slot in self.slots_for(day):
                yield day.day_number, slot.name, day_slot_key(day.day_number, slot.name)
