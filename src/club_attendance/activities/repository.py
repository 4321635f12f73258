from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ActivitySchedule, Participant


class ActivityRepository(Protocol):
    """Read-only access to activities and their rosters.

    Activity CRUD lives elsewhere; attendance only reads.
    """

    def get_activity(self, activity_id: int) -> Optional[ActivitySchedule]:
        raise NotImplementedError

    def get_participant(self, activity_id: int, user_id: int) -> Optional[Participant]:
        raise NotImplementedError

    def list_approved_participants(self, activity_id: int) -> Sequence[Participant]:
        raise NotImplementedError
