from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ActionType, WorkingSessionStatus


@dataclass(frozen=True)
class Action:
    """A single timestamped clock event belonging to a working session."""

    action_id: int
    session_id: int
    action_type: ActionType
    action_time: datetime


@dataclass(frozen=True)
class WorkingSession:
    """Domain entity: one clock-in to clock-out period of a user.

    `actions` is the session's log in insertion order. It is empty once the
    session has been stopped and summarized into a time tracking.
    """

    session_id: int
    user_id: int
    location_id: int
    status: WorkingSessionStatus
    starts_at: datetime
    ends_at: Optional[datetime] = None
    actions: tuple[Action, ...] = ()

    @property
    def is_running(self) -> bool:
        return self.status == WorkingSessionStatus.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.status == WorkingSessionStatus.PAUSED

    @property
    def is_stopped(self) -> bool:
        return self.status == WorkingSessionStatus.STOPPED
