from __future__ import annotations

from datetime import datetime
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import ActionType, WorkingSessionStatus
from ..time_trackings.model import TimeTracking
from .converter import PauseInterval
from .model import Action, WorkingSession


class WorkingSessionUnitOfWork(Protocol):
    """Writes that belong to one transaction.

    Everything done through a unit of work is committed together when the
    `transaction()` block exits normally, and rolled back when it raises.
    """

    def lock_session(self, session_id: int) -> Optional[WorkingSession]:
        """Load a session with its ordered action log and lock it until the transaction ends."""
        raise NotImplementedError

    def create_session(
        self,
        *,
        user_id: int,
        location_id: int,
        status: WorkingSessionStatus,
        starts_at: datetime,
    ) -> int:
        raise NotImplementedError

    def append_action(self, *, session_id: int, action_type: ActionType, action_time: datetime) -> int:
        raise NotImplementedError

    def delete_actions(self, session_id: int) -> int:
        raise NotImplementedError

    def create_time_tracking(
        self,
        *,
        user_id: int,
        location_id: int,
        starts_at: datetime,
        ends_at: datetime,
        manual_pause: bool,
    ) -> int:
        raise NotImplementedError

    def create_pause_times(self, *, time_tracking_id: int, pauses: Sequence[PauseInterval]) -> None:
        raise NotImplementedError

    def update_session(
        self,
        *,
        session_id: int,
        status: WorkingSessionStatus,
        ends_at: Optional[datetime] = None,
    ) -> bool:
        raise NotImplementedError


class WorkingSessionRepository(Protocol):
    def transaction(self) -> ContextManager[WorkingSessionUnitOfWork]:
        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[WorkingSession]:
        raise NotImplementedError

    def get_time_trackings_for_user(self, user_id: int, limit: int) -> Sequence[TimeTracking]:
        raise NotImplementedError
