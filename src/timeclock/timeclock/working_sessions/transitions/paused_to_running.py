from __future__ import annotations

from datetime import datetime

from ...core.enums import ActionType, WorkingSessionStatus
from ..model import WorkingSession
from ..repository import WorkingSessionUnitOfWork
from .base import Transition


class PausedToRunning(Transition):
    name = "resume"
    source = WorkingSessionStatus.PAUSED
    target = WorkingSessionStatus.RUNNING

    def apply(self, uow: WorkingSessionUnitOfWork, session: WorkingSession, *, now: datetime) -> None:
        uow.update_session(session_id=session.session_id, status=self.target)
        uow.append_action(session_id=session.session_id, action_type=ActionType.PAUSE_ENDS_AT, action_time=now)
