from __future__ import annotations

from datetime import datetime

from ...core.enums import ActionType, WorkingSessionStatus
from ..model import WorkingSession
from ..repository import WorkingSessionUnitOfWork
from .base import Transition


class RunningToPaused(Transition):
    name = "pause"
    source = WorkingSessionStatus.RUNNING
    target = WorkingSessionStatus.PAUSED

    def apply(self, uow: WorkingSessionUnitOfWork, session: WorkingSession, *, now: datetime) -> None:
        uow.update_session(session_id=session.session_id, status=self.target)
        uow.append_action(session_id=session.session_id, action_type=ActionType.PAUSE_STARTS_AT, action_time=now)
