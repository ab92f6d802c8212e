from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from ...core.enums import ActionType, WorkingSessionStatus
from ..converter import convert
from ..model import Action, WorkingSession
from ..repository import WorkingSessionUnitOfWork


class Transition(ABC):
    """State Pattern: one legal move of a working session between two places."""

    name: str
    source: WorkingSessionStatus
    target: WorkingSessionStatus

    @abstractmethod
    def apply(self, uow: WorkingSessionUnitOfWork, session: WorkingSession, *, now: datetime) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source.value} -> {self.target.value})"


class StopTransition(Transition):
    """Closes the session and folds its action log into a time tracking."""

    name = "stop"
    target = WorkingSessionStatus.STOPPED

    @abstractmethod
    def closing_actions(self) -> Sequence[ActionType]:
        raise NotImplementedError

    def apply(self, uow: WorkingSessionUnitOfWork, session: WorkingSession, *, now: datetime) -> None:
        actions = list(session.actions)
        for action_type in self.closing_actions():
            action_id = uow.append_action(session_id=session.session_id, action_type=action_type, action_time=now)
            actions.append(
                Action(action_id=action_id, session_id=session.session_id, action_type=action_type, action_time=now)
            )

        summary = convert(actions, session_id=session.session_id)

        payload = {
            "location_id": session.location_id,
            "starts_at": session.starts_at,
            "ends_at": now,
            "manual_pause": False,
        }
        payload.update(summary.as_time_tracking_fields())
        time_tracking_id = uow.create_time_tracking(user_id=session.user_id, **payload)
        uow.create_pause_times(time_tracking_id=time_tracking_id, pauses=summary.pauses)

        uow.delete_actions(session.session_id)
        uow.update_session(session_id=session.session_id, status=self.target, ends_at=now)
