from __future__ import annotations

from ...core.enums import ActionType, WorkingSessionStatus
from .base import StopTransition


class RunningToStopped(StopTransition):
    source = WorkingSessionStatus.RUNNING

    def closing_actions(self):
        return (ActionType.ENDS_AT,)
