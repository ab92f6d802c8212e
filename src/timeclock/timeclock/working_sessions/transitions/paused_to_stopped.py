from __future__ import annotations

from ...core.enums import ActionType, WorkingSessionStatus
from .base import StopTransition


class PausedToStopped(StopTransition):
    source = WorkingSessionStatus.PAUSED

    def closing_actions(self):
        # The open pause is closed at the same instant the session ends.
        return (ActionType.PAUSE_ENDS_AT, ActionType.ENDS_AT)
