from __future__ import annotations

from enum import Enum


class WorkingSessionStatus(str, Enum):
    """Current place of a working session in the time-clock state machine."""

    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class ActionType(str, Enum):
    """Clock events recorded in a session's action log."""

    STARTS_AT = "starts_at"
    PAUSE_STARTS_AT = "pause_starts_at"
    PAUSE_ENDS_AT = "pause_ends_at"
    ENDS_AT = "ends_at"
