from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from ..core.enums import ActionType
from ..core.exceptions import MalformedActionLog
from .model import Action


@dataclass(frozen=True)
class PauseInterval:
    starts_at: datetime
    ends_at: datetime


@dataclass(frozen=True)
class SessionSummary:
    """Result of converting an action log: summary fields plus pause intervals."""

    starts_at: Optional[datetime]
    ends_at: Optional[datetime]
    pauses: tuple[PauseInterval, ...] = ()

    @property
    def pause_count(self) -> int:
        return len(self.pauses)

    def as_time_tracking_fields(self) -> dict[str, Any]:
        """Fields to merge over the caller's time tracking payload.

        Only markers actually present in the log are returned.
        """
        fields: dict[str, Any] = {}
        if self.starts_at is not None:
            fields["starts_at"] = self.starts_at
        if self.ends_at is not None:
            fields["ends_at"] = self.ends_at
        return fields


def convert(actions: Iterable[Action], *, session_id: Optional[int] = None) -> SessionSummary:
    """Convert an ordered action log into a session summary.

    Each `pause_starts_at` opens a pause that the next `pause_ends_at` closes.
    `starts_at` and `ends_at` are markers only. Any pairing violation raises
    MalformedActionLog; no pause boundary is ever dropped or made up.
    """
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    open_pause: Optional[datetime] = None
    pauses: list[PauseInterval] = []

    for action in actions:
        try:
            kind = ActionType(action.action_type)
        except ValueError as exc:
            raise MalformedActionLog(f"unknown action type {action.action_type!r}", session_id=session_id) from exc

        if kind == ActionType.STARTS_AT:
            if starts_at is not None:
                raise MalformedActionLog("duplicate starts_at marker", session_id=session_id)
            starts_at = action.action_time

        elif kind == ActionType.PAUSE_STARTS_AT:
            if open_pause is not None:
                raise MalformedActionLog(
                    f"pause started at {action.action_time} while a pause started at {open_pause} is still open",
                    session_id=session_id,
                )
            open_pause = action.action_time

        elif kind == ActionType.PAUSE_ENDS_AT:
            if open_pause is None:
                raise MalformedActionLog(
                    f"pause ended at {action.action_time} without a matching pause start",
                    session_id=session_id,
                )
            if action.action_time < open_pause:
                raise MalformedActionLog(
                    f"pause ends at {action.action_time} before it starts at {open_pause}",
                    session_id=session_id,
                )
            pauses.append(PauseInterval(starts_at=open_pause, ends_at=action.action_time))
            open_pause = None

        elif kind == ActionType.ENDS_AT:
            if ends_at is not None:
                raise MalformedActionLog("duplicate ends_at marker", session_id=session_id)
            ends_at = action.action_time

    if open_pause is not None:
        raise MalformedActionLog(f"pause started at {open_pause} was never closed", session_id=session_id)

    return SessionSummary(starts_at=starts_at, ends_at=ends_at, pauses=tuple(pauses))
