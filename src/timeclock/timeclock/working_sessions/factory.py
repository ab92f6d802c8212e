from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..core.enums import WorkingSessionStatus
from ..core.exceptions import InvalidTransition
from .model import WorkingSession
from .transitions.base import Transition
from .transitions.paused_to_running import PausedToRunning
from .transitions.paused_to_stopped import PausedToStopped
from .transitions.running_to_paused import RunningToPaused
from .transitions.running_to_stopped import RunningToStopped


def default_transitions() -> tuple[Transition, ...]:
    return (RunningToPaused(), PausedToRunning(), RunningToStopped(), PausedToStopped())


@dataclass
class TransitionFactory:
    """Factory Pattern: pick the transition registered for (current state, requested move)."""

    transitions: Iterable[Transition] = field(default_factory=default_transitions)

    def __post_init__(self) -> None:
        self._table: dict[tuple[WorkingSessionStatus, str], Transition] = {
            (t.source, t.name): t for t in self.transitions
        }

    def for_request(self, session: WorkingSession, transition_name: str) -> Transition:
        transition = self._table.get((session.status, transition_name))
        if transition is None:
            raise InvalidTransition(
                session_id=session.session_id,
                current_state=session.status,
                transition=transition_name,
            )
        return transition

    def allowed_from(self, status: WorkingSessionStatus) -> list[str]:
        return sorted(name for (source, name) in self._table if source == status)
