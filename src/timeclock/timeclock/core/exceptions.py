from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class SessionNotFound(DomainError):
    """Raised when no working session exists for the given id."""

    def __init__(self, session_id: int):
        super().__init__(f"Working session {session_id} not found")
        self.session_id = session_id


class InvalidTransition(DomainError):
    """Raised when a transition is not legal from the session's current state."""

    def __init__(self, *, session_id: int, current_state, transition: str):
        state = getattr(current_state, "value", current_state)
        super().__init__(f"Cannot {transition} working session {session_id} while {state}")
        self.session_id = session_id
        self.current_state = current_state
        self.transition = transition


class MalformedActionLog(DomainError):
    """Raised when an action log violates pause open/close pairing."""

    def __init__(self, reason: str, *, session_id: Optional[int] = None):
        prefix = f"Working session {session_id}: " if session_id is not None else ""
        super().__init__(f"{prefix}{reason}")
        self.reason = reason
        self.session_id = session_id


class PersistenceFailure(DomainError):
    """Raised when the underlying storage fails; the transaction was rolled back."""

    def __init__(self, message: str, *, session_id: Optional[int] = None):
        super().__init__(message)
        self.session_id = session_id
