from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import ActionType, WorkingSessionStatus
from ..core.exceptions import DomainError, PersistenceFailure, SessionNotFound, ValidationError
from ..time_trackings.model import TimeTracking
from .factory import TransitionFactory
from .model import WorkingSession
from .repository import WorkingSessionRepository

logger = logging.getLogger(__name__)


class WorkingSessionService:
    """Runs working-session transitions, one repository transaction per call."""

    def __init__(
        self,
        sessions: WorkingSessionRepository,
        *,
        transition_factory: TransitionFactory | None = None,
    ):
        self._sessions = sessions
        self._factory = transition_factory or TransitionFactory()

    def start(self, user_id: int, location_id: int, *, now: datetime | None = None) -> WorkingSession:
        if not user_id or int(user_id) <= 0:
            raise ValidationError("user_id must be a positive integer")
        if not location_id or int(location_id) <= 0:
            raise ValidationError("location_id must be a positive integer")
        now = now or now_local()

        with self._sessions.transaction() as uow:
            session_id = uow.create_session(
                user_id=int(user_id),
                location_id=int(location_id),
                status=WorkingSessionStatus.RUNNING,
                starts_at=now,
            )
            uow.append_action(session_id=session_id, action_type=ActionType.STARTS_AT, action_time=now)

        logger.info("Working session %s started for user %s at location %s", session_id, user_id, location_id)
        return self._fresh(session_id)

    def pause(self, session_id: int, *, now: datetime | None = None) -> WorkingSession:
        return self._transition(session_id, "pause", now=now)

    def resume(self, session_id: int, *, now: datetime | None = None) -> WorkingSession:
        return self._transition(session_id, "resume", now=now)

    def stop(self, session_id: int, *, now: datetime | None = None) -> WorkingSession:
        return self._transition(session_id, "stop", now=now)

    def get_session(self, session_id: int) -> WorkingSession:
        return self._fresh(session_id)

    def get_time_trackings(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[TimeTracking]:
        if limit is None or int(limit) < 1:
            raise ValidationError("limit must be a positive integer")
        return self._sessions.get_time_trackings_for_user(int(user_id), int(limit))

    def _transition(self, session_id: int, transition_name: str, *, now: datetime | None) -> WorkingSession:
        state = None
        try:
            with self._sessions.transaction() as uow:
                session = uow.lock_session(session_id)
                if session is None:
                    raise SessionNotFound(session_id)
                state = session.status
                transition = self._factory.for_request(session, transition_name)
                # Read the clock only once the row lock is held, so actions stay in time order.
                transition.apply(uow, session, now=now or now_local())
        except PersistenceFailure as exc:
            if exc.session_id is None:
                exc.session_id = session_id
            logger.warning("Working session %s: %s failed in storage: %s", session_id, transition_name, exc)
            raise
        except DomainError as exc:
            logger.warning(
                "Working session %s: %s rejected (state=%s): %s",
                session_id,
                transition_name,
                state.value if state else None,
                exc,
            )
            raise

        logger.info("Working session %s: %s from %s", session_id, transition_name, state.value)
        return self._fresh(session_id)

    def _fresh(self, session_id: int) -> WorkingSession:
        session = self._sessions.get_by_id(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session
