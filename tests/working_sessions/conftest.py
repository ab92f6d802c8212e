from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Sequence

import pytest

from src.timeclock.timeclock.core.enums import ActionType, WorkingSessionStatus
from src.timeclock.timeclock.core.exceptions import PersistenceFailure
from src.timeclock.timeclock.time_trackings.model import PauseTime, TimeTracking
from src.timeclock.timeclock.working_sessions.converter import PauseInterval
from src.timeclock.timeclock.working_sessions.model import Action, WorkingSession
from src.timeclock.timeclock.working_sessions.service import WorkingSessionService


class InMemoryWorkingSessions:
    """Fake repository: writes apply immediately and are undone on rollback."""

    def __init__(self, *, lock_timeout: float = 5.0):
        self.sessions: dict[int, WorkingSession] = {}
        self.actions: dict[int, Action] = {}
        self.time_trackings: dict[int, TimeTracking] = {}
        self.pause_times: dict[int, PauseTime] = {}
        self.fail_on: set[str] = set()
        self.before_lock: Optional[Callable[[int], None]] = None
        self.commits = 0
        self.rollbacks = 0
        self._lock_timeout = lock_timeout
        self._ids = {name: itertools.count(1) for name in ("session", "action", "tracking", "pause")}
        self._row_locks: dict[int, threading.Lock] = {}
        self._guard = threading.RLock()

    def next_id(self, name: str) -> int:
        return next(self._ids[name])

    def row_lock(self, session_id: int) -> threading.Lock:
        with self._guard:
            return self._row_locks.setdefault(session_id, threading.Lock())

    def maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise PersistenceFailure(f"simulated failure in {operation}")

    def seed_session(
        self,
        *,
        user_id: int = 1,
        location_id: int = 10,
        status: WorkingSessionStatus = WorkingSessionStatus.RUNNING,
        starts_at: datetime,
        actions: Sequence[tuple[ActionType, datetime]] = (),
    ) -> int:
        session_id = self.next_id("session")
        self.sessions[session_id] = WorkingSession(
            session_id=session_id,
            user_id=user_id,
            location_id=location_id,
            status=status,
            starts_at=starts_at,
        )
        for action_type, action_time in actions:
            action_id = self.next_id("action")
            self.actions[action_id] = Action(action_id, session_id, action_type, action_time)
        return session_id

    def actions_for(self, session_id: int) -> list[Action]:
        with self._guard:
            return sorted((a for a in self.actions.values() if a.session_id == session_id), key=lambda a: a.action_id)

    @contextmanager
    def transaction(self):
        uow = InMemoryUnitOfWork(self)
        try:
            yield uow
        except Exception:
            uow.rollback()
            self.rollbacks += 1
            raise
        else:
            self.commits += 1
        finally:
            uow.release()

    def get_by_id(self, session_id: int) -> Optional[WorkingSession]:
        with self._guard:
            session = self.sessions.get(session_id)
            if session is None:
                return None
            return replace(session, actions=tuple(self.actions_for(session_id)))

    def get_time_trackings_for_user(self, user_id: int, limit: int):
        with self._guard:
            items = [t for t in self.time_trackings.values() if t.user_id == user_id]
            items.sort(key=lambda t: t.starts_at, reverse=True)
            return [
                replace(
                    t,
                    pause_times=tuple(
                        p for p in self.pause_times.values() if p.time_tracking_id == t.time_tracking_id
                    ),
                )
                for t in items[:limit]
            ]


class InMemoryUnitOfWork:
    def __init__(self, store: InMemoryWorkingSessions):
        self._store = store
        self._undo: list[Callable[[], None]] = []
        self._held: list[threading.Lock] = []

    def _put(self, table: dict, key: int, value) -> None:
        missing = object()
        previous = table.get(key, missing)
        table[key] = value
        if previous is missing:
            self._undo.append(lambda: table.pop(key, None))
        else:
            self._undo.append(lambda: table.__setitem__(key, previous))

    def rollback(self) -> None:
        with self._store._guard:
            for undo in reversed(self._undo):
                undo()
        self._undo.clear()

    def release(self) -> None:
        for lock in self._held:
            lock.release()
        self._held.clear()

    def lock_session(self, session_id: int) -> Optional[WorkingSession]:
        self._store.maybe_fail("lock_session")
        if self._store.before_lock is not None:
            self._store.before_lock(session_id)
        lock = self._store.row_lock(session_id)
        if not lock.acquire(timeout=self._store._lock_timeout):
            raise PersistenceFailure("lock wait timeout exceeded", session_id=session_id)
        self._held.append(lock)
        return self._store.get_by_id(session_id)

    def create_session(self, *, user_id, location_id, status, starts_at) -> int:
        self._store.maybe_fail("create_session")
        session_id = self._store.next_id("session")
        with self._store._guard:
            self._put(
                self._store.sessions,
                session_id,
                WorkingSession(
                    session_id=session_id,
                    user_id=user_id,
                    location_id=location_id,
                    status=status,
                    starts_at=starts_at,
                ),
            )
        return session_id

    def append_action(self, *, session_id: int, action_type: ActionType, action_time: datetime) -> int:
        self._store.maybe_fail("append_action")
        action_id = self._store.next_id("action")
        with self._store._guard:
            self._put(self._store.actions, action_id, Action(action_id, session_id, action_type, action_time))
        return action_id

    def delete_actions(self, session_id: int) -> int:
        self._store.maybe_fail("delete_actions")
        with self._store._guard:
            doomed = [a for a in self._store.actions.values() if a.session_id == session_id]
            for action in doomed:
                del self._store.actions[action.action_id]
                self._undo.append(lambda a=action: self._store.actions.__setitem__(a.action_id, a))
        return len(doomed)

    def create_time_tracking(self, *, user_id, location_id, starts_at, ends_at, manual_pause) -> int:
        self._store.maybe_fail("create_time_tracking")
        tracking_id = self._store.next_id("tracking")
        with self._store._guard:
            self._put(
                self._store.time_trackings,
                tracking_id,
                TimeTracking(
                    time_tracking_id=tracking_id,
                    user_id=user_id,
                    location_id=location_id,
                    starts_at=starts_at,
                    ends_at=ends_at,
                    manual_pause=manual_pause,
                ),
            )
        return tracking_id

    def create_pause_times(self, *, time_tracking_id: int, pauses: Sequence[PauseInterval]) -> None:
        self._store.maybe_fail("create_pause_times")
        with self._store._guard:
            for pause in pauses:
                pause_id = self._store.next_id("pause")
                self._put(
                    self._store.pause_times,
                    pause_id,
                    PauseTime(pause_id, time_tracking_id, pause.starts_at, pause.ends_at),
                )

    def update_session(self, *, session_id: int, status: WorkingSessionStatus, ends_at=None) -> bool:
        self._store.maybe_fail("update_session")
        with self._store._guard:
            current = self._store.sessions.get(session_id)
            if current is None:
                return False
            self._put(self._store.sessions, session_id, replace(current, status=status, ends_at=ends_at))
        return True


@pytest.fixture
def store() -> InMemoryWorkingSessions:
    return InMemoryWorkingSessions()


@pytest.fixture
def service(store) -> WorkingSessionService:
    return WorkingSessionService(store)
