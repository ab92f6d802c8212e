from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional, Sequence

from ..core.enums import ActionType, WorkingSessionStatus
from ..core.exceptions import MalformedActionLog
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..time_trackings.model import PauseTime, TimeTracking
from .converter import PauseInterval
from .model import Action, WorkingSession
from .repository import WorkingSessionRepository, WorkingSessionUnitOfWork

_SESSION_COLUMNS = "session_id, user_id, location_id, status, starts_at, ends_at"


def _to_action(r) -> Action:
    try:
        action_type = ActionType(r["action_type"])
    except ValueError as exc:
        raise MalformedActionLog(
            f"unknown action type {r['action_type']!r}", session_id=int(r["session_id"])
        ) from exc
    return Action(
        action_id=int(r["action_id"]),
        session_id=int(r["session_id"]),
        action_type=action_type,
        action_time=r["action_time"],
    )


def _to_session(r, actions: Sequence[Action]) -> WorkingSession:
    return WorkingSession(
        session_id=int(r["session_id"]),
        user_id=int(r["user_id"]),
        location_id=int(r["location_id"]),
        status=WorkingSessionStatus(r["status"]),
        starts_at=r["starts_at"],
        ends_at=r.get("ends_at"),
        actions=tuple(actions),
    )


def _load_session(cur, session_id: int, *, for_update: bool) -> Optional[WorkingSession]:
    lock = " FOR UPDATE" if for_update else ""
    cur.execute(
        f"SELECT {_SESSION_COLUMNS} FROM working_sessions WHERE session_id=%s{lock}",
        (int(session_id),),
    )
    r = fetchone(cur)
    if not r:
        return None

    cur.execute(
        """
        SELECT action_id, session_id, action_type, action_time
        FROM working_session_actions
        WHERE session_id=%s
        ORDER BY action_id ASC
        """,
        (int(session_id),),
    )
    actions = [_to_action(a) for a in fetchall(cur)]
    return _to_session(r, actions)


class MySQLWorkingSessionUnitOfWork(WorkingSessionUnitOfWork):
    def __init__(self, cur):
        self._cur = cur

    def lock_session(self, session_id: int) -> Optional[WorkingSession]:
        return _load_session(self._cur, session_id, for_update=True)

    def create_session(
        self,
        *,
        user_id: int,
        location_id: int,
        status: WorkingSessionStatus,
        starts_at: datetime,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO working_sessions(user_id, location_id, status, starts_at)
            VALUES(%s,%s,%s,%s)
            """,
            (user_id, location_id, status.value, starts_at),
        )
        return int(self._cur.lastrowid)

    def append_action(self, *, session_id: int, action_type: ActionType, action_time: datetime) -> int:
        self._cur.execute(
            """
            INSERT INTO working_session_actions(session_id, action_type, action_time)
            VALUES(%s,%s,%s)
            """,
            (int(session_id), action_type.value, action_time),
        )
        return int(self._cur.lastrowid)

    def delete_actions(self, session_id: int) -> int:
        self._cur.execute("DELETE FROM working_session_actions WHERE session_id=%s", (int(session_id),))
        return int(self._cur.rowcount)

    def create_time_tracking(
        self,
        *,
        user_id: int,
        location_id: int,
        starts_at: datetime,
        ends_at: datetime,
        manual_pause: bool,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO time_trackings(user_id, location_id, starts_at, ends_at, manual_pause)
            VALUES(%s,%s,%s,%s,%s)
            """,
            (user_id, location_id, starts_at, ends_at, int(bool(manual_pause))),
        )
        return int(self._cur.lastrowid)

    def create_pause_times(self, *, time_tracking_id: int, pauses: Sequence[PauseInterval]) -> None:
        if not pauses:
            return
        self._cur.executemany(
            """
            INSERT INTO pause_times(time_tracking_id, starts_at, ends_at)
            VALUES(%s,%s,%s)
            """,
            [(int(time_tracking_id), p.starts_at, p.ends_at) for p in pauses],
        )

    def update_session(
        self,
        *,
        session_id: int,
        status: WorkingSessionStatus,
        ends_at: Optional[datetime] = None,
    ) -> bool:
        self._cur.execute(
            "UPDATE working_sessions SET status=%s, ends_at=%s WHERE session_id=%s",
            (status.value, ends_at, int(session_id)),
        )
        return self._cur.rowcount > 0


class MySQLWorkingSessionRepository(WorkingSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[MySQLWorkingSessionUnitOfWork]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield MySQLWorkingSessionUnitOfWork(cur)

    def get_by_id(self, session_id: int) -> Optional[WorkingSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            return _load_session(cur, session_id, for_update=False)

    def get_time_trackings_for_user(self, user_id: int, limit: int) -> Sequence[TimeTracking]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT time_tracking_id, user_id, location_id, starts_at, ends_at, manual_pause
                FROM time_trackings
                WHERE user_id=%s
                ORDER BY starts_at DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [int(r["time_tracking_id"]) for r in rows]
            placeholders = ",".join(["%s"] * len(ids))
            cur.execute(
                f"""
                SELECT pause_time_id, time_tracking_id, starts_at, ends_at
                FROM pause_times
                WHERE time_tracking_id IN ({placeholders})
                ORDER BY starts_at ASC, pause_time_id ASC
                """,
                tuple(ids),
            )
            pauses: dict[int, list[PauseTime]] = {}
            for p in fetchall(cur):
                tid = int(p["time_tracking_id"])
                pauses.setdefault(tid, []).append(
                    PauseTime(
                        pause_time_id=int(p["pause_time_id"]),
                        time_tracking_id=tid,
                        starts_at=p["starts_at"],
                        ends_at=p["ends_at"],
                    )
                )

            return [
                TimeTracking(
                    time_tracking_id=int(r["time_tracking_id"]),
                    user_id=int(r["user_id"]),
                    location_id=int(r["location_id"]),
                    starts_at=r["starts_at"],
                    ends_at=r.get("ends_at"),
                    manual_pause=bool(r.get("manual_pause")),
                    pause_times=tuple(pauses.get(int(r["time_tracking_id"]), [])),
                )
                for r in rows
            ]
