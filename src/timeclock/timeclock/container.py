from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_LOCK_WAIT_TIMEOUT
from .database.connection import DBConfig, DatabaseConnection
from .working_sessions.factory import TransitionFactory
from .working_sessions.mysql_working_session_repository import MySQLWorkingSessionRepository
from .working_sessions.repository import WorkingSessionRepository
from .working_sessions.service import WorkingSessionService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    working_sessions_repo: WorkingSessionRepository

    working_session_service: WorkingSessionService


def build_container(*, db_config: dict, lock_wait_timeout: int = DEFAULT_LOCK_WAIT_TIMEOUT) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        lock_wait_timeout=int(lock_wait_timeout),
    )
    conn = DatabaseConnection(config)

    working_sessions_repo = MySQLWorkingSessionRepository(conn)
    working_session_service = WorkingSessionService(
        working_sessions_repo,
        transition_factory=TransitionFactory(),
    )

    return Container(
        conn=conn,
        working_sessions_repo=working_sessions_repo,
        working_session_service=working_session_service,
    )
