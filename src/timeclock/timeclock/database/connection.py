from __future__ import annotations

from dataclasses import dataclass

import mysql.connector

from ..core.constants import DEFAULT_LOCK_WAIT_TIMEOUT


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    lock_wait_timeout: int = DEFAULT_LOCK_WAIT_TIMEOUT


class DatabaseConnection:
    """DB connection factory, one instance per container.

    Note: One short-lived connection per transaction; the row lock taken by a
    transition lives exactly as long as that connection's transaction.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def lock_wait_timeout(self) -> int:
        return int(self._config.lock_wait_timeout)

    def connect(self):
        conn = mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            autocommit=False,
        )
        try:
            cur = conn.cursor()
            try:
                cur.execute("SET SESSION innodb_lock_wait_timeout = %s", (self.lock_wait_timeout,))
            finally:
                cur.close()
        except mysql.connector.Error:
            conn.close()
            raise
        return conn
