"""
MySQL connection pool handle. Creates the database and users table if not exists.

The handle is constructed explicitly, opened at startup and closed at shutdown;
repositories receive it by reference.
"""
import asyncio
import logging
import queue
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Union

import pymysql
import pymysql.cursors

from users_backend.core.errors import DatabaseUnavailableError
from users_backend.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# UNIQUE on username makes concurrent creates of the same new username fail at storage level.
CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
  id INT AUTO_INCREMENT PRIMARY KEY,
  username VARCHAR(255) NOT NULL UNIQUE,
  password VARCHAR(255) NOT NULL,
  salt VARCHAR(255) NOT NULL,
  admin TINYINT(1) NOT NULL DEFAULT 0
);
"""


@dataclass(frozen=True)
class ExecuteResult:
    """Metadata of a statement that returns no rows."""

    insert_id: int
    affected_rows: int


QueryResult = Union[List[dict], ExecuteResult]


class MySQLConnection:
    """Bounded pool of pymysql connections with async execute()."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._pool: "queue.LifoQueue[pymysql.connections.Connection]" = queue.LifoQueue()
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    def _connect(self, with_database: bool = True) -> pymysql.connections.Connection:
        s = self._settings
        kwargs: dict = dict(
            host=s.db_host,
            port=s.db_port,
            user=s.db_user,
            password=s.db_password,
            cursorclass=pymysql.cursors.DictCursor,
        )
        if with_database:
            kwargs["database"] = s.db_database
        return pymysql.connect(**kwargs)

    def _ensure_database_exists(self) -> None:
        """Create the database if it does not exist (connect without database first)."""
        # Escape backticks in identifier for safe SQL
        db_name = self._settings.db_database.replace("`", "``")
        conn = self._connect(with_database=False)
        try:
            with conn.cursor() as cur:
                cur.execute("CREATE DATABASE IF NOT EXISTS `%s`" % db_name)
            conn.commit()
        finally:
            conn.close()

    def open(self) -> None:
        """Create schema if needed and fill the pool. Raises if MySQL is unreachable."""
        if self._opened:
            return
        self._ensure_database_exists()
        conn = self._connect()
        try:
            with conn.cursor() as cur:
                cur.execute(CREATE_USERS_TABLE)
            conn.commit()
        except Exception:
            conn.close()
            raise
        self._pool.put(conn)
        for _ in range(self._settings.db_pool_size - 1):
            self._pool.put(self._connect())
        self._opened = True
        logger.info(
            "MySQL pool opened (host=%s, database=%s, size=%s)",
            self._settings.db_host,
            self._settings.db_database,
            self._settings.db_pool_size,
        )

    def close(self) -> None:
        """Close every pooled connection. Safe to call more than once."""
        self._opened = False
        while True:
            try:
                conn = self._pool.get_nowait()
            except queue.Empty:
                break
            try:
                conn.close()
            except pymysql.MySQLError as e:
                logger.warning("Error closing MySQL connection: %s", e)
        logger.info("MySQL pool closed")

    @contextmanager
    def _borrow(self) -> Iterator[pymysql.connections.Connection]:
        if not self._opened:
            raise DatabaseUnavailableError()
        conn = self._pool.get()
        try:
            conn.ping(reconnect=True)
            yield conn
        finally:
            if self._opened:
                self._pool.put(conn)
            else:
                conn.close()

    def _execute_sync(self, query: str, params: Sequence[Any]) -> QueryResult:
        with self._borrow() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(query, tuple(params))
                    if cur.description is not None:
                        rows = list(cur.fetchall())
                        conn.commit()
                        return rows
                    result = ExecuteResult(insert_id=cur.lastrowid, affected_rows=cur.rowcount)
                conn.commit()
                return result
            except Exception:
                logger.exception("MySQL query failed")
                try:
                    conn.rollback()
                except pymysql.MySQLError as e:
                    logger.warning("Rollback failed: %s", e)
                raise

    async def execute(self, query: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run one parameterized statement off the event loop.

        Returns row dicts for statements with a result set, else ExecuteResult.
        """
        return await asyncio.to_thread(self._execute_sync, query, params)

    async def ping(self) -> bool:
        try:
            await self.execute("SELECT 1")
        except (pymysql.MySQLError, DatabaseUnavailableError):
            return False
        return True
