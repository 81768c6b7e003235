"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool so that request handlers running
in FastAPI's worker threads can share it safely. Callers beyond the pool
size wait for a connection to be returned instead of failing.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN
from utils.errors import StartupError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class Database:
    """
    Owns one connection pool. Constructed explicitly and handed to
    whatever needs the store, so tests can swap in a double.
    """

    def __init__(
        self,
        dsn: str = DATABASE_URL,
        min_conn: int = DB_POOL_MIN,
        max_conn: int = DB_POOL_MAX,
    ) -> None:
        self.dsn = dsn
        self.min_conn = min_conn
        self.max_conn = max_conn
        self._pool: Optional[pool.ThreadedConnectionPool] = None
        self._slots = threading.BoundedSemaphore(max_conn)

    def open(self) -> None:
        """
        Create the pool and verify the server answers.

        Raises:
            StartupError: If the database is unreachable.
        """
        if self._pool is not None:
            return
        try:
            self._pool = pool.ThreadedConnectionPool(self.min_conn, self.max_conn, self.dsn)
        except psycopg2.Error as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise StartupError(f"Error connecting to database: {e}") from e

        try:
            self.ping()
        except StorageError as e:
            self.close()
            raise StartupError(f"Error pinging database: {e}") from e
        logger.info("Successfully connected to database")

    @contextmanager
    def connection(self) -> Iterator["psycopg2.extensions.connection"]:
        """
        Borrow a connection from the pool for the duration of a ``with`` block.

        Raises:
            StorageError: If the pool is not open or no connection can be obtained.
        """
        if self._pool is None:
            raise StorageError("Database pool not initialized. Call open() first.")
        # Blocks while max_conn connections are checked out; the pool itself would raise.
        self._slots.acquire()
        try:
            try:
                conn = self._pool.getconn()
            except (psycopg2.Error, pool.PoolError) as e:
                raise StorageError(str(e)) from e
            try:
                yield conn
            finally:
                # Broken connections are discarded instead of going back to the pool.
                self._pool.putconn(conn, close=bool(conn.closed))
        finally:
            self._slots.release()

    def ping(self) -> None:
        """Run ``SELECT 1``; raises StorageError when the store does not answer."""
        with self.connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1;")
                    cur.fetchone()
                conn.rollback()
            except psycopg2.Error as e:
                raise StorageError(str(e)) from e

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")
