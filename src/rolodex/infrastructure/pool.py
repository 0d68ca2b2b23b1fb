"""Bounded connection pool with a startup readiness probe.

Wraps a SQLAlchemy engine whose QueuePool holds at most `size` connections and
never overflows. Acquire blocks while every connection is leased, up to
`acquire_timeout` seconds. The pool is an owned object: create it at startup,
dispose it at shutdown.
"""

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import QueuePool

from rolodex.application.errors import PoolError, PoolExhausted, Unreachable

logger = logging.getLogger(__name__)

DEFAULT_POOL_SIZE = 10
DEFAULT_ACQUIRE_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 10
DEFAULT_PROBE_ATTEMPTS = 3
DEFAULT_PROBE_DELAY = 3.0


def _connect_args(url: str) -> dict:
    if url.startswith("mysql"):
        return {"connect_timeout": DEFAULT_CONNECT_TIMEOUT}
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    if url.startswith("postgresql"):
        return {"connect_timeout": DEFAULT_CONNECT_TIMEOUT}
    return {}


class PoolManager:
    """Owns the engine and hands out connection leases."""

    def __init__(
        self,
        url: str,
        *,
        size: int = DEFAULT_POOL_SIZE,
        acquire_timeout: float = DEFAULT_ACQUIRE_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if size < 1:
            raise ValueError("Pool size must be at least 1.")
        self.size = size
        self.acquire_timeout = acquire_timeout
        self._sleep = sleep
        self.engine: Engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=size,
            max_overflow=0,
            pool_timeout=acquire_timeout,
            pool_pre_ping=True,
            connect_args=_connect_args(url),
        )

    @classmethod
    def from_settings(cls, settings) -> "PoolManager":
        return cls(
            settings.database_url,
            size=settings.pool_size,
            acquire_timeout=settings.pool_timeout,
        )

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @property
    def leased(self) -> int:
        """Number of connections currently checked out."""
        return self.engine.pool.checkedout()

    def acquire(self) -> Connection:
        """Lease a connection, blocking while the pool is fully leased."""
        try:
            return self.engine.connect()
        except sa_exc.TimeoutError as e:
            logger.warning(
                "Pool exhausted: %d/%d leased after %.1fs wait",
                self.leased, self.size, self.acquire_timeout,
            )
            raise PoolExhausted(str(e)) from e
        except sa_exc.SQLAlchemyError as e:
            raise PoolError(_driver_message(e)) from e

    def release(self, conn: Connection) -> None:
        """Return a leased connection to the pool. Uncommitted work is rolled back."""
        conn.close()

    @contextmanager
    def lease(self) -> Iterator[Connection]:
        """Scoped acquisition: the connection goes back to the pool on every exit path."""
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    def probe(
        self,
        max_attempts: int = DEFAULT_PROBE_ATTEMPTS,
        delay: float = DEFAULT_PROBE_DELAY,
    ) -> None:
        """Acquire-then-release up to max_attempts times, sleeping delay seconds between failures.

        Raises Unreachable if no attempt succeeds.
        """
        last_error = "no attempts made"
        for attempt in range(1, max_attempts + 1):
            try:
                with self.lease():
                    pass
            except PoolError as e:
                last_error = str(e)
                logger.error(
                    "Database connection failed (attempt %d/%d): %s",
                    attempt, max_attempts, last_error,
                )
                if attempt < max_attempts:
                    logger.info("Retrying in %.1fs...", delay)
                    self._sleep(delay)
                continue
            logger.info("Connected to database (attempt %d)", attempt)
            return
        raise Unreachable(max_attempts, last_error)

    def dispose(self) -> None:
        """Close idle connections. Leased connections are closed when released."""
        self.engine.dispose()
        logger.info("Connection pool disposed")


def _driver_message(e: sa_exc.SQLAlchemyError) -> str:
    orig = getattr(e, "orig", None)
    return str(orig) if orig is not None else str(e)
