"""Deadline-bounded statement execution.

The caller leases a connection first, waiting in the pool like any driver
call (PoolExhausted after the pool's acquire timeout). The statement then runs
on a worker thread that executes, commits and releases; the caller waits for
the worker or the deadline, whichever comes first.

On timeout, work that has not started is cancelled and its connection
released. A statement already running is not interrupted: it may still commit
after the caller got QueryTimeout, and its connection is released only when it
finishes.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field

from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import Connection
from sqlalchemy.sql import Executable

from rolodex.application.errors import QueryTimeout, RolodexError, StoreError
from rolodex.infrastructure.pool import PoolManager

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class RowSet:
    """Buffered statement result. rowcount is the store's affected-row count (-1 if unknown)."""

    rows: list[dict] = field(default_factory=list)
    rowcount: int = -1


class TimedExecutor:
    """Runs statements through the pool with an upper-bound deadline.

    Every submitted task holds a lease, so with one worker per pooled
    connection tasks do not wait for a thread.
    """

    def __init__(
        self,
        pool: PoolManager,
        *,
        default_timeout: float = DEFAULT_TIMEOUT,
        max_workers: int | None = None,
    ) -> None:
        self.pool = pool
        self.default_timeout = default_timeout
        self._workers = ThreadPoolExecutor(
            max_workers=max_workers or pool.size,
            thread_name_prefix="rolodex-db",
        )

    @property
    def dialect_name(self) -> str:
        return self.pool.dialect_name

    def execute(
        self,
        statement: Executable,
        params: dict | None = None,
        timeout: float | None = None,
    ) -> RowSet:
        """Run statement with params; raise QueryTimeout, StoreError or a PoolError."""
        deadline = self.default_timeout if timeout is None else timeout
        conn = self.pool.acquire()
        try:
            future = self._workers.submit(self._run, conn, statement, params or {})
        except RuntimeError:
            self.pool.release(conn)
            raise
        try:
            return future.result(timeout=deadline)
        except FutureTimeout:
            if future.cancel():
                self.pool.release(conn)
                logger.warning("Query exceeded deadline of %.3fs before it started; dropped", deadline)
            else:
                logger.warning("Query exceeded deadline of %.3fs; store call left running", deadline)
            raise QueryTimeout(deadline) from None

    def _run(self, conn: Connection, statement: Executable, params: dict) -> RowSet:
        try:
            result = conn.execute(statement, params)
            rows = [dict(row._mapping) for row in result] if result.returns_rows else []
            rowcount = result.rowcount
            conn.commit()
        except sa_exc.DBAPIError as e:
            message = str(e.orig) if e.orig is not None else str(e)
            logger.error("Store error: %s", message)
            raise StoreError(message) from e
        except sa_exc.SQLAlchemyError as e:
            logger.error("Store error: %s", e)
            raise StoreError(str(e)) from e
        except RolodexError:
            raise
        except Exception as e:
            # Driver failures SQLAlchemy does not wrap, e.g. OverflowError binding a huge int.
            logger.error("Store error: %s: %s", type(e).__name__, e)
            raise StoreError(f"{type(e).__name__}: {e}") from e
        finally:
            self.pool.release(conn)
        return RowSet(rows=rows, rowcount=rowcount)

    def close(self, wait: bool = True) -> None:
        """Stop accepting work; with wait=True block until in-flight statements finish."""
        self._workers.shutdown(wait=wait)
