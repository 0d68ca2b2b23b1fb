"""Batch upsert of client-submitted contacts keyed on phone.

A batch becomes one multi-row INSERT with the dialect's conflict clause; on a
phone conflict name and photo_url take the incoming values, so a missing photo
overwrites a stored one with NULL. Within a batch the last occurrence of a
phone wins: MySQL and SQLite apply the rows in statement order, PostgreSQL
cannot touch a row twice in one statement so duplicates are collapsed first.

Affected-row arithmetic is the store's:
- MySQL (CLIENT_FOUND_ROWS, set by SQLAlchemy): 1 per insert, 2 per changed
  row, 1 per row rewritten with identical values.
- SQLite, PostgreSQL: 1 per row inserted or updated.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.schema import Table
from sqlalchemy.sql.dml import Insert

from rolodex.application.errors import EmptyBatch, StoreError
from rolodex.domain import Contact
from rolodex.infrastructure.executor import TimedExecutor
from rolodex.infrastructure.queries import QueryBuilder

logger = logging.getLogger(__name__)


def _row(contact: Contact) -> dict:
    return {
        "phone": contact.phone,
        "name": contact.name,
        "photo_url": contact.photo_url,
    }


def collapse_last_wins(records: Sequence[Contact]) -> list[Contact]:
    """Keep only the last record per phone, in order of each phone's last occurrence."""
    last: dict[str, Contact] = {}
    for record in records:
        last.pop(record.phone, None)
        last[record.phone] = record
    return list(last.values())


def build_upsert(table: Table, dialect_name: str, records: Sequence[Contact]) -> Insert:
    """One INSERT ... ON CONFLICT/ON DUPLICATE KEY statement for the whole batch."""
    if dialect_name == "mysql":
        stmt = mysql.insert(table).values([_row(r) for r in records])
        return stmt.on_duplicate_key_update(
            name=stmt.inserted.name,
            photo_url=stmt.inserted.photo_url,
        )
    if dialect_name == "postgresql":
        stmt = postgresql.insert(table).values(
            [_row(r) for r in collapse_last_wins(records)]
        )
    elif dialect_name == "sqlite":
        stmt = sqlite.insert(table).values([_row(r) for r in records])
    else:
        raise ValueError(f"Upsert is not supported for dialect {dialect_name!r}")
    return stmt.on_conflict_do_update(
        index_elements=[table.c.phone],
        set_={"name": stmt.excluded.name, "photo_url": stmt.excluded.photo_url},
    )


class SyncEngine:
    """Applies contact batches through the timed executor."""

    def __init__(
        self,
        executor: TimedExecutor,
        table: Table,
        *,
        timeout: float | None = None,
    ) -> None:
        self._executor = executor
        self._table = table
        self._queries = QueryBuilder(table)
        self._timeout = timeout

    def apply_batch(self, records: Sequence[Contact]) -> int:
        """Upsert every record in one statement. Returns the store's affected-row count."""
        if len(records) == 0:
            raise EmptyBatch()
        stmt = build_upsert(self._table, self._executor.dialect_name, records)
        result = self._executor.execute(stmt, timeout=self._timeout)
        logger.info("Applied batch: records=%d affected_rows=%d", len(records), result.rowcount)
        return result.rowcount

    def upsert_one(self, record: Contact) -> int:
        """Upsert a single record and return its id."""
        self.apply_batch([record])
        stmt, params = self._queries.build_id_lookup(record.phone)
        rows = self._executor.execute(stmt, params, timeout=self._timeout).rows
        if not rows:
            raise StoreError(f"Upserted contact not found: {record.phone}")
        return rows[0]["id"]
