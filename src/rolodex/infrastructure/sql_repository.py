"""Relational implementation of ContactRepository.

Reads go through QueryBuilder, writes through SyncEngine; every statement is
run by the TimedExecutor, never directly against the pool.
"""

from collections.abc import Sequence

from sqlalchemy.schema import Table

from rolodex.application.dto import SearchField
from rolodex.domain import Contact
from rolodex.infrastructure.executor import TimedExecutor
from rolodex.infrastructure.queries import QueryBuilder
from rolodex.infrastructure.sync import SyncEngine


class SqlContactRepository:
    def __init__(self, executor: TimedExecutor, table: Table) -> None:
        self._executor = executor
        self._queries = QueryBuilder(table)
        self._sync = SyncEngine(executor, table)

    def search(
        self, term: str, field: SearchField, page: int, limit: int
    ) -> list[dict]:
        stmt, params = self._queries.build_search(term, field, page, limit)
        return self._executor.execute(stmt, params).rows

    def suggestions(self, term: str, field: SearchField, limit: int) -> list[dict]:
        stmt, params = self._queries.build_suggestions(term, field, limit)
        return self._executor.execute(stmt, params).rows

    def list_phones(self, page: int, limit: int) -> list[dict]:
        stmt, params = self._queries.build_listing(page, limit)
        return self._executor.execute(stmt, params).rows

    def upsert(self, contact: Contact) -> int:
        return self._sync.upsert_one(contact)

    def sync(self, contacts: Sequence[Contact]) -> int:
        return self._sync.apply_batch(contacts)
