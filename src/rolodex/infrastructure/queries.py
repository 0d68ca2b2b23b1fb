"""Search, suggestion and listing statements for the contact table.

Every builder returns (statement, params); values travel as bound parameters.
Page and limit are not validated: offset = (page - 1) * limit even when that
is negative, and limit has no upper bound. How a negative offset is treated is
up to the store (SQLite reads it as zero, MySQL and PostgreSQL reject it).
"""

from sqlalchemy import Integer, bindparam, or_, select
from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.schema import Table

from rolodex.application.dto import SearchField
from rolodex.infrastructure.phone import strip_whitespace, stripped_column


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


class QueryBuilder:
    def __init__(self, table: Table) -> None:
        self.table = table

    def _predicate(self, term: str, field: SearchField) -> tuple[ColumnElement, dict]:
        t = self.table
        params: dict = {}
        clauses = []
        if field in (SearchField.PHONE, SearchField.BOTH):
            clauses.append(stripped_column(t.c.phone).like(bindparam("phone_term")))
            params["phone_term"] = f"%{strip_whitespace(term)}%"
        if field in (SearchField.NAME, SearchField.BOTH):
            clauses.append(t.c.name.ilike(bindparam("name_term")))
            params["name_term"] = f"%{term}%"
        return or_(*clauses), params

    def _paged(self, stmt: Select, params: dict, limit: int, offset: int | None) -> Select:
        stmt = stmt.order_by(self.table.c.id).limit(bindparam("limit", type_=Integer))
        params["limit"] = limit
        if offset is not None:
            stmt = stmt.offset(bindparam("offset", type_=Integer))
            params["offset"] = offset
        return stmt

    def build_search(
        self, term: str, field: SearchField, page: int, limit: int
    ) -> tuple[Select, dict]:
        t = self.table
        where, params = self._predicate(term, field)
        stmt = select(t.c.id, t.c.phone, t.c.name, t.c.photo_url).where(where)
        return self._paged(stmt, params, limit, page_offset(page, limit)), params

    def build_suggestions(
        self, term: str, field: SearchField, limit: int
    ) -> tuple[Select, dict]:
        t = self.table
        where, params = self._predicate(term, field)
        stmt = select(t.c.phone, t.c.name, t.c.photo_url).where(where)
        return self._paged(stmt, params, limit, None), params

    def build_listing(self, page: int, limit: int) -> tuple[Select, dict]:
        params: dict = {}
        stmt = select(self.table.c.phone)
        return self._paged(stmt, params, limit, page_offset(page, limit)), params

    def build_id_lookup(self, phone: str) -> tuple[Select, dict]:
        t = self.table
        stmt = select(t.c.id).where(t.c.phone == bindparam("phone"))
        return stmt, {"phone": phone}
