"""Integration tests pinning MySQL upsert arithmetic against a real MySQL 8 server.

The server comes from the mysql_url fixture: a testcontainers MySqlContainer, or
TEST_MYSQL_URL (e.g. mysql+pymysql://root:pw@localhost:3306/test). Skipped without Docker.
"""

import pytest
from sqlalchemy import text

from rolodex.application import SearchField, StoreError
from rolodex.domain import Contact
from rolodex.infrastructure import (
    PoolManager,
    SqlContactRepository,
    TimedExecutor,
    contacts_table,
    ensure_schema,
)


@pytest.fixture(scope="module")
def mysql_pool(mysql_url):
    pool = PoolManager(mysql_url, size=2)
    pool.probe(max_attempts=1, delay=0)
    try:
        yield pool
    finally:
        pool.dispose()


@pytest.fixture
def repo(mysql_pool):
    """Fresh table per test so tests are independent."""
    table = contacts_table("rolodex_test_contacts")
    with mysql_pool.lease() as conn:
        conn.execute(text("DROP TABLE IF EXISTS rolodex_test_contacts"))
        conn.commit()
    ensure_schema(mysql_pool.engine, table)
    executor = TimedExecutor(mysql_pool)
    try:
        yield SqlContactRepository(executor, table)
    finally:
        executor.close()


def test_insert_counts_one_per_row(repo):
    assert repo.sync([Contact(phone="1", name="a"), Contact(phone="2", name="b")]) == 2


def test_changed_row_counts_two_and_unchanged_one(repo):
    repo.sync([Contact(phone="1", name="a"), Contact(phone="2", name="b")])
    # "1" changes (2), "2" is rewritten with identical values (1 under CLIENT_FOUND_ROWS).
    assert repo.sync([Contact(phone="1", name="a2"), Contact(phone="2", name="b")]) == 3


def test_duplicate_in_batch_last_wins(repo):
    affected = repo.sync([Contact(phone="7", name="first"), Contact(phone="7", name="second")])
    assert affected == 3
    results = repo.search("7", SearchField.PHONE, 1, 10)
    assert [r["name"] for r in results] == ["second"]


def test_negative_offset_rejected(repo):
    with pytest.raises(StoreError):
        repo.list_phones(0, 10)
