"""Shared fixtures: file-backed SQLite stores with a sleep() SQL function for deadline tests, and a MySQL server for the integration tests."""

import os
import time

import pytest
from sqlalchemy import event
from sqlalchemy.engine import make_url

from rolodex.infrastructure import (
    PoolManager,
    SqlContactRepository,
    TimedExecutor,
    contacts_table,
    ensure_schema,
)

MYSQL_IMAGE = "mysql:8.0"


def _register_sleep(dbapi_connection, connection_record):
    dbapi_connection.create_function("sleep", 1, time.sleep)


def make_pool(path, size: int = 4, acquire_timeout: float = 2.0) -> PoolManager:
    pool = PoolManager(f"sqlite:///{path}", size=size, acquire_timeout=acquire_timeout)
    event.listen(pool.engine, "connect", _register_sleep)
    return pool


@pytest.fixture
def pool(tmp_path):
    pool = make_pool(tmp_path / "contacts.db")
    try:
        yield pool
    finally:
        pool.dispose()


@pytest.fixture
def table(pool):
    table = contacts_table()
    ensure_schema(pool.engine, table)
    return table


@pytest.fixture
def executor(pool, table):
    executor = TimedExecutor(pool, default_timeout=5.0)
    try:
        yield executor
    finally:
        executor.close()


@pytest.fixture
def sql_repo(executor, table):
    return SqlContactRepository(executor, table)


@pytest.fixture(scope="session")
def mysql_url():
    """URL of a disposable MySQL 8 server.

    TEST_MYSQL_URL points at an existing server; otherwise a testcontainers
    MySqlContainer is started for the session. Skips when neither is available.
    """
    url = os.environ.get("TEST_MYSQL_URL")
    if url:
        yield url
        return
    docker = pytest.importorskip("docker")
    mysql = pytest.importorskip("testcontainers.mysql")
    from docker.errors import DockerException

    try:
        docker.from_env().ping()
    except DockerException as e:
        pytest.skip(f"Docker is not available: {e}")
    with mysql.MySqlContainer(MYSQL_IMAGE) as container:
        url = make_url(container.get_connection_url()).set(drivername="mysql+pymysql")
        yield url.render_as_string(hide_password=False)
