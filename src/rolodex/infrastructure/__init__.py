"""Infrastructure layer: pool, timed execution, statement builders and repositories."""

from rolodex.infrastructure.config import Settings, configure_logging, load_env
from rolodex.infrastructure.executor import RowSet, TimedExecutor
from rolodex.infrastructure.memory_repository import InMemoryContactRepository
from rolodex.infrastructure.pool import PoolManager
from rolodex.infrastructure.queries import QueryBuilder
from rolodex.infrastructure.schema import contacts_table, ensure_schema
from rolodex.infrastructure.sql_repository import SqlContactRepository
from rolodex.infrastructure.sync import SyncEngine

__all__ = [
    "InMemoryContactRepository",
    "PoolManager",
    "QueryBuilder",
    "RowSet",
    "Settings",
    "SqlContactRepository",
    "SyncEngine",
    "TimedExecutor",
    "configure_logging",
    "contacts_table",
    "ensure_schema",
    "load_env",
]
