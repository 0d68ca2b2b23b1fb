"""
Rolodex core: phone-keyed contact directory, clean-architecture layout.

- domain: Contact entity. No outer dependencies.
- application: ContactService, ContactRepository port, DTOs, error taxonomy.
- infrastructure: PoolManager, TimedExecutor, QueryBuilder, SyncEngine and the
  SQL / in-memory repositories.
"""

from rolodex.application import (
    BatchSynced,
    ContactCreated,
    ContactRepository,
    ContactService,
    ListingPage,
    SearchField,
    SearchPage,
)
from rolodex.domain import Contact
from rolodex.infrastructure import (
    InMemoryContactRepository,
    PoolManager,
    SqlContactRepository,
    TimedExecutor,
)

__all__ = [
    "BatchSynced",
    "Contact",
    "ContactCreated",
    "ContactRepository",
    "ContactService",
    "InMemoryContactRepository",
    "ListingPage",
    "PoolManager",
    "SearchField",
    "SearchPage",
    "SqlContactRepository",
    "TimedExecutor",
]
