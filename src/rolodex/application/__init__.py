"""Application layer: use cases, ports, DTOs and errors. Depends only on domain."""

from rolodex.application.contact_service import ContactService, parse_int
from rolodex.application.dto import (
    BatchSynced,
    ContactCreated,
    ListingPage,
    SearchField,
    SearchPage,
)
from rolodex.application.errors import (
    EmptyBatch,
    PoolError,
    PoolExhausted,
    QueryTimeout,
    RolodexError,
    StoreError,
    Unreachable,
    ValidationError,
)
from rolodex.application.ports import ContactRepository

__all__ = [
    "BatchSynced",
    "ContactCreated",
    "ContactRepository",
    "ContactService",
    "EmptyBatch",
    "ListingPage",
    "PoolError",
    "PoolExhausted",
    "QueryTimeout",
    "RolodexError",
    "SearchField",
    "SearchPage",
    "StoreError",
    "Unreachable",
    "ValidationError",
    "parse_int",
]
