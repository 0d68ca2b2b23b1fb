"""Data transfer objects for the contact use cases."""

from dataclasses import dataclass, field
from enum import Enum


class SearchField(str, Enum):
    """Which column(s) a search term is matched against."""

    PHONE = "phone"
    NAME = "name"
    BOTH = "both"

    @classmethod
    def parse(cls, value: str | None) -> "SearchField":
        """Map a raw selector to a field; absent or unrecognized means BOTH."""
        if value is None:
            return cls.BOTH
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.BOTH


@dataclass(frozen=True)
class SearchPage:
    page: int
    limit: int
    results: list[dict] = field(default_factory=list)


@dataclass(frozen=True)
class ListingPage:
    page: int
    limit: int
    numbers: list[dict] = field(default_factory=list)


@dataclass(frozen=True)
class ContactCreated:
    id: int
    phone: str
    name: str


@dataclass(frozen=True)
class BatchSynced:
    """affected_rows is the store's own count (inserts and updates), not a count of new records."""

    submitted: int
    affected_rows: int
