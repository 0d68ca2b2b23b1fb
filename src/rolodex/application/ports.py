"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Sequence
from typing import Protocol

from rolodex.application.dto import SearchField
from rolodex.domain import Contact


class ContactRepository(Protocol):
    """Persists and queries phone-keyed contact records."""

    def search(
        self, term: str, field: SearchField, page: int, limit: int
    ) -> list[dict]:
        """Return full records matching term, one page of them."""
        ...

    def suggestions(self, term: str, field: SearchField, limit: int) -> list[dict]:
        """Return up to limit partial records (phone, name, photo_url) matching term."""
        ...

    def list_phones(self, page: int, limit: int) -> list[dict]:
        """Return one page of {phone} rows."""
        ...

    def upsert(self, contact: Contact) -> int:
        """Insert or merge one contact by phone. Returns the record id."""
        ...

    def sync(self, contacts: Sequence[Contact]) -> int:
        """Insert or merge a batch by phone. Returns the store's affected-row count."""
        ...
