"""In-memory implementation of ContactRepository (no DB).

Mirrors the relational matching rules; affected rows count 1 per row inserted
or updated, like SQLite.
"""

from collections.abc import Sequence

from rolodex.application.dto import SearchField
from rolodex.domain import Contact
from rolodex.infrastructure.phone import strip_whitespace


class InMemoryContactRepository:
    """Stores contacts in memory keyed by phone. Order preserved by first insertion."""

    def __init__(self) -> None:
        self._by_phone: dict[str, Contact] = {}
        self._next_id = 1

    def _matches(self, contact: Contact, term: str, field: SearchField) -> bool:
        if field in (SearchField.PHONE, SearchField.BOTH):
            if strip_whitespace(term) in strip_whitespace(contact.phone):
                return True
        if field in (SearchField.NAME, SearchField.BOTH):
            if term.lower() in contact.name.lower():
                return True
        return False

    def _page(self, items: list, page: int, limit: int) -> list:
        offset = max((page - 1) * limit, 0)
        if limit < 0:
            return items[offset:]
        return items[offset:offset + limit]

    def search(
        self, term: str, field: SearchField, page: int, limit: int
    ) -> list[dict]:
        found = [
            {"id": c.id, "phone": c.phone, "name": c.name, "photo_url": c.photo_url}
            for c in self._by_phone.values()
            if self._matches(c, term, field)
        ]
        return self._page(found, page, limit)

    def suggestions(self, term: str, field: SearchField, limit: int) -> list[dict]:
        found = [
            {"phone": c.phone, "name": c.name, "photo_url": c.photo_url}
            for c in self._by_phone.values()
            if self._matches(c, term, field)
        ]
        return self._page(found, 1, limit)

    def list_phones(self, page: int, limit: int) -> list[dict]:
        return self._page([{"phone": p} for p in self._by_phone], page, limit)

    def upsert(self, contact: Contact) -> int:
        self.sync([contact])
        return self._by_phone[contact.phone].id

    def sync(self, contacts: Sequence[Contact]) -> int:
        for contact in contacts:
            existing = self._by_phone.get(contact.phone)
            contact_id = existing.id if existing else self._next_id
            if existing is None:
                self._next_id += 1
            self._by_phone[contact.phone] = Contact(
                id=contact_id,
                phone=contact.phone,
                name=contact.name,
                photo_url=contact.photo_url,
            )
        return len(contacts)

    def get(self, phone: str) -> Contact | None:
        return self._by_phone.get(phone)
