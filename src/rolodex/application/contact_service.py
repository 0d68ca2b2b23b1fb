"""Contact search, suggestions, listing, creation and batch sync.

Validates and defaults raw request values, then delegates to the repository.
"""

import logging
import re
from collections.abc import Mapping

from rolodex.application.dto import (
    BatchSynced,
    ContactCreated,
    ListingPage,
    SearchField,
    SearchPage,
)
from rolodex.application.errors import EmptyBatch, ValidationError
from rolodex.application.ports import ContactRepository
from rolodex.domain import Contact

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 100
DEFAULT_SUGGESTION_LIMIT = 5

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: int | str | None, default: int) -> int:
    """Leading-integer parse: "3abc" -> 3, "1.9" -> 1; absent or non-numeric -> default.

    Zero and negative values are returned unchanged.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    return int(match.group(1))


def _required_term(q: str | None) -> str:
    term = (q or "").strip()
    if not term:
        raise ValidationError('Search parameter "q" is required.')
    return term


class ContactService:
    """Use cases over a ContactRepository. Holds no state besides the repository."""

    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    def search(
        self,
        q: str | None,
        field: str | None = None,
        page: int | str | None = None,
        limit: int | str | None = None,
    ) -> SearchPage:
        term = _required_term(q)
        selector = SearchField.parse(field)
        page_n = parse_int(page, DEFAULT_PAGE)
        limit_n = parse_int(limit, DEFAULT_LIMIT)
        logger.info(
            "Search: term=%r field=%s page=%d limit=%d",
            term, selector.value, page_n, limit_n,
        )
        results = self._repo.search(term, selector, page_n, limit_n)
        return SearchPage(page=page_n, limit=limit_n, results=results)

    def suggest(
        self,
        q: str | None,
        field: str | None = None,
        limit: int | str | None = None,
    ) -> list[dict]:
        term = _required_term(q)
        limit_n = parse_int(limit, DEFAULT_SUGGESTION_LIMIT)
        return self._repo.suggestions(term, SearchField.parse(field), limit_n)

    def list_numbers(
        self, page: int | str | None = None, limit: int | str | None = None
    ) -> ListingPage:
        page_n = parse_int(page, DEFAULT_PAGE)
        limit_n = parse_int(limit, DEFAULT_LIMIT)
        numbers = self._repo.list_phones(page_n, limit_n)
        return ListingPage(page=page_n, limit=limit_n, numbers=numbers)

    def create(
        self, phone: str | None, name: str | None, photo_url: str | None = None
    ) -> ContactCreated:
        """Insert a contact, merging name and photo_url into an existing record with the same phone."""
        if not (phone or "").strip() or not (name or "").strip():
            raise ValidationError("Both phone and name are required.")
        try:
            contact = Contact(phone=phone, name=name, photo_url=photo_url)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        contact_id = self._repo.upsert(contact)
        return ContactCreated(id=contact_id, phone=contact.phone, name=contact.name)

    def sync(self, contacts: object) -> BatchSynced:
        """Apply a client-submitted batch of {phone, names, photo_url?} entries."""
        if not isinstance(contacts, list) or not contacts:
            raise EmptyBatch()
        batch = [_candidate(i, entry) for i, entry in enumerate(contacts)]
        affected = self._repo.sync(batch)
        logger.info("Synced batch: submitted=%d affected_rows=%d", len(batch), affected)
        return BatchSynced(submitted=len(batch), affected_rows=affected)


def _candidate(index: int, entry: object) -> Contact:
    if not isinstance(entry, Mapping):
        raise ValidationError(f"contacts[{index}] must be an object.")
    phone = entry.get("phone")
    names = entry.get("names")
    photo_url = entry.get("photo_url")
    if not isinstance(phone, str) or not phone.strip():
        raise ValidationError(f"contacts[{index}].phone is required.")
    if not isinstance(names, str) or not names.strip():
        raise ValidationError(f"contacts[{index}].names is required.")
    if photo_url is not None and not isinstance(photo_url, str):
        raise ValidationError(f"contacts[{index}].photo_url must be a string.")
    try:
        return Contact(phone=phone, name=names, photo_url=photo_url)
    except ValueError as e:
        raise ValidationError(f"contacts[{index}]: {e}") from e
