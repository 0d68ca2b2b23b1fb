"""Domain entities: Contact."""

from dataclasses import dataclass

PHONE_MAX_LENGTH = 64
NAME_MAX_LENGTH = 255


@dataclass(frozen=True)
class Contact:
    """
    A phone-keyed contact record.
    The phone is kept exactly as submitted (spaces included); matching ignores whitespace.
    photo_url is None when absent. Empty strings are not coerced here.
    """

    phone: str
    name: str
    photo_url: str | None = None
    id: int | None = None

    def __post_init__(self):
        if not self.phone or not self.phone.strip():
            raise ValueError("Contact phone must be non-empty.")
        if len(self.phone) > PHONE_MAX_LENGTH:
            raise ValueError(f"Contact phone must be at most {PHONE_MAX_LENGTH} chars.")
        if not self.name or not self.name.strip():
            raise ValueError("Contact name must be non-empty.")
        if len(self.name) > NAME_MAX_LENGTH:
            raise ValueError(f"Contact name must be at most {NAME_MAX_LENGTH} chars.")
