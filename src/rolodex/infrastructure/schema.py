"""Contact table definition (SQLAlchemy Core)."""

import logging

from sqlalchemy import Column, Integer, MetaData, String, Table
from sqlalchemy.engine import Engine

from rolodex.domain.entities import NAME_MAX_LENGTH, PHONE_MAX_LENGTH

logger = logging.getLogger(__name__)

PHOTO_URL_MAX_LENGTH = 1024


def contacts_table(name: str = "contacts", metadata: MetaData | None = None) -> Table:
    """Build the contact table. phone carries the unique constraint used by upserts."""
    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("phone", String(PHONE_MAX_LENGTH), nullable=False, unique=True),
        Column("name", String(NAME_MAX_LENGTH), nullable=False),
        Column("photo_url", String(PHOTO_URL_MAX_LENGTH), nullable=True),
    )


def ensure_schema(engine: Engine, table: Table) -> None:
    """Create the contact table if it does not exist. Idempotent."""
    table.metadata.create_all(engine, tables=[table], checkfirst=True)
    logger.info("Contact table ready: %s", table.name)
