"""Phone matching normalization. Stored values keep their formatting.

Matching ignores the same blank characters on both sides: the search term is
stripped in Python, the stored column in SQL.
"""

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

# Blanks a phone number picks up from copy-paste and contact exports.
PHONE_BLANKS = (" ", "\t", "\n", "\r", "\v", "\f", "\u00a0")


def strip_whitespace(raw: str | None) -> str:
    """Return raw with every PHONE_BLANKS character removed ("555 1234" -> "5551234")."""
    if not raw:
        return ""
    value = str(raw)
    for blank in PHONE_BLANKS:
        value = value.replace(blank, "")
    return value


def stripped_column(column: ColumnElement) -> ColumnElement:
    """SQL counterpart of strip_whitespace: nested REPLACE calls over PHONE_BLANKS."""
    expr = column
    for blank in PHONE_BLANKS:
        expr = func.replace(expr, blank, "")
    return expr
