"""Tests for phone matching normalization."""

from rolodex.infrastructure.phone import PHONE_BLANKS, strip_whitespace, stripped_column


def test_spaces_removed():
    assert strip_whitespace("555 1234") == "5551234"
    assert strip_whitespace("+1 202 555 1234") == "+12025551234"


def test_tabs_newlines_and_nbsp_removed():
    assert strip_whitespace(" 555\t12\n34 ") == "5551234"
    assert strip_whitespace("555\u00a01234\r\n") == "5551234"


def test_sql_expression_strips_the_same_characters():
    from sqlalchemy import column

    expr = stripped_column(column("phone"))
    assert str(expr).count("replace(") == len(PHONE_BLANKS)


def test_other_formatting_kept():
    assert strip_whitespace("(555) 123-4") == "(555)123-4"


def test_empty_values():
    assert strip_whitespace("") == ""
    assert strip_whitespace(None) == ""
