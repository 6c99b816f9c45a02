import math

import pytest

from sporthub.parsers import (
    cell_text,
    normalize_number_text,
    parse_currency,
    parse_integer,
    resolve_decimal_separator,
)


@pytest.mark.parametrize(
    "raw",
    ["1.234,56", "1,234.56", "1234,56", "$1,234.56", "USD 1.234,56", " 1 234,56 ", "usd1234.56"],
)
def test_parse_currency_locale_formats(raw):
    assert parse_currency(raw) == pytest.approx(1234.56)


def test_parse_currency_thousands_only_comma():
    assert parse_currency("1,234") == 1234
    assert parse_currency("1,234,567") == 1234567


def test_parse_currency_large_european_amount():
    assert parse_currency("1.900.000,00") == 1900000


@pytest.mark.parametrize("raw", ["", None, "   ", "USD", "$", "abc", "N/A", float("nan")])
def test_parse_currency_garbage_is_zero(raw):
    assert parse_currency(raw) == 0


def test_parse_currency_negative_and_numeric_input():
    assert parse_currency("-$1.500,50") == pytest.approx(-1500.5)
    assert parse_currency(42) == 42.0
    assert parse_currency(12.5) == 12.5


def test_parse_currency_reads_leading_number_only():
    assert parse_currency("15 unidades") == 15


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1.234,56", ","),
        ("1,234.56", "."),
        ("1234,56", ","),
        ("1,234", None),
        ("1,2,3", None),
        ("12.5", "."),
        ("1200", None),
    ],
)
def test_resolve_decimal_separator(text, expected):
    assert resolve_decimal_separator(text) == expected


def test_normalize_number_text():
    assert normalize_number_text("1.234.567,89") == "1234567.89"
    assert normalize_number_text("1,234,567.89") == "1234567.89"


def test_parse_integer():
    assert parse_integer("15 units") == 15
    assert parse_integer("") == 0
    assert parse_integer("-3") == -3
    assert parse_integer(None) == 0
    assert parse_integer("n/a") == 0


def test_parse_integer_truncates_toward_zero():
    assert parse_integer("12.7") == 12
    assert parse_integer(7.9) == 7
    assert parse_integer(-7.9) == -7
    assert parse_integer(float("nan")) == 0


def test_parse_results_are_finite():
    assert math.isfinite(parse_currency("1e999"))


def test_cell_text_handles_short_rows():
    row = ["", "  MM-001  "]
    assert cell_text(row, 1) == "MM-001"
    assert cell_text(row, 5) == ""
    assert cell_text(row, None) == ""
