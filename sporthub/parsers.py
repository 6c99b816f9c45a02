"""
Cell parsers for loosely formatted spreadsheet values.

Every parser here returns a definite number. A cell that cannot be read as a
number becomes 0, so one bad cell never stops an import.
"""

import math
import re
from typing import Any, Optional

_CURRENCY_MARKERS = re.compile(r"USD|\$|\s", re.IGNORECASE)
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_NON_INTEGER_CHARS = re.compile(r"[^\d.\-]")
_LEADING_INT = re.compile(r"^[+-]?\d+")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def resolve_decimal_separator(text: str) -> Optional[str]:
    """
    Decides which separator, if any, is the decimal mark in `text`.

    | separators present | decimal mark                                   |
    |--------------------|------------------------------------------------|
    | "." and ","        | whichever appears last                         |
    | "," only           | "," if it is the only one and two digits follow |
    | "." only           | "."                                            |
    | neither            | None                                           |
    """
    has_dot = "." in text
    has_comma = "," in text

    if has_dot and has_comma:
        return "," if text.rfind(",") > text.rfind(".") else "."
    if has_comma:
        _, _, tail = text.partition(",")
        if "," not in tail and len(tail) == 2 and tail.isdigit():
            return ","
        return None
    if has_dot:
        return "."
    return None


def normalize_number_text(text: str) -> str:
    """Rewrites `text` so the decimal mark is "." and thousands marks are gone."""
    decimal = resolve_decimal_separator(text)
    if decimal == ",":
        return text.replace(".", "").replace(",", ".")
    # "." is the decimal mark (or there is none): every comma is a thousands mark
    return text.replace(",", "")


def parse_currency(value: Any) -> float:
    """
    Parses a money cell such as "$ 1.234,56", "USD 1,234.56" or "1234,56".
    Returns 0.0 for blanks and anything that does not start with a number.
    """
    if _is_blank(value):
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = _CURRENCY_MARKERS.sub("", str(value))
    if not cleaned:
        return 0.0

    match = _LEADING_FLOAT.match(normalize_number_text(cleaned))
    if not match:
        return 0.0
    try:
        parsed = float(match.group(0))
    except ValueError:
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def parse_integer(value: Any) -> int:
    """
    Parses a quantity cell such as "15 units" or "-3".
    Fractions are truncated toward zero; blanks and garbage give 0.
    """
    if _is_blank(value):
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return int(value)

    cleaned = _NON_INTEGER_CHARS.sub("", str(value))
    match = _LEADING_INT.match(cleaned)
    return int(match.group(0)) if match else 0


def cell_text(row: list[Any], index: Optional[int]) -> str:
    """Returns the trimmed text of `row[index]`, or "" when the cell is absent."""
    if index is None or index >= len(row) or _is_blank(row[index]):
        return ""
    return str(row[index]).strip()


def cell_value(row: list[Any], index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]
