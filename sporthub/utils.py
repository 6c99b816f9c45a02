def format_number(value: float) -> str:
    """Formats with es-AR grouping, e.g. 1234567 -> '1.234.567'."""
    return f"{round(value):,}".replace(",", ".")


def format_currency(value: float, symbol: str = "$") -> str:
    """Whole-unit money in es-AR style, e.g. '$ 1.234.567' or '-$ 50'."""
    sign = "-" if value < 0 and round(value) != 0 else ""
    return f"{sign}{symbol} {format_number(abs(value))}"


def format_compact_number(value: float) -> str:
    """
    Shortens large axis values: 1500 -> '1.5K', 2300000 -> '2.3M'.
    Values under a thousand are returned as they are.
    """
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return f"{value:g}"
