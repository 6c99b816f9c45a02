"""
Pure roll-ups over extracted sales and stock records.

Nothing here performs I/O. Every function rebuilds its output from the
records it is given, so calling it twice on the same input gives equal
results. Descending sorts are stable: ties keep the order the groups were
first encountered in.
"""

from datetime import datetime
from typing import Optional

import pandas as pd

from . import settings
from .schemas import (
    BrandAmount,
    BrandStock,
    ChannelAmount,
    LocationStock,
    MonthAmount,
    SalesRecord,
    SalesSummary,
    SkippedRow,
    StockItem,
    StockSummary,
)


def _sort_desc(df: pd.DataFrame, column: str) -> pd.DataFrame:
    return df.sort_values(column, ascending=False, kind="stable").reset_index(drop=True)


# --- Sales ---


def sales_by_channel(records: list[SalesRecord]) -> list[ChannelAmount]:
    """Channel totals, largest first, with each channel's share of the grand total."""
    if not records:
        return []

    df = pd.DataFrame(
        [
            {
                "channel": r.channel,
                "amount": r.total,
                "color": r.color,
                "brand": r.brand,
            }
            for r in records
        ]
    )
    df = (
        df.groupby("channel", sort=False)
        .agg(amount=("amount", "sum"), color=("color", "first"), brand=("brand", "first"))
        .reset_index()
    )
    grand_total = df["amount"].sum()
    df["share"] = (df["amount"] / grand_total * 100).round(2) if grand_total else 0.0
    df = _sort_desc(df, "amount")

    return [
        ChannelAmount(
            channel=row["channel"],
            amount=float(row["amount"]),
            color=row["color"],
            brand=row["brand"],
            share=float(row["share"]),
        )
        for row in df.to_dict("records")
    ]


def sales_by_month(records: list[SalesRecord]) -> list[MonthAmount]:
    """Sums every channel per month, keeping the header's month order."""
    totals: dict[str, float] = {}
    for record in records:
        for month, amount in record.monthly_data.items():
            totals[month] = totals.get(month, 0.0) + amount
    return [MonthAmount(month=month, amount=amount) for month, amount in totals.items()]


def brand_color(brand: str) -> str:
    return settings.BRAND_COLORS.get(brand, settings.DEFAULT_BRAND_COLOR)


def sales_by_brand(records: list[SalesRecord]) -> list[BrandAmount]:
    if not records:
        return []

    df = pd.DataFrame([{"brand": r.brand, "amount": r.total} for r in records])
    df = df.groupby("brand", sort=False)["amount"].sum().reset_index()
    df = _sort_desc(df, "amount")

    return [
        BrandAmount(brand=row["brand"], amount=float(row["amount"]), color=brand_color(row["brand"]))
        for row in df.to_dict("records")
    ]


# --- Stock ---


def stock_by_location(items: list[StockItem]) -> list[LocationStock]:
    """Units on hand per location across all items; empty locations are left out."""
    rows = [
        {"location": location, "quantity": quantity}
        for item in items
        for location, quantity in item.stock_by_location.items()
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    df = df.groupby("location", sort=False)["quantity"].sum().reset_index()
    df = _sort_desc(df[df["quantity"] > 0], "quantity")

    return [
        LocationStock(location=row["location"], quantity=int(row["quantity"]))
        for row in df.to_dict("records")
    ]


def stock_by_brand(items: list[StockItem]) -> list[BrandStock]:
    """Units, stock value and product count per brand, most valuable first."""
    if not items:
        return []

    df = pd.DataFrame(
        [
            {"brand": i.brand, "quantity": i.total_stock, "value": i.stock_value}
            for i in items
        ]
    )
    df = (
        df.groupby("brand", sort=False)
        .agg(
            quantity=("quantity", "sum"),
            value=("value", "sum"),
            products=("quantity", "size"),
        )
        .reset_index()
    )
    df = _sort_desc(df, "value")

    return [
        BrandStock(
            brand=row["brand"],
            quantity=int(row["quantity"]),
            value=float(row["value"]),
            products=int(row["products"]),
        )
        for row in df.to_dict("records")
    ]


def low_stock(
    items: list[StockItem],
    threshold: int = settings.LOW_STOCK_THRESHOLD,
    limit: int = settings.LOW_STOCK_LIMIT,
) -> list[StockItem]:
    """Items with 0 < total stock <= threshold, scarcest first, at most `limit`."""
    flagged = [item for item in items if 0 < item.total_stock <= threshold]
    return sorted(flagged, key=lambda item: item.total_stock)[:limit]


def top_sellers(
    items: list[StockItem], limit: int = settings.TOP_SELLERS_LIMIT
) -> list[StockItem]:
    selling = [item for item in items if item.total_sales > 0]
    return sorted(selling, key=lambda item: item.total_sales, reverse=True)[:limit]


def filter_products(
    items: list[StockItem], search: str = "", brand: Optional[str] = None
) -> list[StockItem]:
    """Case-insensitive search over description and item code, plus an optional brand filter."""
    term = search.strip().lower()
    return [
        item
        for item in items
        if (not term or term in item.description.lower() or term in item.item_code.lower())
        and (brand is None or item.brand == brand)
    ]


# --- Summaries ---


def build_sales_summary(
    records: list[SalesRecord],
    skipped: Optional[list[SkippedRow]] = None,
    last_updated: Optional[datetime] = None,
) -> SalesSummary:
    return SalesSummary(
        total_sales=sum(r.total for r in records),
        sales_by_channel=sales_by_channel(records),
        sales_by_month=sales_by_month(records),
        sales_by_brand=sales_by_brand(records),
        channel_details=list(records),
        skipped_rows=len(skipped or []),
        last_updated=last_updated or datetime.now(),
    )


def build_stock_summary(
    items: list[StockItem],
    skipped: Optional[list[SkippedRow]] = None,
    last_updated: Optional[datetime] = None,
    low_stock_threshold: int = settings.LOW_STOCK_THRESHOLD,
    low_stock_limit: int = settings.LOW_STOCK_LIMIT,
) -> StockSummary:
    return StockSummary(
        total_products=len(items),
        total_units=sum(i.total_stock for i in items),
        total_stock_value=sum(i.stock_value for i in items),
        total_stock_value_usd=sum(i.unit_cost_usd * i.total_stock for i in items),
        stock_by_brand=stock_by_brand(items),
        stock_by_location=stock_by_location(items),
        low_stock_products=low_stock(items, low_stock_threshold, low_stock_limit),
        top_sellers=top_sellers(items),
        all_products=list(items),
        skipped_rows=len(skipped or []),
        last_updated=last_updated or datetime.now(),
    )


def empty_sales_summary(error: Optional[str] = None) -> SalesSummary:
    return SalesSummary(error=error)


def empty_stock_summary(error: Optional[str] = None) -> StockSummary:
    return StockSummary(error=error)
