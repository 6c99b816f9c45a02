import logging
from typing import Any, Optional

from . import settings
from .parsers import cell_text, cell_value, parse_currency, parse_integer
from .schemas import (
    BrandInference,
    ChannelDefinition,
    ExtractionResult,
    RawSheet,
    SalesLayout,
    SalesRecord,
    SheetLayout,
    SkippedRow,
    StockItem,
)

logger = logging.getLogger(__name__)


# --- Sales ---


def find_month_columns(
    header_row: list[Any], first_column: int, months: list[str]
) -> list[tuple[str, int]]:
    """Returns (month, column index) pairs in the order they appear in the header."""
    month_columns = []
    for col_index in range(first_column, len(header_row)):
        label = cell_text(header_row, col_index)
        if label in months:
            month_columns.append((label, col_index))
    return month_columns


def match_channel(
    label: str, channels: list[ChannelDefinition]
) -> Optional[ChannelDefinition]:
    """Case-insensitive exact match of a row label against the channel registry."""
    wanted = label.strip().lower()
    if not wanted:
        return None
    for channel in channels:
        if channel.name.lower() == wanted:
            return channel
    return None


def extract_sales(
    rows: RawSheet,
    channels: Optional[list[ChannelDefinition]] = None,
    layout: Optional[SalesLayout] = None,
    months: Optional[list[str]] = None,
) -> ExtractionResult[SalesRecord]:
    """
    Reads the master sales sheet into one SalesRecord per recognised channel.

    Channel identity always comes from the row label, never from the row
    position. Rows whose label is blank or unknown (subtotals, notes) are
    skipped and reported in `skipped`.
    """
    channels = channels if channels is not None else settings.SALES_CHANNELS
    layout = layout or settings.SALES_LAYOUT
    months = months or settings.MONTHS

    if len(rows) < layout.min_rows:
        logger.warning(
            f"  > ⚠️  Not enough rows in '{layout.sheet_name}' ({len(rows)} found)."
        )
        return ExtractionResult[SalesRecord](
            skipped=[
                SkippedRow(
                    sheet=layout.sheet_name,
                    row=len(rows),
                    reason=f"sheet has fewer than {layout.min_rows} rows",
                )
            ]
        )

    month_columns = find_month_columns(
        rows[layout.header_row] or [], layout.first_month_column, months
    )

    records: list[SalesRecord] = []
    skipped: list[SkippedRow] = []
    last_row = min(layout.last_data_row, len(rows) - 1)

    for row_index in range(layout.first_data_row, last_row + 1):
        row = rows[row_index] or []
        label = cell_text(row, layout.label_column)
        channel = match_channel(label, channels)
        if channel is None:
            reason = f"unknown channel '{label}'" if label else "blank label"
            skipped.append(SkippedRow(sheet=layout.sheet_name, row=row_index, reason=reason))
            continue

        monthly_data = {
            month: parse_currency(cell_value(row, col_index))
            for month, col_index in month_columns
        }
        records.append(
            SalesRecord(
                channel=channel.name,
                monthly_data=monthly_data,
                total=sum(monthly_data.values()),
                color=channel.color,
                brand=channel.brand,
            )
        )

    logger.info(
        f"  > 📊 {len(records)} channels, {len(month_columns)} months "
        f"({len(skipped)} rows skipped)"
    )
    return ExtractionResult[SalesRecord](records=records, skipped=skipped)


def sales_total(records: list[SalesRecord]) -> float:
    return sum(record.total for record in records)


# --- Stock ---


def infer_brand(
    item_code: str, description: str, inference: BrandInference
) -> str:
    """
    Best-effort brand classifier for sheets that mix several brands.
    The first rule that matches wins; otherwise the default brand is used.
    """
    code = item_code.lower()
    text = description.lower()
    for rule in inference.rules:
        if any(fragment in text for fragment in rule.description_contains):
            return rule.brand
        if any(code.startswith(prefix) for prefix in rule.code_prefixes):
            return rule.brand
        if any(fragment in code for fragment in rule.code_contains):
            return rule.brand
    return inference.default_brand


def _resolve_brand(item_code: str, description: str, layout: SheetLayout) -> str:
    if layout.brand_inference is not None:
        return infer_brand(item_code, description, layout.brand_inference)
    if layout.brand:
        return layout.brand
    raise ValueError(f"Layout '{layout.sheet_name}' defines no brand or brand inference.")


def _optional_currency(row: list[Any], index: Optional[int]) -> Optional[float]:
    if index is None:
        return None
    return parse_currency(cell_value(row, index))


def extract_stock_items(rows: RawSheet, layout: SheetLayout) -> ExtractionResult[StockItem]:
    """
    Reads one stock sheet using its declarative column layout.

    Rows without an item code or description (separators, repeated headers)
    are dropped and reported in `skipped` instead of failing the import.
    """
    cols = layout.columns
    items: list[StockItem] = []
    skipped: list[SkippedRow] = []

    for row_index in range(layout.first_data_row, len(rows)):
        row = rows[row_index] or []

        item_code = cell_text(row, cols.get("item_code"))
        description = cell_text(row, cols.get("description"))
        if not item_code or not description:
            skipped.append(
                SkippedRow(
                    sheet=layout.sheet_name,
                    row=row_index,
                    reason="missing item code or description",
                )
            )
            continue
        if item_code.lower() == "item code":
            skipped.append(
                SkippedRow(sheet=layout.sheet_name, row=row_index, reason="repeated header")
            )
            continue

        stock_by_location = {
            location: parse_integer(cell_value(row, col_index))
            for location, col_index in layout.location_columns.items()
        }
        unit_cost = parse_currency(cell_value(row, cols.get("unit_cost")))
        unit_cost_usd = _optional_currency(row, cols.get("unit_cost_usd"))

        items.append(
            StockItem(
                id=f"{layout.id_prefix}-{row_index}",
                item_code=item_code,
                description=description,
                size=cell_text(row, cols.get("size")),
                color=cell_text(row, cols["color"]) if "color" in cols else None,
                qty_imported=parse_integer(cell_value(row, cols.get("qty_imported"))),
                stock_by_location=stock_by_location,
                unit_cost=unit_cost,
                unit_cost_usd=unit_cost if unit_cost_usd is None else unit_cost_usd,
                stock_value=parse_currency(cell_value(row, cols.get("stock_value"))),
                wholesale_price=_optional_currency(row, cols.get("wholesale_price")),
                price=parse_currency(cell_value(row, cols.get("price"))),
                total_sales=parse_currency(cell_value(row, cols.get("total_sales"))),
                brand=_resolve_brand(item_code, description, layout),
            )
        )

    logger.info(
        f"  > 📊 '{layout.sheet_name}': {len(items)} products "
        f"({len(skipped)} rows skipped)"
    )
    return ExtractionResult[StockItem](records=items, skipped=skipped)


def extract_stock(
    sheets: dict[str, RawSheet], layouts: Optional[list[SheetLayout]] = None
) -> ExtractionResult[StockItem]:
    """Runs every layout over its sheet and flattens the results in layout order."""
    layouts = layouts if layouts is not None else settings.STOCK_LAYOUTS
    items: list[StockItem] = []
    skipped: list[SkippedRow] = []

    for layout in layouts:
        rows = sheets.get(layout.sheet_name)
        if rows is None:
            logger.warning(f"  > ⚠️  No rows supplied for '{layout.sheet_name}'. Skipping.")
            continue
        result = extract_stock_items(rows, layout)
        items.extend(result.records)
        skipped.extend(result.skipped)

    return ExtractionResult[StockItem](records=items, skipped=skipped)
