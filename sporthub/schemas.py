from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

RawSheet = list[list[Any]]

T = TypeVar("T")


class ChannelDefinition(BaseModel):
    """A sales outlet from the static channel registry."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    brand: str
    color: str


class SalesRecord(BaseModel):
    """
    Defines the data contract for one channel row of the master sales sheet.
    `monthly_data` keeps the column order of the sheet's header row.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    channel: str
    monthly_data: dict[str, float] = Field(default_factory=dict, alias="monthlyData")
    total: float = 0.0
    color: str
    brand: str


class StockItem(BaseModel):
    """
    One inventory row. The total stock is always derived from the
    per-location quantities so the two can never drift apart.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    item_code: str = Field(..., alias="itemCode")
    description: str
    size: str = ""
    color: Optional[str] = None
    qty_imported: int = Field(default=0, alias="qtyImported")
    stock_by_location: dict[str, int] = Field(
        default_factory=dict, alias="stockByLocation"
    )
    unit_cost: float = Field(default=0.0, alias="unitCost")
    unit_cost_usd: float = Field(default=0.0, alias="unitCostUSD")
    stock_value: float = Field(default=0.0, alias="stockValue")
    wholesale_price: Optional[float] = Field(default=None, alias="wholesalePrice")
    price: float = 0.0
    total_sales: float = Field(default=0.0, alias="totalSales")
    brand: str

    @computed_field(alias="totalStock")
    @property
    def total_stock(self) -> int:
        return sum(self.stock_by_location.values())


class SkippedRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    sheet: str
    row: int
    reason: str


class ExtractionResult(BaseModel, Generic[T]):
    """Valid records plus the rows that were dropped while extracting them."""

    records: list[T] = Field(default_factory=list)
    skipped: list[SkippedRow] = Field(default_factory=list)


# --- Summary rows ---


class ChannelAmount(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel: str
    amount: float
    color: str
    brand: str
    share: float = 0.0


class MonthAmount(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: str
    amount: float


class BrandAmount(BaseModel):
    model_config = ConfigDict(frozen=True)

    brand: str
    amount: float
    color: str


class BrandStock(BaseModel):
    model_config = ConfigDict(frozen=True)

    brand: str
    quantity: int
    value: float
    products: int


class LocationStock(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: str
    quantity: int


class SalesSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_sales: float = Field(default=0.0, alias="totalSales")
    sales_by_channel: list[ChannelAmount] = Field(
        default_factory=list, alias="salesByChannel"
    )
    sales_by_month: list[MonthAmount] = Field(
        default_factory=list, alias="salesByMonth"
    )
    sales_by_brand: list[BrandAmount] = Field(
        default_factory=list, alias="salesByBrand"
    )
    channel_details: list[SalesRecord] = Field(
        default_factory=list, alias="channelDetails"
    )
    skipped_rows: int = Field(default=0, alias="skippedRows")
    last_updated: datetime = Field(default_factory=datetime.now, alias="lastUpdated")
    error: Optional[str] = None


class StockSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_products: int = Field(default=0, alias="totalProducts")
    total_units: int = Field(default=0, alias="totalUnits")
    total_stock_value: float = Field(default=0.0, alias="totalStockValue")
    total_stock_value_usd: float = Field(default=0.0, alias="totalStockValueUSD")
    stock_by_brand: list[BrandStock] = Field(
        default_factory=list, alias="stockByBrand"
    )
    stock_by_location: list[LocationStock] = Field(
        default_factory=list, alias="stockByLocation"
    )
    low_stock_products: list[StockItem] = Field(
        default_factory=list, alias="lowStockProducts"
    )
    top_sellers: list[StockItem] = Field(default_factory=list, alias="topSellers")
    all_products: list[StockItem] = Field(default_factory=list, alias="allProducts")
    skipped_rows: int = Field(default=0, alias="skippedRows")
    last_updated: datetime = Field(default_factory=datetime.now, alias="lastUpdated")
    error: Optional[str] = None


# --- Sheet layouts ---


class BrandRule(BaseModel):
    """Assigns `brand` when any of the substring/prefix checks match."""

    model_config = ConfigDict(frozen=True)

    brand: str
    description_contains: tuple[str, ...] = ()
    code_prefixes: tuple[str, ...] = ()
    code_contains: tuple[str, ...] = ()


class BrandInference(BaseModel):
    model_config = ConfigDict(frozen=True)

    default_brand: str
    rules: tuple[BrandRule, ...] = ()


class SalesLayout(BaseModel):
    """Where the month header and the channel rows live in the sales sheet."""

    model_config = ConfigDict(frozen=True)

    sheet_name: str
    cell_range: str = "A1:N20"
    header_row: int = 3
    first_month_column: int = 2
    label_column: int = 1
    first_data_row: int = 4
    last_data_row: int = 12
    min_rows: int = 5


class SheetLayout(BaseModel):
    """
    Column contract for one stock sheet variant.

    `columns` maps semantic StockItem fields (item_code, description, size,
    color, qty_imported, unit_cost, unit_cost_usd, stock_value,
    wholesale_price, price, total_sales) to zero-based column indexes.
    `location_columns` maps each stock location to its column; its order is
    the order of `StockItem.stock_by_location`.
    """

    model_config = ConfigDict(frozen=True)

    sheet_name: str
    cell_range: str = "A1:N1000"
    first_data_row: int = 3
    id_prefix: str
    columns: dict[str, int]
    location_columns: dict[str, int]
    brand: Optional[str] = None
    brand_inference: Optional[BrandInference] = None
