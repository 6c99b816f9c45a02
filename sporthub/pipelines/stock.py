import logging
from datetime import datetime
from typing import Optional

from sporthub import aggregator, extractors, settings
from sporthub.data_handler import SheetsClient
from sporthub.pipeline import DataPipeline
from sporthub.schemas import (
    ExtractionResult,
    RawSheet,
    SheetLayout,
    StockItem,
    StockSummary,
)

logger = logging.getLogger(__name__)


class StockPipeline(DataPipeline[StockSummary]):
    def __init__(
        self,
        client: Optional[SheetsClient] = None,
        layouts: Optional[list[SheetLayout]] = None,
        low_stock_threshold: int = settings.LOW_STOCK_THRESHOLD,
        low_stock_limit: int = settings.LOW_STOCK_LIMIT,
    ):
        super().__init__("stock", client=client)
        self.layouts = layouts if layouts is not None else settings.STOCK_LAYOUTS
        self.low_stock_threshold = low_stock_threshold
        self.low_stock_limit = low_stock_limit

    def extract(self) -> dict[str, RawSheet]:
        logger.info("--- Starting Stock Report Process ---")
        for layout in self.layouts:
            logger.info(f"-- Processing Source: {layout.sheet_name} --")
        # The brand sheets are independent, so they are fetched together.
        return self.client.fetch_many(
            [(layout.sheet_name, layout.cell_range) for layout in self.layouts]
        )

    def transform(self, sheets: dict[str, RawSheet]) -> ExtractionResult[StockItem]:
        return extractors.extract_stock(sheets, self.layouts)

    def load(self, result: ExtractionResult[StockItem]) -> StockSummary:
        summary = aggregator.build_stock_summary(
            result.records,
            result.skipped,
            last_updated=datetime.now(),
            low_stock_threshold=self.low_stock_threshold,
            low_stock_limit=self.low_stock_limit,
        )
        logger.info(
            f"  > Total products loaded: {summary.total_products} "
            f"({summary.total_units} units, {len(summary.low_stock_products)} low on stock)"
        )
        return summary

    def empty(self, error: Optional[str] = None) -> StockSummary:
        return aggregator.empty_stock_summary(error)
