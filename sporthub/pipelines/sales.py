import logging
from datetime import datetime
from typing import Optional

from sporthub import aggregator, extractors, settings
from sporthub.data_handler import SheetsClient
from sporthub.pipeline import DataPipeline
from sporthub.schemas import (
    ChannelDefinition,
    ExtractionResult,
    RawSheet,
    SalesLayout,
    SalesRecord,
    SalesSummary,
)

logger = logging.getLogger(__name__)


class SalesPipeline(DataPipeline[SalesSummary]):
    def __init__(
        self,
        client: Optional[SheetsClient] = None,
        layout: Optional[SalesLayout] = None,
        channels: Optional[list[ChannelDefinition]] = None,
    ):
        super().__init__("sales", client=client)
        self.layout = layout or settings.SALES_LAYOUT
        self.channels = channels if channels is not None else settings.SALES_CHANNELS

    def extract(self) -> dict[str, RawSheet]:
        logger.info(f"\n-- Processing Source: {self.layout.sheet_name} --")
        rows = self.client.fetch_range(self.layout.sheet_name, self.layout.cell_range)
        return {self.layout.sheet_name: rows}

    def transform(self, sheets: dict[str, RawSheet]) -> ExtractionResult[SalesRecord]:
        rows = sheets.get(self.layout.sheet_name, [])
        return extractors.extract_sales(rows, self.channels, self.layout)

    def load(self, result: ExtractionResult[SalesRecord]) -> SalesSummary:
        summary = aggregator.build_sales_summary(
            result.records, result.skipped, last_updated=datetime.now()
        )
        logger.info(
            f"  > Total sales: {summary.total_sales:,.2f} across "
            f"{len(summary.channel_details)} channels"
        )
        if not result.records:
            logger.warning("  > ⚠️  No sales channels matched the registry.")
        return summary

    def empty(self, error: Optional[str] = None) -> SalesSummary:
        return aggregator.empty_sales_summary(error)
