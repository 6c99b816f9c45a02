import pandas as pd

from sporthub import utils
from sporthub.logger import setup_logger
from sporthub.pipeline import SummaryStore
from sporthub.pipelines.sales import SalesPipeline
from sporthub.pipelines.stock import StockPipeline
from sporthub.schemas import SalesSummary, StockSummary

logger = setup_logger()


def print_sales_report(summary: SalesSummary):
    if summary.error:
        logger.error(f"❌ Sales data unavailable: {summary.error}")

    logger.info(f"\nTotal sales: {utils.format_currency(summary.total_sales)}")

    if summary.sales_by_channel:
        by_channel = pd.DataFrame([c.model_dump() for c in summary.sales_by_channel])
        by_channel["amount"] = by_channel["amount"].map(utils.format_currency)
        logger.info("\n--- Sales by Channel ---")
        logger.info(by_channel[["channel", "brand", "amount", "share"]].to_string(index=False))

    if summary.sales_by_month:
        by_month = pd.DataFrame([m.model_dump() for m in summary.sales_by_month])
        by_month["amount"] = by_month["amount"].map(utils.format_compact_number)
        logger.info("\n--- Sales by Month ---")
        logger.info(by_month.to_string(index=False))

    if summary.sales_by_brand:
        by_brand = pd.DataFrame([b.model_dump() for b in summary.sales_by_brand])
        by_brand["amount"] = by_brand["amount"].map(utils.format_currency)
        logger.info("\n--- Sales by Brand ---")
        logger.info(by_brand[["brand", "amount"]].to_string(index=False))

    if summary.skipped_rows:
        logger.info(f"\n({summary.skipped_rows} sheet rows did not match a channel)")


def print_stock_report(summary: StockSummary):
    if summary.error:
        logger.error(f"❌ Stock data unavailable: {summary.error}")

    logger.info(
        f"\nProducts: {utils.format_number(summary.total_products)} | "
        f"Units: {utils.format_number(summary.total_units)} | "
        f"Stock value: {utils.format_currency(summary.total_stock_value)} | "
        f"Stock value (USD): {utils.format_currency(summary.total_stock_value_usd, 'US$')}"
    )

    if summary.stock_by_brand:
        logger.info("\n--- Stock by Brand ---")
        by_brand = pd.DataFrame([b.model_dump() for b in summary.stock_by_brand])
        logger.info(by_brand.to_string(index=False))

    if summary.stock_by_location:
        logger.info("\n--- Stock by Location ---")
        by_location = pd.DataFrame([loc.model_dump() for loc in summary.stock_by_location])
        logger.info(by_location.to_string(index=False))

    if summary.low_stock_products:
        logger.info("\n--- Low Stock ---")
        low = pd.DataFrame(
            [
                {
                    "code": p.item_code,
                    "description": p.description,
                    "size": p.size,
                    "brand": p.brand,
                    "stock": p.total_stock,
                }
                for p in summary.low_stock_products
            ]
        )
        logger.info(low.to_string(index=False))

    if summary.skipped_rows:
        logger.info(f"\n({summary.skipped_rows} inventory rows were skipped)")


def run_process():
    """Main orchestration function: refresh both dashboards and print them."""
    logger.info("--- Starting SportHub Dashboard Refresh ---")

    sales_store = SummaryStore(SalesPipeline())
    stock_store = SummaryStore(StockPipeline())

    print_sales_report(sales_store.refresh())
    print_stock_report(stock_store.refresh())

    logger.info("\n--- Process Finished ---")


if __name__ == "__main__":
    run_process()
