import logging
from unittest.mock import MagicMock

import pytest
import requests

from sporthub import settings
from sporthub.data_handler import FetchError, SheetsClient
from sporthub.pipeline import SummaryStore
from sporthub.pipelines.sales import SalesPipeline
from sporthub.pipelines.stock import StockPipeline
from sporthub.schemas import SalesSummary, StockSummary


def test_sales_pipeline_builds_summary(fake_client, sales_rows):
    fake_client.fetch_range.return_value = sales_rows

    summary = SalesPipeline(client=fake_client).run()

    fake_client.fetch_range.assert_called_once_with(settings.SALES_SHEET, "A1:N20")
    assert isinstance(summary, SalesSummary)
    assert summary.total_sales == pytest.approx(5500.5)
    assert [c.channel for c in summary.sales_by_channel][0] == "Magic Marine Ecommerce"
    assert summary.skipped_rows == 2
    assert summary.error is None


def test_sales_pipeline_fetch_failure_returns_empty_summary(fake_client, caplog):
    fake_client.fetch_range.side_effect = FetchError(settings.SALES_SHEET, "Forbidden", 403)

    with caplog.at_level(logging.ERROR):
        summary = SalesPipeline(client=fake_client).run()

    assert summary.total_sales == 0
    assert summary.channel_details == []
    assert "Forbidden" in summary.error
    assert "Fetch failed for sales" in caplog.text


def test_stock_pipeline_fetches_both_sheets(fake_client, stock_sheets):
    fake_client.fetch_many.return_value = stock_sheets

    summary = StockPipeline(client=fake_client).run()

    fake_client.fetch_many.assert_called_once_with(
        [(settings.STOCK_MM_SHEET, "A1:N1000"), (settings.STOCK_HOCKEY_SHEET, "A1:N1000")]
    )
    assert isinstance(summary, StockSummary)
    assert summary.total_products == 5
    assert [p.item_code for p in summary.low_stock_products] == ["PR-200", "MM-001"]
    for product in summary.all_products:
        assert product.total_stock == sum(product.stock_by_location.values())


def test_stock_pipeline_custom_low_stock_threshold(fake_client, stock_sheets):
    fake_client.fetch_many.return_value = stock_sheets

    summary = StockPipeline(client=fake_client, low_stock_threshold=2).run()

    assert [p.item_code for p in summary.low_stock_products] == ["PR-200"]


def test_stock_pipeline_http_failure_returns_empty_summary(fake_client):
    fake_client.fetch_many.side_effect = FetchError(
        settings.STOCK_HOCKEY_SHEET, "Service Unavailable", 503
    )

    summary = StockPipeline(client=fake_client).run()

    assert summary.total_products == 0
    assert summary.all_products == []
    assert summary.stock_by_location == []
    assert "[503]" in summary.error


def test_stock_pipeline_drops_rows_without_identity(fake_client):
    rows = [
        [],
        [],
        [],
        ["", "", "", "L", "", "4", "1", "1", "1", "1", "10", "40", "20", "0"],
        ["", "MM-9", "Spray top", "L", "", "4", "1", "0", "0", "0", "10", "10", "20", "0"],
    ]
    fake_client.fetch_many.return_value = {settings.STOCK_MM_SHEET: rows}

    summary = StockPipeline(client=fake_client, layouts=[settings.STOCK_MM_LAYOUT]).run()

    assert [p.item_code for p in summary.all_products] == ["MM-9"]
    assert summary.skipped_rows == 1


def test_summary_store_publishes_latest_refresh(fake_client, sales_rows):
    fake_client.fetch_range.return_value = sales_rows
    store = SummaryStore(SalesPipeline(client=fake_client))

    summary = store.refresh()

    assert store.summary is summary


def test_summary_store_discards_stale_results():
    store = SummaryStore(MagicMock(report_type="stock"))
    older = store.begin()
    newer = store.begin()

    assert store.publish(newer, "fresh") is True
    assert store.publish(older, "stale") is False
    assert store.summary == "fresh"


def test_summary_store_accepts_in_order_results():
    store = SummaryStore(MagicMock(report_type="stock"))
    first = store.begin()
    second = store.begin()

    assert store.publish(first, "one") is True
    assert store.publish(second, "two") is True
    assert store.summary == "two"


def test_sales_pipeline_unexpected_body_returns_empty_summary():
    response = MagicMock(spec=requests.Response)
    response.ok = True
    response.status_code = 200
    response.json.return_value = ["unexpected"]
    session = MagicMock(spec=requests.Session)
    session.get.return_value = response

    summary = SalesPipeline(client=SheetsClient("sheet-id", "key", session=session)).run()

    assert summary.total_sales == 0
    assert summary.channel_details == []
    assert "Unexpected response shape" in summary.error
