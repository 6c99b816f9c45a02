import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from pydantic import ValidationError

from sporthub.data_handler import FetchError, SheetsClient
from sporthub.schemas import ExtractionResult, RawSheet

logger = logging.getLogger(__name__)

SummaryT = TypeVar("SummaryT")


class DataPipeline(ABC, Generic[SummaryT]):
    """
    Abstract base class for the dashboard pipelines (Sales, Stock).
    Follows an Extract -> Transform -> Load pattern:
    fetch raw sheets, parse them into records, aggregate into a summary.
    """

    def __init__(self, report_type: str, client: Optional[SheetsClient] = None):
        self.report_type = report_type
        self.client = client or SheetsClient.from_settings()

    def run(self) -> SummaryT:
        """
        Orchestrates one pull-parse-aggregate cycle.
        A fetch failure never escapes: the empty summary is returned instead,
        carrying the error message for the dashboard to surface.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        try:
            sheets = self.extract()
        except FetchError as e:
            logger.error(f"❌ Fetch failed for {self.report_type}: {e}")
            return self.empty(str(e))

        # --- 2. TRANSFORM ---
        try:
            result = self.transform(sheets)
        except ValidationError as e:
            logger.error(f"❌ Data validation failed for {self.report_type}!")
            logger.error(e)
            return self.empty(f"Invalid {self.report_type} data.")

        for row in result.skipped:
            logger.debug(f"Skipped {row.sheet} row {row.row}: {row.reason}")

        # --- 3. LOAD ---
        summary = self.load(result)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.")
        logger.info("=" * 60)
        return summary

    @abstractmethod
    def extract(self) -> dict[str, RawSheet]:
        """Fetches every sheet range this report needs, keyed by sheet name."""

    @abstractmethod
    def transform(self, sheets: dict[str, RawSheet]) -> ExtractionResult[Any]:
        """Parses the raw grids into validated records plus skipped rows."""

    @abstractmethod
    def load(self, result: ExtractionResult[Any]) -> SummaryT:
        """Aggregates the records into the summary handed to the dashboards."""

    @abstractmethod
    def empty(self, error: Optional[str] = None) -> SummaryT:
        """The zeroed summary shown when the report cannot be loaded."""


class SummaryStore(Generic[SummaryT]):
    """
    Holds the latest summary of one pipeline.

    Each refresh takes a sequence number before it starts. A summary is only
    published if no later-started refresh has published already, so a slow
    stale response can never overwrite fresher data.
    """

    def __init__(self, pipeline: DataPipeline[SummaryT]):
        self.pipeline = pipeline
        self.summary: Optional[SummaryT] = None
        self._lock = threading.Lock()
        self._next_sequence = 0
        self._published_sequence = -1

    def begin(self) -> int:
        with self._lock:
            sequence = self._next_sequence
            self._next_sequence += 1
            return sequence

    def publish(self, sequence: int, summary: SummaryT) -> bool:
        with self._lock:
            if sequence < self._published_sequence:
                logger.info(
                    f"Discarding stale {self.pipeline.report_type} summary "
                    f"(refresh #{sequence}, #{self._published_sequence} already shown)."
                )
                return False
            self._published_sequence = sequence
            self.summary = summary
            return True

    def refresh(self) -> SummaryT:
        """Runs the pipeline and publishes the result unless it went stale."""
        sequence = self.begin()
        summary = self.pipeline.run()
        self.publish(sequence, summary)
        return summary
