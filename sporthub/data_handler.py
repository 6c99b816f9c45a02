import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional
from urllib.parse import quote

import requests

from . import settings
from .schemas import RawSheet

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A sheet range could not be retrieved from the backing spreadsheet."""

    def __init__(self, sheet_name: str, message: str, status_code: Optional[int] = None):
        self.sheet_name = sheet_name
        self.status_code = status_code
        prefix = f"[{status_code}] " if status_code else ""
        super().__init__(f"{prefix}Could not fetch '{sheet_name}': {message}")


class SheetsClient:
    """
    Thin reader over the Google Sheets `values` endpoint.
    One request per range, no retries; failures surface as FetchError.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        api_key: str,
        base_url: str = settings.SHEETS_API_BASE,
        timeout: float = settings.SHEETS_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "SheetsClient":
        return cls(
            spreadsheet_id=settings.SHEETS_SPREADSHEET_ID,
            api_key=settings.SHEETS_API_KEY,
        )

    def build_url(self, sheet_name: str, cell_range: str) -> str:
        full_range = quote(f"{sheet_name}!{cell_range}", safe="")
        return f"{self.base_url}/{self.spreadsheet_id}/values/{full_range}"

    def fetch_range(self, sheet_name: str, cell_range: str = "A:Z") -> RawSheet:
        """Returns the raw 2-D cell grid for `sheet_name!cell_range`."""
        if not self.spreadsheet_id:
            raise FetchError(sheet_name, "SHEETS_SPREADSHEET_ID is not configured.")

        url = self.build_url(sheet_name, cell_range)
        params = {"key": self.api_key} if self.api_key else None
        logger.debug(f"Fetching {sheet_name}!{cell_range}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise FetchError(sheet_name, str(e)) from e

        if not response.ok:
            raise FetchError(
                sheet_name, _error_message(response), status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(
                sheet_name, "Response was not valid JSON.", response.status_code
            ) from e

        values = (payload.get("values") or []) if isinstance(payload, dict) else None
        if not isinstance(values, list) or not all(isinstance(row, list) for row in values):
            raise FetchError(sheet_name, "Unexpected response shape.", response.status_code)

        logger.info(f"  > Fetched {len(values)} rows from '{sheet_name}'")
        return values

    def fetch_many(self, ranges: list[tuple[str, str]]) -> dict[str, RawSheet]:
        """
        Fetches several independent (sheet_name, cell_range) pairs concurrently.
        Waits for all of them; the first failure is re-raised as FetchError.
        Results are keyed by sheet name, so each sheet may appear only once.
        """
        if not ranges:
            return {}

        sheet_names = [sheet_name for sheet_name, _ in ranges]
        duplicates = sorted({name for name in sheet_names if sheet_names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Sheets requested more than once: {', '.join(duplicates)}")

        with ThreadPoolExecutor(max_workers=len(ranges)) as executor:
            futures = {
                sheet_name: executor.submit(self.fetch_range, sheet_name, cell_range)
                for sheet_name, cell_range in ranges
            }
            return {sheet_name: future.result() for sheet_name, future in futures.items()}


def _error_message(response: requests.Response) -> str:
    """Pulls the API's own error text out of a failed response, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return response.reason or "Failed to fetch sheet data"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
    return response.reason or "Failed to fetch sheet data"
