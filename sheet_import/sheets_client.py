from __future__ import annotations

import logging
from typing import Any, List

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from sheet_import.config import SheetsConfig
from sheet_import.errors import ConfigurationError, FetchError, SheetNotFoundError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]

def build_credentials(cfg: SheetsConfig) -> Credentials:
    if cfg.service_account_json:
        return Credentials.from_service_account_file(cfg.service_account_json, scopes=SCOPES)
    return Credentials.from_service_account_info(cfg.credentials_info(), scopes=SCOPES)

def _quote_sheet_name(sheet_name: str) -> str:
    # A1 notation: tab names are single-quoted, embedded quotes doubled
    return "'" + sheet_name.replace("'", "''") + "'"

class SheetsClient:
    """Read-only access to one spreadsheet's tabs."""

    def __init__(self, cfg: SheetsConfig, service: Any = None):
        self.cfg = cfg
        self._service = service

    @property
    def service(self) -> Any:
        if self._service is None:
            creds = build_credentials(self.cfg)
            self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        return self._service

    def fetch_values(self, sheet_name: str) -> List[List[Any]]:
        """Return every row of ``sheet_name`` as lists of cell strings, header row first."""
        try:
            resp = self.service.spreadsheets().values().get(
                spreadsheetId=self.cfg.spreadsheet_id, range=_quote_sheet_name(sheet_name)
            ).execute()
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            if status in (400, 404) and "Unable to parse range" in str(e):
                raise SheetNotFoundError(f"Sheet '{sheet_name}' not found") from e
            raise FetchError(f"Google Sheets request failed ({status}): {e}") from e
        except ConfigurationError:
            raise
        except Exception as e:
            raise FetchError(f"Could not fetch sheet '{sheet_name}': {e}") from e

        values = resp.get("values", [])
        logger.info("Fetched %d rows from sheet '%s'", len(values), sheet_name)
        return values
