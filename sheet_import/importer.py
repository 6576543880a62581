from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

import requests

from sheet_import.config import ImportConfig
from sheet_import.crm_client import CRMClient
from sheet_import.errors import ClientError, CRMRequestError
from sheet_import.mapper import map_row_to_contact
from sheet_import.sheets_client import SheetsClient

logger = logging.getLogger(__name__)

SOURCE_PREFIX = "Google Sheet Import: "
NO_DATA_MESSAGE = "No data to import."

@dataclass
class ImportRequest:
    location_id: str
    sheet_name: str

    @classmethod
    def from_payload(cls, payload: Any) -> "ImportRequest":
        if not isinstance(payload, dict):
            raise ClientError("Request body must be a JSON object")
        location_id = payload.get("locationId")
        sheet_name = payload.get("sheetName")
        return cls(
            location_id=location_id.strip() if isinstance(location_id, str) else "",
            sheet_name=sheet_name.strip() if isinstance(sheet_name, str) else "",
        )

    def validate(self) -> None:
        if not self.location_id or not self.sheet_name:
            raise ClientError("Missing locationId or sheetName")

@dataclass
class RowOutcome:
    sheet_row: int
    status: str  # imported | failed | skipped | dry_run
    reason: str = ""

@dataclass
class ImportResult:
    success_count: int = 0
    failure_count: int = 0
    skipped_count: int = 0
    message: str = ""
    rows: List[RowOutcome] = field(default_factory=list)

    def summary(self) -> str:
        msg = (
            f"Import complete. Successfully imported {self.success_count} contacts. "
            f"Failed to import {self.failure_count} contacts."
        )
        if self.skipped_count:
            msg += f" Skipped {self.skipped_count} rows without email or phone."
        return msg

    def to_body(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "skippedCount": self.skipped_count,
        }

    def log_records(self) -> List[Dict[str, Any]]:
        return [asdict(r) for r in self.rows]

class ContactImporter:
    """
    Reads one tab, maps each row to a contact and upserts it.

    ``sheet_reader`` needs ``fetch_values(sheet_name) -> list[list]``;
    ``crm`` needs ``upsert_contact(contact: dict)``.
    """

    def __init__(self, sheet_reader, crm):
        self.sheet_reader = sheet_reader
        self.crm = crm

    def run(self, request: ImportRequest, dry_run: bool = False) -> ImportResult:
        request.validate()

        values = self.sheet_reader.fetch_values(request.sheet_name)
        if not values or len(values) < 2:
            logger.info("Sheet '%s' has no data rows", request.sheet_name)
            return ImportResult(message=NO_DATA_MESSAGE)

        headers, data_rows = values[0], values[1:]
        result = ImportResult()
        source = SOURCE_PREFIX + request.sheet_name

        for i, row in enumerate(data_rows, start=2):  # sheet row number, header is row 1
            contact = map_row_to_contact(row, headers)
            if "email" not in contact and "phone" not in contact:
                result.skipped_count += 1
                result.rows.append(RowOutcome(i, "skipped", "missing_email_and_phone"))
                continue

            contact["locationId"] = request.location_id
            contact["source"] = source

            if dry_run:
                result.rows.append(RowOutcome(i, "dry_run", "would_upsert"))
                continue

            try:
                self.crm.upsert_contact(contact)
            except (CRMRequestError, requests.RequestException) as e:
                result.failure_count += 1
                result.rows.append(RowOutcome(i, "failed", str(e)))
                logger.warning("Row %d: upsert failed: %s", i, e)
                continue
            result.success_count += 1
            result.rows.append(RowOutcome(i, "imported"))

        if dry_run:
            would = sum(1 for r in result.rows if r.status == "dry_run")
            result.message = f"Dry run complete. {would} contacts would be imported."
        else:
            result.message = result.summary()
        logger.info(
            "Sheet '%s': %d imported, %d failed, %d skipped",
            request.sheet_name,
            result.success_count,
            result.failure_count,
            result.skipped_count,
        )
        return result

def build_importer(config: ImportConfig) -> ContactImporter:
    """Wire the real Google Sheets and GoHighLevel clients from a validated ``ImportConfig``."""
    return ContactImporter(
        sheet_reader=SheetsClient(config.sheets),
        crm=CRMClient(config.crm, timeout=config.timeout),
    )
