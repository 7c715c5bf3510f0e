"""Google Sheets destination via the Sheets API v4."""

from __future__ import annotations

import logging
from typing import Any, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from roster_export.config import SheetConfig
from roster_export.errors import DestinationError, RateLimitedError
from roster_export.writer import TabularDestination

logger = logging.getLogger("roster_export.sheets")

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def build_sheets_service(config: SheetConfig):
    if config.credentials_path:
        # Local dev / explicit service account key file
        creds = service_account.Credentials.from_service_account_file(
            config.credentials_path, scopes=SCOPES
        )
    else:
        # Cloud Run / Workload Identity: use Application Default Credentials
        import google.auth
        creds, _ = google.auth.default(scopes=SCOPES)
    return build("sheets", "v4", credentials=creds, cache_discovery=False)


def _a1_sheet(name: str) -> str:
    return "'" + name.replace("'", "''") + "'"


class SheetsDestination(TabularDestination):
    """One worksheet (tab) of a spreadsheet, addressed by title."""

    def __init__(self, config: SheetConfig, service: Optional[Any] = None) -> None:
        self._spreadsheet_id = config.spreadsheet_id
        self._sheet_name = config.sheet_name
        self._service = service if service is not None else build_sheets_service(config)
        self._sheet_id: Optional[int] = None

    def _execute(self, request, action: str) -> dict:
        try:
            return request.execute()
        except HttpError as e:
            if e.resp.status == 429:
                raise RateLimitedError(f"{action}: rate limited by Sheets API") from e
            raise DestinationError(f"{action} failed: {e}") from e

    def _sheet_properties(self) -> dict:
        info = self._execute(
            self._service.spreadsheets().get(
                spreadsheetId=self._spreadsheet_id, includeGridData=False
            ),
            "Read spreadsheet metadata",
        )
        for sheet in info.get("sheets", []):
            props = sheet.get("properties", {})
            if props.get("title") == self._sheet_name:
                self._sheet_id = props.get("sheetId")
                return props
        raise DestinationError(
            f"Sheet {self._sheet_name!r} not found in spreadsheet {self._spreadsheet_id}"
        )

    def row_capacity(self) -> int:
        props = self._sheet_properties()
        return int(props.get("gridProperties", {}).get("rowCount", 0))

    def add_rows(self, count: int) -> None:
        if self._sheet_id is None:
            self._sheet_properties()
        body = {
            "requests": [{
                "appendDimension": {
                    "sheetId": self._sheet_id,
                    "dimension": "ROWS",
                    "length": count,
                },
            }],
        }
        self._execute(
            self._service.spreadsheets().batchUpdate(
                spreadsheetId=self._spreadsheet_id, body=body
            ),
            "Extend sheet rows",
        )
        logger.info("Added %d rows to sheet %s", count, self._sheet_name)

    def used_row_count(self) -> int:
        response = self._execute(
            self._service.spreadsheets().values().get(
                spreadsheetId=self._spreadsheet_id, range=_a1_sheet(self._sheet_name)
            ),
            "Read existing values",
        )
        return len(response.get("values", []))

    def write_values(self, start_row: int, values: list[list[Any]]) -> None:
        self._execute(
            self._service.spreadsheets().values().update(
                spreadsheetId=self._spreadsheet_id,
                range=f"{_a1_sheet(self._sheet_name)}!A{start_row}",
                valueInputOption="RAW",
                body={"values": values},
            ),
            f"Write rows starting at {start_row}",
        )
