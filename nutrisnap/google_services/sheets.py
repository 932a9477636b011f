"""Append meal rows to a Google Sheets spreadsheet."""

from __future__ import annotations

import logging
from typing import Sequence

from ..record import SHEET_HEADER, SheetRow
from .models import SaveResult, describe_error

logger = logging.getLogger(__name__)

SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"


class SheetsAppender:
    """Finds (or creates) the log spreadsheet and appends rows to it."""

    def __init__(
        self,
        credentials,
        spreadsheet_name: str = "NutriSnap 영양 기록",
        sheet_name: str = "Nutrition Log",
    ) -> None:
        self._credentials = credentials
        self._spreadsheet_name = spreadsheet_name
        self._sheet_name = sheet_name
        self._sheets = None
        self._drive = None

    def _get_services(self):
        """Build and return the (Sheets, Drive) API services."""
        if self._sheets is None or self._drive is None:
            from googleapiclient.discovery import build

            self._sheets = build(
                "sheets", "v4", credentials=self._credentials, cache_discovery=False
            )
            self._drive = build(
                "drive", "v3", credentials=self._credentials, cache_discovery=False
            )
        return self._sheets, self._drive

    def find_or_create_spreadsheet(self) -> str:
        """Return the ID of the log spreadsheet, creating it if needed."""
        sheets, drive = self._get_services()

        name = self._spreadsheet_name.replace("\\", "\\\\").replace("'", "\\'")
        found = (
            drive.files()
            .list(
                q=(
                    f"name='{name}' and mimeType='{SPREADSHEET_MIME_TYPE}' "
                    f"and trashed=false"
                ),
                fields="files(id, name)",
            )
            .execute()
        )
        files = found.get("files") or []
        if files:
            logger.info("Using existing spreadsheet %s", files[0]["id"])
            return files[0]["id"]

        logger.info("Creating spreadsheet %r", self._spreadsheet_name)
        created = (
            sheets.spreadsheets()
            .create(
                body={
                    "properties": {"title": self._spreadsheet_name},
                    "sheets": [{"properties": {"title": self._sheet_name}}],
                }
            )
            .execute()
        )
        spreadsheet_id = created["spreadsheetId"]

        sheets.spreadsheets().values().update(
            spreadsheetId=spreadsheet_id,
            range=f"{self._sheet_name}!A1:M1",
            valueInputOption="RAW",
            body={"values": [list(SHEET_HEADER)]},
        ).execute()
        return spreadsheet_id

    def append(self, rows: Sequence[SheetRow]) -> SaveResult:
        """Append ``rows`` to the log sheet.

        Errors are logged and returned as a failed SaveResult.
        """
        try:
            sheets, _ = self._get_services()
            spreadsheet_id = self.find_or_create_spreadsheet()
            values = [row.as_list() for row in rows]

            response = (
                sheets.spreadsheets()
                .values()
                .append(
                    spreadsheetId=spreadsheet_id,
                    range=f"{self._sheet_name}!A:M",
                    valueInputOption="RAW",
                    insertDataOption="INSERT_ROWS",
                    body={"values": values},
                )
                .execute()
            )
        except Exception as e:
            logger.exception("Google Sheets append failed")
            return SaveResult(False, describe_error(e, "Google Sheets"))

        logger.info(
            "Appended %d row(s) to %s (%s)",
            len(values),
            spreadsheet_id,
            (response.get("updates") or {}).get("updatedRange"),
        )
        return SaveResult(
            True,
            f"{len(values)}개 항목이 Google Sheets에 저장되었습니다.",
            f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}",
        )
