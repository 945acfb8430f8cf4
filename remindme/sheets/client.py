import json
import logging
from typing import List, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build

from ..errors import NoDataError
from .models import Row, to_row

logger = logging.getLogger(__name__)


class SheetError(Exception):
    """Custom exception for sheet-related errors"""

    pass


class GoogleSheetsClient:
    """Reads payment sheets through the Google Sheets API"""

    SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]

    def __init__(
        self,
        credentials_info: Optional[str] = None,
        credentials_path: Optional[str] = None,
        service=None,
    ):
        self.credentials_info = credentials_info
        self.credentials_path = credentials_path
        self.service = service or self._build_sheets_service()

    def _build_sheets_service(self):
        """Create and return an authorized Sheets API service object"""
        try:
            if self.credentials_info:
                creds = service_account.Credentials.from_service_account_info(
                    json.loads(self.credentials_info), scopes=self.SCOPES
                )
            elif self.credentials_path:
                creds = service_account.Credentials.from_service_account_file(
                    self.credentials_path, scopes=self.SCOPES
                )
            else:
                raise ValueError("no service account credentials configured")
            return build("sheets", "v4", credentials=creds, cache_discovery=False)
        except Exception as e:
            logger.error(f"Failed to build sheets service: {e}")
            raise SheetError(f"Could not initialize sheets service: {str(e)}")

    def get_rows(self, spreadsheet_id: str, sheet_name: str) -> List[Row]:
        """Get every row of a sheet, header first, with typed cells"""
        try:
            result = (
                self.service.spreadsheets()
                .values()
                .get(spreadsheetId=spreadsheet_id, range=sheet_name)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error reading sheet {sheet_name}: {e}")
            raise SheetError(f"[{spreadsheet_id}] failed to read sheet {sheet_name}: {str(e)}")

        rows = result.get("values", [])
        if len(rows) <= 1:
            raise NoDataError(sheet_name)
        logger.info(f"Read {len(rows) - 1} rows from {sheet_name}")
        return [to_row(row) for row in rows]
