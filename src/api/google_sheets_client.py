"""
Google Sheets API client
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote
import httpx
from src.api.base_client import BaseAPIClient
from src.api.sheet_client import Row, SheetClient
from src.config.constants import (
    CONDITIONAL_FORMATS,
    GOOGLE_SHEETS_API_BASE_URL,
    GOOGLE_SHEETS_API_VERSION,
    HEADER_BACKGROUND,
    RETRY_DELAY,
    VALIDATION_ROW_LIMIT,
)
from src.utils.error_handler import APIError


def column_letter(index: int) -> str:
    """Zero-based column index to A1 letters (0 -> A, 26 -> AA)"""
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def a1_range(sheet_name: str, row: Optional[int] = None, column: int = 0) -> str:
    """Build an A1 range for a whole sheet or a top-left anchor cell"""
    quoted = "'" + sheet_name.replace("'", "''") + "'"
    if row is None:
        return quoted
    return f"{quoted}!{column_letter(column)}{row + 1}"


class GoogleSheetsClient(BaseAPIClient, SheetClient):
    """Client for one spreadsheet via the Sheets REST API v4"""

    def __init__(
        self,
        spreadsheet_id: str,
        access_token: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_delay: float = RETRY_DELAY,
    ):
        """
        Initialize Google Sheets client

        Args:
            spreadsheet_id: ID of the spreadsheet document
            access_token: OAuth bearer token with spreadsheets scope
            transport: Custom httpx transport (for tests)
            retry_delay: Base delay between retries in seconds
        """
        super().__init__(
            GOOGLE_SHEETS_API_BASE_URL,
            headers={"Authorization": f"Bearer {access_token}"},
            transport=transport,
            retry_delay=retry_delay,
        )
        self.spreadsheet_id = spreadsheet_id
        self._sheet_ids: Optional[Dict[str, int]] = None
        self._format_rule_counts: Dict[int, int] = {}

    @property
    def _base_endpoint(self) -> str:
        return f"/{GOOGLE_SHEETS_API_VERSION}/spreadsheets/{self.spreadsheet_id}"

    def _values_endpoint(self, range_: str, suffix: str = "") -> str:
        return f"{self._base_endpoint}/values/{quote(range_, safe='')}{suffix}"

    async def _batch_update(self, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await self.post(
            f"{self._base_endpoint}:batchUpdate",
            json_data={"requests": requests},
        )

    async def _load_sheet_ids(self) -> Dict[str, int]:
        """Fetch sheet titles, their numeric ids and conditional format rule counts"""
        data = await self.get(
            self._base_endpoint,
            params={"fields": "sheets(properties(sheetId,title),conditionalFormats)"},
        )
        sheets = data.get("sheets", [])
        self._sheet_ids = {
            sheet["properties"]["title"]: sheet["properties"]["sheetId"]
            for sheet in sheets
        }
        self._format_rule_counts = {
            sheet["properties"]["sheetId"]: len(sheet.get("conditionalFormats", []))
            for sheet in sheets
        }
        self.logger.debug(f"Loaded {len(self._sheet_ids)} sheets from spreadsheet {self.spreadsheet_id}")
        return self._sheet_ids

    async def _sheet_id(self, sheet_name: str) -> int:
        if self._sheet_ids is None or sheet_name not in self._sheet_ids:
            await self._load_sheet_ids()
        if sheet_name not in self._sheet_ids:
            raise APIError(f"Sheet '{sheet_name}' not found", error_code="404")
        return self._sheet_ids[sheet_name]

    async def sheet_exists(self, sheet_name: str) -> bool:
        if self._sheet_ids is None or sheet_name not in self._sheet_ids:
            await self._load_sheet_ids()
        return sheet_name in self._sheet_ids

    async def create_sheet(self, sheet_name: str) -> None:
        data = await self._batch_update([{"addSheet": {"properties": {"title": sheet_name}}}])
        properties = data["replies"][0]["addSheet"]["properties"]
        if self._sheet_ids is None:
            self._sheet_ids = {}
        self._sheet_ids[sheet_name] = properties["sheetId"]
        self.logger.info(f"Created sheet '{sheet_name}' (id: {properties['sheetId']})")

    async def clear(self, sheet_name: str) -> None:
        await self.post(
            self._values_endpoint(a1_range(sheet_name), ":clear"),
            json_data={},
            idempotent=True,
        )

    async def set_values(self, sheet_name: str, row: int, column: int, values: List[Row]) -> None:
        range_ = a1_range(sheet_name, row, column)
        await self.put(
            self._values_endpoint(range_),
            params={"valueInputOption": "RAW"},
            json_data={"range": range_, "majorDimension": "ROWS", "values": values},
        )

    async def append_rows(self, sheet_name: str, rows: List[Row]) -> None:
        await self.post(
            self._values_endpoint(a1_range(sheet_name, 0), ":append"),
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json_data={"majorDimension": "ROWS", "values": rows},
        )

    async def get_values(self, sheet_name: str) -> List[Row]:
        data = await self.get(
            self._values_endpoint(a1_range(sheet_name)),
            params={"valueRenderOption": "UNFORMATTED_VALUE", "majorDimension": "ROWS"},
        )
        return data.get("values", [])

    async def delete_row(self, sheet_name: str, row: int) -> None:
        sheet_id = await self._sheet_id(sheet_name)
        await self._batch_update([{
            "deleteDimension": {
                "range": {
                    "sheetId": sheet_id,
                    "dimension": "ROWS",
                    "startIndex": row,
                    "endIndex": row + 1,
                }
            }
        }])

    async def apply_layout(self, sheet_name: str, config) -> None:
        """Style and freeze the header, set widths, add dropdowns and row highlights

        Existing conditional format rules on the sheet are removed first, so
        applying the layout again replaces the highlights instead of adding
        another copy of them.
        """
        await self._load_sheet_ids()
        sheet_id = await self._sheet_id(sheet_name)
        column_count = config.column_count
        existing_rules = self._format_rule_counts.get(sheet_id, 0)
        if existing_rules:
            self.logger.debug(f"Removing {existing_rules} conditional format rules from '{sheet_name}'")

        # Each delete shifts the remaining rules down, so index 0 is removed every time
        requests: List[Dict[str, Any]] = [
            {"deleteConditionalFormatRule": {"sheetId": sheet_id, "index": 0}}
            for _ in range(existing_rules)
        ]
        requests += [
            {
                "repeatCell": {
                    "range": {
                        "sheetId": sheet_id,
                        "startRowIndex": 0,
                        "endRowIndex": 1,
                        "startColumnIndex": 0,
                        "endColumnIndex": column_count,
                    },
                    "cell": {
                        "userEnteredFormat": {
                            "backgroundColor": HEADER_BACKGROUND,
                            "textFormat": {
                                "foregroundColor": {"red": 1, "green": 1, "blue": 1},
                                "bold": True,
                                "fontSize": 12,
                            },
                        }
                    },
                    "fields": "userEnteredFormat(backgroundColor,textFormat)",
                }
            },
            {
                "updateSheetProperties": {
                    "properties": {"sheetId": sheet_id, "gridProperties": {"frozenRowCount": 1}},
                    "fields": "gridProperties.frozenRowCount",
                }
            },
        ]

        for index, width in enumerate(config.column_widths):
            requests.append({
                "updateDimensionProperties": {
                    "range": {
                        "sheetId": sheet_id,
                        "dimension": "COLUMNS",
                        "startIndex": index,
                        "endIndex": index + 1,
                    },
                    "properties": {"pixelSize": width},
                    "fields": "pixelSize",
                }
            })

        for column, options in ((2, config.status_options), (3, config.priority_options)):
            requests.append({
                "setDataValidation": {
                    "range": self._data_range(sheet_id, column, column + 1),
                    "rule": {
                        "condition": {
                            "type": "ONE_OF_LIST",
                            "values": [{"userEnteredValue": option} for option in options],
                        },
                        "strict": True,
                        "showCustomUi": True,
                    },
                }
            })

        requests.append({
            "setDataValidation": {
                "range": self._data_range(sheet_id, 5, 6),
                "rule": {"condition": {"type": "DATE_IS_VALID"}, "strict": True},
            }
        })

        for index, (text, background, foreground) in enumerate(CONDITIONAL_FORMATS):
            cell_format: Dict[str, Any] = {"backgroundColor": background}
            if foreground:
                cell_format["textFormat"] = {"foregroundColor": foreground}
            requests.append({
                "addConditionalFormatRule": {
                    "index": index,
                    "rule": {
                        "ranges": [self._data_range(sheet_id, 0, column_count)],
                        "booleanRule": {
                            "condition": {"type": "TEXT_EQ", "values": [{"userEnteredValue": text}]},
                            "format": cell_format,
                        },
                    },
                }
            })

        await self._batch_update(requests)
        self._format_rule_counts[sheet_id] = len(CONDITIONAL_FORMATS)

    @staticmethod
    def _data_range(sheet_id: int, start_column: int, end_column: int) -> Dict[str, int]:
        """Grid range below the header covered by validation and formatting"""
        return {
            "sheetId": sheet_id,
            "startRowIndex": 1,
            "endRowIndex": VALIDATION_ROW_LIMIT + 1,
            "startColumnIndex": start_column,
            "endColumnIndex": end_column,
        }
