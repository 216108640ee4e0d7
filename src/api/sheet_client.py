"""
Tabular store clients

A sheet is an ordered list of rows; each row is a list of cell values.
Row and column indexes are zero-based; row 0 holds the header.
"""

import copy
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional
from src.utils.error_handler import APIError
from src.utils.logger import logger

Row = List[Any]


class SheetClient(ABC):
    """Operations the task store needs from a spreadsheet"""

    @abstractmethod
    async def sheet_exists(self, sheet_name: str) -> bool:
        """Check whether a sheet with this name exists"""

    @abstractmethod
    async def create_sheet(self, sheet_name: str) -> None:
        """Create an empty sheet"""

    @abstractmethod
    async def clear(self, sheet_name: str) -> None:
        """Remove every value from the sheet"""

    @abstractmethod
    async def set_values(self, sheet_name: str, row: int, column: int, values: List[Row]) -> None:
        """Write a block of values with its top-left corner at (row, column)"""

    @abstractmethod
    async def append_rows(self, sheet_name: str, rows: List[Row]) -> None:
        """Append rows after the last non-empty row"""

    @abstractmethod
    async def get_values(self, sheet_name: str) -> List[Row]:
        """Read the full data range"""

    @abstractmethod
    async def delete_row(self, sheet_name: str, row: int) -> None:
        """Delete one row, shifting the rows below it up"""

    async def apply_layout(self, sheet_name: str, config) -> None:
        """Apply visual layout (header style, widths, dropdowns); optional"""
        return None

    async def close(self) -> None:
        return None


class InMemorySheetClient(SheetClient):
    """Sheets held in process memory"""

    def __init__(self, sheets: Optional[Dict[str, List[Row]]] = None):
        """
        Initialize in-memory client

        Args:
            sheets: Initial grids keyed by sheet name (copied)
        """
        self.sheets: Dict[str, List[Row]] = {
            name: [list(row) for row in rows] for name, rows in (sheets or {}).items()
        }
        self.layouts: Dict[str, Any] = {}
        self.logger = logger

    def _grid(self, sheet_name: str) -> List[Row]:
        if sheet_name not in self.sheets:
            raise APIError(f"Sheet '{sheet_name}' not found", error_code="404")
        return self.sheets[sheet_name]

    def _changed(self) -> None:
        """Hook called after every mutation"""

    async def sheet_exists(self, sheet_name: str) -> bool:
        return sheet_name in self.sheets

    async def create_sheet(self, sheet_name: str) -> None:
        if sheet_name in self.sheets:
            raise APIError(f"Sheet '{sheet_name}' already exists", error_code="400")
        self.sheets[sheet_name] = []
        self._changed()

    async def clear(self, sheet_name: str) -> None:
        self._grid(sheet_name).clear()
        self._changed()

    async def set_values(self, sheet_name: str, row: int, column: int, values: List[Row]) -> None:
        grid = self._grid(sheet_name)
        for offset, new_row in enumerate(values):
            index = row + offset
            while len(grid) <= index:
                grid.append([])
            target = grid[index]
            while len(target) < column + len(new_row):
                target.append("")
            target[column:column + len(new_row)] = list(new_row)
        self._changed()

    async def append_rows(self, sheet_name: str, rows: List[Row]) -> None:
        self._grid(sheet_name).extend(list(row) for row in rows)
        self._changed()

    async def get_values(self, sheet_name: str) -> List[Row]:
        return copy.deepcopy(self._grid(sheet_name))

    async def delete_row(self, sheet_name: str, row: int) -> None:
        grid = self._grid(sheet_name)
        if not 0 <= row < len(grid):
            raise APIError(f"Row {row} out of range for sheet '{sheet_name}'", error_code="400")
        del grid[row]
        self._changed()

    async def apply_layout(self, sheet_name: str, config) -> None:
        self._grid(sheet_name)
        self.layouts[sheet_name] = config


class LocalSheetClient(InMemorySheetClient):
    """In-memory sheets persisted to a JSON file after every change"""

    def __init__(self, sheet_file: str):
        super().__init__()
        self.sheet_file = Path(sheet_file)
        self._load()

    def _load(self):
        """Load sheets from file"""
        try:
            if self.sheet_file.exists():
                with open(self.sheet_file, 'r', encoding='utf-8') as f:
                    self.sheets = json.load(f)
                self.logger.debug(f"Loaded {len(self.sheets)} sheets from {self.sheet_file}")
        except (OSError, ValueError) as e:
            self.logger.warning(f"Failed to load sheet file {self.sheet_file}: {e}")
            self.sheets = {}

    def _changed(self) -> None:
        self.sheet_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.sheet_file, 'w', encoding='utf-8') as f:
            json.dump(self.sheets, f, ensure_ascii=False, indent=2)
