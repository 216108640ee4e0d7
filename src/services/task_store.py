"""
Task store: maps tasks to rows of a single sheet
"""

from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional
from src.api.sheet_client import Row, SheetClient
from src.config.tracker_config import TrackerConfig
from src.models.response import BatchAppendResult
from src.models.task import Task, TaskPriority, TaskStatus
from src.services.batch_processor import BatchProcessor
from src.utils.date_parser import parse_date
from src.utils.date_utils import USER_TIMEZONE
from src.utils.error_handler import StoreNotInitialized
from src.utils.logger import logger

ID_COLUMN = 0
STATUS_COLUMN = 2
ROW_WIDTH = 9

# Day zero of spreadsheet serial dates
SERIAL_EPOCH = datetime(1899, 12, 30, tzinfo=USER_TIMEZONE)


def parse_task_id(value: Any) -> Optional[int]:
    """Read an id cell; numeric stores may return 3.0 for 3"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not number.is_integer() or number <= 0:
        return None
    return int(number)


def parse_sheet_datetime(value: Any) -> Optional[datetime]:
    """Read a date cell written by us (ISO string) or typed by hand (serial number)"""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return SERIAL_EPOCH + timedelta(days=value)
    return parse_date(value)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def task_to_row(task: Task) -> Row:
    """Serialize a task in header column order"""
    return [
        task.id,
        task.title,
        task.status.value,
        task.priority.value,
        task.created_at.isoformat(),
        task.due_date.isoformat() if task.due_date else "",
        task.notes,
        task.tags,
        task.assignee,
    ]


def row_to_task(row: Row) -> Optional[Task]:
    """
    Deserialize one row

    Returns:
        Task, or None for a blank row

    Raises:
        ValueError: If the row has no usable id, title or created date
    """
    cells = list(row) + [""] * (ROW_WIDTH - len(row))
    if all(_text(cell) == "" for cell in cells):
        return None

    task_id = parse_task_id(cells[0])
    if task_id is None:
        raise ValueError(f"invalid task id {cells[0]!r}")

    title = _text(cells[1])
    if not title:
        raise ValueError(f"task {task_id} has an empty title")

    created_at = parse_sheet_datetime(cells[4])
    if created_at is None:
        raise ValueError(f"task {task_id} has an invalid created date {cells[4]!r}")

    status_value = _text(cells[2])
    try:
        status = TaskStatus(status_value)
    except ValueError:
        logger.warning(f"Task {task_id} has unknown status {status_value!r}, reading as Pending")
        status = TaskStatus.PENDING

    return Task(
        id=task_id,
        title=title,
        status=status,
        priority=TaskPriority.normalize(_text(cells[3])),
        created_at=created_at,
        due_date=parse_sheet_datetime(cells[5]),
        notes=_text(cells[6]),
        tags=_text(cells[7]),
        assignee=_text(cells[8]),
    )


class TaskStore:
    """
    Task rows in one sheet; row 0 is the header

    Lookups by id scan every row. Row positions shift on delete; ids do not.
    """

    def __init__(
        self,
        sheet_client: SheetClient,
        config: TrackerConfig,
        batch_processor: Optional[BatchProcessor] = None,
    ):
        """
        Initialize task store

        Args:
            sheet_client: Tabular store client
            config: Sheet layout and batching settings
            batch_processor: Chunked writer (built from config when omitted)
        """
        self.client = sheet_client
        self.config = config
        self.batch_processor = batch_processor or BatchProcessor(
            batch_size=config.batch_size,
            delay=config.batch_delay,
        )
        self.logger = logger

    @property
    def sheet_name(self) -> str:
        return self.config.sheet_name

    async def ensure_store(self):
        """
        Create the sheet with its header row

        An existing sheet is cleared and rebuilt: this is a reset, not a migration.
        """
        if await self.client.sheet_exists(self.sheet_name):
            self.logger.warning(f"Sheet '{self.sheet_name}' already exists, clearing it")
            await self.client.clear(self.sheet_name)
        else:
            await self.client.create_sheet(self.sheet_name)

        await self.client.set_values(self.sheet_name, 0, 0, [list(self.config.headers)])
        await self.client.apply_layout(self.sheet_name, self.config)
        self.logger.info(f"Task sheet '{self.sheet_name}' initialized")

    async def _require_sheet(self):
        if not await self.client.sheet_exists(self.sheet_name):
            raise StoreNotInitialized(self.sheet_name)

    async def _read_rows(self) -> List[Row]:
        await self._require_sheet()
        return await self.client.get_values(self.sheet_name)

    @staticmethod
    def _next_id_from_rows(rows: List[Row]) -> int:
        max_id = 0
        for row in rows[1:]:
            task_id = parse_task_id(row[ID_COLUMN]) if row else None
            if task_id is not None:
                max_id = max(max_id, task_id)
        return max(len(rows), max_id + 1, 1)

    async def next_id(self) -> int:
        """
        Id for the next task

        The row count (header included) at creation time, bumped past the
        largest existing id so that ids freed by deletes are never reused.
        """
        return self._next_id_from_rows(await self._read_rows())

    async def append_row(self, task: Task):
        """Append one task row"""
        await self._require_sheet()
        await self.client.append_rows(self.sheet_name, [task_to_row(task)])
        self.logger.debug(f"Appended task {task.id}: '{task.title}'")

    async def append_rows(self, tasks: Iterable[Task]) -> BatchAppendResult:
        """
        Append many task rows in chunks of config.batch_size

        A failed chunk does not abort the rest; compare result.added with
        result.requested to detect partial application.
        """
        await self._require_sheet()

        async def write_chunk(chunk: List[Task]):
            await self.client.append_rows(self.sheet_name, [task_to_row(task) for task in chunk])

        return await self.batch_processor.process_batch(list(tasks), write_chunk)

    async def read_all(self) -> List[Task]:
        """All tasks in store order; malformed rows are logged and skipped"""
        rows = await self._read_rows()
        tasks = []
        for index, row in enumerate(rows[1:], start=1):
            try:
                task = row_to_task(row)
            except ValueError as e:
                self.logger.warning(f"Skipping row {index + 1}: {e}")
                continue
            if task is not None:
                tasks.append(task)
        return tasks

    async def _find_row(self, task_id: int) -> Optional[int]:
        rows = await self._read_rows()
        for index in range(1, len(rows)):
            row = rows[index]
            if row and parse_task_id(row[ID_COLUMN]) == task_id:
                return index
        return None

    async def update_status(self, task_id: int, status: TaskStatus) -> bool:
        """
        Set the status of the first row with this id

        Returns:
            True if a row was updated, False if the id was not found
        """
        index = await self._find_row(task_id)
        if index is None:
            self.logger.debug(f"Task {task_id} not found, status unchanged")
            return False
        await self.client.set_values(self.sheet_name, index, STATUS_COLUMN, [[TaskStatus(status).value]])
        self.logger.info(f"Task {task_id} status set to {TaskStatus(status).value}")
        return True

    async def delete_by_id(self, task_id: int) -> bool:
        """
        Delete the first row with this id; later rows shift up

        Returns:
            True if a row was deleted, False if the id was not found
        """
        index = await self._find_row(task_id)
        if index is None:
            self.logger.debug(f"Task {task_id} not found, nothing deleted")
            return False
        await self.client.delete_row(self.sheet_name, index)
        self.logger.info(f"Task {task_id} deleted")
        return True
