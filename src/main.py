"""
Main application entry point
"""

import argparse
import asyncio
import sys
from datetime import timedelta
from typing import Any, Awaitable, Callable, List, Optional, Tuple
from src.api.dialog_client import ConsoleDialogClient, DialogClient
from src.api.google_sheets_client import GoogleSheetsClient
from src.api.sheet_client import LocalSheetClient, SheetClient
from src.config.settings import settings
from src.config.tracker_config import TrackerConfig
from src.models.response import OperationResponse
from src.models.task import TaskStatus
from src.services.analytics_service import AnalyticsService, compute_task_analytics
from src.services.reminder_manager import ReminderManager
from src.services.task_cache import TaskCacheService
from src.services.task_manager import TaskManager
from src.services.task_store import TaskStore
from src.utils.date_utils import get_current_datetime
from src.utils.error_handler import format_error_message
from src.utils.formatters import (
    format_analytics_dashboard,
    format_detailed_report,
    format_due_tasks,
    format_task_summary,
)
from src.utils.logger import logger

# Menu label and TaskTrackerApp method, in display order; None is a separator
MENU_ITEMS: List[Optional[Tuple[str, str]]] = [
    ("Initialize Task Manager", "initialize_task_manager"),
    None,
    ("Add Sample Tasks", "add_sample_data"),
    ("Show All Tasks", "show_all_tasks"),
    ("Show Pending Tasks", "show_pending_tasks"),
    ("Show Completed Tasks", "show_completed_tasks"),
    None,
    ("Show Analytics Dashboard", "show_analytics_dashboard"),
    ("Generate Report", "generate_detailed_report"),
    ("Check Due Tasks", "check_due_tasks"),
    None,
    ("Refresh Data", "refresh_task_data"),
    ("Clear Cache", "clear_task_cache"),
]

SAMPLE_TASKS = [
    {
        "name": "Implement advanced GitHub workflow",
        "priority": "Critical",
        "due_in_days": 3,
        "notes": "Set up CI/CD pipeline with automated testing",
        "tags": "devops, github, automation",
        "assignee": "dev.team@company.com",
    },
    {
        "name": "AI code review integration",
        "priority": "High",
        "due_in_days": 7,
        "notes": "Integrate AI tools for automated code review",
        "tags": "ai, code-review, automation",
        "assignee": "ai.team@company.com",
    },
    {
        "name": "Performance optimization analysis",
        "priority": "Medium",
        "due_in_days": 14,
        "notes": "Analyze and optimize application performance",
        "tags": "performance, optimization, monitoring",
        "assignee": "performance.team@company.com",
    },
]


def build_sheet_client() -> SheetClient:
    """Google Sheets when a spreadsheet is configured, otherwise a local JSON grid"""
    if settings.use_google_sheets:
        settings.validate()
        return GoogleSheetsClient(
            spreadsheet_id=settings.SPREADSHEET_ID,
            access_token=settings.GOOGLE_SHEETS_ACCESS_TOKEN,
        )
    logger.info(f"No spreadsheet configured, using local sheet file {settings.SHEET_FILE_PATH}")
    return LocalSheetClient(settings.SHEET_FILE_PATH)


class TaskTrackerApp:
    """Main application: wires the services and exposes the menu actions"""

    def __init__(
        self,
        sheet_client: Optional[SheetClient] = None,
        config: Optional[TrackerConfig] = None,
        dialog: Optional[DialogClient] = None,
        cache: Optional[TaskCacheService] = None,
    ):
        """
        Initialize application

        Args:
            sheet_client: Tabular store (built from settings when omitted)
            config: Tracker configuration (built from settings when omitted)
            dialog: Presentation surface (console when omitted)
            cache: Task list cache (built from settings when omitted)
        """
        self.config = config or TrackerConfig.from_settings(settings)
        self.sheet_client = sheet_client or build_sheet_client()
        self.cache = cache or TaskCacheService(
            cache_file=settings.CACHE_FILE_PATH,
            default_ttl=self.config.cache_duration,
        )
        self.store = TaskStore(self.sheet_client, self.config)
        self.task_manager = TaskManager(self.store, self.cache)
        self.analytics_service = AnalyticsService(self.task_manager)
        self.reminder_manager = ReminderManager(self.task_manager)
        self.dialog = dialog or ConsoleDialogClient()
        self.logger = logger

    async def _run(
        self,
        title: str,
        action: Callable[[], Awaitable[str]],
        error_prefix: str = "",
    ) -> OperationResponse:
        """Run a menu action and report its outcome in one dialog"""
        try:
            message = await action()
        except Exception as e:
            message = error_prefix + format_error_message(e)
            self.dialog.show_text_dialog(title, message)
            return OperationResponse(message=message, success=False)
        self.dialog.show_text_dialog(title, message)
        return OperationResponse(message=message)

    async def initialize_task_manager(self) -> OperationResponse:
        """Reset the task sheet and load sample tasks"""
        async def action() -> str:
            await self.store.ensure_store()
            self.task_manager.clear_cache()
            added = await self._add_sample_tasks()
            self.logger.info(f"Task Manager initialized at {get_current_datetime().isoformat()}")
            return f"Advanced Task Manager initialized successfully! ({added} sample tasks added)"

        return await self._run("Initialize Task Manager", action, error_prefix="Initialization failed: ")

    async def _add_sample_tasks(self) -> int:
        now = get_current_datetime()
        tasks = []
        for sample in SAMPLE_TASKS:
            item = {key: value for key, value in sample.items() if key != "due_in_days"}
            item["due_date"] = now + timedelta(days=sample["due_in_days"])
            tasks.append(item)
        return await self.task_manager.add_tasks_batch(tasks)

    async def add_sample_data(self) -> OperationResponse:
        async def action() -> str:
            added = await self._add_sample_tasks()
            return f"Added {added} sample tasks"

        return await self._run("Add Sample Tasks", action)

    async def add_task(self, title: str, **fields: Any) -> OperationResponse:
        async def action() -> str:
            task_id = await self.task_manager.add_task(title, **fields)
            return f"Task '{title.strip()}' created (ID: {task_id})"

        return await self._run("Add Task", action)

    async def complete_task(self, task_id: int) -> OperationResponse:
        async def action() -> str:
            if await self.task_manager.complete_task(task_id):
                return f"Task {task_id} marked as completed"
            return f"Task {task_id} not found"

        return await self._run("Complete Task", action)

    async def delete_task(self, task_id: int) -> OperationResponse:
        async def action() -> str:
            if await self.task_manager.delete_task(task_id):
                return f"Task {task_id} deleted"
            return f"Task {task_id} not found"

        return await self._run("Delete Task", action)

    async def show_tasks(self, status: Optional[TaskStatus], title: str) -> OperationResponse:
        async def action() -> str:
            tasks = await self.task_manager.list_tasks(status)
            return format_task_summary(tasks, title)

        return await self._run(title, action)

    async def show_all_tasks(self) -> OperationResponse:
        return await self.show_tasks(None, "All Tasks")

    async def show_pending_tasks(self) -> OperationResponse:
        return await self.show_tasks(TaskStatus.PENDING, "Pending Tasks")

    async def show_completed_tasks(self) -> OperationResponse:
        return await self.show_tasks(TaskStatus.COMPLETED, "Completed Tasks")

    async def show_analytics_dashboard(self) -> OperationResponse:
        async def action() -> str:
            analytics = await self.analytics_service.get_task_analytics()
            return format_analytics_dashboard(analytics)

        return await self._run("Analytics Dashboard", action)

    async def generate_detailed_report(self) -> OperationResponse:
        async def action() -> str:
            tasks = await self.task_manager.get_all_tasks()
            now = get_current_datetime()
            return format_detailed_report(compute_task_analytics(tasks, now), tasks, now)

        return await self._run("Detailed Report", action)

    async def check_due_tasks(self) -> OperationResponse:
        async def action() -> str:
            return format_due_tasks(await self.reminder_manager.check_due_tasks())

        return await self._run("Due Tasks", action)

    async def refresh_task_data(self) -> OperationResponse:
        async def action() -> str:
            tasks = await self.task_manager.get_all_tasks(use_cache=False)
            return f"Task data refreshed ({len(tasks)} tasks)"

        return await self._run("Refresh Data", action)

    async def clear_task_cache(self) -> OperationResponse:
        async def action() -> str:
            self.task_manager.clear_cache()
            return "Task cache cleared"

        return await self._run("Clear Cache", action)

    async def close(self):
        await self.sheet_client.close()


def format_menu() -> str:
    """Menu text with the CLI command for each entry"""
    lines = []
    for item in MENU_ITEMS:
        if item is None:
            lines.append("")
            continue
        label, method = item
        lines.append(f"{label:<28} {method.replace('_', '-')}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="task-tracker",
        description="Spreadsheet-backed task tracker.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("menu", help="Show the menu")
    for item in MENU_ITEMS:
        if item is not None:
            label, method = item
            commands.add_parser(method.replace("_", "-"), help=label)

    add = commands.add_parser("add", help="Add a task")
    add.add_argument("title", help="Task title")
    add.add_argument("--priority", default="Medium", help="Low, Medium, High or Critical")
    add.add_argument("--due", default=None, help="Due date, e.g. 2025-11-05 or tomorrow")
    add.add_argument("--notes", default="")
    add.add_argument("--tags", default="", help="Comma-separated labels")
    add.add_argument("--assignee", default="")

    for name, help_text in (("complete", "Mark a task completed"), ("delete", "Delete a task")):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("task_id", type=int, help="Task ID")

    listing = commands.add_parser("list", help="List tasks")
    listing.add_argument(
        "--status",
        default=None,
        choices=[status.value for status in TaskStatus],
        help="Only tasks with this status",
    )
    return parser


async def run_command(app: TaskTrackerApp, args: argparse.Namespace) -> OperationResponse:
    """Dispatch parsed CLI arguments to the application"""
    if args.command == "add":
        return await app.add_task(
            args.title,
            priority=args.priority,
            due_date=args.due,
            notes=args.notes,
            tags=args.tags,
            assignee=args.assignee,
        )
    if args.command == "complete":
        return await app.complete_task(args.task_id)
    if args.command == "delete":
        return await app.delete_task(args.task_id)
    if args.command == "list":
        if args.status:
            return await app.show_tasks(TaskStatus(args.status), f"{args.status} Tasks")
        return await app.show_all_tasks()
    return await getattr(app, args.command.replace("-", "_"))()


async def _main(args: argparse.Namespace) -> int:
    app = TaskTrackerApp()
    try:
        response = await run_command(app, args)
    finally:
        await app.close()
    return 0 if response.success else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logger.setLevel("DEBUG")
        for handler in logger.handlers:
            handler.setLevel("DEBUG")

    if args.command == "menu":
        print(format_menu())
        return 0

    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
