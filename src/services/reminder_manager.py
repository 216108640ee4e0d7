"""
Due task reminders
"""

from datetime import datetime
from typing import List, Optional
from src.models.task import Task, TaskStatus
from src.services.task_manager import TaskManager
from src.utils.date_utils import ensure_aware, get_current_datetime
from src.utils.formatters import format_due_tasks
from src.utils.logger import logger


class ReminderManager:
    """Finds pending tasks that are due; meant for a scheduled run"""

    def __init__(self, task_manager: TaskManager):
        self.task_manager = task_manager
        self.logger = logger

    async def check_due_tasks(self, now: Optional[datetime] = None) -> List[Task]:
        """
        Find pending tasks due at or before now

        Reads the store directly so that edits made in the sheet are seen.

        Args:
            now: Reference time (current time when omitted)

        Returns:
            Due or overdue pending tasks in store order
        """
        now = ensure_aware(now) if now is not None else get_current_datetime()
        pending = await self.task_manager.list_tasks(TaskStatus.PENDING, use_cache=False)
        due_tasks = [task for task in pending if task.due_date is not None and task.due_date <= now]

        if due_tasks:
            self.logger.info(format_due_tasks(due_tasks))
        else:
            self.logger.debug("No due tasks")
        return due_tasks
