"""
Task management service
"""

from typing import Any, List, Optional, Union
from pydantic import ValidationError as PydanticValidationError
from src.models.task import Task, TaskCreate, TaskPriority, TaskStatus
from src.services.task_cache import TaskCacheService
from src.services.task_store import TaskStore
from src.utils.date_parser import parse_date
from src.utils.date_utils import get_current_datetime
from src.utils.error_handler import ValidationError
from src.utils.logger import logger


class TaskManager:
    """Create, complete, delete and list tasks through the store and cache"""

    def __init__(self, store: TaskStore, cache: Optional[TaskCacheService] = None):
        """
        Initialize task manager

        Args:
            store: Task store adapter
            cache: Task list cache (in-memory with the store's TTL when omitted)
        """
        self.store = store
        self.cache = cache or TaskCacheService(default_ttl=store.config.cache_duration)
        self.logger = logger

    def _build_task(self, task_id: int, data: TaskCreate) -> Task:
        """Normalize validated creation input into a new Pending task"""
        return Task(
            id=task_id,
            title=data.title,
            status=TaskStatus.PENDING,
            priority=TaskPriority.normalize(data.priority),
            created_at=get_current_datetime(),
            due_date=parse_date(data.due_date),
            notes=data.notes,
            tags=data.tags,
            assignee=data.assignee,
        )

    @staticmethod
    def _to_create(item: Any, position: int) -> TaskCreate:
        if isinstance(item, TaskCreate):
            return item
        try:
            return TaskCreate.model_validate(item)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid task at position {position}: {e}") from e

    async def add_task(
        self,
        title: str,
        priority: Union[str, TaskPriority] = TaskPriority.MEDIUM,
        due_date: Any = None,
        notes: Optional[str] = "",
        tags: Optional[str] = "",
        assignee: Optional[str] = "",
    ) -> int:
        """
        Create one task

        Args:
            title: Task title (required, trimmed)
            priority: Priority name; unknown values fall back to Medium
            due_date: Due date (datetime, date or string); unparseable input is dropped
            notes: Free text
            tags: Comma-separated labels
            assignee: Assignee name or email

        Returns:
            ID of the new task

        Raises:
            ValidationError: If the title is empty
            StoreNotInitialized: If the task sheet does not exist
        """
        data = self._to_create(
            {
                "title": title,
                "priority": priority,
                "due_date": due_date,
                "notes": notes,
                "tags": tags,
                "assignee": assignee,
            },
            0,
        )
        if not data.title:
            raise ValidationError("Task name is required")

        task = self._build_task(await self.store.next_id(), data)
        try:
            await self.store.append_row(task)
        finally:
            self.cache.invalidate_tasks()

        self.logger.info(f"Task created: '{task.title}' (ID: {task.id}, priority: {task.priority.value})")
        return task.id

    async def add_tasks_batch(self, tasks: Any) -> int:
        """
        Create many tasks with chunked writes

        Every item is validated before anything is written. Items are
        TaskCreate instances or dicts with title (or name), priority,
        due_date, notes, tags, assignee.

        Returns:
            Number of tasks actually added; less than len(tasks) when a chunk failed

        Raises:
            ValidationError: If tasks is not a non-empty list or an item is invalid
        """
        if not isinstance(tasks, list) or len(tasks) == 0:
            raise ValidationError("Invalid tasks array provided")

        items = [self._to_create(item, position) for position, item in enumerate(tasks)]
        for position, item in enumerate(items):
            if not item.title:
                raise ValidationError(f"Task name is required (position {position})")

        first_id = await self.store.next_id()
        records = [self._build_task(first_id + offset, item) for offset, item in enumerate(items)]

        try:
            result = await self.store.append_rows(records)
        finally:
            self.cache.invalidate_tasks()

        if result.partial:
            self.logger.warning(
                f"Batch add partially applied: {result.added}/{result.requested} tasks added"
            )
        else:
            self.logger.info(f"Batch add complete: {result.added} tasks added")
        return result.added

    async def complete_task(self, task_id: int) -> bool:
        """
        Mark a task Completed

        Returns:
            True if the task was found, False otherwise (not an error)
        """
        try:
            return await self.store.update_status(task_id, TaskStatus.COMPLETED)
        finally:
            self.cache.invalidate_tasks()

    async def delete_task(self, task_id: int) -> bool:
        """
        Delete a task by ID

        Returns:
            True if the task was found, False otherwise (not an error)
        """
        try:
            return await self.store.delete_by_id(task_id)
        finally:
            self.cache.invalidate_tasks()

    async def get_all_tasks(self, use_cache: bool = True) -> List[Task]:
        """
        Get every task, from the cache when allowed and live

        Args:
            use_cache: Serve a non-expired cached copy if present

        Returns:
            Tasks in store order
        """
        if use_cache:
            cached = self.cache.get_tasks()
            if cached is not None:
                self.logger.debug(f"Serving {len(cached)} tasks from cache")
                return cached

        tasks = await self.store.read_all()
        self.cache.put_tasks(tasks, ttl=self.store.config.cache_duration)
        return tasks

    async def list_tasks(
        self,
        status_filter: Union[str, TaskStatus, None] = None,
        use_cache: bool = True,
    ) -> List[Task]:
        """
        List tasks, optionally restricted to one status

        Args:
            status_filter: Exact status to keep; empty means no filtering
            use_cache: Serve a non-expired cached copy if present

        Raises:
            ValidationError: If status_filter is not a known status
        """
        status = None
        if status_filter:
            try:
                status = TaskStatus(status_filter)
            except ValueError as e:
                raise ValidationError(f"Unknown status: {status_filter}") from e

        tasks = await self.get_all_tasks(use_cache=use_cache)
        if status is None:
            return tasks
        return [task for task in tasks if task.status == status]

    def clear_cache(self):
        """Drop the cached task list"""
        self.cache.invalidate_tasks()
        self.logger.info("Task cache cleared")
