"""
Analytics service
"""

from collections import Counter
from datetime import datetime
from typing import Iterable, Optional
from src.models.analytics import TaskAnalytics
from src.models.task import Task, TaskPriority, TaskStatus
from src.services.task_manager import TaskManager
from src.utils.date_utils import days_between, ensure_aware, get_current_datetime
from src.utils.logger import logger


def compute_task_analytics(tasks: Iterable[Task], now: Optional[datetime] = None) -> TaskAnalytics:
    """
    Aggregate a task list snapshot in one pass

    Args:
        tasks: Tasks to aggregate
        now: Reference time for overdue and age (current time when omitted)

    Returns:
        Counts per status and priority (every member present), overdue count,
        completion rate and average age (2 decimal places, 0 for no tasks),
        assignee counts and tag counts
    """
    now = ensure_aware(now) if now is not None else get_current_datetime()

    by_status = {status.value: 0 for status in TaskStatus}
    by_priority = {priority.value: 0 for priority in TaskPriority}
    assignees: Counter = Counter()
    tag_distribution: Counter = Counter()
    total = 0
    overdue = 0
    completed = 0
    total_age = 0.0

    for task in tasks:
        total += 1
        by_status[task.status.value] += 1
        by_priority[task.priority.value] += 1

        if task.is_overdue(now):
            overdue += 1
        if task.is_completed:
            completed += 1

        total_age += days_between(task.created_at, now)

        if task.assignee:
            assignees[task.assignee] += 1
        tag_distribution.update(task.tag_list)

    return TaskAnalytics(
        total=total,
        by_status=by_status,
        by_priority=by_priority,
        overdue=overdue,
        completion_rate=round(completed / total * 100, 2) if total else 0,
        average_age_days=round(total_age / total, 2) if total else 0,
        top_assignees=dict(assignees.most_common()),
        tag_distribution=dict(tag_distribution),
    )


class AnalyticsService:
    """Service for analytics and reporting"""

    def __init__(self, task_manager: TaskManager):
        """
        Initialize analytics service

        Args:
            task_manager: Source of the task list
        """
        self.task_manager = task_manager
        self.logger = logger

    async def get_task_analytics(self, use_cache: bool = True) -> TaskAnalytics:
        """Aggregate the current task list"""
        tasks = await self.task_manager.get_all_tasks(use_cache=use_cache)
        analytics = compute_task_analytics(tasks)
        self.logger.debug(
            f"Analytics computed: {analytics.total} tasks, "
            f"{analytics.completion_rate}% completed, {analytics.overdue} overdue"
        )
        return analytics
