"""
Message formatting utilities
"""

from datetime import datetime
from typing import Dict, List, Optional
from src.models.analytics import TaskAnalytics
from src.models.task import Task
from src.utils.date_utils import format_date_for_user, get_current_datetime


def format_task_line(task: Task) -> str:
    """One-line task description used in summaries"""
    return f"ID: {task.id} - {task.title} ({task.status.value})"


def format_task_summary(tasks: List[Task], title: str) -> str:
    """
    Format a task list for a dialog

    Args:
        tasks: Tasks to list
        title: Summary title, e.g. "Pending Tasks"

    Returns:
        Formatted message
    """
    message = f"{title} ({len(tasks)} total):\n\n"

    if not tasks:
        return message + "No tasks found."

    return message + "\n".join(format_task_line(task) for task in tasks)


def _format_counts(counts: Dict[str, int], indent: str = "  ") -> List[str]:
    return [f"{indent}{name}: {count}" for name, count in counts.items()]


def format_analytics_dashboard(analytics: TaskAnalytics) -> str:
    """
    Format the analytics dashboard

    Args:
        analytics: Aggregated analytics

    Returns:
        Formatted message
    """
    lines = [
        "TASK ANALYTICS DASHBOARD",
        "",
        f"Total Tasks: {analytics.total}",
        f"Completion Rate: {analytics.completion_rate:.2f}%",
        f"Overdue Tasks: {analytics.overdue}",
        f"Average Age: {analytics.average_age_days:.2f} days",
        "",
        "BY STATUS:",
        *_format_counts(analytics.by_status),
        "",
        "BY PRIORITY:",
        *_format_counts(analytics.by_priority),
    ]
    return "\n".join(lines)


def format_detailed_report(
    analytics: TaskAnalytics,
    tasks: List[Task],
    now: Optional[datetime] = None,
) -> str:
    """
    Format the dashboard plus assignee, tag and overdue breakdowns

    Args:
        analytics: Aggregated analytics for tasks
        tasks: Task list the analytics were computed from
        now: Reference time for overdue detection

    Returns:
        Formatted report
    """
    now = now or get_current_datetime()
    lines = [format_analytics_dashboard(analytics), "", "TOP ASSIGNEES:"]
    lines.extend(_format_counts(analytics.top_assignees) or ["  (none)"])

    lines.extend(["", "TAGS:"])
    tags = sorted(analytics.tag_distribution.items(), key=lambda item: (-item[1], item[0]))
    lines.extend([f"  {tag}: {count}" for tag, count in tags] or ["  (none)"])

    lines.extend(["", "OVERDUE:"])
    overdue = [task for task in tasks if task.is_overdue(now)]
    lines.extend(
        [f"  {format_task_line(task)} due {format_date_for_user(task.due_date)}" for task in overdue]
        or ["  (none)"]
    )
    return "\n".join(lines)


def format_due_tasks(tasks: List[Task]) -> str:
    """
    Format the due task reminder

    Args:
        tasks: Due or overdue tasks

    Returns:
        Formatted message
    """
    if not tasks:
        return "No overdue or due tasks."

    lines = [f"You have {len(tasks)} overdue or due tasks:", ""]
    for task in tasks:
        due = format_date_for_user(task.due_date) if task.due_date else "no date"
        lines.append(f"- {task.title} (Due: {due})")
    return "\n".join(lines)
