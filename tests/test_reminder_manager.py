"""
Tests for reminder manager
"""

import pytest
from datetime import datetime, timezone
from src.services.reminder_manager import ReminderManager

NOW = datetime(2025, 1, 11, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_check_due_tasks(task_manager, sheet_client, make_row):
    """Only pending tasks due at or before now are returned"""
    sheet_client.sheets["Tasks"].extend([
        make_row(1, "Overdue", due="2025-01-05T00:00:00+00:00"),
        make_row(2, "Due now", due="2025-01-11T00:00:00+00:00"),
        make_row(3, "Future", due="2025-02-01T00:00:00+00:00"),
        make_row(4, "Done", status="Completed", due="2025-01-05T00:00:00+00:00"),
        make_row(5, "No date"),
    ])
    reminders = ReminderManager(task_manager)

    due = await reminders.check_due_tasks(now=NOW)

    assert [task.id for task in due] == [1, 2]


@pytest.mark.asyncio
async def test_check_due_tasks_reads_live_store(task_manager, sheet_client, make_row):
    """Edits made after the list was cached are still seen"""
    await task_manager.list_tasks()
    sheet_client.sheets["Tasks"].append(make_row(1, "Added by hand", due="2025-01-01T00:00:00+00:00"))

    due = await ReminderManager(task_manager).check_due_tasks(now=NOW)

    assert [task.title for task in due] == ["Added by hand"]
