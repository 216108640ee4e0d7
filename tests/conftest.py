"""
Pytest configuration and fixtures
"""

import pytest
from datetime import datetime, timezone
from src.api.dialog_client import RecordingDialogClient
from src.api.sheet_client import InMemorySheetClient
from src.config.tracker_config import TrackerConfig
from src.models.task import Task
from src.services.task_cache import TaskCacheService
from src.services.task_manager import TaskManager
from src.services.task_store import TaskStore


class FakeClock:
    """Controllable time source for TTL tests"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def tracker_config():
    """Default layout without inter-chunk pauses"""
    return TrackerConfig(batch_delay=0)


@pytest.fixture
def sheet_client(tracker_config):
    """In-memory client holding an initialized (header only) task sheet"""
    return InMemorySheetClient({tracker_config.sheet_name: [list(tracker_config.headers)]})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def task_cache_service(tracker_config, clock):
    """In-memory cache driven by the fake clock"""
    return TaskCacheService(default_ttl=tracker_config.cache_duration, clock=clock)


@pytest.fixture
def task_store(sheet_client, tracker_config):
    return TaskStore(sheet_client, tracker_config)


@pytest.fixture
def task_manager(task_store, task_cache_service):
    """Task manager over the in-memory sheet"""
    return TaskManager(task_store, task_cache_service)


@pytest.fixture
def dialog_client():
    return RecordingDialogClient()


@pytest.fixture
def make_row():
    """Build a raw sheet row in header order"""
    def _make_row(
        task_id,
        title="Task",
        status="Pending",
        priority="Medium",
        created="2025-01-01T00:00:00+00:00",
        due="",
        notes="",
        tags="",
        assignee="",
    ):
        return [task_id, title, status, priority, created, due, notes, tags, assignee]

    return _make_row


@pytest.fixture
def make_task():
    """Build a Task with fixed timestamps"""
    def _make_task(task_id, title="Task", **kwargs):
        kwargs.setdefault("created_at", datetime(2025, 1, 1, tzinfo=timezone.utc))
        return Task(id=task_id, title=title, **kwargs)

    return _make_task
