"""
HTTP API for the task tracker
"""

from typing import Any, Optional
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from src.api.dialog_client import RecordingDialogClient
from src.config.settings import settings
from src.main import TaskTrackerApp
from src.models.task import TaskStatus
from src.utils.error_handler import ValidationError, format_error_message
from src.utils.logger import logger


class TaskCreateRequest(BaseModel):
    """Body for POST /api/tasks"""
    title: str
    priority: str = "Medium"
    due_date: Optional[str] = None
    notes: str = ""
    tags: str = ""
    assignee: str = ""


class BatchCreateRequest(BaseModel):
    """Body for POST /api/tasks/batch"""
    tasks: Any = Field(default_factory=list)


def _error(e: Exception, status_code: int = 400) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": format_error_message(e)},
    )


def create_app(tracker: Optional[TaskTrackerApp] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        tracker: Application instance (built from settings when omitted)
    """
    tracker = tracker or TaskTrackerApp(dialog=RecordingDialogClient(max_dialogs=1))
    app = FastAPI(title="Task Tracker API")
    app.state.tracker = tracker

    @app.post("/api/init")
    async def initialize():
        """Reset the task sheet and load sample tasks"""
        response = await tracker.initialize_task_manager()
        return JSONResponse(status_code=200 if response.success else 500, content=response.model_dump())

    @app.get("/api/tasks")
    async def list_tasks(status: Optional[str] = None, use_cache: bool = True):
        """List tasks, optionally filtered by status"""
        try:
            tasks = await tracker.task_manager.list_tasks(status, use_cache=use_cache)
        except ValidationError as e:
            return _error(e)
        except Exception as e:
            return _error(e, 500)
        return {"success": True, "tasks": [task.model_dump(mode="json") for task in tasks]}

    @app.post("/api/tasks")
    async def add_task(request: TaskCreateRequest):
        """Create one task"""
        try:
            task_id = await tracker.task_manager.add_task(**request.model_dump())
        except ValidationError as e:
            return _error(e)
        except Exception as e:
            return _error(e, 500)
        return {"success": True, "id": task_id}

    @app.post("/api/tasks/batch")
    async def add_tasks_batch(request: BatchCreateRequest):
        """Create many tasks"""
        try:
            added = await tracker.task_manager.add_tasks_batch(request.tasks)
        except ValidationError as e:
            return _error(e)
        except Exception as e:
            return _error(e, 500)
        requested = len(request.tasks)
        return {"success": added == requested, "added": added, "requested": requested}

    @app.post("/api/tasks/{task_id}/complete")
    async def complete_task(task_id: int):
        """Mark a task completed; found is false for unknown ids"""
        try:
            found = await tracker.task_manager.complete_task(task_id)
        except Exception as e:
            return _error(e, 500)
        return {"success": True, "found": found}

    @app.delete("/api/tasks/{task_id}")
    async def delete_task(task_id: int):
        """Delete a task; found is false for unknown ids"""
        try:
            found = await tracker.task_manager.delete_task(task_id)
        except Exception as e:
            return _error(e, 500)
        return {"success": True, "found": found}

    @app.get("/api/analytics")
    async def analytics():
        """Aggregated analytics for the current task list"""
        try:
            result = await tracker.analytics_service.get_task_analytics()
        except Exception as e:
            return _error(e, 500)
        return {"success": True, "analytics": result.model_dump()}

    @app.get("/api/report")
    async def report():
        """Detailed text report"""
        response = await tracker.generate_detailed_report()
        return JSONResponse(status_code=200 if response.success else 500, content=response.model_dump())

    @app.get("/api/due")
    async def due_tasks():
        """Pending tasks that are due or overdue"""
        try:
            tasks = await tracker.reminder_manager.check_due_tasks()
        except Exception as e:
            return _error(e, 500)
        return {"success": True, "tasks": [task.model_dump(mode="json") for task in tasks]}

    @app.post("/api/cache/clear")
    async def clear_cache():
        """Drop the cached task list"""
        tracker.task_manager.clear_cache()
        return {"success": True}

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok", "statuses": [status.value for status in TaskStatus]}

    logger.debug("HTTP API created")
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=settings.WEB_PORT)
