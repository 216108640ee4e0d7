"""
Task model
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Task status values as written to the sheet"""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    BLOCKED = "Blocked"


class TaskPriority(str, Enum):
    """Task priority values as written to the sheet"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @classmethod
    def normalize(cls, value: Any) -> "TaskPriority":
        """Map input to a priority, falling back to Medium"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.MEDIUM


def split_tags(tags: str) -> List[str]:
    """Split a comma-separated tag field into trimmed, non-empty labels"""
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


class Task(BaseModel):
    """A task stored as one sheet row"""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(gt=0)
    title: str = Field(alias="task")
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    created_at: datetime = Field(alias="createdDate")
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    notes: str = ""
    tags: str = ""
    assignee: str = ""

    @property
    def tag_list(self) -> List[str]:
        return split_tags(self.tags)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_overdue(self, now: datetime) -> bool:
        """Due before now and not completed"""
        return self.due_date is not None and self.due_date < now and not self.is_completed


class TaskCreate(BaseModel):
    """Task creation model, also the shape of batch items"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(validation_alias=AliasChoices("title", "name", "task"))
    priority: Any = TaskPriority.MEDIUM.value
    due_date: Any = Field(None, validation_alias=AliasChoices("due_date", "dueDate"))
    notes: str = ""
    tags: str = ""
    assignee: str = ""

    @field_validator("title", mode="before")
    @classmethod
    def _title_to_str(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value

    @field_validator("notes", "tags", "assignee", mode="before")
    @classmethod
    def _blank_if_missing(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            # Tags may arrive as a list of labels
            return ", ".join(str(item).strip() for item in value if str(item).strip())
        return value

    @field_validator("title", "notes", "tags", "assignee")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()
