"""
Analytics model
"""

from typing import Dict
from pydantic import BaseModel, Field


class TaskAnalytics(BaseModel):
    """Aggregates over one task list snapshot"""

    total: int = 0
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_priority: Dict[str, int] = Field(default_factory=dict)
    overdue: int = 0
    completion_rate: float = 0
    average_age_days: float = 0
    top_assignees: Dict[str, int] = Field(default_factory=dict)
    tag_distribution: Dict[str, int] = Field(default_factory=dict)
