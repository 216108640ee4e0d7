"""
Immutable tracker configuration passed into each component
"""

from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.config import constants


class TrackerConfig(BaseModel):
    """Sheet layout, option lists and tuning knobs for one task store"""

    model_config = ConfigDict(frozen=True)

    sheet_name: str = constants.SHEET_NAME
    headers: Tuple[str, ...] = tuple(constants.HEADERS)
    column_widths: Tuple[int, ...] = tuple(constants.COLUMN_WIDTHS)
    status_options: Tuple[str, ...] = tuple(constants.STATUS_OPTIONS)
    priority_options: Tuple[str, ...] = tuple(constants.PRIORITY_OPTIONS)
    batch_size: int = Field(constants.BATCH_SIZE, gt=0)
    batch_delay: float = Field(constants.BATCH_DELAY, ge=0)
    cache_duration: int = Field(constants.CACHE_DURATION, ge=0)

    @model_validator(mode="after")
    def _check_widths(self) -> "TrackerConfig":
        if len(self.column_widths) != len(self.headers):
            raise ValueError("column_widths must have one entry per header")
        return self

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @classmethod
    def from_settings(cls, settings) -> "TrackerConfig":
        """Build config from application settings"""
        return cls(
            sheet_name=settings.SHEET_NAME,
            batch_size=settings.BATCH_SIZE,
            batch_delay=settings.BATCH_DELAY,
            cache_duration=settings.CACHE_DURATION,
        )
