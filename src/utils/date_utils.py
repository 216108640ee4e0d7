"""
Centralized date/time utilities for the configured user timezone
All date/time operations should use functions from this module
"""

from datetime import datetime, timezone, timedelta
from src.config.settings import settings

# Singleton timezone object
USER_TIMEZONE = timezone(timedelta(hours=settings.USER_TIMEZONE_OFFSET))

SECONDS_PER_DAY = 24 * 60 * 60


def get_current_datetime() -> datetime:
    """
    Get current datetime in the user timezone

    Returns:
        Current timezone-aware datetime
    """
    return datetime.now(USER_TIMEZONE)


def ensure_aware(dt: datetime) -> datetime:
    """Attach the user timezone to naive datetimes"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=USER_TIMEZONE)
    return dt


def days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end"""
    return (ensure_aware(end) - ensure_aware(start)).total_seconds() / SECONDS_PER_DAY


def format_date_for_user(dt: datetime) -> str:
    """Format date as YYYY-MM-DD"""
    return ensure_aware(dt).strftime("%Y-%m-%d")
