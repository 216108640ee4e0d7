"""
Date parsing utilities for due dates and stored timestamps
"""

from datetime import date, datetime, timedelta
from typing import Any, Optional
from src.utils.date_utils import USER_TIMEZONE, ensure_aware, get_current_datetime
from src.utils.logger import logger

RELATIVE_DAYS = {
    "today": 0,
    "tomorrow": 1,
    "day after tomorrow": 2,
    "yesterday": -1,
}

TIME_FORMATS = [
    "%d.%m.%Y %H:%M:%S",  # 08.11.2025 10:00:00
    "%d.%m.%Y %H:%M",     # 08.11.2025 10:00
    "%Y-%m-%d %H:%M:%S",  # 2025-11-08 10:00:00
    "%Y-%m-%d %H:%M",     # 2025-11-08 10:00
]

DATE_FORMATS = [
    "%Y-%m-%d",
    "%d.%m.%Y",
    "%m/%d/%Y",
    "%d/%m/%Y",
]


def parse_date(value: Any) -> Optional[datetime]:
    """
    Best-effort conversion of a due date to an aware datetime

    Args:
        value: datetime, date, or string (e.g. "tomorrow", "2024-11-05",
            "08.11.2025 10:00", ISO 8601)

    Returns:
        Timezone-aware datetime, or None if the value is empty or cannot be parsed
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return ensure_aware(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=USER_TIMEZONE)

    if not isinstance(value, str):
        logger.warning(f"Invalid due date provided: {value!r}")
        return None

    original = value.strip()
    if not original:
        return None
    lowered = original.lower()

    # Relative dates resolve to midnight in the user timezone
    if lowered in RELATIVE_DAYS:
        today = get_current_datetime().replace(hour=0, minute=0, second=0, microsecond=0)
        return today + timedelta(days=RELATIVE_DAYS[lowered])

    try:
        return ensure_aware(datetime.fromisoformat(original.replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in TIME_FORMATS + DATE_FORMATS:
        try:
            return datetime.strptime(original, fmt).replace(tzinfo=USER_TIMEZONE)
        except ValueError:
            continue

    logger.warning(f"Invalid due date provided: {original!r}")
    return None
