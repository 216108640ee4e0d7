"""
Task cache service: time-bounded key/value cache for the task list
"""

import json
import time
from typing import Any, Callable, Dict, List, Optional
from pathlib import Path
from pydantic import ValidationError as PydanticValidationError
from src.config.constants import CACHE_DURATION, TASKS_CACHE_KEY
from src.models.task import Task
from src.utils.logger import logger


class TaskCacheService:
    """
    Service for caching values with a time-to-live

    Entries are kept in memory and, when a cache file is given, mirrored to
    JSON so that separate runs share them. The cache is best-effort: load,
    save and parse failures are logged and never raised.
    """

    def __init__(
        self,
        cache_file: Optional[str] = None,
        default_ttl: int = CACHE_DURATION,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize task cache service

        Args:
            cache_file: Path to cache file (optional, in-memory only when omitted)
            default_ttl: Time-to-live in seconds for put() without explicit ttl
            clock: Returns current time in seconds since the epoch
        """
        self.cache_file = Path(cache_file) if cache_file else None
        self.default_ttl = default_ttl
        self.clock = clock
        self.logger = logger
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._load_cache()

    def _load_cache(self):
        """Load cache from file"""
        if self.cache_file is None:
            return
        try:
            if self.cache_file.exists():
                with open(self.cache_file, 'r', encoding='utf-8') as f:
                    self._cache = json.load(f)
                self.logger.debug(f"Loaded {len(self._cache)} cache entries")
            else:
                self._cache = {}
        except (OSError, ValueError) as e:
            self.logger.warning(f"Failed to load cache: {e}")
            self._cache = {}

    def _save_cache(self):
        """Save cache to file"""
        if self.cache_file is None:
            return
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_file, 'w', encoding='utf-8') as f:
                json.dump(self._cache, f, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            self.logger.warning(f"Failed to save cache: {e}. Using in-memory cache only.")

    def get(self, key: str) -> Optional[Any]:
        """
        Get a live value

        Args:
            key: Cache key

        Returns:
            Cached value, or None when missing or expired
        """
        self._load_cache()
        entry = self._cache.get(key)
        if not isinstance(entry, dict) or not isinstance(entry.get("expires_at"), (int, float)):
            return None
        if entry["expires_at"] <= self.clock():
            self.logger.debug(f"Cache entry expired: {key}")
            self.remove(key)
            return None
        return entry.get("value")

    def put(self, key: str, value: Any, ttl: Optional[int] = None):
        """
        Store a JSON-serializable value

        Args:
            key: Cache key
            value: Value to store
            ttl: Time-to-live in seconds (default_ttl when omitted)
        """
        ttl = self.default_ttl if ttl is None else ttl
        self._load_cache()
        self._cache[key] = {"value": value, "expires_at": self.clock() + ttl}
        self._save_cache()

    def remove(self, key: str):
        """Remove one entry"""
        self._load_cache()
        if self._cache.pop(key, None) is not None:
            self._save_cache()
            self.logger.debug(f"Removed cache entry: {key}")

    def clear(self):
        """Remove every entry"""
        self._cache = {}
        self._save_cache()

    def get_tasks(self) -> Optional[List[Task]]:
        """
        Get the cached task list

        Returns:
            Task list, or None when missing, expired or unreadable
        """
        cached = self.get(TASKS_CACHE_KEY)
        if cached is None:
            return None
        try:
            return [Task.model_validate(item) for item in cached]
        except (PydanticValidationError, TypeError) as e:
            self.logger.warning(f"Discarding unreadable task cache: {e}")
            self.remove(TASKS_CACHE_KEY)
            return None

    def put_tasks(self, tasks: List[Task], ttl: Optional[int] = None):
        """Cache the full task list"""
        self.put(TASKS_CACHE_KEY, [task.model_dump(mode="json") for task in tasks], ttl)
        self.logger.debug(f"Cached {len(tasks)} tasks")

    def invalidate_tasks(self):
        """Drop the cached task list"""
        self.remove(TASKS_CACHE_KEY)
