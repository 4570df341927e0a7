"""
In-memory result cache with expiry.
"""

from datetime import datetime, timedelta
from typing import Any

from ..types import CacheEntry

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
MISSING_TIME = "-"


class MemoryResultCache:
    """
    Process-local cache of search outcomes, keyed by search block cache key
    """

    def __init__(self, ttl_minutes: float = 15):
        self.ttl = timedelta(minutes=ttl_minutes)
        self._entries: dict[str, CacheEntry] = {}

    def _is_expired(self, entry: CacheEntry) -> bool:
        return datetime.now() - datetime.fromisoformat(entry["time"]) > self.ttl

    def get(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._entries[key]
            return None
        return entry

    def add(self, key: str, data: Any, is_error: bool = False) -> CacheEntry:
        self.cleanup_expired()
        entry = CacheEntry(
            data=data, is_error=is_error, time=datetime.now().isoformat()
        )
        self._entries[key] = entry
        return entry

    def cleanup_expired(self) -> int:
        """Drop every expired entry, returning how many were removed."""
        expired = [k for k, e in self._entries.items() if self._is_expired(e)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def get_time(self, key: str) -> str:
        entry = self.get(key)
        if entry is None:
            return MISSING_TIME
        return datetime.fromisoformat(entry["time"]).strftime(TIME_FORMAT)

    def clear_all(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
