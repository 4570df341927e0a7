"""
File-backed Result Cache
Keeps search outcomes on disk so repeated renders survive process restarts
"""

import hashlib
import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from ..types import CacheEntry
from .memory_cache import MISSING_TIME, TIME_FORMAT

logger = logging.getLogger("search_fence.cache")


class FileResultCache:
    """
    Simple file-based cache for search outcomes, successful or not
    """

    def __init__(self, cache_dir: str = "cache", cache_ttl_hours: float = 0.25):
        """
        Initialize the result cache

        Args:
            cache_dir: Directory to store cache files
            cache_ttl_hours: How many hours to keep cached entries (default: 0.25)
        """
        self.cache_dir = Path(cache_dir)
        self.cache_ttl = timedelta(hours=cache_ttl_hours)

        # Create cache directory if it doesn't exist
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        # Create cache metadata file if it doesn't exist
        self.metadata_file = self.cache_dir / "cache_metadata.json"
        if not self.metadata_file.exists():
            self._save_metadata({})

    def _file_key(self, key: str) -> str:
        """Generate a filesystem-safe name for a cache key"""
        return hashlib.md5(key.encode()).hexdigest()

    def _get_cache_filepath(self, file_key: str) -> Path:
        """Get the full filepath for a file key"""
        return self.cache_dir / f"{file_key}.json"

    def _load_metadata(self) -> dict[str, Any]:
        """Load cache metadata"""
        try:
            with self.metadata_file.open(encoding="utf-8") as f:
                return json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            return {}

    def _save_metadata(self, metadata: dict[str, Any]) -> None:
        """Save cache metadata"""
        try:
            with self.metadata_file.open("w", encoding="utf-8") as f:
                json.dump(metadata, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning(f"Failed to save cache metadata: {e}")

    def _is_cache_expired(self, cached_time: str) -> bool:
        """Check if a cached entry has expired"""
        try:
            cached_datetime = datetime.fromisoformat(cached_time)
            return datetime.now() - cached_datetime > self.cache_ttl
        except (ValueError, TypeError):
            return True  # If we can't parse the time, consider it expired

    def get(self, key: str) -> CacheEntry | None:
        """
        Get a cached entry if available and not expired

        Args:
            key: Cache key of a search block

        Returns:
            Cached entry or None if not found/expired
        """
        file_key = self._file_key(key)
        cache_filepath = self._get_cache_filepath(file_key)

        if not cache_filepath.exists():
            return None

        metadata = self._load_metadata()
        if file_key not in metadata:
            return None

        if self._is_cache_expired(metadata[file_key]["cached_at"]):
            self._remove_entry(file_key)
            return None

        try:
            with cache_filepath.open(encoding="utf-8") as f:
                entry = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load cached entry {key}: {e}")
            return None

        logger.debug(f"🔄 Using cached entry for: {key}")
        return entry

    def add(self, key: str, data: Any, is_error: bool = False) -> CacheEntry:
        """
        Cache a search outcome

        Args:
            key: Cache key of a search block
            data: Search results, or the error message of a failed search
            is_error: Whether data describes a failure

        Returns:
            The stored entry
        """
        entry = CacheEntry(
            data=data, is_error=is_error, time=datetime.now().isoformat()
        )
        file_key = self._file_key(key)
        cache_filepath = self._get_cache_filepath(file_key)

        try:
            with cache_filepath.open("w", encoding="utf-8") as f:
                json.dump(entry, f, indent=2, ensure_ascii=False)

            metadata = self._load_metadata()
            metadata[file_key] = {
                "key": key,
                "cached_at": entry["time"],
                "is_error": is_error,
            }
            self._save_metadata(metadata)

            logger.debug(f"💾 Cached entry for: {key}")

        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to cache entry for {key}: {e}")

        return entry

    def delete(self, key: str) -> None:
        """Remove the entry for a cache key"""
        self._remove_entry(self._file_key(key))

    def get_time(self, key: str) -> str:
        """Get the formatted retrieval time of a cached entry"""
        entry = self.get(key)
        if entry is None:
            return MISSING_TIME
        return datetime.fromisoformat(entry["time"]).strftime(TIME_FORMAT)

    def _remove_entry(self, file_key: str) -> None:
        """Remove a cache entry and its metadata"""
        try:
            cache_filepath = self._get_cache_filepath(file_key)
            if cache_filepath.exists():
                cache_filepath.unlink()

            metadata = self._load_metadata()
            if file_key in metadata:
                del metadata[file_key]
                self._save_metadata(metadata)

        except OSError as e:
            logger.warning(f"Failed to remove cache entry: {e}")

    def cleanup_expired(self) -> int:
        """Remove all expired cache entries"""
        metadata = self._load_metadata()
        expired_keys = [
            file_key
            for file_key, entry in metadata.items()
            if self._is_cache_expired(entry["cached_at"])
        ]

        for file_key in expired_keys:
            self._remove_entry(file_key)

        if expired_keys:
            logger.info(f"🧹 Cleaned up {len(expired_keys)} expired cache entries")
        return len(expired_keys)

    def clear_all(self) -> None:
        """Clear all cached entries"""
        try:
            for filepath in self.cache_dir.iterdir():
                if filepath.suffix == ".json":
                    filepath.unlink()

            self._save_metadata({})
            logger.info("🗑️ Cleared all cached search results")

        except OSError as e:
            logger.warning(f"Failed to clear cache: {e}")
