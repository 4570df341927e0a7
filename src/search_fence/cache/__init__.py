"""
Result Caching Package

Keeps search outcomes, including failures, so repeated renders skip the remote service.
"""

from .file_cache import FileResultCache
from .memory_cache import MemoryResultCache

__all__ = ["FileResultCache", "MemoryResultCache"]
