"""Collaborator protocols used by the search orchestrator."""

from typing import Any, Protocol

from .spec.models import SearchSpec
from .types import CacheEntry, SearchResults


class RemoteSearchClient(Protocol):
    """Protocol for services that run a search query remotely."""

    async def search(self, query: str, limit: int) -> SearchResults:
        """Return results for query; raise on failure."""
        ...


class ResultCache(Protocol):
    """Protocol for keyed stores of search outcomes."""

    def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for key or None."""
        ...

    def add(self, key: str, data: Any, is_error: bool = False) -> CacheEntry:
        """Store data under key and return the stored entry."""
        ...

    def delete(self, key: str) -> None:
        """Remove key from cache."""
        ...

    def get_time(self, key: str) -> str:
        """Return the formatted retrieval time for key, or a placeholder."""
        ...


class Renderer(Protocol):
    """Protocol for the display surface of one search block."""

    def render_loading(self) -> None: ...

    def render_results(self, spec: SearchSpec, results: SearchResults) -> None: ...

    def render_error(self, message: str, spec: SearchSpec | None) -> None: ...
