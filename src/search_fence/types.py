"""
Common type definitions for search fence payloads.

TypedDict definitions for the values exchanged with the search client and the cache.
"""

from typing import Any, TypedDict


class AccountInfo(TypedDict):
    """Jira account that answered a search."""

    alias: str
    host: str
    color: str


class SearchResults(TypedDict):
    """Search results returned by the remote search client."""

    issues: list[dict[str, Any]]  # Raw Jira issue objects
    total: int
    account: AccountInfo


class CacheEntry(TypedDict):
    """Entry stored by a result cache."""

    data: Any  # SearchResults, or an error message when is_error is set
    is_error: bool
    time: str  # ISO-8601 retrieval time
