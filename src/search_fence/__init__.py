"""
Search Fence Package

Embeds live, cached Jira search results in Markdown documents through a
small declarative block language.
"""

from search_fence.client import load_settings
from search_fence.errors import FetchError, SpecError
from search_fence.logger import setup_logging
from search_fence.orchestrator import RenderOutcome, RenderState, SearchOrchestrator
from search_fence.settings import Settings, get_settings
from search_fence.spec import SearchSpec, parse_search_spec, to_fence, to_raw_string

__version__ = "1.0.0"
__all__ = [
    "FetchError",
    "RenderOutcome",
    "RenderState",
    "SearchOrchestrator",
    "SearchSpec",
    "Settings",
    "SpecError",
    "get_settings",
    "load_settings",
    "parse_search_spec",
    "setup_logging",
    "to_fence",
    "to_raw_string",
]
