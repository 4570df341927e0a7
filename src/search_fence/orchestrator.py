"""
Search Block Orchestration Logic

Drives one search block through parse, cache lookup, fetch and render.
A block always ends in either the rendered or the error state; fetch
failures are cached like results and never raised to the caller.
"""

import time
from enum import Enum
from typing import NamedTuple

from .errors import SpecError
from .logger import setup_logging
from .protocols import RemoteSearchClient, Renderer, ResultCache
from .settings import Settings, get_settings
from .spec.models import SearchSpec
from .spec.parser import default_columns, parse_search_spec
from .spec.serializer import to_raw_string
from .types import AccountInfo, SearchResults


class RenderState(str, Enum):
    RENDERED = "rendered"
    ERROR = "error"


class RenderOutcome(NamedTuple):
    """Final state of one render cycle."""

    state: RenderState
    spec: SearchSpec | None
    results: SearchResults | None = None
    error: str | None = None

    @property
    def account(self) -> AccountInfo | None:
        """Account that answered the search, when results were rendered."""
        if self.results is None:
            return None
        return self.results["account"]


class SearchOrchestrator:
    """
    Resolves search blocks against the result cache and the remote search client.
    Concurrent misses on the same key each issue their own fetch.
    """

    def __init__(
        self,
        *,
        client: RemoteSearchClient,
        cache: ResultCache,
        settings: Settings | None = None,
    ):
        self.client = client
        self.cache = cache
        self.settings = settings or get_settings()
        # Validate the default columns setting; raises SpecError
        self.default_columns = default_columns(self.settings)

        # Set up logging
        self.search_logger = setup_logging()

    async def render(self, source: str, renderer: Renderer) -> RenderOutcome:
        """
        Render a search block.

        Args:
            source: Raw text of the search block
            renderer: Display surface of the block

        Returns:
            The final state of the block, with results or the error message
        """
        try:
            spec = parse_search_spec(source, self.settings)
        except SpecError as e:
            self.search_logger.info(f"📝 Invalid search block: {e}")
            renderer.render_error(str(e), None)
            return RenderOutcome(RenderState.ERROR, None, error=str(e))

        cache_key = spec.cache_key()
        cached = self.cache.get(cache_key)
        if cached is not None:
            self.search_logger.debug(f"🔄 Cache hit for query: {spec.query}")
            if cached["is_error"]:
                renderer.render_error(cached["data"], spec)
                return RenderOutcome(RenderState.ERROR, spec, error=cached["data"])
            renderer.render_results(spec, cached["data"])
            return RenderOutcome(RenderState.RENDERED, spec, results=cached["data"])

        renderer.render_loading()
        limit = spec.limit or self.settings.search_results_limit

        fetch_start = time.time()
        self.search_logger.info(f"🔍 Searching '{spec.query}' (limit {limit})")
        try:
            results = await self.client.search(spec.query, limit)
        except Exception as e:
            fetch_time = time.time() - fetch_start
            message = str(e)
            self.search_logger.error(
                f"❌ Search failed for '{spec.query}' after {fetch_time:.2f} seconds: {message}"
            )
            self.cache.add(cache_key, message, is_error=True)
            renderer.render_error(message, spec)
            return RenderOutcome(RenderState.ERROR, spec, error=message)

        fetch_time = time.time() - fetch_start
        self.search_logger.info(
            f"✅ Search for '{spec.query}' returned {results['total']} results in {fetch_time:.2f} seconds"
        )
        results = self.cache.add(cache_key, results)["data"]
        renderer.render_results(spec, results)
        return RenderOutcome(RenderState.RENDERED, spec, results=results)

    async def refresh(self, spec: SearchSpec, renderer: Renderer) -> RenderOutcome:
        """
        Drop the cached outcome of a block and render it again.

        The block is rebuilt from the spec, so it is rendered in canonical form.
        """
        self.search_logger.info(f"♻️ Refreshing search '{spec.query}'")
        self.cache.delete(spec.cache_key())
        return await self.render(to_raw_string(spec, self.settings), renderer)
