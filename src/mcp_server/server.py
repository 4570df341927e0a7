"""
Search Fence MCP Server Implementation

Provides MCP tools for rendering and formatting Jira search blocks.
"""

import sys
from pathlib import Path

from mcp.server.fastmcp import FastMCP

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from search_fence import (  # type: ignore  # noqa: E402
    SearchOrchestrator,
    SpecError,
    get_settings,
    parse_search_spec,
    to_fence,
)
from search_fence.cache import FileResultCache  # type: ignore  # noqa: E402
from search_fence.client import JiraClient, load_settings  # type: ignore  # noqa: E402
from search_fence.document import render_document  # type: ignore  # noqa: E402
from search_fence.rendering import MarkdownRenderer  # type: ignore  # noqa: E402

# Create the FastMCP server instance
mcp = FastMCP("Jira Search Fence")


_orchestrator: SearchOrchestrator | None = None


async def get_orchestrator() -> SearchOrchestrator:
    """Get the orchestrator shared by all tool calls, so they share one cache."""
    global _orchestrator
    if _orchestrator is None:
        settings = await load_settings(get_settings())
        cache = FileResultCache(settings.cache_dir, settings.cache_ttl_hours)
        _orchestrator = SearchOrchestrator(
            client=JiraClient(settings), cache=cache, settings=settings
        )
    return _orchestrator



@mcp.tool()
async def render_search_block(source: str) -> str:
    """
    Render a Jira search block as Markdown.

    The block uses the search fence language, either a bare JQL query or
    key/value lines:

        type: TABLE
        query: project = ABC AND status = "In Progress"
        limit: 20
        columns: KEY, SUMMARY, -STATUS, $Story Points, NOTES.owner

    Results are cached; use refresh_search_block to fetch them again.

    Args:
        source: Content of the search block, without the fence lines

    Returns:
        Markdown table or list of issues, or the error message
    """
    orchestrator = await get_orchestrator()
    renderer = MarkdownRenderer(orchestrator.settings, orchestrator.cache)
    await orchestrator.render(source, renderer)
    return renderer.output


@mcp.tool()
async def refresh_search_block(source: str) -> str:
    """
    Drop the cached results of a Jira search block and render it again.

    Args:
        source: Content of the search block, without the fence lines

    Returns:
        Markdown table or list of issues, or the error message
    """
    orchestrator = await get_orchestrator()
    renderer = MarkdownRenderer(orchestrator.settings, orchestrator.cache)
    try:
        spec = parse_search_spec(source, orchestrator.settings)
    except SpecError:
        await orchestrator.render(source, renderer)
    else:
        await orchestrator.refresh(spec, renderer)
    return renderer.output


@mcp.tool()
async def render_markdown(text: str) -> str:
    """
    Render every ```jira-search block of a Markdown document.

    Args:
        text: Markdown document

    Returns:
        The document with each search block replaced by its results
    """
    return await render_document(text, await get_orchestrator())


@mcp.tool()
async def format_search_block(source: str) -> str:
    """
    Rewrite a Jira search block in canonical form.

    Args:
        source: Content of the search block, without the fence lines

    Returns:
        The canonical fenced block, or the reason the block is invalid
    """
    settings = (await get_orchestrator()).settings
    try:
        spec = parse_search_spec(source, settings)
    except SpecError as e:
        return f"❌ Invalid search block: {e}"
    return to_fence(spec, settings)


def main():
    """Main entry point for the MCP server."""
    print("🔍 Starting Jira Search Fence MCP Server...", file=sys.stderr)
    mcp.run()


if __name__ == "__main__":
    main()
