"""
Markdown document processing.

Finds search fences in a Markdown document, renders them and substitutes
the rendered text, or rewrites them in canonical form.
"""

import asyncio
import re
from typing import NamedTuple

from .errors import SpecError
from .orchestrator import SearchOrchestrator
from .rendering.markdown_renderer import MarkdownRenderer
from .settings import Settings
from .spec.parser import parse_search_spec
from .spec.serializer import FENCE_LANGUAGE, to_fence

FENCE_REGEX = re.compile(
    rf"^```{re.escape(FENCE_LANGUAGE)}[ \t]*\n(?P<source>.*?)^```[ \t]*$",
    re.MULTILINE | re.DOTALL,
)


class SearchBlock(NamedTuple):
    start: int
    end: int
    source: str


def find_search_blocks(text: str) -> list[SearchBlock]:
    """Find every search fence in a Markdown document, in document order."""
    return [
        SearchBlock(match.start(), match.end(), match.group("source"))
        for match in FENCE_REGEX.finditer(text)
    ]


def _replace_blocks(text: str, blocks: list[SearchBlock], replacements: list[str]) -> str:
    parts = []
    position = 0
    for block, replacement in zip(blocks, replacements):
        parts.append(text[position : block.start])
        parts.append(replacement)
        position = block.end
    parts.append(text[position:])
    return "".join(parts)


async def _render_block(
    block: SearchBlock, orchestrator: SearchOrchestrator, refresh: bool
) -> str:
    renderer = MarkdownRenderer(orchestrator.settings, orchestrator.cache)
    if refresh:
        try:
            spec = parse_search_spec(block.source, orchestrator.settings)
        except SpecError:
            await orchestrator.render(block.source, renderer)
        else:
            await orchestrator.refresh(spec, renderer)
    else:
        await orchestrator.render(block.source, renderer)
    return renderer.output


async def render_document(
    text: str, orchestrator: SearchOrchestrator, refresh: bool = False
) -> str:
    """
    Render every search fence of a Markdown document.

    Args:
        text: Markdown document
        orchestrator: Orchestrator used for each block
        refresh: Drop cached outcomes before rendering

    Returns:
        The document with each search fence replaced by its rendered output
    """
    blocks = find_search_blocks(text)
    if not blocks:
        return text

    rendered = await asyncio.gather(
        *(_render_block(block, orchestrator, refresh) for block in blocks)
    )
    return _replace_blocks(text, blocks, list(rendered))


def normalize_document(text: str, settings: Settings) -> str:
    """Rewrite valid search fences in canonical form; invalid ones are left as written."""
    blocks = find_search_blocks(text)
    replacements = []
    for block in blocks:
        try:
            spec = parse_search_spec(block.source, settings)
        except SpecError:
            replacements.append(text[block.start : block.end])
        else:
            replacements.append(to_fence(spec, settings))
    return _replace_blocks(text, blocks, replacements)
