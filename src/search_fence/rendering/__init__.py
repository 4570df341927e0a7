"""
Rendering components.

Text rendering of search block states and table cells.
"""

from .columns import format_cell
from .markdown_renderer import LOADING_TEXT, MarkdownRenderer

__all__ = [
    "LOADING_TEXT",
    "MarkdownRenderer",
    "format_cell",
]
