"""
Markdown rendering of search blocks.

Renders loading, results and error states of one search block as Markdown
text. Each call replaces the previous output, the same way a display
surface replaces its content.
"""

from ..protocols import ResultCache
from ..settings import Settings
from ..spec.models import (
    COLUMN_DESCRIPTIONS,
    Column,
    CustomFieldColumn,
    NotesColumn,
    RenderMode,
    SearchSpec,
)
from ..spec.parser import default_columns
from ..spec.serializer import to_fence
from ..types import SearchResults
from .columns import escape_cell, format_cell

LOADING_TEXT = "Loading..."


class MarkdownRenderer:
    """Renders one search block as Markdown into ``output``."""

    def __init__(self, settings: Settings, cache: ResultCache):
        """
        Initialize the renderer.

        Args:
            settings: Display settings, default columns and custom field names
            cache: Result cache, read for the last update time of a block

        Raises:
            SpecError: If the default columns setting holds an invalid column
        """
        self.settings = settings
        self.cache = cache
        self.default_columns = default_columns(settings)
        self.output = ""
        self.closed = False

    def close(self) -> None:
        """Tear down the target; later render calls are ignored."""
        self.closed = True

    def render_loading(self) -> None:
        if self.closed:
            return
        self.output = LOADING_TEXT

    def render_results(self, spec: SearchSpec, results: SearchResults) -> None:
        if self.closed:
            return
        if spec.render_mode == RenderMode.LIST:
            self.output = self._render_list(results)
        else:
            self.output = self._render_table(spec, results)

    def render_error(self, message: str, spec: SearchSpec | None) -> None:
        if self.closed:
            return
        parts = [f"> [!error] Search error\n> {escape_cell(message)}"]
        if spec is not None:
            parts.append(to_fence(spec, self.settings))
        self.output = "\n\n".join(parts)

    def column_header(self, column: Column) -> str:
        """Get the header text of a table column."""
        name = COLUMN_DESCRIPTIONS[column.kind]
        if isinstance(column, NotesColumn) and column.path:
            name = column.path
        if isinstance(column, CustomFieldColumn):
            name = self.settings.custom_fields.get(column.field_id, column.field_id)
        if column.compact:
            return name[0].upper()
        return escape_cell(name)

    def _render_table(self, spec: SearchSpec, results: SearchResults) -> str:
        columns = list(spec.columns) or self.default_columns

        lines = [
            "| " + " | ".join(self.column_header(c) for c in columns) + " |",
            "|" + "|".join(" --- " for _ in columns) + "|",
        ]
        for issue in results["issues"]:
            cells = [format_cell(c, issue, self.settings) for c in columns]
            lines.append("| " + " | ".join(cells) + " |")

        return "\n".join(lines) + "\n\n" + self._render_footer(spec, results)

    def _render_list(self, results: SearchResults) -> str:
        lines = []
        for issue in results["issues"]:
            fields = issue.get("fields", {})
            summary = " ".join(str(fields.get("summary") or "").split())
            status = (fields.get("status") or {}).get("name", "")
            line = f"- `{issue.get('key', '')}` {summary}"
            if status:
                line += f" ({status})"
            lines.append(line)
        return "\n".join(lines)

    def _render_footer(self, spec: SearchSpec, results: SearchResults) -> str:
        account = results["account"]
        total = f"Total results: {results['total']} - {account['alias']}"
        if self.settings.show_color_band:
            total += f" ({account['color']})"
        last_update = f"Last update: {self.cache.get_time(spec.cache_key())}"
        return f"{total}\n{last_update}"
