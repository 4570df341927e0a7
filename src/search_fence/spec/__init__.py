"""
Search block language.

Data model, parser and serializer for embedded Jira search blocks.
"""

from .models import (
    COLUMN_DESCRIPTIONS,
    Column,
    ColumnKind,
    CustomFieldColumn,
    FieldColumn,
    NotesColumn,
    RenderMode,
    SearchSpec,
)
from .parser import default_columns, parse_column, parse_search_spec
from .serializer import FENCE_LANGUAGE, to_fence, to_raw_string

__all__ = [
    "COLUMN_DESCRIPTIONS",
    "Column",
    "ColumnKind",
    "CustomFieldColumn",
    "FieldColumn",
    "NotesColumn",
    "RenderMode",
    "SearchSpec",
    "FENCE_LANGUAGE",
    "default_columns",
    "parse_column",
    "parse_search_spec",
    "to_fence",
    "to_raw_string",
]
