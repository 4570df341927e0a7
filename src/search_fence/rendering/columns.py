"""
Table cell formatting.

Maps each column kind onto the matching field of a raw Jira issue and
formats it as Markdown table text.
"""

from datetime import datetime
from typing import Any

from ..settings import Settings
from ..spec.models import Column, ColumnKind, CustomFieldColumn

EMPTY_CELL = ""

# Fields that hold a nested object, shown by the given attribute
NAMED_FIELDS = {
    ColumnKind.TYPE: ("issuetype", "name"),
    ColumnKind.REPORTER: ("reporter", "displayName"),
    ColumnKind.ASSIGNEE: ("assignee", "displayName"),
    ColumnKind.PRIORITY: ("priority", "name"),
    ColumnKind.STATUS: ("status", "name"),
    ColumnKind.RESOLUTION: ("resolution", "name"),
    ColumnKind.PROJECT: ("project", "key"),
}

TEXT_FIELDS = {
    ColumnKind.SUMMARY: "summary",
    ColumnKind.DESCRIPTION: "description",
    ColumnKind.ENVIRONMENT: "environment",
}

DATE_FIELDS = {
    ColumnKind.CREATED: "created",
    ColumnKind.UPDATED: "updated",
    ColumnKind.DUE_DATE: "duedate",
    ColumnKind.RESOLUTION_DATE: "resolutiondate",
    ColumnKind.LAST_VIEWED: "lastViewed",
}

DURATION_FIELDS = {
    ColumnKind.AGGREGATE_TIME_ESTIMATED: "aggregatetimeestimate",
    ColumnKind.AGGREGATE_TIME_ORIGINAL_ESTIMATE: "aggregatetimeoriginalestimate",
    ColumnKind.AGGREGATE_TIME_SPENT: "aggregatetimespent",
    ColumnKind.TIME_ESTIMATE: "timeestimate",
    ColumnKind.TIME_ORIGINAL_ESTIMATE: "timeoriginalestimate",
    ColumnKind.TIME_SPENT: "timespent",
}

PROGRESS_FIELDS = {
    ColumnKind.AGGREGATE_PROGRESS: "aggregateprogress",
    ColumnKind.PROGRESS: "progress",
}

NAME_LIST_FIELDS = {
    ColumnKind.FIX_VERSIONS: "fixVersions",
    ColumnKind.COMPONENTS: "components",
}

STORY_POINTS_FIELD_NAME = "Story Points"


def format_date(value: str | None) -> str:
    if not value:
        return EMPTY_CELL
    # Jira timestamps look like 2024-01-15T10:30:00.000+0000
    try:
        return datetime.fromisoformat(value[:10]).strftime("%Y-%m-%d")
    except ValueError:
        return value


def format_duration(seconds: int | None) -> str:
    """Format a duration in seconds the way Jira shows time tracking values."""
    if not seconds:
        return EMPTY_CELL
    minutes = seconds // 60
    days, minutes = divmod(minutes, 8 * 60)
    hours, minutes = divmod(minutes, 60)
    parts = [
        f"{amount}{unit}"
        for amount, unit in ((days, "d"), (hours, "h"), (minutes, "m"))
        if amount
    ]
    return " ".join(parts) or "0m"


def escape_cell(text: str) -> str:
    """Keep cell text on one line and away from the table delimiters."""
    return " ".join(str(text).split()).replace("|", "\\|")


def format_value(value: Any) -> str:
    if value is None:
        return EMPTY_CELL
    if isinstance(value, dict):
        for attribute in ("value", "name", "displayName"):
            if attribute in value:
                return escape_cell(value[attribute])
        return EMPTY_CELL
    if isinstance(value, list):
        return ", ".join(format_value(item) for item in value)
    return escape_cell(value)


def format_cell(column: Column, issue: dict[str, Any], settings: Settings) -> str:
    """
    Format the value of one column for one issue.

    Args:
        column: The table column
        issue: Raw Jira issue object
        settings: Custom field tables

    Returns:
        Markdown text for the table cell
    """
    fields = issue.get("fields", {})
    kind = column.kind

    if kind == ColumnKind.KEY:
        return escape_cell(issue.get("key", ""))
    if kind in TEXT_FIELDS:
        return escape_cell(fields.get(TEXT_FIELDS[kind]) or "")
    if kind in NAMED_FIELDS:
        field, attribute = NAMED_FIELDS[kind]
        return escape_cell((fields.get(field) or {}).get(attribute, ""))
    if kind in DATE_FIELDS:
        return format_date(fields.get(DATE_FIELDS[kind]))
    if kind in DURATION_FIELDS:
        return format_duration(fields.get(DURATION_FIELDS[kind]))
    if kind in PROGRESS_FIELDS:
        progress = fields.get(PROGRESS_FIELDS[kind]) or {}
        if "percent" in progress:
            return f"{progress['percent']}%"
        return EMPTY_CELL
    if kind in NAME_LIST_FIELDS:
        return ", ".join(
            escape_cell(item.get("name", ""))
            for item in fields.get(NAME_LIST_FIELDS[kind]) or []
        )
    if kind == ColumnKind.LABELS:
        return ", ".join(escape_cell(label) for label in fields.get("labels") or [])
    if kind == ColumnKind.STORY_POINTS:
        field_id = settings.custom_field_name_to_id.get(STORY_POINTS_FIELD_NAME)
        if field_id is None:
            return EMPTY_CELL
        return format_value(fields.get(f"customfield_{field_id}"))
    if isinstance(column, CustomFieldColumn):
        return format_value(fields.get(f"customfield_{column.field_id}"))

    # DEV_STATUS needs a separate development API call and NOTES needs a
    # notes vault; neither is available to a text renderer
    return EMPTY_CELL
