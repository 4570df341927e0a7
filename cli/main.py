"""
Search Fence - Command Line Entry Point

Renders the Jira search blocks embedded in Markdown documents.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from search_fence import SearchOrchestrator, get_settings  # noqa: E402
from search_fence.cache import FileResultCache  # noqa: E402
from search_fence.client import JiraClient, load_settings  # noqa: E402
from search_fence.document import normalize_document, render_document  # noqa: E402
from search_fence.errors import FetchError  # noqa: E402


def read_document(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        print(f"❌ Cannot read {path}: {e}", file=sys.stderr)
        sys.exit(1)


async def main():
    """
    Run the search fence commands
    """
    parser = argparse.ArgumentParser(
        description="Render Jira search blocks embedded in Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli/main.py render notes/sprint.md
  python cli/main.py render notes/sprint.md --refresh
  python cli/main.py format notes/sprint.md --write
  python cli/main.py clear-cache
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser(
        "render", help="Print a document with its search blocks rendered"
    )
    render_parser.add_argument("file", help="Markdown document to render")
    render_parser.add_argument(
        "--refresh", action="store_true", help="Ignore cached results"
    )

    format_parser = subparsers.add_parser(
        "format", help="Rewrite search blocks in canonical form"
    )
    format_parser.add_argument("file", help="Markdown document to format")
    format_parser.add_argument(
        "--write", action="store_true", help="Write the result back to the file"
    )

    subparsers.add_parser("clear-cache", help="Remove all cached search results")
    subparsers.add_parser("fields", help="List the custom fields of the Jira account")

    args = parser.parse_args()

    settings = get_settings()
    cache = FileResultCache(settings.cache_dir, settings.cache_ttl_hours)
    client = JiraClient(settings)

    if args.command == "render":
        settings = await load_settings(settings)
        orchestrator = SearchOrchestrator(client=client, cache=cache, settings=settings)
        document = read_document(args.file)
        print(await render_document(document, orchestrator, refresh=args.refresh))

    elif args.command == "format":
        settings = await load_settings(settings)
        document = read_document(args.file)
        formatted = normalize_document(document, settings)
        if args.write:
            Path(args.file).write_text(formatted, encoding="utf-8")
            print(f"✨ Formatted {args.file}")
        else:
            print(formatted)

    elif args.command == "clear-cache":
        cache.clear_all()
        print("🗑️ Cache cleared")

    elif args.command == "fields":
        try:
            custom_fields = await client.get_custom_fields()
        except FetchError as e:
            print(f"❌ Error loading custom fields: {e}", file=sys.stderr)
            sys.exit(1)
        for field_id, name in sorted(custom_fields.items(), key=lambda f: f[1]):
            print(f"{field_id}\t{name}")


if __name__ == "__main__":
    asyncio.run(main())
