"""
CLI: Inspect a markdown document store.

Usage:
    # Table of every entry with its id, type, file and query
    python -m mdquery.cli.inspect list docs/patterns

    # JSON Schema of the entry front matter
    python -m mdquery.cli.inspect schema docs/patterns

    # Entries that apply to some source files
    python -m mdquery.cli.inspect match docs/patterns src/button.tsx src/form.tsx

Stores opened here use the stock file predicates (contains, glob, extension).
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

from rich.markup import escape

from mdquery.docs.store import DocumentStore
from mdquery.errors import MdQueryError
from mdquery.query.hash import json_default
from mdquery.query.predicates import FileInput, file_query_engine
from mdquery.utils.logging import setup_logging
from mdquery.utils.output import output

logger = logging.getLogger(__name__)


def open_store(args: argparse.Namespace) -> DocumentStore:
    store = DocumentStore.from_root(
        args.root,
        query_engine=file_query_engine(),
        max_concurrent_reads=args.concurrency,
    )
    if args.glob:
        store = store.with_globs(*args.glob)
    return store


async def list_entries(args: argparse.Namespace) -> None:
    store = open_store(args)
    entries = await store.get_all()

    if args.json:
        output.print_json([
            {"id": e.id, "type": e.type, "file": store.relative_path(e.path), "query": e.query}
            for e in entries
        ])
        return

    output.print_table(
        f"Entries in {store.root}",
        ["ID", "Type", "File", "Query"],
        [
            [e.id, e.type, store.relative_path(e.path), json.dumps(e.query, default=json_default)]
            for e in entries
        ],
    )
    output.status(f"{len(entries)} entries")


async def show_schema(args: argparse.Namespace) -> None:
    store = open_store(args)
    output.print_json(store.json_schema)


async def match_files(args: argparse.Namespace) -> None:
    store = open_store(args)
    base = Path(args.base).resolve()
    inputs = [FileInput.read(Path(path), base) for path in args.files]
    for file in inputs:
        logger.info("Matching %s", file.path)

    entries = await store.match_any(inputs, skip_empty=args.skip_empty)
    if not entries:
        output.warn("No entries matched")
        return

    if args.json:
        output.print_json([e.id for e in entries])
        return

    for entry in entries:
        output.success(f"[bold]{escape(entry.id)}[/bold] [dim]{escape(store.relative_path(entry.path))}[/dim]")


COMMANDS = {
    "list": list_entries,
    "schema": show_schema,
    "match": match_files,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect a markdown document store")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    parser.add_argument("--quiet", action="store_true", help="Only print results")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("root", help="Directory holding the documents")
    common.add_argument(
        "--glob",
        action="append",
        default=[],
        help="Include glob relative to root, '!' prefix to exclude (repeatable)",
    )
    common.add_argument("--concurrency", type=int, default=0, help="Max concurrent file reads (0 = no limit)")

    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", parents=[common], help="List entries")
    list_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    commands.add_parser("schema", parents=[common], help="Print the front matter JSON Schema")

    match_parser = commands.add_parser("match", parents=[common], help="Match files against entries")
    match_parser.add_argument("files", nargs="+", help="Files to match")
    match_parser.add_argument("--base", default=".", help="Directory the file globs are relative to")
    match_parser.add_argument("--skip-empty", action="store_true", help="Skip entries without content")
    match_parser.add_argument("--json", action="store_true", help="Print matched ids as JSON")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    output.configure(quiet=args.quiet)

    try:
        asyncio.run(COMMANDS[args.command](args))
    except (MdQueryError, OSError, ValueError) as err:
        # OSError and ValueError come from reading files named on the command line
        output.error(escape(str(err)))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
