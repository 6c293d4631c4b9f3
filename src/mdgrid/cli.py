"""Command-line front end for comment listing, table dumps, and marker rewrites.

Usage:
    mdgrid comments notes.md                       # every located comment
    mdgrid tables notes.md                         # every pipe table, re-rendered
    mdgrid markers notes.md --mode all             # print with markers on every cell
    mdgrid markers notes.md --mode delete-all --in-place
"""

import argparse
import logging
import sys
from pathlib import Path

from mdgrid.config import DEFAULT_MARKER_MODE, LOG_FORMAT, LOG_LEVEL
from mdgrid.tables.formatting import render_table
from mdgrid.tables.pipeline import extract, rewrite_markers
from mdgrid.tables.schema import MarkerMode

logger = logging.getLogger(__name__)


def _read(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as fopen:
        return fopen.read()


def cmd_comments(args: argparse.Namespace) -> int:
    extraction = extract(_read(args.file))
    for located in extraction.comments:
        comment = located.comment
        print(f"{comment.offset}\t{comment.kind.value}\t{comment.label}")
    return 0


def cmd_tables(args: argparse.Namespace) -> int:
    extraction = extract(_read(args.file))
    for i, table in enumerate(extraction.tables):
        if i:
            print()
        print(f"# table {i + 1} [{table.start_offset}, {table.end_offset})")
        for line in render_table(table):
            print(line)
    return 0


def cmd_markers(args: argparse.Namespace) -> int:
    source = _read(args.file)
    output, extraction = rewrite_markers(source, args.mode)
    if extraction.diagnostics.total:
        logger.warning("%d units were dropped during extraction", extraction.diagnostics.total)

    if args.in_place:
        with open(args.file, "w", encoding="utf-8", newline="") as fopen:
            fopen.write(output)
        logger.info("Rewrote %d tables in %s", len(extraction.tables), args.file)
    else:
        sys.stdout.write(output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdgrid", description="Spreadsheet-style markers for Markdown pipe tables")
    subparsers = parser.add_subparsers(dest="command", required=True)

    comments = subparsers.add_parser("comments", help="List every HTML comment with its offset and kind")
    comments.add_argument("file", type=Path)
    comments.set_defaults(func=cmd_comments)

    tables = subparsers.add_parser("tables", help="Print every pipe table as parsed")
    tables.add_argument("file", type=Path)
    tables.set_defaults(func=cmd_tables)

    markers = subparsers.add_parser("markers", help="Rewrite coordinate markers in every table")
    markers.add_argument("file", type=Path)
    markers.add_argument(
        "--mode",
        # A string default goes through `type` too, so a bad MDGRID_MARKER_MODE is a usage error
        type=MarkerMode,
        choices=list(MarkerMode),
        metavar="{" + ",".join(m.value for m in MarkerMode) + "}",
        default=DEFAULT_MARKER_MODE,
        help=f"Marker policy (default: {DEFAULT_MARKER_MODE})",
    )
    markers.add_argument("--in-place", action="store_true", help="Write the result back to FILE instead of stdout")
    markers.set_defaults(func=cmd_markers)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, configure logging, and run the selected sub-command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
