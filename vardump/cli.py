# vardump/cli.py
"""Command line front end.

Dumps or diffs JSON and YAML documents:

    vardump dump config.yaml
    vardump dump --json payload.json
    vardump diff old.json new.json
    cat payload.json | vardump dump -
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import yaml
from rich.console import Console
from rich.markup import escape

from .dumper import Dumper

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


class DocumentError(Exception):
    """Raised when an input document cannot be read or parsed."""


def load_document(source: str) -> Any:
    """Load a JSON or YAML document.

    Args:
        source: File path, or "-" to read JSON from stdin. Files ending
            in .yaml or .yml are parsed as YAML, anything else as JSON.

    Returns:
        The parsed document.

    Raises:
        DocumentError: If the file cannot be read or parsed.
    """
    if source == "-":
        try:
            return json.loads(sys.stdin.read())
        except json.JSONDecodeError as e:
            raise DocumentError(f"<stdin>: invalid JSON: {e}")

    path = Path(source)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"{source}: cannot read file: {e}")

    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DocumentError(f"{source}: invalid YAML: {e}")

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise DocumentError(f"{source}: invalid JSON: {e}")


def build_parser() -> argparse.ArgumentParser:
    # Options shared by both commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--max-depth",
        type=int,
        metavar="N",
        help="Deepest nesting level to expand (default: 15)",
    )
    common.add_argument(
        "--max-items",
        type=int,
        metavar="N",
        help="Entries shown per list or mapping (default: 100)",
    )
    common.add_argument(
        "--max-string-len",
        type=int,
        metavar="N",
        help="Characters shown per string (default: 100000)",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    common.add_argument(
        "--html",
        action="store_true",
        help="Write an HTML <pre> block instead of text",
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )

    parser = argparse.ArgumentParser(
        prog="vardump",
        description="Dump or diff JSON and YAML documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Dump a document
  vardump dump config.yaml

  # Compare two documents
  vardump diff old.json new.json

  # Read JSON from stdin
  cat payload.json | vardump dump -
        """,
    )
    commands = parser.add_subparsers(dest="command", required=True)

    dump_parser = commands.add_parser("dump", parents=[common], help="Dump documents")
    dump_parser.add_argument("files", nargs="+", metavar="FILE", help="JSON or YAML file, or - for stdin")
    dump_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the documents as indented JSON",
    )

    diff_parser = commands.add_parser("diff", parents=[common], help="Diff two documents")
    diff_parser.add_argument("left", metavar="LEFT", help="Original document")
    diff_parser.add_argument("right", metavar="RIGHT", help="Changed document")

    return parser


def build_dumper(args: argparse.Namespace) -> Dumper:
    """Map command line flags onto dumper options."""
    options = {"disable_header": True, "disable_color": args.no_color}
    if args.max_depth is not None:
        options["max_depth"] = args.max_depth
    if args.max_items is not None:
        options["max_items"] = args.max_items
    if args.max_string_len is not None:
        options["max_string_len"] = args.max_string_len
    return Dumper(**options)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    errors = Console(stderr=True)
    dumper = build_dumper(args)

    try:
        if args.command == "dump":
            documents = [load_document(source) for source in args.files]
        else:
            documents = [load_document(args.left), load_document(args.right)]
    except DocumentError as e:
        logger.debug("Failed to load input", exc_info=True)
        errors.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1

    out = sys.stdout
    if args.command == "dump":
        if args.json:
            dumper.dump_json(*documents)
        elif args.html:
            out.write(dumper.dump_html(*documents) + "\n")
        else:
            dumper.dump(*documents)
    else:
        left, right = documents
        if args.html:
            out.write(dumper.diff_html(left, right) + "\n")
        else:
            dumper.diff(left, right)

    return 0
