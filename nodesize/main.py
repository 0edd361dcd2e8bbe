"""Main CLI entry point for nodesize.

Provides commands: size, explain, tags, folders
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from nodesize.cli.size import explain_command, size_command
from nodesize.cli.suggest import folders_command, tags_command

logger = logging.getLogger("nodesize.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional sizing settings. Can be a path to a JSON/TOML file "
            "(e.g. data.json) or an inline JSON/TOML string. Unset keys use "
            "the built-in defaults."
        ),
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="nodesize - connectivity-weighted node sizes for link graphs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    size_parser = subparsers.add_parser(
        "size",
        help="Compute the size of every node in a graph snapshot",
    )
    size_parser.add_argument("graph", help="Graph snapshot JSON file")
    _add_config_argument(size_parser)
    size_parser.add_argument(
        "-o",
        "--output",
        help="Write sizes to this JSON file in addition to the table",
    )
    size_parser.add_argument(
        "--sort",
        choices=["size", "key"],
        default="size",
        help="Row order (default: size, largest first)",
    )
    size_parser.add_argument(
        "-n",
        "--limit",
        type=int,
        default=0,
        help="Maximum number of rows to print (default: all)",
    )

    explain_parser = subparsers.add_parser(
        "explain",
        help="Show how the size of one node is derived",
    )
    explain_parser.add_argument("graph", help="Graph snapshot JSON file")
    explain_parser.add_argument("node", help="Node key, e.g. Notes/Plan.md")
    _add_config_argument(explain_parser)

    for name, what in (("tags", "tags"), ("folders", "folders")):
        sub = subparsers.add_parser(
            name,
            help=f"List {what} for authoring exclusion lists",
        )
        sub.add_argument("graph", help="Graph snapshot JSON file")
        sub.add_argument(
            "query",
            nargs="?",
            default="",
            help="Only list entries containing this text (case-insensitive)",
        )
        sub.add_argument(
            "-n",
            "--limit",
            type=int,
            default=0,
            help="Maximum number of entries (default: all)",
        )

    return parser


def main() -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(args.verbose)

    if args.command == "size":
        return size_command(args)
    elif args.command == "explain":
        return explain_command(args)
    elif args.command == "tags":
        return tags_command(args)
    elif args.command == "folders":
        return folders_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
