"""Tag and folder listing commands used when authoring exclusion lists."""

import logging
from typing import Optional

from rich.console import Console

from nodesize.errors import NodeSizeError
from nodesize.graph.io import load_vault_graph
from nodesize.suggest import suggest_folders, suggest_tags

logger = logging.getLogger("nodesize.cli.suggest")


def _print_matches(console: Console, matches) -> None:
    for match in matches:
        console.print(match, markup=False, highlight=False)


def tags_command(args, console: Optional[Console] = None) -> int:
    """List tags of the graph containing ``args.query``."""
    console = console or Console()
    try:
        graph = load_vault_graph(args.graph)
    except NodeSizeError as e:
        logger.error("%s", e)
        return 1
    _print_matches(console, suggest_tags(graph, args.query or "", args.limit or 0))
    return 0


def folders_command(args, console: Optional[Console] = None) -> int:
    """List folders of the graph containing ``args.query``."""
    console = console or Console()
    try:
        graph = load_vault_graph(args.graph)
    except NodeSizeError as e:
        logger.error("%s", e)
        return 1
    _print_matches(console, suggest_folders(graph, args.query or "", args.limit or 0))
    return 0
