"""Size and explain command implementations."""

import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nodesize.config.loader import load_sizing_config
from nodesize.errors import NodeSizeError
from nodesize.export.json import export_sizes
from nodesize.graph.io import load_vault_graph
from nodesize.sizing.exclusion import ExclusionEvaluator
from nodesize.sizing.resolver import SizeResolution, SizeResolver

logger = logging.getLogger("nodesize.cli.size")


def _format_size(resolution: SizeResolution) -> str:
    if resolution.size is None:
        return "-"
    return f"{resolution.size:g}"


def size_command(args, console: Optional[Console] = None) -> int:
    """Execute size command.

    Args:
        args: Parsed command-line arguments containing:
            - graph: Graph snapshot JSON file
            - config: Optional settings source (file or inline JSON/TOML)
            - output: Optional JSON output path
            - sort: Row order (size or key)
            - limit: Maximum number of rows printed (0 = all)
        console: Rich console for table output.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    console = console or Console()
    try:
        graph = load_vault_graph(args.graph)
        config = load_sizing_config(getattr(args, "config", None))
    except NodeSizeError as e:
        logger.error("%s", e)
        return 1

    evaluator = ExclusionEvaluator(config)
    for invalid in evaluator.pattern_errors:
        console.print(f"[yellow]warning:[/yellow] {escape(str(invalid))}")

    resolver = SizeResolver(graph, config, evaluator)
    resolutions: List[SizeResolution] = [resolver.resolve(key) for key in graph.keys()]

    output = getattr(args, "output", None)
    if output:
        try:
            export_sizes(resolutions, config, Path(output))
        except OSError as e:
            logger.error("Failed to write %s: %s", output, e)
            return 1

    if getattr(args, "sort", "size") == "key":
        rows = sorted(resolutions, key=lambda r: r.key)
    else:
        rows = sorted(resolutions, key=lambda r: (-(r.size or 0.0), r.key))
    limit = getattr(args, "limit", 0) or 0
    if limit > 0:
        rows = rows[:limit]

    table = Table(title=f"Node sizes ({escape(graph.graph_id)})")
    table.add_column("Node")
    table.add_column("Source")
    table.add_column("Weight", justify="right")
    table.add_column("Size", justify="right")
    for resolution in rows:
        table.add_row(
            escape(resolution.key),
            resolution.source.value,
            "-" if resolution.weight is None else str(resolution.weight),
            _format_size(resolution),
        )
    console.print(table)
    return 0


def explain_command(args, console: Optional[Console] = None) -> int:
    """Explain how the size of one node is derived.

    Args:
        args: Parsed command-line arguments containing graph, node and config.
        console: Rich console for output.

    Returns:
        int: Exit code (0 for success, 1 for errors or unknown nodes).
    """
    console = console or Console()
    try:
        graph = load_vault_graph(args.graph)
        config = load_sizing_config(getattr(args, "config", None))
    except NodeSizeError as e:
        logger.error("%s", e)
        return 1

    key = args.node
    node = graph.get_node(key)
    if node is None:
        logger.error("Node not found: %s", key)
        return 1

    resolver = SizeResolver(graph, config)
    resolution = resolver.resolve(key)
    console.print(f"[bold]{escape(key)}[/bold] (title: {escape(node.title)})")
    console.print(f"source: {resolution.source.value}  size: {_format_size(resolution)}")

    reason = resolver.evaluator.reason(node)
    if reason:
        console.print(f"excluded by {reason} rule")
    if node.manual_size is not None:
        console.print(f"manual node_size: {node.manual_size:g}")

    traversal = resolver.aggregator.traverse(key)
    table = Table(title=f"Reachable within {config.max_depth} hop(s)")
    table.add_column("Node")
    table.add_column("Depth", justify="right")
    for target, depth in sorted(traversal.counted.items(), key=lambda kv: (kv[1], kv[0])):
        marker = " (depth limit)" if target in traversal.frontier else ""
        table.add_row(escape(target) + marker, str(depth))
    console.print(table)

    if traversal.missing:
        console.print("unresolved: " + ", ".join(sorted(traversal.missing)), markup=False)
    if traversal.excluded:
        console.print("excluded: " + ", ".join(sorted(traversal.excluded)), markup=False)
    console.print(
        f"weight: {traversal.weight(config.count_missing_links)}"
        f" x {config.size_multiplier:g} x {config.multiplier_scale:g}"
        f" (max {config.max_size:g}, min 1)"
    )
    return 0
