"""Loading vault graph snapshots from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from nodesize.errors import GraphLoadError
from nodesize.graph.provider import VaultGraph
from nodesize.graph.schema import NodeSpec

logger = logging.getLogger("nodesize.graph.io")


def _node_from_entry(entry: Dict[str, Any], index: int) -> NodeSpec:
    if not isinstance(entry, dict):
        raise GraphLoadError(f"nodes[{index}] must be an object")
    try:
        return NodeSpec(
            key=entry.get("key") or entry.get("path") or "",
            links=list(entry.get("links") or []),
            metadata=dict(entry.get("metadata") or entry.get("frontmatter") or {}),
            inline_tags=list(entry.get("tags") or []),
        )
    except (ValidationError, TypeError, ValueError) as exc:
        raise GraphLoadError(f"nodes[{index}] is invalid: {exc}") from exc


def vault_graph_from_dict(data: Dict[str, Any]) -> VaultGraph:
    """Build a VaultGraph from a decoded snapshot.

    The snapshot layout is::

        {"graph_id": "...", "nodes": [
            {"key": "Notes/a.md", "links": ["Notes/b.md"],
             "metadata": {"tags": ["x"]}, "tags": ["#inline"]}
        ]}

    Raises:
        GraphLoadError: If the layout is not followed.
    """
    if not isinstance(data, dict) or not isinstance(data.get("nodes"), list):
        raise GraphLoadError("Graph snapshot must be an object with a 'nodes' list")

    graph = VaultGraph(graph_id=data.get("graph_id"))
    for index, entry in enumerate(data["nodes"]):
        graph.add_node_spec(_node_from_entry(entry, index))

    logger.info(
        "Loaded graph %s: %d documents, %d links, %d unresolved targets",
        graph.graph_id,
        graph.node_count(),
        graph.edge_count(),
        len(graph.unresolved_links()),
    )
    return graph


def load_vault_graph(path: Union[str, Path]) -> VaultGraph:
    """Load a graph snapshot JSON file.

    Raises:
        GraphLoadError: If the file cannot be read or decoded.
    """
    path = Path(path)
    logger.info("Loading graph snapshot: %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise GraphLoadError(f"Cannot read graph snapshot {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise GraphLoadError(f"Graph snapshot {path} is not valid JSON: {exc}") from exc
    return vault_graph_from_dict(data)
