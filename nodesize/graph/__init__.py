"""Public graph API surface."""

from nodesize.graph.io import load_vault_graph, vault_graph_from_dict
from nodesize.graph.provider import GraphProvider, VaultGraph
from nodesize.graph.schema import (
    MANUAL_SIZE_KEY,
    NodeSpec,
    split_tag_value,
    strip_hash,
)

__all__ = [
    "GraphProvider",
    "MANUAL_SIZE_KEY",
    "NodeSpec",
    "VaultGraph",
    "load_vault_graph",
    "split_tag_value",
    "strip_hash",
    "vault_graph_from_dict",
]
