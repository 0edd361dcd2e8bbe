"""Graph data provider protocol and the in-memory vault graph.

The sizing core never owns documents; it looks them up by key on every
call through a `GraphProvider`. `VaultGraph` is the NetworkX-backed
implementation used by the CLI and the tests.
"""

import logging
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Set

import networkx as nx

from nodesize.graph.schema import NodeSpec

logger = logging.getLogger("nodesize.graph.provider")


class GraphProvider(Protocol):
    """Read-only view of a document-link graph.

    Lookup misses (deleted files, unresolved link targets) return None or
    empty collections; they are never errors.
    """

    def get_node(self, key: str) -> Optional[NodeSpec]:
        """Return the node for ``key`` or None when it does not exist."""
        ...

    def links(self, key: str) -> List[str]:
        """Return the outgoing link targets of ``key``."""
        ...

    def all_tags(self) -> Set[str]:
        """Return every tag used across the corpus."""
        ...

    def all_folders(self) -> Set[str]:
        """Return every folder containing at least one document."""
        ...


class VaultGraph:
    """In-memory document graph backed by a NetworkX DiGraph.

    Documents are stored as graph nodes carrying their `NodeSpec` under the
    ``spec`` attribute. Link targets that do not (yet) resolve to a document
    are kept as placeholder nodes with ``exists=False`` so that edges can be
    recorded before their target is added.
    """

    def __init__(self, graph_id: Optional[str] = None) -> None:
        """Initialize an empty vault graph.

        Args:
            graph_id: Optional graph identifier used in log messages.
        """
        self.graph_id = graph_id or "default"
        self._graph = nx.DiGraph()
        logger.debug("VaultGraph initialized with ID: %s", self.graph_id)

    @classmethod
    def from_specs(
        cls, specs: Iterable[NodeSpec], graph_id: Optional[str] = None
    ) -> "VaultGraph":
        """Build a graph from node specs."""
        graph = cls(graph_id=graph_id)
        for spec in specs:
            graph.add_node_spec(spec)
        return graph

    @classmethod
    def from_adjacency(
        cls,
        adjacency: Dict[str, Iterable[str]],
        metadata: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> "VaultGraph":
        """Build a graph from a ``key -> targets`` mapping.

        Only keys of ``adjacency`` become documents; targets missing from it
        stay unresolved.
        """
        metadata = metadata or {}
        return cls.from_specs(
            NodeSpec(key=key, links=list(targets), metadata=metadata.get(key, {}))
            for key, targets in adjacency.items()
        )

    @property
    def native_graph(self) -> nx.DiGraph:
        """Underlying NetworkX graph."""
        return self._graph

    def add_node_spec(self, spec: NodeSpec) -> None:
        """Add (or replace) a document and its outgoing links."""
        key = spec.key
        if self._graph.has_node(key):
            if self._graph.nodes[key].get("exists"):
                logger.debug("Replacing existing node %s", key)
            self._graph.remove_edges_from(list(self._graph.out_edges(key)))
        self._graph.add_node(key, spec=spec, exists=True)

        for target in spec.links:
            target = target.replace("\\", "/").lstrip("/")
            if not self._graph.has_node(target):
                self._graph.add_node(target, exists=False)
            self._graph.add_edge(key, target)

    def add_document(
        self,
        key: str,
        links: Iterable[str] = (),
        metadata: Optional[Dict[str, Any]] = None,
        inline_tags: Iterable[str] = (),
    ) -> NodeSpec:
        """Convenience wrapper around add_node_spec."""
        spec = NodeSpec(
            key=key,
            links=list(links),
            metadata=dict(metadata or {}),
            inline_tags=list(inline_tags),
        )
        self.add_node_spec(spec)
        return spec

    def remove_document(self, key: str) -> None:
        """Delete a document; links pointing at it become unresolved."""
        if not self._graph.has_node(key):
            return
        if self._graph.in_degree(key) > 0:
            self._graph.remove_edges_from(list(self._graph.out_edges(key)))
            self._graph.add_node(key, exists=False)
            self._graph.nodes[key].pop("spec", None)
        else:
            self._graph.remove_node(key)

    def has_node(self, key: str) -> bool:
        """Check whether ``key`` resolves to an existing document."""
        return bool(self._graph.has_node(key) and self._graph.nodes[key].get("exists"))

    def get_node(self, key: str) -> Optional[NodeSpec]:
        if not self.has_node(key):
            return None
        return self._graph.nodes[key]["spec"]

    def links(self, key: str) -> List[str]:
        if not self._graph.has_node(key):
            return []
        return list(self._graph.successors(key))

    def metadata(self, key: str) -> Dict[str, Any]:
        """Frontmatter of ``key`` (empty when the document does not exist)."""
        node = self.get_node(key)
        return dict(node.metadata) if node else {}

    def keys(self) -> List[str]:
        """Keys of all existing documents."""
        return [key for key, exists in self._graph.nodes(data="exists") if exists]

    def nodes(self) -> Iterator[NodeSpec]:
        """Iterate over existing documents."""
        for _key, spec in self._graph.nodes(data="spec"):
            if spec is not None:
                yield spec

    def unresolved_links(self) -> Set[str]:
        """Link targets that do not resolve to a document."""
        return {key for key, exists in self._graph.nodes(data="exists") if not exists}

    def all_tags(self) -> Set[str]:
        tags: Set[str] = set()
        for spec in self.nodes():
            tags.update(spec.all_tags)
        return tags

    def all_folders(self) -> Set[str]:
        folders: Set[str] = set()
        for spec in self.nodes():
            for parent in PurePosixPath(spec.key).parents:
                if str(parent) != ".":
                    folders.add(str(parent))
        return folders

    def node_count(self) -> int:
        """Number of existing documents."""
        return len(self.keys())

    def edge_count(self) -> int:
        """Number of links, unresolved targets included."""
        return self._graph.number_of_edges()
