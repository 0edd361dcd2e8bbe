"""In-memory graph view used by the CLI and the tests."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional


@dataclass
class ViewNode:
    """Displayed node with a mutable weight."""

    id: str
    weight: float = 1.0


@dataclass
class InMemoryRenderer:
    """Renderer holding a fixed list of displayed nodes."""

    nodes: List[ViewNode] = field(default_factory=list)

    def weights(self) -> Dict[str, float]:
        """Current weight of every displayed node."""
        return {node.id: node.weight for node in self.nodes}


class InMemoryView:
    """Graph view whose renderer and lifecycle are controlled by the caller."""

    def __init__(
        self,
        name: str = "graph",
        renderer: Optional[InMemoryRenderer] = None,
    ) -> None:
        self.name = name
        self.renderer = renderer
        self.closed = False

    @classmethod
    def of_keys(cls, keys: Iterable[str], name: str = "graph") -> "InMemoryView":
        """Create a ready view displaying ``keys`` at weight 1."""
        return cls(name, InMemoryRenderer([ViewNode(key) for key in keys]))

    def close(self) -> None:
        """Mark the view closed and drop its renderer."""
        self.closed = True
        self.renderer = None

    def __repr__(self) -> str:
        return f"InMemoryView({self.name!r}, closed={self.closed})"
