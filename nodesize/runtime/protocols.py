"""
Protocol definitions for the host view abstraction.

The host application owns its graph views; the sizing runtime only needs
the small surface described here, which keeps it testable with plain
in-memory objects.
"""

from typing import Iterable, Optional, Protocol


class RenderedNode(Protocol):
    """A node currently drawn by a view."""

    id: str
    weight: float


class Renderer(Protocol):
    """Renderer of a live view; exposes the displayed nodes."""

    @property
    def nodes(self) -> Iterable[RenderedNode]:
        ...


class GraphView(Protocol):
    """
    A live graph view.

    ``renderer`` is None until the view has finished setting up; such a
    view is skipped for the pass. ``closed`` turns True once the view is
    gone, after which its periodic task must be cancelled.
    """

    @property
    def renderer(self) -> Optional[Renderer]:
        ...

    @property
    def closed(self) -> bool:
        ...
