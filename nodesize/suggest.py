"""Suggestions for authoring exclusion lists.

Folder and tag inputs offer every known folder/tag containing the typed
text, case-insensitively.
"""

from typing import Iterable, List

from nodesize.graph.provider import GraphProvider
from nodesize.graph.schema import strip_hash


def _matching(candidates: Iterable[str], query: str, limit: int) -> List[str]:
    needle = query.strip().lower()
    matches = sorted(c for c in candidates if needle in c.lower())
    return matches[:limit] if limit > 0 else matches


def suggest_folders(graph: GraphProvider, query: str = "", limit: int = 0) -> List[str]:
    """Folders whose path contains ``query``.

    Args:
        graph: Graph provider enumerating folders.
        query: Typed text; empty matches everything.
        limit: Maximum number of results (0 = unlimited).
    """
    return _matching(graph.all_folders(), query, limit)


def suggest_tags(graph: GraphProvider, query: str = "", limit: int = 0) -> List[str]:
    """Tags (without ``#``) containing ``query``.

    Args:
        graph: Graph provider enumerating tags.
        query: Typed text; a leading ``#`` is ignored.
        limit: Maximum number of results (0 = unlimited).
    """
    return _matching(graph.all_tags(), strip_hash(query.strip()), limit)
