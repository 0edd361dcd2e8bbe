"""Depth-bounded reachability weights.

The weight of a root is the number of distinct documents reachable from it
along outgoing links within ``max_depth`` hops, the root included.

Traversal rules:

* a node already seen in this traversal contributes nothing (cycles,
  self-loops and diamonds are counted once);
* a missing node contributes 0, or 1 with ``count_missing_links``, and is
  never expanded;
* an excluded node contributes 0 and is not expanded;
* a node at depth ``max_depth`` contributes 1 but is not expanded.

The walk is breadth-first over an explicit queue, so every node is reached
at its shortest hop distance and the total does not depend on the order
in which links are listed.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional, Set, Tuple

from nodesize.config.schema import SizingConfig
from nodesize.graph.provider import GraphProvider
from nodesize.sizing.exclusion import ExclusionEvaluator

logger = logging.getLogger("nodesize.sizing.reachability")


@dataclass
class Traversal:
    """Outcome of one depth-bounded walk.

    Attributes:
        root: Key the walk started from.
        counted: Existing, non-excluded keys mapped to their hop distance.
        missing: Keys that did not resolve to a document.
        excluded: Keys stopped by an exclusion rule.
        frontier: Counted keys sitting on the depth limit (not expanded).
    """

    root: str
    counted: Dict[str, int] = field(default_factory=dict)
    missing: Set[str] = field(default_factory=set)
    excluded: Set[str] = field(default_factory=set)
    frontier: Set[str] = field(default_factory=set)

    def weight(self, count_missing_links: bool = False) -> int:
        """Number of nodes contributing to the root's size."""
        total = len(self.counted)
        if count_missing_links:
            total += len(self.missing)
        return total


class ReachabilityAggregator:
    """Computes reachability weights over a graph provider.

    One aggregator serves one configuration snapshot; every call to
    `traverse` owns a fresh visited set.
    """

    def __init__(
        self,
        graph: GraphProvider,
        config: SizingConfig,
        evaluator: Optional[ExclusionEvaluator] = None,
    ) -> None:
        """Initialize aggregator.

        Args:
            graph: Provider used to resolve nodes and their links.
            config: Snapshot supplying ``max_depth`` and the missing-link policy.
            evaluator: Compiled exclusion rules (built from ``config`` if omitted).
        """
        self.graph = graph
        self.config = config
        self.evaluator = evaluator or ExclusionEvaluator(config)

    def traverse(self, root: str) -> Traversal:
        """Walk outgoing links from ``root`` up to ``max_depth`` hops."""
        max_depth = self.config.max_depth
        result = Traversal(root=root)
        visited: Set[str] = {root}
        queue: Deque[Tuple[str, int]] = deque([(root, 0)])

        while queue:
            key, depth = queue.popleft()

            node = self.graph.get_node(key)
            if node is None:
                result.missing.add(key)
                continue
            if self.evaluator.is_excluded(node):
                result.excluded.add(key)
                continue

            result.counted[key] = depth
            if depth >= max_depth:
                result.frontier.add(key)
                continue

            for target in self.graph.links(key):
                if target in visited:
                    continue
                visited.add(target)
                queue.append((target, depth + 1))

        logger.debug(
            "Traversal from %s: %d counted, %d missing, %d excluded (max_depth=%d)",
            root,
            len(result.counted),
            len(result.missing),
            len(result.excluded),
            max_depth,
        )
        return result

    def weight(self, root: str) -> int:
        """Reachability weight of ``root`` (a non-negative integer)."""
        return self.traverse(root).weight(self.config.count_missing_links)


def weight(root: str, graph: GraphProvider, config: SizingConfig) -> int:
    """One-shot reachability weight of ``root``."""
    return ReachabilityAggregator(graph, config).weight(root)
