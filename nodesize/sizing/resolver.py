"""Final size resolution for a single node.

Precedence, highest first:

1. missing node -> nothing to size;
2. manual ``node_size`` -> used verbatim (no multiplier, scale or cap);
3. excluded node -> left at whatever size it has;
4. computed -> ``weight * sizeMultiplier * multiplierScale``, capped at
   ``maxSize`` and floored at 1.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from nodesize.config.schema import SizingConfig
from nodesize.graph.provider import GraphProvider
from nodesize.sizing.exclusion import ExclusionEvaluator
from nodesize.sizing.reachability import ReachabilityAggregator

logger = logging.getLogger("nodesize.sizing.resolver")

MIN_SIZE = 1.0


class SizeSource(str, Enum):
    """Where a resolved size came from."""

    MANUAL = "manual"
    COMPUTED = "computed"
    EXCLUDED = "excluded"
    MISSING = "missing"


@dataclass(frozen=True)
class SizeResolution:
    """Resolved size of one node.

    Attributes:
        key: Node key.
        source: Which rule decided the outcome.
        size: Size to assign, or None when the node must be left untouched.
        weight: Reachability weight (computed sizes only).
    """

    key: str
    source: SizeSource
    size: Optional[float] = None
    weight: Optional[int] = None

    @property
    def assigns(self) -> bool:
        """Whether this resolution writes a size."""
        return self.size is not None


def scale_weight(weight: int, config: SizingConfig) -> float:
    """Turn a reachability weight into a display size.

    Clamping happens once, on the scaled value: at most ``max_size``,
    at least 1.
    """
    scaled = float(weight) * config.size_multiplier * config.multiplier_scale
    return max(min(scaled, config.max_size), MIN_SIZE)


class SizeResolver:
    """Resolves node sizes for one configuration snapshot."""

    def __init__(
        self,
        graph: GraphProvider,
        config: SizingConfig,
        evaluator: Optional[ExclusionEvaluator] = None,
    ) -> None:
        self.graph = graph
        self.config = config
        self.evaluator = evaluator or ExclusionEvaluator(config)
        self.aggregator = ReachabilityAggregator(graph, config, self.evaluator)

    def resolve(self, key: str) -> SizeResolution:
        """Decide the size of the node identified by ``key``."""
        node = self.graph.get_node(key)
        if node is None:
            return SizeResolution(key=key, source=SizeSource.MISSING)

        manual = node.manual_size
        if manual is not None:
            return SizeResolution(key=key, source=SizeSource.MANUAL, size=manual)

        if self.evaluator.is_excluded(node):
            return SizeResolution(key=key, source=SizeSource.EXCLUDED)

        weight = self.aggregator.weight(key)
        size = scale_weight(weight, self.config)
        logger.debug("Resolved %s: weight=%d size=%.2f", key, weight, size)
        return SizeResolution(
            key=key, source=SizeSource.COMPUTED, size=size, weight=weight
        )


def resolve(key: str, graph: GraphProvider, config: SizingConfig) -> Optional[float]:
    """One-shot size of ``key``; None when the node must not be assigned."""
    return SizeResolver(graph, config).resolve(key).size
