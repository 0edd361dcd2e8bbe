"""Batch sizing driver.

One pass sizes every node currently displayed by a view: it takes a
single configuration snapshot, resolves each node and writes the result
back to the node's ``weight``. Nodes that resolve to nothing (missing or
excluded) keep their current weight. A node that fails to resolve is logged
and skipped; the rest of the view is still sized.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List

from nodesize.config.schema import SizingConfig
from nodesize.graph.provider import GraphProvider
from nodesize.runtime.protocols import GraphView
from nodesize.sizing.exclusion import ExclusionEvaluator, InvalidTitlePattern
from nodesize.sizing.resolver import SizeResolution, SizeResolver, SizeSource

logger = logging.getLogger("nodesize.runtime.driver")

ConfigProvider = Callable[[], SizingConfig]


@dataclass
class PassReport:
    """Counters describing one sizing pass over a view."""

    computed: int = 0
    manual: int = 0
    excluded: int = 0
    missing: int = 0
    failed: int = 0
    skipped_view: bool = False
    pattern_errors: List[InvalidTitlePattern] = field(default_factory=list)

    @property
    def assigned(self) -> int:
        """Number of nodes whose weight was written."""
        return self.computed + self.manual

    def record(self, resolution: SizeResolution) -> None:
        if resolution.source is SizeSource.COMPUTED:
            self.computed += 1
        elif resolution.source is SizeSource.MANUAL:
            self.manual += 1
        elif resolution.source is SizeSource.EXCLUDED:
            self.excluded += 1
        else:
            self.missing += 1


class BatchSizingDriver:
    """Applies the size resolver to every node of a view.

    Passes are idempotent: with an unchanged graph and configuration a
    second pass writes the same weights as the first.
    """

    def __init__(self, graph: GraphProvider, config_provider: ConfigProvider) -> None:
        """Initialize driver.

        Args:
            graph: Document graph, read live on every pass.
            config_provider: Returns the configuration snapshot for a pass.
        """
        self.graph = graph
        self.config_provider = config_provider

    def update_view(self, view: GraphView) -> PassReport:
        """Run one sizing pass over ``view``.

        Args:
            view: Live view whose displayed nodes are sized.

        Returns:
            PassReport: What happened to the view's nodes.
        """
        renderer = view.renderer
        if renderer is None:
            logger.debug("View %r has no renderer yet; skipping pass", view)
            return PassReport(skipped_view=True)

        config = self.config_provider()
        evaluator = ExclusionEvaluator(config)
        resolver = SizeResolver(self.graph, config, evaluator)
        report = PassReport(pattern_errors=list(evaluator.pattern_errors))

        for node in list(renderer.nodes):
            try:
                resolution = resolver.resolve(node.id)
            except Exception as e:  # pylint: disable=broad-exception-caught
                report.failed += 1
                logger.error("Failed to size node %s: %s", node.id, e, exc_info=True)
                continue

            report.record(resolution)
            if resolution.size is not None:
                node.weight = resolution.size

        logger.debug(
            "Sized view %r: %d computed, %d manual, %d excluded, %d missing, %d failed",
            view,
            report.computed,
            report.manual,
            report.excluded,
            report.missing,
            report.failed,
        )
        return report
