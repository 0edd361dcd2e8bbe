"""Sizing service wiring configuration, driver and per-view tasks together.

This is the object a host integration holds on to: start it once, forward
"layout changed" notifications with the list of open views, forward
settings edits, and stop it on shutdown.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from nodesize.config.loader import ConfigStore
from nodesize.config.schema import SizingConfig
from nodesize.graph.provider import GraphProvider
from nodesize.runtime.driver import BatchSizingDriver, PassReport
from nodesize.runtime.protocols import GraphView
from nodesize.runtime.scheduler import DEFAULT_INTERVAL, ViewTimerRegistry

logger = logging.getLogger("nodesize.runtime.service")


class SizingService:
    """Owns the settings store, the batch driver and the timer registry."""

    def __init__(
        self,
        graph: GraphProvider,
        store: Optional[ConfigStore] = None,
        settings_path: Optional[Union[str, Path]] = None,
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        """Initialize service.

        Args:
            graph: Document graph provider.
            store: Settings store; created from ``settings_path`` if omitted.
            settings_path: Settings file for a new store (memory-only if None).
            interval: Seconds between sizing passes of each view.
        """
        self.store = store or ConfigStore(settings_path)
        self.driver = BatchSizingDriver(graph, self.store.snapshot)
        self.registry = ViewTimerRegistry(self.driver.update_view, interval)
        self._started = False

    @property
    def config(self) -> SizingConfig:
        """Current configuration snapshot."""
        return self.store.snapshot()

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> SizingConfig:
        """Load persisted settings; views are attached on layout changes."""
        config = self.store.load()
        self._started = True
        logger.info("Sizing service started")
        return config

    def stop(self) -> None:
        """Cancel every outstanding per-view task."""
        self.registry.cancel_all()
        self._started = False
        logger.info("Sizing service stopped")

    def on_layout_change(self, views: Iterable[GraphView]) -> None:
        """Attach tasks to new views and drop tasks of closed ones."""
        if not self._started:
            logger.debug("Layout change ignored; service not started")
            return
        self.registry.sync(views)

    def refresh_all(self) -> int:
        """Re-size every tracked view immediately."""
        return self.registry.refresh_all()

    def update_view(self, view: GraphView) -> PassReport:
        """Run one pass over ``view`` outside of its timer."""
        return self.driver.update_view(view)

    def update_settings(self, **changes: Any) -> SizingConfig:
        """Validate, persist and apply setting changes to all views.

        Raises:
            ValidationError: If a changed value cannot be coerced.
        """
        config = self.store.update(**changes)
        self.refresh_all()
        return config

    def restore_defaults(self) -> SizingConfig:
        """Reset the numeric settings, keeping exclusion lists."""
        config = self.store.restore_defaults()
        self.refresh_all()
        return config

    def tracked_views(self) -> List[GraphView]:
        return self.registry.views()

    def __enter__(self) -> "SizingService":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
