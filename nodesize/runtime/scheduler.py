"""Per-view periodic sizing tasks.

The host gives no change notifications for the link graph, so each live
view is re-sized on a fixed interval. `ViewTimerRegistry` owns the mapping
from view to its task: a task is attached when a view appears and
cancelled when the view closes or disappears, so no task outlives (or
keeps a reference to) its view. Per-tick errors are logged and swallowed
so a failing pass does not stop the timer.
"""

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from nodesize.runtime.protocols import GraphView

logger = logging.getLogger("nodesize.runtime.scheduler")

DEFAULT_INTERVAL = 1.0

ViewCallback = Callable[[GraphView], Any]


class RepeatingTask:
    """Runs a callback every ``interval`` seconds on a daemon thread.

    `run_now` may also be called from other threads; passes of the same
    task never overlap.
    """

    def __init__(
        self,
        name: str,
        callback: Callable[[], Any],
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.name = name
        self.interval = interval
        self._callback = callback
        self._stop_event = threading.Event()
        self._pass_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        """Whether the task is started and not cancelled."""
        return self._thread is not None and not self._stop_event.is_set()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug("Started task %s (interval=%.2fs)", self.name, self.interval)

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            self.run_now()

    def run_now(self) -> None:
        """Run one pass immediately unless the task was cancelled."""
        with self._pass_lock:
            if self._stop_event.is_set():
                return
            try:
                self._callback()
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error("Task %s failed: %s", self.name, e, exc_info=True)

    def cancel(self, wait: bool = False, timeout: Optional[float] = None) -> None:
        """Stop the task.

        Args:
            wait: Join the worker thread (ignored when called from it).
            timeout: Maximum seconds to wait for the join.
        """
        self._stop_event.set()
        thread = self._thread
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug("Cancelled task %s", self.name)


class ViewTimerRegistry:
    """Registry of periodic sizing tasks, at most one per live view."""

    def __init__(
        self,
        update_view: ViewCallback,
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        """Initialize registry.

        Args:
            update_view: Sizing pass to run for a view on every tick.
            interval: Seconds between passes.
        """
        self._update_view = update_view
        self.interval = interval
        self._tasks: Dict[int, Tuple[GraphView, RepeatingTask]] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def __contains__(self, view: object) -> bool:
        with self._lock:
            return id(view) in self._tasks

    def views(self) -> List[GraphView]:
        """Views that currently have a task."""
        with self._lock:
            return [view for view, _task in self._tasks.values()]

    def attach(self, view: GraphView) -> bool:
        """Start a periodic task for ``view``.

        Returns:
            bool: False when the view already has a task or is closed.
        """
        if view.closed:
            return False
        with self._lock:
            if id(view) in self._tasks:
                return False
            task = RepeatingTask(
                name=f"nodesize-view-{id(view):x}",
                callback=lambda: self._tick(view),
                interval=self.interval,
            )
            self._tasks[id(view)] = (view, task)
        task.start()
        logger.info("Attached sizing task to view %r", view)
        return True

    def detach(self, view: GraphView) -> bool:
        """Cancel and forget the task of ``view``.

        Returns:
            bool: True when a task was removed.
        """
        with self._lock:
            entry = self._tasks.pop(id(view), None)
        if entry is None:
            return False
        entry[1].cancel()
        logger.info("Detached sizing task from view %r", view)
        return True

    def sync(self, views: Iterable[GraphView]) -> None:
        """Reconcile tasks with the views currently open.

        Called on every layout change: new views get a task, views that
        are closed or no longer listed lose theirs.
        """
        open_views = {id(view): view for view in views if not view.closed}
        for view in open_views.values():
            self.attach(view)
        for view in self.views():
            if id(view) not in open_views:
                self.detach(view)

    def refresh_all(self) -> int:
        """Run a pass on every registered view right away.

        Returns:
            int: Number of views refreshed.
        """
        with self._lock:
            tasks = [task for _view, task in self._tasks.values()]
        for task in tasks:
            task.run_now()
        return len(tasks)

    def cancel_all(self, wait: bool = True) -> None:
        """Cancel every task; used when the sizing service stops."""
        with self._lock:
            entries = list(self._tasks.values())
            self._tasks.clear()
        for _view, task in entries:
            task.cancel(wait=wait, timeout=self.interval + 1.0)
        if entries:
            logger.info("Cancelled %d sizing task(s)", len(entries))

    def _tick(self, view: GraphView) -> None:
        if view.closed:
            self.detach(view)
            return
        if view.renderer is None:
            return
        self._update_view(view)
