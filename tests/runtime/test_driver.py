"""Tests for the batch sizing driver."""

import logging

import pytest

from nodesize.config.schema import SizingConfig
from nodesize.graph.provider import VaultGraph
from nodesize.runtime.driver import BatchSizingDriver
from nodesize.runtime.view import InMemoryRenderer, InMemoryView, ViewNode


def _graph() -> VaultGraph:
    graph = VaultGraph()
    graph.add_document("A.md", links=["B.md", "C.md"])
    graph.add_document("B.md", links=["C.md"])
    graph.add_document("C.md")
    graph.add_document("Pinned.md", metadata={"node_size": 42})
    graph.add_document("Archive/Old.md", links=["A.md"])
    return graph


def _driver(graph: VaultGraph, **changes) -> BatchSizingDriver:
    config = SizingConfig.default().with_updates(**changes)
    return BatchSizingDriver(graph, lambda: config)


def test_pass_assigns_computed_and_manual_sizes() -> None:
    graph = _graph()
    view = InMemoryView.of_keys(["A.md", "B.md", "C.md", "Pinned.md"])

    report = _driver(graph).update_view(view)

    assert view.renderer.weights() == {
        "A.md": pytest.approx(6.0),
        "B.md": pytest.approx(4.0),
        "C.md": pytest.approx(2.0),
        "Pinned.md": 42,
    }
    assert report.computed == 3
    assert report.manual == 1
    assert report.assigned == 4


def test_excluded_and_missing_nodes_keep_their_weight() -> None:
    """Exclusion means the node is not managed, not reset."""
    graph = _graph()
    view = InMemoryView(
        "graph",
        InMemoryRenderer([ViewNode("Archive/Old.md", 13.0), ViewNode("Deleted.md", 5.0)]),
    )

    report = _driver(graph, excludeFolders=["Archive"]).update_view(view)

    assert view.renderer.weights() == {"Archive/Old.md": 13.0, "Deleted.md": 5.0}
    assert report.excluded == 1
    assert report.missing == 1
    assert report.assigned == 0


def test_view_without_renderer_is_skipped() -> None:
    report = _driver(_graph()).update_view(InMemoryView("loading"))

    assert report.skipped_view
    assert report.assigned == 0


def test_passes_are_idempotent() -> None:
    graph = _graph()
    view = InMemoryView.of_keys(graph.keys())
    driver = _driver(graph)

    driver.update_view(view)
    first = view.renderer.weights()
    driver.update_view(view)

    assert view.renderer.weights() == first


def test_config_snapshot_is_read_per_pass() -> None:
    graph = _graph()
    view = InMemoryView.of_keys(["A.md"])
    configs = [SizingConfig.default(), SizingConfig.default().with_updates(sizeMultiplier=1)]
    driver = BatchSizingDriver(graph, lambda: configs[0])

    driver.update_view(view)
    assert view.renderer.weights()["A.md"] == pytest.approx(6.0)

    configs[0] = configs[1]
    driver.update_view(view)
    assert view.renderer.weights()["A.md"] == pytest.approx(3.0)


def test_graph_changes_between_passes_are_picked_up() -> None:
    graph = _graph()
    view = InMemoryView.of_keys(["C.md"])
    driver = _driver(graph)

    driver.update_view(view)
    graph.add_document("C.md", links=["D.md"])
    graph.add_document("D.md")
    driver.update_view(view)

    assert view.renderer.weights()["C.md"] == pytest.approx(4.0)


def test_one_failing_node_does_not_stop_the_pass(caplog: pytest.LogCaptureFixture) -> None:
    """A provider error for one node is logged; the others are still sized."""

    class FlakyGraph(VaultGraph):
        def get_node(self, key):
            if key == "B.md":
                raise RuntimeError("metadata cache unavailable")
            return super().get_node(key)

    graph = FlakyGraph()
    graph.add_document("B.md")
    graph.add_document("C.md")
    view = InMemoryView.of_keys(["B.md", "C.md"])

    with caplog.at_level(logging.ERROR, logger="nodesize.runtime.driver"):
        report = _driver(graph).update_view(view)

    assert report.failed == 1
    assert report.computed == 1
    assert view.renderer.weights() == {"B.md": 1.0, "C.md": pytest.approx(2.0)}
    assert "Failed to size node B.md" in caplog.text


def test_pattern_errors_are_reported_per_pass() -> None:
    view = InMemoryView.of_keys(["A.md"])

    report = _driver(_graph(), excludeTitles=["/(/"]).update_view(view)

    assert [p.pattern for p in report.pattern_errors] == ["/(/"]
    assert report.computed == 1
