"""Tests for the node model and the in-memory vault graph."""

import json
from pathlib import Path

import pytest

from nodesize.errors import GraphLoadError
from nodesize.graph import NodeSpec, VaultGraph, load_vault_graph, split_tag_value


def test_node_title_and_folder() -> None:
    node = NodeSpec(key="Projects/2024/Plan.v2.md")

    assert node.title == "Plan.v2"
    assert node.folder == "Projects/2024"
    assert NodeSpec(key="Root.md").folder == ""


def test_node_key_is_normalized() -> None:
    assert NodeSpec(key="\\Notes\\a.md").key == "Notes/a.md"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("#a, b  #c", ["a", "b", "c"]),
        (["#a", "b"], ["a", "b"]),
        ("", []),
        (None, []),
        (42, []),
    ],
)
def test_split_tag_value(value, expected) -> None:
    assert split_tag_value(value) == expected


def test_effective_tags_combine_declared_and_implicit() -> None:
    node = NodeSpec(
        key="a.md",
        metadata={"tags": "x, #y", "tag": "z", "status": "#draft", "title": "plain"},
        inline_tags=["#body"],
    )

    assert node.effective_tags == {"x", "y", "z", "draft"}
    assert node.all_tags == {"x", "y", "z", "body"}


def test_links_to_unknown_targets_are_unresolved() -> None:
    graph = VaultGraph()
    graph.add_document("A.md", links=["B.md", "Nowhere.md"])
    graph.add_document("B.md")

    assert graph.has_node("B.md")
    assert not graph.has_node("Nowhere.md")
    assert graph.get_node("Nowhere.md") is None
    assert sorted(graph.links("A.md")) == ["B.md", "Nowhere.md"]
    assert graph.unresolved_links() == {"Nowhere.md"}
    assert graph.node_count() == 2
    assert graph.edge_count() == 2


def test_adding_placeholder_target_later_resolves_it() -> None:
    graph = VaultGraph()
    graph.add_document("A.md", links=["B.md"])
    graph.add_document("B.md", links=["A.md"])

    assert graph.unresolved_links() == set()
    assert graph.links("B.md") == ["A.md"]


def test_replacing_document_replaces_links() -> None:
    graph = VaultGraph()
    graph.add_document("A.md", links=["B.md"])
    graph.add_document("A.md", links=["C.md"])

    assert graph.links("A.md") == ["C.md"]


def test_removed_document_becomes_unresolved_target() -> None:
    graph = VaultGraph()
    graph.add_document("A.md", links=["B.md"])
    graph.add_document("B.md", links=["C.md"])

    graph.remove_document("B.md")

    assert graph.get_node("B.md") is None
    assert graph.links("B.md") == []
    assert "B.md" in graph.unresolved_links()
    assert graph.metadata("B.md") == {}


def test_folders_and_tags_enumeration() -> None:
    graph = VaultGraph()
    graph.add_document("Projects/2024/Plan.md", metadata={"tags": ["work"]})
    graph.add_document("Inbox.md", inline_tags=["#todo"])

    assert graph.all_folders() == {"Projects", "Projects/2024"}
    assert graph.all_tags() == {"work", "todo"}


def test_load_vault_graph(tmp_path: Path) -> None:
    path = tmp_path / "vault.json"
    path.write_text(
        json.dumps(
            {
                "graph_id": "vault",
                "nodes": [
                    {"key": "A.md", "links": ["B.md"], "metadata": {"node_size": 4}},
                    {"key": "B.md", "tags": ["#idea"]},
                ],
            }
        ),
        encoding="utf-8",
    )

    graph = load_vault_graph(path)

    assert graph.graph_id == "vault"
    assert graph.links("A.md") == ["B.md"]
    assert graph.get_node("A.md").manual_size == 4
    assert graph.all_tags() == {"idea"}


@pytest.mark.parametrize(
    "content",
    ["not json", json.dumps([1, 2]), json.dumps({"nodes": [{"links": []}]}), json.dumps({"nodes": ["x"]})],
)
def test_load_vault_graph_rejects_malformed_snapshots(tmp_path: Path, content: str) -> None:
    path = tmp_path / "vault.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(GraphLoadError):
        load_vault_graph(path)


def test_load_vault_graph_missing_file(tmp_path: Path) -> None:
    with pytest.raises(GraphLoadError):
        load_vault_graph(tmp_path / "absent.json")
