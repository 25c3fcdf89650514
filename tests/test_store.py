import pytest

from graph_editor.changes import AddChange, PositionChange, RemoveChange, ReplaceChange, SelectChange
from graph_editor.models import Edge, Node, Position
from graph_editor.store import GraphStore


@pytest.fixture
def store():
    return GraphStore(
        nodes=[Node(id="1", label="A"), Node(id="2", label="B"), Node(id="3", label="C")],
        edges=[Edge(id="edge-1", source="1", target="2")],
    )


@pytest.fixture
def updates(store):
    """Record a snapshot on every store notification."""
    seen = []
    store.subscribe(lambda s: seen.append(s.snapshot()))
    return seen


def test_multi_node_drag_is_one_update(store, updates):
    store.apply_node_changes([
        PositionChange("1", Position(10, 20)),
        PositionChange("2", Position(30, 40)),
    ])

    assert len(updates) == 1
    nodes, _ = updates[0]
    assert nodes[0].position == Position(10, 20)
    assert nodes[1].position == Position(30, 40)
    assert nodes[2].position == Position(0, 0)


def test_selection_and_removal_batch(store, updates):
    store.apply_node_changes([SelectChange("2", True), RemoveChange("3")])

    assert len(updates) == 1
    assert [n.id for n in store.nodes] == ["1", "2"]
    assert store.selected_node_ids() == {"2"}


def test_add_and_replace_changes(store):
    store.apply_node_changes([
        AddChange(Node(id="4", label="D")),
        ReplaceChange("1", Node(id="1", label="A2")),
    ])
    assert [n.id for n in store.nodes] == ["1", "2", "3", "4"]
    assert store.get_node("1").label == "A2"


def test_edge_changes(store):
    store.apply_edge_changes([SelectChange("edge-1", True)])
    assert store.selected_edge_ids() == {"edge-1"}
    store.apply_edge_changes([RemoveChange("edge-1")])
    assert store.edges == ()


def test_empty_batch_does_not_notify(store, updates):
    store.apply_node_changes([])
    store.apply_edge_changes([])
    assert updates == []


def test_snapshots_are_not_mutated_by_later_updates(store):
    before, _ = store.snapshot()
    store.apply_node_changes([PositionChange("1", Position(99, 99))])
    assert before[0].position == Position(0, 0)
    assert store.nodes[0].position == Position(99, 99)


def test_replace_and_clear(store, updates):
    store.replace([Node(id="9")], [])
    assert [n.id for n in store.nodes] == ["9"]
    assert store.edges == ()

    store.clear()
    assert store.is_empty()
    assert len(updates) == 2


def test_clear_empty_store_is_fine():
    store = GraphStore()
    store.clear()
    store.clear()
    assert store.nodes == () and store.edges == ()


def test_update_labels(store, updates):
    assert store.update_node_label("2", "Renamed")
    assert store.get_node("2").label == "Renamed"
    assert store.update_edge_label("edge-1", "link")
    assert store.get_edge("edge-1").label == "link"
    assert len(updates) == 2


def test_update_label_of_missing_item(store, updates):
    assert not store.update_node_label("nope", "x")
    assert not store.update_edge_label("nope", "x")
    assert updates == []


def test_remove_reports_counts(store, updates):
    removed = store.remove(node_ids={"1"}, edge_ids={"edge-1"})
    assert removed == {"nodes": 1, "edges": 1}
    assert len(updates) == 1

    assert store.remove(node_ids={"missing"}) == {"nodes": 0, "edges": 0}
    assert len(updates) == 1


def test_store_does_not_validate_endpoints():
    store = GraphStore()
    store.add_edge(Edge(id="edge-1", source="ghost", target="ghost"))
    assert len(store.edges) == 1


def test_unsubscribe(store):
    calls = []
    unsubscribe = store.subscribe(lambda s: calls.append(1))
    store.clear()
    unsubscribe()
    store.clear()
    assert calls == [1]
