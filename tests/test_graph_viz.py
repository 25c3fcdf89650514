import pytest

from graph_editor.canvas import Viewport
from graph_editor.graph_viz import (
    DEFAULT_NODE_COLOR,
    EDITING_BORDER,
    PENDING_BORDER,
    SELECTED_BORDER,
    GraphVisualizer,
)
from graph_editor.labels import EDITING, PLACEHOLDER_LABEL, LabelEditState
from graph_editor.models import Edge, Node, Position


@pytest.fixture
def visualizer():
    return GraphVisualizer()


@pytest.fixture
def nodes():
    return [
        Node(id="1", position=Position(10, 20), label="Alpha"),
        Node(id="2", position=Position(300, 40), label="", selected=True),
        Node(id="3", type="square", position=Position(0, 0), label="Odd"),
    ]


def series(option):
    return option["series"][0]


def test_nodes_keep_their_positions(visualizer, nodes):
    option = visualizer.generate_echarts(nodes, [])
    data = {d["id"]: d for d in series(option)["data"]}
    assert data["1"]["value"] == [10, 20]
    assert data["2"]["value"] == [300, 40]
    assert series(option)["layout"] == "none"
    assert series(option)["coordinateSystem"] == "cartesian2d"


def test_labels_and_placeholder(visualizer, nodes):
    data = {d["id"]: d for d in series(visualizer.generate_echarts(nodes, []))["data"]}
    assert data["1"]["label"]["formatter"] == "Alpha"
    assert data["2"]["label"]["formatter"] == PLACEHOLDER_LABEL


def test_border_states(visualizer, nodes):
    edit_state = LabelEditState(node_id="1", mode=EDITING, buffer="Typing")
    option = visualizer.generate_echarts(nodes, [], edit_state=edit_state, pending_source="3")
    data = {d["id"]: d for d in series(option)["data"]}

    assert data["1"]["label"]["formatter"] == "Typing"
    assert data["1"]["itemStyle"]["borderColor"] == EDITING_BORDER
    assert data["2"]["itemStyle"]["borderColor"] == SELECTED_BORDER
    assert data["3"]["itemStyle"]["borderColor"] == PENDING_BORDER


def test_unknown_type_color(visualizer, nodes):
    data = {d["id"]: d for d in series(visualizer.generate_echarts(nodes, []))["data"]}
    assert data["3"]["itemStyle"]["color"] == DEFAULT_NODE_COLOR
    assert data["1"]["itemStyle"]["color"] != DEFAULT_NODE_COLOR


def test_dangling_edges_are_not_drawn(visualizer, nodes):
    edges = [
        Edge(id="edge-1", source="1", target="2", label="ok"),
        Edge(id="edge-2", source="1", target="99"),
    ]
    links = series(visualizer.generate_echarts(nodes, edges))["links"]
    assert [link["id"] for link in links] == ["edge-1"]
    assert links[0]["label"]["formatter"] == "ok"
    assert links[0]["lineStyle"]["curveness"] == 0.0


def test_parallel_edges_are_fanned_out(visualizer, nodes):
    edges = [
        Edge(id="edge-1", source="1", target="2"),
        Edge(id="edge-2", source="1", target="2"),
    ]
    links = series(visualizer.generate_echarts(nodes, edges))["links"]
    curveness = [link["lineStyle"]["curveness"] for link in links]
    assert curveness[0] != curveness[1]


def test_axes_follow_viewport(visualizer, nodes):
    viewport = Viewport(x=-100, y=-50, zoom=2.0, width=800, height=600)
    option = visualizer.generate_echarts(nodes, [], viewport=viewport)
    assert option["xAxis"]["min"] == -100
    assert option["xAxis"]["max"] == 300
    assert option["yAxis"]["min"] == -50
    assert option["yAxis"]["max"] == 250
    assert option["yAxis"]["inverse"] is True
    assert series(option)["data"][0]["symbolSize"] == 120


def test_empty_graph(visualizer):
    option = visualizer.generate_echarts([], [])
    assert series(option)["data"] == []
    assert series(option)["links"] == []
