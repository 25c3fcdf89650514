"""
Tests for the canvas event handlers, driven with stand-in NiceGUI events.
"""

from types import SimpleNamespace

import pytest

from graph_editor.canvas import Viewport
from graph_editor.editor import GraphEditor
from graph_editor.handlers import DRAG_THRESHOLD, NUDGE_STEP, setup_canvas_handlers
from graph_editor.models import Position


def key_event(name, keydown=True):
    return SimpleNamespace(key=SimpleNamespace(name=name), action=SimpleNamespace(keydown=keydown))


def node_event(node_id):
    return SimpleNamespace(args={"componentType": "series", "dataType": "node", "data": {"id": node_id}})


def edge_event(edge_id):
    return SimpleNamespace(args={"componentType": "series", "dataType": "edge", "data": {"id": edge_id}})


def mouse_event(x, y):
    return SimpleNamespace(args={"offsetX": x, "offsetY": y})


class Page:
    """Collects what the handlers ask the page to do."""

    def __init__(self):
        self.refreshes = 0
        self.label_inputs = []
        self.edge_dialogs = []
        self.notifications = []

    def refresh(self):
        self.refreshes += 1

    def notify(self, message, **kwargs):
        self.notifications.append((message, kwargs))


@pytest.fixture
def page():
    return Page()


@pytest.fixture
def editor():
    editor = GraphEditor()
    editor.start()
    return editor


@pytest.fixture
def state():
    return {'viewport': Viewport(width=800, height=600)}


@pytest.fixture
def handlers(state, editor, page):
    return setup_canvas_handlers(
        state=state,
        editor=editor,
        refresh_chart_ui=page.refresh,
        open_label_input=page.label_inputs.append,
        open_edge_dialog=page.edge_dialogs.append,
        notify=page.notify,
    )


def test_add_node_at_viewport_center(handlers, editor, page):
    node = handlers['do_add_node']()
    assert node.position == Position(400, 300)
    assert page.refreshes == 1


def test_click_and_shift_click_selection(handlers, editor):
    handlers['do_add_node']()
    handlers['do_add_node']()

    handlers['handle_chart_click'](node_event("1"))
    assert editor.store.selected_node_ids() == {"1"}

    handlers['handle_keyboard'](key_event('Shift'))
    handlers['handle_chart_click'](node_event("2"))
    assert editor.store.selected_node_ids() == {"1", "2"}

    handlers['handle_keyboard'](key_event('Shift', keydown=False))
    handlers['handle_chart_click'](SimpleNamespace(args={}))
    assert editor.store.selected_node_ids() == set()


def test_ctrl_click_connects_then_delete_cascades(handlers, editor, page):
    handlers['do_add_node']()
    handlers['do_add_node']()

    handlers['handle_keyboard'](key_event('Control'))
    handlers['handle_chart_click'](node_event("1"))
    handlers['handle_chart_click'](node_event("2"))
    handlers['handle_keyboard'](key_event('Control', keydown=False))

    assert [(e.id, e.source, e.target) for e in editor.edges] == [("edge-1", "1", "2")]
    assert page.notifications

    handlers['handle_chart_click'](node_event("1"))
    handlers['handle_keyboard'](key_event('Delete'))
    assert [n.id for n in editor.nodes] == ["2"]
    assert editor.edges == ()


def test_releasing_ctrl_cancels_pending_connection(handlers, editor, state):
    handlers['do_add_node']()
    handlers['handle_keyboard'](key_event('Control'))
    handlers['handle_chart_click'](node_event("1"))
    assert state['connect'].is_pending

    handlers['handle_keyboard'](key_event('Control', keydown=False))
    assert not state['connect'].is_pending
    assert editor.edges == ()


def test_double_click_opens_editors(handlers, editor, page):
    handlers['do_add_node']()
    handlers['do_add_node']()
    editor.connect({"source": "1", "target": "2"})

    handlers['handle_chart_dblclick'](node_event("1"))
    assert page.label_inputs == ["1"]
    assert editor.labels.state.node_id == "1"

    handlers['handle_chart_dblclick'](edge_event("edge-1"))
    assert page.edge_dialogs == ["edge-1"]

    handlers['handle_chart_dblclick'](node_event("404"))
    assert page.label_inputs == ["1"]


def test_escape_while_editing_keeps_label(handlers, editor):
    handlers['do_add_node']()
    handlers['handle_chart_dblclick'](node_event("1"))
    editor.labels.type("Changed")

    handlers['handle_keyboard'](key_event('Escape'))
    assert editor.nodes[0].label == "New Node"
    assert not editor.labels.state.is_editing


def test_drag_moves_node(handlers, editor, state):
    handlers['do_add_node']()

    handlers['handle_chart_mouse_down'](node_event("1"))
    handlers['handle_mouse_down'](mouse_event(400, 300))
    handlers['handle_mouse_up'](mouse_event(450, 320))

    assert editor.nodes[0].position == state['viewport'].screen_to_flow(450, 320)


def test_small_pointer_movement_is_not_a_drag(handlers, editor):
    node = handlers['do_add_node']()

    handlers['handle_chart_mouse_down'](node_event("1"))
    handlers['handle_mouse_down'](mouse_event(400, 300))
    handlers['handle_mouse_up'](mouse_event(400 + DRAG_THRESHOLD - 1, 300))

    assert editor.nodes[0].position == node.position


def test_arrow_keys_nudge_selection(handlers, editor):
    node = handlers['do_add_node']()
    handlers['handle_chart_click'](node_event("1"))
    handlers['handle_keyboard'](key_event('ArrowRight'))
    assert editor.nodes[0].position == Position(node.position.x + NUDGE_STEP, node.position.y)


def test_wheel_zooms(handlers, state):
    handlers['handle_wheel'](SimpleNamespace(args={"deltaY": -100}))
    assert state['viewport'].zoom > 1
    handlers['handle_wheel'](SimpleNamespace(args={"deltaY": 100}))
    handlers['handle_wheel'](SimpleNamespace(args={"deltaY": 100}))
    assert state['viewport'].zoom < 1


def test_clear(handlers, editor, page):
    handlers['do_add_node']()
    handlers['do_clear']()
    assert editor.nodes == ()
    assert page.notifications[-1][0] == 'Graph cleared'


def test_import_failure_notifies(handlers, editor, page):
    handlers['do_add_node']()
    assert not handlers['do_import'](b"not a graph")
    assert len(editor.nodes) == 1
    message, kwargs = page.notifications[-1]
    assert message == "Failed to import graph. Please check the file format."
    assert kwargs['type'] == 'negative'


def test_import_success(handlers, editor, page):
    assert handlers['do_import'](b'{"nodes": [{"id": "4", "position": {"x": 1, "y": 2}}], "edges": []}')
    assert [n.id for n in editor.nodes] == ["4"]
    assert page.notifications[-1][1]['type'] == 'positive'


def test_background_drag_pans(handlers, state, page):
    start = state['viewport']

    handlers['handle_mouse_down'](mouse_event(100, 100))
    handlers['handle_mouse_up'](mouse_event(160, 80))

    assert state['viewport'] == start.panned(60, -20)
    assert state['viewport'].x == start.x - 60
    assert page.refreshes == 1


def test_node_drag_does_not_pan(handlers, state):
    handlers['do_add_node']()
    start = state['viewport']

    handlers['handle_chart_mouse_down'](node_event("1"))
    handlers['handle_mouse_down'](mouse_event(400, 300))
    handlers['handle_mouse_up'](mouse_event(450, 320))

    assert state['viewport'] == start


def test_import_out_of_range_document_notifies(handlers, editor, page):
    content = b'{"nodes": [{"id": "1", "position": {"x": 1' + b"0" * 400 + b', "y": 0}}]}'
    assert not handlers['do_import'](content)
    assert editor.nodes == ()
    assert page.notifications[-1][1]['type'] == 'negative'
