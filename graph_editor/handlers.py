"""
Canvas Handlers - event handlers wiring the NiceGUI page to GraphEditor.

This module keeps all chart/keyboard event handling out of app.py so the
page function stays focused on layout. Handlers only translate events;
every graph mutation goes through GraphEditor.
"""

import logging
from typing import Any, Callable, Dict

from graph_editor.canvas import (
    ZOOM_STEP,
    ConnectGesture,
    Viewport,
    drag_changes,
    normalize_event_payload,
    nudge_changes,
    resolve_target,
    selection_changes,
)
from graph_editor.editor import GraphEditor
from graph_editor.errors import ImportParseError

logger = logging.getLogger(__name__)

# Pixels the pointer must travel between press and release to count as a drag
DRAG_THRESHOLD = 4
NUDGE_STEP = 10

NUDGE_KEYS = {
    'ArrowLeft': (-NUDGE_STEP, 0),
    'ArrowRight': (NUDGE_STEP, 0),
    'ArrowUp': (0, -NUDGE_STEP),
    'ArrowDown': (0, NUDGE_STEP),
}


def key_name(key: Any) -> str:
    """NiceGUI KeyboardKey (or plain str) -> key name like 'Delete'."""
    return getattr(key, 'name', None) or str(key)


def event_args(event: Any) -> Any:
    return event.args if hasattr(event, 'args') else event


def setup_canvas_handlers(
    state: Dict[str, Any],
    editor: GraphEditor,
    refresh_chart_ui: Callable[[], None],
    open_label_input: Callable[[str], None],
    open_edge_dialog: Callable[[str], None],
    notify: Callable[..., Any],
):
    """
    Set up all canvas event handlers.

    Args:
        state: Page state dictionary ('viewport', 'is_shift_pressed', ...)
        editor: GraphEditor instance
        refresh_chart_ui: Function to redraw the chart
        open_label_input: Show the inline input for a node id
        open_edge_dialog: Show the edge label dialog for an edge id
        notify: ui.notify (injected so handlers run without a page)

    Returns:
        Dict with handler functions for binding to UI events
    """
    state.setdefault('viewport', Viewport())
    state.setdefault('is_shift_pressed', False)
    state.setdefault('is_ctrl_pressed', False)
    state.setdefault('dragging_node_id', None)
    state.setdefault('press_position', None)
    state.setdefault('connect', ConnectGesture())

    def handle_keyboard(e):
        """Track modifiers; Delete removes the selection, arrows nudge it."""
        name = key_name(e.key)
        is_down = e.action.keydown

        if name == 'Shift':
            state['is_shift_pressed'] = is_down
            return
        if name == 'Control':
            state['is_ctrl_pressed'] = is_down
            if not is_down and state['connect'].is_pending:
                state['connect'].cancel()
                refresh_chart_ui()
            return
        if not is_down:
            return

        if name == 'Escape' and state['connect'].is_pending:
            state['connect'].cancel()
            refresh_chart_ui()
            return

        if name in NUDGE_KEYS:
            dx, dy = NUDGE_KEYS[name]
            changes = nudge_changes(editor.nodes, dx, dy)
            if changes:
                editor.on_nodes_change(changes)
                refresh_chart_ui()
            return

        if editor.handle_key(name):
            refresh_chart_ui()

    def handle_chart_click(event):
        """Click selects, shift-click toggles, ctrl-click picks connection endpoints."""
        payload = normalize_event_payload(event_args(event))
        target = resolve_target(payload)

        if state['is_ctrl_pressed'] and target and target[0] == 'node':
            node = editor.store.get_node(target[1])
            if node is None:
                return
            nodes_by_id = {n.id: n for n in editor.nodes}
            connection = state['connect'].pick(node, nodes_by_id)
            if connection is not None:
                edge = editor.connect(connection)
                notify(f'Connected {connection.source} → {connection.target}', position='bottom', timeout=800)
                logger.debug(f"Created {edge.id} via ctrl-click")
            refresh_chart_ui()
            return

        node_changes, edge_changes = selection_changes(
            editor.nodes, editor.edges, target, additive=state['is_shift_pressed']
        )
        if node_changes:
            editor.on_nodes_change(node_changes)
        if edge_changes:
            editor.on_edges_change(edge_changes)
        if node_changes or edge_changes:
            refresh_chart_ui()

    def handle_chart_dblclick(event):
        """Double-click opens the label editor (node) or the label prompt (edge)."""
        target = resolve_target(normalize_event_payload(event_args(event)))
        if target is None:
            return
        kind, item_id = target
        if kind == 'node':
            if editor.on_node_double_click(item_id).is_editing:
                open_label_input(item_id)
                refresh_chart_ui()
        elif kind == 'edge':
            if editor.on_edge_double_click(item_id).is_open:
                open_edge_dialog(item_id)

    def handle_chart_mouse_down(event):
        target = resolve_target(normalize_event_payload(event_args(event)))
        state['dragging_node_id'] = target[1] if target and target[0] == 'node' else None

    def handle_mouse_down(event):
        raw = event_args(event)
        if isinstance(raw, dict):
            state['press_position'] = (raw.get('offsetX', 0), raw.get('offsetY', 0))

    def handle_mouse_up(event):
        """Drop a dragged node (and the rest of the selection with it), or pan on a background drag."""
        dragged = state.get('dragging_node_id')
        press = state.get('press_position')
        state['dragging_node_id'] = None
        state['press_position'] = None
        if not press:
            return

        raw = event_args(event)
        if not isinstance(raw, dict):
            return
        x, y = raw.get('offsetX', 0), raw.get('offsetY', 0)
        if abs(x - press[0]) < DRAG_THRESHOLD and abs(y - press[1]) < DRAG_THRESHOLD:
            return

        if not dragged:
            state['viewport'] = state['viewport'].panned(x - press[0], y - press[1])
            refresh_chart_ui()
            return

        drop = state['viewport'].screen_to_flow(x, y)
        changes = drag_changes(editor.nodes, dragged, drop)
        if changes:
            editor.on_nodes_change(changes)
            refresh_chart_ui()

    def handle_wheel(event):
        raw = event_args(event)
        delta = raw.get('deltaY', 0) if isinstance(raw, dict) else 0
        if delta:
            factor = 1 / ZOOM_STEP if delta > 0 else ZOOM_STEP
            state['viewport'] = state['viewport'].zoomed(factor)
            refresh_chart_ui()

    def do_add_node():
        node = editor.add_node(viewport=state['viewport'])
        refresh_chart_ui()
        return node

    def do_clear():
        state['connect'].cancel()
        editor.clear()
        refresh_chart_ui()
        notify('Graph cleared', position='bottom', timeout=800)

    def do_import(content: bytes) -> bool:
        try:
            editor.import_json(content)
        except ImportParseError as e:
            notify(str(e), type='negative')
            return False
        state['connect'].cancel()
        state['viewport'] = state['viewport'].fit(editor.nodes)
        refresh_chart_ui()
        notify(f'Imported {len(editor.nodes)} nodes, {len(editor.edges)} edges', type='positive')
        return True

    return {
        'handle_keyboard': handle_keyboard,
        'handle_chart_click': handle_chart_click,
        'handle_chart_dblclick': handle_chart_dblclick,
        'handle_chart_mouse_down': handle_chart_mouse_down,
        'handle_mouse_down': handle_mouse_down,
        'handle_mouse_up': handle_mouse_up,
        'handle_wheel': handle_wheel,
        'do_add_node': do_add_node,
        'do_clear': do_clear,
        'do_import': do_import,
    }
