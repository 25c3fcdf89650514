"""
Canvas helpers: viewport transform and chart event translation.

The chart (ECharts inside NiceGUI) only reports raw events. This module
turns those into the inputs the core understands:
- screen offsets -> graph coordinates (Viewport)
- click / shift-click -> selection change batches
- node drag release -> one position batch for every dragged node
- two ctrl-clicks -> a Connection with facing handles
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from graph_editor.changes import PositionChange, SelectChange
from graph_editor.connections import Connection
from graph_editor.models import Edge, Node, Position

# Event keys we request from ECharts mouse events
REQUESTED_EVENT_KEYS = ['componentType', 'dataType', 'name', 'data']

MIN_ZOOM = 0.25
MAX_ZOOM = 4.0
ZOOM_STEP = 1.25


@dataclass(frozen=True)
class Viewport:
    """Visible window onto graph space. (x, y) is the graph point at the top-left corner."""
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0
    width: float = 1280.0
    height: float = 720.0

    def screen_to_flow(self, sx: float, sy: float) -> Position:
        return Position(x=self.x + sx / self.zoom, y=self.y + sy / self.zoom)

    def flow_to_screen(self, position: Position) -> Tuple[float, float]:
        return (position.x - self.x) * self.zoom, (position.y - self.y) * self.zoom

    def center(self) -> Position:
        return self.screen_to_flow(self.width / 2, self.height / 2)

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, max_x, min_y, max_y) of the visible graph area."""
        return (self.x, self.x + self.width / self.zoom,
                self.y, self.y + self.height / self.zoom)

    def resized(self, width: float, height: float) -> 'Viewport':
        return Viewport(self.x, self.y, self.zoom, float(width), float(height))

    def panned(self, dx: float, dy: float) -> 'Viewport':
        """Pan by a screen-space offset."""
        return Viewport(self.x - dx / self.zoom, self.y - dy / self.zoom, self.zoom, self.width, self.height)

    def zoomed(self, factor: float) -> 'Viewport':
        """Zoom about the viewport center, clamped to [MIN_ZOOM, MAX_ZOOM]."""
        zoom = min(MAX_ZOOM, max(MIN_ZOOM, self.zoom * factor))
        center = self.center()
        return Viewport(
            x=center.x - self.width / (2 * zoom),
            y=center.y - self.height / (2 * zoom),
            zoom=zoom, width=self.width, height=self.height,
        )

    def fit(self, nodes: Sequence[Node], padding: float = 80.0) -> 'Viewport':
        """Frame all nodes. An empty graph keeps the current viewport."""
        if not nodes:
            return self
        min_x = min(n.position.x for n in nodes) - padding
        max_x = max(n.position.x for n in nodes) + padding
        min_y = min(n.position.y for n in nodes) - padding
        max_y = max(n.position.y for n in nodes) + padding
        zoom = min(self.width / (max_x - min_x), self.height / (max_y - min_y))
        zoom = min(MAX_ZOOM, max(MIN_ZOOM, zoom))
        cx, cy = (min_x + max_x) / 2, (min_y + max_y) / 2
        return Viewport(cx - self.width / (2 * zoom), cy - self.height / (2 * zoom),
                        zoom, self.width, self.height)


def normalize_event_payload(raw_payload: Any) -> Dict[str, Any]:
    """Normalize NiceGUI chart event payloads into a dictionary."""
    if isinstance(raw_payload, dict):
        return raw_payload
    if isinstance(raw_payload, (list, tuple)):
        return {
            REQUESTED_EVENT_KEYS[i]: raw_payload[i]
            for i in range(min(len(raw_payload), len(REQUESTED_EVENT_KEYS)))
        }
    if isinstance(raw_payload, str):
        return {'dataType': 'node', 'name': raw_payload}
    return {}


def resolve_target(payload: Dict[str, Any]) -> Optional[Tuple[str, str]]:
    """
    Return ('node', id) or ('edge', id) for a normalized chart payload,
    None for background clicks.
    """
    data_type = payload.get('dataType')
    data = payload.get('data') or {}
    if data_type == 'node':
        node_id = data.get('id') if isinstance(data, dict) else None
        node_id = node_id or payload.get('name')
        return ('node', str(node_id)) if node_id else None
    if data_type == 'edge':
        edge_id = data.get('id') if isinstance(data, dict) else None
        return ('edge', str(edge_id)) if edge_id else None
    return None


def selection_changes(nodes: Iterable[Node], edges: Iterable[Edge],
                      target: Optional[Tuple[str, str]], additive: bool = False
                      ) -> Tuple[List[SelectChange], List[SelectChange]]:
    """
    Selection deltas for a click.

    A plain click selects only the target (a background click clears the
    selection); shift-click toggles the target and keeps everything else.
    """
    node_changes: List[SelectChange] = []
    edge_changes: List[SelectChange] = []
    kind, item_id = target if target else (None, None)

    for items, changes, item_kind in ((nodes, node_changes, 'node'), (edges, edge_changes, 'edge')):
        for item in items:
            is_target = kind == item_kind and item.id == item_id
            if additive:
                if is_target:
                    changes.append(SelectChange(item.id, not item.selected))
            elif item.selected != is_target:
                changes.append(SelectChange(item.id, is_target))
    return node_changes, edge_changes


def drag_changes(nodes: Iterable[Node], dragged_id: str, drop: Position) -> List[PositionChange]:
    """
    Position batch for dropping ``dragged_id`` at ``drop``.

    If the dragged node is selected, every selected node moves by the same
    offset, as one batch.
    """
    nodes = list(nodes)
    dragged = next((n for n in nodes if n.id == dragged_id), None)
    if dragged is None:
        return []
    dx = drop.x - dragged.position.x
    dy = drop.y - dragged.position.y
    moving = [n for n in nodes if n.selected] if dragged.selected else [dragged]
    return [PositionChange(n.id, Position(n.position.x + dx, n.position.y + dy)) for n in moving]


def nudge_changes(nodes: Iterable[Node], dx: float, dy: float) -> List[PositionChange]:
    """Move all selected nodes by (dx, dy) in one batch."""
    return [PositionChange(n.id, Position(n.position.x + dx, n.position.y + dy))
            for n in nodes if n.selected]


def facing_handles(source: Position, target: Position) -> Tuple[str, str]:
    """Pick the source handle facing the target and the target handle facing back."""
    dx = target.x - source.x
    dy = target.y - source.y
    if abs(dx) >= abs(dy):
        side, opposite = ('right', 'left') if dx >= 0 else ('left', 'right')
    else:
        side, opposite = ('bottom', 'top') if dy >= 0 else ('top', 'bottom')
    return f"{side}-source", opposite


class ConnectGesture:
    """Two-step connection: pick a source node, then a target node."""

    def __init__(self):
        self.source_id: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.source_id is not None

    def cancel(self) -> None:
        self.source_id = None

    def pick(self, node: Node, nodes_by_id: Dict[str, Node]) -> Optional[Connection]:
        """Returns a Connection on the second pick, None on the first."""
        if self.source_id is None:
            self.source_id = node.id
            return None
        source = nodes_by_id.get(self.source_id)
        self.source_id = None
        if source is None:
            return None
        source_handle, target_handle = facing_handles(source.position, node.position)
        return Connection(source.id, node.id, source_handle, target_handle)
