"""
Connection Builder - turns a proposed canvas connection into a stored edge.

The canvas works in loose connection mode: any handle may connect to any
handle, the same pair may be connected twice, and a node may be connected
to itself. None of these are rejected here.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from graph_editor.errors import GraphParseError
from graph_editor.ids import IdAllocator
from graph_editor.models import DEFAULT_EDGE_TYPE, NODE_HANDLES, Edge
from graph_editor.store import GraphStore

logger = logging.getLogger(__name__)

DEFAULT_EDGE_LABEL = 'New Connection'

# Visual defaults written onto every new edge, in the canvas' own key names
DEFAULT_EDGE_STYLE: Dict[str, Any] = {
    'labelStyle': {'fill': '#e0e0e0', 'fontWeight': 700},
    'labelBgStyle': {'fill': '#1e1e1e'},
    'labelBgPadding': [8, 4],
    'labelBgBorderRadius': 4,
}


@dataclass(frozen=True)
class Connection:
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'Connection':
        """Accept either the canvas' camelCase keys or snake_case keys."""
        if not isinstance(payload, dict):
            raise GraphParseError("connection must be an object")
        source = payload.get('source')
        target = payload.get('target')
        if not source or not target:
            raise GraphParseError("connection needs both source and target")
        source_handle = payload.get('sourceHandle', payload.get('source_handle'))
        target_handle = payload.get('targetHandle', payload.get('target_handle'))
        for handle in (source_handle, target_handle):
            if handle is not None and handle not in NODE_HANDLES:
                raise GraphParseError(f"unknown handle: {handle!r}")
        return cls(
            source=str(source),
            target=str(target),
            source_handle=source_handle,
            target_handle=target_handle,
        )


class ConnectionBuilder:
    def __init__(self, store: GraphStore, ids: IdAllocator):
        self.store = store
        self.ids = ids

    def build(self, connection: Connection) -> Edge:
        """Create (but do not store) the edge for a connection."""
        return Edge(
            id=self.ids.next_edge_id(),
            source=connection.source,
            target=connection.target,
            source_handle=connection.source_handle,
            target_handle=connection.target_handle,
            label=DEFAULT_EDGE_LABEL,
            type=DEFAULT_EDGE_TYPE,
            extra={key: _copy(value) for key, value in DEFAULT_EDGE_STYLE.items()},
        )

    def connect(self, connection: Connection) -> Edge:
        edge = self.build(connection)
        self.store.add_edge(edge)
        logger.info(f"Connected {edge.source} -> {edge.target} as {edge.id}")
        return edge


def _copy(value: Any) -> Any:
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        return list(value)
    return value
