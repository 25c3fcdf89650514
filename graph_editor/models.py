"""
Node and edge records for the graph editor.

Records are frozen dataclasses. The store never edits one in place; it swaps
in a new instance built with ``dataclasses.replace``, so a list handed out by
the store stays a consistent snapshot.

The dict form matches the JSON document shared by auto-save, export and
import:

  node: {"id", "type", "position": {"x", "y"}, "data": {"label"}, "selected"}
  edge: {"id", "source", "target", "sourceHandle", "targetHandle",
         "label", "type", "selected", ...style keys}

Keys this module does not know about are kept in ``extra`` (and
``data_extra`` for nodes) and written back unchanged.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from graph_editor.errors import GraphParseError

CIRCULAR = 'circular'
DEFAULT_NODE_LABEL = 'New Node'
DEFAULT_EDGE_TYPE = 'straight'

# Handle ids on a circular node. Targets carry the bare side name,
# sources the "-source" suffix.
NODE_HANDLES = (
    'top', 'top-source',
    'bottom', 'bottom-source',
    'left', 'left-source',
    'right', 'right-source',
)

_NODE_KEYS = {'id', 'type', 'position', 'data', 'selected'}
_EDGE_KEYS = {'id', 'source', 'target', 'sourceHandle', 'targetHandle', 'label', 'type', 'selected'}


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, payload: Any) -> 'Position':
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise GraphParseError(f"position must be an object, got {type(payload).__name__}")
        return cls(x=_number(payload.get('x', 0), 'position.x'),
                   y=_number(payload.get('y', 0), 'position.y'))


@dataclass(frozen=True)
class Node:
    id: str
    type: str = CIRCULAR
    position: Position = field(default_factory=Position)
    label: str = ''
    selected: bool = False
    data_extra: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.extra)
        payload.update({
            'id': self.id,
            'type': self.type,
            'position': self.position.to_dict(),
            'data': {**self.data_extra, 'label': self.label},
            'selected': self.selected,
        })
        return payload

    @classmethod
    def from_dict(cls, payload: Any) -> 'Node':
        if not isinstance(payload, dict):
            raise GraphParseError(f"node must be an object, got {type(payload).__name__}")
        node_id = _identifier(payload.get('id'), 'node id')

        data = payload.get('data') or {}
        if not isinstance(data, dict):
            raise GraphParseError(f"node {node_id}: data must be an object")
        data_extra = {k: v for k, v in data.items() if k != 'label'}

        return cls(
            id=node_id,
            type=str(payload.get('type') or CIRCULAR),
            position=Position.from_dict(payload.get('position')),
            label=_text(data.get('label')),
            selected=payload.get('selected') is True,
            data_extra=data_extra,
            extra={k: v for k, v in payload.items() if k not in _NODE_KEYS},
        )


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    label: str = ''
    type: str = DEFAULT_EDGE_TYPE
    selected: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    def touches(self, node_ids) -> bool:
        """True if either endpoint is in ``node_ids``."""
        return self.source in node_ids or self.target in node_ids

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.extra)
        payload.update({
            'id': self.id,
            'source': self.source,
            'target': self.target,
            'label': self.label,
            'type': self.type,
            'selected': self.selected,
        })
        if self.source_handle is not None:
            payload['sourceHandle'] = self.source_handle
        if self.target_handle is not None:
            payload['targetHandle'] = self.target_handle
        return payload

    @classmethod
    def from_dict(cls, payload: Any) -> 'Edge':
        if not isinstance(payload, dict):
            raise GraphParseError(f"edge must be an object, got {type(payload).__name__}")
        edge_id = _identifier(payload.get('id'), 'edge id')
        return cls(
            id=edge_id,
            source=_identifier(payload.get('source'), f"edge {edge_id} source"),
            target=_identifier(payload.get('target'), f"edge {edge_id} target"),
            source_handle=_optional_text(payload.get('sourceHandle')),
            target_handle=_optional_text(payload.get('targetHandle')),
            label=_text(payload.get('label')),
            type=str(payload.get('type') or DEFAULT_EDGE_TYPE),
            selected=payload.get('selected') is True,
            extra={k: v for k, v in payload.items() if k not in _EDGE_KEYS},
        )


def _identifier(value: Any, what: str) -> str:
    # Numeric ids are accepted and normalized to strings
    if isinstance(value, bool) or value is None:
        raise GraphParseError(f"{what} is missing")
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str) or not value:
        raise GraphParseError(f"{what} must be a non-empty string")
    return value


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise GraphParseError(f"{what} must be a number")
    try:
        return float(value)
    except OverflowError as e:
        raise GraphParseError(f"{what} is out of range") from e


def _text(value: Any) -> str:
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return _text(value)
