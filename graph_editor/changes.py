"""
Change batches produced by the canvas.

One user interaction (a drag, a click, a shift-click, a delete) arrives as
a list of deltas. ``apply_changes`` folds the whole list into a new item
list, so the store can publish the result as one update.

Canvas payloads use the React-Flow-style vocabulary:

  {"type": "position", "id": "3", "position": {"x": 10, "y": 20}}
  {"type": "select",   "id": "3", "selected": true}
  {"type": "remove",   "id": "3"}
  {"type": "add",      "item": {...node or edge dict...}}
  {"type": "replace",  "id": "3", "item": {...}}
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from graph_editor.errors import GraphParseError
from graph_editor.models import Edge, Node, Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionChange:
    id: str
    position: Optional[Position] = None

    def apply(self, item):
        if self.position is None or not isinstance(item, Node):
            return item
        return dataclasses.replace(item, position=self.position)


@dataclass(frozen=True)
class SelectChange:
    id: str
    selected: bool

    def apply(self, item):
        return dataclasses.replace(item, selected=self.selected)


@dataclass(frozen=True)
class RemoveChange:
    id: str


@dataclass(frozen=True)
class AddChange:
    item: Union[Node, Edge]

    @property
    def id(self) -> str:
        return self.item.id


@dataclass(frozen=True)
class ReplaceChange:
    id: str
    item: Union[Node, Edge]

    def apply(self, item):
        return self.item


Change = Union[PositionChange, SelectChange, RemoveChange, AddChange, ReplaceChange]


def apply_changes(changes: Iterable[Change], items: Iterable[Any]) -> List[Any]:
    """Return a new list with every change applied in order."""
    result = list(items)
    for change in changes:
        if isinstance(change, AddChange):
            result.append(change.item)
        elif isinstance(change, RemoveChange):
            result = [item for item in result if item.id != change.id]
        else:
            result = [change.apply(item) if item.id == change.id else item for item in result]
    return result


def parse_change(payload: Dict[str, Any], item_factory: Callable[[Any], Any]) -> Change:
    """Build a change from a canvas payload dict."""
    if not isinstance(payload, dict):
        raise GraphParseError(f"change must be an object, got {type(payload).__name__}")

    kind = payload.get('type')
    change_id = payload.get('id')
    if kind == 'position':
        position = payload.get('position')
        return PositionChange(str(change_id), Position.from_dict(position) if position is not None else None)
    if kind == 'select':
        return SelectChange(str(change_id), payload.get('selected') is True)
    if kind == 'remove':
        return RemoveChange(str(change_id))
    if kind == 'add':
        return AddChange(item_factory(payload.get('item')))
    if kind == 'replace':
        return ReplaceChange(str(change_id), item_factory(payload.get('item')))
    raise GraphParseError(f"Unknown change type: {kind!r}")


def parse_node_changes(payloads: Iterable[Dict[str, Any]]) -> List[Change]:
    return [parse_change(p, Node.from_dict) for p in payloads]


def parse_edge_changes(payloads: Iterable[Dict[str, Any]]) -> List[Change]:
    changes = []
    for p in payloads:
        change = parse_change(p, Edge.from_dict)
        if isinstance(change, PositionChange):
            logger.debug(f"Ignoring position change for edge {change.id}")
            continue
        changes.append(change)
    return changes
