"""
Inline label editing for nodes, and the edge label prompt.

NodeLabelEditor is a two-state machine per node:

    VIEWING --double-click--> EDITING   (buffer <- committed label)
    EDITING --Enter / blur--> VIEWING   (store <- buffer)
    EDITING --Escape-------> VIEWING    (buffer dropped)

The editor never touches node records. A commit is a single
``GraphStore.update_node_label`` call, so the store stays the only owner of
label state.

LabelEditSession keeps at most one node in EDITING: starting an edit on
another node commits the current one first, the same as focus leaving the
old input.

EdgeLabelPrompt is a non-blocking prompt with explicit accept/cancel that
feeds ``GraphStore.update_edge_label``.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from graph_editor.store import GraphStore

logger = logging.getLogger(__name__)

VIEWING = 'viewing'
EDITING = 'editing'

PLACEHOLDER_LABEL = 'Double-click to edit'

COMMIT_KEYS = ('Enter',)
DISCARD_KEYS = ('Escape',)


@dataclass(frozen=True)
class LabelEditState:
    """Immutable snapshot of the current label edit."""
    node_id: Optional[str] = None
    mode: str = VIEWING
    buffer: str = ''

    @property
    def is_editing(self) -> bool:
        return self.mode == EDITING


class NodeLabelEditor:
    """Edit state for a single node's label."""

    def __init__(self, store: GraphStore, node_id: str):
        self.store = store
        self.node_id = node_id
        self.mode = VIEWING
        self.buffer = ''

    @property
    def is_editing(self) -> bool:
        return self.mode == EDITING

    def committed_label(self) -> str:
        node = self.store.get_node(self.node_id)
        return node.label if node else ''

    def begin(self) -> None:
        if self.is_editing:
            return
        self.buffer = self.committed_label()
        self.mode = EDITING

    def type(self, text: str) -> None:
        if self.is_editing:
            self.buffer = text

    def commit(self) -> bool:
        """Write the buffer back. Returns True if the store accepted it."""
        if not self.is_editing:
            return False
        self.mode = VIEWING
        if not self.store.update_node_label(self.node_id, self.buffer):
            logger.warning(f"Node {self.node_id} disappeared while its label was being edited")
            return False
        return True

    def discard(self) -> None:
        if self.is_editing:
            self.mode = VIEWING
            self.buffer = self.committed_label()

    def handle_key(self, key: str) -> bool:
        """Enter commits, Escape discards. Returns True if the key was consumed."""
        if not self.is_editing:
            return False
        if key in COMMIT_KEYS:
            self.commit()
            return True
        if key in DISCARD_KEYS:
            self.discard()
            return True
        return False

    def blur(self) -> None:
        self.commit()

    def display_label(self) -> str:
        value = self.buffer if self.is_editing else self.committed_label()
        return value or PLACEHOLDER_LABEL


class LabelEditSession:
    """Routes double-clicks, keys and blur to the one active NodeLabelEditor."""

    def __init__(self, store: GraphStore):
        self.store = store
        self._active: Optional[NodeLabelEditor] = None
        self._on_state_change: Optional[Callable[[LabelEditState], None]] = None

    @property
    def active(self) -> Optional[NodeLabelEditor]:
        return self._active if self._active and self._active.is_editing else None

    @property
    def state(self) -> LabelEditState:
        editor = self.active
        if editor is None:
            return LabelEditState()
        return LabelEditState(node_id=editor.node_id, mode=EDITING, buffer=editor.buffer)

    def set_on_state_change(self, callback: Callable[[LabelEditState], None]):
        self._on_state_change = callback

    def begin(self, node_id: str) -> LabelEditState:
        current = self.active
        if current is not None and current.node_id == node_id:
            return self.state
        if current is not None:
            current.commit()
        if self.store.get_node(node_id) is None:
            self._active = None
            self._notify_change()
            return self.state

        self._active = NodeLabelEditor(self.store, node_id)
        self._active.begin()
        self._notify_change()
        return self.state

    def type(self, text: str) -> LabelEditState:
        if self.active:
            self.active.type(text)
            self._notify_change()
        return self.state

    def commit(self) -> LabelEditState:
        if self.active:
            self.active.commit()
            self._notify_change()
        return self.state

    def discard(self) -> LabelEditState:
        if self.active:
            self.active.discard()
            self._notify_change()
        return self.state

    def blur(self) -> LabelEditState:
        return self.commit()

    def handle_key(self, key: str) -> bool:
        editor = self.active
        if editor is None:
            return False
        consumed = editor.handle_key(key)
        if consumed:
            self._notify_change()
        return consumed

    def display_label(self, node_id: str) -> str:
        editor = self.active
        if editor is not None and editor.node_id == node_id:
            return editor.display_label()
        return NodeLabelEditor(self.store, node_id).display_label()

    def _notify_change(self):
        if self._on_state_change:
            self._on_state_change(self.state)


@dataclass(frozen=True)
class PromptState:
    edge_id: Optional[str] = None
    value: str = ''

    @property
    def is_open(self) -> bool:
        return self.edge_id is not None


class EdgeLabelPrompt:
    """Text prompt for an edge label, opened by double-clicking the edge."""

    def __init__(self, store: GraphStore):
        self.store = store
        self._state = PromptState()

    @property
    def state(self) -> PromptState:
        return self._state

    def open(self, edge_id: str) -> PromptState:
        edge = self.store.get_edge(edge_id)
        if edge is None:
            self._state = PromptState()
        else:
            self._state = PromptState(edge_id=edge_id, value=edge.label or '')
        return self._state

    def set_value(self, value: str) -> PromptState:
        if self._state.is_open:
            self._state = PromptState(edge_id=self._state.edge_id, value=value)
        return self._state

    def accept(self, value: Optional[str] = None) -> bool:
        """Apply the prompt value (or ``value`` if given) and close."""
        if not self._state.is_open:
            return False
        edge_id = self._state.edge_id
        new_label = self._state.value if value is None else value
        self._state = PromptState()
        return self.store.update_edge_label(edge_id, new_label)

    def cancel(self) -> None:
        self._state = PromptState()
