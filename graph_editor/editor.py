"""
Graph Editor - wires the core components together.

Every user action goes through one method here and ends in exactly one
GraphStore update (or none, when there is nothing to do):

    add_node            -> store.add_node
    connect             -> ConnectionBuilder -> store.add_edge
    on_nodes_change     -> store.apply_node_changes
    on_edges_change     -> store.apply_edge_changes
    handle_key(Delete)  -> DeletionCoordinator -> store.remove
    node double-click   -> LabelEditSession -> store.update_node_label
    edge double-click   -> EdgeLabelPrompt -> store.update_edge_label
    import_json         -> PersistenceAdapter -> store.replace
    clear               -> store.clear, storage blob removed

PersistenceAdapter listens to the store, so auto-save follows every update
once ``start()`` has run.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Union

from graph_editor.canvas import Viewport
from graph_editor.changes import Change, parse_edge_changes, parse_node_changes
from graph_editor.config import EXPORT_FILENAME, STORAGE_KEY
from graph_editor.connections import Connection, ConnectionBuilder
from graph_editor.deletion import DeletionCoordinator
from graph_editor.ids import IdAllocator
from graph_editor.labels import EdgeLabelPrompt, LabelEditSession, PromptState
from graph_editor.models import CIRCULAR, DEFAULT_NODE_LABEL, Node, Position
from graph_editor.persistence import PersistenceAdapter
from graph_editor.serialization import Graph
from graph_editor.storage.memory_backend import MemoryBackend
from graph_editor.storage.protocol import KeyValueStore
from graph_editor.store import GraphStore

logger = logging.getLogger(__name__)


class GraphEditor:
    def __init__(self, storage: Optional[KeyValueStore] = None,
                 storage_key: str = STORAGE_KEY,
                 export_filename: str = EXPORT_FILENAME):
        self.store = GraphStore()
        self.ids = IdAllocator()
        self.connections = ConnectionBuilder(self.store, self.ids)
        self.labels = LabelEditSession(self.store)
        self.edge_prompt = EdgeLabelPrompt(self.store)
        self.deletion = DeletionCoordinator(self.store)
        self.persistence = PersistenceAdapter(
            self.store, self.ids, storage if storage is not None else MemoryBackend(),
            key=storage_key, export_filename=export_filename,
        )

    @property
    def nodes(self):
        return self.store.nodes

    @property
    def edges(self):
        return self.store.edges

    def start(self) -> bool:
        """Load the saved graph (if any) and turn on auto-save."""
        return self.persistence.load()

    # --- Toolbar ---

    def add_node(self, position: Optional[Position] = None,
                 viewport: Optional[Viewport] = None,
                 label: str = DEFAULT_NODE_LABEL) -> Node:
        """
        Add a circular node.

        Args:
            position: Graph coordinates; defaults to the viewport center
            viewport: Current canvas viewport (used when position is None)
            label: Initial label
        """
        if position is None:
            position = (viewport or Viewport()).center()
        node = Node(id=self.ids.next_node_id(), type=CIRCULAR, position=position, label=label)
        self.store.add_node(node)
        logger.info(f"Added node {node.id} at ({position.x:.0f}, {position.y:.0f})")
        return node

    def clear(self) -> None:
        self.labels.discard()
        self.edge_prompt.cancel()
        self.store.clear()
        self.ids.reset()
        self.persistence.forget()
        logger.info("Cleared graph")

    def export_json(self) -> str:
        return self.persistence.export_json()

    def import_json(self, text: Union[str, bytes]) -> Graph:
        """Raises ImportParseError on bad input; the current graph is then unchanged."""
        if isinstance(text, bytes):
            graph = self.persistence.import_bytes(text)
        else:
            graph = self.persistence.import_json(text)
        self.labels.discard()
        self.edge_prompt.cancel()
        return graph

    # --- Canvas events ---

    def connect(self, connection: Union[Connection, Dict[str, Any]]):
        if isinstance(connection, dict):
            connection = Connection.from_payload(connection)
        return self.connections.connect(connection)

    def on_nodes_change(self, changes: Iterable[Union[Change, Dict[str, Any]]]) -> None:
        self.store.apply_node_changes(_as_changes(changes, parse_node_changes))

    def on_edges_change(self, changes: Iterable[Union[Change, Dict[str, Any]]]) -> None:
        self.store.apply_edge_changes(_as_changes(changes, parse_edge_changes))

    def on_node_double_click(self, node_id: str):
        return self.labels.begin(node_id)

    def on_edge_double_click(self, edge_id: str) -> PromptState:
        return self.edge_prompt.open(edge_id)

    def handle_key(self, key: str) -> bool:
        """
        Route a key press. An active label edit gets Enter/Escape first;
        otherwise Delete removes the selection.
        """
        if self.labels.handle_key(key):
            return True
        if self.labels.active is not None:
            return False
        return self.deletion.handle_key(key)


def _as_changes(changes, parser):
    # Raw canvas payloads are parsed; ready-made changes pass through
    result = []
    for change in changes:
        if isinstance(change, dict):
            result.extend(parser([change]))
        else:
            result.append(change)
    return result
