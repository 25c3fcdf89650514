"""
Graph Store - Single owner of the node and edge collections.

Every public mutator performs exactly one atomic update: it computes the new
node and edge lists, swaps them in together, and then notifies subscribers
once. Subscribers therefore never see a half-applied batch (for example a
multi-node drag, or a node removed while its edges remain).

The store does not check that edge endpoints exist. DeletionCoordinator
removes touching edges in the same update as their nodes.
"""

import dataclasses
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from graph_editor.changes import Change, apply_changes
from graph_editor.models import Edge, Node

logger = logging.getLogger(__name__)

Listener = Callable[['GraphStore'], None]


class GraphStore:
    """Holds the canonical node and edge lists."""

    def __init__(self, nodes: Iterable[Node] = (), edges: Iterable[Edge] = ()):
        self._nodes: Tuple[Node, ...] = tuple(nodes)
        self._edges: Tuple[Edge, ...] = tuple(edges)
        self._listeners: List[Listener] = []

    # --- Read access ---

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self._nodes

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    def snapshot(self) -> Tuple[Tuple[Node, ...], Tuple[Edge, ...]]:
        return self._nodes, self._edges

    def is_empty(self) -> bool:
        return not self._nodes and not self._edges

    def get_node(self, node_id: str) -> Optional[Node]:
        return next((n for n in self._nodes if n.id == node_id), None)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return next((e for e in self._edges if e.id == edge_id), None)

    def selected_node_ids(self) -> Set[str]:
        return {n.id for n in self._nodes if n.selected}

    def selected_edge_ids(self) -> Set[str]:
        return {e.id for e in self._edges if e.selected}

    # --- Subscriptions ---

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Register a callback run after each update. Returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _commit(self, nodes: Sequence[Node], edges: Sequence[Edge], reason: str) -> None:
        self._nodes = tuple(nodes)
        self._edges = tuple(edges)
        logger.debug(f"[{reason}] {len(self._nodes)} nodes, {len(self._edges)} edges")
        for callback in list(self._listeners):
            callback(self)

    # --- Batched canvas changes ---

    def apply_node_changes(self, changes: Sequence[Change]) -> None:
        if not changes:
            return
        self._commit(apply_changes(changes, self._nodes), self._edges, 'node changes')

    def apply_edge_changes(self, changes: Sequence[Change]) -> None:
        if not changes:
            return
        self._commit(self._nodes, apply_changes(changes, self._edges), 'edge changes')

    # --- Whole-graph operations ---

    def replace(self, nodes: Iterable[Node], edges: Iterable[Edge]) -> None:
        self._commit(list(nodes), list(edges), 'replace')

    def clear(self) -> None:
        self._commit((), (), 'clear')

    # --- Commands ---

    def add_node(self, node: Node) -> None:
        self._commit(self._nodes + (node,), self._edges, f'add node {node.id}')

    def add_edge(self, edge: Edge) -> None:
        self._commit(self._nodes, self._edges + (edge,), f'add edge {edge.id}')

    def update_node_label(self, node_id: str, label: str) -> bool:
        """Set a node's committed label. Returns False if the node is gone."""
        if self.get_node(node_id) is None:
            return False
        nodes = [dataclasses.replace(n, label=label) if n.id == node_id else n for n in self._nodes]
        self._commit(nodes, self._edges, f'label node {node_id}')
        return True

    def update_edge_label(self, edge_id: str, label: str) -> bool:
        """Set an edge's label. Returns False if the edge is gone."""
        if self.get_edge(edge_id) is None:
            return False
        edges = [dataclasses.replace(e, label=label) if e.id == edge_id else e for e in self._edges]
        self._commit(self._nodes, edges, f'label edge {edge_id}')
        return True

    def remove(self, node_ids: Iterable[str] = (), edge_ids: Iterable[str] = ()) -> Dict[str, int]:
        """
        Remove nodes and edges in one update.

        Returns:
            Dict with the number of 'nodes' and 'edges' actually removed.
        """
        node_ids = set(node_ids)
        edge_ids = set(edge_ids)
        nodes = [n for n in self._nodes if n.id not in node_ids]
        edges = [e for e in self._edges if e.id not in edge_ids]
        removed = {
            'nodes': len(self._nodes) - len(nodes),
            'edges': len(self._edges) - len(edges),
        }
        if removed['nodes'] or removed['edges']:
            self._commit(nodes, edges, 'remove')
        return removed
