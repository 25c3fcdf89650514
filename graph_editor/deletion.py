"""
Deletion Coordinator - cascading removal of the current selection.

Selected nodes are removed together with every edge that touches one of
them, plus any explicitly selected edges, in a single store update. The
graph is never observed with a dangling edge.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet

from graph_editor.store import GraphStore

logger = logging.getLogger(__name__)

DELETE_KEYS = ('Delete',)


@dataclass(frozen=True)
class DeletionPlan:
    node_ids: FrozenSet[str] = field(default_factory=frozenset)
    selected_edge_ids: FrozenSet[str] = field(default_factory=frozenset)
    cascaded_edge_ids: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def edge_ids(self) -> FrozenSet[str]:
        return self.selected_edge_ids | self.cascaded_edge_ids

    @property
    def is_empty(self) -> bool:
        return not self.node_ids and not self.edge_ids


class DeletionCoordinator:
    def __init__(self, store: GraphStore):
        self.store = store

    def plan(self) -> DeletionPlan:
        node_ids = frozenset(self.store.selected_node_ids())
        return DeletionPlan(
            node_ids=node_ids,
            selected_edge_ids=frozenset(self.store.selected_edge_ids()),
            cascaded_edge_ids=frozenset(e.id for e in self.store.edges if e.touches(node_ids)),
        )

    def delete_selection(self) -> DeletionPlan:
        plan = self.plan()
        if plan.is_empty:
            return plan
        self.store.remove(plan.node_ids, plan.edge_ids)
        logger.info(
            f"Deleted {len(plan.node_ids)} nodes, {len(plan.selected_edge_ids)} selected edges, "
            f"{len(plan.cascaded_edge_ids - plan.selected_edge_ids)} connected edges"
        )
        return plan

    def handle_key(self, key: str) -> bool:
        """Run deletion for the delete key. Returns True if the key was handled."""
        if key not in DELETE_KEYS:
            return False
        self.delete_selection()
        return True
