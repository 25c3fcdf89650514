"""
Identifier allocation for nodes and edges.

Two monotonic counters. Node ids are the bare counter value ("1", "2", ...),
edge ids are "edge-<counter>". Counters only move forward during a session,
so deleting an element never frees its id. Replacing the graph (load or
import) reseeds each counter to one past the highest id found.
"""

import re
from typing import Iterable

EDGE_PREFIX = 'edge-'

_LEADING_INT = re.compile(r'^\s*[+-]?(\d+)')
_EDGE_NUMBER = re.compile(r'edge-(\d+)')


def node_number(node_id: str) -> int:
    """Leading integer of a node id, 0 if there is none ("7abc" -> 7, "n3" -> 0)."""
    match = _LEADING_INT.match(str(node_id))
    if not match:
        return 0
    try:
        value = int(match.group(0))
    except ValueError:
        # Beyond the int() digit limit, counted as unparseable
        return 0
    return value if value > 0 else 0


def edge_number(edge_id: str) -> int:
    """Digits following "edge-" in an edge id, 0 if absent."""
    match = _EDGE_NUMBER.search(str(edge_id))
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        return 0


class IdAllocator:
    """Hands out fresh node and edge ids."""

    def __init__(self, next_node: int = 1, next_edge: int = 1):
        self._next_node = next_node
        self._next_edge = next_edge

    @property
    def next_node(self) -> int:
        return self._next_node

    @property
    def next_edge(self) -> int:
        return self._next_edge

    def next_node_id(self) -> str:
        node_id = str(self._next_node)
        self._next_node += 1
        return node_id

    def next_edge_id(self) -> str:
        edge_id = f"{EDGE_PREFIX}{self._next_edge}"
        self._next_edge += 1
        return edge_id

    def reseed(self, nodes: Iterable, edges: Iterable) -> None:
        """Recompute both counters from a freshly loaded graph."""
        next_node = max((node_number(n.id) for n in nodes), default=0) + 1
        next_edge = max((edge_number(e.id) for e in edges), default=0) + 1
        self._next_node, self._next_edge = next_node, next_edge

    def reset(self) -> None:
        self._next_node = 1
        self._next_edge = 1
