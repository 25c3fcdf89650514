"""
JSON (de)serialization of the graph document.

The same shape is used for auto-save, export and import:

    {"nodes": [...], "edges": [...]}

``parse_graph`` checks the whole document before returning anything, so a
caller either gets a complete graph or a GraphParseError, never a partial
one.
"""

import json
from typing import Any, Dict, Iterable, List, Tuple

from graph_editor.errors import GraphParseError
from graph_editor.models import Edge, Node

Graph = Tuple[List[Node], List[Edge]]


def graph_to_dict(nodes: Iterable[Node], edges: Iterable[Edge]) -> Dict[str, Any]:
    return {
        'nodes': [n.to_dict() for n in nodes],
        'edges': [e.to_dict() for e in edges],
    }


def dumps_graph(nodes: Iterable[Node], edges: Iterable[Edge], pretty: bool = False) -> str:
    document = graph_to_dict(nodes, edges)
    if pretty:
        return json.dumps(document, indent=2, ensure_ascii=False)
    return json.dumps(document, ensure_ascii=False)


def graph_from_dict(document: Any) -> Graph:
    """Build nodes and edges from a decoded document. Missing keys mean empty."""
    if not isinstance(document, dict):
        raise GraphParseError(f"Graph document must be a JSON object, got {type(document).__name__}")

    raw_nodes = document.get('nodes') or []
    raw_edges = document.get('edges') or []
    if not isinstance(raw_nodes, list):
        raise GraphParseError("'nodes' must be a list")
    if not isinstance(raw_edges, list):
        raise GraphParseError("'edges' must be a list")

    nodes = [Node.from_dict(n) for n in raw_nodes]
    edges = [Edge.from_dict(e) for e in raw_edges]

    _check_unique('node', (n.id for n in nodes))
    _check_unique('edge', (e.id for e in edges))
    return nodes, edges


def parse_graph(text: str) -> Graph:
    try:
        document = json.loads(text)
    except (TypeError, ValueError) as e:
        raise GraphParseError(f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise GraphParseError("Invalid JSON: nested too deeply") from e
    return graph_from_dict(document)


def _check_unique(kind: str, ids: Iterable[str]) -> None:
    seen = set()
    for item_id in ids:
        if item_id in seen:
            raise GraphParseError(f"Duplicate {kind} id: {item_id}")
        seen.add(item_id)
