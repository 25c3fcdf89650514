"""
Graph visualizer that produces an ECharts-compatible configuration for the
editor canvas.

Nodes keep the positions stored in the graph; nothing is laid out here. The
series lives on a hidden cartesian grid whose axis ranges are the viewport
bounds, so a chart pixel maps to graph space exactly as Viewport says.

NetworkX holds the graph while building the option so that parallel edges
between the same pair can be fanned out with increasing curvature, and
edges whose endpoints are missing are simply not drawn.
"""

from typing import Any, Dict, Optional, Sequence

import networkx as nx

from graph_editor.canvas import Viewport
from graph_editor.labels import PLACEHOLDER_LABEL, LabelEditState
from graph_editor.models import CIRCULAR, Edge, Node

NODE_COLORS = {
    CIRCULAR: '#4a9eff',
}
DEFAULT_NODE_COLOR = '#808080'
SELECTED_BORDER = '#ffffff'
EDITING_BORDER = '#ffb020'
PENDING_BORDER = '#7dff9b'
EDGE_COLOR = '#b1b1b7'
SELECTED_EDGE_COLOR = '#ff0072'
BACKGROUND = '#1e1e1e'
NODE_SIZE = 60
PARALLEL_CURVENESS = 0.2


class GraphVisualizer:
    """
    Build an ECharts option dict for a list of Node and Edge records.

    The returned dict has a single 'graph' series:
      {
        "xAxis": {...}, "yAxis": {...},
        "series": [{"type": "graph", "coordinateSystem": "cartesian2d",
                    "data": [...], "links": [...]}]
      }
    """

    def __init__(self):
        self.G = nx.MultiDiGraph()

    @staticmethod
    def color_for_type(node_type: str) -> str:
        return NODE_COLORS.get(node_type, DEFAULT_NODE_COLOR)

    def generate_echarts(self, nodes: Sequence[Node], edges: Sequence[Edge],
                         viewport: Optional[Viewport] = None,
                         edit_state: Optional[LabelEditState] = None,
                         pending_source: Optional[str] = None) -> Dict[str, Any]:
        viewport = viewport or Viewport()
        editing_id = edit_state.node_id if edit_state and edit_state.is_editing else None

        # Rebuild graph
        self.G = nx.MultiDiGraph()
        for node in nodes:
            self.G.add_node(node.id, record=node)
        for edge in edges:
            if edge.source in self.G and edge.target in self.G:
                self.G.add_edge(edge.source, edge.target, key=edge.id, record=edge)

        data = []
        for node_id, attrs in self.G.nodes(data=True):
            node = attrs['record']
            label = node.label or PLACEHOLDER_LABEL
            if node.id == editing_id:
                label = edit_state.buffer
            border = None
            if node.id == editing_id:
                border = EDITING_BORDER
            elif node.id == pending_source:
                border = PENDING_BORDER
            elif node.selected:
                border = SELECTED_BORDER
            data.append({
                'id': node.id,
                'name': node.id,
                'value': [node.position.x, node.position.y],
                'symbol': 'circle',
                'symbolSize': NODE_SIZE * viewport.zoom,
                'itemStyle': {
                    'color': self.color_for_type(node.type),
                    'borderColor': border or 'transparent',
                    'borderWidth': 3 if border else 0,
                },
                'label': {'show': True, 'formatter': label, 'color': '#ffffff'},
            })

        links = []
        for source, target, key, attrs in self.G.edges(keys=True, data=True):
            edge = attrs['record']
            curveness = self._curveness(source, target, key)
            color = SELECTED_EDGE_COLOR if edge.selected else EDGE_COLOR
            links.append({
                'id': edge.id,
                'source': source,
                'target': target,
                'label': {'show': bool(edge.label), 'formatter': edge.label,
                          'color': '#e0e0e0', 'backgroundColor': BACKGROUND,
                          'padding': [4, 8], 'borderRadius': 4},
                'lineStyle': {'color': color, 'width': 3 if edge.selected else 1.5,
                              'curveness': curveness},
            })

        min_x, max_x, min_y, max_y = viewport.bounds()
        return {
            'backgroundColor': BACKGROUND,
            'animation': False,
            'grid': {'left': 0, 'right': 0, 'top': 0, 'bottom': 0},
            'xAxis': {'type': 'value', 'min': min_x, 'max': max_x, 'show': False},
            'yAxis': {'type': 'value', 'min': min_y, 'max': max_y, 'show': False, 'inverse': True},
            'series': [{
                'type': 'graph',
                'coordinateSystem': 'cartesian2d',
                'layout': 'none',
                'roam': False,
                'edgeSymbol': ['none', 'arrow'],
                'edgeSymbolSize': 8,
                'data': data,
                'links': links,
                'emphasis': {'focus': 'none'},
            }],
        }

    def _curveness(self, source: str, target: str, key: str) -> float:
        """Fan out parallel edges: the first is straight, later ones bend further."""
        keys = list(self.G[source][target])
        index = keys.index(key)
        if index == 0 and not self.G.has_edge(target, source):
            return 0.0
        return PARALLEL_CURVENESS * (index + 1)
