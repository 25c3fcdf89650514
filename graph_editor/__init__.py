"""
Node-link graph editor core.

This package holds everything except the page itself:
- GraphStore: the node and edge collections
- IdAllocator, ConnectionBuilder, DeletionCoordinator
- LabelEditSession / EdgeLabelPrompt: label editing
- PersistenceAdapter: auto-save, load, JSON export/import
- GraphEditor: the facade app.py talks to

Usage:
    from graph_editor import GraphEditor
    from graph_editor.storage import MemoryBackend
"""

from graph_editor.connections import Connection, ConnectionBuilder
from graph_editor.deletion import DeletionCoordinator
from graph_editor.editor import GraphEditor
from graph_editor.errors import GraphEditorError, GraphParseError, ImportParseError, LoadParseError
from graph_editor.ids import IdAllocator
from graph_editor.labels import EdgeLabelPrompt, LabelEditSession, NodeLabelEditor
from graph_editor.models import Edge, Node, Position
from graph_editor.persistence import PersistenceAdapter
from graph_editor.store import GraphStore

__all__ = [
    'Connection',
    'ConnectionBuilder',
    'DeletionCoordinator',
    'Edge',
    'EdgeLabelPrompt',
    'GraphEditor',
    'GraphEditorError',
    'GraphParseError',
    'GraphStore',
    'IdAllocator',
    'ImportParseError',
    'LabelEditSession',
    'LoadParseError',
    'Node',
    'NodeLabelEditor',
    'PersistenceAdapter',
    'Position',
]
