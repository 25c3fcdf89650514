"""
Storage backend abstraction for the graph editor.

Supports multiple storage backends:
- MappingBackend: NiceGUI browser storage (default)
- FileBackend: Local JSON files
- MemoryBackend: In-process dict
"""

from graph_editor.storage.protocol import KeyValueStore
from graph_editor.storage.memory_backend import MemoryBackend
from graph_editor.storage.file_backend import FileBackend
from graph_editor.storage.mapping_backend import MappingBackend
from graph_editor.storage.factory import create_backend

__all__ = [
    'KeyValueStore',
    'MemoryBackend',
    'FileBackend',
    'MappingBackend',
    'create_backend',
]
