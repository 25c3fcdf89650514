"""
Persistence Adapter - auto-save, startup load, and JSON export/import.

Auto-save subscribes to the store and writes the whole graph under one
storage key after every update. Writes are held back until ``load()`` has
run once (whether it found data, found nothing, or hit corrupt data), so an
empty start-up graph never overwrites what was saved last session.

Import parses and checks the complete document before the store is
touched. A bad file leaves the current graph exactly as it was.
"""

import logging
from typing import Optional

from graph_editor.config import EXPORT_FILENAME, STORAGE_KEY
from graph_editor.errors import GraphParseError, ImportParseError, LoadParseError, StorageError
from graph_editor.ids import IdAllocator
from graph_editor.serialization import Graph, dumps_graph, parse_graph
from graph_editor.storage.protocol import KeyValueStore
from graph_editor.store import GraphStore

logger = logging.getLogger(__name__)


class PersistenceAdapter:
    def __init__(self, store: GraphStore, ids: IdAllocator, storage: KeyValueStore,
                 key: str = STORAGE_KEY, export_filename: str = EXPORT_FILENAME):
        self.store = store
        self.ids = ids
        self.storage = storage
        self.key = key
        self.export_filename = export_filename
        self._loaded = False
        self._unsubscribe = store.subscribe(self._on_store_change)

    @property
    def is_loaded(self) -> bool:
        """True once the first load attempt has finished and auto-save is live."""
        return self._loaded

    def close(self) -> None:
        self._unsubscribe()

    # --- Auto-persistence ---

    def _on_store_change(self, store: GraphStore) -> None:
        if not self._loaded:
            return
        self.save()

    def save(self) -> bool:
        nodes, edges = self.store.snapshot()
        try:
            self.storage.set(self.key, dumps_graph(nodes, edges))
            return True
        except StorageError as e:
            logger.error(f"Auto-save failed: {e}")
            return False

    def forget(self) -> None:
        """Drop the saved graph from storage."""
        try:
            self.storage.remove(self.key)
        except StorageError as e:
            logger.error(f"Failed to remove saved graph: {e}")

    # --- Load ---

    def _read_saved(self) -> Optional[Graph]:
        try:
            raw = self.storage.get(self.key)
        except StorageError as e:
            raise LoadParseError(str(e)) from e
        if not raw:
            return None
        try:
            return parse_graph(raw)
        except GraphParseError as e:
            raise LoadParseError(str(e)) from e

    def load(self) -> bool:
        """
        Adopt the saved graph, if any, and open the auto-save gate.

        Returns:
            True if a saved graph with at least one node was loaded.
        """
        adopted = False
        try:
            saved = self._read_saved()
            if saved is not None and saved[0]:
                nodes, edges = saved
                self.ids.reseed(nodes, edges)
                self.store.replace(nodes, edges)
                adopted = True
                logger.info(f"Loaded saved graph: {len(nodes)} nodes, {len(edges)} edges")
        except LoadParseError as e:
            logger.warning(f"Failed to load saved graph: {e}")
        finally:
            self._loaded = True
        return adopted

    # --- Export ---

    def export_json(self) -> str:
        nodes, edges = self.store.snapshot()
        return dumps_graph(nodes, edges, pretty=True)

    # --- Import ---

    def import_json(self, text: str) -> Graph:
        """
        Replace the graph with an imported document.

        Raises:
            ImportParseError: the text is not a graph document; nothing changed.
        """
        try:
            nodes, edges = parse_graph(text)
            self.ids.reseed(nodes, edges)
        except GraphParseError as e:
            logger.error(f"Failed to import graph: {e}")
            raise ImportParseError(detail=str(e)) from e

        self.store.replace(nodes, edges)
        logger.info(f"Imported graph: {len(nodes)} nodes, {len(edges)} edges")
        return nodes, edges

    def import_bytes(self, content: bytes) -> Graph:
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.error(f"Failed to import graph: {e}")
            raise ImportParseError(detail=str(e)) from e
        return self.import_json(text)
