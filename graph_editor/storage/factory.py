"""
Backend Factory.

Creates the storage backend named in the settings:
- 'browser': NiceGUI per-user storage (needs the mapping from the app)
- 'file':    one JSON file per key under the data directory
- 'memory':  process memory, for tests and throwaway sessions
"""

import logging
from typing import MutableMapping, Optional, TYPE_CHECKING

from graph_editor.config import Settings
from graph_editor.errors import ConfigurationError
from graph_editor.storage.file_backend import FileBackend
from graph_editor.storage.mapping_backend import MappingBackend
from graph_editor.storage.memory_backend import MemoryBackend

if TYPE_CHECKING:
    from graph_editor.storage.protocol import KeyValueStore

logger = logging.getLogger(__name__)


def create_backend(
    settings: Settings,
    browser_storage: Optional[MutableMapping] = None,
    force_backend: Optional[str] = None,
) -> "KeyValueStore":
    """
    Create a storage backend instance.

    Args:
        settings: Resolved settings
        browser_storage: Mapping used by the 'browser' backend (app.storage.user)
        force_backend: Override the configured backend type

    Returns:
        KeyValueStore instance
    """
    backend_type = force_backend or settings.storage_backend

    if backend_type == "browser":
        if browser_storage is None:
            raise ConfigurationError("The 'browser' backend needs a storage mapping")
        backend = MappingBackend(browser_storage)
    elif backend_type == "file":
        backend = FileBackend(settings.data_dir)
    elif backend_type == "memory":
        backend = MemoryBackend()
    else:
        raise ConfigurationError(f"Unknown storage backend: {backend_type!r}")

    logger.info(f"Using {backend.backend_type} storage backend")
    return backend
