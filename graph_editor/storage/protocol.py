"""
KeyValueStore Protocol Definition.

This module defines the storage capability the PersistenceAdapter is given.
MemoryBackend, FileBackend and MappingBackend (NiceGUI browser storage) all
conform to it.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Minimal string key-value store.

    Values are opaque strings (the serialized graph). Backends raise
    StorageError when the underlying medium fails.
    """

    @property
    def backend_type(self) -> str:
        """Return the backend type identifier ('memory', 'file' or 'browser')."""
        ...

    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None if the key is absent.
        """
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Delete ``key``. Removing a missing key is not an error."""
        ...
