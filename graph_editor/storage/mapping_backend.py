"""
Mapping storage backend.

Wraps any dict-like object. The app passes NiceGUI's ``app.storage.user``,
which is persisted per browser, the server-side counterpart of the
browser's local storage.
"""

import logging
from typing import MutableMapping, Optional

from graph_editor.errors import StorageError

logger = logging.getLogger(__name__)


class MappingBackend:
    def __init__(self, mapping: MutableMapping, backend_type: str = "browser"):
        self._mapping = mapping
        self._backend_type = backend_type

    @property
    def backend_type(self) -> str:
        return self._backend_type

    def get(self, key: str) -> Optional[str]:
        value = self._mapping.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            # Stored by something else; hand it over as text so parsing decides
            return str(value)
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self._mapping[key] = value
        except (TypeError, RuntimeError) as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def remove(self, key: str) -> None:
        self._mapping.pop(key, None)
