"""In-process storage backend. Nothing survives a restart."""

from typing import Dict, Optional


class MemoryBackend:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    @property
    def backend_type(self) -> str:
        return "memory"

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
