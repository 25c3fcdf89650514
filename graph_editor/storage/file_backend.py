"""
File-based Storage Backend.

Stores each key as one file in a directory:
- {data_dir}/{key}.json

Writes go to a temporary file first and are then moved into place, so a
crash mid-write leaves the previous value intact.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional, Union

from graph_editor.errors import StorageError

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r'[^A-Za-z0-9._-]')


class FileBackend:
    def __init__(self, data_dir: Union[str, Path]):
        """
        Initialize FileBackend.

        Args:
            data_dir: Directory holding one file per key (created if missing)
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def backend_type(self) -> str:
        return "file"

    def path_for(self, key: str) -> Path:
        safe_key = _UNSAFE.sub('_', key) or '_'
        return self.data_dir / f"{safe_key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        if not path.exists():
            return
        try:
            path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to remove {path}: {e}") from e
        logger.info(f"Removed {path}")
