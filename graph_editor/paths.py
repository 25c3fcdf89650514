"""
Path utilities for the graph editor.

Handles path resolution for both development mode and frozen (PyInstaller) executables.
- In development: paths are relative to the project root
- When frozen: paths are relative to the executable location

External data (data/, config.json) lives NEXT TO the executable, not bundled inside.
"""

import sys
from pathlib import Path


def get_app_dir() -> Path:
    """
    Get the application directory.

    - In development: the project root (parent of graph_editor/)
    - When frozen: the directory containing the executable
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent.parent


def get_data_dir() -> Path:
    """Get the default directory used by the file storage backend."""
    return get_app_dir() / "data"


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_app_dir() / "config.json"
