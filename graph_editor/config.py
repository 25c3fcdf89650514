"""
Configuration management for the graph editor.

Handles persistent configuration including:
- Which storage backend keeps the auto-saved graph
- The storage key and export filename
- Logging level and server port

Config is stored in config.json next to the executable/project root.
Environment variables (optionally loaded from a .env file) take priority.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from graph_editor.errors import ConfigurationError
from graph_editor.paths import get_config_path, get_data_dir

STORAGE_KEY = 'graph-editor-data'
EXPORT_FILENAME = 'graph-data.json'

STORAGE_BACKENDS = ('browser', 'file', 'memory')
DEFAULT_BACKEND = 'browser'

# config.json key -> environment variable
ENV_VARS = {
    'storage_backend': 'GRAPH_EDITOR_STORAGE',
    'storage_key': 'GRAPH_EDITOR_STORAGE_KEY',
    'export_filename': 'GRAPH_EDITOR_EXPORT_FILENAME',
    'data_dir': 'GRAPH_EDITOR_DATA_DIR',
    'log_level': 'GRAPH_EDITOR_LOG_LEVEL',
    'port': 'GRAPH_EDITOR_PORT',
}


@dataclass
class Settings:
    storage_backend: str = DEFAULT_BACKEND
    storage_key: str = STORAGE_KEY
    export_filename: str = EXPORT_FILENAME
    data_dir: Path = field(default_factory=get_data_dir)
    log_level: str = 'INFO'
    port: int = 8080


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json."""
    config_path = Path(config_path) if config_path else get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            return {}
    return {}


def save_config(config: dict, config_path: Optional[Path] = None) -> None:
    """Save configuration to config.json."""
    config_path = Path(config_path) if config_path else get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """
    Resolve settings.

    Priority:
    1. Environment variables (GRAPH_EDITOR_*)
    2. Values stored in config.json
    3. Defaults
    """
    raw = load_config(config_path)
    for key, env_name in ENV_VARS.items():
        env_value = os.environ.get(env_name)
        if env_value:
            raw[key] = env_value

    settings = Settings()
    if raw.get('storage_backend'):
        settings.storage_backend = str(raw['storage_backend']).strip().lower()
    if raw.get('storage_key'):
        settings.storage_key = str(raw['storage_key'])
    if raw.get('export_filename'):
        settings.export_filename = str(raw['export_filename'])
    if raw.get('data_dir'):
        settings.data_dir = Path(raw['data_dir'])
    if raw.get('log_level'):
        settings.log_level = str(raw['log_level']).upper()
    if raw.get('port'):
        try:
            settings.port = int(raw['port'])
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid port: {raw['port']!r}")

    if settings.storage_backend not in STORAGE_BACKENDS:
        raise ConfigurationError(
            f"Unknown storage backend {settings.storage_backend!r}, "
            f"expected one of {', '.join(STORAGE_BACKENDS)}"
        )
    return settings
