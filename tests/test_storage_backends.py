"""
Tests for the storage backends and the backend factory.
"""

from pathlib import Path

import pytest

from graph_editor.config import Settings
from graph_editor.errors import ConfigurationError, StorageError
from graph_editor.storage import (
    FileBackend,
    KeyValueStore,
    MappingBackend,
    MemoryBackend,
    create_backend,
)


class TestMemoryBackend:

    def test_get_set_remove(self):
        backend = MemoryBackend()
        assert backend.get("k") is None
        backend.set("k", "v")
        assert backend.get("k") == "v"
        backend.remove("k")
        assert backend.get("k") is None

    def test_remove_missing_key(self):
        MemoryBackend().remove("nothing")

    def test_initial_values_are_copied(self):
        initial = {"k": "v"}
        backend = MemoryBackend(initial)
        backend.set("k", "changed")
        assert initial == {"k": "v"}

    def test_conforms_to_protocol(self):
        assert isinstance(MemoryBackend(), KeyValueStore)
        assert MemoryBackend().backend_type == "memory"


class TestFileBackend:

    @pytest.fixture
    def backend(self, tmp_path):
        return FileBackend(tmp_path / "data")

    def test_creates_directory(self, backend, tmp_path):
        assert (tmp_path / "data").is_dir()

    def test_set_writes_one_file_per_key(self, backend):
        backend.set("graph-editor-data", '{"nodes": []}')
        path = backend.path_for("graph-editor-data")
        assert path.name == "graph-editor-data.json"
        assert path.read_text(encoding="utf-8") == '{"nodes": []}'
        assert backend.get("graph-editor-data") == '{"nodes": []}'
        assert not path.with_suffix(".json.tmp").exists()

    def test_overwrite(self, backend):
        backend.set("k", "one")
        backend.set("k", "two")
        assert backend.get("k") == "two"

    def test_missing_key(self, backend):
        assert backend.get("missing") is None

    def test_unsafe_key_is_sanitized(self, backend):
        path = backend.path_for("../escape/key")
        assert path.parent == backend.data_dir
        assert "/" not in path.name

    def test_remove(self, backend):
        backend.set("k", "v")
        backend.remove("k")
        backend.remove("k")
        assert backend.get("k") is None

    def test_write_failure_raises_storage_error(self, backend):
        # A directory where the file should go makes the final move fail
        backend.path_for("k").mkdir()
        with pytest.raises(StorageError):
            backend.set("k", "v")

    def test_undecodable_file_raises_storage_error(self, backend):
        backend.path_for("k").write_bytes(b"\xff\xfe\x00")
        with pytest.raises(StorageError):
            backend.get("k")

    def test_remove_failure_raises_storage_error(self, backend, monkeypatch):
        backend.set("k", "v")

        def refuse(self, *args, **kwargs):
            raise PermissionError("read-only volume")

        monkeypatch.setattr(Path, "unlink", refuse)
        with pytest.raises(StorageError):
            backend.remove("k")

    def test_conforms_to_protocol(self, backend):
        assert isinstance(backend, KeyValueStore)
        assert backend.backend_type == "file"


class TestMappingBackend:

    def test_uses_mapping(self):
        mapping = {}
        backend = MappingBackend(mapping)
        backend.set("k", "v")
        assert mapping == {"k": "v"}
        assert backend.get("k") == "v"
        backend.remove("k")
        assert mapping == {}

    def test_non_string_values_come_back_as_text(self):
        backend = MappingBackend({"k": 42})
        assert backend.get("k") == "42"

    def test_backend_type(self):
        assert MappingBackend({}).backend_type == "browser"
        assert MappingBackend({}, backend_type="session").backend_type == "session"

    def test_write_failure_raises_storage_error(self):
        class ReadOnly(dict):
            def __setitem__(self, key, value):
                raise TypeError("read-only")

        with pytest.raises(StorageError):
            MappingBackend(ReadOnly()).set("k", "v")


class TestFactory:

    def test_memory(self):
        backend = create_backend(Settings(storage_backend="memory"))
        assert isinstance(backend, MemoryBackend)

    def test_file(self, tmp_path):
        backend = create_backend(Settings(storage_backend="file", data_dir=tmp_path))
        assert isinstance(backend, FileBackend)
        assert backend.data_dir == tmp_path

    def test_browser(self):
        mapping = {}
        backend = create_backend(Settings(), browser_storage=mapping)
        assert isinstance(backend, MappingBackend)
        backend.set("k", "v")
        assert mapping["k"] == "v"

    def test_browser_without_mapping(self):
        with pytest.raises(ConfigurationError):
            create_backend(Settings(storage_backend="browser"))

    def test_force_backend(self):
        backend = create_backend(Settings(storage_backend="browser"), force_backend="memory")
        assert backend.backend_type == "memory"

    def test_unknown_backend(self):
        with pytest.raises(ConfigurationError):
            create_backend(Settings(), force_backend="git")
