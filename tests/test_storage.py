"""Tests para los backends de almacenamiento."""

from datetime import date
from pathlib import Path

import pytest

from dynaform.config import EngineSettings
from dynaform.errors import PersistenceError
from dynaform.storage import JsonFileStorage, MemoryStorage, SQLiteStorage, dumps, loads, open_storage


@pytest.fixture(params=["memory", "json", "sqlite"])
def backend(request, tmp_path):
    """Cada backend con un directorio temporal."""
    if request.param == "memory":
        return MemoryStorage()
    if request.param == "json":
        return JsonFileStorage(tmp_path / "storage")
    return SQLiteStorage(tmp_path / "test.db")


class TestStorageContract:
    """Mismo comportamiento get/set/delete en todos los backends."""

    def test_missing_key(self, backend):
        assert backend.get("nada") is None

    def test_set_and_get(self, backend):
        backend.set("form", '{"a": 1}')
        assert backend.get("form") == '{"a": 1}'

    def test_overwrite(self, backend):
        backend.set("form", "uno")
        backend.set("form", "dos")
        assert backend.get("form") == "dos"
        assert backend.keys() == ["form"]

    def test_delete(self, backend):
        backend.set("form", "x")
        backend.delete("form")
        assert backend.get("form") is None
        backend.delete("form")

    def test_unicode(self, backend):
        backend.set("form", '{"nombre": "Begoña"}')
        assert backend.get("form") == '{"nombre": "Begoña"}'


class TestJsonFileStorage:
    def test_key_is_sanitized(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        storage.set("../clientes/ana", "x")
        assert storage.get("../clientes/ana") == "x"
        assert [p.name for p in tmp_path.iterdir()] == [".._clientes_ana.json"]

    def test_keys_without_directory(self, tmp_path):
        assert JsonFileStorage(tmp_path / "no-existe").keys() == []

    def test_write_error(self, tmp_path):
        blocker = tmp_path / "archivo"
        blocker.write_text("no soy un directorio")
        storage = JsonFileStorage(blocker)
        with pytest.raises(PersistenceError):
            storage.set("form", "x")


class TestSQLiteStorage:
    def test_creates_parent_directory(self, tmp_path):
        storage = SQLiteStorage(tmp_path / "a" / "b" / "forms.db")
        storage.set("k", "v")
        assert (tmp_path / "a" / "b" / "forms.db").exists()

    def test_data_survives_new_instance(self, tmp_path):
        SQLiteStorage(tmp_path / "forms.db").set("k", "v")
        assert SQLiteStorage(tmp_path / "forms.db").get("k") == "v"


class TestOpenStorage:
    def test_json_backend(self, tmp_path):
        storage = open_storage(EngineSettings(storage_dir=tmp_path))
        assert isinstance(storage, JsonFileStorage)
        assert storage.storage_dir == tmp_path

    def test_sqlite_backend(self, tmp_path):
        storage = open_storage(EngineSettings(storage_dir=tmp_path, storage_backend="sqlite"))
        assert isinstance(storage, SQLiteStorage)
        assert storage.db_path == Path(tmp_path) / "dynaform.db"


class TestSerialization:
    def test_dumps_handles_dates(self):
        assert dumps({"d": date(2024, 1, 2), "n": "ñ"}) == '{"d": "2024-01-02", "n": "ñ"}'

    def test_loads_empty(self):
        assert loads(None) == {}
        assert loads("") == {}

    def test_loads_rejects_non_object(self):
        with pytest.raises(ValueError):
            loads("[1, 2]")
