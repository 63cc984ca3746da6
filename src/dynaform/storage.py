"""
Almacenamiento durable clave -> texto para persistir datos del formulario.

Backends:
- MemoryStorage: en memoria (tests, sesiones efímeras)
- JsonFileStorage: un archivo <clave>.json por clave en un directorio
- SQLiteStorage: tabla kv_store en una base SQLite

Los errores de E/S se convierten en PersistenceError; quien decide
tragarlos es el orquestador.
"""

import json
import re
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Protocol, Union

from dynaform.config import EngineSettings
from dynaform.errors import PersistenceError


class Storage(Protocol):
    """
    Almacén clave -> texto.

    Los backends incluidos lanzan PersistenceError; el orquestador registra
    e ignora cualquier error de un backend.
    """

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """Almacenamiento en memoria."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self.data)


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonFileStorage:
    """Un archivo por clave dentro de un directorio."""

    def __init__(self, storage_dir: Optional[Path] = None):
        """
        Inicializa el almacenamiento.

        Args:
            storage_dir: Directorio de archivos. Default: ~/.dynaform/storage/
        """
        if storage_dir is None:
            storage_dir = Path.home() / ".dynaform" / "storage"
        self.storage_dir = Path(storage_dir)

    def _path(self, key: str) -> Path:
        return self.storage_dir / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise PersistenceError(f"No se pudo leer {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(value)
        except OSError as e:
            raise PersistenceError(f"No se pudo escribir {path}: {e}") from e

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"No se pudo borrar {path}: {e}") from e

    def keys(self) -> list[str]:
        if not self.storage_dir.exists():
            return []
        return sorted(p.stem for p in self.storage_dir.glob("*.json"))


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class SQLiteStorage:
    """Almacenamiento en una tabla SQLite."""

    def __init__(self, db_path: Optional[Path] = None):
        if db_path is None:
            db_path = Path.home() / ".dynaform" / "dynaform.db"
        self.db_path = Path(db_path)
        self._initialized = False

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager para conexión a la base de datos."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"No se pudo abrir {self.db_path}: {e}") from e
        try:
            if not self._initialized:
                conn.executescript(SCHEMA_SQL)
                self._initialized = True
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(f"Error SQLite en {self.db_path}: {e}") from e
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        with self.connection() as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self.connection() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                (key, value, datetime.now().isoformat()),
            )

    def delete(self, key: str) -> None:
        with self.connection() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def keys(self) -> list[str]:
        with self.connection() as conn:
            rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r[0] for r in rows]


def open_storage(settings: Optional[EngineSettings] = None) -> Union[JsonFileStorage, SQLiteStorage]:
    """Crea el backend configurado en los ajustes."""
    settings = settings or EngineSettings()
    if settings.storage_backend == "sqlite":
        return SQLiteStorage(settings.storage_dir / "dynaform.db")
    return JsonFileStorage(settings.storage_dir)


def dumps(data: dict) -> str:
    """Serializa formData (fechas y modelos incluidos) a JSON."""
    from pydantic_core import to_jsonable_python

    return json.dumps(to_jsonable_python(data), ensure_ascii=False)


def loads(text: Optional[str]) -> dict:
    """Deserializa formData; texto vacío -> {}."""
    if not text:
        return {}
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Los datos persistidos no son un objeto JSON")
    return data
