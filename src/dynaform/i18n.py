"""
Catálogo de mensajes y resolución de textos traducibles.

El motor sólo necesita dos operaciones de un traductor: has(key) y
__call__(key, values). MessageCatalog las implementa sobre un dict
anidado (ej: {"form": {"field": {"email": {"label": "Correo"}}}}).
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class Translator(Protocol):
    """Interfaz mínima de traducción."""

    def has(self, key: str) -> bool: ...

    def __call__(self, key: str, values: Optional[dict] = None) -> str: ...


class _SafeDict(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


class MessageCatalog:
    """Mensajes anidados con acceso por claves con puntos."""

    def __init__(self, messages: Optional[dict] = None, namespace: str = ""):
        self._messages = messages or {}
        self.namespace = namespace

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "MessageCatalog":
        """Carga un catálogo desde JSON; catálogo vacío si falla."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return cls(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("No se pudo cargar el catálogo %s: %s", path, e)
            return cls()

    def namespaced(self, namespace: Optional[str]) -> "MessageCatalog":
        """Vista del mismo catálogo con un prefijo de claves."""
        if not namespace:
            return self
        prefix = f"{self.namespace}.{namespace}" if self.namespace else namespace
        return MessageCatalog(self._messages, prefix)

    def _full_key(self, key: str) -> str:
        return f"{self.namespace}.{key}" if self.namespace else key

    def _lookup(self, key: str) -> Any:
        node: Any = self._messages
        for part in self._full_key(key).split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node if isinstance(node, str) else None

    def has(self, key: str) -> bool:
        return self._lookup(key) is not None

    def __call__(self, key: str, values: Optional[dict] = None) -> str:
        """Traduce; si no existe la clave devuelve la clave misma."""
        template = self._lookup(key)
        if template is None:
            return key
        if not values:
            return template
        return template.format_map(_SafeDict(values))


def resolve_text(
    key: Optional[str],
    fallback: Optional[str],
    root: Optional[Translator],
    namespaced: Optional[Translator] = None,
) -> Optional[str]:
    """
    Resuelve un texto con triple respaldo.

    1. La clave en el espacio raíz (claves completas, ej: "form.field.email.label")
    2. La clave en el espacio del llamador (claves relativas)
    3. El texto literal de props
    """
    if not key:
        return fallback
    if root is not None and root.has(key):
        return root(key)
    if namespaced is not None and namespaced.has(key):
        return namespaced(key)
    return fallback
