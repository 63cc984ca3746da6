"""
Widget de verificación de identidad.

La captura ocurre fuera del motor: aquí se pide la ruta del archivo JSON con
el resultado del proveedor, se guarda el estado de la verificación en el
campo y se autocompletan los campos mapeados.
"""

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from dynaform.cli.theme import print_field, print_success
from dynaform.verification import (
    apply_autofill,
    is_verification_result_valid,
    map_verification_result,
    verification_summary,
)
from dynaform.widgets.base import TextWidget

if TYPE_CHECKING:
    from dynaform.renderer import BoundField

logger = logging.getLogger(__name__)


def load_verification_result(path: Path) -> Optional[dict]:
    """Lee el resultado desde JSON; None si no se puede leer."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("No se pudo leer el resultado de verificación %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None


def verification_status(result: dict) -> dict:
    """Valor que se guarda en el campo de verificación."""
    return {
        "completed": True,
        "sessionId": str(result.get("sessionId") or uuid.uuid4().hex),
        "data": result,
        "timestamp": datetime.now().isoformat(),
    }


class VerificationWidget(TextWidget):
    """Pide el archivo de resultado; vacío deja el campo sin completar."""

    def parse(self, bound: "BoundField", text: str) -> Any:
        text = text.strip()
        if not text:
            return None
        path = Path(text).expanduser()
        if not path.exists():
            raise ValueError(f"No existe el archivo: {path}")
        result = load_verification_result(path)
        if not is_verification_result_valid(result):
            raise ValueError("Resultado de verificación inválido")
        return verification_status(result)

    def format_value(self, bound: "BoundField", value: Any) -> str:
        return ""

    def complete(self, bound: "BoundField", status: dict) -> list[str]:
        """Autocompleta los campos del formulario a partir del resultado."""
        result = status.get("data") or {}
        applied = apply_autofill(map_verification_result(result), bound.set_other)

        summary = verification_summary(result)
        print_success("Verificación completada")
        print_field("Documento", summary.id_number)
        print_field("Nombre", summary.full_name)
        print_field("Coincidencia facial", "sí" if summary.face_match else "no")
        if applied:
            print_field("Campos autocompletados", ", ".join(applied))
        return applied

    def prompt(self, bound: "BoundField"):
        action, value = super().prompt(bound)
        if isinstance(value, dict):
            self.complete(bound, value)
        return action, value
