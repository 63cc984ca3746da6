"""
Excepciones del motor de formularios.

Ninguna es fatal: cada componente decide si la propaga o la convierte
en un valor de error local (ver renderer y orchestrator).
"""

from typing import Optional


class DynaformError(Exception):
    """Excepción base de dynaform."""
    pass


class ConfigurationError(DynaformError):
    """Configuración inválida: componente desconocido, referencia colgante, etc."""

    def __init__(self, message: str, field_name: Optional[str] = None):
        super().__init__(message)
        self.field_name = field_name


class FieldValidationError(DynaformError):
    """Uno o más campos no pasaron su esquema de validación."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        detail = ", ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(f"Validación fallida ({detail})")


class StepTransitionError(DynaformError):
    """El validador personalizado del paso rechazó el avance."""

    def __init__(self, step_id: str, reason: str):
        super().__init__(f"Paso '{step_id}': {reason}")
        self.step_id = step_id
        self.reason = reason


class PersistenceError(DynaformError):
    """Fallo de lectura/escritura en el almacenamiento durable."""
    pass


class SubmissionError(DynaformError):
    """El callback de envío final falló."""
    pass
