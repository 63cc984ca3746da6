"""Modelos Pydantic para la configuración de formularios y del motor."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


DEFAULT_PERSIST_KEY = "multi-step-form-data"
DEFAULT_CONFIG_PATH = Path.home() / ".dynaform" / "config.json"


class ValidationType(str, Enum):
    """Catálogo de reglas de validación soportadas."""
    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    MIN = "min"
    MAX = "max"
    EMAIL = "email"
    URL = "url"
    REGEX = "regex"
    NUMBER = "number"
    INTEGER = "integer"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"
    INCLUDES = "includes"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    UUID = "uuid"
    CUID = "cuid"
    LENGTH = "length"


class ConditionOperator(str, Enum):
    """Operadores para reglas de visibilidad."""
    # Igualdad
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    # Numéricos
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    GREATER_THAN_OR_EQUAL = "greaterThanOrEqual"
    LESS_THAN_OR_EQUAL = "lessThanOrEqual"
    # Texto
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    MATCHES = "matches"
    # Listas
    IN = "in"
    NOT_IN = "notIn"
    INCLUDES_ALL = "includesAll"
    INCLUDES_ANY = "includesAny"
    # Vacío / booleanos
    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"
    IS_TRUE = "isTrue"
    IS_FALSE = "isFalse"
    # Definición
    IS_DEFINED = "isDefined"
    IS_UNDEFINED = "isUndefined"


class LogicOperator(str, Enum):
    """Operadores lógicos de condiciones compuestas."""
    AND = "AND"
    OR = "OR"
    NOT = "NOT"


class _WireModel(BaseModel):
    """Base: acepta camelCase (formato de red) y snake_case."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


# ============================================================================
# Reglas de validación y condiciones
# ============================================================================

class ValidationRule(_WireModel):
    """Una restricción con nombre (ej: minLength=2) y clave de mensaje opcional."""
    model_config = ConfigDict(frozen=True)

    type: str
    value: Any = None
    message_key: Optional[str] = None

    @property
    def is_known(self) -> bool:
        return self.type in {t.value for t in ValidationType}


class ConditionRule(_WireModel):
    """Regla hoja: compara formData[field_name] contra value."""
    field_name: str
    operator: str
    value: Any = None
    pattern: Optional[str] = None  # Para "matches"


class ComplexCondition(_WireModel):
    """Nodo AND/OR/NOT; rules y conditions se evalúan como un solo conjunto."""
    logic: LogicOperator
    rules: list[ConditionRule] = Field(default_factory=list)
    conditions: list["ComplexCondition"] = Field(default_factory=list)


FieldCondition = Union[ComplexCondition, ConditionRule]


# ============================================================================
# Campos, pasos y formulario
# ============================================================================

class FieldConfig(_WireModel):
    """Configuración de un control del formulario."""
    field_name: str
    component: str
    props: dict[str, Any] = Field(default_factory=dict)
    condition: Optional[FieldCondition] = Field(default=None, union_mode="left_to_right")

    @field_validator("props", mode="before")
    @classmethod
    def parse_validations(cls, value: Any) -> dict:
        """Convierte props.validations en objetos ValidationRule."""
        if value is None:
            return {}
        props = dict(value)
        rules = props.get("validations") or []
        props["validations"] = [
            r if isinstance(r, ValidationRule) else ValidationRule.model_validate(r)
            for r in rules
        ]
        return props

    @property
    def validations(self) -> list[ValidationRule]:
        return self.props.get("validations", [])

    @property
    def is_required(self) -> bool:
        return any(r.type == ValidationType.REQUIRED.value for r in self.validations)


class StepValidation:
    """Validador de paso: validate(data) -> True | str (o awaitable)."""

    def __init__(self, validate: Callable[[dict], Any]):
        self.validate = validate


class StepConfig(_WireModel):
    """Grupo ordenado de campos con validador opcional."""
    id: str
    title: str
    description: Optional[str] = None
    fields: list[FieldConfig] = Field(default_factory=list)
    step_validation: Optional[StepValidation] = Field(default=None, exclude=True)
    optional: bool = False

    @field_validator("step_validation", mode="before")
    @classmethod
    def wrap_callable(cls, value: Any) -> Optional[StepValidation]:
        if value is None or isinstance(value, StepValidation):
            return value
        if callable(value):
            return StepValidation(validate=value)
        validate = getattr(value, "validate", None)
        if validate is None and isinstance(value, dict):
            validate = value.get("validate")
        if validate is None:
            # Un stepValidation sin validate no restringe el avance
            return None
        return StepValidation(validate=validate)

    @field_validator("fields")
    @classmethod
    def validate_unique_names(cls, v: list[FieldConfig]) -> list[FieldConfig]:
        """Los nombres de campo deben ser únicos dentro del paso."""
        names = [f.field_name for f in v]
        duplicated = sorted({n for n in names if names.count(n) > 1})
        if duplicated:
            raise ValueError(f"Nombres de campo duplicados: {', '.join(duplicated)}")
        return v


class FormConfig(_WireModel):
    """Configuración completa del formulario multi-paso."""
    steps: list[StepConfig]
    initial_step: int = 0
    allow_back_navigation: bool = True
    show_progress: bool = True
    progress_style: Literal["steps", "bar", "dots"] = "steps"
    persist_data: bool = False
    persist_key: str = DEFAULT_PERSIST_KEY

    # Callbacks del host (no forman parte del formato de red)
    on_step_complete: Optional[Callable[..., Any]] = Field(default=None, exclude=True)
    on_complete: Optional[Callable[..., Any]] = Field(default=None, exclude=True)
    on_step_change: Optional[Callable[..., Any]] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def validate_steps(self):
        if not self.steps:
            raise ValueError("Se requiere al menos un paso")
        if not 0 <= self.initial_step < len(self.steps):
            raise ValueError(
                f"initialStep fuera de rango: {self.initial_step} (pasos: {len(self.steps)})"
            )
        return self

    def all_field_names(self) -> set[str]:
        """Conjunto de nombres de campo de todo el formulario."""
        return {f.field_name for step in self.steps for f in step.fields}


# ============================================================================
# Configuración del motor
# ============================================================================

class EngineSettings(BaseModel):
    """Ajustes del motor y de la CLI."""
    storage_dir: Path = Field(default_factory=lambda: Path.home() / ".dynaform" / "storage")
    storage_backend: Literal["json", "sqlite"] = "json"
    persist_key: str = DEFAULT_PERSIST_KEY
    max_condition_depth: int = Field(default=32, ge=1, le=1000)
    log_level: str = "WARNING"
    theme: str = "default"

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Nivel de log inválido: {v}")
        return level


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """
    Carga los ajustes del motor.

    Args:
        path: Archivo JSON de ajustes. Default: ~/.dynaform/config.json

    Returns:
        EngineSettings (valores por defecto si el archivo no existe o es inválido)
    """
    path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not path.exists():
        return EngineSettings()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return EngineSettings(**data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning("Ajustes inválidos en %s, usando valores por defecto: %s", path, e)
        return EngineSettings()
