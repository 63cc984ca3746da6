"""
Generador de esquemas de validación a partir de la configuración de campos.

Cada campo produce un FieldSchema (un TypeAdapter de pydantic más las
restricciones de sus reglas); cada paso produce un StepSchema indexado
por fieldName.

La obligatoriedad es explícita: un campo sin regla "required" acepta la
entrada vacía (None, "" o lista vacía según el componente) y sólo aplica
el resto de reglas cuando se ingresa un valor.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Annotated, Any, Callable, Optional, Union
from urllib.parse import urlparse

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    Strict,
    StrictBool,
    TypeAdapter,
    ValidationError,
)
from pydantic_core import PydanticCustomError

from dynaform.components import (
    BOOLEAN_COMPONENTS,
    NUMBER_COMPONENTS,
    ComponentName,
    is_form_component,
    is_multiple_toggle,
)
from dynaform.config import FieldConfig, ValidationRule, ValidationType

logger = logging.getLogger(__name__)

Translate = Callable[..., str]

RULE_ERROR_CODE = "dynaform_rule"

DEFAULT_MESSAGES = {
    "required": "Campo requerido",
    "minLength": "Mínimo {value} caracteres",
    "maxLength": "Máximo {value} caracteres",
    "length": "Debe tener exactamente {value} caracteres",
    "min": "Mínimo: {value}",
    "max": "Máximo: {value}",
    "email": "Correo electrónico inválido",
    "url": "URL inválida",
    "regex": "Formato inválido",
    "number": "Debe ser un número",
    "integer": "Debe ser un número entero",
    "positive": "Debe ser un número positivo",
    "negative": "Debe ser un número negativo",
    "boolean": "Debe ser verdadero o falso",
    "date": "Fecha inválida",
    "array": "Debe ser una lista",
    "object": "Debe ser un objeto",
    "includes": "Debe incluir \"{value}\"",
    "startsWith": "Debe comenzar con \"{value}\"",
    "endsWith": "Debe terminar con \"{value}\"",
    "uuid": "UUID inválido",
    "cuid": "CUID inválido",
}

TYPE_MESSAGES = {
    "string": "Debe ser texto",
    "number": DEFAULT_MESSAGES["number"],
    "coerced_number": DEFAULT_MESSAGES["number"],
    "boolean": DEFAULT_MESSAGES["boolean"],
    "coerced_boolean": DEFAULT_MESSAGES["boolean"],
    "date": DEFAULT_MESSAGES["date"],
    "date_range": "Rango de fechas inválido",
    "array": DEFAULT_MESSAGES["array"],
    "object": DEFAULT_MESSAGES["object"],
    "verification": "Verificación de identidad inválida",
}

EMAIL_RE = re.compile(
    r"^(?!\.)(?!.*\.\.)([A-Z0-9_'+\-\.]*)[A-Z0-9_+-]@([A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE,
)
UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
CUID_RE = re.compile(r"^c[^\s-]{8,}$", re.IGNORECASE)


def _default_translate(key: str, values: Optional[dict] = None) -> str:
    return key


def rule_message(rule: ValidationRule, translate: Optional[Translate] = None) -> str:
    """Mensaje de error de una regla: clave traducida o mensaje por defecto."""
    if rule.message_key:
        return (translate or _default_translate)(rule.message_key, {"value": rule.value})
    template = DEFAULT_MESSAGES.get(rule.type, "Valor inválido")
    try:
        return template.format(value=rule.value)
    except (KeyError, IndexError, ValueError):
        return template


# ============================================================================
# Tipos base
# ============================================================================

def _coerce_number(value: Any) -> Any:
    """Conversión numérica permisiva: "" -> 0, True -> 1."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0
        try:
            return float(text)
        except ValueError:
            return value
    return value


def _finite(value: float) -> float:
    if isinstance(value, float) and math.isnan(value):
        raise PydanticCustomError("number_nan", "Debe ser un número")
    return value


def _coerce_boolean(value: Any) -> bool:
    if isinstance(value, (list, dict, tuple)):
        return True
    return bool(value)


def _coerce_datetime(value: Any) -> Any:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return value


CoercedNumber = Annotated[float, BeforeValidator(_coerce_number), AfterValidator(_finite)]
CoercedDate = Annotated[datetime, BeforeValidator(_coerce_datetime)]


class DateRange(BaseModel):
    """Rango de fechas; ambos extremos opcionales."""
    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[CoercedDate] = Field(default=None, alias="from")
    to: Optional[CoercedDate] = None


class VerificationStatus(BaseModel):
    """Resultado de la verificación de identidad guardado en formData."""
    model_config = ConfigDict(populate_by_name=True)

    completed: StrictBool
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    data: Any = None
    timestamp: Optional[str] = None


BASE_TYPES = {
    "string": str,
    "number": Annotated[float, Strict()],
    "coerced_number": CoercedNumber,
    "boolean": StrictBool,
    "coerced_boolean": Annotated[bool, BeforeValidator(_coerce_boolean)],
    "date": CoercedDate,
    "date_range": DateRange,
    "array": list[str],
    "object": dict[str, Any],
    "verification": Union[VerificationStatus, StrictBool],
}

NUMERIC_BASES = ("number", "coerced_number")


def _base_for(component: str, props: dict) -> str:
    """Tipo base según la familia del componente."""
    if component in BOOLEAN_COMPONENTS:
        return "boolean"
    if component in NUMBER_COMPONENTS:
        return "number"
    if component == ComponentName.DATE_PICKER.value:
        return "date"
    if component == ComponentName.DATE_RANGE_PICKER.value:
        return "date_range"
    if is_multiple_toggle(component, props):
        return "array"
    if component == ComponentName.EKYC.value:
        return "verification"
    return "string"


# ============================================================================
# Borrador de esquema y tabla de reglas
# ============================================================================

@dataclass
class _Check:
    """Restricción aplicada después de la validación de tipo."""
    rule: str
    predicate: Callable[[Any], bool]
    message: str
    numeric: bool = False


@dataclass
class _Draft:
    base: str
    checks: list[_Check] = field(default_factory=list)
    type_message: Optional[str] = None
    integer: bool = False
    required: bool = False
    required_message: str = DEFAULT_MESSAGES["required"]

    @property
    def is_string(self) -> bool:
        return self.base == "string"

    def to_number(self, message: Optional[str] = None) -> None:
        """Pasa a número (con coerción) conservando sólo restricciones numéricas."""
        if self.base not in NUMERIC_BASES:
            self.checks = [c for c in self.checks if c.numeric]
            self.base = "coerced_number"
        elif self.base == "number":
            self.base = "coerced_number"
        if message:
            self.type_message = message

    def replace_base(self, base: str, message: Optional[str]) -> None:
        self.base = base
        self.checks = []
        self.integer = False
        self.type_message = message


def _as_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _string_check(predicate: Callable[[str], bool]):
    def apply(draft: _Draft, rule: ValidationRule, message: str) -> None:
        if draft.is_string:
            draft.checks.append(_Check(rule.type, predicate, message))
    return apply


def _apply_required(draft: _Draft, rule: ValidationRule, message: str) -> None:
    draft.required = True
    draft.required_message = message
    if draft.base == "boolean":
        draft.checks.append(_Check(rule.type, lambda v: v is True, message))
    elif draft.is_string:
        draft.checks.append(_Check(rule.type, lambda v: len(v) >= 1, message))


def _apply_min_length(draft: _Draft, rule: ValidationRule, message: str) -> None:
    limit = _as_number(rule.value)
    _string_check(lambda v: len(v) >= limit)(draft, rule, message)


def _apply_max_length(draft: _Draft, rule: ValidationRule, message: str) -> None:
    limit = _as_number(rule.value)
    _string_check(lambda v: len(v) <= limit)(draft, rule, message)


def _apply_length(draft: _Draft, rule: ValidationRule, message: str) -> None:
    limit = _as_number(rule.value)
    _string_check(lambda v: len(v) == limit)(draft, rule, message)


def _apply_min(draft: _Draft, rule: ValidationRule, message: str) -> None:
    limit = _as_number(rule.value)
    draft.to_number()
    draft.checks.append(_Check(rule.type, lambda v: v >= limit, message, numeric=True))


def _apply_max(draft: _Draft, rule: ValidationRule, message: str) -> None:
    limit = _as_number(rule.value)
    draft.to_number()
    draft.checks.append(_Check(rule.type, lambda v: v <= limit, message, numeric=True))


def _apply_number(draft: _Draft, rule: ValidationRule, message: str) -> None:
    draft.to_number(message)


def _apply_integer(draft: _Draft, rule: ValidationRule, message: str) -> None:
    draft.to_number()
    draft.integer = True
    draft.checks.append(_Check(rule.type, lambda v: float(v).is_integer(), message, numeric=True))


def _apply_positive(draft: _Draft, rule: ValidationRule, message: str) -> None:
    draft.to_number()
    draft.checks.append(_Check(rule.type, lambda v: v > 0, message, numeric=True))


def _apply_negative(draft: _Draft, rule: ValidationRule, message: str) -> None:
    draft.to_number()
    draft.checks.append(_Check(rule.type, lambda v: v < 0, message, numeric=True))


def _replacing(base: str):
    def apply(draft: _Draft, rule: ValidationRule, message: str) -> None:
        draft.replace_base(base, message)
    return apply


def _apply_regex(draft: _Draft, rule: ValidationRule, message: str) -> None:
    try:
        pattern = re.compile(str(rule.value))
    except re.error as e:
        logger.warning("Regla regex inválida (%s): %s", rule.value, e)
        return
    _string_check(lambda v: pattern.search(v) is not None)(draft, rule, message)


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


def _apply_includes(draft: _Draft, rule: ValidationRule, message: str) -> None:
    needle = str(rule.value)
    _string_check(lambda v: needle in v)(draft, rule, message)


def _apply_starts_with(draft: _Draft, rule: ValidationRule, message: str) -> None:
    prefix = str(rule.value)
    _string_check(lambda v: v.startswith(prefix))(draft, rule, message)


def _apply_ends_with(draft: _Draft, rule: ValidationRule, message: str) -> None:
    suffix = str(rule.value)
    _string_check(lambda v: v.endswith(suffix))(draft, rule, message)


RULE_TABLE: dict[str, Callable[[_Draft, ValidationRule, str], None]] = {
    ValidationType.REQUIRED.value: _apply_required,
    ValidationType.MIN_LENGTH.value: _apply_min_length,
    ValidationType.MAX_LENGTH.value: _apply_max_length,
    ValidationType.LENGTH.value: _apply_length,
    ValidationType.MIN.value: _apply_min,
    ValidationType.MAX.value: _apply_max,
    ValidationType.EMAIL.value: _string_check(lambda v: EMAIL_RE.match(v) is not None),
    ValidationType.URL.value: _string_check(_is_url),
    ValidationType.REGEX.value: _apply_regex,
    ValidationType.NUMBER.value: _apply_number,
    ValidationType.INTEGER.value: _apply_integer,
    ValidationType.POSITIVE.value: _apply_positive,
    ValidationType.NEGATIVE.value: _apply_negative,
    ValidationType.BOOLEAN.value: _replacing("coerced_boolean"),
    ValidationType.DATE.value: _replacing("date"),
    ValidationType.ARRAY.value: _replacing("array"),
    ValidationType.OBJECT.value: _replacing("object"),
    ValidationType.INCLUDES.value: _apply_includes,
    ValidationType.STARTS_WITH.value: _apply_starts_with,
    ValidationType.ENDS_WITH.value: _apply_ends_with,
    ValidationType.UUID.value: _string_check(lambda v: UUID_RE.match(v) is not None),
    ValidationType.CUID.value: _string_check(lambda v: CUID_RE.match(v) is not None),
}


def is_validation_rule_supported(rule_type: str) -> bool:
    """Verifica si un tipo de regla está en el catálogo."""
    return rule_type in RULE_TABLE


def _validator_for(check: _Check):
    def run(value: Any) -> Any:
        if not check.predicate(value):
            raise PydanticCustomError(RULE_ERROR_CODE, "{message}", {"message": check.message, "rule": check.rule})
        return value
    return AfterValidator(run)


# ============================================================================
# Esquemas
# ============================================================================

@dataclass
class FieldValidationResult:
    """Resultado de validar un valor contra un FieldSchema."""
    success: bool
    data: Any = None
    error: Optional[str] = None


@dataclass
class StepValidationResult:
    """Resultado de validar los valores de un paso."""
    success: bool
    data: dict = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


class FieldSchema:
    """Esquema ejecutable de un campo."""

    def __init__(self, field_name: str, component: str, props: dict, draft: _Draft):
        self.field_name = field_name
        self.component = component
        self.base = draft.base
        self.required = draft.required
        self.required_message = draft.required_message
        self.rules = [c.rule for c in draft.checks]
        self._type_message = draft.type_message
        self._integer = draft.integer
        self._multiple = is_multiple_toggle(component, props)

        metadata = [_validator_for(c) for c in draft.checks]
        annotated = Annotated[(BASE_TYPES[draft.base], *metadata)] if metadata else BASE_TYPES[draft.base]
        self._adapter = TypeAdapter(annotated)

    @property
    def optional(self) -> bool:
        return not self.required

    def is_empty(self, value: Any) -> bool:
        """Entrada vacía según la familia del componente."""
        if value is None:
            return True
        if self.component in BOOLEAN_COMPONENTS or self.component in NUMBER_COMPONENTS:
            return False
        if self._multiple:
            return isinstance(value, (list, tuple)) and len(value) == 0
        return value == ""

    def validate(self, value: Any) -> FieldValidationResult:
        """Acepta vacío si el campo es opcional; si no, aplica todas las reglas."""
        if self.is_empty(value):
            if self.required:
                return FieldValidationResult(False, None, self.required_message)
            return FieldValidationResult(True, value, None)

        try:
            data = self._adapter.validate_python(value)
        except ValidationError as e:
            return FieldValidationResult(False, None, self._first_message(e))

        if isinstance(data, BaseModel):
            data = data.model_dump(by_alias=True)
        elif self._integer and isinstance(data, float):
            data = int(data)
        return FieldValidationResult(True, data, None)

    def parse(self, value: Any) -> Any:
        """Como validate(), pero lanza FieldValidationError."""
        from dynaform.errors import FieldValidationError

        result = self.validate(value)
        if not result.success:
            raise FieldValidationError({self.field_name: result.error})
        return result.data

    def _first_message(self, error: ValidationError) -> str:
        issues = error.errors()
        if not issues:
            return "Valor inválido"
        first = issues[0]
        if first.get("type") == RULE_ERROR_CODE:
            return first["msg"]
        return self._type_message or TYPE_MESSAGES.get(self.base) or first.get("msg", "Valor inválido")

    def describe(self) -> str:
        """Resumen legible (para la CLI)."""
        parts = [self.base]
        parts.extend(self.rules)
        if not self.required:
            parts.append("opcional")
        return ", ".join(parts)

    def __repr__(self) -> str:
        return f"FieldSchema({self.field_name!r}, {self.describe()})"


class StepSchema:
    """Esquema de un paso: FieldSchema por fieldName."""

    def __init__(self, shape: dict[str, FieldSchema]):
        self.shape = shape

    def __contains__(self, field_name: str) -> bool:
        return field_name in self.shape

    def __getitem__(self, field_name: str) -> FieldSchema:
        return self.shape[field_name]

    def __len__(self) -> int:
        return len(self.shape)

    def validate(self, data: dict) -> StepValidationResult:
        """Valida todos los campos; claves desconocidas se descartan."""
        data = data or {}
        parsed = {}
        errors = {}
        for name, schema in self.shape.items():
            result = schema.validate(data.get(name))
            if result.success:
                if name in data or result.data is not None:
                    parsed[name] = result.data
            else:
                errors[name] = result.error
        return StepValidationResult(success=not errors, data=parsed, errors=errors)

    def parse(self, data: dict) -> dict:
        from dynaform.errors import FieldValidationError

        result = self.validate(data)
        if not result.success:
            raise FieldValidationError(result.errors)
        return result.data


def _build_field_schema(field_config: FieldConfig, translate: Optional[Translate]) -> FieldSchema:
    props = field_config.props or {}
    draft = _Draft(base=_base_for(field_config.component, props))

    for rule in field_config.validations:
        apply = RULE_TABLE.get(rule.type)
        if apply is None:
            logger.warning(
                "Tipo de regla desconocido '%s' en campo '%s'; se ignora",
                rule.type, field_config.field_name,
            )
            continue
        apply(draft, rule, rule_message(rule, translate))

    return FieldSchema(field_config.field_name, field_config.component, props, draft)


def generate_schema(fields: list[FieldConfig], translate: Optional[Translate] = None) -> StepSchema:
    """
    Genera el esquema de validación de un conjunto de campos.

    Args:
        fields: Configuraciones de campo (ya combinadas con sus defaults)
        translate: Función de traducción para mensajes con messageKey

    Returns:
        StepSchema indexado por fieldName (sin componentes de presentación)
    """
    shape = {}
    for fc in fields:
        if not is_form_component(fc.component):
            continue
        shape[fc.field_name] = _build_field_schema(fc, translate)
    return StepSchema(shape)


def generate_field_schema(field_config: FieldConfig, translate: Optional[Translate] = None) -> FieldSchema:
    """Esquema de un único campo (validación en vivo)."""
    return _build_field_schema(field_config, translate)


def validate_field_value(
    value: Any,
    field_config: FieldConfig,
    translate: Optional[Translate] = None,
) -> FieldValidationResult:
    """Valida un valor contra la configuración de su campo."""
    return generate_field_schema(field_config, translate).validate(value)
