"""
Constructores de configuración: campos, pasos y formularios.

Permiten armar un FormConfig desde código sin escribir el JSON a mano.
"""

from typing import Any, Callable, Literal, Optional

from pydantic import ValidationError

from dynaform.components import ComponentName
from dynaform.conditions import Condition, as_condition
from dynaform.config import FieldConfig, FormConfig, StepConfig
from dynaform.errors import ConfigurationError


def create_field(
    field_name: str,
    component: str,
    props: Optional[dict] = None,
    condition: Optional[Condition] = None,
) -> FieldConfig:
    """Crea la configuración de un campo."""
    return FieldConfig(
        field_name=field_name,
        component=component,
        props=dict(props or {}),
        condition=as_condition(condition) if condition is not None else None,
    )


def _field_factory(component: ComponentName):
    def factory(field_name: str, props: Optional[dict] = None, condition: Optional[Condition] = None) -> FieldConfig:
        return create_field(field_name, component.value, props, condition)
    factory.__name__ = f"create_{component.name.lower()}_field"
    factory.__doc__ = f"Crea un campo {component.value}."
    return factory


create_input_field = _field_factory(ComponentName.INPUT)
create_textarea_field = _field_factory(ComponentName.TEXTAREA)
create_checkbox_field = _field_factory(ComponentName.CHECKBOX)
create_switch_field = _field_factory(ComponentName.SWITCH)
create_slider_field = _field_factory(ComponentName.SLIDER)
create_select_field = _field_factory(ComponentName.SELECT)
create_radio_group_field = _field_factory(ComponentName.RADIO_GROUP)
create_date_picker_field = _field_factory(ComponentName.DATE_PICKER)
create_date_range_picker_field = _field_factory(ComponentName.DATE_RANGE_PICKER)
create_toggle_group_field = _field_factory(ComponentName.TOGGLE_GROUP)
create_input_otp_field = _field_factory(ComponentName.INPUT_OTP)
create_verification_field = _field_factory(ComponentName.EKYC)
create_label_field = _field_factory(ComponentName.LABEL)
create_badge_field = _field_factory(ComponentName.BADGE)
create_separator_field = _field_factory(ComponentName.SEPARATOR)


# ============================================================================
# Campos de backend simplificados
# ============================================================================

def _length_rules(min_length: Optional[int], max_length: Optional[int]) -> list[dict]:
    rules = []
    if min_length:
        rules.append({"type": "minLength", "value": min_length, "messageKey": "form.error.minLength"})
    if max_length:
        rules.append({"type": "maxLength", "value": max_length, "messageKey": "form.error.maxLength"})
    return rules


def map_backend_field(backend_field: dict) -> FieldConfig:
    """
    Convierte un campo de backend simplificado en FieldConfig.

    Formato: {name, type: text|email|number|select|radio|checkbox|textarea,
    label?, required?, options?, min?, max?, minLength?, maxLength?}.
    Un tipo desconocido se trata como text.
    """
    name = backend_field["name"]
    kind = backend_field.get("type", "text")
    label = backend_field.get("label")
    options = backend_field.get("options") or []

    rules: list[dict] = []
    if backend_field.get("required"):
        rules.append({"type": "required", "messageKey": "form.error.required"})

    min_length = backend_field.get("minLength")
    max_length = backend_field.get("maxLength")

    if kind == "email":
        rules.append({"type": "email", "messageKey": "form.error.email.invalid"})
        return create_input_field(name, {"label": label, "type": "email", "validations": rules})
    if kind == "number":
        if backend_field.get("min") is not None:
            rules.append({"type": "min", "value": backend_field["min"], "messageKey": "form.error.min"})
        if backend_field.get("max") is not None:
            rules.append({"type": "max", "value": backend_field["max"], "messageKey": "form.error.max"})
        return create_input_field(name, {"label": label, "type": "number", "validations": rules})
    if kind == "select":
        return create_select_field(name, {"label": label, "options": options, "validations": rules})
    if kind == "radio":
        return create_radio_group_field(name, {"label": label, "options": options, "validations": rules})
    if kind == "checkbox":
        return create_checkbox_field(name, {"label": label, "validations": rules})
    if kind == "textarea":
        rules.extend(_length_rules(min_length, max_length))
        return create_textarea_field(name, {"label": label, "rows": 4, "validations": rules})

    if kind == "text":
        rules.extend(_length_rules(min_length, max_length))
    return create_input_field(name, {"label": label, "type": "text", "validations": rules})


def map_backend_fields(backend_fields: list[dict]) -> list[FieldConfig]:
    return [map_backend_field(f) for f in backend_fields]


# ============================================================================
# Pasos y formularios
# ============================================================================

def create_step(id: str, title: str, fields: list[FieldConfig], **options: Any) -> StepConfig:
    """Crea un paso; options admite description, step_validation, optional."""
    return StepConfig(id=id, title=title, fields=list(fields), **options)


def create_multi_step_form(steps: list[StepConfig], **options: Any) -> FormConfig:
    """Crea la configuración del formulario con los valores por defecto."""
    try:
        return FormConfig(steps=list(steps), **options)
    except ValidationError as e:
        raise ConfigurationError(f"Configuración de formulario inválida: {e}") from e


class MultiStepFormBuilder:
    """Constructor fluido de formularios multi-paso."""

    def __init__(self):
        self._steps: list[StepConfig] = []
        self._options: dict[str, Any] = {}

    def add_step(self, id: str, title: str, fields: list[FieldConfig], **options: Any) -> "MultiStepFormBuilder":
        self._steps.append(create_step(id, title, fields, **options))
        return self

    def set_initial_step(self, index: int) -> "MultiStepFormBuilder":
        self._options["initial_step"] = index
        return self

    def allow_back_navigation(self, allow: bool = True) -> "MultiStepFormBuilder":
        self._options["allow_back_navigation"] = allow
        return self

    def show_progress(self, show: bool = True) -> "MultiStepFormBuilder":
        self._options["show_progress"] = show
        return self

    def set_progress_style(self, style: Literal["steps", "bar", "dots"]) -> "MultiStepFormBuilder":
        self._options["progress_style"] = style
        return self

    def persist_data(self, persist: bool = True, key: Optional[str] = None) -> "MultiStepFormBuilder":
        self._options["persist_data"] = persist
        if key:
            self._options["persist_key"] = key
        return self

    def on_step_complete(self, callback: Callable[[str, dict], Any]) -> "MultiStepFormBuilder":
        self._options["on_step_complete"] = callback
        return self

    def on_complete(self, callback: Callable[[dict], Any]) -> "MultiStepFormBuilder":
        self._options["on_complete"] = callback
        return self

    def on_step_change(self, callback: Callable[[int, int], Any]) -> "MultiStepFormBuilder":
        self._options["on_step_change"] = callback
        return self

    def build(self) -> FormConfig:
        if not self._steps:
            raise ConfigurationError("MultiStepFormBuilder: se requiere al menos un paso")
        return create_multi_step_form(self._steps, **self._options)


def multi_step_form() -> MultiStepFormBuilder:
    return MultiStepFormBuilder()
