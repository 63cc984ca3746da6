"""
Props por defecto de cada componente registrado.

La configuración del backend se combina con estos valores: los escalares
del backend tienen prioridad y las listas de validaciones se concatenan
(primero las del default).
"""

import logging
from typing import Any, Optional

from dynaform.components import BOOLEAN_COMPONENTS, NUMBER_COMPONENTS, ComponentName
from dynaform.config import FieldConfig

logger = logging.getLogger(__name__)


DEFAULT_FIELD_PROPS: dict[str, dict[str, Any]] = {
    ComponentName.INPUT.value: {
        "type": "text",
        "labelKey": "form.field.default.label",
        "placeholderKey": "form.field.default.placeholder",
    },
    ComponentName.TEXTAREA.value: {
        "labelKey": "form.field.textarea.label",
        "placeholderKey": "form.field.textarea.placeholder",
        "rows": 4,
    },
    ComponentName.CHECKBOX.value: {"labelKey": "form.field.checkbox.label"},
    ComponentName.SWITCH.value: {"labelKey": "form.field.switch.label"},
    ComponentName.SLIDER.value: {
        "labelKey": "form.field.slider.label",
        "min": 0,
        "max": 100,
        "step": 1,
        "defaultValue": [50],
    },
    ComponentName.SELECT.value: {
        "labelKey": "form.field.select.label",
        "placeholderKey": "form.field.select.placeholder",
        "options": [],
    },
    ComponentName.RADIO_GROUP.value: {
        "labelKey": "form.field.radiogroup.label",
        "options": [],
        "direction": "vertical",
    },
    ComponentName.DATE_PICKER.value: {
        "labelKey": "form.field.datepicker.label",
        "placeholderKey": "form.field.datepicker.placeholder",
        "dateFormat": "%Y-%m-%d",
    },
    ComponentName.DATE_RANGE_PICKER.value: {
        "labelKey": "form.field.daterangepicker.label",
        "placeholderKey": "form.field.daterangepicker.placeholder",
        "dateFormat": "%Y-%m-%d",
    },
    ComponentName.TOGGLE_GROUP.value: {
        "labelKey": "form.field.togglegroup.label",
        "options": [],
        "type": "single",
    },
    ComponentName.INPUT_OTP.value: {
        "labelKey": "form.field.inputotp.label",
        "maxLength": 6,
        "pattern": "^[0-9]+$",
    },
    ComponentName.EKYC.value: {"labelKey": "form.field.ekyc.label"},
    ComponentName.BADGE.value: {"labelKey": "form.badge.default.label", "variant": "default"},
    ComponentName.SEPARATOR.value: {"orientation": "horizontal"},
    ComponentName.BUTTON.value: {"labelKey": "form.button.default.label", "variant": "default"},
    ComponentName.LABEL.value: {"labelKey": "form.label.default.text"},
    ComponentName.PROGRESS.value: {"value": 0, "max": 100, "labelKey": "form.progress.default.label"},
}


TEXT_PROPS = ("label", "placeholder", "description")


def get_default_props(component: str) -> Optional[dict]:
    """Props por defecto de un componente (copia) o None."""
    props = DEFAULT_FIELD_PROPS.get(component)
    return dict(props) if props is not None else None


def merge_with_defaults(component: str, backend_props: Optional[dict] = None) -> dict:
    """
    Combina props del backend con los defaults del componente.

    Args:
        component: Nombre del componente
        backend_props: Props recibidos en la configuración

    Returns:
        Props combinados; validations = defaults + backend
    """
    backend_props = backend_props or {}
    defaults = get_default_props(component)
    if defaults is None:
        logger.warning("Sin configuración por defecto para el componente: %s", component)
        return dict(backend_props)

    # Texto literal del backend sin clave propia: se descarta la clave por defecto
    for name in TEXT_PROPS:
        if backend_props.get(name) is not None and f"{name}Key" not in backend_props:
            defaults.pop(f"{name}Key", None)

    merged = {**defaults, **backend_props}
    merged["validations"] = [
        *(defaults.get("validations") or []),
        *(backend_props.get("validations") or []),
    ]
    return merged


def apply_defaults(field_config: FieldConfig) -> FieldConfig:
    """Nueva FieldConfig con props combinados con sus defaults."""
    merged = merge_with_defaults(field_config.component, field_config.props)
    return field_config.model_copy(update={"props": merged})


def compute_default_values(fields: list[FieldConfig], provided: Optional[dict] = None) -> dict:
    """
    Valores iniciales para los campos sin valor.

    Checkbox/Switch -> False, Slider -> defaultValue (o 0),
    requeridos -> None, opcionales -> "".
    """
    values = dict(provided or {})
    for fc in fields:
        if values.get(fc.field_name) is not None:
            continue
        if fc.component in BOOLEAN_COMPONENTS:
            values[fc.field_name] = False
        elif fc.component in NUMBER_COMPONENTS:
            default = fc.props.get("defaultValue")
            if isinstance(default, (list, tuple)):
                default = default[0] if default else None
            values[fc.field_name] = default if default is not None else 0
        else:
            values[fc.field_name] = None if fc.is_required else ""
    return values
