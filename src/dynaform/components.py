"""Nombres de componentes registrables y sus familias."""

from enum import Enum


class ComponentName(str, Enum):
    """Componentes que la configuración puede referenciar."""
    # Entradas básicas
    INPUT = "Input"
    TEXTAREA = "Textarea"
    CHECKBOX = "Checkbox"
    SWITCH = "Switch"
    SLIDER = "Slider"
    # Entradas compuestas
    SELECT = "Select"
    RADIO_GROUP = "RadioGroup"
    DATE_PICKER = "DatePicker"
    DATE_RANGE_PICKER = "DateRangePicker"
    TOGGLE_GROUP = "ToggleGroup"
    INPUT_OTP = "InputOTP"
    EKYC = "Ekyc"  # Verificación de identidad
    # Presentación
    LABEL = "Label"
    PROGRESS = "Progress"
    BADGE = "Badge"
    SEPARATOR = "Separator"
    # Acciones
    BUTTON = "Button"


BOOLEAN_COMPONENTS = frozenset({ComponentName.CHECKBOX.value, ComponentName.SWITCH.value})
NUMBER_COMPONENTS = frozenset({ComponentName.SLIDER.value})

# Sin semántica de formulario: no se validan ni se enlazan a formData
DISPLAY_COMPONENTS = frozenset({
    ComponentName.LABEL.value,
    ComponentName.PROGRESS.value,
    ComponentName.BADGE.value,
    ComponentName.SEPARATOR.value,
    ComponentName.BUTTON.value,
})


def is_form_component(component: str) -> bool:
    """True si el componente produce un valor del formulario."""
    return component not in DISPLAY_COMPONENTS


def is_multiple_toggle(component: str, props: dict) -> bool:
    """ToggleGroup configurado para selección múltiple."""
    return component == ComponentName.TOGGLE_GROUP.value and (props or {}).get("type") == "multiple"
