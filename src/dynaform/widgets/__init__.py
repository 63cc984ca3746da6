"""
Widgets de terminal para los componentes registrados.
"""

from dynaform.widgets.base import (
    ChoiceWidget,
    FieldAction,
    TextWidget,
    Widget,
    WidgetKind,
)
from dynaform.widgets.choices import (
    ConfirmWidget,
    RadioGroupWidget,
    SelectWidget,
    ToggleGroupWidget,
)
from dynaform.widgets.display import (
    BadgeWidget,
    ButtonWidget,
    LabelWidget,
    ProgressWidget,
    SeparatorWidget,
)
from dynaform.widgets.inputs import (
    DatePickerWidget,
    DateRangeWidget,
    InputWidget,
    OTPWidget,
    SliderWidget,
    TextareaWidget,
)
from dynaform.widgets.verification import VerificationWidget

__all__ = [
    "Widget",
    "WidgetKind",
    "FieldAction",
    "TextWidget",
    "ChoiceWidget",
    "InputWidget",
    "TextareaWidget",
    "OTPWidget",
    "SliderWidget",
    "DatePickerWidget",
    "DateRangeWidget",
    "ConfirmWidget",
    "SelectWidget",
    "RadioGroupWidget",
    "ToggleGroupWidget",
    "VerificationWidget",
    "LabelWidget",
    "ProgressWidget",
    "BadgeWidget",
    "SeparatorWidget",
    "ButtonWidget",
]
