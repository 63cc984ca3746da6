"""
Registro de componentes: nombre de componente -> widget.

La tabla se arma una sola vez al importar el módulo; no hay registro
dinámico. Un nombre desconocido devuelve None y deja un diagnóstico en el
log para que el renderer muestre un marcador de error en su lugar.
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from dynaform.components import ComponentName
from dynaform.widgets import (
    BadgeWidget,
    ButtonWidget,
    ConfirmWidget,
    DatePickerWidget,
    DateRangeWidget,
    InputWidget,
    LabelWidget,
    OTPWidget,
    ProgressWidget,
    RadioGroupWidget,
    SelectWidget,
    SeparatorWidget,
    SliderWidget,
    TextareaWidget,
    ToggleGroupWidget,
    VerificationWidget,
    Widget,
)

logger = logging.getLogger(__name__)


_WIDGET_CLASSES = {
    ComponentName.INPUT: InputWidget,
    ComponentName.TEXTAREA: TextareaWidget,
    ComponentName.CHECKBOX: ConfirmWidget,
    ComponentName.SWITCH: ConfirmWidget,
    ComponentName.SLIDER: SliderWidget,
    ComponentName.SELECT: SelectWidget,
    ComponentName.RADIO_GROUP: RadioGroupWidget,
    ComponentName.DATE_PICKER: DatePickerWidget,
    ComponentName.DATE_RANGE_PICKER: DateRangeWidget,
    ComponentName.TOGGLE_GROUP: ToggleGroupWidget,
    ComponentName.INPUT_OTP: OTPWidget,
    ComponentName.EKYC: VerificationWidget,
    ComponentName.LABEL: LabelWidget,
    ComponentName.PROGRESS: ProgressWidget,
    ComponentName.BADGE: BadgeWidget,
    ComponentName.SEPARATOR: SeparatorWidget,
    ComponentName.BUTTON: ButtonWidget,
}

COMPONENT_TABLE: Mapping[str, Widget] = MappingProxyType({
    name.value: cls(name.value) for name, cls in _WIDGET_CLASSES.items()
})


class ComponentRegistry:
    """Búsqueda O(1) de widgets por nombre de componente."""

    def __init__(self, table: Optional[Mapping[str, Widget]] = None):
        self._table = MappingProxyType(dict(table)) if table is not None else COMPONENT_TABLE

    def is_registered(self, name: str) -> bool:
        return name in self._table

    def get(self, name: str) -> Optional[Widget]:
        """Widget del componente, o None si no está registrado."""
        widget = self._table.get(name)
        if widget is None:
            logger.error("Componente no registrado: %s", name)
        return widget

    def names(self) -> list[str]:
        return sorted(self._table)

    def __contains__(self, name: str) -> bool:
        return self.is_registered(name)

    def __len__(self) -> int:
        return len(self._table)


default_registry = ComponentRegistry()
