"""
Clases base de los widgets de terminal.

Un widget implementa un componente registrado: los de entrada preguntan con
questionary y devuelven (acción, valor); los de presentación sólo imprimen.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

import questionary

from dynaform.cli.styles import BACK_TOKEN, back_choice, get_prompt_style
from dynaform.cli.theme import get_console, get_palette

if TYPE_CHECKING:
    from dynaform.renderer import BoundField, DisplayField


class WidgetKind(Enum):
    """Familia del widget."""
    INPUT = "input"       # Produce un valor del formulario
    DISPLAY = "display"   # Sólo presentación
    ACTION = "action"     # Botones


class FieldAction(Enum):
    """Resultado de preguntar un campo."""
    NEXT = "next"       # Valor ingresado
    BACK = "back"       # Volver al paso anterior
    CANCEL = "cancel"   # Cancelar el formulario


class Widget(ABC):
    """Widget base."""

    kind = WidgetKind.INPUT

    def __init__(self, component: str):
        self.component = component

    @abstractmethod
    def prompt(self, bound: "BoundField") -> tuple[FieldAction, Any]:
        """Pregunta el valor del campo."""

    def render(self, field: Union["BoundField", "DisplayField"]) -> None:
        """Muestra el campo sin pedir entrada."""
        p = get_palette()
        get_console().print(f"[{p.label}]{field.label or field.field_name}[/]")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.component!r})"


def question(bound: "BoundField") -> str:
    """Texto de la pregunta: etiqueta, marca de requerido y descripción."""
    text = bound.label or bound.field_name
    if bound.required:
        text += " *"
    if bound.description:
        text += f" ({bound.description})"
    return text


class TextWidget(Widget):
    """Entrada de texto; "<" vuelve al paso anterior."""

    multiline = False

    def parse(self, bound: "BoundField", text: str) -> Any:
        """Convierte el texto ingresado; ValueError si no es convertible."""
        return text

    def format_value(self, bound: "BoundField", value: Any) -> str:
        return "" if value is None else str(value)

    def validator(self, bound: "BoundField") -> Callable[[str], Union[bool, str]]:
        """Validación en vivo para questionary: True o mensaje de error."""
        def validate(text: str) -> Union[bool, str]:
            if text.strip() == BACK_TOKEN:
                return True
            try:
                value = self.parse(bound, text)
            except ValueError as e:
                return str(e)
            return bound.check(value)
        return validate

    def ask(self, bound: "BoundField", default: str) -> Optional[str]:
        return questionary.text(
            question(bound),
            default=default,
            validate=self.validator(bound),
            multiline=self.multiline,
            instruction=bound.placeholder,
            style=get_prompt_style(),
        ).ask()

    def prompt(self, bound: "BoundField") -> tuple[FieldAction, Any]:
        answer = self.ask(bound, self.format_value(bound, bound.value))
        if answer is None:
            return FieldAction.CANCEL, None
        if answer.strip() == BACK_TOKEN:
            return FieldAction.BACK, None
        return FieldAction.NEXT, self.parse(bound, answer)


class ChoiceWidget(Widget):
    """Selección de una opción de props.options con opción de volver."""

    def prompt(self, bound: "BoundField") -> tuple[FieldAction, Any]:
        choices = [questionary.Choice(title=label, value=value) for label, value in bound.options]
        back = back_choice()
        choices.append(questionary.Choice(title=back, value=BACK_TOKEN))

        values = [value for _, value in bound.options]
        default = bound.value if bound.value in values else None

        answer = questionary.select(
            question(bound),
            choices=choices,
            default=default,
            style=get_prompt_style(),
        ).ask()
        if answer is None:
            return FieldAction.CANCEL, None
        if answer == BACK_TOKEN:
            return FieldAction.BACK, None
        return FieldAction.NEXT, answer
