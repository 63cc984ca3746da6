"""Widgets booleanos y de selección."""

from typing import TYPE_CHECKING, Any

import questionary

from dynaform.cli.styles import get_prompt_style
from dynaform.components import is_multiple_toggle
from dynaform.widgets.base import ChoiceWidget, FieldAction, Widget, question

if TYPE_CHECKING:
    from dynaform.renderer import BoundField


class ConfirmWidget(Widget):
    """Checkbox / Switch: pregunta Sí/No."""

    def prompt(self, bound: "BoundField") -> tuple[FieldAction, Any]:
        answer = questionary.confirm(
            question(bound),
            default=bool(bound.value),
            style=get_prompt_style(),
        ).ask()
        if answer is None:
            return FieldAction.CANCEL, None
        return FieldAction.NEXT, answer


class SelectWidget(ChoiceWidget):
    pass


class RadioGroupWidget(ChoiceWidget):
    pass


class ToggleGroupWidget(ChoiceWidget):
    """Selección única, o múltiple con props.type == "multiple"."""

    def prompt(self, bound: "BoundField") -> tuple[FieldAction, Any]:
        if not is_multiple_toggle(bound.component, bound.props):
            return super().prompt(bound)

        current = bound.value if isinstance(bound.value, list) else []
        choices = [
            questionary.Choice(title=label, value=value, checked=value in current)
            for label, value in bound.options
        ]
        answer = questionary.checkbox(
            question(bound),
            choices=choices,
            validate=lambda selected: bound.check(list(selected)),
            style=get_prompt_style(),
        ).ask()
        if answer is None:
            return FieldAction.CANCEL, None
        return FieldAction.NEXT, list(answer)
