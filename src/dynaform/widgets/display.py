"""Widgets de presentación: no producen valores ni se validan."""

from typing import TYPE_CHECKING, Any, Union

from rich.text import Text

from dynaform.cli.theme import get_console, get_palette
from dynaform.widgets.base import FieldAction, Widget, WidgetKind

if TYPE_CHECKING:
    from dynaform.renderer import BoundField, DisplayField


class DisplayWidget(Widget):
    kind = WidgetKind.DISPLAY

    def prompt(self, bound: "BoundField") -> tuple[FieldAction, Any]:
        self.render(bound)
        return FieldAction.NEXT, None


class LabelWidget(DisplayWidget):
    def render(self, field: Union["BoundField", "DisplayField"]) -> None:
        text = field.label or field.props.get("text") or ""
        if text:
            get_console().print(Text(text, style=get_palette().secondary))


class ProgressWidget(DisplayWidget):
    def render(self, field: Union["BoundField", "DisplayField"]) -> None:
        p = get_palette()
        maximum = float(field.props.get("max") or 100)
        value = float(field.props.get("value") or 0)
        ratio = max(0.0, min(1.0, value / maximum)) if maximum else 0.0

        width = 30
        filled = int(ratio * width)
        line = Text()
        if field.label:
            line.append(f"{field.label} ", style=p.label)
        line.append("█" * filled, style=p.primary)
        line.append("░" * (width - filled), style=p.muted)
        line.append(f" {int(ratio * 100)}%", style=p.muted)
        get_console().print(line)


class BadgeWidget(DisplayWidget):
    VARIANT_STYLES = {
        "default": "primary",
        "secondary": "secondary",
        "destructive": "error",
        "outline": "muted",
    }

    def render(self, field: Union["BoundField", "DisplayField"]) -> None:
        p = get_palette()
        color = getattr(p, self.VARIANT_STYLES.get(field.props.get("variant"), "primary"))
        get_console().print(Text(f" {field.label or ''} ", style=f"bold reverse {color}"))


class SeparatorWidget(DisplayWidget):
    def render(self, field: Union["BoundField", "DisplayField"]) -> None:
        get_console().rule(style=get_palette().border)


class ButtonWidget(DisplayWidget):
    """Los botones del formulario los maneja el runner; aquí sólo se muestran."""

    kind = WidgetKind.ACTION

    def render(self, field: Union["BoundField", "DisplayField"]) -> None:
        p = get_palette()
        get_console().print(Text(f"[ {field.label or field.field_name} ]", style=f"bold {p.accent}"))
