"""Widgets de entrada de texto, número y fecha."""

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Optional

import questionary

from dynaform.cli.styles import get_prompt_style
from dynaform.widgets.base import TextWidget, question

if TYPE_CHECKING:
    from dynaform.renderer import BoundField


DEFAULT_DATE_FORMAT = "%Y-%m-%d"
RANGE_SEPARATOR = ".."


class InputWidget(TextWidget):
    """Input de una línea; type=password oculta lo ingresado."""

    def ask(self, bound: "BoundField", default: str) -> Optional[str]:
        if bound.props.get("type") == "password":
            return questionary.password(
                question(bound),
                validate=self.validator(bound),
                style=get_prompt_style(),
            ).ask()
        return super().ask(bound, default)


class TextareaWidget(TextWidget):
    multiline = True


class OTPWidget(TextWidget):
    """Código de un solo uso: sólo se eliminan espacios."""

    def parse(self, bound: "BoundField", text: str) -> Any:
        return "".join(text.split())


class SliderWidget(TextWidget):
    """Valor numérico dentro de [min, max] con paso opcional."""

    def parse(self, bound: "BoundField", text: str) -> Any:
        text = text.strip()
        try:
            value = float(text)
        except ValueError:
            raise ValueError("Debe ser un número") from None

        low = bound.props.get("min")
        high = bound.props.get("max")
        if low is not None and value < float(low):
            raise ValueError(f"Mínimo: {low}")
        if high is not None and value > float(high):
            raise ValueError(f"Máximo: {high}")
        return int(value) if value.is_integer() else value

    def format_value(self, bound: "BoundField", value: Any) -> str:
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        return "" if value is None else str(value)


def _date_format(bound: "BoundField") -> str:
    return bound.props.get("dateFormat") or DEFAULT_DATE_FORMAT


def parse_date(text: str, fmt: str = DEFAULT_DATE_FORMAT) -> Optional[datetime]:
    """Texto -> datetime con el formato dado (también acepta ISO)."""
    text = text.strip()
    if not text:
        return None
    try:
        return datetime.strptime(text, fmt)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Fecha inválida (formato {fmt})") from None


def format_date(value: Any, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime(fmt)
    return "" if value is None else str(value)


class DatePickerWidget(TextWidget):
    """Fecha con el formato de props.dateFormat."""

    def parse(self, bound: "BoundField", text: str) -> Any:
        parsed = parse_date(text, _date_format(bound))
        return parsed if parsed is not None else ""

    def format_value(self, bound: "BoundField", value: Any) -> str:
        return format_date(value, _date_format(bound))


class DateRangeWidget(TextWidget):
    """Rango "desde..hasta"; cualquiera de los extremos puede omitirse."""

    def parse(self, bound: "BoundField", text: str) -> Any:
        if not text.strip():
            return None
        if RANGE_SEPARATOR not in text:
            raise ValueError(f"Use el formato desde{RANGE_SEPARATOR}hasta")
        start, end = text.split(RANGE_SEPARATOR, 1)
        fmt = _date_format(bound)
        value = {"from": parse_date(start, fmt), "to": parse_date(end, fmt)}
        if value["from"] and value["to"] and value["from"] > value["to"]:
            raise ValueError("La fecha inicial es posterior a la final")
        return value

    def format_value(self, bound: "BoundField", value: Any) -> str:
        if not isinstance(value, dict):
            return ""
        fmt = _date_format(bound)
        return f"{format_date(value.get('from'), fmt)}{RANGE_SEPARATOR}{format_date(value.get('to'), fmt)}"
