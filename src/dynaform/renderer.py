"""
Renderizado de campos: une registro, esquema, visibilidad y textos.

Para cada campo visible resuelve su widget, genera su esquema y lo enlaza
con el valor actual y el setter del orquestador. Los errores de
configuración (componente desconocido, condición con referencias
inexistentes) se convierten en marcadores en línea; el resto del paso se
renderiza igual.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Union

from dynaform.components import is_form_component
from dynaform.conditions import DEFAULT_MAX_DEPTH, dangling_references, is_visible
from dynaform.config import FieldConfig, StepConfig
from dynaform.defaults import apply_defaults, compute_default_values
from dynaform.errors import ConfigurationError
from dynaform.i18n import Translator, resolve_text
from dynaform.registry import ComponentRegistry, default_registry
from dynaform.schema import FieldSchema, FieldValidationResult, generate_field_schema
from dynaform.widgets import Widget, WidgetKind

logger = logging.getLogger(__name__)

SetValue = Callable[[str, Any], None]


def _ignore(name: str, value: Any) -> None:
    return None


@dataclass
class UnknownComponent:
    """Marcador: el componente no está registrado."""
    field_name: str
    component: str

    @property
    def error(self) -> ConfigurationError:
        return ConfigurationError(f"Componente desconocido: {self.component}", self.field_name)

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass
class BrokenCondition:
    """Marcador: la condición referencia campos que no existen."""
    field_name: str
    missing: set[str] = field(default_factory=set)

    @property
    def error(self) -> ConfigurationError:
        names = ", ".join(sorted(self.missing))
        return ConfigurationError(f"La condición referencia campos inexistentes: {names}", self.field_name)

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass
class DisplayField:
    """Componente sin semántica de formulario (texto, progreso, botones)."""
    config: FieldConfig
    widget: Widget
    label: Optional[str] = None

    @property
    def field_name(self) -> str:
        return self.config.field_name

    @property
    def component(self) -> str:
        return self.config.component

    @property
    def props(self) -> dict:
        return self.config.props

    def render(self) -> None:
        self.widget.render(self)


@dataclass
class BoundField:
    """Campo visible enlazado a formData."""
    config: FieldConfig
    widget: Widget
    schema: FieldSchema
    value: Any = None
    label: Optional[str] = None
    placeholder: Optional[str] = None
    description: Optional[str] = None
    options: list[tuple[str, Any]] = field(default_factory=list)
    on_change: SetValue = _ignore

    @property
    def field_name(self) -> str:
        return self.config.field_name

    @property
    def component(self) -> str:
        return self.config.component

    @property
    def props(self) -> dict:
        return self.config.props

    @property
    def required(self) -> bool:
        return self.schema.required

    def validate(self, value: Any) -> FieldValidationResult:
        return self.schema.validate(value)

    def check(self, value: Any) -> Union[bool, str]:
        """True si el valor es válido; si no, el mensaje de error."""
        result = self.validate(value)
        return True if result.success else result.error

    def set_value(self, value: Any) -> FieldValidationResult:
        """Guarda el valor (parseado si es válido) y devuelve la validación."""
        result = self.validate(value)
        stored = result.data if result.success else value
        self.value = stored
        self.on_change(self.field_name, stored)
        return result

    def set_other(self, name: str, value: Any) -> None:
        """Setter de otro campo (autocompletado)."""
        self.on_change(name, value)

    def prompt(self):
        return self.widget.prompt(self)

    def render(self) -> None:
        self.widget.render(self)


RenderedField = Union[BoundField, DisplayField, UnknownComponent, BrokenCondition]


class FieldRenderer:
    """Construye los campos renderizables de un paso."""

    def __init__(
        self,
        registry: Optional[ComponentRegistry] = None,
        translator: Optional[Translator] = None,
        namespace: Optional[str] = None,
        known_fields: Optional[Iterable[str]] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        """
        Args:
            registry: Registro de componentes (default: tabla estática)
            translator: Traductor raíz para etiquetas y mensajes
            namespace: Espacio de claves relativas del llamador
            known_fields: Campos del formulario (para detectar referencias colgantes)
            max_depth: Profundidad máxima de condiciones
        """
        self.registry = registry or default_registry
        self.translator = translator
        self.namespace = namespace
        self.known_fields = set(known_fields) if known_fields is not None else None
        self.max_depth = max_depth

        namespaced = getattr(translator, "namespaced", None)
        self._namespaced = namespaced(namespace) if (namespace and namespaced) else None

    def text(self, props: dict, name: str) -> Optional[str]:
        """Texto de props con triple respaldo (clave raíz, clave relativa, literal)."""
        return resolve_text(props.get(f"{name}Key"), props.get(name), self.translator, self._namespaced)

    def options(self, props: dict) -> list[tuple[str, Any]]:
        """Opciones (etiqueta, valor) de props.options."""
        result = []
        for option in props.get("options") or []:
            if isinstance(option, dict):
                value = option.get("value")
                label = self.text(option, "label") or str(value)
            else:
                value = option
                label = str(option)
            result.append((label, value))
        return result

    def render_field(
        self,
        field_config: FieldConfig,
        form_data: dict,
        on_change: Optional[SetValue] = None,
    ) -> Optional[RenderedField]:
        """
        Renderiza un campo.

        Returns:
            None si el campo está oculto; un marcador si hay un error de
            configuración; DisplayField o BoundField en otro caso.
        """
        fc = apply_defaults(field_config)

        if self.known_fields is not None and fc.condition is not None:
            missing = dangling_references(fc.condition, self.known_fields)
            if missing:
                logger.error(
                    "Campo '%s': la condición referencia campos inexistentes: %s",
                    fc.field_name, ", ".join(sorted(missing)),
                )
                return BrokenCondition(fc.field_name, missing)

        if not is_visible(fc, form_data, self.max_depth):
            return None

        widget = self.registry.get(fc.component)
        if widget is None:
            return UnknownComponent(fc.field_name, fc.component)

        label = self.text(fc.props, "label")
        if widget.kind != WidgetKind.INPUT or not is_form_component(fc.component):
            return DisplayField(config=fc, widget=widget, label=label)

        value = form_data.get(fc.field_name)
        if value is None:
            value = compute_default_values([fc]).get(fc.field_name)

        return BoundField(
            config=fc,
            widget=widget,
            schema=generate_field_schema(fc, self.translator),
            value=value,
            label=label,
            placeholder=self.text(fc.props, "placeholder"),
            description=self.text(fc.props, "description"),
            options=self.options(fc.props),
            on_change=on_change or _ignore,
        )

    def render_step(
        self,
        step: StepConfig,
        form_data: dict,
        on_change: Optional[SetValue] = None,
    ) -> list[RenderedField]:
        """Campos renderizables del paso (los ocultos se omiten)."""
        rendered = []
        for fc in step.fields:
            item = self.render_field(fc, form_data, on_change)
            if item is not None:
                rendered.append(item)
        return rendered
