"""Tests para el registro de componentes."""

import logging

import pytest

from dynaform.components import ComponentName, is_form_component
from dynaform.registry import COMPONENT_TABLE, ComponentRegistry, default_registry
from dynaform.widgets import InputWidget, Widget, WidgetKind


class TestComponentRegistry:
    """Tests para ComponentRegistry."""

    def test_unknown_component_returns_none(self, caplog):
        """get() de un nombre desconocido devuelve None sin lanzar."""
        with caplog.at_level(logging.ERROR, logger="dynaform.registry"):
            assert default_registry.get("DoesNotExist") is None
        assert "DoesNotExist" in caplog.text

    def test_is_registered(self):
        assert default_registry.is_registered("Input") is True
        assert default_registry.is_registered("input") is False
        assert "Slider" in default_registry

    @pytest.mark.parametrize("name", [c.value for c in ComponentName])
    def test_every_component_is_registered(self, name):
        widget = default_registry.get(name)
        assert isinstance(widget, Widget)
        assert widget.component == name

    def test_display_components_have_display_kind(self):
        for name in [c.value for c in ComponentName]:
            widget = default_registry.get(name)
            assert (widget.kind == WidgetKind.INPUT) == is_form_component(name)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            COMPONENT_TABLE["Custom"] = InputWidget("Custom")

    def test_custom_table(self):
        registry = ComponentRegistry({"Custom": InputWidget("Custom")})
        assert registry.names() == ["Custom"]
        assert registry.get("Input") is None
        assert len(registry) == 1
