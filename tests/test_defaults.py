"""Tests para props por defecto y catálogo de mensajes."""

import json
import logging

from dynaform.builders import create_field
from dynaform.defaults import compute_default_values, get_default_props, merge_with_defaults
from dynaform.i18n import MessageCatalog, resolve_text


class TestMergeWithDefaults:
    def test_backend_scalars_win(self):
        props = merge_with_defaults("Slider", {"max": 10})
        assert props["max"] == 10
        assert props["min"] == 0
        assert props["labelKey"] == "form.field.slider.label"

    def test_validations_are_concatenated(self):
        props = merge_with_defaults("Input", {"validations": [{"type": "email"}]})
        assert props["validations"] == [{"type": "email"}]

    def test_literal_text_drops_default_key(self):
        props = merge_with_defaults("Input", {"label": "Apodo", "placeholderKey": "mine.placeholder"})
        assert "labelKey" not in props
        assert props["placeholderKey"] == "mine.placeholder"

    def test_explicit_key_is_kept(self):
        props = merge_with_defaults("Input", {"label": "Apodo", "labelKey": "onboarding.nickname"})
        assert props["labelKey"] == "onboarding.nickname"
        assert props["label"] == "Apodo"

    def test_unknown_component(self, caplog):
        with caplog.at_level(logging.WARNING, logger="dynaform.defaults"):
            assert merge_with_defaults("Carousel", {"a": 1}) == {"a": 1}
        assert "Carousel" in caplog.text

    def test_defaults_are_copies(self):
        get_default_props("Input")["type"] = "password"
        assert get_default_props("Input")["type"] == "text"


class TestComputeDefaultValues:
    def test_by_component(self):
        fields = [
            create_field("ok", "Checkbox"),
            create_field("n", "Slider", {"defaultValue": [25]}),
            create_field("m", "Slider"),
            create_field("name", "Input", {"validations": [{"type": "required"}]}),
            create_field("nick", "Input"),
        ]
        assert compute_default_values(fields) == {"ok": False, "n": 25, "m": 0, "name": None, "nick": ""}

    def test_provided_values_win(self):
        fields = [create_field("ok", "Switch"), create_field("nick", "Input")]
        assert compute_default_values(fields, {"ok": True}) == {"ok": True, "nick": ""}


class TestMessageCatalog:
    def test_lookup_and_format(self):
        catalog = MessageCatalog({"form": {"error": {"min": "Mínimo {value}"}}})
        assert catalog.has("form.error.min") is True
        assert catalog("form.error.min", {"value": 3}) == "Mínimo 3"
        assert catalog("form.error.min", {"other": 1}) == "Mínimo {value}"

    def test_missing_key_returns_key(self):
        catalog = MessageCatalog({"form": {"error": {}}})
        assert catalog.has("form.error") is False
        assert catalog("form.error.nada") == "form.error.nada"

    def test_namespaced(self):
        catalog = MessageCatalog({"onboarding": {"email": "Correo"}})
        view = catalog.namespaced("onboarding")
        assert view("email") == "Correo"
        assert catalog.namespaced(None) is catalog

    def test_from_file(self, tmp_path):
        path = tmp_path / "es.json"
        path.write_text(json.dumps({"a": {"b": "c"}}), encoding="utf-8")
        assert MessageCatalog.from_file(path)("a.b") == "c"
        assert MessageCatalog.from_file(tmp_path / "nada.json").has("a.b") is False

    def test_resolve_text(self):
        root = MessageCatalog({"form": {"x": "raíz"}})
        scoped = MessageCatalog({"app": {"x": "relativo"}}).namespaced("app")
        assert resolve_text("form.x", "literal", root, scoped) == "raíz"
        assert resolve_text("x", "literal", root, scoped) == "relativo"
        assert resolve_text("y", "literal", root, scoped) == "literal"
        assert resolve_text(None, "literal", root, scoped) == "literal"
