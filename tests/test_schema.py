"""Tests para el generador de esquemas de validación."""

import logging
from datetime import date, datetime

import pytest

from dynaform.builders import create_field
from dynaform.errors import FieldValidationError
from dynaform.i18n import MessageCatalog
from dynaform.schema import (
    generate_field_schema,
    generate_schema,
    is_validation_rule_supported,
    validate_field_value,
)


def field(component="Input", rules=None, **props):
    return create_field("f", component, {**props, "validations": rules or []})


def valid(fc, value):
    return validate_field_value(value, fc).success


class TestRequiredIsExplicit:
    """La obligatoriedad sólo la define la regla required."""

    def test_optional_min_length(self):
        """[minLength(2)]: "" pasa, "a" falla."""
        fc = field(rules=[{"type": "minLength", "value": 2}])
        assert valid(fc, "") is True
        assert valid(fc, None) is True
        assert valid(fc, "a") is False
        assert valid(fc, "ab") is True

    def test_required_min_length(self):
        """[required, minLength(2)]: "" y "a" fallan, "ab" pasa."""
        fc = field(rules=[{"type": "required"}, {"type": "minLength", "value": 2}])
        assert valid(fc, "") is False
        assert valid(fc, "a") is False
        assert valid(fc, "ab") is True

    def test_required_message(self):
        fc = field(rules=[{"type": "required"}])
        result = validate_field_value("", fc)
        assert result.success is False
        assert result.error == "Campo requerido"

    def test_optional_multiple_toggle_accepts_empty_list(self):
        fc = field("ToggleGroup", type="multiple")
        assert valid(fc, []) is True
        assert valid(fc, ["a", "b"]) is True

    def test_required_multiple_toggle_rejects_empty_list(self):
        fc = field("ToggleGroup", rules=[{"type": "required"}], type="multiple")
        assert valid(fc, []) is False


class TestBaseTypes:
    """Tests para el tipo base por familia de componente."""

    def test_checkbox_is_boolean(self):
        fc = field("Checkbox")
        assert valid(fc, True) is True
        assert valid(fc, False) is True
        assert valid(fc, "yes") is False

    def test_required_checkbox_must_be_true(self):
        fc = field("Switch", rules=[{"type": "required"}])
        assert valid(fc, True) is True
        assert valid(fc, False) is False

    def test_slider_is_number(self):
        fc = field("Slider", rules=[{"type": "min", "value": 10}, {"type": "max", "value": 20}])
        assert valid(fc, 15) is True
        assert valid(fc, 5) is False
        assert valid(fc, 25) is False

    def test_date_picker_coerces_text(self):
        fc = field("DatePicker")
        result = validate_field_value("2024-03-01", fc)
        assert result.success is True
        assert result.data == datetime(2024, 3, 1)
        assert validate_field_value(date(2024, 3, 1), fc).data == datetime(2024, 3, 1)
        assert valid(fc, "no es fecha") is False

    def test_date_range(self):
        fc = field("DateRangePicker")
        result = validate_field_value({"from": "2024-01-01", "to": "2024-01-31"}, fc)
        assert result.success is True
        assert result.data["from"] == datetime(2024, 1, 1)
        assert result.data["to"] == datetime(2024, 1, 31)
        assert valid(fc, {"from": "2024-01-01"}) is True

    def test_verification_field(self):
        fc = field("Ekyc", rules=[{"type": "required"}])
        assert valid(fc, {"completed": True, "sessionId": "abc"}) is True
        assert valid(fc, True) is True
        assert valid(fc, None) is False
        assert valid(fc, "done") is False


class TestRules:
    """Tests para la tabla regla -> restricción."""

    @pytest.mark.parametrize("rule,good,bad", [
        ({"type": "maxLength", "value": 3}, "abc", "abcd"),
        ({"type": "length", "value": 4}, "1234", "123"),
        ({"type": "email"}, "ana@example.com", "ana@"),
        ({"type": "url"}, "https://example.com", "example"),
        ({"type": "regex", "value": "^[A-Z]+$"}, "ABC", "abc"),
        ({"type": "includes", "value": "@"}, "a@b", "ab"),
        ({"type": "startsWith", "value": "+598"}, "+598 99", "099"),
        ({"type": "endsWith", "value": ".uy"}, "web.uy", "web.com"),
        ({"type": "uuid"}, "123e4567-e89b-12d3-a456-426614174000", "123"),
        ({"type": "cuid"}, "cjld2cjxh0000qzrmn831i7rn", "xyz"),
    ])
    def test_string_rules(self, rule, good, bad):
        fc = field(rules=[rule])
        assert valid(fc, good) is True
        assert valid(fc, bad) is False

    def test_number_rule_coerces_text(self):
        fc = field(rules=[{"type": "number"}, {"type": "min", "value": 18}])
        result = validate_field_value("21", fc)
        assert result.success is True
        assert result.data == 21.0
        assert valid(fc, "17") is False
        assert valid(fc, "abc") is False

    def test_min_and_max_accumulate(self):
        fc = field(rules=[{"type": "min", "value": 1}, {"type": "max", "value": 5}])
        assert valid(fc, "3") is True
        assert valid(fc, "0") is False
        assert valid(fc, "6") is False

    def test_integer(self):
        fc = field(rules=[{"type": "integer"}])
        result = validate_field_value("4", fc)
        assert result.success is True
        assert result.data == 4
        assert isinstance(result.data, int)
        assert valid(fc, "4.5") is False

    def test_positive_and_negative(self):
        assert valid(field(rules=[{"type": "positive"}]), "2") is True
        assert valid(field(rules=[{"type": "positive"}]), "-2") is False
        assert valid(field(rules=[{"type": "negative"}]), "-2") is True

    def test_array_rule_replaces_base(self):
        fc = field(rules=[{"type": "array"}])
        assert valid(fc, ["a"]) is True
        assert valid(fc, "a") is False

    def test_unknown_rule_is_skipped(self, caplog):
        """Una regla desconocida se registra y no impide generar el esquema."""
        fc = field(rules=[{"type": "isbn"}, {"type": "minLength", "value": 2}])
        with caplog.at_level(logging.WARNING, logger="dynaform.schema"):
            schema = generate_field_schema(fc)
        assert "isbn" in caplog.text
        assert schema.validate("a").success is False
        assert schema.validate("ab").success is True

    def test_supported_rules(self):
        assert is_validation_rule_supported("email") is True
        assert is_validation_rule_supported("isbn") is False


class TestMessages:
    """Tests para mensajes de error."""

    def test_default_message_includes_value(self):
        result = validate_field_value("a", field(rules=[{"type": "minLength", "value": 3}]))
        assert result.error == "Mínimo 3 caracteres"

    def test_message_key_is_translated(self):
        catalog = MessageCatalog({"errors": {"short": "Al menos {value} letras"}})
        fc = field(rules=[{"type": "minLength", "value": 3, "messageKey": "errors.short"}])
        result = validate_field_value("a", fc, catalog)
        assert result.error == "Al menos 3 letras"


class TestStepSchema:
    """Tests para esquemas de paso."""

    def test_display_components_are_skipped(self):
        fields = [
            create_field("title", "Label", {"label": "Hola"}),
            create_field("name", "Input", {"validations": [{"type": "required"}]}),
        ]
        schema = generate_schema(fields)
        assert "title" not in schema
        assert "name" in schema
        assert len(schema) == 1

    def test_step_validation_collects_errors(self):
        fields = [
            create_field("name", "Input", {"validations": [{"type": "required"}]}),
            create_field("email", "Input", {"validations": [{"type": "email"}]}),
            create_field("nickname", "Input", {"validations": [{"type": "minLength", "value": 2}]}),
        ]
        result = generate_schema(fields).validate({"email": "nope", "extra": 1})
        assert result.success is False
        assert set(result.errors) == {"name", "email"}

    def test_parse_raises_field_validation_error(self):
        schema = generate_schema([create_field("name", "Input", {"validations": [{"type": "required"}]})])
        with pytest.raises(FieldValidationError) as exc_info:
            schema.parse({})
        assert "name" in exc_info.value.errors
        assert schema.parse({"name": "Ana"}) == {"name": "Ana"}
