"""Tests para la conversión de entradas de los widgets de terminal."""

import json
from datetime import datetime

import pytest

from dynaform.builders import create_field
from dynaform.renderer import FieldRenderer
from dynaform.widgets import (
    DatePickerWidget,
    DateRangeWidget,
    OTPWidget,
    SliderWidget,
    VerificationWidget,
)
from dynaform.widgets.inputs import parse_date


def bound(component, props=None, on_change=None):
    return FieldRenderer().render_field(create_field("f", component, props), {}, on_change)


class TestSlider:
    def test_parse(self):
        field = bound("Slider", {"min": 0, "max": 10})
        widget = SliderWidget("Slider")
        assert widget.parse(field, "5") == 5
        assert isinstance(widget.parse(field, "5"), int)
        assert widget.parse(field, "2.5") == 2.5

    @pytest.mark.parametrize("text", ["abc", "-1", "11"])
    def test_out_of_range(self, text):
        field = bound("Slider", {"min": 0, "max": 10})
        with pytest.raises(ValueError):
            SliderWidget("Slider").parse(field, text)

    def test_list_default_is_shown_as_first_value(self):
        field = bound("Slider", {"defaultValue": [30]})
        assert SliderWidget("Slider").format_value(field, [30]) == "30"


class TestDates:
    def test_parse_date(self):
        assert parse_date("17/05/1990", "%d/%m/%Y") == datetime(1990, 5, 17)
        assert parse_date("1990-05-17", "%d/%m/%Y") == datetime(1990, 5, 17)
        assert parse_date("  ") is None
        with pytest.raises(ValueError):
            parse_date("ayer")

    def test_date_picker_format(self):
        field = bound("DatePicker", {"dateFormat": "%d/%m/%Y"})
        widget = DatePickerWidget("DatePicker")
        assert widget.parse(field, "01/02/2024") == datetime(2024, 2, 1)
        assert widget.format_value(field, datetime(2024, 2, 1)) == "01/02/2024"

    def test_date_range(self):
        field = bound("DateRangePicker")
        widget = DateRangeWidget("DateRangePicker")
        assert widget.parse(field, "2024-01-01..2024-01-31") == {
            "from": datetime(2024, 1, 1),
            "to": datetime(2024, 1, 31),
        }
        assert widget.parse(field, "2024-01-01..") == {"from": datetime(2024, 1, 1), "to": None}
        with pytest.raises(ValueError):
            widget.parse(field, "2024-02-01..2024-01-01")
        with pytest.raises(ValueError):
            widget.parse(field, "2024-02-01")


class TestTextValidator:
    def test_back_token_always_passes(self):
        field = bound("InputOTP", {"validations": [{"type": "required"}, {"type": "length", "value": 6}]})
        validate = OTPWidget("InputOTP").validator(field)
        assert validate("<") is True
        assert validate("123 456") is True
        assert validate("123") == "Debe tener exactamente 6 caracteres"

    def test_parse_error_message(self):
        validate = SliderWidget("Slider").validator(bound("Slider"))
        assert validate("abc") == "Debe ser un número"


class TestVerificationWidget:
    def test_parse_and_autofill(self, tmp_path):
        path = tmp_path / "resultado.json"
        path.write_text(json.dumps({
            "sessionId": "S-1",
            "ocr": {"name": "Ana Pérez", "birth_day": "17/05/1990", "gender": "F"},
        }), encoding="utf-8")

        changes = {}
        field = bound("Ekyc", on_change=changes.__setitem__)
        widget = VerificationWidget("Ekyc")

        status = widget.parse(field, str(path))
        assert status["completed"] is True
        assert status["sessionId"] == "S-1"

        applied = widget.complete(field, status)
        assert applied == ["fullName", "dateOfBirth", "gender"]
        assert changes == {"fullName": "Ana Pérez", "dateOfBirth": "1990-05-17", "gender": "female"}

    def test_empty_answer_skips(self):
        assert VerificationWidget("Ekyc").parse(bound("Ekyc"), "  ") is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError):
            VerificationWidget("Ekyc").parse(bound("Ekyc"), str(tmp_path / "no.json"))

    def test_empty_result_is_invalid(self, tmp_path):
        path = tmp_path / "vacio.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(ValueError, match="inválido"):
            VerificationWidget("Ekyc").parse(bound("Ekyc"), str(path))
