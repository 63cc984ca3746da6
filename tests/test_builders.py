"""Tests para los constructores de configuración."""

import pytest

from dynaform.builders import (
    MultiStepFormBuilder,
    create_field,
    create_multi_step_form,
    create_select_field,
    create_slider_field,
    create_step,
    map_backend_field,
    map_backend_fields,
    multi_step_form,
)
from dynaform.conditions import is_
from dynaform.config import ConditionRule, StepValidation
from dynaform.errors import ConfigurationError


def rule_types(fc):
    return [r.type for r in fc.validations]


class TestCreateField:
    def test_create_field(self):
        fc = create_field("age", "Input", {"validations": [{"type": "min", "value": 18}]})
        assert fc.field_name == "age"
        assert fc.validations[0].value == 18
        assert fc.condition is None

    def test_condition_from_dict(self):
        fc = create_field("company", "Input", condition={"fieldName": "job", "operator": "equals", "value": "x"})
        assert isinstance(fc.condition, ConditionRule)

    def test_factories_set_component(self):
        assert create_slider_field("n").component == "Slider"
        fc = create_select_field("plan", {"options": ["a"]}, condition=is_.not_empty("email"))
        assert fc.component == "Select"
        assert fc.condition.field_name == "email"


class TestMapBackendField:
    def test_required_email(self):
        fc = map_backend_field({"name": "email", "type": "email", "label": "Correo", "required": True})
        assert fc.component == "Input"
        assert fc.props["type"] == "email"
        assert rule_types(fc) == ["required", "email"]
        assert fc.validations[0].message_key == "form.error.required"

    def test_number_limits(self):
        fc = map_backend_field({"name": "age", "type": "number", "min": 0, "max": 120})
        assert rule_types(fc) == ["min", "max"]
        assert [r.value for r in fc.validations] == [0, 120]

    def test_text_lengths(self):
        fc = map_backend_field({"name": "bio", "type": "textarea", "minLength": 10, "maxLength": 200})
        assert fc.component == "Textarea"
        assert fc.props["rows"] == 4
        assert rule_types(fc) == ["minLength", "maxLength"]

    @pytest.mark.parametrize("kind,component", [
        ("select", "Select"),
        ("radio", "RadioGroup"),
        ("checkbox", "Checkbox"),
        ("phone", "Input"),
    ])
    def test_component_by_type(self, kind, component):
        assert map_backend_field({"name": "f", "type": kind}).component == component

    def test_unknown_type_has_no_length_rules(self):
        fc = map_backend_field({"name": "f", "type": "phone", "minLength": 3})
        assert rule_types(fc) == []

    def test_many(self):
        fields = map_backend_fields([{"name": "a"}, {"name": "b", "type": "checkbox"}])
        assert [f.field_name for f in fields] == ["a", "b"]


class TestCreateStep:
    def test_step_validation_is_wrapped(self):
        step = create_step("s", "Paso", [], step_validation=lambda data: True)
        assert isinstance(step.step_validation, StepValidation)
        assert step.step_validation.validate({}) is True

    def test_step_validation_without_validate(self):
        assert create_step("s", "Paso", [], step_validation={}).step_validation is None

    def test_duplicated_field_names(self):
        with pytest.raises(ValueError):
            create_step("s", "Paso", [create_field("a", "Input"), create_field("a", "Input")])


class TestCreateMultiStepForm:
    def test_defaults(self):
        config = create_multi_step_form([create_step("s", "Paso", [])])
        assert config.initial_step == 0
        assert config.allow_back_navigation is True
        assert config.show_progress is True
        assert config.progress_style == "steps"
        assert config.persist_data is False
        assert config.persist_key == "multi-step-form-data"

    def test_invalid_options(self):
        with pytest.raises(ConfigurationError):
            create_multi_step_form([create_step("s", "Paso", [])], initial_step=3)
        with pytest.raises(ConfigurationError):
            create_multi_step_form([])


class TestMultiStepFormBuilder:
    def test_fluent_build(self):
        done = []
        config = (
            multi_step_form()
            .add_step("a", "Uno", [create_field("x", "Input")])
            .add_step("b", "Dos", [])
            .set_initial_step(1)
            .allow_back_navigation(False)
            .set_progress_style("dots")
            .persist_data(True, "mi-form")
            .on_complete(done.append)
            .build()
        )
        assert [s.id for s in config.steps] == ["a", "b"]
        assert config.initial_step == 1
        assert config.allow_back_navigation is False
        assert config.progress_style == "dots"
        assert config.persist_data is True
        assert config.persist_key == "mi-form"
        assert config.on_complete is not None

    def test_build_without_steps(self):
        with pytest.raises(ConfigurationError):
            MultiStepFormBuilder().build()
