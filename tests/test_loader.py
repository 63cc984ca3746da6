"""Tests para la carga y revisión de configuraciones."""

import json
from pathlib import Path

import pytest
import yaml

from dynaform.builders import create_field, create_step
from dynaform.config import FormConfig
from dynaform.errors import ConfigurationError
from dynaform.loader import ConfigIssue, check_form_config, load_form_config, parse_form_config, read_config_file

EXAMPLE_FORM = Path(__file__).parent.parent / "src" / "dynaform" / "data" / "example_form.json"


class TestLoadFormConfig:
    def test_json(self, tmp_path, sample_form_dict):
        path = tmp_path / "form.json"
        path.write_text(json.dumps(sample_form_dict), encoding="utf-8")
        config = load_form_config(path)
        assert config.persist_key == "test-form"
        assert [s.id for s in config.steps] == ["personal", "confirm"]
        assert config.steps[0].fields[2].condition.field_name == "occupation"

    def test_yaml(self, tmp_path, sample_form_dict):
        path = tmp_path / "form.yaml"
        path.write_text(yaml.safe_dump(sample_form_dict, allow_unicode=True), encoding="utf-8")
        config = load_form_config(path)
        assert config.persist_data is True
        assert config.steps[0].fields[0].is_required is True

    def test_bundled_example(self):
        config = load_form_config(EXAMPLE_FORM)
        assert config.persist_key == "onboarding-form"
        assert len(config.steps) == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_form_config(tmp_path / "no-existe.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "form.json"
        path.write_text("{steps: ", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Formato inválido"):
            read_config_file(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "form.yml"
        path.write_text("- uno\n- dos\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            read_config_file(path)

    def test_invalid_structure(self):
        with pytest.raises(ConfigurationError):
            parse_form_config({"steps": []})
        with pytest.raises(ConfigurationError):
            parse_form_config({"steps": [{"id": "a"}]})


class TestCheckFormConfig:
    def test_clean_config(self, sample_form_dict):
        assert check_form_config(parse_form_config(sample_form_dict)) == []

    def test_bundled_example_is_clean(self):
        assert check_form_config(load_form_config(EXAMPLE_FORM)) == []

    def test_reports_problems(self):
        config = FormConfig(steps=[
            create_step("s1", "Uno", [
                create_field("a", "Carousel"),
                create_field("b", "Input", {"validations": [{"type": "isbn"}]},
                             condition={"fieldName": "ghost", "operator": "isTrue"}),
                create_field("c", "Label", {"validations": [{"type": "required"}]}),
            ]),
        ])
        issues = check_form_config(config)
        summary = [(i.field_name, i.level) for i in issues]
        assert summary == [("a", "error"), ("b", "error"), ("b", "warning"), ("c", "warning")]
        assert "ghost" in issues[1].message

    def test_references_across_steps_are_valid(self):
        config = FormConfig(steps=[
            create_step("s1", "Uno", [create_field("a", "Switch")]),
            create_step("s2", "Dos", [
                create_field("b", "Input", condition={"fieldName": "a", "operator": "isTrue"}),
            ]),
        ])
        assert check_form_config(config) == []

    def test_issue_str(self):
        assert str(ConfigIssue("s1", "a", "algo")) == "[s1] a: algo"
