"""
Carga y revisión de configuraciones de formulario (JSON o YAML).
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from dynaform.components import is_form_component
from dynaform.conditions import dangling_references
from dynaform.config import FormConfig
from dynaform.errors import ConfigurationError
from dynaform.registry import ComponentRegistry, default_registry
from dynaform.schema import is_validation_rule_supported

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def read_config_file(path: Union[str, Path]) -> dict:
    """Lee el archivo como dict (YAML por extensión, JSON en otro caso)."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"No se pudo leer {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Formato inválido en {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: se esperaba un objeto con 'steps'")
    return data


def parse_form_config(data: dict) -> FormConfig:
    """Valida un dict con formato de red y lo convierte en FormConfig."""
    try:
        return FormConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Configuración inválida: {e}") from e


def load_form_config(path: Union[str, Path]) -> FormConfig:
    """
    Carga una configuración de formulario.

    Raises:
        ConfigurationError: si el archivo no se puede leer o no es válido
    """
    config = parse_form_config(read_config_file(path))
    logger.debug("Configuración cargada desde %s: %d pasos", path, len(config.steps))
    return config


@dataclass
class ConfigIssue:
    """Problema encontrado en una configuración."""
    step_id: str
    field_name: str
    message: str
    level: str = "error"

    def __str__(self) -> str:
        return f"[{self.step_id}] {self.field_name}: {self.message}"


def check_form_config(config: FormConfig, registry: Optional[ComponentRegistry] = None) -> list[ConfigIssue]:
    """
    Revisa una configuración ya parseada.

    Detecta componentes no registrados, condiciones con referencias a
    campos inexistentes y reglas de validación no soportadas. Ninguno de
    estos problemas impide usar el formulario; sólo se reportan.
    """
    registry = registry or default_registry
    known = config.all_field_names()
    issues = []

    for step in config.steps:
        for fc in step.fields:
            if not registry.is_registered(fc.component):
                issues.append(ConfigIssue(step.id, fc.field_name, f"componente desconocido '{fc.component}'"))

            missing = dangling_references(fc.condition, known)
            if missing:
                issues.append(ConfigIssue(
                    step.id, fc.field_name,
                    f"la condición referencia campos inexistentes: {', '.join(sorted(missing))}",
                ))

            for rule in fc.validations:
                if not is_validation_rule_supported(rule.type):
                    issues.append(ConfigIssue(
                        step.id, fc.field_name, f"regla no soportada '{rule.type}'", level="warning",
                    ))

            if fc.validations and not is_form_component(fc.component):
                issues.append(ConfigIssue(
                    step.id, fc.field_name,
                    f"'{fc.component}' no produce valores; sus validaciones se ignoran",
                    level="warning",
                ))
    return issues
