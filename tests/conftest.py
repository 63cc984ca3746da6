"""Configuración de pytest para tests de dynaform."""

import pytest

from dynaform.builders import create_field, create_step
from dynaform.config import FormConfig
from dynaform.storage import MemoryStorage


@pytest.fixture
def storage():
    """Almacenamiento en memoria."""
    return MemoryStorage()


@pytest.fixture
def three_steps():
    """Tres pasos con un campo cada uno."""
    return [
        create_step("personal", "Datos personales", [
            create_field("fullName", "Input", {"validations": [{"type": "required"}]}),
        ]),
        create_step("contact", "Contacto", [
            create_field("email", "Input", {"validations": [{"type": "email"}]}),
        ]),
        create_step("confirm", "Confirmación", [
            create_field("terms", "Checkbox", {"validations": [{"type": "required"}]}),
        ]),
    ]


@pytest.fixture
def form_config(three_steps):
    """Configuración de formulario de tres pasos."""
    return FormConfig(steps=three_steps)


@pytest.fixture
def sample_form_dict():
    """Configuración en formato de red (camelCase)."""
    return {
        "initialStep": 0,
        "persistData": True,
        "persistKey": "test-form",
        "steps": [
            {
                "id": "personal",
                "title": "Datos personales",
                "fields": [
                    {
                        "fieldName": "fullName",
                        "component": "Input",
                        "props": {
                            "label": "Nombre",
                            "validations": [
                                {"type": "required"},
                                {"type": "minLength", "value": 2},
                            ],
                        },
                    },
                    {
                        "fieldName": "occupation",
                        "component": "Select",
                        "props": {
                            "options": [
                                {"value": "employee", "label": "Empleado"},
                                {"value": "student", "label": "Estudiante"},
                            ],
                        },
                    },
                    {
                        "fieldName": "companyName",
                        "component": "Input",
                        "props": {"validations": [{"type": "required"}]},
                        "condition": {"fieldName": "occupation", "operator": "equals", "value": "employee"},
                    },
                ],
            },
            {
                "id": "confirm",
                "title": "Confirmación",
                "fields": [
                    {"fieldName": "terms", "component": "Checkbox", "props": {"validations": [{"type": "required"}]}},
                ],
            },
        ],
    }
