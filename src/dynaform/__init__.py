"""
dynaform - Motor de formularios multi-paso definidos por configuración.

Una configuración externa (JSON o YAML) describe pasos, campos, reglas de
validación y condiciones de visibilidad; el motor genera los esquemas de
validación, decide qué campos se muestran y maneja la navegación entre
pasos con persistencia opcional.
"""

__version__ = "0.1.0"

from dynaform.builders import (
    MultiStepFormBuilder,
    create_field,
    create_multi_step_form,
    create_step,
    multi_step_form,
)
from dynaform.conditions import and_, evaluate_condition, is_, not_, or_, when
from dynaform.config import (
    ComplexCondition,
    ConditionRule,
    EngineSettings,
    FieldConfig,
    FormConfig,
    StepConfig,
    ValidationRule,
)
from dynaform.errors import (
    ConfigurationError,
    DynaformError,
    FieldValidationError,
    PersistenceError,
    StepTransitionError,
    SubmissionError,
)
from dynaform.i18n import MessageCatalog
from dynaform.loader import check_form_config, load_form_config
from dynaform.orchestrator import FormState, MultiStepForm, filter_sensitive_data
from dynaform.registry import ComponentRegistry, default_registry
from dynaform.renderer import FieldRenderer
from dynaform.schema import generate_field_schema, generate_schema, validate_field_value
from dynaform.storage import JsonFileStorage, MemoryStorage, SQLiteStorage, open_storage

__all__ = [
    "__version__",
    # Configuración
    "ValidationRule",
    "ConditionRule",
    "ComplexCondition",
    "FieldConfig",
    "StepConfig",
    "FormConfig",
    "EngineSettings",
    "load_form_config",
    "check_form_config",
    # Condiciones
    "evaluate_condition",
    "when",
    "is_",
    "and_",
    "or_",
    "not_",
    # Esquemas
    "generate_schema",
    "generate_field_schema",
    "validate_field_value",
    # Renderizado
    "ComponentRegistry",
    "default_registry",
    "FieldRenderer",
    "MessageCatalog",
    # Orquestación
    "MultiStepForm",
    "FormState",
    "filter_sensitive_data",
    # Almacenamiento
    "MemoryStorage",
    "JsonFileStorage",
    "SQLiteStorage",
    "open_storage",
    # Constructores
    "create_field",
    "create_step",
    "create_multi_step_form",
    "MultiStepFormBuilder",
    "multi_step_form",
    # Errores
    "DynaformError",
    "ConfigurationError",
    "FieldValidationError",
    "StepTransitionError",
    "PersistenceError",
    "SubmissionError",
]
