"""
Evaluación de condiciones de visibilidad.

Una condición es una regla hoja (ConditionRule) o un nodo compuesto
(ComplexCondition) con lógica AND/OR/NOT sobre sus reglas y subcondiciones.
La evaluación nunca lanza excepciones: valores ausentes se tratan como vacíos.
"""

import logging
import math
import re
from typing import Any, Iterable, Optional, Union

from dynaform.config import (
    ComplexCondition,
    ConditionOperator,
    ConditionRule,
    LogicOperator,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32

Condition = Union[ConditionRule, ComplexCondition, dict]


# ============================================================================
# Coerciones
# ============================================================================

def _to_number(value: Any) -> float:
    """Conversión numérica permisiva; lo no convertible es NaN."""
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _strict_equals(left: Any, right: Any) -> bool:
    # 1 == True en Python; aquí no deben ser iguales
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _contains(field_value: Any, value: Any) -> bool:
    if isinstance(field_value, (list, tuple, set)):
        return any(_strict_equals(item, value) for item in field_value)
    return _to_text(value) in _to_text(field_value)


def _in_values(field_value: Any, values: Any) -> bool:
    return any(_strict_equals(field_value, v) for v in values)


def is_empty_value(value: Any) -> bool:
    """Vacío: None, False, 0, texto en blanco, lista o dict vacíos."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    if isinstance(value, (int, float)):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    return False


# ============================================================================
# Evaluación
# ============================================================================

def as_condition(condition: Condition) -> Union[ConditionRule, ComplexCondition]:
    """Normaliza un dict de configuración al modelo correspondiente."""
    if isinstance(condition, (ConditionRule, ComplexCondition)):
        return condition
    if isinstance(condition, dict) and "logic" in condition:
        return ComplexCondition.model_validate(condition)
    return ConditionRule.model_validate(condition)


def is_complex_condition(condition: Condition) -> bool:
    if isinstance(condition, dict):
        return "logic" in condition
    return isinstance(condition, ComplexCondition)


def evaluate_rule(rule: ConditionRule, form_data: dict) -> bool:
    """Evalúa una regla hoja contra los valores actuales."""
    field_value = form_data.get(rule.field_name)
    value = rule.value
    op = rule.operator

    if op == ConditionOperator.EQUALS.value:
        return _strict_equals(field_value, value)
    if op == ConditionOperator.NOT_EQUALS.value:
        return not _strict_equals(field_value, value)

    # Numéricos: NaN hace falsa toda comparación
    if op == ConditionOperator.GREATER_THAN.value:
        return _to_number(field_value) > _to_number(value)
    if op == ConditionOperator.LESS_THAN.value:
        return _to_number(field_value) < _to_number(value)
    if op == ConditionOperator.GREATER_THAN_OR_EQUAL.value:
        return _to_number(field_value) >= _to_number(value)
    if op == ConditionOperator.LESS_THAN_OR_EQUAL.value:
        return _to_number(field_value) <= _to_number(value)

    if op == ConditionOperator.CONTAINS.value:
        return _contains(field_value, value)
    if op == ConditionOperator.NOT_CONTAINS.value:
        return not _contains(field_value, value)
    if op == ConditionOperator.STARTS_WITH.value:
        return _to_text(field_value).startswith(_to_text(value))
    if op == ConditionOperator.ENDS_WITH.value:
        return _to_text(field_value).endswith(_to_text(value))
    if op == ConditionOperator.MATCHES.value:
        pattern = rule.pattern or (value if isinstance(value, str) else None)
        if not pattern:
            return False
        try:
            return re.search(pattern, _to_text(field_value)) is not None
        except re.error as e:
            logger.warning("Patrón inválido en condición sobre '%s': %s", rule.field_name, e)
            return False

    if op == ConditionOperator.IN.value:
        return isinstance(value, (list, tuple, set)) and _in_values(field_value, value)
    if op == ConditionOperator.NOT_IN.value:
        return isinstance(value, (list, tuple, set)) and not _in_values(field_value, value)
    if op == ConditionOperator.INCLUDES_ALL.value:
        if not isinstance(field_value, (list, tuple)) or not isinstance(value, (list, tuple)):
            return False
        return all(_in_values(v, field_value) for v in value)
    if op == ConditionOperator.INCLUDES_ANY.value:
        if not isinstance(field_value, (list, tuple)) or not isinstance(value, (list, tuple)):
            return False
        return any(_in_values(v, field_value) for v in value)

    if op == ConditionOperator.IS_EMPTY.value:
        return is_empty_value(field_value)
    if op == ConditionOperator.IS_NOT_EMPTY.value:
        return not is_empty_value(field_value)
    if op == ConditionOperator.IS_TRUE.value:
        return field_value is True
    if op == ConditionOperator.IS_FALSE.value:
        return field_value is False
    if op == ConditionOperator.IS_DEFINED.value:
        return field_value is not None
    if op == ConditionOperator.IS_UNDEFINED.value:
        return field_value is None

    logger.warning("Operador desconocido '%s' en condición sobre '%s'", op, rule.field_name)
    return True


def evaluate_condition(
    condition: Condition,
    form_data: dict,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """
    Evalúa una condición (simple o compuesta) contra los valores del formulario.

    AND: todos los hijos verdaderos (vacío -> True).
    OR: algún hijo verdadero (vacío -> False).
    NOT: ningún hijo verdadero (negación de un OR implícito).

    Args:
        condition: Regla, nodo compuesto o dict equivalente
        form_data: Valores actuales del formulario
        max_depth: Profundidad máxima de anidamiento

    Returns:
        True si el campo debe mostrarse
    """
    return _evaluate(as_condition(condition), form_data or {}, 0, max_depth, set())


def _evaluate(
    condition: Union[ConditionRule, ComplexCondition],
    form_data: dict,
    depth: int,
    max_depth: int,
    path: set[int],
) -> bool:
    if isinstance(condition, ConditionRule):
        return evaluate_rule(condition, form_data)

    if depth >= max_depth:
        logger.error("Condición excede la profundidad máxima (%d)", max_depth)
        return False

    node_id = id(condition)
    if node_id in path:
        logger.error("Condición con auto-referencia detectada")
        return False
    path.add(node_id)
    try:
        results = [evaluate_rule(r, form_data) for r in condition.rules]
        results += [
            _evaluate(c, form_data, depth + 1, max_depth, path)
            for c in condition.conditions
        ]
    finally:
        path.discard(node_id)

    if condition.logic == LogicOperator.AND:
        return all(results)
    if condition.logic == LogicOperator.OR:
        return any(results)
    return not any(results)


def is_visible(field, form_data: dict, max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
    """Un campo sin condición siempre es visible."""
    if field.condition is None:
        return True
    return evaluate_condition(field.condition, form_data, max_depth)


def condition_references(condition: Optional[Condition]) -> set[str]:
    """Nombres de campo referenciados por una condición (recursivo)."""
    if condition is None:
        return set()
    node = as_condition(condition)
    if isinstance(node, ConditionRule):
        return {node.field_name}

    names: set[str] = set()
    pending = [node]
    seen: set[int] = set()
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        names.update(r.field_name for r in current.rules)
        pending.extend(current.conditions)
    return names


def dangling_references(condition: Optional[Condition], known_fields: Iterable[str]) -> set[str]:
    """Referencias a campos que no existen en el formulario."""
    return condition_references(condition) - set(known_fields)


# ============================================================================
# Constructores
# ============================================================================

def when(field_name: str, operator: Union[str, ConditionOperator], value: Any = None) -> ConditionRule:
    """Crea una regla simple."""
    op = operator.value if isinstance(operator, ConditionOperator) else operator
    return ConditionRule(field_name=field_name, operator=op, value=value)


class _Shorthands:
    """Atajos: is_.equals("country", "us"), is_.empty("notes"), ..."""

    @staticmethod
    def equals(field_name: str, value: Any) -> ConditionRule:
        return when(field_name, ConditionOperator.EQUALS, value)

    @staticmethod
    def not_equals(field_name: str, value: Any) -> ConditionRule:
        return when(field_name, ConditionOperator.NOT_EQUALS, value)

    @staticmethod
    def greater_than(field_name: str, value: float) -> ConditionRule:
        return when(field_name, ConditionOperator.GREATER_THAN, value)

    @staticmethod
    def less_than(field_name: str, value: float) -> ConditionRule:
        return when(field_name, ConditionOperator.LESS_THAN, value)

    @staticmethod
    def greater_than_or_equal(field_name: str, value: float) -> ConditionRule:
        return when(field_name, ConditionOperator.GREATER_THAN_OR_EQUAL, value)

    @staticmethod
    def less_than_or_equal(field_name: str, value: float) -> ConditionRule:
        return when(field_name, ConditionOperator.LESS_THAN_OR_EQUAL, value)

    @staticmethod
    def contains(field_name: str, value: Any) -> ConditionRule:
        return when(field_name, ConditionOperator.CONTAINS, value)

    @staticmethod
    def not_contains(field_name: str, value: Any) -> ConditionRule:
        return when(field_name, ConditionOperator.NOT_CONTAINS, value)

    @staticmethod
    def starts_with(field_name: str, value: str) -> ConditionRule:
        return when(field_name, ConditionOperator.STARTS_WITH, value)

    @staticmethod
    def ends_with(field_name: str, value: str) -> ConditionRule:
        return when(field_name, ConditionOperator.ENDS_WITH, value)

    @staticmethod
    def in_(field_name: str, values: list) -> ConditionRule:
        return when(field_name, ConditionOperator.IN, list(values))

    @staticmethod
    def not_in(field_name: str, values: list) -> ConditionRule:
        return when(field_name, ConditionOperator.NOT_IN, list(values))

    @staticmethod
    def empty(field_name: str) -> ConditionRule:
        return when(field_name, ConditionOperator.IS_EMPTY)

    @staticmethod
    def not_empty(field_name: str) -> ConditionRule:
        return when(field_name, ConditionOperator.IS_NOT_EMPTY)

    @staticmethod
    def true(field_name: str) -> ConditionRule:
        return when(field_name, ConditionOperator.IS_TRUE)

    @staticmethod
    def false(field_name: str) -> ConditionRule:
        return when(field_name, ConditionOperator.IS_FALSE)

    @staticmethod
    def defined(field_name: str) -> ConditionRule:
        return when(field_name, ConditionOperator.IS_DEFINED)

    @staticmethod
    def undefined(field_name: str) -> ConditionRule:
        return when(field_name, ConditionOperator.IS_UNDEFINED)


is_ = _Shorthands()


def _combine(logic: LogicOperator, children: tuple) -> ComplexCondition:
    rules = []
    conditions = []
    for child in children:
        node = as_condition(child)
        if isinstance(node, ComplexCondition):
            conditions.append(node)
        else:
            rules.append(node)
    return ComplexCondition(logic=logic, rules=rules, conditions=conditions)


def and_(*children: Condition) -> ComplexCondition:
    return _combine(LogicOperator.AND, children)


def or_(*children: Condition) -> ComplexCondition:
    return _combine(LogicOperator.OR, children)


def not_(*children: Condition) -> ComplexCondition:
    return _combine(LogicOperator.NOT, children)
