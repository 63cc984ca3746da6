"""
Orquestador de formularios multi-paso.

Es el único dueño del estado (paso actual, formData, pasos completados,
envío en curso). Las transiciones son métodos; sólo go_to_next_step() y
submit_step() son corutinas, porque esperan al validador del paso y al
callback de envío.

Persistencia: con persist_data activo, formData se lee una vez al crear el
orquestador y se escribe tras cada cambio, sin las entradas de verificación
de identidad. Los errores de almacenamiento se registran y se ignoran.
"""

import asyncio
import copy
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from dynaform.conditions import DEFAULT_MAX_DEPTH, dangling_references, is_visible
from dynaform.config import FieldConfig, FormConfig, StepConfig
from dynaform.defaults import apply_defaults
from dynaform.errors import ConfigurationError, DynaformError, StepTransitionError, SubmissionError
from dynaform.i18n import Translator
from dynaform.schema import StepSchema, StepValidationResult, generate_schema
from dynaform.storage import MemoryStorage, Storage, dumps, loads

logger = logging.getLogger(__name__)

SENSITIVE_KEY_MARKERS = ("ekyc", "verification", "kyc")


def is_sensitive_entry(key: str, value: Any) -> bool:
    """Entrada de verificación de identidad: clave sugerente y valor con sessionId."""
    lowered = key.lower()
    if not any(marker in lowered for marker in SENSITIVE_KEY_MARKERS):
        return False
    return isinstance(value, dict) and bool(value.get("sessionId"))


def filter_sensitive_data(data: dict) -> dict:
    """Copia de formData sin entradas sensibles de primer nivel."""
    return {k: v for k, v in data.items() if not is_sensitive_entry(k, v)}


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass
class FormState:
    """Estado del formulario multi-paso."""
    current_step: int = 0
    form_data: dict = field(default_factory=dict)
    completed_steps: set[int] = field(default_factory=set)
    is_submitting: bool = False

    def snapshot(self) -> "FormState":
        """Copia independiente del estado."""
        return FormState(
            current_step=self.current_step,
            form_data=copy.deepcopy(self.form_data),
            completed_steps=set(self.completed_steps),
            is_submitting=self.is_submitting,
        )


class MultiStepForm:
    """Máquina de estados de un formulario multi-paso."""

    def __init__(
        self,
        config: FormConfig,
        storage: Optional[Storage] = None,
        translator: Optional[Translator] = None,
        max_condition_depth: int = DEFAULT_MAX_DEPTH,
    ):
        """
        Inicializa el orquestador.

        Args:
            config: Configuración del formulario
            storage: Almacén clave -> texto (default: en memoria si persist_data)
            translator: Traductor para los mensajes de validación
            max_condition_depth: Profundidad máxima de condiciones
        """
        self.config = config
        self.translator = translator
        self.max_condition_depth = max_condition_depth
        if storage is None and config.persist_data:
            storage = MemoryStorage()
        self.storage = storage
        self.last_error: Optional[DynaformError] = None

        self._transition_pending = False
        self._generation = 0
        self._background: set[asyncio.Task] = set()

        self._state = FormState(
            current_step=config.initial_step,
            form_data=self._read_persisted() if config.persist_data else {},
        )

    # ------------------------------------------------------------------
    # Accesores
    # ------------------------------------------------------------------

    @property
    def steps(self) -> list[StepConfig]:
        return self.config.steps

    @property
    def total_steps(self) -> int:
        return len(self.config.steps)

    @property
    def current_step(self) -> int:
        return self._state.current_step

    @property
    def form_data(self) -> dict:
        return dict(self._state.form_data)

    @property
    def completed_steps(self) -> frozenset[int]:
        return frozenset(self._state.completed_steps)

    @property
    def is_submitting(self) -> bool:
        return self._state.is_submitting

    @property
    def is_transitioning(self) -> bool:
        return self._transition_pending

    @property
    def state(self) -> FormState:
        return self._state.snapshot()

    @property
    def current_step_config(self) -> StepConfig:
        return self.config.steps[self._state.current_step]

    @property
    def is_first_step(self) -> bool:
        return self._state.current_step == 0

    @property
    def is_last_step(self) -> bool:
        return self._state.current_step == self.total_steps - 1

    @property
    def is_complete(self) -> bool:
        """El último paso fue enviado con éxito."""
        return (self.total_steps - 1) in self._state.completed_steps

    @property
    def progress(self) -> float:
        """Porcentaje de avance: (paso + 1) / total * 100."""
        return (self._state.current_step + 1) / self.total_steps * 100

    @property
    def can_go_back(self) -> bool:
        return self._state.current_step > 0 and self.config.allow_back_navigation

    def visible_fields(self, step_index: Optional[int] = None, data: Optional[dict] = None) -> list[FieldConfig]:
        """Campos visibles del paso (con props combinados con sus defaults)."""
        index = self._state.current_step if step_index is None else step_index
        data = self._state.form_data if data is None else data
        known = self.config.all_field_names()
        visible = []
        for fc in self.config.steps[index].fields:
            fc = apply_defaults(fc)
            # Condición con referencias inexistentes: el campo queda fuera del paso
            missing = dangling_references(fc.condition, known)
            if missing:
                error = ConfigurationError(
                    f"La condición referencia campos inexistentes: {', '.join(sorted(missing))}",
                    fc.field_name,
                )
                logger.error("Campo '%s' omitido: %s", fc.field_name, error)
                continue
            if is_visible(fc, data, self.max_condition_depth):
                visible.append(fc)
        return visible

    def step_schema(self, step_index: Optional[int] = None, data: Optional[dict] = None) -> StepSchema:
        """Esquema de validación de los campos visibles del paso."""
        return generate_schema(self.visible_fields(step_index, data), self.translator)

    # ------------------------------------------------------------------
    # Datos
    # ------------------------------------------------------------------

    def update_step_data(self, patch: dict) -> None:
        """Combina patch en formData (merge superficial)."""
        self._state.form_data = {**self._state.form_data, **(patch or {})}
        if self.config.persist_data:
            self._write_persisted(self._state.form_data)

    def update_field(self, name: str, value: Any) -> None:
        self.update_step_data({name: value})

    def validate_step(self, values: Optional[dict] = None) -> StepValidationResult:
        """Valida los campos visibles del paso actual sin cambiar el estado."""
        merged = {**self._state.form_data, **(values or {})}
        return self.step_schema(data=merged).validate(merged)

    # ------------------------------------------------------------------
    # Transiciones
    # ------------------------------------------------------------------

    async def go_to_next_step(self) -> bool:
        """
        Avanza al siguiente paso, o envía el formulario en el último.

        Returns:
            True si la transición (o el envío) tuvo éxito
        """
        if self._transition_pending:
            logger.warning("Transición en curso; se ignora go_to_next_step()")
            return False

        self._transition_pending = True
        generation = self._generation
        try:
            if self.is_last_step:
                return await self._submit(generation)
            return await self._advance(generation)
        finally:
            if generation == self._generation:
                self._transition_pending = False

    def _stale(self, generation: int) -> bool:
        return generation != self._generation

    async def _advance(self, generation: int) -> bool:
        step = self.current_step_config
        data = self.form_data

        if step.step_validation is not None:
            try:
                result = await _maybe_await(step.step_validation.validate(data))
            except Exception as e:
                return self._reject(StepTransitionError(step.id, f"error del validador: {e}"))
            if result is not True:
                reason = result if isinstance(result, str) else "validación del paso rechazada"
                return self._reject(StepTransitionError(step.id, reason))

        if self._stale(generation):
            logger.info("Formulario reiniciado durante la transición del paso '%s'", step.id)
            return False

        if self.config.on_step_complete is not None:
            try:
                await _maybe_await(self.config.on_step_complete(step.id, data))
            except Exception as e:
                return self._reject(StepTransitionError(step.id, f"error en on_step_complete: {e}"))

        if self._stale(generation):
            return False

        previous = self._state.current_step
        self._state.current_step = previous + 1
        self._state.completed_steps.add(previous)
        self.last_error = None
        self._notify_step_change(previous, previous + 1)
        return True

    async def _submit(self, generation: int) -> bool:
        index = self._state.current_step
        self._state.is_submitting = True
        try:
            if self.config.on_complete is not None:
                await _maybe_await(self.config.on_complete(self.form_data))
        except Exception as e:
            if not self._stale(generation):
                self._state.is_submitting = False
            self.last_error = SubmissionError(f"El envío del formulario falló: {e}")
            logger.error("%s", self.last_error)
            return False

        if self._stale(generation):
            logger.info("Formulario reiniciado durante el envío; se descarta el resultado")
            return False

        self._state.completed_steps.add(index)
        self._state.is_submitting = False
        self.last_error = None
        return True

    def _reject(self, error: StepTransitionError) -> bool:
        self.last_error = error
        logger.error("%s", error)
        return False

    async def submit_step(self, values: Optional[dict] = None) -> StepValidationResult:
        """
        Valida los campos visibles del paso actual y avanza.

        Con errores de campo no cambia el estado. Si la validación pasa,
        combina los valores parseados y llama a go_to_next_step().

        Returns:
            StepValidationResult; success indica que la transición ocurrió
        """
        result = self.validate_step(values)
        if not result.success:
            logger.info("Paso '%s' con errores: %s", self.current_step_config.id, sorted(result.errors))
            return result

        self.update_step_data(result.data)
        advanced = await self.go_to_next_step()
        return StepValidationResult(success=advanced, data=result.data, errors={})

    def go_to_previous_step(self) -> bool:
        if not self.can_go_back:
            return False
        previous = self._state.current_step
        self._state.current_step = previous - 1
        self._notify_step_change(previous, previous - 1)
        return True

    def go_to_step(self, index: int) -> bool:
        """Salta a un paso completado o al inmediato siguiente."""
        if not 0 <= index < self.total_steps:
            return False
        current = self._state.current_step
        if index not in self._state.completed_steps and index != current + 1:
            logger.debug("Salto al paso %d no permitido desde %d", index, current)
            return False
        if index != current:
            self._state.current_step = index
            self._notify_step_change(current, index)
        return True

    def complete_current_step(self) -> None:
        self._state.completed_steps.add(self._state.current_step)

    def reset_form(self) -> None:
        """Vuelve al estado inicial y borra los datos persistidos."""
        self._generation += 1
        self._transition_pending = False
        self._state = FormState(current_step=self.config.initial_step)
        self.last_error = None
        if self.storage is not None:
            try:
                self.storage.delete(self.config.persist_key)
            except Exception as e:
                logger.warning("No se pudieron borrar los datos persistidos: %s", e)

    def _notify_step_change(self, from_step: int, to_step: int) -> None:
        callback = self.config.on_step_change
        if callback is None:
            return
        try:
            result = callback(from_step, to_step)
        except Exception as e:
            logger.error("Error en on_step_change(%d, %d): %s", from_step, to_step, e)
            return
        if not inspect.isawaitable(result):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("on_step_change devolvió un awaitable fuera de un event loop; se descarta")
            if inspect.iscoroutine(result):
                result.close()
            return
        task = loop.create_task(_maybe_await(result))
        self._background.add(task)
        task.add_done_callback(self._step_change_done)

    def _step_change_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Error en on_step_change: %s", task.exception())

    # ------------------------------------------------------------------
    # Persistencia
    # ------------------------------------------------------------------

    def _read_persisted(self) -> dict:
        if self.storage is None:
            return {}
        try:
            return loads(self.storage.get(self.config.persist_key))
        except Exception as e:
            logger.warning("No se pudieron cargar los datos persistidos: %s", e)
            return {}

    def _write_persisted(self, data: dict) -> bool:
        if self.storage is None:
            return False
        try:
            self.storage.set(self.config.persist_key, dumps(filter_sensitive_data(data)))
        except Exception as e:
            logger.warning("No se pudieron persistir los datos del formulario: %s", e)
            return False
        return True

    def save_form_data(self) -> bool:
        """Guarda formData manualmente (mismo filtro que la persistencia automática)."""
        if self.storage is None:
            logger.warning("Sin almacenamiento configurado; save_form_data() no hace nada")
            return False
        return self._write_persisted(self._state.form_data)

    def load_form_data(self) -> Optional[dict]:
        """Reemplaza formData con los datos guardados, si existen."""
        if self.storage is None:
            return None
        try:
            text = self.storage.get(self.config.persist_key)
            if not text:
                return None
            data = loads(text)
        except Exception as e:
            logger.warning("No se pudieron cargar los datos guardados: %s", e)
            return None
        self._state.form_data = data
        return dict(data)
