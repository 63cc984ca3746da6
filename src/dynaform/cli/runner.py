"""
Ejecución interactiva de un formulario multi-paso en la terminal.
"""

import asyncio
from typing import Optional

from dynaform.cli.theme import (
    print_error,
    print_info,
    print_muted,
    print_step,
    print_success,
    print_warning,
)
from dynaform.orchestrator import MultiStepForm
from dynaform.renderer import BoundField, BrokenCondition, DisplayField, FieldRenderer, UnknownComponent
from dynaform.widgets import FieldAction


class FormRunner:
    """Controlador de navegación del formulario en la terminal."""

    def __init__(self, form: MultiStepForm, renderer: Optional[FieldRenderer] = None):
        self.form = form
        self.renderer = renderer or FieldRenderer(
            translator=form.translator,
            known_fields=form.config.all_field_names(),
            max_depth=form.max_condition_depth,
        )

    def fill_step(self) -> FieldAction:
        """
        Pregunta los campos visibles del paso actual.

        La visibilidad se recalcula después de cada respuesta, así que un
        campo que aparece por una condición se pregunta en el mismo paso.
        """
        step = self.form.current_step_config
        answered: set[str] = set()

        while True:
            rendered = self.renderer.render_step(step, self.form.form_data, self.form.update_field)
            pending = [item for item in rendered if item.field_name not in answered]
            if not pending:
                return FieldAction.NEXT

            item = pending[0]
            answered.add(item.field_name)

            if isinstance(item, (UnknownComponent, BrokenCondition)):
                print_error(item.message)
                continue
            if isinstance(item, DisplayField):
                item.render()
                continue

            action, value = item.prompt()
            if action != FieldAction.NEXT:
                return action
            self._store(item, value)

    def _store(self, item: BoundField, value) -> None:
        result = item.set_value(value)
        if not result.success:
            print_warning(f"{item.label or item.field_name}: {result.error}")

    def _show_step(self) -> None:
        form = self.form
        step = form.current_step_config
        if form.config.show_progress:
            style = "dots" if form.config.progress_style == "dots" else "bar"
            print_step(form.current_step + 1, form.total_steps, step.title, style)
        else:
            print_info(step.title)
        if step.description:
            print_muted(step.description)

    async def run_async(self) -> Optional[dict]:
        """Ejecuta el formulario; None si el usuario cancela."""
        form = self.form
        while not form.is_complete:
            self._show_step()
            action = self.fill_step()

            if action == FieldAction.CANCEL:
                print_warning("Formulario cancelado")
                return None

            if action == FieldAction.BACK:
                if form.go_to_previous_step():
                    print_info("<< Volviendo al paso anterior...")
                else:
                    print_muted("Ya estás en el primer paso")
                continue

            result = await form.submit_step()
            if result.success:
                continue
            for name, message in result.errors.items():
                print_error(f"{name}: {message}")
            if form.last_error is not None:
                print_error(str(form.last_error))

        print_success("Formulario completado")
        return form.form_data

    def run(self) -> Optional[dict]:
        return asyncio.run(self.run_async())
