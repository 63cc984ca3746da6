"""
CLI de dynaform - formularios multi-paso definidos por configuración.

Comandos:
- run: ejecuta un formulario de forma interactiva
- check: revisa una configuración (componentes, referencias, reglas)
- schema: muestra el esquema de validación generado por campo
- clear: borra datos persistidos
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from dynaform.config import EngineSettings, load_settings

_DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_MESSAGES_PATH = _DATA_DIR / "messages.json"

app = typer.Typer(
    name="dynaform",
    help="Motor de formularios multi-paso definidos por configuración.",
    no_args_is_help=True,
)

_settings: Optional[EngineSettings] = None


def setup_logging(level: str) -> None:
    """Instala un RichHandler en el logger del paquete."""
    logger = logging.getLogger("dynaform")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(level)


def get_settings() -> EngineSettings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


@app.callback()
def main(
    settings_file: Optional[Path] = typer.Option(
        None, "--settings", help="Archivo de ajustes (default: ~/.dynaform/config.json)",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
):
    """
    dynaform - formularios multi-paso definidos por configuración.
    """
    global _settings
    from dynaform.cli.theme import CLITheme

    _settings = load_settings(settings_file)
    if log_level:
        try:
            _settings = EngineSettings.model_validate({**_settings.model_dump(), "log_level": log_level})
        except ValidationError as e:
            raise typer.BadParameter(f"Nivel de log inválido: {log_level}", param_hint="--log-level") from e
    CLITheme.set_theme(_settings.theme)
    setup_logging(_settings.log_level)


def _load_config_or_exit(config_file: Path):
    from dynaform.cli.theme import print_error
    from dynaform.errors import ConfigurationError
    from dynaform.loader import load_form_config

    try:
        return load_form_config(config_file)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command()
def run(
    config_file: Path = typer.Argument(..., help="Configuración del formulario (JSON o YAML)"),
    messages: Optional[Path] = typer.Option(None, "--messages", "-m", help="Catálogo de mensajes JSON"),
    namespace: Optional[str] = typer.Option(None, "--namespace", "-n", help="Espacio de claves relativas"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Guardar los datos enviados en JSON"),
):
    """Ejecuta un formulario de forma interactiva."""
    from dynaform.cli.runner import FormRunner
    from dynaform.cli.theme import print_field, print_header, print_success
    from dynaform.i18n import MessageCatalog
    from dynaform.orchestrator import MultiStepForm, filter_sensitive_data
    from dynaform.renderer import FieldRenderer
    from dynaform.storage import dumps, open_storage

    settings = get_settings()
    config = _load_config_or_exit(config_file)
    catalog = MessageCatalog.from_file(messages or DEFAULT_MESSAGES_PATH)

    storage = open_storage(settings) if config.persist_data else None
    form = MultiStepForm(config, storage=storage, translator=catalog, max_condition_depth=settings.max_condition_depth)
    renderer = FieldRenderer(
        translator=catalog,
        namespace=namespace,
        known_fields=config.all_field_names(),
        max_depth=settings.max_condition_depth,
    )

    print_header(config_file.stem, f"{form.total_steps} pasos")
    data = FormRunner(form, renderer).run()
    if data is None:
        raise typer.Exit(1)

    public = filter_sensitive_data(data)
    for name, value in public.items():
        print_field(name, value)

    if output:
        output.write_text(dumps(public), encoding="utf-8")
        print_success(f"Datos guardados en {output}")


@app.command()
def check(
    config_file: Path = typer.Argument(..., help="Configuración del formulario (JSON o YAML)"),
):
    """Revisa una configuración y lista sus problemas."""
    from dynaform.cli.theme import create_table, get_console, print_success
    from dynaform.loader import check_form_config

    config = _load_config_or_exit(config_file)
    issues = check_form_config(config)
    if not issues:
        print_success(f"{config_file.name}: sin problemas ({len(config.steps)} pasos)")
        return

    table = create_table(f"Problemas en {config_file.name}", ["Nivel", "Paso", "Campo", "Detalle"])
    for issue in issues:
        style = "error" if issue.level == "error" else "warning"
        table.add_row(f"[{style}]{issue.level}[/]", issue.step_id, issue.field_name, issue.message)
    get_console().print(table)

    if any(issue.level == "error" for issue in issues):
        raise typer.Exit(1)


@app.command()
def schema(
    config_file: Path = typer.Argument(..., help="Configuración del formulario (JSON o YAML)"),
    as_json: bool = typer.Option(False, "--json", help="Salida en JSON"),
):
    """Muestra el esquema de validación generado para cada campo."""
    from dynaform.cli.theme import create_table, get_console
    from dynaform.conditions import condition_references
    from dynaform.defaults import apply_defaults
    from dynaform.schema import generate_schema

    config = _load_config_or_exit(config_file)

    rows = []
    for step in config.steps:
        fields = [apply_defaults(fc) for fc in step.fields]
        step_schema = generate_schema(fields)
        for fc in fields:
            if fc.field_name not in step_schema:
                continue
            rows.append({
                "step": step.id,
                "field": fc.field_name,
                "component": fc.component,
                "schema": step_schema[fc.field_name].describe(),
                "dependsOn": sorted(condition_references(fc.condition)),
            })

    if as_json:
        typer.echo(json.dumps(rows, ensure_ascii=False, indent=2))
        return

    table = create_table(f"Esquema de {config_file.name}", ["Paso", "Campo", "Componente", "Esquema", "Depende de"])
    for row in rows:
        table.add_row(row["step"], row["field"], row["component"], row["schema"], ", ".join(row["dependsOn"]))
    get_console().print(table)


@app.command()
def clear(
    key: Optional[str] = typer.Argument(None, help="Clave persistida (default: la de los ajustes)"),
    force: bool = typer.Option(False, "--force", "-f", help="No pedir confirmación"),
):
    """Borra los datos persistidos de un formulario."""
    from dynaform.cli.theme import print_error, print_info, print_success
    from dynaform.errors import PersistenceError
    from dynaform.storage import open_storage

    settings = get_settings()
    key = key or settings.persist_key
    storage = open_storage(settings)

    try:
        if storage.get(key) is None:
            print_info(f"No hay datos guardados para '{key}'")
            return
        if not force and not typer.confirm(f"¿Borrar los datos guardados de '{key}'?"):
            raise typer.Abort()
        storage.delete(key)
    except PersistenceError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Datos de '{key}' borrados")


__all__ = [
    "app",
    "setup_logging",
]
