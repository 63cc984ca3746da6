"""
Tema de la consola: paletas, consola Rich y funciones de impresión.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme


class ThemeName(Enum):
    """Temas disponibles."""
    DEFAULT = "default"
    NORD = "nord"
    MINIMAL = "minimal"


@dataclass
class ColorPalette:
    """Paleta de colores para un tema."""
    primary: str      # Títulos, destacados
    secondary: str    # Subtítulos
    accent: str       # Marcadores de pregunta
    success: str
    warning: str
    error: str
    info: str
    muted: str        # Texto secundario
    value: str        # Valores ingresados
    label: str        # Etiquetas
    border: str


THEME_DEFAULT = ColorPalette(
    primary="#5f87af",
    secondary="#87afaf",
    accent="#af87af",
    success="#87af87",
    warning="#d7af5f",
    error="#d75f5f",
    info="#5f87af",
    muted="#808080",
    value="#d7af5f",
    label="#afafaf",
    border="#5f5f5f",
)

THEME_NORD = ColorPalette(
    primary="#88c0d0",
    secondary="#81a1c1",
    accent="#b48ead",
    success="#a3be8c",
    warning="#ebcb8b",
    error="#bf616a",
    info="#5e81ac",
    muted="#4c566a",
    value="#d08770",
    label="#d8dee9",
    border="#3b4252",
)

THEME_MINIMAL = ColorPalette(
    primary="#ffffff",
    secondary="#b0b0b0",
    accent="#5fafff",
    success="#87d787",
    warning="#ffd787",
    error="#ff8787",
    info="#5fafff",
    muted="#606060",
    value="#ffffff",
    label="#909090",
    border="#404040",
)

THEMES = {
    ThemeName.DEFAULT: THEME_DEFAULT,
    ThemeName.NORD: THEME_NORD,
    ThemeName.MINIMAL: THEME_MINIMAL,
}


class CLITheme:
    """Gestor de tema para la CLI."""

    _palette: ColorPalette = THEME_DEFAULT
    _console: Optional[Console] = None

    @classmethod
    def set_theme(cls, name: str) -> None:
        """Establece el tema activo (nombre desconocido -> default)."""
        try:
            theme = ThemeName(name)
        except ValueError:
            theme = ThemeName.DEFAULT
        cls._palette = THEMES[theme]
        cls._console = None

    @classmethod
    def get_palette(cls) -> ColorPalette:
        return cls._palette

    @classmethod
    def get_console(cls) -> Console:
        """Consola Rich con el tema aplicado."""
        if cls._console is None:
            p = cls._palette
            cls._console = Console(theme=Theme({
                "primary": p.primary,
                "secondary": p.secondary,
                "success": p.success,
                "warning": p.warning,
                "error": p.error,
                "info": p.info,
                "muted": p.muted,
                "label": p.label,
                "value": f"bold {p.value}",
                "title": f"bold {p.primary}",
            }))
        return cls._console


def get_console() -> Console:
    return CLITheme.get_console()


def get_palette() -> ColorPalette:
    return CLITheme.get_palette()


# ============================================================================
# Impresión
# ============================================================================

def print_header(text: str, subtitle: Optional[str] = None) -> None:
    """Imprime un encabezado."""
    p = get_palette()
    content = Text(text, style=f"bold {p.primary}")
    if subtitle:
        content.append(f"\n{subtitle}", style=p.muted)
    get_console().print(Panel(content, border_style=p.border, box=box.ROUNDED, padding=(0, 2)))


def print_step(step_num: int, total: int, title: str, style: str = "bar") -> None:
    """Imprime el indicador de paso con su progreso."""
    console = get_console()
    p = get_palette()

    progress_line = Text()
    if style == "dots":
        for i in range(1, total + 1):
            progress_line.append("● " if i <= step_num else "○ ", style=p.primary if i <= step_num else p.muted)
    else:
        bar_width = 30
        filled_width = int((step_num / total) * bar_width)
        progress_line.append("█" * filled_width, style=p.primary)
        progress_line.append("░" * (bar_width - filled_width), style=p.muted)
        progress_line.append(f"  {int((step_num / total) * 100)}%", style=p.muted)

    step_title = Text(f" Paso {step_num} de {total}", style=f"bold {p.secondary}")
    console.print()
    console.print(Panel(
        progress_line,
        title=step_title,
        subtitle=Text(title, style=f"italic {p.muted}"),
        subtitle_align="left",
        title_align="left",
        border_style=p.border,
        box=box.ROUNDED,
        padding=(0, 1),
        width=50,
    ))


def print_field(label: str, value, indent: int = 2) -> None:
    """Imprime un campo con valor."""
    p = get_palette()
    text = Text(" " * indent)
    text.append(f"{label}: ", style=p.label)
    text.append(str(value), style=f"bold {p.value}")
    get_console().print(text)


def print_success(text: str) -> None:
    get_console().print(Text(f"[+] {text}", style=get_palette().success))


def print_warning(text: str) -> None:
    get_console().print(Text(f"[!] {text}", style=get_palette().warning))


def print_error(text: str) -> None:
    get_console().print(Text(f"[x] {text}", style=get_palette().error))


def print_info(text: str) -> None:
    get_console().print(Text(f"[i] {text}", style=get_palette().info))


def print_muted(text: str) -> None:
    get_console().print(Text(text, style=get_palette().muted))


def create_table(title: Optional[str], columns: list[str]) -> Table:
    """Tabla con el estilo del tema."""
    p = get_palette()
    table = Table(title=title, box=box.ROUNDED, border_style=p.border, header_style=f"bold {p.primary}")
    for column in columns:
        table.add_column(column)
    return table
