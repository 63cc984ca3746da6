"""
Estilo de questionary basado en el tema actual y opciones de navegación.
"""

from questionary import Style

from dynaform.cli.theme import get_palette

BACK_TOKEN = "<"


def get_prompt_style() -> Style:
    """Estilo de questionary con los colores de la paleta activa."""
    p = get_palette()
    return Style([
        ('qmark', f'fg:{p.accent} bold'),
        ('question', 'bold'),
        ('answer', f'fg:{p.success} bold'),
        ('pointer', f'fg:{p.accent} bold'),
        ('highlighted', f'fg:{p.primary} bold'),
        ('selected', f'fg:{p.success} bold'),
        ('instruction', f'fg:{p.muted} italic'),
        ('text', ''),
        ('disabled', f'fg:{p.muted} italic'),
        ('separator', f'fg:{p.border}'),
    ])


def back_choice(text: str = "Volver") -> str:
    """Texto de la opción de volver atrás en listas."""
    return f"{BACK_TOKEN} {text}"
