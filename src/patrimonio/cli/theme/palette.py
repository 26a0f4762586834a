"""
Definição de paletas de cores e gerenciamento de temas.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.theme import Theme


class ThemeName(Enum):
    """Temas disponíveis."""
    DEFAULT = "default"
    NORD = "nord"
    MINIMAL = "minimal"


@dataclass
class ColorPalette:
    """Paleta de cores de um tema."""
    # Cores principais
    primary: str      # Títulos, destaques
    secondary: str    # Subtítulos, cabeçalhos de tabela
    accent: str       # Códigos e IDs

    # Cores semânticas
    success: str
    warning: str
    error: str
    info: str
    muted: str        # Texto secundário

    # Dados
    number: str       # Quantidades e valores
    money: str        # Valores monetários
    label: str        # Rótulos

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
    number="#d7af5f",
    money="#87af87",
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
    number="#d08770",
    money="#a3be8c",
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
    number="#ffffff",
    money="#ffffff",
    label="#909090",
    border="#404040",
)

THEMES = {
    ThemeName.DEFAULT: THEME_DEFAULT,
    ThemeName.NORD: THEME_NORD,
    ThemeName.MINIMAL: THEME_MINIMAL,
}


class CLITheme:
    """Gerenciador de tema da CLI."""

    _instance: Optional["CLITheme"] = None
    _palette: ColorPalette = THEME_DEFAULT
    _console: Optional[Console] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def set_theme(cls, theme: ThemeName) -> None:
        """Define o tema ativo."""
        cls._palette = THEMES.get(theme, THEME_DEFAULT)
        cls._console = None  # recriada com o novo tema

    @classmethod
    def get_palette(cls) -> ColorPalette:
        return cls._palette

    @classmethod
    def get_console(cls) -> Console:
        """Console Rich com o tema aplicado."""
        if cls._console is None:
            p = cls._palette
            custom_theme = Theme({
                "primary": p.primary,
                "secondary": p.secondary,
                "accent": p.accent,
                "success": p.success,
                "warning": p.warning,
                "error": p.error,
                "info": p.info,
                "muted": p.muted,
                "number": p.number,
                "money": p.money,
                "label": p.label,
                "title": f"bold {p.primary}",
                "value": f"bold {p.number}",
                "table.header": f"bold {p.secondary}",
            })
            cls._console = Console(theme=custom_theme)
        return cls._console

    @classmethod
    def reset(cls) -> None:
        """Descarta a console atual (a próxima chamada cria outra)."""
        cls._console = None


def get_console() -> Console:
    """Console Rich com tema aplicado."""
    return CLITheme.get_console()


def get_palette() -> ColorPalette:
    """Paleta de cores atual."""
    return CLITheme.get_palette()
