"""
Funções que imprimem diretamente na console.
"""

from patrimonio.cli.theme.palette import get_console, get_palette
from patrimonio.cli.theme.styled import (
    styled_error,
    styled_header,
    styled_info,
    styled_label,
    styled_success,
    styled_warning,
)


def print_separator(char: str = "-", width: int = 60) -> None:
    console = get_console()
    p = get_palette()
    console.print(char * width, style=p.border)


def print_header(text: str, subtitle: str = None) -> None:
    console = get_console()
    console.print(styled_header(text, subtitle))


def print_field(label: str, value, unit: str = None, indent: int = 2) -> None:
    """Imprime um campo com valor."""
    console = get_console()
    console.print(" " * indent, styled_label(label, value, unit))


def print_success(text: str) -> None:
    get_console().print(styled_success(text))


def print_warning(text: str) -> None:
    get_console().print(styled_warning(text))


def print_error(text: str) -> None:
    get_console().print(styled_error(text))


def print_info(text: str) -> None:
    get_console().print(styled_info(text))


def print_section(title: str) -> None:
    """Imprime título de seção."""
    console = get_console()
    p = get_palette()
    console.print()
    console.print(f"-- {title} --", style=f"bold {p.secondary}")
    console.print()
