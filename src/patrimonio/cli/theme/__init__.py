"""
Sistema de temas e estilos da CLI.

Uso::

    from patrimonio.cli.theme import get_console, print_success

    print_success("Bem criado")
"""

from patrimonio.cli.theme.palette import (
    THEMES,
    CLITheme,
    ColorPalette,
    ThemeName,
    get_console,
    get_palette,
)
from patrimonio.cli.theme.printing import (
    print_error,
    print_field,
    print_header,
    print_info,
    print_section,
    print_separator,
    print_success,
    print_warning,
)
from patrimonio.cli.theme.styled import (
    styled_error,
    styled_header,
    styled_info,
    styled_label,
    styled_muted,
    styled_status,
    styled_success,
    styled_warning,
)
from patrimonio.cli.theme.tables import (
    create_results_table,
    print_assets_table,
    print_group_table,
    print_movements_table,
    print_statistics,
)

__all__ = [
    # Paleta
    "THEMES",
    "CLITheme",
    "ColorPalette",
    "ThemeName",
    "get_console",
    "get_palette",
    # Impressão
    "print_error",
    "print_field",
    "print_header",
    "print_info",
    "print_section",
    "print_separator",
    "print_success",
    "print_warning",
    # Estilos
    "styled_error",
    "styled_header",
    "styled_info",
    "styled_label",
    "styled_muted",
    "styled_status",
    "styled_success",
    "styled_warning",
    # Tabelas
    "create_results_table",
    "print_assets_table",
    "print_group_table",
    "print_movements_table",
    "print_statistics",
]
