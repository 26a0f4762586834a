"""
Imports e utilitários comuns aos módulos da CLI.
"""

from typing import Annotated, Optional

import typer

from patrimonio.cli.theme import (
    get_console,
    get_palette,
    print_error,
    print_field,
    print_header,
    print_info,
    print_section,
    print_success,
    print_warning,
)
from patrimonio.database import Database, get_database
from patrimonio.errors import AppError, user_message
from patrimonio.models import AssetFilters
from patrimonio.validation import SubmitResult

# Opções de filtro compartilhadas
TipoOption = Annotated[Optional[str], typer.Option("--tipo", "-t", help="Filtrar por tipo")]
StatusOption = Annotated[Optional[str], typer.Option("--status", "-s", help="Filtrar por status")]
LocalOption = Annotated[Optional[str], typer.Option("--localizacao", "-l", help="Filtrar por localização (parcial)")]


def get_db() -> Database:
    """Banco global configurado (PATRIMONIO_DB ou default)."""
    return get_database()


def build_filters(
    tipo: Optional[str] = None,
    status: Optional[str] = None,
    localizacao: Optional[str] = None,
) -> AssetFilters:
    return AssetFilters(tipo=tipo or "", status=status or "", localizacao=localizacao or "")


def fail(error: BaseException) -> None:
    """Mostra o erro ao usuário e encerra com código 1."""
    if isinstance(error, AppError):
        print_error(error.message)
        print_info(user_message(error))
    else:
        print_error(user_message(error))
    raise typer.Exit(1)


def require_asset(db: Database, asset_id: str) -> dict:
    """Busca um bem (ID parcial ou código) ou encerra com erro."""
    asset = db.assets.get(asset_id)
    if asset is None:
        print_error(f"Bem '{asset_id}' não encontrado.")
        raise typer.Exit(1)
    return asset


def report_submit(result: SubmitResult, labels: Optional[dict[str, str]] = None) -> None:
    """Imprime erros de validação ou de gravação e encerra se houver falha."""
    if result.success:
        return
    if result.errors:
        print_error("Dados inválidos:")
        for name, message in result.errors.items():
            label = (labels or {}).get(name, name)
            print_field(label, message)
        raise typer.Exit(1)
    fail(result.error)


__all__ = [
    "Annotated",
    "Optional",
    "typer",
    "TipoOption",
    "StatusOption",
    "LocalOption",
    "get_console",
    "get_palette",
    "print_error",
    "print_field",
    "print_header",
    "print_info",
    "print_section",
    "print_success",
    "print_warning",
    "get_db",
    "build_filters",
    "fail",
    "require_asset",
    "report_submit",
]
