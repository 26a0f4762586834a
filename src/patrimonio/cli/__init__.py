"""
CLI do patrimonio - Sistema de Estoque da Clínica.

Sub-aplicações:
- asset: Cadastro, edição, movimentação e histórico de bens
- report: Relatórios no terminal
- export: Exportação CSV, JSON e Excel
- import: Importação de CSV
- auth: Usuários e permissões
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from patrimonio import __version__
from patrimonio.cli.asset import asset_app
from patrimonio.cli.auth import auth_app
from patrimonio.cli.common import fail
from patrimonio.cli.export import export_app
from patrimonio.cli.importer import import_app
from patrimonio.cli.report import report_app
from patrimonio.cli.theme import CLITheme, ThemeName, get_console
from patrimonio.config import DB_ENV_VAR
from patrimonio.database import open_database
from patrimonio.errors import RepositoryError

app = typer.Typer(
    name="patrimonio",
    help="Controle de estoque e patrimônio da clínica.",
    no_args_is_help=True,
)

app.add_typer(asset_app, name="asset")
app.add_typer(report_app, name="report")
app.add_typer(export_app, name="export")
app.add_typer(import_app, name="import")
app.add_typer(auth_app, name="auth")


def _configure_logging(verbose: bool) -> None:
    """Com --verbose, os logs da biblioteca vão para a console Rich."""
    logger = logging.getLogger("patrimonio")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    if verbose:
        logger.addHandler(RichHandler(console=get_console(), show_path=False))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.WARNING)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"patrimonio {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    db: Annotated[
        Optional[Path],
        typer.Option("--db", envvar=DB_ENV_VAR, help="Arquivo do banco SQLite"),
    ] = None,
    theme: Annotated[
        ThemeName,
        typer.Option("--theme", help="Tema de cores", case_sensitive=False),
    ] = ThemeName.DEFAULT,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Mostrar logs")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Mostrar versão"),
    ] = None,
) -> None:
    """
    Sistema de Estoque da Clínica.

    O banco padrão fica em ~/.patrimonio/patrimonio.db (ou em PATRIMONIO_DB).
    """
    CLITheme.set_theme(theme)
    _configure_logging(verbose)
    if db is not None:
        try:
            open_database(db)
        except RepositoryError as exc:
            fail(exc)


__all__ = [
    "app",
]
