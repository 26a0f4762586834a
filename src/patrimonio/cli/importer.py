"""
Comandos CLI de importação.
"""

from pathlib import Path

from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from patrimonio.cli.common import (
    Annotated,
    get_console,
    get_db,
    print_error,
    print_info,
    print_success,
    print_warning,
    typer,
)
from patrimonio.cli.theme import create_results_table
from patrimonio.config import ImportOptions
from patrimonio.database import BatchProgress
from patrimonio.reports.headers import ASSETS
from patrimonio.reports.importer import ASSET_REQUIRED_FIELDS, ImportResult, TabularImporter

import_app = typer.Typer(help="Importação de dados")

# Colunas mínimas de um arquivo de estoque
REQUIRED_COLUMNS = ["Tipo", "Conteúdo", "Unidade"]


def _print_row_errors(result: ImportResult, limit: int = 20) -> None:
    table = create_results_table(title="Linhas rejeitadas", columns=[("Linha", "right"), ("Erros", "left")])
    for row_error in result.row_errors[:limit]:
        table.add_row(str(row_error.row_number), "; ".join(row_error.messages))
    get_console().print(table)
    if len(result.row_errors) > limit:
        print_info(f"... e mais {len(result.row_errors) - limit} linhas")


@import_app.command("csv")
def import_csv(
    file: Annotated[Path, typer.Argument(help="Arquivo CSV", exists=True, dir_okay=False)],
    delimiter: Annotated[str, typer.Option("--delimiter", help="Separador de campos")] = ",",
    skip_rows: Annotated[int, typer.Option("--skip-rows", min=0, help="Linhas iniciais ignoradas")] = 0,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Apenas validar, sem gravar")] = False,
) -> None:
    """
    Importa bens de um CSV (por exemplo, um arquivo exportado e editado).

    Linhas inválidas são listadas e ignoradas; as demais são gravadas em
    lotes de 10.
    """
    importer = TabularImporter(
        ASSETS,
        ImportOptions(delimiter=delimiter, skip_rows=skip_rows),
        required_fields=ASSET_REQUIRED_FIELDS,
    )
    result = importer.import_file(file, expected_headers=REQUIRED_COLUMNS)

    if not result.success:
        print_error(result.error)
        raise typer.Exit(1)

    print_info(
        f"{result.total_rows} linhas lidas: {result.valid_row_count} válidas, "
        f"{result.invalid_row_count} inválidas"
    )
    if result.row_errors:
        _print_row_errors(result)

    if dry_run or not result.rows:
        return

    db = get_db()
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=get_console(),
        transient=True,
    ) as progress:
        task = progress.add_task("Gravando", total=len(result.rows))

        def on_progress(p: BatchProgress) -> None:
            progress.update(task, completed=p.processed)

        batch = db.batch_importer().import_assets(result.rows, on_progress)

    if batch.success:
        print_success(f"{batch.success} bens importados")
    for error in batch.errors:
        print_warning(f"Lote {error['batch']} falhou: {error['error']}")
    if batch.failed and not batch.success:
        raise typer.Exit(1)
