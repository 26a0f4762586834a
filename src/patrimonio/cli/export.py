"""
Comandos CLI de exportação (CSV, JSON e Excel).
"""

from pathlib import Path

from patrimonio.cli.common import (
    Annotated,
    LocalOption,
    StatusOption,
    TipoOption,
    build_filters,
    get_db,
    print_error,
    print_info,
    print_success,
    typer,
)
from patrimonio.database import Database
from patrimonio.models import AssetFilters
from patrimonio.reports import TEMPLATES, ExportResult, TabularExporter, build_report, compute_statistics
from patrimonio.reports.exporter import filter_suffix

export_app = typer.Typer(help="Exportação de dados")

OutputOption = Annotated[Path, typer.Option("--output", "-o", help="Diretório de saída")]
TemplateOption = Annotated[
    str,
    typer.Option("--template", help=f"Colunas: {', '.join(TEMPLATES)}"),
]

# modelo -> nome base do arquivo
BASE_NAMES = {
    "assets": "estoque",
    "assets_basic": "estoque_basico",
    "assets_complete": "estoque_completo",
    "movements": "movimentacoes",
    "location": "inventario_por_localizacao",
    "responsible": "bens_por_responsavel",
    "type": "resumo_por_tipo",
    "status": "bens_por_status",
}


def _records(db: Database, template: str, filters: AssetFilters) -> list[dict]:
    """Registros do modelo escolhido."""
    if template == "movements":
        return db.movements.list_all()
    assets = db.assets.list_all(filters)
    if template in ("location", "responsible", "type", "status"):
        return build_report(assets, template)
    return assets


def _check_template(template: str) -> None:
    if template not in TEMPLATES:
        print_error(f"Modelo desconhecido: {template}. Opções: {', '.join(TEMPLATES)}")
        raise typer.Exit(1)


def _report(result: ExportResult) -> None:
    if not result.success:
        print_error(f"Erro ao exportar: {result.error}")
        raise typer.Exit(1)
    print_success(f"{result.row_count} registros exportados")
    print_info(f"Arquivo: {result.path}")


@export_app.command("csv")
def export_csv(
    output: OutputOption = Path("."),
    template: TemplateOption = "assets",
    tipo: TipoOption = None,
    status: StatusOption = None,
    localizacao: LocalOption = None,
) -> None:
    """
    Exporta para CSV (UTF-8 com BOM, abre no Excel).

    Exemplo:
        patrimonio export csv --template location -o relatorios/
    """
    _check_template(template)
    filters = build_filters(tipo, status, localizacao)
    records = _records(get_db(), template, filters)
    base = BASE_NAMES[template] + filter_suffix(filters)
    _report(TabularExporter(output).export_csv(records, TEMPLATES[template], base))


@export_app.command("json")
def export_json(
    output: OutputOption = Path("."),
    tipo: TipoOption = None,
    status: StatusOption = None,
    localizacao: LocalOption = None,
) -> None:
    """Exporta os bens para JSON com metadados, estatísticas e filtros."""
    filters = build_filters(tipo, status, localizacao)
    records = get_db().assets.list_all(filters)
    exporter = TabularExporter(output)
    stats = compute_statistics(records) if records else None

    if filters.active:
        result = exporter.export_filtered_json(records, filters, stats)
    else:
        result = exporter.export_json(records, "estoque_completo", stats)
    _report(result)


@export_app.command("xlsx")
def export_xlsx(
    output: OutputOption = Path("."),
    template: TemplateOption = "assets",
    tipo: TipoOption = None,
    status: StatusOption = None,
    localizacao: LocalOption = None,
    stats: Annotated[bool, typer.Option("--stats/--no-stats", help="Incluir aba de estatísticas")] = True,
) -> None:
    """Exporta para planilha Excel (aba Estoque e, opcionalmente, Estatísticas)."""
    _check_template(template)
    db = get_db()
    filters = build_filters(tipo, status, localizacao)
    records = _records(db, template, filters)
    exporter = TabularExporter(output)

    statistics = None
    if stats and template.startswith("assets") and records:
        statistics = compute_statistics(records)

    if filters.active:
        result = exporter.export_filtered_xlsx(records, TEMPLATES[template], filters, statistics)
    else:
        result = exporter.export_xlsx(records, TEMPLATES[template], BASE_NAMES[template], statistics)
    _report(result)
