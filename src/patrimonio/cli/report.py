"""
Comandos CLI de relatórios no terminal.
"""

from patrimonio.cli.common import (
    LocalOption,
    StatusOption,
    TipoOption,
    build_filters,
    get_db,
    print_info,
    typer,
)
from patrimonio.cli.theme import print_group_table, print_statistics
from patrimonio.reports.statistics import GROUP_REPORTS, build_report, compute_statistics

report_app = typer.Typer(help="Relatórios do estoque")

# nome -> (rótulo da coluna, título)
REPORT_TITLES = {
    "location": ("Localização", "INVENTÁRIO POR LOCALIZAÇÃO"),
    "responsible": ("Responsável", "BENS POR RESPONSÁVEL"),
    "type": ("Tipo", "RESUMO POR TIPO"),
    "status": ("Status", "BENS POR STATUS"),
}


def _print_report(name: str) -> None:
    assets = get_db().assets.list_all()
    if not assets:
        print_info("Nenhum bem cadastrado.")
        return
    _, label_key = GROUP_REPORTS[name]
    label, title = REPORT_TITLES[name]
    print_group_table(build_report(assets, name), label_key, label, title)


@report_app.command("summary")
def report_summary(
    tipo: TipoOption = None,
    status: StatusOption = None,
    localizacao: LocalOption = None,
) -> None:
    """Valor total, itens e quebras por categoria e status."""
    assets = get_db().assets.list_all(build_filters(tipo, status, localizacao))
    if not assets:
        print_info("Nenhum bem encontrado.")
        return
    print_statistics(compute_statistics(assets))


@report_app.command("location")
def report_location() -> None:
    """Quantidade e valor por localização."""
    _print_report("location")


@report_app.command("responsible")
def report_responsible() -> None:
    """Quantidade e valor por responsável."""
    _print_report("responsible")


@report_app.command("type")
def report_type() -> None:
    """Quantidade e valor por tipo."""
    _print_report("type")


@report_app.command("status")
def report_status() -> None:
    """Quantidade e valor por status."""
    _print_report("status")
