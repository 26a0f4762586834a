"""
Funções para criar e imprimir tabelas Rich.
"""

from rich import box
from rich.table import Table

from patrimonio.cli.theme.palette import get_console, get_palette
from patrimonio.cli.theme.styled import styled_status
from patrimonio.reports.formatting import format_currency, format_date
from patrimonio.reports.statistics import InventoryStatistics


def create_results_table(
    title: str = None,
    columns: list[tuple[str, str]] = None,  # [(nome, justify), ...]
) -> Table:
    """Cria uma tabela estilizada."""
    p = get_palette()

    table = Table(
        title=title,
        title_style=f"bold {p.primary}",
        border_style=p.border,
        header_style=f"bold {p.secondary}",
        box=box.ROUNDED,
        show_header=True,
        padding=(0, 1),
    )

    if columns:
        for name, justify in columns:
            table.add_column(name, justify=justify)

    return table


def print_assets_table(assets: list[dict], title: str = "ESTOQUE") -> None:
    """Imprime a listagem de bens."""
    console = get_console()
    p = get_palette()

    table = create_results_table(title=title)
    table.add_column("Código", style=p.accent)
    table.add_column("Tipo")
    table.add_column("Conteúdo")
    table.add_column("Qtd", justify="right", style=p.number)
    table.add_column("Localização")
    table.add_column("Responsável")
    table.add_column("Status")
    table.add_column("Valor", justify="right", style=p.money)

    for asset in assets:
        value = asset.get("valor_aquisicao")
        table.add_row(
            asset.get("codigo") or asset.get("id", ""),
            asset.get("tipo", ""),
            asset.get("conteudo", ""),
            str(asset.get("quantidade", "")),
            asset.get("localizacao_atual") or "-",
            asset.get("responsavel_atual") or "-",
            styled_status(asset.get("status", "")),
            format_currency(value) if value is not None else "-",
        )

    console.print(table)


def print_movements_table(movements: list[dict], title: str = "MOVIMENTAÇÕES") -> None:
    """Imprime o histórico de movimentações."""
    console = get_console()
    p = get_palette()

    table = create_results_table(title=title)
    table.add_column("Data", style=p.muted)
    table.add_column("Bem", style=p.accent)
    table.add_column("Origem")
    table.add_column("Destino")
    table.add_column("Observações")

    for m in movements:
        table.add_row(
            format_date(m.get("data_movimentacao"), "%d/%m/%Y %H:%M"),
            m.get("bem_codigo") or m.get("bem_id", ""),
            f"{m.get('localizacao_origem') or '-'} / {m.get('responsavel_origem') or '-'}",
            f"{m.get('localizacao_destino')} / {m.get('responsavel_destino')}",
            m.get("observacoes") or "",
        )

    console.print(table)


def print_group_table(rows: list[dict], label_key: str, label: str, title: str) -> None:
    """Imprime um relatório agrupado (quantidade e valor total por grupo)."""
    console = get_console()
    p = get_palette()

    table = create_results_table(title=title)
    table.add_column(label)
    table.add_column("Quantidade", justify="right", style=p.number)
    table.add_column("Valor Total", justify="right", style=p.money)

    for row in rows:
        table.add_row(str(row[label_key]), str(row["quantidade"]), format_currency(row["valor_total"]))

    console.print(table)


def print_statistics(stats: InventoryStatistics) -> None:
    """Imprime o resumo de valor e as quebras por categoria e status."""
    console = get_console()
    p = get_palette()

    summary = create_results_table(title="RESUMO DO ESTOQUE", columns=[("Métrica", "left"), ("Valor", "right")])
    summary.add_row("Valor Total do Estoque", format_currency(stats.total_value))
    summary.add_row("Total de Itens", str(stats.total_items))
    summary.add_row("Valor Médio por Item", format_currency(stats.average_value))
    console.print(summary)

    for title, groups in (
        ("POR CATEGORIA", stats.sorted_categories()),
        ("POR STATUS", stats.sorted_statuses()),
    ):
        table = create_results_table(title=title)
        table.add_column("Grupo")
        table.add_column("Registros", justify="right", style=p.number)
        table.add_column("Itens", justify="right", style=p.number)
        table.add_column("Valor", justify="right", style=p.money)
        for name, group in groups:
            table.add_row(name, str(group.count), str(group.items), format_currency(group.value))
        console.print(table)
