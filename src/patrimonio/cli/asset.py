"""
Comandos CLI para gestão de bens (itens de estoque).
"""

from patrimonio.cli.common import (
    Annotated,
    LocalOption,
    Optional,
    StatusOption,
    TipoOption,
    build_filters,
    fail,
    get_console,
    get_db,
    print_field,
    print_header,
    print_info,
    print_success,
    report_submit,
    require_asset,
    typer,
)
from patrimonio.cli.forms import ASSET_FIELD_LABELS, MOVEMENT_FIELD_LABELS, ask_fields, confirm
from patrimonio.cli.theme import print_assets_table, print_movements_table
from patrimonio.errors import AppError
from patrimonio.models import MovementRequest
from patrimonio.reports.formatting import format_currency, format_date
from patrimonio.validation import (
    ASSET_SCHEMA,
    FormValidation,
    asset_data_from_form,
    asset_form_values,
    movement_schema_for,
)

asset_app = typer.Typer(help="Gestão de itens do estoque")


def _option_values(**options) -> dict:
    """Opções informadas na linha de comando (None = não informada)."""
    return {name: value for name, value in options.items() if value is not None}


def _print_asset(asset: dict) -> None:
    console = get_console()
    console.print()
    print_header(f"{asset['codigo']} - {asset['conteudo']}", f"ID {asset['id']}")
    print_field("Tipo", asset["tipo"])
    print_field("Descrição", asset.get("descricao"))
    print_field("Quantidade", asset["quantidade"], asset["unidade"])
    value = asset.get("valor_aquisicao")
    print_field("Valor de aquisição", format_currency(value) if value is not None else None)
    data = asset.get("data_aquisicao")
    print_field("Data de aquisição", format_date(data) if data else None)
    print_field("Localização", asset.get("localizacao_atual"))
    print_field("Responsável", asset.get("responsavel_atual"))
    print_field("Status", asset.get("status"))
    print_field("Observações", asset.get("observacoes"))
    console.print()


@asset_app.command("list")
def asset_list(
    page: Annotated[int, typer.Option("--page", "-p", min=1, help="Página")] = 1,
    search: Annotated[str, typer.Option("--search", "-q", help="Texto a procurar")] = "",
    tipo: TipoOption = None,
    status: StatusOption = None,
    localizacao: LocalOption = None,
) -> None:
    """
    Lista os bens, mais recentes primeiro (20 por página).

    Exemplo:
        patrimonio asset list --search caneta --status Ativo
    """
    db = get_db()
    result = db.assets.search(page, search, build_filters(tipo, status, localizacao))

    if not result.records:
        print_info("Nenhum bem encontrado.")
        return

    print_assets_table(
        result.records,
        title=f"Estoque - página {result.page} de {result.total_pages} ({result.total_count} bens)",
    )


@asset_app.command("show")
def asset_show(
    asset_id: Annotated[str, typer.Argument(help="ID (parcial) ou código do bem")],
) -> None:
    """Mostra os detalhes de um bem."""
    _print_asset(require_asset(get_db(), asset_id))


@asset_app.command("add")
def asset_add(
    tipo: Annotated[Optional[str], typer.Option("--tipo", "-t", help="Tipo do item")] = None,
    conteudo: Annotated[Optional[str], typer.Option("--conteudo", "-c", help="Conteúdo")] = None,
    quantidade: Annotated[Optional[str], typer.Option("--quantidade", "-n", help="Quantidade")] = None,
    unidade: Annotated[Optional[str], typer.Option("--unidade", "-u", help="Unidade")] = None,
    descricao: Annotated[Optional[str], typer.Option("--descricao", "-d", help="Descrição")] = None,
    valor: Annotated[Optional[str], typer.Option("--valor", help="Valor de aquisição")] = None,
    data: Annotated[Optional[str], typer.Option("--data", help="Data de aquisição (dd/mm/aaaa)")] = None,
    localizacao: Annotated[Optional[str], typer.Option("--localizacao", "-l", help="Localização")] = None,
    responsavel: Annotated[Optional[str], typer.Option("--responsavel", "-r", help="Responsável")] = None,
    status: Annotated[Optional[str], typer.Option("--status", "-s", help="Status")] = None,
    observacoes: Annotated[Optional[str], typer.Option("--obs", help="Observações")] = None,
    interactive: Annotated[bool, typer.Option("--interactive", "-i", help="Formulário interativo")] = False,
) -> None:
    """
    Cadastra um bem.

    Exemplo:
        patrimonio asset add -t Escritório -c "Canetas azuis" -n 10 -u Caixa
    """
    db = get_db()
    form = FormValidation(ASSET_SCHEMA, asset_form_values())
    for name, value in _option_values(
        tipo=tipo, conteudo=conteudo, quantidade=quantidade, unidade=unidade,
        descricao=descricao, valor_aquisicao=valor, data_aquisicao=data,
        localizacao_atual=localizacao, responsavel_atual=responsavel,
        status=status, observacoes=observacoes,
    ).items():
        form.set_value(name, value)

    if interactive:
        if not ask_fields(form, ASSET_FIELD_LABELS, db.assets.unique_locations()):
            print_info("Cadastro cancelado.")
            raise typer.Exit(0)

    created = {}
    result = form.submit_form(lambda values: created.update(db.assets.create(asset_data_from_form(values))))
    report_submit(result, ASSET_FIELD_LABELS)

    print_success(f"Bem cadastrado: {created['codigo']}")
    _print_asset(created)


@asset_app.command("edit")
def asset_edit(
    asset_id: Annotated[str, typer.Argument(help="ID (parcial) ou código do bem")],
    tipo: Annotated[Optional[str], typer.Option("--tipo", "-t", help="Tipo do item")] = None,
    conteudo: Annotated[Optional[str], typer.Option("--conteudo", "-c", help="Conteúdo")] = None,
    quantidade: Annotated[Optional[str], typer.Option("--quantidade", "-n", help="Quantidade")] = None,
    unidade: Annotated[Optional[str], typer.Option("--unidade", "-u", help="Unidade")] = None,
    descricao: Annotated[Optional[str], typer.Option("--descricao", "-d", help="Descrição")] = None,
    valor: Annotated[Optional[str], typer.Option("--valor", help="Valor de aquisição")] = None,
    data: Annotated[Optional[str], typer.Option("--data", help="Data de aquisição (dd/mm/aaaa)")] = None,
    status: Annotated[Optional[str], typer.Option("--status", "-s", help="Status")] = None,
    observacoes: Annotated[Optional[str], typer.Option("--obs", help="Observações")] = None,
    interactive: Annotated[bool, typer.Option("--interactive", "-i", help="Formulário interativo")] = False,
) -> None:
    """
    Edita um bem. Localização e responsável mudam com 'asset move'.
    """
    db = get_db()
    asset = require_asset(db, asset_id)

    form = FormValidation(ASSET_SCHEMA, asset_form_values(asset))
    changes = _option_values(
        tipo=tipo, conteudo=conteudo, quantidade=quantidade, unidade=unidade,
        descricao=descricao, valor_aquisicao=valor, data_aquisicao=data,
        status=status, observacoes=observacoes,
    )
    if not changes and not interactive:
        print_info("Nada para alterar.")
        return
    for name, value in changes.items():
        form.set_value(name, value)

    if interactive:
        labels = {k: v for k, v in ASSET_FIELD_LABELS.items() if k not in ("localizacao_atual", "responsavel_atual")}
        if not ask_fields(form, labels):
            print_info("Edição cancelada.")
            raise typer.Exit(0)

    updated = {}
    result = form.submit_form(
        lambda values: updated.update(db.assets.update(asset["id"], asset_data_from_form(values)))
    )
    report_submit(result, ASSET_FIELD_LABELS)
    print_success(f"Bem atualizado: {updated['codigo']}")


@asset_app.command("delete")
def asset_delete(
    asset_id: Annotated[str, typer.Argument(help="ID (parcial) ou código do bem")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Não pedir confirmação")] = False,
) -> None:
    """
    Exclui um bem e o seu histórico de movimentações.

    Esta ação é irreversível.
    """
    db = get_db()
    asset = require_asset(db, asset_id)

    if not force and not confirm(f"Excluir '{asset['codigo']} - {asset['conteudo']}'?", default=False):
        print_info("Operação cancelada.")
        raise typer.Exit(0)

    try:
        db.assets.delete(asset["id"])
    except AppError as exc:
        fail(exc)
    print_success(f"Bem excluído: {asset['codigo']}")


@asset_app.command("move")
def asset_move(
    asset_id: Annotated[str, typer.Argument(help="ID (parcial) ou código do bem")],
    para: Annotated[Optional[str], typer.Option("--para", help="Nova localização")] = None,
    responsavel: Annotated[Optional[str], typer.Option("--responsavel", "-r", help="Novo responsável")] = None,
    observacoes: Annotated[Optional[str], typer.Option("--obs", help="Observações")] = None,
    interactive: Annotated[bool, typer.Option("--interactive", "-i", help="Formulário interativo")] = False,
) -> None:
    """
    Move um bem para outra localização e/ou responsável.

    O histórico e o bem são atualizados juntos (tudo ou nada).

    Exemplo:
        patrimonio asset move 20240001 --para "Sala 1" -r Karen
    """
    db = get_db()
    asset = require_asset(db, asset_id)

    form = FormValidation(
        movement_schema_for(asset),
        {
            "localizacao_destino": para or "",
            "responsavel_destino": responsavel or "",
            "observacoes": observacoes or "",
        },
    )
    if interactive:
        if not ask_fields(form, MOVEMENT_FIELD_LABELS, db.assets.unique_locations()):
            print_info("Movimentação cancelada.")
            raise typer.Exit(0)

    result = form.submit_form(
        lambda values: db.assets.move(asset["id"], MovementRequest(
            localizacao_destino=values["localizacao_destino"].strip(),
            responsavel_destino=values["responsavel_destino"].strip(),
            observacoes=(values.get("observacoes") or "").strip() or None,
        ))
    )
    report_submit(result, MOVEMENT_FIELD_LABELS)
    print_success(
        f"Bem {asset['codigo']} movido para {form.values['localizacao_destino']} "
        f"({form.values['responsavel_destino']})"
    )


@asset_app.command("history")
def asset_history(
    asset_id: Annotated[str, typer.Argument(help="ID (parcial) ou código do bem")],
) -> None:
    """Histórico de movimentações de um bem."""
    db = get_db()
    asset = require_asset(db, asset_id)
    movements = db.movements.list_for_asset(asset["id"])

    if not movements:
        print_info(f"Nenhuma movimentação registrada para {asset['codigo']}.")
        return
    print_movements_table(movements, title=f"Histórico de {asset['codigo']}")
