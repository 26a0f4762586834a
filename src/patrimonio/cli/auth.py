"""
Comandos CLI de autenticação.
"""

from patrimonio.auth import AllowListProvider, AuthSession, hash_password
from patrimonio.cli.common import (
    Annotated,
    fail,
    get_db,
    print_error,
    print_field,
    print_success,
    typer,
)
from patrimonio.errors import AppError

auth_app = typer.Typer(help="Usuários e permissões")


@auth_app.command("hash-password")
def auth_hash_password(
    password: Annotated[str, typer.Option(prompt=True, hide_input=True, confirmation_prompt=True)],
) -> None:
    """
    Gera o hash de uma senha para a lista de usuários (users.json).
    """
    typer.echo(hash_password(password))


@auth_app.command("login")
def auth_login(
    email: Annotated[str, typer.Argument(help="E-mail do usuário")],
    password: Annotated[str, typer.Option(prompt=True, hide_input=True)],
) -> None:
    """Verifica credenciais e mostra o papel e as permissões do usuário."""
    users_path = get_db().settings.users_path
    try:
        provider = AllowListProvider.from_file(users_path)
    except AppError as exc:
        fail(exc)

    session = AuthSession(provider)
    result = session.sign_in(email, password)
    if not result.success:
        print_error(result.error)
        raise typer.Exit(1)

    user = result.user
    print_success(f"Autenticado: {user.name or user.email}")
    print_field("Papel", user.role.value)
    print_field("Permissões", ", ".join(sorted(p.value for p in session.permissions)))
    session.sign_out()
