"""
Testes da CLI.
"""

import json
from datetime import datetime

import pytest
from typer.testing import CliRunner

from patrimonio.auth import hash_password
from patrimonio.cli import app
from patrimonio.cli.forms import field_validator
from patrimonio.config import USERS_ENV_VAR
from patrimonio.database import get_database, reset_database
from patrimonio.validation import ASSET_SCHEMA, FormValidation, asset_form_values

runner = CliRunner()

# Console larga para que as tabelas não quebrem linhas
ENV = {"COLUMNS": "200"}


@pytest.fixture
def db_path(tmp_path):
    yield tmp_path / "cli.db"
    reset_database()


def invoke(db_path, *args, **kwargs):
    env = {**ENV, **kwargs.pop("env", {})}
    return runner.invoke(app, ["--db", str(db_path), *args], env=env, **kwargs)


def add_asset(db_path, *extra):
    return invoke(
        db_path, "asset", "add",
        "-t", "Escritório", "-c", "Canetas azuis", "-n", "10", "-u", "Caixa",
        "--valor", "35,50", "-l", "recepção", "-r", "Denise", *extra,
    )


class TestGeneral:
    """Testes gerais."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "patrimonio" in result.stdout

    def test_help(self):
        result = runner.invoke(app, ["--help"], env=ENV)
        assert result.exit_code == 0
        for name in ("asset", "report", "export", "import", "auth"):
            assert name in result.stdout

    def test_unreadable_database(self, tmp_path):
        path = tmp_path / "texto.db"
        path.write_bytes(b"x" * 1024)

        result = invoke(path, "report", "summary")

        assert result.exit_code == 1
        assert "Não foi possível abrir o banco" in result.stdout
        reset_database()


class TestAssetCommands:
    """Testes dos comandos de bens."""

    def test_add_and_list(self, db_path):
        year = datetime.now().year

        result = add_asset(db_path)

        assert result.exit_code == 0, result.stdout
        assert f"Bem cadastrado: {year}0001" in result.stdout
        stored = get_database().assets.list_all()
        assert stored[0]["valor_aquisicao"] == 35.5
        assert stored[0]["quantidade"] == 10

        result = invoke(db_path, "asset", "list")
        assert result.exit_code == 0
        assert "página 1 de 1 (1 bens)" in result.stdout

    def test_add_invalid(self, db_path):
        result = invoke(db_path, "asset", "add", "-t", "Escritório", "-c", "Canetas", "-n", "0", "-u", "Caixa")

        assert result.exit_code == 1
        assert "Dados inválidos" in result.stdout
        assert "Quantidade deve ser um número inteiro positivo" in result.stdout
        assert get_database().assets.list_all() == []

    def test_list_empty(self, db_path):
        result = invoke(db_path, "asset", "list", "--search", "nada")
        assert result.exit_code == 0
        assert "Nenhum bem encontrado" in result.stdout

    def test_show_unknown(self, db_path):
        result = invoke(db_path, "asset", "show", "naoexiste")
        assert result.exit_code == 1
        assert "não encontrado" in result.stdout

    def test_edit(self, db_path):
        add_asset(db_path)
        code = get_database().assets.list_all()[0]["codigo"]

        result = invoke(db_path, "asset", "edit", code, "-s", "quebrado")

        assert result.exit_code == 0, result.stdout
        assert "Bem atualizado" in result.stdout
        assert get_database().assets.get(code)["status"] == "quebrado"

        result = invoke(db_path, "asset", "edit", code)
        assert "Nada para alterar" in result.stdout

    def test_move_and_history(self, db_path):
        add_asset(db_path)
        code = get_database().assets.list_all()[0]["codigo"]

        result = invoke(db_path, "asset", "move", code, "--para", "Sala 1", "-r", "Karen")

        assert result.exit_code == 0, result.stdout
        assert "movido para Sala 1 (Karen)" in result.stdout

        result = invoke(db_path, "asset", "history", code)
        assert result.exit_code == 0
        assert f"Histórico de {code}" in result.stdout
        assert "Sala 1" in result.stdout

    def test_move_by_id_prefix(self, db_path):
        add_asset(db_path)
        asset_id = get_database().assets.list_all()[0]["id"]

        result = invoke(db_path, "asset", "move", asset_id[:4], "--para", "Sala 2", "-r", "Karen")

        assert result.exit_code == 0, result.stdout
        assert get_database().assets.get(asset_id)["localizacao_atual"] == "Sala 2"

    def test_move_to_same_location_fails(self, db_path):

        add_asset(db_path)
        code = get_database().assets.list_all()[0]["codigo"]

        result = invoke(db_path, "asset", "move", code, "--para", "recepção", "-r", "Karen")

        assert result.exit_code == 1
        assert "Nova localização deve ser diferente da atual" in result.stdout
        assert get_database().movements.count() == 0

    def test_delete_force(self, db_path):
        add_asset(db_path)
        code = get_database().assets.list_all()[0]["codigo"]

        result = invoke(db_path, "asset", "delete", code, "--force")

        assert result.exit_code == 0
        assert f"Bem excluído: {code}" in result.stdout
        assert get_database().assets.list_all() == []


class TestReportCommands:
    """Testes dos relatórios."""

    def test_summary(self, db_path):
        add_asset(db_path)

        result = invoke(db_path, "report", "summary")

        assert result.exit_code == 0
        assert "RESUMO DO ESTOQUE" in result.stdout
        assert "R$ 355,00" in result.stdout

    def test_location(self, db_path):
        add_asset(db_path)

        result = invoke(db_path, "report", "location")

        assert result.exit_code == 0
        assert "recepção" in result.stdout

    def test_empty(self, db_path):
        result = invoke(db_path, "report", "type")
        assert "Nenhum bem cadastrado" in result.stdout


class TestExportCommands:
    """Testes de exportação."""

    def test_export_csv(self, db_path, tmp_path):
        add_asset(db_path)
        out = tmp_path / "saida"

        result = invoke(db_path, "export", "csv", "-o", str(out))

        assert result.exit_code == 0, result.stdout
        assert "1 registros exportados" in result.stdout
        files = list(out.glob("estoque_*.csv"))
        assert len(files) == 1
        assert "Canetas azuis" in files[0].read_text(encoding="utf-8")

    def test_export_filtered_csv_name(self, db_path, tmp_path):
        add_asset(db_path)

        result = invoke(db_path, "export", "csv", "-o", str(tmp_path), "--status", "Ativo")

        assert result.exit_code == 0
        assert len(list(tmp_path.glob("estoque_status-Ativo_*.csv"))) == 1

    def test_export_json(self, db_path, tmp_path):
        add_asset(db_path)

        result = invoke(db_path, "export", "json", "-o", str(tmp_path))

        assert result.exit_code == 0
        path = next(tmp_path.glob("estoque_completo_*.json"))
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["metadata"]["recordCount"] == 1
        assert payload["statistics"]["totalItems"] == 10

    def test_export_xlsx(self, db_path, tmp_path):
        add_asset(db_path)

        result = invoke(db_path, "export", "xlsx", "-o", str(tmp_path))

        assert result.exit_code == 0, result.stdout
        assert len(list(tmp_path.glob("estoque_*.xlsx"))) == 1

    def test_export_empty_fails(self, db_path, tmp_path):
        out = tmp_path / "vazio"

        result = invoke(db_path, "export", "xlsx", "-o", str(out))

        assert result.exit_code == 1
        assert "Nenhum dado para exportar" in result.stdout
        assert not out.exists()

    def test_unknown_template(self, db_path, tmp_path):
        result = invoke(db_path, "export", "csv", "--template", "inexistente", "-o", str(tmp_path))
        assert result.exit_code == 1
        assert "Modelo desconhecido" in result.stdout


class TestImportCommands:
    """Testes de importação."""

    def test_import_csv(self, db_path, tmp_path):
        path = tmp_path / "estoque.csv"
        path.write_text(
            "Tipo,Conteúdo,Unidade,Quantidade,Valor de Aquisição\n"
            'Escritório,Grampeador,Unidade,2,"R$ 25,90"\n'
            "Decoração,,Unidade,1,\n"
            "Decoração,Quadro,Unidade,1,80\n",
            encoding="utf-8",
        )

        result = invoke(db_path, "import", "csv", str(path))

        assert result.exit_code == 0, result.stdout
        assert "3 linhas lidas: 2 válidas, 1 inválidas" in result.stdout
        assert "Conteúdo é obrigatório" in result.stdout
        assert "2 bens importados" in result.stdout
        stored = {r["conteudo"]: r for r in get_database().assets.list_all()}
        assert stored["Grampeador"]["valor_aquisicao"] == 25.9
        assert stored["Grampeador"]["quantidade"] == 2

    def test_import_dry_run(self, db_path, tmp_path):
        path = tmp_path / "estoque.csv"
        path.write_text("Tipo,Conteúdo,Unidade\nEscritório,Lápis,Caixa\n", encoding="utf-8")

        result = invoke(db_path, "import", "csv", str(path), "--dry-run")

        assert result.exit_code == 0
        assert get_database().assets.list_all() == []

    def test_import_missing_columns(self, db_path, tmp_path):
        path = tmp_path / "estoque.csv"
        path.write_text("Tipo,Descrição\nEscritório,Lápis\n", encoding="utf-8")

        result = invoke(db_path, "import", "csv", str(path))

        assert result.exit_code == 1
        assert "Colunas obrigatórias não encontradas: Conteúdo, Unidade" in result.stdout


class TestAuthCommands:
    """Testes de autenticação."""

    @pytest.fixture
    def users_file(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text(json.dumps([{
            "email": "karen@clinica.com",
            "password_hash": hash_password("segredo", rounds=4),
            "name": "Karen",
            "role": "manager",
        }]), encoding="utf-8")
        return path

    def test_login(self, db_path, users_file):
        result = invoke(
            db_path, "auth", "login", "karen@clinica.com",
            input="segredo\n", env={USERS_ENV_VAR: str(users_file)},
        )

        assert result.exit_code == 0, result.stdout
        assert "Autenticado: Karen" in result.stdout
        assert "assets:delete" in result.stdout

    def test_login_wrong_password(self, db_path, users_file):
        result = invoke(
            db_path, "auth", "login", "karen@clinica.com",
            input="errada\n", env={USERS_ENV_VAR: str(users_file)},
        )

        assert result.exit_code == 1
        assert "Senha incorreta" in result.stdout

    def test_login_without_users_file(self, db_path, tmp_path):
        result = invoke(
            db_path, "auth", "login", "karen@clinica.com",
            input="segredo\n", env={USERS_ENV_VAR: str(tmp_path / "nao_existe.json")},
        )

        assert result.exit_code == 1
        assert "Lista de usuários não encontrada" in result.stdout

    def test_hash_password(self):
        result = runner.invoke(app, ["auth", "hash-password"], input="abc\nabc\n", env=ENV)

        assert result.exit_code == 0
        assert "$2b$" in result.stdout


class TestForms:
    """Testes do validador usado nas perguntas interativas."""

    def test_field_validator(self):
        form = FormValidation(ASSET_SCHEMA, asset_form_values())
        validate = field_validator(form, "quantidade")

        assert validate("0") == "Quantidade deve ser um número inteiro positivo"
        assert form.touched["quantidade"] is True
        assert validate("3") is True
        assert form.values["quantidade"] == "3"
