"""
Testes do módulo de banco de dados.
"""

import sqlite3
from datetime import datetime

import pytest

import patrimonio.database as database_module
from patrimonio.config import DB_ENV_VAR
from patrimonio.database import (
    Database,
    QueryCache,
    StagedAssetList,
    get_database,
    open_database,
    reset_database,
    use_database,
)
from patrimonio.database.batch import BatchImporter, row_to_asset_data
from patrimonio.errors import ErrorCode, NotFoundError, RepositoryError
from patrimonio.models import AssetFilters, MovementRequest


def _asset(**overrides):
    data = {
        "tipo": "Escritório",
        "conteudo": "Canetas",
        "unidade": "Caixa",
        "quantidade": 1,
        "localizacao_atual": "recepção",
        "responsavel_atual": "Denise",
    }
    data.update(overrides)
    return data


class TestDatabaseSetup:
    """Testes de criação do banco."""

    def test_creates_file_and_schema(self, temp_db):
        assert temp_db.db_path.exists()
        assert temp_db._conn.schema_version == 1

    def test_reopen_keeps_data(self, temp_db, asset_data):
        temp_db.assets.create(asset_data)
        reopened = Database(temp_db.db_path)
        assert len(reopened.assets.list_all()) == 1

    def test_global_instance(self, tmp_path, monkeypatch):
        monkeypatch.setenv(DB_ENV_VAR, str(tmp_path / "env.db"))
        db = use_database(tmp_path / "global.db")
        assert get_database() is db

        reset_database()

        assert get_database().db_path == tmp_path / "env.db"
        reset_database()


class TestOpenDatabase:
    """Testes de open_database."""

    @pytest.fixture(autouse=True)
    def _reset(self):
        yield
        reset_database()

    def test_retries_locked_database(self, tmp_path, monkeypatch):
        attempts = []
        sleeps = []

        def locked_twice(db_path):
            attempts.append(db_path)
            if len(attempts) < 3:
                raise sqlite3.OperationalError("database is locked")
            return use_database(db_path)

        monkeypatch.setattr(database_module, "use_database", locked_twice)

        db = open_database(tmp_path / "travado.db", retries=3, delay=0.5, sleep=sleeps.append)

        assert get_database() is db
        assert len(attempts) == 3
        assert sleeps == [0.5, 1.0]

    def test_gives_up_after_retries(self, tmp_path, monkeypatch):
        def always_locked(db_path):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(database_module, "use_database", always_locked)

        with pytest.raises(RepositoryError, match="database is locked") as exc_info:
            open_database(tmp_path / "travado.db", retries=2, sleep=lambda s: None)

        assert exc_info.value.code == ErrorCode.SERVER_ERROR
        assert isinstance(exc_info.value.original, sqlite3.OperationalError)

    def test_not_a_database_fails_without_retry(self, tmp_path):
        path = tmp_path / "texto.db"
        path.write_bytes(b"x" * 1024)
        sleeps = []

        with pytest.raises(RepositoryError, match="Não foi possível abrir o banco"):
            open_database(path, sleep=sleeps.append)

        assert sleeps == []



class TestAssetCrud:
    """Testes de criação, leitura, edição e exclusão."""

    def test_create_assigns_sequential_codes(self, temp_db, asset_data):
        year = datetime.now().year

        first = temp_db.assets.create(asset_data)
        second = temp_db.assets.create(asset_data)

        assert first["codigo"] == f"{year}0001"
        assert second["codigo"] == f"{year}0002"
        assert first["id"] != second["id"]

    def test_explicit_code_is_kept(self, temp_db, asset_data):
        record = temp_db.assets.create({**asset_data, "codigo": "ANTIGO-7"})
        assert record["codigo"] == "ANTIGO-7"
        assert temp_db.assets.next_code().endswith("0001")

    def test_get_by_id_prefix_and_code(self, temp_db, asset_data):
        record = temp_db.assets.create(asset_data)

        assert temp_db.assets.get(record["id"])["id"] == record["id"]
        assert temp_db.assets.get(record["id"][:4])["id"] == record["id"]
        assert temp_db.assets.get(record["codigo"])["id"] == record["id"]
        assert temp_db.assets.get("") is None
        assert temp_db.assets.get("zzzzzzzz") is None

    def test_create_invalid_data(self, temp_db, asset_data):
        with pytest.raises(RepositoryError) as exc_info:
            temp_db.assets.create({**asset_data, "quantidade": 0})
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert temp_db.assets.list_all() == []

    def test_update(self, temp_db, asset_data):
        record = temp_db.assets.create(asset_data)

        updated = temp_db.assets.update(record["id"], {"status": "quebrado", "id": "ignorado"})

        assert updated["status"] == "quebrado"
        assert updated["id"] == record["id"]
        stored = temp_db.assets.get(record["id"])
        assert stored["status"] == "quebrado"
        assert stored["updated_at"] >= record["updated_at"]

    def test_update_many_is_all_or_nothing(self, temp_db, asset_data):
        a = temp_db.assets.create(asset_data)
        b = temp_db.assets.create(asset_data)

        records = temp_db.assets.update_many([
            (a["id"], {"status": "em falta"}),
            (b["id"], {"status": "manutenção"}),
        ])
        assert [r["status"] for r in records] == ["em falta", "manutenção"]

        with pytest.raises(RepositoryError) as exc_info:
            temp_db.assets.update_many([(a["id"], {"status": "Ativo"}), ("naoexiste", {})])
        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert temp_db.assets.get(a["id"])["status"] == "em falta"

    def test_delete(self, temp_db, asset_data):
        record = temp_db.assets.create(asset_data)

        temp_db.assets.delete(record["id"])

        assert temp_db.assets.get(record["id"]) is None
        with pytest.raises(NotFoundError):
            temp_db.assets.delete(record["id"])

    def test_delete_removes_history(self, temp_db, asset_data):
        record = temp_db.assets.create(asset_data)
        temp_db.assets.move(record["id"], MovementRequest(localizacao_destino="cozinha", responsavel_destino="Karen"))

        temp_db.assets.delete(record["id"])

        assert temp_db.movements.count() == 0


class TestSearch:
    """Testes de busca, filtros e paginação."""

    def test_pagination(self, temp_db):
        temp_db.assets.create_many([_asset(conteudo=f"Item {i}") for i in range(25)])

        first = temp_db.assets.search(page=1)
        second = temp_db.assets.search(page=2)

        assert first.total_count == 25
        assert first.total_pages == 2
        assert len(first.records) == 20
        assert len(second.records) == 5
        ids = {r["id"] for r in first.records} | {r["id"] for r in second.records}
        assert len(ids) == 25

    def test_search_term(self, temp_db):
        temp_db.assets.create(_asset(conteudo="Quebra-cabeça"))
        temp_db.assets.create(_asset(conteudo="Lápis", responsavel_atual="Karen"))

        assert temp_db.assets.search(search_term="cabeça").total_count == 1
        assert temp_db.assets.search(search_term="karen").total_count == 1
        assert temp_db.assets.search(search_term="  ").total_count == 2

    def test_like_wildcards_are_literal(self, temp_db):
        temp_db.assets.create(_asset(conteudo="100% algodão"))
        temp_db.assets.create(_asset(conteudo="Lápis"))

        assert temp_db.assets.search(search_term="%").total_count == 1
        assert temp_db.assets.search(search_term="_").total_count == 0

    def test_filters(self, temp_db):
        temp_db.assets.create(_asset(tipo="Decoração", localizacao_atual="sala de brinquedo"))
        temp_db.assets.create(_asset(status="quebrado", localizacao_atual="Sala 1"))
        temp_db.assets.create(_asset())

        assert temp_db.assets.search(filters=AssetFilters(tipo="Decoração")).total_count == 1
        assert temp_db.assets.search(filters=AssetFilters(status="quebrado")).total_count == 1
        assert temp_db.assets.search(filters=AssetFilters(localizacao="sala")).total_count == 2
        assert len(temp_db.assets.list_all(AssetFilters(tipo="Escritório", status="Ativo"))) == 1

    def test_search_is_cached_until_write(self, temp_db, asset_data):
        temp_db.assets.create(asset_data)

        page = temp_db.assets.search()
        assert temp_db.assets.search() is page
        assert len(temp_db.assets.cache) == 1

        temp_db.assets.create(asset_data)

        assert len(temp_db.assets.cache) == 0
        assert temp_db.assets.search().total_count == 2

    def test_unique_locations(self, temp_db):
        for location in ["Sala 1", "cozinha", "Sala 1", "", "almoxarifado"]:
            temp_db.assets.create(_asset(localizacao_atual=location))

        assert temp_db.assets.unique_locations() == ["Sala 1", "almoxarifado", "cozinha"]


class TestMovements:
    """Testes de movimentação e histórico."""

    def test_move_records_history(self, temp_db, asset_data):
        record = temp_db.assets.create(asset_data)
        request = MovementRequest(localizacao_destino="Sala 1", responsavel_destino="Karen", observacoes="Troca")

        moved = temp_db.assets.move(record["codigo"], request)

        assert moved["localizacao_atual"] == "Sala 1"
        assert temp_db.assets.get(record["id"])["responsavel_atual"] == "Karen"
        history = temp_db.movements.list_for_asset(record["id"])
        assert len(history) == 1
        entry = history[0]
        assert entry["localizacao_origem"] == "recepção"
        assert entry["localizacao_destino"] == "Sala 1"
        assert entry["responsavel_origem"] == "Denise"
        assert entry["bem_codigo"] == record["codigo"]

    def test_history_newest_first(self, temp_db, asset_data):
        record = temp_db.assets.create(asset_data)
        temp_db.assets.move(record["id"], MovementRequest(localizacao_destino="Sala 1", responsavel_destino="Karen"))
        temp_db.assets.move(record["id"], MovementRequest(localizacao_destino="cozinha", responsavel_destino="Denise"))

        history = temp_db.movements.list_for_asset(record["id"])

        assert [h["localizacao_destino"] for h in history] == ["cozinha", "Sala 1"]
        assert history[0]["localizacao_origem"] == "Sala 1"
        assert len(temp_db.movements.list_all()) == 2

    def test_move_unknown_asset(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.assets.move("nada", MovementRequest(localizacao_destino="x", responsavel_destino="y"))

    def test_move_accepts_id_prefix_like_get(self, temp_db, asset_data):
        record = temp_db.assets.create(asset_data)
        prefix = record["id"][:4]

        moved = temp_db.assets.move(prefix, MovementRequest(localizacao_destino="Sala 1", responsavel_destino="Karen"))

        assert moved["id"] == temp_db.assets.get(prefix)["id"] == record["id"]
        assert temp_db.movements.count() == 1

    def test_move_empty_id(self, temp_db, asset_data):
        temp_db.assets.create(asset_data)
        with pytest.raises(NotFoundError):
            temp_db.assets.move("", MovementRequest(localizacao_destino="x", responsavel_destino="y"))
        assert temp_db.movements.count() == 0


    def test_move_is_atomic(self, temp_db, asset_data, monkeypatch):
        record = temp_db.assets.create(asset_data)

        def fail_update(conn, asset, request, now):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(temp_db.assets, "_update_location", fail_update)

        with pytest.raises(RepositoryError):
            temp_db.assets.move(record["id"], MovementRequest(localizacao_destino="Sala 1", responsavel_destino="Karen"))

        assert temp_db.movements.count() == 0
        assert temp_db.assets.get(record["id"])["localizacao_atual"] == "recepção"


class TestBatchImport:
    """Testes da importação em lotes."""

    def test_failed_batch_does_not_stop_import(self, temp_db):
        rows = [
            {"categoria": "Escritório", "conteudo": "A", "unidade": "Caixa"},
            {"categoria": "Escritório", "conteudo": "B", "unidade": "Caixa"},
            {"categoria": "Escritório", "conteudo": "C", "unidade": "Caixa", "quantidade": 0},
            {"categoria": "Escritório", "conteudo": "D", "unidade": "Caixa"},
            {"categoria": "Escritório", "conteudo": "E", "unidade": "Caixa"},
        ]
        progress = []

        result = BatchImporter(temp_db.assets, batch_size=2).import_assets(rows, progress.append)

        assert result.success == 3
        assert result.failed == 2
        assert [e["batch"] for e in result.errors] == [2]
        assert [p.processed for p in progress] == [2, 4, 5]
        assert progress[-1].failed == 2
        stored = sorted(r["conteudo"] for r in temp_db.assets.list_all())
        assert stored == ["A", "B", "E"]

    def test_row_to_asset_data(self):
        data = row_to_asset_data({
            "categoria": "Decoração",
            "conteudo": "Vaso",
            "descricao": "",
            "valor_aquisicao": None,
            "data_aquisicao": datetime(2024, 3, 15),
            "desconhecido": "x",
        })

        assert data == {"tipo": "Decoração", "conteudo": "Vaso", "data_aquisicao": "2024-03-15"}

    def test_database_batch_importer_uses_settings(self, temp_db):
        assert temp_db.batch_importer().batch_size == temp_db.settings.batch_size


class TestQueryCache:
    """Testes do cache FIFO."""

    def test_evicts_oldest(self):
        cache = QueryCache(capacity=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)

        assert "a" not in cache
        assert cache.get("b") == 2
        assert cache.get("c") == 3

    def test_overwrite_does_not_evict(self):
        cache = QueryCache(capacity=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("a", 10)

        assert len(cache) == 2
        assert cache.get("a") == 10

    def test_invalidate(self):
        cache = QueryCache()
        cache.put("a", 1)
        cache.invalidate()
        assert len(cache) == 0


class TestStagedAssetList:
    """Testes da lista com criações provisórias."""

    def test_successful_create_replaces_temp_entry(self):
        changes = []
        staged = StagedAssetList([{"id": "antigo"}], on_change=lambda: changes.append(1))

        record = staged.create({"conteudo": "Vaso"}, lambda data: {**data, "id": "abc12345"})

        assert record["id"] == "abc12345"
        assert [r["id"] for r in staged.records] == ["abc12345", "antigo"]
        assert staged.pending == []
        assert changes == [1]

    def test_failed_create_removes_temp_entry(self):
        staged = StagedAssetList([{"id": "antigo"}])

        def persist(data):
            assert staged.pending[0]["id"].startswith("temp-")
            raise RepositoryError("falhou")

        with pytest.raises(RepositoryError):
            staged.create({"conteudo": "Vaso"}, persist)

        assert [r["id"] for r in staged.records] == ["antigo"]

    def test_temp_ids_are_unique(self):
        staged = StagedAssetList()
        assert staged.stage({}) != staged.stage({})
        assert len(staged.pending) == 2
