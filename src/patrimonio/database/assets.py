"""
Operações de banco de dados para bens (itens de estoque).
"""

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, Mapping, Optional

from pydantic import ValidationError

from patrimonio.config import PAGINATION_LIMIT
from patrimonio.database.cache import QueryCache
from patrimonio.database.connection import DatabaseConnection
from patrimonio.errors import ErrorCode, NotFoundError, RepositoryError
from patrimonio.models import Asset, AssetFilters, MovementRequest

logger = logging.getLogger(__name__)

# Colunas pesquisadas pelo termo de busca
SEARCH_COLUMNS = (
    "codigo",
    "tipo",
    "conteudo",
    "descricao",
    "localizacao_atual",
    "responsavel_atual",
)

EDITABLE_FIELDS = tuple(
    name for name in Asset.model_fields if name not in ("id", "created_at", "updated_at")
)


@dataclass
class SearchPage:
    """Uma página do resultado de busca."""
    records: list[dict] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = PAGINATION_LIMIT

    @property
    def total_pages(self) -> int:
        return max(1, -(-self.total_count // self.page_size))


def _like(term: str) -> str:
    """Padrão LIKE de substring com curingas escapados."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _build_where(search_term: str, filters: Optional[AssetFilters]) -> tuple[str, list]:
    clauses = []
    params: list[Any] = []

    term = (search_term or "").strip()
    if term:
        clauses.append(
            "(" + " OR ".join(f"{col} LIKE ? ESCAPE '\\'" for col in SEARCH_COLUMNS) + ")"
        )
        params.extend([_like(term)] * len(SEARCH_COLUMNS))

    if filters is not None:
        if filters.tipo:
            clauses.append("tipo = ?")
            params.append(filters.tipo)
        if filters.status:
            clauses.append("status = ?")
            params.append(filters.status)
        if filters.localizacao:
            clauses.append("localizacao_atual LIKE ? ESCAPE '\\'")
            params.append(_like(filters.localizacao))

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class AssetRepository:
    """Repositório para operações CRUD de bens."""

    def __init__(
        self,
        db: DatabaseConnection,
        cache: Optional[QueryCache] = None,
        page_size: int = PAGINATION_LIMIT,
    ):
        """
        Inicializa o repositório.

        Args:
            db: Instância de DatabaseConnection
            cache: Cache de páginas (um novo por default)
            page_size: Registros por página
        """
        self._db = db
        self.cache = cache if cache is not None else QueryCache()
        self.page_size = page_size

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Transação de escrita: erros do SQLite viram RepositoryError."""
        try:
            with self._db.connection() as conn:
                yield conn
        except sqlite3.Error as exc:
            logger.error("Erro no banco de dados: %s", exc)
            raise RepositoryError(str(exc), original=exc) from exc
        finally:
            self.cache.invalidate()

    def _row_to_dict(self, row: sqlite3.Row) -> dict:
        """Converte uma linha do banco em dicionário de bem."""
        return {key: row[key] for key in row.keys()}

    @staticmethod
    def _validated(data: Mapping[str, Any]) -> Asset:
        try:
            return Asset(**data)
        except ValidationError as exc:
            raise RepositoryError(
                f"Dados inválidos: {exc.error_count()} erro(s)",
                code=ErrorCode.VALIDATION_ERROR,
                original=exc,
            ) from exc

    # ========================================================================
    # Leitura
    # ========================================================================

    @staticmethod
    def _find(conn: sqlite3.Connection, asset_id: str) -> Optional[sqlite3.Row]:
        """Linha do bem por ID (parcial ou completo) ou código; ID exato vence."""
        if not asset_id:
            return None
        return conn.execute(
            "SELECT * FROM bens WHERE id = ? OR codigo = ? OR id LIKE ? ORDER BY id = ? DESC",
            (asset_id, asset_id, f"{asset_id}%", asset_id)
        ).fetchone()

    def get(self, asset_id: str) -> Optional[dict]:
        """Obtém um bem por ID (parcial ou completo) ou pelo código."""
        with self._db.connection() as conn:
            row = self._find(conn, asset_id)
            return self._row_to_dict(row) if row is not None else None

    def require(self, asset_id: str) -> dict:
        """Como get(), mas lança NotFoundError."""
        asset = self.get(asset_id)
        if asset is None:
            raise NotFoundError(f"Bem não encontrado: {asset_id}")
        return asset

    def search(
        self,
        page: int = 1,
        search_term: str = "",
        filters: Optional[AssetFilters] = None,
    ) -> SearchPage:
        """
        Busca paginada, mais recentes primeiro.

        Args:
            page: Página (começa em 1)
            search_term: Substring procurada em código, tipo, conteúdo,
                descrição, localização e responsável
            filters: tipo e status por igualdade, localização por substring

        Returns:
            SearchPage com os registros da página e o total
        """
        page = max(1, page)
        key = (page, (search_term or "").strip(), filters.cache_key() if filters else None)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        where, params = _build_where(search_term, filters)
        offset = (page - 1) * self.page_size

        with self._db.connection() as conn:
            total = conn.execute(f"SELECT COUNT(*) AS n FROM bens {where}", params).fetchone()["n"]
            cursor = conn.execute(
                f"SELECT * FROM bens {where} ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?",
                [*params, self.page_size, offset]
            )
            records = [self._row_to_dict(row) for row in cursor]

        result = SearchPage(records=records, total_count=total, page=page, page_size=self.page_size)
        self.cache.put(key, result)
        return result

    def list_all(self, filters: Optional[AssetFilters] = None, search_term: str = "") -> list[dict]:
        """Todos os bens que atendem aos filtros (sem paginação)."""
        where, params = _build_where(search_term, filters)
        with self._db.connection() as conn:
            cursor = conn.execute(
                f"SELECT * FROM bens {where} ORDER BY created_at DESC, rowid DESC", params
            )
            return [self._row_to_dict(row) for row in cursor]

    def unique_locations(self) -> list[str]:
        """Localizações distintas e não vazias, em ordem alfabética."""
        with self._db.connection() as conn:
            cursor = conn.execute(
                "SELECT DISTINCT localizacao_atual FROM bens "
                "WHERE localizacao_atual IS NOT NULL AND TRIM(localizacao_atual) != ''"
            )
            return sorted(row["localizacao_atual"] for row in cursor)

    def next_code(self, year: Optional[int] = None, conn: Optional[sqlite3.Connection] = None) -> str:
        """Próximo código patrimonial no formato AAAA0001."""
        year = year or datetime.now().year
        prefix = str(year)

        def query(c: sqlite3.Connection) -> str:
            row = c.execute(
                "SELECT MAX(CAST(SUBSTR(codigo, 5) AS INTEGER)) AS last FROM bens "
                "WHERE codigo LIKE ? AND LENGTH(codigo) = 8",
                (f"{prefix}%",)
            ).fetchone()
            last = row["last"] or 0
            return f"{prefix}{last + 1:04d}"

        if conn is not None:
            return query(conn)
        with self._db.connection() as c:
            return query(c)

    # ========================================================================
    # Escrita
    # ========================================================================

    def create(self, data: Asset | Mapping[str, Any]) -> dict:
        """
        Cria um bem.

        Sem código informado, gera o próximo código do ano.

        Raises:
            RepositoryError: Dados inválidos ou falha do banco
        """
        with self._transaction() as conn:
            record = self._insert(conn, data)

        logger.info("Bem criado: %s (%s)", record["codigo"], record["id"])
        return record

    def create_many(self, items: list[Asset | Mapping[str, Any]]) -> list[dict]:
        """
        Cria vários bens em uma única transação (todos ou nenhum).

        Raises:
            RepositoryError: Algum item inválido ou falha do banco
        """
        with self._transaction() as conn:
            records = [self._insert(conn, data) for data in items]
        logger.info("%d bens criados", len(records))
        return records

    def _insert(self, conn: sqlite3.Connection, data: Asset | Mapping[str, Any]) -> dict:
        asset = data if isinstance(data, Asset) else self._validated(data)
        record = asset.model_dump()
        if not record["codigo"]:
            record["codigo"] = self.next_code(conn=conn)
        columns = ", ".join(record)
        placeholders = ", ".join("?" for _ in record)
        conn.execute(
            f"INSERT INTO bens ({columns}) VALUES ({placeholders})",
            list(record.values())
        )
        return record

    def update(self, asset_id: str, data: Mapping[str, Any]) -> dict:
        """
        Atualiza campos editáveis de um bem.

        Raises:
            NotFoundError: Bem inexistente
            RepositoryError: Dados inválidos ou falha do banco
        """
        current = self.require(asset_id)
        with self._transaction() as conn:
            return self._apply_update(conn, current, data)

    def _apply_update(self, conn: sqlite3.Connection, current: dict, data: Mapping[str, Any]) -> dict:
        changes = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
        asset = self._validated({**current, **changes})
        asset.touch()
        record = asset.model_dump()

        assignments = ", ".join(f"{name} = ?" for name in (*EDITABLE_FIELDS, "updated_at"))
        conn.execute(
            f"UPDATE bens SET {assignments} WHERE id = ?",
            [record[name] for name in EDITABLE_FIELDS] + [record["updated_at"], current["id"]]
        )
        return record

    def update_many(self, updates: list[tuple[str, Mapping[str, Any]]]) -> list[dict]:
        """
        Atualiza vários bens em uma única transação.

        Raises:
            RepositoryError: Se algum bem não existir (nada é gravado)
        """
        currents = [(self.get(asset_id), data) for asset_id, data in updates]
        missing = [current for current, _ in currents if current is None]
        if missing:
            raise RepositoryError(f"Falha ao atualizar {len(missing)} bens", code=ErrorCode.NOT_FOUND)

        with self._transaction() as conn:
            records = [self._apply_update(conn, current, data) for current, data in currents]

        logger.info("%d bens atualizados", len(records))
        return records

    def delete(self, asset_id: str) -> None:
        """
        Exclui um bem e o seu histórico.

        Raises:
            NotFoundError: Bem inexistente
        """
        asset = self.require(asset_id)
        with self._transaction() as conn:
            conn.execute("DELETE FROM bens WHERE id = ?", (asset["id"],))
        logger.info("Bem excluído: %s", asset["codigo"])

    # ========================================================================
    # Movimentação
    # ========================================================================

    def _insert_movement(self, conn: sqlite3.Connection, asset: dict, request: MovementRequest, now: str) -> None:
        conn.execute(
            """
            INSERT INTO movimentacoes (bem_id, data_movimentacao, localizacao_origem,
                                       localizacao_destino, responsavel_origem,
                                       responsavel_destino, observacoes)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (asset["id"], now, asset["localizacao_atual"] or "", request.localizacao_destino,
             asset["responsavel_atual"] or "", request.responsavel_destino, request.observacoes)
        )

    def _update_location(self, conn: sqlite3.Connection, asset: dict, request: MovementRequest, now: str) -> None:
        conn.execute(
            "UPDATE bens SET localizacao_atual = ?, responsavel_atual = ?, updated_at = ? WHERE id = ?",
            (request.localizacao_destino, request.responsavel_destino, now, asset["id"])
        )

    def move(self, asset_id: str, request: MovementRequest) -> dict:
        """
        Move um bem para outra localização/responsável.

        asset_id aceita ID parcial ou código, como get().

        O registro no histórico e a atualização do bem acontecem na mesma
        transação: ou ambos são gravados, ou nenhum.

        Returns:
            Bem atualizado

        Raises:
            NotFoundError: Bem inexistente
            RepositoryError: Falha do banco (nada é gravado)
        """
        now = datetime.now().isoformat()
        with self._transaction() as conn:
            row = self._find(conn, asset_id)
            if row is None:
                raise NotFoundError(f"Bem não encontrado: {asset_id}")
            asset = self._row_to_dict(row)
            self._insert_movement(conn, asset, request, now)
            self._update_location(conn, asset, request, now)

        logger.info(
            "Bem %s movido: %s -> %s",
            asset["codigo"], asset["localizacao_atual"], request.localizacao_destino,
        )
        return {
            **asset,
            "localizacao_atual": request.localizacao_destino,
            "responsavel_atual": request.responsavel_destino,
            "updated_at": now,
        }
