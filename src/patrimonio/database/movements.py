"""
Consultas ao histórico de movimentações.

As movimentações são gravadas por AssetRepository.move(); aqui só há leitura.
"""

from patrimonio.database.connection import DatabaseConnection

_SELECT = """
    SELECT m.*, b.codigo AS bem_codigo, b.descricao AS bem_descricao
    FROM movimentacoes m
    LEFT JOIN bens b ON b.id = m.bem_id
"""


class MovementRepository:
    """Repositório de leitura do histórico."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def list_for_asset(self, asset_id: str) -> list[dict]:
        """Histórico de um bem, mais recente primeiro."""
        with self._db.connection() as conn:
            cursor = conn.execute(
                f"{_SELECT} WHERE m.bem_id = ? ORDER BY m.data_movimentacao DESC, m.id DESC",
                (asset_id,)
            )
            return [dict(row) for row in cursor]

    def list_all(self) -> list[dict]:
        """Todas as movimentações com código e descrição do bem (para relatórios)."""
        with self._db.connection() as conn:
            cursor = conn.execute(f"{_SELECT} ORDER BY m.data_movimentacao DESC, m.id DESC")
            return [dict(row) for row in cursor]

    def count(self) -> int:
        with self._db.connection() as conn:
            return conn.execute("SELECT COUNT(*) AS n FROM movimentacoes").fetchone()["n"]
