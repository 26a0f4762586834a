"""
Módulo de conexão ao banco de dados SQLite.

Fornece a classe base com gerenciamento de conexão e esquema.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from patrimonio.config import Settings

logger = logging.getLogger(__name__)


# ============================================================================
# Esquema do Banco de Dados
# ============================================================================

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Tabela de bens (itens de estoque)
CREATE TABLE IF NOT EXISTS bens (
    id TEXT PRIMARY KEY,
    codigo TEXT NOT NULL DEFAULT '',
    tipo TEXT NOT NULL,
    conteudo TEXT NOT NULL,
    descricao TEXT DEFAULT '',
    quantidade INTEGER NOT NULL DEFAULT 1,
    unidade TEXT NOT NULL,
    valor_aquisicao REAL,
    data_aquisicao TEXT,
    localizacao_atual TEXT DEFAULT '',
    responsavel_atual TEXT DEFAULT '',
    status TEXT NOT NULL DEFAULT 'Ativo',
    observacoes TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

-- Histórico de movimentações (imutável)
CREATE TABLE IF NOT EXISTS movimentacoes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    bem_id TEXT NOT NULL,
    data_movimentacao TEXT NOT NULL,
    localizacao_origem TEXT DEFAULT '',
    localizacao_destino TEXT NOT NULL,
    responsavel_origem TEXT DEFAULT '',
    responsavel_destino TEXT NOT NULL,
    observacoes TEXT,
    FOREIGN KEY (bem_id) REFERENCES bens(id) ON DELETE CASCADE
);

-- Índices para buscas rápidas
CREATE INDEX IF NOT EXISTS idx_bens_codigo ON bens(codigo);
CREATE INDEX IF NOT EXISTS idx_bens_created ON bens(created_at);
CREATE INDEX IF NOT EXISTS idx_movimentacoes_bem ON movimentacoes(bem_id);

-- Tabela de metadados
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


# ============================================================================
# Classe DatabaseConnection
# ============================================================================

class DatabaseConnection:
    """Gerenciador de conexão ao banco SQLite."""

    def __init__(self, db_path: Optional[Path] = None):
        """
        Inicializa a conexão ao banco de dados.

        Args:
            db_path: Caminho do arquivo SQLite. Default: Settings.load()
        """
        self.db_path = Path(db_path) if db_path is not None else Settings.load().db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_database()

    def _init_database(self) -> None:
        """Inicializa o esquema do banco."""
        with self.connection() as conn:
            conn.executescript(SCHEMA_SQL)

            row = conn.execute(
                "SELECT value FROM metadata WHERE key = 'schema_version'"
            ).fetchone()

            if row is None:
                conn.execute(
                    "INSERT INTO metadata (key, value) VALUES (?, ?)",
                    ("schema_version", str(SCHEMA_VERSION))
                )
                logger.debug("Banco criado em %s (esquema v%d)", self.db_path, SCHEMA_VERSION)

    @property
    def schema_version(self) -> int:
        with self.connection() as conn:
            row = conn.execute(
                "SELECT value FROM metadata WHERE key = 'schema_version'"
            ).fetchone()
            return int(row["value"])

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """
        Context manager para conexões.

        Tudo o que é executado dentro do bloco forma uma transação:
        commit ao sair normalmente, rollback em qualquer exceção.
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
