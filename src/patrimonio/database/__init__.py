"""
Módulo de banco de dados SQLite do patrimonio.

Expõe a classe Database, fachada sobre os repositórios de bens e
movimentações, e a instância global usada pela CLI.
"""

import sqlite3
import time
from pathlib import Path
from typing import Callable, Optional

from patrimonio.config import DB_OPEN_RETRIES, DB_OPEN_RETRY_DELAY, Settings
from patrimonio.database.assets import AssetRepository, SearchPage
from patrimonio.database.batch import BatchImporter, BatchProgress, BatchResult
from patrimonio.database.cache import QueryCache
from patrimonio.database.connection import DatabaseConnection
from patrimonio.database.movements import MovementRepository
from patrimonio.database.staging import StagedAssetList
from patrimonio.errors import AppError, RepositoryError, with_retry


class Database:
    """
    Gerenciador do banco de dados.

    Agrupa a conexão e os repositórios configurados a partir de Settings.
    """

    def __init__(self, db_path: Optional[Path] = None, settings: Optional[Settings] = None):
        """
        Inicializa a conexão ao banco.

        Args:
            db_path: Caminho do arquivo SQLite (tem prioridade sobre settings)
            settings: Configuração; default Settings.load()
        """
        self.settings = settings or Settings.load(db_path)
        if db_path is not None:
            self.settings = self.settings.model_copy(update={"db_path": Path(db_path)})

        self._conn = DatabaseConnection(self.settings.db_path)
        self.assets = AssetRepository(
            self._conn,
            cache=QueryCache(self.settings.cache_capacity),
            page_size=self.settings.page_size,
        )
        self.movements = MovementRepository(self._conn)

    @property
    def db_path(self) -> Path:
        """Caminho do arquivo de banco."""
        return self._conn.db_path

    def connection(self):
        """Context manager para conexões ao banco."""
        return self._conn.connection()

    def batch_importer(self) -> BatchImporter:
        return BatchImporter(self.assets, batch_size=self.settings.batch_size)


# ============================================================================
# Instância global
# ============================================================================

_database: Optional[Database] = None


def get_database() -> Database:
    """Retorna a instância global do banco."""
    global _database
    if _database is None:
        _database = Database()
    return _database


def use_database(db_path: Path) -> Database:
    """Substitui a instância global por um banco em db_path."""
    global _database
    _database = Database(db_path)
    return _database


def open_database(
    db_path: Path,
    retries: int = DB_OPEN_RETRIES,
    delay: float = DB_OPEN_RETRY_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> Database:
    """
    Abre o banco em db_path como instância global.

    Um arquivo bloqueado por outro processo (sqlite3.OperationalError) é
    aberto de novo com espera linear; outros erros do SQLite falham na hora.

    Raises:
        RepositoryError: Se o banco não puder ser aberto
    """
    try:
        return with_retry(
            lambda: use_database(db_path),
            retries=retries,
            delay=delay,
            sleep=sleep,
            retry_on=(sqlite3.OperationalError,),
        )
    except AppError as exc:
        raise RepositoryError(
            f"Não foi possível abrir o banco {db_path}: {exc.original}", original=exc.original
        ) from exc
    except sqlite3.DatabaseError as exc:
        raise RepositoryError(f"Não foi possível abrir o banco {db_path}: {exc}", original=exc) from exc



def reset_database() -> None:
    """Reinicia a instância global (útil para testes)."""
    global _database
    _database = None


__all__ = [
    "AssetRepository",
    "BatchImporter",
    "BatchProgress",
    "BatchResult",
    "Database",
    "DatabaseConnection",
    "MovementRepository",
    "QueryCache",
    "SearchPage",
    "StagedAssetList",
    "get_database",
    "open_database",
    "reset_database",
    "use_database",
]
