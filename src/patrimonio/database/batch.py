"""
Importação em lote de bens.

As linhas são gravadas em lotes; um lote com falha é registrado e a
importação segue para o próximo.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional

from patrimonio.config import IMPORT_BATCH_SIZE
from patrimonio.database.assets import EDITABLE_FIELDS, AssetRepository
from patrimonio.errors import AppError

logger = logging.getLogger(__name__)


@dataclass
class BatchProgress:
    processed: int
    total: int
    success: int
    failed: int


@dataclass
class BatchResult:
    """Contagem de linhas gravadas e erros por lote."""
    success: int = 0
    failed: int = 0
    errors: list[dict] = field(default_factory=list)  # {"batch": n, "error": mensagem}
    records: list[dict] = field(default_factory=list)


def row_to_asset_data(row: Mapping[str, Any]) -> dict[str, Any]:
    """
    Converte uma linha importada em dados de bem.

    Campos vazios são omitidos (valem os defaults do modelo), datas viram
    aaaa-mm-dd e "categoria" é aceita no lugar de "tipo".
    """
    data: dict[str, Any] = {}
    if "categoria" in row and not row.get("tipo"):
        data["tipo"] = row["categoria"]
    for name in EDITABLE_FIELDS:
        value = row.get(name)
        if value is None or value == "":
            continue
        if isinstance(value, datetime):
            value = value.date().isoformat()
        elif isinstance(value, date):
            value = value.isoformat()
        data[name] = value
    return data


class BatchImporter:
    """
    Grava linhas importadas em lotes.

    Args:
        repository: Repositório de bens
        batch_size: Linhas por transação
    """

    def __init__(self, repository: AssetRepository, batch_size: int = IMPORT_BATCH_SIZE):
        self.repository = repository
        self.batch_size = batch_size

    def import_assets(
        self,
        rows: list[Mapping[str, Any]],
        on_progress: Optional[Callable[[BatchProgress], None]] = None,
    ) -> BatchResult:
        """
        Importa as linhas lote a lote.

        Args:
            rows: Linhas aceitas pelo TabularImporter
            on_progress: Chamado após cada lote

        Returns:
            BatchResult com sucessos, falhas e o erro de cada lote que falhou
        """
        result = BatchResult()
        total = len(rows)

        for start in range(0, total, self.batch_size):
            batch = rows[start:start + self.batch_size]
            number = start // self.batch_size + 1
            try:
                records = self.repository.create_many([row_to_asset_data(r) for r in batch])
            except AppError as exc:
                logger.warning("Lote %d falhou: %s", number, exc)
                result.failed += len(batch)
                result.errors.append({"batch": number, "error": str(exc)})
            else:
                result.success += len(records)
                result.records.extend(records)

            if on_progress is not None:
                on_progress(BatchProgress(
                    processed=min(start + self.batch_size, total),
                    total=total,
                    success=result.success,
                    failed=result.failed,
                ))

        logger.info("Importação em lote: %d gravados, %d com falha", result.success, result.failed)
        return result
