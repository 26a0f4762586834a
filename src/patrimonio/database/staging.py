"""
Lista local com entradas provisórias.

Uma criação aparece na lista antes da confirmação do banco; a entrada
provisória é substituída pelo registro gravado ou removida em caso de falha.
"""

import itertools
import logging
from typing import Any, Callable, Mapping, Optional

logger = logging.getLogger(__name__)

TEMP_PREFIX = "temp-"


class StagedAssetList:
    """Lista de bens exibida ao usuário, com reconciliação de criações."""

    def __init__(self, records: Optional[list[dict]] = None, on_change: Optional[Callable[[], None]] = None):
        self.records: list[dict] = list(records or [])
        self._on_change = on_change
        self._counter = itertools.count(1)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def stage(self, data: Mapping[str, Any]) -> str:
        """Insere uma entrada provisória no topo e devolve o seu ID."""
        temp_id = f"{TEMP_PREFIX}{next(self._counter)}"
        self.records.insert(0, {**data, "id": temp_id})
        return temp_id

    def commit(self, temp_id: str, record: dict) -> None:
        """Substitui a entrada provisória pelo registro confirmado."""
        self.records = [record if r["id"] == temp_id else r for r in self.records]
        self._changed()

    def discard(self, temp_id: str) -> None:
        """Remove a entrada provisória após uma falha."""
        self.records = [r for r in self.records if r["id"] != temp_id]
        self._changed()

    def create(self, data: Mapping[str, Any], persist: Callable[[Mapping[str, Any]], dict]) -> dict:
        """
        Criação otimista: stage, persist e commit (ou discard e relança).
        """
        temp_id = self.stage(data)
        try:
            record = persist(data)
        except Exception:
            logger.debug("Criação falhou; removendo entrada %s", temp_id)
            self.discard(temp_id)
            raise
        self.commit(temp_id, record)
        return record

    @property
    def pending(self) -> list[dict]:
        return [r for r in self.records if str(r.get("id", "")).startswith(TEMP_PREFIX)]
