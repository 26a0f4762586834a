"""
Exportação tabular para CSV, JSON e planilha Excel.

Os métodos ``to_*`` geram o conteúdo e lançam ExportError; os métodos
``export_*`` gravam o arquivo e convertem falhas em ExportResult.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter

from patrimonio.config import (
    DATE_MARKER,
    EXPORT_VERSION,
    EXPORTED_BY,
    ExportOptions,
)
from patrimonio.errors import ExportError
from patrimonio.models.asset import AssetFilters
from patrimonio.reports.formatting import format_bool, format_currency, format_date
from patrimonio.reports.headers import FieldKind, HeaderLike, HeaderSpec, as_headers
from patrimonio.reports.statistics import InventoryStatistics

logger = logging.getLogger(__name__)

BOM = "\ufeff"

# Larguras de coluna da planilha (dica de apresentação)
COLUMN_WIDTHS = {
    "codigo": 10,
    "tipo": 15,
    "conteudo": 25,
    "descricao": 30,
    "quantidade": 10,
    "unidade": 10,
    "localizacao_atual": 15,
    "responsavel_atual": 15,
    "status": 12,
    "valor_aquisicao": 15,
    "data_aquisicao": 12,
    "observacoes": 20,
    "created_at": 12,
}
DEFAULT_COLUMN_WIDTH = 15

# Separadores de caminho não podem aparecer em nomes de arquivo
PATH_SEPARATORS = ("/", "\\")

MAIN_SHEET = "Estoque"
STATS_SHEET = "Estatísticas"


@dataclass
class ExportResult:
    """Resultado de uma exportação."""
    success: bool
    row_count: int = 0
    path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def filename(self) -> Optional[str]:
        return self.path.name if self.path else None


# ============================================================================
# Nomes de arquivo
# ============================================================================

def build_filename(base: str, extension: str, now: Optional[datetime] = None) -> str:
    """
    Nome com timestamp: <base>_AAAA-MM-DDTHH-MM-SS.<ext>.
    """
    now = now or datetime.now()
    timestamp = now.strftime("%Y-%m-%dT%H:%M:%S").replace(":", "-").replace(".", "-")
    return f"{base}_{timestamp}.{extension.lstrip('.')}"


def _filename_part(value: str) -> str:
    for separator in PATH_SEPARATORS:
        value = value.replace(separator, "-")
    return value


def filter_suffix(filters: Optional[AssetFilters]) -> str:
    """Sufixo tipo-X_status-Y_local-Z na ordem fixa; vazio sem filtros."""
    if filters is None:
        return ""
    parts = []
    if filters.tipo:
        parts.append(f"tipo-{_filename_part(filters.tipo)}")
    if filters.status:
        parts.append(f"status-{_filename_part(filters.status)}")
    if filters.localizacao:
        parts.append(f"local-{_filename_part(filters.localizacao)}")
    return f"_{'_'.join(parts)}" if parts else ""


# ============================================================================
# Exportador
# ============================================================================

class TabularExporter:
    """
    Serializa registros em arquivos de relatório.

    Args:
        output_dir: Diretório onde os arquivos são gravados
        options: Separador, formato de data, símbolo monetário
        clock: Fonte do horário usado nos nomes de arquivo
    """

    def __init__(
        self,
        output_dir: Path | str = ".",
        options: Optional[ExportOptions] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.output_dir = Path(output_dir)
        self.options = options or ExportOptions()
        self._clock = clock

    # ------------------------------------------------------------------
    # Células
    # ------------------------------------------------------------------

    def escape_field(self, value: Any) -> str:
        """Aspas quando o valor contém aspas, separador ou quebra de linha."""
        if value is None:
            return ""
        text = str(value)
        if '"' in text or self.options.delimiter in text or "\n" in text or "\r" in text:
            return '"' + text.replace('"', '""') + '"'
        return text

    def format_cell(self, value: Any, header: HeaderSpec) -> str:
        """Formata um valor segundo o tipo da coluna e o tipo do valor."""
        if value is None:
            return ""
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
        if header.kind == FieldKind.MONEY and is_number:
            return format_currency(value, self.options.currency_symbol)
        if header.kind == FieldKind.DATE and value:
            return format_date(value, self.options.date_format)
        if isinstance(value, bool):
            return format_bool(value)
        if isinstance(value, str):
            return value.strip(" \t")
        return str(value)

    # ------------------------------------------------------------------
    # CSV
    # ------------------------------------------------------------------

    def to_csv(self, records: Sequence[Mapping[str, Any]], headers: Iterable[HeaderLike]) -> str:
        """
        Gera o texto CSV com BOM.

        Raises:
            ExportError: Se não houver registros
        """
        if not records:
            raise ExportError("Nenhum dado para exportar")
        specs = as_headers(headers)
        delimiter = self.options.delimiter

        lines = [delimiter.join(self.escape_field(h.label) for h in specs)]
        for record in records:
            lines.append(delimiter.join(
                self.escape_field(self.format_cell(record.get(h.key), h)) for h in specs
            ))
        return BOM + "\n".join(lines)

    def export_csv(
        self,
        records: Sequence[Mapping[str, Any]],
        headers: Iterable[HeaderLike],
        base_name: str,
    ) -> ExportResult:
        """Grava <base>_<timestamp>.csv."""
        return self._write(base_name, "csv", len(records), lambda: self.to_csv(records, headers))

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------

    def _json_record(self, record: Mapping[str, Any]) -> dict[str, Any]:
        formatted = dict(record)
        for key, value in formatted.items():
            if DATE_MARKER in key.lower() and value:
                formatted[key] = format_date(value, self.options.json_date_format)
        return formatted

    def to_json(
        self,
        records: Sequence[Mapping[str, Any]],
        statistics: Optional[InventoryStatistics] = None,
        filters: Optional[AssetFilters] = None,
    ) -> str:
        """
        Gera o envelope JSON {metadata, statistics, filters, data}.

        Raises:
            ExportError: Se não houver registros
        """
        if not records:
            raise ExportError("Nenhum dado para exportar")

        envelope = {
            "metadata": {
                "exportDate": self._clock().isoformat(),
                "recordCount": len(records),
                "exportedBy": EXPORTED_BY,
                "version": EXPORT_VERSION,
            },
            "statistics": statistics.to_dict() if statistics else None,
            "filters": filters.model_dump() if filters is not None and filters.active else None,
            "data": [self._json_record(r) for r in records],
        }
        indent = 2 if self.options.pretty else None
        return json.dumps(envelope, indent=indent, ensure_ascii=False, default=str)

    def export_json(
        self,
        records: Sequence[Mapping[str, Any]],
        base_name: str,
        statistics: Optional[InventoryStatistics] = None,
        filters: Optional[AssetFilters] = None,
    ) -> ExportResult:
        """Grava <base>_<timestamp>.json."""
        return self._write(
            base_name, "json", len(records),
            lambda: self.to_json(records, statistics, filters),
        )

    # ------------------------------------------------------------------
    # Planilha
    # ------------------------------------------------------------------

    @staticmethod
    def _sheet_value(value: Any) -> Any:
        """Remove caracteres de controle que o openpyxl recusa."""
        if isinstance(value, str):
            return ILLEGAL_CHARACTERS_RE.sub("", value)
        return value

    def _sheet_dataframe(
        self, records: Sequence[Mapping[str, Any]], specs: list[HeaderSpec]
    ) -> pd.DataFrame:
        rows = []
        for record in records:
            row = {}
            for h in specs:
                value = record.get(h.key)
                if h.kind == FieldKind.NUMBER and isinstance(value, (int, float)):
                    row[h.label] = value
                else:
                    row[h.label] = self._sheet_value(self.format_cell(value, h))
            rows.append(row)
        return pd.DataFrame(rows, columns=[h.label for h in specs])

    def _stats_dataframe(self, statistics: InventoryStatistics) -> pd.DataFrame:
        symbol = self.options.currency_symbol
        rows = [
            ("Valor Total do Estoque", format_currency(statistics.total_value, symbol)),
            ("Total de Itens", f"{statistics.total_items:,}".replace(",", ".")),
            ("Valor Médio por Item", format_currency(statistics.average_value, symbol)),
            ("", ""),
            ("ESTATÍSTICAS POR CATEGORIA", ""),
        ]
        rows.extend(
            (self._sheet_value(f"{name} ({g.count} registros)"), format_currency(g.value, symbol))
            for name, g in statistics.sorted_categories()
        )
        rows.append(("", ""))
        rows.append(("ESTATÍSTICAS POR STATUS", ""))
        rows.extend(
            (self._sheet_value(f"{name} ({g.count} registros)"), format_currency(g.value, symbol))
            for name, g in statistics.sorted_statuses()
        )
        return pd.DataFrame(rows, columns=["Métrica", "Valor"])

    def write_xlsx(
        self,
        path: Path,
        records: Sequence[Mapping[str, Any]],
        headers: Iterable[HeaderLike],
        statistics: Optional[InventoryStatistics] = None,
    ) -> None:
        """
        Grava a planilha: aba Estoque e, com estatísticas, aba Estatísticas.

        Raises:
            ExportError: Se não houver registros
        """
        if not records:
            raise ExportError("Nenhum dado para exportar")
        specs = as_headers(headers)

        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            self._sheet_dataframe(records, specs).to_excel(writer, sheet_name=MAIN_SHEET, index=False)
            sheet = writer.sheets[MAIN_SHEET]
            for index, h in enumerate(specs, start=1):
                width = COLUMN_WIDTHS.get(h.key, DEFAULT_COLUMN_WIDTH)
                sheet.column_dimensions[get_column_letter(index)].width = width

            if statistics is not None:
                self._stats_dataframe(statistics).to_excel(writer, sheet_name=STATS_SHEET, index=False)
                stats_sheet = writer.sheets[STATS_SHEET]
                stats_sheet.column_dimensions["A"].width = 30
                stats_sheet.column_dimensions["B"].width = 20

    def export_xlsx(
        self,
        records: Sequence[Mapping[str, Any]],
        headers: Iterable[HeaderLike],
        base_name: str,
        statistics: Optional[InventoryStatistics] = None,
    ) -> ExportResult:
        """Grava <base>_<timestamp>.xlsx."""
        if not records:
            return ExportResult(success=False, error="Nenhum dado para exportar")
        path = self.output_dir / build_filename(base_name, "xlsx", self._clock())
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.write_xlsx(path, records, headers, statistics)
        except Exception as exc:
            logger.error("Erro ao exportar para Excel: %s", exc)
            path.unlink(missing_ok=True)
            return ExportResult(success=False, error=str(exc))
        logger.info("Planilha exportada: %s (%d registros)", path, len(records))
        return ExportResult(success=True, row_count=len(records), path=path)

    # ------------------------------------------------------------------
    # Variantes filtradas
    # ------------------------------------------------------------------

    def export_filtered_xlsx(
        self,
        records: Sequence[Mapping[str, Any]],
        headers: Iterable[HeaderLike],
        filters: AssetFilters,
        statistics: Optional[InventoryStatistics],
        base_name: str = "estoque_filtrado",
    ) -> ExportResult:
        return self.export_xlsx(records, headers, base_name + filter_suffix(filters), statistics)

    def export_filtered_json(
        self,
        records: Sequence[Mapping[str, Any]],
        filters: AssetFilters,
        statistics: Optional[InventoryStatistics],
        base_name: str = "estoque_filtrado",
    ) -> ExportResult:
        return self.export_json(records, base_name + filter_suffix(filters), statistics, filters)

    # ------------------------------------------------------------------
    # Escrita
    # ------------------------------------------------------------------

    def _write(
        self,
        base_name: str,
        extension: str,
        row_count: int,
        render: Callable[[], str],
    ) -> ExportResult:
        """Renderiza e grava; qualquer falha vira ExportResult sem arquivo."""
        try:
            content = render()
            path = self.output_dir / build_filename(base_name, extension, self._clock())
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except (ExportError, OSError, ValueError, TypeError) as exc:
            logger.error("Erro ao exportar %s: %s", extension.upper(), exc)
            return ExportResult(success=False, error=str(exc))

        logger.info("Arquivo exportado: %s (%d registros)", path, row_count)
        return ExportResult(success=True, row_count=row_count, path=path)
