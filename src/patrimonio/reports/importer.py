"""
Importação de CSV (arquivos exportados ou editados à mão).

Fluxo:
1. Lê os registros com csv.reader (quebras de linha dentro de aspas
   fazem parte do campo), ignorando registros vazios e as linhas iniciais
   configuradas.
2. Interpreta o cabeçalho e confere as colunas obrigatórias; qualquer
   coluna ausente invalida a importação inteira.
3. Converte cada linha (dinheiro, datas, números) e valida; linhas com
   problema são registradas com o número da linha no arquivo e a
   importação continua.
"""

import csv
import io
import logging
import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from patrimonio.config import ImportOptions
from patrimonio.errors import DataImportError
from patrimonio.reports.formatting import parse_currency, parse_date
from patrimonio.reports.headers import ASSETS, FieldKind, HeaderLike, HeaderSpec, as_headers, infer_kind

logger = logging.getLogger(__name__)

BOM = "\ufeff"

# Campos obrigatórios da validação por linha (nome do campo -> mensagem)
DEFAULT_REQUIRED_FIELDS = {
    "descricao": "Descrição é obrigatória",
    "categoria": "Categoria é obrigatória",
}

ASSET_REQUIRED_FIELDS = {
    "tipo": "Tipo é obrigatório",
    "conteudo": "Conteúdo é obrigatório",
}


@dataclass
class RowError:
    """Erros de uma linha rejeitada."""
    row_number: int
    messages: list[str]


@dataclass
class ImportResult:
    """Linhas aceitas, erros por linha e contagens."""
    success: bool
    rows: list[dict[str, Any]] = field(default_factory=list)
    row_errors: list[RowError] = field(default_factory=list)
    total_rows: int = 0
    error: Optional[str] = None
    missing_headers: list[str] = field(default_factory=list)

    @property
    def valid_row_count(self) -> int:
        return len(self.rows)

    @property
    def invalid_row_count(self) -> int:
        return len(self.row_errors)


# ============================================================================
# Leitura de CSV
# ============================================================================

def read_records(text: str, delimiter: str = ",") -> list[tuple[int, list[str]]]:
    """
    Lê o texto com csv.reader.

    Quebras de linha dentro de aspas fazem parte do campo. Espaços e
    tabulações nas pontas dos campos são removidos; registros em branco
    são ignorados.

    Returns:
        Pares (linha inicial no arquivo, começando em 1; campos do registro)
    """
    if text.startswith(BOM):
        text = text[1:]

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, skipinitialspace=True)
    records = []
    start = 1
    for fields in reader:
        fields = [f.strip(" \t") for f in fields]
        if any(fields):
            records.append((start, fields))
        start = reader.line_num + 1
    return records


def normalize_key(label: str) -> str:
    """Rótulo -> chave: minúsculas, sem acentos, não alfanuméricos viram '_'."""
    decomposed = unicodedata.normalize("NFD", label.lower())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return re.sub(r"[^a-z0-9]+", "_", stripped).strip("_")


def find_missing_headers(parsed: Sequence[str], expected: Iterable[str]) -> list[str]:
    """Colunas esperadas que não aparecem (substring, sem caixa) no cabeçalho."""
    lowered = [h.lower() for h in parsed]
    return [e for e in expected if not any(e.lower() in h for h in lowered)]


# ============================================================================
# Conversão e validação de linhas
# ============================================================================

def coerce_value(text: str, kind: FieldKind, date_format: str) -> Any:
    """
    Converte o texto de uma célula segundo o tipo da coluna.

    Raises:
        ValueError: Valor monetário, data ou número inválido
    """
    if kind == FieldKind.TEXT:
        return text
    if not text:
        return None
    if kind == FieldKind.MONEY:
        return parse_currency(text)
    if kind == FieldKind.DATE:
        return parse_date(text, date_format)
    if kind == FieldKind.NUMBER:
        try:
            return int(text)
        except ValueError:
            try:
                return parse_currency(text)
            except ValueError:
                raise ValueError(f"Número inválido: {text}") from None
    if kind == FieldKind.BOOL:
        return text.strip().lower() in ("sim", "true", "1", "yes")
    return text


def validate_import_row(
    row: dict[str, Any],
    required_fields: Optional[dict[str, str]] = None,
) -> list[str]:
    """
    Valida uma linha importada.

    Args:
        row: Linha já convertida
        required_fields: Campo -> mensagem (default: descrição e categoria)

    Returns:
        Mensagens de erro (vazio se a linha é válida)
    """
    required_fields = DEFAULT_REQUIRED_FIELDS if required_fields is None else required_fields
    errors = []
    for name, message in required_fields.items():
        value = row.get(name)
        if value is None or not str(value).strip():
            errors.append(message)

    value = row.get("valor_aquisicao")
    if value is not None and value != "":
        if not isinstance(value, (int, float)) or value < 0:
            errors.append("Valor de aquisição deve ser um número positivo")
    return errors


# ============================================================================
# Importador
# ============================================================================

class TabularImporter:
    """
    Lê CSV de volta para registros validados.

    Args:
        headers: Colunas conhecidas; rótulos iguais voltam para a chave e o
            tipo declarados, os demais usam a chave normalizada
        options: Separador, linhas ignoradas, formato de data
        required_fields: Campos obrigatórios por linha (campo -> mensagem)
    """

    def __init__(
        self,
        headers: Iterable[HeaderLike] = ASSETS,
        options: Optional[ImportOptions] = None,
        required_fields: Optional[dict[str, str]] = None,
    ):
        self.headers = as_headers(headers)
        self.options = options or ImportOptions()
        self.required_fields = DEFAULT_REQUIRED_FIELDS if required_fields is None else required_fields
        self._by_label = {h.label.lower(): h for h in self.headers}

    def resolve_column(self, label: str) -> HeaderSpec:
        """Coluna do arquivo -> HeaderSpec (conhecida ou inferida)."""
        known = self._by_label.get(label.strip().lower())
        if known is not None:
            return known
        key = normalize_key(label)
        return HeaderSpec(key, label, infer_kind(key))

    def map_row(self, columns: list[HeaderSpec], values: list[str]) -> dict[str, Any]:
        """
        Mapeia valores por posição.

        Raises:
            ValueError: Célula que não pôde ser convertida
        """
        row = {}
        for index, column in enumerate(columns):
            text = values[index] if index < len(values) else ""
            row[column.key] = coerce_value(text, column.kind, self.options.date_format)
        return row

    def import_text(self, text: str, expected_headers: Optional[Sequence[str]] = None) -> ImportResult:
        """
        Importa o conteúdo de um CSV.

        Args:
            text: Conteúdo do arquivo
            expected_headers: Colunas obrigatórias (default: rótulos de headers)

        Returns:
            ImportResult; success=False apenas quando a importação inteira falha
        """
        if expected_headers is None:
            expected_headers = [h.label for h in self.headers]

        try:
            return self._import(text, expected_headers)
        except DataImportError as exc:
            logger.warning("Importação rejeitada: %s", exc)
            return ImportResult(success=False, error=str(exc), missing_headers=exc.missing_headers)

    def _import(self, text: str, expected_headers: Sequence[str]) -> ImportResult:
        try:
            records = read_records(text, self.options.delimiter)[self.options.skip_rows:]
        except csv.Error as exc:
            raise DataImportError(f"CSV inválido: {exc}") from exc
        if len(records) < 2:
            raise DataImportError("Arquivo vazio ou sem dados")

        _, parsed_headers = records[0]
        missing = find_missing_headers(parsed_headers, expected_headers)
        if missing:
            raise DataImportError(
                f"Colunas obrigatórias não encontradas: {', '.join(missing)}",
                missing_headers=missing,
            )

        columns = [self.resolve_column(label) for label in parsed_headers]
        result = ImportResult(success=True, total_rows=len(records) - 1)

        for line_number, values in records[1:]:
            try:
                row = self.map_row(columns, values)
            except ValueError as exc:
                result.row_errors.append(RowError(line_number, [str(exc)]))
                continue

            if self.options.validate_rows:
                messages = validate_import_row(row, self.required_fields)
                if messages:
                    result.row_errors.append(RowError(line_number, messages))
                    continue
            result.rows.append(row)

        logger.info(
            "Importação: %d linhas, %d válidas, %d inválidas",
            result.total_rows, result.valid_row_count, result.invalid_row_count,
        )
        return result

    def import_file(self, path: Path | str, expected_headers: Optional[Sequence[str]] = None) -> ImportResult:
        """Lê um arquivo UTF-8 e importa."""
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Erro ao ler arquivo %s: %s", path, exc)
            return ImportResult(success=False, error=f"Erro ao ler arquivo: {exc}")
        return self.import_text(text, expected_headers)
