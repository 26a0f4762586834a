"""
Relatórios: exportação, importação e estatísticas do estoque.
"""

from patrimonio.reports.exporter import ExportResult, TabularExporter, build_filename, filter_suffix
from patrimonio.reports.formatting import (
    format_bool,
    format_currency,
    format_date,
    format_number,
    parse_currency,
    parse_date,
)
from patrimonio.reports.headers import TEMPLATES, FieldKind, HeaderSpec, as_headers, infer_kind
from patrimonio.reports.importer import (
    ImportResult,
    RowError,
    TabularImporter,
    normalize_key,
    read_records,
    validate_import_row,
)
from patrimonio.reports.statistics import (
    GroupStats,
    InventoryStatistics,
    build_report,
    compute_statistics,
    group_report,
)

__all__ = [
    # Exportação
    "ExportResult",
    "TabularExporter",
    "build_filename",
    "filter_suffix",
    # Formatação
    "format_bool",
    "format_currency",
    "format_date",
    "format_number",
    "parse_currency",
    "parse_date",
    # Colunas
    "TEMPLATES",
    "FieldKind",
    "HeaderSpec",
    "as_headers",
    "infer_kind",
    # Importação
    "ImportResult",
    "RowError",
    "TabularImporter",
    "normalize_key",
    "read_records",
    "validate_import_row",
    # Estatísticas
    "GroupStats",
    "InventoryStatistics",
    "build_report",
    "compute_statistics",
    "group_report",
]
