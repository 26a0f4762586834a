"""
Estatísticas e relatórios agregados do estoque.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from patrimonio.config import NOT_INFORMED


def _unit_value(record: Mapping[str, Any]) -> float:
    try:
        return float(record.get("valor_aquisicao") or 0)
    except (TypeError, ValueError):
        return 0.0


def _quantity(record: Mapping[str, Any]) -> int:
    """Quantidade do registro; ausente, zero ou inválida conta como 1."""
    try:
        quantity = int(float(record.get("quantidade") or 0))
    except (TypeError, ValueError):
        quantity = 0
    return quantity or 1


@dataclass
class GroupStats:
    """Acumulado de um grupo (categoria ou status)."""
    count: int = 0
    items: int = 0
    value: float = 0.0


@dataclass
class InventoryStatistics:
    """Resumo de valor do estoque."""
    total_value: float = 0.0
    total_items: int = 0
    average_value: float = 0.0
    category_stats: dict[str, GroupStats] = field(default_factory=dict)
    status_stats: dict[str, GroupStats] = field(default_factory=dict)

    def sorted_categories(self) -> list[tuple[str, GroupStats]]:
        """Categorias por valor decrescente."""
        return sorted(self.category_stats.items(), key=lambda item: item[1].value, reverse=True)

    def sorted_statuses(self) -> list[tuple[str, GroupStats]]:
        """Status por valor decrescente."""
        return sorted(self.status_stats.items(), key=lambda item: item[1].value, reverse=True)

    def to_dict(self) -> dict:
        """Formato do envelope JSON (chaves camelCase)."""
        def groups(stats: dict[str, GroupStats]) -> dict:
            return {
                name: {"count": g.count, "items": g.items, "value": round(g.value, 2)}
                for name, g in stats.items()
            }

        return {
            "totalValue": round(self.total_value, 2),
            "totalItems": self.total_items,
            "averageValue": round(self.average_value, 2),
            "categoryStats": groups(self.category_stats),
            "statusStats": groups(self.status_stats),
        }


def compute_statistics(records: Iterable[Mapping[str, Any]]) -> InventoryStatistics:
    """
    Calcula o resumo de valor.

    O valor de cada registro é valor unitário x quantidade; a categoria
    é o tipo do item.
    """
    stats = InventoryStatistics()

    for record in records:
        quantity = _quantity(record)
        value = _unit_value(record) * quantity

        stats.total_value += value
        stats.total_items += quantity

        category = record.get("tipo") or "Sem categoria"
        group = stats.category_stats.setdefault(category, GroupStats())
        group.count += 1
        group.items += quantity
        group.value += value

        status = record.get("status") or "Sem status"
        group = stats.status_stats.setdefault(status, GroupStats())
        group.count += 1
        group.items += quantity
        group.value += value

    if stats.total_items > 0:
        stats.average_value = stats.total_value / stats.total_items
    return stats


# ============================================================================
# Relatórios agrupados
# ============================================================================

# nome do relatório -> (campo do registro, chave da linha)
GROUP_REPORTS = {
    "location": ("localizacao_atual", "localizacao"),
    "responsible": ("responsavel_atual", "responsavel"),
    "type": ("tipo", "tipo"),
    "status": ("status", "status"),
}


def group_report(
    records: Iterable[Mapping[str, Any]],
    field_name: str,
    label_key: str,
) -> list[dict[str, Any]]:
    """
    Agrupa registros por um campo.

    Returns:
        Linhas {label_key, quantidade (nº de registros), valor_total
        (soma dos valores unitários)} na ordem de primeira ocorrência
    """
    groups: dict[str, dict[str, Any]] = {}
    for record in records:
        label = record.get(field_name) or NOT_INFORMED
        row = groups.setdefault(label, {label_key: label, "quantidade": 0, "valor_total": 0.0})
        row["quantidade"] += 1
        row["valor_total"] += _unit_value(record)
    return list(groups.values())


def build_report(records: Iterable[Mapping[str, Any]], name: str) -> list[dict[str, Any]]:
    """Relatório por nome (location, responsible, type, status)."""
    field_name, label_key = GROUP_REPORTS[name]
    return group_report(records, field_name, label_key)
