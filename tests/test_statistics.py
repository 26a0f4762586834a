"""
Testes de estatísticas e relatórios agrupados.
"""

import pytest

from patrimonio.config import NOT_INFORMED
from patrimonio.reports import build_report, compute_statistics, group_report


@pytest.fixture
def records():
    return [
        {"tipo": "Escritório", "status": "Ativo", "quantidade": 2, "valor_aquisicao": 10.0,
         "localizacao_atual": "recepção", "responsavel_atual": "Denise"},
        {"tipo": "Decoração", "status": "quebrado", "quantidade": None, "valor_aquisicao": 5.0,
         "localizacao_atual": "Sala 1", "responsavel_atual": ""},
        {"tipo": "Escritório", "status": "", "quantidade": 1, "valor_aquisicao": None,
         "localizacao_atual": "recepção", "responsavel_atual": "Denise"},
    ]


class TestComputeStatistics:
    """Testes de compute_statistics."""

    def test_totals(self, records):
        stats = compute_statistics(records)

        assert stats.total_value == 25.0
        assert stats.total_items == 4
        assert stats.average_value == pytest.approx(6.25)

    def test_category_and_status_groups(self, records):
        stats = compute_statistics(records)

        office = stats.category_stats["Escritório"]
        assert (office.count, office.items, office.value) == (2, 3, 20.0)
        assert stats.status_stats["Sem status"].count == 1
        assert [name for name, _ in stats.sorted_categories()] == ["Escritório", "Decoração"]
        assert [name for name, _ in stats.sorted_statuses()][0] == "Ativo"

    def test_empty(self):
        stats = compute_statistics([])
        assert stats.total_value == 0
        assert stats.average_value == 0
        assert stats.category_stats == {}

    def test_missing_type_goes_to_default_category(self):
        stats = compute_statistics([{"valor_aquisicao": "12.5"}])
        assert stats.category_stats["Sem categoria"].value == 12.5

    def test_to_dict(self, records):
        data = compute_statistics(records).to_dict()

        assert set(data) == {"totalValue", "totalItems", "averageValue", "categoryStats", "statusStats"}
        assert data["categoryStats"]["Decoração"] == {"count": 1, "items": 1, "value": 5.0}


class TestGroupReports:
    """Testes dos relatórios por localização, responsável, tipo e status."""

    def test_group_by_location(self, records):
        rows = group_report(records, "localizacao_atual", "localizacao")

        assert rows == [
            {"localizacao": "recepção", "quantidade": 2, "valor_total": 10.0},
            {"localizacao": "Sala 1", "quantidade": 1, "valor_total": 5.0},
        ]

    def test_missing_label_is_not_informed(self, records):
        rows = build_report(records, "responsible")

        labels = [row["responsavel"] for row in rows]
        assert labels == ["Denise", NOT_INFORMED]

    def test_status_report(self, records):
        rows = build_report(records, "status")
        assert {row["status"] for row in rows} == {"Ativo", "quebrado", NOT_INFORMED}

    def test_unknown_report(self, records):
        with pytest.raises(KeyError):
            build_report(records, "desconhecido")
