"""Configuração do pytest para os testes do patrimonio."""

from datetime import datetime

import pytest

from patrimonio.database import Database, reset_database


@pytest.fixture
def temp_db(tmp_path):
    """Banco SQLite temporário."""
    db = Database(tmp_path / "test.db")
    yield db
    reset_database()


@pytest.fixture
def fixed_clock():
    """Relógio fixo para nomes de arquivo previsíveis."""
    return lambda: datetime(2024, 3, 15, 10, 30, 0)


@pytest.fixture
def asset_data():
    """Dados mínimos válidos de um bem."""
    return {
        "tipo": "Escritório",
        "conteudo": "Canetas azuis",
        "descricao": "Caixa com 50 canetas",
        "quantidade": 2,
        "unidade": "Caixa",
        "valor_aquisicao": 35.5,
        "data_aquisicao": "2024-01-10",
        "localizacao_atual": "recepção",
        "responsavel_atual": "Denise",
    }


@pytest.fixture
def sample_records():
    """Registros no formato exportado (com categoria)."""
    return [
        {
            "codigo": "20240001",
            "descricao": "Mesa de escritório",
            "categoria": "Móveis",
            "valor_aquisicao": 1234.56,
            "data_aquisicao": "2024-03-15",
            "localizacao_atual": "Sala 1",
            "responsavel_atual": "Karen",
            "status": "Ativo",
            "observacoes": "Tampo de vidro, pés de metal",
            "created_at": "2024-03-15T09:00:00",
        },
        {
            "codigo": "20240002",
            "descricao": "Cadeira giratória",
            "categoria": "Móveis",
            "valor_aquisicao": 450.0,
            "data_aquisicao": "2023-11-02",
            "localizacao_atual": "recepção",
            "responsavel_atual": "Denise",
            "status": "manutenção",
            "observacoes": None,
            "created_at": "2024-03-16T14:30:00",
        },
        {
            "codigo": "20240003",
            "descricao": "Quebra-cabeça 100 peças",
            "categoria": "Brinquedos",
            "valor_aquisicao": None,
            "data_aquisicao": None,
            "localizacao_atual": "sala de brinquedo",
            "responsavel_atual": "",
            "status": "Ativo",
            "observacoes": "",
            "created_at": "2024-03-17T08:15:00",
        },
    ]
