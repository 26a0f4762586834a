"""
Modelo de movimentação (troca de localização/responsável).

Uma movimentação é imutável: registra a origem e o destino
no momento em que o item foi movido.
"""

from typing import Optional

from pydantic import BaseModel, Field

from patrimonio.models.base import generate_timestamp


class MovementRequest(BaseModel):
    """Dados informados pelo usuário para mover um item."""

    localizacao_destino: str = Field(..., min_length=1)
    responsavel_destino: str = Field(..., min_length=1)
    observacoes: Optional[str] = None


class Movement(BaseModel):
    """Entrada do histórico de movimentações."""

    id: Optional[int] = None
    bem_id: str
    data_movimentacao: str = Field(default_factory=generate_timestamp)
    localizacao_origem: str = ""
    localizacao_destino: str
    responsavel_origem: str = ""
    responsavel_destino: str
    observacoes: Optional[str] = None

    model_config = {"frozen": True}
