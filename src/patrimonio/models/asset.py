"""
Modelo de item de estoque (bem patrimonial).
"""

from typing import Optional

from pydantic import BaseModel, Field

from patrimonio.config import AssetStatus
from patrimonio.models.base import TimestampedModel


class Asset(TimestampedModel):
    """
    Item físico rastreado pela clínica.

    Os nomes dos campos seguem o formato dos arquivos exportados
    (valor_* é dinheiro, data_* é data).
    """

    codigo: str = ""  # Código patrimonial (AAAA0001)
    tipo: str
    conteudo: str
    descricao: str = ""
    quantidade: int = Field(default=1, gt=0)
    unidade: str
    valor_aquisicao: Optional[float] = Field(default=None, ge=0)
    data_aquisicao: Optional[str] = None
    localizacao_atual: str = ""
    responsavel_atual: str = ""
    status: str = AssetStatus.ATIVO.value
    observacoes: Optional[str] = None

    @property
    def total_value(self) -> float:
        """Valor unitário multiplicado pela quantidade."""
        return (self.valor_aquisicao or 0.0) * self.quantidade


class AssetFilters(BaseModel):
    """Filtros ativos da listagem (tipo, status, localização)."""

    tipo: str = ""
    status: str = ""
    localizacao: str = ""

    @property
    def active(self) -> bool:
        """True se pelo menos um filtro está preenchido."""
        return bool(self.tipo or self.status or self.localizacao)

    def cache_key(self) -> tuple[str, str, str]:
        return (self.tipo, self.status, self.localizacao)
