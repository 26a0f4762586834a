"""
Especificação de colunas para exportação e importação.

Cada coluna tem uma chave (campo do registro), um rótulo (título no
arquivo) e um tipo. O tipo é inferido uma única vez a partir da
convenção de nomes dos arquivos existentes: chaves com "valor" são
dinheiro e chaves com "data" são datas.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from patrimonio.config import CURRENCY_MARKER, DATE_MARKER


class FieldKind(str, Enum):
    """Tipo de formatação de uma coluna."""
    MONEY = "money"
    DATE = "date"
    TEXT = "text"
    NUMBER = "number"
    BOOL = "bool"


def infer_kind(key: str) -> FieldKind:
    """Aplica a convenção de nomes à chave."""
    lowered = key.lower()
    if CURRENCY_MARKER in lowered:
        return FieldKind.MONEY
    if DATE_MARKER in lowered:
        return FieldKind.DATE
    return FieldKind.TEXT


@dataclass(frozen=True)
class HeaderSpec:
    """Coluna de um relatório."""
    key: str
    label: str
    kind: Optional[FieldKind] = None

    def __post_init__(self):
        if self.kind is None:
            object.__setattr__(self, "kind", infer_kind(self.key))


HeaderLike = Union[HeaderSpec, tuple, dict]


def as_headers(headers: Iterable[HeaderLike]) -> list[HeaderSpec]:
    """Aceita HeaderSpec, tuplas (key, label[, kind]) ou dicts {key, label}."""
    result = []
    for header in headers:
        if isinstance(header, HeaderSpec):
            result.append(header)
        elif isinstance(header, dict):
            kind = header.get("kind")
            result.append(HeaderSpec(header["key"], header["label"], FieldKind(kind) if kind else None))
        else:
            result.append(HeaderSpec(*header))
    return result


# ============================================================================
# Modelos de colunas
# ============================================================================

ASSETS = [
    HeaderSpec("codigo", "Código"),
    HeaderSpec("tipo", "Tipo"),
    HeaderSpec("conteudo", "Conteúdo"),
    HeaderSpec("descricao", "Descrição"),
    HeaderSpec("quantidade", "Quantidade", FieldKind.NUMBER),
    HeaderSpec("unidade", "Unidade"),
    HeaderSpec("valor_aquisicao", "Valor de Aquisição"),
    HeaderSpec("data_aquisicao", "Data de Aquisição"),
    HeaderSpec("localizacao_atual", "Localização Atual"),
    HeaderSpec("responsavel_atual", "Responsável Atual"),
    HeaderSpec("status", "Status"),
    HeaderSpec("observacoes", "Observações"),
    HeaderSpec("created_at", "Data de Cadastro"),
]

ASSETS_BASIC = [
    HeaderSpec("codigo", "Código"),
    HeaderSpec("descricao", "Descrição"),
    HeaderSpec("categoria", "Categoria"),
    HeaderSpec("status", "Status"),
]

ASSETS_COMPLETE = [
    HeaderSpec("codigo", "Código"),
    HeaderSpec("descricao", "Descrição"),
    HeaderSpec("categoria", "Categoria"),
    HeaderSpec("valor_aquisicao", "Valor de Aquisição"),
    HeaderSpec("data_aquisicao", "Data de Aquisição"),
    HeaderSpec("localizacao_atual", "Localização Atual"),
    HeaderSpec("responsavel_atual", "Responsável Atual"),
    HeaderSpec("status", "Status"),
    HeaderSpec("observacoes", "Observações"),
    HeaderSpec("created_at", "Data de Cadastro"),
]

MOVEMENTS = [
    HeaderSpec("bem_codigo", "Código do Bem"),
    HeaderSpec("bem_descricao", "Descrição do Bem"),
    HeaderSpec("data_movimentacao", "Data/Hora da Movimentação"),
    HeaderSpec("localizacao_origem", "Localização de Origem"),
    HeaderSpec("localizacao_destino", "Localização de Destino"),
    HeaderSpec("responsavel_origem", "Responsável de Origem"),
    HeaderSpec("responsavel_destino", "Responsável de Destino"),
    HeaderSpec("observacoes", "Observações"),
]

INVENTORY_BY_LOCATION = [
    HeaderSpec("localizacao", "Localização"),
    HeaderSpec("quantidade", "Quantidade", FieldKind.NUMBER),
    HeaderSpec("valor_total", "Valor Total"),
]

ASSETS_BY_RESPONSIBLE = [
    HeaderSpec("responsavel", "Responsável"),
    HeaderSpec("quantidade", "Quantidade", FieldKind.NUMBER),
    HeaderSpec("valor_total", "Valor Total"),
]

SUMMARY_BY_TYPE = [
    HeaderSpec("tipo", "Tipo"),
    HeaderSpec("quantidade", "Quantidade", FieldKind.NUMBER),
    HeaderSpec("valor_total", "Valor Total"),
]

ASSETS_BY_STATUS = [
    HeaderSpec("status", "Status"),
    HeaderSpec("quantidade", "Quantidade", FieldKind.NUMBER),
    HeaderSpec("valor_total", "Valor Total"),
]

TEMPLATES = {
    "assets": ASSETS,
    "assets_basic": ASSETS_BASIC,
    "assets_complete": ASSETS_COMPLETE,
    "movements": MOVEMENTS,
    "location": INVENTORY_BY_LOCATION,
    "responsible": ASSETS_BY_RESPONSIBLE,
    "type": SUMMARY_BY_TYPE,
    "status": ASSETS_BY_STATUS,
}
