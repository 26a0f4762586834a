"""
Esquemas de validação por tipo de formulário.
"""

from typing import Any, Callable, Mapping

from patrimonio.models.base import coerce_datetime
from patrimonio.reports.formatting import parse_currency
from patrimonio.validation import rules as r
from patrimonio.validation.rules import Rule


ASSET_SCHEMA: dict[str, list[Rule]] = {
    "tipo": [
        r.required("Tipo é obrigatório"),
        r.max_length(100, "Tipo deve ter no máximo 100 caracteres"),
    ],
    "conteudo": [
        r.required("Conteúdo é obrigatório"),
        r.min_length(2, "Conteúdo deve ter pelo menos 2 caracteres"),
        r.max_length(255, "Conteúdo deve ter no máximo 255 caracteres"),
    ],
    "descricao": [
        r.max_length(500, "Descrição deve ter no máximo 500 caracteres"),
    ],
    "quantidade": [
        r.required("Quantidade é obrigatória"),
        r.positive_integer("Quantidade deve ser um número inteiro positivo"),
    ],
    "unidade": [
        r.required("Unidade é obrigatória"),
    ],
    "valor_aquisicao": [
        r.positive_number("Valor deve ser um número positivo"),
    ],
    "data_aquisicao": [
        r.past_date("Data de aquisição não pode ser no futuro"),
    ],
    "localizacao_atual": [
        r.max_length(255, "Localização deve ter no máximo 255 caracteres"),
    ],
    "responsavel_atual": [
        r.max_length(255, "Responsável deve ter no máximo 255 caracteres"),
    ],
    "observacoes": [
        r.max_length(1000, "Observações devem ter no máximo 1000 caracteres"),
    ],
}


MOVEMENT_SCHEMA: dict[str, list[Rule]] = {
    "localizacao_destino": [
        r.required("Nova localização é obrigatória"),
        r.max_length(255, "Localização deve ter no máximo 255 caracteres"),
    ],
    "responsavel_destino": [
        r.required("Novo responsável é obrigatório"),
        r.max_length(255, "Responsável deve ter no máximo 255 caracteres"),
    ],
    "observacoes": [
        r.max_length(1000, "Observações devem ter no máximo 1000 caracteres"),
    ],
}


LOGIN_SCHEMA: dict[str, list[Rule]] = {
    "email": [
        r.required("Email é obrigatório"),
        r.email("Email inválido"),
    ],
    "password": [
        r.required("Senha é obrigatória"),
    ],
}


def _differs_from(current: Any) -> Callable[[Any], bool]:
    current_text = (current or "").strip()
    return lambda value: r.is_empty(value) or str(value).strip() != current_text


def movement_schema_for(asset: Mapping[str, Any]) -> dict[str, list[Rule]]:
    """Esquema de movimentação que exige destino diferente do atual."""
    schema = {name: list(rules) for name, rules in MOVEMENT_SCHEMA.items()}
    schema["localizacao_destino"].append(
        r.custom(
            _differs_from(asset.get("localizacao_atual")),
            "Nova localização deve ser diferente da atual",
        )
    )
    schema["responsavel_destino"].append(
        r.custom(
            _differs_from(asset.get("responsavel_atual")),
            "Novo responsável deve ser diferente do atual",
        )
    )
    return schema


def asset_form_values(asset: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Valores iniciais do formulário de item (vazio ou a partir de um registro)."""
    asset = asset or {}
    values = {name: asset.get(name) if asset.get(name) is not None else "" for name in ASSET_SCHEMA}
    values["status"] = asset.get("status") or "Ativo"
    return values


def asset_data_from_form(values: Mapping[str, Any]) -> dict[str, Any]:
    """
    Converte valores de formulário (texto) nos tipos do modelo Asset.

    Deve ser chamado depois da validação: quantidade já é um inteiro
    positivo e a data já é interpretável.
    """
    data: dict[str, Any] = {}
    for name, value in values.items():
        if isinstance(value, str):
            value = value.strip()
        if r.is_empty(value):
            if name in ("valor_aquisicao", "data_aquisicao", "observacoes"):
                data[name] = None
            continue
        if name == "quantidade":
            value = int(value)
        elif name == "valor_aquisicao":
            value = float(value) if isinstance(value, (int, float)) else parse_currency(str(value))
        elif name == "data_aquisicao":
            value = coerce_datetime(value).date().isoformat()
        data[name] = value
    return data
