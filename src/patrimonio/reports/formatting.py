"""
Formatação e conversão de valores no padrão brasileiro.

Dinheiro: "R$ 1.234,56" (ponto para milhar, vírgula decimal).
Datas: dd/mm/aaaa nos arquivos CSV, aaaa-mm-dd no JSON.
"""

import re
from datetime import datetime
from typing import Any, Optional

from patrimonio.config import CSV_DATE_FORMAT, CURRENCY_SYMBOL
from patrimonio.models.base import coerce_datetime


def format_currency(value: Optional[float], symbol: str = CURRENCY_SYMBOL) -> str:
    """
    Formata um valor monetário.

    Args:
        value: Valor numérico (None é tratado como zero)
        symbol: Símbolo da moeda

    Returns:
        String formatada (ex: "R$ 1.234,56", "-R$ 10,00")
    """
    if value is None:
        value = 0.0
    grouped = f"{abs(value):,.2f}"
    grouped = grouped.replace(",", "\x00").replace(".", ",").replace("\x00", ".")
    sign = "-" if value < 0 and round(abs(value), 2) != 0 else ""
    return f"{sign}{symbol} {grouped}"


def format_date(value: Any, fmt: str = CSV_DATE_FORMAT) -> str:
    """Formata uma data; valores não interpretáveis voltam como texto."""
    parsed = coerce_datetime(value)
    if parsed is None:
        return str(value)
    return parsed.strftime(fmt)


def format_bool(value: bool) -> str:
    return "Sim" if value else "Não"


def format_number(value: float, decimals: int = 2) -> str:
    """Número com separadores brasileiros (sem símbolo)."""
    grouped = f"{value:,.{decimals}f}"
    return grouped.replace(",", "\x00").replace(".", ",").replace("\x00", ".")


# ============================================================================
# Conversão de texto importado
# ============================================================================

def parse_currency(text: str) -> float:
    """
    Converte texto monetário em número.

    Remove símbolo e espaços; com vírgula presente, pontos são milhar e a
    vírgula é o decimal. Sem vírgula, um único ponto é o decimal.

    Raises:
        ValueError: Se não sobrar um número válido
    """
    cleaned = re.sub(r"[^\d,.\-]", "", text)
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    elif cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")
    if not re.search(r"\d", cleaned):
        raise ValueError(f"Valor inválido: {text}")
    try:
        return float(cleaned)
    except ValueError:
        raise ValueError(f"Valor inválido: {text}") from None


def parse_date(text: str, fmt: str = CSV_DATE_FORMAT) -> datetime:
    """
    Converte texto em data no formato esperado.

    Aceita também ISO-8601, que é como timestamps são exportados.

    Raises:
        ValueError: Se o texto não for uma data
    """
    try:
        return datetime.strptime(text.strip(), fmt)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text.strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"Data inválida: {text}") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
