"""
Regras de validação de campos.

Cada fábrica devolve uma regra: uma função pura que recebe o valor atual
do campo e retorna None (válido) ou a mensagem de erro. Regras de campos
opcionais passam quando o valor está vazio; a obrigatoriedade fica a
cargo de ``required``.
"""

import math
import re
from datetime import date, datetime, time
from typing import Any, Callable, Optional, Pattern, Union

from patrimonio.models.base import coerce_datetime
from patrimonio.reports.formatting import parse_currency

Rule = Callable[[Any], Optional[str]]

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Valor digitado no formato brasileiro (1.234,56), com símbolo opcional
BR_NUMBER_REGEX = re.compile(r"^-?(R\$\s*)?\d+(\.\d{3})*(,\d+)?$")


def is_empty(value: Any) -> bool:
    """None ou string em branco."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        try:
            number = float(text)
        except ValueError:
            if not BR_NUMBER_REGEX.match(text):
                return None
            number = parse_currency(text)
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if re.fullmatch(r"[+-]?\d+", text):
        return int(text)
    return None


# =============================================================================
# REGRAS BÁSICAS
# =============================================================================

def required(message: str = "Este campo é obrigatório") -> Rule:
    """Falha em None e em strings vazias após trim. Aceita 0 e "0"."""
    def rule(value: Any) -> Optional[str]:
        if is_empty(value):
            return message
        return None
    return rule


def min_length(minimum: int, message: Optional[str] = None) -> Rule:
    """Comprimento mínimo; valores vazios passam."""
    message = message or f"Mínimo de {minimum} caracteres"

    def rule(value: Any) -> Optional[str]:
        if is_empty(value):
            return None
        if len(str(value)) < minimum:
            return message
        return None
    return rule


def max_length(maximum: int, message: Optional[str] = None) -> Rule:
    """Comprimento máximo; valores vazios passam."""
    message = message or f"Máximo de {maximum} caracteres"

    def rule(value: Any) -> Optional[str]:
        if is_empty(value):
            return None
        if len(str(value)) > maximum:
            return message
        return None
    return rule


def pattern(regex: Union[str, Pattern[str]], message: str = "Formato inválido") -> Rule:
    """Falha quando o valor não casa com a expressão (busca, não match total)."""
    compiled = re.compile(regex) if isinstance(regex, str) else regex

    def rule(value: Any) -> Optional[str]:
        if is_empty(value):
            return None
        if not compiled.search(str(value)):
            return message
        return None
    return rule


def email(message: str = "Email inválido") -> Rule:
    """Formato local@dominio.tld."""
    return pattern(EMAIL_REGEX, message)


# =============================================================================
# REGRAS NUMÉRICAS E DE DATA
# =============================================================================

def positive_number(message: str = "Deve ser um número positivo") -> Rule:
    """Número >= 0; valores vazios passam."""
    def rule(value: Any) -> Optional[str]:
        if is_empty(value):
            return None
        number = _as_float(value)
        if number is None or number < 0:
            return message
        return None
    return rule


def positive_integer(message: str = "Deve ser um número inteiro positivo") -> Rule:
    """Inteiro estritamente maior que zero; valores vazios passam."""
    def rule(value: Any) -> Optional[str]:
        if is_empty(value):
            return None
        number = _as_int(value)
        if number is None or number <= 0:
            return message
        return None
    return rule


def past_date(
    message: str = "Data não pode ser no futuro",
    today: Callable[[], date] = date.today,
) -> Rule:
    """
    Data não posterior ao fim do dia de hoje (hora local).

    Datas que não podem ser interpretadas também falham.
    """
    def rule(value: Any) -> Optional[str]:
        if is_empty(value):
            return None
        parsed = coerce_datetime(value)
        if parsed is None:
            return message
        end_of_today = datetime.combine(today(), time.max)
        if parsed > end_of_today:
            return message
        return None
    return rule


def custom(predicate: Callable[[Any], bool], message: str = "Valor inválido") -> Rule:
    """Falha quando predicate(value) é falso."""
    def rule(value: Any) -> Optional[str]:
        if not predicate(value):
            return message
        return None
    return rule


def run_rules(rules: list[Rule], value: Any) -> Optional[str]:
    """Executa as regras em ordem e retorna o primeiro erro."""
    for rule in rules:
        error = rule(value)
        if error:
            return error
    return None
