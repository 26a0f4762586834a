"""
Clases base para modelos Pydantic.

Proporciona ID, timestamps e conversão tolerante de datas.
"""

import uuid
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


def generate_id() -> str:
    """Gera um ID curto único (8 caracteres)."""
    return str(uuid.uuid4())[:8]


def generate_timestamp() -> str:
    """Gera timestamp ISO atual."""
    return datetime.now().isoformat()


# Formatos aceitos para datas digitadas ou vindas de arquivos
_DATE_INPUT_FORMATS = ("%d/%m/%Y", "%d/%m/%Y %H:%M", "%d/%m/%Y %H:%M:%S")


def coerce_datetime(value: Any) -> Optional[datetime]:
    """
    Converte um valor em datetime local ingênuo.

    Aceita datetime, date, strings ISO-8601 (com ou sem fuso, com 'Z')
    e strings dd/mm/aaaa. Retorna None se não for possível interpretar.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is None:
        for fmt in _DATE_INPUT_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


class TimestampedModel(BaseModel):
    """
    Modelo base com ID e timestamps automáticos.

    Proporciona:
    - id: ID único de 8 caracteres
    - created_at: Timestamp de criação
    - updated_at: Timestamp da última atualização
    """

    id: str = Field(default_factory=generate_id)
    created_at: str = Field(default_factory=generate_timestamp)
    updated_at: str = Field(default_factory=generate_timestamp)

    def touch(self) -> None:
        """Atualiza o timestamp de modificação."""
        self.updated_at = generate_timestamp()
