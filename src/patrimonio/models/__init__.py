"""
Modelos de dados do patrimonio.

Este módulo contém todos os modelos Pydantic utilizados na aplicação.
"""

from patrimonio.models.base import (
    TimestampedModel,
    coerce_datetime,
    generate_id,
    generate_timestamp,
)
from patrimonio.models.asset import Asset, AssetFilters
from patrimonio.models.movement import Movement, MovementRequest

__all__ = [
    # Classes base
    "TimestampedModel",
    "coerce_datetime",
    "generate_id",
    "generate_timestamp",
    # Estoque
    "Asset",
    "AssetFilters",
    # Movimentações
    "Movement",
    "MovementRequest",
]
