"""Modelos Pydantic para configuração e constantes do domínio."""

import os
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class AssetType(str, Enum):
    """Tipos de item de estoque."""
    BRINQUEDOS_CAIXA = "Brinquedos em Caixa"
    BRINQUEDOS_SOLTOS = "Brinquedos Soltos"
    ESCRITORIO = "Escritório"
    DECORACAO = "Decoração"


class AssetUnit(str, Enum):
    """Unidades de medida do estoque."""
    CAIXA = "Caixa"
    KIT = "Kit"
    UNIDADE = "Unidade"
    PACOTE = "Pacote"
    TUBO = "Tubo"
    POTE = "Pote"


class AssetStatus(str, Enum):
    """Situação de um item."""
    ATIVO = "Ativo"
    EM_FALTA = "em falta"
    MANUTENCAO = "manutenção"
    QUEBRADO = "quebrado"


LOCATIONS = [
    "banheiro",
    "recepção",
    "cozinha",
    "almoxarifado",
    "Sala 1",
    "sala 2",
    "sala 3",
    "sala de brinquedo",
]


# ============================================================================
# Constantes
# ============================================================================

PAGINATION_LIMIT = 20
CACHE_CAPACITY = 50
IMPORT_BATCH_SIZE = 10

# Abertura do banco: novas tentativas enquanto o arquivo estiver bloqueado
DB_OPEN_RETRIES = 3
DB_OPEN_RETRY_DELAY = 0.5

# Convenção de nomes: chaves com estes marcadores são dinheiro / datas
CURRENCY_MARKER = "valor"
DATE_MARKER = "data"

CURRENCY_SYMBOL = "R$"
CSV_DATE_FORMAT = "%d/%m/%Y"
JSON_DATE_FORMAT = "%Y-%m-%d"

EXPORTED_BY = "Sistema de Estoque da Clínica"
EXPORT_VERSION = "1.0"

NOT_INFORMED = "Não informado"


# ============================================================================
# Opções de exportação / importação
# ============================================================================

class ExportOptions(BaseModel):
    """Opções de serialização tabular."""
    delimiter: str = Field(default=",", min_length=1, max_length=1, description="Separador de campos")
    date_format: str = Field(default=CSV_DATE_FORMAT, description="Formato de data no CSV")
    json_date_format: str = Field(default=JSON_DATE_FORMAT, description="Formato de data no JSON")
    currency_symbol: str = Field(default=CURRENCY_SYMBOL, description="Símbolo monetário")
    pretty: bool = Field(default=True, description="JSON indentado")


class ImportOptions(BaseModel):
    """Opções de leitura de CSV."""
    delimiter: str = Field(default=",", min_length=1, max_length=1, description="Separador de campos")
    skip_rows: int = Field(default=0, ge=0, description="Linhas iniciais ignoradas")
    date_format: str = Field(default=CSV_DATE_FORMAT, description="Formato esperado das datas")
    validate_rows: bool = Field(default=True, description="Aplicar validação por linha")


# ============================================================================
# Configuração da aplicação
# ============================================================================

DB_ENV_VAR = "PATRIMONIO_DB"
USERS_ENV_VAR = "PATRIMONIO_USERS"


class Settings(BaseModel):
    """Configuração resolvida em tempo de execução."""
    db_path: Path = Field(..., description="Arquivo SQLite")
    users_path: Optional[Path] = Field(default=None, description="Lista de usuários autorizados (JSON)")
    page_size: int = Field(default=PAGINATION_LIMIT, gt=0)
    cache_capacity: int = Field(default=CACHE_CAPACITY, gt=0)
    batch_size: int = Field(default=IMPORT_BATCH_SIZE, gt=0)

    @classmethod
    def load(cls, db_path: Optional[Path] = None) -> "Settings":
        """
        Resolve a configuração.

        Banco: argumento explícito, variável PATRIMONIO_DB,
        ~/.patrimonio/patrimonio.db. Usuários: variável PATRIMONIO_USERS,
        users.json ao lado do banco.
        """
        if db_path is None:
            env_path = os.environ.get(DB_ENV_VAR)
            if env_path:
                db_path = Path(env_path)
            else:
                db_path = Path.home() / ".patrimonio" / "patrimonio.db"
        db_path = Path(db_path)

        users_env = os.environ.get(USERS_ENV_VAR)
        users_path = Path(users_env) if users_env else db_path.parent / "users.json"
        return cls(db_path=db_path, users_path=users_path)
