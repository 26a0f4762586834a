"""
Provedores de credenciais.

AuthSession delega a verificação de e-mail e senha a um
CredentialProvider. AllowListProvider é o provedor local: uma lista de
usuários autorizados com senhas guardadas como hash bcrypt.
"""

import logging
from pathlib import Path
from typing import Iterable, Protocol

import bcrypt
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from patrimonio.auth.permissions import Role
from patrimonio.errors import AuthenticationError, ErrorCode

logger = logging.getLogger(__name__)

HASH_ROUNDS = 12


class User(BaseModel):
    """Usuário autenticado."""
    id: str
    email: str
    name: str = ""
    role: Role = Role.VIEWER


class CredentialProvider(Protocol):
    """Verifica credenciais e devolve o usuário."""

    def authenticate(self, email: str, password: str) -> User:
        """
        Raises:
            AuthenticationError: Credenciais inválidas
        """
        ...


# ============================================================================
# Hash de senha
# ============================================================================

def _password_bytes(password: str) -> bytes:
    # bcrypt considera no máximo 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: int = HASH_ROUNDS) -> str:
    """
    Gera o hash bcrypt armazenável de uma senha.

    Args:
        password: Senha em texto
        rounds: Fator de custo do bcrypt (4 a 31)
    """
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, encoded: str) -> bool:
    """Confere a senha com o hash; hashes malformados nunca conferem."""
    try:
        return bcrypt.checkpw(_password_bytes(password), encoded.encode("utf-8"))
    except ValueError:
        return False


# ============================================================================
# Lista de usuários autorizados
# ============================================================================

class AllowListEntry(BaseModel):
    """Usuário autorizado no arquivo de configuração."""
    email: str
    password_hash: str
    name: str = ""
    role: Role = Role.VIEWER
    id: str = Field(default="")


class AllowListProvider:
    """
    Provedor local baseado em lista de usuários autorizados.

    Args:
        entries: Usuários autorizados (e-mail comparado sem caixa)
    """

    def __init__(self, entries: Iterable[AllowListEntry]):
        self._entries = {entry.email.strip().lower(): entry for entry in entries}

    @classmethod
    def from_file(cls, path: Path) -> "AllowListProvider":
        """
        Carrega a lista de um arquivo JSON (lista de AllowListEntry).

        Raises:
            AuthenticationError: Arquivo ausente ou inválido
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
            entries = TypeAdapter(list[AllowListEntry]).validate_json(text)
        except OSError as exc:
            raise AuthenticationError(
                f"Lista de usuários não encontrada: {path}",
                code=ErrorCode.BACKEND_CONFIG,
                original=exc,
            ) from exc
        except ValidationError as exc:
            raise AuthenticationError(
                f"Lista de usuários inválida: {path}",
                code=ErrorCode.BACKEND_CONFIG,
                original=exc,
            ) from exc
        return cls(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def authenticate(self, email: str, password: str) -> User:
        entry = self._entries.get(email.strip().lower())
        if entry is None:
            logger.info("Login recusado para e-mail não autorizado")
            raise AuthenticationError("Email não autorizado")
        if not verify_password(password, entry.password_hash):
            logger.info("Senha incorreta para %s", entry.email)
            raise AuthenticationError("Senha incorreta")

        return User(
            id=entry.id or entry.email.split("@")[0],
            email=entry.email,
            name=entry.name,
            role=entry.role,
        )
