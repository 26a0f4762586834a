"""
Autenticação e permissões.
"""

from patrimonio.auth.permissions import ROLE_PERMISSIONS, Permission, Role, permissions_for
from patrimonio.auth.providers import (
    AllowListEntry,
    AllowListProvider,
    CredentialProvider,
    User,
    hash_password,
    verify_password,
)
from patrimonio.auth.session import AuthSession, SignInResult

__all__ = [
    "ROLE_PERMISSIONS",
    "Permission",
    "Role",
    "permissions_for",
    "AllowListEntry",
    "AllowListProvider",
    "CredentialProvider",
    "User",
    "hash_password",
    "verify_password",
    "AuthSession",
    "SignInResult",
]
