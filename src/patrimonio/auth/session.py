"""
Sessão de autenticação.

Guarda o usuário atual e as suas permissões e avisa os interessados
quando o estado muda. Não há estado global: a sessão é criada por quem
precisa dela e passada adiante.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from patrimonio.auth.permissions import Permission, permissions_for
from patrimonio.auth.providers import CredentialProvider, User
from patrimonio.errors import AuthenticationError, PermissionDeniedError
from patrimonio.validation import LOGIN_SCHEMA, FormValidation

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[User]], None]


@dataclass
class SignInResult:
    success: bool
    user: Optional[User] = None
    error: Optional[str] = None


class AuthSession:
    """
    Sessão do usuário.

    Args:
        provider: Quem verifica as credenciais
    """

    def __init__(self, provider: CredentialProvider):
        self.provider = provider
        self.current_user: Optional[User] = None
        self.permissions: frozenset[Permission] = frozenset()
        self._listeners: list[AuthListener] = []

    # ========================================================================
    # Assinaturas
    # ========================================================================

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """
        Registra um ouvinte de login/logout.

        Returns:
            Função que cancela a assinatura (idempotente)
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.current_user)
            except Exception:
                logger.exception("Ouvinte de autenticação falhou")

    # ========================================================================
    # Login / logout
    # ========================================================================

    def sign_in(self, email: str, password: str) -> SignInResult:
        """
        Autentica e carrega as permissões do papel do usuário.

        Falhas viram SignInResult(success=False); nada é lançado.
        """
        form = FormValidation(LOGIN_SCHEMA, {"email": email, "password": password})
        if not form.validate_form():
            return SignInResult(success=False, error=next(iter(form.active_errors.values())))

        try:
            user = self.provider.authenticate(email, password)
        except AuthenticationError as exc:
            return SignInResult(success=False, error=exc.message)

        self.current_user = user
        self.permissions = permissions_for(user.role)
        logger.info("Sessão iniciada: %s (%s)", user.email, user.role.value)
        self._notify()
        return SignInResult(success=True, user=user)

    def sign_out(self) -> None:
        """Encerra a sessão e limpa usuário e permissões."""
        if self.current_user is None:
            return
        logger.info("Sessão encerrada: %s", self.current_user.email)
        self.current_user = None
        self.permissions = frozenset()
        self._notify()

    # ========================================================================
    # Consultas
    # ========================================================================

    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def has_permission(self, permission: Permission | str) -> bool:
        try:
            return Permission(permission) in self.permissions
        except ValueError:
            return False

    def require_permission(self, permission: Permission | str) -> None:
        """
        Raises:
            PermissionDeniedError: Sem a permissão
        """
        if not self.has_permission(permission):
            name = permission.value if isinstance(permission, Permission) else permission
            raise PermissionDeniedError(f"Permissão necessária: {name}")
