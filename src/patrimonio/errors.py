"""
Taxonomia de erros e utilitários de tratamento.

Erros de validação nunca são lançados: são devolvidos como dados.
As exceções abaixo cobrem as falhas de exportação, importação,
persistência e autenticação, e são convertidas em objetos de
resultado nas fronteiras (CLI, exportador, importador).
"""

import logging
import time
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Categorias de erro."""
    NETWORK_ERROR = "NETWORK_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SERVER_ERROR = "SERVER_ERROR"
    BACKEND_CONFIG = "BACKEND_CONFIG"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class AppError(Exception):
    """Erro base da aplicação com código e causa original."""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        original: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.original = original
        self.timestamp = datetime.now().isoformat()


class ExportError(AppError):
    """Entrada vazia ou falha de serialização na exportação."""
    code = ErrorCode.VALIDATION_ERROR


class DataImportError(AppError):
    """Falha que invalida uma importação inteira (ex: colunas ausentes)."""
    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, missing_headers: Optional[list[str]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.missing_headers = missing_headers or []


class RepositoryError(AppError):
    """Falha no backend de persistência."""
    code = ErrorCode.SERVER_ERROR


class NotFoundError(RepositoryError):
    """Registro inexistente."""
    code = ErrorCode.NOT_FOUND


class PermissionDeniedError(AppError):
    """Usuário sem a permissão exigida."""
    code = ErrorCode.PERMISSION_ERROR


class AuthenticationError(AppError):
    """Sessão ausente ou credenciais inválidas."""
    code = ErrorCode.PERMISSION_ERROR


# ============================================================================
# Categorização e mensagens
# ============================================================================

USER_MESSAGES = {
    ErrorCode.NETWORK_ERROR: "Problema de conexão. Verifique sua internet e tente novamente.",
    ErrorCode.BACKEND_CONFIG: "Sistema não configurado. Entre em contato com o administrador.",
    ErrorCode.PERMISSION_ERROR: "Você não tem permissão para realizar esta ação.",
    ErrorCode.NOT_FOUND: "Item não encontrado.",
    ErrorCode.SERVER_ERROR: "Erro interno do servidor. Tente novamente em alguns minutos.",
    ErrorCode.VALIDATION_ERROR: "Dados inválidos. Verifique as informações e tente novamente.",
    ErrorCode.UNKNOWN_ERROR: "Erro inesperado. Tente novamente.",
}


def categorize_error(error: Optional[BaseException]) -> ErrorCode:
    """
    Classifica uma exceção.

    AppError carrega o próprio código; para as demais exceções a
    classificação usa o tipo e, por último, palavras-chave da mensagem.
    """
    if error is None:
        return ErrorCode.UNKNOWN_ERROR
    if isinstance(error, AppError):
        return error.code
    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorCode.NETWORK_ERROR
    if isinstance(error, PermissionError):
        return ErrorCode.PERMISSION_ERROR
    if isinstance(error, (FileNotFoundError, KeyError, LookupError)):
        return ErrorCode.NOT_FOUND

    message = str(error).lower()
    if "network" in message or "conex" in message:
        return ErrorCode.NETWORK_ERROR
    if "not configured" in message:
        return ErrorCode.BACKEND_CONFIG
    if "permission" in message or "unauthorized" in message:
        return ErrorCode.PERMISSION_ERROR
    if "not found" in message:
        return ErrorCode.NOT_FOUND
    if "validation" in message or isinstance(error, ValueError):
        return ErrorCode.VALIDATION_ERROR
    return ErrorCode.UNKNOWN_ERROR


def user_message(error: Optional[BaseException]) -> str:
    """Mensagem amigável para o usuário final."""
    return USER_MESSAGES[categorize_error(error)]


def with_retry(
    operation: Callable[[], T],
    retries: int = 3,
    delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """
    Executa operation com novas tentativas e espera linear.

    Args:
        operation: Callable sem argumentos
        retries: Número máximo de tentativas
        delay: Espera base em segundos (multiplicada pela tentativa)
        sleep: Função de espera (substituível em testes)
        retry_on: Exceções que disparam nova tentativa; as demais propagam

    Returns:
        Resultado de operation

    Raises:
        AppError: Com NETWORK_ERROR após esgotar as tentativas
    """
    for attempt in range(1, retries + 1):
        try:
            return operation()
        except retry_on as exc:
            logger.warning("Tentativa %d de %d falhou: %s", attempt, retries, exc)
            if attempt == retries:
                raise AppError(
                    f"Operação falhou após {retries} tentativas",
                    code=ErrorCode.NETWORK_ERROR,
                    original=exc,
                ) from exc
            sleep(delay * attempt)
    raise AppError("Número de tentativas deve ser positivo", code=ErrorCode.VALIDATION_ERROR)
