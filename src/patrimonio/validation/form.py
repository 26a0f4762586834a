"""
Motor de validação de formulários.

Mantém valores, erros e campos tocados de um formulário e aplica o
esquema (nome do campo -> lista ordenada de regras). Digitar limpa o
erro exibido do campo; a revalidação acontece no blur e no submit.
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Optional

from patrimonio.validation.rules import Rule, run_rules

logger = logging.getLogger(__name__)

Schema = Mapping[str, list[Rule]]

_UNSET = object()


@dataclass
class FormState:
    """Retrato do estado do formulário."""
    values: dict[str, Any]
    errors: dict[str, Optional[str]]
    touched: dict[str, bool]
    is_submitting: bool

    @property
    def is_valid(self) -> bool:
        return not any(self.errors.values())


@dataclass
class SubmitResult:
    """Resultado de submit_form."""
    success: bool
    errors: dict[str, str] = field(default_factory=dict)
    error: Optional[BaseException] = None


class FormValidation:
    """
    Estado e validação de um formulário.

    Args:
        schema: Mapeamento campo -> regras (a primeira que falhar vence)
        initial_values: Valores iniciais; também usados por reset_form()
    """

    def __init__(self, schema: Schema, initial_values: Optional[Mapping[str, Any]] = None):
        self.schema = schema
        self.initial_values: dict[str, Any] = dict(initial_values or {})
        self.values: dict[str, Any] = dict(self.initial_values)
        self.errors: dict[str, Optional[str]] = {}
        self.touched: dict[str, bool] = {}
        self.is_submitting = False

    # ========================================================================
    # Validação
    # ========================================================================

    def validate_field(self, name: str, value: Any) -> Optional[str]:
        """Primeiro erro das regras do campo, ou None."""
        rules = self.schema.get(name)
        if not rules:
            return None
        return run_rules(rules, value)

    def validate_form(self) -> bool:
        """Valida todos os campos do esquema e substitui o mapa de erros."""
        new_errors: dict[str, Optional[str]] = {}
        for name in self.schema:
            error = self.validate_field(name, self.values.get(name))
            if error:
                new_errors[name] = error
        self.errors = new_errors
        return not new_errors

    @property
    def is_valid(self) -> bool:
        """Nenhum campo com mensagem de erro."""
        return not any(self.errors.values())

    @property
    def active_errors(self) -> dict[str, str]:
        """Apenas os campos com erro."""
        return {name: error for name, error in self.errors.items() if error}

    def field_error(self, name: str) -> Optional[str]:
        """Erro a exibir: só aparece depois que o campo foi tocado."""
        if not self.touched.get(name):
            return None
        return self.errors.get(name)

    @property
    def state(self) -> FormState:
        return FormState(
            values=dict(self.values),
            errors=dict(self.errors),
            touched=dict(self.touched),
            is_submitting=self.is_submitting,
        )

    # ========================================================================
    # Eventos de campo
    # ========================================================================

    def set_value(self, name: str, value: Any) -> None:
        """Atualiza o valor e limpa o erro exibido do campo."""
        self.values = {**self.values, name: value}
        if self.errors.get(name):
            self.errors = {**self.errors, name: None}

    def set_touched(self, name: str, touched: bool = True) -> None:
        self.touched = {**self.touched, name: touched}

    def handle_blur(self, name: str, value: Any = _UNSET) -> Optional[str]:
        """
        Marca o campo como tocado e recalcula o seu erro.

        Args:
            name: Campo que perdeu o foco
            value: Valor a validar (default: valor atual)

        Returns:
            Erro resultante do campo
        """
        if value is _UNSET:
            value = self.values.get(name)
        self.set_touched(name, True)
        error = self.validate_field(name, value)
        if error != self.errors.get(name):
            self.errors = {**self.errors, name: error}
        return error

    def reset_form(self, new_values: Optional[Mapping[str, Any]] = None) -> None:
        """Substitui (não mescla) os valores e limpa erros, toques e submissão."""
        source = self.initial_values if new_values is None else new_values
        self.values = dict(source)
        self.errors = {}
        self.touched = {}
        self.is_submitting = False

    # ========================================================================
    # Submissão
    # ========================================================================

    def _begin_submit(self) -> bool:
        self.is_submitting = True
        self.touched = {**self.touched, **{name: True for name in self.schema}}
        return self.validate_form()

    def submit_form(self, on_submit: Callable[[dict[str, Any]], Any]) -> SubmitResult:
        """
        Valida e, se válido, chama on_submit(values).

        on_submit nunca é chamado quando a validação falha. Exceções de
        on_submit são devolvidas no resultado. Callbacks assíncronos devem
        usar asubmit_form; aqui a corrotina é fechada e o submit falha.
        """
        try:
            if not self._begin_submit():
                return SubmitResult(success=False, errors=self.active_errors)
            try:
                result = on_submit(dict(self.values))
            except Exception as exc:
                logger.error("Falha ao submeter formulário: %s", exc)
                return SubmitResult(success=False, error=exc)
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                logger.error("on_submit assíncrono passado para submit_form")
                return SubmitResult(
                    success=False,
                    error=TypeError("on_submit assíncrono: use asubmit_form"),
                )
            return SubmitResult(success=True)
        finally:
            self.is_submitting = False

    async def asubmit_form(
        self, on_submit: Callable[[dict[str, Any]], Awaitable[Any] | Any]
    ) -> SubmitResult:
        """Versão assíncrona de submit_form (on_submit é aguardado se for awaitable)."""
        try:
            if not self._begin_submit():
                return SubmitResult(success=False, errors=self.active_errors)
            try:
                result = on_submit(dict(self.values))
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.error("Falha ao submeter formulário: %s", exc)
                return SubmitResult(success=False, error=exc)
            return SubmitResult(success=True)
        finally:
            self.is_submitting = False
