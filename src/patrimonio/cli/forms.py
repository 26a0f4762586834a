"""
Formulários interativos (questionary) guiados por FormValidation.

Cada pergunta valida a resposta com as regras do esquema ao confirmar
(equivalente ao blur de um campo); o envio revalida tudo.
"""

from typing import Any, Callable, Optional

import questionary
from questionary import Style

from patrimonio.cli.theme import get_palette
from patrimonio.config import LOCATIONS, AssetStatus, AssetType, AssetUnit
from patrimonio.validation import FormValidation

ASSET_FIELD_LABELS = {
    "tipo": "Tipo",
    "conteudo": "Conteúdo",
    "descricao": "Descrição",
    "quantidade": "Quantidade",
    "unidade": "Unidade",
    "valor_aquisicao": "Valor de aquisição",
    "data_aquisicao": "Data de aquisição (dd/mm/aaaa)",
    "localizacao_atual": "Localização",
    "responsavel_atual": "Responsável",
    "status": "Status",
    "observacoes": "Observações",
}

LOCATION_FIELDS = ("localizacao_atual", "localizacao_destino")

MOVEMENT_FIELD_LABELS = {
    "localizacao_destino": "Nova localização",
    "responsavel_destino": "Novo responsável",
    "observacoes": "Observações",
}


def get_form_style() -> Style:
    """Estilo do questionary baseado no tema atual."""
    p = get_palette()
    return Style([
        ("qmark", f"fg:{p.accent} bold"),
        ("question", "bold"),
        ("answer", f"fg:{p.success} bold"),
        ("pointer", f"fg:{p.accent} bold"),
        ("highlighted", f"fg:{p.primary} bold"),
        ("selected", f"fg:{p.success} bold"),
        ("instruction", f"fg:{p.muted} italic"),
        ("text", ""),
        ("disabled", f"fg:{p.muted} italic"),
        ("separator", f"fg:{p.border}"),
    ])


def field_validator(form: FormValidation, name: str) -> Callable[[str], Any]:
    """Validador questionary: True ou a mensagem de erro do campo."""
    def validate(text: str) -> Any:
        form.set_value(name, text)
        error = form.handle_blur(name, text)
        return True if error is None else error
    return validate


def _choices(name: str, locations: list[str]) -> Optional[list[str]]:
    if name == "tipo":
        return [t.value for t in AssetType]
    if name == "unidade":
        return [u.value for u in AssetUnit]
    if name == "status":
        return [s.value for s in AssetStatus]
    if name in LOCATION_FIELDS:
        return locations
    return None


def ask_fields(
    form: FormValidation,
    labels: dict[str, str],
    locations: Optional[list[str]] = None,
) -> bool:
    """
    Pergunta cada campo do formulário.

    Args:
        form: Formulário (valores iniciais viram defaults)
        labels: Campo -> texto da pergunta, na ordem das perguntas
        locations: Sugestões de localização

    Returns:
        False se o usuário cancelou (Ctrl+C)
    """
    style = get_form_style()
    locations = sorted(set(LOCATIONS) | set(locations or []))

    for name, label in labels.items():
        current = form.values.get(name)
        default = "" if current is None else str(current)
        choices = _choices(name, locations)

        if choices and name not in LOCATION_FIELDS:
            answer = questionary.select(
                label,
                choices=choices,
                default=default if default in choices else None,
                style=style,
            ).ask()
        elif choices:
            answer = questionary.autocomplete(
                label,
                choices=choices,
                default=default,
                validate=field_validator(form, name),
                style=style,
            ).ask()
        else:
            answer = questionary.text(
                label,
                default=default,
                validate=field_validator(form, name),
                style=style,
            ).ask()

        if answer is None:
            return False
        form.set_value(name, answer)
        form.handle_blur(name, answer)
    return True


def confirm(message: str, default: bool = True) -> bool:
    answer = questionary.confirm(message, default=default, style=get_form_style()).ask()
    return bool(answer)
