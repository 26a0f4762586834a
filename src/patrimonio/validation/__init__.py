"""
Validação de formulários: regras componíveis e motor de estado.

Uso::

    form = FormValidation(ASSET_SCHEMA, asset_form_values())
    form.set_value("quantidade", "3")
    form.handle_blur("quantidade")
    result = form.submit_form(repository.create)
"""

from patrimonio.validation.form import FormState, FormValidation, SubmitResult
from patrimonio.validation.rules import (
    Rule,
    custom,
    email,
    is_empty,
    max_length,
    min_length,
    past_date,
    pattern,
    positive_integer,
    positive_number,
    required,
    run_rules,
)
from patrimonio.validation.schemas import (
    ASSET_SCHEMA,
    LOGIN_SCHEMA,
    MOVEMENT_SCHEMA,
    asset_data_from_form,
    asset_form_values,
    movement_schema_for,
)

__all__ = [
    # Motor
    "FormState",
    "FormValidation",
    "SubmitResult",
    # Regras
    "Rule",
    "custom",
    "email",
    "is_empty",
    "max_length",
    "min_length",
    "past_date",
    "pattern",
    "positive_integer",
    "positive_number",
    "required",
    "run_rules",
    # Esquemas
    "ASSET_SCHEMA",
    "LOGIN_SCHEMA",
    "MOVEMENT_SCHEMA",
    "asset_data_from_form",
    "asset_form_values",
    "movement_schema_for",
]
