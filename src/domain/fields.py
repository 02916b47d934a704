"""
Field type value checks.

Each field type accepts a particular value shape. These checks run on the
submitted value before anything is stored.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import ValidationError

from src.domain.entities import FieldDefinition, UserAccountFieldData
from src.domain.errors import FieldValidationError

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_email(value: str) -> bool:
    """Check if value looks like an email address (local@domain.tld)."""
    return bool(_EMAIL_PATTERN.match(value))


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def to_user_account(value: Any) -> UserAccountFieldData | None:
    """Coerce an ezuser value; raises ValueError for unusable shapes."""
    if value is None or isinstance(value, UserAccountFieldData):
        return value
    if isinstance(value, dict):
        try:
            return UserAccountFieldData.model_validate(value)
        except ValidationError as e:
            raise ValueError(str(e)) from e
    raise ValueError(f"expected user account data, got {type(value).__name__}")


def check_field_value(field_definition: FieldDefinition, value: Any) -> list[FieldValidationError]:
    """Type-specific checks for a single submitted value."""
    identifier = field_definition.identifier
    field_type = field_definition.field_type_identifier

    if is_empty(value):
        return []

    if field_type in ("ezstring", "eztext", "ezemail") and not isinstance(value, str):
        return [
            FieldValidationError(
                code="invalid_value",
                message=f"Field '{identifier}' expects text",
                field=identifier,
            )
        ]

    if field_type == "ezemail" and not is_valid_email(value.strip()):
        return [
            FieldValidationError(
                code="email_invalid",
                message=f"'{value}' is not a valid email address",
                field=identifier,
            )
        ]

    if field_type == "ezboolean" and not isinstance(value, bool):
        return [
            FieldValidationError(
                code="invalid_value",
                message=f"Field '{identifier}' expects a boolean",
                field=identifier,
            )
        ]

    if field_type == "ezuser":
        try:
            account = to_user_account(value)
        except ValueError as e:
            return [FieldValidationError(code="invalid_value", message=str(e), field=identifier)]

        errors: list[FieldValidationError] = []
        if account is not None and is_empty(account.username):
            errors.append(
                FieldValidationError(
                    code="username_required",
                    message="Username is required",
                    field=identifier,
                )
            )
        if account is not None and (is_empty(account.email) or not is_valid_email(account.email or "")):
            errors.append(
                FieldValidationError(
                    code="email_invalid",
                    message="A valid email address is required",
                    field=identifier,
                )
            )
        return errors

    return []
