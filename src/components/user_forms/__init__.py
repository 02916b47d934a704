"""User forms component - user account field and registration form declarations."""

from src.components.user_forms.component import (
    TRANSLATION_DOMAIN,
    USER_ACCOUNT_BLOCK_PREFIX,
    USER_ACCOUNT_FIELD,
    USER_REGISTER_FORM_NAME,
    apply_user_account,
    build_user_account_form,
    build_user_create_form,
    is_valid_email,
    submit_user_account,
)
from src.components.user_forms.models import (
    ALLOWED_INTENTS,
    FormFieldSpec,
    FormIntent,
    FormSpec,
    UserAccountSubmission,
)

__all__ = [
    # Entry points
    "build_user_account_form",
    "build_user_create_form",
    "submit_user_account",
    "apply_user_account",
    "is_valid_email",
    # Constants
    "ALLOWED_INTENTS",
    "TRANSLATION_DOMAIN",
    "USER_ACCOUNT_BLOCK_PREFIX",
    "USER_ACCOUNT_FIELD",
    "USER_REGISTER_FORM_NAME",
    # Models
    "FormFieldSpec",
    "FormIntent",
    "FormSpec",
    "UserAccountSubmission",
]
