"""
User forms component - user account field and registration form.

The user account field form varies by intent:
- register: username, password (+ confirmation), email
- create: as register, plus the enabled switch
- update: username is shown disabled, password becomes optional

The registration form wraps the content field collection, an optional
redirect target and a publish button. After submission the values of the
user_account field are copied onto the registration data.
"""

from __future__ import annotations

from src.components.content_edit.models import UserCreateData
from src.components.user_forms.models import (
    ALLOWED_INTENTS,
    FormFieldSpec,
    FormIntent,
    FormSpec,
    UserAccountSubmission,
)
from src.domain.entities import UserAccountFieldData
from src.domain.errors import FieldValidationError, InvalidArgumentError
from src.domain.fields import is_valid_email

USER_ACCOUNT_BLOCK_PREFIX = "ezplatform_fieldtype_ezuser"
USER_REGISTER_FORM_NAME = "ezrepoforms_user_register"
TRANSLATION_DOMAIN = "ezrepoforms_content"
USER_ACCOUNT_FIELD = "user_account"


def _check_intent(intent: str) -> FormIntent:
    if intent not in ALLOWED_INTENTS:
        raise InvalidArgumentError(
            "intent", f"expected one of {list(ALLOWED_INTENTS)}, got {intent!r}"
        )
    return intent  # type: ignore[return-value]


def build_user_account_form(intent: str) -> FormSpec:
    """Declare the user account field form for the given intent."""
    intent = _check_intent(intent)
    is_update_form = intent == "update"

    fields = [
        FormFieldSpec(
            name="username",
            field_type="text",
            label="content.field_type.ezuser.username",
            required=True,
            attrs={"disabled": "disabled"} if is_update_form else {},
        ),
        FormFieldSpec(
            name="password",
            field_type="repeated_password",
            required=not is_update_form,
            options={
                "first_options": {"label": "content.field_type.ezuser.password"},
                "second_options": {"label": "content.field_type.ezuser.password_confirm"},
            },
        ),
        FormFieldSpec(
            name="email",
            field_type="email",
            label="content.field_type.ezuser.email",
            required=True,
        ),
    ]

    if intent in ("create", "update"):
        fields.append(
            FormFieldSpec(
                name="enabled",
                field_type="switcher",
                label="content.field_type.ezuser.enabled",
                required=False,
            )
        )

    return FormSpec(
        name=USER_ACCOUNT_BLOCK_PREFIX,
        data_class="UserAccountFieldData",
        translation_domain=TRANSLATION_DOMAIN,
        fields=fields,
    )


def submit_user_account(
    intent: str,
    submission: UserAccountSubmission,
    existing: UserAccountFieldData | None = None,
) -> tuple[UserAccountFieldData, list[FieldValidationError]]:
    """
    Validate a user account submission against the form for the intent.

    Args:
        intent: register, create or update.
        submission: Raw posted values.
        existing: Current account data, used by update forms.

    Returns:
        The bound field data and a list of validation errors (empty if valid).
    """
    form = build_user_account_form(intent)
    errors: list[FieldValidationError] = []

    # Disabled fields ignore whatever was posted.
    username_field = form.get("username")
    if username_field and username_field.attrs.get("disabled"):
        username = existing.username if existing else None
    else:
        username = (submission.username or "").strip() or None

    if username is None:
        errors.append(
            FieldValidationError(
                code="username_required",
                message="Username is required",
                field="username",
            )
        )

    password = submission.password or None
    password_field = form.get("password")
    if (submission.password or "") != (submission.password_confirm or ""):
        errors.append(
            FieldValidationError(
                code="password_mismatch",
                message="Passwords do not match",
                field="password",
            )
        )
    elif password is None and password_field and password_field.required:
        errors.append(
            FieldValidationError(
                code="password_required",
                message="Password is required",
                field="password",
            )
        )

    email = (submission.email or "").strip() or None
    if email is None:
        errors.append(
            FieldValidationError(
                code="email_required",
                message="Email is required",
                field="email",
            )
        )
    elif not is_valid_email(email):
        errors.append(
            FieldValidationError(
                code="email_invalid",
                message=f"'{email}' is not a valid email address",
                field="email",
            )
        )

    enabled = existing.enabled if existing else True
    if form.get("enabled") and submission.enabled is not None:
        enabled = submission.enabled

    data = UserAccountFieldData(
        username=username,
        password=password,
        email=email,
        enabled=enabled,
    )
    return data, errors


def build_user_create_form(language_code: str) -> FormSpec:
    """Declare the user registration form."""
    if not language_code:
        raise InvalidArgumentError("language_code", "the option is required")

    return FormSpec(
        name=USER_REGISTER_FORM_NAME,
        data_class="UserCreateData",
        translation_domain=TRANSLATION_DOMAIN,
        fields=[
            FormFieldSpec(
                name="fieldsData",
                field_type="collection",
                label="ezrepoforms.content.fields",
                options={
                    "entry_type": "ezrepoforms_content_field",
                    "entry_options": {"languageCode": language_code},
                },
            ),
            FormFieldSpec(
                name="redirectUrlAfterPublish",
                field_type="hidden",
                required=False,
                mapped=False,
            ),
            FormFieldSpec(
                name="publish",
                field_type="submit",
                label="content.publish_button",
            ),
        ],
    )


def apply_user_account(data: UserCreateData) -> UserCreateData:
    """Copy login details from the user_account field onto the registration data."""
    field_data = data.fields_data.get(USER_ACCOUNT_FIELD)
    if field_data is None:
        return data

    account = field_data.value
    if isinstance(account, UserAccountFieldData):
        data.login = account.username
        data.email = account.email
        data.password = account.password
        data.enabled = account.enabled
    return data
