import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from src.api.deps import get_rules, get_workflow
from src.api.edit_sessions import (
    build_fields_data,
    to_http_error,
    validation_error_response,
    workflow_response,
)
from src.api.schemas import VALIDATION_RESPONSES, UserRegisterRequest
from src.components.content_edit import ContentEditWorkflow, FormAction, PublishInput, UserCreateData
from src.components.user_forms import (
    USER_ACCOUNT_FIELD,
    UserAccountSubmission,
    apply_user_account,
    build_user_account_form,
    build_user_create_form,
    submit_user_account,
)
from src.domain.entities import LocationCreateStruct
from src.domain.errors import InvalidArgumentError, RepositoryError
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/account-form")
def get_user_account_form(intent: str = "register") -> dict[str, Any]:
    """Declaration of the user account field form for an intent."""
    try:
        form = build_user_account_form(intent)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return asdict(form)


@router.get("/register/form")
def get_register_form(rules: Rules = Depends(get_rules)) -> dict[str, Any]:
    """Declaration of the registration form."""
    form = build_user_create_form(rules.users.language_code)
    return asdict(form)


@router.post("/register", response_model=None, responses=VALIDATION_RESPONSES)
def register_user(
    req: UserRegisterRequest,
    rules: Rules = Depends(get_rules),
    workflow: ContentEditWorkflow = Depends(get_workflow),
) -> Response:
    """Register a user: validate the account, then publish a new user content item."""
    account, errors = submit_user_account(
        "register",
        UserAccountSubmission(**req.user_account.model_dump()),
    )
    if errors:
        logger.warning("Registration rejected: %s", [e.code for e in errors])
        return validation_error_response(errors)

    content_type = rules.get_content_type(rules.users.content_type)
    if content_type is None:
        raise HTTPException(status_code=500, detail="User content type is not configured")

    language_code = rules.users.language_code
    data = UserCreateData(
        content_type=content_type,
        main_language_code=language_code,
        fields_data=build_fields_data(content_type, {**req.fields, USER_ACCOUNT_FIELD: account}),
        location_structs=[
            LocationCreateStruct(parent_location_id=rules.users.default_parent_location_id)
        ],
    )
    apply_user_account(data)

    try:
        result = workflow.run(
            FormAction.PUBLISH,
            PublishInput(
                session=data,
                language_code=language_code,
                redirect_url_after_publish=req.redirect_url_after_publish,
            ),
        )
    except (RepositoryError, InvalidArgumentError) as e:
        raise to_http_error(e) from e

    if result.success:
        logger.info("Registered user %s", data.login)
    return workflow_response(result)
