from typing import Any, Literal

from pydantic import BaseModel, Field

# --- Shared Enums/Types ---
EditAction = Literal["publish", "save_draft", "cancel"]


# --- Content Edit ---
class ContentEditRequest(BaseModel):
    action: EditAction
    language_code: str
    # New content
    content_type: str | None = None
    main_language_code: str | None = None
    parent_location_ids: list[int] = Field(default_factory=list)
    # Existing draft
    content_id: int | None = None
    version_no: int | None = None

    fields: dict[str, Any] = Field(default_factory=dict)
    redirect_url_after_publish: str | None = None
    form_action: str | None = None


# --- Users ---
class UserAccountRequest(BaseModel):
    username: str | None = None
    password: str | None = None
    password_confirm: str | None = None
    email: str | None = None
    enabled: bool | None = None


class UserRegisterRequest(BaseModel):
    user_account: UserAccountRequest
    fields: dict[str, Any] = Field(default_factory=dict)
    redirect_url_after_publish: str | None = None


# --- Errors ---
class ValidationErrorModel(BaseModel):
    code: str
    message: str
    field: str | None = None


class ValidationErrorResponse(BaseModel):
    errors: list[ValidationErrorModel]


VALIDATION_RESPONSES: dict[int | str, dict[str, Any]] = {
    422: {"model": ValidationErrorResponse, "description": "Submitted fields did not validate"},
}
