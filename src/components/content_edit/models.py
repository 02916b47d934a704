"""
Content edit component input/output models.

Edit sessions are a tagged union: NewEditSession for content that has no
persisted draft yet, ExistingEditSession for an already created draft.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.domain.entities import Content, ContentType, FieldDefinition, LocationCreateStruct
from src.domain.errors import FieldValidationError

# --- Form Actions ---


class FormAction(str, Enum):
    """Actions a content edit form can submit."""

    PUBLISH = "content.edit.publish"
    CANCEL = "content.edit.cancel"
    SAVE_DRAFT = "content.edit.save_draft"
    CREATE_DRAFT = "content.edit.create_draft"


# --- Edit Sessions ---


@dataclass
class FieldData:
    """A submitted value for one field definition."""

    field_definition: FieldDefinition
    value: Any = None

    @property
    def identifier(self) -> str:
        return self.field_definition.identifier


@dataclass
class NewEditSession:
    """Form data for content that does not exist yet."""

    content_type: ContentType
    main_language_code: str
    fields_data: dict[str, FieldData] = field(default_factory=dict)
    location_structs: list[LocationCreateStruct] = field(default_factory=list)

    @property
    def is_new(self) -> bool:
        return True


@dataclass
class ExistingEditSession:
    """Form data for an existing content draft."""

    content_draft: Content
    fields_data: dict[str, FieldData] = field(default_factory=dict)

    @property
    def is_new(self) -> bool:
        return False


@dataclass
class UserCreateData(NewEditSession):
    """Registration form data; login details are copied from the user_account field."""

    login: str | None = None
    email: str | None = None
    password: str | None = None
    enabled: bool = True


EditSession = NewEditSession | ExistingEditSession


# --- Input Models ---


@dataclass(frozen=True)
class SaveDraftInput:
    """Input for the save draft action."""

    session: EditSession
    language_code: str
    form_action: str | None = None


@dataclass(frozen=True)
class PublishInput:
    """Input for the publish action."""

    session: EditSession
    language_code: str
    redirect_url_after_publish: str | None = None


@dataclass(frozen=True)
class CancelInput:
    """Input for the cancel action."""

    session: EditSession


@dataclass(frozen=True)
class CreateDraftInput:
    """Input for creating a new draft from an existing version."""

    content_id: int
    from_version_no: int


WorkflowInput = SaveDraftInput | PublishInput | CancelInput | CreateDraftInput


# --- Output Models ---


@dataclass(frozen=True)
class WorkflowResult:
    """Navigation outcome: a redirect target or validation errors."""

    redirect_url: str | None = None
    errors: list[FieldValidationError] = field(default_factory=list)
    success: bool = True
