from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field as PydanticField

# --- Enums / Literals ---
VersionStatus = Literal["draft", "published", "archived"]
FieldTypeIdentifier = Literal["ezstring", "eztext", "ezemail", "ezboolean", "ezuser"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Content Model ---

class FieldDefinition(BaseModel):
    identifier: str
    field_type_identifier: FieldTypeIdentifier = "ezstring"
    is_translatable: bool = True
    is_required: bool = False
    position: int = 0


class ContentType(BaseModel):
    identifier: str
    field_definitions: list[FieldDefinition] = PydanticField(default_factory=list)

    def get_field_definition(self, identifier: str) -> FieldDefinition | None:
        for field_definition in self.field_definitions:
            if field_definition.identifier == identifier:
                return field_definition
        return None


# --- Content ---

class ContentInfo(BaseModel):
    id: int
    content_type_identifier: str
    main_language_code: str
    main_location_id: int | None = None
    current_version_no: int = 1
    published: bool = False
    modified_at: datetime = PydanticField(default_factory=_utcnow)


class VersionInfo(BaseModel):
    content_info: ContentInfo
    version_no: int
    status: VersionStatus = "draft"
    initial_language_code: str
    language_codes: list[str] = PydanticField(default_factory=list)
    created_at: datetime = PydanticField(default_factory=_utcnow)

    @property
    def is_draft(self) -> bool:
        return self.status == "draft"


class Field(BaseModel):
    field_def_identifier: str
    language_code: str
    value: Any = None


class Content(BaseModel):
    version_info: VersionInfo
    fields: list[Field] = PydanticField(default_factory=list)

    @property
    def id(self) -> int:
        return self.version_info.content_info.id

    @property
    def content_info(self) -> ContentInfo:
        return self.version_info.content_info

    def get_field_value(self, identifier: str, language_code: str | None = None) -> Any:
        """Value of a field in the given language, main language by default."""
        language_code = language_code or self.content_info.main_language_code
        for field in self.fields:
            if field.field_def_identifier == identifier and field.language_code == language_code:
                return field.value
        return None


# --- Locations ---

class Location(BaseModel):
    id: int
    parent_location_id: int | None = None
    content_id: int | None = None


class LocationCreateStruct(BaseModel):
    parent_location_id: int


# --- Structs passed to the repository ---

class ContentStruct(BaseModel):
    """Field values accumulated for a create or update call."""

    fields: list[Field] = PydanticField(default_factory=list)

    def set_field(self, identifier: str, value: Any, language_code: str) -> None:
        for field in self.fields:
            if field.field_def_identifier == identifier and field.language_code == language_code:
                field.value = value
                return
        self.fields.append(
            Field(field_def_identifier=identifier, language_code=language_code, value=value)
        )


class ContentCreateStruct(ContentStruct):
    content_type: ContentType
    main_language_code: str


class ContentUpdateStruct(ContentStruct):
    initial_language_code: str


# --- Users ---

class UserAccountFieldData(BaseModel):
    """Submitted value of an ezuser field."""

    username: str | None = None
    password: str | None = None
    email: str | None = None
    enabled: bool = True


class UserAccountValue(BaseModel):
    """Stored value of an ezuser field. Never holds the plain password."""

    login: str
    email: str
    password_hash: str | None = None
    enabled: bool = True


class CurrentUser(BaseModel):
    """Authenticated editor, resolved from an access token."""

    login: str
    roles: list[str] = PydanticField(default_factory=list)
