from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.domain.entities import ContentType, FieldDefinition, FieldTypeIdentifier


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class LanguagesRules(BaseModel):
    main: str
    allowed: list[str]

    @model_validator(mode="after")
    def main_is_allowed(self) -> "LanguagesRules":
        if self.main not in self.allowed:
            raise ValueError(f"main language '{self.main}' is not in allowed languages")
        return self

class RoutingRules(BaseModel):
    base_url: str
    routes: dict[str, str]

class FieldDefinitionRules(BaseModel):
    identifier: str
    type: FieldTypeIdentifier = "ezstring"
    translatable: bool = True
    required: bool = False

class ContentTypeRules(BaseModel):
    identifier: str
    fields: list[FieldDefinitionRules]

    def to_content_type(self) -> ContentType:
        return ContentType(
            identifier=self.identifier,
            field_definitions=[
                FieldDefinition(
                    identifier=f.identifier,
                    field_type_identifier=f.type,
                    is_translatable=f.translatable,
                    is_required=f.required,
                    position=position,
                )
                for position, f in enumerate(self.fields)
            ],
        )

class UsersRules(BaseModel):
    content_type: str
    default_parent_location_id: int
    language_code: str

class RepositoryRules(BaseModel):
    root_location_ids: list[int] = Field(default_factory=lambda: [2])

class Rules(BaseModel):
    project: ProjectRules
    languages: LanguagesRules
    routing: RoutingRules
    content_types: list[ContentTypeRules]
    users: UsersRules
    repository: RepositoryRules = Field(default_factory=RepositoryRules)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def users_reference_known_config(self) -> "Rules":
        if self.users.content_type not in {ct.identifier for ct in self.content_types}:
            raise ValueError(f"users.content_type '{self.users.content_type}' is not declared")
        if self.users.language_code not in self.languages.allowed:
            raise ValueError(f"users.language_code '{self.users.language_code}' is not allowed")
        if self.users.default_parent_location_id not in self.repository.root_location_ids:
            raise ValueError(
                f"users.default_parent_location_id {self.users.default_parent_location_id} "
                "is not a root location"
            )
        return self

    def get_content_type(self, identifier: str) -> ContentType | None:
        for content_type in self.content_types:
            if content_type.identifier == identifier:
                return content_type.to_content_type()
        return None
