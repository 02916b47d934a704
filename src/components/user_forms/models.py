"""User forms component models - form declarations and submissions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

FormIntent = Literal["register", "create", "update"]
FormFieldType = Literal[
    "text",
    "email",
    "repeated_password",
    "switcher",
    "collection",
    "hidden",
    "submit",
]

ALLOWED_INTENTS: tuple[FormIntent, ...] = ("register", "create", "update")


@dataclass(frozen=True)
class FormFieldSpec:
    """Declaration of one form field."""

    name: str
    field_type: FormFieldType
    label: str | None = None
    required: bool = False
    mapped: bool = True
    attrs: dict[str, str] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FormSpec:
    """Declaration of a whole form."""

    name: str
    data_class: str
    translation_domain: str
    fields: list[FormFieldSpec] = field(default_factory=list)

    def get(self, name: str) -> FormFieldSpec | None:
        for form_field in self.fields:
            if form_field.name == name:
                return form_field
        return None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


@dataclass(frozen=True)
class UserAccountSubmission:
    """Raw values posted for a user account field."""

    username: str | None = None
    password: str | None = None
    password_confirm: str | None = None
    email: str | None = None
    enabled: bool | None = None
