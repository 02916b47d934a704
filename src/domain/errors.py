"""
Error taxonomy for content editing.

InvalidArgumentError is raised by the workflow itself when it is handed
something that is neither a create nor an update session. Everything under
RepositoryError originates in the content repository and is propagated to
the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldValidationError:
    """A single field-level validation failure."""

    code: str
    message: str
    field: str | None = None


class InvalidArgumentError(ValueError):
    """Raised when an argument has an unexpected shape or value."""

    def __init__(self, argument: str, message: str) -> None:
        self.argument = argument
        super().__init__(f"Argument '{argument}' is invalid: {message}")


class RepositoryError(Exception):
    """Base class for failures reported by the content repository."""


class ContentFieldValidationError(RepositoryError):
    """Raised when submitted field values do not validate."""

    def __init__(self, errors: list[FieldValidationError]) -> None:
        self.errors = errors
        messages = [e.message for e in errors]
        super().__init__(f"Content fields did not validate: {'; '.join(messages)}")


class NotFoundError(RepositoryError):
    """Raised when a repository object cannot be loaded."""

    def __init__(self, what: str, identifier: Any) -> None:
        self.what = what
        self.identifier = identifier
        super().__init__(f"Could not find '{what}' with identifier '{identifier}'")


class BadStateError(RepositoryError):
    """Raised when an operation is not allowed in the object's current state."""

    def __init__(self, argument: str, reason: str) -> None:
        self.argument = argument
        self.reason = reason
        super().__init__(f"Argument '{argument}' has a bad state: {reason}")
