"""
Build edit sessions from request payloads and map workflow outcomes to HTTP.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from src.adapters.memory.repository import InMemoryContentRepository
from src.api.schemas import ContentEditRequest, ValidationErrorModel, ValidationErrorResponse
from src.components.content_edit import (
    EditSession,
    ExistingEditSession,
    FieldData,
    NewEditSession,
    WorkflowResult,
)
from src.domain.entities import ContentType, LocationCreateStruct
from src.domain.errors import (
    BadStateError,
    FieldValidationError,
    InvalidArgumentError,
    NotFoundError,
    RepositoryError,
)
from src.rules.models import Rules


def validation_error_response(errors: list[FieldValidationError]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ValidationErrorResponse(
            errors=[ValidationErrorModel(**asdict(e)) for e in errors]
        ).model_dump(),
    )


def build_fields_data(content_type: ContentType, fields: dict[str, Any]) -> dict[str, FieldData]:
    """Bind posted values to the content type's field definitions."""
    fields_data: dict[str, FieldData] = {}
    unknown: list[FieldValidationError] = []

    for identifier, value in fields.items():
        field_definition = content_type.get_field_definition(identifier)
        if field_definition is None:
            unknown.append(
                FieldValidationError(
                    code="unknown_field",
                    message=f"Content type '{content_type.identifier}' has no field '{identifier}'",
                    field=identifier,
                )
            )
            continue
        fields_data[identifier] = FieldData(field_definition=field_definition, value=value)

    if unknown:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[asdict(e) for e in unknown],
        )
    return fields_data


def build_edit_session(
    req: ContentEditRequest,
    rules: Rules,
    repo: InMemoryContentRepository,
) -> EditSession:
    """Create-shaped session for new content, update-shaped for an existing draft."""
    if req.content_id is not None:
        if req.version_no is None:
            raise HTTPException(status_code=400, detail="version_no is required with content_id")

        draft = repo.load_content(req.content_id, req.version_no)
        if not draft.version_info.is_draft:
            raise HTTPException(
                status_code=409,
                detail=f"Version {req.version_no} of content {req.content_id} is not a draft",
            )
        content_type = rules.get_content_type(draft.content_info.content_type_identifier)
        if content_type is None:
            raise HTTPException(status_code=404, detail="Content type not found")
        return ExistingEditSession(
            content_draft=draft,
            fields_data=build_fields_data(content_type, req.fields),
        )

    if not req.content_type:
        raise HTTPException(
            status_code=400, detail="content_type is required when creating content"
        )
    content_type = rules.get_content_type(req.content_type)
    if content_type is None:
        raise HTTPException(status_code=404, detail=f"Content type '{req.content_type}' not found")

    return NewEditSession(
        content_type=content_type,
        main_language_code=req.main_language_code or req.language_code,
        fields_data=build_fields_data(content_type, req.fields),
        location_structs=[
            LocationCreateStruct(parent_location_id=pid) for pid in req.parent_location_ids
        ],
    )


def to_http_error(e: RepositoryError | InvalidArgumentError) -> HTTPException:
    """Map domain errors to HTTP errors."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, BadStateError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, InvalidArgumentError):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


def workflow_response(result: WorkflowResult) -> Response:
    if not result.success or result.redirect_url is None:
        return validation_error_response(result.errors)
    return RedirectResponse(result.redirect_url, status_code=status.HTTP_302_FOUND)
