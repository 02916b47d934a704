"""Content edit component - publish, save draft, cancel and create draft actions."""

from src.components.content_edit.component import (
    ROUTE_DRAFT_EDIT,
    ROUTE_LOCATION,
    ContentEditWorkflow,
    run,
)
from src.components.content_edit.models import (
    CancelInput,
    CreateDraftInput,
    EditSession,
    ExistingEditSession,
    FieldData,
    FormAction,
    NewEditSession,
    PublishInput,
    SaveDraftInput,
    UserCreateData,
    WorkflowInput,
    WorkflowResult,
)
from src.components.content_edit.ports import ContentServicePort, LocationServicePort, RouterPort

__all__ = [
    # Entry point
    "run",
    # Component
    "ContentEditWorkflow",
    "ROUTE_DRAFT_EDIT",
    "ROUTE_LOCATION",
    # Models
    "FormAction",
    "FieldData",
    "EditSession",
    "NewEditSession",
    "ExistingEditSession",
    "UserCreateData",
    "SaveDraftInput",
    "PublishInput",
    "CancelInput",
    "CreateDraftInput",
    "WorkflowInput",
    "WorkflowResult",
    # Ports
    "ContentServicePort",
    "LocationServicePort",
    "RouterPort",
]
