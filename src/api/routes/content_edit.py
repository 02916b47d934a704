import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from src.adapters.memory.repository import InMemoryContentRepository
from src.api.deps import get_current_user, get_repository, get_rules, get_workflow
from src.api.edit_sessions import build_edit_session, to_http_error, workflow_response
from src.api.schemas import VALIDATION_RESPONSES, ContentEditRequest, EditAction
from src.components.content_edit import (
    CancelInput,
    ContentEditWorkflow,
    CreateDraftInput,
    FormAction,
    PublishInput,
    SaveDraftInput,
    WorkflowInput,
)
from src.domain.entities import CurrentUser
from src.domain.errors import InvalidArgumentError, RepositoryError
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()

FORM_ACTIONS: dict[EditAction, FormAction] = {
    "publish": FormAction.PUBLISH,
    "save_draft": FormAction.SAVE_DRAFT,
    "cancel": FormAction.CANCEL,
}


@router.post("/edit", response_model=None, responses=VALIDATION_RESPONSES)
def submit_content_edit(
    req: ContentEditRequest,
    current_user: CurrentUser = Depends(get_current_user),
    rules: Rules = Depends(get_rules),
    repo: InMemoryContentRepository = Depends(get_repository),
    workflow: ContentEditWorkflow = Depends(get_workflow),
) -> Response:
    """Process a content edit form submission (publish, save draft or cancel)."""
    action = FORM_ACTIONS[req.action]
    logger.info("%s submitted %s", current_user.login, action.value)

    try:
        session = build_edit_session(req, rules, repo)
        inp: WorkflowInput
        if action is FormAction.PUBLISH:
            inp = PublishInput(
                session=session,
                language_code=req.language_code,
                redirect_url_after_publish=req.redirect_url_after_publish,
            )
        elif action is FormAction.SAVE_DRAFT:
            inp = SaveDraftInput(
                session=session,
                language_code=req.language_code,
                form_action=req.form_action,
            )
        else:
            inp = CancelInput(session=session)

        result = workflow.run(action, inp)
    except (RepositoryError, InvalidArgumentError) as e:
        raise to_http_error(e) from e

    return workflow_response(result)


@router.post(
    "/{content_id}/versions/{version_no}/draft",
    response_model=None,
    responses=VALIDATION_RESPONSES,
)
def create_content_draft(
    content_id: int,
    version_no: int,
    current_user: CurrentUser = Depends(get_current_user),
    workflow: ContentEditWorkflow = Depends(get_workflow),
) -> Response:
    """Open a new draft copied from an existing version."""
    logger.info(
        "%s creates a draft of content %s from version %s",
        current_user.login,
        content_id,
        version_no,
    )

    try:
        result = workflow.run(
            FormAction.CREATE_DRAFT,
            CreateDraftInput(content_id=content_id, from_version_no=version_no),
        )
    except (RepositoryError, InvalidArgumentError) as e:
        raise to_http_error(e) from e

    return workflow_response(result)
