"""
Content edit component - processes content edit form actions.

Actions:
- save draft: create or update a draft, then return to the draft edit view
- publish: save the draft and publish it
- cancel: discard the current draft
- create draft: open a new draft from an existing version

Content state machine:
- [no content] -> draft (save draft on new content)
- draft -> published (publish)
- draft -> [no content] (cancel with a single version)
- draft -> published (cancel with more versions; the draft is dropped)
- published -> draft (create draft)

A content item is never left with zero versions: cancelling its only
version removes the whole content item instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from src.components.content_edit.models import (
    CancelInput,
    CreateDraftInput,
    EditSession,
    ExistingEditSession,
    FormAction,
    NewEditSession,
    PublishInput,
    SaveDraftInput,
    WorkflowInput,
    WorkflowResult,
)
from src.components.content_edit.ports import ContentServicePort, LocationServicePort, RouterPort
from src.domain.entities import (
    Content,
    ContentCreateStruct,
    ContentStruct,
    ContentUpdateStruct,
    VersionInfo,
)
from src.domain.errors import BadStateError, ContentFieldValidationError, InvalidArgumentError

logger = logging.getLogger(__name__)

ROUTE_DRAFT_EDIT = "content_draft_edit"
ROUTE_LOCATION = "content_location"


class ContentEditWorkflow:
    """Listens for and processes content edit actions: publish, cancel, save draft..."""

    def __init__(
        self,
        content_service: ContentServicePort,
        location_service: LocationServicePort,
        router: RouterPort,
    ) -> None:
        self._content_service = content_service
        self._location_service = location_service
        self._router = router

    def subscribed_actions(self) -> dict[FormAction, Callable[[Any], WorkflowResult]]:
        return {
            FormAction.PUBLISH: self.run_publish,
            FormAction.CANCEL: self.run_cancel,
            FormAction.SAVE_DRAFT: self.run_save_draft,
            FormAction.CREATE_DRAFT: self.run_create_draft,
        }

    def run(self, action: FormAction, input_data: WorkflowInput) -> WorkflowResult:
        """
        Main dispatcher - routes an action to its handler.

        Field validation failures reported by the repository become a failed
        WorkflowResult; every other error propagates to the caller.
        """
        handler = self.subscribed_actions().get(action)
        if handler is None:
            raise InvalidArgumentError("action", f"unknown form action {action!r}")

        try:
            return handler(input_data)
        except ContentFieldValidationError as e:
            logger.warning("Action %s rejected: %s", action.value, e)
            return WorkflowResult(redirect_url=None, errors=list(e.errors), success=False)

    def run_save_draft(self, input_data: SaveDraftInput) -> WorkflowResult:
        draft = self.save_draft(input_data.session, input_data.language_code)

        redirect_url = input_data.form_action or self._router.generate(
            ROUTE_DRAFT_EDIT,
            {
                "contentId": draft.id,
                "versionNo": draft.version_info.version_no,
                "language": input_data.language_code,
            },
        )
        return WorkflowResult(redirect_url=redirect_url)

    def run_publish(self, input_data: PublishInput) -> WorkflowResult:
        session = input_data.session
        if (
            not input_data.redirect_url_after_publish
            and isinstance(session, ExistingEditSession)
            and session.content_draft.content_info.main_location_id is None
        ):
            # Publishing places the content under its first parent.
            self._first_parent_location_id(session.content_draft.version_info)

        draft = self.save_draft(input_data.session, input_data.language_code)
        content = self._content_service.publish_version(draft.version_info)
        logger.info(
            "Published content %s version %s",
            content.id,
            content.version_info.version_no,
        )

        # Explicit redirect wins over the published content's main location.
        redirect_url = input_data.redirect_url_after_publish or self._router.generate(
            ROUTE_LOCATION,
            {"locationId": content.content_info.main_location_id},
        )
        return WorkflowResult(redirect_url=redirect_url)

    def run_cancel(self, input_data: CancelInput) -> WorkflowResult:
        session = input_data.session

        if isinstance(session, NewEditSession):
            # Nothing was persisted; go back to where the content would have been placed.
            if not session.location_structs:
                raise InvalidArgumentError("session", "new content has no location target")
            parent_location_id = session.location_structs[0].parent_location_id
            return WorkflowResult(
                redirect_url=self._router.generate(
                    ROUTE_LOCATION, {"locationId": parent_location_id}
                )
            )

        if not isinstance(session, ExistingEditSession):
            raise InvalidArgumentError(
                "session", "expected NewEditSession or ExistingEditSession"
            )

        content_info = session.content_draft.content_info
        version_info = session.content_draft.version_info

        # With a single version the whole content goes, never just the version.
        delete_content = len(self._content_service.load_versions(content_info)) == 1
        if delete_content or content_info.main_location_id is None:
            redirect_location_id = self._first_parent_location_id(version_info)
        else:
            redirect_location_id = content_info.main_location_id

        # Nothing is deleted unless the redirect resolves.
        url = self._router.generate(
            ROUTE_LOCATION, {"locationId": redirect_location_id}, absolute=True
        )

        if delete_content:
            self._content_service.delete_content(content_info)
            logger.info("Cancelled draft; deleted content %s", content_info.id)
        else:
            self._content_service.delete_version(version_info)
            logger.info(
                "Cancelled draft; deleted version %s of content %s",
                version_info.version_no,
                content_info.id,
            )
        return WorkflowResult(redirect_url=url)

    def _first_parent_location_id(self, version_info: VersionInfo) -> int:
        parents = self._location_service.load_parent_locations_for_draft_content(version_info)
        if not parents:
            raise BadStateError(
                "version_info",
                f"content {version_info.content_info.id} has no parent location",
            )
        return parents[0].id

    def run_create_draft(self, input_data: CreateDraftInput) -> WorkflowResult:
        content_info = self._content_service.load_content_info(input_data.content_id)
        version_info = self._content_service.load_version_info(
            content_info, input_data.from_version_no
        )
        content_draft = self._content_service.create_content_draft(content_info, version_info)
        logger.info(
            "Created draft version %s of content %s from version %s",
            content_draft.version_info.version_no,
            content_draft.id,
            input_data.from_version_no,
        )

        url = self._router.generate(
            ROUTE_DRAFT_EDIT,
            {
                "contentId": content_draft.id,
                "versionNo": content_draft.version_info.version_no,
                "language": content_draft.content_info.main_language_code,
            },
        )
        return WorkflowResult(redirect_url=url)

    def save_draft(self, session: EditSession, language_code: str) -> Content:
        """
        Save the content draft corresponding to the session.

        New sessions create the content, existing sessions update their draft.
        Untranslatable fields are only written when editing the main language.
        """
        main_language_code = self._resolve_main_language_code(session)

        if isinstance(session, NewEditSession):
            if not session.location_structs:
                raise InvalidArgumentError("session", "new content has no location target")
            create_struct = ContentCreateStruct(
                content_type=session.content_type,
                main_language_code=main_language_code,
            )
            _apply_fields(create_struct, session, main_language_code, language_code)
            content_draft = self._content_service.create_content(
                create_struct, list(session.location_structs)
            )
            logger.info("Created content %s as a new draft", content_draft.id)
        else:
            update_struct = ContentUpdateStruct(initial_language_code=language_code)
            _apply_fields(update_struct, session, main_language_code, language_code)
            content_draft = self._content_service.update_content(
                session.content_draft.version_info, update_struct
            )
            logger.info(
                "Updated draft version %s of content %s",
                content_draft.version_info.version_no,
                content_draft.id,
            )

        return content_draft

    @staticmethod
    def _resolve_main_language_code(session: Any) -> str:
        if isinstance(session, NewEditSession):
            return session.main_language_code
        if isinstance(session, ExistingEditSession):
            return session.content_draft.content_info.main_language_code
        raise InvalidArgumentError("session", "expected NewEditSession or ExistingEditSession")


def _apply_fields(
    struct: ContentStruct,
    session: EditSession,
    main_language_code: str,
    language_code: str,
) -> None:
    """Copy submitted values into the struct; untranslatable fields keep the main language value."""
    for identifier, field_data in session.fields_data.items():
        if main_language_code != language_code and not field_data.field_definition.is_translatable:
            continue
        struct.set_field(identifier, field_data.value, language_code)


def run(
    action: FormAction,
    input_data: WorkflowInput,
    *,
    content_service: ContentServicePort,
    location_service: LocationServicePort,
    router: RouterPort,
) -> WorkflowResult:
    """Entry point for the content edit component."""
    workflow = ContentEditWorkflow(
        content_service=content_service,
        location_service=location_service,
        router=router,
    )
    return workflow.run(action, input_data)
