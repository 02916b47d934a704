"""
Content edit component unit tests.

Tests for save draft, publish, cancel and create draft actions against
recording fakes of the repository, location service and router.
"""

from __future__ import annotations

from typing import Any

import pytest

from src.components.content_edit import (
    CancelInput,
    ContentEditWorkflow,
    CreateDraftInput,
    ExistingEditSession,
    FieldData,
    FormAction,
    NewEditSession,
    PublishInput,
    SaveDraftInput,
    UserCreateData,
    run,
)
from src.domain.entities import (
    Content,
    ContentCreateStruct,
    ContentInfo,
    ContentType,
    ContentUpdateStruct,
    FieldDefinition,
    Location,
    LocationCreateStruct,
    UserAccountFieldData,
    VersionInfo,
)
from src.domain.errors import (
    BadStateError,
    ContentFieldValidationError,
    FieldValidationError,
    InvalidArgumentError,
    NotFoundError,
)

# --- Mock Implementations ---


def make_content(
    content_id: int,
    version_no: int,
    main_language_code: str = "eng-GB",
    main_location_id: int | None = None,
    status: str = "draft",
) -> Content:
    info = ContentInfo(
        id=content_id,
        content_type_identifier="article",
        main_language_code=main_language_code,
        main_location_id=main_location_id,
        current_version_no=version_no,
    )
    return Content(
        version_info=VersionInfo(
            content_info=info,
            version_no=version_no,
            status=status,  # type: ignore[arg-type]
            initial_language_code=main_language_code,
            language_codes=[main_language_code],
        )
    )


class MockContentService:
    """Records every call; returns canned content."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.next_content_id = 42
        self.published_main_location_id = 99
        self.version_count = 1
        self.validation_errors: list[FieldValidationError] = []

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def create_content(
        self, struct: ContentCreateStruct, location_structs: list[LocationCreateStruct]
    ) -> Content:
        self.calls.append(("create_content", (struct, location_structs)))
        if self.validation_errors:
            raise ContentFieldValidationError(self.validation_errors)
        return make_content(self.next_content_id, 1, struct.main_language_code)

    def update_content(self, version_info: VersionInfo, struct: ContentUpdateStruct) -> Content:
        self.calls.append(("update_content", (version_info, struct)))
        if self.validation_errors:
            raise ContentFieldValidationError(self.validation_errors)
        info = version_info.content_info
        return make_content(
            info.id, version_info.version_no, info.main_language_code, info.main_location_id
        )

    def publish_version(self, version_info: VersionInfo) -> Content:
        self.calls.append(("publish_version", version_info))
        info = version_info.content_info
        return make_content(
            info.id,
            version_info.version_no,
            info.main_language_code,
            main_location_id=self.published_main_location_id,
            status="published",
        )

    def load_versions(self, content_info: ContentInfo) -> list[VersionInfo]:
        self.calls.append(("load_versions", content_info))
        return [
            make_content(content_info.id, no).version_info
            for no in range(1, self.version_count + 1)
        ]

    def delete_version(self, version_info: VersionInfo) -> None:
        self.calls.append(("delete_version", version_info))

    def delete_content(self, content_info: ContentInfo) -> None:
        self.calls.append(("delete_content", content_info))

    def load_content_info(self, content_id: int) -> ContentInfo:
        self.calls.append(("load_content_info", content_id))
        if content_id == 404:
            raise NotFoundError("content", content_id)
        return make_content(content_id, 2, main_language_code="ger-DE").content_info

    def load_version_info(self, content_info: ContentInfo, version_no: int | None = None) -> VersionInfo:
        self.calls.append(("load_version_info", (content_info, version_no)))
        return VersionInfo(
            content_info=content_info,
            version_no=version_no or content_info.current_version_no,
            status="published",
            initial_language_code=content_info.main_language_code,
        )

    def create_content_draft(
        self, content_info: ContentInfo, version_info: VersionInfo | None = None
    ) -> Content:
        self.calls.append(("create_content_draft", (content_info, version_info)))
        return make_content(content_info.id, 7, content_info.main_language_code)


class MockLocationService:
    def __init__(self) -> None:
        self.calls: list[VersionInfo] = []
        self.parents = [
            Location(id=55, parent_location_id=2),
            Location(id=56, parent_location_id=2),
        ]

    def load_parent_locations_for_draft_content(self, version_info: VersionInfo) -> list[Location]:
        self.calls.append(version_info)
        return list(self.parents)


class MockRouter:
    """Builds readable fake URLs so tests can assert on route and params."""

    def generate(self, name: str, params: dict[str, Any], absolute: bool = False) -> str:
        query = "&".join(f"{k}={v}" for k, v in params.items())
        prefix = "http://cms.test" if absolute else ""
        return f"{prefix}/{name}?{query}"


# --- Fixtures ---


@pytest.fixture
def content_service() -> MockContentService:
    return MockContentService()


@pytest.fixture
def location_service() -> MockLocationService:
    return MockLocationService()


@pytest.fixture
def workflow(
    content_service: MockContentService, location_service: MockLocationService
) -> ContentEditWorkflow:
    return ContentEditWorkflow(
        content_service=content_service,
        location_service=location_service,
        router=MockRouter(),
    )


@pytest.fixture
def article_type() -> ContentType:
    return ContentType(
        identifier="article",
        field_definitions=[
            FieldDefinition(identifier="title", is_translatable=True),
            FieldDefinition(identifier="author_email", field_type_identifier="ezemail", is_translatable=False),
        ],
    )


def fields_data(content_type: ContentType, values: dict[str, Any]) -> dict[str, FieldData]:
    result = {}
    for identifier, value in values.items():
        field_definition = content_type.get_field_definition(identifier)
        assert field_definition is not None
        result[identifier] = FieldData(field_definition=field_definition, value=value)
    return result


def new_session(content_type: ContentType, values: dict[str, Any], parents: list[int] | None = None) -> NewEditSession:
    return NewEditSession(
        content_type=content_type,
        main_language_code="eng-GB",
        fields_data=fields_data(content_type, values),
        location_structs=[LocationCreateStruct(parent_location_id=p) for p in (parents or [2])],
    )


def existing_session(
    content_type: ContentType,
    values: dict[str, Any],
    content_id: int = 10,
    version_no: int = 3,
    main_location_id: int | None = 20,
) -> ExistingEditSession:
    return ExistingEditSession(
        content_draft=make_content(content_id, version_no, main_location_id=main_location_id),
        fields_data=fields_data(content_type, values),
    )


# --- Save draft ---


class TestSaveDraft:
    def test_new_session_only_creates(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        draft = workflow.save_draft(new_session(article_type, {"title": "Hello"}), "eng-GB")

        assert content_service.call_names() == ["create_content"]
        assert draft.id == 42

    def test_existing_session_only_updates(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        session = existing_session(article_type, {"title": "Hello"})
        workflow.save_draft(session, "eng-GB")

        assert content_service.call_names() == ["update_content"]
        version_info, _ = content_service.calls[0][1]
        assert version_info.version_no == 3

    def test_new_session_passes_location_targets(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        workflow.save_draft(new_session(article_type, {"title": "x"}, parents=[5, 6]), "eng-GB")

        struct, location_structs = content_service.calls[0][1]
        assert [ls.parent_location_id for ls in location_structs] == [5, 6]
        assert struct.main_language_code == "eng-GB"
        assert struct.content_type.identifier == "article"

    def test_fields_set_for_target_language(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        session = new_session(article_type, {"title": "Hello", "author_email": "a@x.com"})
        workflow.save_draft(session, "eng-GB")

        struct, _ = content_service.calls[0][1]
        values = {(f.field_def_identifier, f.language_code): f.value for f in struct.fields}
        assert values == {("title", "eng-GB"): "Hello", ("author_email", "eng-GB"): "a@x.com"}

    def test_untranslatable_field_skipped_for_other_language(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        session = existing_session(article_type, {"title": "Bonjour", "author_email": "b@x.com"})
        workflow.save_draft(session, "fre-FR")

        _, struct = content_service.calls[0][1]
        assert [(f.field_def_identifier, f.language_code) for f in struct.fields] == [
            ("title", "fre-FR")
        ]
        assert struct.initial_language_code == "fre-FR"

    def test_untranslatable_field_set_for_main_language(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        session = existing_session(article_type, {"author_email": "b@x.com"})
        workflow.save_draft(session, "eng-GB")

        _, struct = content_service.calls[0][1]
        assert [(f.field_def_identifier, f.value) for f in struct.fields] == [
            ("author_email", "b@x.com")
        ]

    def test_rejects_unknown_session_shape(
        self, workflow: ContentEditWorkflow, content_service: MockContentService
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            workflow.save_draft(object(), "eng-GB")  # type: ignore[arg-type]

        assert content_service.calls == []

    def test_repository_errors_propagate(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        content_service.validation_errors = [
            FieldValidationError(code="field_required", message="Title is required", field="title")
        ]

        with pytest.raises(ContentFieldValidationError):
            workflow.save_draft(new_session(article_type, {}), "eng-GB")

        assert content_service.call_names() == ["create_content"]


    def test_new_session_without_targets_is_rejected(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        session = NewEditSession(
            content_type=article_type,
            main_language_code="eng-GB",
            fields_data=fields_data(article_type, {"title": "x"}),
        )

        with pytest.raises(InvalidArgumentError):
            workflow.save_draft(session, "eng-GB")

        assert content_service.calls == []


class TestEditSessions:
    def test_session_variants(self, article_type: ContentType) -> None:
        registration = UserCreateData(content_type=article_type, main_language_code="eng-GB")

        assert new_session(article_type, {}).is_new
        assert registration.is_new
        assert not existing_session(article_type, {}).is_new


class TestSaveDraftAction:
    def test_redirects_to_draft_edit(
        self, workflow: ContentEditWorkflow, article_type: ContentType
    ) -> None:
        result = workflow.run_save_draft(
            SaveDraftInput(session=existing_session(article_type, {"title": "x"}), language_code="fre-FR")
        )

        assert result.success
        assert result.redirect_url == "/content_draft_edit?contentId=10&versionNo=3&language=fre-FR"

    def test_form_action_overrides_redirect(
        self, workflow: ContentEditWorkflow, article_type: ContentType
    ) -> None:
        result = workflow.run_save_draft(
            SaveDraftInput(
                session=new_session(article_type, {"title": "x"}),
                language_code="eng-GB",
                form_action="/custom/after-save",
            )
        )

        assert result.redirect_url == "/custom/after-save"


# --- Publish ---


class TestPublish:
    def test_saves_before_publishing(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        workflow.run_publish(
            PublishInput(session=existing_session(article_type, {"title": "x"}), language_code="eng-GB")
        )

        assert content_service.call_names() == ["update_content", "publish_version"]
        published = content_service.calls[1][1]
        assert published.version_no == 3

    def test_redirects_to_main_location(
        self, workflow: ContentEditWorkflow, article_type: ContentType
    ) -> None:
        result = workflow.run_publish(
            PublishInput(session=new_session(article_type, {"title": "x"}), language_code="eng-GB")
        )

        assert result.redirect_url == "/content_location?locationId=99"

    def test_explicit_redirect_wins(
        self, workflow: ContentEditWorkflow, article_type: ContentType
    ) -> None:
        result = workflow.run_publish(
            PublishInput(
                session=new_session(article_type, {"title": "x"}),
                language_code="eng-GB",
                redirect_url_after_publish="/thanks",
            )
        )

        assert result.redirect_url == "/thanks"

    def test_failed_save_never_publishes(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        content_service.validation_errors = [
            FieldValidationError(code="field_required", message="Title is required", field="title")
        ]

        with pytest.raises(ContentFieldValidationError):
            workflow.run_publish(
                PublishInput(session=new_session(article_type, {}), language_code="eng-GB")
            )

        assert "publish_version" not in content_service.call_names()

    def test_user_registration_publish(
        self, workflow: ContentEditWorkflow, content_service: MockContentService
    ) -> None:
        user_type = ContentType(
            identifier="user",
            field_definitions=[
                FieldDefinition(
                    identifier="user_account",
                    field_type_identifier="ezuser",
                    is_translatable=False,
                    is_required=True,
                )
            ],
        )
        account = UserAccountFieldData(username="alice", email="a@x.com", password="secret")
        data = UserCreateData(
            content_type=user_type,
            main_language_code="eng-GB",
            fields_data=fields_data(user_type, {"user_account": account}),
            location_structs=[LocationCreateStruct(parent_location_id=12)],
        )

        result = workflow.run_publish(PublishInput(session=data, language_code="eng-GB"))

        assert content_service.call_names().count("create_content") == 1
        assert content_service.call_names().count("publish_version") == 1
        assert "update_content" not in content_service.call_names()
        assert result.redirect_url == "/content_location?locationId=99"


    def test_new_session_without_targets_changes_nothing(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        session = NewEditSession(
            content_type=article_type,
            main_language_code="eng-GB",
            fields_data=fields_data(article_type, {"title": "x"}),
        )

        with pytest.raises(InvalidArgumentError):
            workflow.run_publish(PublishInput(session=session, language_code="eng-GB"))

        assert content_service.calls == []

    def test_unplaced_draft_without_parents_changes_nothing(
        self,
        workflow: ContentEditWorkflow,
        content_service: MockContentService,
        location_service: MockLocationService,
        article_type: ContentType,
    ) -> None:
        location_service.parents = []
        session = existing_session(article_type, {"title": "x"}, main_location_id=None)

        with pytest.raises(BadStateError):
            workflow.run_publish(PublishInput(session=session, language_code="eng-GB"))

        assert content_service.calls == []


# --- Cancel ---


class TestCancel:
    def test_new_session_redirects_to_first_parent(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        result = workflow.run_cancel(
            CancelInput(session=new_session(article_type, {"title": "x"}, parents=[7, 8]))
        )

        assert content_service.calls == []
        assert result.redirect_url == "/content_location?locationId=7"

    def test_new_session_without_targets_is_rejected(
        self, workflow: ContentEditWorkflow, article_type: ContentType
    ) -> None:
        session = NewEditSession(content_type=article_type, main_language_code="eng-GB")

        with pytest.raises(InvalidArgumentError):
            workflow.run_cancel(CancelInput(session=session))

    def test_single_version_deletes_content(
        self,
        workflow: ContentEditWorkflow,
        content_service: MockContentService,
        location_service: MockLocationService,
        article_type: ContentType,
    ) -> None:
        content_service.version_count = 1
        session = existing_session(article_type, {}, content_id=10, version_no=3)

        result = workflow.run_cancel(CancelInput(session=session))

        assert content_service.call_names() == ["load_versions", "delete_content"]
        assert content_service.calls[1][1].id == 10
        assert location_service.calls[0].version_no == 3
        assert result.redirect_url == "http://cms.test/content_location?locationId=55"

    def test_many_versions_deletes_only_draft(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        content_service.version_count = 4
        session = existing_session(article_type, {}, content_id=10, version_no=5, main_location_id=20)

        result = workflow.run_cancel(CancelInput(session=session))

        assert content_service.call_names() == ["load_versions", "delete_version"]
        assert content_service.calls[1][1].version_no == 5
        assert "delete_content" not in content_service.call_names()
        assert result.redirect_url == "http://cms.test/content_location?locationId=20"

    @pytest.mark.parametrize("version_count", [1, 2, 6])
    def test_delete_calls_are_mutually_exclusive(
        self,
        workflow: ContentEditWorkflow,
        content_service: MockContentService,
        article_type: ContentType,
        version_count: int,
    ) -> None:
        content_service.version_count = version_count
        workflow.run_cancel(CancelInput(session=existing_session(article_type, {})))

        names = content_service.call_names()
        assert ("delete_content" in names) != ("delete_version" in names)
        assert ("delete_content" in names) == (version_count == 1)


    def test_single_version_without_parents_changes_nothing(
        self,
        workflow: ContentEditWorkflow,
        content_service: MockContentService,
        location_service: MockLocationService,
        article_type: ContentType,
    ) -> None:
        content_service.version_count = 1
        location_service.parents = []

        with pytest.raises(BadStateError):
            workflow.run_cancel(CancelInput(session=existing_session(article_type, {})))

        assert content_service.call_names() == ["load_versions"]

    def test_unplaced_content_returns_to_first_parent(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        content_service.version_count = 2
        session = existing_session(article_type, {}, version_no=2, main_location_id=None)

        result = workflow.run_cancel(CancelInput(session=session))

        assert content_service.call_names() == ["load_versions", "delete_version"]
        assert result.redirect_url == "http://cms.test/content_location?locationId=55"

    def test_unplaced_content_without_parents_changes_nothing(
        self,
        workflow: ContentEditWorkflow,
        content_service: MockContentService,
        location_service: MockLocationService,
        article_type: ContentType,
    ) -> None:
        content_service.version_count = 2
        location_service.parents = []
        session = existing_session(article_type, {}, version_no=2, main_location_id=None)

        with pytest.raises(BadStateError):
            workflow.run_cancel(CancelInput(session=session))

        assert "delete_version" not in content_service.call_names()

    def test_redirect_failure_deletes_nothing(
        self, content_service: MockContentService, location_service: MockLocationService, article_type: ContentType
    ) -> None:
        class BrokenRouter:
            def generate(self, name: str, params: dict[str, Any], absolute: bool = False) -> str:
                raise InvalidArgumentError("params", f"route '{name}' is broken")

        workflow = ContentEditWorkflow(
            content_service=content_service,
            location_service=location_service,
            router=BrokenRouter(),
        )

        with pytest.raises(InvalidArgumentError):
            workflow.run_cancel(CancelInput(session=existing_session(article_type, {})))

        assert content_service.call_names() == ["load_versions"]


# --- Create draft ---


class TestCreateDraft:
    def test_creates_draft_from_version(
        self, workflow: ContentEditWorkflow, content_service: MockContentService
    ) -> None:
        result = workflow.run_create_draft(CreateDraftInput(content_id=10, from_version_no=2))

        assert content_service.call_names() == [
            "load_content_info",
            "load_version_info",
            "create_content_draft",
        ]
        _, version_no = content_service.calls[1][1]
        assert version_no == 2
        _, source = content_service.calls[2][1]
        assert source.version_no == 2
        assert result.redirect_url == "/content_draft_edit?contentId=10&versionNo=7&language=ger-DE"

    def test_missing_content_propagates(self, workflow: ContentEditWorkflow) -> None:
        with pytest.raises(NotFoundError):
            workflow.run_create_draft(CreateDraftInput(content_id=404, from_version_no=1))


# --- Dispatcher ---


class TestDispatch:
    def test_subscribed_actions_cover_every_action(self, workflow: ContentEditWorkflow) -> None:
        assert set(workflow.subscribed_actions()) == set(FormAction)

    def test_dispatches_by_action(
        self, workflow: ContentEditWorkflow, content_service: MockContentService
    ) -> None:
        result = workflow.run(
            FormAction.CREATE_DRAFT, CreateDraftInput(content_id=10, from_version_no=2)
        )

        assert result.success
        assert "create_content_draft" in content_service.call_names()

    def test_validation_error_becomes_failed_result(
        self, workflow: ContentEditWorkflow, content_service: MockContentService, article_type: ContentType
    ) -> None:
        error = FieldValidationError(code="field_required", message="Title is required", field="title")
        content_service.validation_errors = [error]

        result = workflow.run(
            FormAction.PUBLISH,
            PublishInput(session=new_session(article_type, {}), language_code="eng-GB"),
        )

        assert not result.success
        assert result.redirect_url is None
        assert result.errors == [error]

    def test_other_errors_propagate(self, workflow: ContentEditWorkflow) -> None:
        with pytest.raises(NotFoundError):
            workflow.run(FormAction.CREATE_DRAFT, CreateDraftInput(content_id=404, from_version_no=1))

    def test_module_entry_point(
        self, content_service: MockContentService, location_service: MockLocationService
    ) -> None:
        result = run(
            FormAction.CREATE_DRAFT,
            CreateDraftInput(content_id=10, from_version_no=2),
            content_service=content_service,
            location_service=location_service,
            router=MockRouter(),
        )

        assert result.redirect_url == "/content_draft_edit?contentId=10&versionNo=7&language=ger-DE"
