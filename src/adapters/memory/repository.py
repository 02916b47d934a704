"""
In-memory content repository.

Implements ContentServicePort and LocationServicePort for development and
tests. Single process, no persistence, no locking.

Key behaviors:
- New content starts as a draft (version 1) with its location targets remembered
- Only drafts can be updated or published
- Publishing archives the previously published version and places the
  content under its location targets the first time
- A content item always keeps at least one version
- ezuser passwords are hashed on the way in and never stored in plain text
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from src.adapters.auth.crypto import PasslibPasswordHasher
from src.adapters.clock import SystemClock
from src.domain.entities import (
    Content,
    ContentCreateStruct,
    ContentInfo,
    ContentType,
    ContentUpdateStruct,
    Field,
    Location,
    LocationCreateStruct,
    UserAccountValue,
    VersionInfo,
    VersionStatus,
)
from src.domain.errors import (
    BadStateError,
    ContentFieldValidationError,
    FieldValidationError,
    NotFoundError,
)
from src.domain.fields import check_field_value, is_empty, to_user_account

logger = logging.getLogger(__name__)

# Parent of the seeded root locations.
TOP_LOCATION_ID = 1


class PasswordHasherPort(Protocol):
    def hash_password(self, password: str) -> str:
        ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime:
        ...


@dataclass
class _VersionRecord:
    version_no: int
    status: VersionStatus
    initial_language_code: str
    language_codes: list[str]
    created_at: datetime
    fields: list[Field] = field(default_factory=list)


class InMemoryContentRepository:
    """Content and location service kept in process memory."""

    def __init__(
        self,
        content_types: list[ContentType],
        languages: list[str],
        root_location_ids: list[int] | None = None,
        password_hasher: PasswordHasherPort | None = None,
        clock: ClockPort | None = None,
    ) -> None:
        self._content_types = {ct.identifier: ct for ct in content_types}
        self._languages = list(languages)
        self._password_hasher = password_hasher or PasslibPasswordHasher()
        self._clock = clock or SystemClock()

        self._content_infos: dict[int, ContentInfo] = {}
        self._versions: dict[int, dict[int, _VersionRecord]] = {}
        self._locations: dict[int, Location] = {}
        # content_id -> parent location ids, kept until the first publish
        self._location_targets: dict[int, list[int]] = {}

        roots = root_location_ids or [2]
        for location_id in roots:
            self._locations[location_id] = Location(
                id=location_id, parent_location_id=TOP_LOCATION_ID, content_id=None
            )
        self._next_content_id = 1
        self._next_location_id = max(roots) + 1

    # --- ContentServicePort ---

    def create_content(
        self,
        struct: ContentCreateStruct,
        location_structs: list[LocationCreateStruct],
    ) -> Content:
        content_type = self._content_types.get(struct.content_type.identifier)
        if content_type is None:
            raise NotFoundError("content type", struct.content_type.identifier)

        self._check_language(struct.main_language_code)
        for location_struct in location_structs:
            if location_struct.parent_location_id not in self._locations:
                raise NotFoundError("location", location_struct.parent_location_id)

        content_id = self._next_content_id
        fields = self._merge_fields(
            content_type,
            struct.main_language_code,
            previous=[],
            updates=struct.fields,
            content_id=content_id,
        )

        self._next_content_id += 1
        now = self._clock.now_utc()
        self._content_infos[content_id] = ContentInfo(
            id=content_id,
            content_type_identifier=content_type.identifier,
            main_language_code=struct.main_language_code,
            main_location_id=None,
            current_version_no=1,
            published=False,
            modified_at=now,
        )
        self._versions[content_id] = {
            1: _VersionRecord(
                version_no=1,
                status="draft",
                initial_language_code=struct.main_language_code,
                language_codes=_languages_of(fields, struct.main_language_code),
                created_at=now,
                fields=fields,
            )
        }
        self._location_targets[content_id] = [ls.parent_location_id for ls in location_structs]

        logger.debug("Created content %s (%s)", content_id, content_type.identifier)
        return self._build_content(content_id, 1)

    def update_content(self, version_info: VersionInfo, struct: ContentUpdateStruct) -> Content:
        content_info = self._get_content_info(version_info.content_info.id)
        record = self._get_version(content_info.id, version_info.version_no)
        if record.status != "draft":
            raise BadStateError("version_info", "only draft versions can be updated")

        self._check_language(struct.initial_language_code)
        content_type = self._content_types[content_info.content_type_identifier]
        record.fields = self._merge_fields(
            content_type,
            content_info.main_language_code,
            previous=record.fields,
            updates=struct.fields,
            content_id=content_info.id,
        )
        record.language_codes = _languages_of(record.fields, content_info.main_language_code)
        content_info.modified_at = self._clock.now_utc()

        return self._build_content(content_info.id, record.version_no)

    def publish_version(self, version_info: VersionInfo) -> Content:
        content_info = self._get_content_info(version_info.content_info.id)
        record = self._get_version(content_info.id, version_info.version_no)
        if record.status != "draft":
            raise BadStateError("version_info", "only draft versions can be published")

        for other in self._versions[content_info.id].values():
            if other.status == "published":
                other.status = "archived"

        record.status = "published"
        content_info.current_version_no = record.version_no
        content_info.published = True
        content_info.modified_at = self._clock.now_utc()

        if content_info.main_location_id is None:
            for parent_location_id in self._location_targets.pop(content_info.id, []):
                location = self._create_location(parent_location_id, content_info.id)
                if content_info.main_location_id is None:
                    content_info.main_location_id = location.id

        return self._build_content(content_info.id, record.version_no)

    def load_versions(self, content_info: ContentInfo) -> list[VersionInfo]:
        info = self._get_content_info(content_info.id)
        return [
            self._build_version_info(info, record)
            for _, record in sorted(self._versions[info.id].items())
        ]

    def delete_version(self, version_info: VersionInfo) -> None:
        content_info = self._get_content_info(version_info.content_info.id)
        record = self._get_version(content_info.id, version_info.version_no)
        versions = self._versions[content_info.id]

        if record.status == "published":
            raise BadStateError("version_info", "the published version cannot be deleted")
        if len(versions) == 1:
            raise BadStateError("version_info", "content must keep at least one version")

        del versions[record.version_no]
        if content_info.current_version_no == record.version_no:
            content_info.current_version_no = max(versions)
        logger.debug("Deleted version %s of content %s", record.version_no, content_info.id)

    def delete_content(self, content_info: ContentInfo) -> None:
        info = self._get_content_info(content_info.id)

        doomed = [loc.id for loc in self._locations.values() if loc.content_id == info.id]
        while doomed:
            location_id = doomed.pop()
            self._locations.pop(location_id, None)
            doomed.extend(
                loc.id for loc in self._locations.values() if loc.parent_location_id == location_id
            )

        del self._content_infos[info.id]
        del self._versions[info.id]
        self._location_targets.pop(info.id, None)
        logger.debug("Deleted content %s", info.id)

    def load_content_info(self, content_id: int) -> ContentInfo:
        return self._get_content_info(content_id).model_copy()

    def load_version_info(self, content_info: ContentInfo, version_no: int | None = None) -> VersionInfo:
        info = self._get_content_info(content_info.id)
        record = self._get_version(info.id, version_no or info.current_version_no)
        return self._build_version_info(info, record)

    def create_content_draft(
        self,
        content_info: ContentInfo,
        version_info: VersionInfo | None = None,
    ) -> Content:
        info = self._get_content_info(content_info.id)
        source = self._get_version(
            info.id, version_info.version_no if version_info else info.current_version_no
        )

        versions = self._versions[info.id]
        version_no = max(versions) + 1
        versions[version_no] = _VersionRecord(
            version_no=version_no,
            status="draft",
            initial_language_code=info.main_language_code,
            language_codes=list(source.language_codes),
            created_at=self._clock.now_utc(),
            fields=[f.model_copy(deep=True) for f in source.fields],
        )
        return self._build_content(info.id, version_no)

    def load_content(self, content_id: int, version_no: int | None = None) -> Content:
        info = self._get_content_info(content_id)
        return self._build_content(info.id, version_no or info.current_version_no)

    # --- LocationServicePort ---

    def load_parent_locations_for_draft_content(self, version_info: VersionInfo) -> list[Location]:
        info = self._get_content_info(version_info.content_info.id)

        placed = [loc for loc in self._locations.values() if loc.content_id == info.id]
        if placed:
            parent_ids = [loc.parent_location_id for loc in placed]
        else:
            parent_ids = list(self._location_targets.get(info.id, []))

        return [
            self._locations[pid].model_copy()
            for pid in parent_ids
            if pid is not None and pid in self._locations
        ]

    def load_location(self, location_id: int) -> Location:
        location = self._locations.get(location_id)
        if location is None:
            raise NotFoundError("location", location_id)
        return location.model_copy()

    # --- Internals ---

    def _create_location(self, parent_location_id: int, content_id: int) -> Location:
        location = Location(
            id=self._next_location_id,
            parent_location_id=parent_location_id,
            content_id=content_id,
        )
        self._locations[location.id] = location
        self._next_location_id += 1
        return location

    def _check_language(self, language_code: str) -> None:
        if language_code not in self._languages:
            raise NotFoundError("language", language_code)

    def _get_content_info(self, content_id: int) -> ContentInfo:
        info = self._content_infos.get(content_id)
        if info is None:
            raise NotFoundError("content", content_id)
        return info

    def _get_version(self, content_id: int, version_no: int) -> _VersionRecord:
        record = self._versions.get(content_id, {}).get(version_no)
        if record is None:
            raise NotFoundError("version", f"{content_id}/{version_no}")
        return record

    def _build_version_info(self, info: ContentInfo, record: _VersionRecord) -> VersionInfo:
        return VersionInfo(
            content_info=info.model_copy(),
            version_no=record.version_no,
            status=record.status,
            initial_language_code=record.initial_language_code,
            language_codes=list(record.language_codes),
            created_at=record.created_at,
        )

    def _build_content(self, content_id: int, version_no: int) -> Content:
        info = self._get_content_info(content_id)
        record = self._get_version(content_id, version_no)
        return Content(
            version_info=self._build_version_info(info, record),
            fields=[f.model_copy(deep=True) for f in record.fields],
        )

    def _merge_fields(
        self,
        content_type: ContentType,
        main_language_code: str,
        previous: list[Field],
        updates: list[Field],
        content_id: int,
    ) -> list[Field]:
        """Apply updates on top of previous fields and validate the result."""
        errors: list[FieldValidationError] = []
        values: dict[tuple[str, str], Any] = {
            (f.field_def_identifier, f.language_code): f.value for f in previous
        }

        for update in updates:
            field_definition = content_type.get_field_definition(update.field_def_identifier)
            if field_definition is None:
                errors.append(
                    FieldValidationError(
                        code="unknown_field",
                        message=f"Content type '{content_type.identifier}' has no field "
                        f"'{update.field_def_identifier}'",
                        field=update.field_def_identifier,
                    )
                )
                continue
            self._check_language(update.language_code)
            if not field_definition.is_translatable and update.language_code != main_language_code:
                continue

            value_errors = check_field_value(field_definition, update.value)
            if value_errors:
                errors.extend(value_errors)
                continue

            key = (field_definition.identifier, update.language_code)
            if field_definition.field_type_identifier == "ezuser":
                values[key] = self._store_user_account(
                    field_definition.identifier, update.value, values.get(key), content_id, errors
                )
            else:
                values[key] = update.value

        language_codes = sorted({lang for _, lang in values} | {main_language_code})
        merged: list[Field] = []
        for field_definition in sorted(content_type.field_definitions, key=lambda fd: fd.position):
            main_value = values.get((field_definition.identifier, main_language_code))
            if field_definition.is_required and is_empty(main_value):
                errors.append(
                    FieldValidationError(
                        code="field_required",
                        message=f"Field '{field_definition.identifier}' is required",
                        field=field_definition.identifier,
                    )
                )
            for language_code in language_codes:
                if field_definition.is_translatable:
                    value = values.get((field_definition.identifier, language_code))
                else:
                    value = main_value
                merged.append(
                    Field(
                        field_def_identifier=field_definition.identifier,
                        language_code=language_code,
                        value=value,
                    )
                )

        if errors:
            raise ContentFieldValidationError(errors)
        return merged

    def _store_user_account(
        self,
        identifier: str,
        value: Any,
        previous: UserAccountValue | None,
        content_id: int,
        errors: list[FieldValidationError],
    ) -> UserAccountValue | None:
        account = to_user_account(value)
        if account is None:
            return None

        login = (account.username or "").strip()
        if self._login_taken(login, content_id):
            errors.append(
                FieldValidationError(
                    code="username_taken",
                    message=f"Username '{login}' is already in use",
                    field=identifier,
                )
            )

        password_hash = previous.password_hash if previous else None
        if account.password:
            password_hash = self._password_hasher.hash_password(account.password)
        elif password_hash is None:
            errors.append(
                FieldValidationError(
                    code="password_required",
                    message="Password is required",
                    field=identifier,
                )
            )

        return UserAccountValue(
            login=login,
            email=(account.email or "").strip(),
            password_hash=password_hash,
            enabled=account.enabled,
        )

    def _login_taken(self, login: str, content_id: int) -> bool:
        for other_id, versions in self._versions.items():
            if other_id == content_id:
                continue
            for record in versions.values():
                for f in record.fields:
                    if isinstance(f.value, UserAccountValue) and f.value.login == login:
                        return True
        return False


def _languages_of(fields: list[Field], main_language_code: str) -> list[str]:
    languages = {f.language_code for f in fields if f.value is not None}
    languages.add(main_language_code)
    return sorted(languages)
