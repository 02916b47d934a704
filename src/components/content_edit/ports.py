"""Content edit component port definitions - protocols for dependencies."""

from __future__ import annotations

from typing import Any, Protocol

from src.domain.entities import (
    Content,
    ContentCreateStruct,
    ContentInfo,
    ContentUpdateStruct,
    Location,
    LocationCreateStruct,
    VersionInfo,
)


class ContentServicePort(Protocol):
    """Protocol for content repository operations."""

    def create_content(
        self,
        struct: ContentCreateStruct,
        location_structs: list[LocationCreateStruct],
    ) -> Content:
        """Create new content and return its first draft."""
        ...

    def update_content(self, version_info: VersionInfo, struct: ContentUpdateStruct) -> Content:
        """Update the fields of an existing draft."""
        ...

    def publish_version(self, version_info: VersionInfo) -> Content:
        """Publish a draft version."""
        ...

    def load_versions(self, content_info: ContentInfo) -> list[VersionInfo]:
        """List all versions of a content item."""
        ...

    def delete_version(self, version_info: VersionInfo) -> None:
        """Delete a single version."""
        ...

    def delete_content(self, content_info: ContentInfo) -> None:
        """Delete a content item with all of its versions and locations."""
        ...

    def load_content_info(self, content_id: int) -> ContentInfo:
        """Load content metadata by ID."""
        ...

    def load_version_info(self, content_info: ContentInfo, version_no: int | None = None) -> VersionInfo:
        """Load a version; the current version when version_no is None."""
        ...

    def create_content_draft(
        self,
        content_info: ContentInfo,
        version_info: VersionInfo | None = None,
    ) -> Content:
        """Create a new draft copied from the given (or current) version."""
        ...


class LocationServicePort(Protocol):
    """Protocol for location lookups."""

    def load_parent_locations_for_draft_content(self, version_info: VersionInfo) -> list[Location]:
        """Parent locations a draft is (or will be) placed under."""
        ...


class RouterPort(Protocol):
    """Protocol for building URLs from named routes."""

    def generate(self, name: str, params: dict[str, Any], absolute: bool = False) -> str:
        """Build a URL for the named route."""
        ...
