from datetime import UTC, datetime
from pathlib import Path

import pytest

from src.adapters.clock import FixedClock
from src.adapters.memory.repository import InMemoryContentRepository
from src.adapters.router import RouteTableRouter
from src.components.content_edit import ContentEditWorkflow
from src.rules.loader import load_rules
from src.rules.models import Rules

FROZEN_NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


class PlainTextHasher:
    """Reversible stand-in for the argon2 hasher; keeps tests fast."""

    def hash_password(self, password: str) -> str:
        return f"hashed:{password}"

    def verify_password(self, plain: str, hashed: str) -> bool:
        return hashed == f"hashed:{plain}"


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent


@pytest.fixture
def rules(project_root: Path) -> Rules:
    """Load the REAL rules from the project root."""
    rules_path = project_root / "rules.yaml"
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def repository(rules: Rules) -> InMemoryContentRepository:
    return InMemoryContentRepository(
        content_types=[ct.to_content_type() for ct in rules.content_types],
        languages=rules.languages.allowed,
        root_location_ids=rules.repository.root_location_ids,
        password_hasher=PlainTextHasher(),
        clock=FixedClock(FROZEN_NOW),
    )


@pytest.fixture
def url_router(rules: Rules) -> RouteTableRouter:
    return RouteTableRouter(rules.routing.routes, base_url=rules.routing.base_url)


@pytest.fixture
def workflow(
    repository: InMemoryContentRepository, url_router: RouteTableRouter
) -> ContentEditWorkflow:
    return ContentEditWorkflow(
        content_service=repository,
        location_service=repository,
        router=url_router,
    )
