import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.adapters.auth.crypto import PasslibPasswordHasher
from src.adapters.clock import SystemClock
from src.adapters.memory.repository import InMemoryContentRepository
from src.adapters.router import RouteTableRouter
from src.api.auth_utils import decode_editor_token
from src.components.content_edit import ContentEditWorkflow
from src.domain.entities import CurrentUser
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(
            os.environ.get("REPOFORMS_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Repository ---
# Single process store shared by every request.
_repository_instance: InMemoryContentRepository | None = None


def get_repository(rules: Rules = Depends(get_rules)) -> InMemoryContentRepository:
    """Get content repository singleton."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = InMemoryContentRepository(
            content_types=[ct.to_content_type() for ct in rules.content_types],
            languages=rules.languages.allowed,
            root_location_ids=rules.repository.root_location_ids,
            password_hasher=PasslibPasswordHasher(),
            clock=SystemClock(),
        )
    return _repository_instance


def get_url_router(rules: Rules = Depends(get_rules)) -> RouteTableRouter:
    return RouteTableRouter(rules.routing.routes, base_url=rules.routing.base_url)


# --- Component Services ---
def get_workflow(
    repo: InMemoryContentRepository = Depends(get_repository),
    url_router: RouteTableRouter = Depends(get_url_router),
) -> ContentEditWorkflow:
    """Get content edit workflow wired to the repository and router."""
    return ContentEditWorkflow(
        content_service=repo,
        location_service=repo,
        router=url_router,
    )


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> CurrentUser:
    # Cookie first (HttpOnly), then the Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ")[1]

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    current_user = decode_editor_token(token)
    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user
