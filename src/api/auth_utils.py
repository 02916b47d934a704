"""
Editor authentication helpers.

Passwords are hashed with argon2 through passlib. Editors carry an HS256
token whose claims are the login ("sub") and the editor's roles.
"""

import os
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import jwt
from passlib.context import CryptContext

from src.domain.entities import CurrentUser

ALGORITHM = "HS256"
EDITOR_TOKEN_EXPIRE_MINUTES = 60 * 8
DEFAULT_EDITOR_ROLES = ("editor",)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def get_secret_key() -> str:
    return os.environ.get("REPOFORMS_SECRET_KEY", "dev-secret-unsafe")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    result: bool = pwd_context.verify(plain_password, hashed_password)
    return result


def get_password_hash(password: str) -> str:
    result: str = pwd_context.hash(password)
    return result


def create_editor_token(
    login: str,
    roles: list[str] | None = None,
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """
    Create a signed token for an editor.

    Args:
        login: Editor login, stored as the "sub" claim
        roles: Editor roles; defaults to DEFAULT_EDITOR_ROLES
        expires_delta: Optional custom lifetime
        now_utc: Current UTC time (for testing/determinism)
    """
    issued_at = now_utc if now_utc is not None else datetime.now(UTC)
    claims = {
        "sub": login,
        "roles": list(roles) if roles is not None else list(DEFAULT_EDITOR_ROLES),
        "iat": issued_at,
        "exp": issued_at + (expires_delta or timedelta(minutes=EDITOR_TOKEN_EXPIRE_MINUTES)),
    }
    token: str = jwt.encode(claims, get_secret_key(), algorithm=ALGORITHM)
    return token


def decode_editor_token(token: str) -> CurrentUser | None:
    """Editor for a valid token; None if the token is bad, expired or lacks a login."""
    try:
        claims: dict[str, Any] = jwt.decode(token, get_secret_key(), algorithms=[ALGORITHM])
    except jwt.JWTError:
        return None

    login = claims.get("sub")
    if not isinstance(login, str) or not login:
        return None
    roles = claims.get("roles") or []
    return CurrentUser(login=login, roles=[str(r) for r in roles])
