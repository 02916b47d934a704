from src.api.auth_utils import get_password_hash, verify_password


class PasslibPasswordHasher:
    """Password hasher backed by the passlib argon2 context."""

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)
