from datetime import UTC, datetime, timedelta
from uuid import UUID

import bcrypt
import jwt

from src.auth.dtos import Principal, Role
from src.config.settings import settings


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed hash in the store
        return False


def create_access_token(principal: Principal, expires_delta: timedelta | None = None) -> str:
    """Create a signed session token for the principal."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": str(principal.user_id),
        "email": principal.email,
        "role": principal.role.value,
        "exp": datetime.now(UTC) + expires_delta,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Principal | None:
    """Return the principal encoded in the token, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        return Principal(
            user_id=UUID(payload["sub"]),
            email=payload["email"],
            role=Role(payload["role"]),
        )
    except (jwt.PyJWTError, KeyError, ValueError):
        return None
