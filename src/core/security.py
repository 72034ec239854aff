"""Password hashing and the bearer tokens that identify catalog users."""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerifyMismatchError
from jose import JWTError, jwt

from core.config import get_settings


# Argon2id with the library defaults
_password_hasher = PasswordHasher()

_logger = logging.getLogger(__name__)


def get_password_hash(password: str) -> str:
    return _password_hasher.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Check ``plain`` against a stored hash; unparseable hashes never match."""
    try:
        return _password_hasher.verify(hashed, plain)
    except (VerifyMismatchError, HashingError, InvalidHashError):
        return False


def create_access_token(user_id: UUID, expires_delta: timedelta | None = None) -> str:
    """Issue a signed token whose ``sub`` is the user's id."""
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {"sub": str(user_id), "exp": datetime.now(UTC) + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def read_access_token(token: str) -> UUID | None:
    """Return the user id a token was issued for.

    Bad signatures, expired tokens and a missing or non-UUID ``sub`` all give
    None: such callers are treated as anonymous, not rejected.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        _logger.debug("Rejected bearer token: %s", exc)
        return None

    try:
        return UUID(str(claims["sub"]))
    except (KeyError, ValueError):
        _logger.debug("Bearer token has no usable subject")
        return None
