"""Password hashing and session token signing/verification."""

import base64
import hashlib
from datetime import datetime
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from storefront.core.config import settings
from storefront.core.errors import InvalidCredentialFormatError

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MAX_LEN = 128
NAME_MAX_LEN = 255

# Hashed in place of a real credential when the username is unknown, so both
# login failure paths pay for one bcrypt verification.
_DUMMY_SECRET = "storefront-dummy-credential"


def _prepare_secret(plain_password: str) -> bytes:
    """Digest the secret to 44 bytes so bcrypt's 72-byte cutoff never merges two secrets."""
    digest = hashlib.sha256(plain_password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    cost = rounds if rounds is not None else settings.BCRYPT_ROUNDS
    return bcrypt.hashpw(
        _prepare_secret(plain_password), bcrypt.gensalt(rounds=cost)
    ).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.

    Raises InvalidCredentialFormatError when the stored hash is not a bcrypt hash.
    """
    if not isinstance(hashed, str) or not hashed:
        raise InvalidCredentialFormatError()
    try:
        return bcrypt.checkpw(_prepare_secret(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError) as e:
        raise InvalidCredentialFormatError() from e


@lru_cache
def dummy_password_hash() -> str:
    """Constant hash (computed once per process at the configured cost) for unknown users."""
    return hash_password(_DUMMY_SECRET)


def create_access_token(
    sub: str | int,
    role: str,
    session_id: str,
    issued_at: datetime,
    expires_at: datetime,
) -> str:
    """Create a signed token carrying sub (user id), role, sid (session id), iat and exp."""
    payload: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "sid": session_id,
        "exp": expires_at,
        "iat": issued_at,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a token; return payload (sub, role, sid, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )
