"""
Login flow: verify a username/password pair against the identity store.

Each attempt goes Idle -> Authenticating -> Authenticated | Rejected and
starts fresh. Unknown usernames still pay for one bcrypt verification (against
a constant dummy hash) so they cannot be told apart from wrong passwords by
timing, and every rejection raises the same InvalidCredentialsError.
"""

import logging

from sqlalchemy.orm import Session

from storefront.core.errors import (
    InvalidCredentialFormatError,
    InvalidCredentialsError,
    PrincipalNotFoundError,
)
from storefront.core.permissions import Role
from storefront.core.security import dummy_password_hash, verify_password
from storefront.models import User
from storefront.services.identity import find_by_username

logger = logging.getLogger(__name__)


def authenticate(
    db: Session,
    username: str,
    password: str,
    expected_role: Role | None = None,
) -> User:
    """
    Return the principal if the credentials match, else raise InvalidCredentialsError.

    expected_role restricts which principals may use a given login endpoint;
    a mismatch is rejected like a wrong password. Raises
    InvalidCredentialFormatError if the stored hash is corrupt.
    """
    try:
        user = find_by_username(db, username)
    except PrincipalNotFoundError:
        verify_password(password, dummy_password_hash())
        logger.info("Login rejected", extra={"username": username, "reason": "unknown_user"})
        raise InvalidCredentialsError() from None

    try:
        password_ok = verify_password(password, user.password_hash)
    except InvalidCredentialFormatError:
        logger.error(
            "Stored credential hash is malformed; principal cannot log in",
            extra={"user_id": user.id},
        )
        raise

    if not password_ok:
        logger.info("Login rejected", extra={"username": username, "reason": "bad_password"})
        raise InvalidCredentialsError()
    if expected_role is not None and user.role != expected_role.value:
        logger.info("Login rejected", extra={"username": username, "reason": "role_mismatch"})
        raise InvalidCredentialsError()

    logger.info("Login succeeded", extra={"user_id": user.id, "role": user.role})
    return user
