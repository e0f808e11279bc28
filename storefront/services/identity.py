"""Identity store: create, look up, list and delete principals."""

import logging
import threading

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.errors import DuplicateUsernameError, PrincipalNotFoundError
from storefront.core.permissions import Role
from storefront.core.security import hash_password
from storefront.models import User

logger = logging.getLogger(__name__)

# Serializes check-and-insert within this process. The unique index on
# users.username covers writers in other processes.
_create_lock = threading.Lock()

# users.id is a 32-bit INTEGER column; larger ids cannot exist and some
# drivers reject them outright.
MAX_PRINCIPAL_ID = 2**31 - 1


def _username_taken(db: Session, username: str) -> bool:
    return db.query(User.id).filter(User.username == username).first() is not None


def create_principal(
    db: Session,
    username: str,
    password: str,
    role: Role | str,
    staff_id: int | None = None,
    name: str | None = None,
) -> User:
    """
    Create a principal with a hashed credential and return it.

    Raises DuplicateUsernameError if the username is taken, checked before
    hashing and again under the writer lock. Raises ValueError if staff_id is
    given for a non-staff role.
    """
    role = Role(role)
    if staff_id is not None and role is not Role.STAFF:
        raise ValueError("staff_id is only valid for staff principals")

    if _username_taken(db, username):
        raise DuplicateUsernameError(username)

    password_hash = hash_password(password)

    with _create_lock:
        if _username_taken(db, username):
            raise DuplicateUsernameError(username)
        user = User(
            username=username,
            password_hash=password_hash,
            role=role.value,
            staff_id=staff_id,
            name=name,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if _username_taken(db, username):
                raise DuplicateUsernameError(username) from e
            raise
        db.refresh(user)

    logger.info(
        "Principal created",
        extra={"user_id": user.id, "username": user.username, "role": user.role},
    )
    return user


def find_by_username(db: Session, username: str) -> User:
    """Return the principal with this exact (case-sensitive) username."""
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        raise PrincipalNotFoundError(username)
    return user


def find_by_id(db: Session, user_id: int) -> User:
    if not (1 <= user_id <= MAX_PRINCIPAL_ID):
        raise PrincipalNotFoundError(user_id)
    user = db.get(User, user_id)
    if user is None:
        raise PrincipalNotFoundError(user_id)
    return user


def principal_exists(db: Session, user_id: int) -> bool:
    """Check the table itself, bypassing any copy held in the session's identity map."""
    return db.query(User.id).filter(User.id == user_id).first() is not None


def list_principals(db: Session) -> list[User]:
    """All principals in creation order."""
    return db.query(User).order_by(User.created_at, User.id).all()


def delete_principal(db: Session, user_id: int) -> None:
    """Delete a principal. Raises PrincipalNotFoundError if it does not exist."""
    user = find_by_id(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Principal deleted", extra={"user_id": user_id})
