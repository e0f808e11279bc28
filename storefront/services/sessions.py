"""Server-side session registry: open, resolve and revoke authenticated sessions."""

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from storefront.core.config import settings
from storefront.core.permissions import Role
from storefront.core.security import create_access_token, decode_access_token
from storefront.models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionRecord:
    """
    Snapshot of the principal taken at login.

    Role and staff linkage are copied, so later changes to the principal do
    not affect this session until the next login.
    """

    session_id: str
    principal_id: int
    username: str
    role: Role
    staff_id: int | None
    name: str | None
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.expires_at


class SessionRegistry:
    """
    Thread-safe in-process store of live sessions keyed by session id.

    Sessions last a fixed ttl from login. resolve() never mutates the
    registry; expired entries are dropped when new sessions are opened.
    """

    def __init__(self, ttl: timedelta) -> None:
        self._ttl = ttl
        self._sessions: dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def open(self, user: User) -> tuple[SessionRecord, str]:
        """Create a session for user; return (record, bearer token)."""
        now = datetime.now(UTC)
        record = SessionRecord(
            session_id=secrets.token_urlsafe(32),
            principal_id=user.id,
            username=user.username,
            role=Role(user.role),
            staff_id=user.staff_id,
            name=user.name,
            issued_at=now,
            expires_at=now + self._ttl,
        )
        token = create_access_token(
            sub=record.principal_id,
            role=record.role.value,
            session_id=record.session_id,
            issued_at=record.issued_at,
            expires_at=record.expires_at,
        )
        with self._lock:
            self._purge_expired_locked(now)
            self._sessions[record.session_id] = record
        logger.info(
            "Session opened",
            extra={"user_id": record.principal_id, "role": record.role.value},
        )
        return record, token

    def resolve(self, token: str) -> SessionRecord | None:
        """Return the live session for token, or None if invalid, expired or revoked."""
        try:
            payload = decode_access_token(token)
        except jwt.PyJWTError:
            return None
        session_id = payload.get("sid")
        if not isinstance(session_id, str):
            return None
        with self._lock:
            record = self._sessions.get(session_id)
        if record is None or record.is_expired():
            return None
        if payload.get("sub") != str(record.principal_id):
            return None
        return record

    def revoke(self, session_id: str) -> bool:
        with self._lock:
            record = self._sessions.pop(session_id, None)
        if record is not None:
            logger.info("Session closed", extra={"user_id": record.principal_id})
        return record is not None

    def revoke_principal(self, principal_id: int) -> int:
        """Drop every session of a principal; return how many were dropped."""
        with self._lock:
            doomed = [sid for sid, r in self._sessions.items() if r.principal_id == principal_id]
            for sid in doomed:
                del self._sessions[sid]
        if doomed:
            logger.info(
                "Sessions revoked for principal",
                extra={"user_id": principal_id, "sessions_revoked": len(doomed)},
            )
        return len(doomed)

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_expired_locked(datetime.now(UTC))

    def _purge_expired_locked(self, now: datetime) -> int:
        expired = [sid for sid, r in self._sessions.items() if r.is_expired(now)]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


session_registry = SessionRegistry(ttl=timedelta(minutes=settings.JWT_EXPIRE_MINUTES))


def get_session_registry() -> SessionRegistry:
    """Dependency returning the process-wide session registry."""
    return session_registry
