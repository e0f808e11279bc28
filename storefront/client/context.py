"""Client-side authentication context.

Build one AuthContext at the application root and hand it to whatever needs
to know who is signed in; there is no module-level "current user".
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from storefront.client.api import ApiError, StorefrontClient
from storefront.core.permissions import AuthorizationPolicy, Role, policy as default_policy
from storefront.schemas.auth import CurrentUser, LoginResponse, MeResponse

logger = logging.getLogger(__name__)


class AuthStatus(str, Enum):
    LOADING = "loading"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class ClientSession:
    token: str
    user: CurrentUser
    expires_at: datetime

    @property
    def role(self) -> Role:
        return self.user.role

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AuthContext:
    """
    Holds the signed-in session for one client.

    Starts LOADING until restore() has asked the server about a stored token.
    An expired session, a logout, or a 401 from the server returns it to
    ANONYMOUS.
    """

    def __init__(
        self,
        api: StorefrontClient,
        policy: AuthorizationPolicy = default_policy,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.api = api
        self.policy = policy
        self._clock = clock
        self._status = AuthStatus.LOADING
        self._session: ClientSession | None = None

    @property
    def status(self) -> AuthStatus:
        if self._session is not None and self._session.is_expired(self._clock()):
            logger.info("Client session expired", extra={"user_id": self._session.user.id})
            self._clear()
        return self._status

    @property
    def session(self) -> ClientSession | None:
        return self._session if self.status is AuthStatus.AUTHENTICATED else None

    @property
    def role(self) -> Role | None:
        session = self.session
        return session.role if session else None

    def restore(self, token: str | None) -> AuthStatus:
        """Resolve the LOADING state from a previously stored token (or none)."""
        if not token:
            self._clear()
            return self._status
        try:
            me = MeResponse.model_validate(self.api.me(token))
        except ApiError as e:
            if e.status_code == 401:
                self._clear()
                return self._status
            raise
        self._set(ClientSession(token=token, user=me.user, expires_at=me.expires_at))
        return self._status

    def login_staff(self, username: str, password: str) -> ClientSession:
        return self._login(self.api.login_staff(username, password))

    def login_admin(self, username: str, password: str) -> ClientSession:
        return self._login(self.api.login_admin(username, password))

    def logout(self) -> None:
        session = self._session
        self._clear()
        if session is None:
            return
        try:
            self.api.logout(session.token)
        except ApiError as e:
            # Already gone on the server (expired or revoked).
            if e.status_code != 401:
                raise

    def handle_unauthorized(self) -> None:
        """Call when any API request answered 401: the server no longer knows this session."""
        self._clear()

    def _login(self, payload: dict) -> ClientSession:
        login = LoginResponse.model_validate(payload)
        session = ClientSession(token=login.access_token, user=login.user, expires_at=login.expires_at)
        self._set(session)
        return session

    def _set(self, session: ClientSession) -> None:
        self._session = session
        self._status = AuthStatus.AUTHENTICATED

    def _clear(self) -> None:
        self._session = None
        self._status = AuthStatus.ANONYMOUS
