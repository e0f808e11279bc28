"""Screen navigation guard.

Advisory only: it keeps users away from screens they cannot use, while the
server still checks every API call behind those screens.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from storefront.client.context import AuthContext, AuthStatus
from storefront.core.route_guard import ROUTE_CAPABILITIES, GuardDecision, check_route

LOGIN_PATH = "/auth/login"
STAFF_LOGIN_PATH = "/staff/login"
LANDING_PATH = "/"
PUBLIC_SCREENS = frozenset({LOGIN_PATH, STAFF_LOGIN_PATH})


class NavigationAction(str, Enum):
    RENDER = "render"
    LOADING = "loading"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_LANDING = "redirect_landing"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class NavigationResult:
    """What the shell should do: render path, show a spinner, or go to path."""

    action: NavigationAction
    path: str
    next_path: str | None = None


def normalize_path(path: str) -> str:
    path = path.split("?", 1)[0].split("#", 1)[0]
    if len(path) > 1:
        path = path.rstrip("/")
    return path or "/"


class ScreenGuard:
    """Decides, per navigation, whether a screen may render."""

    def __init__(
        self,
        auth: AuthContext,
        login_path: str = LOGIN_PATH,
        landing_path: str = LANDING_PATH,
        routes: Mapping[str, str | None] = ROUTE_CAPABILITIES,
    ) -> None:
        self.auth = auth
        self.routes = routes
        self.login_path = login_path
        self.landing_path = landing_path
        self._pending_path: str | None = None

    def navigate(self, requested: str) -> NavigationResult:
        path = normalize_path(requested)
        if path in PUBLIC_SCREENS:
            return NavigationResult(NavigationAction.RENDER, path)
        if not path.startswith("/") or path not in self.routes:
            return NavigationResult(NavigationAction.NOT_FOUND, path)

        # Never render protected content before the session check resolves.
        if self.auth.status is AuthStatus.LOADING:
            return NavigationResult(NavigationAction.LOADING, path)

        decision = check_route(self.auth.role, path, self.auth.policy, self.routes)
        if decision is GuardDecision.UNAUTHENTICATED:
            # Resume with the query string and fragment intact.
            self._pending_path = requested
            return NavigationResult(
                NavigationAction.REDIRECT_LOGIN, self.login_path, next_path=requested
            )
        if decision is GuardDecision.FORBIDDEN:
            return NavigationResult(NavigationAction.REDIRECT_LANDING, self.landing_path)
        return NavigationResult(NavigationAction.RENDER, path)

    def resume_path(self) -> str:
        """Where to go after a successful login: the remembered screen, once."""
        path, self._pending_path = self._pending_path, None
        return path or self.landing_path
