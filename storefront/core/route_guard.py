"""
Declarative route table and the guard evaluated for every protected route.

The same table and the same check_route() back both the API dependencies and
the client navigation guard, so a (role, route) pair gets one answer on both
tiers. Only the server's answer is a security boundary.
"""

from collections.abc import Mapping
from enum import Enum

from storefront.core.errors import ForbiddenError, UnauthenticatedError
from storefront.core.permissions import (
    STAFF_PAGE,
    USER_MANAGEMENT,
    AuthorizationPolicy,
    Role,
    policy as default_policy,
)

# Route identifier -> required capability (None: any authenticated principal).
# API routes are named "<area>.<action>"; client screens by their path.
ROUTE_CAPABILITIES: dict[str, str | None] = {
    # API
    "auth.me": None,
    "auth.logout": None,
    "credentials.admin.create": USER_MANAGEMENT,
    "credentials.staff.create": USER_MANAGEMENT,
    "users.list": USER_MANAGEMENT,
    "users.delete": USER_MANAGEMENT,
    # Client screens
    "/": None,
    "/purchases": None,
    "/suppliers": None,
    "/customers": None,
    "/staff-management": STAFF_PAGE,
    "/marketing": None,
    "/promotions": None,
    "/products": None,
    "/invoices": None,
    "/installments": None,
    "/expenses": None,
    "/expense-categories": None,
    "/reports": None,
    "/inventory-reports": None,
    "/barcodes": None,
    "/settings": None,
    "/staff": STAFF_PAGE,
    "/appointments": None,
}


class GuardDecision(str, Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


class UnknownRouteError(LookupError):
    """Raised when a guard is asked about a route missing from ROUTE_CAPABILITIES."""

    def __init__(self, route_id: str) -> None:
        self.route_id = route_id
        super().__init__(f"Route {route_id!r} is not declared in ROUTE_CAPABILITIES")


def required_capability(
    route_id: str, routes: Mapping[str, str | None] = ROUTE_CAPABILITIES
) -> str | None:
    try:
        return routes[route_id]
    except KeyError:
        raise UnknownRouteError(route_id) from None


def check_route(
    role: Role | str | None,
    route_id: str,
    policy: AuthorizationPolicy = default_policy,
    routes: Mapping[str, str | None] = ROUTE_CAPABILITIES,
) -> GuardDecision:
    """Decide access to route_id for a session with the given role (None: no session)."""
    capability = required_capability(route_id, routes)
    if role is None:
        return GuardDecision.UNAUTHENTICATED
    if policy.is_authorized(role, capability):
        return GuardDecision.ALLOW
    return GuardDecision.FORBIDDEN


def enforce_route(
    role: Role | str | None,
    route_id: str,
    policy: AuthorizationPolicy = default_policy,
    routes: Mapping[str, str | None] = ROUTE_CAPABILITIES,
) -> None:
    """Raise UnauthenticatedError or ForbiddenError unless check_route allows."""
    decision = check_route(role, route_id, policy, routes)
    if decision is GuardDecision.UNAUTHENTICATED:
        raise UnauthenticatedError()
    if decision is GuardDecision.FORBIDDEN:
        raise ForbiddenError(routes[route_id])
