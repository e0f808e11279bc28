"""Roles, capabilities and the authorization policy shared by server and client."""

from dataclasses import dataclass, field
from enum import Enum

from storefront.core.config import Settings, settings


class Role(str, Enum):
    """Principal roles. Admin is unrestricted; staff holds a fixed capability subset."""

    ADMIN = "admin"
    STAFF = "staff"


# Capability names referenced by the route table.
STAFF_PAGE = "staff_page"
USER_MANAGEMENT = "user_management"

KNOWN_CAPABILITIES = frozenset({STAFF_PAGE, USER_MANAGEMENT})


@dataclass(frozen=True)
class AuthorizationPolicy:
    """
    Stateless evaluator of (role, required capability) pairs.

    A role of None means no session. A capability of None means the route
    only requires authentication.
    """

    staff_capabilities: frozenset[str] = field(default_factory=lambda: frozenset({STAFF_PAGE}))

    @classmethod
    def from_settings(cls, config: Settings) -> "AuthorizationPolicy":
        return cls(staff_capabilities=frozenset(config.STAFF_CAPABILITIES))

    def is_authorized(self, role: Role | str | None, capability: str | None) -> bool:
        if role is None:
            return False
        try:
            role = Role(role)
        except ValueError:
            return False
        if role is Role.ADMIN:
            return True
        return capability is None or capability in self.staff_capabilities

    def capabilities_for(self, role: Role | str) -> frozenset[str]:
        """Capabilities the role holds among those this deployment knows about."""
        if Role(role) is Role.ADMIN:
            return KNOWN_CAPABILITIES | self.staff_capabilities
        return self.staff_capabilities


# Loaded once at import; role mappings are not hot-reloaded.
policy = AuthorizationPolicy.from_settings(settings)
