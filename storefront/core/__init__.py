"""Core app configuration, database and access policy."""

from storefront.core.config import get_settings, settings
from storefront.core.database import get_db
from storefront.core.permissions import AuthorizationPolicy, Role, policy

__all__ = ["AuthorizationPolicy", "Role", "get_settings", "settings", "get_db", "policy"]
