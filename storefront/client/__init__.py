"""Client tier: API wrapper, auth context and screen guard."""

from storefront.client.api import ApiError, ApiUnreachableError, StorefrontClient
from storefront.client.context import AuthContext, AuthStatus, ClientSession
from storefront.client.navigation import NavigationAction, NavigationResult, ScreenGuard

__all__ = [
    "ApiError",
    "ApiUnreachableError",
    "AuthContext",
    "AuthStatus",
    "ClientSession",
    "NavigationAction",
    "NavigationResult",
    "ScreenGuard",
    "StorefrontClient",
]
