"""Typed failures of the identity and access layer.

The API layer maps each one to a distinct HTTP status. InvalidCredentialsError
deliberately covers both "unknown username" and "wrong password".
"""

GENERIC_LOGIN_FAILURE = "Invalid username or password."


class AuthError(Exception):
    """Base class for identity, credential and authorization failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateUsernameError(AuthError):
    """Raised when a principal with the requested username already exists."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Username already exists.")


class PrincipalNotFoundError(AuthError):
    """Raised when an id or username lookup finds no principal."""

    def __init__(self, key: int | str) -> None:
        self.key = key
        super().__init__("User not found.")


class InvalidCredentialsError(AuthError):
    """Raised for every rejected login attempt, whatever the underlying cause."""

    def __init__(self) -> None:
        super().__init__(GENERIC_LOGIN_FAILURE)


class InvalidCredentialFormatError(AuthError):
    """Raised when a stored credential hash cannot be parsed."""

    def __init__(self, message: str = "Stored credential hash is malformed.") -> None:
        super().__init__(message)


class UnauthenticatedError(AuthError):
    """Raised when a protected access has no valid session."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class ForbiddenError(AuthError):
    """Raised when the session's role does not cover the required capability."""

    def __init__(self, capability: str | None) -> None:
        self.capability = capability
        super().__init__("Insufficient permissions")
