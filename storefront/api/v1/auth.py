"""Session endpoints (logout, me), the shared login handler and the route guard dependency."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.errors import (
    ForbiddenError,
    InvalidCredentialFormatError,
    InvalidCredentialsError,
    UnauthenticatedError,
)
from storefront.core.permissions import Role, policy
from storefront.core.route_guard import enforce_route, required_capability
from storefront.core.security import (
    PASSWORD_MAX_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from storefront.schemas.auth import CurrentUser, LoginRequest, LoginResponse, MeResponse
from storefront.services.authentication import authenticate
from storefront.services.identity import principal_exists
from storefront.services.sessions import SessionRecord, SessionRegistry, get_session_registry

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def validate_username(username: str) -> None:
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise HTTPException(
            status_code=422,
            detail="Invalid username length.",
        )
    if username != username.strip():
        raise HTTPException(
            status_code=422,
            detail="Username must not start or end with whitespace.",
        )


def validate_new_password(password: str) -> None:
    """Password policy for newly issued credentials."""
    if not (settings.PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LEN):
        raise HTTPException(
            status_code=422,
            detail=(
                f"Password must be {settings.PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LEN} characters."
            ),
        )


def _session_user(record: SessionRecord) -> CurrentUser:
    return CurrentUser(
        id=record.principal_id,
        username=record.username,
        role=record.role,
        staff_id=record.staff_id,
        name=record.name,
    )


def login_with_role(
    body: LoginRequest,
    db: Session,
    registry: SessionRegistry,
    expected_role: Role,
) -> LoginResponse:
    """Authenticate for one role's login endpoint and open a session."""
    try:
        user = authenticate(db, body.username, body.password, expected_role=expected_role)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e
    except InvalidCredentialFormatError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication is unavailable for this account. Contact an administrator.",
        ) from e

    record, token = registry.open(user)
    # A delete that committed after authenticate() may already have run
    # revoke_principal, before this session existed.
    if not principal_exists(db, record.principal_id):
        registry.revoke(record.session_id)
        logger.info(
            "Login discarded, principal deleted meanwhile",
            extra={"user_id": record.principal_id},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=InvalidCredentialsError().message,
        )
    return LoginResponse(
        access_token=token,
        token_type="bearer",
        expires_at=record.expires_at,
        name=record.name,
        role=record.role,
        user=_session_user(record),
    )


def get_optional_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> SessionRecord | None:
    """Dependency: the live session for the Bearer token, or None."""
    if credentials is None:
        return None
    return registry.resolve(credentials.credentials)


def require_route(route_id: str) -> Callable[..., SessionRecord]:
    """
    Dependency factory guarding an endpoint with the route table entry route_id.

    Raises 401 without a live session and 403 when the session's role lacks
    the route's capability. Runs before the endpoint body.
    """
    required_capability(route_id)

    def guard(
        session: Annotated[SessionRecord | None, Depends(get_optional_session)],
    ) -> SessionRecord:
        try:
            enforce_route(session.role if session else None, route_id, policy)
        except UnauthenticatedError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=e.message,
                headers={"WWW-Authenticate": "Bearer"},
            ) from e
        except ForbiddenError as e:
            logger.warning(
                "Access denied",
                extra={
                    "user_id": session.principal_id,
                    "route": route_id,
                    "capability": e.capability,
                },
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=e.message,
            ) from e
        return session

    guard.__name__ = f"require_route[{route_id}]"
    return guard


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    session: Annotated[SessionRecord, Depends(require_route("auth.logout"))],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> Response:
    """End the current session; its token stops working immediately."""
    registry.revoke(session.session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=MeResponse)
def me(
    session: Annotated[SessionRecord, Depends(require_route("auth.me"))],
) -> MeResponse:
    """Return the session's principal and the capabilities of its role."""
    return MeResponse(
        user=_session_user(session),
        capabilities=sorted(policy.capabilities_for(session.role)),
        expires_at=session.expires_at,
    )
