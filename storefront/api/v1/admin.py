"""Administrator login and administrator credential issuance."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.api.v1.auth import (
    login_with_role,
    require_route,
    validate_new_password,
    validate_username,
)
from storefront.core.database import get_db
from storefront.core.errors import DuplicateUsernameError
from storefront.core.permissions import Role
from storefront.schemas.auth import (
    AdminCredentialsRequest,
    AdminCredentialsResponse,
    AdminUserOut,
    LoginRequest,
    LoginResponse,
)
from storefront.services.identity import create_principal
from storefront.services.sessions import SessionRecord, SessionRegistry, get_session_registry

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def admin_login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> LoginResponse:
    """Authenticate an administrator and open a session."""
    return login_with_role(body, db, registry, Role.ADMIN)


@router.post(
    "/credentials",
    response_model=AdminCredentialsResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_admin_credentials(
    body: AdminCredentialsRequest,
    _admin: Annotated[SessionRecord, Depends(require_route("credentials.admin.create"))],
    db: Annotated[Session, Depends(get_db)],
) -> AdminCredentialsResponse:
    """Create another administrator account."""
    validate_username(body.username)
    validate_new_password(body.password)
    try:
        user = create_principal(
            db,
            username=body.username,
            password=body.password,
            role=Role.ADMIN,
            name=body.name or None,
        )
    except DuplicateUsernameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return AdminCredentialsResponse(
        message="Admin account created.",
        user=AdminUserOut.model_validate(user),
    )
