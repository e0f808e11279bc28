"""Staff login and staff credential issuance."""

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
    LoginRequest,
    LoginResponse,
    StaffCredentialsRequest,
    StaffCredentialsResponse,
    StaffUserOut,
)
from storefront.services.identity import create_principal
from storefront.services.sessions import SessionRecord, SessionRegistry, get_session_registry

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def staff_login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> LoginResponse:
    """
    Authenticate a staff member and open a session.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    return login_with_role(body, db, registry, Role.STAFF)


@router.post(
    "/credentials",
    response_model=StaffCredentialsResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_staff_credentials(
    body: StaffCredentialsRequest,
    _admin: Annotated[SessionRecord, Depends(require_route("credentials.staff.create"))],
    db: Annotated[Session, Depends(get_db)],
) -> StaffCredentialsResponse:
    """Issue login credentials for a staff member, optionally linked to a staff record."""
    validate_username(body.username)
    validate_new_password(body.password)
    try:
        user = create_principal(
            db,
            username=body.username,
            password=body.password,
            role=Role.STAFF,
            staff_id=body.staff_id,
            name=body.name or None,
        )
    except DuplicateUsernameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return StaffCredentialsResponse(
        message="Staff account created.",
        user=StaffUserOut.model_validate(user),
    )
