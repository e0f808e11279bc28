"""User listing and deletion (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.api.v1.auth import require_route
from storefront.core.database import get_db
from storefront.core.errors import PrincipalNotFoundError
from storefront.schemas.auth import MessageResponse, UserListItem
from storefront.services.identity import delete_principal, list_principals
from storefront.services.sessions import SessionRecord, SessionRegistry, get_session_registry

router = APIRouter()


@router.get("", response_model=list[UserListItem])
def list_users(
    _admin: Annotated[SessionRecord, Depends(require_route("users.list"))],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserListItem]:
    """List all users in creation order. Password hashes are never included."""
    return [UserListItem.model_validate(u) for u in list_principals(db)]


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    _admin: Annotated[SessionRecord, Depends(require_route("users.delete"))],
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> MessageResponse:
    """Delete a user account and end its open sessions."""
    try:
        delete_principal(db, user_id)
    except PrincipalNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    registry.revoke_principal(user_id)
    return MessageResponse(message="User deleted.")
