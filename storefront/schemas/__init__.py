"""Pydantic request/response schemas."""

from storefront.schemas.auth import (
    AdminCredentialsRequest,
    AdminCredentialsResponse,
    AdminUserOut,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    StaffCredentialsRequest,
    StaffCredentialsResponse,
    StaffUserOut,
    UserListItem,
)
from storefront.schemas.health import HealthResponse

__all__ = [
    "AdminCredentialsRequest",
    "AdminCredentialsResponse",
    "AdminUserOut",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "MessageResponse",
    "StaffCredentialsRequest",
    "StaffCredentialsResponse",
    "StaffUserOut",
    "UserListItem",
]
