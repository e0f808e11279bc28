"""Request/response schemas for auth, credential and user endpoints."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from storefront.core.permissions import Role


def _camel(field_name: str, wire_name: str) -> dict:
    """Field kwargs accepting both spellings on input and emitting the camelCase one."""
    return {
        "validation_alias": AliasChoices(wire_name, field_name),
        "serialization_alias": wire_name,
    }


class LoginRequest(BaseModel):
    """Credentials for login. Length limits only; the password policy applies at creation."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class AdminCredentialsRequest(BaseModel):
    """Body for POST /admin/credentials."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    name: str | None = Field(default=None, max_length=255, description="Display name")


class StaffCredentialsRequest(BaseModel):
    """Body for POST /staff/credentials."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    staff_id: int | None = Field(
        default=None, description="Staff business record id", **_camel("staff_id", "staffId")
    )
    name: str | None = Field(default=None, max_length=255, description="Display name")


class AdminUserOut(BaseModel):
    """Admin principal as returned on creation (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
    name: str | None = None


class StaffUserOut(AdminUserOut):
    """Staff principal as returned on creation (no password)."""

    staff_id: int | None = Field(default=None, **_camel("staff_id", "staffId"))


class AdminCredentialsResponse(BaseModel):
    message: str
    user: AdminUserOut


class StaffCredentialsResponse(BaseModel):
    message: str
    user: StaffUserOut


class CurrentUser(BaseModel):
    """Authenticated principal as seen through its session (copied at login)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
    staff_id: int | None = Field(default=None, **_camel("staff_id", "staffId"))
    name: str | None = None


class LoginResponse(BaseModel):
    """
    Session established. Send the token as: Authorization: Bearer <access_token>.
    name and role are duplicated at top level for client display.
    """

    access_token: str = Field(..., description="Bearer session token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_at: datetime = Field(..., description="Session expiry (UTC)")
    name: str | None = None
    role: Role
    user: CurrentUser


class MeResponse(BaseModel):
    """Current session: principal, capabilities granted to its role, expiry."""

    user: CurrentUser
    capabilities: list[str]
    expires_at: datetime


class UserListItem(BaseModel):
    """User entry for the admin list (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
    staff_id: int | None = Field(default=None, **_camel("staff_id", "staffId"))
    name: str | None = None
    created_at: datetime = Field(**_camel("created_at", "createdAt"))


class MessageResponse(BaseModel):
    message: str
