"""
Pydantic schemas for portal users.
"""

from pydantic import Field, field_validator

from knowbase.auth.constants import Role
from knowbase.db.schemas import CamelModel, RequiredStr, StringList

# Attributes returned by list scans; passwordHash is never projected
USER_PUBLIC_FIELDS = [
    "userId",
    "name",
    "email",
    "role",
    "brandIds",
    "deptIds",
    "groupIds",
    "isActive",
    "mustChangePassword",
    "createdAt",
    "updatedAt",
]


class User(CamelModel):
    """A portal user as exposed by the API."""

    user_id: str
    name: str = ""
    email: str = ""
    role: Role = Role.VIEWER
    brand_ids: StringList = Field(default_factory=list)
    dept_ids: StringList = Field(default_factory=list)
    group_ids: StringList = Field(default_factory=list)
    is_active: bool = True
    must_change_password: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _unknown_role_is_viewer(cls, value: object) -> object:
        if value not in {role.value for role in Role}:
            return Role.VIEWER
        return value


class UserCreate(CamelModel):
    """Request schema for creating a user."""

    user_id: RequiredStr
    email: RequiredStr
    name: str = ""
    role: Role = Role.VIEWER
    brand_ids: StringList = Field(default_factory=list)
    dept_ids: StringList = Field(default_factory=list)
    group_ids: StringList = Field(default_factory=list)
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def _looks_like_email(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("email must be a valid address")
        return value


class UserUpdate(UserCreate):
    """Request schema for updating a user; newPassword replaces the stored hash."""

    new_password: str | None = None


class UserListResponse(CamelModel):
    users: list[User]


class UserResponse(CamelModel):
    ok: bool = True
    user: User


class UserCredentialResponse(CamelModel):
    """Response for create and password reset.

    The temporary password is only echoed back when it could not be mailed.
    """

    ok: bool = True
    user: User
    mail_sent: bool
    temporary_password: str | None = None
