"""
Auth-specific Pydantic schemas for request and response models.
"""

from pydantic import Field

from knowbase.db.schemas import CamelModel


class SessionUser(CamelModel):
    """The signed-in user as identified by the session cookies."""

    email: str = Field(..., description="Email stored in the session cookie")
    is_admin: bool = Field(default=False, description="Whether the admin flag cookie is set")
    user_id: str | None = Field(None, description="Matching user record, if any")
    group_ids: list[str] = Field(default_factory=list, description="User's groups")


class MeResponse(CamelModel):
    ok: bool = True
    email: str | None = None
    is_admin: bool = False


class NameChangeRequest(CamelModel):
    name: str = ""


class PasswordChangeRequest(CamelModel):
    current_password: str = ""
    new_password: str = ""
    new_password2: str = ""
