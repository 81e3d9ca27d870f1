from enum import Enum


class Role(str, Enum):
    """User roles in the portal."""

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class CookieNames(str, Enum):
    """Cookies set by the portal's sign-in flow."""

    SESSION_USER = "kb_user"
    ADMIN_FLAG = "kb_admin"


ADMIN_KEY_HEADER = "x-kb-admin-key"

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 64
TEMPORARY_PASSWORD_LENGTH = 12
NAME_MAX_LENGTH = 40
