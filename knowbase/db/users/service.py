"""
Service layer for portal users.

Password hashes are stored alongside the user record but never leave this
module; every public return value is a `User` schema.
"""

from typing import Any

from fastapi import HTTPException, status

from knowbase.auth.constants import NAME_MAX_LENGTH
from knowbase.auth.passwords import (
    generate_temporary_password,
    hash_password,
    password_policy_error,
    verify_password,
)
from knowbase.db.constants import Entity
from knowbase.db.repository import DocumentRepository
from knowbase.db.users.schemas import USER_PUBLIC_FIELDS, User, UserCreate, UserUpdate
from knowbase.integrations.mail.exceptions import MailError
from knowbase.integrations.mail.mailer import Mailer
from knowbase.utils.dates import utc_now_iso
from knowbase.utils.logger import logger

# Half-width and ideographic (full-width) spaces
_NAME_WHITESPACE = " \t\r\n　"


class UserService:
    """Service for managing users in DynamoDB."""

    def __init__(self, repository: DocumentRepository, mailer: Mailer | None = None):
        self.repository = repository
        self.mailer = mailer

    async def list_users(self) -> list[User]:
        """List every user, ordered by userId, without password hashes."""
        items = await self.repository.scan(projection=USER_PUBLIC_FIELDS)
        users = [User.model_validate(item) for item in items]
        users.sort(key=lambda user: user.user_id)
        return users

    async def get_user(self, user_id: str) -> User | None:
        item = await self.repository.get(user_id)
        return User.model_validate(item) if item else None

    async def find_record_by_email(self, email: str) -> dict[str, Any] | None:
        """Return the raw stored record (hash included) for an email address."""
        if not email:
            return None
        items = await self.repository.scan(filter_equals={"email": email})
        return items[0] if items else None

    async def find_by_email(self, email: str) -> User | None:
        record = await self.find_record_by_email(email)
        return User.model_validate(record) if record else None

    async def create_user(self, data: UserCreate) -> tuple[User, str, bool]:
        """
        Create a user with a generated temporary password.

        Returns:
            tuple: (created user, temporary password, whether it was mailed)

        Raises:
            HTTPException: 409 if the userId is already taken
        """
        if await self.repository.get(data.user_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"User {data.user_id} already exists",
            )

        temporary_password = generate_temporary_password()
        now = utc_now_iso()
        item = {
            **data.to_item(),
            "passwordHash": hash_password(temporary_password),
            "mustChangePassword": True,
            "createdAt": now,
            "updatedAt": now,
        }
        await self.repository.put(item)
        user = User.model_validate(item)
        logger.info("[UserService] Created user", user_id=user.user_id, role=user.role.value)

        mail_sent = await self._mail_temporary_password(user, temporary_password, reset=False)
        return user, temporary_password, mail_sent

    async def update_user(self, data: UserUpdate) -> User | None:
        """
        Replace a user's profile, keeping the stored hash unless a new password is given.

        Returns:
            The updated user, or None if it does not exist
        """
        existing = await self.repository.get(data.user_id)
        if not existing:
            return None

        item = {
            **data.to_item(),
            "passwordHash": existing.get("passwordHash"),
            "mustChangePassword": existing.get("mustChangePassword", False),
            "createdAt": existing.get("createdAt") or utc_now_iso(),
            "updatedAt": utc_now_iso(),
        }
        item.pop("newPassword", None)

        if data.new_password and data.new_password.strip():
            item["passwordHash"] = hash_password(data.new_password.strip())
            logger.info("[UserService] Password set by admin", user_id=data.user_id)

        await self.repository.put(item)
        return User.model_validate(item)

    async def delete_user(self, user_id: str) -> None:
        await self.repository.delete(user_id)

    async def reset_password(self, user_id: str) -> tuple[User, str, bool] | None:
        """
        Issue a new temporary password and force a change on next sign-in.

        Returns:
            tuple: (user, temporary password, whether it was mailed), or None if
            the user does not exist
        """
        existing = await self.repository.get(user_id)
        if not existing:
            return None

        temporary_password = generate_temporary_password()
        item = {
            **existing,
            "passwordHash": hash_password(temporary_password),
            "mustChangePassword": True,
            "updatedAt": utc_now_iso(),
        }
        await self.repository.put(item)
        user = User.model_validate(item)

        mail_sent = await self._mail_temporary_password(user, temporary_password, reset=True)
        return user, temporary_password, mail_sent

    async def _mail_temporary_password(
        self, user: User, temporary_password: str, reset: bool
    ) -> bool:
        """
        Mail a temporary password; False when it was not delivered.

        A delivery failure is logged, not raised: the password is already
        stored, so the caller must hand it out another way.
        """
        if not self.mailer:
            return False
        send = self.mailer.send_password_reset if reset else self.mailer.send_account_created
        try:
            return await send(user.email, user.name, temporary_password)
        except MailError as e:
            logger.error(
                "[UserService] Temporary password mail failed",
                user_id=user.user_id,
                error=e.message,
            )
            return False

    async def _require_active_record(self, email: str) -> dict[str, Any]:
        record = await self.find_record_by_email(email)
        if not record:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
            )
        if record.get("isActive") is False:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This account is disabled. Contact an administrator.",
            )
        return record

    async def change_name(self, email: str, name: str) -> User:
        """
        Change the display name of the signed-in user.

        Raises:
            HTTPException: 400 for an invalid name or inactive account, 404 if unknown
        """
        normalized = name.strip(_NAME_WHITESPACE)
        if not normalized:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required"
            )
        if len(normalized) > NAME_MAX_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Name must be at most {NAME_MAX_LENGTH} characters",
            )

        record = await self._require_active_record(email)
        item = {**record, "name": normalized, "updatedAt": utc_now_iso()}
        await self.repository.put(item)
        return User.model_validate(item)

    async def change_password(
        self,
        email: str,
        current_password: str,
        new_password: str,
        new_password_confirm: str,
    ) -> None:
        """
        Change the signed-in user's password and clear the forced-change flag.

        Raises:
            HTTPException: 400 when validation or the current password check
            fails, 404 if the user is unknown
        """
        if not current_password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is required",
            )
        policy_error = password_policy_error(new_password)
        if policy_error:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=policy_error)
        if new_password != new_password_confirm:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Password confirmation does not match",
            )
        if new_password == current_password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="New password must differ from the current password",
            )

        record = await self._require_active_record(email)
        if not verify_password(current_password, record.get("passwordHash")):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is incorrect",
            )

        await self.repository.put(
            {
                **record,
                "passwordHash": hash_password(new_password),
                "mustChangePassword": False,
                "updatedAt": utc_now_iso(),
            }
        )
        logger.info("[UserService] Password changed", user_id=record.get("userId"))

    async def recipients_for_groups(self, group_ids: set[str]) -> list[str]:
        """
        Email addresses of active users in any of the given groups.

        An empty group set selects every active user.
        """
        items = await self.repository.scan(projection=USER_PUBLIC_FIELDS)
        recipients: list[str] = []
        for item in items:
            user = User.model_validate(item)
            if not user.is_active or not user.email:
                continue
            if group_ids and not group_ids.intersection(user.group_ids):
                continue
            if user.email not in recipients:
                recipients.append(user.email)
        return recipients


def build_user_service(mailer: Mailer | None = None) -> UserService:
    """Construct a UserService bound to the Users table."""
    return UserService(DocumentRepository(Entity.USERS), mailer)
