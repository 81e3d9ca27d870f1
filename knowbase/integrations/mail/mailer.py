"""
SES mailer for account and announcement messages.
"""

import os
import textwrap
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from knowbase.config import get_app_settings
from knowbase.integrations.mail.config import MailSettings, get_mail_settings
from knowbase.integrations.mail.exceptions import MailError
from knowbase.utils.logger import logger

NEWS_SUBJECT_PREFIX = "【KnowBaseお知らせ】"


class Mailer:
    """Sends plain-text mail through SES."""

    def __init__(self, settings: MailSettings | None = None, client: Any = None):
        self.settings = settings or get_mail_settings()
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            region = (
                self.settings.region
                or os.getenv("AWS_REGION")
                or get_app_settings().aws_region
            )
            self._client = boto3.client("ses", region_name=region)
        return self._client

    async def send(
        self,
        subject: str,
        body: str,
        to: list[str] | None = None,
        bcc: list[str] | None = None,
    ) -> int:
        """
        Send one message, splitting BCC lists over the SES recipient limit.

        Args:
            subject: Mail subject
            body: Plain-text body
            to: Visible recipients
            bcc: Hidden recipients

        Returns:
            int: Number of SES messages sent (0 when there is nobody to send to
            or mail is disabled)

        Raises:
            MailError: If SES rejects the message
        """
        to = [address for address in (to or []) if address]
        bcc = [address for address in (bcc or []) if address]
        if not to and not bcc:
            logger.info("[Mailer] No recipients, skipping send", subject=subject)
            return 0

        if not self.settings.enabled:
            logger.info(
                "[Mailer] Mail disabled, message not sent",
                subject=subject,
                to_count=len(to),
                bcc_count=len(bcc),
            )
            return 0

        if bcc and not to:
            to = [self.settings.notify_to or self.settings.sender]

        batch_size = max(self.settings.max_recipients - len(to), 1)
        batches = [bcc[i : i + batch_size] for i in range(0, len(bcc), batch_size)] or [[]]

        for batch in batches:
            destination: dict[str, list[str]] = {"ToAddresses": to}
            if batch:
                destination["BccAddresses"] = batch
            try:
                self.client.send_email(
                    Source=self.settings.sender,
                    Destination=destination,
                    Message={
                        "Subject": {"Data": subject, "Charset": "UTF-8"},
                        "Body": {"Text": {"Data": body, "Charset": "UTF-8"}},
                    },
                )
            except ClientError as e:
                error_msg = f"Failed to send mail: {e.response['Error']['Message']}"
                logger.error(f"[Mailer] {error_msg}", subject=subject)
                raise MailError(error_msg, original_error=e) from e
            except BotoCoreError as e:
                logger.error("[Mailer] Failed to send mail", error=str(e))
                raise MailError(f"Failed to send mail: {e}", original_error=e) from e

        logger.info(
            "[Mailer] Mail sent",
            subject=subject,
            to_count=len(to),
            bcc_count=len(bcc),
            batches=len(batches),
        )
        return len(batches)

    async def send_account_created(
        self, email: str, name: str, temporary_password: str
    ) -> bool:
        """Mail the temporary password for a new account."""
        body = textwrap.dedent(
            f"""\
            {name or email} 様

            KnowBase のアカウントが作成されました。
            初回ログイン後にパスワードを変更してください。

            ログインID: {email}
            仮パスワード: {temporary_password}

            {self.settings.portal_url}/login
            """
        )
        sent = await self.send("【KnowBase】アカウント作成のお知らせ", body, to=[email])
        return sent > 0

    async def send_password_reset(
        self, email: str, name: str, temporary_password: str
    ) -> bool:
        """Mail a reset temporary password."""
        body = textwrap.dedent(
            f"""\
            {name or email} 様

            KnowBase のパスワードがリセットされました。
            以下の仮パスワードでログインし、パスワードを変更してください。

            仮パスワード: {temporary_password}

            {self.settings.portal_url}/login
            """
        )
        sent = await self.send("【KnowBase】パスワード再設定のお知らせ", body, to=[email])
        return sent > 0

    async def send_news_notification(
        self, title: str, body: str, recipients: list[str]
    ) -> int:
        """BCC a news item to every recipient. Returns the number of messages sent."""
        return await self.send(f"{NEWS_SUBJECT_PREFIX}{title}", body, bcc=recipients)


_mailer: Mailer | None = None


def get_mailer() -> Mailer:
    """Get or create the mailer singleton."""
    global _mailer
    if _mailer is None:
        _mailer = Mailer()
    return _mailer
