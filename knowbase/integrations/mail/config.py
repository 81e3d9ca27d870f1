"""
Configuration management for outbound mail.

This module handles environment variable configuration for the SES
mailer using Pydantic settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from knowbase.utils.logger import logger


class MailSettings(BaseSettings):
    """Configuration for SES mail delivery."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="MAIL_"
    )

    enabled: bool = Field(
        default=True, description="Send through SES; when False messages are only logged"
    )
    sender: str = Field(
        default="noreply@knowbase-app.com", description="Verified SES sender address"
    )
    notify_to: str | None = Field(
        default=None,
        description="Visible To address for BCC broadcasts (defaults to sender)",
    )
    region: str | None = Field(
        default=None, description="SES region (defaults to AWS_REGION)"
    )
    portal_url: str = Field(
        default="http://localhost:3000", description="Portal URL included in mails"
    )
    max_recipients: int = Field(
        default=50, description="SES limit on recipients per message"
    )


_mail_settings: MailSettings | None = None


def get_mail_settings() -> MailSettings:
    """
    Get the global mail settings instance.

    Returns:
        MailSettings: The global settings instance
    """
    global _mail_settings
    if _mail_settings is None:
        _mail_settings = MailSettings()
        logger.info("MailSettings loaded", enabled=_mail_settings.enabled)
    return _mail_settings


def set_mail_settings(settings: MailSettings | None) -> None:
    """
    Set the global mail settings instance.

    Args:
        settings: The settings to set
    """
    global _mail_settings
    _mail_settings = settings
