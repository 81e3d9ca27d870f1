"""
Configuration management for the Amazon Q Business integration.

This module handles environment variable configuration for the chat
backend and the streaming relay using Pydantic settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from knowbase.utils.logger import logger


class QBusinessSettings(BaseSettings):
    """Configuration for Q Business chat using Pydantic settings."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="QBUSINESS_"
    )

    # Q Business application
    application_id: str | None = Field(
        default=None, description="Q Business application ID"
    )
    region: str | None = Field(
        default=None, description="Q Business region (defaults to AWS_REGION)"
    )
    default_user_id: str | None = Field(
        default=None,
        description="User identity sent when the request has no session user",
    )
    allow_anonymous_fallback: bool = Field(
        default=True,
        description="Retry once without a user id when the application is anonymous-only",
    )

    # Relay behaviour
    ping_interval: float = Field(
        default=5.0, gt=0, description="Seconds between keep-alive pings while waiting"
    )
    chunk_size: int = Field(
        default=300, gt=0, description="Maximum characters per streamed answer frame"
    )


# Global settings instance
_qbusiness_settings: QBusinessSettings | None = None


def get_qbusiness_settings() -> QBusinessSettings:
    """
    Get the global Q Business settings instance.

    Returns:
        QBusinessSettings: The global settings instance
    """
    global _qbusiness_settings
    if _qbusiness_settings is None:
        _qbusiness_settings = QBusinessSettings()
        logger.info("Settings loaded")
    return _qbusiness_settings


def set_qbusiness_settings(settings: QBusinessSettings | None) -> None:
    """
    Set the global Q Business settings instance.

    Args:
        settings: The settings to set
    """
    global _qbusiness_settings
    _qbusiness_settings = settings
