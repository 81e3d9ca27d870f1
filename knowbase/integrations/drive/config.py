"""
Configuration management for the Google Drive integration.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from knowbase.utils.logger import logger


class DriveSettings(BaseSettings):
    """Configuration for Drive access using a service account."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="DRIVE_"
    )

    service_account_json: str | None = Field(
        default=None, description="Service account key file contents (JSON)"
    )
    template_file_id: str | None = Field(
        default=None, description="Document copied for new manuals"
    )
    copy_parent_folder_id: str | None = Field(
        default=None, description="Folder receiving copies (template's folder when unset)"
    )
    base_url: str = Field(
        default="https://www.googleapis.com/drive/v3", description="Drive API base URL"
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    download_url: str = Field(
        default="https://drive.google.com/uc",
        description="Public download endpoint for shared files",
    )


_drive_settings: DriveSettings | None = None


def get_drive_settings() -> DriveSettings:
    """
    Get the global Drive settings instance.

    Returns:
        DriveSettings: The global settings instance
    """
    global _drive_settings
    if _drive_settings is None:
        _drive_settings = DriveSettings()
        logger.info(
            "DriveSettings loaded",
            has_service_account=bool(_drive_settings.service_account_json),
        )
    return _drive_settings


def set_drive_settings(settings: DriveSettings | None) -> None:
    """
    Set the global Drive settings instance.

    Args:
        settings: The settings to set
    """
    global _drive_settings
    _drive_settings = settings
