from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "dev"
    STAGING = "staging"
    PRODUCTION = "prod"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current environment (dev, staging, or prod)",
    )
    client_base_url: str = Field(
        default="http://localhost:3000", description="Frontend base URL"
    )
    host: str = Field(default="0.0.0.0", description="Interface the API server binds to")
    port: int = Field(default=8080, description="Port the API server listens on")

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region for DynamoDB and SES",
    )
    table_prefix: str = Field(
        default="knowbase-",
        description="Prefix prepended to every DynamoDB table name",
    )

    # Admin capability token
    kb_admin_api_key: str | None = Field(
        default=None,
        description="Shared secret expected in the x-kb-admin-key header",
    )

    def table_name(self, entity: str) -> str:
        """Resolve the physical table name for an entity (e.g. 'Manuals')."""
        return f"{self.table_prefix}{entity}"


_app_settings: AppSettings | None = None


def get_app_settings() -> AppSettings:
    global _app_settings
    if _app_settings is None:
        _app_settings = AppSettings()
    return _app_settings


def set_app_settings(settings: AppSettings | None) -> None:
    """Replace the global settings instance (None resets to env on next access)."""
    global _app_settings
    _app_settings = settings


def get_client_base_url() -> str:
    """Get the client base URL from settings."""
    settings = get_app_settings()
    return settings.client_base_url
