"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from deployment_changelog.utils.constants import DEFAULT_MAX_CONCURRENCY, DEFAULT_REQUEST_TIMEOUT


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False
    REQUEST_TIMEOUT: float = DEFAULT_REQUEST_TIMEOUT
    MAX_CONCURRENCY: int = DEFAULT_MAX_CONCURRENCY
    PAGE_LIMIT: int | None = None

    # Bitbucket settings
    BITBUCKET_URL: str | None = None
    BITBUCKET_TOKEN: str | None = None
    BITBUCKET_USERNAME: str | None = None

    # Jira settings
    JIRA_URL: str | None = None
    JIRA_TOKEN: str | None = None
    JIRA_USERNAME: str | None = None

    # Spinnaker settings
    SPINNAKER_URL: str | None = None
    SPINNAKER_TOKEN: str | None = None


def get_settings() -> Settings:
    """Read the settings from the environment and the .env file."""
    return Settings()
