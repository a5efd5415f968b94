"""Configuration for gira."""

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "GIRA_"
ISSUE_PATTERN_ENV = f"{ENV_PREFIX}JIRA_ISSUE_PATTERN"


class ConfigurationError(Exception):
    """Base exception for configuration errors."""


class InvalidConfigurationError(ConfigurationError):
    """Configuration value is invalid."""


class GiraConfig(BaseSettings):
    """Settings read once at startup and passed to every component."""

    jira_issue_pattern: str = Field(default="", description="Regex locating an issue key in a branch name")
    jira_url: str = Field(default="", description="Jira base URL")
    jira_user: str = Field(default="", description="Jira username")
    jira_token: str = Field(default="", description="Jira API token")

    jira_timeout: float = Field(default=30.0, gt=0, description="Seconds before a Jira request is abandoned")
    lookup_workers: int = Field(default=1, ge=1, description="Concurrent issue lookups")
    protect_current_branch: bool = Field(
        default=True,
        description="Refuse to select the checked-out branch for deletion",
    )

    model_config = SettingsConfigDict(
        env_file=[".env.gira", ".env"],
        env_file_encoding="utf-8",
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("jira_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Ensure URL doesn't have trailing slash."""
        return v.strip().rstrip("/")

    @property
    def tracker_capable(self) -> bool:
        """Check whether every credential needed to query Jira is present."""
        return bool(self.jira_url and self.jira_user and self.jira_token)


def load_config(env_file: Path | None = None, **overrides: Any) -> GiraConfig:
    """Build the run's configuration.

    Args:
        env_file: Optional dotenv file used instead of the default ones
        **overrides: Values taking precedence over the environment

    Raises:
        InvalidConfigurationError: If a value fails validation or env_file is missing
    """
    if env_file is not None and not env_file.exists():
        raise InvalidConfigurationError(f"Environment file not found: {env_file}")

    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        if env_file is not None:
            return GiraConfig(_env_file=env_file, **values)
        return GiraConfig(**values)
    except ValidationError as err:
        raise InvalidConfigurationError(str(err)) from err
