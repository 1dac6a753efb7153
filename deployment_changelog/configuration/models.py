"""Configuration models for the deployment changelog CLI."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ServiceAuthenticationType(str, Enum):
    """Enum for upstream service authentication types."""

    NONE = "none"
    BEARER = "bearer"
    BASIC = "basic"


class OutputFormat(str, Enum):
    """Enum for changelog output formats."""

    JSON = "json"
    YAML = "yaml"


@dataclass(frozen=True)
class ServiceConfig:
    """Connection settings for one upstream service."""

    url: str
    token: str | None = None
    username: str | None = None
    authentication_type: ServiceAuthenticationType = ServiceAuthenticationType.NONE


@dataclass(frozen=True)
class ChangelogConfig:
    """Configuration class for a changelog run."""

    debug: bool
    bitbucket: ServiceConfig
    jira: ServiceConfig
    spinnaker: ServiceConfig | None
    request_timeout: float
    max_concurrency: int
    page_limit: int | None
    output_format: OutputFormat
    output_file: Path | None
