"""Reconciles configuration between CLI arguments and environment variables."""

from pathlib import Path

from deployment_changelog.configuration.env import Settings, get_settings
from deployment_changelog.configuration.exceptions import (
    InvalidConfigurationValueError,
    RequiredConfigurationElementError,
    ServiceAuthenticationConfigurationError,
)
from deployment_changelog.configuration.models import ChangelogConfig, OutputFormat, ServiceAuthenticationType, ServiceConfig


async def validate_service_authentication_configuration(service_name: str, token: str | None, username: str | None) -> ServiceAuthenticationType:
    """Validates the credentials configured for an upstream service.

    Args:
        service_name (str): Human readable service name used in error messages.
        token (str | None): Access token or password for the service.
        username (str | None): Username for basic authentication.

    Raises:
        ServiceAuthenticationConfigurationError: If a username is given without a token.

    Returns:
        ServiceAuthenticationType: Basic when both are set, bearer for a token alone, none otherwise.
    """
    if username and not token:
        raise ServiceAuthenticationConfigurationError(
            f"A {service_name} username was provided without a {service_name} token. Basic authentication requires both."
        )
    if token and username:
        return ServiceAuthenticationType.BASIC
    if token:
        return ServiceAuthenticationType.BEARER
    return ServiceAuthenticationType.NONE


async def reconcile_service_configuration(
    service_name: str,
    cli_name: str,
    env_name: str,
    url: str | None,
    token: str | None,
    username: str | None,
) -> ServiceConfig:
    """Builds the configuration of one service, requiring its URL."""
    if not url:
        raise RequiredConfigurationElementError(name=f"{service_name} URL", cli_name=f"--{cli_name}-url", env_name=f"{env_name}_URL")
    authentication_type = await validate_service_authentication_configuration(service_name, token, username)
    return ServiceConfig(url=url, token=token, username=username, authentication_type=authentication_type)


async def reconcile_changelog_configuration(
    cli_debug: bool = False,
    cli_bitbucket_url: str | None = None,
    cli_bitbucket_token: str | None = None,
    cli_bitbucket_username: str | None = None,
    cli_jira_url: str | None = None,
    cli_jira_token: str | None = None,
    cli_jira_username: str | None = None,
    cli_spinnaker_url: str | None = None,
    cli_spinnaker_token: str | None = None,
    cli_request_timeout: float | None = None,
    cli_max_concurrency: int | None = None,
    cli_page_limit: int | None = None,
    cli_output_format: OutputFormat = OutputFormat.JSON,
    cli_output_file: Path | None = None,
    require_spinnaker: bool = False,
    settings: Settings | None = None,
) -> ChangelogConfig:
    """Reconciles CLI arguments with environment settings, preferring the CLI.

    Raises:
        RequiredConfigurationElementError: If a required service URL is missing.
        ServiceAuthenticationConfigurationError: If a service has a username but no token.
        InvalidConfigurationValueError: If a numeric setting is out of range.
    """
    if settings is None:
        settings = get_settings()

    bitbucket = await reconcile_service_configuration(
        "Bitbucket",
        "bitbucket",
        "BITBUCKET",
        cli_bitbucket_url or settings.BITBUCKET_URL,
        cli_bitbucket_token or settings.BITBUCKET_TOKEN,
        cli_bitbucket_username or settings.BITBUCKET_USERNAME,
    )
    jira = await reconcile_service_configuration(
        "Jira",
        "jira",
        "JIRA",
        cli_jira_url or settings.JIRA_URL,
        cli_jira_token or settings.JIRA_TOKEN,
        cli_jira_username or settings.JIRA_USERNAME,
    )
    spinnaker: ServiceConfig | None = None
    if require_spinnaker:
        spinnaker = await reconcile_service_configuration(
            "Spinnaker",
            "spinnaker",
            "SPINNAKER",
            cli_spinnaker_url or settings.SPINNAKER_URL,
            cli_spinnaker_token or settings.SPINNAKER_TOKEN,
            None,
        )

    request_timeout = cli_request_timeout if cli_request_timeout is not None else settings.REQUEST_TIMEOUT
    if request_timeout <= 0:
        raise InvalidConfigurationValueError("request timeout", request_timeout, "must be greater than zero")
    max_concurrency = cli_max_concurrency if cli_max_concurrency is not None else settings.MAX_CONCURRENCY
    if max_concurrency < 1:
        raise InvalidConfigurationValueError("max concurrency", max_concurrency, "must be at least 1")
    page_limit = cli_page_limit if cli_page_limit is not None else settings.PAGE_LIMIT
    if page_limit is not None and page_limit < 1:
        raise InvalidConfigurationValueError("page limit", page_limit, "must be at least 1")

    return ChangelogConfig(
        debug=cli_debug or settings.DEBUG,
        bitbucket=bitbucket,
        jira=jira,
        spinnaker=spinnaker,
        request_timeout=request_timeout,
        max_concurrency=max_concurrency,
        page_limit=page_limit,
        output_format=cli_output_format,
        output_file=cli_output_file,
    )
