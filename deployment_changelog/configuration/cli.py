"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path

import structlog
import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from deployment_changelog.api.exceptions import ApiError
from deployment_changelog.changelog.exceptions import ChangelogStageError, CommitRangeResolutionError
from deployment_changelog.changelog.models import CommitRange
from deployment_changelog.configuration.exceptions import (
    InvalidConfigurationValueError,
    RequiredConfigurationElementError,
    ServiceAuthenticationConfigurationError,
)
from deployment_changelog.configuration.models import ChangelogConfig, OutputFormat
from deployment_changelog.configuration.reconcile import reconcile_changelog_configuration
from deployment_changelog.driver import render_changelog, run_changelog_workflow, write_changelog
from deployment_changelog.utils.logging import configure_logging

load_dotenv()

logger = structlog.get_logger(__name__)

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Build the changelog of a deployment from Bitbucket, Jira and Spinnaker.")

CONFIGURATION_ERRORS = (RequiredConfigurationElementError, ServiceAuthenticationConfigurationError, InvalidConfigurationValueError)
"""Errors raised while reconciling configuration."""

CHANGELOG_ERRORS = (ApiError, ChangelogStageError, CommitRangeResolutionError)
"""Errors raised while building a changelog."""

BitbucketUrlOption = Annotated[str | None, Option("--bitbucket-url", help="Bitbucket Server base URL. Falls back to BITBUCKET_URL.")]
BitbucketTokenOption = Annotated[str | None, Option("--bitbucket-token", help="Bitbucket access token or password. Falls back to BITBUCKET_TOKEN.")]
BitbucketUsernameOption = Annotated[
    str | None, Option("--bitbucket-username", help="Bitbucket username for basic authentication. Falls back to BITBUCKET_USERNAME.")
]
JiraUrlOption = Annotated[str | None, Option("--jira-url", help="Jira base URL. Falls back to JIRA_URL.")]
JiraTokenOption = Annotated[str | None, Option("--jira-token", help="Jira access token or password. Falls back to JIRA_TOKEN.")]
JiraUsernameOption = Annotated[str | None, Option("--jira-username", help="Jira username for basic authentication. Falls back to JIRA_USERNAME.")]
OutputFormatOption = Annotated[OutputFormat, Option("--output-format", case_sensitive=False, help="Changelog output format.")]
OutputFileOption = Annotated[Path | None, Option("--output-file", help="Write the changelog to this file instead of stdout.")]
MaxConcurrencyOption = Annotated[
    int | None, Option("--max-concurrency", help="Maximum number of concurrent upstream requests per stage. Falls back to MAX_CONCURRENCY.")
]
PageLimitOption = Annotated[int | None, Option("--page-limit", help="Page size requested from Bitbucket. Falls back to PAGE_LIMIT.")]
RequestTimeoutOption = Annotated[float | None, Option("--request-timeout", help="Per-request timeout in seconds. Falls back to REQUEST_TIMEOUT.")]
DebugOption = Annotated[bool, Option("--debug", help="Enable debug logging. Falls back to DEBUG.")]


def emit_changelog(
    config: ChangelogConfig,
    commit_range: CommitRange | None = None,
    application_name: str | None = None,
    environment_name: str | None = None,
) -> None:
    """Run the workflow and emit the changelog to stdout or the configured file."""
    configure_logging(config.debug)
    try:
        changelog = asyncio.run(
            run_changelog_workflow(
                config,
                commit_range=commit_range,
                application_name=application_name,
                environment_name=environment_name,
            )
        )
    except CHANGELOG_ERRORS as exc:
        logger.error("Failed to build changelog", error=str(exc))
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    if config.output_file is not None:
        write_changelog(changelog, config.output_format, config.output_file)
        typer.echo(f"Changelog written to {config.output_file}", err=True)
    else:
        typer.echo(render_changelog(changelog, config.output_format), nl=False)


@typer_app.command(name="commit-range")
def commit_range_cli(
    project: Annotated[str, Argument(help="Bitbucket project key.")],
    repository: Annotated[str, Argument(help="Bitbucket repository slug.")],
    start_commit: Annotated[str, Argument(help="Newer commit; the changelog covers commits reachable from it.")],
    end_commit: Annotated[str, Argument(help="Older commit; commits reachable from it are excluded.")],
    bitbucket_url: BitbucketUrlOption = None,
    bitbucket_token: BitbucketTokenOption = None,
    bitbucket_username: BitbucketUsernameOption = None,
    jira_url: JiraUrlOption = None,
    jira_token: JiraTokenOption = None,
    jira_username: JiraUsernameOption = None,
    output_format: OutputFormatOption = OutputFormat.JSON,
    output_file: OutputFileOption = None,
    max_concurrency: MaxConcurrencyOption = None,
    page_limit: PageLimitOption = None,
    request_timeout: RequestTimeoutOption = None,
    debug: DebugOption = False,
) -> None:
    """Build the changelog of an explicit commit range in a Bitbucket repository."""
    try:
        config = asyncio.run(
            reconcile_changelog_configuration(
                cli_debug=debug,
                cli_bitbucket_url=bitbucket_url,
                cli_bitbucket_token=bitbucket_token,
                cli_bitbucket_username=bitbucket_username,
                cli_jira_url=jira_url,
                cli_jira_token=jira_token,
                cli_jira_username=jira_username,
                cli_request_timeout=request_timeout,
                cli_max_concurrency=max_concurrency,
                cli_page_limit=page_limit,
                cli_output_format=output_format,
                cli_output_file=output_file,
            )
        )
    except CONFIGURATION_ERRORS as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    emit_changelog(
        config,
        commit_range=CommitRange(project=project, repository=repository, start_commit=start_commit, end_commit=end_commit),
    )


@typer_app.command(name="spinnaker")
def spinnaker_cli(
    application: Annotated[str, Argument(help="Spinnaker application name.")],
    environment: Annotated[str, Argument(help="Managed Delivery environment name.")],
    spinnaker_url: Annotated[str | None, Option("--spinnaker-url", help="Spinnaker Gate base URL. Falls back to SPINNAKER_URL.")] = None,
    spinnaker_token: Annotated[str | None, Option("--spinnaker-token", help="Spinnaker bearer token. Falls back to SPINNAKER_TOKEN.")] = None,
    bitbucket_url: BitbucketUrlOption = None,
    bitbucket_token: BitbucketTokenOption = None,
    bitbucket_username: BitbucketUsernameOption = None,
    jira_url: JiraUrlOption = None,
    jira_token: JiraTokenOption = None,
    jira_username: JiraUsernameOption = None,
    output_format: OutputFormatOption = OutputFormat.JSON,
    output_file: OutputFileOption = None,
    max_concurrency: MaxConcurrencyOption = None,
    page_limit: PageLimitOption = None,
    request_timeout: RequestTimeoutOption = None,
    debug: DebugOption = False,
) -> None:
    """Build the changelog of the version pending deployment to a Spinnaker environment."""
    try:
        config = asyncio.run(
            reconcile_changelog_configuration(
                cli_debug=debug,
                cli_bitbucket_url=bitbucket_url,
                cli_bitbucket_token=bitbucket_token,
                cli_bitbucket_username=bitbucket_username,
                cli_jira_url=jira_url,
                cli_jira_token=jira_token,
                cli_jira_username=jira_username,
                cli_spinnaker_url=spinnaker_url,
                cli_spinnaker_token=spinnaker_token,
                cli_request_timeout=request_timeout,
                cli_max_concurrency=max_concurrency,
                cli_page_limit=page_limit,
                cli_output_format=output_format,
                cli_output_file=output_file,
                require_spinnaker=True,
            )
        )
    except CONFIGURATION_ERRORS as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    emit_changelog(config, application_name=application, environment_name=environment)


if __name__ == "__main__":
    typer_app()
