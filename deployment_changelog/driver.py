"""Orchestrates a changelog run from reconciled configuration."""

import time
from contextlib import AsyncExitStack
from pathlib import Path

import structlog

from deployment_changelog.api.bitbucket import BitbucketClient
from deployment_changelog.api.jira import JiraClient
from deployment_changelog.api.spinnaker import SpinnakerClient
from deployment_changelog.changelog.aggregator import build_changelog
from deployment_changelog.changelog.models import Changelog, CommitRange, CommitSpecifier, EnvironmentDescriptor
from deployment_changelog.configuration.exceptions import RequiredConfigurationElementError
from deployment_changelog.configuration.models import ChangelogConfig, OutputFormat

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def run_changelog_workflow(
    config: ChangelogConfig,
    commit_range: CommitRange | None = None,
    application_name: str | None = None,
    environment_name: str | None = None,
) -> Changelog:
    """Create the upstream clients and build the changelog.

    Either ``commit_range`` or both ``application_name`` and ``environment_name``
    must be given. Clients are closed when the run finishes, successfully or not.
    """
    if commit_range is None and not (application_name and environment_name):
        raise ValueError("Either a commit range or a Spinnaker application and environment is required.")

    start_time = time.time()
    async with AsyncExitStack() as stack:
        bitbucket_client = await stack.enter_async_context(
            BitbucketClient.create(
                config.bitbucket.url,
                token=config.bitbucket.token,
                username=config.bitbucket.username,
                timeout=config.request_timeout,
                page_limit=config.page_limit,
            )
        )
        jira_client = await stack.enter_async_context(
            JiraClient.create(
                config.jira.url,
                token=config.jira.token,
                username=config.jira.username,
                timeout=config.request_timeout,
            )
        )

        commit_specifier: CommitSpecifier
        if commit_range is not None:
            commit_specifier = commit_range
        else:
            if config.spinnaker is None:
                raise RequiredConfigurationElementError(name="Spinnaker URL", cli_name="--spinnaker-url", env_name="SPINNAKER_URL")
            spinnaker_client = await stack.enter_async_context(
                SpinnakerClient.create(config.spinnaker.url, token=config.spinnaker.token, timeout=config.request_timeout)
            )
            commit_specifier = EnvironmentDescriptor(
                deployment_client=spinnaker_client,
                application_name=application_name,  # type: ignore[arg-type]
                environment_name=environment_name,  # type: ignore[arg-type]
            )

        changelog = await build_changelog(bitbucket_client, jira_client, commit_specifier, max_concurrency=config.max_concurrency)

    logger.info("Changelog workflow finished", duration=round(time.time() - start_time, 2))
    return changelog


def render_changelog(changelog: Changelog, output_format: OutputFormat) -> str:
    """Serialize a changelog in the requested format."""
    if output_format == OutputFormat.YAML:
        return changelog.to_yaml()
    return changelog.to_json() + "\n"


def write_changelog(changelog: Changelog, output_format: OutputFormat, output_file: Path) -> None:
    """Write a serialized changelog to a file, creating parent directories as needed."""
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(render_changelog(changelog, output_format), encoding="utf-8")
    logger.info("Wrote changelog", output_file=str(output_file), output_format=output_format.value)
