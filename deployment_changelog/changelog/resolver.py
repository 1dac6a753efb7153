"""Resolves a deployment environment into the commit range it is about to deploy."""

from collections import defaultdict

import structlog

from deployment_changelog.changelog.exceptions import (
    ApplicationNotFoundError,
    EnvironmentNotFoundError,
    MissingGitCommitError,
    MissingGitMetadataError,
    MissingGitProjectError,
    MissingGitRepositoryError,
    NoArtifactsInEnvironmentError,
    NoCurrentVersionError,
    NoPendingVersionError,
    VersionBucket,
)
from deployment_changelog.changelog.models import CommitRange, EnvironmentDescriptor
from deployment_changelog.schemas.spinnaker import ArtifactStatus, ArtifactVersion, GitMetadata

logger = structlog.get_logger(__name__)


def build_number_sort_key(version: ArtifactVersion) -> tuple[int, int]:
    """Sort key ordering versions by numeric build number.

    Versions whose build number is missing or not an integer sort below every
    numbered version.
    """
    try:
        return (1, int(version.build_number))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return (0, 0)


def select_latest_version(versions: list[ArtifactVersion]) -> ArtifactVersion:
    """Return the version with the greatest build number.

    Ties keep the version that appears first in the upstream response.
    """
    return max(versions, key=build_number_sort_key)


def require_git_metadata(version: ArtifactVersion, bucket: VersionBucket, descriptor: EnvironmentDescriptor) -> tuple[str, str, str]:
    """Return the project, repository and commit of a version or raise the matching named error."""
    context = (bucket, version.version, descriptor.application_name, descriptor.environment_name)
    git_metadata: GitMetadata | None = version.git_metadata
    if git_metadata is None:
        raise MissingGitMetadataError(*context)
    if not git_metadata.project:
        raise MissingGitProjectError(*context)
    if not git_metadata.repo_name:
        raise MissingGitRepositoryError(*context)
    if not git_metadata.commit:
        raise MissingGitCommitError(*context)
    return git_metadata.project, git_metadata.repo_name, git_metadata.commit


async def resolve_commit_range(descriptor: EnvironmentDescriptor) -> CommitRange:
    """Resolve an environment into the range between its pending and current versions.

    Performs a single call to the deployment state provider. The range starts at
    the latest pending version's commit and ends at the latest current
    version's commit, in the pending version's project and repository.

    Raises:
        CommitRangeResolutionError: A named subclass describing what was missing.
    """
    application_name = descriptor.application_name
    environment_name = descriptor.environment_name
    logger.info("Resolving commit range from Spinnaker environment", application=application_name, environment=environment_name)

    state = await descriptor.deployment_client.get_environment_state(application_name, [environment_name])

    if state.application is None:
        raise ApplicationNotFoundError(application_name, environment_name)

    environment = next((env for env in state.application.environments if env.name == environment_name), None)
    if environment is None:
        raise EnvironmentNotFoundError(application_name, environment_name)

    versions = [version for artifact in environment.state.artifacts or [] for version in artifact.versions or []]
    if not versions:
        raise NoArtifactsInEnvironmentError(application_name, environment_name)

    versions_by_status: dict[ArtifactStatus, list[ArtifactVersion]] = defaultdict(list)
    for version in versions:
        if version.status is not None:
            versions_by_status[version.status].append(version)
    logger.debug(
        "Partitioned artifact versions by status",
        application=application_name,
        environment=environment_name,
        counts={status.value: len(bucket) for status, bucket in versions_by_status.items()},
    )

    pending_versions = versions_by_status.get(ArtifactStatus.PENDING)
    if not pending_versions:
        raise NoPendingVersionError(application_name, environment_name)
    current_versions = versions_by_status.get(ArtifactStatus.CURRENT)
    if not current_versions:
        raise NoCurrentVersionError(application_name, environment_name)

    latest_pending = select_latest_version(pending_versions)
    latest_current = select_latest_version(current_versions)

    project, repository, start_commit = require_git_metadata(latest_pending, "pending", descriptor)
    current_project, current_repository, end_commit = require_git_metadata(latest_current, "current", descriptor)
    if (current_project, current_repository) != (project, repository):
        logger.warning(
            "Pending and current versions come from different repositories, using the pending one",
            pending=f"{project}/{repository}",
            current=f"{current_project}/{current_repository}",
        )

    commit_range = CommitRange(project=project, repository=repository, start_commit=start_commit, end_commit=end_commit)
    logger.info(
        "Resolved commit range",
        application=application_name,
        environment=environment_name,
        pending_version=latest_pending.version,
        current_version=latest_current.version,
        project=project,
        repository=repository,
        start_commit=start_commit,
        end_commit=end_commit,
    )
    return commit_range
