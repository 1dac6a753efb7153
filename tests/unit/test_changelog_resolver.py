"""Unit tests for the changelog.resolver module."""

from typing import Any

import pytest

from deployment_changelog.changelog.exceptions import (
    ApplicationNotFoundError,
    CommitRangeResolutionError,
    EnvironmentNotFoundError,
    MissingGitCommitError,
    MissingGitMetadataError,
    MissingGitProjectError,
    MissingGitRepositoryError,
    NoArtifactsInEnvironmentError,
    NoCurrentVersionError,
    NoPendingVersionError,
)
from deployment_changelog.changelog.models import CommitRange, EnvironmentDescriptor
from deployment_changelog.changelog.resolver import resolve_commit_range, select_latest_version
from deployment_changelog.schemas.spinnaker import ArtifactVersion
from tests.unit.utils import FakeDeploymentStateProvider, environment_state_payload, version_payload


def descriptor_for(data: dict[str, Any], application_name: str = "service", environment_name: str = "production") -> EnvironmentDescriptor:
    """Build an environment descriptor backed by canned query data."""
    return EnvironmentDescriptor(
        deployment_client=FakeDeploymentStateProvider(data),
        application_name=application_name,
        environment_name=environment_name,
    )


def descriptor_with_versions(versions: list[dict[str, Any]]) -> EnvironmentDescriptor:
    """Build a descriptor whose production environment has the given versions."""
    return descriptor_for(environment_state_payload("service", "production", versions))


@pytest.mark.asyncio
async def test_resolves_pending_and_current_commits() -> None:
    """Test that the range runs from the latest pending commit to the latest current commit."""
    descriptor = descriptor_with_versions(
        [
            version_payload("service-1.3.0", "PENDING", "13", commit="pending-sha"),
            version_payload("service-1.2.0", "CURRENT", "12", commit="current-sha"),
            version_payload("service-1.1.0", "PREVIOUS", "11", commit="previous-sha"),
        ]
    )

    commit_range = await resolve_commit_range(descriptor)

    assert commit_range == CommitRange(project="PROJ", repository="service", start_commit="pending-sha", end_commit="current-sha")
    assert descriptor.deployment_client.calls == [("service", ["production"])]  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_uses_highest_numeric_build_number() -> None:
    """Test that build numbers compare numerically, so 10 is newer than 9."""
    descriptor = descriptor_with_versions(
        [
            version_payload("service-9", "PENDING", "9", commit="nine"),
            version_payload("service-10", "PENDING", "10", commit="ten"),
            version_payload("service-8", "CURRENT", "8", commit="eight"),
            version_payload("service-7", "CURRENT", "7", commit="seven"),
        ]
    )

    commit_range = await resolve_commit_range(descriptor)

    assert commit_range.start_commit == "ten"
    assert commit_range.end_commit == "eight"


@pytest.mark.asyncio
async def test_collects_versions_across_artifacts() -> None:
    """Test that versions from every artifact of the environment are considered."""
    data = environment_state_payload("service", "production", [version_payload("service-5", "CURRENT", "5", commit="five")])
    artifacts = data["application"]["environments"][0]["state"]["artifacts"]
    artifacts.append({"name": "worker", "reference": "worker-docker", "versions": [version_payload("worker-6", "PENDING", "6", commit="six")]})
    artifacts.append({"name": "empty", "reference": "empty-docker", "versions": None})

    commit_range = await resolve_commit_range(descriptor_for(data))

    assert (commit_range.start_commit, commit_range.end_commit) == ("six", "five")


def test_select_latest_version_ties_keep_first() -> None:
    """Test that equal build numbers resolve to the first version returned."""
    versions = [
        ArtifactVersion(version="first", build_number="4"),
        ArtifactVersion(version="second", build_number="4"),
        ArtifactVersion(version="older", build_number="3"),
    ]
    assert select_latest_version(versions).version == "first"


def test_select_latest_version_ranks_non_numeric_build_numbers_lowest() -> None:
    """Test that missing or non numeric build numbers lose to numbered versions."""
    versions = [
        ArtifactVersion(version="unnumbered", build_number=None),
        ArtifactVersion(version="garbage", build_number="abc"),
        ArtifactVersion(version="numbered", build_number="1"),
    ]
    assert select_latest_version(versions).version == "numbered"


@pytest.mark.asyncio
async def test_no_pending_version() -> None:
    """Test that an environment without a pending version cannot be resolved."""
    descriptor = descriptor_with_versions([version_payload("service-1", "CURRENT", "1", commit="one")])
    with pytest.raises(NoPendingVersionError) as excinfo:
        await resolve_commit_range(descriptor)
    assert excinfo.value.application_name == "service"
    assert excinfo.value.environment_name == "production"


@pytest.mark.asyncio
async def test_no_current_version() -> None:
    """Test that an environment without a current version cannot be resolved."""
    descriptor = descriptor_with_versions([version_payload("service-2", "PENDING", "2", commit="two")])
    with pytest.raises(NoCurrentVersionError):
        await resolve_commit_range(descriptor)


@pytest.mark.asyncio
async def test_unknown_application() -> None:
    """Test that an unknown application raises ApplicationNotFoundError."""
    with pytest.raises(ApplicationNotFoundError):
        await resolve_commit_range(descriptor_for({"application": None}))


@pytest.mark.asyncio
async def test_unknown_environment() -> None:
    """Test that an environment absent from the response raises EnvironmentNotFoundError."""
    data = environment_state_payload("service", "staging", [version_payload("service-1", "CURRENT", "1", commit="one")])
    with pytest.raises(EnvironmentNotFoundError):
        await resolve_commit_range(descriptor_for(data))


@pytest.mark.asyncio
async def test_environment_without_artifacts() -> None:
    """Test that an environment without artifact versions raises NoArtifactsInEnvironmentError."""
    data = environment_state_payload("service", "production", [])
    data["application"]["environments"][0]["state"]["artifacts"] = None
    with pytest.raises(NoArtifactsInEnvironmentError):
        await resolve_commit_range(descriptor_for(data))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "pending_overrides, expected_error",
    [
        ({"include_git_metadata": False}, MissingGitMetadataError),
        ({"project": None}, MissingGitProjectError),
        ({"repo_name": None}, MissingGitRepositoryError),
        ({"commit": None}, MissingGitCommitError),
    ],
)
async def test_missing_git_fields_on_pending_version(pending_overrides: dict[str, Any], expected_error: type[Exception]) -> None:
    """Test that each missing piece of Git metadata raises its own error."""
    pending: dict[str, Any] = {"commit": "pending-sha"}
    pending.update(pending_overrides)
    descriptor = descriptor_with_versions(
        [
            version_payload("service-2", "PENDING", "2", **pending),
            version_payload("service-1", "CURRENT", "1", commit="current-sha"),
        ]
    )
    with pytest.raises(expected_error) as excinfo:
        await resolve_commit_range(descriptor)
    assert isinstance(excinfo.value, CommitRangeResolutionError)
    assert excinfo.value.bucket == "pending"  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_missing_commit_on_current_version() -> None:
    """Test that the current version must also carry a commit."""
    descriptor = descriptor_with_versions(
        [
            version_payload("service-2", "PENDING", "2", commit="pending-sha"),
            version_payload("service-1", "CURRENT", "1", commit=None),
        ]
    )
    with pytest.raises(MissingGitCommitError) as excinfo:
        await resolve_commit_range(descriptor)
    assert excinfo.value.bucket == "current"
    assert excinfo.value.version == "service-1"
