"""Data models for commit specifiers and the changelog record."""

from dataclasses import dataclass
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from deployment_changelog.api.abc import DeploymentStateProviderBase
from deployment_changelog.schemas.bitbucket import Commit, PullRequest
from deployment_changelog.schemas.jira import Issue
from deployment_changelog.utils.yaml import dump_yaml_to_string


@dataclass(frozen=True)
class CommitRange:
    """An explicit range of commits in one repository.

    ``start_commit`` is the newer commit and ``end_commit`` the older one, so the
    changelog covers commits reachable from the start but not from the end.
    """

    project: str
    repository: str
    start_commit: str
    end_commit: str


@dataclass(frozen=True)
class EnvironmentDescriptor:
    """A deployment environment whose pending and current versions define a commit range."""

    deployment_client: DeploymentStateProviderBase
    application_name: str
    environment_name: str


CommitSpecifier: TypeAlias = CommitRange | EnvironmentDescriptor


class Changelog(BaseModel):
    """The commits, pull requests and issues introduced by a deployment."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    commits: list[Commit]
    pull_requests: list[PullRequest]
    issues: list[Issue]

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible mapping with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        """Return the changelog as pretty-printed JSON."""
        return self.model_dump_json(indent=2, by_alias=True)

    def to_yaml(self) -> str:
        """Return the changelog as a YAML document."""
        return dump_yaml_to_string(self.to_dict())

    def __str__(self) -> str:
        """Render the changelog as pretty-printed JSON."""
        return self.to_json()
