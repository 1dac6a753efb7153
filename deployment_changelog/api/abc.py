"""Base ABCs for the upstream service clients."""

from abc import ABC, abstractmethod

from deployment_changelog.api.pagination import PaginatedCursor
from deployment_changelog.schemas.bitbucket import Commit, IssueReference, PullRequest
from deployment_changelog.schemas.jira import Issue
from deployment_changelog.schemas.spinnaker import EnvironmentStatesResponse


class CommitProviderBase(ABC):
    """Base ABC for source control hosts that provide commits and pull requests."""

    @abstractmethod
    def compare_commits(self, project: str, repository: str, from_commit: str, to_commit: str) -> PaginatedCursor[Commit]:
        """Open a cursor over the commits reachable from one commit but not from another."""
        pass

    @abstractmethod
    def pull_requests_for_commit(self, project: str, repository: str, commit_id: str) -> PaginatedCursor[PullRequest]:
        """Open a cursor over the pull requests containing a commit."""
        pass

    @abstractmethod
    async def issue_references_for_pull_request(self, project: str, repository: str, pull_request_id: int) -> list[IssueReference]:
        """Get the issue tracker references linked to a pull request."""
        pass


class IssueProviderBase(ABC):
    """Base ABC for issue trackers."""

    @abstractmethod
    async def get_issue(self, key: str) -> Issue:
        """Get an issue by key."""
        pass


class DeploymentStateProviderBase(ABC):
    """Base ABC for deployment systems that report what is deployed where."""

    @abstractmethod
    async def get_environment_state(self, application_name: str, environment_names: list[str]) -> EnvironmentStatesResponse:
        """Get the artifact versions of an application's environments."""
        pass
