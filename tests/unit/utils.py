"""Payload builders and in-memory providers for unit tests."""

from typing import Any

from deployment_changelog.api.abc import CommitProviderBase, DeploymentStateProviderBase, IssueProviderBase
from deployment_changelog.api.exceptions import ExhaustedCursorError
from deployment_changelog.schemas.bitbucket import Commit, IssueReference, PullRequest
from deployment_changelog.schemas.jira import Issue
from deployment_changelog.schemas.spinnaker import EnvironmentStatesResponse


def commit_payload(commit_id: str, message: str = "Commit message") -> dict[str, Any]:
    """Build a Bitbucket commit as returned by the REST API."""
    identity = {"name": "jdoe", "emailAddress": "jdoe@example.com", "displayName": "Jane Doe"}
    return {
        "id": commit_id,
        "displayId": commit_id[:7],
        "author": identity,
        "authorTimestamp": 1700000000000,
        "committer": identity,
        "committerTimestamp": 1700000000000,
        "message": message,
    }


def pull_request_payload(pull_request_id: int, title: str | None = None) -> dict[str, Any]:
    """Build a Bitbucket pull request as returned by the REST API."""
    return {
        "id": pull_request_id,
        "title": title or f"Pull request {pull_request_id}",
        "description": "Some description",
        "open": False,
        "author": {"user": {"name": "jdoe", "displayName": "Jane Doe"}, "approved": False, "role": "AUTHOR"},
        "createdDate": 1700000000000,
        "updatedDate": 1700000100000,
    }


def page_payload(values: list[Any], is_last_page: bool, start: int = 0, next_page_start: int | None = None) -> dict[str, Any]:
    """Build one page of a Bitbucket paged response."""
    payload: dict[str, Any] = {
        "values": values,
        "size": len(values),
        "isLastPage": is_last_page,
        "start": start,
        "limit": 25,
    }
    if next_page_start is not None:
        payload["nextPageStart"] = next_page_start
    return payload


def issue_payload(key: str, summary: str | None = None, comments: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Build a Jira issue as returned by the REST API."""
    return {
        "id": "10001",
        "key": key,
        "fields": {
            "summary": summary or f"Summary of {key}",
            "description": "Issue description",
            "comment": {"comments": comments or [], "total": len(comments or [])},
            "created": "2023-11-14T10:00:00.000+0000",
            "updated": "2023-11-15T12:30:00.000+0100",
            "status": {"name": "Done"},
            "issuetype": {"name": "Story"},
        },
    }


def make_commit(commit_id: str) -> Commit:
    """Build a Commit model."""
    return Commit.model_validate(commit_payload(commit_id))


def make_pull_request(pull_request_id: int) -> PullRequest:
    """Build a PullRequest model."""
    return PullRequest.model_validate(pull_request_payload(pull_request_id))


def make_issue_reference(key: str) -> IssueReference:
    """Build an IssueReference model."""
    return IssueReference(key=key, url=f"https://jira.example.com/browse/{key}")


def make_issue(key: str) -> Issue:
    """Build an Issue model."""
    return Issue.model_validate(issue_payload(key))


def version_payload(
    version: str,
    status: str,
    build_number: str | None,
    commit: str | None = None,
    project: str | None = "PROJ",
    repo_name: str | None = "service",
    include_git_metadata: bool = True,
) -> dict[str, Any]:
    """Build an artifact version as returned by the Managed Delivery query."""
    payload: dict[str, Any] = {"version": version, "buildNumber": build_number, "status": status}
    if include_git_metadata:
        payload["gitMetadata"] = {
            "commit": commit,
            "project": project,
            "repoName": repo_name,
            "branch": "main",
            "author": "jdoe",
        }
    return payload


def environment_state_payload(application_name: str, environment_name: str, versions: list[dict[str, Any]]) -> dict[str, Any]:
    """Build the data object of the Managed Delivery environment states query."""
    return {
        "application": {
            "name": application_name,
            "environments": [
                {
                    "name": environment_name,
                    "state": {"artifacts": [{"name": "service", "reference": "service-docker", "versions": versions}]},
                }
            ],
        }
    }


class ListCursor:
    """Cursor over pre-built pages, optionally failing on a given page."""

    def __init__(self, pages: list[list[Any]], fail_on_page: int | None = None, error: Exception | None = None) -> None:
        """Initialize the cursor with its pages."""
        self.pages = pages
        self.fail_on_page = fail_on_page
        self.error = error or RuntimeError("page fetch failed")
        self.position = 0

    def is_exhausted(self) -> bool:
        """Return True once every page has been returned."""
        return self.position >= len(self.pages)

    async def next(self) -> list[Any]:
        """Return the next page."""
        if self.is_exhausted():
            raise ExhaustedCursorError("no pages left")
        if self.fail_on_page == self.position:
            raise self.error
        page = self.pages[self.position]
        self.position += 1
        return page


class FakeCommitProvider(CommitProviderBase):
    """In-memory commit provider recording every call it receives."""

    def __init__(
        self,
        commits: list[Commit],
        pull_requests_by_commit: dict[str, list[PullRequest]],
        issue_references_by_pull_request: dict[int, list[IssueReference]],
        failing_commits: set[str] | None = None,
    ) -> None:
        """Initialize the provider with its canned data."""
        self.commits = commits
        self.pull_requests_by_commit = pull_requests_by_commit
        self.issue_references_by_pull_request = issue_references_by_pull_request
        self.failing_commits = failing_commits or set()
        self.compare_calls: list[tuple[str, str, str, str]] = []
        self.pull_request_calls: list[str] = []
        self.issue_reference_calls: list[int] = []

    def compare_commits(self, project: str, repository: str, from_commit: str, to_commit: str) -> ListCursor:
        """Return a single page cursor over the canned commits."""
        self.compare_calls.append((project, repository, from_commit, to_commit))
        return ListCursor([self.commits])

    def pull_requests_for_commit(self, project: str, repository: str, commit_id: str) -> ListCursor:
        """Return a single page cursor over the pull requests of a commit."""
        self.pull_request_calls.append(commit_id)
        if commit_id in self.failing_commits:
            return ListCursor([[]], fail_on_page=0, error=RuntimeError(f"boom for {commit_id}"))
        return ListCursor([self.pull_requests_by_commit.get(commit_id, [])])

    async def issue_references_for_pull_request(self, project: str, repository: str, pull_request_id: int) -> list[IssueReference]:
        """Return the issue references of a pull request."""
        self.issue_reference_calls.append(pull_request_id)
        return self.issue_references_by_pull_request.get(pull_request_id, [])


class FakeIssueProvider(IssueProviderBase):
    """In-memory issue provider recording every key it is asked for."""

    def __init__(self, issues: dict[str, Issue]) -> None:
        """Initialize the provider with its canned issues."""
        self.issues = issues
        self.requested_keys: list[str] = []

    async def get_issue(self, key: str) -> Issue:
        """Return a canned issue."""
        self.requested_keys.append(key)
        return self.issues[key]


class FakeDeploymentStateProvider(DeploymentStateProviderBase):
    """In-memory deployment state provider returning a canned response."""

    def __init__(self, data: dict[str, Any]) -> None:
        """Initialize the provider with the query data to return."""
        self.data = data
        self.calls: list[tuple[str, list[str]]] = []

    async def get_environment_state(self, application_name: str, environment_names: list[str]) -> EnvironmentStatesResponse:
        """Return the canned environment state."""
        self.calls.append((application_name, environment_names))
        return EnvironmentStatesResponse.model_validate(self.data)
