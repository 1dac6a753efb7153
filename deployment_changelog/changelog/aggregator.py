"""Builds a changelog from a commit specifier.

The aggregation is a linear pipeline of four stages. Each stage starts only
after every concurrent branch of the previous stage has settled, and results
are deduplicated before the next fan-out so that each distinct pull request
and issue is requested exactly once:

1. list the commits in the range,
2. list the pull requests containing each commit,
3. list the issue references of each unique pull request,
4. fetch each unique issue.

Any failure aborts the whole run; there is no partial changelog.
"""

import time

import structlog

from deployment_changelog.api.abc import CommitProviderBase, IssueProviderBase
from deployment_changelog.api.pagination import drain_all
from deployment_changelog.changelog.exceptions import ChangelogStageError
from deployment_changelog.changelog.fan_out import fan_out, unique
from deployment_changelog.changelog.models import Changelog, CommitRange, CommitSpecifier, EnvironmentDescriptor
from deployment_changelog.changelog.resolver import resolve_commit_range
from deployment_changelog.schemas.bitbucket import Commit, IssueReference, PullRequest
from deployment_changelog.schemas.jira import Issue
from deployment_changelog.utils.constants import DEFAULT_MAX_CONCURRENCY

logger = structlog.get_logger(__name__)


class ChangelogAggregator:
    """Aggregates commits, pull requests and issues for a commit range."""

    def __init__(
        self,
        commit_provider: CommitProviderBase,
        issue_provider: IssueProviderBase,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        """Initialize with the upstream providers and the per-stage concurrency cap."""
        self.commit_provider = commit_provider
        self.issue_provider = issue_provider
        self.max_concurrency = max_concurrency

    async def build(self, commit_specifier: CommitSpecifier) -> Changelog:
        """Build the changelog for an explicit range or a deployment environment."""
        if isinstance(commit_specifier, CommitRange):
            commit_range = commit_specifier
        elif isinstance(commit_specifier, EnvironmentDescriptor):
            commit_range = await resolve_commit_range(commit_specifier)
        else:
            raise TypeError(f"Unsupported commit specifier: {type(commit_specifier).__name__}")
        return await self.build_from_range(commit_range)

    async def build_from_range(self, commit_range: CommitRange) -> Changelog:
        """Build the changelog for a concrete commit range."""
        start_time = time.time()
        log = logger.bind(project=commit_range.project, repository=commit_range.repository)
        log.info("Building changelog", start_commit=commit_range.start_commit, end_commit=commit_range.end_commit)

        commits = await self.list_commits(commit_range)
        log.info("Fetched commits", commit_count=len(commits))

        pull_requests = await self.fetch_pull_requests(commit_range, commits)
        log.info("Fetched pull requests", pull_request_count=len(pull_requests))

        issue_references = await self.fetch_issue_references(commit_range, pull_requests)
        log.info("Fetched issue references", issue_reference_count=len(issue_references))

        issues = await self.fetch_issues(issue_references)
        log.info(
            "Built changelog",
            commit_count=len(commits),
            pull_request_count=len(pull_requests),
            issue_count=len(issues),
            duration=round(time.time() - start_time, 2),
        )
        return Changelog(commits=commits, pull_requests=pull_requests, issues=issues)

    async def list_commits(self, commit_range: CommitRange) -> list[Commit]:
        """Drain every page of commits between the start and end commits."""
        cursor = self.commit_provider.compare_commits(
            commit_range.project,
            commit_range.repository,
            commit_range.start_commit,
            commit_range.end_commit,
        )
        try:
            return await drain_all(cursor)
        except Exception as exc:
            subject = f"range {commit_range.start_commit}..{commit_range.end_commit} in {commit_range.project}/{commit_range.repository}"
            logger.error("Listing commits failed", subject=subject, error=str(exc))
            raise ChangelogStageError("commits", subject, str(exc)) from exc

    async def fetch_pull_requests(self, commit_range: CommitRange, commits: list[Commit]) -> list[PullRequest]:
        """Drain the pull requests of every commit concurrently and deduplicate them by value."""

        async def pull_requests_for(commit: Commit) -> list[PullRequest]:
            cursor = self.commit_provider.pull_requests_for_commit(commit_range.project, commit_range.repository, commit.id)
            return await drain_all(cursor)

        pages = await fan_out(
            commits,
            pull_requests_for,
            stage="pull_requests",
            describe=lambda commit: f"commit {commit.id}",
            max_concurrency=self.max_concurrency,
        )
        return unique(pull_request for page in pages for pull_request in page)

    async def fetch_issue_references(self, commit_range: CommitRange, pull_requests: list[PullRequest]) -> list[IssueReference]:
        """Fetch the issue references of every pull request concurrently and deduplicate them by key."""

        async def issue_references_for(pull_request: PullRequest) -> list[IssueReference]:
            return await self.commit_provider.issue_references_for_pull_request(commit_range.project, commit_range.repository, pull_request.id)

        pages = await fan_out(
            pull_requests,
            issue_references_for,
            stage="issue_references",
            describe=lambda pull_request: f"pull request {pull_request.id}",
            max_concurrency=self.max_concurrency,
        )
        return unique((reference for page in pages for reference in page), key=lambda reference: reference.key)

    async def fetch_issues(self, issue_references: list[IssueReference]) -> list[Issue]:
        """Fetch every referenced issue concurrently."""
        return await fan_out(
            issue_references,
            lambda reference: self.issue_provider.get_issue(reference.key),
            stage="issues",
            describe=lambda reference: f"issue {reference.key}",
            max_concurrency=self.max_concurrency,
        )


async def build_changelog(
    commit_provider: CommitProviderBase,
    issue_provider: IssueProviderBase,
    commit_specifier: CommitSpecifier,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> Changelog:
    """Build the changelog for a commit specifier.

    Args:
        commit_provider: Source control host providing commits, pull requests and issue references.
        issue_provider: Issue tracker providing issue details.
        commit_specifier: Either an explicit CommitRange or an EnvironmentDescriptor to resolve.
        max_concurrency: Upper bound on in-flight requests within each fan-out stage.

    Returns:
        The complete changelog.

    Raises:
        CommitRangeResolutionError: If an environment descriptor cannot be resolved.
        ChangelogStageError: If any upstream call of any stage fails.
    """
    aggregator = ChangelogAggregator(commit_provider, issue_provider, max_concurrency=max_concurrency)
    return await aggregator.build(commit_specifier)
