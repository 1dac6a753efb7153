"""Bitbucket Server client providing commits, pull requests and linked issues."""

from typing import Any, Generic, Self, TypeVar
from urllib.parse import quote

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from deployment_changelog.api.abc import CommitProviderBase
from deployment_changelog.api.exceptions import ApiResponseError, ExhaustedCursorError, PaginationError
from deployment_changelog.api.rest import RestClient
from deployment_changelog.schemas.bitbucket import BitbucketPage, Commit, IssueReference, PullRequest
from deployment_changelog.utils.constants import (
    BITBUCKET_COMPARE_COMMITS_PATH,
    BITBUCKET_ISSUES_FOR_PULL_REQUEST_PATH,
    BITBUCKET_PAGE_LIMIT_PARAMETER,
    BITBUCKET_PAGE_START_PARAMETER,
    BITBUCKET_PULL_REQUESTS_FOR_COMMIT_PATH,
)

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

_issue_references_adapter: TypeAdapter[list[IssueReference]] = TypeAdapter(list[IssueReference])


def _segment(value: str | int) -> str:
    """Quote a value for use as a single URL path segment."""
    return quote(str(value), safe="")


class BitbucketPaginated(Generic[M]):
    """Cursor over a Bitbucket paged collection.

    Bitbucket pages carry ``isLastPage`` and, except possibly on the last page,
    ``nextPageStart``. The last-page flag alone ends the walk; the two signals
    are cross-checked and any disagreement raises PaginationError.
    """

    def __init__(
        self,
        client: RestClient,
        path: str,
        item_model: type[M],
        operation: str,
        params: dict[str, Any] | None = None,
        page_limit: int | None = None,
    ) -> None:
        """Initialize the cursor positioned before the first page."""
        self.client = client
        self.path = path
        self.operation = operation
        self.params = dict(params or {})
        self.page_limit = page_limit
        self.page_adapter: TypeAdapter[BitbucketPage[M]] = TypeAdapter(BitbucketPage[item_model])  # type: ignore[valid-type]
        self.next_page_start: int | None = 0
        self.is_last_page = False
        self.pages_fetched = 0

    def is_exhausted(self) -> bool:
        """Return True once the page flagged as last has been consumed."""
        return self.is_last_page

    async def next(self) -> list[M]:
        """Fetch the next page of items."""
        if self.is_last_page or self.next_page_start is None:
            raise ExhaustedCursorError(f"Cursor for {self.operation} has no pages left")

        start = self.next_page_start
        params = {**self.params, BITBUCKET_PAGE_START_PARAMETER: start}
        if self.page_limit is not None:
            params[BITBUCKET_PAGE_LIMIT_PARAMETER] = self.page_limit
        data = await self.client.get(self.path, self.operation, params=params)
        url = self.client.build_url(self.path)

        try:
            page = self.page_adapter.validate_python(data)
        except ValidationError as exc:
            raise ApiResponseError(self.operation, url, str(exc)) from exc

        self._check_page(page, start, url)
        self.pages_fetched += 1
        self.is_last_page = page.is_last_page
        self.next_page_start = page.next_page_start
        logger.debug(
            "Fetched Bitbucket page",
            operation=self.operation,
            start=start,
            size=page.size,
            is_last_page=page.is_last_page,
            next_page_start=page.next_page_start,
        )
        return page.values

    def _check_page(self, page: BitbucketPage[M], start: int, url: str) -> None:
        """Validate the page signalling fields against each other."""
        if page.size != len(page.values):
            raise PaginationError(self.operation, url, f"page declares size {page.size} but carries {len(page.values)} values")
        if page.is_last_page and page.next_page_start is not None:
            raise PaginationError(self.operation, url, f"last page still declares nextPageStart {page.next_page_start}")
        if not page.is_last_page:
            if page.next_page_start is None:
                raise PaginationError(self.operation, url, f"page starting at {start} is not the last page but has no nextPageStart")
            if page.next_page_start <= start:
                raise PaginationError(self.operation, url, f"nextPageStart {page.next_page_start} does not advance past start {start}")


class BitbucketClient(CommitProviderBase):
    """Commit provider backed by the Bitbucket Server REST API."""

    def __init__(self, client: RestClient, page_limit: int | None = None) -> None:
        """Initialize the Bitbucket client with an already-initialized REST client."""
        self.client = client
        self.page_limit = page_limit

    @classmethod
    def create(
        cls,
        base_url: str,
        token: str | None = None,
        username: str | None = None,
        timeout: float | None = None,
        page_limit: int | None = None,
    ) -> Self:
        """Create a Bitbucket client for a server URL."""
        logger.info("Creating Bitbucket client", base_url=base_url, authenticated=token is not None)
        rest_kwargs: dict[str, Any] = {"token": token, "username": username}
        if timeout is not None:
            rest_kwargs["timeout"] = timeout
        return cls(RestClient(base_url, **rest_kwargs), page_limit=page_limit)

    async def __aenter__(self) -> Self:
        """Enter the async context manager."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close the underlying REST client."""
        await self.client.aclose()

    def compare_commits(self, project: str, repository: str, from_commit: str, to_commit: str) -> BitbucketPaginated[Commit]:
        """Open a cursor over the commits reachable from ``from_commit`` but not from ``to_commit``."""
        path = BITBUCKET_COMPARE_COMMITS_PATH.format(project=_segment(project), repository=_segment(repository))
        return BitbucketPaginated(
            self.client,
            path,
            Commit,
            operation=f"compare commits {from_commit}..{to_commit} in {project}/{repository}",
            params={"from": from_commit, "to": to_commit},
            page_limit=self.page_limit,
        )

    def pull_requests_for_commit(self, project: str, repository: str, commit_id: str) -> BitbucketPaginated[PullRequest]:
        """Open a cursor over the pull requests containing a commit."""
        path = BITBUCKET_PULL_REQUESTS_FOR_COMMIT_PATH.format(
            project=_segment(project),
            repository=_segment(repository),
            commit_id=_segment(commit_id),
        )
        return BitbucketPaginated(
            self.client,
            path,
            PullRequest,
            operation=f"list pull requests for commit {commit_id} in {project}/{repository}",
            page_limit=self.page_limit,
        )

    async def issue_references_for_pull_request(self, project: str, repository: str, pull_request_id: int) -> list[IssueReference]:
        """Get the Jira issues linked to a pull request."""
        path = BITBUCKET_ISSUES_FOR_PULL_REQUEST_PATH.format(
            project=_segment(project),
            repository=_segment(repository),
            pull_request_id=_segment(pull_request_id),
        )
        operation = f"list issues for pull request {pull_request_id} in {project}/{repository}"
        data = await self.client.get(path, operation)
        try:
            return _issue_references_adapter.validate_python(data)
        except ValidationError as exc:
            raise ApiResponseError(operation, self.client.build_url(path), str(exc)) from exc
