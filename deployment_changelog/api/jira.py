"""Jira client providing issue details."""

from typing import Any, Self
from urllib.parse import quote

import structlog
from pydantic import ValidationError

from deployment_changelog.api.abc import IssueProviderBase
from deployment_changelog.api.exceptions import ApiResponseError
from deployment_changelog.api.rest import RestClient
from deployment_changelog.schemas.jira import Issue
from deployment_changelog.utils.constants import JIRA_ISSUE_FIELDS, JIRA_ISSUE_PATH

logger = structlog.get_logger(__name__)


class JiraClient(IssueProviderBase):
    """Issue provider backed by the Jira REST API."""

    def __init__(self, client: RestClient) -> None:
        """Initialize the Jira client with an already-initialized REST client."""
        self.client = client

    @classmethod
    def create(cls, base_url: str, token: str | None = None, username: str | None = None, timeout: float | None = None) -> Self:
        """Create a Jira client for a server URL."""
        logger.info("Creating Jira client", base_url=base_url, authenticated=token is not None)
        rest_kwargs: dict[str, Any] = {"token": token, "username": username}
        if timeout is not None:
            rest_kwargs["timeout"] = timeout
        return cls(RestClient(base_url, **rest_kwargs))

    async def __aenter__(self) -> Self:
        """Enter the async context manager."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close the underlying REST client."""
        await self.client.aclose()

    async def get_issue(self, key: str) -> Issue:
        """Get an issue with its comments."""
        path = JIRA_ISSUE_PATH.format(issue_key=quote(key, safe=""))
        operation = f"get issue {key}"
        data = await self.client.get(path, operation, params={"fields": JIRA_ISSUE_FIELDS})
        try:
            issue = Issue.model_validate(data)
        except ValidationError as exc:
            raise ApiResponseError(operation, self.client.build_url(path), str(exc)) from exc
        logger.debug("Fetched Jira issue", key=issue.key, comment_count=len(issue.comments))
        return issue
