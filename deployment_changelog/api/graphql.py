"""Minimal GraphQL client built on the REST client."""

from typing import Any, Self

import structlog

from deployment_changelog.api.exceptions import ApiResponseError, GraphQLResponseError
from deployment_changelog.api.rest import RestClient
from deployment_changelog.utils.constants import GRAPHQL_ENDPOINT

logger = structlog.get_logger(__name__)


class GraphQLClient:
    """Posts GraphQL operations to a server's ``graphql`` endpoint."""

    def __init__(self, client: RestClient, endpoint: str = GRAPHQL_ENDPOINT) -> None:
        """Initialize the GraphQL client with an already-initialized REST client."""
        self.client = client
        self.endpoint = endpoint

    async def __aenter__(self) -> Self:
        """Enter the async context manager."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close the underlying REST client."""
        await self.client.aclose()

    async def aclose(self) -> None:
        """Close the underlying REST client."""
        await self.client.aclose()

    async def post(self, operation_name: str, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Execute a GraphQL operation and return its ``data`` object.

        Raises:
            GraphQLResponseError: If the server reports errors or returns no data.
            ApiResponseError: If the response is not a GraphQL response object.
        """
        body = {"operationName": operation_name, "query": query, "variables": variables}
        response = await self.client.post_json(self.endpoint, f"GraphQL {operation_name}", body)
        if not isinstance(response, dict):
            raise ApiResponseError(f"GraphQL {operation_name}", self.client.build_url(self.endpoint), "response is not a JSON object")

        errors = response.get("errors")
        if errors:
            logger.error("GraphQL call returned errors", operation_name=operation_name, variables=variables, errors=errors)
            raise GraphQLResponseError(operation_name, errors)

        data = response.get("data")
        if data is None:
            raise GraphQLResponseError(operation_name)
        return data  # type: ignore[no-any-return]
