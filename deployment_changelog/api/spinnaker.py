"""Spinnaker Managed Delivery client providing environment deployment state."""

from typing import Any, Self

import structlog
from pydantic import ValidationError

from deployment_changelog.api.abc import DeploymentStateProviderBase
from deployment_changelog.api.exceptions import ApiResponseError
from deployment_changelog.api.graphql import GraphQLClient
from deployment_changelog.api.rest import RestClient
from deployment_changelog.schemas.spinnaker import EnvironmentStatesResponse

logger = structlog.get_logger(__name__)

MD_ENVIRONMENT_STATES_OPERATION = "MdEnvironmentStatesQuery"

MD_ENVIRONMENT_STATES_QUERY = """
query MdEnvironmentStatesQuery($appName: String!, $environments: [String!]!) {
  application(appName: $appName) {
    name
    environments(names: $environments) {
      name
      state {
        artifacts {
          name
          reference
          versions {
            version
            buildNumber
            status
            gitMetadata {
              commit
              project
              repoName
              branch
              author
            }
          }
        }
      }
    }
  }
}
"""


class SpinnakerClient(DeploymentStateProviderBase):
    """Deployment state provider backed by the Spinnaker Managed Delivery GraphQL API."""

    def __init__(self, client: GraphQLClient) -> None:
        """Initialize the Spinnaker client with an already-initialized GraphQL client."""
        self.client = client

    @classmethod
    def create(cls, base_url: str, token: str | None = None, timeout: float | None = None) -> Self:
        """Create a Spinnaker client for a gate URL."""
        logger.info("Creating Spinnaker client", base_url=base_url, authenticated=token is not None)
        rest_kwargs: dict[str, Any] = {"token": token}
        if timeout is not None:
            rest_kwargs["timeout"] = timeout
        return cls(GraphQLClient(RestClient(base_url, **rest_kwargs)))

    async def __aenter__(self) -> Self:
        """Enter the async context manager."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close the underlying GraphQL client."""
        await self.client.aclose()

    async def get_environment_state(self, application_name: str, environment_names: list[str]) -> EnvironmentStatesResponse:
        """Get the artifact versions deployed to the named environments of an application."""
        variables = {"appName": application_name, "environments": environment_names}
        data = await self.client.post(MD_ENVIRONMENT_STATES_OPERATION, MD_ENVIRONMENT_STATES_QUERY, variables)
        try:
            return EnvironmentStatesResponse.model_validate(data)
        except ValidationError as exc:
            raise ApiResponseError(
                f"GraphQL {MD_ENVIRONMENT_STATES_OPERATION}",
                self.client.client.build_url(self.client.endpoint),
                str(exc),
            ) from exc
