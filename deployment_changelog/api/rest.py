"""Thin JSON-over-HTTP client shared by the upstream service clients."""

from typing import Any, Self

import httpx
import structlog

from deployment_changelog.api.exceptions import ApiRequestError, ApiResponseError
from deployment_changelog.utils.constants import APPLICATION_JSON, DEFAULT_REQUEST_TIMEOUT

logger = structlog.get_logger(__name__)


class RestClient:
    """JSON REST client bound to a single base URL.

    Headers, timeout and credentials are fixed when the client is constructed.
    The underlying ``httpx.AsyncClient`` is safe to share between concurrent tasks.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        username: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client for a base URL with optional bearer or basic credentials."""
        headers = {"Content-Type": APPLICATION_JSON, "Accept": APPLICATION_JSON}
        auth: httpx.Auth | None = None
        if token and username:
            auth = httpx.BasicAuth(username, token)
        elif token:
            headers["Authorization"] = f"Bearer {token}"

        # httpx appends request paths to the base URL path only when it ends with a slash
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            auth=auth,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> Self:
        """Enter the async context manager."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close the underlying HTTP connection pool."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self.client.aclose()

    async def get(self, path: str, operation: str, params: dict[str, Any] | None = None) -> Any:
        """Send a GET request and return the decoded JSON body."""
        return await self.request("GET", path, operation, params=params)

    async def post_json(self, path: str, operation: str, body: Any) -> Any:
        """Send a POST request with a JSON body and return the decoded JSON body."""
        return await self.request("POST", path, operation, json_body=body)

    async def request(
        self,
        method: str,
        path: str,
        operation: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> Any:
        """Execute a request, raising ApiRequestError or ApiResponseError with the operation name on failure."""
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        url = self.build_url(path)
        logger.debug("Making request", method=method, url=url, operation=operation, params=params)
        try:
            response = await self.client.request(method, path, params=params or None, json=json_body)
        except httpx.HTTPError as exc:
            logger.error("Request failed", method=method, url=url, operation=operation, error=str(exc))
            raise ApiRequestError(operation, url, detail=str(exc) or type(exc).__name__) from exc

        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.error("Upstream returned an error status", url=str(response.url), operation=operation, status_code=response.status_code)
            raise ApiRequestError(operation, str(response.url), status_code=response.status_code, detail=detail)

        try:
            return response.json()
        except ValueError as exc:
            raise ApiResponseError(operation, str(response.url), f"body is not valid JSON ({exc})") from exc

    def build_url(self, path: str) -> str:
        """Return the absolute URL a path resolves to against the base URL."""
        return str(self.client.base_url.join(path))


def _error_detail(response: httpx.Response) -> str:
    """Extract a short error description from an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:500]
    if isinstance(body, dict):
        # Bitbucket and Jira report errors differently
        if body.get("errors"):
            return "; ".join(str(error.get("message", error)) if isinstance(error, dict) else str(error) for error in body["errors"])
        if body.get("errorMessages"):
            return "; ".join(str(message) for message in body["errorMessages"])
        if body.get("message"):
            return str(body["message"])
    return response.text[:500]
