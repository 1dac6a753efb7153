"""Custom exceptions raised by the upstream API clients."""

from typing import Any


class ApiError(Exception):
    """Base class for failures talking to an upstream service."""

    def __init__(self, message: str, operation: str, url: str | None = None) -> None:
        """Initializes the exception with the failed operation and request URL."""
        super().__init__(message)
        self.operation = operation
        self.url = url


class ApiRequestError(ApiError):
    """Raised when a request cannot be sent or the server answers with an error status."""

    def __init__(self, operation: str, url: str, status_code: int | None = None, detail: str | None = None) -> None:
        """Initializes the exception with the failed operation, URL and HTTP status code."""
        message = f"{operation} request to {url} failed"
        if status_code is not None:
            message += f" with HTTP status {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message, operation, url)
        self.status_code = status_code
        self.detail = detail


class ApiResponseError(ApiError):
    """Raised when a response body cannot be decoded into the expected shape."""

    def __init__(self, operation: str, url: str, detail: str) -> None:
        """Initializes the exception with the failed operation, URL and decoding error."""
        super().__init__(f"Could not deserialize {operation} response from {url}: {detail}", operation, url)
        self.detail = detail


class PaginationError(ApiError):
    """Raised when a paginated endpoint violates the page signalling contract."""

    def __init__(self, operation: str, url: str, detail: str) -> None:
        """Initializes the exception with the offending operation and a description of the violation."""
        super().__init__(f"Inconsistent pagination from {operation} ({url}): {detail}", operation, url)
        self.detail = detail


class GraphQLResponseError(ApiError):
    """Raised when a GraphQL call returns errors or no data."""

    def __init__(self, operation: str, errors: list[dict[str, Any]] | None = None) -> None:
        """Initializes the exception with the GraphQL operation name and returned errors."""
        self.errors = errors or []
        if self.errors:
            messages = "; ".join(str(error.get("message", error)) if isinstance(error, dict) else str(error) for error in self.errors)
            message = f"GraphQL operation {operation} returned errors: {messages}"
        else:
            message = f"GraphQL operation {operation} returned no data but no errors were found"
        super().__init__(message, operation)


class ExhaustedCursorError(RuntimeError):
    """Raised when a cursor is asked for another page after its last page was consumed."""

    pass
