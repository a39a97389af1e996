"""
HTTP Transport for gitmirror.

Handles HTTP communication with the remote provider and the record store,
including authentication headers, request logging and error mapping.
Every request is a single round trip: nothing is retried or cached.
"""

import time
from typing import Any

import httpx

from gitmirror.exceptions import RemoteError, RemoteNotFoundError, TransientNetworkError
from gitmirror.logging import log_http_request, log_http_response


class HTTPTransport:
    """
    HTTP transport layer with typed error mapping.

    Handles:
    - Default headers (authentication, content negotiation)
    - DEBUG logging of requests and responses with credentials masked
    - Error response parsing into typed exceptions tagged with the operation
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            headers: Headers sent with every request
            timeout: Request timeout in seconds
            http_transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = dict(headers or {})

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers=self.headers,
            transport=http_transport,
            follow_redirects=True,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        operation: str,
        params: dict[str, Any] | None = None,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make a single request.

        Args:
            method: HTTP method
            path: API path relative to the base URL
            operation: Name of the calling operation, attached to any error
            params: Query parameters
            body: JSON request body
            headers: Extra headers for this request only

        Returns:
            Parsed JSON response, or None for an empty body

        Raises:
            RemoteNotFoundError: On 404
            TransientNetworkError: On any other HTTP error, an unfollowable
                redirect, or a connection failure
        """
        log_http_request(method, f"{self.base_url}{path}", {**self.headers, **(headers or {})}, body)
        started = time.monotonic()

        try:
            response = self._client.request(
                method, path, params=params, json=body, headers=headers
            )
        except httpx.RequestError as e:
            raise TransientNetworkError(
                f"{operation} failed: {e}",
                details={"error": type(e).__name__},
                operation=operation,
            ) from e

        elapsed_ms = (time.monotonic() - started) * 1000
        data = self._parse_body(response)
        log_http_response(response.status_code, str(response.url), data, elapsed_ms)

        # A 3xx left over after redirects were followed has no usable body.
        if response.status_code >= 300:
            raise self._parse_error_response(response, data, operation)

        return data

    def _parse_body(self, response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return {"raw": response.text}

    def _parse_error_response(
        self, response: httpx.Response, data: Any, operation: str
    ) -> RemoteError:
        """
        Parse an error response into a typed exception.

        Classification is by status code only.

        Args:
            response: HTTP response with error status
            data: Parsed response body (provider detail payload)
            operation: Calling operation name

        Returns:
            Appropriate RemoteError subclass
        """
        provider_message = None
        if isinstance(data, dict):
            provider_message = data.get("message")
        message = f"{operation} failed: HTTP {response.status_code}"
        if provider_message:
            message = f"{message} ({provider_message})"

        if response.status_code == 404:
            return RemoteNotFoundError(message, data, operation)
        return TransientNetworkError(message, data, operation, response.status_code)
