"""Synchronous httpx wrapper that reports every failure as a TransportError.

Requests are never retried.
"""

import logging
from typing import Any, Self

import httpx

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised for network failures, timeouts and non-success HTTP statuses."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class HTTPClient:
    """Owns one lazily created httpx.Client bound to base_url.

    The optional transport is passed to httpx unchanged, so tests can
    substitute httpx.MockTransport.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.default_headers = headers or {}
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Lazy initialization of HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url or "",
                timeout=self.timeout,
                headers=self.default_headers,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _request(
        self,
        method: str,
        url: str,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        """Send one request; per-call headers override the defaults.

        Raises:
            TransportError: For non-2xx statuses, timeouts and connection failures
        """
        merged_headers = {**self.default_headers, **(headers or {})}

        try:
            response = self.client.request(
                method=method,
                url=url,
                params=params,
                headers=merged_headers,
            )
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"HTTP {e.response.status_code} for {method} {url}: {e.response.text[:200]}"
            )
            raise TransportError(
                message=f"HTTP {e.response.status_code}: {e.response.reason_phrase}",
                status_code=e.response.status_code,
                response_body=e.response.text,
            ) from e
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout for {method} {url}")
            raise TransportError(f"Request timed out: {url}") from e
        except httpx.HTTPError as e:
            logger.warning(f"Connection error for {method} {url}: {e}")
            raise TransportError(f"Connection failed: {url}") from e

    def get(
        self,
        url: str,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        """HTTP GET request."""
        return self._request("GET", url, params=params, headers=headers)

    def get_json(self, url: str, params: dict | None = None, headers: dict | None = None) -> Any:
        """HTTP GET returning parsed JSON."""
        response = self.get(url, params=params, headers=headers)
        return response.json()
