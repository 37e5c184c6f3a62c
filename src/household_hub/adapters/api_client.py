"""HTTP client for the household REST backend."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

_logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """Backend answered with a non-success status."""

    def __init__(self, status_code: int, error: str) -> None:
        super().__init__(f"{status_code}: {error}")
        self.status_code = status_code
        self.error = error


class ApiClient(Protocol):
    """Interface for calls against the REST backend."""

    async def get(
        self,
        path: str,
        *,
        token: str | None = None,
        params: dict[str, str] | None = None,
        default_error: str = "request_failed",
    ) -> object:
        """Send a GET request and return the decoded body."""

    async def post(
        self,
        path: str,
        *,
        token: str | None = None,
        json: dict[str, object] | None = None,
        default_error: str = "request_failed",
    ) -> object:
        """Send a POST request and return the decoded body."""

    async def patch(
        self,
        path: str,
        *,
        token: str | None = None,
        json: dict[str, object] | None = None,
        default_error: str = "request_failed",
    ) -> object:
        """Send a PATCH request and return the decoded body."""

    async def delete(
        self,
        path: str,
        *,
        token: str | None = None,
        default_error: str = "request_failed",
    ) -> object:
        """Send a DELETE request and return the decoded body."""


@dataclass
class HttpxApiClient(ApiClient):
    """HTTPX-backed backend client.

    Only GET requests are retried, and only on transport failures.
    """

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    @classmethod
    def create(
        cls,
        base_url: str,
        timeout_seconds: float = 10,
        retry_attempts: int = 1,
        retry_delay_seconds: float = 0.3,
    ) -> "HttpxApiClient":
        """Create a backend client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
            retry_attempts=retry_attempts,
            retry_delay_seconds=retry_delay_seconds,
        )

    async def get(
        self,
        path: str,
        *,
        token: str | None = None,
        params: dict[str, str] | None = None,
        default_error: str = "request_failed",
    ) -> object:
        """Send a GET request with a short retry on transport errors."""
        attempt = 0
        while True:
            try:
                return await self._send(
                    "GET", path, token=token, params=params, default_error=default_error
                )
            except httpx.TransportError as exc:
                attempt += 1
                _logger.warning(
                    "Backend GET %s failed (attempt %s/%s): %s",
                    path,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)

    async def post(
        self,
        path: str,
        *,
        token: str | None = None,
        json: dict[str, object] | None = None,
        default_error: str = "request_failed",
    ) -> object:
        """Send a POST request."""
        return await self._send(
            "POST", path, token=token, json=json, default_error=default_error
        )

    async def patch(
        self,
        path: str,
        *,
        token: str | None = None,
        json: dict[str, object] | None = None,
        default_error: str = "request_failed",
    ) -> object:
        """Send a PATCH request."""
        return await self._send(
            "PATCH", path, token=token, json=json, default_error=default_error
        )

    async def delete(
        self,
        path: str,
        *,
        token: str | None = None,
        default_error: str = "request_failed",
    ) -> object:
        """Send a DELETE request."""
        return await self._send(
            "DELETE", path, token=token, default_error=default_error
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _send(  # noqa: PLR0913
        self,
        method: str,
        path: str,
        *,
        token: str | None,
        default_error: str,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
    ) -> object:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        response = await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            params=params,
            json=json,
            headers=headers,
            timeout=self.timeout_seconds,
        )
        if response.is_error:
            error = _error_code(response, default_error)
            _logger.info(
                "Backend %s %s -> %s (%s)", method, path, response.status_code, error
            )
            raise BackendError(response.status_code, error)
        if not response.content:
            return None
        return response.json()


def _error_code(response: httpx.Response, default_error: str) -> str:
    """Extract the backend's error code from a failed response."""
    try:
        payload = response.json()
    except ValueError:
        return default_error
    if isinstance(payload, dict):
        for field in ("error", "message"):
            value = payload.get(field)
            if isinstance(value, str) and value:
                return value
    return default_error
