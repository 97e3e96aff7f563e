"""
HTTP Client for CLI.

Provides async HTTP client for communicating with the notes server.
All requests include X-Frontend-ID: cli header for log routing.
"""

from typing import Any

import httpx

from notekeeper.backend.core.config import get_server_base_url
from notekeeper.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class APIClient:
    """
    HTTP client for backend API communication.

    Features:
    - Automatic base URL from settings
    - X-Frontend-ID header for log routing
    - Structured logging of requests/responses

    Usage:
        client = APIClient()
        response = await client.get("/health")
        response = await client.request("POST", "/api/folders", json={"name": "Work"})
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: Server base URL. If None, reads from config/settings/application.yaml.
            timeout: Request timeout in seconds. If None, reads from config/settings/application.yaml.
            transport: Custom httpx transport (tests mount the ASGI app here)
        """
        if base_url is None or timeout is None:
            try:
                config_base_url, config_timeout = get_server_base_url()
            except Exception as e:
                if base_url is None:
                    raise RuntimeError(
                        "Could not determine server URL from config/settings/application.yaml"
                    ) from e
                config_base_url, config_timeout = base_url, 30.0
            base_url = base_url or config_base_url
            timeout = timeout if timeout is not None else config_timeout

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": "cli"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request to the backend.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path (e.g., /health, /api/notes)
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response

        Raises:
            httpx.HTTPError: On transport failure
        """
        client = await self._get_client()

        log_with_source(logger, "cli", "debug", "API request", method=method, path=path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "cli",
                "error",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise

        log_with_source(
            logger,
            "cli",
            "debug",
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, **kwargs)
