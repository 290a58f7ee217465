"""
Base HTTP client for third-party and sibling-function calls.

Each edge-function invocation builds its own clients, so no connection
state is shared between requests.
"""

import asyncio
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class BaseServiceClient:
    """
    Base async HTTP client.

    Features:
    - Lazily created httpx.AsyncClient bound to a base URL
    - Bearer token authentication header
    - Optional retry with exponential backoff on transport errors
      (``max_retries=1`` means a single attempt)
    - Injectable transport so tests can stand in for the upstream
    """

    def __init__(
        self,
        base_url: str,
        service_name: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 1,
        retry_delay: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.service_name = service_name
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def _get_auth_headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    def _merge_headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        merged = dict(headers or {})
        for key, value in self._get_auth_headers().items():
            merged.setdefault(key, value)
        return merged

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make HTTP request, retrying transport failures when configured.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Request path relative to the base URL, or an absolute URL
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response (any status code; callers decide what is an error)

        Raises:
            httpx.HTTPError: When every attempt failed at the transport level
        """
        client = await self._get_client()
        headers = self._merge_headers(kwargs.pop("headers", None))

        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                return await client.request(method, path, headers=headers, **kwargs)
            except (TimeoutError, httpx.HTTPError) as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    delay = self.retry_delay * (2**attempt)
                    logger.warning(
                        "%s request failed (attempt %d/%d): %s. Retrying in %.1fs",
                        self.service_name,
                        attempt + 1,
                        self.max_retries,
                        e,
                        delay,
                    )
                    await asyncio.sleep(delay)

        logger.error("%s request failed after %d attempt(s): %s", self.service_name, self.max_retries, last_error)
        raise last_error or RuntimeError("Request failed")

    async def stream(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request and return the response with its body still unread.

        The caller owns the response and must ``aclose()`` it (and then this
        client) once the body has been consumed.
        """
        client = await self._get_client()
        headers = self._merge_headers(kwargs.pop("headers", None))
        request = client.build_request(method, path, headers=headers, **kwargs)
        return await client.send(request, stream=True)

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make GET request."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make POST request."""
        return await self.request("POST", path, **kwargs)

    async def get_json(self, path: str, **kwargs: Any) -> Any:
        """GET and decode JSON, raising httpx.HTTPStatusError on non-2xx."""
        response = await self.get(path, **kwargs)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseServiceClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
