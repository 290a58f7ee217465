"""
Client for sibling edge functions deployed under ``<SUPABASE_URL>/functions/v1``.
"""

import logging
from typing import Any

import httpx

from .base import BaseServiceClient

logger = logging.getLogger(__name__)


class FunctionsClient(BaseServiceClient):
    """Invoke deployed edge functions by name with a bearer key."""

    def __init__(
        self,
        functions_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            base_url=functions_url,
            service_name="edge-functions",
            api_key=api_key,
            timeout=timeout,
            transport=transport,
        )

    async def fetch_json(self, name: str) -> Any:
        """GET a function and decode its JSON body (any status)."""
        response = await self.get(f"/{name}")
        return response.json()

    async def invoke(self, name: str, payload: dict[str, Any]) -> httpx.Response:
        """POST a JSON payload to a function and return the raw response."""
        return await self.post(f"/{name}", json=payload)
