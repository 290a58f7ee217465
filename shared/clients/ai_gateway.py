"""
AI gateway client - OpenAI-compatible chat completions (text and multimodal).
"""

import logging
from typing import Any

import httpx

from shared.errors import UpstreamError

from .base import BaseServiceClient

logger = logging.getLogger(__name__)

COMPLETIONS_PATH = "/chat/completions"

UPSTREAM_MESSAGES = {
    429: "Rate limits exceeded, please try again later.",
    402: "Payment required, please add funds to your workspace.",
}


def gateway_error(status_code: int, body: str, default_message: str = "AI gateway error") -> UpstreamError:
    """Translate a failed gateway response into an UpstreamError."""
    message = UPSTREAM_MESSAGES.get(status_code, default_message)
    return UpstreamError(message, upstream_status=status_code, body=body)


class AIGatewayClient(BaseServiceClient):
    """Client for the AI chat-completion gateway."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            base_url=base_url,
            service_name="ai-gateway",
            api_key=api_key,
            timeout=timeout,
            transport=transport,
        )

    async def open_chat_stream(self, messages: list[dict[str, Any]], model: str) -> httpx.Response:
        """
        Start a streamed chat completion.

        Returns the open 2xx response; the caller relays its body and closes
        it. Non-2xx responses are read, closed and raised as UpstreamError.
        """
        response = await self.stream(
            "POST",
            COMPLETIONS_PATH,
            json={"model": model, "messages": messages, "stream": True},
        )
        if response.is_success:
            return response

        body = (await response.aread()).decode("utf-8", errors="replace")
        await response.aclose()
        logger.error("AI gateway error: %s %s", response.status_code, body[:500])
        raise gateway_error(response.status_code, body)

    async def complete(
        self,
        messages: list[dict[str, Any]],
        model: str,
        max_tokens: int | None = None,
    ) -> dict[str, Any]:
        """Run a non-streamed completion and return the decoded JSON body."""
        payload: dict[str, Any] = {"model": model, "messages": messages}
        if max_tokens:
            payload["max_tokens"] = max_tokens

        response = await self.post(COMPLETIONS_PATH, json=payload)
        if not response.is_success:
            logger.error("AI gateway error: %s %s", response.status_code, response.text[:500])
            raise gateway_error(response.status_code, response.text)
        return response.json()


def completion_text(result: dict[str, Any]) -> str:
    """Extract ``choices[0].message.content`` or an empty string."""
    choices = result.get("choices") or []
    if not choices:
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content")
    return content if isinstance(content, str) else ""
