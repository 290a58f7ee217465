"""
FastAPI dependencies.

Every factory builds fresh per-request objects; tests swap them out through
``app.dependency_overrides``.
"""

import httpx
from fastapi import Depends

from shared.clients.ai_gateway import AIGatewayClient
from shared.clients.functions import FunctionsClient
from shared.clients.storage import DocumentStore
from shared.config import Settings, get_settings
from shared.errors import ConfigurationError


def get_http_transport() -> httpx.AsyncBaseTransport | None:
    """Outbound transport; ``None`` means httpx's default network transport."""
    return None


def get_ai_gateway(
    settings: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> AIGatewayClient:
    if not settings.AI_GATEWAY_API_KEY:
        raise ConfigurationError("AI_GATEWAY_API_KEY is not configured")
    return AIGatewayClient(
        base_url=settings.AI_GATEWAY_URL,
        api_key=settings.AI_GATEWAY_API_KEY,
        transport=transport,
    )


def get_functions_client(
    settings: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> FunctionsClient | None:
    """Sibling-function client, or ``None`` when Supabase is not configured."""
    if not settings.live_data_configured:
        return None
    return FunctionsClient(
        functions_url=settings.functions_url,
        api_key=settings.SUPABASE_ANON_KEY,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        transport=transport,
    )


def get_document_store(settings: Settings = Depends(get_settings)) -> DocumentStore:
    return DocumentStore.from_credentials(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_ROLE_KEY,
        bucket=settings.STORAGE_BUCKET,
        table=settings.DOCUMENTS_TABLE,
    )
