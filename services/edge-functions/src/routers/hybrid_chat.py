"""
Hybrid Chat Router - strict RAG chat streamed from the AI gateway.

Flow per turn: detect intent and language from the latest user message,
optionally gather live data from sibling functions, build the system prompt
around the uploaded documents, then relay the gateway's event stream.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from shared.chat import (
    build_document_context,
    build_system_prompt,
    detect_intent,
    has_document_content,
    latest_user_query,
    resolve_language,
)
from shared.chat.prompts import DOCUMENTS_SOURCE_LABEL
from shared.clients.ai_gateway import AIGatewayClient
from shared.clients.functions import FunctionsClient
from shared.config import Settings, get_settings
from src.dependencies import get_ai_gateway, get_functions_client
from src.models import HybridChatRequest
from src.services.live_data import LiveDataAggregator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["hybrid-chat"])


@router.post("/hybrid-chat")
@router.post("/functions/v1/hybrid-chat", include_in_schema=False)
async def hybrid_chat(
    request: HybridChatRequest,
    settings: Settings = Depends(get_settings),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
    functions: FunctionsClient | None = Depends(get_functions_client),
):
    """Answer the latest user message from uploaded documents (SSE stream)."""
    messages = [message.model_dump() for message in request.messages]
    documents = [document.model_dump() for document in request.documents]

    intent = detect_intent(latest_user_query(messages), live_data=settings.LIVE_DATA_ENABLED)
    language = resolve_language(request.language_preference, intent.detected_language)

    logger.info("Detected intent: %s", intent.as_dict())
    logger.info("Language preference: %s -> Effective: %s", request.language_preference, language)

    live_context = ""
    data_sources: list[str] = []
    if intent.needs_live_data and functions is not None:
        live_context, data_sources = await LiveDataAggregator(functions).gather(intent)

    document_context = build_document_context(documents)
    if documents:
        data_sources.append(DOCUMENTS_SOURCE_LABEL)

    system_prompt = build_system_prompt(
        language=language,
        document_context=document_context,
        has_documents=has_document_content(documents),
        live_context=live_context,
    )

    logger.info("Calling AI gateway, data sources: %s", data_sources)
    try:
        upstream = await gateway.open_chat_stream(
            [{"role": "system", "content": system_prompt}, *messages],
            model=settings.CHAT_MODEL,
        )
    except Exception:
        await gateway.close()
        raise

    async def _close():
        await upstream.aclose()
        await gateway.close()

    logger.info("Streaming response from AI gateway...")
    return StreamingResponse(
        upstream.aiter_bytes(),
        media_type="text/event-stream",
        background=BackgroundTask(_close),
    )
