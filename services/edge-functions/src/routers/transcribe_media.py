"""
Transcribe Media Router - audio/video transcription into the document row.
"""

import logging

from fastapi import APIRouter, Depends

from shared.clients.ai_gateway import AIGatewayClient
from shared.clients.storage import DocumentStore
from shared.config import Settings, get_settings
from src.dependencies import get_ai_gateway, get_document_store
from src.models import TranscribeMediaRequest, TranscribeMediaResponse
from src.services.transcription import MediaTranscriber

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transcribe-media"])


@router.post("/transcribe-media", response_model=TranscribeMediaResponse)
@router.post("/functions/v1/transcribe-media", response_model=TranscribeMediaResponse, include_in_schema=False)
async def transcribe_media(
    request: TranscribeMediaRequest,
    settings: Settings = Depends(get_settings),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
    store: DocumentStore = Depends(get_document_store),
):
    transcriber = MediaTranscriber(
        store=store,
        gateway=gateway,
        model=settings.TRANSCRIPTION_MODEL,
        max_tokens=settings.TRANSCRIPTION_MAX_TOKENS,
    )
    result = await transcriber.transcribe(
        file_path=request.file_path,
        file_type=request.file_type,
        file_name=request.file_name,
        user_id=request.user_id,
    )
    return TranscribeMediaResponse(success=True, transcript=result.preview, full_length=result.full_length)
