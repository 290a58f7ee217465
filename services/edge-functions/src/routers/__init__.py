"""
Routers package for the edge functions.

Routers:
- health: Health checks and status
- gold_prices: Gold price table by purity
- hybrid_chat: Strict RAG chat streamed from the AI gateway
- transcribe_media: Audio/video transcription into the document row
"""

from .gold_prices import router as gold_prices_router
from .health import router as health_router
from .hybrid_chat import router as hybrid_chat_router
from .transcribe_media import router as transcribe_media_router

__all__ = [
    "gold_prices_router",
    "health_router",
    "hybrid_chat_router",
    "transcribe_media_router",
]
