"""Intent detection and prompt assembly for the hybrid RAG chat."""

from .intent import (
    QueryIntent,
    active_sources,
    detect_intent,
    detect_language,
    latest_user_query,
    match_keywords,
)
from .prompts import (
    NO_INFO_MESSAGE,
    build_document_context,
    build_system_prompt,
    has_document_content,
    resolve_language,
)

__all__ = [
    "QueryIntent",
    "active_sources",
    "detect_intent",
    "detect_language",
    "latest_user_query",
    "match_keywords",
    "NO_INFO_MESSAGE",
    "build_document_context",
    "build_system_prompt",
    "has_document_content",
    "resolve_language",
]
