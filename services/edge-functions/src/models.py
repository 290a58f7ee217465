"""
Request and response models for the edge-function endpoints.

Wire names are camelCase (the browser client sends ``filePath``,
``languagePreference`` ...); Python attributes are snake_case.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# Gold prices
# =============================================================================


class PurityPrice(BaseModel):
    perGram: str
    per10Grams: str


class GoldPriceData(BaseModel):
    pricePerOunceUSD: str
    pricePerGramUSD: str
    exchangeRate: str
    prices: dict[str, PurityPrice]
    lastUpdated: str


class GoldPriceResponse(BaseModel):
    success: Literal[True] = True
    data: GoldPriceData


# =============================================================================
# Hybrid chat
# =============================================================================


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str
    content: Any = ""


class DocumentExcerpt(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    content: Optional[str] = None


class HybridChatRequest(CamelModel):
    messages: list[ChatMessage] = Field(min_length=1)
    documents: list[DocumentExcerpt] = Field(default_factory=list)
    language_preference: Optional[str] = Field(default=None, alias="languagePreference")


# =============================================================================
# Media transcription
# =============================================================================


class TranscribeMediaRequest(CamelModel):
    file_path: str = Field(alias="filePath")
    file_type: str = Field(alias="fileType")
    file_name: str = Field(default="", alias="fileName")
    user_id: str = Field(alias="userId")


class TranscribeMediaResponse(CamelModel):
    success: bool = True
    transcript: str
    full_length: int = Field(alias="fullLength")
