"""Query intent and response-language detection for hybrid chat."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

STOCK_KEYWORDS: Sequence[str] = (
    # English
    "stock", "stocks", "market", "share", "shares", "nifty", "sensex", "dow", "nasdaq", "s&p",
    "trading", "invest", "portfolio", "equity", "bull", "bear", "ipo", "dividend",
    # Hindi/Hinglish
    "शेयर", "बाजार", "निफ्टी", "सेंसेक्स", "स्टॉक", "निवेश", "share bazaar", "stock market kya hai",
    # Urdu
    "حصص", "مارکیٹ", "سرمایہ کاری",
)

GOLD_KEYWORDS: Sequence[str] = (
    "gold", "gold price", "gold rate", "bullion", "precious metal", "24k", "22k", "18k",
    "karat", "carat", "jewel", "jewelry",
    "सोना", "सोने का भाव", "सोने की कीमत", "gold rate kya hai", "aaj sona kitne ka hai", "sona",
    "gold ka rate",
    "سونا", "سونے کی قیمت", "طلائی",
)

NEWS_KEYWORDS: Sequence[str] = (
    "news", "latest", "headlines", "breaking", "current events", "happening", "today", "recent",
    "update", "updates",
    "खबर", "समाचार", "ताजा खबर", "ब्रेकिंग न्यूज", "aaj ki khabar", "latest news kya hai", "kya hua aaj",
    "خبر", "تازہ خبریں", "آج کی خبر",
)

POLITICS_KEYWORDS: Sequence[str] = (
    "politics", "political", "election", "government", "parliament", "congress", "minister",
    "president", "prime minister", "policy", "vote", "voting", "campaign", "party", "democrat",
    "republican", "bjp", "legislation",
    "राजनीति", "चुनाव", "सरकार", "संसद", "मंत्री", "प्रधानमंत्री", "मोदी", "राहुल", "election kab hai",
    "politics kya hai",
    "سیاست", "انتخابات", "حکومت", "پارلیمنٹ", "وزیر اعظم",
)

KEYWORD_CATEGORIES: Dict[str, Sequence[str]] = {
    "stock": STOCK_KEYWORDS,
    "gold": GOLD_KEYWORDS,
    "news": NEWS_KEYWORDS,
    "politics": POLITICS_KEYWORDS,
}

DEVANAGARI_PATTERN = re.compile(r"[\u0900-\u097F]")
ARABIC_PATTERN = re.compile(r"[\u0600-\u06FF\u0750-\u077F]")
HINGLISH_PATTERN = re.compile(
    r"\b(kya|hai|hain|kaise|kab|kitna|kitne|aaj|kal|mein|ka|ki|ke|ko|se|par|aur|ya|nahi|nahin|"
    r"bahut|accha|theek|sab|bhi|yeh|woh|kuch|kaisa|kaisi|kahan|kyun|abhi|phir|lekin|magar|toh|"
    r"na|ji|haan|arre|yaar|bhai|dost)\b",
    re.IGNORECASE,
)

SUPPORTED_LANGUAGES = ("english", "hindi", "hinglish", "urdu")


@dataclass(frozen=True)
class QueryIntent:
    needs_stock_data: bool = False
    needs_gold_data: bool = False
    needs_news_data: bool = False
    needs_politics_data: bool = False
    needs_rag: bool = True
    detected_language: str = "english"

    @property
    def needs_live_data(self) -> bool:
        return any(
            (self.needs_stock_data, self.needs_gold_data, self.needs_news_data, self.needs_politics_data)
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "needsStockData": self.needs_stock_data,
            "needsGoldData": self.needs_gold_data,
            "needsNewsData": self.needs_news_data,
            "needsPoliticsData": self.needs_politics_data,
            "needsRAG": self.needs_rag,
            "detectedLanguage": self.detected_language,
        }


def detect_language(text: str) -> str:
    """Pick the response language from script ranges, then Hinglish vocabulary."""
    text = text or ""
    if DEVANAGARI_PATTERN.search(text):
        return "hindi"
    if ARABIC_PATTERN.search(text):
        return "urdu"
    if HINGLISH_PATTERN.search(text):
        return "hinglish"
    return "english"


def match_keywords(text: str) -> Dict[str, bool]:
    """Case-insensitive substring match of the query against each keyword list."""
    lowered = (text or "").lower()
    return {
        category: any(keyword.lower() in lowered for keyword in keywords)
        for category, keywords in KEYWORD_CATEGORIES.items()
    }


def detect_intent(query: str, live_data: bool = False) -> QueryIntent:
    """
    Decide which sources a chat turn needs.

    Document retrieval is always requested. Keyword matches only turn on the
    live-data sources when ``live_data`` is enabled; in strict RAG mode every
    query is answered from uploaded documents alone.
    """
    language = detect_language(query)
    if not live_data:
        return QueryIntent(detected_language=language)

    matches = match_keywords(query)
    return QueryIntent(
        needs_stock_data=matches["stock"],
        needs_gold_data=matches["gold"],
        needs_news_data=matches["news"],
        needs_politics_data=matches["politics"],
        needs_rag=True,
        detected_language=language,
    )


def latest_user_query(messages: Optional[Sequence[Dict[str, Any]]]) -> str:
    """Return the content of the most recent user message."""
    for message in reversed(list(messages or [])):
        if message.get("role") == "user":
            content = message.get("content")
            return content if isinstance(content, str) else ""
    return ""


def active_sources(intent: QueryIntent) -> List[str]:
    """Names of the live-data functions an intent asks for, in fetch order."""
    sources = []
    if intent.needs_stock_data:
        sources.append("stock")
    if intent.needs_gold_data:
        sources.append("gold")
    if intent.needs_news_data:
        sources.append("news")
    if intent.needs_politics_data:
        sources.append("politics")
    return sources
