"""
Live-Data Aggregator.

Calls the sibling stock, gold, news and politics functions for the sources
an intent asks for, formats each JSON payload as a text summary and joins
them into one context block. Every fetcher swallows its own failure and
contributes an empty string instead.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable

from shared.chat.intent import QueryIntent, active_sources
from shared.clients.functions import FunctionsClient

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 100
MAX_ARTICLES = 5
MAX_MOVERS = 3


def format_timestamp(value: Any) -> str:
    """Render an ISO timestamp as local-style ``YYYY-MM-DD HH:MM:SS``."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def format_stock_summary(data: dict[str, Any]) -> str:
    indices = data.get("indices") or []
    gainers = data.get("topGainers") or []
    losers = data.get("topLosers") or []

    summary = "\n\n📊 LIVE STOCK MARKET DATA:\n"
    if indices:
        summary += "\nMajor Indices:\n"
        for idx in indices:
            arrow = "↑" if idx.get("isPositive") else "↓"
            summary += f"• {idx.get('name')}: {idx.get('price')} ({arrow} {idx.get('changePercent')}%)\n"
    if gainers:
        summary += "\nTop Gainers:\n"
        for stock in gainers[:MAX_MOVERS]:
            summary += f"• {stock.get('symbol')}: {stock.get('price')} (↑ {stock.get('changePercent')}%)\n"
    if losers:
        summary += "\nTop Losers:\n"
        for stock in losers[:MAX_MOVERS]:
            summary += f"• {stock.get('symbol')}: {stock.get('price')} (↓ {stock.get('changePercent')}%)\n"
    summary += f"\nLast Updated: {format_timestamp(data.get('lastUpdated'))}"
    return summary


def format_gold_summary(data: dict[str, Any]) -> str:
    prices = data["prices"]
    summary = "\n\n🥇 LIVE GOLD PRICES:\n"
    summary += f"\nInternational Price: ${data.get('pricePerOunceUSD')}/oz\n"
    summary += f"Exchange Rate: ₹{data.get('exchangeRate')}/USD\n"
    summary += "\nIndian Gold Prices (per 10 grams):\n"
    summary += f"• 24K (Pure): ₹{prices['24K']['per10Grams']}\n"
    summary += f"• 22K: ₹{prices['22K']['per10Grams']}\n"
    summary += f"• 18K: ₹{prices['18K']['per10Grams']}\n"
    summary += f"\nLast Updated: {format_timestamp(data.get('lastUpdated'))}"
    return summary


def _format_articles(header: str, data: dict[str, Any], with_region: bool) -> str:
    summary = header
    for index, article in enumerate(data["articles"][:MAX_ARTICLES], start=1):
        summary += f"\n{index}. {article.get('title')}\n"
        if article.get("description"):
            summary += f"   {article['description'][:DESCRIPTION_LIMIT]}...\n"
        if with_region:
            summary += f"   Source: {article.get('source')} | Region: {article.get('region')}\n"
        else:
            summary += f"   Source: {article.get('source')}\n"
    summary += f"\nLast Updated: {format_timestamp(data.get('lastUpdated'))}"
    return summary


def format_news_summary(data: dict[str, Any]) -> str:
    return _format_articles("\n\n📰 LATEST NEWS:\n", data, with_region=False)


def format_politics_summary(data: dict[str, Any]) -> str:
    return _format_articles("\n\n🏛️ POLITICAL UPDATES:\n", data, with_region=True)


# source -> (function name, data source label, formatter, required data key)
LIVE_SOURCES: dict[str, tuple[str, str, Callable[[dict[str, Any]], str], str | None]] = {
    "stock": ("stock-market", "Live Stock Market API", format_stock_summary, None),
    "gold": ("gold-prices", "Live Gold Price API", format_gold_summary, None),
    "news": ("latest-news", "Live News API", format_news_summary, "articles"),
    "politics": ("politics", "Live Politics API", format_politics_summary, "articles"),
}


class LiveDataAggregator:
    """Concurrent fan-out to sibling functions for one chat turn."""

    def __init__(self, client: FunctionsClient):
        self.client = client

    async def fetch_summary(self, source: str) -> str:
        function_name, _, formatter, required_key = LIVE_SOURCES[source]
        try:
            payload = await self.client.fetch_json(function_name)
            data = payload.get("data") if isinstance(payload, dict) else None
            if not payload.get("success") or not data:
                return ""
            if required_key and not data.get(required_key):
                return ""
            return formatter(data)
        except Exception as e:
            logger.error("Error fetching %s data: %s", source, e)
            return ""

    async def gather(self, intent: QueryIntent) -> tuple[str, list[str]]:
        """
        Fetch every source the intent asks for.

        Returns the joined context and the labels of the sources queried.
        """
        sources = active_sources(intent)
        if not sources:
            return "", []

        tasks: list[Awaitable[str]] = [self.fetch_summary(source) for source in sources]
        labels = [LIVE_SOURCES[source][1] for source in sources]
        try:
            results = await asyncio.gather(*tasks)
        finally:
            await self.client.close()

        context = "\n".join(result for result in results if result)
        return context, labels
