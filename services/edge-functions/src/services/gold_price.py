"""
Gold Price Fetcher.

Resolves the international gold price (USD per troy ounce) from a chain of
providers, converts it to INR per gram and per 10 grams, and prices the
24K/22K/18K purity tiers. Provider failures never escape this module: each
step degrades to the next provider and finally to configured constants.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import httpx

from shared.clients.base import BaseServiceClient
from shared.config import Settings

logger = logging.getLogger(__name__)

TROY_OUNCE_GRAMS = 31.1035
MIN_PLAUSIBLE_PRICE_USD = 100.0

PURITY_FRACTIONS: dict[str, float] = {
    "24K": 24 / 24,
    "22K": 22 / 24,
    "18K": 18 / 24,
}


@dataclass(frozen=True)
class GoldQuote:
    """Inputs of one price table."""

    price_per_ounce_usd: float
    usd_to_inr: float
    primary_source: str


def _money(value: float) -> str:
    return f"{value:.2f}"


def is_plausible_price(price: Any) -> bool:
    return isinstance(price, int | float) and not isinstance(price, bool) and price >= MIN_PLAUSIBLE_PRICE_USD


def build_price_table(price_per_ounce_usd: float, usd_to_inr: float, now: datetime | None = None) -> dict[str, Any]:
    """
    Convert an ounce price and exchange rate into the response payload.

    Every purity tier derives from the same per-gram price, so
    24K >= 22K >= 18K holds for any positive input.
    """
    price_per_gram_usd = price_per_ounce_usd / TROY_OUNCE_GRAMS
    price_per_gram_inr = price_per_gram_usd * usd_to_inr
    price_per_10_grams_inr = price_per_gram_inr * 10

    prices = {
        purity: {
            "perGram": _money(price_per_gram_inr * fraction),
            "per10Grams": _money(price_per_10_grams_inr * fraction),
        }
        for purity, fraction in PURITY_FRACTIONS.items()
    }

    return {
        "pricePerOunceUSD": _money(price_per_ounce_usd),
        "pricePerGramUSD": _money(price_per_gram_usd),
        "exchangeRate": _money(usd_to_inr),
        "prices": prices,
        "lastUpdated": (now or datetime.now(UTC)).isoformat().replace("+00:00", "Z"),
    }


class GoldPriceFetcher:
    """Provider chain: primary gold API, secondary rate API, constant."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.client = BaseServiceClient(
            base_url="",
            service_name="gold-prices",
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def _primary_price(self) -> float | None:
        try:
            response = await self.client.get(
                self.settings.GOLD_API_URL,
                headers={"x-access-token": self.settings.GOLD_API_TOKEN},
            )
            if response.is_success:
                price = response.json().get("price")
                if price:
                    return price
        except Exception as e:
            logger.info("Primary gold API failed, trying fallback: %s", e)
        return None

    async def _secondary_price(self) -> float | None:
        try:
            response = await self.client.get(self.settings.GOLD_FALLBACK_URL)
            if response.is_success:
                # 1 XAU expressed in USD, i.e. price per troy ounce
                price = (response.json().get("rates") or {}).get("USD")
                if price:
                    return price
        except Exception as e:
            logger.info("Fallback gold API also failed: %s", e)
        return None

    async def _usd_to_inr(self) -> float:
        try:
            response = await self.client.get(self.settings.EXCHANGE_RATE_URL)
            if response.is_success:
                rate = (response.json().get("rates") or {}).get("INR")
                if isinstance(rate, int | float) and rate > 0:
                    return float(rate)
        except Exception as e:
            logger.info("Exchange rate API failed, using default rate: %s", e)
        return self.settings.FALLBACK_USD_INR

    async def quote(self) -> GoldQuote:
        source = "primary"
        price = await self._primary_price()
        if not price:
            source = "secondary"
            price = await self._secondary_price()
        if not is_plausible_price(price):
            logger.warning("No plausible gold price from providers (%r); using constant", price)
            source = "constant"
            price = self.settings.FALLBACK_GOLD_PRICE_USD

        return GoldQuote(
            price_per_ounce_usd=float(price),
            usd_to_inr=await self._usd_to_inr(),
            primary_source=source,
        )

    async def fetch(self) -> dict[str, Any]:
        """Return the price table for the current quote."""
        try:
            quote = await self.quote()
        finally:
            await self.client.close()
        logger.info(
            "Gold price resolved from %s: $%.2f/oz at %.2f INR/USD",
            quote.primary_source,
            quote.price_per_ounce_usd,
            quote.usd_to_inr,
        )
        return build_price_table(quote.price_per_ounce_usd, quote.usd_to_inr)
