"""
Gold price fetcher tests.
Providers are simulated with httpx.MockTransport, keyed by host.
"""
from datetime import UTC, datetime

import httpx
import pytest
from hypothesis import given, settings as hypothesis_settings, strategies as st

from src.services.gold_price import (
    TROY_OUNCE_GRAMS,
    GoldPriceFetcher,
    build_price_table,
    is_plausible_price,
)

GOLD_API_HOST = "www.goldapi.io"
FALLBACK_HOST = "api.frankfurter.app"
EXCHANGE_HOST = "api.exchangerate-api.com"


def provider_transport(routes: dict) -> httpx.MockTransport:
    """routes: host -> httpx.Response | Exception; unknown hosts fail to connect."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        outcome = routes.get(request.url.host)
        if outcome is None or isinstance(outcome, Exception):
            raise outcome or httpx.ConnectError("unreachable", request=request)
        return outcome

    transport = httpx.MockTransport(handler)
    transport.seen = seen
    return transport


def expected_money(value: float) -> str:
    return f"{value:.2f}"


@pytest.mark.unit
class TestBuildPriceTable:
    def test_conversion(self):
        table = build_price_table(2000.0, 80.0, now=datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC))

        per_gram_inr = 2000.0 / TROY_OUNCE_GRAMS * 80.0
        assert table["pricePerOunceUSD"] == "2000.00"
        assert table["pricePerGramUSD"] == expected_money(2000.0 / TROY_OUNCE_GRAMS)
        assert table["exchangeRate"] == "80.00"
        assert table["prices"]["24K"]["perGram"] == expected_money(per_gram_inr)
        assert table["prices"]["24K"]["per10Grams"] == expected_money(per_gram_inr * 10)
        assert table["lastUpdated"] == "2025-01-02T03:04:05Z"

    def test_purity_ratios(self):
        table = build_price_table(2400.0, 100.0)
        per_10 = {purity: float(p["per10Grams"]) for purity, p in table["prices"].items()}
        assert per_10["22K"] == pytest.approx(per_10["24K"] * 22 / 24, abs=0.01)
        assert per_10["18K"] == pytest.approx(per_10["24K"] * 18 / 24, abs=0.01)

    @given(
        price=st.floats(min_value=100, max_value=20000, allow_nan=False),
        rate=st.floats(min_value=1, max_value=500, allow_nan=False),
    )
    @hypothesis_settings(max_examples=100)
    def test_purity_ordering_holds(self, price, rate):
        prices = build_price_table(price, rate)["prices"]
        assert float(prices["24K"]["perGram"]) >= float(prices["22K"]["perGram"]) >= float(prices["18K"]["perGram"])
        assert float(prices["24K"]["per10Grams"]) >= float(prices["22K"]["per10Grams"]) >= float(prices["18K"]["per10Grams"])

    @pytest.mark.parametrize("value, plausible", [(2500, True), (100.0, True), (99.9, False), (None, False), (True, False)])
    def test_plausibility(self, value, plausible):
        assert is_plausible_price(value) is plausible


@pytest.mark.unit
class TestGoldPriceFetcher:
    @pytest.mark.asyncio
    async def test_primary_provider(self, settings):
        transport = provider_transport(
            {
                GOLD_API_HOST: httpx.Response(200, json={"price": 2650.5}),
                EXCHANGE_HOST: httpx.Response(200, json={"rates": {"INR": 84.0}}),
            }
        )
        data = await GoldPriceFetcher(settings, transport=transport).fetch()

        assert data["pricePerOunceUSD"] == "2650.50"
        assert data["exchangeRate"] == "84.00"
        assert transport.seen[0].headers["x-access-token"] == settings.GOLD_API_TOKEN
        assert FALLBACK_HOST not in {r.url.host for r in transport.seen}

    @pytest.mark.asyncio
    async def test_secondary_provider_when_primary_fails(self, settings):
        transport = provider_transport(
            {
                GOLD_API_HOST: httpx.Response(500, json={"error": "down"}),
                FALLBACK_HOST: httpx.Response(200, json={"rates": {"USD": 2500}}),
                EXCHANGE_HOST: httpx.Response(200, json={"rates": {"INR": 83.0}}),
            }
        )
        data = await GoldPriceFetcher(settings, transport=transport).fetch()
        assert data["pricePerOunceUSD"] == "2500.00"
        assert data["exchangeRate"] == "83.00"

    @pytest.mark.asyncio
    async def test_constants_when_every_provider_fails(self, settings):
        data = await GoldPriceFetcher(settings, transport=provider_transport({})).fetch()
        assert data["pricePerOunceUSD"] == "2680.00"
        assert data["exchangeRate"] == "83.50"
        assert set(data["prices"]) == {"24K", "22K", "18K"}

    @pytest.mark.asyncio
    async def test_implausible_price_uses_constant(self, settings):
        transport = provider_transport(
            {
                GOLD_API_HOST: httpx.Response(200, json={"price": 42}),
                EXCHANGE_HOST: httpx.Response(200, json={"rates": {"INR": 80.0}}),
            }
        )
        data = await GoldPriceFetcher(settings, transport=transport).fetch()
        assert data["pricePerOunceUSD"] == "2680.00"
        assert data["exchangeRate"] == "80.00"

    @pytest.mark.asyncio
    async def test_bad_exchange_rate_uses_default(self, settings):
        transport = provider_transport(
            {
                GOLD_API_HOST: httpx.Response(200, json={"price": 2700}),
                EXCHANGE_HOST: httpx.Response(200, json={"rates": {"INR": 0}}),
            }
        )
        data = await GoldPriceFetcher(settings, transport=transport).fetch()
        assert data["exchangeRate"] == "83.50"
