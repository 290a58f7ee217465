"""
Gold Prices Router - current gold price table by purity.
"""

import logging

import httpx
from fastapi import APIRouter, Depends

from shared.config import Settings, get_settings
from src.dependencies import get_http_transport
from src.models import GoldPriceResponse
from src.services.gold_price import GoldPriceFetcher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gold-prices"])


@router.get("/gold-prices", response_model=GoldPriceResponse)
@router.get("/functions/v1/gold-prices", response_model=GoldPriceResponse, include_in_schema=False)
async def gold_prices(
    settings: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
):
    """Best-effort gold prices; provider outages fall back to constants."""
    fetcher = GoldPriceFetcher(settings, transport=transport)
    data = await fetcher.fetch()
    return {"success": True, "data": data}
