"""Domain logic behind the edge-function routers."""

from .gold_price import GoldPriceFetcher, build_price_table
from .live_data import LiveDataAggregator
from .transcription import MediaTranscriber, TranscriptionResult

__all__ = [
    "GoldPriceFetcher",
    "LiveDataAggregator",
    "MediaTranscriber",
    "TranscriptionResult",
    "build_price_table",
]
