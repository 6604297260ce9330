"""Candle (OHLCV) data model."""

from datetime import datetime
from typing import Iterable

from pydantic import BaseModel, Field


class Candle(BaseModel):
    """Represents a single OHLCV candle."""

    time: datetime = Field(..., description="Candle open time")
    open: float = Field(..., ge=0, description="Opening price")
    high: float = Field(..., ge=0, description="High price")
    low: float = Field(..., ge=0, description="Low price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: float = Field(..., ge=0, description="Traded volume")

    model_config = {"frozen": True}


def to_series(candles: Iterable[Candle]) -> list[Candle]:
    """Build a candle series ordered by time with one candle per timestamp.
    
    When two candles share a timestamp the later one in the input wins,
    which matches how exchanges re-send the still-open candle.
    
    Args:
        candles: Candles in any order.
        
    Returns:
        New list sorted by time and deduplicated by time.
    """
    by_time: dict[datetime, Candle] = {}
    for candle in candles:
        by_time[candle.time] = candle
    return [by_time[t] for t in sorted(by_time)]
