"""Indicator result models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OrderBlockKind(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"


class SwingKind(str, Enum):
    HIGH = "high"
    LOW = "low"


class StructureTrend(str, Enum):
    UPTREND = "uptrend"
    DOWNTREND = "downtrend"
    NEUTRAL = "neutral"


class DivergenceIndicator(str, Enum):
    """Indicator a price divergence is measured against."""

    RSI = "rsi"
    MACD = "macd"


class DivergenceType(str, Enum):
    REGULAR = "regular"
    HIDDEN = "hidden"


class Direction(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"


class BollingerBands(BaseModel):
    """Bollinger Bands around a simple moving average."""

    upper: float = Field(..., description="Upper band")
    middle: float = Field(..., description="Middle band (SMA)")
    lower: float = Field(..., description="Lower band")
    std_dev: float = Field(..., ge=0, description="Standard deviation used for the bands")

    model_config = {"frozen": True}


class Stochastic(BaseModel):
    """Smoothed stochastic oscillator lines."""

    k: float = Field(..., description="Smoothed %K")
    d: float = Field(..., description="Signal line %D")

    model_config = {"frozen": True}


class MACD(BaseModel):
    """MACD line, signal line and histogram."""

    macd: float = Field(..., description="Fast EMA minus slow EMA")
    signal: float = Field(..., description="Signal line")
    histogram: float = Field(..., description="MACD minus signal")

    model_config = {"frozen": True}


class Ichimoku(BaseModel):
    """Ichimoku cloud components for the latest candle."""

    tenkan_sen: float = Field(..., description="Conversion line (9)")
    kijun_sen: float = Field(..., description="Base line (26)")
    senkou_span_a: float = Field(..., description="Leading span A")
    senkou_span_b: float = Field(..., description="Leading span B (52)")
    chikou_span: Optional[float] = Field(
        default=None, description="Close 26 candles back, if available"
    )

    model_config = {"frozen": True}


class OrderBlock(BaseModel):
    """Price range of the candle that handed off to a momentum break."""

    kind: OrderBlockKind = Field(..., description="Direction of the break")
    top: float = Field(..., description="High of the originating candle")
    bottom: float = Field(..., description="Low of the originating candle")
    time: datetime = Field(..., description="Time of the originating candle")

    model_config = {"frozen": True}


class SupportResistance(BaseModel):
    """Range extremes of a window together with its order blocks."""

    support: float = Field(..., description="Lowest low of the window")
    resistance: float = Field(..., description="Highest high of the window")
    order_blocks: list[OrderBlock] = Field(default_factory=list)

    model_config = {"frozen": True}


class SwingPoint(BaseModel):
    """A three-candle local extremum."""

    kind: SwingKind
    price: float
    time: datetime

    model_config = {"frozen": True}


class MarketStructure(BaseModel):
    """Swing points and the trend they imply."""

    swing_points: list[SwingPoint] = Field(default_factory=list)
    trend: StructureTrend = Field(..., description="Trend from the last two swings")
    strength: float = Field(..., ge=0, description="Absolute % move across the window")

    model_config = {"frozen": True}


class KeyLevels(BaseModel):
    """Clustered support and resistance levels around the current price."""

    support: list[float] = Field(default_factory=list, description="Nearest first")
    resistance: list[float] = Field(default_factory=list, description="Nearest first")

    model_config = {"frozen": True}


class FibonacciLevels(BaseModel):
    """Fibonacci retracement levels measured up from the low."""

    level_0: float
    level_236: float
    level_382: float
    level_500: float
    level_618: float
    level_786: float
    level_1000: float

    model_config = {"frozen": True}


class PivotPoints(BaseModel):
    """Classic floor pivot points."""

    pivot: float
    r1: float
    r2: float
    r3: float
    s1: float
    s2: float
    s3: float

    model_config = {"frozen": True}


class VolumeProfile(BaseModel):
    """Volume accumulated into equal-width price buckets."""

    profile: list[float] = Field(..., description="Volume per bucket, lowest price first")
    poc: float = Field(..., description="Lower bound of the fullest bucket")
    value_area: float = Field(..., ge=0, description="70% of the total bucketed volume")

    model_config = {"frozen": True}


class DeltaVolume(BaseModel):
    """Signed volume of one candle and the running total up to it."""

    time: datetime
    delta: float
    cumulative: float

    model_config = {"frozen": True}


class Divergence(BaseModel):
    """Disagreement between price direction and indicator direction."""

    type: DivergenceType
    direction: Direction

    model_config = {"frozen": True}
