"""Composite summary and sentiment models."""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from candlescope.models.results import (
    MACD,
    BollingerBands,
    DeltaVolume,
    Divergence,
    FibonacciLevels,
    Ichimoku,
    KeyLevels,
    MarketStructure,
    OrderBlock,
    PivotPoints,
    Stochastic,
    VolumeProfile,
)


class Trend(str, Enum):
    STRONG_BULLISH = "Strong Bullish"
    BULLISH = "Bullish"
    STRONG_BEARISH = "Strong Bearish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"


class MarketCondition(str, Enum):
    STRONGLY_OVERBOUGHT = "Strongly Overbought"
    OVERBOUGHT = "Overbought"
    STRONGLY_OVERSOLD = "Strongly Oversold"
    OVERSOLD = "Oversold"
    NEUTRAL = "Neutral"


class RiskLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SentimentLabel(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class PriceSnapshot(BaseModel):
    """Latest price information."""

    current: float = Field(..., description="Last close")
    change: float = Field(..., description="% change from the previous close")
    volume: float = Field(..., ge=0, description="Volume of the last candle")
    recent_high: float = Field(..., description="Highest high of the last 24 candles")
    recent_low: float = Field(..., description="Lowest low of the last 24 candles")

    model_config = {"frozen": True}


class MovingAverages(BaseModel):
    """SMA and EMA family used by the summary."""

    sma20: float
    sma50: float
    sma200: float
    ema12: float
    ema26: float
    ema55: float

    model_config = {"frozen": True}


class RSIReading(BaseModel):
    value: float = Field(..., description="RSI value (0-100)")
    divergence: list[Divergence] = Field(default_factory=list)

    model_config = {"frozen": True}


class IndicatorGroup(BaseModel):
    """All oscillator, band and average readings of a summary."""

    moving_averages: MovingAverages
    macd: MACD
    rsi: RSIReading
    stochastic: Stochastic
    bollinger_bands: BollingerBands
    ichimoku: Ichimoku
    atr: float

    model_config = {"frozen": True}


class StructureGroup(BaseModel):
    """Levels and structure derived from highs and lows."""

    support: float
    resistance: float
    order_blocks: list[OrderBlock] = Field(default_factory=list)
    key_levels: KeyLevels
    market_structure: MarketStructure
    fibonacci: FibonacciLevels
    pivot_points: PivotPoints

    model_config = {"frozen": True}


class VolumeGroup(BaseModel):
    profile: VolumeProfile
    cvd: float = Field(..., description="Cumulative volume delta")
    delta: list[DeltaVolume] = Field(default_factory=list)

    model_config = {"frozen": True}


class PatternGroup(BaseModel):
    candles: list[str] = Field(default_factory=list)
    chart: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class TechnicalSummary(BaseModel):
    """Full technical report for a candle series."""

    kind: Literal["summary"] = "summary"
    price: PriceSnapshot
    trend: Trend
    market_condition: MarketCondition
    risk: RiskLevel
    indicators: IndicatorGroup
    structure: StructureGroup
    volume: VolumeGroup
    patterns: PatternGroup
    momentum: float = Field(..., description="% change over the last 14 candles")
    volatility: float = Field(..., ge=0, description="Std-dev of returns in %")
    signals: list[str] = Field(default_factory=list, description="Generated trade signals")

    model_config = {"frozen": True}


class InsufficientData(BaseModel):
    """Returned instead of a summary when the series is too short."""

    kind: Literal["insufficient_data"] = "insufficient_data"
    error: str = Field(..., description="Human readable reason")
    required: int = Field(..., gt=0, description="Minimum number of candles")
    available: int = Field(..., ge=0, description="Number of candles supplied")

    model_config = {"frozen": True}


SummaryResult = Union[TechnicalSummary, InsufficientData]


class Sentiment(BaseModel):
    """Heuristic market sentiment from recent price and volume."""

    overall: SentimentLabel = SentimentLabel.NEUTRAL
    price: SentimentLabel = SentimentLabel.NEUTRAL
    volume: SentimentLabel = SentimentLabel.NEUTRAL

    model_config = {"frozen": True}


class Prediction(BaseModel):
    """Heuristic next-candle move estimate."""

    expected_move: float = Field(default=0.0, description="Expected fractional return")
    confidence: float = Field(default=0.0, ge=0, le=1, description="Confidence (0-1)")
    volatility: Optional[float] = Field(default=None, ge=0, description="Std-dev of returns used")

    model_config = {"frozen": True}
