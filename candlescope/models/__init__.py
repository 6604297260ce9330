"""Data models for candlescope."""

from candlescope.models.candle import Candle, to_series
from candlescope.models.results import (
    MACD,
    BollingerBands,
    DeltaVolume,
    Direction,
    Divergence,
    DivergenceIndicator,
    DivergenceType,
    FibonacciLevels,
    Ichimoku,
    KeyLevels,
    MarketStructure,
    OrderBlock,
    OrderBlockKind,
    PivotPoints,
    Stochastic,
    StructureTrend,
    SupportResistance,
    SwingKind,
    SwingPoint,
    VolumeProfile,
)
from candlescope.models.summary import (
    InsufficientData,
    MarketCondition,
    Prediction,
    RiskLevel,
    Sentiment,
    SentimentLabel,
    SummaryResult,
    TechnicalSummary,
    Trend,
)

__all__ = [
    "Candle",
    "to_series",
    "BollingerBands",
    "DeltaVolume",
    "Direction",
    "Divergence",
    "DivergenceIndicator",
    "DivergenceType",
    "FibonacciLevels",
    "Ichimoku",
    "KeyLevels",
    "MACD",
    "MarketStructure",
    "OrderBlock",
    "OrderBlockKind",
    "PivotPoints",
    "Stochastic",
    "StructureTrend",
    "SupportResistance",
    "SwingKind",
    "SwingPoint",
    "VolumeProfile",
    "InsufficientData",
    "MarketCondition",
    "Prediction",
    "RiskLevel",
    "Sentiment",
    "SentimentLabel",
    "SummaryResult",
    "TechnicalSummary",
    "Trend",
]
