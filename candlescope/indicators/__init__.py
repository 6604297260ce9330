"""Technical indicators module."""

from candlescope.indicators.patterns import (
    detect_divergence,
    find_candle_patterns,
    find_chart_patterns,
)
from candlescope.indicators.structure import (
    analyze_market_structure,
    calculate_fibonacci_levels,
    calculate_pivot_points,
    find_key_levels,
    find_order_blocks,
    find_price_clusters,
    find_support_resistance,
    find_swing_points,
)
from candlescope.indicators.summary import (
    calculate_risk_level,
    classify_market_condition,
    classify_trend,
    determine_trend,
    generate_signals,
    get_summary,
)
from candlescope.indicators.technical import (
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_ichimoku,
    calculate_macd,
    calculate_momentum,
    calculate_rsi,
    calculate_sma,
    calculate_std_dev,
    calculate_stochastic,
    calculate_volatility,
    true_ranges,
)
from candlescope.indicators.volume import (
    analyze_delta_volume,
    calculate_cvd,
    calculate_volume_profile,
)

__all__ = [
    "analyze_delta_volume",
    "analyze_market_structure",
    "calculate_atr",
    "calculate_bollinger_bands",
    "calculate_cvd",
    "calculate_ema",
    "calculate_fibonacci_levels",
    "calculate_ichimoku",
    "calculate_macd",
    "calculate_momentum",
    "calculate_pivot_points",
    "calculate_risk_level",
    "calculate_rsi",
    "calculate_sma",
    "calculate_std_dev",
    "calculate_stochastic",
    "calculate_volatility",
    "calculate_volume_profile",
    "classify_market_condition",
    "classify_trend",
    "detect_divergence",
    "determine_trend",
    "find_candle_patterns",
    "find_chart_patterns",
    "find_key_levels",
    "find_order_blocks",
    "find_price_clusters",
    "find_support_resistance",
    "find_swing_points",
    "generate_signals",
    "get_summary",
    "true_ranges",
]
