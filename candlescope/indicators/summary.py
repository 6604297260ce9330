"""Composite technical summary.

``get_summary`` runs every indicator over its customary window of the
series and derives trend, market condition, risk and trade signals from
the results.
"""

import logging
from typing import Sequence

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
    find_support_resistance,
)
from candlescope.indicators.technical import (
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_ichimoku,
    calculate_momentum,
    calculate_rsi,
    calculate_sma,
    calculate_stochastic,
    calculate_volatility,
)
from candlescope.indicators.volume import (
    analyze_delta_volume,
    calculate_cvd,
    calculate_volume_profile,
)
from candlescope.models import (
    MACD,
    BollingerBands,
    Candle,
    DivergenceIndicator,
    InsufficientData,
    MarketCondition,
    RiskLevel,
    Stochastic,
    SummaryResult,
    TechnicalSummary,
    Trend,
)
from candlescope.models.summary import (
    IndicatorGroup,
    MovingAverages,
    PatternGroup,
    PriceSnapshot,
    RSIReading,
    StructureGroup,
    VolumeGroup,
)

logger = logging.getLogger(__name__)

MIN_SUMMARY_CANDLES = 200

# Window sizes used by the summary
RECENT_WINDOW = 100
SHORT_WINDOW = 14
DIVERGENCE_WINDOW = 50
VOLUME_WINDOW = 50
PATTERN_WINDOW = 5
SNAPSHOT_WINDOW = 24


# =============================================================================
# CLASSIFICATION
# =============================================================================


def classify_trend(close: float, sma50: float, sma200: float) -> Trend:
    """Classify trend from price and the 50/200 SMAs.

    Strong variants are checked before the weak ones:

    - Strong Bullish: close > SMA50, close > SMA200 and SMA50 > SMA200
    - Bullish: close > SMA50 and SMA50 > SMA200
    - Strong Bearish: none of the three comparisons hold
    - Bearish: close <= SMA50 and SMA50 <= SMA200
    - Neutral otherwise
    """
    above_sma50 = close > sma50
    above_sma200 = close > sma200
    golden = sma50 > sma200

    if above_sma50 and above_sma200 and golden:
        return Trend.STRONG_BULLISH
    if above_sma50 and golden:
        return Trend.BULLISH
    if not above_sma50 and not above_sma200 and not golden:
        return Trend.STRONG_BEARISH
    if not above_sma50 and not golden:
        return Trend.BEARISH
    return Trend.NEUTRAL


def determine_trend(series: Sequence[Candle]) -> Trend:
    """Trend of a series from its last close, SMA50 and SMA200."""
    if not series:
        return Trend.NEUTRAL

    return classify_trend(
        series[-1].close,
        calculate_sma(series[-50:], 50),
        calculate_sma(series[-200:], 200),
    )


def classify_market_condition(rsi: float, stoch_k: float, stoch_d: float) -> MarketCondition:
    """Overbought/oversold reading from RSI and the stochastic lines."""
    if rsi > 70 and stoch_k > 80 and stoch_d > 80:
        return MarketCondition.STRONGLY_OVERBOUGHT
    if rsi > 60 and stoch_k > 70:
        return MarketCondition.OVERBOUGHT
    if rsi < 30 and stoch_k < 20 and stoch_d < 20:
        return MarketCondition.STRONGLY_OVERSOLD
    if rsi < 40 and stoch_k < 30:
        return MarketCondition.OVERSOLD
    return MarketCondition.NEUTRAL


def calculate_risk_level(rsi: float, volatility: float, momentum: float, atr: float) -> RiskLevel:
    """Score risk from four indicators.

    Each indicator contributes 2 when it is in a risky zone and 1 otherwise:
    RSI outside [30, 70], volatility above 5%, absolute momentum above 10%
    and ATR above 100. The contributions are averaged.

    Returns:
        high above 1.5, medium above 1.0, low otherwise.
    """
    score = (
        (2 if rsi > 70 or rsi < 30 else 1)
        + (2 if volatility > 5 else 1)
        + (2 if abs(momentum) > 10 else 1)
        + (2 if atr > 100 else 1)
    ) / 4

    if score > 1.5:
        return RiskLevel.HIGH
    if score > 1.0:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def generate_signals(
    price: float,
    trend: Trend,
    rsi: float,
    stochastic: Stochastic,
    bands: BollingerBands,
) -> list[str]:
    """Generate trade signals from fixed threshold rules.

    Rules are evaluated in a fixed order and every rule that fires adds its
    signal.
    """
    signals = []

    if rsi < 30 and trend != Trend.STRONG_BEARISH:
        signals.append("RSI Oversold - Potential Buy")

    if rsi > 70 and trend != Trend.STRONG_BULLISH:
        signals.append("RSI Overbought - Potential Sell")

    if stochastic.k < stochastic.d and stochastic.k < 20 and stochastic.d < 20:
        signals.append("Stochastic Oversold - Watch for Bull Cross")

    if stochastic.k > stochastic.d and stochastic.k > 80 and stochastic.d > 80:
        signals.append("Stochastic Overbought - Watch for Bear Cross")

    if price < bands.lower:
        signals.append("Price below Lower Bollinger Band - Potential Buy")

    if price > bands.upper:
        signals.append("Price above Upper Bollinger Band - Potential Sell")

    return signals


# =============================================================================
# SUMMARY
# =============================================================================


def _price_snapshot(series: Sequence[Candle]) -> PriceSnapshot:
    last, prev = series[-1], series[-2]
    recent = series[-SNAPSHOT_WINDOW:]

    change = 0.0
    if prev.close != 0:
        change = (last.close - prev.close) / prev.close * 100

    return PriceSnapshot(
        current=last.close,
        change=change,
        volume=last.volume,
        recent_high=max(c.high for c in recent),
        recent_low=min(c.low for c in recent),
    )


def get_summary(series: Sequence[Candle], volume_levels: int = 10) -> SummaryResult:
    """Build a full technical summary for a candle series.

    Args:
        series: Candle series, oldest first
        volume_levels: Number of volume profile buckets

    Returns:
        TechnicalSummary, or InsufficientData when fewer than 200 candles
        are supplied.
    """
    if len(series) < MIN_SUMMARY_CANDLES:
        logger.debug("Summary needs %d candles, got %d", MIN_SUMMARY_CANDLES, len(series))
        return InsufficientData(
            error="Not enough data for reliable analysis",
            required=MIN_SUMMARY_CANDLES,
            available=len(series),
        )

    recent = series[-RECENT_WINDOW:]
    short_term = series[-SHORT_WINDOW:]
    price = series[-1].close

    averages = MovingAverages(
        sma20=calculate_sma(series[-20:], 20),
        sma50=calculate_sma(series[-50:], 50),
        sma200=calculate_sma(series[-200:], 200),
        ema12=calculate_ema(series[-12:], 12),
        ema26=calculate_ema(series[-26:], 26),
        ema55=calculate_ema(series[-55:], 55),
    )

    # Signal line is the EMA of a constant MACD line, i.e. the line itself
    macd_line = averages.ema12 - averages.ema26
    macd = MACD(macd=macd_line, signal=macd_line, histogram=0.0)

    rsi = calculate_rsi(recent)
    stochastic = calculate_stochastic(recent)
    bands = calculate_bollinger_bands(series[-20:])
    momentum = calculate_momentum(short_term)
    volatility = calculate_volatility(short_term)
    atr = calculate_atr(short_term)

    levels = find_support_resistance(recent)
    trend = classify_trend(price, averages.sma50, averages.sma200)
    prev = series[-2]

    logger.debug("Summary for %d candles: trend=%s rsi=%.2f", len(series), trend.value, rsi)

    return TechnicalSummary(
        price=_price_snapshot(series),
        trend=trend,
        market_condition=classify_market_condition(rsi, stochastic.k, stochastic.d),
        risk=calculate_risk_level(rsi, volatility, momentum, atr),
        indicators=IndicatorGroup(
            moving_averages=averages,
            macd=macd,
            rsi=RSIReading(
                value=rsi,
                divergence=detect_divergence(
                    series[-DIVERGENCE_WINDOW:], DivergenceIndicator.RSI
                ),
            ),
            stochastic=stochastic,
            bollinger_bands=bands,
            ichimoku=calculate_ichimoku(series[-52:]),
            atr=atr,
        ),
        structure=StructureGroup(
            support=levels.support,
            resistance=levels.resistance,
            order_blocks=levels.order_blocks,
            key_levels=find_key_levels(series),
            market_structure=analyze_market_structure(recent),
            fibonacci=calculate_fibonacci_levels(levels.resistance, levels.support),
            pivot_points=calculate_pivot_points(prev.high, prev.low, prev.close),
        ),
        volume=VolumeGroup(
            profile=calculate_volume_profile(series[-VOLUME_WINDOW:], volume_levels),
            cvd=calculate_cvd(recent),
            delta=analyze_delta_volume(series[-VOLUME_WINDOW:]),
        ),
        patterns=PatternGroup(
            candles=find_candle_patterns(series[-PATTERN_WINDOW:]),
            chart=find_chart_patterns(recent),
        ),
        momentum=momentum,
        volatility=volatility,
        signals=generate_signals(price, trend, rsi, stochastic, bands),
    )
