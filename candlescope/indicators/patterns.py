"""Candlestick patterns, chart patterns and divergences."""

from typing import Sequence

from candlescope.indicators.technical import calculate_ema, calculate_rsi
from candlescope.models import (
    Candle,
    Direction,
    Divergence,
    DivergenceIndicator,
    DivergenceType,
)


# Relative tolerance for "equal" peaks and troughs
PATTERN_TOLERANCE = 0.02


def _is_doji(candle: Candle) -> bool:
    full_range = candle.high - candle.low
    if full_range == 0:
        return False
    return abs(candle.close - candle.open) / full_range < 0.1


def _wicks(candle: Candle) -> tuple[float, float, float]:
    """Return (body, upper wick, lower wick)."""
    body = abs(candle.close - candle.open)
    upper = candle.high - max(candle.open, candle.close)
    lower = min(candle.open, candle.close) - candle.low
    return body, upper, lower


def find_candle_patterns(series: Sequence[Candle]) -> list[str]:
    """Classify the last candle, and the last two candles together.

    Checks run in a fixed order and every match is reported:
    Doji, Hammer, Shooting Star, Bullish Engulfing, Bearish Engulfing.

    Args:
        series: Candle window, only the last two candles are used

    Returns:
        Pattern names, empty with fewer than two candles.
    """
    if len(series) < 2:
        return []

    prev, last = series[-2], series[-1]
    body, upper, lower = _wicks(last)
    patterns = []

    if _is_doji(last):
        patterns.append("Doji")

    if lower > body * 2 and upper < body * 0.5 and last.close > last.open:
        patterns.append("Hammer")

    # Measured from the open: long upper shadow, small body relative to it
    if (
        last.close < last.open
        and last.high - last.open > (last.open - last.low) * 2
        and last.open - last.close < (last.high - last.open) * 0.3
    ):
        patterns.append("Shooting Star")

    if (
        prev.close < prev.open
        and last.close > last.open
        and last.open < prev.close
        and last.close > prev.open
    ):
        patterns.append("Bullish Engulfing")

    if (
        prev.close > prev.open
        and last.close < last.open
        and last.open > prev.close
        and last.close < prev.open
    ):
        patterns.append("Bearish Engulfing")

    return patterns


def _roughly_equal(first: float, second: float) -> bool:
    return first != 0 and abs(first - second) / first < PATTERN_TOLERANCE


def find_chart_patterns(series: Sequence[Candle]) -> list[str]:
    """Scan for Head and Shoulders, Double Top and Double Bottom.

    Peaks are sampled every other candle. Each pattern type is reported at
    most once, at its first occurrence.

    Returns:
        Pattern names in the order listed above.
    """
    highs = [c.high for c in series]
    lows = [c.low for c in series]
    patterns = []

    for i in range(len(highs) - 5):
        left, head, right = highs[i], highs[i + 2], highs[i + 4]
        if head > left and head > right and _roughly_equal(left, right):
            patterns.append("Head and Shoulders")
            break

    for i in range(len(highs) - 3):
        first, second = highs[i], highs[i + 2]
        if _roughly_equal(first, second) and highs[i + 1] < min(first, second):
            patterns.append("Double Top")
            break

    for i in range(len(lows) - 3):
        first, second = lows[i], lows[i + 2]
        if _roughly_equal(first, second) and lows[i + 1] > max(first, second):
            patterns.append("Double Bottom")
            break

    return patterns


def _indicator_at(series: Sequence[Candle], index: int, indicator: DivergenceIndicator) -> float:
    if indicator is DivergenceIndicator.RSI:
        return calculate_rsi(series[max(0, index - 14):index + 1])

    window = series[max(0, index - 26):index + 1]
    return calculate_ema(window[-12:], 12) - calculate_ema(window, 26)


def detect_divergence(
    series: Sequence[Candle],
    indicator: DivergenceIndicator = DivergenceIndicator.RSI,
) -> list[Divergence]:
    """Compare the direction of the last close with the indicator's direction.

    The indicator is RSI over the trailing 15 candles, or the EMA(12) minus
    EMA(26) proxy over the trailing 27 candles.

    ==========  ==============  ===============
    price       indicator       divergence
    ==========  ==============  ===============
    down        up              regular bullish
    up          down            regular bearish
    up          up              hidden bullish
    down        down            hidden bearish
    ==========  ==============  ===============

    Returns:
        The matching divergence, or an empty list when either value is
        unchanged or fewer than two candles are given.
    """
    if len(series) < 2:
        return []

    indicator = DivergenceIndicator(indicator)
    last = len(series) - 1

    price_delta = series[last].close - series[last - 1].close
    ind_delta = _indicator_at(series, last, indicator) - _indicator_at(series, last - 1, indicator)

    if price_delta == 0 or ind_delta == 0:
        return []

    price_up = price_delta > 0
    ind_up = ind_delta > 0

    if price_up == ind_up:
        kind = DivergenceType.HIDDEN
        direction = Direction.BULLISH if price_up else Direction.BEARISH
    else:
        kind = DivergenceType.REGULAR
        direction = Direction.BULLISH if ind_up else Direction.BEARISH

    return [Divergence(type=kind, direction=direction)]
