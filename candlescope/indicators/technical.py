"""Technical indicator calculations for candle series.

Every function here takes a window of candles (usually the most recent N
of a series) and returns the indicator value for the end of that window.
Short windows degrade to a neutral default instead of raising.

Some values intentionally differ from the textbook definitions so results
stay comparable with existing dashboards built on this engine:

- ATR is the plain sum of true ranges divided by ``period``, not Wilder's
  smoothed average.
- Bollinger standard deviation is taken over the whole window passed in but
  divided by ``period``.
- The MACD signal line is the EMA of a single MACD sample, so the histogram
  is always zero.
"""

import math
from typing import Optional, Sequence

from candlescope.models import MACD, BollingerBands, Candle, Ichimoku, Stochastic


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _ema_values(values: Sequence[float], period: int) -> float:
    """EMA of raw values seeded with the first value."""
    multiplier = 2 / (period + 1)
    ema = values[0]
    for value in values[1:]:
        ema = (value - ema) * multiplier + ema
    return ema


def _sma_line(values: Sequence[float], period: int) -> list[float]:
    """Rolling SMA over a list of values; only full windows are emitted."""
    return [
        _mean(values[i:i + period])
        for i in range(len(values) - period + 1)
    ]


def _midpoint(series: Sequence[Candle]) -> float:
    highest = max(c.high for c in series)
    lowest = min(c.low for c in series)
    return (highest + lowest) / 2


# =============================================================================
# WINDOW STATISTICS
# =============================================================================


def calculate_sma(series: Sequence[Candle], period: int) -> float:
    """Calculate Simple Moving Average of closing prices.

    Args:
        series: Candle window
        period: Number of closes to average

    Returns:
        Mean of the last ``period`` closes. When the window is shorter than
        ``period`` the last close is returned, or 0 for an empty window.
    """
    if len(series) < period or period < 1:
        return series[-1].close if series else 0.0

    window = series[-period:]
    return sum(c.close for c in window) / period


def calculate_ema(series: Sequence[Candle], period: Optional[int] = None) -> float:
    """Calculate Exponential Moving Average of closing prices.

    The EMA is seeded with the first close of the window and updated with
    multiplier ``2 / (period + 1)`` for each following close.

    Args:
        series: Candle window
        period: EMA period (defaults to the window length)

    Returns:
        EMA at the last candle, or 0 for an empty window.
    """
    if not series:
        return 0.0
    return _ema_values([c.close for c in series], period or len(series))


def calculate_std_dev(series: Sequence[Candle], mean: float, divisor: int) -> float:
    """Population-style standard deviation of closes around ``mean``.

    Args:
        series: Candle window
        mean: Centre the deviations are measured from
        divisor: Denominator of the variance

    Returns:
        Standard deviation, 0 when ``divisor`` is not positive.
    """
    if divisor <= 0:
        return 0.0
    variance = sum((c.close - mean) ** 2 for c in series) / divisor
    return math.sqrt(variance)


def true_ranges(series: Sequence[Candle]) -> list[float]:
    """True range of every candle after the first.

    True range is max(high - low, |high - prev close|, |low - prev close|).
    """
    return [
        max(
            candle.high - candle.low,
            abs(candle.high - prev.close),
            abs(candle.low - prev.close),
        )
        for prev, candle in zip(series, series[1:])
    ]


def calculate_atr(series: Sequence[Candle], period: int = 14) -> float:
    """Calculate Average True Range.

    Sums the true ranges of the whole window and divides by ``period``.

    Args:
        series: Candle window (normally ``period`` candles)
        period: ATR period (default 14)

    Returns:
        ATR value, 0 for windows with fewer than two candles.
    """
    if period < 1:
        return 0.0
    return sum(true_ranges(series)) / period


def calculate_volatility(series: Sequence[Candle]) -> float:
    """Calculate volatility of close-to-close returns.

    Returns:
        Population standard deviation of returns as a percentage.
    """
    returns = [
        (candle.close - prev.close) / prev.close
        for prev, candle in zip(series, series[1:])
        if prev.close != 0
    ]
    if not returns:
        return 0.0

    mean_return = _mean(returns)
    variance = sum((r - mean_return) ** 2 for r in returns) / len(returns)
    return math.sqrt(variance) * 100


def calculate_momentum(series: Sequence[Candle]) -> float:
    """Percentage change from the first close to the last close of the window."""
    if not series or series[0].close == 0:
        return 0.0
    return (series[-1].close - series[0].close) / series[0].close * 100


# =============================================================================
# OSCILLATORS & BANDS
# =============================================================================


def calculate_rsi(series: Sequence[Candle], period: int = 14) -> float:
    """Calculate Relative Strength Index with Wilder smoothing.

    The first ``period`` changes seed the average gain and loss, every later
    change is folded in with weight ``(period - 1) / period``.

    Args:
        series: Candle window
        period: RSI period (default 14)

    Returns:
        RSI value (0-100). 50 when fewer than ``period + 1`` candles are
        given, 100 when there were no losses.
    """
    if len(series) < period + 1 or period < 1:
        return 50.0

    changes = [series[i].close - series[i - 1].close for i in range(1, len(series))]

    avg_gain = sum(c for c in changes[:period] if c > 0) / period
    avg_loss = sum(-c for c in changes[:period] if c < 0) / period

    for change in changes[period:]:
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def calculate_stochastic(
    series: Sequence[Candle],
    period: int = 14,
    k_smoothing: int = 3,
    d_smoothing: int = 3,
) -> Stochastic:
    """Calculate the smoothed Stochastic Oscillator.

    Raw %K is computed for every full ``period`` window, the K line is an
    SMA of raw %K and the D line is an SMA of the K line.

    Args:
        series: Candle window
        period: Lookback for highest high / lowest low (default 14)
        k_smoothing: SMA width applied to raw %K (default 3)
        d_smoothing: SMA width applied to the K line (default 3)

    Returns:
        Latest K and D values, or K=D=50 without enough data to smooth.
    """
    raw_k = []
    for i in range(period - 1, len(series)):
        window = series[i - period + 1:i + 1]
        highest_high = max(c.high for c in window)
        lowest_low = min(c.low for c in window)

        if highest_high == lowest_low:
            raw_k.append(50.0)  # Neutral when no range
        else:
            raw_k.append((window[-1].close - lowest_low) / (highest_high - lowest_low) * 100)

    k_line = _sma_line(raw_k, k_smoothing)
    d_line = _sma_line(k_line, d_smoothing)

    if not k_line or not d_line:
        return Stochastic(k=50.0, d=50.0)

    return Stochastic(k=k_line[-1], d=d_line[-1])


def calculate_bollinger_bands(
    series: Sequence[Candle],
    period: int = 20,
    multiplier: float = 2.0,
) -> BollingerBands:
    """Calculate Bollinger Bands.

    Args:
        series: Candle window (normally ``period`` candles)
        period: SMA period and variance divisor (default 20)
        multiplier: Standard deviation multiplier (default 2.0)

    Returns:
        Upper, middle and lower band with the standard deviation used.
    """
    middle = calculate_sma(series, period)
    std_dev = calculate_std_dev(series, middle, period)

    return BollingerBands(
        upper=middle + multiplier * std_dev,
        middle=middle,
        lower=middle - multiplier * std_dev,
        std_dev=std_dev,
    )


def calculate_macd(
    series: Sequence[Candle],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MACD:
    """Calculate MACD (Moving Average Convergence Divergence).

    Both EMAs run over the whole window. The signal line is the EMA of the
    single resulting MACD sample.

    Args:
        series: Candle window
        fast: Fast EMA period (default 12)
        slow: Slow EMA period (default 26)
        signal: Signal line period (default 9)

    Returns:
        MACD line, signal line and histogram.
    """
    macd_line = calculate_ema(series, fast) - calculate_ema(series, slow)
    signal_line = _ema_values([macd_line], signal)

    return MACD(
        macd=macd_line,
        signal=signal_line,
        histogram=macd_line - signal_line,
    )


def calculate_ichimoku(series: Sequence[Candle]) -> Ichimoku:
    """Calculate Ichimoku cloud lines for the last candle.

    Returns:
        Tenkan-sen (9), Kijun-sen (26), Senkou Span A/B (B over 52) and the
        Chikou Span, which is None when fewer than 26 candles are given.
        All lines are 0 for an empty window.
    """
    if not series:
        return Ichimoku(tenkan_sen=0.0, kijun_sen=0.0, senkou_span_a=0.0, senkou_span_b=0.0)

    tenkan_sen = _midpoint(series[-9:])
    kijun_sen = _midpoint(series[-26:])

    return Ichimoku(
        tenkan_sen=tenkan_sen,
        kijun_sen=kijun_sen,
        senkou_span_a=(tenkan_sen + kijun_sen) / 2,
        senkou_span_b=_midpoint(series[-52:]),
        chikou_span=series[-26].close if len(series) >= 26 else None,
    )
