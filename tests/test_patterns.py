"""Tests for candlestick patterns, chart patterns and divergences."""

from datetime import datetime, timedelta

import pytest

from candlescope.indicators import (
    detect_divergence,
    find_candle_patterns,
    find_chart_patterns,
)
from candlescope.models import Candle, Direction, Divergence, DivergenceIndicator, DivergenceType


BASE_TIME = datetime(2024, 1, 1)


def make_candle(i: int, open: float, high: float, low: float, close: float) -> Candle:
    return Candle(
        time=BASE_TIME + timedelta(hours=i),
        open=open,
        high=high,
        low=low,
        close=close,
        volume=1000.0,
    )


def candles_from_closes(closes: list[float]) -> list[Candle]:
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        candles.append(make_candle(i, prev, max(prev, close) + 0.5, min(prev, close) - 0.5, close))
        prev = close
    return candles


def with_range(highs: list[float], lows: list[float]) -> list[Candle]:
    return [
        make_candle(i, (high + low) / 2, high, low, (high + low) / 2)
        for i, (high, low) in enumerate(zip(highs, lows))
    ]


NEUTRAL = make_candle(0, 100, 101.5, 98.5, 101)


class TestCandlePatterns:

    def test_needs_two_candles(self):
        assert find_candle_patterns([]) == []
        assert find_candle_patterns([NEUTRAL]) == []

    def test_doji(self):
        last = make_candle(1, 100, 101, 99, 100.05)
        assert find_candle_patterns([NEUTRAL, last]) == ["Doji"]

    def test_hammer(self):
        last = make_candle(1, 100, 101.2, 97, 101)
        assert find_candle_patterns([NEUTRAL, last]) == ["Hammer"]

    def test_shooting_star(self):
        last = make_candle(1, 100, 106, 98.4, 99)
        assert find_candle_patterns([NEUTRAL, last]) == ["Shooting Star"]

    def test_shooting_star_shadows_measured_from_open(self):
        # Upper wick 3 is more than twice the body, but high - open is not
        # more than twice open - low
        last = make_candle(1, 101, 104, 99.8, 100)
        assert find_candle_patterns([NEUTRAL, last]) == []

    def test_bullish_engulfing(self):
        prev = make_candle(0, 102, 102.5, 99.8, 100)
        last = make_candle(1, 99.5, 103.2, 99.3, 103)
        assert find_candle_patterns([prev, last]) == ["Bullish Engulfing"]

    def test_bearish_engulfing(self):
        prev = make_candle(0, 100, 102.3, 99.7, 102)
        last = make_candle(1, 102.5, 102.7, 98.8, 99)
        assert find_candle_patterns([prev, last]) == ["Bearish Engulfing"]

    def test_patterns_co_occur_in_fixed_order(self):
        prev = make_candle(0, 100.5, 100.7, 99.8, 100)
        last = make_candle(1, 99.9, 100.9, 97, 100.8)
        assert find_candle_patterns([prev, last]) == ["Hammer", "Bullish Engulfing"]

    def test_flat_candle_is_not_doji(self):
        last = make_candle(1, 100, 100, 100, 100)
        assert "Doji" not in find_candle_patterns([NEUTRAL, last])


class TestChartPatterns:

    def test_head_and_shoulders(self):
        candles = with_range([100, 90, 110, 90, 100.5, 90], [80] * 6)
        assert find_chart_patterns(candles) == ["Head and Shoulders"]

    def test_double_top(self):
        candles = with_range([100, 95, 100.5, 90, 90], [80] * 5)
        assert find_chart_patterns(candles) == ["Double Top"]

    def test_double_bottom(self):
        candles = with_range([130] * 5, [100, 110, 100.5, 120, 120])
        assert find_chart_patterns(candles) == ["Double Bottom"]

    def test_short_series_has_no_patterns(self):
        assert find_chart_patterns(with_range([100, 95, 100], [90, 91, 90])) == []


class TestDivergence:

    def test_regular_bullish_with_rsi(self):
        # A large loss drops out of the RSI window while price dips slightly
        closes = [100, 90] + [91 + i for i in range(13)] + [102.5]
        result = detect_divergence(candles_from_closes(closes), DivergenceIndicator.RSI)
        assert result == [Divergence(type=DivergenceType.REGULAR, direction=Direction.BULLISH)]

    def test_regular_bearish_with_rsi(self):
        closes = [100, 110] + [109 - i for i in range(13)] + [97.5]
        result = detect_divergence(candles_from_closes(closes), DivergenceIndicator.RSI)
        assert result == [Divergence(type=DivergenceType.REGULAR, direction=Direction.BEARISH)]

    def test_hidden_bullish_with_macd_proxy(self):
        closes = [100 + i * i for i in range(40)]
        result = detect_divergence(candles_from_closes(closes), DivergenceIndicator.MACD)
        assert result == [Divergence(type=DivergenceType.HIDDEN, direction=Direction.BULLISH)]

    def test_hidden_bearish_with_macd_proxy(self):
        closes = [3000 - i * i for i in range(40)]
        result = detect_divergence(candles_from_closes(closes), "macd")
        assert result == [Divergence(type=DivergenceType.HIDDEN, direction=Direction.BEARISH)]

    def test_unchanged_price_has_no_divergence(self):
        closes = [100.0 + i for i in range(30)] + [129.0]
        assert detect_divergence(candles_from_closes(closes)) == []

    def test_too_short(self):
        assert detect_divergence(candles_from_closes([100.0])) == []

    def test_unknown_indicator(self):
        with pytest.raises(ValueError):
            detect_divergence(candles_from_closes([100.0, 101.0]), "obv")
