"""Tests for volume profile and cumulative volume delta."""

from datetime import datetime, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from candlescope.indicators import (
    analyze_delta_volume,
    calculate_cvd,
    calculate_volume_profile,
)
from candlescope.models import Candle


BASE_TIME = datetime(2024, 1, 1)


def make_candle(i: int, open: float, high: float, low: float, close: float, volume: float) -> Candle:
    return Candle(
        time=BASE_TIME + timedelta(days=i),
        open=open,
        high=high,
        low=low,
        close=close,
        volume=volume,
    )


@st.composite
def candle_series(draw, max_length: int = 60):
    """Candles with random direction and volume."""
    length = draw(st.integers(min_value=0, max_value=max_length))
    candles = []
    for i in range(length):
        open_ = draw(st.floats(min_value=10.0, max_value=200.0))
        close = draw(st.floats(min_value=10.0, max_value=200.0))
        volume = draw(st.floats(min_value=0.0, max_value=1e6))
        candles.append(make_candle(i, open_, max(open_, close) + 1, min(open_, close) - 1, close, volume))
    return candles


class TestVolumeProfile:

    def test_volume_lands_in_midpoint_bucket(self):
        candles = [
            make_candle(0, 101, 102, 100, 101.5, volume=5),   # midpoint 101 -> bucket 1
            make_candle(1, 109, 110, 108, 109.5, volume=20),  # midpoint 109 -> bucket 9
        ]
        vp = calculate_volume_profile(candles, levels=10)

        assert vp.profile[1] == 5
        assert vp.profile[9] == 20
        assert sum(vp.profile) == 25
        assert vp.poc == pytest.approx(109)
        assert vp.value_area == pytest.approx(17.5)

    def test_flat_range_goes_to_first_bucket(self):
        candles = [make_candle(i, 50, 50, 50, 50, volume=10) for i in range(3)]
        vp = calculate_volume_profile(candles, levels=4)

        assert vp.profile == [30, 0, 0, 0]
        assert vp.poc == 50

    def test_empty_series(self):
        vp = calculate_volume_profile([], levels=5)
        assert vp.profile == [0.0] * 5
        assert vp.poc == 0.0
        assert vp.value_area == 0.0

    @given(candles=candle_series())
    @settings(max_examples=50, deadline=None)
    def test_all_volume_is_bucketed(self, candles: list[Candle]):
        vp = calculate_volume_profile(candles, levels=10)
        total = sum(c.volume for c in candles)

        assert len(vp.profile) == 10
        assert sum(vp.profile) == pytest.approx(total)
        assert vp.value_area == pytest.approx(total * 0.7)


class TestVolumeDelta:

    def test_cvd_signs(self):
        candles = [
            make_candle(0, 10, 12, 9, 11, volume=100),  # up
            make_candle(1, 11, 12, 9, 10, volume=40),   # down
            make_candle(2, 10, 11, 9, 10, volume=25),   # unchanged counts as down
        ]
        assert calculate_cvd(candles) == 35

    def test_delta_series_preserves_order(self):
        candles = [
            make_candle(0, 10, 12, 9, 11, volume=100),
            make_candle(1, 11, 12, 9, 10, volume=40),
        ]
        deltas = analyze_delta_volume(candles)

        assert [d.time for d in deltas] == [c.time for c in candles]
        assert [d.delta for d in deltas] == [100, -40]
        assert [d.cumulative for d in deltas] == [100, 60]

    @given(candles=candle_series())
    @settings(max_examples=50, deadline=None)
    def test_delta_series_ends_at_cvd(self, candles: list[Candle]):
        deltas = analyze_delta_volume(candles)
        final = deltas[-1].cumulative if deltas else 0.0
        assert final == pytest.approx(calculate_cvd(candles))
