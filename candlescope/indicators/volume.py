"""Volume analysis: volume profile and cumulative volume delta."""

import math
from typing import Sequence

from candlescope.models import Candle, DeltaVolume, VolumeProfile


VALUE_AREA_SHARE = 0.7


def _signed_volume(candle: Candle) -> float:
    # Doji candles count as selling
    return candle.volume if candle.close > candle.open else -candle.volume


def calculate_volume_profile(series: Sequence[Candle], levels: int = 10) -> VolumeProfile:
    """Distribute volume over equal-width price buckets.

    Each candle's volume goes to the bucket holding its midpoint
    ``(high + low) / 2``. The top edge of the range belongs to the last
    bucket.

    Args:
        series: Candle window
        levels: Number of buckets (default 10)

    Returns:
        Volume per bucket, the point of control as the lower bound of the
        fullest bucket and the value area as 70% of the bucketed volume.
    """
    if not series or levels < 1:
        return VolumeProfile(profile=[0.0] * max(levels, 0), poc=0.0, value_area=0.0)

    high = max(c.high for c in series)
    low = min(c.low for c in series)
    level_size = (high - low) / levels

    profile = [0.0] * levels

    if level_size == 0:
        # Flat range, everything lands in the first bucket
        profile[0] = sum(c.volume for c in series)
    else:
        for candle in series:
            midpoint = (candle.high + candle.low) / 2
            index = min(math.floor((midpoint - low) / level_size), levels - 1)
            if index >= 0:
                profile[index] += candle.volume

    poc_index = profile.index(max(profile))

    return VolumeProfile(
        profile=profile,
        poc=low + poc_index * level_size,
        value_area=sum(profile) * VALUE_AREA_SHARE,
    )


def calculate_cvd(series: Sequence[Candle]) -> float:
    """Cumulative volume delta: volume added on up candles, subtracted otherwise."""
    return sum(_signed_volume(c) for c in series)


def analyze_delta_volume(series: Sequence[Candle]) -> list[DeltaVolume]:
    """Per-candle volume delta with its running total, in series order."""
    result = []
    cumulative = 0.0

    for candle in series:
        delta = _signed_volume(candle)
        cumulative += delta
        result.append(DeltaVolume(time=candle.time, delta=delta, cumulative=cumulative))

    return result
