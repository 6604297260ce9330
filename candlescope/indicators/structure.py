"""Support/resistance, order blocks and market structure.

All level calculations look only at the window they are given.
"""

from typing import Optional, Sequence

from candlescope.models import (
    Candle,
    FibonacciLevels,
    KeyLevels,
    MarketStructure,
    OrderBlock,
    OrderBlockKind,
    PivotPoints,
    StructureTrend,
    SupportResistance,
    SwingKind,
    SwingPoint,
)


# Significant clusters need more than this many touches
CLUSTER_MIN_TOUCHES = 3
KEY_LEVEL_WINDOW = 100
KEY_LEVEL_MIN_CANDLES = 20
KEY_LEVEL_COUNT = 3


def find_order_blocks(series: Sequence[Candle]) -> list[OrderBlock]:
    """Find order blocks between adjacent candles.

    A bullish block is a bearish candle followed by a bullish candle that
    closes above its high. A bearish block is the mirror image: a bullish
    candle followed by a bearish candle closing below its low.

    Args:
        series: Candle window

    Returns:
        Order blocks in time order, each spanning the originating candle.
    """
    blocks = []

    for current, following in zip(series, series[1:]):
        if (
            current.close < current.open
            and following.close > following.open
            and following.close > current.high
        ):
            blocks.append(OrderBlock(
                kind=OrderBlockKind.BULLISH,
                top=current.high,
                bottom=current.low,
                time=current.time,
            ))

        if (
            current.close > current.open
            and following.close < following.open
            and following.close < current.low
        ):
            blocks.append(OrderBlock(
                kind=OrderBlockKind.BEARISH,
                top=current.high,
                bottom=current.low,
                time=current.time,
            ))

    return blocks


def find_support_resistance(series: Sequence[Candle]) -> SupportResistance:
    """Range extremes of the window together with its order blocks.

    Returns:
        Support at the lowest low, resistance at the highest high. Both are
        0 for an empty window.
    """
    if not series:
        return SupportResistance(support=0.0, resistance=0.0)

    return SupportResistance(
        support=min(c.low for c in series),
        resistance=max(c.high for c in series),
        order_blocks=find_order_blocks(series),
    )


def find_swing_points(series: Sequence[Candle]) -> list[SwingPoint]:
    """Three-candle local extremes; the first and last candle never qualify."""
    swings = []

    for prev, candle, following in zip(series, series[1:], series[2:]):
        if candle.high > prev.high and candle.high > following.high:
            swings.append(SwingPoint(kind=SwingKind.HIGH, price=candle.high, time=candle.time))
        elif candle.low < prev.low and candle.low < following.low:
            swings.append(SwingPoint(kind=SwingKind.LOW, price=candle.low, time=candle.time))

    return swings


def analyze_market_structure(series: Sequence[Candle]) -> MarketStructure:
    """Derive trend and strength from swing points.

    The trend compares the last two swing prices regardless of their kind.

    Returns:
        Swing points, the trend label and the absolute percentage move
        from the first close to the last close.
    """
    swings = find_swing_points(series)

    if len(swings) >= 2:
        trend = (
            StructureTrend.UPTREND
            if swings[-1].price > swings[-2].price
            else StructureTrend.DOWNTREND
        )
    else:
        trend = StructureTrend.NEUTRAL

    strength = 0.0
    if series and series[0].close != 0:
        strength = abs(series[-1].close - series[0].close) / series[0].close * 100

    return MarketStructure(swing_points=swings, trend=trend, strength=strength)


def find_price_clusters(
    prices: Sequence[float],
    tolerance: float = 0.005,
    min_count: int = CLUSTER_MIN_TOUCHES + 1,
) -> list[float]:
    """Group prices around anchor prices.

    Each price joins the first existing cluster whose anchor is within
    ``tolerance`` (relative to the anchor), otherwise it starts a new
    cluster anchored at itself.

    Args:
        prices: Flat list of prices, e.g. highs or lows
        tolerance: Relative distance to an anchor (default 0.5%)
        min_count: Members needed for a cluster to be significant

    Returns:
        Anchor prices of the significant clusters, in creation order.
    """
    anchors: list[float] = []
    counts: list[int] = []

    for price in prices:
        for i, anchor in enumerate(anchors):
            if anchor != 0 and abs(price - anchor) / anchor < tolerance:
                counts[i] += 1
                break
        else:
            anchors.append(price)
            counts.append(1)

    return [anchor for anchor, count in zip(anchors, counts) if count >= min_count]


def find_key_levels(
    series: Sequence[Candle],
    current_price: Optional[float] = None,
) -> KeyLevels:
    """Clustered support below and resistance above the current price.

    Uses the last 100 candles: lows are clustered into supports and highs
    into resistances. At most three of each are kept, nearest first.

    Args:
        series: Candle series
        current_price: Reference price (defaults to the last close)

    Returns:
        Key levels, empty when fewer than 20 candles are given.
    """
    if len(series) < KEY_LEVEL_MIN_CANDLES:
        return KeyLevels()

    sample = series[-KEY_LEVEL_WINDOW:]
    price = series[-1].close if current_price is None else current_price

    low_clusters = find_price_clusters([c.low for c in sample])
    high_clusters = find_price_clusters([c.high for c in sample])

    support = sorted((lvl for lvl in low_clusters if lvl < price), reverse=True)
    resistance = sorted(lvl for lvl in high_clusters if lvl > price)

    return KeyLevels(
        support=support[:KEY_LEVEL_COUNT],
        resistance=resistance[:KEY_LEVEL_COUNT],
    )


def calculate_fibonacci_levels(high: float, low: float) -> FibonacciLevels:
    """Calculate Fibonacci retracement levels.

    Args:
        high: Top of the range
        low: Bottom of the range

    Returns:
        Levels from 0% (``low``) to 100% (``high``).
    """
    diff = high - low

    return FibonacciLevels(
        level_0=low,
        level_236=low + diff * 0.236,
        level_382=low + diff * 0.382,
        level_500=low + diff * 0.5,
        level_618=low + diff * 0.618,
        level_786=low + diff * 0.786,
        level_1000=high,
    )


def calculate_pivot_points(high: float, low: float, close: float) -> PivotPoints:
    """Calculate standard floor pivot points.

    Args:
        high: Previous period's high
        low: Previous period's low
        close: Previous period's close

    Returns:
        Pivot with R1-R3 and S1-S3.
    """
    pivot = (high + low + close) / 3

    return PivotPoints(
        pivot=pivot,
        r1=(2 * pivot) - low,
        r2=pivot + (high - low),
        r3=high + 2 * (pivot - low),
        s1=(2 * pivot) - high,
        s2=pivot - (high - low),
        s3=low - 2 * (high - pivot),
    )
