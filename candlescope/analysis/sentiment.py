"""Heuristic market sentiment and next-move prediction.

Neither function is a learned model. The prediction adds a small jitter to
the mean return; the jitter comes from the ``random.Random`` passed in so
results are reproducible for a fixed seed.
"""

import math
import random
from typing import Sequence

from candlescope.models import Candle, Prediction, Sentiment, SentimentLabel


MIN_CANDLES = 10
SENTIMENT_WINDOW = 20
RECENT_VOLUME_WINDOW = 5
PREDICTION_WINDOW = 30

PRICE_THRESHOLD = 0.02
VOLUME_THRESHOLD = 0.1


def _label(change: float, threshold: float) -> SentimentLabel:
    if change > threshold:
        return SentimentLabel.BULLISH
    if change < -threshold:
        return SentimentLabel.BEARISH
    return SentimentLabel.NEUTRAL


def analyze_sentiment(series: Sequence[Candle]) -> Sentiment:
    """Analyze sentiment from the last 20 candles.

    Price sentiment follows the close-to-close change over the window
    (+/-2%). Volume sentiment compares the average volume of the last 5
    candles with the window average (+/-10%). A directional price reading
    wins unless volume contradicts it; a neutral price reading defers to
    volume.

    Returns:
        Overall, price and volume sentiment. All neutral with fewer than
        10 candles.
    """
    if len(series) < MIN_CANDLES:
        return Sentiment()

    recent = series[-SENTIMENT_WINDOW:]

    first_close = recent[0].close
    price_change = (recent[-1].close - first_close) / first_close if first_close else 0.0

    volumes = [c.volume for c in recent]
    avg_volume = sum(volumes) / len(volumes)
    recent_volume = sum(volumes[-RECENT_VOLUME_WINDOW:]) / RECENT_VOLUME_WINDOW
    volume_change = (recent_volume - avg_volume) / avg_volume if avg_volume else 0.0

    price = _label(price_change, PRICE_THRESHOLD)
    volume = _label(volume_change, VOLUME_THRESHOLD)

    overall = SentimentLabel.NEUTRAL
    if price == SentimentLabel.BULLISH and volume != SentimentLabel.BEARISH:
        overall = SentimentLabel.BULLISH
    elif price == SentimentLabel.BEARISH and volume != SentimentLabel.BULLISH:
        overall = SentimentLabel.BEARISH
    elif price == SentimentLabel.NEUTRAL:
        overall = volume

    return Sentiment(overall=overall, price=price, volume=volume)


def predict_next_move(series: Sequence[Candle], rng: random.Random) -> Prediction:
    """Estimate the next fractional move from the last 30 candles.

    Args:
        series: Candle series
        rng: Random source for the +/-10% jitter on the mean return

    Returns:
        Expected move and a confidence of ``1 - 10 * sigma`` clamped to
        [0, 1]. Zero move and confidence with fewer than 10 candles.
    """
    if len(series) < MIN_CANDLES:
        return Prediction()

    closes = [c.close for c in series[-PREDICTION_WINDOW:]]
    returns = [
        (close - prev) / prev
        for prev, close in zip(closes, closes[1:])
        if prev != 0
    ]
    if not returns:
        return Prediction()

    avg_change = sum(returns) / len(returns)
    volatility = math.sqrt(sum((r - avg_change) ** 2 for r in returns) / len(returns))

    jitter = 1 + (rng.random() * 0.2 - 0.1)
    confidence = max(0.0, min(1.0, 1 - volatility * 10))

    return Prediction(
        expected_move=avg_change * jitter,
        confidence=confidence,
        volatility=volatility,
    )
