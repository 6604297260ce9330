"""candlescope - technical analysis engine for OHLCV candle series."""

from candlescope.indicators import get_summary
from candlescope.models import Candle, to_series

__version__ = "0.1.0"

__all__ = ["Candle", "get_summary", "to_series"]
