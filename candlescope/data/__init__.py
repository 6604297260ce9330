"""Candle loading from files."""

from candlescope.data.loader import load_candles

__all__ = ["load_candles"]
