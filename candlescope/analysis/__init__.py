"""Heuristic sentiment and move prediction."""

from candlescope.analysis.sentiment import analyze_sentiment, predict_next_move

__all__ = ["analyze_sentiment", "predict_next_move"]
