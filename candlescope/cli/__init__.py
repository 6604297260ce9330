"""CLI module for candlescope."""

from candlescope.cli.main import cli, main

__all__ = ["cli", "main"]
