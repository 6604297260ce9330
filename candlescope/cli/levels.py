"""Level and sentiment commands for the candlescope CLI."""

import random
from pathlib import Path
from typing import Optional, Sequence

import click
from rich.panel import Panel
from rich.table import Table

from candlescope.analysis import analyze_sentiment, predict_next_move
from candlescope.cli.common import (
    console,
    fail,
    file_argument,
    format_option,
    get_config,
    json_option,
    load_series,
    print_json,
)
from candlescope.indicators import (
    analyze_market_structure,
    calculate_cvd,
    calculate_fibonacci_levels,
    calculate_pivot_points,
    calculate_volume_profile,
    find_key_levels,
    find_support_resistance,
)
from candlescope.models import Candle


def calculate_levels(series: Sequence[Candle], volume_levels: int = 10) -> dict:
    """Structural levels of the last 100 candles."""
    recent = series[-100:]
    levels = find_support_resistance(recent)
    prev = series[-2] if len(series) > 1 else series[-1]

    return {
        "support_resistance": levels,
        "key_levels": find_key_levels(series),
        "fibonacci": calculate_fibonacci_levels(levels.resistance, levels.support),
        "pivot_points": calculate_pivot_points(prev.high, prev.low, prev.close),
        "market_structure": analyze_market_structure(recent),
        "volume_profile": calculate_volume_profile(series[-50:], volume_levels),
        "cvd": calculate_cvd(recent),
    }


@click.command()
@file_argument
@format_option
@json_option
def levels(path: Path, fmt: Optional[str], as_json: bool) -> None:
    """Print support/resistance, pivots, Fibonacci and volume levels.

    \b
    Examples:
      candlescope levels btc.csv
      candlescope levels btc.csv --json
    """
    config = get_config()
    series = load_series(path, fmt, config)
    if not series:
        fail("Insufficient Data", f"No candles in {path}")

    result = calculate_levels(series, config["volume_profile"]["levels"])

    if as_json:
        print_json(result)
        return

    sr = result["support_resistance"]
    key = result["key_levels"]
    fib = result["fibonacci"]
    pivots = result["pivot_points"]
    structure = result["market_structure"]

    table = Table(title="Levels")
    table.add_column("Level", style="cyan")
    table.add_column("Price", justify="right")

    table.add_row("Resistance", f"{sr.resistance:.2f}")
    table.add_row("Support", f"{sr.support:.2f}")
    for i, level in enumerate(key.resistance, 1):
        table.add_row(f"Key R{i}", f"{level:.2f}")
    for i, level in enumerate(key.support, 1):
        table.add_row(f"Key S{i}", f"{level:.2f}")
    for name in ("r3", "r2", "r1", "pivot", "s1", "s2", "s3"):
        table.add_row(f"Pivot {name.upper()}", f"{getattr(pivots, name):.2f}")
    for name, value in fib.model_dump().items():
        table.add_row(f"Fib {name.removeprefix('level_')}", f"{value:.2f}")
    table.add_row("Volume POC", f"{result['volume_profile'].poc:.2f}")

    console.print(table)
    console.print(
        f"[bold]Structure:[/bold] {structure.trend.value} "
        f"(strength {structure.strength:.2f}%, {len(structure.swing_points)} swings) | "
        f"[bold]Order blocks:[/bold] {len(sr.order_blocks)} | "
        f"[bold]CVD:[/bold] {result['cvd']:,.0f}"
    )


@click.command()
@file_argument
@format_option
@json_option
@click.option("--seed", type=int, default=None, help="Seed for the prediction jitter.")
def sentiment(path: Path, fmt: Optional[str], as_json: bool, seed: Optional[int]) -> None:
    """Print heuristic sentiment and the expected next move.

    \b
    Examples:
      candlescope sentiment btc.csv --seed 7
    """
    config = get_config()
    series = load_series(path, fmt, config)

    if seed is None:
        seed = config["prediction"].get("seed")
    rng = random.Random(seed)

    result = {
        "sentiment": analyze_sentiment(series),
        "prediction": predict_next_move(series, rng),
    }

    if as_json:
        print_json(result)
        return

    mood = result["sentiment"]
    prediction = result["prediction"]
    colors = {"bullish": "green", "bearish": "red", "neutral": "yellow"}
    overall_color = colors[mood.overall.value]
    move_color = "green" if prediction.expected_move >= 0 else "red"

    console.print(Panel(
        f"[bold]Overall:[/bold] [{overall_color}]{mood.overall.value.upper()}[/{overall_color}]\n"
        f"[bold]Price:[/bold] {mood.price.value} | [bold]Volume:[/bold] {mood.volume.value}\n\n"
        f"[bold]Expected move:[/bold] [{move_color}]{prediction.expected_move * 100:+.3f}%[/{move_color}]\n"
        f"[bold]Confidence:[/bold] {prediction.confidence:.0%}",
        title="[bold cyan]Sentiment[/bold cyan]",
        border_style="cyan",
    ))
