"""Analysis commands for the candlescope CLI.

Prints the composite summary, the individual indicators and the
detected patterns of a candle file.
"""

from pathlib import Path
from typing import Optional, Sequence

import click
from rich.panel import Panel
from rich.table import Table

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
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_ichimoku,
    calculate_macd,
    calculate_momentum,
    calculate_rsi,
    calculate_sma,
    calculate_stochastic,
    calculate_volatility,
    detect_divergence,
    find_candle_patterns,
    find_chart_patterns,
    get_summary,
)
from candlescope.models import Candle, DivergenceIndicator, InsufficientData, TechnicalSummary


def _interpret_rsi(value: float) -> tuple[str, str]:
    """Interpret RSI value.

    Returns:
        Tuple of (interpretation, color)
    """
    if value >= 70:
        return "Overbought", "red"
    elif value <= 30:
        return "Oversold", "green"
    elif value >= 60:
        return "Bullish", "green"
    elif value <= 40:
        return "Bearish", "red"
    return "Neutral", "yellow"


def _trend_color(label: str) -> str:
    if "Bullish" in label or label == "uptrend":
        return "green"
    if "Bearish" in label or label == "downtrend":
        return "red"
    return "yellow"


def calculate_indicator_snapshot(series: Sequence[Candle]) -> dict:
    """Latest value of every indicator over its customary window.

    Unlike the summary this works with any number of candles, short
    windows fall back to the indicator defaults.
    """
    recent = series[-100:]
    short_term = series[-14:]

    return {
        "candles": len(series),
        "last_price": series[-1].close if series else 0.0,
        "sma": {
            "sma20": calculate_sma(series[-20:], 20),
            "sma50": calculate_sma(series[-50:], 50),
            "sma200": calculate_sma(series[-200:], 200),
        },
        "ema": {
            "ema12": calculate_ema(series[-12:], 12),
            "ema26": calculate_ema(series[-26:], 26),
            "ema55": calculate_ema(series[-55:], 55),
        },
        "rsi": calculate_rsi(recent),
        "stochastic": calculate_stochastic(recent),
        "bollinger_bands": calculate_bollinger_bands(series[-20:]),
        "macd": calculate_macd(recent),
        "atr": calculate_atr(short_term),
        "ichimoku": calculate_ichimoku(series[-52:]),
        "momentum": calculate_momentum(short_term),
        "volatility": calculate_volatility(short_term),
    }


def _render_summary(summary: TechnicalSummary) -> None:
    ind = summary.indicators
    price = summary.price
    change_color = "green" if price.change >= 0 else "red"
    rsi_signal, rsi_color = _interpret_rsi(ind.rsi.value)
    trend_color = _trend_color(summary.trend.value)

    lines = [
        f"[bold]Price:[/bold] {price.current:.2f} "
        f"[{change_color}]({price.change:+.2f}%)[/{change_color}]",
        f"[dim]Recent range {price.recent_low:.2f} - {price.recent_high:.2f}, "
        f"volume {price.volume:,.0f}[/dim]\n",
        f"[bold]Trend:[/bold] [{trend_color}]{summary.trend.value}[/{trend_color}]",
        f"[bold]Market Condition:[/bold] {summary.market_condition.value}",
        f"[bold]Risk:[/bold] {summary.risk.value}\n",
        f"[bold]RSI (14):[/bold] {ind.rsi.value:.2f} [{rsi_color}]→ {rsi_signal}[/{rsi_color}]",
        f"[bold]Stochastic:[/bold] K {ind.stochastic.k:.2f} | D {ind.stochastic.d:.2f}",
        f"[bold]MACD:[/bold] {ind.macd.macd:.4f} | Signal: {ind.macd.signal:.4f} | "
        f"Hist: {ind.macd.histogram:.4f}",
        f"[bold]Bollinger Bands:[/bold] Upper: {ind.bollinger_bands.upper:.2f} | "
        f"Middle: {ind.bollinger_bands.middle:.2f} | Lower: {ind.bollinger_bands.lower:.2f}",
        f"[bold]ATR:[/bold] {ind.atr:.2f} | [bold]Momentum:[/bold] {summary.momentum:+.2f}% | "
        f"[bold]Volatility:[/bold] {summary.volatility:.2f}%",
    ]

    for div in ind.rsi.divergence:
        lines.append(f"[dim]RSI divergence: {div.type.value} {div.direction.value}[/dim]")

    structure = summary.structure
    lines.append(
        f"\n[bold]Support:[/bold] {structure.support:.2f} | "
        f"[bold]Resistance:[/bold] {structure.resistance:.2f} | "
        f"[bold]POC:[/bold] {summary.volume.profile.poc:.2f}"
    )
    lines.append(
        f"[bold]Order Blocks:[/bold] {len(structure.order_blocks)} | "
        f"[bold]CVD:[/bold] {summary.volume.cvd:,.0f}"
    )

    patterns = summary.patterns.candles + summary.patterns.chart
    if patterns:
        lines.append(f"[bold]Patterns:[/bold] {', '.join(patterns)}")

    if summary.signals:
        lines.append("\n[bold]Signals:[/bold]")
        for sig in summary.signals:
            color = "green" if "Buy" in sig or "Bull" in sig else "red"
            lines.append(f"  [{color}]• {sig}[/{color}]")
    else:
        lines.append("\n[dim]No signals[/dim]")

    console.print(Panel(
        "\n".join(lines),
        title="[bold cyan]Technical Summary[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@file_argument
@format_option
@json_option
def summary(path: Path, fmt: Optional[str], as_json: bool) -> None:
    """Print the full technical summary of a candle file.

    Requires at least 200 candles.

    \b
    Examples:
      candlescope summary btc.csv
      candlescope summary btc.json --json
    """
    config = get_config()
    series = load_series(path, fmt, config)

    result = get_summary(series, volume_levels=config["volume_profile"]["levels"])

    if isinstance(result, InsufficientData):
        fail(
            "Insufficient Data",
            f"{result.error}: need {result.required} candles, got {result.available}",
        )

    if as_json:
        print_json(result)
        return

    _render_summary(result)


@click.command()
@file_argument
@format_option
@json_option
def indicators(path: Path, fmt: Optional[str], as_json: bool) -> None:
    """Print moving averages, oscillators and bands.

    \b
    Examples:
      candlescope indicators btc.csv
    """
    config = get_config()
    series = load_series(path, fmt, config)
    if not series:
        fail("Insufficient Data", f"No candles in {path}")

    snapshot = calculate_indicator_snapshot(series)

    if as_json:
        print_json(snapshot)
        return

    table = Table(title=f"Indicators ({snapshot['candles']} candles)")
    table.add_column("Indicator", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Signal")

    rsi_signal, rsi_color = _interpret_rsi(snapshot["rsi"])
    stoch = snapshot["stochastic"]
    bb = snapshot["bollinger_bands"]
    macd = snapshot["macd"]
    ichimoku = snapshot["ichimoku"]

    for name, value in snapshot["sma"].items():
        table.add_row(name.upper(), f"{value:.2f}", "")
    for name, value in snapshot["ema"].items():
        table.add_row(name.upper(), f"{value:.2f}", "")
    table.add_row("RSI (14)", f"{snapshot['rsi']:.2f}", f"[{rsi_color}]{rsi_signal}[/{rsi_color}]")
    table.add_row("Stochastic K/D", f"{stoch.k:.2f} / {stoch.d:.2f}", "")
    table.add_row("Bollinger Upper", f"{bb.upper:.2f}", "")
    table.add_row("Bollinger Middle", f"{bb.middle:.2f}", "")
    table.add_row("Bollinger Lower", f"{bb.lower:.2f}", "")
    table.add_row("MACD", f"{macd.macd:.4f}", f"signal {macd.signal:.4f}")
    table.add_row("ATR", f"{snapshot['atr']:.2f}", "")
    table.add_row("Tenkan / Kijun", f"{ichimoku.tenkan_sen:.2f} / {ichimoku.kijun_sen:.2f}", "")
    table.add_row("Momentum", f"{snapshot['momentum']:+.2f}%", "")
    table.add_row("Volatility", f"{snapshot['volatility']:.2f}%", "")

    console.print(table)


@click.command()
@file_argument
@format_option
@json_option
def patterns(path: Path, fmt: Optional[str], as_json: bool) -> None:
    """Print candlestick patterns, chart patterns and divergences.

    \b
    Examples:
      candlescope patterns btc.csv
    """
    config = get_config()
    series = load_series(path, fmt, config)

    result = {
        "candles": find_candle_patterns(series[-5:]),
        "chart": find_chart_patterns(series[-100:]),
        "divergence": {
            kind.value: detect_divergence(series[-50:], kind)
            for kind in DivergenceIndicator
        },
    }

    if as_json:
        print_json(result)
        return

    lines = [
        f"[bold]Candlestick:[/bold] {', '.join(result['candles']) or '[dim]none[/dim]'}",
        f"[bold]Chart:[/bold] {', '.join(result['chart']) or '[dim]none[/dim]'}",
    ]
    for kind, found in result["divergence"].items():
        text = ", ".join(f"{d.type.value} {d.direction.value}" for d in found)
        lines.append(f"[bold]{kind.upper()} divergence:[/bold] {text or '[dim]none[/dim]'}")

    console.print(Panel(
        "\n".join(lines),
        title="[bold magenta]Patterns[/bold magenta]",
        border_style="magenta",
    ))
