"""Tests for the candlescope command line interface."""

import json
import math
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from click.testing import CliRunner

from candlescope.cli.main import cli


def write_candles(path: Path, num_candles: int) -> Path:
    base_time = datetime(2024, 1, 1)
    lines = ["time,open,high,low,close,volume"]
    prev = 100.0
    for i in range(num_candles):
        close = 100.0 + 5 * math.sin(i / 8) + 0.05 * i
        high = max(prev, close) + 0.8
        low = min(prev, close) - 0.8
        time = (base_time + timedelta(hours=i)).isoformat()
        lines.append(f"{time},{prev},{high},{low},{close},{1000 + i}")
        prev = close
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    """Point the CLI at a config file that does not exist."""
    monkeypatch.setenv("CANDLESCOPE_CONFIG", str(tmp_path / "missing.toml"))


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def candle_file(tmp_path: Path) -> Path:
    return write_candles(tmp_path / "candles.csv", 250)


class TestCommands:

    def test_lists_commands(self, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in ("summary", "indicators", "patterns", "levels", "sentiment"):
            assert name in result.output

    def test_summary_json(self, runner: CliRunner, candle_file: Path):
        result = runner.invoke(cli, ["summary", str(candle_file), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["kind"] == "summary"
        assert "signals" in data
        assert data["trend"] in {"Strong Bullish", "Bullish", "Strong Bearish", "Bearish", "Neutral"}

    def test_summary_table(self, runner: CliRunner, candle_file: Path):
        result = runner.invoke(cli, ["summary", str(candle_file)])

        assert result.exit_code == 0, result.output
        assert "Technical Summary" in result.output

    def test_summary_insufficient_data(self, runner: CliRunner, tmp_path: Path):
        path = write_candles(tmp_path / "short.csv", 150)

        result = runner.invoke(cli, ["summary", str(path)])

        assert result.exit_code == 1
        assert "need 200 candles, got 150" in result.output

    def test_summary_uses_configured_levels(self, runner: CliRunner, candle_file: Path, tmp_path: Path, monkeypatch):
        config = tmp_path / "config.toml"
        config.write_text("[volume_profile]\nlevels = 6\n")
        monkeypatch.setenv("CANDLESCOPE_CONFIG", str(config))

        result = runner.invoke(cli, ["summary", str(candle_file), "--json"])

        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)["volume"]["profile"]["profile"]) == 6

    def test_indicators(self, runner: CliRunner, tmp_path: Path):
        path = write_candles(tmp_path / "few.csv", 40)

        table = runner.invoke(cli, ["indicators", str(path)])
        as_json = runner.invoke(cli, ["indicators", str(path), "--json"])

        assert table.exit_code == 0, table.output
        assert "RSI (14)" in table.output
        data = json.loads(as_json.output)
        assert data["candles"] == 40
        assert 0 <= data["rsi"] <= 100

    def test_patterns_json(self, runner: CliRunner, candle_file: Path):
        result = runner.invoke(cli, ["patterns", str(candle_file), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert set(data) == {"candles", "chart", "divergence"}
        assert set(data["divergence"]) == {"rsi", "macd"}

    def test_levels_json(self, runner: CliRunner, candle_file: Path):
        result = runner.invoke(cli, ["levels", str(candle_file), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        sr = data["support_resistance"]
        assert sr["support"] <= sr["resistance"]
        assert data["fibonacci"]["level_0"] == sr["support"]

    def test_sentiment_seed_is_reproducible(self, runner: CliRunner, candle_file: Path):
        args = ["sentiment", str(candle_file), "--seed", "11", "--json"]

        first = runner.invoke(cli, args)
        second = runner.invoke(cli, args)

        assert first.exit_code == 0, first.output
        assert first.output == second.output
        assert json.loads(first.output)["sentiment"]["overall"] in {"bullish", "bearish", "neutral"}

    def test_missing_file(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, ["levels", str(tmp_path / "nope.csv")])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_file(self, runner: CliRunner, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("[1, 2, 3]")

        result = runner.invoke(cli, ["summary", str(path)])

        assert result.exit_code == 1
