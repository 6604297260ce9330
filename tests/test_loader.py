"""Tests for candle file loading and configuration."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from candlescope.config import DEFAULTS, load_config
from candlescope.data import load_candles
from candlescope.models import Candle, to_series


CSV_CONTENT = """time,open,high,low,close,volume
2024-01-01T02:00:00,102,104,101,103,1500
2024-01-01T00:00:00,100,101,99,100.5,1000
2024-01-01T01:00:00,100.5,102.5,100,102,1200
2024-01-01T01:00:00,100.5,103,100,102.5,1300
"""


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "candles.csv"
    path.write_text(CSV_CONTENT)
    return path


class TestToSeries:

    def test_sorts_and_keeps_last_duplicate(self):
        t0 = datetime(2024, 1, 1, 0)
        t1 = datetime(2024, 1, 1, 1)
        first = Candle(time=t1, open=1, high=2, low=1, close=2, volume=1)
        second = Candle(time=t1, open=1, high=3, low=1, close=3, volume=1)
        earlier = Candle(time=t0, open=1, high=1, low=1, close=1, volume=1)

        series = to_series([first, earlier, second])

        assert series == [earlier, second]


class TestLoadCandles:

    def test_csv(self, csv_file: Path):
        candles = load_candles(csv_file)

        assert len(candles) == 3
        assert [c.time.hour for c in candles] == [0, 1, 2]
        assert candles[1].close == 102.5  # later duplicate wins
        assert candles[2].volume == 1500

    def test_json_objects(self, tmp_path: Path):
        path = tmp_path / "candles.json"
        path.write_text(json.dumps([
            {"time": "2024-01-01T00:00:00", "open": 10, "high": 11, "low": 9, "close": 10.5, "volume": 5},
            {"time": "2024-01-01T00:01:00", "open": 10.5, "high": 12, "low": 10, "close": 11, "volume": 7},
        ]))

        candles = load_candles(path)

        assert [c.close for c in candles] == [10.5, 11]

    def test_json_klines(self, tmp_path: Path):
        path = tmp_path / "klines.json"
        path.write_text(json.dumps([
            [1704067200000, "42000.0", "42100.5", "41900.0", "42050.0", "12.5", 1704070799999],
            [1704070800000, "42050.0", "42200.0", "42000.0", "42150.0", "8.25", 1704074399999],
        ]))

        candles = load_candles(path)

        assert candles[0].time == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert candles[0].close == 42050.0
        assert candles[1].volume == 8.25

    def test_mixed_klines_and_naive_objects_rejected(self, tmp_path: Path):
        path = tmp_path / "mixed.json"
        path.write_text(json.dumps([
            [1704067200000, "1", "2", "0.5", "1.5", "3"],
            {"time": "2024-01-01T02:00:00", "open": 1, "high": 2, "low": 0.5, "close": 1.5, "volume": 3},
        ]))
        with pytest.raises(ValueError, match="Inconsistent candle timestamps"):
            load_candles(path)

    def test_explicit_format_overrides_extension(self, tmp_path: Path):
        path = tmp_path / "candles.txt"
        path.write_text(CSV_CONTENT)
        assert len(load_candles(path, fmt="csv")) == 3

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_candles(tmp_path / "nope.csv")

    def test_unknown_extension(self, tmp_path: Path):
        path = tmp_path / "candles.txt"
        path.write_text(CSV_CONTENT)
        with pytest.raises(ValueError):
            load_candles(path)

    def test_missing_columns(self, tmp_path: Path):
        path = tmp_path / "bad.csv"
        path.write_text("time,open,close\n2024-01-01,1,2\n")
        with pytest.raises(ValueError, match="missing columns"):
            load_candles(path)

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_candles(path)

    def test_negative_price_rejected(self, tmp_path: Path):
        path = tmp_path / "neg.json"
        path.write_text(json.dumps([
            {"time": "2024-01-01T00:00:00", "open": -1, "high": 1, "low": 0, "close": 1, "volume": 1},
        ]))
        with pytest.raises(ValueError, match="Invalid candle data"):
            load_candles(path)


class TestConfig:

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        assert load_config(tmp_path / "config.toml") == DEFAULTS

    def test_values_merge_over_defaults(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text('[volume_profile]\nlevels = 12\n\n[data]\nformat = "json"\n')

        config = load_config(path)

        assert config["volume_profile"]["levels"] == 12
        assert config["data"]["format"] == "json"
        assert config["prediction"]["seed"] is None

    def test_unparseable_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[volume_profile\nlevels = ")
        assert load_config(path) == DEFAULTS

    def test_env_var_points_at_config(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text("[prediction]\nseed = 7\n")
        monkeypatch.setenv("CANDLESCOPE_CONFIG", str(path))

        assert load_config()["prediction"]["seed"] == 7
