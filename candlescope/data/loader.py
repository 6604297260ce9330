"""Load candle series from CSV or JSON files.

CSV files need a header with ``time,open,high,low,close,volume``. JSON
files hold either a list of objects with those keys or exchange kline
arrays ``[open_time, open, high, low, close, volume, ...]`` as returned
by the Binance REST API.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import pandas as pd
from pydantic import ValidationError

from candlescope.models import Candle, to_series

logger = logging.getLogger(__name__)

COLUMNS = ["time", "open", "high", "low", "close", "volume"]
FORMATS = ("csv", "json")


def _detect_format(path: Path) -> str:
    suffix = path.suffix.lower().lstrip(".")
    if suffix in FORMATS:
        return suffix
    raise ValueError(f"Cannot infer candle format from '{path.name}', use csv or json")


def _read_csv(path: Path) -> list[dict[str, Any]]:
    try:
        df = pd.read_csv(path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ValueError(f"Unreadable CSV file {path}: {e}") from e

    df.columns = df.columns.str.strip().str.lower()
    missing = [col for col in COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"CSV file {path} is missing columns: {', '.join(missing)}")

    return df[COLUMNS].to_dict("records")


def _read_json(path: Path) -> list[dict[str, Any]]:
    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValueError(f"Unreadable JSON file {path}: {e}") from e

    if not isinstance(raw, list):
        raise ValueError(f"JSON file {path} must contain a list of candles")

    rows = []
    for item in raw:
        if isinstance(item, dict):
            rows.append(item)
        elif isinstance(item, list) and len(item) >= 6:
            # Kline values are strings except the open time
            rows.append(dict(zip(COLUMNS, item[:6])))
        else:
            raise ValueError(f"Unsupported candle entry in {path}: {item!r}")
    return rows


def load_candles(path: Path, fmt: Optional[str] = None) -> list[Candle]:
    """Load a candle series from a file.

    Args:
        path: CSV or JSON file
        fmt: "csv" or "json" (inferred from the extension when omitted)

    Returns:
        Candles sorted by time with duplicate timestamps removed.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the content cannot be parsed into candles.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Candle file not found: {path}")

    fmt = (fmt or _detect_format(path)).lower()
    if fmt == "csv":
        rows = _read_csv(path)
    elif fmt == "json":
        rows = _read_json(path)
    else:
        raise ValueError(f"Unknown candle format '{fmt}', use csv or json")

    try:
        candles = [Candle(**row) for row in rows]
    except (ValidationError, TypeError) as e:
        raise ValueError(f"Invalid candle data in {path}: {e}") from e

    logger.debug("Loaded %d candles from %s", len(candles), path)

    try:
        return to_series(candles)
    except TypeError as e:
        # Mixed naive and timezone-aware timestamps cannot be ordered
        raise ValueError(f"Inconsistent candle timestamps in {path}: {e}") from e
