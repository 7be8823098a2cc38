"""Candle file loading for backtesting.

Supported formats:
- CSV with a header containing time, open, high, low, close[, volume]
- JSON array of objects with the same keys

`time` is epoch milliseconds. Rows are sorted by time and duplicate
timestamps keep the last row.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path

from engine.models.candle import Candle

logger = logging.getLogger(__name__)

_REQUIRED = ("time", "open", "high", "low", "close")


def _row_to_candle(row: dict) -> Candle:
    missing = [k for k in _REQUIRED if row.get(k) in (None, "")]
    if missing:
        raise ValueError(f"candle row missing {missing}: {row}")
    return Candle(
        time=int(float(row["time"])),
        open=float(row["open"]),
        high=float(row["high"]),
        low=float(row["low"]),
        close=float(row["close"]),
        volume=float(row.get("volume") or 0.0),
    )


def load_candles(path: Path | str) -> list[Candle]:
    """Load candles from a CSV or JSON file.

    Raises:
        ValueError: If the format is unsupported or a row is incomplete.
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()

    if suffix == ".csv":
        with open(file_path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
    elif suffix == ".json":
        with open(file_path, encoding="utf-8") as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise ValueError(f"{file_path}: expected a JSON array of candles")
    else:
        raise ValueError(f"Unsupported candle file format: {suffix or '(none)'}")

    by_time = {c.time: c for c in (_row_to_candle(r) for r in rows)}
    candles = [by_time[t] for t in sorted(by_time)]
    logger.info("Loaded %d candles from %s", len(candles), file_path)
    return candles
