"""Bar (OHLCV candle) data models."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict


class Bar(BaseModel):
    """One OHLCV sample.

    ``time`` is an opaque ordering key (timestamp, datetime, string...). It is
    carried through to observers but never interpreted.
    """

    model_config = ConfigDict(frozen=True)

    time: Any = None
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def is_bullish(self) -> bool:
        """Check if this is a bullish (green) candle."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """Check if this is a bearish (red) candle."""
        return self.close < self.open

    @property
    def body_size(self) -> float:
        """Get the absolute size of the candle body."""
        return abs(self.close - self.open)

    @property
    def range_size(self) -> float:
        """Get the full range (high - low) of the candle."""
        return self.high - self.low


class BarSeries:
    """Immutable, index-aligned view over an ordered bar sequence.

    Columns are float64 numpy arrays; position in the sequence is the time
    axis shared by every derived series.
    """

    __slots__ = ("bars", "times", "opens", "highs", "lows", "closes", "volumes")

    def __init__(self, bars: Iterable[Bar | Mapping[str, Any]]):
        self.bars: tuple[Bar, ...] = tuple(
            b if isinstance(b, Bar) else Bar.model_validate(b) for b in bars
        )
        self.times = [b.time for b in self.bars]
        self.opens = self._column("open")
        self.highs = self._column("high")
        self.lows = self._column("low")
        self.closes = self._column("close")
        self.volumes = self._column("volume")

    def _column(self, field: str) -> np.ndarray:
        arr = np.array([getattr(b, field) for b in self.bars], dtype=np.float64)
        arr.setflags(write=False)
        return arr

    def __len__(self) -> int:
        return len(self.bars)

    def __getitem__(self, index: int) -> Bar:
        return self.bars[index]
