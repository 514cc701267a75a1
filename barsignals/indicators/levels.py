"""Price level indicators - support/resistance derived from prior prices.

Includes:
- Pivot Points (classic, previous bar)
- Fibonacci retracement series (rolling window)
- Fibonacci levels snapshot (whole sample)
- Ichimoku lines and cloud position
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Sequence

import numpy as np

from barsignals.indicators.indicators import as_array, highest, lowest

RETRACEMENT_RATIOS = (0.236, 0.382, 0.5, 0.618)
FIBONACCI_LEVELS = ("0", "0.236", "0.382", "0.5", "0.618", "0.786", "1")


class PivotPoints(NamedTuple):
    pivot: np.ndarray
    r1: np.ndarray
    r2: np.ndarray
    r3: np.ndarray
    s1: np.ndarray
    s2: np.ndarray
    s3: np.ndarray


class FibonacciRetracement(NamedTuple):
    fib_236: np.ndarray
    fib_382: np.ndarray
    fib_500: np.ndarray
    fib_618: np.ndarray


class Ichimoku(NamedTuple):
    tenkan: np.ndarray
    kijun: np.ndarray
    senkou_a: np.ndarray
    senkou_b: np.ndarray


class CloudPosition(str, Enum):
    """Where a price sits relative to the Ichimoku cloud."""

    BULLISH = "bullish"  # above the cloud
    BEARISH = "bearish"  # below the cloud
    NEUTRAL = "neutral"  # inside, or cloud undefined


@dataclass(frozen=True)
class FibonacciLevels:
    """Fibonacci levels measured up from the sample low."""

    levels: dict[str, float] = field(default_factory=dict)
    current_level: str = "0"
    retracement: float = 0.0
    current_price: float | None = None


def pivot_points(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> PivotPoints:
    """
    Calculate classic pivot points from the previous bar's high/low/close.

    pivot = (H + L + C) / 3
    R1 = 2P - L, S1 = 2P - H
    R2 = P + (H - L), S2 = P - (H - L)
    R3 = H + 2(P - L), S3 = L - 2(H - P)

    The first bar has no previous bar, so every level is NaN there.
    """
    high_arr = as_array(highs)
    low_arr = as_array(lows)
    close_arr = as_array(closes)
    n = len(high_arr)

    prev_high = np.concatenate(([np.nan], high_arr[:-1])) if n else high_arr
    prev_low = np.concatenate(([np.nan], low_arr[:-1])) if n else low_arr
    prev_close = np.concatenate(([np.nan], close_arr[:-1])) if n else close_arr

    pivot = (prev_high + prev_low + prev_close) / 3
    prev_range = prev_high - prev_low
    return PivotPoints(
        pivot=pivot,
        r1=2 * pivot - prev_low,
        r2=pivot + prev_range,
        r3=prev_high + 2 * (pivot - prev_low),
        s1=2 * pivot - prev_high,
        s2=pivot - prev_range,
        s3=prev_low - 2 * (prev_high - pivot),
    )


def fibonacci_retracement(
    highs: Sequence[float],
    lows: Sequence[float],
    period: int = 20,
) -> FibonacciRetracement:
    """
    Calculate rolling Fibonacci retracement levels.

    Levels are measured down from the trailing window's highest high:
    ``level = highest - ratio * (highest - lowest)``.
    """
    hh = highest(highs, period)
    ll = lowest(lows, period)
    diff = hh - ll
    fib_236, fib_382, fib_500, fib_618 = (hh - ratio * diff for ratio in RETRACEMENT_RATIOS)
    return FibonacciRetracement(fib_236, fib_382, fib_500, fib_618)


def fibonacci_levels(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> FibonacciLevels:
    """
    Snapshot of Fibonacci levels over the whole sample.

    Levels run from the lowest low ("0") to the highest high ("1"), rounded
    to 2 decimals. ``current_level`` is the highest level at or below the
    last close. Empty or all-NaN input gives an empty snapshot.
    """
    high_arr = as_array(highs)
    low_arr = as_array(lows)
    close_arr = as_array(closes)
    high_arr = high_arr[~np.isnan(high_arr)]
    low_arr = low_arr[~np.isnan(low_arr)]
    if len(high_arr) == 0 or len(low_arr) == 0 or len(close_arr) == 0:
        return FibonacciLevels()

    current_price = float(close_arr[-1])
    if math.isnan(current_price):
        return FibonacciLevels()

    high = float(high_arr.max())
    low = float(low_arr.min())
    diff = high - low

    levels = {"0": low}
    for name in FIBONACCI_LEVELS[1:-1]:
        levels[name] = round(low + diff * float(name), 2)
    levels["1"] = high

    current_level = "0"
    for name, price in levels.items():
        if current_price >= price:
            current_level = name

    return FibonacciLevels(
        levels=levels,
        current_level=current_level,
        retracement=float(current_level),
        current_price=round(current_price, 2),
    )


def _midpoint(highs: Sequence[float], lows: Sequence[float], period: int) -> np.ndarray:
    return (highest(highs, period) + lowest(lows, period)) / 2


def ichimoku(
    highs: Sequence[float],
    lows: Sequence[float],
    conversion_period: int = 9,
    base_period: int = 26,
    span_b_period: int = 52,
) -> Ichimoku:
    """
    Calculate Ichimoku lines (undisplaced).

    tenkan = midpoint of the conversion window, kijun = midpoint of the base
    window, senkou A = (tenkan + kijun) / 2, senkou B = midpoint of the
    span B window. The forward displacement is left to the caller so the
    output stays free of look-ahead.
    """
    tenkan = _midpoint(highs, lows, conversion_period)
    kijun = _midpoint(highs, lows, base_period)
    return Ichimoku(
        tenkan=tenkan,
        kijun=kijun,
        senkou_a=(tenkan + kijun) / 2,
        senkou_b=_midpoint(highs, lows, span_b_period),
    )


def cloud_position(close: float, senkou_a: float, senkou_b: float) -> CloudPosition:
    """Classify a close against the cloud formed by senkou A and B."""
    if any(math.isnan(v) for v in (close, senkou_a, senkou_b)):
        return CloudPosition.NEUTRAL
    if close > max(senkou_a, senkou_b):
        return CloudPosition.BULLISH
    if close < min(senkou_a, senkou_b):
        return CloudPosition.BEARISH
    return CloudPosition.NEUTRAL
