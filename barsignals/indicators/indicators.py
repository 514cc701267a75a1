"""Core technical indicators: moving averages, extremes and ranges.

Every function takes plain sequences (lists, tuples or numpy arrays) and
returns a float64 numpy array of the same length. Positions that cannot be
computed yet (the warm-up window) hold NaN, so every derived series stays
index-aligned with the input bars.
"""

from typing import Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view


def as_array(values: Sequence[float]) -> np.ndarray:
    """Copy a sequence into a float64 array."""
    return np.array(values, dtype=np.float64)


def nan_array(n: int) -> np.ndarray:
    """Array of n NaN values."""
    return np.full(n, np.nan, dtype=np.float64)


def rolling_apply(values: Sequence[float], period: int, func) -> np.ndarray:
    """Apply a window reduction over each trailing ``period`` window."""
    arr = as_array(values)
    result = nan_array(len(arr))
    if period < 1 or len(arr) < period:
        return result

    windows = sliding_window_view(arr, period)
    result[period - 1:] = func(windows, axis=1)
    return result


def sma(values: Sequence[float], period: int) -> np.ndarray:
    """
    Calculate Simple Moving Average.

    Args:
        values: Sequence of price values
        period: SMA period

    Returns:
        Array of SMA values, NaN for the first ``period - 1`` positions
    """
    return rolling_apply(values, period, np.mean)


def ema(values: Sequence[float], period: int) -> np.ndarray:
    """
    Calculate Exponential Moving Average.

    Seeded with the simple average of the first ``period`` values, then
    ``ema[i] = (x[i] - ema[i-1]) * 2 / (period + 1) + ema[i-1]``.

    Args:
        values: Sequence of price values
        period: EMA period

    Returns:
        Array of EMA values (NaN before index ``period - 1``)
    """
    arr = as_array(values)
    result = nan_array(len(arr))
    if period < 1 or len(arr) < period:
        return result

    multiplier = 2.0 / (period + 1)
    result[period - 1] = np.mean(arr[:period])

    for i in range(period, len(arr)):
        result[i] = (arr[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


def ema_from_first_valid(values: Sequence[float], period: int) -> np.ndarray:
    """EMA of a series that starts with a NaN warm-up window.

    The EMA is computed over the defined tail and written back in place so the
    result stays aligned with ``values``.
    """
    arr = as_array(values)
    result = nan_array(len(arr))
    valid = np.flatnonzero(~np.isnan(arr))
    if len(valid) == 0:
        return result

    start = valid[0]
    result[start:] = ema(arr[start:], period)
    return result


def wilder_smoothing(values: Sequence[float], period: int) -> np.ndarray:
    """
    Wilder's smoothing (RMA).

    Seeded with the mean of the first ``period`` values at ``period - 1``;
    afterwards ``avg = (avg * (period - 1) + x) / period``.
    """
    arr = as_array(values)
    result = nan_array(len(arr))
    if period < 1 or len(arr) < period:
        return result

    result[period - 1] = np.mean(arr[:period])
    for i in range(period, len(arr)):
        result[i] = (result[i - 1] * (period - 1) + arr[i]) / period

    return result


def highest(values: Sequence[float], period: int) -> np.ndarray:
    """
    Calculate highest value over lookback period.

    Args:
        values: Sequence of values (typically highs)
        period: Lookback period

    Returns:
        Array of highest values
    """
    return rolling_apply(values, period, np.max)


def lowest(values: Sequence[float], period: int) -> np.ndarray:
    """
    Calculate lowest value over lookback period.

    Args:
        values: Sequence of values (typically lows)
        period: Lookback period

    Returns:
        Array of lowest values
    """
    return rolling_apply(values, period, np.min)


def true_range(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> np.ndarray:
    """
    Calculate True Range.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))

    The first bar has no previous close, so its TR is high - low.

    Args:
        highs: Sequence of high prices
        lows: Sequence of low prices
        closes: Sequence of close prices

    Returns:
        Array of True Range values
    """
    high_arr = as_array(highs)
    low_arr = as_array(lows)
    close_arr = as_array(closes)
    if len(high_arr) == 0:
        return nan_array(0)

    result = high_arr - low_arr
    prev_close = close_arr[:-1]
    result[1:] = np.maximum.reduce([
        high_arr[1:] - low_arr[1:],
        np.abs(high_arr[1:] - prev_close),
        np.abs(low_arr[1:] - prev_close),
    ])
    return result


def atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> np.ndarray:
    """
    Calculate Average True Range (ATR).

    Uses RMA (Relative Moving Average) / Wilder's smoothing.

    Args:
        highs: Sequence of high prices
        lows: Sequence of low prices
        closes: Sequence of close prices
        period: ATR period

    Returns:
        Array of ATR values
    """
    return wilder_smoothing(true_range(highs, lows, closes), period)


def vwap(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    volumes: Sequence[float],
) -> np.ndarray:
    """
    Calculate Volume Weighted Average Price (VWAP).

    This is a simple cumulative typical-price VWAP with no session reset.
    While cumulative volume is still zero the close is used.

    Args:
        highs: Sequence of high prices
        lows: Sequence of low prices
        closes: Sequence of close prices
        volumes: Sequence of volumes

    Returns:
        Array of VWAP values
    """
    close_arr = as_array(closes)
    if len(close_arr) == 0:
        return nan_array(0)

    vol_arr = as_array(volumes)
    typical = (as_array(highs) + as_array(lows) + close_arr) / 3
    cum_vol = np.cumsum(vol_arr)
    cum_pv = np.cumsum(typical * vol_arr)

    result = close_arr.copy()
    has_volume = cum_vol > 0
    result[has_volume] = cum_pv[has_volume] / cum_vol[has_volume]
    return result


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation of a whole sample (NaN when empty)."""
    arr = as_array(values)
    if len(arr) == 0:
        return float("nan")
    return float(np.sqrt(np.mean((arr - arr.mean()) ** 2)))


def trailing_mean(values: Sequence[float], lookback: int) -> np.ndarray:
    """Sum of up to ``lookback`` previous values divided by ``lookback``.

    The current value is excluded. Index 0 has no history and is NaN; early
    indices with fewer than ``lookback`` predecessors are still divided by
    ``lookback``.
    """
    arr = as_array(values)
    result = nan_array(len(arr))
    if len(arr) == 0 or lookback < 1:
        return result

    cum = np.concatenate(([0.0], np.cumsum(arr)))
    for i in range(1, len(arr)):
        start = max(0, i - lookback)
        result[i] = (cum[i] - cum[start]) / lookback
    return result
