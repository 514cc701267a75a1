"""Oscillator indicators - momentum measured on a bounded scale.

Includes:
- RSI (Relative Strength Index, Wilder smoothing)
- Stochastic Oscillator (%K / %D)
- CCI (Commodity Channel Index)
- Williams %R
- MFI (Money Flow Index)
- Aroon (up / down / oscillator)
- MACD
"""

from typing import NamedTuple, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from barsignals.indicators.indicators import (
    as_array,
    ema,
    ema_from_first_valid,
    highest,
    lowest,
    nan_array,
    sma,
)


class Stochastic(NamedTuple):
    k: np.ndarray
    d: np.ndarray


class Aroon(NamedTuple):
    up: np.ndarray
    down: np.ndarray
    oscillator: np.ndarray


class MACD(NamedTuple):
    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray


def _strength_index(
    up: float,
    down: float,
    no_loss_value: float,
    flat_value: float,
) -> float:
    """100 - 100 / (1 + up/down) with the zero-denominator policy applied."""
    if down == 0:
        return no_loss_value if up > 0 else flat_value
    return 100.0 - 100.0 / (1.0 + up / down)


def rsi(
    values: Sequence[float],
    period: int = 14,
    no_loss_value: float = 100.0,
    flat_value: float = 50.0,
) -> np.ndarray:
    """
    Calculate the Relative Strength Index.

    Initial average gain/loss is the plain mean of the first ``period``
    price changes; later values use Wilder smoothing
    ``avg = (avg * (period - 1) + new) / period``.

    When the average loss is 0 the ratio is undefined: the result is
    ``no_loss_value`` if there was any gain, otherwise ``flat_value``.

    Args:
        values: Sequence of close prices
        period: RSI period
        no_loss_value: RSI reported when avg loss is 0 and avg gain > 0
        flat_value: RSI reported when both averages are 0

    Returns:
        Array of RSI values, NaN for the first ``period`` positions
    """
    arr = as_array(values)
    n = len(arr)
    result = nan_array(n)
    if period < 1 or n < period + 1:
        return result

    deltas = np.diff(arr)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = gains[:period].mean()
    avg_loss = losses[:period].mean()
    result[period] = _strength_index(avg_gain, avg_loss, no_loss_value, flat_value)

    for i in range(period + 1, n):
        avg_gain = (avg_gain * (period - 1) + gains[i - 1]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i - 1]) / period
        result[i] = _strength_index(avg_gain, avg_loss, no_loss_value, flat_value)

    return result


def stochastic(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
    smooth_k: int = 3,
    smooth_d: int = 3,
) -> Stochastic:
    """
    Calculate the Stochastic Oscillator.

    %K = (close - lowest low) / (highest high - lowest low) * 100 over the
    trailing window, smoothed by SMA(smooth_k) when smooth_k > 1.
    %D = SMA(%K, smooth_d). A flat window leaves %K undefined (NaN).
    """
    hh = highest(highs, period)
    ll = lowest(lows, period)
    rng = hh - ll

    with np.errstate(divide="ignore", invalid="ignore"):
        raw_k = np.where(rng > 0, (as_array(closes) - ll) / rng * 100, np.nan)

    k = sma(raw_k, smooth_k) if smooth_k > 1 else raw_k
    d = sma(k, smooth_d)
    return Stochastic(k=k, d=d)


def cci(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 20,
) -> np.ndarray:
    """
    Calculate the Commodity Channel Index.

    CCI = (TP - SMA(TP)) / (0.015 * mean absolute deviation), with
    TP = (high + low + close) / 3. A zero mean deviation yields 0.
    """
    tp = (as_array(highs) + as_array(lows) + as_array(closes)) / 3
    result = nan_array(len(tp))
    if period < 1 or len(tp) < period:
        return result

    tp_sma = sma(tp, period)[period - 1:]
    windows = sliding_window_view(tp, period)
    mean_dev = np.abs(windows - tp_sma[:, None]).mean(axis=1)

    with np.errstate(divide="ignore", invalid="ignore"):
        values = (tp[period - 1:] - tp_sma) / (0.015 * mean_dev)
    result[period - 1:] = np.where(mean_dev == 0, 0.0, values)
    return result


def williams_r(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> np.ndarray:
    """Williams %R on a -100..0 scale. A flat window leaves it undefined."""
    hh = highest(highs, period)
    ll = lowest(lows, period)
    rng = hh - ll

    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(rng > 0, -100 * (hh - as_array(closes)) / rng, np.nan)


def mfi(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    volumes: Sequence[float],
    period: int = 14,
    no_loss_value: float = 100.0,
    flat_value: float = 50.0,
) -> np.ndarray:
    """
    Calculate the Money Flow Index (volume-weighted RSI).

    Raw money flow = typical price * volume, classified positive or negative
    by the change in typical price. A window without negative flow follows the
    same policy as RSI.
    """
    tp = (as_array(highs) + as_array(lows) + as_array(closes)) / 3
    n = len(tp)
    result = nan_array(n)
    if period < 1 or n < period + 1:
        return result

    raw_mf = tp * as_array(volumes)
    tp_change = np.diff(tp, prepend=tp[0])
    positive = np.where(tp_change > 0, raw_mf, 0.0)
    negative = np.where(tp_change < 0, raw_mf, 0.0)

    for i in range(period, n):
        pos_sum = positive[i - period + 1:i + 1].sum()
        neg_sum = negative[i - period + 1:i + 1].sum()
        result[i] = _strength_index(pos_sum, neg_sum, no_loss_value, flat_value)

    return result


def aroon(
    highs: Sequence[float],
    lows: Sequence[float],
    period: int = 14,
) -> Aroon:
    """
    Calculate Aroon up/down and the Aroon oscillator.

    up = (period - bars since highest high) / period * 100, down likewise
    for the lowest low; oscillator = up - down, bounded to [-100, 100].
    """
    high_arr = as_array(highs)
    low_arr = as_array(lows)
    n = len(high_arr)
    up = nan_array(n)
    down = nan_array(n)
    if period < 1:
        return Aroon(up=up, down=down, oscillator=up - down)

    for i in range(period - 1, n):
        highest_idx = lowest_idx = i
        highest_high = high_arr[i]
        lowest_low = low_arr[i]

        for j in range(i - period + 1, i + 1):
            if high_arr[j] > highest_high:
                highest_high = high_arr[j]
                highest_idx = j
            if low_arr[j] < lowest_low:
                lowest_low = low_arr[j]
                lowest_idx = j

        up[i] = (period - (i - highest_idx)) / period * 100
        down[i] = (period - (i - lowest_idx)) / period * 100

    return Aroon(up=up, down=down, oscillator=up - down)


def macd(
    values: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACD:
    """
    Calculate MACD line, signal line and histogram (all index-aligned).

    The signal line is the EMA of the defined part of the MACD line.
    """
    line = ema(values, fast_period) - ema(values, slow_period)
    signal = ema_from_first_valid(line, signal_period)
    return MACD(macd=line, signal=signal, histogram=line - signal)
