"""Volatility, trend-strength and volume-flow indicators.

Includes:
- Bollinger Bands
- ADX (+DI / -DI)
- Choppiness Index
- Linear regression slope
- CMF (Chaikin Money Flow)
- Supertrend
"""

from typing import NamedTuple, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from barsignals.indicators.indicators import (
    as_array,
    atr,
    ema,
    highest,
    lowest,
    nan_array,
    rolling_apply,
    sma,
    true_range,
    wilder_smoothing,
)

# Denominators below these are treated as zero
SLOPE_EPSILON = 1e-12
CHOP_RANGE_EPSILON = 1e-10


class BollingerBands(NamedTuple):
    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray


class DirectionalIndex(NamedTuple):
    adx: np.ndarray
    plus_di: np.ndarray
    minus_di: np.ndarray


class Supertrend(NamedTuple):
    upper: np.ndarray
    lower: np.ndarray
    trend: np.ndarray  # +1 bullish, -1 bearish, 0 undecided
    value: np.ndarray


def _ratio(numerator: np.ndarray, denominator: np.ndarray) -> np.ndarray:
    """numerator / denominator, 0 where the denominator is 0, NaN stays NaN."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(denominator == 0, 0.0, numerator / denominator)


def bollinger_bands(
    values: Sequence[float],
    period: int = 20,
    num_std: float = 2.0,
) -> BollingerBands:
    """
    Calculate Bollinger Bands.

    middle = SMA(period); upper/lower = middle +/- num_std * population
    standard deviation of the trailing window (divides by ``period``).
    """
    middle = sma(values, period)
    std = rolling_apply(values, period, np.std)
    return BollingerBands(
        upper=middle + num_std * std,
        middle=middle,
        lower=middle - num_std * std,
    )


def adx(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> DirectionalIndex:
    """
    Calculate the Average Directional Index with +DI / -DI.

    True range and directional movement are taken per bar transition and
    smoothed with the EMA recurrence. DX = |+DI - -DI| / (+DI + -DI) * 100
    and ADX is the Wilder average of DX, seeded with the mean of the first
    ``period`` DX values (position ``2 * period - 2`` of the transition
    series).

    Values derived from the transition ``i-1 -> i`` are stored at bar ``i``,
    so the first ADX value appears at bar ``2 * period - 1``.
    """
    high_arr = as_array(highs)
    low_arr = as_array(lows)
    close_arr = as_array(closes)
    n = len(high_arr)
    out_adx, out_plus, out_minus = nan_array(n), nan_array(n), nan_array(n)
    if n < 2 or period < 1:
        return DirectionalIndex(out_adx, out_plus, out_minus)

    tr = true_range(high_arr, low_arr, close_arr)[1:]
    high_diff = high_arr[1:] - high_arr[:-1]
    low_diff = low_arr[:-1] - low_arr[1:]
    plus_dm = np.where((high_diff > low_diff) & (high_diff > 0), high_diff, 0.0)
    minus_dm = np.where((low_diff > high_diff) & (low_diff > 0), low_diff, 0.0)

    smooth_tr = ema(tr, period)
    plus_di = _ratio(ema(plus_dm, period), smooth_tr) * 100
    minus_di = _ratio(ema(minus_dm, period), smooth_tr) * 100
    dx = _ratio(np.abs(plus_di - minus_di), plus_di + minus_di) * 100

    adx_values = nan_array(len(dx))
    adx_values[period - 1:] = wilder_smoothing(dx[period - 1:], period)

    # Transition i-1 -> i is reported at bar i (first ADX at bar 2 * period - 1)
    out_adx[1:] = adx_values
    out_plus[1:] = plus_di
    out_minus[1:] = minus_di
    return DirectionalIndex(out_adx, out_plus, out_minus)


def choppiness_index(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> np.ndarray:
    """
    Calculate the Choppiness Index.

    CHOP = 100 * log10(sum(TR) / (highest high - lowest low)) / log10(period)

    Each window needs the close before it, so the first ``period`` values are
    NaN. A collapsed range (< 1e-10) reports 100. Results are clamped to
    [0, 100].
    """
    high_arr = as_array(highs)
    n = len(high_arr)
    result = nan_array(n)
    if period < 2 or n <= period:
        return result

    sum_tr = rolling_apply(true_range(highs, lows, closes), period, np.sum)
    price_range = highest(high_arr, period) - lowest(lows, period)

    rng = price_range[period:]
    with np.errstate(divide="ignore", invalid="ignore"):
        chop = 100 * np.log10(sum_tr[period:] / rng) / np.log10(period)
    chop = np.where(rng < CHOP_RANGE_EPSILON, 100.0, chop)
    result[period:] = np.clip(chop, 0.0, 100.0)
    return result


def linear_regression_slope(values: Sequence[float], period: int = 14) -> np.ndarray:
    """
    Least-squares slope of each trailing window against x = 0..period-1.

    A numerically degenerate denominator (|n*sum(x^2) - sum(x)^2| < 1e-12)
    gives a slope of 0.
    """
    arr = as_array(values)
    result = nan_array(len(arr))
    if period < 1 or len(arr) < period:
        return result

    x = np.arange(period, dtype=np.float64)
    sum_x = x.sum()
    sum_xx = (x * x).sum()
    denominator = period * sum_xx - sum_x * sum_x
    if abs(denominator) < SLOPE_EPSILON:
        result[period - 1:] = 0.0
        return result

    windows = sliding_window_view(arr, period)
    sum_y = windows.sum(axis=1)
    sum_xy = windows @ x
    result[period - 1:] = (period * sum_xy - sum_x * sum_y) / denominator
    return result


def cmf(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    volumes: Sequence[float],
    period: int = 20,
) -> np.ndarray:
    """
    Calculate Chaikin Money Flow.

    CMF = sum(money flow volume) / sum(volume) over the trailing window.
    The money flow multiplier is 0 for a bar whose high equals its low, and
    a window with zero total volume reports 0.
    """
    high_arr = as_array(highs)
    low_arr = as_array(lows)
    close_arr = as_array(closes)
    vol_arr = as_array(volumes)

    bar_range = high_arr - low_arr
    multiplier = _ratio((close_arr - low_arr) - (high_arr - close_arr), bar_range)
    mf_volume = multiplier * vol_arr

    sum_mfv = rolling_apply(mf_volume, period, np.sum)
    sum_vol = rolling_apply(vol_arr, period, np.sum)
    return _ratio(sum_mfv, sum_vol)


def supertrend(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 10,
    multiplier: float = 3.0,
) -> Supertrend:
    """
    Calculate Supertrend final bands and direction.

    Basic bands are hl2 +/- multiplier * ATR. The final upper band only moves
    down (and the lower band only up) unless the previous close broke through
    it. Trend turns +1 when the close rises above the previous final upper
    band, -1 when it falls below the previous final lower band, and otherwise
    keeps its previous value (0 until the first break). ``value`` is the
    trailing band for the current trend.
    """
    high_arr = as_array(highs)
    low_arr = as_array(lows)
    close_arr = as_array(closes)
    n = len(close_arr)

    atr_values = atr(high_arr, low_arr, close_arr, period)
    hl2 = (high_arr + low_arr) / 2
    basic_upper = hl2 + multiplier * atr_values
    basic_lower = hl2 - multiplier * atr_values

    upper = nan_array(n)
    lower = nan_array(n)
    trend = nan_array(n)
    value = nan_array(n)

    for i in range(n):
        if np.isnan(basic_upper[i]):
            continue
        if i == 0 or np.isnan(upper[i - 1]):
            upper[i] = basic_upper[i]
            lower[i] = basic_lower[i]
            trend[i] = 0.0
            continue

        prev_close = close_arr[i - 1]
        if basic_upper[i] < upper[i - 1] or prev_close > upper[i - 1]:
            upper[i] = basic_upper[i]
        else:
            upper[i] = upper[i - 1]
        if basic_lower[i] > lower[i - 1] or prev_close < lower[i - 1]:
            lower[i] = basic_lower[i]
        else:
            lower[i] = lower[i - 1]

        if close_arr[i] > upper[i - 1]:
            trend[i] = 1.0
        elif close_arr[i] < lower[i - 1]:
            trend[i] = -1.0
        else:
            trend[i] = trend[i - 1]

        if trend[i] > 0:
            value[i] = lower[i]
        elif trend[i] < 0:
            value[i] = upper[i]

    return Supertrend(upper=upper, lower=lower, trend=trend, value=value)
