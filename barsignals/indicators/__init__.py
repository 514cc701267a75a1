"""Technical indicators (pure math, no I/O)."""

from barsignals.indicators.calculator import IndicatorCalculator
from barsignals.indicators.indicators import (
    atr,
    ema,
    highest,
    lowest,
    sma,
    standard_deviation,
    trailing_mean,
    true_range,
    vwap,
    wilder_smoothing,
)
from barsignals.indicators.levels import (
    CloudPosition,
    FibonacciLevels,
    cloud_position,
    fibonacci_levels,
    fibonacci_retracement,
    ichimoku,
    pivot_points,
)
from barsignals.indicators.oscillators import (
    aroon,
    cci,
    macd,
    mfi,
    rsi,
    stochastic,
    williams_r,
)
from barsignals.indicators.volatility import (
    adx,
    bollinger_bands,
    choppiness_index,
    cmf,
    linear_regression_slope,
    supertrend,
)

__all__ = [
    "IndicatorCalculator",
    "atr",
    "ema",
    "highest",
    "lowest",
    "sma",
    "standard_deviation",
    "trailing_mean",
    "true_range",
    "vwap",
    "wilder_smoothing",
    "CloudPosition",
    "FibonacciLevels",
    "cloud_position",
    "fibonacci_levels",
    "fibonacci_retracement",
    "ichimoku",
    "pivot_points",
    "aroon",
    "cci",
    "macd",
    "mfi",
    "rsi",
    "stochastic",
    "williams_r",
    "adx",
    "bollinger_bands",
    "choppiness_index",
    "cmf",
    "linear_regression_slope",
    "supertrend",
]
