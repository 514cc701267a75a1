"""Candlestick pattern predicates (pure functions of 1-3 bars)."""

from barsignals.patterns.candlesticks import (
    is_bearish_engulfing,
    is_bearish_harami,
    is_bullish_engulfing,
    is_bullish_harami,
    is_doji,
    is_down_candle,
    is_evening_star,
    is_hammer,
    is_morning_star,
    is_shooting_star,
    is_three_black_crows,
    is_three_white_soldiers,
    is_up_candle,
)

__all__ = [
    "is_bearish_engulfing",
    "is_bearish_harami",
    "is_bullish_engulfing",
    "is_bullish_harami",
    "is_doji",
    "is_down_candle",
    "is_evening_star",
    "is_hammer",
    "is_morning_star",
    "is_shooting_star",
    "is_three_black_crows",
    "is_three_white_soldiers",
    "is_up_candle",
]
