"""Candlestick pattern predicates.

Each predicate looks at 1-3 consecutive bars (oldest first) and only reads
their ``open``, ``high``, ``low`` and ``close`` attributes, so any object with
those fields works, not just ``Bar``.
"""

from typing import Protocol


class OHLC(Protocol):
    open: float
    high: float
    low: float
    close: float


# Body / range ratios
HARAMI_BODY_RATIO = 0.6
DOJI_BODY_RATIO = 0.1
HAMMER_BODY_RATIO = 0.6
HAMMER_SHADOW_RATIO = 0.1
STAR_BODY_RATIO = 0.3
SOLDIER_SHADOW_RATIO = 0.1


def _bullish(bar: OHLC) -> bool:
    return bar.close > bar.open


def _bearish(bar: OHLC) -> bool:
    return bar.close < bar.open


def _body(bar: OHLC) -> float:
    return abs(bar.close - bar.open)


def is_up_candle(bar: OHLC) -> bool:
    """Close above open."""
    return _bullish(bar)


def is_down_candle(bar: OHLC) -> bool:
    """Close below open."""
    return _bearish(bar)


def is_bullish_engulfing(prev: OHLC, cur: OHLC) -> bool:
    """A bullish body opening at or below the prior bearish close and closing
    above the prior open."""
    return (
        _bearish(prev)
        and _bullish(cur)
        and cur.open <= prev.close
        and cur.close > prev.open
    )


def is_bearish_engulfing(prev: OHLC, cur: OHLC) -> bool:
    """Mirror of :func:`is_bullish_engulfing`."""
    return (
        _bullish(prev)
        and _bearish(cur)
        and cur.open >= prev.close
        and cur.close < prev.open
    )


def is_bullish_harami(prev: OHLC, cur: OHLC) -> bool:
    """Small bullish bar whose whole range sits inside the prior bearish body."""
    return (
        _bearish(prev)
        and _bullish(cur)
        and cur.high < prev.open
        and cur.low > prev.close
        and _body(cur) < HARAMI_BODY_RATIO * _body(prev)
    )


def is_bearish_harami(prev: OHLC, cur: OHLC) -> bool:
    """Small bearish bar whose whole range sits inside the prior bullish body."""
    return (
        _bullish(prev)
        and _bearish(cur)
        and cur.high < prev.close
        and cur.low > prev.open
        and _body(cur) < HARAMI_BODY_RATIO * _body(prev)
    )


def is_doji(bar: OHLC) -> bool:
    return _body(bar) < DOJI_BODY_RATIO * (bar.high - bar.low)


def is_hammer(bar: OHLC) -> bool:
    """Bullish bar closing on its high with a long body and almost no lower shadow."""
    rng = bar.high - bar.low
    return (
        _bullish(bar)
        and bar.close == bar.high
        and bar.close - bar.open > HAMMER_BODY_RATIO * rng
        and bar.open - bar.low < HAMMER_SHADOW_RATIO * rng
    )


def is_shooting_star(bar: OHLC) -> bool:
    """Bearish bar closing on its low with a long body and almost no upper shadow."""
    rng = bar.high - bar.low
    return (
        _bearish(bar)
        and bar.close == bar.low
        and bar.open - bar.close > HAMMER_BODY_RATIO * rng
        and bar.high - bar.open < HAMMER_SHADOW_RATIO * rng
    )


def is_morning_star(first: OHLC, middle: OHLC, last: OHLC) -> bool:
    """Bearish bar, small middle body gapped below both neighbours, bullish bar."""
    return (
        _bearish(first)
        and _body(middle) < STAR_BODY_RATIO * _body(first)
        and _bullish(last)
        and middle.high < first.low
        and middle.high < last.low
    )


def is_evening_star(first: OHLC, middle: OHLC, last: OHLC) -> bool:
    """Bullish bar, small middle body gapped above both neighbours, bearish bar."""
    return (
        _bullish(first)
        and _body(middle) < STAR_BODY_RATIO * _body(first)
        and _bearish(last)
        and middle.low > first.high
        and middle.low > last.high
    )


def is_three_white_soldiers(first: OHLC, second: OHLC, third: OHLC) -> bool:
    """Three bullish bars with rising closes and short upper shadows."""
    bars = (first, second, third)
    return (
        all(_bullish(b) for b in bars)
        and first.close < second.close < third.close
        and all(b.high - b.close <= SOLDIER_SHADOW_RATIO * (b.close - b.open) for b in bars)
    )


def is_three_black_crows(first: OHLC, second: OHLC, third: OHLC) -> bool:
    """Three bearish bars with falling closes and short lower shadows."""
    bars = (first, second, third)
    return (
        all(_bearish(b) for b in bars)
        and first.close > second.close > third.close
        and all(b.close - b.low <= SOLDIER_SHADOW_RATIO * (b.open - b.close) for b in bars)
    )
