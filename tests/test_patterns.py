"""Tests for candlestick pattern predicates."""

from collections import namedtuple

from barsignals.models import Bar
from barsignals.patterns import (
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


def _bar(open: float, close: float, high: float | None = None, low: float | None = None) -> Bar:
    """Create a test bar; shadows default to the body."""
    return Bar(
        open=open,
        close=close,
        high=max(open, close) if high is None else high,
        low=min(open, close) if low is None else low,
    )


class TestDirection:
    def test_up_and_down(self):
        assert is_up_candle(_bar(10, 12))
        assert not is_up_candle(_bar(12, 10))
        assert is_down_candle(_bar(12, 10))
        assert not is_down_candle(_bar(10, 10))

    def test_any_ohlc_object(self):
        Candle = namedtuple("Candle", "open high low close")
        assert is_up_candle(Candle(open=1.0, high=3.0, low=0.5, close=2.0))


class TestEngulfing:
    """Tests for engulfing patterns."""

    def test_bullish_engulfing(self):
        # Opens at the prior close, closes above the prior open
        assert is_bullish_engulfing(_bar(10, 8), _bar(8, 12))

    def test_bullish_engulfing_needs_close_above_prior_open(self):
        assert not is_bullish_engulfing(_bar(10, 8), _bar(8, 10))

    def test_bullish_engulfing_needs_bearish_prior(self):
        assert not is_bullish_engulfing(_bar(8, 10), _bar(7, 12))

    def test_bearish_engulfing(self):
        assert is_bearish_engulfing(_bar(8, 10), _bar(10, 7))
        assert not is_bearish_engulfing(_bar(8, 10), _bar(9, 7))


class TestHarami:
    def test_bullish_harami(self):
        prev = _bar(20, 10)
        assert is_bullish_harami(prev, _bar(13, 15))

    def test_bullish_harami_body_too_large(self):
        prev = _bar(20, 10, high=21, low=9)
        # Body 7 is not < 0.6 * 10
        assert not is_bullish_harami(prev, _bar(11.5, 18.5))

    def test_bearish_harami(self):
        prev = _bar(10, 20)
        assert is_bearish_harami(prev, _bar(15, 13))
        assert not is_bearish_harami(prev, _bar(15, 13, high=21))


class TestSingleBarPatterns:
    def test_doji(self):
        assert is_doji(_bar(10, 10.05, high=11, low=9))
        assert not is_doji(_bar(10, 10.5, high=11, low=9))

    def test_hammer(self):
        # Closes on its high, long body, tiny lower shadow
        assert is_hammer(_bar(10.5, 20, high=20, low=10))
        assert not is_hammer(_bar(10.5, 19, high=20, low=10))
        assert not is_hammer(_bar(12, 20, high=20, low=10))

    def test_shooting_star(self):
        assert is_shooting_star(_bar(19.5, 10, high=20, low=10))
        assert not is_shooting_star(_bar(19.5, 11, high=20, low=10))


class TestStars:
    def test_morning_star(self):
        first = _bar(20, 12, high=21, low=11)
        middle = _bar(9, 9.5, high=10, low=8)
        last = _bar(12, 18, high=19, low=11)
        assert is_morning_star(first, middle, last)

    def test_morning_star_needs_gap(self):
        first = _bar(20, 12, high=21, low=11)
        middle = _bar(11, 11.5, high=12, low=10)
        last = _bar(12, 18, high=19, low=11)
        assert not is_morning_star(first, middle, last)

    def test_evening_star(self):
        first = _bar(12, 20, high=21, low=11)
        middle = _bar(23, 22.5, high=24, low=22)
        last = _bar(20, 14, high=21, low=13)
        assert is_evening_star(first, middle, last)


class TestThreeBarTrends:
    def test_three_white_soldiers(self):
        bars = (_bar(10, 12), _bar(11, 13), _bar(12, 14))
        assert is_three_white_soldiers(*bars)

    def test_three_white_soldiers_long_upper_shadow(self):
        bars = (_bar(10, 12), _bar(11, 13, high=14), _bar(12, 14))
        assert not is_three_white_soldiers(*bars)

    def test_three_black_crows(self):
        bars = (_bar(14, 12), _bar(13, 11), _bar(12, 10))
        assert is_three_black_crows(*bars)
        assert not is_three_black_crows(bars[2], bars[1], bars[0])
