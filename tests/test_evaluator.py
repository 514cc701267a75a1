"""Tests for signal rules and generate_signals."""

import logging
from collections import deque

import numpy as np
import pytest

from barsignals import Bar, SignalDescriptor, generate_signals
from barsignals.categories import Category, get_signals_for_category
from barsignals.indicators import rsi, stochastic
from barsignals.models import BarSeries, SignalConfig
from barsignals.signals import (
    NullObserver,
    RuleKind,
    SignalObserver,
    SignalRule,
    get_rule,
    list_rules,
    register_rule,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_bars(closes, volumes=None, spread: float = 1.0) -> list[dict]:
    """Bars opening at the previous close."""
    if volumes is None:
        volumes = [1000.0] * len(closes)
    bars = []
    prev = closes[0]
    for i, (close, volume) in enumerate(zip(closes, volumes)):
        bars.append({
            "time": i,
            "open": prev,
            "high": max(prev, close) + spread,
            "low": min(prev, close) - spread,
            "close": close,
            "volume": volume,
        })
        prev = close
    return bars


def _group(*names: str) -> list[dict]:
    return [{"namespace": "t", "name": name} for name in names]


def _run(bars, group, mode="signals", observer=None):
    return generate_signals(
        bars,
        group,
        mode,
        config=SignalConfig(),
        observer=observer or NullObserver(),
    )


class RecordingObserver:
    """Observer that records every call."""

    def __init__(self):
        self.started = None
        self.matches = []

    def on_start(self, total_bars, keys):
        self.started = (total_bars, list(keys))

    def on_match(self, index, time, active_keys):
        self.matches.append((index, time, list(active_keys)))


ENGULFING_BARS = [
    {"time": "a", "open": 10, "high": 10, "low": 8, "close": 8, "volume": 1},
    {"time": "b", "open": 8, "high": 12, "low": 8, "close": 12, "volume": 1},
]


# ---------------------------------------------------------------------------
# Rule registry
# ---------------------------------------------------------------------------

class TestRuleRegistry:
    def test_lookup_is_case_insensitive(self):
        assert get_rule("rsibelow30") is get_rule("RSIBelow30")
        assert get_rule("RSIBELOW30").kind == RuleKind.CROSSOVER

    def test_unknown_rule(self):
        assert get_rule("NoSuchSignal") is None

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValueError, match="already registered"):
            register_rule(SignalRule("upcandle", RuleKind.PATTERN))

    def test_every_category_signal_has_a_rule(self):
        names = set(list_rules())
        for category in Category:
            for name in get_signals_for_category(category.value):
                assert name in names

    def test_rule_kinds(self):
        assert get_rule("SMA50AboveSMA200").kind == RuleKind.CROSSOVER
        assert get_rule("PriceAboveUpper").kind == RuleKind.BREAKOUT
        assert get_rule("CloseAboveBB2_20Upper").kind == RuleKind.LEVEL
        assert get_rule("CCIAbove100").kind == RuleKind.THRESHOLD
        assert get_rule("AroonUpAboveDown").kind == RuleKind.COMPARISON
        assert get_rule("VolumeIncreasing").kind == RuleKind.VOLUME
        assert get_rule("MorningStar").bars_needed == 3

    def test_supplemented_rules(self):
        assert get_rule("ADXAbove30").threshold == 30
        assert get_rule("SMA21AboveSMA50").inputs == ("sma21", "sma50")
        assert get_rule("SMA21BelowSMA50").groups == ("sma21", "sma50")


# ---------------------------------------------------------------------------
# Input handling
# ---------------------------------------------------------------------------

class TestInputHandling:
    """Malformed input degrades to empty or all-False output."""

    def test_output_length_matches_bars(self):
        bars = _make_bars(list(np.linspace(100, 130, 40)))
        assert len(_run(bars, _group("UpCandle", "RSIAbove70"))) == 40

    def test_empty_bars(self, caplog):
        with caplog.at_level(logging.ERROR):
            assert _run([], _group("UpCandle")) == []
        assert "No bars" in caplog.text

    def test_none_bars(self):
        assert _run(None, _group("UpCandle")) == []

    def test_accepts_any_iterable(self):
        bars = _make_bars([100.0 + i for i in range(10)])
        expected = _run(bars, _group("UpCandle"))

        assert len(expected) == 10
        assert _run(deque(bars), _group("UpCandle")) == expected
        assert _run((b for b in bars), _group("UpCandle")) == expected
        assert _run(tuple(bars), _group("UpCandle")) == expected

    def test_string_or_mapping_bars(self):
        assert _run("bars", _group("UpCandle")) == []
        assert _run(ENGULFING_BARS[0], _group("UpCandle")) == []

    def test_non_iterable_bars(self):
        assert _run(42, _group("UpCandle")) == []

    def test_zero_period_gives_no_signals(self):
        bars = _make_bars([100.0 + i for i in range(40)])
        result = generate_signals(
            bars,
            _group("AroonUpAboveDown", "AroonOscAbove90"),
            config=SignalConfig(aroon_period=0),
            observer=NullObserver(),
        )

        assert result == [False] * 40

    def test_invalid_bars(self):
        assert _run([{"open": "x"}, {"close": 1}], _group("UpCandle")) == [False, False]

    def test_group_not_a_list(self):
        assert _run(ENGULFING_BARS, "BullishEngulfing") == [False, False]
        assert _run(ENGULFING_BARS, None) == [False, False]

    def test_malformed_descriptor_skipped(self, caplog):
        group = [{"namespace": "t"}, {"namespace": "", "name": "Doji"}, "Doji"] + _group(
            "BullishEngulfing"
        )
        with caplog.at_level(logging.WARNING):
            result = _run(ENGULFING_BARS, group, "confirmations")

        assert result == [False, True]
        assert "Skipping signal descriptor" in caplog.text

    def test_accepts_models(self):
        bars = [Bar(**b) for b in ENGULFING_BARS]
        group = [SignalDescriptor(namespace="t", name="BullishEngulfing")]
        assert _run(bars, group) == [False, True]

    def test_name_is_case_insensitive(self):
        assert _run(ENGULFING_BARS, _group("bullishENGULFING")) == [False, True]

    def test_unknown_mode_uses_or(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = _run(ENGULFING_BARS, _group("BullishEngulfing", "DownCandle"), "sometimes")

        assert result == [False, True]
        assert "Unknown mode" in caplog.text


# ---------------------------------------------------------------------------
# Evaluation semantics
# ---------------------------------------------------------------------------

class TestPatternSignals:
    def test_bullish_engulfing(self):
        assert _run(ENGULFING_BARS, _group("BullishEngulfing")) == [False, True]

    def test_first_bar_is_always_false(self):
        bars = _make_bars([100.0, 101.0, 102.0])
        bars[0]["open"] = 99.0
        assert _run(bars, _group("UpCandle")) == [False, True, True]

    def test_three_bar_pattern_needs_history(self):
        bars = [
            {"open": 10, "high": 12, "low": 10, "close": 12},
            {"open": 11, "high": 13, "low": 11, "close": 13},
            {"open": 12, "high": 14, "low": 12, "close": 14},
        ]
        assert _run(bars, _group("ThreeUpCandles")) == [False, False, True]


class TestCombineModes:
    """OR ("signals") vs AND ("confirmations")."""

    def test_and_fails_when_one_signal_false(self):
        group = _group("BullishEngulfing", "DownCandle")

        assert _run(ENGULFING_BARS, group, "signals") == [False, True]
        assert _run(ENGULFING_BARS, group, "confirmations") == [False, False]

    def test_and_passes_when_all_true(self):
        group = _group("BullishEngulfing", "UpCandle")
        assert _run(ENGULFING_BARS, group, "confirmations") == [False, True]

    def test_unknown_name_never_satisfies_and(self):
        group = _group("BullishEngulfing", "NoSuchSignal")

        assert _run(ENGULFING_BARS, group, "signals") == [False, True]
        assert _run(ENGULFING_BARS, group, "confirmations") == [False, False]

    def test_warm_up_keeps_and_false(self):
        closes = list(np.arange(100.0, 115.0))
        bars = _make_bars(closes)
        group = _group("UpCandle", "SMA7AboveSMA21")

        assert any(_run(bars, group, "signals"))
        assert not any(_run(bars, group, "confirmations"))


class TestEventSemantics:
    """Crossovers fire on the first bar of the event only."""

    def test_rsi_crossing_is_an_event(self):
        closes = [100.0 + i for i in range(20)] + [119.0 - 2 * j for j in range(1, 41)]
        values = rsi(closes, 14)
        crossings = [
            k for k in range(1, len(closes))
            if values[k] < 30 and values[k - 1] >= 30
        ]
        assert len(crossings) == 1
        k = crossings[0]
        assert k + 1 < len(closes)
        assert values[k + 1] < 30

        result = _run(_make_bars(closes), _group("RSIBelow30"))

        assert result[k] is True
        assert result[k + 1] is False
        assert sum(result) == 1

    def test_crossover_needs_previous_value(self):
        # SMA7 is above SMA21 from the first bar SMA21 exists, but there is no
        # earlier bar where it was not
        bars = _make_bars([float(c) for c in range(1, 31)])
        assert not any(_run(bars, _group("SMA7AboveSMA21")))

    def test_level_vs_breakout(self):
        closes = [100.0] * 25 + [200.0] * 3
        bars = _make_bars(closes)

        level = _run(bars, _group("CloseAboveBB2_20Upper"))
        breakout = _run(bars, _group("PriceAboveUpper"))

        assert [i for i, v in enumerate(level) if v] == [25, 26, 27]
        assert [i for i, v in enumerate(breakout) if v] == [25]


class TestVolumeSignals:
    def test_trailing_mean_divides_by_lookback(self):
        closes = [100.0] * 8
        volumes = [100.0, 100.0, 100.0, 100.0, 100.0, 100.0, 1000.0, 10.0]
        bars = _make_bars(closes, volumes)

        increasing = _run(bars, _group("VolumeIncreasing"))
        decreasing = _run(bars, _group("VolumeDecreasing"))

        assert increasing == [False, True, True, True, True, False, True, False]
        assert decreasing == [False, False, False, False, False, False, False, True]


# ---------------------------------------------------------------------------
# Observers
# ---------------------------------------------------------------------------

class TestObservers:
    def test_observer_receives_matches(self):
        observer = RecordingObserver()
        result = _run(ENGULFING_BARS, _group("BullishEngulfing", "UpCandle"), observer=observer)

        assert isinstance(observer, SignalObserver)
        assert observer.started == (2, ["t.BullishEngulfing", "t.UpCandle"])
        assert observer.matches == [(1, "b", ["t.BullishEngulfing", "t.UpCandle"])]
        assert result == [False, True]

    def test_default_observer_logs(self, caplog):
        with caplog.at_level(logging.INFO):
            result = generate_signals(ENGULFING_BARS, _group("BullishEngulfing"))

        assert result == [False, True]
        assert "Generating signals for 2 bars" in caplog.text
        assert "t.BullishEngulfing" in caplog.text

    def test_confirmation_label(self, caplog):
        with caplog.at_level(logging.DEBUG):
            generate_signals(ENGULFING_BARS, _group("BullishEngulfing"), "confirmations")

        assert "Confirmation signal at bar 1" in caplog.text


# ---------------------------------------------------------------------------
# Indicator-backed rules
# ---------------------------------------------------------------------------

def _fired(result) -> list[int]:
    return [i for i, v in enumerate(result) if v]


class TestCrossoverSignals:
    def test_stochastic_k_crosses_d(self):
        rng = np.random.default_rng(11)
        closes = list(100 + np.cumsum(rng.normal(0, 1, 120)))
        bars = _make_bars(closes)
        series = BarSeries(bars)
        stoch = stochastic(series.highs, series.lows, series.closes, 14, 3, 3)
        k, d = stoch.k, stoch.d

        def crosses(above: bool) -> list[int]:
            found = []
            for i in range(1, len(closes)):
                values = (k[i], d[i], k[i - 1], d[i - 1])
                if np.isnan(values).any():
                    continue
                if above and k[i] > d[i] and k[i - 1] <= d[i - 1]:
                    found.append(i)
                if not above and k[i] < d[i] and k[i - 1] >= d[i - 1]:
                    found.append(i)
            return found

        up = _run(bars, _group("StochKCrossAboveD"))
        down = _run(bars, _group("StochKCrossBelowD"))

        assert crosses(True) and crosses(False)
        assert _fired(up) == crosses(True)
        assert _fired(down) == crosses(False)
        assert not any(up[:17]) and not any(down[:17])


class TestThresholdSignals:
    """Series compared against a constant."""

    def test_adx_above_30_in_steady_trend(self):
        # +DM every bar and no -DM: DX and ADX are 100 once ADX exists
        bars = _make_bars([100.0 + i for i in range(40)])
        assert _fired(_run(bars, _group("ADXAbove30"))) == list(range(27, 40))

    def test_cci_in_linear_trend(self):
        bars = _make_bars([100.0 + i for i in range(40)])

        above_100 = _run(bars, _group("CCIAbove100"))
        above_150 = _run(bars, _group("CCIAbove150"))

        assert not any(above_100[:19])
        assert all(above_100[20:])
        assert not any(above_150)

    def test_cmf_with_closes_at_high(self):
        bars = [
            {"time": i, "open": c - 1, "high": c, "low": c - 2, "close": c, "volume": 1000}
            for i, c in enumerate(np.arange(100.0, 130.0))
        ]
        result = _run(bars, _group("CMFAbove40"))

        assert not any(result[:19])
        assert all(result[19:])
        assert not any(_run(bars, _group("CMFBelowMinus20")))

    def test_choppiness_flat_market(self):
        bars = _make_bars([100.0] * 30)

        above_70 = _run(bars, _group("ChoppinessIndexAbove70"))

        assert not any(above_70[:14])
        assert all(above_70[14:])
        assert not any(_run(bars, _group("ChoppinessIndexBelow30")))

    def test_choppiness_trending_market(self):
        # TR 3 per bar over a range of 16: CHOP is about 36.6
        bars = _make_bars([100.0 + i for i in range(30)])

        below_40 = _run(bars, _group("ChoppinessIndexBelow40"))

        assert not any(below_40[:14])
        assert all(below_40[14:])
        assert not any(_run(bars, _group("ChoppinessIndexBelow35")))

    def test_linear_regression_slope(self):
        bars = _make_bars([100.0 + 7 * i for i in range(30)])

        above_5 = _run(bars, _group("LinRegSlopeAbove5"))

        assert not any(above_5[:13])
        assert all(above_5[13:])
        assert not any(_run(bars, _group("LinRegSlopeAbove10")))

    def test_aroon_oscillator(self):
        bars = _make_bars([100.0 + i for i in range(30)])

        above_90 = _run(bars, _group("AroonOscAbove90"))

        assert not any(above_90[:13])
        assert all(above_90[13:])
        assert not any(_run(bars, _group("AroonOscBelowMinus80")))


class TestComparisonSignals:
    def test_aroon_up_above_down(self):
        bars = _make_bars([100.0 + i for i in range(30)])

        up = _run(bars, _group("AroonUpAboveDown"))

        assert not any(up[:13])
        assert all(up[13:])
        assert not any(_run(bars, _group("AroonUpBelowDown")))


class TestLevelSignals:
    """Close compared against a level series."""

    def test_pivot_levels(self):
        bars = _make_bars([100.0 + 10 * i for i in range(10)])

        assert _run(bars, _group("PriceAboveR1")) == [False] + [True] * 9
        assert _fired(_run(bars, _group("PriceAboveR3"))) == [1]
        assert not any(_run(bars, _group("PriceBelowS1")))

    def test_fibonacci_retracement(self):
        bars = _make_bars([100.0 + 10 * i for i in range(30)])

        result = _run(bars, _group("PriceAbove236Retracement"))

        assert not any(result[:19])
        assert all(result[19:])
        assert not any(_run(bars, _group("PriceBelow618Retracement")))

    def test_absent_indicator_keeps_and_false(self):
        bars = _make_bars([100.0 + i for i in range(40)])
        group = _group("UpCandle", "CCIAbove100")

        result = _run(bars, group, "confirmations")

        assert not any(result[:19])
        assert all(result[20:])
