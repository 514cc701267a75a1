"""Signal rules and the name -> rule registry.

A rule is a fixed-form boolean condition over precomputed series at bar
``i`` (and sometimes ``i-1`` / ``i-2``). Rules come in a closed set of kinds;
each carries the indicator groups it needs, the series it reads, its
comparison direction and its constant.

Evaluation returns ``True``, ``False`` or ``None``. ``None`` means the
rule's inputs at ``i`` are absent (warm-up) and its key stays out of the
signal state.

Usage:
    rule = get_rule("rsibelow30")
    rule.evaluate(context, i)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np

from barsignals.models.bar import BarSeries
from barsignals.patterns import candlesticks

logger = logging.getLogger(__name__)


class RuleKind(str, Enum):
    PATTERN = "pattern"  # candlestick predicate over the last 1-3 bars
    CROSSOVER = "crossover"  # condition false at i-1, true at i
    BREAKOUT = "breakout"  # close crosses a band evaluated at i
    THRESHOLD = "threshold"  # series vs constant
    LEVEL = "level"  # close vs series
    COMPARISON = "comparison"  # series vs series
    VOLUME = "volume"  # volume vs trailing mean


class Comparison(str, Enum):
    ABOVE = "above"
    BELOW = "below"

    def holds(self, left: float | None, right: float | None) -> bool:
        """Strict comparison; an absent side is never satisfied."""
        if left is None or right is None:
            return False
        return left > right if self is Comparison.ABOVE else left < right

    def opposite_holds(self, left: float | None, right: float | None) -> bool:
        """Non-strict reverse comparison; an absent side is never satisfied."""
        if left is None or right is None:
            return False
        return left <= right if self is Comparison.ABOVE else left >= right


@dataclass(frozen=True)
class EvaluationContext:
    """Bars plus every precomputed series of one evaluation."""

    bars: BarSeries
    series: dict[str, np.ndarray]

    def value(self, key: str, i: int) -> float | None:
        """Series value at bar ``i``, or None when absent."""
        if i < 0:
            return None
        v = self.series[key][i]
        return None if math.isnan(v) else float(v)


@dataclass(frozen=True)
class SignalRule:
    name: str
    kind: RuleKind
    groups: tuple[str, ...] = ()
    inputs: tuple[str, ...] = ()
    direction: Comparison = Comparison.ABOVE
    threshold: float | None = None
    pattern: Callable[..., bool] | None = None
    bars_needed: int = 1

    def evaluate(self, ctx: EvaluationContext, i: int) -> bool | None:
        return _EVALUATORS[self.kind](self, ctx, i)

    def _right(self, ctx: EvaluationContext, i: int) -> float | None:
        if len(self.inputs) > 1:
            return ctx.value(self.inputs[1], i)
        return self.threshold


def _evaluate_pattern(rule: SignalRule, ctx: EvaluationContext, i: int) -> bool | None:
    start = i - rule.bars_needed + 1
    if start < 0:
        return None
    return rule.pattern(*ctx.bars.bars[start:i + 1])


def _evaluate_crossover(rule: SignalRule, ctx: EvaluationContext, i: int) -> bool | None:
    left = ctx.value(rule.inputs[0], i)
    right = rule._right(ctx, i)
    if left is None or right is None:
        return None
    return rule.direction.holds(left, right) and rule.direction.opposite_holds(
        ctx.value(rule.inputs[0], i - 1), rule._right(ctx, i - 1)
    )


def _evaluate_breakout(rule: SignalRule, ctx: EvaluationContext, i: int) -> bool | None:
    band = ctx.value(rule.inputs[0], i)
    if band is None:
        return None
    return rule.direction.holds(ctx.value("close", i), band) and rule.direction.opposite_holds(
        ctx.value("close", i - 1), band
    )


def _evaluate_threshold(rule: SignalRule, ctx: EvaluationContext, i: int) -> bool | None:
    values = [ctx.value(key, i) for key in rule.inputs]
    if any(v is None for v in values):
        return None
    return all(rule.direction.holds(v, rule.threshold) for v in values)


def _evaluate_level(rule: SignalRule, ctx: EvaluationContext, i: int) -> bool | None:
    level = ctx.value(rule.inputs[0], i)
    if level is None:
        return None
    return rule.direction.holds(ctx.value("close", i), level)


def _evaluate_comparison(rule: SignalRule, ctx: EvaluationContext, i: int) -> bool | None:
    left = ctx.value(rule.inputs[0], i)
    right = ctx.value(rule.inputs[1], i)
    if left is None or right is None:
        return None
    return rule.direction.holds(left, right)


def _evaluate_volume(rule: SignalRule, ctx: EvaluationContext, i: int) -> bool | None:
    average = ctx.value(rule.inputs[1], i)
    if average is None:
        return None
    return rule.direction.holds(ctx.value(rule.inputs[0], i), average)


_EVALUATORS: dict[RuleKind, Callable[[SignalRule, EvaluationContext, int], bool | None]] = {
    RuleKind.PATTERN: _evaluate_pattern,
    RuleKind.CROSSOVER: _evaluate_crossover,
    RuleKind.BREAKOUT: _evaluate_breakout,
    RuleKind.THRESHOLD: _evaluate_threshold,
    RuleKind.LEVEL: _evaluate_level,
    RuleKind.COMPARISON: _evaluate_comparison,
    RuleKind.VOLUME: _evaluate_volume,
}


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

# Lower-cased signal name -> rule
_RULES: dict[str, SignalRule] = {}


def register_rule(rule: SignalRule) -> SignalRule:
    """Register a rule under its (case-insensitive) name.

    Raises:
        ValueError: If a rule with the same name is already registered.
    """
    key = rule.name.lower()
    if key in _RULES:
        raise ValueError(f"Signal rule '{rule.name}' is already registered")
    _RULES[key] = rule
    return rule


def get_rule(name: str) -> SignalRule | None:
    """Look up a rule by signal name, ignoring case. None if unknown."""
    return _RULES.get(name.lower())


def list_rules() -> list[str]:
    """Return the registered signal names, sorted."""
    return sorted(rule.name for rule in _RULES.values())


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

ABOVE = Comparison.ABOVE
BELOW = Comparison.BELOW


def _rule(
    name: str,
    kind: RuleKind,
    group: str,
    inputs: tuple[str, ...],
    direction: Comparison,
    threshold: float | None = None,
) -> None:
    register_rule(SignalRule(name, kind, (group,), inputs, direction, threshold))


def _pattern(name: str, predicate: Callable[..., bool], bars_needed: int) -> None:
    register_rule(SignalRule(name, RuleKind.PATTERN, pattern=predicate, bars_needed=bars_needed))


def _ma_cross(name: str, fast: str, slow: str, direction: Comparison) -> None:
    register_rule(SignalRule(name, RuleKind.CROSSOVER, (fast, slow), (fast, slow), direction))


def _threshold(name: str, key: str, direction: Comparison, threshold: float) -> None:
    _rule(name, RuleKind.THRESHOLD, key, (key,), direction, threshold)


def _level(name: str, group: str, key: str, direction: Comparison) -> None:
    _rule(name, RuleKind.LEVEL, group, (key,), direction)


# Candlestick patterns
_pattern("BullishEngulfing", candlesticks.is_bullish_engulfing, 2)
_pattern("BearishEngulfing", candlesticks.is_bearish_engulfing, 2)
_pattern("UpCandle", candlesticks.is_up_candle, 1)
_pattern("DownCandle", candlesticks.is_down_candle, 1)
_pattern("ThreeUpCandles", candlesticks.is_three_white_soldiers, 3)
_pattern("ThreeDownCandles", candlesticks.is_three_black_crows, 3)
_pattern("BullishHarami", candlesticks.is_bullish_harami, 2)
_pattern("BearishHarami", candlesticks.is_bearish_harami, 2)
_pattern("Doji", candlesticks.is_doji, 1)
_pattern("Hammer", candlesticks.is_hammer, 1)
_pattern("ShootingStar", candlesticks.is_shooting_star, 1)
_pattern("EveningStar", candlesticks.is_evening_star, 3)
_pattern("MorningStar", candlesticks.is_morning_star, 3)

# Oscillators
_rule("RSIBelow30", RuleKind.CROSSOVER, "rsi", ("rsi",), BELOW, 30)
_rule("RSIAbove70", RuleKind.CROSSOVER, "rsi", ("rsi",), ABOVE, 70)
_rule("StochasticBelow20", RuleKind.THRESHOLD, "stochastic", ("stoch_k", "stoch_d"), BELOW, 20)
_rule("StochasticAbove80", RuleKind.THRESHOLD, "stochastic", ("stoch_k", "stoch_d"), ABOVE, 80)
_rule("StochKCrossAboveD", RuleKind.CROSSOVER, "stochastic", ("stoch_k", "stoch_d"), ABOVE)
_rule("StochKCrossBelowD", RuleKind.CROSSOVER, "stochastic", ("stoch_k", "stoch_d"), BELOW)
_threshold("ADXAbove30", "adx", ABOVE, 30)

# Moving averages
_ma_cross("SMA50AboveSMA200", "sma50", "sma200", ABOVE)
_ma_cross("SMA50BelowSMA200", "sma50", "sma200", BELOW)
_ma_cross("SMA7AboveSMA21", "sma7", "sma21", ABOVE)
_ma_cross("SMA7BelowSMA21", "sma7", "sma21", BELOW)
_ma_cross("EMA20AboveEMA50", "ema20", "ema50", ABOVE)
_ma_cross("EMA20BelowEMA50", "ema20", "ema50", BELOW)
_ma_cross("SMA21AboveSMA50", "sma21", "sma50", ABOVE)
_ma_cross("SMA21BelowSMA50", "sma21", "sma50", BELOW)

# Bollinger Bands (period 20)
_rule("PriceAboveUpper", RuleKind.BREAKOUT, "bb2", ("bb2_upper",), ABOVE)
_rule("PriceBelowLower", RuleKind.BREAKOUT, "bb2", ("bb2_lower",), BELOW)
for _width in (2, 3, 1):
    _level(f"CloseAboveBB{_width}_20Upper", f"bb{_width}", f"bb{_width}_upper", ABOVE)
    _level(f"CloseBelowBB{_width}_20Lower", f"bb{_width}", f"bb{_width}_lower", BELOW)

# Volume
_rule("VolumeIncreasing", RuleKind.VOLUME, "volume_avg", ("volume", "volume_avg"), ABOVE)
_rule("VolumeDecreasing", RuleKind.VOLUME, "volume_avg", ("volume", "volume_avg"), BELOW)
for _label, _value in (("40", 0.40), ("35", 0.35), ("30", 0.30)):
    _threshold(f"CMFAbove{_label}", "cmf", ABOVE, _value)
for _label, _value in (("40", -0.40), ("30", -0.30), ("20", -0.20)):
    _threshold(f"CMFBelowMinus{_label}", "cmf", BELOW, _value)

# Trend
for _value in (250, 200, 150, 100):
    _threshold(f"CCIAbove{_value}", "cci", ABOVE, _value)
    _threshold(f"CCIBelowMinus{_value}", "cci", BELOW, -_value)
for _value in (5, 10):
    _threshold(f"LinRegSlopeAbove{_value}", "linreg_slope", ABOVE, _value)
    _threshold(f"LinRegSlopeBelowMinus{_value}", "linreg_slope", BELOW, -_value)

# Aroon
_rule("AroonUpAboveDown", RuleKind.COMPARISON, "aroon", ("aroon_up", "aroon_down"), ABOVE)
_rule("AroonUpBelowDown", RuleKind.COMPARISON, "aroon", ("aroon_up", "aroon_down"), BELOW)
for _value in (90, 80):
    _rule(f"AroonOscAbove{_value}", RuleKind.THRESHOLD, "aroon", ("aroon_osc",), ABOVE, _value)
    _rule(
        f"AroonOscBelowMinus{_value}", RuleKind.THRESHOLD, "aroon", ("aroon_osc",), BELOW, -_value
    )

# Choppiness
for _value in (70, 65, 60):
    _threshold(f"ChoppinessIndexAbove{_value}", "chop", ABOVE, _value)
for _value in (40, 35, 30):
    _threshold(f"ChoppinessIndexBelow{_value}", "chop", BELOW, _value)

# Support / resistance (previous-bar pivots)
for _key in ("s1", "s2", "s3", "r1", "r2", "r3"):
    _level(f"PriceAbove{_key.upper()}", "pivots", _key, ABOVE)
    _level(f"PriceBelow{_key.upper()}", "pivots", _key, BELOW)

# Fibonacci retracement
for _label in ("236", "382", "500", "618"):
    _level(f"PriceAbove{_label}Retracement", "fibonacci", f"fib_{_label}", ABOVE)
    _level(f"PriceBelow{_label}Retracement", "fibonacci", f"fib_{_label}", BELOW)

logger.debug("Registered %d signal rules", len(_RULES))
