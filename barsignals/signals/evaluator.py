"""Signal evaluation over a full bar sequence.

Every indicator the requested signals need is computed once over the whole
series; the bars are then walked once, rebuilding a sparse signal state per
bar and combining it under OR ("signals") or AND ("confirmations").
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from barsignals.config import get_settings
from barsignals.indicators.calculator import IndicatorCalculator
from barsignals.models.bar import Bar, BarSeries
from barsignals.models.config import SignalConfig
from barsignals.models.signal import CombineMode, SignalDescriptor, SignalState
from barsignals.signals.observer import LoggingObserver, SignalObserver
from barsignals.signals.rules import EvaluationContext, SignalRule, get_rule

logger = logging.getLogger(__name__)


def _parse_descriptor(item: Any) -> SignalDescriptor | None:
    """Coerce a descriptor, or None (with a warning) when it is malformed."""
    if isinstance(item, SignalDescriptor):
        return item
    if not isinstance(item, Mapping):
        logger.warning("Skipping signal descriptor %r: expected a mapping", item)
        return None
    try:
        return SignalDescriptor.model_validate(item)
    except ValidationError as e:
        logger.warning("Skipping signal descriptor %r: %s", item, e.errors()[0]["msg"])
        return None


def _parse_mode(mode: CombineMode | str) -> CombineMode:
    try:
        return CombineMode(mode)
    except ValueError:
        logger.warning("Unknown mode %r, falling back to '%s'", mode, CombineMode.SIGNALS.value)
        return CombineMode.SIGNALS


def _combine(
    state: SignalState,
    keys: list[str],
    mode: CombineMode,
) -> bool:
    if mode is CombineMode.CONFIRMATIONS:
        return bool(state) and all(state.get(key, False) for key in keys)
    return any(state.values())


def generate_signals(
    bars: Iterable[Bar | Mapping[str, Any]] | None,
    signal_group: Any,
    mode: CombineMode | str = CombineMode.SIGNALS,
    *,
    config: SignalConfig | None = None,
    observer: SignalObserver | None = None,
) -> list[bool]:
    """
    Evaluate a signal group over every bar.

    Args:
        bars: Time-ordered bars (``Bar`` instances or mappings with
            time/open/high/low/close/volume), in a list or any other
            iterable
        signal_group: List of ``SignalDescriptor`` or mappings with
            ``namespace`` and ``name``
        mode: "signals" (any signal true) or "confirmations" (every
            requested signal true)
        config: Indicator parameters, defaults to the environment settings
        observer: Receives the run summary and matched bars, defaults to a
            ``LoggingObserver``

    Returns:
        One boolean per bar. Bar 0 is always False. Invalid input never
        raises: missing, empty or non-iterable bars give ``[]``, anything
        else malformed gives all-False.
    """
    if bars is None or isinstance(bars, (str, bytes, Mapping)):
        logger.error("Bars must be a sequence of bars, got %s", type(bars).__name__)
        return []
    try:
        bars = list(bars)
    except TypeError:
        logger.error("Bars must be iterable, got %s", type(bars).__name__)
        return []
    if not bars:
        logger.error("No bars to generate signals for")
        return []

    total = len(bars)
    try:
        series = BarSeries(bars)
    except ValidationError as e:
        logger.error("Invalid bars, returning no signals: %s", e)
        return [False] * total

    if not isinstance(signal_group, (list, tuple)):
        logger.error("Signal group must be a list, got %s", type(signal_group).__name__)
        return [False] * total

    combine_mode = _parse_mode(mode)
    descriptors = [d for d in (_parse_descriptor(item) for item in signal_group) if d is not None]

    requested: list[tuple[SignalDescriptor, SignalRule]] = []
    for descriptor in descriptors:
        rule = get_rule(descriptor.name)
        if rule is None:
            logger.warning("Unknown signal '%s', it will never be set", descriptor.name)
            continue
        requested.append((descriptor, rule))

    if config is None or observer is None:
        settings = get_settings()
        config = config or settings.signal_config()
        if observer is None:
            label = "Confirmation signal" if combine_mode is CombineMode.CONFIRMATIONS else "Signal"
            observer = LoggingObserver(settings.log_bar_activity, label=label)

    groups = [group for _, rule in requested for group in rule.groups]
    context = EvaluationContext(series, IndicatorCalculator(config).calculate(groups, series))

    keys = [d.key for d in descriptors]
    observer.on_start(total, keys)

    results = [False] * total
    for i in range(1, total):
        state: SignalState = {}
        for descriptor, rule in requested:
            value = rule.evaluate(context, i)
            if value is not None:
                state[descriptor.key] = value

        if _combine(state, keys, combine_mode):
            results[i] = True
            observer.on_match(i, series.times[i], [k for k, v in state.items() if v])

    return results
