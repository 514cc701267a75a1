"""Observers notified while signals are generated.

Observers only watch: they receive the run summary and every matched bar,
and never influence the result.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class SignalObserver(Protocol):
    """Protocol for signal generation observers."""

    def on_start(self, total_bars: int, keys: Sequence[str]) -> None:
        """Called once before the bar loop with the requested signal keys."""
        ...

    def on_match(self, index: int, time: Any, active_keys: Sequence[str]) -> None:
        """Called for every bar whose combined result is True."""
        ...


class LoggingObserver:
    """Observer that reports through the ``logging`` module.

    Matched bars are logged at INFO when ``log_bar_activity`` is set,
    otherwise at DEBUG.
    """

    def __init__(self, log_bar_activity: bool = True, label: str = "Signal"):
        self.label = label
        self._bar_level = logging.INFO if log_bar_activity else logging.DEBUG

    def on_start(self, total_bars: int, keys: Sequence[str]) -> None:
        logger.info("Generating signals for %d bars: %s", total_bars, ", ".join(keys))

    def on_match(self, index: int, time: Any, active_keys: Sequence[str]) -> None:
        logger.log(
            self._bar_level,
            "%s at bar %d (time=%s): %s",
            self.label,
            index,
            time,
            ", ".join(active_keys),
        )


class NullObserver:
    """Observer that does nothing."""

    def on_start(self, total_bars: int, keys: Sequence[str]) -> None:
        pass

    def on_match(self, index: int, time: Any, active_keys: Sequence[str]) -> None:
        pass
