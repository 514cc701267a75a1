"""Data models (pure data, no computation beyond convenience properties)."""

from barsignals.models.bar import Bar, BarSeries
from barsignals.models.config import SignalConfig
from barsignals.models.signal import CombineMode, SignalDescriptor, SignalState

__all__ = [
    "Bar",
    "BarSeries",
    "CombineMode",
    "SignalConfig",
    "SignalDescriptor",
    "SignalState",
]
