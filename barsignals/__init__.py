"""Bar-to-signal evaluation: indicators, candlestick patterns and signal groups.

This package is pure computation with no I/O dependencies. Every call is
a fresh batch computation over the full bar sequence it is given; nothing
is cached or shared between calls.
"""

from barsignals.categories import Category, get_signals_for_category, list_categories
from barsignals.models import Bar, BarSeries, CombineMode, SignalDescriptor
from barsignals.signals import generate_signals

__all__ = [
    "Bar",
    "BarSeries",
    "Category",
    "CombineMode",
    "SignalDescriptor",
    "generate_signals",
    "get_signals_for_category",
    "list_categories",
]
