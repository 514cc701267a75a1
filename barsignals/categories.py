"""Signal categories: a fixed mapping from category tag to signal names.

Callers use it to build signal groups; the evaluator never consults it.
"""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    CANDLESTICK = "candlestick"
    OSCILLATOR = "oscillator"
    MOVING_AVERAGE = "movingaverage"
    BOLLINGER_BANDS = "bollingerbands"
    VOLUME = "volume"
    TREND = "trend"
    AROON = "aroon"
    CHOPPINESS = "choppiness"
    SUPPORT_RESISTANCE = "supportresistance"
    FIBONACCI = "fibonacci"


_SIGNALS: dict[Category, tuple[str, ...]] = {
    Category.CANDLESTICK: (
        "BullishEngulfing",
        "BearishEngulfing",
        "UpCandle",
        "DownCandle",
        "ThreeUpCandles",
        "ThreeDownCandles",
        "BullishHarami",
        "BearishHarami",
        "Doji",
        "Hammer",
        "ShootingStar",
        "EveningStar",
        "MorningStar",
    ),
    Category.OSCILLATOR: (
        "RSIBelow30",
        "RSIAbove70",
        "StochasticBelow20",
        "StochasticAbove80",
        "StochKCrossAboveD",
        "StochKCrossBelowD",
        "ADXAbove30",
    ),
    Category.MOVING_AVERAGE: (
        "SMA50AboveSMA200",
        "SMA50BelowSMA200",
        "SMA7AboveSMA21",
        "SMA7BelowSMA21",
        "EMA20AboveEMA50",
        "EMA20BelowEMA50",
        "SMA21AboveSMA50",
        "SMA21BelowSMA50",
    ),
    Category.BOLLINGER_BANDS: (
        "PriceAboveUpper",
        "PriceBelowLower",
        "CloseAboveBB2_20Upper",
        "CloseBelowBB2_20Lower",
        "CloseAboveBB3_20Upper",
        "CloseBelowBB3_20Lower",
        "CloseAboveBB1_20Upper",
        "CloseBelowBB1_20Lower",
    ),
    Category.VOLUME: (
        "VolumeIncreasing",
        "VolumeDecreasing",
        "CMFAbove40",
        "CMFAbove35",
        "CMFAbove30",
        "CMFBelowMinus40",
        "CMFBelowMinus30",
        "CMFBelowMinus20",
    ),
    Category.TREND: (
        "CCIAbove250",
        "CCIAbove200",
        "CCIAbove150",
        "CCIAbove100",
        "CCIBelowMinus250",
        "CCIBelowMinus200",
        "CCIBelowMinus150",
        "CCIBelowMinus100",
        "LinRegSlopeAbove5",
        "LinRegSlopeAbove10",
        "LinRegSlopeBelowMinus5",
        "LinRegSlopeBelowMinus10",
    ),
    Category.AROON: (
        "AroonUpAboveDown",
        "AroonUpBelowDown",
        "AroonOscAbove90",
        "AroonOscAbove80",
        "AroonOscBelowMinus90",
        "AroonOscBelowMinus80",
    ),
    Category.CHOPPINESS: (
        "ChoppinessIndexAbove70",
        "ChoppinessIndexAbove65",
        "ChoppinessIndexAbove60",
        "ChoppinessIndexBelow40",
        "ChoppinessIndexBelow35",
        "ChoppinessIndexBelow30",
    ),
    Category.SUPPORT_RESISTANCE: (
        "PriceAboveS1",
        "PriceAboveS2",
        "PriceAboveS3",
        "PriceBelowR1",
        "PriceBelowR2",
        "PriceBelowR3",
        "PriceBelowS1",
        "PriceBelowS2",
        "PriceBelowS3",
        "PriceAboveR1",
        "PriceAboveR2",
        "PriceAboveR3",
    ),
    Category.FIBONACCI: (
        "PriceAbove236Retracement",
        "PriceAbove382Retracement",
        "PriceAbove500Retracement",
        "PriceAbove618Retracement",
        "PriceBelow236Retracement",
        "PriceBelow382Retracement",
        "PriceBelow500Retracement",
        "PriceBelow618Retracement",
    ),
}


def get_signals_for_category(category: str) -> list[str]:
    """Signal names of a category, in display order.

    Matching is case-insensitive; an unknown category gives an empty list.
    The returned list is a fresh copy.
    """
    try:
        key = Category(category.lower())
    except (AttributeError, ValueError):
        return []
    return list(_SIGNALS[key])


def list_categories() -> list[str]:
    """Category tags in definition order."""
    return [c.value for c in Category]
