"""Named indicator groups computed once per evaluation."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

import numpy as np

from barsignals.indicators.indicators import atr, ema, sma, trailing_mean, vwap
from barsignals.indicators.levels import fibonacci_retracement, ichimoku, pivot_points
from barsignals.indicators.oscillators import (
    aroon,
    cci,
    macd,
    mfi,
    rsi,
    stochastic,
    williams_r,
)
from barsignals.indicators.volatility import (
    adx,
    bollinger_bands,
    choppiness_index,
    cmf,
    linear_regression_slope,
    supertrend,
)
from barsignals.models.bar import BarSeries
from barsignals.models.config import SignalConfig

logger = logging.getLogger(__name__)

Series = dict[str, np.ndarray]
GroupBuilder = Callable[[BarSeries], Series]

MOVING_AVERAGES = {
    "sma7": (sma, 7),
    "sma20": (sma, 20),
    "sma21": (sma, 21),
    "sma50": (sma, 50),
    "sma200": (sma, 200),
    "ema20": (ema, 20),
    "ema50": (ema, 50),
}
BOLLINGER_WIDTHS = {"bb1": 1.0, "bb2": 2.0, "bb3": 3.0}
BOLLINGER_PERIOD = 20


class IndicatorCalculator:
    """Calculator for every indicator group a signal rule can depend on.

    A group is a name ("rsi", "bb2", "pivots", ...) producing one or more
    named series. Each requested group is computed exactly once over the
    whole bar series; the price columns ("open", "high", "low", "close",
    "volume") are always included.
    """

    def __init__(self, config: SignalConfig | None = None):
        self.config = config or SignalConfig()
        self._builders: dict[str, GroupBuilder] = {
            **{
                name: self._moving_average(func, period)
                for name, (func, period) in MOVING_AVERAGES.items()
            },
            **{name: self._bollinger(name, width) for name, width in BOLLINGER_WIDTHS.items()},
            "rsi": self._rsi,
            "stochastic": self._stochastic,
            "adx": self._adx,
            "cmf": self._cmf,
            "cci": self._cci,
            "linreg_slope": self._linreg_slope,
            "aroon": self._aroon,
            "chop": self._chop,
            "pivots": self._pivots,
            "fibonacci": self._fibonacci,
            "volume_avg": self._volume_avg,
            "atr": self._atr,
            "vwap": self._vwap,
            "macd": self._macd,
            "williams_r": self._williams_r,
            "mfi": self._mfi,
            "supertrend": self._supertrend,
            "ichimoku": self._ichimoku,
        }

    @property
    def groups(self) -> list[str]:
        """Names of all available indicator groups."""
        return sorted(self._builders)

    def calculate(self, groups: Iterable[str], series: BarSeries) -> Series:
        """
        Calculate the requested indicator groups.

        Args:
            groups: Group names (duplicates are computed once)
            series: Bars to compute over

        Returns:
            Dict of series name -> array, each the same length as ``series``

        Raises:
            KeyError: If a group name is unknown
        """
        result: Series = {
            "open": series.opens,
            "high": series.highs,
            "low": series.lows,
            "close": series.closes,
            "volume": series.volumes,
        }
        for group in dict.fromkeys(groups):
            builder = self._builders.get(group)
            if builder is None:
                available = ", ".join(self.groups)
                raise KeyError(f"Unknown indicator group '{group}'. Available: {available}")
            result.update(builder(series))

        logger.debug("Calculated %d series over %d bars", len(result), len(series))
        return result

    def calculate_all(self, series: BarSeries) -> Series:
        """Calculate every available indicator group."""
        return self.calculate(self._builders, series)

    # ------------------------------------------------------------------
    # Group builders
    # ------------------------------------------------------------------

    @staticmethod
    def _moving_average(func, period: int) -> GroupBuilder:
        def build(s: BarSeries) -> Series:
            name = f"{func.__name__}{period}"
            return {name: func(s.closes, period)}

        return build

    @staticmethod
    def _bollinger(name: str, width: float) -> GroupBuilder:
        def build(s: BarSeries) -> Series:
            bands = bollinger_bands(s.closes, BOLLINGER_PERIOD, width)
            return {
                f"{name}_upper": bands.upper,
                f"{name}_middle": bands.middle,
                f"{name}_lower": bands.lower,
            }

        return build

    def _rsi(self, s: BarSeries) -> Series:
        cfg = self.config
        return {
            "rsi": rsi(
                s.closes,
                cfg.rsi_period,
                no_loss_value=cfg.rsi_no_loss_value,
                flat_value=cfg.rsi_flat_value,
            )
        }

    def _stochastic(self, s: BarSeries) -> Series:
        cfg = self.config
        stoch = stochastic(
            s.highs, s.lows, s.closes, cfg.stoch_period, cfg.stoch_smooth_k, cfg.stoch_smooth_d
        )
        return {"stoch_k": stoch.k, "stoch_d": stoch.d}

    def _adx(self, s: BarSeries) -> Series:
        result = adx(s.highs, s.lows, s.closes, self.config.adx_period)
        return {"adx": result.adx, "plus_di": result.plus_di, "minus_di": result.minus_di}

    def _cmf(self, s: BarSeries) -> Series:
        return {"cmf": cmf(s.highs, s.lows, s.closes, s.volumes, self.config.cmf_period)}

    def _cci(self, s: BarSeries) -> Series:
        return {"cci": cci(s.highs, s.lows, s.closes, self.config.cci_period)}

    def _linreg_slope(self, s: BarSeries) -> Series:
        return {"linreg_slope": linear_regression_slope(s.closes, self.config.linreg_period)}

    def _aroon(self, s: BarSeries) -> Series:
        result = aroon(s.highs, s.lows, self.config.aroon_period)
        return {
            "aroon_up": result.up,
            "aroon_down": result.down,
            "aroon_osc": result.oscillator,
        }

    def _chop(self, s: BarSeries) -> Series:
        return {"chop": choppiness_index(s.highs, s.lows, s.closes, self.config.chop_period)}

    def _pivots(self, s: BarSeries) -> Series:
        return pivot_points(s.highs, s.lows, s.closes)._asdict()

    def _fibonacci(self, s: BarSeries) -> Series:
        return fibonacci_retracement(s.highs, s.lows, self.config.fib_period)._asdict()

    def _volume_avg(self, s: BarSeries) -> Series:
        return {"volume_avg": trailing_mean(s.volumes, self.config.volume_lookback)}

    def _atr(self, s: BarSeries) -> Series:
        return {"atr": atr(s.highs, s.lows, s.closes)}

    def _vwap(self, s: BarSeries) -> Series:
        return {"vwap": vwap(s.highs, s.lows, s.closes, s.volumes)}

    def _macd(self, s: BarSeries) -> Series:
        result = macd(s.closes)
        return {
            "macd": result.macd,
            "macd_signal": result.signal,
            "macd_histogram": result.histogram,
        }

    def _williams_r(self, s: BarSeries) -> Series:
        return {"williams_r": williams_r(s.highs, s.lows, s.closes)}

    def _mfi(self, s: BarSeries) -> Series:
        cfg = self.config
        return {
            "mfi": mfi(
                s.highs,
                s.lows,
                s.closes,
                s.volumes,
                no_loss_value=cfg.rsi_no_loss_value,
                flat_value=cfg.rsi_flat_value,
            )
        }

    def _supertrend(self, s: BarSeries) -> Series:
        result = supertrend(s.highs, s.lows, s.closes)
        return {
            "supertrend": result.value,
            "supertrend_trend": result.trend,
            "supertrend_upper": result.upper,
            "supertrend_lower": result.lower,
        }

    def _ichimoku(self, s: BarSeries) -> Series:
        return ichimoku(s.highs, s.lows)._asdict()
