"""Indicator configuration models."""

from __future__ import annotations

from pydantic import BaseModel


class SignalConfig(BaseModel):
    """Indicator parameters used by the signal evaluator.

    Periods baked into signal names (SMA50, BB2_20, ...) are not listed here;
    changing them would change what the name means.
    """

    # Oscillators
    rsi_period: int = 14
    stoch_period: int = 14
    stoch_smooth_k: int = 3
    stoch_smooth_d: int = 3

    # Trend / volatility
    adx_period: int = 14
    cci_period: int = 20
    linreg_period: int = 14
    aroon_period: int = 14
    chop_period: int = 14

    # Volume
    cmf_period: int = 20
    volume_lookback: int = 5

    # Levels
    fib_period: int = 20

    # RSI degeneracy policy (also used by MFI)
    rsi_no_loss_value: float = 100.0  # avg loss 0, avg gain > 0
    rsi_flat_value: float = 50.0  # avg loss 0, avg gain 0
