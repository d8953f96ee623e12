"""
Indicator Engine Service

CONTRACT:
    Input:  IndicatorRequest (OHLC bars, oldest first)
    Output: IndicatorSeriesOutput

RESPONSIBILITIES:
    - Moving averages of close (MA20, MA60, MA120)
    - Stochastic oscillator with recursive smoothing (K, D)
    - MACD from SMA-seeded EMAs (DIF, Signal, OSC)
    - Trade markers pinned onto the matching bars

PURE PYTHON - No LLM involvement.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from alphadesk.services.indicators.interface import IndicatorServiceInterface
from alphadesk.services.indicators.pipeline import (
    ema_field,
    mark_trades,
    moving_average_key,
    process_series,
    with_kd,
    with_macd,
    with_sma,
)
from alphadesk.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
    "process_series",
    "with_sma",
    "with_kd",
    "with_macd",
    "ema_field",
    "mark_trades",
    "moving_average_key",
]
