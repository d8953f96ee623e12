"""
CONTRACT 1: Market Data

Input: HistoryRequest
Output: HistoryResult

Raw price bars as they come out of the market data provider, before any
indicator is attached.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class ChartRange(str, Enum):
    """Chart views offered by the dashboard: span of history and bar size."""

    DAILY_1Y = "1y_1d"
    WEEKLY_5Y = "5y_1wk"
    MONTHLY_10Y = "10y_1mo"

    @property
    def period(self) -> str:
        return _RANGE_PARAMS[self][0]

    @property
    def interval(self) -> str:
        return _RANGE_PARAMS[self][1]


# The daily view downloads two years so MA120 is warm for the visible year.
_RANGE_PARAMS = {
    ChartRange.DAILY_1Y: ("2y", "1d"),
    ChartRange.WEEKLY_5Y: ("5y", "1wk"),
    ChartRange.MONTHLY_10Y: ("10y", "1mo"),
}


# =============================================================================
# BARS
# =============================================================================


class Bar(BaseModel):
    """
    Single sampled point of a price series.

    Prices must be finite: NaN and Infinity are rejected instead of being
    coerced. ``close`` may be missing; indicator stages treat a missing close
    as a gap.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    date: str = Field(..., description="Calendar date (YYYY-MM-DD)")
    open: Optional[float] = None
    high: float
    low: float
    close: Optional[float] = None


# =============================================================================
# INPUT / OUTPUT
# =============================================================================


class HistoryRequest(BaseModel):
    """
    Request for price history.
    Sent by: API / Analysis Service
    Received by: Data Ingestion Service
    """

    symbol: str = Field(..., min_length=1, description="Ticker (e.g. '2330.TW', 'BND')")
    chart_range: ChartRange = ChartRange.WEEKLY_5Y
    include_live_price: bool = False


class HistoryResult(BaseModel):
    """Price history for one symbol, oldest bar first."""

    symbol: str
    chart_range: ChartRange
    bars: list[Bar]
    live_price: Optional[float] = None
