"""
CONTRACT 2: Indicator Engine

Input: list[Bar]
Output: list[EnrichedBar]

This module describes the enriched series produced by the indicator engine.
Pure Python/NumPy - NO LLM involvement.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from alphadesk.schemas.market import Bar, ChartRange


# =============================================================================
# TRADES
# =============================================================================


class TradeMarker(BaseModel):
    """
    One recorded trade to pin onto the chart.

    ``date`` is taken as entered: surrounding blanks and ``/`` separators are
    tolerated (``2024/1/5`` and ``2024-01-05`` name the same day).
    """

    date: str = Field(..., min_length=1)
    price: float = Field(..., gt=0, allow_inf_nan=False)
    strategy: Optional[str] = Field(default=None, description="Label the chart uses to pick the marker")
    quantity: Optional[float] = None


# =============================================================================
# ENRICHED SERIES
# =============================================================================


class EnrichedBar(Bar):
    """
    Bar plus every indicator computed so far.

    Indicator fields stay None until enough history exists. JSON output uses
    the charting names (MA20, K, DIF, Signal, OSC, ...). Moving averages of
    periods other than 20/60/120 are carried as extra ``MA<period>`` keys.
    """

    model_config = ConfigDict(
        frozen=True, allow_inf_nan=False, populate_by_name=True, extra="allow"
    )

    ma20: Optional[float] = Field(default=None, alias="MA20")
    ma60: Optional[float] = Field(default=None, alias="MA60")
    ma120: Optional[float] = Field(default=None, alias="MA120")
    k: Optional[float] = Field(default=None, alias="K")
    d: Optional[float] = Field(default=None, alias="D")
    dif: Optional[float] = Field(default=None, alias="DIF")
    signal: Optional[float] = Field(default=None, alias="Signal")
    osc: Optional[float] = Field(default=None, alias="OSC")

    # Set only on the bar a trade was matched to
    trade_price: Optional[float] = Field(default=None, alias="TradePrice")
    trade: Optional[TradeMarker] = Field(default=None, alias="Trade")


class TechnicalSnapshot(BaseModel):
    """Indicator readings of the most recent bar, as handed to the LLM."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    close: Optional[float] = None
    ma20: Optional[float] = Field(default=None, alias="MA20")
    ma60: Optional[float] = Field(default=None, alias="MA60")
    ma120: Optional[float] = Field(default=None, alias="MA120")
    k: Optional[float] = Field(default=None, alias="K")
    d: Optional[float] = Field(default=None, alias="D")
    dif: Optional[float] = Field(default=None, alias="DIF")
    signal: Optional[float] = Field(default=None, alias="Signal")
    osc: Optional[float] = Field(default=None, alias="OSC")

    @classmethod
    def from_bar(cls, bar: EnrichedBar) -> "TechnicalSnapshot":
        return cls(
            date=bar.date,
            close=bar.close,
            ma20=bar.ma20,
            ma60=bar.ma60,
            ma120=bar.ma120,
            k=bar.k,
            d=bar.d,
            dif=bar.dif,
            signal=bar.signal,
            osc=bar.osc,
        )


# =============================================================================
# INPUT / OUTPUT
# =============================================================================


class IndicatorRequest(BaseModel):
    """
    Request for indicator calculation over caller-supplied bars.
    Sent by: API / Analysis Service
    Received by: Indicator Service

    Bars must already be sorted oldest first; the engine does not sort.
    Trades, when given, are pinned onto the matching bars after enrichment.
    """

    symbol: Optional[str] = None
    chart_range: Optional[ChartRange] = None
    bars: list[Bar] = Field(default_factory=list)
    trades: list[TradeMarker] = Field(default_factory=list)


class IndicatorSeriesOutput(BaseModel):
    """Enriched series plus the snapshot of its last bar."""

    symbol: Optional[str] = None
    chart_range: Optional[ChartRange] = None
    bars: list[EnrichedBar]
    latest: Optional[TechnicalSnapshot] = None
