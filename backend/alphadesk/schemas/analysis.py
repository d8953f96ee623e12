"""
CONTRACT 3: AI Analysis

Input: AnalysisRequest, PortfolioHealthRequest
Output: StockAnalysis, PortfolioHealth

The LLM reads the indicator snapshot of the latest bar and returns a short
summary, a detailed report and a position signal. The LLM does NO math:
every number it sees comes from the indicator engine.

The portfolio health check grades the whole book instead of one holding:
a 0-100 score, a risk level, a comment and a few suggestions.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from alphadesk.schemas.market import Bar, ChartRange
from alphadesk.schemas.indicators import TechnicalSnapshot


# =============================================================================
# ENUMS
# =============================================================================


class AnalysisSignal(str, Enum):
    ADD = "ADD"
    HOLD = "HOLD"
    REDUCE = "REDUCE"


class AssetClassification(str, Enum):
    """How the holder treats the position."""

    CORE = "CORE"  # long-term, buy weakness
    SATELLITE = "SATELLITE"  # swing, follow momentum


class AssetType(str, Enum):
    STOCK = "STOCK"
    ETF = "ETF"
    BOND = "BOND"


# =============================================================================
# INPUT: AnalysisRequest
# =============================================================================


class AnalysisRequest(BaseModel):
    """
    Request for an AI analysis of one holding.
    Sent by: API
    Received by: Analysis Service

    When ``bars`` is empty the history is fetched for ``chart_range``.
    """

    symbol: str = Field(..., min_length=1)
    name: Optional[str] = None
    category: Optional[str] = Field(
        default=None, description="Holding category as entered (e.g. 'stock', '債券')"
    )
    classification: AssetClassification = AssetClassification.CORE
    chart_range: ChartRange = ChartRange.WEEKLY_5Y
    bars: list[Bar] = Field(default_factory=list)
    current_price: Optional[float] = Field(default=None, gt=0)
    performance_note: Optional[str] = Field(
        default=None, description="Pre-formatted P/L line, e.g. 'P/L +12,000 (ROI 8.50%)'"
    )


# =============================================================================
# OUTPUT: StockAnalysis
# =============================================================================


class StockAnalysis(BaseModel):
    """Parsed LLM analysis for one holding."""

    symbol: str
    timestamp: datetime
    data_date: str = Field(..., description="Date of the bar the analysis is based on")
    asset_type: AssetType
    classification: AssetClassification
    summary: str
    detail: str
    signal: AnalysisSignal
    model: str
    snapshot: TechnicalSnapshot


# =============================================================================
# PORTFOLIO HEALTH CHECK
# =============================================================================


class AllocationSlice(BaseModel):
    """Share of the portfolio held in one asset category."""

    name: str
    percentage: float = Field(..., ge=0, description="Fraction of total value (0.25 = 25%)")


class HoldingValue(BaseModel):
    symbol: str
    name: Optional[str] = None
    market_value: float = Field(..., ge=0)


class PortfolioHealthRequest(BaseModel):
    """
    Portfolio-wide figures for a risk and allocation review.
    Sent by: API
    Received by: Portfolio Health Service

    All amounts are already converted to the reporting currency.
    """

    total_value: float = Field(..., gt=0)
    total_pl: float
    total_roi: float = Field(..., description="Fraction, e.g. 0.085 for 8.5%")
    allocation: list[AllocationSlice] = Field(default_factory=list)
    holdings: list[HoldingValue] = Field(default_factory=list)


class PortfolioHealth(BaseModel):
    """Parsed portfolio review."""

    timestamp: datetime
    score: int = Field(..., description="0-100 as graded by the model, 0 when unreadable")
    risk: str
    comment: str
    suggestions: list[str]
    model: str
