"""
Alpha Desk Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from alphadesk.schemas.market import (
    Bar,
    ChartRange,
    HistoryRequest,
    HistoryResult,
)
from alphadesk.schemas.indicators import (
    EnrichedBar,
    IndicatorRequest,
    IndicatorSeriesOutput,
    TradeMarker,
    TechnicalSnapshot,
)
from alphadesk.schemas.analysis import (
    AnalysisRequest,
    AnalysisSignal,
    AssetClassification,
    AssetType,
    StockAnalysis,
    AllocationSlice,
    HoldingValue,
    PortfolioHealth,
    PortfolioHealthRequest,
)

__all__ = [
    # Market
    "Bar",
    "ChartRange",
    "HistoryRequest",
    "HistoryResult",
    # Indicators
    "EnrichedBar",
    "IndicatorRequest",
    "IndicatorSeriesOutput",
    "TradeMarker",
    "TechnicalSnapshot",
    # Analysis
    "AnalysisRequest",
    "AnalysisSignal",
    "AssetClassification",
    "AssetType",
    "StockAnalysis",
    "AllocationSlice",
    "HoldingValue",
    "PortfolioHealth",
    "PortfolioHealthRequest",
]
