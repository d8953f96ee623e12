"""
Indicator API Endpoints

Endpoints for technical indicator calculations.
"""

import logging

from fastapi import APIRouter, Query

from alphadesk.api.v1.errors import to_http_exception
from alphadesk.core.config import settings
from alphadesk.schemas.market import Bar, ChartRange, HistoryRequest
from alphadesk.schemas.indicators import IndicatorRequest, IndicatorSeriesOutput, TradeMarker
from alphadesk.services.base import ServiceError
from alphadesk.services.data_ingestion import get_data_ingestion_service
from alphadesk.services.indicators import get_indicator_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/compute", response_model=IndicatorSeriesOutput)
async def compute_indicators(bars: list[Bar]):
    """
    Enrich caller-supplied bars with MA20/60/120, KD and MACD.

    Bars must be sorted oldest first. An empty list returns an empty series.
    """
    indicator_service = get_indicator_service()
    return await indicator_service.execute(IndicatorRequest(bars=bars))


@router.get("/{symbol}", response_model=IndicatorSeriesOutput)
async def get_indicators(
    symbol: str,
    chart_range: ChartRange = Query(default=settings.default_chart_range, alias="range"),
):
    """
    Get the enriched price series for a symbol.

    Returns every bar of the chart range with:
        - Moving averages (MA20, MA60, MA120)
        - Stochastic oscillator (K, D)
        - MACD (DIF, Signal, OSC)
    plus a snapshot of the latest bar.
    """
    return await _symbol_series(symbol, chart_range, [])


@router.post("/{symbol}", response_model=IndicatorSeriesOutput)
async def get_indicators_with_trades(
    symbol: str,
    trades: list[TradeMarker],
    chart_range: ChartRange = Query(default=settings.default_chart_range, alias="range"),
):
    """
    Same series as the GET route, with the holder's trades pinned onto it.

    Each trade lands on its own date's bar, or the nearest bar within a week.
    """
    return await _symbol_series(symbol, chart_range, trades)


async def _symbol_series(
    symbol: str,
    chart_range: ChartRange,
    trades: list[TradeMarker],
) -> IndicatorSeriesOutput:
    data_service = get_data_ingestion_service()
    try:
        history = await data_service.execute(
            HistoryRequest(symbol=symbol, chart_range=chart_range)
        )
    except ServiceError as e:
        logger.warning(f"History unavailable for {symbol}: {e}")
        raise to_http_exception(e)

    indicator_service = get_indicator_service()
    return await indicator_service.execute(
        IndicatorRequest(
            symbol=history.symbol,
            chart_range=history.chart_range,
            bars=history.bars,
            trades=trades,
        )
    )
