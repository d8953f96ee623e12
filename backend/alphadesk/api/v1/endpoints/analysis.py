"""
Analysis API Endpoints

AI narrative analysis and ADD / HOLD / REDUCE signal for a holding,
plus the portfolio-wide health check.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query

from alphadesk.api.v1.errors import to_http_exception
from alphadesk.core.config import settings
from alphadesk.schemas.analysis import (
    AnalysisRequest,
    AssetClassification,
    PortfolioHealth,
    PortfolioHealthRequest,
    StockAnalysis,
)
from alphadesk.schemas.market import ChartRange
from alphadesk.services.base import ServiceError
from alphadesk.services.llm import get_analysis_service, get_portfolio_health_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{symbol}", response_model=StockAnalysis)
async def analyze_symbol(
    symbol: str,
    chart_range: ChartRange = Query(default=settings.default_chart_range, alias="range"),
    classification: AssetClassification = AssetClassification.CORE,
    name: Optional[str] = None,
    category: Optional[str] = None,
):
    """
    Analyze a holding from its latest indicator readings.

    The position role (CORE / SATELLITE) changes the strategy the model is
    asked to apply.
    """
    request = AnalysisRequest(
        symbol=symbol,
        name=name,
        category=category,
        classification=classification,
        chart_range=chart_range,
    )
    return await _run_analysis(request)


@router.post("/", response_model=StockAnalysis)
async def analyze_holding(request: AnalysisRequest):
    """
    Analyze a holding with caller-supplied bars, price and P/L note.
    """
    return await _run_analysis(request)


@router.post("/portfolio/health", response_model=PortfolioHealth)
async def portfolio_health(request: PortfolioHealthRequest):
    """
    Grade the whole portfolio: score 0-100, risk level, comment and suggestions.
    """
    service = get_portfolio_health_service()
    try:
        return await service.execute(request)
    except ServiceError as e:
        logger.warning(f"Portfolio health check failed: {e}")
        raise to_http_exception(e)


async def _run_analysis(request: AnalysisRequest) -> StockAnalysis:
    service = get_analysis_service()
    try:
        return await service.execute(request)
    except ServiceError as e:
        logger.warning(f"Analysis failed for {request.symbol}: {e}")
        raise to_http_exception(e)
