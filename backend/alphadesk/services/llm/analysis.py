"""
Analysis Service Implementation

Fetches history, runs the indicator engine and asks the LLM for a narrative
analysis of the latest bar. Also grades the whole portfolio on request.

CRITICAL: LLM does NO math. All numbers come from the Indicator Engine.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from alphadesk.schemas.analysis import (
    AnalysisRequest,
    AnalysisSignal,
    PortfolioHealth,
    PortfolioHealthRequest,
    StockAnalysis,
)
from alphadesk.schemas.indicators import TechnicalSnapshot
from alphadesk.schemas.market import HistoryRequest
from alphadesk.services.base import DataNotFoundError
from alphadesk.services.data_ingestion import DataIngestionService, get_data_ingestion_service
from alphadesk.services.indicators.pipeline import process_series
from alphadesk.services.llm.client import GeminiClient, get_llm_client
from alphadesk.services.llm.interface import (
    AnalysisServiceInterface,
    PortfolioHealthServiceInterface,
)
from alphadesk.services.llm.prompts import (
    detect_asset_type,
    format_analysis_prompt,
    format_portfolio_health_prompt,
)

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY = "Analysis complete"

_SUMMARY_RE = re.compile(r"\[SUMMARY\]\s*([\s\S]*?)\s*(?=\[(?:DETAIL|SIGNAL)\]|$)", re.IGNORECASE)
_DETAIL_RE = re.compile(r"\[DETAIL\]\s*([\s\S]*?)\s*(?=\[SIGNAL\]|$)", re.IGNORECASE)
_SIGNAL_RE = re.compile(r"\[SIGNAL\]\s*(ADD|REDUCE|HOLD)", re.IGNORECASE)


@dataclass
class ParsedAnalysis:
    """Sections pulled out of an LLM answer."""

    summary: str
    detail: str
    signal: AnalysisSignal


def parse_analysis_response(text: str) -> ParsedAnalysis:
    """
    Split an LLM answer into summary, detail and signal.

    Missing sections fall back to a generic summary, the whole answer as
    detail, and HOLD.
    """
    summary_match = _SUMMARY_RE.search(text)
    detail_match = _DETAIL_RE.search(text)
    signal_match = _SIGNAL_RE.search(text)

    summary = summary_match.group(1).strip() if summary_match else ""
    summary = re.sub(r"[`*#]", "", summary).replace("\n", " ").strip() or DEFAULT_SUMMARY

    detail = detail_match.group(1).strip() if detail_match else text
    signal = AnalysisSignal(signal_match.group(1).upper()) if signal_match else AnalysisSignal.HOLD

    return ParsedAnalysis(summary=summary, detail=detail, signal=signal)


class AnalysisService(AnalysisServiceInterface):
    """
    Analysis Service using Gemini for narrative analysis.

    No caching: every call asks the LLM again.
    """

    def __init__(
        self,
        llm_client: Optional[GeminiClient] = None,
        data_service: Optional[DataIngestionService] = None,
    ):
        self._llm_client = llm_client
        self._data_service = data_service

    @property
    def llm_client(self) -> GeminiClient:
        """Lazy initialization of LLM client."""
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    @property
    def data_service(self) -> DataIngestionService:
        if self._data_service is None:
            self._data_service = get_data_ingestion_service()
        return self._data_service

    @property
    def name(self) -> str:
        return "AnalysisService"

    async def execute(self, input_data: AnalysisRequest) -> StockAnalysis:
        """Analyze one holding from its latest enriched bar."""
        bars = input_data.bars
        current_price = input_data.current_price

        if not bars:
            history = await self.data_service.execute(
                HistoryRequest(
                    symbol=input_data.symbol,
                    chart_range=input_data.chart_range,
                    include_live_price=current_price is None,
                )
            )
            bars = history.bars
            current_price = current_price or history.live_price

        enriched = process_series(bars)
        if not enriched:
            raise DataNotFoundError(self.name, f"No price history for {input_data.symbol}")

        snapshot = TechnicalSnapshot.from_bar(enriched[-1])
        asset_type = detect_asset_type(
            input_data.symbol, input_data.name or "", input_data.category
        )

        prompt = format_analysis_prompt(
            symbol=input_data.symbol,
            snapshot=snapshot,
            classification=input_data.classification,
            asset_type=asset_type,
            name=input_data.name,
            current_price=current_price,
            performance_note=input_data.performance_note,
        )

        response = await self.llm_client.generate(prompt)
        parsed = parse_analysis_response(response.content)

        logger.info(
            f"Analysis for {input_data.symbol} via {response.model}: {parsed.signal.value}"
        )

        return StockAnalysis(
            symbol=input_data.symbol,
            timestamp=datetime.now(),
            data_date=snapshot.date,
            asset_type=asset_type,
            classification=input_data.classification,
            summary=parsed.summary,
            detail=parsed.detail,
            signal=parsed.signal,
            model=response.model,
            snapshot=snapshot,
        )

    async def health_check(self) -> bool:
        """Check the LLM is configured."""
        return await self.llm_client.health_check()


# Singleton instance
_service_instance: Optional[AnalysisService] = None


def get_analysis_service() -> AnalysisService:
    """Get or create analysis service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AnalysisService()
    return _service_instance


# =============================================================================
# PORTFOLIO HEALTH CHECK
# =============================================================================

DEFAULT_RISK = "Unknown"
DEFAULT_COMMENT = "Could not parse the review"

_SCORE_RE = re.compile(r"\[SCORE\]\s*(\d+)", re.IGNORECASE)
_RISK_RE = re.compile(r"\[RISK\]\s*(.+)", re.IGNORECASE)
_COMMENT_RE = re.compile(r"\[COMMENT\]\s*([\s\S]*?)\s*(?=\[SUGGESTION\]|$)", re.IGNORECASE)
_SUGGESTION_RE = re.compile(r"\[SUGGESTION\]\s*([\s\S]*)", re.IGNORECASE)


@dataclass
class ParsedHealthCheck:
    score: int
    risk: str
    comment: str
    suggestions: list[str]


def parse_health_check_response(text: str) -> ParsedHealthCheck:
    """
    Split a health check answer into score, risk, comment and suggestions.

    Missing tags fall back to 0, "Unknown", a fixed comment and no
    suggestions. Suggestions are the non-blank lines after [SUGGESTION].
    """
    score_match = _SCORE_RE.search(text)
    risk_match = _RISK_RE.search(text)
    comment_match = _COMMENT_RE.search(text)
    suggestion_match = _SUGGESTION_RE.search(text)

    suggestions = []
    if suggestion_match:
        suggestions = [
            line.strip() for line in suggestion_match.group(1).splitlines() if line.strip()
        ]

    return ParsedHealthCheck(
        score=int(score_match.group(1)) if score_match else 0,
        risk=risk_match.group(1).strip() if risk_match else DEFAULT_RISK,
        comment=comment_match.group(1).strip() if comment_match else DEFAULT_COMMENT,
        suggestions=suggestions,
    )


class PortfolioHealthService(PortfolioHealthServiceInterface):
    """One LLM call per check; nothing is cached."""

    def __init__(self, llm_client: Optional[GeminiClient] = None):
        self._llm_client = llm_client

    @property
    def llm_client(self) -> GeminiClient:
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    @property
    def name(self) -> str:
        return "PortfolioHealthService"

    async def execute(self, input_data: PortfolioHealthRequest) -> PortfolioHealth:
        """Ask the LLM to grade the portfolio and parse its answer."""
        prompt = format_portfolio_health_prompt(input_data)
        response = await self.llm_client.generate(prompt)
        parsed = parse_health_check_response(response.content)

        logger.info(f"Portfolio health via {response.model}: {parsed.score} ({parsed.risk})")

        return PortfolioHealth(
            timestamp=datetime.now(),
            score=parsed.score,
            risk=parsed.risk,
            comment=parsed.comment,
            suggestions=parsed.suggestions,
            model=response.model,
        )

    async def health_check(self) -> bool:
        return await self.llm_client.health_check()


_health_service_instance: Optional[PortfolioHealthService] = None


def get_portfolio_health_service() -> PortfolioHealthService:
    """Get or create portfolio health service instance."""
    global _health_service_instance
    if _health_service_instance is None:
        _health_service_instance = PortfolioHealthService()
    return _health_service_instance
