"""
LLM Analysis Service

CONTRACT:
    Input:  AnalysisRequest, PortfolioHealthRequest
    Output: StockAnalysis, PortfolioHealth

RESPONSIBILITIES:
    - Build one analysis prompt from the latest indicator snapshot
    - Call Gemini, falling back through the configured models
    - Parse [SUMMARY] / [DETAIL] / [SIGNAL] sections into an ADD / HOLD / REDUCE signal
    - Grade the whole portfolio from [SCORE] / [RISK] / [COMMENT] / [SUGGESTION]

CRITICAL RULES:
    - LLM does NO math - all numbers come from the Indicator Engine
    - Results are not cached
"""

from alphadesk.services.llm.interface import (
    AnalysisServiceInterface,
    PortfolioHealthServiceInterface,
)
from alphadesk.services.llm.client import (
    GeminiClient,
    LLMConfig,
    LLMNotConfiguredError,
    LLMResponse,
    get_llm_client,
)
from alphadesk.services.llm.analysis import (
    AnalysisService,
    ParsedAnalysis,
    ParsedHealthCheck,
    PortfolioHealthService,
    get_analysis_service,
    get_portfolio_health_service,
    parse_analysis_response,
    parse_health_check_response,
)

__all__ = [
    # Interfaces
    "AnalysisServiceInterface",
    "PortfolioHealthServiceInterface",
    # Client
    "GeminiClient",
    "LLMConfig",
    "LLMNotConfiguredError",
    "LLMResponse",
    "get_llm_client",
    # Services
    "AnalysisService",
    "ParsedAnalysis",
    "ParsedHealthCheck",
    "PortfolioHealthService",
    "get_analysis_service",
    "get_portfolio_health_service",
    "parse_analysis_response",
    "parse_health_check_response",
]
