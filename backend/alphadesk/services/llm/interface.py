"""
LLM Service Interface

Defines the contracts for the AI analysis layer.
"""

from abc import abstractmethod

from alphadesk.services.base import BaseService
from alphadesk.schemas.analysis import (
    AnalysisRequest,
    PortfolioHealth,
    PortfolioHealthRequest,
    StockAnalysis,
)


class AnalysisServiceInterface(BaseService[AnalysisRequest, StockAnalysis]):
    """
    Analysis Service Contract.

    INPUT: AnalysisRequest
        - symbol, name, category: Which holding
        - classification: CORE or SATELLITE role of the position
        - bars: Optional pre-fetched history (fetched when empty)

    OUTPUT: StockAnalysis
        - summary: Short verdict
        - detail: Full Markdown report
        - signal: ADD / HOLD / REDUCE
        - snapshot: Indicator readings the analysis was based on

    RULES:
        - NEVER let the LLM do math - numbers come from the indicator engine
        - Missing indicators are passed as "-", never as 0
    """

    @property
    def name(self) -> str:
        return "AnalysisService"

    @abstractmethod
    async def execute(self, input_data: AnalysisRequest) -> StockAnalysis:
        """Analyze one holding."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the LLM is configured."""
        pass


class PortfolioHealthServiceInterface(BaseService[PortfolioHealthRequest, PortfolioHealth]):
    """
    Portfolio Health Service Contract.

    INPUT: PortfolioHealthRequest
        - total_value, total_pl, total_roi: Portfolio totals
        - allocation: Share per asset category
        - holdings: Market value per holding (top five go into the prompt)

    OUTPUT: PortfolioHealth
        - score: 0-100
        - risk: Risk level as worded by the model
        - comment: Overall verdict
        - suggestions: One adjustment per entry
    """

    @property
    def name(self) -> str:
        return "PortfolioHealthService"

    @abstractmethod
    async def execute(self, input_data: PortfolioHealthRequest) -> PortfolioHealth:
        """Grade the portfolio."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the LLM is configured."""
        pass
