"""
Data Ingestion Service Interface

Defines the contract for the market data layer.
"""

from abc import abstractmethod
from typing import Optional

from alphadesk.services.base import BaseService
from alphadesk.schemas.market import HistoryRequest, HistoryResult


class DataIngestionServiceInterface(BaseService[HistoryRequest, HistoryResult]):
    """
    Data Ingestion Service Contract.

    INPUT: HistoryRequest
        - symbol: Yahoo ticker
        - chart_range: 1y_1d / 5y_1wk / 10y_1mo
        - include_live_price: Also look up the current quote

    OUTPUT: HistoryResult
        - bars: OHLC bars, oldest first, never empty
        - live_price: Current quote when requested and available

    One attempt per call. Retrying and proxy fallback belong to the caller.
    """

    @property
    def name(self) -> str:
        return "DataIngestionService"

    @abstractmethod
    async def execute(self, input_data: HistoryRequest) -> HistoryResult:
        """Fetch and normalize price history."""
        pass

    @abstractmethod
    async def get_quote(self, symbol: str) -> Optional[float]:
        """Get the current price for a single symbol."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check whether the data source is usable."""
        pass
