"""
Data Ingestion Service Implementation

Fetches price history from Yahoo Finance and normalizes it into bars.
"""

import logging
from typing import Optional

from alphadesk.schemas.market import HistoryRequest, HistoryResult
from alphadesk.services.base import DataNotFoundError, ExternalAPIError, ValidationError
from alphadesk.services.data_ingestion.interface import DataIngestionServiceInterface
from alphadesk.services.data_ingestion.yahoo_adapter import (
    fetch_history,
    fetch_latest_price,
    is_priced_symbol,
)

logger = logging.getLogger(__name__)


class DataIngestionService(DataIngestionServiceInterface):
    """
    Data Ingestion Service.

    Single source (Yahoo Finance), single attempt.
    """

    @property
    def name(self) -> str:
        return "DataIngestionService"

    async def execute(self, input_data: HistoryRequest) -> HistoryResult:
        """Fetch price history (and optionally the live quote) for one symbol."""
        symbol = input_data.symbol.strip()

        if not is_priced_symbol(symbol):
            raise ValidationError(self.name, f"{symbol} has no market price history")

        try:
            bars = await fetch_history(symbol, input_data.chart_range)
        except Exception as e:
            logger.error(f"Error fetching {symbol} from Yahoo Finance: {e}")
            raise ExternalAPIError(
                self.name,
                f"Failed to fetch history for {symbol}",
                details={"error": str(e)},
            ) from e

        if not bars:
            raise DataNotFoundError(self.name, f"No price history for {symbol}")

        live_price = None
        if input_data.include_live_price:
            live_price = await self.get_quote(symbol)

        logger.info(f"Got {len(bars)} bars for {symbol} ({input_data.chart_range.value})")

        return HistoryResult(
            symbol=symbol,
            chart_range=input_data.chart_range,
            bars=bars,
            live_price=live_price,
        )

    async def get_quote(self, symbol: str) -> Optional[float]:
        """Get the current price for a single symbol."""
        if not is_priced_symbol(symbol):
            return None
        return await fetch_latest_price(symbol)

    async def health_check(self) -> bool:
        """Yahoo Finance needs no credentials; report healthy."""
        return True


# Singleton instance
_service_instance: Optional[DataIngestionService] = None


def get_data_ingestion_service() -> DataIngestionService:
    """Get or create data ingestion service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = DataIngestionService()
    return _service_instance
