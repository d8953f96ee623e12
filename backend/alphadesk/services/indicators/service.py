"""
Indicator Engine Service Implementation

Runs the indicator pipeline over a bar series.
NO LLM INVOLVEMENT - Pure Python/NumPy calculations.
"""

from typing import Optional

from alphadesk.schemas.indicators import (
    IndicatorRequest,
    IndicatorSeriesOutput,
    TechnicalSnapshot,
)
from alphadesk.services.indicators.interface import IndicatorServiceInterface
from alphadesk.services.indicators.pipeline import mark_trades, process_series


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Stateless: every call works only on its own input, so one instance can
    serve concurrent requests for different symbols.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: IndicatorRequest) -> IndicatorSeriesOutput:
        """Calculate indicators for the supplied series."""
        enriched = process_series(input_data.bars)
        if input_data.trades:
            enriched = mark_trades(enriched, input_data.trades)
        latest = TechnicalSnapshot.from_bar(enriched[-1]) if enriched else None

        return IndicatorSeriesOutput(
            symbol=input_data.symbol,
            chart_range=input_data.chart_range,
            bars=enriched,
            latest=latest,
        )

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
