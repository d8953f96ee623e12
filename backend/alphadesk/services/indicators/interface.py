"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod

from alphadesk.services.base import BaseService
from alphadesk.schemas.indicators import IndicatorRequest, IndicatorSeriesOutput


class IndicatorServiceInterface(BaseService[IndicatorRequest, IndicatorSeriesOutput]):
    """
    Indicator Engine Service Contract.

    INPUT: IndicatorRequest
        - bars: OHLC bars, oldest first
        - trades: Optional trades to pin onto the chart

    OUTPUT: IndicatorSeriesOutput
        - bars: Same bars with MA20/60/120, K/D and DIF/Signal/OSC attached,
          plus TradePrice/Trade on bars a trade was matched to
        - latest: Snapshot of the last enriched bar (None for empty input)
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: IndicatorRequest) -> IndicatorSeriesOutput:
        """Calculate indicators for the supplied series."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
