"""
Data Ingestion Service

CONTRACT:
    Input:  HistoryRequest
    Output: HistoryResult

RESPONSIBILITIES:
    - Fetch OHLC history from Yahoo Finance for the dashboard's chart ranges
    - Look up the live price of a holding
    - Drop incomplete rows instead of zero-filling them

NO LLM INVOLVEMENT - Pure data fetching and transformation.
"""

from alphadesk.services.data_ingestion.interface import DataIngestionServiceInterface
from alphadesk.services.data_ingestion.service import (
    DataIngestionService,
    get_data_ingestion_service,
)

__all__ = [
    "DataIngestionServiceInterface",
    "DataIngestionService",
    "get_data_ingestion_service",
]
