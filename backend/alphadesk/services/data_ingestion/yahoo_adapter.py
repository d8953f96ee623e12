"""
Yahoo Finance Data Adapter

Fetches price history and live quotes from Yahoo Finance.
Taiwan listings use the .TW / .TWO suffix; US tickers are used as-is.
"""

import asyncio
import logging
from typing import Optional

import pandas as pd
import yfinance as yf

from alphadesk.core.config import settings
from alphadesk.schemas.market import Bar, ChartRange

logger = logging.getLogger(__name__)

# Holdings without a market price (fixed deposits)
FIXED_DEPOSIT_SUFFIX = "-TD"
FIXED_DEPOSIT_LABEL = "定存"


def is_priced_symbol(symbol: str) -> bool:
    """Fixed deposits carry no price history."""
    symbol = symbol.strip()
    return not (
        symbol.upper().endswith(FIXED_DEPOSIT_SUFFIX) or symbol == FIXED_DEPOSIT_LABEL
    )


def history_to_bars(hist: pd.DataFrame) -> list[Bar]:
    """
    Convert a yfinance history frame to bars, oldest first.

    Rows without a close, high or low are dropped rather than zero-filled.
    """
    bars = []
    for idx, row in hist.sort_index().iterrows():
        if pd.isna(row["Close"]) or pd.isna(row["High"]) or pd.isna(row["Low"]):
            continue

        bars.append(
            Bar(
                date=idx.strftime("%Y-%m-%d"),
                open=None if pd.isna(row["Open"]) else float(row["Open"]),
                high=float(row["High"]),
                low=float(row["Low"]),
                close=float(row["Close"]),
            )
        )
    return bars


def _download_history(symbol: str, chart_range: ChartRange) -> pd.DataFrame:
    ticker = yf.Ticker(symbol)
    return ticker.history(
        period=chart_range.period,
        interval=chart_range.interval,
        timeout=settings.history_timeout_seconds,
        raise_errors=True,
    )


async def fetch_history(
    symbol: str,
    chart_range: ChartRange = ChartRange.WEEKLY_5Y,
) -> list[Bar]:
    """
    Fetch price history for one symbol.

    Args:
        symbol: Yahoo ticker (e.g. "2330.TW", "BND")
        chart_range: Span of history and bar size

    Returns:
        Bars oldest first (empty if Yahoo has nothing for the symbol)
    """
    logger.info(
        f"Fetching {symbol} history from Yahoo Finance "
        f"(period={chart_range.period}, interval={chart_range.interval})"
    )

    # yfinance is blocking, keep it off the event loop
    loop = asyncio.get_running_loop()
    hist = await loop.run_in_executor(None, _download_history, symbol, chart_range)

    if hist is None or hist.empty:
        logger.warning(f"No history returned for {symbol}")
        return []

    return history_to_bars(hist)


async def fetch_latest_price(symbol: str) -> Optional[float]:
    """Get the current market price, or None when Yahoo has no quote."""
    try:
        loop = asyncio.get_running_loop()
        info = await loop.run_in_executor(None, lambda: yf.Ticker(symbol).info)
    except Exception as e:
        logger.debug(f"Could not get live quote for {symbol}: {e}")
        return None

    price = info.get("currentPrice") or info.get("regularMarketPrice")
    return float(price) if price else None
