"""
Indicator Pipeline

Threads a bar series through the indicator stages:
SMA(20), SMA(60), SMA(120), KD(9), MACD(12, 26, 9).

Every stage takes a series and returns a new list of new records; the input
list and its bars are never modified. Indicator values that cannot be
computed yet are None.

``mark_trades`` runs after the stages and pins recorded trades onto the
bars they happened on.
"""

from datetime import timedelta
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from alphadesk.schemas.market import Bar
from alphadesk.schemas.indicators import EnrichedBar, TradeMarker
from alphadesk.services.indicators.calculations import sma, ema, stochastic_kd

MA_PERIODS = (20, 60, 120)
KD_PERIOD = 9
MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL = 9

# A trade with no same-day bar snaps to the nearest bar strictly closer than this
TRADE_MATCH_WINDOW = timedelta(days=7)


def _column(series: Sequence[Bar], field: str) -> np.ndarray:
    """Pull one numeric field out of the series, None -> NaN."""
    return np.array(
        [np.nan if getattr(bar, field) is None else getattr(bar, field) for bar in series],
        dtype=float,
    )


def _optional(value: float) -> Optional[float]:
    return None if np.isnan(value) else float(value)


def _enrich(series: Sequence[Bar]) -> list[EnrichedBar]:
    return [
        bar if isinstance(bar, EnrichedBar) else EnrichedBar(**bar.model_dump())
        for bar in series
    ]


def _extend(series: Sequence[Bar], **columns: np.ndarray) -> list[EnrichedBar]:
    """Copy each bar with the given indicator columns attached."""
    return [
        bar.model_copy(update={name: _optional(values[i]) for name, values in columns.items()})
        for i, bar in enumerate(_enrich(series))
    ]


# =============================================================================
# STAGES
# =============================================================================


def moving_average_key(period: int) -> str:
    """Record key of MA<period>: a named field for 20/60/120, else an extra."""
    field = f"ma{period}"
    return field if field in EnrichedBar.model_fields else f"MA{period}"


def with_sma(series: Sequence[Bar], period: int) -> list[EnrichedBar]:
    """Attach MA<period> (mean close over the trailing ``period`` bars)."""
    values = sma(_column(series, "close"), period)
    return _extend(series, **{moving_average_key(period): values})


def ema_field(series: Sequence[Bar], period: int, field: str = "close") -> list[Optional[float]]:
    """
    EMA of any numeric field, aligned index-for-index with ``series``.

    Kept separate from the bar records so the same primitive serves both
    ``close`` and ``dif``.
    """
    return [_optional(value) for value in ema(_column(series, field), period)]


def with_kd(series: Sequence[Bar], period: int = KD_PERIOD) -> list[EnrichedBar]:
    """Attach the recursively smoothed stochastic K and D lines."""
    k_line, d_line = stochastic_kd(
        _column(series, "high"),
        _column(series, "low"),
        _column(series, "close"),
        period,
    )
    return _extend(series, k=k_line, d=d_line)


def with_macd(
    series: Sequence[Bar],
    fast_period: int = MACD_FAST,
    slow_period: int = MACD_SLOW,
    signal_period: int = MACD_SIGNAL,
) -> list[EnrichedBar]:
    """
    Attach DIF, Signal and OSC.

    DIF = EMA(fast) - EMA(slow) of close, Signal = EMA(signal) of DIF,
    OSC = DIF - Signal. Any missing operand leaves the result None.
    """
    fast_ema = ema(_column(series, "close"), fast_period)
    slow_ema = ema(_column(series, "close"), slow_period)
    with_dif = _extend(series, dif=fast_ema - slow_ema)

    dif = _column(with_dif, "dif")
    signal_line = ema(dif, signal_period)
    return _extend(with_dif, signal=signal_line, osc=dif - signal_line)


# =============================================================================
# PIPELINE
# =============================================================================


def process_series(bars: Sequence[Bar]) -> list[EnrichedBar]:
    """
    Run the full indicator pipeline over a chronologically ascending series.

    Empty input returns an empty list. The series is not sorted or validated
    for order here; that is the caller's job.
    """
    if not bars:
        return []

    series = list(bars)
    for period in MA_PERIODS:
        series = with_sma(series, period)
    series = with_kd(series, KD_PERIOD)
    series = with_macd(series, MACD_FAST, MACD_SLOW, MACD_SIGNAL)
    return series


# =============================================================================
# TRADE MARKERS
# =============================================================================


def normalize_trade_date(raw: str) -> str:
    """Trim blanks and turn ``/`` separators into ``-``."""
    return raw.strip().replace("/", "-")


def _find_trade_bar(
    trade_date: str,
    dates: list[str],
    timestamps: pd.Series,
) -> Optional[int]:
    if trade_date in dates:
        return dates.index(trade_date)

    trade_ts = pd.to_datetime(trade_date, errors="coerce")
    if pd.isna(trade_ts):
        return None

    closest = None
    best = TRADE_MATCH_WINDOW
    for i, ts in enumerate(timestamps):
        if pd.isna(ts):
            continue
        diff = abs(trade_ts - ts)
        if diff < best:
            best = diff
            closest = i
    return closest


def mark_trades(series: Sequence[Bar], trades: Sequence[TradeMarker]) -> list[EnrichedBar]:
    """
    Pin trades onto the series for charting.

    A trade goes to the bar with the same date; failing that, to the nearest
    bar less than seven days away (the earlier bar wins a tie). Trades with
    no such bar are dropped. When several trades land on one bar the last
    one is kept.
    """
    marked = _enrich(series)
    if not trades:
        return marked

    dates = [bar.date for bar in marked]
    timestamps = pd.to_datetime(pd.Series(dates, dtype=object), errors="coerce")

    for trade in trades:
        index = _find_trade_bar(normalize_trade_date(trade.date), dates, timestamps)
        if index is None:
            continue
        marked[index] = marked[index].model_copy(
            update={"trade_price": trade.price, "trade": trade}
        )
    return marked
