"""
Technical Indicator Calculations

Pure NumPy implementations of the chart indicators.
NO LLM INVOLVEMENT - All math is deterministic.

Missing values are carried as NaN. A NaN inside a window or a recurrence
yields NaN; it is never read as zero.
"""

import numpy as np


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"Period must be a positive integer, got {period}")


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """
    Simple Moving Average.

    ``result[i]`` is the mean of ``data[i - period + 1 : i + 1]``. Indices
    before the first full window, and windows containing NaN, are NaN.
    """
    _check_period(period)
    values = np.asarray(data, dtype=float)
    result = np.full(len(values), np.nan)

    for i in range(period - 1, len(values)):
        result[i] = np.mean(values[i - period + 1 : i + 1])
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential Moving Average, seeded with an SMA.

    Leading NaNs are skipped: the seed is the mean of the ``period`` values
    starting at the first valid one and sits at the last index of that
    window. From there ``ema[i] = (data[i] - ema[i-1]) * k + ema[i-1]`` with
    ``k = 2 / (period + 1)``. A NaN after the seed poisons every later value.
    """
    _check_period(period)
    values = np.asarray(data, dtype=float)
    result = np.full(len(values), np.nan)

    valid = np.flatnonzero(~np.isnan(values))
    if len(valid) == 0:
        return result

    first_valid = int(valid[0])
    if len(values) - first_valid < period:
        return result

    multiplier = 2 / (period + 1)
    seed_idx = first_valid + period - 1

    # Start with SMA
    result[seed_idx] = np.mean(values[first_valid : seed_idx + 1])

    for i in range(seed_idx + 1, len(values)):
        result[i] = (values[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _smooth(previous: float, value: float) -> float:
    """One step of the 1/3 recursive smoothing used by K and D."""
    return (2 / 3) * previous + (1 / 3) * value


def stochastic_kd(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    period: int = 9,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Stochastic Oscillator (KD) with recursive smoothing.

    K and D start from the neutral 50 and are updated once per full window:
    K = 2/3 * K + 1/3 * RSV, D = 2/3 * D + 1/3 * K. A flat window
    (highest high == lowest low) gives RSV = 50. Bars before the first full
    window, or with a missing close, get NaN and leave K/D untouched.

    Returns: (k, d)
    """
    _check_period(period)
    highs = np.asarray(highs, dtype=float)
    lows = np.asarray(lows, dtype=float)
    closes = np.asarray(closes, dtype=float)

    k_line = np.full(len(closes), np.nan)
    d_line = np.full(len(closes), np.nan)
    k, d = 50.0, 50.0

    for i in range(period - 1, len(closes)):
        if np.isnan(closes[i]):
            continue

        highest_high = np.max(highs[i - period + 1 : i + 1])
        lowest_low = np.min(lows[i - period + 1 : i + 1])

        if highest_high == lowest_low:
            rsv = 50.0
        else:
            rsv = (closes[i] - lowest_low) / (highest_high - lowest_low) * 100

        k = _smooth(k, rsv)
        d = _smooth(d, k)
        k_line[i] = k
        d_line[i] = d

    return k_line, d_line
