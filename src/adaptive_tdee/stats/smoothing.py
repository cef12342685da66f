"""Exponentially weighted smoothing for noisy daily series.

The core filter is the classic EWMA recurrence:
    S_0 = V_0
    S_n = α × V_n + (1 - α) × S_{n-1}

Smaller α means heavier smoothing (longer memory). For body weight a value
around 0.15 removes most day-to-day water and gut-content noise while still
following a real trend within a couple of weeks.

For non-daily measurements a time-scaled smoothing factor is available:
    α_adjusted = 1 - (1 - α)^t
where t is days since the previous measurement.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

import numpy as np

# Smoothing factor used for daily weigh-ins by the TDEE estimator.
# Lower than the Hacker's Diet 0.1 would lag too much on 2-4 week windows.
DEFAULT_WEIGHT_ALPHA = 0.15


def _check_alpha(alpha: float) -> None:
    if not 0 < alpha <= 1:
        raise ValueError(f"alpha must be in (0, 1], got {alpha}")


def ewma(values: Sequence[float], alpha: float = DEFAULT_WEIGHT_ALPHA) -> list[float]:
    """
    Exponentially weighted moving average of a series.

    Args:
        values: Observations in chronological order
        alpha: Smoothing factor in (0, 1]. 1 returns the input unchanged.

    Returns:
        List of smoothed values, same length as ``values``. The first
        element is the first raw value.

    Example:
        >>> ewma([80.0, 81.0, 80.0], 0.5)
        [80.0, 80.5, 80.25]
    """
    _check_alpha(alpha)
    if len(values) == 0:
        return []

    result = [float(values[0])]
    for value in values[1:]:
        result.append(alpha * value + (1 - alpha) * result[-1])
    return result


def time_scaled_alpha(base_alpha: float, days_elapsed: int) -> float:
    """
    Adjust smoothing factor for non-daily measurements.

    Args:
        base_alpha: Daily smoothing factor
        days_elapsed: Days since last measurement (values < 1 count as 1)

    Returns:
        Adjusted smoothing factor

    Example:
        >>> round(time_scaled_alpha(0.1, 3), 3)
        0.271
    """
    if days_elapsed <= 0:
        days_elapsed = 1
    return 1 - (1 - base_alpha) ** days_elapsed


def ewma_dated(
    samples: Sequence[tuple[date, float]],
    alpha: float = DEFAULT_WEIGHT_ALPHA,
) -> list[float]:
    """
    Gap-aware EWMA for (date, value) pairs.

    Gaps between measurements give the new value proportionally more weight,
    so a weigh-in after a week away moves the trend further than one taken
    the next morning.

    Args:
        samples: (date, value) tuples in chronological order
        alpha: Daily smoothing factor

    Returns:
        List of smoothed values, same length as ``samples``
    """
    _check_alpha(alpha)
    if not samples:
        return []

    trends = [float(samples[0][1])]
    for (prev_date, _), (curr_date, value) in zip(samples, samples[1:]):
        adjusted = time_scaled_alpha(alpha, (curr_date - prev_date).days)
        trends.append(trends[-1] + adjusted * (value - trends[-1]))
    return trends


def ewma_bands(
    values: Sequence[float],
    span: int = 7,
    band_multiplier: float = 1.5,
) -> tuple[list[float], list[float], list[float]]:
    """
    EWMA with a volatility band for charting.

    Uses α = 2 / (span + 1). The band half-width is ``band_multiplier``
    times the population standard deviation of the trailing ``span`` raw
    values.

    Returns:
        Tuple of (smoothed, upper_band, lower_band), each rounded to 0.1
    """
    if len(values) == 0:
        return [], [], []

    smoothed = ewma(values, 2 / (span + 1))
    data = np.asarray(values, dtype=float)

    upper: list[float] = []
    lower: list[float] = []
    for i, center in enumerate(smoothed):
        window = data[max(0, i - span + 1) : i + 1]
        band = float(window.std()) * band_multiplier
        upper.append(round(center + band, 1))
        lower.append(round(center - band, 1))

    return [round(v, 1) for v in smoothed], upper, lower


def weighted_moving_average(values: Sequence[float], window: int = 7) -> list[float]:
    """Trailing moving average with linear weights (newest point weighs most)."""
    result: list[float] = []
    for i in range(len(values)):
        chunk = values[max(0, i - window + 1) : i + 1]
        weights = range(1, len(chunk) + 1)
        total = sum(w * v for w, v in zip(weights, chunk))
        result.append(round(total / sum(weights), 1))
    return result
