"""Linear regression over implicit day indices.

All fits use x = 0..n-1 (one step per sample), which is what the callers
want for daily series: the slope comes out in units per day.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

# |slope| below this is reported as "stable" by weighted_regression
WEIGHTED_STABLE_SLOPE = 0.005

# |slope| below this is reported as "stable" by detect_trend
TREND_STABLE_SLOPE = 0.01

# Total sum of squares below this is treated as a constant series (R² = 0)
_SS_EPSILON = 1e-12


@dataclass
class RegressionResult:
    """Ordinary least squares fit y = slope × x + intercept."""

    slope: float
    intercept: float
    r2: float


@dataclass
class WeightedRegressionResult:
    """Recency-weighted least squares fit with a categorical direction."""

    slope: float
    intercept: float
    r2: float
    direction: str  # 'increasing', 'decreasing', 'stable'
    confidence: int  # 0-100, derived from r2
    predicted_next: float


@dataclass
class TrendResult:
    """Trend classification of a series."""

    direction: str  # 'increasing', 'decreasing', 'stable', 'insufficient_data'
    strength: float
    slope: float
    confidence: float
    intercept: float = 0.0


@dataclass
class Prediction:
    """A single extrapolated point."""

    day_offset: int
    predicted: float
    confidence: float


def _r_squared(ss_res: float, ss_tot: float) -> float:
    if ss_tot < _SS_EPSILON:
        return 0.0
    return min(1.0, max(0.0, 1.0 - ss_res / ss_tot))


def ols_regression(y: Sequence[float]) -> RegressionResult:
    """
    Fit y = slope × i + intercept by ordinary least squares.

    Args:
        y: Observations, one per step

    Returns:
        RegressionResult. With fewer than 2 points the slope and R² are 0
        and the intercept is the single value (or 0 when empty).

    Example:
        >>> fit = ols_regression([5, 7, 9, 11])
        >>> fit.slope, fit.intercept, fit.r2
        (2.0, 5.0, 1.0)
    """
    n = len(y)
    if n < 2:
        return RegressionResult(slope=0.0, intercept=float(y[0]) if n else 0.0, r2=0.0)

    values = np.asarray(y, dtype=float)
    x = np.arange(n, dtype=float)
    x_mean = x.mean()
    y_mean = values.mean()

    sxx = float(((x - x_mean) ** 2).sum())
    sxy = float(((x - x_mean) * (values - y_mean)).sum())
    slope = sxy / sxx
    intercept = float(y_mean - slope * x_mean)

    ss_tot = float(((values - y_mean) ** 2).sum())
    ss_res = float(((values - (intercept + slope * x)) ** 2).sum())

    return RegressionResult(slope=slope, intercept=intercept, r2=_r_squared(ss_res, ss_tot))


def rolling_ols(y: Sequence[float], window: int) -> tuple[np.ndarray, np.ndarray]:
    """
    OLS slope and R² for every full window of a series in one O(n) pass.

    Window sums are taken from prefix sums instead of refitting each window,
    so the cost does not grow with the window size.

    Args:
        y: Observations
        window: Window length (>= 2)

    Returns:
        Tuple of (slopes, r2s). Element k describes y[k : k + window].
        Both are empty when the series is shorter than the window.
    """
    n = len(y)
    if window < 2 or n < window:
        return np.empty(0), np.empty(0)

    values = np.asarray(y, dtype=float)
    # Centering keeps the squared prefix sums small, avoiding cancellation
    values = values - values.mean()
    idx = np.arange(n, dtype=float)

    p_y = np.concatenate(([0.0], np.cumsum(values)))
    p_iy = np.concatenate(([0.0], np.cumsum(idx * values)))
    p_yy = np.concatenate(([0.0], np.cumsum(values * values)))

    starts = np.arange(n - window + 1)
    ends = starts + window
    s_y = p_y[ends] - p_y[starts]
    s_yy = p_yy[ends] - p_yy[starts]
    # Shift absolute indices so each window's x runs 0..window-1
    s_xy = (p_iy[ends] - p_iy[starts]) - starts * s_y

    s_x = window * (window - 1) / 2
    s_xx = (window - 1) * window * (2 * window - 1) / 6
    sxx = s_xx - s_x * s_x / window
    sxy = s_xy - s_x * s_y / window

    slopes = sxy / sxx
    ss_tot = s_yy - s_y * s_y / window
    ss_res = ss_tot - slopes * sxy

    r2s = np.zeros_like(slopes)
    ok = ss_tot >= _SS_EPSILON
    r2s[ok] = np.clip(1.0 - ss_res[ok] / ss_tot[ok], 0.0, 1.0)
    return slopes, r2s


def weighted_regression(
    series: Sequence[float],
    window_days: int = 7,
) -> Optional[WeightedRegressionResult]:
    """
    Least squares fit over the last ``window_days`` points with recency weights.

    Point i gets weight e^(α·i), α = ln 3 / (n - 1), so the newest point
    counts three times as much as the oldest one in the window.

    Args:
        series: Observations in chronological order
        window_days: Number of trailing points to fit (typically 7, 14, 30, 90)

    Returns:
        WeightedRegressionResult, or None with fewer than 3 points in the
        window or a degenerate system.
    """
    if series is None or len(series) < 3:
        return None
    chunk = np.asarray(series[-window_days:], dtype=float)
    n = len(chunk)
    if n < 3:
        return None

    alpha = math.log(3) / (n - 1)
    x = np.arange(n, dtype=float)
    w = np.exp(alpha * x)

    w_sum = w.sum()
    wx = (w * x).sum()
    wy = (w * chunk).sum()
    wxy = (w * x * chunk).sum()
    wx2 = (w * x * x).sum()

    denom = w_sum * wx2 - wx * wx
    if abs(denom) < 1e-10:
        return None

    slope = float((w_sum * wxy - wx * wy) / denom)
    intercept = float((wy - slope * wx) / w_sum)

    y_mean = wy / w_sum
    ss_res = float((w * (chunk - (slope * x + intercept)) ** 2).sum())
    ss_tot = float((w * (chunk - y_mean) ** 2).sum())
    r2 = _r_squared(ss_res, ss_tot)

    if abs(slope) < WEIGHTED_STABLE_SLOPE:
        direction = "stable"
    else:
        direction = "increasing" if slope > 0 else "decreasing"

    return WeightedRegressionResult(
        slope=slope,
        intercept=intercept,
        r2=r2,
        direction=direction,
        confidence=round(r2 * 100),
        predicted_next=slope * n + intercept,
    )


def detect_trend(values: Sequence[float], min_points: int = 7) -> TrendResult:
    """Classify a series as increasing, decreasing or stable from its OLS slope."""
    if values is None or len(values) < min_points:
        return TrendResult(direction="insufficient_data", strength=0.0, slope=0.0, confidence=0.0)

    fit = ols_regression(values)
    if abs(fit.slope) < TREND_STABLE_SLOPE:
        direction = "stable"
    else:
        direction = "increasing" if fit.slope > 0 else "decreasing"

    return TrendResult(
        direction=direction,
        strength=min(abs(fit.slope) * 10, 1.0),
        slope=fit.slope,
        confidence=fit.r2,
        intercept=fit.intercept,
    )


def predict_future(values: Sequence[float], days_ahead: int = 7) -> list[Prediction]:
    """
    Extrapolate the OLS trend forward.

    Confidence starts at the fit's R² and drops by 0.05 for each day ahead.
    Returns an empty list when there is too little data to call a trend.
    """
    trend = detect_trend(values)
    if trend.direction == "insufficient_data":
        return []

    n = len(values)
    return [
        Prediction(
            day_offset=i + 1,
            predicted=round(trend.slope * (n + i) + trend.intercept, 1),
            confidence=max(0.0, trend.confidence - i * 0.05),
        )
        for i in range(days_ahead)
    ]
