"""Goal-independent plateau detection.

Complements the estimator's goal-aware plateau flag. This detector only
looks at the shape of the series: a low coefficient of variation together
with a near-zero recency-weighted slope. The two signals are reported
separately and never merged.
"""

from __future__ import annotations

from typing import Sequence

from adaptive_tdee.analytics.models import StatisticalPlateau
from adaptive_tdee.stats.descriptive import coefficient_of_variation
from adaptive_tdee.stats.regression import weighted_regression

# |slope| per step below which the window counts as flat
MAX_PLATEAU_SLOPE = 0.02

# Extension steps may loosen the CV threshold by this factor
EXTENSION_TOLERANCE = 1.5

EXTENSION_STEP_DAYS = 7


def detect_plateau_statistical(
    values: Sequence[float],
    window_days: int = 14,
    change_threshold: float = 0.005,
) -> StatisticalPlateau:
    """
    Detect stagnation in a weight (or strength) series.

    Args:
        values: Series in chronological order, one value per day
        window_days: Trailing window tested for flatness
        change_threshold: Maximum coefficient of variation (0.005 = 0.5%)

    Returns:
        StatisticalPlateau. When a plateau is found its duration extends back
        in 7-day steps for as long as the longer tail's CV stays below
        1.5 × ``change_threshold``.
    """
    if values is None or len(values) < window_days or window_days <= 0:
        return StatisticalPlateau()

    recent = list(values[-window_days:])
    if sum(recent) == 0:
        return StatisticalPlateau()

    cv = coefficient_of_variation(recent)
    trend = weighted_regression(recent, 7)
    abs_slope = abs(trend.slope) if trend else 0.0

    is_plateau = cv < change_threshold and abs_slope < MAX_PLATEAU_SLOPE

    duration = 0
    if is_plateau:
        duration = window_days
        w = window_days + EXTENSION_STEP_DAYS
        while w <= len(values):
            if coefficient_of_variation(values[-w:]) < change_threshold * EXTENSION_TOLERANCE:
                duration = w
            else:
                break
            w += EXTENSION_STEP_DAYS

    suggestion = ""
    if is_plateau:
        if duration >= 28:
            suggestion = (
                "Extended plateau detected. Consider a strategic diet break or reverse diet "
                "for 1-2 weeks to reset metabolic adaptation."
            )
        elif duration >= 14:
            suggestion = (
                "Your progress has stalled. Try adjusting calories by 100-200, changing workout "
                "intensity, or adding more daily movement."
            )

    return StatisticalPlateau(
        is_plateau=is_plateau,
        plateau_duration=duration,
        change_rate=round(abs_slope, 3),
        suggestion=suggestion,
        confidence=min(95, round((1 - cv / change_threshold) * 100)) if is_plateau else 0,
    )
