"""Dispersion, correlation and outlier statistics.

Standard deviations here are population statistics (divide by n). Every
function returns a neutral value instead of NaN when the input is empty or
degenerate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

import numpy as np

MIN_CORRELATION_POINTS = 5
MIN_ANOMALY_POINTS = 5

# Correlation strength cutoffs on |r|
STRONG_CORRELATION = 0.7
MODERATE_CORRELATION = 0.4
WEAK_CORRELATION = 0.2


@dataclass
class CorrelationResult:
    """Pearson correlation between two series."""

    coefficient: float
    strength: str  # 'strong', 'moderate', 'weak', 'none'
    direction: str  # 'positive', 'negative', 'none'
    description: str
    sample_size: int


@dataclass
class Anomaly:
    """A single outlying observation."""

    index: int
    value: float
    z_score: float
    type: str  # 'high' or 'low'
    date: Optional[date] = None


@dataclass
class AnomalyResult:
    """Outcome of a z-score scan."""

    anomalies: list[Anomaly] = field(default_factory=list)
    mean: float = 0.0
    std_dev: float = 0.0

    @property
    def has_anomalies(self) -> bool:
        return len(self.anomalies) > 0


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation, 0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """σ / |mean|. Returns 0 when the mean is 0 or there is no data."""
    m = mean(values)
    if m == 0:
        return 0.0
    return standard_deviation(values) / abs(m)


def _strength(abs_r: float) -> str:
    if abs_r >= STRONG_CORRELATION:
        return "strong"
    if abs_r >= MODERATE_CORRELATION:
        return "moderate"
    if abs_r >= WEAK_CORRELATION:
        return "weak"
    return "none"


def pearson_correlation(
    x: Sequence[float],
    y: Sequence[float],
    x_label: str = "X",
    y_label: str = "Y",
) -> Optional[CorrelationResult]:
    """
    Pearson correlation coefficient with a plain-language description.

    Both series are truncated to the shorter length.

    Args:
        x: First series
        y: Second series
        x_label: Name of the first series, used in the description
        y_label: Name of the second series, used in the description

    Returns:
        CorrelationResult, or None with fewer than 5 paired points or when
        either series has no variance.

    Example:
        >>> pearson_correlation([1, 2, 3, 4, 5], [2, 4, 6, 8, 10]).strength
        'strong'
    """
    if x is None or y is None:
        return None
    n = min(len(x), len(y))
    if n < MIN_CORRELATION_POINTS:
        return None

    xs = np.asarray(x[:n], dtype=float)
    ys = np.asarray(y[:n], dtype=float)
    dx = xs - xs.mean()
    dy = ys - ys.mean()

    # Scale deviations to [-1, 1] so squaring cannot overflow
    scale_x = float(np.abs(dx).max())
    scale_y = float(np.abs(dy).max())
    if scale_x == 0 or scale_y == 0:
        return None
    ux = dx / scale_x
    uy = dy / scale_y
    unit_x = math.sqrt(float((ux**2).sum()))
    unit_y = math.sqrt(float((uy**2).sum()))

    denominator = (scale_x * unit_x) * (scale_y * unit_y)
    if denominator < 1e-10:
        return None

    r = max(-1.0, min(1.0, float((ux * uy).sum()) / (unit_x * unit_y)))
    abs_r = abs(r)
    strength = _strength(abs_r)
    if abs_r < WEAK_CORRELATION:
        direction = "none"
    else:
        direction = "positive" if r > 0 else "negative"

    if strength == "none":
        description = f"No meaningful correlation between {x_label} and {y_label}"
    else:
        verb = "increases" if direction == "positive" else "decreases"
        description = (
            f"{strength.capitalize()} correlation: when {x_label} goes up, {y_label} {verb}"
        )

    return CorrelationResult(
        coefficient=round(r, 3),
        strength=strength,
        direction=direction,
        description=description,
        sample_size=n,
    )


def z_score_anomalies(
    values: Sequence[float],
    threshold: float = 2.0,
    dates: Optional[Sequence[date]] = None,
) -> AnomalyResult:
    """
    Flag values at least ``threshold`` standard deviations from the mean.

    Args:
        values: Observations
        threshold: Minimum |z| to flag
        dates: Optional dates aligned with ``values``, copied onto anomalies

    Returns:
        AnomalyResult. Empty with fewer than 5 values, or when the series
        is (near) constant.
    """
    if values is None or len(values) < MIN_ANOMALY_POINTS:
        return AnomalyResult()

    data = np.asarray(values, dtype=float)
    m = float(data.mean())
    sd = float(data.std())
    if sd < 0.001:
        return AnomalyResult(mean=m, std_dev=sd)

    anomalies = []
    for i, z in enumerate((data - m) / sd):
        if abs(z) >= threshold:
            anomalies.append(
                Anomaly(
                    index=i,
                    value=float(data[i]),
                    z_score=round(float(z), 2),
                    type="high" if z > 0 else "low",
                    date=dates[i] if dates is not None and i < len(dates) else None,
                )
            )

    return AnomalyResult(anomalies=anomalies, mean=m, std_dev=sd)
