"""Adaptive TDEE estimation.

This module learns a personal TDEE from daily weigh-ins and intake logs by
blending a Mifflin-St Jeor prior with the energy balance implied by the
EWMA-smoothed weight trend.

Key components:
- Day alignment of weight and intake logs
- Observed TDEE from a 14-day regression of smoothed weight
- Bayesian-style blend weighted by data density and fit quality
- Confidence score, metabolic adaptation and plateau flags
- Rolling TDEE trend for charts
"""

from __future__ import annotations

from adaptive_tdee.tracking.estimator import (
    bayesian_blend,
    build_aligned_series,
    compute_tdee_trend,
    estimate_tdee,
)
from adaptive_tdee.tracking.models import (
    AdaptiveTDEEResult,
    Biometrics,
    EstimateSource,
    IntakeSample,
    TDEEEstimate,
    TDEETrendPoint,
    TrendDirection,
    WeightSample,
)

__all__ = [
    "AdaptiveTDEEResult",
    "Biometrics",
    "EstimateSource",
    "IntakeSample",
    "TDEEEstimate",
    "TDEETrendPoint",
    "TrendDirection",
    "WeightSample",
    "bayesian_blend",
    "build_aligned_series",
    "compute_tdee_trend",
    "estimate_tdee",
]
