"""Statistical primitives: smoothing, regression, dispersion and outliers.

Everything in this package is a pure function of its arguments.
"""

from __future__ import annotations

from adaptive_tdee.stats.descriptive import (
    AnomalyResult,
    CorrelationResult,
    coefficient_of_variation,
    mean,
    pearson_correlation,
    standard_deviation,
    z_score_anomalies,
)
from adaptive_tdee.stats.regression import (
    RegressionResult,
    WeightedRegressionResult,
    ols_regression,
    rolling_ols,
    weighted_regression,
)
from adaptive_tdee.stats.smoothing import ewma, ewma_dated

__all__ = [
    "AnomalyResult",
    "CorrelationResult",
    "RegressionResult",
    "WeightedRegressionResult",
    "coefficient_of_variation",
    "ewma",
    "ewma_dated",
    "mean",
    "ols_regression",
    "pearson_correlation",
    "rolling_ols",
    "standard_deviation",
    "weighted_regression",
    "z_score_anomalies",
]
