"""Adaptive TDEE from logged intake and weight change.

The estimator blends two views of the same quantity:

- Prior: Mifflin-St Jeor BMR × activity factor. Available from day one but
  can be off by several hundred kcal for an individual.
- Observed: energy balance over the recent past,
      TDEE = mean_intake - daily_weight_change_kg × 7700
  where the weight change is the OLS slope of the EWMA-smoothed weigh-ins
  over the last two weeks. Gaining weight means intake exceeded TDEE, so the
  observed TDEE comes out below intake; losing means it comes out above.

The observed estimate gets more weight as logged days accumulate (from 0 at
7 days to full at 28) and as the regression fit improves. Every stage is a
pure function and the entry point keeps no state between calls.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

import numpy as np

from adaptive_tdee.config.settings import EstimatorConfig
from adaptive_tdee.profiles.body_calc import (
    GoalType,
    activity_multiplier,
    calculate_bmr,
    recommended_intake,
)
from adaptive_tdee.stats.descriptive import coefficient_of_variation, mean
from adaptive_tdee.stats.regression import ols_regression, rolling_ols
from adaptive_tdee.stats.smoothing import ewma
from adaptive_tdee.tracking.models import (
    AdaptiveTDEEResult,
    AlignedSeries,
    Biometrics,
    BlendResult,
    EstimateSource,
    FormulaPrior,
    IntakeSample,
    ObservedTDEE,
    TDEEEstimate,
    TDEEInsight,
    TDEEInsightType,
    TDEETrendPoint,
    TrendDirection,
    WeightSample,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = EstimatorConfig()

# Blend weight cutoffs for labelling the estimate source
FORMULA_SOURCE_MAX_WEIGHT = 0.2
OBSERVED_SOURCE_MIN_WEIGHT = 0.8

# Weekly change beyond which the trend is called increasing/decreasing (kg)
TREND_THRESHOLD_KG_PER_WEEK = 0.1


def formula_tdee(biometrics: Biometrics) -> FormulaPrior:
    """Formula-based TDEE = Mifflin-St Jeor BMR × activity multiplier."""
    bmr = calculate_bmr(
        biometrics.weight_kg,
        biometrics.height_cm,
        biometrics.age,
        biometrics.gender,
    )
    multiplier = activity_multiplier(biometrics.activity_level)
    return FormulaPrior(bmr=bmr, tdee=round(bmr * multiplier), multiplier=multiplier)


def build_aligned_series(
    weights: Sequence[WeightSample],
    intakes: Sequence[IntakeSample],
) -> AlignedSeries:
    """
    Keep only the days that have both a weigh-in and an intake entry.

    If a date appears more than once in either list, the last entry wins.

    Returns:
        AlignedSeries sorted by date
    """
    weight_by_date = {w.date: w.weight_kg for w in weights}
    intake_by_date = {i.date: i.calories for i in intakes}

    aligned = AlignedSeries()
    for day in sorted(weight_by_date.keys() & intake_by_date.keys()):
        aligned.dates.append(day)
        aligned.weights.append(float(weight_by_date[day]))
        aligned.intakes.append(float(intake_by_date[day]))
    return aligned


def compute_observed_tdee(
    aligned: AlignedSeries,
    config: EstimatorConfig = DEFAULT_CONFIG,
) -> Optional[ObservedTDEE]:
    """
    Energy-balance TDEE over the most recent regression window.

    Args:
        aligned: Day-aligned weight and intake series
        config: Estimator constants

    Returns:
        ObservedTDEE, or None with fewer than ``config.min_data_points`` days
    """
    if len(aligned) < config.min_data_points:
        return None

    smoothed = ewma(aligned.weights, config.weight_ewma_alpha)

    window = min(config.regression_window, len(smoothed))
    fit = ols_regression(smoothed[-window:])
    avg_intake = mean(aligned.intakes[-window:])

    # Positive slope (gain) lowers TDEE below intake, negative raises it
    observed = avg_intake - fit.slope * config.kcal_per_kg

    return ObservedTDEE(
        observed_tdee=round(observed),
        weekly_weight_change_kg=fit.slope * 7,
        smoothed_weights=smoothed,
        dates=list(aligned.dates),
        avg_intake=round(avg_intake),
        data_points=len(aligned),
        r2=fit.r2,
    )


def estimate_source_for_weight(weight: float) -> EstimateSource:
    """Label an estimate by how much of it comes from observed data."""
    if weight < FORMULA_SOURCE_MAX_WEIGHT:
        return EstimateSource.FORMULA
    if weight > OBSERVED_SOURCE_MIN_WEIGHT:
        return EstimateSource.OBSERVED
    return EstimateSource.HYBRID


def bayesian_blend(
    formula: float,
    observed: float,
    data_points: int,
    r2: float,
    config: EstimatorConfig = DEFAULT_CONFIG,
) -> BlendResult:
    """
    Blend formula and observed TDEE.

    The observed weight ramps linearly with data density, from 0 at
    ``min_data_points`` to 1 at ``full_confidence_points``, and is scaled by
    min(1, max(0.1, 2·R²)) so a noisy regression earns less trust.

        blended = (1 - w) × formula + w × observed

    Returns:
        BlendResult with the rounded blend and w in [0, 1]
    """
    span = config.full_confidence_points - config.min_data_points
    density = min(1.0, max(0.0, (data_points - config.min_data_points) / span))
    r2_factor = min(1.0, max(0.1, r2 * 2))
    weight = density * r2_factor

    return BlendResult(
        blended_tdee=round((1 - weight) * formula + weight * observed),
        weight=weight,
        source=estimate_source_for_weight(weight),
    )


def _cv_or_worst(values: Sequence[float]) -> float:
    """Coefficient of variation, or 1 (maximally noisy) without a positive mean."""
    if len(values) == 0 or mean(values) <= 0:
        return 1.0
    return coefficient_of_variation(values)


def compute_confidence(
    data_points: int,
    intakes: Sequence[float],
    weights: Sequence[float],
    r2: float,
    config: EstimatorConfig = DEFAULT_CONFIG,
) -> float:
    """
    0-1 confidence score for an estimate.

    Components:
        density           up to 0.4, full at ``full_confidence_points`` days
        intake stability  up to 0.2, zero once intake CV reaches 0.4
        weight stability  up to 0.2, zero once weight CV reaches 0.05
        regression fit    up to 0.2, proportional to R²
    """
    density_score = min(0.4, 0.4 * data_points / config.full_confidence_points)
    intake_score = max(0.0, 0.2 * (1 - min(1.0, _cv_or_worst(intakes) / 0.4)))
    weight_score = max(0.0, 0.2 * (1 - min(1.0, _cv_or_worst(weights) / 0.05)))
    r2_score = 0.2 * min(1.0, r2)

    return min(1.0, density_score + intake_score + weight_score + r2_score)


def detect_metabolic_adaptation(
    formula: float,
    blended: float,
    confidence: float,
    config: EstimatorConfig = DEFAULT_CONFIG,
) -> bool:
    """
    True when the body burns meaningfully less than the formula predicts.

    Requires a reasonably confident estimate, and the blended TDEE more than
    ``adaptation_threshold`` (10%) below the formula value.
    """
    if confidence < config.adaptation_min_confidence or formula <= 0:
        return False
    return (formula - blended) / formula > config.adaptation_threshold


def detect_plateau(
    smoothed_weights: Sequence[float],
    weekly_weight_change_kg: float,
    goal_type: GoalType,
    avg_intake: float,
    estimated_tdee: float,
    config: EstimatorConfig = DEFAULT_CONFIG,
) -> bool:
    """
    Detect a fat-loss plateau: weight flat despite an apparent deficit.

    All of the following must hold:
    1. The goal is a cut
    2. Average intake is below the estimated TDEE
    3. Weekly weight change is within ±0.1 kg
    4. At least 14 days of smoothed weight exist and their slope is flat
    """
    if GoalType(goal_type) != GoalType.CUT:
        return False
    if avg_intake >= estimated_tdee:
        return False
    if abs(weekly_weight_change_kg) > config.plateau_threshold_kg_per_week:
        return False
    if len(smoothed_weights) < config.plateau_min_days:
        return False

    fit = ols_regression(smoothed_weights[-config.plateau_min_days :])
    return abs(fit.slope) * 7 <= config.plateau_threshold_kg_per_week


def compute_tdee_trend(
    weight_history: Sequence[WeightSample],
    intake_history: Sequence[IntakeSample],
    formula: float,
    config: EstimatorConfig = DEFAULT_CONFIG,
) -> list[TDEETrendPoint]:
    """
    Rolling blended TDEE for charting.

    Slides a ``trend_window``-day window over the aligned series. Each
    window's slope and mean intake come from prefix sums, so the pass is
    linear in the history length.

    Returns:
        One point per window end, empty with fewer than one full window
    """
    aligned = build_aligned_series(weight_history, intake_history)
    window = config.trend_window
    n = len(aligned)
    if n < window:
        return []

    smoothed = ewma(aligned.weights, config.weight_ewma_alpha)
    slopes, r2s = rolling_ols(smoothed, window)

    intake_sums = np.concatenate(([0.0], np.cumsum(aligned.intakes)))
    avg_intakes = (intake_sums[window:] - intake_sums[:-window]) / window

    points = []
    for k in range(n - window + 1):
        end = k + window
        observed = round(float(avg_intakes[k] - slopes[k] * config.kcal_per_kg))
        blend = bayesian_blend(formula, observed, end, float(r2s[k]), config)
        points.append(
            TDEETrendPoint(
                date=aligned.dates[end - 1],
                tdee=int(_clamp(blend.blended_tdee, config.min_tdee, config.max_tdee)),
                smoothed_weight=smoothed[end - 1],
                confidence=blend.weight,
            )
        )
    return points


def days_logged_this_week(intake_history: Sequence[IntakeSample], today: date) -> int:
    """Distinct intake days since the most recent Sunday (inclusive) up to today."""
    week_start = today - timedelta(days=(today.weekday() + 1) % 7)
    return len({i.date for i in intake_history if week_start <= i.date <= today})


def estimate_tdee(
    weight_history: Sequence[WeightSample],
    intake_history: Sequence[IntakeSample],
    biometrics: Biometrics,
    *,
    today: Optional[date] = None,
    config: Optional[EstimatorConfig] = None,
) -> AdaptiveTDEEResult:
    """
    Compute the full adaptive TDEE estimate.

    Args:
        weight_history: Daily weigh-ins (kg)
        intake_history: Daily calorie totals
        biometrics: Body metrics and goal for the formula prior
        today: Reference day for weekly logging stats (default: date.today())
        config: Estimator constants (default: EstimatorConfig())

    Returns:
        AdaptiveTDEEResult with the estimate, chart data and notes
    """
    config = config or DEFAULT_CONFIG
    today = today or date.today()

    prior = formula_tdee(biometrics)
    logged_this_week = days_logged_this_week(intake_history, today)
    aligned = build_aligned_series(weight_history, intake_history)
    observed = compute_observed_tdee(aligned, config)

    if observed is None:
        logger.debug(
            "Only %d aligned days (need %d), using formula TDEE",
            len(aligned),
            config.min_data_points,
        )
        return _formula_only_result(prior, biometrics, len(aligned), logged_this_week, config)

    insights: list[TDEEInsight] = []

    blend = bayesian_blend(prior.tdee, observed.observed_tdee, observed.data_points, observed.r2, config)
    confidence = compute_confidence(
        observed.data_points, aligned.intakes, aligned.weights, observed.r2, config
    )

    # Reverse out the activity multiplier at the current (smoothed) weight
    current_weight = observed.smoothed_weights[-1]
    current_bmr = calculate_bmr(current_weight, biometrics.height_cm, biometrics.age, biometrics.gender)
    derived_multiplier = blend.blended_tdee / current_bmr if current_bmr > 0 else prior.multiplier

    adaptation = detect_metabolic_adaptation(prior.tdee, blend.blended_tdee, confidence, config)
    if adaptation:
        insights.append(
            TDEEInsight(
                type=TDEEInsightType.WARNING,
                title="Metabolic adaptation detected",
                message=(
                    "Your metabolism appears to be running below expected. Consider a diet "
                    "break or reverse diet to restore metabolic rate."
                ),
            )
        )

    plateau = detect_plateau(
        observed.smoothed_weights,
        observed.weekly_weight_change_kg,
        biometrics.goal_type,
        observed.avg_intake,
        blend.blended_tdee,
        config,
    )
    if plateau:
        insights.append(
            TDEEInsight(
                type=TDEEInsightType.ALERT,
                title="Weight loss plateau detected",
                message=(
                    "Your weight has stalled despite being in a deficit. Consider adjusting "
                    "your calorie target, increasing activity, or taking a planned diet break."
                ),
            )
        )

    weekly_change = observed.weekly_weight_change_kg
    if weekly_change > TREND_THRESHOLD_KG_PER_WEEK:
        trend = TrendDirection.INCREASING
    elif weekly_change < -TREND_THRESHOLD_KG_PER_WEEK:
        trend = TrendDirection.DECREASING
    else:
        trend = TrendDirection.STABLE

    insights.extend(_consistency_insights(logged_this_week))

    estimate = TDEEEstimate(
        tdee=int(_clamp(blend.blended_tdee, config.min_tdee, config.max_tdee)),
        bmr=round(current_bmr),
        activity_multiplier=round(derived_multiplier, 2),
        confidence=confidence,
        data_points=observed.data_points,
        trend=trend,
        metabolic_adaptation=adaptation,
        plateau_detected=plateau,
        weekly_weight_change_kg=round(weekly_change, 2),
        recommended_intake=recommended_intake(
            blend.blended_tdee, biometrics.weekly_goal, config.min_recommended_intake
        ),
        estimate_source=blend.source,
    )

    return AdaptiveTDEEResult(
        estimate=estimate,
        trend_data=compute_tdee_trend(weight_history, intake_history, prior.tdee, config),
        days_logged_this_week=logged_this_week,
        total_days_with_data=observed.data_points,
        insights=insights,
    )


def _formula_only_result(
    prior: FormulaPrior,
    biometrics: Biometrics,
    data_points: int,
    logged_this_week: int,
    config: EstimatorConfig,
) -> AdaptiveTDEEResult:
    insights = []
    if data_points > 0:
        insights.append(
            TDEEInsight(
                type=TDEEInsightType.INFO,
                title="Building your metabolic profile",
                message=(
                    f"{config.min_data_points - data_points} more days of logging needed "
                    "for adaptive estimates. Keep tracking!"
                ),
            )
        )
    else:
        insights.append(
            TDEEInsight(
                type=TDEEInsightType.INFO,
                title="Start logging to unlock adaptive TDEE",
                message="Log your food and weight daily to get a personalized metabolic estimate.",
            )
        )

    estimate = TDEEEstimate(
        tdee=int(_clamp(prior.tdee, config.min_tdee, config.max_tdee)),
        bmr=round(prior.bmr),
        activity_multiplier=prior.multiplier,
        confidence=config.formula_only_confidence,
        data_points=data_points,
        trend=TrendDirection.STABLE,
        metabolic_adaptation=False,
        plateau_detected=False,
        weekly_weight_change_kg=0.0,
        recommended_intake=recommended_intake(
            prior.tdee, biometrics.weekly_goal, config.min_recommended_intake
        ),
        estimate_source=EstimateSource.FORMULA,
    )
    return AdaptiveTDEEResult(
        estimate=estimate,
        trend_data=[],
        days_logged_this_week=logged_this_week,
        total_days_with_data=data_points,
        insights=insights,
    )


def _consistency_insights(logged_this_week: int) -> list[TDEEInsight]:
    if logged_this_week >= 6:
        return [
            TDEEInsight(
                type=TDEEInsightType.SUCCESS,
                title="Excellent tracking consistency",
                message="Your data quality is high, giving us the most accurate TDEE estimate possible.",
            )
        ]
    if logged_this_week >= 4:
        return [
            TDEEInsight(
                type=TDEEInsightType.INFO,
                title="Good tracking this week",
                message=(
                    f"You've logged {logged_this_week} days this week. "
                    "Log daily for the most accurate results."
                ),
            )
        ]
    if logged_this_week > 0:
        return [
            TDEEInsight(
                type=TDEEInsightType.WARNING,
                title="Inconsistent logging",
                message=(
                    f"Only {logged_this_week} days logged this week. "
                    "Gaps reduce accuracy of your TDEE estimate."
                ),
            )
        ]
    return []


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
