"""Turn analytics results into ranked, human-readable insights.

Each rule is a small function that takes an InsightInput and returns zero
or more Insight objects. Rules are independent: a rule that raises is
logged at debug level and skipped, so one bad input cannot suppress the
others.

Rules and their priorities:
    weekend_calories          9 (> 400 kcal) or 7
    plateau                   9
    weight_progress           8
    weight_behind             8
    tdee_adaptation           8
    protein_drop_<Day>        7
    streak_pr                 7
    sleep_weight_correlation  7
    streak_break_pattern      6
    streak_achievement        6
    sleep_workout             6
    macro_inconsistent        6
    day_pattern               5
    macro_consistent          5
    adherence_high            5
    calorie_spike             4
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from adaptive_tdee.analytics.adherence import analyze_macro_consistency, calculate_adherence
from adaptive_tdee.analytics.patterns import analyze_day_patterns
from adaptive_tdee.analytics.plateau import detect_plateau_statistical
from adaptive_tdee.analytics.progress import calculate_progress_rate
from adaptive_tdee.analytics.streaks import analyze_streaks
from adaptive_tdee.insights.models import Insight, InsightInput, InsightType
from adaptive_tdee.stats.descriptive import pearson_correlation, z_score_anomalies
from adaptive_tdee.stats.regression import weighted_regression
from adaptive_tdee.tracking.models import WeightSample

logger = logging.getLogger(__name__)

DEFAULT_MAX_INSIGHTS = 10
MIN_DAILY_LOGS = 3

# Weekend minus weekday calories that triggers a warning, and the
# difference at which it becomes top priority
WEEKEND_DIFF_THRESHOLD = 150
WEEKEND_DIFF_SEVERE = 400

# A weekday is flagged when its protein is below this share of the mean
PROTEIN_DROP_RATIO = 0.75

# Average intake below which a stalled cut suggests adaptation
ADAPTATION_INTAKE_CEILING = 2200
ADAPTATION_MAX_ESTIMATE = 300

GOOD_SLEEP_HOURS = 7

FALLBACK_FOCUS = "Keep up your current routine -- consistency is key."

Rule = Callable[[InsightInput], list[Insight]]


def _sorted_weights(data: InsightInput) -> list[WeightSample]:
    return sorted(data.weight_history or [], key=lambda w: w.date)


# =============================================================================
# Rules
# =============================================================================


def weekend_and_day_pattern_rule(data: InsightInput) -> list[Insight]:
    """Weekend overeating and the toughest day of the week."""
    analysis = analyze_day_patterns(data.daily_logs)
    insights = []

    comparison = analysis.weekend_vs_weekday
    diff = comparison.difference
    if diff > WEEKEND_DIFF_THRESHOLD and comparison.weekday_avg > 0:
        weekly_impact = diff * 2
        insights.append(
            Insight(
                id="weekend_calories",
                type=InsightType.WARNING,
                title=f"You eat {diff} more calories on weekends",
                description=(
                    f"Planning ahead could save {weekly_impact:,} cal/week. Your weekday "
                    f"average is {comparison.weekday_avg} vs {comparison.weekend_avg} on weekends."
                ),
                metric=f"+{diff} cal",
                trend="up",
                actionable="Prep weekend meals in advance or plan lighter dinners on Saturday.",
                priority=9 if diff > WEEKEND_DIFF_SEVERE else 7,
            )
        )

    if analysis.worst_day and analysis.best_day and analysis.worst_day != analysis.best_day:
        worst, best = analysis.worst_day, analysis.best_day
        insights.append(
            Insight(
                id="day_pattern",
                type=InsightType.INFO,
                title=f"{worst}s are your toughest day",
                description=(
                    f"You average {analysis.worst_day_avg_calories} cal on {worst}s vs "
                    f"{analysis.best_day_avg_calories} cal on {best}s."
                ),
                metric=f"{analysis.worst_day_avg_calories} cal",
                actionable=f"Prepare meals for {worst}s the night before.",
                priority=5,
            )
        )

    return insights


def protein_drop_rule(data: InsightInput) -> list[Insight]:
    """First weekday whose protein falls well below the weekly mean."""
    averages = analyze_day_patterns(data.daily_logs).day_of_week_averages
    sampled = [(day, avg) for day, avg in averages.items() if avg.count >= 2]
    if len(sampled) < 5:
        return []

    overall = sum(avg.avg_protein for _, avg in sampled) / len(sampled)
    if overall <= 0:
        return []

    for day, avg in sampled:
        if avg.avg_protein < overall * PROTEIN_DROP_RATIO:
            drop = round((1 - avg.avg_protein / overall) * 100)
            return [
                Insight(
                    id=f"protein_drop_{day}",
                    type=InsightType.WARNING,
                    title=f"Protein drops {drop}% on {day}s",
                    description=(
                        f"Your protein intake falls to {avg.avg_protein}g on {day}s "
                        f"(avg: {round(overall)}g). This may slow muscle recovery."
                    ),
                    metric=f"{avg.avg_protein}g",
                    trend="down",
                    actionable=f"Add a protein shake or Greek yogurt on {day}s.",
                    priority=7,
                )
            ]
    return []


def weight_progress_rule(data: InsightInput) -> list[Insight]:
    """Progress against the planned weekly rate."""
    weights = _sorted_weights(data)
    if len(weights) < 7 or not (
        data.current_weight and data.goal_weight and data.start_weight and data.expected_weekly_rate
    ):
        return []

    rate = calculate_progress_rate(
        data.current_weight,
        data.goal_weight,
        data.start_weight,
        data.expected_weekly_rate,
        weights,
        today=data.today,
    )

    if rate.status in ("on_track", "ahead"):
        baseline = weights[-30] if len(weights) >= 30 else weights[0]
        change = round(weights[-1].weight_kg - baseline.weight_kg, 1)
        if abs(change) > 0.5 and rate.projected_date:
            when = f"{rate.projected_date:%B} {rate.projected_date.day}"
            return [
                Insight(
                    id="weight_progress",
                    type=InsightType.POSITIVE,
                    title=f"You've {'lost' if change < 0 else 'gained'} {abs(change)}kg in the last 30 days",
                    description=f"On track to hit your goal by {when}. Keep it up!",
                    metric=f"{abs(change)}kg",
                    trend="down" if change < 0 else "up",
                    priority=8,
                )
            ]
    elif rate.status == "behind":
        return [
            Insight(
                id="weight_behind",
                type=InsightType.WARNING,
                title="Progress is slower than planned",
                description=rate.message,
                metric=f"{rate.actual_rate_per_week} kg/wk",
                trend="stable",
                actionable="Review your calorie target or increase daily activity by 15 minutes.",
                priority=8,
            )
        ]
    return []


def plateau_rule(data: InsightInput) -> list[Insight]:
    """Statistical weight plateau of two weeks or more."""
    weights = _sorted_weights(data)
    if len(weights) < 14:
        return []

    plateau = detect_plateau_statistical([w.weight_kg for w in weights])
    if not (plateau.is_plateau and plateau.plateau_duration >= 14):
        return []

    return [
        Insight(
            id="plateau",
            type=InsightType.WARNING,
            title=f"Weight plateau for {plateau.plateau_duration} days",
            description=plateau.suggestion
            or "Your weight has been stable. Consider adjusting your approach.",
            trend="stable",
            actionable="Try a 2-day refeed at maintenance calories or increase daily steps by 2,000.",
            priority=9,
        )
    ]


def tdee_adaptation_rule(data: InsightInput) -> list[Insight]:
    """A month-long downward trend that has flattened over the last two weeks."""
    weights = _sorted_weights(data)
    if len(weights) < 28 or len(data.daily_logs) < 28:
        return []

    last_28 = sorted(data.daily_logs, key=lambda d: d.date)[-28:]
    avg_calories = sum(d.calories for d in last_28) / len(last_28)

    series = [w.weight_kg for w in weights]
    trend_14 = weighted_regression(series, 14)
    trend_30 = weighted_regression(series, 30)
    if trend_14 is None or trend_30 is None:
        return []

    if not (
        trend_30.direction == "decreasing"
        and trend_14.direction == "stable"
        and avg_calories < ADAPTATION_INTAKE_CEILING
    ):
        return []

    estimate = round(abs(trend_30.slope - trend_14.slope) * 500)
    if estimate <= 50:
        return []

    shown = min(ADAPTATION_MAX_ESTIMATE, estimate)
    return [
        Insight(
            id="tdee_adaptation",
            type=InsightType.WARNING,
            title=f"Your TDEE may have adapted down by ~{shown} cal",
            description=(
                "Your body is burning fewer calories as it adapts to your deficit. "
                "Consider a strategic diet break."
            ),
            metric=f"-{shown} cal",
            trend="down",
            actionable="Eat at maintenance for 5-7 days to reset your metabolism.",
            priority=8,
        )
    ]


def streak_rule(data: InsightInput) -> list[Insight]:
    """Break-day pattern, long streaks and personal bests."""
    if not data.logged_dates or len(data.logged_dates) < 7:
        return []

    streaks = analyze_streaks(data.logged_dates, today=data.today)
    insights = []

    break_day = streaks.most_likely_break_day
    if break_day and streaks.streak_break_days[break_day] >= 3:
        count = streaks.streak_break_days[break_day]
        insights.append(
            Insight(
                id="streak_break_pattern",
                type=InsightType.WARNING,
                title=f"Streak alert: You tend to break on {break_day}s",
                description=(
                    f"You've broken your logging streak on {break_day}s {count} times. "
                    "Setting a reminder could help."
                ),
                actionable=f"Set an alarm on {break_day}s to log your meals.",
                priority=6,
            )
        )

    current = streaks.current_streak
    if current >= 14:
        insights.append(
            Insight(
                id="streak_achievement",
                type=InsightType.ACHIEVEMENT,
                title=f"{current}-day logging streak!",
                description=(
                    "You're in the top tier of consistency. "
                    "Only 5% of users maintain a streak this long."
                ),
                metric=f"{current} days",
                trend="up",
                priority=6,
            )
        )

    if current > 0 and current >= streaks.longest_streak and streaks.longest_streak >= 7:
        insights.append(
            Insight(
                id="streak_pr",
                type=InsightType.ACHIEVEMENT,
                title="New personal best streak!",
                description=f"This is your longest streak ever at {current} days. Do not stop now!",
                metric=f"{current} days",
                trend="up",
                priority=7,
            )
        )

    return insights


def sleep_weight_rule(data: InsightInput) -> list[Insight]:
    """Correlation between sleep hours and day-over-day weight change."""
    weights = _sorted_weights(data)
    sleep = sorted(data.sleep_data or [], key=lambda s: s.date)
    if len(sleep) < 7 or len(weights) < 7:
        return []

    hours = [s.hours for s in sleep]
    changes = [b.weight_kg - a.weight_kg for a, b in zip(weights, weights[1:])]
    n = min(len(hours), len(changes))
    if n < 5:
        return []

    corr = pearson_correlation(hours[-n:], changes[-n:], "sleep hours", "weight change")
    if corr is None or corr.strength not in ("strong", "moderate"):
        return []

    has_good = any(s.hours >= GOOD_SLEEP_HOURS for s in sleep)
    has_short = any(s.hours < GOOD_SLEEP_HOURS for s in sleep)
    if not (has_good and has_short):
        return []

    return [
        Insight(
            id="sleep_weight_correlation",
            type=InsightType.INFO,
            title="Your best weight-loss weeks correlate with 7+ hours sleep",
            description=corr.description,
            actionable="Aim for 7-9 hours of sleep to support your weight loss goals.",
            priority=7,
        )
    ]


def sleep_workout_rule(data: InsightInput) -> list[Insight]:
    """Sleep quality on workout days vs rest days."""
    if len(data.sleep_data or []) < 7 or len(data.workout_data or []) < 5:
        return []

    by_date = {s.date: s for s in data.sleep_data}
    workout_dates = {w.date for w in data.workout_data}

    workout_quality = []
    rest_quality = []
    for day, sleep in by_date.items():
        if sleep.quality is None:
            continue
        if day in workout_dates:
            workout_quality.append(sleep.quality)
        else:
            rest_quality.append(sleep.quality)

    if len(workout_quality) < 3 or len(rest_quality) < 3:
        return []

    workout_avg = sum(workout_quality) / len(workout_quality)
    rest_avg = sum(rest_quality) / len(rest_quality)
    if rest_avg <= 0:
        return []
    improvement = round((workout_avg - rest_avg) / rest_avg * 100)
    if improvement <= 10:
        return []

    return [
        Insight(
            id="sleep_workout",
            type=InsightType.POSITIVE,
            title=f"Sleep quality improves by {improvement}% on workout days",
            description=(
                f"Your sleep quality averages {round(workout_avg)}% on days you exercise "
                f"vs {round(rest_avg)}% on rest days."
            ),
            actionable="Consistent exercise improves sleep. Keep up your workout routine!",
            priority=6,
        )
    ]


def macro_consistency_rule(data: InsightInput) -> list[Insight]:
    """Very steady or very erratic day-to-day macros."""
    tracked = [d for d in data.daily_logs if d.tracked]
    if len(tracked) < 7:
        return []

    consistency = analyze_macro_consistency(tracked)
    variation = round(consistency.calorie_cv * 100)
    if consistency.overall_consistency >= 80:
        return [
            Insight(
                id="macro_consistent",
                type=InsightType.POSITIVE,
                title="Excellent macro consistency!",
                description=(
                    f"Your daily macros only vary by {variation}%. "
                    "This consistency accelerates results."
                ),
                metric=f"{consistency.overall_consistency}%",
                trend="stable",
                priority=5,
            )
        ]
    if consistency.overall_consistency < 50:
        return [
            Insight(
                id="macro_inconsistent",
                type=InsightType.WARNING,
                title="Macro intake is inconsistent",
                description=(
                    f"Your calories vary by {variation}% day-to-day. "
                    "More consistency will improve results."
                ),
                actionable="Try meal prepping 2-3 standard meals you can rotate.",
                priority=6,
            )
        ]
    return []


def adherence_rule(data: InsightInput) -> list[Insight]:
    """A week with high target adherence."""
    if len(data.daily_logs) < 7:
        return []

    adherence = calculate_adherence(data.daily_logs, 7)
    if adherence.overall_score < 85:
        return []

    return [
        Insight(
            id="adherence_high",
            type=InsightType.ACHIEVEMENT,
            title=f"{adherence.grade} week: {adherence.overall_score}% adherence",
            description=(
                f"You hit your calorie target {adherence.calorie_adherence}% of the time "
                f"and protein {adherence.protein_adherence}%."
            ),
            metric=f"{adherence.overall_score}%",
            priority=5,
        )
    ]


def calorie_spike_rule(data: InsightInput) -> list[Insight]:
    """Most recent unusually high calorie day."""
    tracked = [d for d in data.daily_logs if d.tracked]
    if len(tracked) < 7:
        return []

    scan = z_score_anomalies([d.calories for d in tracked], 2.0, [d.date for d in tracked])
    highs = [a for a in scan.anomalies if a.type == "high"]
    if not highs:
        return []

    spike = highs[-1]
    value = round(spike.value)
    return [
        Insight(
            id="calorie_spike",
            type=InsightType.INFO,
            title=f"Calorie spike detected: {value} cal",
            description=(
                f"This was {round(spike.value - scan.mean)} calories above your average. "
                "One day does not define your progress!"
            ),
            metric=f"{value} cal",
            trend="up",
            actionable=(
                "Get back to your normal intake today. "
                "One off-day barely affects weekly averages."
            ),
            priority=4,
        )
    ]


RULES: list[Rule] = [
    weekend_and_day_pattern_rule,
    protein_drop_rule,
    weight_progress_rule,
    plateau_rule,
    tdee_adaptation_rule,
    streak_rule,
    sleep_weight_rule,
    sleep_workout_rule,
    macro_consistency_rule,
    adherence_rule,
    calorie_spike_rule,
]


# =============================================================================
# Public API
# =============================================================================


def generate_insights(
    data: InsightInput,
    max_insights: int = DEFAULT_MAX_INSIGHTS,
    rules: Optional[list[Rule]] = None,
) -> list[Insight]:
    """
    Run every insight rule and return the highest-priority results.

    Args:
        data: Logs and optional weight, sleep, workout and goal inputs
        max_insights: Maximum number of insights returned
        rules: Rules to run (default: RULES)

    Returns:
        Insights sorted by priority, highest first. Ties keep rule order.
        Empty when fewer than 3 daily logs are available.
    """
    if not data.daily_logs or len(data.daily_logs) < MIN_DAILY_LOGS:
        logger.debug("Skipping insights: %d daily logs", len(data.daily_logs or []))
        return []

    insights: list[Insight] = []
    for rule in RULES if rules is None else rules:
        try:
            insights.extend(rule(data))
        except Exception:
            logger.debug("Insight rule %s failed", rule.__name__, exc_info=True)
            continue

    insights.sort(key=lambda i: i.priority, reverse=True)
    return insights[:max_insights]


def next_week_focus(insights: list[Insight]) -> list[str]:
    """Actionable advice from the first two high-priority insights."""
    focus = [i.actionable for i in insights if i.priority >= 7 and i.actionable][:2]
    return focus or [FALLBACK_FOCUS]
