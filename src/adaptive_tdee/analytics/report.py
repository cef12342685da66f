"""Weekly summaries: report card, weekly insights and week-level adaptation."""

from __future__ import annotations

from typing import Optional, Sequence

from adaptive_tdee.analytics.models import (
    CalorieStats,
    DailyLog,
    ExerciseStats,
    MacroStats,
    WeekIntake,
    WeeklyAdaptation,
    WeeklyInsight,
    WeeklyReportCard,
    WeeklySummary,
    WorkoutSample,
)
from adaptive_tdee.stats.descriptive import mean, standard_deviation

DAYS_PER_WEEK = 7

# Report card weights (protein contributes fixed points instead)
CALORIE_COMPLIANCE_WEIGHT = 0.35
LOGGING_WEIGHT = 0.25
WORKOUT_WEIGHT = 0.2
PROTEIN_FULL_POINTS = 20
PROTEIN_PARTIAL_POINTS = 10
POINTS_PER_WORKOUT = 25
MAX_STREAK_BONUS = 10

REPORT_GRADE_CUTOFFS = (
    (95, "A+"),
    (90, "A"),
    (85, "A-"),
    (80, "B+"),
    (75, "B"),
    (70, "B-"),
    (65, "C+"),
    (60, "C"),
    (50, "D"),
)

# Weekly insight thresholds
CONSISTENT_CALORIE_SD = 200
SWINGING_CALORIE_SD = 500
WEEK_OVER_WEEK_CHANGE = 200
MAX_WEEKLY_INSIGHTS = 5

# Week-level adaptation
ADAPTATION_WEEKS = 4
ADAPTATION_MIN_DEFICIT = 300
ADAPTATION_SIGNIFICANT_DEFICIT = 500
ADAPTATION_MAX_WEEKLY_LOSS = -0.2  # kg/week
ADAPTATION_FRACTION = 0.15

ADAPTATION_RECOMMENDATIONS = [
    "Consider a 1-2 week diet break at maintenance calories",
    "Increase NEAT (Non-Exercise Activity Thermogenesis)",
    "Add 1-2 resistance training sessions to preserve metabolic rate",
    "Ensure adequate sleep (7-9 hours) to support hormonal balance",
]


def report_grade(score: float) -> str:
    """Map a 0-100 weekly score to a finer-grained letter grade."""
    for cutoff, grade in REPORT_GRADE_CUTOFFS:
        if score >= cutoff:
            return grade
    return "F"


def generate_weekly_report_card(
    daily_logs: Sequence[DailyLog],
    workouts: Sequence[WorkoutSample],
    weight_start: float,
    weight_end: float,
    streak: int,
    protein_goal: float,
    carbs_goal: float = 0.0,
    fat_goal: float = 0.0,
) -> WeeklyReportCard:
    """
    Grade one week of logging.

    The compliance score combines calorie compliance (35%), logging coverage
    over 7 days (25%), workouts (20%, 25 points per workout up to 100) and
    up to 20 protein points. The grade adds a streak bonus of up to 10.

    Args:
        daily_logs: The week's logs; days with no calories are ignored
        workouts: The week's workouts
        weight_start: Weight at the start of the week (kg)
        weight_end: Weight at the end of the week (kg)
        streak: Current logging streak in days
        protein_goal: Daily protein target (g)
        carbs_goal: Daily carbohydrate target (g), reported only
        fat_goal: Daily fat target (g), reported only

    Returns:
        WeeklyReportCard
    """
    tracked = [d for d in daily_logs if d.tracked]
    calories = [d.calories for d in tracked]

    on_target = 0
    for d in tracked:
        ratio = d.calories / d.goal if d.goal > 0 else 0
        if 0.85 <= ratio <= 1.15:
            on_target += 1
    calorie_compliance = round(on_target / len(tracked) * 100) if tracked else 0

    avg_protein = round(mean([d.protein for d in tracked])) if tracked else 0
    avg_carbs = round(mean([d.carbs for d in tracked])) if tracked else 0
    avg_fat = round(mean([d.fat for d in tracked])) if tracked else 0

    logging_score = min(100, round(len(tracked) / DAYS_PER_WEEK * 100))
    workout_score = min(100, len(workouts) * POINTS_PER_WORKOUT)
    if avg_protein >= protein_goal * 0.85:
        protein_points = PROTEIN_FULL_POINTS
    elif avg_protein >= protein_goal * 0.7:
        protein_points = PROTEIN_PARTIAL_POINTS
    else:
        protein_points = 0

    compliance_score = round(
        calorie_compliance * CALORIE_COMPLIANCE_WEIGHT
        + logging_score * LOGGING_WEIGHT
        + workout_score * WORKOUT_WEIGHT
        + protein_points
    )
    grade_score = min(100, compliance_score + min(MAX_STREAK_BONUS, streak))
    weight_change = round(weight_end - weight_start, 1)

    highlights = []
    if calorie_compliance >= 80:
        highlights.append(f"Hit calorie target {calorie_compliance}% of the time")
    if avg_protein >= protein_goal * 0.9:
        highlights.append(f"Protein on point: avg {avg_protein}g/day")
    if len(workouts) >= 3:
        highlights.append(f"{len(workouts)} workouts completed")
    if streak >= 7:
        highlights.append(f"{streak}-day logging streak!")
    if weight_change < 0:
        highlights.append(f"Lost {abs(weight_change)}kg this week")

    areas_to_improve = []
    if calorie_compliance < 60:
        areas_to_improve.append("Calorie consistency needs work")
    if avg_protein < protein_goal * 0.7:
        areas_to_improve.append(f"Protein is low ({avg_protein}g vs {protein_goal:g}g target)")
    if len(tracked) < 5:
        areas_to_improve.append("Try to log meals every day")
    if len(workouts) < 2:
        areas_to_improve.append("Aim for at least 3 workouts/week")

    return WeeklyReportCard(
        grade=report_grade(grade_score),
        compliance_score=compliance_score,
        highlights=highlights,
        areas_to_improve=areas_to_improve,
        calorie_stats=CalorieStats(
            avg=round(mean(calories)) if calories else 0,
            best=round(min(calories)) if calories else 0,
            worst=round(max(calories)) if calories else 0,
            compliance=calorie_compliance,
        ),
        macro_stats=MacroStats(
            avg_protein=avg_protein,
            avg_carbs=avg_carbs,
            avg_fat=avg_fat,
            protein_target=protein_goal,
            carbs_target=carbs_goal,
            fat_target=fat_goal,
        ),
        exercise_stats=ExerciseStats(
            workouts_completed=len(workouts),
            total_duration=sum(w.duration for w in workouts),
            total_calories=sum(w.calories for w in workouts),
        ),
        weight_change=weight_change,
    )


def summarize_week(
    daily_logs: Sequence[DailyLog],
    streak: int = 0,
    avg_water_percent: Optional[float] = None,
) -> WeeklySummary:
    """Aggregate a week of logs for generate_weekly_insights.

    The protein goal is the mean of the non-zero per-day protein goals.
    """
    tracked = [d for d in daily_logs if d.tracked]
    goals = [d.protein_goal for d in tracked if d.protein_goal > 0]
    return WeeklySummary(
        days_logged=len({d.date for d in tracked}),
        avg_calories=mean([d.calories for d in tracked]),
        calorie_variance=standard_deviation([d.calories for d in tracked]),
        avg_protein=mean([d.protein for d in tracked]),
        protein_goal=mean(goals),
        streak=streak,
        avg_water_percent=avg_water_percent,
    )


def generate_weekly_insights(
    week: Optional[WeeklySummary],
    previous_week: Optional[WeeklySummary] = None,
) -> list[WeeklyInsight]:
    """
    Short observations about one week, at most five.

    Covers calorie consistency (with at least 5 days logged), protein
    adherence, the change in average calories against the previous week,
    7-day streak milestones and hydration when it is tracked.
    """
    insights: list[WeeklyInsight] = []
    if week is None:
        return insights

    if week.days_logged >= 5:
        if week.calorie_variance < CONSISTENT_CALORIE_SD:
            insights.append(
                WeeklyInsight(
                    type="success",
                    title="Consistent Eating",
                    body="Your calorie intake varied by less than 200 kcal day-to-day. Great consistency!",
                )
            )
        elif week.calorie_variance > SWINGING_CALORIE_SD:
            insights.append(
                WeeklyInsight(
                    type="warning",
                    title="Calorie Swings",
                    body=(
                        f"Your daily calories varied by {round(week.calorie_variance)} kcal. "
                        "Try to keep intake more consistent."
                    ),
                )
            )

    if week.avg_protein and week.protein_goal:
        adherence = week.avg_protein / week.protein_goal
        if adherence >= 0.9:
            insights.append(
                WeeklyInsight(
                    type="success",
                    title="Protein Champion",
                    body="You hit 90%+ of your protein goal on average. Your muscles thank you!",
                )
            )
        elif adherence < 0.7:
            insights.append(
                WeeklyInsight(
                    type="warning",
                    title="Protein Gap",
                    body=(
                        f"You're averaging {round(adherence * 100)}% of your protein goal. "
                        "Try adding a protein-rich snack."
                    ),
                )
            )

    if previous_week is not None and previous_week.avg_calories:
        change = week.avg_calories - previous_week.avg_calories
        if abs(change) > WEEK_OVER_WEEK_CHANGE:
            amount = abs(round(change))
            word = "more" if change > 0 else "fewer"
            insights.append(
                WeeklyInsight(
                    type="info" if change > 0 else "success",
                    title=f"{amount} cal {word} per day",
                    body=(
                        f"Compared to last week, you're eating {amount} calories {word} "
                        "per day on average."
                    ),
                )
            )

    if week.streak >= 7 and week.streak % 7 == 0:
        insights.append(
            WeeklyInsight(
                type="success",
                title=f"{week.streak}-Day Streak!",
                body=f"You've logged for {week.streak} days straight. You're building an incredible habit!",
            )
        )

    if week.avg_water_percent is not None:
        if week.avg_water_percent >= 90:
            insights.append(
                WeeklyInsight(
                    type="success",
                    title="Hydration Hero",
                    body="Excellent hydration this week! Staying well-hydrated boosts metabolism and energy.",
                )
            )
        elif week.avg_water_percent < 60:
            insights.append(
                WeeklyInsight(
                    type="warning",
                    title="Drink More Water",
                    body="Your hydration was below target most days. Set reminders to drink water regularly.",
                )
            )

    return insights[:MAX_WEEKLY_INSIGHTS]


def detect_weekly_adaptation(weeks: Sequence[WeekIntake]) -> WeeklyAdaptation:
    """
    Flag a sustained deficit that no longer produces weight loss.

    Looks at the last four weeks: an average deficit above 300 kcal/day
    while weight drops by less than 0.2 kg/week on average suggests adaptive
    thermogenesis. Weeks without a weight are left out of the weight change.

    Args:
        weeks: Weekly aggregates, oldest first

    Returns:
        WeeklyAdaptation. With fewer than four weeks, not adapted with reason
        'insufficient_data'.
    """
    if len(weeks) < ADAPTATION_WEEKS:
        return WeeklyAdaptation(adapted=False, reason="insufficient_data")

    recent = list(weeks)[-ADAPTATION_WEEKS:]
    deficits = [(w.calorie_goal or 2000) - (w.avg_calories or 0) for w in recent]
    changes = [
        cur.weight - prev.weight
        for prev, cur in zip(recent, recent[1:])
        if cur.weight and prev.weight
    ]

    avg_deficit = mean(deficits)
    avg_change = mean(changes) if changes else 0.0

    if avg_deficit > ADAPTATION_MIN_DEFICIT and avg_change >= ADAPTATION_MAX_WEEKLY_LOSS:
        return WeeklyAdaptation(
            adapted=True,
            severity="significant" if avg_deficit > ADAPTATION_SIGNIFICANT_DEFICIT else "mild",
            estimated_adaptation=round(avg_deficit * ADAPTATION_FRACTION),
            recommendations=list(ADAPTATION_RECOMMENDATIONS),
        )
    return WeeklyAdaptation(adapted=False)
