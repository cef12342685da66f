"""Target adherence, macro consistency and daily nutrition scoring."""

from __future__ import annotations

from typing import Optional, Sequence

from adaptive_tdee.analytics.models import (
    AdherenceResult,
    DailyLog,
    FitnessScore,
    MacroConsistency,
    NutritionScore,
)
from adaptive_tdee.stats.descriptive import coefficient_of_variation

# A day is on calorie target within ±15% of goal
CALORIE_TOLERANCE = 0.15
# A day meets protein target at 85% of goal or more
PROTEIN_MIN_RATIO = 0.85

# Overall adherence weights
COVERAGE_WEIGHT = 0.3
CALORIE_WEIGHT = 0.4
PROTEIN_WEIGHT = 0.3

# Score cutoffs, highest first
GRADE_CUTOFFS = ((90, "A+"), (80, "A"), (70, "B"), (60, "C"), (50, "D"))

MIN_CONSISTENCY_DAYS = 3


def letter_grade(score: float) -> str:
    """Map a 0-100 score to a letter grade."""
    for cutoff, grade in GRADE_CUTOFFS:
        if score >= cutoff:
            return grade
    return "F"


def calculate_adherence(daily_logs: Sequence[DailyLog], days_in_period: int) -> AdherenceResult:
    """
    Score how consistently calorie and protein targets were hit.

    Args:
        daily_logs: Daily logs for the period. Days with no calories do not
            count as tracked.
        days_in_period: Calendar days in the period, the denominator for
            logging consistency

    Returns:
        AdherenceResult with percentages rounded to whole numbers
    """
    if not daily_logs or days_in_period <= 0:
        return AdherenceResult(
            overall_score=0,
            calorie_adherence=0,
            protein_adherence=0,
            logging_consistency=0,
            grade="F",
            days_on_target=0,
            total_days=0,
        )

    tracked = [d for d in daily_logs if d.tracked]
    logging_consistency = min(100, round(len(tracked) / days_in_period * 100))

    calories_on_target = 0
    protein_on_target = 0
    for day in tracked:
        cal_ratio = day.calories / day.goal if day.goal > 0 else 0
        if 1 - CALORIE_TOLERANCE <= cal_ratio <= 1 + CALORIE_TOLERANCE:
            calories_on_target += 1
        pro_ratio = day.protein / day.protein_goal if day.protein_goal > 0 else 0
        if pro_ratio >= PROTEIN_MIN_RATIO:
            protein_on_target += 1

    calorie_adherence = round(calories_on_target / len(tracked) * 100) if tracked else 0
    protein_adherence = round(protein_on_target / len(tracked) * 100) if tracked else 0

    overall = round(
        logging_consistency * COVERAGE_WEIGHT
        + calorie_adherence * CALORIE_WEIGHT
        + protein_adherence * PROTEIN_WEIGHT
    )

    return AdherenceResult(
        overall_score=overall,
        calorie_adherence=calorie_adherence,
        protein_adherence=protein_adherence,
        logging_consistency=logging_consistency,
        grade=letter_grade(overall),
        days_on_target=calories_on_target,
        total_days=len(tracked),
    )


def analyze_macro_consistency(daily_logs: Sequence[DailyLog]) -> MacroConsistency:
    """
    Day-to-day variability of calories and macros.

    Each CV is rounded to two decimals. The overall consistency score is
    100 × (1 - mean CV), clamped to 0-100. Needs at least 3 tracked days.
    """
    tracked = [d for d in daily_logs if d.tracked]
    if len(tracked) < MIN_CONSISTENCY_DAYS:
        return MacroConsistency()

    calorie_cv = round(coefficient_of_variation([d.calories for d in tracked]), 2)
    protein_cv = round(coefficient_of_variation([d.protein for d in tracked]), 2)
    carbs_cv = round(coefficient_of_variation([d.carbs for d in tracked]), 2)
    fat_cv = round(coefficient_of_variation([d.fat for d in tracked]), 2)

    mean_cv = (calorie_cv + protein_cv + carbs_cv + fat_cv) / 4
    overall = max(0, min(100, round((1 - mean_cv) * 100)))

    return MacroConsistency(
        calorie_cv=calorie_cv,
        protein_cv=protein_cv,
        carbs_cv=carbs_cv,
        fat_cv=fat_cv,
        overall_consistency=overall,
    )


def calculate_nutrition_score(
    day: Optional[DailyLog],
    carbs_goal: float = 200,
    fat_goal: float = 65,
    meal_count: int = 0,
) -> NutritionScore:
    """
    0-100 quality score for a single day.

    Points:
        calories        30, lose 60 per unit of relative miss
        protein         30, proportional to goal reached (capped)
        carbs and fat   10 each, lose 20 per unit of relative miss
        meals           20 for 3+, 15 for 2, 10 for 1
    Goals left at 0 on the log fall back to 2000 kcal and 150 g protein.
    """
    if day is None:
        return NutritionScore(score=0, breakdown={}, grade="F")

    cal_goal = day.goal or 2000
    pro_goal = day.protein_goal or 150

    cal_score = max(0.0, 30 - abs(1 - day.calories / cal_goal) * 60)
    pro_score = min(30.0, day.protein / pro_goal * 30)
    carb_score = max(0.0, 10 - abs(1 - day.carbs / carbs_goal) * 20) if carbs_goal > 0 else 0.0
    fat_score = max(0.0, 10 - abs(1 - day.fat / fat_goal) * 20) if fat_goal > 0 else 0.0
    if meal_count >= 3:
        meal_score = 20
    elif meal_count == 2:
        meal_score = 15
    elif meal_count == 1:
        meal_score = 10
    else:
        meal_score = 0

    total = max(0, min(100, round(cal_score + pro_score + carb_score + fat_score + meal_score)))
    return NutritionScore(
        score=total,
        breakdown={
            "calories": round(cal_score),
            "protein": round(pro_score),
            "macro_balance": round(carb_score + fat_score),
            "meal_distribution": meal_score,
        },
        grade=letter_grade(total),
    )


# Fitness levels by score, highest first
FITNESS_LEVELS = ((90, "Elite"), (75, "Advanced"), (60, "Intermediate"), (40, "Beginner"))


def calculate_fitness_score(
    streak: int = 0,
    weekly_workouts: int = 0,
    nutrition_score: float = 0,
    water_adherence: float = 0,
    sleep_score: float = 0,
) -> FitnessScore:
    """
    0-100 composite of four 25-point parts.

    Points:
        consistency   2.5 per streak day
        activity      6.25 per workout this week
        nutrition     daily nutrition score scaled to 25
        recovery      mean of sleep score and water adherence scaled to 25
    """
    consistency = min(25.0, streak * 2.5)
    activity = min(25.0, weekly_workouts * 6.25)
    nutrition = nutrition_score / 100 * 25
    recovery = (sleep_score + water_adherence) / 200 * 25

    score = max(0, min(100, round(consistency + activity + nutrition + recovery)))
    level = next((label for cutoff, label in FITNESS_LEVELS if score >= cutoff), "Getting Started")
    return FitnessScore(
        score=score,
        breakdown={
            "consistency": round(consistency),
            "activity": round(activity),
            "nutrition": round(nutrition),
            "recovery": round(recovery),
        },
        level=level,
    )
