"""Body metrics and formula-based energy expenditure."""

from adaptive_tdee.profiles.body_calc import (
    ActivityLevel,
    BodyComposition,
    Gender,
    GoalType,
    body_fat_category,
    calculate_bmr,
    calculate_tdee,
    estimate_body_fat,
    estimate_composition,
    recommended_intake,
)

__all__ = [
    "ActivityLevel",
    "BodyComposition",
    "Gender",
    "GoalType",
    "body_fat_category",
    "calculate_bmr",
    "calculate_tdee",
    "estimate_body_fat",
    "estimate_composition",
    "recommended_intake",
]
