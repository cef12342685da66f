"""Formula-based energy expenditure from body metrics.

Provides the prior for the adaptive estimator: BMR from the Mifflin-St Jeor
equation times a Harris-Benedict activity factor, plus the calorie
adjustments that turn a TDEE into a daily intake target.

Mifflin-St Jeor is used because it is the most widely validated resting
metabolic rate equation for the general population.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Gender(str, Enum):
    """Biological sex for BMR calculation."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    """Activity level for TDEE calculation."""

    SEDENTARY = "sedentary"  # Little or no exercise
    LIGHT = "light"  # Light exercise 1-3 days/week
    MODERATE = "moderate"  # Moderate exercise 3-5 days/week
    ACTIVE = "active"  # Hard exercise 6-7 days/week
    EXTREME = "extreme"  # Very hard exercise, physical job


class GoalType(str, Enum):
    """Direction of the user's body weight goal."""

    CUT = "cut"
    MAINTAIN = "maintain"
    BULK = "bulk"


# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.EXTREME: 1.9,
}

DEFAULT_ACTIVITY_MULTIPLIER = ACTIVITY_MULTIPLIERS[ActivityLevel.MODERATE]

# Daily calorie delta for each weekly goal (kcal/day)
WEEKLY_GOAL_ADJUSTMENTS = {
    "lose2": -1000,
    "lose1": -500,
    "lose05": -250,
    "maintain": 0,
    "gain05": 250,
    "gain1": 500,
}

# Recommended intake never goes below this
MIN_RECOMMENDED_INTAKE = 1200


def calculate_bmr(
    weight_kg: float,
    height_cm: float,
    age: float,
    gender: Union[Gender, str],
) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        weight_kg: Body weight in kilograms
        height_cm: Height in centimetres
        age: Age in years
        gender: Biological sex

    Returns:
        BMR in calories per day
    """
    base = (10 * weight_kg) + (6.25 * height_cm) - (5 * age)
    if Gender(gender) == Gender.MALE:
        return base + 5
    return base - 161


def activity_multiplier(activity_level: Union[ActivityLevel, str]) -> float:
    """Look up the activity factor, falling back to moderate for unknown levels."""
    try:
        return ACTIVITY_MULTIPLIERS[ActivityLevel(activity_level)]
    except ValueError:
        return DEFAULT_ACTIVITY_MULTIPLIER


def calculate_tdee(bmr: float, activity_level: Union[ActivityLevel, str]) -> float:
    """Calculate Total Daily Energy Expenditure.

    Args:
        bmr: Basal Metabolic Rate
        activity_level: Activity level

    Returns:
        TDEE in calories per day
    """
    return bmr * activity_multiplier(activity_level)


def goal_adjustment(weekly_goal: str) -> int:
    """Daily calorie delta for a weekly goal string such as 'lose1' or 'gain05'."""
    return WEEKLY_GOAL_ADJUSTMENTS.get(weekly_goal, 0)


def recommended_intake(
    tdee: float,
    weekly_goal: str,
    floor: int = MIN_RECOMMENDED_INTAKE,
) -> int:
    """Daily intake target for a TDEE and weekly goal, never below ``floor``."""
    return max(floor, round(tdee + goal_adjustment(weekly_goal)))


def lbs_to_kg(lbs: float) -> float:
    """Convert pounds to kilograms."""
    return lbs * 0.453592


def inches_to_cm(inches: float) -> float:
    """Convert inches to centimetres."""
    return inches * 2.54


# Upper body-fat bound (%) of each category, lowest first
BODY_FAT_CATEGORIES = {
    Gender.MALE: ((6, "Essential Fat"), (13, "Athletes"), (17, "Fitness"), (24, "Average")),
    Gender.FEMALE: ((14, "Essential Fat"), (20, "Athletes"), (24, "Fitness"), (31, "Average")),
}
ABOVE_AVERAGE = "Above Average"

MIN_BODY_FAT = 3.0
MAX_BODY_FAT = 60.0


@dataclass
class BodyComposition:
    """Fat and lean mass split of a body weight."""

    fat_mass: float
    lean_mass: float
    fat_percent: float
    lean_percent: float


def estimate_body_fat(
    gender: Union[Gender, str],
    waist_in: float,
    neck_in: float,
    height_in: float,
    hip_in: Optional[float] = None,
) -> Optional[float]:
    """Estimate body fat percentage with the U.S. Navy circumference method.

    Args:
        gender: Biological sex
        waist_in: Waist circumference in inches
        neck_in: Neck circumference in inches
        height_in: Height in inches
        hip_in: Hip circumference in inches (required for women)

    Returns:
        Body fat % rounded to 0.1 and clamped to [3, 60], or None when a
        measurement is missing or the log argument is not positive
    """
    if not waist_in or not neck_in or not height_in:
        return None

    if Gender(gender) == Gender.MALE:
        girth = waist_in - neck_in
        if girth <= 0:
            return None
        body_fat = 86.010 * math.log10(girth) - 70.041 * math.log10(height_in) + 36.76
    else:
        if not hip_in:
            return None
        girth = waist_in + hip_in - neck_in
        if girth <= 0:
            return None
        body_fat = 163.205 * math.log10(girth) - 97.684 * math.log10(height_in) - 78.387

    return max(MIN_BODY_FAT, min(MAX_BODY_FAT, round(body_fat, 1)))


def estimate_composition(weight: float, body_fat_percent: float) -> Optional[BodyComposition]:
    """Split a body weight (any unit) into fat and lean mass."""
    if not weight or not body_fat_percent:
        return None
    fat_mass = round(weight * body_fat_percent / 100, 1)
    return BodyComposition(
        fat_mass=fat_mass,
        lean_mass=round(weight - fat_mass, 1),
        fat_percent=body_fat_percent,
        lean_percent=round(100 - body_fat_percent, 1),
    )


def body_fat_category(body_fat_percent: float, gender: Union[Gender, str]) -> Optional[str]:
    """Label a body fat percentage, e.g. 'Fitness' or 'Average'."""
    if not body_fat_percent:
        return None
    for upper, label in BODY_FAT_CATEGORIES[Gender(gender)]:
        if body_fat_percent <= upper:
            return label
    return ABOVE_AVERAGE
