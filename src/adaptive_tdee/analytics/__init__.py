"""Behavioral analytics over daily logs.

Streaks, weekday patterns, adherence, macro consistency, goal-independent
plateau detection, goal progress and weekly summaries. Each analysis is a
pure function and is independent of the TDEE estimator.
"""

from __future__ import annotations

from adaptive_tdee.analytics.adherence import (
    analyze_macro_consistency,
    calculate_adherence,
    calculate_fitness_score,
    calculate_nutrition_score,
)
from adaptive_tdee.analytics.models import (
    DailyLog,
    SleepSample,
    WeekIntake,
    WeeklySummary,
    WorkoutSample,
)
from adaptive_tdee.analytics.patterns import analyze_day_patterns
from adaptive_tdee.analytics.plateau import detect_plateau_statistical
from adaptive_tdee.analytics.progress import calculate_progress_rate, project_goal_timeline
from adaptive_tdee.analytics.report import (
    detect_weekly_adaptation,
    generate_weekly_insights,
    generate_weekly_report_card,
    summarize_week,
)
from adaptive_tdee.analytics.streaks import analyze_streaks

__all__ = [
    "DailyLog",
    "SleepSample",
    "WeekIntake",
    "WeeklySummary",
    "WorkoutSample",
    "analyze_day_patterns",
    "analyze_macro_consistency",
    "analyze_streaks",
    "calculate_adherence",
    "calculate_fitness_score",
    "calculate_nutrition_score",
    "calculate_progress_rate",
    "detect_plateau_statistical",
    "detect_weekly_adaptation",
    "generate_weekly_insights",
    "generate_weekly_report_card",
    "project_goal_timeline",
    "summarize_week",
]
