"""Data models for daily logs and behavioral analysis results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

# Day-of-week labels, Sunday first. Histograms and tie-breaks follow this order.
DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri")
WEEKEND_NAMES = ("Sat", "Sun")

DateLike = Union[date, str]


def to_date(value: DateLike) -> date:
    """Accept a date or an ISO 'YYYY-MM-DD' string."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def day_name(day: date) -> str:
    """Short day-of-week label ('Sun'..'Sat')."""
    return DAY_NAMES[(day.weekday() + 1) % 7]


@dataclass(frozen=True)
class DailyLog:
    """One day of nutrition logging with the targets in force that day."""

    date: date
    calories: float
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    goal: float = 0.0  # calorie target
    protein_goal: float = 0.0

    @property
    def tracked(self) -> bool:
        return self.calories > 0


@dataclass(frozen=True)
class SleepSample:
    """One night of sleep."""

    date: date
    hours: float
    quality: Optional[float] = None  # 0-100


@dataclass(frozen=True)
class WorkoutSample:
    """One logged workout."""

    date: date
    duration: float  # minutes
    calories: float = 0.0
    type: Optional[str] = None


@dataclass
class Streak:
    """A run of consecutive logged days."""

    start: date
    length: int


@dataclass
class StreakAnalysis:
    """Logging streak statistics."""

    current_streak: int = 0
    longest_streak: int = 0
    average_streak_length: float = 0.0
    total_streaks: int = 0
    streak_break_days: dict[str, int] = field(
        default_factory=lambda: {name: 0 for name in DAY_NAMES}
    )
    most_likely_break_day: Optional[str] = None
    streaks: list[Streak] = field(default_factory=list)


@dataclass
class DayAverage:
    """Average intake for one day of the week."""

    avg_calories: int
    avg_protein: int
    count: int


@dataclass
class WeekendComparison:
    """Weekday vs weekend average calories."""

    weekday_avg: int
    weekend_avg: int
    difference: int  # weekend - weekday


@dataclass
class DayPatternAnalysis:
    """Per-weekday intake pattern."""

    best_day: Optional[str]
    worst_day: Optional[str]
    best_day_avg_calories: int
    worst_day_avg_calories: int
    day_of_week_averages: dict[str, DayAverage]
    weekend_vs_weekday: WeekendComparison


@dataclass
class AdherenceResult:
    """How consistently targets were hit (percentages, 0-100)."""

    overall_score: int
    calorie_adherence: int
    protein_adherence: int
    logging_consistency: int
    grade: str
    days_on_target: int
    total_days: int


@dataclass
class MacroConsistency:
    """Day-to-day variability of macros."""

    calorie_cv: float = 0.0
    protein_cv: float = 0.0
    carbs_cv: float = 0.0
    fat_cv: float = 0.0
    overall_consistency: int = 0  # 0-100, higher = more consistent


@dataclass
class StatisticalPlateau:
    """Goal-independent stagnation signal."""

    is_plateau: bool = False
    plateau_duration: int = 0
    change_rate: float = 0.0
    suggestion: str = ""
    confidence: int = 0


@dataclass
class ProgressRate:
    """Actual vs planned rate of weight change."""

    actual_rate_per_week: float
    expected_rate_per_week: float
    percent_of_expected: int
    status: str  # 'ahead', 'on_track', 'behind', 'stalled'
    projected_days_to_goal: int
    projected_date: Optional[date]
    message: str


@dataclass
class Milestone:
    """Projected weight at the end of a week."""

    week: int
    weight: float
    date: date
    percent_complete: int


@dataclass
class GoalTimeline:
    """Projection of when a goal weight is reached."""

    weeks_to_goal: int
    target_date: date
    total_change: float
    direction: str  # 'losing' or 'gaining'
    milestones: list[Milestone]


@dataclass
class NutritionScore:
    """0-100 score for one day of eating against targets."""

    score: int
    breakdown: dict[str, int]
    grade: str


@dataclass
class WeeklySummary:
    """Aggregates of one week of logging, the input for weekly insights."""

    days_logged: int = 0
    avg_calories: float = 0.0
    calorie_variance: float = 0.0  # σ of daily calories
    avg_protein: float = 0.0
    protein_goal: float = 0.0
    streak: int = 0
    avg_water_percent: Optional[float] = None


@dataclass
class WeeklyInsight:
    """A short weekly observation."""

    type: str  # 'success', 'warning', 'info'
    title: str
    body: str


@dataclass
class WeekIntake:
    """Calorie goal, average intake and end-of-week weight for one week."""

    calorie_goal: float = 2000.0
    avg_calories: float = 0.0
    weight: Optional[float] = None


@dataclass
class WeeklyAdaptation:
    """Week-level check for a deficit that no longer moves the scale."""

    adapted: bool
    reason: Optional[str] = None
    severity: Optional[str] = None  # 'mild' or 'significant'
    estimated_adaptation: int = 0  # kcal/day
    recommendations: list[str] = field(default_factory=list)


@dataclass
class FitnessScore:
    """0-100 composite of consistency, activity, nutrition and recovery."""

    score: int
    breakdown: dict[str, int]
    level: str


@dataclass
class CalorieStats:
    avg: int
    best: int  # lowest tracked day
    worst: int  # highest tracked day
    compliance: int


@dataclass
class MacroStats:
    avg_protein: int
    avg_carbs: int
    avg_fat: int
    protein_target: float
    carbs_target: float
    fat_target: float


@dataclass
class ExerciseStats:
    workouts_completed: int
    total_duration: float
    total_calories: float


@dataclass
class WeeklyReportCard:
    """Graded summary of one week."""

    grade: str
    compliance_score: int
    highlights: list[str]
    areas_to_improve: list[str]
    calorie_stats: CalorieStats
    macro_stats: MacroStats
    exercise_stats: ExerciseStats
    weight_change: float
