"""Data models for weight/intake logs and TDEE estimates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from adaptive_tdee.profiles.body_calc import Gender, GoalType


class TrendDirection(str, Enum):
    """Direction of the smoothed weight trend."""

    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


class EstimateSource(str, Enum):
    """Which input dominates a blended TDEE estimate."""

    FORMULA = "formula"
    HYBRID = "hybrid"
    OBSERVED = "observed"


class TDEEInsightType(str, Enum):
    """Severity of an estimator note."""

    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ALERT = "alert"


@dataclass(frozen=True)
class WeightSample:
    """A single daily weigh-in."""

    date: date
    weight_kg: float


@dataclass(frozen=True)
class IntakeSample:
    """Total calories logged for one day."""

    date: date
    calories: float

    def __post_init__(self) -> None:
        if self.calories < 0:
            raise ValueError(f"calories must be >= 0, got {self.calories}")


@dataclass(frozen=True)
class Biometrics:
    """User body metrics and goal, the input for the formula-based prior."""

    weight_kg: float
    height_cm: float
    age: int
    gender: Gender
    activity_level: str  # 'sedentary', 'light', 'moderate', 'active', 'extreme'
    goal_type: GoalType
    weekly_goal: str = "maintain"  # 'lose2', 'lose1', 'lose05', 'maintain', 'gain05', 'gain1'

    def __post_init__(self) -> None:
        valid_genders = tuple(g.value for g in Gender)
        if self.gender not in valid_genders:
            raise ValueError(f"gender must be one of {valid_genders}, got '{self.gender}'")
        valid_goals = tuple(g.value for g in GoalType)
        if self.goal_type not in valid_goals:
            raise ValueError(f"goal_type must be one of {valid_goals}, got '{self.goal_type}'")
        # Store enum members even when plain strings were passed
        object.__setattr__(self, "gender", Gender(self.gender))
        object.__setattr__(self, "goal_type", GoalType(self.goal_type))


@dataclass
class AlignedSeries:
    """Days that have both a weight and an intake entry, in date order."""

    dates: list[date] = field(default_factory=list)
    weights: list[float] = field(default_factory=list)
    intakes: list[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.dates)


@dataclass
class TDEEEstimate:
    """Blended TDEE estimate with diagnostics."""

    tdee: int
    bmr: int
    activity_multiplier: float
    confidence: float  # 0-1
    data_points: int
    trend: TrendDirection
    metabolic_adaptation: bool
    plateau_detected: bool
    weekly_weight_change_kg: float
    recommended_intake: int
    estimate_source: EstimateSource


@dataclass
class TDEETrendPoint:
    """One point of the rolling TDEE chart."""

    date: date
    tdee: int
    smoothed_weight: float
    confidence: float


@dataclass
class TDEEInsight:
    """A short note attached to an estimate."""

    type: TDEEInsightType
    title: str
    message: str


@dataclass
class AdaptiveTDEEResult:
    """Everything estimate_tdee produces for one call."""

    estimate: TDEEEstimate
    trend_data: list[TDEETrendPoint]
    days_logged_this_week: int
    total_days_with_data: int
    insights: list[TDEEInsight] = field(default_factory=list)


@dataclass
class FormulaPrior:
    """Formula-based BMR and TDEE."""

    bmr: float
    tdee: int
    multiplier: float


@dataclass
class ObservedTDEE:
    """TDEE implied by intake and the smoothed weight trend."""

    observed_tdee: int
    weekly_weight_change_kg: float
    smoothed_weights: list[float]
    dates: list[date]
    avg_intake: int
    data_points: int
    r2: float


@dataclass
class BlendResult:
    """Formula/observed blend and the weight given to the observed side."""

    blended_tdee: int
    weight: float
    source: EstimateSource
