"""Data models for ranked behavioral insights."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from adaptive_tdee.analytics.models import DailyLog, SleepSample, WorkoutSample
from adaptive_tdee.tracking.models import WeightSample


class InsightType(str, Enum):
    """Tone of an insight card."""

    POSITIVE = "positive"
    WARNING = "warning"
    INFO = "info"
    ACHIEVEMENT = "achievement"


@dataclass
class Insight:
    """A human-readable, prioritized observation.

    ``id`` is stable across calls so callers can de-duplicate or dismiss
    insights. ``priority`` runs from 1 (lowest) to 10.
    """

    id: str
    type: InsightType
    title: str
    description: str
    priority: int
    metric: Optional[str] = None
    trend: Optional[str] = None  # 'up', 'down', 'stable'
    actionable: Optional[str] = None


@dataclass
class InsightInput:
    """Everything the insight rules may look at.

    Only ``daily_logs`` is required. Rules whose inputs are missing are
    skipped.
    """

    daily_logs: list[DailyLog]
    weight_history: list[WeightSample] = field(default_factory=list)
    sleep_data: list[SleepSample] = field(default_factory=list)
    workout_data: list[WorkoutSample] = field(default_factory=list)
    current_weight: Optional[float] = None
    goal_weight: Optional[float] = None
    start_weight: Optional[float] = None
    expected_weekly_rate: Optional[float] = None
    logged_dates: list[date] = field(default_factory=list)
    today: Optional[date] = None
