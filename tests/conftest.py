"""Pytest fixtures for adaptive_tdee tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from adaptive_tdee.analytics.models import DailyLog
from adaptive_tdee.tracking.models import Biometrics, IntakeSample, WeightSample

# A Saturday, so weeks in the fixtures end cleanly
REFERENCE_DAY = date(2025, 3, 1)


def daily_series(start: date, values: list[float]) -> list[tuple[date, float]]:
    """Pair values with consecutive dates starting at ``start``."""
    return [(start + timedelta(days=i), v) for i, v in enumerate(values)]


def make_weights(start: date, values: list[float]) -> list[WeightSample]:
    return [WeightSample(d, v) for d, v in daily_series(start, values)]


def make_intakes(start: date, values: list[float]) -> list[IntakeSample]:
    return [IntakeSample(d, v) for d, v in daily_series(start, values)]


@pytest.fixture
def reference_day() -> date:
    return REFERENCE_DAY


@pytest.fixture
def male_biometrics() -> Biometrics:
    """80 kg, 180 cm, 30-year-old sedentary man on a cut (formula ≈ 2136 kcal)."""
    return Biometrics(
        weight_kg=80.0,
        height_cm=180.0,
        age=30,
        gender="male",
        activity_level="sedentary",
        goal_type="cut",
        weekly_goal="lose05",
    )


@pytest.fixture
def moderate_biometrics() -> Biometrics:
    """80 kg, 180 cm, 30-year-old moderately active man on a cut."""
    return Biometrics(
        weight_kg=80.0,
        height_cm=180.0,
        age=30,
        gender="male",
        activity_level="moderate",
        goal_type="cut",
        weekly_goal="lose05",
    )


@pytest.fixture
def steady_loss() -> tuple[list[WeightSample], list[IntakeSample]]:
    """30 days losing linearly from 80.0 to 78.5 kg on 2000 kcal/day, ending on REFERENCE_DAY."""
    start = REFERENCE_DAY - timedelta(days=29)
    weights = [80.0 - 1.5 * i / 29 for i in range(30)]
    return make_weights(start, weights), make_intakes(start, [2000.0] * 30)


@pytest.fixture
def plateau_series() -> tuple[list[WeightSample], list[IntakeSample]]:
    """21 days alternating 79.8/80.0 kg on 1800 kcal/day, ending on REFERENCE_DAY."""
    start = REFERENCE_DAY - timedelta(days=20)
    weights = [79.8 if i % 2 == 0 else 80.0 for i in range(21)]
    return make_weights(start, weights), make_intakes(start, [1800.0] * 21)


@pytest.fixture
def consistent_logs() -> list[DailyLog]:
    """14 days on target: 2000 of 2000 kcal, 150 of 150 g protein."""
    start = REFERENCE_DAY - timedelta(days=13)
    return [
        DailyLog(
            date=start + timedelta(days=i),
            calories=2000,
            protein=150,
            carbs=200,
            fat=65,
            goal=2000,
            protein_goal=150,
        )
        for i in range(14)
    ]
