"""Progress toward a goal weight."""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Optional, Sequence

from adaptive_tdee.analytics.models import GoalTimeline, Milestone, ProgressRate
from adaptive_tdee.tracking.models import WeightSample

MIN_HISTORY = 7
RECENT_SAMPLES = 14
MIN_SPAN_DAYS = 3

# Below this absolute kg/week the user is considered stalled
STALLED_RATE = 0.05

MAX_MILESTONE_WEEKS = 52


def calculate_progress_rate(
    current_weight: float,
    goal_weight: float,
    start_weight: float,
    expected_weekly_rate: float,
    weight_history: Sequence[WeightSample],
    today: Optional[date] = None,
) -> ProgressRate:
    """
    Compare the actual rate of change with the planned one.

    The actual rate is the endpoint change over the most recent 14 samples,
    scaled to a week.

    Args:
        current_weight: Latest weight (kg)
        goal_weight: Goal weight (kg)
        start_weight: Weight at the start of the plan (kg)
        expected_weekly_rate: Planned kg/week (sign ignored)
        weight_history: Weigh-ins, any order
        today: Reference day for the projection (default: date.today())

    Returns:
        ProgressRate. Status 'stalled' with a generic message when there are
        fewer than 7 samples or the recent samples span under 3 days.
    """
    today = today or date.today()
    default = ProgressRate(
        actual_rate_per_week=0.0,
        expected_rate_per_week=expected_weekly_rate,
        percent_of_expected=0,
        status="stalled",
        projected_days_to_goal=0,
        projected_date=None,
        message="Not enough data to calculate progress rate.",
    )
    if not weight_history or len(weight_history) < MIN_HISTORY or not expected_weekly_rate:
        return default

    recent = sorted(weight_history, key=lambda w: w.date)[-RECENT_SAMPLES:]
    first, last = recent[0], recent[-1]
    span = (last.date - first.date).days
    if span < MIN_SPAN_DAYS:
        return default

    actual = round((last.weight_kg - first.weight_kg) / span * 7, 2)

    if goal_weight < start_weight:
        progress = abs(actual) / abs(expected_weekly_rate)
    else:
        progress = actual / abs(expected_weekly_rate)
    percent = round(progress * 100)

    if abs(actual) < STALLED_RATE:
        status = "stalled"
    elif percent >= 120:
        status = "ahead"
    elif percent >= 70:
        status = "on_track"
    else:
        status = "behind"

    remaining = abs(goal_weight - current_weight)
    weekly = abs(actual) or abs(expected_weekly_rate)
    days_needed = round(remaining / weekly * 7)
    projected = today + timedelta(days=days_needed)
    when = f"{projected:%b} {projected.day}"

    messages = {
        "ahead": f"Great progress! You're ahead of plan. Projected to hit goal by {when}.",
        "on_track": f"You're on track! At this rate you'll reach your goal by {when}.",
        "behind": (
            "You're behind your target rate. Consider tightening your calorie deficit "
            "or increasing activity."
        ),
        "stalled": "Progress has stalled. Your weight hasn't changed significantly in the last 2 weeks.",
    }

    return ProgressRate(
        actual_rate_per_week=actual,
        expected_rate_per_week=expected_weekly_rate,
        percent_of_expected=percent,
        status=status,
        projected_days_to_goal=days_needed,
        projected_date=projected if days_needed < 365 * 3 else None,
        message=messages[status],
    )


def project_goal_timeline(
    current_weight: float,
    goal_weight: float,
    weekly_rate: float = 0.5,
    today: Optional[date] = None,
) -> Optional[GoalTimeline]:
    """
    Week-by-week projection toward a goal weight at a constant rate.

    Returns:
        GoalTimeline with up to 52 milestones, or None when any input is
        zero/missing or the goal is already reached.
    """
    if not current_weight or not goal_weight or not weekly_rate:
        return None
    total_change = abs(current_weight - goal_weight)
    if total_change == 0:
        return None

    today = today or date.today()
    weeks = math.ceil(total_change / abs(weekly_rate))
    sign = -1 if current_weight > goal_weight else 1

    milestones = [
        Milestone(
            week=week,
            weight=round(current_weight + sign * abs(weekly_rate) * week, 1),
            date=today + timedelta(weeks=week),
            percent_complete=min(100, round(week / weeks * 100)),
        )
        for week in range(1, min(weeks, MAX_MILESTONE_WEEKS) + 1)
    ]

    return GoalTimeline(
        weeks_to_goal=weeks,
        target_date=today + timedelta(weeks=weeks),
        total_change=round(total_change, 1),
        direction="gaining" if sign > 0 else "losing",
        milestones=milestones,
    )
