"""Logging streak analysis."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from adaptive_tdee.analytics.models import (
    DAY_NAMES,
    DateLike,
    Streak,
    StreakAnalysis,
    day_name,
    to_date,
)


def analyze_streaks(
    logged_dates: Iterable[DateLike],
    today: Optional[date] = None,
) -> StreakAnalysis:
    """
    Streak statistics and the weekday on which streaks usually break.

    Walks every calendar day from the first logged date through ``today``.
    Each unlogged day counts as a break on its weekday. The current streak
    is non-zero only if the final run of logged days ends on ``today``.
    Dates after ``today`` are ignored.

    Args:
        logged_dates: Days with any logging, as dates or ISO strings
        today: Last day of the walk (default: date.today())

    Returns:
        StreakAnalysis. All zeros for an empty input or when every date is after
        ``today``.
    """
    today = today or date.today()
    days = {d for d in map(to_date, logged_dates) if d <= today}
    result = StreakAnalysis()
    if not days:
        return result

    day = min(days)

    run_start: Optional[date] = None
    run_length = 0
    while day <= today:
        if day in days:
            if run_length == 0:
                run_start = day
            run_length += 1
        else:
            if run_length > 0:
                result.streaks.append(Streak(start=run_start, length=run_length))  # type: ignore[arg-type]
                run_length = 0
            result.streak_break_days[day_name(day)] += 1
        day += timedelta(days=1)

    if run_length > 0:
        result.streaks.append(Streak(start=run_start, length=run_length))  # type: ignore[arg-type]
        if today in days:
            result.current_streak = run_length

    lengths = [s.length for s in result.streaks]
    result.total_streaks = len(lengths)
    result.longest_streak = max(lengths, default=0)
    if lengths:
        result.average_streak_length = round(sum(lengths) / len(lengths), 1)

    # First maximum in Sun..Sat order wins ties
    max_breaks = 0
    for name in DAY_NAMES:
        if result.streak_break_days[name] > max_breaks:
            max_breaks = result.streak_break_days[name]
            result.most_likely_break_day = name

    return result
