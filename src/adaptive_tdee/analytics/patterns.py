"""Day-of-week intake patterns."""

from __future__ import annotations

from typing import Sequence

from adaptive_tdee.analytics.models import (
    DAY_NAMES,
    WEEKDAY_NAMES,
    WEEKEND_NAMES,
    DailyLog,
    DayAverage,
    DayPatternAnalysis,
    WeekendComparison,
    day_name,
)


def analyze_day_patterns(daily_logs: Sequence[DailyLog]) -> DayPatternAnalysis:
    """
    Average calories and protein per weekday.

    The lowest-calorie day is reported as the best day and the highest as
    the worst, which is the right framing for a fat-loss goal. Days with no
    calories logged are ignored.

    Args:
        daily_logs: Daily nutrition logs

    Returns:
        DayPatternAnalysis. Best/worst are None when nothing was tracked.
    """
    totals = {name: [0.0, 0.0, 0] for name in DAY_NAMES}  # calories, protein, count
    for log in daily_logs:
        if log.calories <= 0:
            continue
        bucket = totals[day_name(log.date)]
        bucket[0] += log.calories
        bucket[1] += log.protein or 0
        bucket[2] += 1

    averages: dict[str, DayAverage] = {}
    best_day = worst_day = None
    min_avg = float("inf")
    max_avg = float("-inf")

    for name in DAY_NAMES:
        cal_total, pro_total, count = totals[name]
        avg = round(cal_total / count) if count else 0
        averages[name] = DayAverage(
            avg_calories=avg,
            avg_protein=round(pro_total / count) if count else 0,
            count=int(count),
        )
        if count:
            if avg < min_avg:
                min_avg, best_day = avg, name
            if avg > max_avg:
                max_avg, worst_day = avg, name

    weekday_cal = sum(totals[n][0] for n in WEEKDAY_NAMES)
    weekday_count = sum(totals[n][2] for n in WEEKDAY_NAMES)
    weekend_cal = sum(totals[n][0] for n in WEEKEND_NAMES)
    weekend_count = sum(totals[n][2] for n in WEEKEND_NAMES)
    weekday_avg = round(weekday_cal / weekday_count) if weekday_count else 0
    weekend_avg = round(weekend_cal / weekend_count) if weekend_count else 0

    return DayPatternAnalysis(
        best_day=best_day,
        worst_day=worst_day,
        best_day_avg_calories=int(min_avg) if best_day else 0,
        worst_day_avg_calories=int(max_avg) if worst_day else 0,
        day_of_week_averages=averages,
        weekend_vs_weekday=WeekendComparison(
            weekday_avg=weekday_avg,
            weekend_avg=weekend_avg,
            difference=weekend_avg - weekday_avg,
        ),
    )
