"""Tests for day-of-week intake patterns."""

from __future__ import annotations

from datetime import date, timedelta

from adaptive_tdee.analytics.models import DailyLog, day_name
from adaptive_tdee.analytics.patterns import analyze_day_patterns


def two_weeks_heavy_weekends() -> list[DailyLog]:
    """Sun 2025-02-16 .. Sat 2025-03-01: 1800 kcal weekdays, 2400 Sun, 2600 Sat."""
    start = date(2025, 2, 16)
    calories = {"Sun": 2400, "Sat": 2600}
    logs = []
    for i in range(14):
        d = start + timedelta(days=i)
        logs.append(DailyLog(date=d, calories=calories.get(day_name(d), 1800), protein=140))
    return logs


class TestDayName:
    """Tests for the Sunday-first day labels."""

    def test_labels(self) -> None:
        assert day_name(date(2025, 3, 1)) == "Sat"
        assert day_name(date(2025, 3, 2)) == "Sun"
        assert day_name(date(2025, 3, 3)) == "Mon"


class TestAnalyzeDayPatterns:
    """Tests for analyze_day_patterns."""

    def test_weekend_difference(self) -> None:
        """Weekend average minus weekday average."""
        result = analyze_day_patterns(two_weeks_heavy_weekends())
        comparison = result.weekend_vs_weekday
        assert comparison.weekday_avg == 1800
        assert comparison.weekend_avg == 2500
        assert comparison.difference == 700

    def test_best_and_worst(self) -> None:
        """Lowest average is best (first in week order on ties), highest is worst."""
        result = analyze_day_patterns(two_weeks_heavy_weekends())
        assert result.best_day == "Mon"
        assert result.best_day_avg_calories == 1800
        assert result.worst_day == "Sat"
        assert result.worst_day_avg_calories == 2600

    def test_per_day_counts(self) -> None:
        """Each weekday appears twice in two weeks."""
        result = analyze_day_patterns(two_weeks_heavy_weekends())
        assert set(result.day_of_week_averages) == {"Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"}
        assert all(avg.count == 2 for avg in result.day_of_week_averages.values())
        assert result.day_of_week_averages["Sun"].avg_protein == 140

    def test_untracked_days_ignored(self) -> None:
        """Zero-calorie days do not count."""
        logs = two_weeks_heavy_weekends() + [DailyLog(date=date(2025, 3, 2), calories=0)]
        result = analyze_day_patterns(logs)
        assert result.day_of_week_averages["Sun"].count == 2

    def test_empty(self) -> None:
        """No tracked days: no best/worst, zero averages."""
        result = analyze_day_patterns([])
        assert result.best_day is None
        assert result.worst_day is None
        assert result.weekend_vs_weekday.difference == 0
