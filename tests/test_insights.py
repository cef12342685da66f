"""Tests for the insight generator."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta

import pytest
from conftest import REFERENCE_DAY, make_weights

from adaptive_tdee.analytics.models import DailyLog, SleepSample, WorkoutSample
from adaptive_tdee.insights import generator
from adaptive_tdee.insights.generator import (
    FALLBACK_FOCUS,
    generate_insights,
    next_week_focus,
    weekend_and_day_pattern_rule,
)
from adaptive_tdee.insights.models import Insight, InsightInput, InsightType
from test_patterns import two_weeks_heavy_weekends
from test_streaks import eight_weeks_missing_recent_sundays


def ids(insights: list[Insight]) -> list[str]:
    return [i.id for i in insights]


def days_ending_today(n: int):
    return [REFERENCE_DAY - timedelta(days=n - 1 - i) for i in range(n)]


class TestGenerateInsights:
    """Tests for ordering, truncation and rule isolation."""

    def test_too_few_logs(self, consistent_logs: list[DailyLog]) -> None:
        """Fewer than three daily logs yields nothing."""
        assert generate_insights(InsightInput(daily_logs=consistent_logs[:2])) == []

    def test_sorted_by_priority(self) -> None:
        """Heavy weekends: weekend warning first, ties keep rule order."""
        result = generate_insights(InsightInput(daily_logs=two_weeks_heavy_weekends()))
        assert ids(result) == ["weekend_calories", "day_pattern", "macro_consistent"]
        assert [i.priority for i in result] == [9, 5, 5]

    def test_weekend_insight_content(self) -> None:
        """A 700 kcal weekend surplus is reported with its weekly impact."""
        weekend = generate_insights(InsightInput(daily_logs=two_weeks_heavy_weekends()))[0]
        assert weekend.type == InsightType.WARNING
        assert weekend.title == "You eat 700 more calories on weekends"
        assert "1,400 cal/week" in weekend.description
        assert weekend.metric == "+700 cal"

    def test_truncated(self) -> None:
        """max_insights limits the output to the top entries."""
        result = generate_insights(InsightInput(daily_logs=two_weeks_heavy_weekends()), max_insights=1)
        assert ids(result) == ["weekend_calories"]

    def test_failing_rule_is_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        """A rule that raises is logged and skipped, the rest still run."""

        def broken(data: InsightInput) -> list[Insight]:
            raise RuntimeError("boom")

        caplog.set_level(logging.DEBUG, logger="adaptive_tdee.insights.generator")
        result = generate_insights(
            InsightInput(daily_logs=two_weeks_heavy_weekends()),
            rules=[broken, weekend_and_day_pattern_rule],
        )
        assert ids(result) == ["weekend_calories", "day_pattern"]
        assert "broken failed" in caplog.text

    def test_failing_analysis_is_isolated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An analysis that raises only silences the rules that use it."""

        def explode(*args, **kwargs):
            raise ZeroDivisionError

        monkeypatch.setattr(generator, "analyze_day_patterns", explode)
        result = generate_insights(InsightInput(daily_logs=two_weeks_heavy_weekends()))
        assert ids(result) == ["macro_consistent"]


class TestRules:
    """Trigger conditions of individual rules."""

    def test_protein_drop(self, consistent_logs: list[DailyLog]) -> None:
        """Mondays at 60 g against ~137 g elsewhere are flagged."""
        logs = [
            replace(d, protein=60) if d.date.weekday() == 0 else d for d in consistent_logs
        ]
        result = generate_insights(InsightInput(daily_logs=logs))
        drop = [i for i in result if i.id.startswith("protein_drop_")]
        assert ids(drop) == ["protein_drop_Mon"]
        assert drop[0].priority == 7
        assert drop[0].title == "Protein drops 56% on Mons"

    def test_streak_break_pattern(self, consistent_logs: list[DailyLog]) -> None:
        """Five missed Sundays produce a Sunday reminder."""
        data = InsightInput(
            daily_logs=consistent_logs,
            logged_dates=eight_weeks_missing_recent_sundays(),
            today=REFERENCE_DAY,
        )
        result = generate_insights(data)
        assert "streak_break_pattern" in ids(result)
        assert "streak_pr" not in ids(result)
        pattern = next(i for i in result if i.id == "streak_break_pattern")
        assert pattern.actionable == "Set an alarm on Suns to log your meals."

    def test_long_streak(self, consistent_logs: list[DailyLog]) -> None:
        """A 20-day unbroken streak is both an achievement and a personal best."""
        data = InsightInput(
            daily_logs=consistent_logs,
            logged_dates=days_ending_today(20),
            today=REFERENCE_DAY,
        )
        result = generate_insights(data)
        assert ids(result) == ["streak_pr", "streak_achievement", "macro_consistent", "adherence_high"]
        assert result[1].title == "20-day logging streak!"

    def test_adherence_high(self, consistent_logs: list[DailyLog]) -> None:
        """A perfect week is graded A+."""
        result = generate_insights(InsightInput(daily_logs=consistent_logs))
        adherence = next(i for i in result if i.id == "adherence_high")
        assert adherence.title == "A+ week: 100% adherence"
        assert adherence.type == InsightType.ACHIEVEMENT

    def test_plateau(self, consistent_logs: list[DailyLog]) -> None:
        """Three flat weeks of weigh-ins are reported with their duration."""
        start = REFERENCE_DAY - timedelta(days=20)
        weights = make_weights(start, [80.0 if i % 2 else 80.1 for i in range(21)])
        result = generate_insights(InsightInput(daily_logs=consistent_logs, weight_history=weights))
        plateau = next(i for i in result if i.id == "plateau")
        assert plateau.title == "Weight plateau for 21 days"
        assert plateau.priority == 9
        assert result[0].id == "plateau"

    def test_weight_progress(self, consistent_logs: list[DailyLog]) -> None:
        """Losing on plan for 30 days reports the 30-day change."""
        start = REFERENCE_DAY - timedelta(days=29)
        weights = make_weights(start, [90.0 - 0.5 / 7 * i for i in range(30)])
        data = InsightInput(
            daily_logs=consistent_logs,
            weight_history=weights,
            current_weight=weights[-1].weight_kg,
            goal_weight=80.0,
            start_weight=90.0,
            expected_weekly_rate=0.5,
            today=REFERENCE_DAY,
        )
        result = generate_insights(data)
        progress = next(i for i in result if i.id == "weight_progress")
        assert progress.title == "You've lost 2.1kg in the last 30 days"
        assert progress.trend == "down"

    def test_weight_behind(self, consistent_logs: list[DailyLog]) -> None:
        """Losing far slower than planned is a warning."""
        start = REFERENCE_DAY - timedelta(days=13)
        weights = make_weights(start, [90.0 - 0.1 / 7 * i for i in range(14)])
        data = InsightInput(
            daily_logs=consistent_logs,
            weight_history=weights,
            current_weight=weights[-1].weight_kg,
            goal_weight=80.0,
            start_weight=90.0,
            expected_weekly_rate=0.5,
            today=REFERENCE_DAY,
        )
        assert "weight_behind" in ids(generate_insights(data))

    def test_tdee_adaptation(self) -> None:
        """A cut that stalls after two weeks of steady loss suggests adaptation."""
        start = REFERENCE_DAY - timedelta(days=29)
        weights = make_weights(start, [88.0 - 0.5 * min(i, 15) for i in range(30)])
        logs = [DailyLog(date=start + timedelta(days=i), calories=1800) for i in range(30)]
        result = generate_insights(InsightInput(daily_logs=logs, weight_history=weights))
        adaptation = next(i for i in result if i.id == "tdee_adaptation")
        assert adaptation.title.startswith("Your TDEE may have adapted down by ~")
        assert adaptation.metric.startswith("-")

    def test_sleep_weight_correlation(self, consistent_logs: list[DailyLog]) -> None:
        """Short nights followed by gains correlate strongly."""
        start = REFERENCE_DAY - timedelta(days=10)
        hours = [6.0 if i % 2 == 0 else 8.0 for i in range(10)]
        weights = [80.0]
        for h in hours:
            weights.append(weights[-1] - (h - 7) * 0.2)
        data = InsightInput(
            daily_logs=consistent_logs,
            weight_history=make_weights(start, weights),
            sleep_data=[SleepSample(start + timedelta(days=i + 1), h) for i, h in enumerate(hours)],
        )
        result = generate_insights(data)
        sleep = next(i for i in result if i.id == "sleep_weight_correlation")
        assert sleep.description.startswith("Strong correlation")

    def test_sleep_workout(self, consistent_logs: list[DailyLog]) -> None:
        """Better sleep quality on workout days is reported."""
        days = days_ending_today(14)
        workouts = [WorkoutSample(d, 45) for d in days[::2]]
        sleep = [SleepSample(d, 7.5, 90 if i % 2 == 0 else 70) for i, d in enumerate(days)]
        data = InsightInput(daily_logs=consistent_logs, sleep_data=sleep, workout_data=workouts)
        result = generate_insights(data)
        insight = next(i for i in result if i.id == "sleep_workout")
        assert insight.title == "Sleep quality improves by 29% on workout days"

    def test_calorie_spike(self, consistent_logs: list[DailyLog]) -> None:
        """One 3500 kcal day among 2000 kcal days is a spike."""
        logs = consistent_logs[:-1] + [replace(consistent_logs[-1], calories=3500)]
        result = generate_insights(InsightInput(daily_logs=logs))
        spike = next(i for i in result if i.id == "calorie_spike")
        assert spike.title == "Calorie spike detected: 3500 cal"
        assert spike.priority == 4
        assert result[-1].id == "calorie_spike"


class TestNextWeekFocus:
    """Tests for next_week_focus."""

    def make(self, priority: int, actionable: str = None) -> Insight:
        return Insight(
            id=f"i{priority}",
            type=InsightType.INFO,
            title="t",
            description="d",
            priority=priority,
            actionable=actionable,
        )

    def test_top_two_actionables(self) -> None:
        """Only priority >= 7 insights with advice count, at most two."""
        insights = [
            self.make(9, "first"),
            self.make(8),
            self.make(8, "second"),
            self.make(7, "third"),
            self.make(6, "low"),
        ]
        assert next_week_focus(insights) == ["first", "second"]

    def test_fallback(self) -> None:
        """Without high-priority advice the routine message is returned."""
        assert next_week_focus([self.make(5, "low")]) == [FALLBACK_FOCUS]
        assert next_week_focus([]) == ["Keep up your current routine -- consistency is key."]
