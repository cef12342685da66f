"""Tests for EWMA smoothing with missing day handling."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from adaptive_tdee.stats.smoothing import (
    DEFAULT_WEIGHT_ALPHA,
    ewma,
    ewma_bands,
    ewma_dated,
    time_scaled_alpha,
    weighted_moving_average,
)


class TestEwma:
    """Tests for the plain EWMA recurrence."""

    def test_empty(self) -> None:
        """Empty input gives empty output."""
        assert ewma([]) == []

    def test_first_value_unchanged(self) -> None:
        """The first smoothed value is the first raw value."""
        assert ewma([80.0, 81.0, 79.0])[0] == pytest.approx(80.0)

    def test_known_values(self) -> None:
        """Matches the recurrence by hand for alpha=0.5."""
        assert ewma([80.0, 81.0, 80.0], 0.5) == pytest.approx([80.0, 80.5, 80.25])

    def test_alpha_one_is_identity(self) -> None:
        """Alpha=1 returns the input."""
        values = [80.0, 82.0, 79.5, 81.0]
        assert ewma(values, 1.0) == pytest.approx(values)

    def test_stays_within_input_range(self) -> None:
        """Each smoothed value lies between the min and max of the inputs seen so far."""
        values = [80.0, 83.5, 78.2, 81.1, 79.9, 84.0, 77.5, 80.3]
        for alpha in (0.05, DEFAULT_WEIGHT_ALPHA, 0.5, 0.9):
            for i, s in enumerate(ewma(values, alpha)):
                seen = values[: i + 1]
                assert min(seen) <= s <= max(seen)

    def test_lags_behind_a_trend(self) -> None:
        """On a falling series the smoothed value stays above the latest raw value."""
        values = [80.0 - 0.1 * i for i in range(20)]
        assert ewma(values)[-1] > values[-1]

    @pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
    def test_invalid_alpha_raises(self, alpha: float) -> None:
        """Alpha outside (0, 1] is rejected."""
        with pytest.raises(ValueError):
            ewma([1.0, 2.0], alpha)


class TestTimeScaledAlpha:
    """Tests for time_scaled_alpha function."""

    def test_daily_unchanged(self) -> None:
        """Alpha should be unchanged for daily measurements."""
        assert time_scaled_alpha(0.1, 1) == pytest.approx(0.1)

    def test_three_day_gap(self) -> None:
        """After 3 days, alpha should be 1 - 0.9^3 ≈ 0.271."""
        assert time_scaled_alpha(0.1, 3) == pytest.approx(1 - 0.9**3)

    def test_zero_days_treated_as_one(self) -> None:
        """Zero or negative days should be treated as 1."""
        assert time_scaled_alpha(0.15, 0) == pytest.approx(0.15)
        assert time_scaled_alpha(0.15, -2) == pytest.approx(0.15)

    def test_large_gap_approaches_one(self) -> None:
        """Very large gaps should result in alpha near 1."""
        assert time_scaled_alpha(0.15, 30) > 0.99


class TestEwmaDated:
    """Tests for gap-aware smoothing."""

    def test_daily_matches_plain_ewma(self) -> None:
        """Consecutive days give the same result as the plain recurrence."""
        start = date(2025, 1, 1)
        values = [80.0, 80.4, 79.8, 80.1, 79.6]
        samples = [(start + timedelta(days=i), v) for i, v in enumerate(values)]
        assert ewma_dated(samples) == pytest.approx(ewma(values))

    def test_gap_moves_trend_further(self) -> None:
        """A weigh-in after a week away pulls the trend harder than one a day later."""
        start = date(2025, 1, 1)
        next_day = ewma_dated([(start, 80.0), (start + timedelta(days=1), 78.0)])
        next_week = ewma_dated([(start, 80.0), (start + timedelta(days=7), 78.0)])
        assert next_week[-1] < next_day[-1]

    def test_empty(self) -> None:
        """Empty input gives empty output."""
        assert ewma_dated([]) == []


class TestBandsAndWma:
    """Tests for chart helpers."""

    def test_bands_bracket_smoothed(self) -> None:
        """Upper >= smoothed >= lower everywhere."""
        values = [80.0, 80.6, 79.7, 80.9, 79.5, 80.2, 80.8, 79.9]
        smoothed, upper, lower = ewma_bands(values)
        assert len(smoothed) == len(upper) == len(lower) == len(values)
        for s, u, lo in zip(smoothed, upper, lower):
            assert lo <= s <= u

    def test_constant_series_has_zero_band(self) -> None:
        """No volatility means the band collapses onto the average."""
        smoothed, upper, lower = ewma_bands([70.0] * 10)
        assert upper == lower == smoothed == [70.0] * 10

    def test_wma_weights_recent_values(self) -> None:
        """Linear weights: (1×1 + 2×4) / 3 = 3.0."""
        assert weighted_moving_average([1.0, 4.0], window=7) == pytest.approx([1.0, 3.0])
