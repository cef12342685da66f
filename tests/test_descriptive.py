"""Tests for dispersion, correlation and anomaly detection."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from adaptive_tdee.stats.descriptive import (
    coefficient_of_variation,
    mean,
    pearson_correlation,
    standard_deviation,
    z_score_anomalies,
)


class TestDispersion:
    """Tests for mean, standard deviation and CV."""

    def test_empty(self) -> None:
        """Empty inputs give zeros."""
        assert mean([]) == 0.0
        assert standard_deviation([]) == 0.0
        assert coefficient_of_variation([]) == 0.0

    def test_population_std(self) -> None:
        """Standard deviation divides by n."""
        assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_cv(self) -> None:
        """CV = σ / mean."""
        assert coefficient_of_variation([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(0.4)

    def test_cv_zero_mean(self) -> None:
        """A zero mean yields 0 rather than dividing by zero."""
        assert coefficient_of_variation([-1.0, 1.0]) == 0.0


class TestPearsonCorrelation:
    """Tests for pearson_correlation."""

    def test_perfect_positive(self) -> None:
        """Perfectly linear series correlate at 1."""
        result = pearson_correlation([1, 2, 3, 4, 5], [2, 4, 6, 8, 10], "sleep", "energy")
        assert result is not None
        assert result.coefficient == pytest.approx(1.0)
        assert result.strength == "strong"
        assert result.direction == "positive"
        assert "sleep" in result.description
        assert result.sample_size == 5

    def test_perfect_negative(self) -> None:
        """Opposite series correlate at -1."""
        result = pearson_correlation([1, 2, 3, 4, 5], [10, 8, 6, 4, 2])
        assert result is not None
        assert result.coefficient == pytest.approx(-1.0)
        assert result.direction == "negative"

    def test_too_few_points(self) -> None:
        """Fewer than 5 pairs yields None."""
        assert pearson_correlation([1, 2, 3, 4], [1, 2, 3, 4]) is None

    def test_no_variance(self) -> None:
        """A constant series yields None."""
        assert pearson_correlation([1, 1, 1, 1, 1], [1, 2, 3, 4, 5]) is None

    def test_truncates_to_shorter(self) -> None:
        """Series of unequal length are paired up to the shorter one."""
        result = pearson_correlation([1, 2, 3, 4, 5, 6, 7], [1, 2, 3, 4, 5])
        assert result is not None
        assert result.sample_size == 5

    def test_huge_magnitudes(self) -> None:
        """Very large values still correlate perfectly."""
        x = [1, 2, 3, 4, 5, 6]
        result = pearson_correlation(x, [k * 1e200 for k in x])
        assert result is not None
        assert result.coefficient == pytest.approx(1.0)
        assert result.strength == "strong"

    def test_scale_invariant(self) -> None:
        """Rescaling one series leaves the coefficient unchanged."""
        x = [7.0, 6.5, 8.0, 5.5, 7.5, 6.0]
        y = [80.1, 80.4, 79.8, 80.6, 80.0, 80.3]
        base = pearson_correlation(x, y)
        scaled = pearson_correlation(x, [v * 1e-6 for v in y])
        assert base is not None and scaled is not None
        assert scaled.coefficient == pytest.approx(base.coefficient)


class TestZScoreAnomalies:
    """Tests for z_score_anomalies."""

    def test_too_few_values(self) -> None:
        """Fewer than five values returns no anomalies."""
        assert not z_score_anomalies([1.0, 100.0, 1.0, 1.0]).has_anomalies

    def test_constant_series(self) -> None:
        """A constant series has nothing to flag."""
        result = z_score_anomalies([2000.0] * 10)
        assert not result.has_anomalies
        assert result.mean == pytest.approx(2000.0)

    def test_flags_spike_with_date(self) -> None:
        """A single large value is flagged high and carries its date."""
        values = [2000.0, 2050.0, 1950.0, 2000.0, 2025.0, 1975.0, 2000.0, 3500.0]
        dates = [date(2025, 1, 1) + timedelta(days=i) for i in range(len(values))]
        result = z_score_anomalies(values, 2.0, dates)
        assert [a.index for a in result.anomalies] == [7]
        assert result.anomalies[0].type == "high"
        assert result.anomalies[0].date == dates[7]

    def test_symmetric_at_five_sigma(self) -> None:
        """Mirroring the series around its center mirrors the anomalies."""
        base = [100.0 + (1 if i % 2 else -1) for i in range(30)]
        high = base + [100.0 + 5 * 6]
        low = [200.0 - v for v in high]

        up = z_score_anomalies(high, 2.0)
        down = z_score_anomalies(low, 2.0)

        assert [a.index for a in up.anomalies] == [a.index for a in down.anomalies] == [30]
        assert up.anomalies[0].type == "high"
        assert down.anomalies[0].type == "low"
        assert up.anomalies[0].z_score == pytest.approx(-down.anomalies[0].z_score)
        assert abs(up.anomalies[0].z_score) >= 5
