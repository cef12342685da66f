"""Tests for the formula-based prior."""

from __future__ import annotations

import pytest

from adaptive_tdee.profiles.body_calc import (
    ActivityLevel,
    Gender,
    activity_multiplier,
    body_fat_category,
    calculate_bmr,
    calculate_tdee,
    estimate_body_fat,
    estimate_composition,
    goal_adjustment,
    inches_to_cm,
    lbs_to_kg,
    recommended_intake,
)


class TestBmr:
    """Tests for Mifflin-St Jeor BMR."""

    def test_male(self) -> None:
        """10×80 + 6.25×180 - 5×30 + 5 = 1780."""
        assert calculate_bmr(80, 180, 30, Gender.MALE) == pytest.approx(1780)

    def test_female(self) -> None:
        """10×60 + 6.25×165 - 5×40 - 161 = 1270.25."""
        assert calculate_bmr(60, 165, 40, "female") == pytest.approx(1270.25)

    def test_unknown_gender_raises(self) -> None:
        """Only male and female are accepted."""
        with pytest.raises(ValueError):
            calculate_bmr(70, 170, 30, "other")


class TestActivity:
    """Tests for activity multipliers."""

    @pytest.mark.parametrize(
        "level,expected",
        [
            (ActivityLevel.SEDENTARY, 1.2),
            ("light", 1.375),
            ("moderate", 1.55),
            ("active", 1.725),
            ("extreme", 1.9),
        ],
    )
    def test_known_levels(self, level, expected: float) -> None:
        """Each level maps to its Harris-Benedict factor."""
        assert activity_multiplier(level) == pytest.approx(expected)

    def test_unknown_level_falls_back_to_moderate(self) -> None:
        """Unrecognized levels use the moderate factor instead of raising."""
        assert activity_multiplier("couch") == pytest.approx(1.55)

    def test_tdee(self) -> None:
        """TDEE = BMR × factor."""
        assert calculate_tdee(1780, "sedentary") == pytest.approx(2136)


class TestGoals:
    """Tests for weekly goal adjustments and the intake floor."""

    def test_adjustments(self) -> None:
        """Known goals map to their daily deltas, unknown to 0."""
        assert goal_adjustment("lose2") == -1000
        assert goal_adjustment("lose05") == -250
        assert goal_adjustment("gain1") == 500
        assert goal_adjustment("shred") == 0

    def test_recommended_intake(self) -> None:
        """TDEE plus adjustment, rounded."""
        assert recommended_intake(2500, "lose1") == 2000

    def test_floor(self) -> None:
        """Never recommend less than 1200 kcal."""
        assert recommended_intake(1800, "lose2") == 1200
        assert recommended_intake(1800, "lose2", floor=1500) == 1500


class TestUnits:
    """Tests for unit conversions."""

    def test_lbs_to_kg(self) -> None:
        assert lbs_to_kg(100) == pytest.approx(45.3592)

    def test_inches_to_cm(self) -> None:
        assert inches_to_cm(70) == pytest.approx(177.8)


class TestBodyFat:
    """Tests for Navy-method body fat and composition."""

    @pytest.mark.parametrize("waist,neck,height", [(0, 15, 70), (34, 0, 70), (34, 15, 0)])
    def test_missing_measurement(self, waist: float, neck: float, height: float) -> None:
        assert estimate_body_fat("male", waist, neck, height) is None

    def test_male(self) -> None:
        """34 in waist, 15 in neck, 70 in tall is about 17.5%."""
        assert estimate_body_fat(Gender.MALE, 34, 15, 70) == pytest.approx(17.5)

    def test_female_needs_hip(self) -> None:
        """Women need a hip measurement."""
        assert estimate_body_fat("female", 30, 13, 65) is None
        assert estimate_body_fat("female", 30, 13, 65, 38) == pytest.approx(28.6)

    def test_clamped(self) -> None:
        """Results stay within 3-60%."""
        assert estimate_body_fat("male", 28, 16, 75) == 3.0
        assert estimate_body_fat("male", 80, 10, 60) == 60.0

    def test_neck_larger_than_waist(self) -> None:
        assert estimate_body_fat("male", 14, 16, 70) is None

    def test_composition(self) -> None:
        """200 at 20% is 40 fat and 160 lean."""
        result = estimate_composition(200, 20)
        assert result is not None
        assert result.fat_mass == 40
        assert result.lean_mass == 160
        assert result.fat_percent + result.lean_percent == pytest.approx(100)

    def test_composition_missing(self) -> None:
        assert estimate_composition(0, 20) is None
        assert estimate_composition(180, 0) is None

    @pytest.mark.parametrize(
        "percent,gender,label",
        [
            (5, "male", "Essential Fat"),
            (17.5, "male", "Average"),
            (30, "male", "Above Average"),
            (20, "female", "Athletes"),
            (28.6, "female", "Average"),
        ],
    )
    def test_category(self, percent: float, gender: str, label: str) -> None:
        assert body_fat_category(percent, gender) == label

    def test_category_missing(self) -> None:
        assert body_fat_category(0, "male") is None
