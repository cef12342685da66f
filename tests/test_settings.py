"""Tests for YAML-backed settings."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from adaptive_tdee.config.settings import (
    ConfigError,
    EngineError,
    EstimatorConfig,
    Settings,
)


class TestSettings:
    """Tests for Settings.load and Settings.save."""

    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        """A missing file gives the built-in defaults."""
        settings = Settings.load(tmp_path / "nope.yaml")
        assert settings == Settings()
        assert settings.estimator.kcal_per_kg == 7700
        assert settings.estimator.weight_ewma_alpha == 0.15
        assert settings.insights.max_insights == 10

    def test_partial_override(self, tmp_path: Path) -> None:
        """Keys in the file override defaults, others keep them."""
        path = tmp_path / "config.yaml"
        path.write_text("estimator:\n  regression_window: 21\ninsights:\n  max_insights: 5\n")
        settings = Settings.load(path)
        assert settings.estimator.regression_window == 21
        assert settings.estimator.min_data_points == 7
        assert settings.insights.max_insights == 5
        assert settings.analytics.plateau_window_days == 14

    def test_numeric_coercion(self, tmp_path: Path) -> None:
        """Integers given for float settings are stored as floats."""
        path = tmp_path / "config.yaml"
        path.write_text("estimator:\n  kcal_per_kg: 7000\n")
        value = Settings.load(path).estimator.kcal_per_kg
        assert value == 7000.0
        assert isinstance(value, float)

    def test_round_trip(self, tmp_path: Path) -> None:
        """save() writes YAML that load() reads back unchanged."""
        path = tmp_path / "sub" / "config.yaml"
        original = Settings(estimator=EstimatorConfig(min_tdee=1000.0))
        original.save(path)
        assert Settings.load(path) == original
        assert yaml.safe_load(path.read_text())["estimator"]["min_tdee"] == 1000.0

    def test_profile_section(self, tmp_path: Path) -> None:
        """Biometric defaults can be set in the profile section."""
        path = tmp_path / "config.yaml"
        path.write_text("profile:\n  height_cm: 165\n  gender: female\n")
        profile = Settings.load(path).profile
        assert profile.height_cm == 165.0
        assert profile.gender == "female"
        assert profile.activity_level == "moderate"

    @pytest.mark.parametrize(
        "content",
        [
            "estimator: [1, 2]\n",
            "nonsense:\n  a: 1\n",
            "estimator:\n  unknown_key: 1\n",
            "estimator:\n  regression_window: lots\n",
            "- just\n- a list\n",
            "estimator: {regression_window: [\n",
        ],
    )
    def test_invalid_files(self, tmp_path: Path, content: str) -> None:
        """Malformed files raise ConfigError."""
        path = tmp_path / "config.yaml"
        path.write_text(content)
        with pytest.raises(ConfigError):
            Settings.load(path)

    def test_config_error_hierarchy(self) -> None:
        """ConfigError is an EngineError."""
        assert issubclass(ConfigError, EngineError)

    def test_frozen(self) -> None:
        """Config sections cannot be mutated in place."""
        config = EstimatorConfig()
        with pytest.raises(AttributeError):
            config.kcal_per_kg = 1.0  # type: ignore[misc]
